"""
Resolution of ``odoo://`` resource addresses into Odoo calls.

    odoo://models                       -> ir.model search_read
    odoo://model/{model}                -> fields_get
    odoo://record/{model}/{record_id}   -> read, first row or {}
    odoo://search/{model}/{domain}      -> search_read with a JSON domain

The domain travels URL-encoded in the address. FastMCP percent-decodes
template parameters before they reach these handlers, so ``decode_domain``
only parses JSON; decoding again would corrupt values containing ``%``.
"""

import json
import logging
from typing import Any

from odoo_mcp.exceptions import OdooDomainError
from odoo_mcp.odoo_client import OdooClient

logger = logging.getLogger(__name__)

MODELS_URI = "odoo://models"
MODEL_URI = "odoo://model/{model}"
RECORD_URI = "odoo://record/{model}/{record_id}"
SEARCH_URI = "odoo://search/{model}/{domain}"


def decode_domain(raw: str) -> list[Any]:
    """
    Parse a JSON search domain taken from a resource address.

    Raises:
        OdooDomainError: If the value is not a JSON array
    """
    try:
        domain = json.loads(raw)
    except ValueError as e:
        raise OdooDomainError(f"Invalid search domain {raw!r}: {e}") from e

    if not isinstance(domain, list):
        raise OdooDomainError(f"Search domain must be a JSON array, got {type(domain).__name__}")

    return domain


class OdooResources:
    """Read-only views over an Odoo database, backed by one client."""

    def __init__(self, client: OdooClient):
        self.client = client

    async def list_models(self) -> list[dict[str, Any]]:
        return await self.client.call("ir.model", "search_read", [[], ["model", "name"]])

    async def model_schema(self, model: str) -> dict[str, Any]:
        return await self.client.call(model, "fields_get", [[], ["string", "type", "required"]])

    async def record(self, model: str, record_id: int | str) -> dict[str, Any]:
        """Return one record, or an empty dict when the id does not exist."""
        rows = await self.client.call(model, "read", [[int(record_id)]])
        if not rows:
            logger.info(f"No {model} record with id {record_id}")
            return {}
        return rows[0]

    async def search(self, model: str, domain: str) -> list[dict[str, Any]]:
        return await self.client.call(model, "search_read", [decode_domain(domain)])
