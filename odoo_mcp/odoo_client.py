"""
Odoo JSON-RPC client with lazy authentication.

One client holds at most one session (uid). A new configuration always
means a new client, so sessions never leak between requests or tenants.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Any

import httpx

from odoo_mcp.config import DEFAULT_TIMEOUT_MS
from odoo_mcp.exceptions import (
    OdooAuthenticationError,
    OdooError,
    OdooRemoteError,
    OdooTransportError,
)
from odoo_mcp.observability import trace_span

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OdooConfig:
    """Connection settings for one Odoo database."""

    base_url: str
    db: str
    username: str
    password: str
    timeout_ms: int = DEFAULT_TIMEOUT_MS

    @property
    def is_complete(self) -> bool:
        return all((self.base_url, self.db, self.username, self.password))

    @property
    def endpoint(self) -> str:
        return f"{self.base_url.rstrip('/')}/jsonrpc"


class OdooClient:
    """
    Generic ``execute_kw`` caller for an Odoo server.

    The client does not touch the network until the first call. That call
    logs in through ``common.login`` and caches the returned uid for the
    lifetime of the instance. Nothing is retried: a failed login leaves the
    uid unset and the next call simply tries again.
    """

    def __init__(self, config: OdooConfig, transport: httpx.AsyncBaseTransport | None = None):
        """
        Initialize the client.

        Args:
            config: Odoo connection settings
            transport: Optional httpx transport, mainly for tests
        """
        self.config = config
        self.uid: int | None = None
        self._transport = transport

    async def _json_rpc(self, service: str, method: str, args: list[Any]) -> Any:
        """Send one JSON-RPC envelope and return its ``result``."""
        payload = {
            "jsonrpc": "2.0",
            "id": str(uuid.uuid4()),
            "method": "call",
            "params": {"service": service, "method": method, "args": args},
        }

        with trace_span("odoo_rpc", service=service, method=method):
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=self.config.timeout_ms / 1000,
            ) as http:
                response = await http.post(
                    self.config.endpoint,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )

        if not response.is_success:
            raise OdooTransportError(response.status_code, response.reason_phrase)

        data = response.json()
        error = data.get("error")
        if error is not None:
            message = (error.get("data") or {}).get("message") or error.get("message")
            raise OdooRemoteError(message or "Odoo RPC error", payload=error)

        return data.get("result")

    async def _login(self) -> None:
        """Authenticate once and cache the uid."""
        if self.uid is not None:
            return

        if not self.config.is_complete:
            raise OdooAuthenticationError(
                "Odoo configuration is incomplete: url, db, user and password are required"
            )

        try:
            uid = await self._json_rpc(
                "common",
                "login",
                [self.config.db, self.config.username, self.config.password],
            )
        except OdooError as e:
            logger.error(f"Odoo login failed for {self.config.username}@{self.config.db}: {e}")
            raise OdooAuthenticationError(f"Odoo login failed: {e}") from e

        if not uid:
            logger.warning(f"Odoo rejected credentials for {self.config.username}@{self.config.db}")
            raise OdooAuthenticationError("Odoo login returned no uid; check credentials")

        self.uid = uid
        logger.info(f"Authenticated against {self.config.base_url} db={self.config.db} uid={uid}")

    async def call(
        self,
        model: str,
        method: str,
        args: list[Any] | None = None,
        kwargs: dict[str, Any] | None = None,
    ) -> Any:
        """
        Run ``model.method(*args, **kwargs)`` on the server.

        Args:
            model: Odoo model name, e.g. "res.partner"
            method: Model method, e.g. "search_read"
            args: Positional arguments
            kwargs: Keyword arguments

        Returns:
            The ``result`` field of the RPC response

        Raises:
            OdooAuthenticationError: If logging in fails
            OdooTransportError: On a non-2xx HTTP status
            OdooRemoteError: If Odoo returns an error payload
        """
        await self._login()
        return await self._json_rpc(
            "object",
            "execute_kw",
            [
                self.config.db,
                self.uid,
                self.config.password,
                model,
                method,
                args if args is not None else [],
                kwargs if kwargs is not None else {},
            ],
        )

    execute_kw = call
