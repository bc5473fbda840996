"""
FastMCP server factory.

A server is built for every request from that request's RequestConfig:
a fresh OdooClient, only the tools the allow-list admits, and the four
``odoo://`` resource templates. Nothing is shared between two servers.
"""

import logging
from collections.abc import Awaitable
from typing import Annotated, Any

import httpx
from fastmcp import FastMCP

from odoo_mcp import tools
from odoo_mcp.exceptions import OdooError
from odoo_mcp.odoo_client import OdooClient
from odoo_mcp.request_config import RequestConfig
from odoo_mcp.resources import MODEL_URI, MODELS_URI, RECORD_URI, SEARCH_URI, OdooResources
from odoo_mcp.tool_gate import ToolGate

logger = logging.getLogger(__name__)

SERVER_NAME = "Odoo MCP"
SERVER_INSTRUCTIONS = "Expose Odoo models & helpers over MCP"


async def run_tool(name: str, pending: Awaitable[dict[str, Any]]) -> dict[str, Any]:
    """
    Await a tool and convert Odoo failures into a failure payload.

    Covers Odoo errors, HTTP and network errors, lookups that found
    nothing, and unparseable responses or arguments (``ValueError``).
    The MCP host never sees these exceptions; the agent gets a readable
    message naming the operation instead.
    """
    try:
        return await pending
    except (OdooError, httpx.HTTPError, LookupError, ValueError) as e:
        logger.error(f"Tool '{name}' failed: {e}", exc_info=True)
        return {"success": False, "operation": name, "error": str(e) or type(e).__name__}


def build_server(config: RequestConfig, transport: httpx.AsyncBaseTransport | None = None) -> FastMCP:
    """
    Build the MCP server for one request.

    Args:
        config: Resolved configuration for the request
        transport: Optional httpx transport handed to the Odoo client

    Returns:
        A FastMCP server with the admitted tools and all resources
    """
    client = OdooClient(config.odoo, transport=transport)
    resources = OdooResources(client)
    gate = ToolGate.from_config(config)

    mcp = FastMCP(SERVER_NAME, instructions=SERVER_INSTRUCTIONS)

    async def search_product_by_reference_code(
        reference_code: Annotated[str, "Exact product reference code (default_code)"],
    ) -> dict:
        """Search for a product by its exact reference code.

        Returns detailed product information including price and stock.
        """
        return await run_tool(
            "search_product_by_reference_code",
            tools.search_product_by_reference_code(client, reference_code),
        )

    async def create_sale_order(
        tax_id: Annotated[str, "Customer tax ID (VAT)"],
        lines: Annotated[list[tools.SaleOrderLine], "Products and quantities to order"],
        confirm: Annotated[bool, "Confirm the order after creating it"] = False,
    ) -> dict:
        """Create a complete sales order with multiple product lines.

        Identifies the customer by tax ID and can optionally confirm the
        order. Returns the order ID for tracking.
        """
        return await run_tool(
            "create_sale_order",
            tools.create_sale_order(client, tax_id, lines, confirm),
        )

    registered = []
    for handler in (search_product_by_reference_code, create_sale_order):
        if gate.admits(handler.__name__):
            mcp.tool(handler)
            registered.append(handler.__name__)

    logger.info(f"MCP server built ({config.source}) with tools: {', '.join(registered) or 'none'}")

    @mcp.resource(MODELS_URI, name="models", mime_type="application/json")
    async def models() -> list:
        """All models installed in the database."""
        return await resources.list_models()

    @mcp.resource(MODEL_URI, name="model", mime_type="application/json")
    async def model(model: str) -> dict:
        """Field definitions of one model."""
        return await resources.model_schema(model)

    @mcp.resource(RECORD_URI, name="record", mime_type="application/json")
    async def record(model: str, record_id: str) -> dict:
        """One record by id, or {} if it does not exist."""
        return await resources.record(model, record_id)

    @mcp.resource(SEARCH_URI, name="search", mime_type="application/json")
    async def search(model: str, domain: str) -> list:
        """Records matching a JSON domain (URL-encoded in the address)."""
        return await resources.search(model, domain)

    return mcp
