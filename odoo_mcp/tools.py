"""
Odoo tools - operations the agent can call.

Tools take the request's OdooClient as first argument, return
JSON-serializable dicts and let Odoo errors propagate. Their MCP-facing
names, parameter descriptions and docstrings live in ``server.py``,
which wraps each of them and turns errors into failure payloads.
"""

import logging
from typing import Any

from pydantic import BaseModel, Field

from odoo_mcp.observability import trace_span
from odoo_mcp.odoo_client import OdooClient

logger = logging.getLogger(__name__)

PRODUCT_FIELDS = ["id", "name", "default_code", "list_price", "qty_available"]
PARTNER_FIELDS = ["id", "name", "email", "phone"]


class PartnerNotFoundError(LookupError):
    """No partner matches the given tax ID."""


class ProductNotFoundError(LookupError):
    """No product matches the given reference code."""


class SaleOrderLine(BaseModel):
    """One line of a sale order request."""

    reference_code: str = Field(..., description="Product internal reference (default_code)")
    qty: float = Field(default=1, gt=0, description="Quantity to order")


# Helpers


async def find_partner_by_vat(client: OdooClient, vat: str) -> dict[str, Any] | None:
    """Return the first partner whose VAT matches exactly, or None."""
    partners = await client.call(
        "res.partner",
        "search_read",
        [[["vat", "=", vat]]],
        {"fields": PARTNER_FIELDS, "limit": 1},
    )
    return partners[0] if partners else None


async def find_product_by_code(client: OdooClient, reference_code: str) -> dict[str, Any] | None:
    """Return the first product whose internal reference matches exactly, or None."""
    products = await client.call(
        "product.product",
        "search_read",
        [[["default_code", "=", reference_code]]],
        {"fields": PRODUCT_FIELDS, "limit": 1},
    )
    return products[0] if products else None


async def create_basic_sale_order(client: OdooClient, partner_id: int) -> int:
    return await client.call("sale.order", "create", [{"partner_id": partner_id}])


async def create_order_line(client: OdooClient, order_id: int, product_id: int, qty: float) -> int:
    return await client.call(
        "sale.order.line",
        "create",
        [{"order_id": order_id, "product_id": product_id, "product_uom_qty": qty}],
    )


# Tools


async def search_product_by_reference_code(client: OdooClient, reference_code: str) -> dict[str, Any]:
    """Look up one product by exact reference code; not-found is a failure payload."""
    with trace_span("search_product_by_reference_code", reference_code=reference_code):
        logger.info(f"Searching product: reference_code={reference_code}")

        product = await find_product_by_code(client, reference_code)
        if product is None:
            return {
                "success": False,
                "error": "Product not found",
                "reference_code": reference_code,
            }

        return {"success": True, "product": product}


async def create_sale_order(
    client: OdooClient,
    tax_id: str,
    lines: list[SaleOrderLine],
    confirm: bool = False,
) -> dict[str, Any]:
    """
    Create the order, then its lines one by one in the given order.

    If a product is missing halfway through, the order and the lines
    created so far stay in Odoo; nothing is rolled back.

    Raises:
        PartnerNotFoundError: If no partner has this tax ID
        ProductNotFoundError: If a line references an unknown product
    """
    with trace_span("create_sale_order", tax_id=tax_id, lines=len(lines), confirm=confirm):
        logger.info(f"Creating sale order: tax_id={tax_id}, lines={len(lines)}, confirm={confirm}")

        partner = await find_partner_by_vat(client, tax_id)
        if partner is None:
            raise PartnerNotFoundError(f"Partner with tax ID {tax_id} not found")

        order_id = await create_basic_sale_order(client, partner["id"])
        logger.info(f"Created sale.order {order_id} for partner {partner['id']}")

        line_ids = []
        for line in lines:
            product = await find_product_by_code(client, line.reference_code)
            if product is None:
                raise ProductNotFoundError(
                    f"Product {line.reference_code} missing (order {order_id} left as draft)"
                )
            line_ids.append(await create_order_line(client, order_id, product["id"], line.qty))

        if confirm:
            await client.call("sale.order", "action_confirm", [[order_id]])
            logger.info(f"Confirmed sale.order {order_id}")

        return {
            "success": True,
            "order_id": order_id,
            "line_ids": line_ids,
            "confirmed": confirm,
        }
