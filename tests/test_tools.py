"""
Tests for Odoo tools (search_product_by_reference_code, create_sale_order, helpers)
"""

import asyncio

import pytest

from odoo_mcp.tools import (
    PRODUCT_FIELDS,
    PartnerNotFoundError,
    ProductNotFoundError,
    SaleOrderLine,
    create_sale_order,
    find_partner_by_vat,
    search_product_by_reference_code,
)

PRODUCTS = {
    "DESK-001": {"id": 11, "name": "Desk", "default_code": "DESK-001", "list_price": 250.0},
    "CHAIR-002": {"id": 12, "name": "Chair", "default_code": "CHAIR-002", "list_price": 80.0},
}


def product_lookup(args, kwargs):
    """search_read on product.product keyed by default_code."""
    [[(_field, _op, code)]] = args
    return [PRODUCTS[code]] if code in PRODUCTS else []


@pytest.fixture
def shop(backend):
    """Backend with one partner, two products and id counters for creates."""
    line_ids = iter(range(100, 200))

    backend.results.update(
        {
            ("product.product", "search_read"): product_lookup,
            ("res.partner", "search_read"): lambda args, kwargs: (
                [{"id": 5, "name": "Azure Interior"}] if args[0][0][2] == "B123" else []
            ),
            ("sale.order", "create"): 42,
            ("sale.order.line", "create"): lambda args, kwargs: next(line_ids),
            ("sale.order", "action_confirm"): True,
        }
    )
    return backend


class TestSearchProductByReferenceCode:
    def test_found(self, shop, make_client):
        result = asyncio.run(search_product_by_reference_code(make_client(shop), "DESK-001"))

        assert result["success"] is True
        assert result["product"]["id"] == 11
        assert shop.executions == [
            (
                "product.product",
                "search_read",
                [[["default_code", "=", "DESK-001"]]],
                {"fields": PRODUCT_FIELDS, "limit": 1},
            )
        ]

    def test_not_found(self, shop, make_client):
        result = asyncio.run(search_product_by_reference_code(make_client(shop), "NOPE"))

        assert result["success"] is False
        assert result["error"] == "Product not found"


class TestCreateSaleOrder:
    def test_creates_order_and_lines_in_order(self, shop, make_client):
        lines = [
            SaleOrderLine(reference_code="DESK-001", qty=2),
            SaleOrderLine(reference_code="CHAIR-002"),
        ]

        result = asyncio.run(create_sale_order(make_client(shop), "B123", lines))

        assert result == {
            "success": True,
            "order_id": 42,
            "line_ids": [100, 101],
            "confirmed": False,
        }
        calls = [(model, method) for model, method, _, _ in shop.executions]
        assert calls == [
            ("res.partner", "search_read"),
            ("sale.order", "create"),
            ("product.product", "search_read"),
            ("sale.order.line", "create"),
            ("product.product", "search_read"),
            ("sale.order.line", "create"),
        ]
        line_values = [args[0] for model, _, args, _ in shop.executions if model == "sale.order.line"]
        assert line_values == [
            {"order_id": 42, "product_id": 11, "product_uom_qty": 2},
            {"order_id": 42, "product_id": 12, "product_uom_qty": 1},
        ]

    def test_confirm(self, shop, make_client):
        lines = [SaleOrderLine(reference_code="DESK-001")]

        result = asyncio.run(create_sale_order(make_client(shop), "B123", lines, confirm=True))

        assert result["confirmed"] is True
        assert shop.executions[-1] == ("sale.order", "action_confirm", [[42]], {})

    def test_unknown_partner(self, shop, make_client):
        lines = [SaleOrderLine(reference_code="DESK-001")]

        with pytest.raises(PartnerNotFoundError):
            asyncio.run(create_sale_order(make_client(shop), "UNKNOWN", lines))

        assert [m for m, method, _, _ in shop.executions if method == "create"] == []

    def test_missing_product_keeps_created_records(self, shop, make_client):
        """No rollback: the order and earlier lines stay in Odoo."""
        lines = [
            SaleOrderLine(reference_code="DESK-001"),
            SaleOrderLine(reference_code="MISSING"),
            SaleOrderLine(reference_code="CHAIR-002"),
        ]

        with pytest.raises(ProductNotFoundError, match="MISSING"):
            asyncio.run(create_sale_order(make_client(shop), "B123", lines))

        creates = [model for model, method, _, _ in shop.executions if method == "create"]
        assert creates == ["sale.order", "sale.order.line"]

    def test_line_quantity_must_be_positive(self):
        with pytest.raises(ValueError):
            SaleOrderLine(reference_code="DESK-001", qty=0)


class TestHelpers:
    def test_find_partner_by_vat_none(self, shop, make_client):
        assert asyncio.run(find_partner_by_vat(make_client(shop), "NOPE")) is None
