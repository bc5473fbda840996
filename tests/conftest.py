"""
Pytest configuration and fixtures.
Shared test utilities and a fake Odoo JSON-RPC backend.
"""

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from odoo_mcp.config import Settings
from odoo_mcp.odoo_client import OdooClient, OdooConfig


class FakeOdooBackend:
    """
    In-memory stand-in for an Odoo ``/jsonrpc`` endpoint.

    ``results`` maps (model, method) to a value, or to a callable
    ``(args, kwargs) -> value``. Every received envelope is kept in
    ``requests`` for assertions.
    """

    def __init__(self, uid: Any = 7, results: dict | None = None):
        self.uid = uid
        self.results: dict[tuple[str, str], Any] = results or {}
        self.requests: list[dict[str, Any]] = []
        self.urls: list[str] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append(body)
        self.urls.append(str(request.url))
        params = body["params"]

        if params["service"] == "common":
            result = self.uid
        else:
            _db, _uid, _password, model, method, args, kwargs = params["args"]
            result = self.results.get((model, method))
            if callable(result):
                result = result(args, kwargs)

        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def logins(self) -> list[dict[str, Any]]:
        return [r for r in self.requests if r["params"]["service"] == "common"]

    @property
    def executions(self) -> list[tuple[str, str, list, dict]]:
        """(model, method, args, kwargs) for every execute_kw call, in order."""
        return [
            tuple(r["params"]["args"][3:7])
            for r in self.requests
            if r["params"]["service"] == "object"
        ]


@pytest.fixture
def odoo_config():
    """Complete Odoo connection settings."""
    return OdooConfig(
        base_url="https://odoo.example.com",
        db="demo",
        username="admin@example.com",
        password="secret",
    )


@pytest.fixture
def backend():
    """Fake Odoo backend with a successful login."""
    return FakeOdooBackend()


@pytest.fixture
def make_client(odoo_config) -> Callable[[FakeOdooBackend], OdooClient]:
    """Build an OdooClient wired to a fake backend."""

    def _make(fake: FakeOdooBackend) -> OdooClient:
        return OdooClient(odoo_config, transport=fake.transport)

    return _make


@pytest.fixture
def test_settings():
    """Process settings for a fallback tenant, isolated from the real environment."""
    return Settings(
        _env_file=None,
        odoo_url="https://fallback.example.com",
        odoo_db="fallback_db",
        odoo_user="fallback@example.com",
        odoo_pass="fallback_pass",
        odoo_timeout="30000",
        algolia_api_key="",
        algolia_app_id="",
        algolia_index_name="",
        laburen_api_key="",
        to_use="",
    )


@pytest.fixture
def odoo_headers():
    """The four mandatory Odoo headers."""
    return {
        "odoo-url": "https://x",
        "odoo-db": "d",
        "odoo-user": "u",
        "odoo-pass": "p",
    }


@pytest.fixture
def make_backend() -> Callable[..., FakeOdooBackend]:
    """Build fake backends with custom uid or results."""
    return FakeOdooBackend
