"""
Per-request configuration.

Each inbound request is turned into one immutable ``RequestConfig``.
Odoo credentials come either entirely from the request headers or entirely
from the process settings, never a mix of both.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from odoo_mcp.config import DEFAULT_TIMEOUT_MS, Settings
from odoo_mcp.odoo_client import OdooConfig

logger = logging.getLogger(__name__)

HEADER_ODOO_URL = "odoo-url"
HEADER_ODOO_DB = "odoo-db"
HEADER_ODOO_USER = "odoo-user"
HEADER_ODOO_PASS = "odoo-pass"
HEADER_ODOO_TIMEOUT = "odoo-timeout"
HEADER_ALGOLIA_API_KEY = "algolia-api-key"
HEADER_ALGOLIA_APP_ID = "algolia-app-id"
HEADER_ALGOLIA_INDEX_NAME = "algolia-index-name"
HEADER_LABUREN_API_KEY = "laburen-api-key"
HEADER_TO_USE = "to-use"

MANDATORY_HEADERS = (HEADER_ODOO_URL, HEADER_ODOO_DB, HEADER_ODOO_USER, HEADER_ODOO_PASS)


@dataclass(frozen=True)
class AlgoliaConfig:
    api_key: str = ""
    app_id: str = ""
    index_name: str = ""


@dataclass(frozen=True)
class RequestConfig:
    """Everything a single request needs to talk to Odoo."""

    odoo: OdooConfig
    algolia: AlgoliaConfig = field(default_factory=AlgoliaConfig)
    enabled_tools: frozenset[str] = frozenset()
    laburen_api_key: str = ""
    source: str = "settings"


def parse_tool_allow_list(raw: str | None, source: str) -> frozenset[str]:
    """
    Parse a JSON array of tool names.

    Anything that is not valid JSON, or not a list of strings, yields an
    empty set (all tools enabled) and a warning. Never raises.

    Args:
        raw: Raw header or setting value
        source: Where the value came from, for the log line

    Returns:
        Set of enabled tool names
    """
    if not raw:
        return frozenset()

    try:
        parsed = json.loads(raw)
    except ValueError:
        logger.warning(f"{source} is not valid JSON; ignoring tool allow-list")
        return frozenset()

    if not isinstance(parsed, list) or not all(isinstance(item, str) for item in parsed):
        logger.warning(f"{source} must be a JSON array of strings; ignoring tool allow-list")
        return frozenset()

    return frozenset(parsed)


def _parse_timeout(*candidates: str | None) -> int:
    """Return the first candidate that is a positive integer, else the default."""
    for candidate in candidates:
        if not candidate:
            continue
        try:
            timeout = int(candidate)
        except ValueError:
            logger.warning(f"Ignoring non-integer Odoo timeout {candidate!r}")
            continue
        if timeout <= 0:
            logger.warning(f"Ignoring non-positive Odoo timeout {candidate!r}")
            continue
        return timeout
    return DEFAULT_TIMEOUT_MS


def _first(*candidates: str | None) -> str:
    return next((c for c in candidates if c), "")


def resolve_request_config(headers: Mapping[str, str], settings: Settings) -> RequestConfig:
    """
    Build the configuration bundle for one request.

    Args:
        headers: Request headers (any case)
        settings: Process-wide fallback settings

    Returns:
        A fresh RequestConfig
    """
    headers = {key.lower(): value for key, value in headers.items()}

    timeout_ms = _parse_timeout(headers.get(HEADER_ODOO_TIMEOUT), settings.odoo_timeout)
    algolia = AlgoliaConfig(
        api_key=_first(headers.get(HEADER_ALGOLIA_API_KEY), settings.algolia_api_key),
        app_id=_first(headers.get(HEADER_ALGOLIA_APP_ID), settings.algolia_app_id),
        index_name=_first(headers.get(HEADER_ALGOLIA_INDEX_NAME), settings.algolia_index_name),
    )
    laburen_api_key = _first(headers.get(HEADER_LABUREN_API_KEY), settings.laburen_api_key)

    if all(headers.get(name) for name in MANDATORY_HEADERS):
        odoo = OdooConfig(
            base_url=headers[HEADER_ODOO_URL],
            db=headers[HEADER_ODOO_DB],
            username=headers[HEADER_ODOO_USER],
            password=headers[HEADER_ODOO_PASS],
            timeout_ms=timeout_ms,
        )
        enabled_tools = parse_tool_allow_list(headers.get(HEADER_TO_USE), "Header 'to-use'")
        source = "headers"
    else:
        logger.info("Odoo headers missing or incomplete; using process settings")
        odoo = OdooConfig(
            base_url=settings.odoo_url,
            db=settings.odoo_db,
            username=settings.odoo_user,
            password=settings.odoo_pass,
            timeout_ms=timeout_ms,
        )
        enabled_tools = parse_tool_allow_list(settings.to_use, "Setting TO_USE")
        source = "settings"
        if not odoo.is_complete:
            logger.warning("Fallback Odoo settings are incomplete; remote calls will fail")

    if enabled_tools:
        logger.info(f"Tools enabled ({source}): {', '.join(sorted(enabled_tools))}")
    else:
        logger.info(f"All tools enabled ({source})")

    return RequestConfig(
        odoo=odoo,
        algolia=algolia,
        enabled_tools=enabled_tools,
        laburen_api_key=laburen_api_key,
        source=source,
    )
