"""
Tool allow-list gate.

Decides at registration time which tools a request's MCP server exposes.
A tool that is not admitted is never registered, so it cannot be called.
"""

import logging

from odoo_mcp.request_config import RequestConfig

logger = logging.getLogger(__name__)


class ToolGate:
    """Admit every tool on an empty allow-list, otherwise only listed ones."""

    def __init__(self, enabled_tools: frozenset[str] = frozenset()):
        self.enabled_tools = frozenset(enabled_tools)

    @classmethod
    def from_config(cls, config: RequestConfig) -> "ToolGate":
        return cls(config.enabled_tools)

    def admits(self, name: str) -> bool:
        if not self.enabled_tools or name in self.enabled_tools:
            return True

        logger.info(f"Tool '{name}' ignored: not in the allow-list")
        return False
