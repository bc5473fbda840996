"""
FastAPI application serving the Odoo MCP gateway.

``/mcp`` is handled by a per-request FastMCP server built from the request
headers; the remaining endpoints are plain REST for monitoring. Any other
path is a 404.
"""

import logging
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI
from pydantic import BaseModel
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Receive, Scope, Send

from odoo_mcp.config import Settings, settings
from odoo_mcp.request_config import resolve_request_config
from odoo_mcp.server import build_server

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

MCP_PATH = "/mcp"


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    environment: str
    fallback_tenant_configured: bool


class MCPGateway:
    """
    ASGI entry point in front of the FastAPI app.

    Requests to the MCP path get their own configuration, Odoo client and
    FastMCP server, served statelessly and thrown away afterwards.
    Everything else, including lifespan events, goes to ``app``.
    """

    def __init__(
        self,
        app: ASGIApp,
        settings: Settings,
        path: str = MCP_PATH,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.app = app
        self.settings = settings
        self.path = path
        self.transport = transport

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope["path"] not in (self.path, f"{self.path}/"):
            await self.app(scope, receive, send)
            return

        # The MCP app answers "/mcp/" with a slash redirect; serve it as "/mcp"
        scope = dict(scope, path=self.path, raw_path=self.path.encode())

        config = resolve_request_config(Headers(scope=scope), self.settings)
        server = build_server(config, transport=self.transport)
        mcp_app = server.http_app(path=self.path, stateless_http=True, json_response=True)

        try:
            async with mcp_app.router.lifespan_context(mcp_app):
                await mcp_app(scope, receive, send)
        except Exception as e:
            logger.error(f"Error serving MCP request ({config.source}): {e}", exc_info=True)
            raise


# Lifespan context manager for startup/shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    logger.info("Starting Odoo MCP gateway")
    logger.info(f"Environment: {settings.environment}")
    if not settings.odoo_url:
        logger.warning("ODOO_URL not set; requests without Odoo headers cannot reach a backend")

    yield

    logger.info("Shutting down Odoo MCP gateway")


# Create FastAPI app
api = FastAPI(
    title="Odoo MCP Gateway",
    description="Expose Odoo models & helpers over the Model Context Protocol",
    version="0.2.0",
    lifespan=lifespan,
)


@api.get("/", tags=["Root"])
async def root():
    """Root endpoint."""
    return {"message": "Odoo MCP Gateway", "version": "0.2.0", "mcp": MCP_PATH}


@api.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Service status and whether a fallback Odoo tenant is configured."""
    return HealthResponse(
        status="healthy",
        environment=settings.environment,
        fallback_tenant_configured=all(
            (settings.odoo_url, settings.odoo_db, settings.odoo_user, settings.odoo_pass)
        ),
    )


app = MCPGateway(api, settings)


if __name__ == "__main__":
    uvicorn.run(
        "odoo_mcp.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower(),
    )
