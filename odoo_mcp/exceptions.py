"""
Errors raised while talking to Odoo.

Transport, remote and authentication errors propagate out of the client
untouched. Tool handlers are the only place they are turned into
user-visible failure payloads.
"""


class OdooError(RuntimeError):
    """Base class for every Odoo RPC failure."""


class OdooTransportError(OdooError):
    """The HTTP round trip returned a non-success status."""

    def __init__(self, status_code: int, reason: str = ""):
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"HTTP {status_code}: {reason}".rstrip(": "))


class OdooRemoteError(OdooError):
    """Odoo answered with an ``error`` payload."""

    def __init__(self, message: str, payload: dict | None = None):
        self.payload = payload or {}
        super().__init__(message)


class OdooAuthenticationError(OdooError):
    """Login failed or returned no uid."""


class OdooDomainError(OdooError, ValueError):
    """A search domain could not be decoded."""
