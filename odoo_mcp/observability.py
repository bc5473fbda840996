"""
Lightweight latency tracing.

Every Odoo round trip and every tool execution is wrapped in a span so
that a slow backend, a failing model call or a login repeated on each
request shows up in the logs as one structured record.

Example log:
[TRACE] odoo_rpc outcome=ok duration_ms=43.21 service=object method=search_read
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager

logger = logging.getLogger("odoo_mcp.trace")


@contextmanager
def trace_span(name: str, **metadata):
    """
    Measure execution duration of an operation.

    The record is always written, with ``outcome`` set to the exception
    class name when the block raises. Exceptions are re-raised untouched.
    """
    start = time.perf_counter()
    outcome = "ok"
    try:
        yield
    except BaseException as e:
        outcome = type(e).__name__
        raise
    finally:
        duration_ms = (time.perf_counter() - start) * 1000

        meta = " ".join(f"{k}={v}" for k, v in metadata.items())
        level = logging.INFO if outcome == "ok" else logging.WARNING
        logger.log(level, "[TRACE] %s outcome=%s duration_ms=%.2f %s", name, outcome, duration_ms, meta)
