"""Context manager for latency instrumentation."""

from __future__ import annotations

import contextlib
import time
from collections.abc import Generator

from webzine_guard.observability.logging import get_logger

logger = get_logger(__name__)


@contextlib.contextmanager
def timed(component: str, **fields: object) -> Generator[None, None, None]:
    """Measure and log elapsed time for a component.

    Usage:
        with timed("comment_ingest", content_id=content_id):
            ...

    Logs ``component_latency`` with ``component``, ``elapsed_ms`` and any
    extra ``fields`` (never pass comment bodies or credentials here).
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "component_latency",
            extra={
                "component": component,
                "elapsed_ms": round(elapsed_ms, 2),
                **fields,
            },
        )
