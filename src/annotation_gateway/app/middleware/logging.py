"""Request logging utilities for the annotation gateway.

The middleware assigns a short *request_id* to every incoming HTTP request so
that log lines from the loader, the hit test and the renderer can be
correlated when several browser tabs hit the service at once.
"""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from src.annotation.errors import AnnotationError

logger = logging.getLogger("annotation_gateway")


class LoggingMiddleware(BaseHTTPMiddleware):
    """Attach a short *request_id* and log basic request / response metadata."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:  # noqa: D401  (simple dispatch signature)
        # Uniqueness for the lifetime of the process is enough here.
        request_id = uuid.uuid4().hex[:8]
        request.state.request_id = request_id

        started = time.time()
        status: int | str = "error"
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            duration_ms = (time.time() - started) * 1_000
            logger.info(
                "[request %s] %s %s → %s (%.1f ms)",
                request_id,
                request.method,
                request.url.path,
                status,
                duration_ms,
            )


# ---------------------------------------------------------------------------
# Helper functions used by the main application module
# ---------------------------------------------------------------------------


def request_id_of(request: Request) -> str:
    return getattr(request.state, "request_id", "-")


def log_dataset_failure(request_id: str, operation: str, exc: Exception) -> None:
    """Log a loader failure with enough context for an operator.

    The exception message carries the source path and a key-mismatch hint
    but never key material. Failures outside the annotation hierarchy are
    logged with their traceback.
    """

    logger.error(
        "[request %s] %s failed: %s: %s",
        request_id,
        operation,
        type(exc).__name__,
        exc,
        exc_info=None if isinstance(exc, AnnotationError) else exc,
    )
    candidates = getattr(exc, "candidates", None)
    if candidates:
        logger.error(
            "[request %s] searched: %s",
            request_id,
            ", ".join(str(c) for c in candidates),
        )


def log_hit(request_id: str, x: float, y: float, hit_id: str | None, duration: float) -> None:
    logger.debug(
        "[request %s] hit (%.1f, %.1f) → %s | %.1f ms",
        request_id,
        x,
        y,
        hit_id or "none",
        duration * 1_000,
    )
