import time
import uuid
import logging
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("taskmanager.access")

# static assets and health probes would drown the task traffic
QUIET_PREFIXES = ("/static", "/health")


def _http_fields(request: Request, event: str, **extra: Any) -> dict[str, Any]:
    return {
        "category": "http",
        "event": event,
        "request_id": request.state.request_id,
        "method": request.method,
        "path": request.url.path,
        **extra,
    }


class AccessLogMiddleware(BaseHTTPMiddleware):
    """JSON access log; every response carries the request id in X-Request-ID."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request.state.request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        verbose = not request.url.path.startswith(QUIET_PREFIXES)
        started = time.perf_counter()

        if verbose:
            client = request.client.host if request.client else None
            logger.info(
                "request.start",
                extra=_http_fields(request, "request.start", query=str(request.url.query), client=client),
            )

        try:
            response = await call_next(request)
        except Exception:
            # quiet paths still report crashes
            logger.exception(
                "request.error",
                extra=_http_fields(request, "request.error", duration_ms=_elapsed_ms(started)),
            )
            raise

        response.headers["X-Request-ID"] = request.state.request_id
        if verbose:
            logger.info(
                "request.end",
                extra=_http_fields(
                    request, "request.end",
                    status_code=response.status_code, duration_ms=_elapsed_ms(started),
                ),
            )
        return response


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
