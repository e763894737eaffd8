"""Request ID tagging and access logging."""

import logging
import time
from typing import Any, Callable, Dict
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from learnpath.utils.logging import get_logger, request_id_var

REQUEST_ID_HEADER = "X-Request-ID"

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Bind a request ID for the lifetime of each request and log its outcome.

    A caller-supplied ``X-Request-ID`` is reused, otherwise one is generated.
    The ID is echoed back on the response and attached to every log record
    emitted while the request is served.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        request.state.request_id = request_id
        token = request_id_var.set(request_id)

        label = f"{request.method} {request.url.path}"
        context: Dict[str, Any] = {
            "endpoint": request.url.path,
            "method": request.method,
            "client_ip": request.client.host if request.client else "unknown",
        }
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"{label} failed: {e}",
                extra={**context, "status_code": 500, "duration_ms": _elapsed_ms(started), "error": str(e)},
                exc_info=True,
            )
            raise
        else:
            level = logging.INFO if response.status_code < 400 else logging.WARNING
            logger.log(
                level,
                f"{label} {response.status_code}",
                extra={**context, "status_code": response.status_code, "duration_ms": _elapsed_ms(started)},
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            request_id_var.reset(token)


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
