"""
HTTP request logging middleware.

Every request gets a request id, and requests against a swap session also
bind the session id, so the controller's transition logs emitted while
handling the request can be correlated with the HTTP line.
"""

import re
import time
import uuid
from typing import Optional

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.stdlib.get_logger("http")

REQUEST_ID_HEADER = "x-request-id"
_SESSION_PATH = re.compile(r"^/swap/sessions/(?P<session_id>[^/]+)")


def session_id_from_path(path: str) -> Optional[str]:
    match = _SESSION_PATH.match(path)
    return match.group("session_id") if match else None


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Bind request context and log one line per request."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        session_id = session_id_from_path(request.url.path)

        structlog.contextvars.clear_contextvars()
        context = {"request_id": request_id}
        if session_id:
            context["session_id"] = session_id
        structlog.contextvars.bind_contextvars(**context)

        started = time.perf_counter()
        response: Optional[Response] = None
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            status = response.status_code if response is not None else 500
            if status >= 500:
                log = logger.error
            elif status >= 400:
                log = logger.warning
            else:
                log = logger.info
            log(
                "http_request",
                method=request.method,
                path=request.url.path,
                status=status,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
