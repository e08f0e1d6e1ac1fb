"""
Realty CRM API - Request ID Middleware
========================================

What:  Gives every request a correlation ID and echoes it in `X-Request-ID`.
How:   Reuses a client-supplied X-Request-ID when it is short and printable,
       otherwise generates one; stores it in a ContextVar (for loggers and
       exception handlers) and on request.state (for handlers).
When:  Outermost application middleware; runs before the access logger.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 64

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def _accept_client_id(value: str) -> bool:
    return 0 < len(value) <= MAX_REQUEST_ID_LENGTH and value.isprintable()


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assigns and propagates the per-request correlation ID."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        supplied = request.headers.get(REQUEST_ID_HEADER, "")
        rid = supplied if _accept_client_id(supplied) else uuid.uuid4().hex[:12]

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
