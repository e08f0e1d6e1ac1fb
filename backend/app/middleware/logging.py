"""
Realty CRM API - Access Logging Middleware
============================================

What:  One log line per HTTP request: method, path, status, duration,
       request ID, client IP, and the authenticated subject (if any).
How:   Measures wall time around the downstream call; picks the log level
       from the status class (5xx ERROR, 4xx WARNING, else INFO).
When:  Runs inside RequestIDMiddleware so the request ID is already set.

Example line:
    2026-10-19T09:12:44 [INFO] realty_crm.access: POST /api/v1/clients 201 12.4ms [3f9c0d1e2a4b] from 10.0.0.7 sub=auth0|64f0

Not logged: request/response bodies and the Authorization header (PII, credentials).
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("realty_crm.access")

# Probed every few seconds by orchestrators; logging them buries real traffic
QUIET_PATHS = {"/api/v1/health", "/api/v1/health/ready"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Structured access log for every non-health request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        client_ip = request.client.host if request.client else "unknown"
        # Set by the authentication gate; absent for rejected or public calls
        identity = getattr(request.state, "identity", None)
        subject = identity.sub if identity is not None else "-"
        rid = request_id_var.get("")

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s sub=%s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            subject,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
                "subject": subject,
            },
        )

        return response
