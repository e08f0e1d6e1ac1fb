# Middleware package init
"""
Realty CRM API - Middleware Package
=====================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Guards → Route Handler

    1. Request ID: correlation ID for logs and the X-Request-ID header
    2. Logging: access line with status and duration (computed on the way out)
    3. GZip / CORS: FastAPI's stock middleware

Per-route authentication, role and validation checks are NOT middleware;
they are dependencies in app.guards so each route declares exactly the
gates it needs.
"""
