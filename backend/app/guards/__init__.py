# Guards package init
"""
Realty CRM API - Request Guards
================================

What:  The gates every resource request passes before its handler body runs.
How:   Each gate is a FastAPI dependency. A gate either returns a value the
       next stage consumes or raises a CRMError, which halts the request and
       is rendered by the global exception handlers in main.py.

Gate Chain (per route, order matters!):
    Request → [Authentication] → [Role] → [Schema Validation] → Handler body

    1. authenticate          401 {"message": "Unauthorized"}
    2. require_roles(...)    401 when no identity, 403 {"message": "Forbidden"}
    3. validate_body/query   400 {"error": "...", "details": [...]}

    FastAPI resolves a handler's dependencies in parameter order and caches
    each one per request, so `require_roles` depending on `authenticate`
    verifies the token exactly once.

Example:
    @router.post("/clients")
    async def create_client(
        identity: Identity = Depends(require_roles("agent", "admin")),
        payload: ClientCreate = Depends(validate_body(ClientCreate)),
        db: AsyncSession = Depends(get_db_session),
    ): ...
"""

from app.guards.authentication import Identity, TokenVerifier, authenticate, get_token_verifier
from app.guards.roles import check_roles, require_roles
from app.guards.validation import validate, validate_body, validate_query

__all__ = [
    "Identity",
    "TokenVerifier",
    "authenticate",
    "check_roles",
    "get_token_verifier",
    "require_roles",
    "validate",
    "validate_body",
    "validate_query",
]
