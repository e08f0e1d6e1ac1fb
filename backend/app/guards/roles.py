"""
Realty CRM API - Role Authorization Gate
==========================================

What:  Permits or denies a request based on the caller's roles.
How:   Any-of semantics with case-sensitive exact matching: the caller
       passes if it holds at least one required role. An empty requirement
       always passes.

Decision table:
    identity missing             → UnauthenticatedError (401)
    no roles required            → proceed
    roles ∩ required non-empty   → proceed
    otherwise                    → ForbiddenError (403)
"""

import logging
from typing import Callable, Iterable, Optional

from fastapi import Depends

from app.exceptions import ForbiddenError, UnauthenticatedError
from app.guards.authentication import Identity, authenticate

logger = logging.getLogger(__name__)


def check_roles(identity: Optional[Identity], required: Iterable[str]) -> None:
    """Pure decision function; raises on denial, returns None on success."""
    required_roles = tuple(required)

    if identity is None:
        raise UnauthenticatedError(context={"reason": "no identity on request"})

    if not required_roles:
        return

    if any(role in identity.roles for role in required_roles):
        return

    logger.warning(
        "Forbidden: subject %s holds %s, needs one of %s",
        identity.sub,
        list(identity.roles),
        list(required_roles),
    )
    raise ForbiddenError(
        context={"sub": identity.sub, "required_roles": list(required_roles)}
    )


def require_roles(*roles: str) -> Callable:
    """
    Build a role gate dependency.

    Example:
        identity: Identity = Depends(require_roles("admin"))

    The gate depends on `authenticate`, so authentication always runs first
    and the same Identity is handed to the route.
    """
    required = tuple(roles)

    async def role_gate(identity: Identity = Depends(authenticate)) -> Identity:
        check_roles(identity, required)
        return identity

    return role_gate
