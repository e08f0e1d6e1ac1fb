"""
Realty CRM API - Authentication Gate
======================================

What:  Resolves the caller's identity from an `Authorization: Bearer <JWT>`
       header and attaches it to the request.
How:   python-jose verifies signature, expiry and (optionally) audience and
       issuer against the configured key. The `sub` claim becomes the
       identity's subject; roles come from the configured roles claim.
Who:   Every /api/v1/clients and /api/v1/transactions route depends on it.
When:  First gate in the chain; nothing else runs for an unauthenticated call.

Identity on the request:
    request.state.identity = Identity(sub="auth0|64f0...", roles=("agent",))

Failure:
    Any problem raises UnauthenticatedError (401, {"message": "Unauthorized"}).
    The reason is logged and kept in the error context, never returned.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from app.config import Settings, settings
from app.exceptions import UnauthenticatedError

logger = logging.getLogger(__name__)

# auto_error=False: a missing header must produce our 401 body, not FastAPI's
bearer_scheme = HTTPBearer(
    auto_error=False,
    description="JWT issued by the identity provider",
)


@dataclass(frozen=True)
class Identity:
    """The authenticated caller: subject plus the roles the token grants."""
    sub: str
    roles: Tuple[str, ...] = ()


def _roles_from_claim(value: Any) -> Tuple[str, ...]:
    """Normalize a roles claim: a single string, a list of strings, or absent."""
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (list, tuple)):
        return tuple(role for role in value if isinstance(role, str))
    return ()


class TokenVerifier:
    """
    Verifies bearer tokens against one key and a fixed algorithm list.

    Attributes:
        key:         HS* shared secret or PEM public key for RS*/ES*
        algorithms:  accepted `alg` header values
        audience:    expected `aud`, or None to skip the check
        issuer:      expected `iss`, or None to skip the check
        roles_claim: claim name holding the caller's roles
    """

    def __init__(
        self,
        key: str,
        algorithms: List[str],
        audience: Optional[str] = None,
        issuer: Optional[str] = None,
        roles_claim: str = "roles",
    ):
        self.key = key
        self.algorithms = algorithms
        self.audience = audience
        self.issuer = issuer
        self.roles_claim = roles_claim

    @classmethod
    def from_settings(cls, config: Settings) -> "TokenVerifier":
        return cls(
            key=config.auth_jwt_secret,
            algorithms=config.auth_jwt_algorithm_list,
            audience=config.auth_audience,
            issuer=config.auth_issuer,
            roles_claim=config.auth_roles_claim,
        )

    def verify(self, token: str) -> Identity:
        """
        Decode and verify a token, returning the caller's identity.

        Raises:
            UnauthenticatedError: no key configured, bad signature, disallowed
                algorithm, expired, wrong audience/issuer, or missing `sub`.
        """
        if not self.key:
            raise UnauthenticatedError(context={"reason": "no verification key configured"})

        try:
            claims = jwt.decode(
                token,
                self.key,
                algorithms=self.algorithms,
                audience=self.audience,
                issuer=self.issuer,
                options={"verify_aud": self.audience is not None},
            )
        except ExpiredSignatureError:
            raise UnauthenticatedError(context={"reason": "token expired"}) from None
        except JWTError as e:
            raise UnauthenticatedError(context={"reason": str(e)}) from None

        sub = claims.get("sub")
        if not isinstance(sub, str) or not sub:
            raise UnauthenticatedError(context={"reason": "token has no subject"})

        return Identity(sub=sub, roles=_roles_from_claim(claims.get(self.roles_claim)))


# ── Singleton Instance ────────────────────────────────────────────────────
token_verifier = TokenVerifier.from_settings(settings)


def get_token_verifier() -> TokenVerifier:
    """Dependency hook; tests swap the verifier via app.dependency_overrides."""
    return token_verifier


async def authenticate(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> Identity:
    """
    Authentication gate.

    Returns the verified Identity and stores it on request.state.identity.
    Raises UnauthenticatedError (401) otherwise.
    """
    if credentials is None:
        logger.warning("Rejected %s %s: missing bearer credential", request.method, request.url.path)
        raise UnauthenticatedError(context={"reason": "missing bearer credential"})

    try:
        identity = verifier.verify(credentials.credentials)
    except UnauthenticatedError as e:
        logger.warning(
            "Rejected %s %s: %s", request.method, request.url.path, e.context.get("reason")
        )
        raise

    request.state.identity = identity
    return identity
