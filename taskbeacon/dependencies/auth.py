"""Caller identity for API requests.

The bearer token is validated with python-jose and the user id is taken from
its claims. Routes receive the id through ``get_current_user_id`` and hand it
to storage explicitly.
"""

import logging
from typing import Any, Dict, Optional
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from ..config import Settings
from ..exceptions import UnauthenticatedError

logger = logging.getLogger(__name__)

PRIMARY_ID_CLAIM = "sub"
FALLBACK_ID_CLAIM = "oid"

DEV_USER_ID = "dev-user-123"
DEV_CLAIMS: Dict[str, Any] = {
    PRIMARY_ID_CLAIM: DEV_USER_ID,
    FALLBACK_ID_CLAIM: DEV_USER_ID,
    "name": "Development User",
    "email": "dev@localhost",
}

bearer_scheme = HTTPBearer(auto_error=False)


def decode_token(token: str, settings: Settings) -> Dict[str, Any]:
    """Validate a bearer token and return its claims.

    Raises:
        UnauthenticatedError: Validation is not configured or the token is
            invalid, expired, or has the wrong audience/issuer
    """
    if not settings.jwt_secret:
        raise UnauthenticatedError("Token validation is not configured")
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
            options={"verify_aud": settings.jwt_audience is not None},
        )
    except JWTError as e:
        logger.warning(f"Rejected bearer token: {e}")
        raise UnauthenticatedError("Invalid token")


def resolve_user_id(claims: Dict[str, Any]) -> str:
    """Return the user id from the primary claim, falling back to the secondary one."""
    for claim in (PRIMARY_ID_CLAIM, FALLBACK_ID_CLAIM):
        value = claims.get(claim)
        if value:
            return str(value)
    raise UnauthenticatedError("User ID not found")


def get_token_claims(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Dict[str, Any]:
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError("Not authenticated")
    settings: Settings = request.app.state.settings
    if settings.auth_bypass:
        return dict(DEV_CLAIMS)
    return decode_token(credentials.credentials, settings)


def get_current_user_id(claims: Dict[str, Any] = Depends(get_token_claims)) -> str:
    return resolve_user_id(claims)
