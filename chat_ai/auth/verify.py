"""
verify.py
---------
Purpose:
    Firebase ID token verification (RS256) for the AI endpoints.

Notes:
    - Signing keys come from Google's securetoken JWKS; PyJWKClient caches them.
    - Audience is the Firebase project ID, issuer securetoken.google.com/<project>.
    - Provides `auth_dependency` for protected routes.
"""

from functools import lru_cache

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt import PyJWKClient

from chat_ai.config import settings

FIREBASE_JWKS_URL = (
    "https://www.googleapis.com/service_accounts/v1/jwk/securetoken@system.gserviceaccount.com"
)

_security = HTTPBearer()


@lru_cache(maxsize=1)
def _jwk_client() -> PyJWKClient:
    return PyJWKClient(FIREBASE_JWKS_URL, cache_keys=True)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def verify_jwt(token: str) -> dict:
    """Decode a Firebase ID token and return its claims."""
    if not settings.FIREBASE_PROJECT_ID:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication is not configured",
        )

    try:
        signing_key = _jwk_client().get_signing_key_from_jwt(token)
        claims = jwt.decode(
            token,
            signing_key.key,
            algorithms=["RS256"],
            audience=settings.FIREBASE_PROJECT_ID,
            issuer=settings.firebase_issuer(),
            options={"require": ["exp", "iat", "sub"]},
        )
    except jwt.PyJWTError as e:
        raise _unauthorized(f"Invalid authentication token: {e}") from e

    if not claims.get("sub"):
        raise _unauthorized("Token has no subject")
    return claims


def auth_dependency(credentials: HTTPAuthorizationCredentials = Depends(_security)) -> dict:
    return verify_jwt(credentials.credentials)
