"""
Claims extraction for the bond server.
Verifies access tokens from the Authorization Server via JWKS and turns them into Claims.
Expiry is carried into Claims and decided by bond_server.access, not here.
"""
import logging
import uuid
from typing import Annotated

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt import PyJWKClient

from bond_server.access import Claims, parse_credentials
from bond_server.config import API_AUDIENCE, ISSUER, JWKS_CACHE_SECONDS, JWKS_URI
from bond_server.errors import AuthenticationError

logger = logging.getLogger(__name__)

# Single shared client; PyJWKClient caches the JWK set and keys
_jwks_client: PyJWKClient | None = None


def get_jwks_client() -> PyJWKClient:
    global _jwks_client
    if _jwks_client is None:
        _jwks_client = PyJWKClient(
            uri=JWKS_URI,
            cache_jwk_set=True,
            lifespan=JWKS_CACHE_SECONDS,
        )
    return _jwks_client


security = HTTPBearer(auto_error=False)


def get_bearer_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str:
    """Extract Bearer token from Authorization header. Raises 401 if missing or not Bearer."""
    if credentials is None:
        raise AuthenticationError("missing or malformed JWT")
    if credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Bearer scheme required")
    return credentials.credentials


def verify_access_token(token: str) -> dict:
    """
    Verify JWT signature via JWKS and validate iss and aud.
    `exp` must be present but is not enforced here.
    """
    try:
        client = get_jwks_client()
        signing_key = client.get_signing_key_from_jwt(token)
        return jwt.decode(
            token,
            signing_key.key,
            algorithms=["RS256"],
            audience=API_AUDIENCE,
            issuer=ISSUER,
            options={
                "verify_exp": False,
                "verify_aud": True,
                "verify_iss": True,
                "require": ["exp", "sub"],
            },
        )
    except jwt.InvalidAudienceError:
        raise AuthenticationError("invalid audience")
    except jwt.InvalidIssuerError:
        raise AuthenticationError("invalid issuer")
    except jwt.PyJWTError as e:
        logger.debug("JWT verification failed: %s", e)
        raise AuthenticationError("token verification failed")


def claims_from_payload(payload: dict) -> Claims:
    """Map a verified token payload onto Claims."""
    try:
        user_id = uuid.UUID(str(payload["sub"]))
        expires_at = int(payload["exp"])
    except (KeyError, TypeError, ValueError):
        raise AuthenticationError("token subject or expiry is malformed")
    raw = payload.get("credentials")
    return Claims(
        user_id=user_id,
        expires_at=expires_at,
        credentials=parse_credentials(raw if isinstance(raw, dict) else None, payload.get("scope")),
    )


def get_claims(
    token: Annotated[str, Depends(get_bearer_token)],
) -> Claims:
    """Dependency: valid Bearer token -> Claims."""
    return claims_from_payload(verify_access_token(token))
