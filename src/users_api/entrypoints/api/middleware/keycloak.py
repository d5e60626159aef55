"""Keycloak subject extraction.

Resolves the identity provider's subject identifier (the ``sub`` claim) from
the request's bearer token. Signatures are checked against the realm's
published JWKS; authorization policy is left to upstream components.
"""

from functools import lru_cache

import jwt
import structlog
from fastapi import HTTPException, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from users_api.entrypoints.api.deps import settings

logger = structlog.get_logger()

bearer_scheme = HTTPBearer(auto_error=False)

ALGORITHMS = ["RS256"]


@lru_cache(maxsize=4)
def get_jwks_client(certs_url: str) -> jwt.PyJWKClient:
    """Return a caching JWKS client for the realm."""
    return jwt.PyJWKClient(certs_url, cache_keys=True)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=401,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def verify_subject(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Security(bearer_scheme),  # noqa: B008
) -> str:
    """Verify the Keycloak access token and return its subject.

    Args:
        request: The current request.
        credentials: Bearer token credentials.

    Returns:
        The ``sub`` claim.

    Raises:
        HTTPException: 401 if the token is missing, invalid or has no subject.
    """
    if not credentials:
        raise _unauthorized("Missing authentication token")

    token = credentials.credentials
    try:
        signing_key = get_jwks_client(settings.keycloak_certs_url).get_signing_key_from_jwt(token)
        payload = jwt.decode(
            token,
            signing_key.key,
            algorithms=ALGORITHMS,
            audience=settings.keycloak_audience or None,
            options={"verify_aud": bool(settings.keycloak_audience)},
        )
    except jwt.PyJWTError as e:
        logger.warning("keycloak_token_rejected", error=str(e))
        raise _unauthorized("Invalid authentication token") from None

    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        raise _unauthorized("Token has no subject")

    request.state.subject_id = subject
    return subject
