"""Bearer token verification using signed JWT tokens.

Tokens are issued by an external identity provider and signed with the
shared application secret. The planner has no user table; a user is whatever
email-like identity the token names.

## Token Structure

```json
{
  "preferred_username": "surfer@example.com",
  "aud": "surf-planner",
  "iss": "https://login.example.com",
  "exp": 1235172690
}
```

The user identifier is taken from the first claim present, in order:
`preferred_username`, `email`, `upn`, `unique_name`.
"""

from __future__ import annotations

import logging
from typing import Any

from jose import JWTError, jwt

from surf_planner.config import get_settings

logger = logging.getLogger(__name__)

IDENTITY_CLAIMS = ("preferred_username", "email", "upn", "unique_name")


class InvalidTokenError(Exception):
    """Raised when a bearer token cannot be verified."""


class MissingIdentityError(Exception):
    """Raised when a verified token names no user."""


def verify_access_token(token: str) -> dict[str, Any]:
    """Verify a bearer token and return its claims.

    Audience and issuer are only checked when configured.

    Raises:
        InvalidTokenError: If the signature, expiry, audience or issuer is wrong
    """
    settings = get_settings()

    options = {"verify_aud": settings.jwt_audience is not None}
    try:
        return jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
            options=options,
        )
    except JWTError as e:
        logger.debug(f"Bearer token verification failed: {e}")
        raise InvalidTokenError(str(e)) from e


def extract_user_id(claims: dict[str, Any]) -> str:
    """Get the user identifier from verified claims.

    Raises:
        MissingIdentityError: If none of the identity claims is present
    """
    for claim in IDENTITY_CLAIMS:
        value = claims.get(claim)
        if isinstance(value, str) and value.strip():
            return value.strip()
    raise MissingIdentityError("Token has no user identity claim")


def create_access_token(claims: dict[str, Any]) -> str:
    """Sign claims with the application secret.

    Used by tests and local tooling; production tokens come from the
    identity provider.
    """
    settings = get_settings()
    return jwt.encode(claims, settings.secret_key, algorithm=settings.jwt_algorithm)
