"""FastAPI dependencies for authentication.

## Usage

```python
from fastapi import Depends
from surf_planner.auth import get_current_user_id

@router.get("/availability")
async def get_availability(user_id: str = Depends(get_current_user_id)):
    ...
```
"""

from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from surf_planner.auth.tokens import (
    InvalidTokenError,
    MissingIdentityError,
    extract_user_id,
    verify_access_token,
)

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """Get the identifier of the authenticated user.

    Raises 401 for a missing or invalid token and 400 when the token
    carries no identity claim.
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        claims = verify_access_token(credentials.credentials)
    except InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None

    try:
        return extract_user_id(claims)
    except MissingIdentityError:
        logger.warning("Verified token without an identity claim")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Token has no user identity claim",
        ) from None
