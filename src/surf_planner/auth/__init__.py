"""Authentication for the planner API.

Requests carry a bearer JWT signed with the application secret. The user is
identified by the email-like claim in the token.
"""

from surf_planner.auth.dependencies import get_current_user_id
from surf_planner.auth.tokens import (
    IDENTITY_CLAIMS,
    InvalidTokenError,
    MissingIdentityError,
    create_access_token,
    extract_user_id,
    verify_access_token,
)

__all__ = [
    "IDENTITY_CLAIMS",
    "InvalidTokenError",
    "MissingIdentityError",
    "create_access_token",
    "extract_user_id",
    "get_current_user_id",
    "verify_access_token",
]
