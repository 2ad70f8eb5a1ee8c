"""Bearer token authentication dependency.

A missing ``Authorization`` header or empty token is a 401; a token that
fails verification (bad signature, expired, missing claims) is a 403.
"""

import logging
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError

from src.jobboard.config import Settings, get_settings
from src.jobboard.domain.base import CamelModel
from src.jobboard.domain.user import Role
from src.jobboard.utils.tokens import InvalidTokenError, decode_access_token

logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)


class AuthenticationError(Exception):
    """Raised when a request carries no credentials."""


class AuthorizationError(Exception):
    """Raised when credentials are present but not acceptable."""


class TokenClaims(CamelModel):
    """Identity carried by a verified access token."""

    id: str
    email: str
    role: Role


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> TokenClaims:
    """Dependency resolving the authenticated user from the bearer token.

    Raises:
        AuthenticationError: If the header or token is missing
        AuthorizationError: If the token is invalid or expired
    """
    if credentials is None:
        raise AuthenticationError("Authorization header missing")
    if not credentials.credentials:
        raise AuthenticationError("Token missing")

    try:
        payload = decode_access_token(
            credentials.credentials,
            settings.jwt_secret,
            settings.jwt_algorithm,
        )
        return TokenClaims.model_validate(payload)
    except (InvalidTokenError, ValidationError) as e:
        logger.warning("Rejected bearer token: %s", e)
        raise AuthorizationError("Invalid or expired token") from e


CurrentUser = Annotated[TokenClaims, Depends(get_current_user)]
