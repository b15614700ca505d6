"""
Authentication Module

Verifies the JWT carried in the x-auth-token header and exposes the
caller's identity to route handlers. Uses centralized config for the
signing secret.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import jwt
from fastapi import Depends, Security
from fastapi.security import APIKeyHeader

from src.common.error_handling import AdminRequiredError, AuthenticationError, ConfigurationError
from src.services.auth_service import decode_token

from .config import settings


logger = logging.getLogger(__name__)
token_header = APIKeyHeader(name="x-auth-token", auto_error=False)


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity decoded from a verified token."""
    id: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


async def verify_token(token: Optional[str] = Security(token_header)) -> AuthenticatedUser:
    """
    Verify the request token.

    Raises:
        AuthenticationError: 401 if the token is missing, invalid or expired
        ConfigurationError: 500 if no signing secret is configured
    """
    if not token:
        raise AuthenticationError("No token, authorization denied")

    if not settings.jwt_secret:
        logger.error("JWT_SECRET is not configured; rejecting authenticated request")
        raise ConfigurationError("Server configuration error")

    try:
        identity = decode_token(token, settings.jwt_secret)
    except jwt.InvalidTokenError as e:
        logger.debug(f"Rejected token: {e}")
        raise AuthenticationError("Token is not valid")

    return AuthenticatedUser(id=identity["id"], role=identity["role"])


async def verify_admin_token(user: AuthenticatedUser = Depends(verify_token)) -> AuthenticatedUser:
    """
    Verify the request token and require the admin role.

    Raises:
        AdminRequiredError: 403 for non-admin callers
    """
    if not user.is_admin:
        raise AdminRequiredError("Access denied. Admin privileges required.")
    return user
