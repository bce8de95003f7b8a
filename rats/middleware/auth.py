"""
Authentication middleware for protected routes.

Validates bearer JWTs and attaches the user to requests.
"""

import logging
from typing import Optional

from fastapi import Request

from common.auth import JWTAuth
from common.utils.exceptions import UnauthorizedException
from rats.services.user.user_service import UserService

logger = logging.getLogger(__name__)


NO_TOKEN_MESSAGE = "Not authorized, no token"
TOKEN_FAILED_MESSAGE = "Not authorized, token failed"


class AuthMiddleware:
    """
    Middleware that validates the bearer token and attaches user to request.
    """

    def __init__(self, jwt_auth: JWTAuth, user_service: UserService):
        """
        Initialize AuthMiddleware.

        Args:
            jwt_auth: For token verification
            user_service: For loading the token's user
        """
        self._jwt_auth = jwt_auth
        self._user_service = user_service

    async def require_auth(self, request: Request) -> dict:
        """
        Validate request is authenticated.

        Args:
            request: HTTP request object

        Returns:
            User dict (without password) attached to request

        Raises:
            UnauthorizedException: No token, invalid or expired token, or
                the token's user no longer exists
        """
        token = self._extract_token(request)

        if not token:
            raise UnauthorizedException(message=NO_TOKEN_MESSAGE, code="AUTH_REQUIRED")

        try:
            payload = await self._jwt_auth.verify_token(token)
        except ValueError as e:
            logger.debug(f"Token verification failed: {e}")
            raise UnauthorizedException(message=TOKEN_FAILED_MESSAGE, code="INVALID_TOKEN")

        user_id = payload.get("sub")
        user = await self._user_service.get_user_by_id(user_id) if user_id else None

        if not user:
            raise UnauthorizedException(message=TOKEN_FAILED_MESSAGE, code="INVALID_TOKEN")

        request.state.user = user
        return user

    def _extract_token(self, request: Request) -> Optional[str]:
        """
        Extract bearer token from Authorization header.

        Expected format: "Authorization: Bearer <token>"
        """
        auth_header = request.headers.get("Authorization")

        if not auth_header:
            return None

        parts = auth_header.split()

        if len(parts) != 2:
            return None

        scheme, token = parts

        if scheme.lower() != "bearer":
            return None

        return token
