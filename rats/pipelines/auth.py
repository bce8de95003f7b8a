"""
Auth pipeline functions.

Registration and login orchestration: user creation, password checks
and token issuing.
"""

import logging
from typing import Dict, Any

from common.auth import JWTAuth
from common.utils.exceptions import UnauthorizedException
from rats.services.user.user_service import UserService

logger = logging.getLogger(__name__)


INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


async def _auth_payload(jwt_auth: JWTAuth, user: Dict[str, Any]) -> Dict[str, Any]:
    user_id = str(user["_id"])
    return {
        "_id": user_id,
        "email": user["email"],
        "username": user["username"],
        "token": await jwt_auth.create_token(user_id),
    }


async def register_pipeline(
    user_service: UserService,
    jwt_auth: JWTAuth,
    email: str,
    password: str,
    username: str
) -> Dict[str, Any]:
    """
    Create an account and log it in.

    Args:
        user_service: For user creation
        jwt_auth: For hashing and token issuing
        email: Email address (stored lowercase)
        password: Plain password
        username: Handle (stored lowercase)

    Returns:
        {_id, email, username, token}
    """
    user = await user_service.create_user(
        email=email,
        username=username,
        password_hash=jwt_auth.hash_password(password),
    )
    logger.info(f"Registered user {user['_id']}")
    return await _auth_payload(jwt_auth, user)


async def login_pipeline(
    user_service: UserService,
    jwt_auth: JWTAuth,
    email: str,
    password: str
) -> Dict[str, Any]:
    """
    Check credentials and issue a token.

    Raises:
        UnauthorizedException: Unknown email or wrong password
    """
    user = await user_service.get_user_by_email(email)

    if not user or not jwt_auth.verify_password(password, user.get("password", "")):
        raise UnauthorizedException(message=INVALID_CREDENTIALS_MESSAGE, code="INVALID_CREDENTIALS")

    return await _auth_payload(jwt_auth, user)
