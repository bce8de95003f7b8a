"""
FastAPI router for authentication endpoints.

Registration and login with email/password; both return a bearer JWT.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status

from common.auth import JWTAuth
from common.utils import success_response
from rats.dependencies import get_jwt_auth, get_user_service
from rats.pipelines import auth as pipelines
from rats.schemas.auth import RegisterRequest, LoginRequest
from rats.services.user.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    user_service: Annotated[UserService, Depends(get_user_service)],
    jwt_auth: Annotated[JWTAuth, Depends(get_jwt_auth)],
):
    """Create an account and return its token."""
    result = await pipelines.register_pipeline(
        user_service=user_service,
        jwt_auth=jwt_auth,
        email=body.email,
        password=body.password,
        username=body.username,
    )
    return success_response(result)


@router.post("/login")
async def login(
    body: LoginRequest,
    user_service: Annotated[UserService, Depends(get_user_service)],
    jwt_auth: Annotated[JWTAuth, Depends(get_jwt_auth)],
):
    """Authenticate with email and password."""
    result = await pipelines.login_pipeline(
        user_service=user_service,
        jwt_auth=jwt_auth,
        email=body.email,
        password=body.password,
    )
    return success_response(result)
