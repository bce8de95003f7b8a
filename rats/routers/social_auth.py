"""
FastAPI router for social media account connections.

The OAuth callback is called by Instagram without a bearer token; the
user is recovered from the state parameter.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import RedirectResponse

from common.utils import success_response
from rats.config import settings
from rats.dependencies import require_auth, get_instagram_service, get_user_service
from rats.pipelines import social as pipelines
from rats.services.social.instagram_service import InstagramService
from rats.services.user.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/social-auth", tags=["social-auth"])


@router.get("/instagram/auth-url")
async def get_instagram_auth_url(
    user: Annotated[dict, Depends(require_auth)],
    instagram_service: Annotated[InstagramService, Depends(get_instagram_service)],
):
    """Instagram authorization URL for the current user."""
    result = await pipelines.get_auth_url_pipeline(
        instagram_service=instagram_service,
        user_id=str(user["_id"]),
    )
    return success_response(result)


@router.get("/instagram/callback")
async def instagram_callback(
    instagram_service: Annotated[InstagramService, Depends(get_instagram_service)],
    code: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
):
    """Finish the OAuth flow and send the browser back to the client settings page."""
    redirect_url = await pipelines.oauth_callback_pipeline(
        instagram_service=instagram_service,
        client_url=settings.CLIENT_URL,
        code=code,
        state=state,
    )
    return RedirectResponse(url=redirect_url)


@router.delete("/instagram/disconnect")
async def disconnect_instagram(
    user: Annotated[dict, Depends(require_auth)],
    instagram_service: Annotated[InstagramService, Depends(get_instagram_service)],
):
    result = await pipelines.disconnect_pipeline(
        instagram_service=instagram_service,
        user_id=str(user["_id"]),
    )
    return success_response(result)


@router.get("/connected-accounts")
async def get_connected_accounts(
    user: Annotated[dict, Depends(require_auth)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    result = await pipelines.connected_accounts_pipeline(
        user_service=user_service,
        user_id=str(user["_id"]),
    )
    return success_response(result)
