"""
Social media pipeline functions.

Instagram connection management plus listing, scheduling and metrics
for posts published on external platforms.
"""

import logging
from datetime import datetime
from typing import Optional, List, Dict, Any

from common.utils.dates import ensure_utc
from common.utils.exceptions import BadRequestException, NotFoundException
from common.utils.serialization import serialize_document
from config.social_config import OAUTH_PLATFORMS
from rats.services.social.instagram_service import (
    InstagramService,
    InstagramAuthError,
    is_platform_connected,
)
from rats.services.social.social_post_service import SocialPostService
from rats.services.user.user_service import UserService

logger = logging.getLogger(__name__)


SETTINGS_PATH = "/settings/social-accounts"


def callback_redirect_url(client_url: str, connected: bool) -> str:
    """Where the browser lands after the Instagram OAuth callback."""
    query = "connected=instagram" if connected else "error=instagram_auth_failed"
    return f"{client_url.rstrip('/')}{SETTINGS_PATH}?{query}"


# =============================================================================
# Connection
# =============================================================================

async def get_auth_url_pipeline(instagram_service: InstagramService, user_id: str) -> Dict[str, Any]:
    return {"success": True, "authUrl": instagram_service.get_auth_url(user_id)}


async def oauth_callback_pipeline(
    instagram_service: InstagramService,
    client_url: str,
    code: Optional[str],
    state: Optional[str]
) -> str:
    """
    Complete the Instagram OAuth flow.

    Never raises; failures are reported through the redirect URL.

    Returns:
        The client URL to redirect to
    """
    if not code or not state:
        logger.warning("Instagram callback missing code or state")
        return callback_redirect_url(client_url, connected=False)

    try:
        user_id = await instagram_service.complete_oauth(code, state)
    except InstagramAuthError as e:
        logger.error(f"Instagram OAuth callback failed: {e}")
        return callback_redirect_url(client_url, connected=False)
    except Exception as e:
        logger.exception(f"Unexpected error in Instagram OAuth callback: {e}")
        return callback_redirect_url(client_url, connected=False)

    logger.info(f"Instagram connected for user {user_id}")
    return callback_redirect_url(client_url, connected=True)


async def disconnect_pipeline(instagram_service: InstagramService, user_id: str) -> Dict[str, Any]:
    await instagram_service.disconnect(user_id)
    return {"success": True, "message": "Instagram account disconnected successfully"}


async def connected_accounts_pipeline(user_service: UserService, user_id: str) -> Dict[str, Any]:
    user = await user_service.get_user_by_id(user_id)
    if not user:
        raise NotFoundException(message="User not found", code="USER_NOT_FOUND")

    return {
        "success": True,
        "connectedAccounts": {
            platform: is_platform_connected(user, platform) for platform in OAUTH_PLATFORMS
        },
    }


# =============================================================================
# Posts
# =============================================================================

async def list_posts_pipeline(social_post_service: SocialPostService, user_id: str) -> List[Dict[str, Any]]:
    posts = await social_post_service.list_for_user(user_id)
    return [serialize_document(p) for p in posts]


async def schedule_post_pipeline(
    instagram_service: InstagramService,
    user_id: str,
    platform: str,
    message: str,
    scheduled_for: datetime,
    image_url: Optional[str] = None,
    event_id: Optional[str] = None
) -> Dict[str, Any]:
    """
    Schedule a post for the scheduled posts job.

    Raises:
        BadRequestException: Unsupported platform or account not connected
    """
    if platform != "instagram":
        raise BadRequestException(
            message=f"Scheduling is not supported for {platform}",
            code="UNSUPPORTED_PLATFORM"
        )

    result = await instagram_service.schedule_instagram_post(
        user_id,
        message,
        ensure_utc(scheduled_for),
        image_url=image_url,
        event_id=event_id,
    )
    if not result["success"]:
        raise BadRequestException(message=result["error"], code="INSTAGRAM_NOT_CONNECTED")
    return result


async def post_metrics_pipeline(
    instagram_service: InstagramService,
    user_id: str,
    platform_post_id: str
) -> Dict[str, Any]:
    result = await instagram_service.get_post_metrics(user_id, platform_post_id)
    if not result["success"]:
        raise NotFoundException(message=result["error"], code="POST_NOT_FOUND")
    return result
