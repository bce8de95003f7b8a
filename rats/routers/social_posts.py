"""
FastAPI router for posts on external social platforms.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from common.utils import success_response
from rats.dependencies import require_auth, get_social_post_service, get_instagram_service
from rats.pipelines import social as pipelines
from rats.schemas.social import SchedulePostRequest
from rats.services.social.instagram_service import InstagramService
from rats.services.social.social_post_service import SocialPostService

router = APIRouter(prefix="/social-posts", tags=["social-posts"])


@router.get("")
async def list_social_posts(
    user: Annotated[dict, Depends(require_auth)],
    social_post_service: Annotated[SocialPostService, Depends(get_social_post_service)],
):
    result = await pipelines.list_posts_pipeline(
        social_post_service=social_post_service,
        user_id=str(user["_id"]),
    )
    return success_response(result)


@router.post("/schedule", status_code=status.HTTP_201_CREATED)
async def schedule_post(
    body: SchedulePostRequest,
    user: Annotated[dict, Depends(require_auth)],
    instagram_service: Annotated[InstagramService, Depends(get_instagram_service)],
):
    """Schedule a post for the hourly publishing job."""
    result = await pipelines.schedule_post_pipeline(
        instagram_service=instagram_service,
        user_id=str(user["_id"]),
        platform=body.platform,
        message=body.content,
        scheduled_for=body.scheduledFor,
        image_url=body.imageUrl,
        event_id=body.eventId,
    )
    return success_response(result)


@router.get("/{platform_post_id}/metrics")
async def get_post_metrics(
    platform_post_id: str,
    user: Annotated[dict, Depends(require_auth)],
    instagram_service: Annotated[InstagramService, Depends(get_instagram_service)],
):
    result = await pipelines.post_metrics_pipeline(
        instagram_service=instagram_service,
        user_id=str(user["_id"]),
        platform_post_id=platform_post_id,
    )
    return success_response(result)
