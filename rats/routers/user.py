"""
FastAPI router for user profile endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from common.utils import success_response
from rats.dependencies import require_auth, get_user_service, get_post_service
from rats.pipelines import user as pipelines
from rats.schemas.user import UpdateGoalRequest, UpdateProfileRequest
from rats.services.community.post_service import PostService
from rats.services.user.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/profile/me")
async def get_my_profile(
    user: Annotated[dict, Depends(require_auth)],
    user_service: Annotated[UserService, Depends(get_user_service)],
    post_service: Annotated[PostService, Depends(get_post_service)],
):
    """Own profile with saved and shared posts."""
    result = await pipelines.get_my_profile_pipeline(
        user_service=user_service,
        post_service=post_service,
        user_id=str(user["_id"]),
    )
    return success_response(result)


@router.get("/profile/{username}")
async def get_public_profile(
    username: str,
    user: Annotated[dict, Depends(require_auth)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    result = await pipelines.get_public_profile_pipeline(user_service=user_service, username=username)
    return success_response(result)


@router.get("/profile/{username}/posts")
async def get_user_posts(
    username: str,
    user: Annotated[dict, Depends(require_auth)],
    user_service: Annotated[UserService, Depends(get_user_service)],
    post_service: Annotated[PostService, Depends(get_post_service)],
):
    result = await pipelines.get_user_posts_pipeline(
        user_service=user_service,
        post_service=post_service,
        username=username,
    )
    return success_response(result)


@router.put("/goal")
async def update_goal(
    body: UpdateGoalRequest,
    user: Annotated[dict, Depends(require_auth)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Set the daily calorie goal."""
    result = await pipelines.update_goal_pipeline(
        user_service=user_service,
        user_id=str(user["_id"]),
        goal=body.dailyCalorieGoal,
    )
    return success_response(result)


@router.put("/profile")
async def update_profile(
    body: UpdateProfileRequest,
    user: Annotated[dict, Depends(require_auth)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Update profile fields; social links are merged into the stored ones."""
    social_links = body.socialLinks.model_dump(exclude_none=True) if body.socialLinks else None

    result = await pipelines.update_profile_pipeline(
        user_service=user_service,
        user_id=str(user["_id"]),
        profile_picture_url=body.profilePictureUrl,
        bio=body.bio,
        location=body.location,
        social_links=social_links,
    )
    return success_response(result)
