"""
FastAPI router for community post endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from common.utils import success_response
from rats.config import settings
from rats.dependencies import require_auth, get_post_service, get_user_service, get_badge_service
from rats.pipelines import posts as pipelines
from rats.schemas.posts import CreatePostRequest, CommentRequest
from rats.services.community.post_service import PostService
from rats.services.user.badge_service import BadgeService
from rats.services.user.user_service import UserService

router = APIRouter(prefix="/posts", tags=["posts"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_post(
    body: CreatePostRequest,
    user: Annotated[dict, Depends(require_auth)],
    post_service: Annotated[PostService, Depends(get_post_service)],
    user_service: Annotated[UserService, Depends(get_user_service)],
    badge_service: Annotated[BadgeService, Depends(get_badge_service)],
):
    """Publish a post; awards XP and runs the badge check."""
    result = await pipelines.create_post_pipeline(
        post_service=post_service,
        user_service=user_service,
        badge_service=badge_service,
        user_id=str(user["_id"]),
        data=body.model_dump(exclude_none=True),
        xp_reward=settings.XP_POST,
    )
    return success_response(result)


@router.get("")
async def get_feed(
    user: Annotated[dict, Depends(require_auth)],
    post_service: Annotated[PostService, Depends(get_post_service)],
):
    result = await pipelines.get_feed_pipeline(post_service=post_service)
    return success_response(result)


@router.put("/{post_id}/like")
async def toggle_like(
    post_id: str,
    user: Annotated[dict, Depends(require_auth)],
    post_service: Annotated[PostService, Depends(get_post_service)],
):
    result = await pipelines.toggle_like_pipeline(
        post_service=post_service,
        post_id=post_id,
        user_id=str(user["_id"]),
    )
    return success_response(result)


@router.put("/{post_id}/save")
async def toggle_save(
    post_id: str,
    user: Annotated[dict, Depends(require_auth)],
    post_service: Annotated[PostService, Depends(get_post_service)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    result = await pipelines.toggle_save_pipeline(
        post_service=post_service,
        user_service=user_service,
        post_id=post_id,
        user_id=str(user["_id"]),
    )
    return success_response(result)


@router.post("/{post_id}/comment", status_code=status.HTTP_201_CREATED)
async def add_comment(
    post_id: str,
    body: CommentRequest,
    user: Annotated[dict, Depends(require_auth)],
    post_service: Annotated[PostService, Depends(get_post_service)],
):
    result = await pipelines.add_comment_pipeline(
        post_service=post_service,
        post_id=post_id,
        user_id=str(user["_id"]),
        text=body.text,
    )
    return success_response(result)


@router.post("/{post_id}/share", status_code=status.HTTP_201_CREATED)
async def share_post(
    post_id: str,
    user: Annotated[dict, Depends(require_auth)],
    post_service: Annotated[PostService, Depends(get_post_service)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    result = await pipelines.share_post_pipeline(
        post_service=post_service,
        user_service=user_service,
        post_id=post_id,
        user_id=str(user["_id"]),
    )
    return success_response(result)


@router.delete("/{post_id}")
async def delete_post(
    post_id: str,
    user: Annotated[dict, Depends(require_auth)],
    post_service: Annotated[PostService, Depends(get_post_service)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Delete a post with its shares and every saved/shared reference."""
    result = await pipelines.delete_post_pipeline(
        post_service=post_service,
        user_service=user_service,
        post_id=post_id,
        user_id=str(user["_id"]),
    )
    return success_response(result)
