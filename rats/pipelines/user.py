"""
User profile pipeline functions.
"""

import asyncio
import logging
from typing import Optional, List, Dict, Any

from common.utils.exceptions import NotFoundException
from common.utils.serialization import serialize_document
from rats.services.community.post_service import PostService
from rats.services.user.user_service import UserService

logger = logging.getLogger(__name__)


async def get_my_profile_pipeline(
    user_service: UserService,
    post_service: PostService,
    user_id: str
) -> Dict[str, Any]:
    """
    Full profile of the caller with saved and shared posts expanded.

    Raises:
        NotFoundException: The account no longer exists
    """
    user = await user_service.get_user_by_id(user_id)
    if not user:
        raise NotFoundException(message="User not found", code="USER_NOT_FOUND")

    saved, shared = await asyncio.gather(
        post_service.get_posts_by_ids(user.get("savedPosts") or []),
        post_service.get_posts_by_ids(user.get("sharedPosts") or []),
    )
    user["savedPosts"] = saved
    user["sharedPosts"] = shared

    return serialize_document(user, exclude=["password", "socialMediaAuth"])


async def get_public_profile_pipeline(user_service: UserService, username: str) -> Dict[str, Any]:
    return serialize_document(await user_service.get_public_profile(username))


async def get_user_posts_pipeline(
    user_service: UserService,
    post_service: PostService,
    username: str
) -> List[Dict[str, Any]]:
    """
    A user's posts, newest first.

    Raises:
        NotFoundException: Unknown username
    """
    user = await user_service.get_user_by_username(username)
    if not user:
        raise NotFoundException(message="User not found", code="USER_NOT_FOUND")

    posts = await post_service.get_posts_by_author(user["_id"])
    return [serialize_document(p) for p in posts]


async def update_goal_pipeline(user_service: UserService, user_id: str, goal: int) -> Dict[str, Any]:
    goal = await user_service.set_calorie_goal(user_id, goal)
    return {"message": "Goal updated successfully", "dailyCalorieGoal": goal}


async def update_profile_pipeline(
    user_service: UserService,
    user_id: str,
    profile_picture_url: Optional[str] = None,
    bio: Optional[str] = None,
    location: Optional[str] = None,
    social_links: Optional[Dict[str, str]] = None
) -> Dict[str, Any]:
    """
    Update profile fields and return the editable part of the profile.
    """
    user = await user_service.update_profile(
        user_id,
        {"profilePictureUrl": profile_picture_url, "bio": bio, "location": location},
        social_links=social_links,
    )

    profile = {
        key: user.get(key)
        for key in ("_id", "username", "email", "profilePictureUrl", "bio", "location", "socialLinks")
    }
    return {"message": "Profile updated successfully", "user": serialize_document(profile)}
