"""
Community post pipeline functions.
"""

import logging
from typing import List, Dict, Any

from common.utils.serialization import serialize_document
from rats.services.community.post_service import PostService
from rats.services.user.badge_service import BadgeService
from rats.services.user.user_service import UserService

logger = logging.getLogger(__name__)


async def create_post_pipeline(
    post_service: PostService,
    user_service: UserService,
    badge_service: BadgeService,
    user_id: str,
    data: Dict[str, Any],
    xp_reward: int
) -> Dict[str, Any]:
    """
    Publish a post, award XP and run the badge check.

    Returns:
        {"post": ..., "newBadges": [...]}
    """
    post = await post_service.create_post(user_id, data)

    await user_service.add_xp(user_id, xp_reward)
    new_badges = await badge_service.check_and_award(user_id)

    return {"post": serialize_document(post), "newBadges": new_badges}


async def get_feed_pipeline(post_service: PostService) -> List[Dict[str, Any]]:
    posts = await post_service.get_feed()
    return [serialize_document(p) for p in posts]


async def toggle_like_pipeline(post_service: PostService, post_id: str, user_id: str) -> Dict[str, Any]:
    return serialize_document(await post_service.toggle_like(post_id, user_id))


async def toggle_save_pipeline(
    post_service: PostService,
    user_service: UserService,
    post_id: str,
    user_id: str
) -> Dict[str, Any]:
    post_oid = await post_service.exists(post_id)
    saved = await user_service.toggle_saved_post(user_id, post_oid)
    return {"savedPosts": [str(oid) for oid in saved]}


async def add_comment_pipeline(
    post_service: PostService,
    post_id: str,
    user_id: str,
    text: str
) -> Dict[str, Any]:
    return serialize_document(await post_service.add_comment(post_id, user_id, text))


async def share_post_pipeline(
    post_service: PostService,
    user_service: UserService,
    post_id: str,
    user_id: str
) -> Dict[str, Any]:
    """Re-post and record the share on the user's profile."""
    shared = await post_service.share_post(post_id, user_id)
    await user_service.add_shared_post(user_id, shared["_id"])
    return serialize_document(shared)


async def delete_post_pipeline(
    post_service: PostService,
    user_service: UserService,
    post_id: str,
    user_id: str
) -> Dict[str, Any]:
    """
    Delete a post and its shares, then clean up saved/shared references.
    """
    deleted_ids = await post_service.delete_post(post_id, user_id)
    cleaned = await user_service.remove_post_references(deleted_ids)
    logger.debug(f"Removed references to {len(deleted_ids)} posts from {cleaned} users")
    return {"message": "Post deleted successfully"}
