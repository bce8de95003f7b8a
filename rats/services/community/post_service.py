"""
Community post service.

Feed posts with likes, comments and re-shares.
"""

import logging
from datetime import datetime, timezone
from typing import List, Dict, Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from common.utils.exceptions import BadRequestException, NotFoundException, ForbiddenException
from common.utils.serialization import to_object_id

logger = logging.getLogger(__name__)


AUTHOR_FIELDS = {"username": 1, "profilePictureUrl": 1}
EVENT_POST_FIELDS = ("eventDate", "location", "imageUrl", "linkUrl")


class PostService:
    """
    Handles community posts and the author expansion used by the feed.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize PostService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._posts_collection = db["posts"]
        self._users_collection = db["users"]

    # ─────────────────────────────────────────────────────────────────
    # Expansion
    # ─────────────────────────────────────────────────────────────────

    async def _load_users(self, user_ids: List[Any]) -> Dict[Any, dict]:
        ids = list({uid for uid in user_ids if uid})
        if not ids:
            return {}
        cursor = self._users_collection.find({"_id": {"$in": ids}}, AUTHOR_FIELDS)
        return {u["_id"]: u for u in await cursor.to_list(length=len(ids))}

    async def expand(self, posts: List[dict]) -> List[dict]:
        """
        Replace author, comment user and sharedFrom ids with documents.

        sharedFrom is expanded to the original post with its author's username.
        """
        if not posts:
            return posts

        shared_ids = [p["sharedFrom"] for p in posts if p.get("sharedFrom")]
        originals: Dict[Any, dict] = {}
        if shared_ids:
            cursor = self._posts_collection.find({"_id": {"$in": shared_ids}})
            originals = {p["_id"]: p for p in await cursor.to_list(length=len(shared_ids))}

        user_ids = [p.get("author") for p in posts]
        user_ids += [c.get("user") for p in posts for c in p.get("comments") or []]
        user_ids += [o.get("author") for o in originals.values()]
        users = await self._load_users(user_ids)

        for post in posts:
            post["author"] = users.get(post.get("author"), post.get("author"))
            for comment in post.get("comments") or []:
                comment["user"] = users.get(comment.get("user"), comment.get("user"))

            original = originals.get(post.get("sharedFrom"))
            if original:
                author = users.get(original.get("author"))
                post["sharedFrom"] = {
                    **original,
                    "author": {"_id": original.get("author"), "username": (author or {}).get("username")},
                }

        return posts

    async def _expanded(self, post_id: ObjectId) -> dict:
        post = await self._posts_collection.find_one({"_id": post_id})
        return (await self.expand([post]))[0]

    # ─────────────────────────────────────────────────────────────────
    # Posts
    # ─────────────────────────────────────────────────────────────────

    async def _get_post(self, post_id: str) -> dict:
        oid = to_object_id(post_id, "Post not found")
        post = await self._posts_collection.find_one({"_id": oid})
        if not post:
            raise NotFoundException(message="Post not found", code="POST_NOT_FOUND")
        return post

    async def create_post(self, user_id: str, data: Dict[str, Any]) -> dict:
        """
        Create a post; event fields are only kept on event posts.

        Raises:
            BadRequestException: Empty content
        """
        content = (data.get("content") or "").strip()
        if not content:
            raise BadRequestException(message="Post content cannot be empty.", code="EMPTY_POST")

        post_type = data.get("type") or "general"
        now = datetime.now(timezone.utc)
        doc: Dict[str, Any] = {
            "author": ObjectId(user_id),
            "content": data["content"],
            "type": post_type,
            "likes": [],
            "comments": [],
            "sharedFrom": None,
            "createdAt": now,
            "updatedAt": now,
        }
        if post_type == "event":
            for key in EVENT_POST_FIELDS:
                if data.get(key):
                    doc[key] = data[key]

        result = await self._posts_collection.insert_one(doc)
        logger.info(f"Post created: {result.inserted_id} by {user_id}")
        return await self._expanded(result.inserted_id)

    async def get_feed(self) -> List[dict]:
        """All posts, newest first, expanded."""
        cursor = self._posts_collection.find({}).sort("createdAt", -1)
        return await self.expand(await cursor.to_list(length=1000))

    async def get_posts_by_author(self, author_id: Any) -> List[dict]:
        cursor = self._posts_collection.find({"author": author_id}).sort("createdAt", -1)
        return await self.expand(await cursor.to_list(length=1000))

    async def get_posts_by_ids(self, post_ids: List[ObjectId]) -> List[dict]:
        if not post_ids:
            return []
        cursor = self._posts_collection.find({"_id": {"$in": list(post_ids)}}).sort("createdAt", -1)
        return await self.expand(await cursor.to_list(length=len(post_ids)))

    async def toggle_like(self, post_id: str, user_id: str) -> dict:
        post = await self._get_post(post_id)
        uid = ObjectId(user_id)
        operator = "$pull" if uid in (post.get("likes") or []) else "$addToSet"

        await self._posts_collection.update_one({"_id": post["_id"]}, {operator: {"likes": uid}})
        return await self._expanded(post["_id"])

    async def add_comment(self, post_id: str, user_id: str, text: str) -> dict:
        """
        Raises:
            NotFoundException: Unknown post
            BadRequestException: Empty comment
        """
        post = await self._get_post(post_id)
        if not text or not text.strip():
            raise BadRequestException(message="Comment text cannot be empty.", code="EMPTY_COMMENT")

        comment = {"_id": ObjectId(), "user": ObjectId(user_id), "text": text, "createdAt": datetime.now(timezone.utc)}
        await self._posts_collection.update_one(
            {"_id": post["_id"]},
            {"$push": {"comments": comment}}
        )
        return await self._expanded(post["_id"])

    async def share_post(self, post_id: str, user_id: str) -> dict:
        """
        Re-post someone else's post.

        Raises:
            NotFoundException: Unknown post
            BadRequestException: Own post, or already shared
        """
        original = await self._get_post(post_id)
        uid = ObjectId(user_id)

        if original["author"] == uid:
            raise BadRequestException(message="You cannot share your own post.", code="SHARE_OWN_POST")

        if await self._posts_collection.find_one({"author": uid, "sharedFrom": original["_id"]}, {"_id": 1}):
            raise BadRequestException(message="You have already shared this post.", code="ALREADY_SHARED")

        now = datetime.now(timezone.utc)
        doc = {
            "author": uid,
            "content": original["content"],
            "type": original.get("type", "general"),
            "sharedFrom": original["_id"],
            "likes": [],
            "comments": [],
            "createdAt": now,
            "updatedAt": now,
        }
        for key in EVENT_POST_FIELDS:
            if original.get(key) is not None:
                doc[key] = original[key]

        result = await self._posts_collection.insert_one(doc)
        logger.info(f"Post {original['_id']} shared by {user_id} as {result.inserted_id}")
        return await self._expanded(result.inserted_id)

    async def delete_post(self, post_id: str, user_id: str) -> List[ObjectId]:
        """
        Delete an own post and every share of it.

        Returns:
            Ids of all deleted posts, for cleaning up user references

        Raises:
            NotFoundException: Unknown post
            ForbiddenException: Caller is not the author
        """
        post = await self._get_post(post_id)
        if str(post["author"]) != str(user_id):
            raise ForbiddenException(message="Not authorized to delete this post", code="POST_FORBIDDEN")

        cursor = self._posts_collection.find({"sharedFrom": post["_id"]}, {"_id": 1})
        share_ids = [p["_id"] for p in await cursor.to_list(length=None)]

        await self._posts_collection.delete_many({"sharedFrom": post["_id"]})
        await self._posts_collection.delete_one({"_id": post["_id"]})

        logger.info(f"Post deleted: {post['_id']} ({len(share_ids)} shares)")
        return [post["_id"], *share_ids]

    async def exists(self, post_id: str) -> ObjectId:
        """ObjectId of an existing post, raising 404 when missing."""
        post = await self._get_post(post_id)
        return post["_id"]
