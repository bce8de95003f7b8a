"""
Social media post service.

Tracks posts published or scheduled on external platforms.
"""

import logging
import random
import time
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

logger = logging.getLogger(__name__)


EMPTY_METRICS = {"likes": 0, "comments": 0, "shares": 0, "impressions": 0}


def generate_platform_post_id(prefix: str = "ig") -> str:
    """Identifier for a simulated publish: {prefix}_{epoch ms}_{0-999}."""
    return f"{prefix}_{int(time.time() * 1000)}_{random.randint(0, 999)}"


def simulated_metrics() -> Dict[str, int]:
    return {
        "likes": random.randint(0, 49),
        "comments": random.randint(0, 9),
        "shares": random.randint(0, 4),
        "impressions": random.randint(0, 199) + 50,
    }


class SocialPostService:
    """
    Persistence for socialMediaPosts.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize SocialPostService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._social_posts_collection = db["socialMediaPosts"]

    async def record_published(
        self,
        user_id: str,
        platform: str,
        content: str,
        platform_post_id: str,
        image_url: Optional[str] = None,
        event_id: Optional[Any] = None
    ) -> dict:
        now = datetime.now(timezone.utc)
        doc = {
            "user": ObjectId(user_id),
            "event": ObjectId(str(event_id)) if event_id else None,
            "platform": platform,
            "content": content,
            "imageUrl": image_url,
            "platformPostId": platform_post_id,
            "status": "published",
            "statusMessage": None,
            "scheduledFor": None,
            "publishedAt": now,
            "metrics": dict(EMPTY_METRICS),
            "createdAt": now,
            "updatedAt": now,
        }
        result = await self._social_posts_collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    async def record_scheduled(
        self,
        user_id: str,
        platform: str,
        content: str,
        scheduled_for: datetime,
        image_url: Optional[str] = None,
        event_id: Optional[Any] = None
    ) -> dict:
        now = datetime.now(timezone.utc)
        doc = {
            "user": ObjectId(user_id),
            "event": ObjectId(str(event_id)) if event_id else None,
            "platform": platform,
            "content": content,
            "imageUrl": image_url,
            "platformPostId": None,
            "status": "scheduled",
            "statusMessage": None,
            "scheduledFor": scheduled_for,
            "publishedAt": None,
            "metrics": dict(EMPTY_METRICS),
            "createdAt": now,
            "updatedAt": now,
        }
        result = await self._social_posts_collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    async def list_for_user(self, user_id: str) -> List[dict]:
        """A user's social posts, newest first."""
        cursor = self._social_posts_collection.find(
            {"user": ObjectId(user_id)}
        ).sort("createdAt", -1)
        return await cursor.to_list(length=500)

    async def find_by_platform_id(self, user_id: str, platform_post_id: str) -> Optional[dict]:
        return await self._social_posts_collection.find_one({
            "user": ObjectId(user_id),
            "platformPostId": platform_post_id,
        })

    async def set_metrics(self, post_id: ObjectId, metrics: Dict[str, int]) -> None:
        await self._social_posts_collection.update_one(
            {"_id": post_id},
            {"$set": {"metrics": metrics, "updatedAt": datetime.now(timezone.utc)}}
        )

    async def get_due_scheduled(self, now: datetime) -> List[dict]:
        """Scheduled posts whose time has come."""
        cursor = self._social_posts_collection.find({
            "status": "scheduled",
            "scheduledFor": {"$lte": now},
        })
        return await cursor.to_list(length=None)

    async def mark_published(self, post_id: ObjectId, platform_post_id: str, published_at: datetime) -> dict:
        return await self._social_posts_collection.find_one_and_update(
            {"_id": post_id},
            {"$set": {
                "status": "published",
                "publishedAt": published_at,
                "platformPostId": platform_post_id,
                "metrics": dict(EMPTY_METRICS),
                "updatedAt": published_at,
            }},
            return_document=ReturnDocument.AFTER
        )

    async def mark_failed(self, post_id: ObjectId, message: str) -> None:
        await self._social_posts_collection.update_one(
            {"_id": post_id},
            {"$set": {
                "status": "failed",
                "statusMessage": message,
                "updatedAt": datetime.now(timezone.utc),
            }}
        )
