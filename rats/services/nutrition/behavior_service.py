"""
Nutrition behavior service.

Daily eating-behavior journal entries, one per user per UTC day.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from common.utils.dates import day_range

logger = logging.getLogger(__name__)


BEHAVIOR_DEFAULTS: Dict[str, Any] = {
    "mealTiming": "somewhat_regular",
    "snackingFrequency": "occasional",
    "waterIntake": 6,
    "hungerLevels": {"morning": 5, "afternoon": 5, "evening": 5},
    "mood": "neutral",
    "stress": 5,
    "sleep": 5,
    "cravings": [],
    "eatingEnvironment": "home",
    "socialContext": "alone",
    "mindfulEating": 5,
    "notes": "",
}


class NutritionBehaviorService:
    """
    Stores and queries daily behavior entries.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize NutritionBehaviorService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._behaviors_collection = db["nutritionBehaviors"]

    async def upsert_for_today(
        self,
        user_id: str,
        data: Dict[str, Any],
        now: Optional[datetime] = None
    ) -> dict:
        """
        Create today's entry or update it with the supplied fields.

        Returns:
            The entry after the write
        """
        now = now or datetime.now(timezone.utc)
        start, end = day_range(now)

        updates = {key: value for key, value in data.items() if value is not None}
        defaults = {key: value for key, value in BEHAVIOR_DEFAULTS.items() if key not in updates}

        query = {"user": ObjectId(user_id), "date": {"$gte": start, "$lt": end}}
        update = {
            "$set": {**updates, "updatedAt": now},
            "$setOnInsert": {**defaults, "user": ObjectId(user_id), "date": start, "createdAt": now},
        }
        try:
            behavior = await self._behaviors_collection.find_one_and_update(
                query, update, upsert=True, return_document=ReturnDocument.AFTER
            )
        except DuplicateKeyError:
            # A concurrent request inserted today's entry first; update it instead
            behavior = await self._behaviors_collection.find_one_and_update(
                query, update, return_document=ReturnDocument.AFTER
            )

        logger.info(f"Nutrition behavior logged for user {user_id}")
        return behavior

    async def get_for_day(self, user_id: str, day: datetime) -> Optional[dict]:
        start, end = day_range(day)
        return await self._behaviors_collection.find_one({
            "user": ObjectId(user_id),
            "date": {"$gte": start, "$lt": end},
        })

    async def get_recent(self, user_id: str, limit: int = 7) -> List[dict]:
        """Latest entries, newest first."""
        cursor = self._behaviors_collection.find(
            {"user": ObjectId(user_id)}
        ).sort("date", -1).limit(limit)
        return await cursor.to_list(length=limit)

    async def get_since(self, user_id: str, since: datetime) -> List[dict]:
        """Entries dated at or after since, oldest first."""
        cursor = self._behaviors_collection.find({
            "user": ObjectId(user_id),
            "date": {"$gte": since},
        }).sort("date", 1)
        return await cursor.to_list(length=1000)
