"""
Daily wellness log service.

One log per user per day, keyed by the YYYY-MM-DD date string.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Dict, Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from common.utils.dates import today_string

logger = logging.getLogger(__name__)


WELLNESS_FIELDS = ("mood", "sleepHours", "waterIntake", "activity")
MOODS = ("sad", "neutral", "happy", "excited")


class WellnessService:
    """
    Stores mood, sleep, water and activity for the current day.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize WellnessService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._wellness_collection = db["wellnessLogs"]

    async def log_today(
        self,
        user_id: str,
        data: Dict[str, Any],
        now: Optional[datetime] = None
    ) -> dict:
        """
        Create or update today's log.

        Only the fields present in data are written.

        Args:
            user_id: Owner
            data: Any of mood, sleepHours, waterIntake, activity
            now: Clock override

        Returns:
            The log after the update
        """
        now = now or datetime.now(timezone.utc)
        date = today_string(now)

        set_fields: Dict[str, Any] = {k: data[k] for k in WELLNESS_FIELDS if data.get(k) is not None}
        set_fields["updatedAt"] = now

        log = await self._wellness_collection.find_one_and_update(
            {"user": ObjectId(user_id), "date": date},
            {
                "$set": set_fields,
                "$setOnInsert": {"createdAt": now},
            },
            upsert=True,
            return_document=ReturnDocument.AFTER
        )

        logger.debug(f"Wellness log for {user_id} on {date} saved")
        return log

    async def get_today(self, user_id: str, now: Optional[datetime] = None) -> Optional[dict]:
        """Today's log, or None when nothing was logged yet."""
        return await self._wellness_collection.find_one({
            "user": ObjectId(user_id),
            "date": today_string(now),
        })
