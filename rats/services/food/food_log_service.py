"""
Food log service.

Stores food diary entries and aggregates daily nutrition totals.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from common.utils.dates import day_range

logger = logging.getLogger(__name__)


NUTRIENT_FIELDS = ("calories", "protein", "carbs", "fat", "fiber", "sugar")

FOOD_LOG_DEFAULTS: Dict[str, Any] = {
    "portion": "1 serving",
    "mealType": "snack",
    "protein": 0,
    "carbs": 0,
    "fat": 0,
    "fiber": 0,
    "sugar": 0,
    "category": "Other",
    "mood": "Neutral",
    "hunger": 5,
    "fullness": 5,
    "location": "Home",
    "socialContext": "alone",
}


def daily_totals(logs: List[Dict[str, Any]]) -> Dict[str, float]:
    """
    Sum nutrients across food logs; missing or null fields count as 0.

    Args:
        logs: Food log documents

    Returns:
        Dict with a total per nutrient
    """
    totals = {field: 0 for field in NUTRIENT_FIELDS}
    for log in logs:
        for field in NUTRIENT_FIELDS:
            totals[field] += log.get(field) or 0
    return totals


def macro_percentages(totals: Dict[str, float]) -> Dict[str, int]:
    """
    Share of calories from protein, carbs and fat (4/4/9 kcal per gram).

    Returns:
        Rounded percentages; all zero when nothing was eaten
    """
    protein_kcal = (totals.get("protein") or 0) * 4
    carbs_kcal = (totals.get("carbs") or 0) * 4
    fat_kcal = (totals.get("fat") or 0) * 9
    macro_kcal = protein_kcal + carbs_kcal + fat_kcal

    if macro_kcal <= 0:
        return {"protein": 0, "carbs": 0, "fat": 0}

    return {
        "protein": round(protein_kcal / macro_kcal * 100),
        "carbs": round(carbs_kcal / macro_kcal * 100),
        "fat": round(fat_kcal / macro_kcal * 100),
    }


class FoodLogService:
    """
    Handles food log persistence and daily queries.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize FoodLogService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._food_logs_collection = db["foodLogs"]

    async def create_log(self, user_id: str, data: Dict[str, Any]) -> dict:
        """
        Insert a food log, filling schema defaults for omitted fields.

        Args:
            user_id: Owner's MongoDB ID
            data: foodName, calories and any optional fields

        Returns:
            Created food log document
        """
        now = datetime.now(timezone.utc)
        doc = {**FOOD_LOG_DEFAULTS}
        doc.update({key: value for key, value in data.items() if value is not None})
        doc.update({
            "user": ObjectId(user_id),
            "createdAt": now,
            "updatedAt": now,
        })

        result = await self._food_logs_collection.insert_one(doc)
        doc["_id"] = result.inserted_id

        logger.info(f"Food log created for user {user_id}: {doc.get('foodName')}")
        return doc

    async def get_logs_for_day(
        self,
        user_id: str,
        day: Optional[datetime] = None
    ) -> List[dict]:
        """
        Food logs created during one UTC day, newest first.

        Args:
            user_id: Owner's MongoDB ID
            day: Any moment in the wanted day (default: now)
        """
        start, end = day_range(day or datetime.now(timezone.utc))
        cursor = self._food_logs_collection.find({
            "user": ObjectId(user_id),
            "createdAt": {"$gte": start, "$lt": end},
        }).sort("createdAt", -1)
        return await cursor.to_list(length=500)

    async def get_logs_since(
        self,
        user_id: str,
        since: datetime,
        limit: int = 1000
    ) -> List[dict]:
        """Food logs created at or after since, newest first."""
        cursor = self._food_logs_collection.find({
            "user": ObjectId(user_id),
            "createdAt": {"$gte": since},
        }).sort("createdAt", -1).limit(limit)
        return await cursor.to_list(length=limit)

    async def get_recent_logs(self, user_id: str, limit: int = 20) -> List[dict]:
        cursor = self._food_logs_collection.find(
            {"user": ObjectId(user_id)}
        ).sort("createdAt", -1).limit(limit)
        return await cursor.to_list(length=limit)

    async def get_calories_for_day(self, user_id: str, day: Optional[datetime] = None) -> float:
        """Total calories logged during one UTC day."""
        logs = await self.get_logs_for_day(user_id, day)
        return daily_totals(logs)["calories"]
