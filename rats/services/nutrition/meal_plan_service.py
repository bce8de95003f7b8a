"""
Meal plan service.

Persists AI-generated daily meal plans.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Dict, Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from common.utils.dates import day_range
from common.utils.exceptions import NotFoundException, ForbiddenException
from common.utils.serialization import to_object_id

logger = logging.getLogger(__name__)


PLAN_FIELDS = ("totalCalories", "totalProtein", "totalCarbs", "totalFat", "meals", "notes")


class MealPlanService:
    """
    CRUD for meal plans.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize MealPlanService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._meal_plans_collection = db["mealPlans"]

    async def create_plan(self, user_id: str, date: datetime, plan_data: Dict[str, Any]) -> dict:
        """
        Store a generated plan.

        Args:
            user_id: Owner's MongoDB ID
            date: Day the plan is for
            plan_data: Parsed AI output; unknown keys are ignored
        """
        now = datetime.now(timezone.utc)
        doc = {
            "user": ObjectId(user_id),
            "date": date,
            "totalCalories": plan_data.get("totalCalories"),
            "totalProtein": plan_data.get("totalProtein"),
            "totalCarbs": plan_data.get("totalCarbs"),
            "totalFat": plan_data.get("totalFat"),
            "meals": plan_data.get("meals") or [],
            "notes": plan_data.get("notes"),
            "isActive": True,
            "createdAt": now,
            "updatedAt": now,
        }
        result = await self._meal_plans_collection.insert_one(doc)
        doc["_id"] = result.inserted_id

        logger.info(f"Meal plan created for user {user_id}: {result.inserted_id}")
        return doc

    async def get_plan_for_day(self, user_id: str, day: datetime) -> Optional[dict]:
        start, end = day_range(day)
        return await self._meal_plans_collection.find_one(
            {"user": ObjectId(user_id), "date": {"$gte": start, "$lt": end}},
            sort=[("createdAt", -1)]
        )

    async def update_plan(self, plan_id: str, user_id: str, fields: Dict[str, Any]) -> dict:
        """
        Update an owned plan.

        Raises:
            NotFoundException: Unknown plan
            ForbiddenException: Plan belongs to another user
        """
        oid = to_object_id(plan_id, "Meal plan not found")
        plan = await self._meal_plans_collection.find_one({"_id": oid})
        if not plan:
            raise NotFoundException(message="Meal plan not found", code="MEAL_PLAN_NOT_FOUND")
        if str(plan["user"]) != str(user_id):
            raise ForbiddenException(
                message="Not authorized to update this meal plan",
                code="MEAL_PLAN_FORBIDDEN"
            )

        set_fields = {key: value for key, value in fields.items() if value is not None}
        set_fields["updatedAt"] = datetime.now(timezone.utc)

        return await self._meal_plans_collection.find_one_and_update(
            {"_id": oid},
            {"$set": set_fields},
            return_document=ReturnDocument.AFTER
        )
