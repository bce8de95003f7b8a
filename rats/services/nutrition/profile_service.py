"""
Nutrition profile service.

One profile per user holding goals and dietary preferences.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Dict, Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from common.utils.exceptions import NotFoundException

logger = logging.getLogger(__name__)


PROFILE_DEFAULTS: Dict[str, Any] = {
    "calorieGoal": 2000,
    "proteinGoal": 50,
    "carbsGoal": 250,
    "fatGoal": 70,
    "dietType": "standard",
    "cuisinePreferences": [],
    "allergies": [],
    "intolerances": [],
    "dislikedFoods": [],
    "favoriteFoods": [],
    "weight": 70,
    "height": 170,
    "activityLevel": "moderately_active",
    "healthGoals": ["maintain weight"],
    "mealSizePreference": "medium_regular",
    "budgetLevel": "moderate",
    "cookingSkill": "intermediate",
    "cookingTime": "moderate",
    "region": "United States",
    "localFoodPreferences": [],
}


class NutritionProfileService:
    """
    Reads and upserts nutrition profiles.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize NutritionProfileService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._profiles_collection = db["nutritionProfiles"]

    async def upsert_profile(self, user_id: str, data: Dict[str, Any]) -> dict:
        """
        Create the user's profile or update the supplied fields.

        Defaults are only written when the profile is created.

        Returns:
            The profile after the write
        """
        now = datetime.now(timezone.utc)
        updates = {key: value for key, value in data.items() if value is not None}
        defaults = {key: value for key, value in PROFILE_DEFAULTS.items() if key not in updates}

        profile = await self._profiles_collection.find_one_and_update(
            {"user": ObjectId(user_id)},
            {
                "$set": {**updates, "updatedAt": now},
                "$setOnInsert": {**defaults, "user": ObjectId(user_id), "createdAt": now},
            },
            upsert=True,
            return_document=ReturnDocument.AFTER
        )

        logger.info(f"Nutrition profile saved for user {user_id}")
        return profile

    async def get_profile(self, user_id: str) -> Optional[dict]:
        return await self._profiles_collection.find_one({"user": ObjectId(user_id)})

    async def require_profile(self, user_id: str) -> dict:
        """
        Load the user's profile.

        Raises:
            NotFoundException: "Nutrition profile not found"
        """
        profile = await self.get_profile(user_id)
        if not profile:
            raise NotFoundException(message="Nutrition profile not found", code="NUTRITION_PROFILE_NOT_FOUND")
        return profile
