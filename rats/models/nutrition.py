"""
Nutrition documents: one profile per user, one behavior entry per user per day.
"""

from datetime import datetime
from typing import Optional

from beanie import Document, Indexed, PydanticObjectId
from pymongo import ASCENDING, DESCENDING, IndexModel


class NutritionProfile(Document):
    user: Indexed(PydanticObjectId, unique=True)  # type: ignore
    calorieGoal: Optional[float] = None
    proteinGoal: Optional[float] = None
    carbsGoal: Optional[float] = None
    fatGoal: Optional[float] = None
    dietType: Optional[str] = None

    class Settings:
        name = "nutritionProfiles"


class NutritionBehavior(Document):
    """Daily behavior entry; date is the UTC start of the day."""

    user: PydanticObjectId
    date: datetime
    waterIntake: Optional[float] = None
    snackingFrequency: Optional[str] = None

    class Settings:
        name = "nutritionBehaviors"
        indexes = [
            IndexModel([("user", ASCENDING), ("date", ASCENDING)], unique=True, name="user_date_unique"),
            IndexModel([("user", ASCENDING), ("date", DESCENDING)], name="user_recent"),
        ]
