"""
Wellness log document.
"""

from typing import Optional

from beanie import Document, PydanticObjectId
from pymongo import ASCENDING, IndexModel


class WellnessLog(Document):
    """
    Daily wellness log.

    One log per user per day; date is "YYYY-MM-DD" (UTC).
    """

    user: PydanticObjectId
    date: str
    mood: Optional[str] = None
    sleepHours: Optional[float] = None
    waterIntake: Optional[float] = None
    activity: Optional[str] = None

    class Settings:
        name = "wellnessLogs"
        indexes = [
            IndexModel([("user", ASCENDING), ("date", ASCENDING)], unique=True, name="user_date_unique"),
        ]
