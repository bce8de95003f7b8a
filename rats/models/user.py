"""
User document.

Services read and write the users collection through Motor; this model
declares the collection's unique indexes for Beanie to create at startup.
"""

from datetime import datetime, timezone
from typing import Optional, List

from beanie import Document, Indexed, PydanticObjectId
from pydantic import Field


class User(Document):
    """Registered account. Email and username are unique and stored lowercase."""

    email: Indexed(str, unique=True)  # type: ignore
    username: Indexed(str, unique=True)  # type: ignore
    password: str

    dailyCalorieGoal: int = 2000
    streak: int = 0
    lastStreakUpdate: Optional[datetime] = None
    xp: int = 0
    badges: List[dict] = Field(default_factory=list)
    savedPosts: List[PydanticObjectId] = Field(default_factory=list)
    sharedPosts: List[PydanticObjectId] = Field(default_factory=list)

    createdAt: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updatedAt: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Settings:
        name = "users"
