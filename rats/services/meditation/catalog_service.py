"""
Meditation catalog service.

Read access to meditations, courses and sleep content, plus mood-based
recommendations.
"""

import logging
import re
from typing import Optional, List, Dict, Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from common.utils.exceptions import NotFoundException
from common.utils.serialization import to_object_id

logger = logging.getLogger(__name__)


CONTENT_TYPES = ("Meditation", "SleepContent")

MOOD_CATEGORIES: Dict[str, List[str]] = {
    "stressed": ["calm", "anxiety"],
    "anxious": ["anxiety", "calm"],
    "sad": ["love", "forgiveness"],
    "tired": ["focus", "calm"],
    "happy": ["focus", "love"],
}

COURSE_MEDITATION_FIELDS = {"title": 1, "duration": 1, "level": 1}
PROGRESS_MEDITATION_FIELDS = {"title": 1, "duration": 1, "category": 1}

RECOMMENDATION_LIMIT = 5
SLEEP_RECOMMENDATION_LIMIT = 3


def categories_for_mood(mood: Optional[str]) -> Optional[List[str]]:
    """Meditation categories suited to a mood, or None for no filter."""
    if not mood:
        return None
    return MOOD_CATEGORIES.get(mood)


class MeditationCatalogService:
    """
    Queries the meditation, course and sleep content collections.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize MeditationCatalogService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._meditations_collection = db["meditations"]
        self._courses_collection = db["meditationCourses"]
        self._sleep_collection = db["sleepContent"]

    # ─────────────────────────────────────────────────────────────────
    # Meditations
    # ─────────────────────────────────────────────────────────────────

    async def list_meditations(
        self,
        category: Optional[str] = None,
        level: Optional[str] = None,
        is_premium: Optional[bool] = None,
        max_duration: Optional[int] = None,
        search: Optional[str] = None
    ) -> List[dict]:
        """
        List meditations, featured first, then newest.

        Args:
            category: Exact category
            level: Exact level
            is_premium: Premium flag
            max_duration: Only meditations at most this many minutes long
            search: Case-insensitive text matched against title or description
        """
        query: Dict[str, Any] = {}
        if category:
            query["category"] = category
        if level:
            query["level"] = level
        if is_premium is not None:
            query["isPremium"] = is_premium
        if max_duration:
            query["duration"] = {"$lte": max_duration}
        if search:
            pattern = re.escape(search)
            query["$or"] = [
                {"title": {"$regex": pattern, "$options": "i"}},
                {"description": {"$regex": pattern, "$options": "i"}},
            ]

        cursor = self._meditations_collection.find(query).sort([("isFeatured", -1), ("createdAt", -1)])
        return await cursor.to_list(length=500)

    async def get_meditation(self, meditation_id: str) -> dict:
        oid = to_object_id(meditation_id, "Meditation not found")
        meditation = await self._meditations_collection.find_one({"_id": oid})
        if not meditation:
            raise NotFoundException(message="Meditation not found", code="MEDITATION_NOT_FOUND")
        return meditation

    async def get_meditations_by_ids(
        self,
        ids: List[ObjectId],
        projection: Optional[Dict[str, int]] = None
    ) -> List[dict]:
        """Load meditations keeping the order of ids; unknown ids are skipped."""
        if not ids:
            return []
        cursor = self._meditations_collection.find({"_id": {"$in": list(ids)}}, projection)
        found = {doc["_id"]: doc for doc in await cursor.to_list(length=len(ids))}
        return [found[oid] for oid in ids if oid in found]

    # ─────────────────────────────────────────────────────────────────
    # Courses
    # ─────────────────────────────────────────────────────────────────

    async def list_courses(
        self,
        level: Optional[str] = None,
        is_premium: Optional[bool] = None
    ) -> List[dict]:
        """List courses, newest first, with meditation summaries expanded."""
        query: Dict[str, Any] = {}
        if level:
            query["level"] = level
        if is_premium is not None:
            query["isPremium"] = is_premium

        cursor = self._courses_collection.find(query).sort("createdAt", -1)
        courses = await cursor.to_list(length=200)

        for course in courses:
            course["meditations"] = await self.get_meditations_by_ids(
                course.get("meditations") or [],
                COURSE_MEDITATION_FIELDS
            )
        return courses

    async def get_course(self, course_id: str) -> dict:
        """Load a course with its full meditations."""
        oid = to_object_id(course_id, "Course not found")
        course = await self._courses_collection.find_one({"_id": oid})
        if not course:
            raise NotFoundException(message="Course not found", code="COURSE_NOT_FOUND")

        course["meditations"] = await self.get_meditations_by_ids(course.get("meditations") or [])
        return course

    # ─────────────────────────────────────────────────────────────────
    # Sleep content
    # ─────────────────────────────────────────────────────────────────

    async def list_sleep_content(
        self,
        content_type: Optional[str] = None,
        category: Optional[str] = None,
        is_premium: Optional[bool] = None
    ) -> List[dict]:
        query: Dict[str, Any] = {}
        if content_type:
            query["type"] = content_type
        if category:
            query["category"] = category
        if is_premium is not None:
            query["isPremium"] = is_premium

        cursor = self._sleep_collection.find(query).sort("createdAt", -1)
        return await cursor.to_list(length=500)

    async def get_sleep_content(self, content_id: str) -> dict:
        oid = to_object_id(content_id, "Sleep content not found")
        content = await self._sleep_collection.find_one({"_id": oid})
        if not content:
            raise NotFoundException(message="Sleep content not found", code="SLEEP_CONTENT_NOT_FOUND")
        return content

    async def get_content(self, content_id: str, content_type: str) -> dict:
        """
        Load a meditation or a sleep item by content type.

        Raises:
            NotFoundException: "Content not found"
        """
        oid = to_object_id(content_id, "Content not found")
        collection = self._meditations_collection if content_type == "Meditation" else self._sleep_collection
        content = await collection.find_one({"_id": oid})
        if not content:
            raise NotFoundException(message="Content not found", code="CONTENT_NOT_FOUND")
        return content

    async def find_content_category(self, content_id: Any, content_type: str) -> Optional[str]:
        """Category of a meditation or sleep item, or None if it does not exist."""
        try:
            content = await self.get_content(content_id, content_type)
        except NotFoundException:
            return None
        return content.get("category")

    # ─────────────────────────────────────────────────────────────────
    # Recommendations
    # ─────────────────────────────────────────────────────────────────

    async def recommend(
        self,
        preferences: Dict[str, Any],
        mood: Optional[str] = None
    ) -> Dict[str, List[dict]]:
        """
        Suggest meditations for the user's level, duration and mood.

        Args:
            preferences: User's meditationPreferences
            mood: Current mood (stressed, anxious, sad, tired, happy)

        Returns:
            {"meditations": [...], "sleepContent": [...]}
        """
        query: Dict[str, Any] = {}
        if preferences.get("experienceLevel"):
            query["level"] = preferences["experienceLevel"]
        if preferences.get("preferredDuration"):
            query["duration"] = {"$lte": preferences["preferredDuration"]}

        categories = categories_for_mood(mood)
        if categories:
            query["category"] = {"$in": categories}

        cursor = self._meditations_collection.find(query).sort("isFeatured", -1).limit(RECOMMENDATION_LIMIT)
        meditations = await cursor.to_list(length=RECOMMENDATION_LIMIT)

        sleep_content: List[dict] = []
        if preferences.get("preferredTime") in ("evening", "night"):
            cursor = self._sleep_collection.find({}).sort("createdAt", -1).limit(SLEEP_RECOMMENDATION_LIMIT)
            sleep_content = await cursor.to_list(length=SLEEP_RECOMMENDATION_LIMIT)

        return {"meditations": meditations, "sleepContent": sleep_content}
