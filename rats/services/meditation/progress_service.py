"""
Meditation progress service.

Records completed sessions and maintains the per-user meditation stats.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from common.utils.dates import is_same_day, is_previous_day

logger = logging.getLogger(__name__)


EMPTY_STATS: Dict[str, Any] = {
    "totalSessions": 0,
    "totalMinutes": 0,
    "longestStreak": 0,
    "currentStreak": 0,
    "lastMeditationDate": None,
    "favoriteCategories": [],
}


def next_meditation_stats(
    stats: Optional[Dict[str, Any]],
    duration: int,
    category: Optional[str],
    now: datetime
) -> Dict[str, Any]:
    """
    Apply one completed session to a user's meditation stats.

    The streak grows when the previous session was yesterday, stays the
    same when it was today and restarts at 1 otherwise.

    Args:
        stats: Current meditationStats (may be None or partial)
        duration: Session length in minutes
        category: Category of the completed content, if known
        now: Completion time

    Returns:
        New stats dict (the input is not modified)
    """
    updated = {**EMPTY_STATS, **(stats or {})}
    updated["favoriteCategories"] = list(updated.get("favoriteCategories") or [])

    updated["totalSessions"] = (updated.get("totalSessions") or 0) + 1
    updated["totalMinutes"] = (updated.get("totalMinutes") or 0) + duration

    last = updated.get("lastMeditationDate")
    if is_previous_day(last, now):
        updated["currentStreak"] = (updated.get("currentStreak") or 0) + 1
    elif not is_same_day(last, now):
        updated["currentStreak"] = 1

    updated["longestStreak"] = max(updated.get("longestStreak") or 0, updated["currentStreak"])
    updated["lastMeditationDate"] = now

    if category and category not in updated["favoriteCategories"]:
        updated["favoriteCategories"].append(category)

    return updated


class MeditationProgressService:
    """
    Stores completed meditation sessions.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize MeditationProgressService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._progress_collection = db["meditationProgress"]
        self._meditations_collection = db["meditations"]

    async def record_session(
        self,
        user_id: str,
        meditation_id: ObjectId,
        content_type: str,
        duration: int,
        mood: str,
        mood_after: Optional[str] = None,
        notes: Optional[str] = None
    ) -> dict:
        """
        Insert a completed session.

        Returns:
            Created progress document
        """
        now = datetime.now(timezone.utc)
        doc = {
            "user": ObjectId(user_id),
            "meditation": meditation_id,
            "contentType": content_type,
            "completedAt": now,
            "duration": duration,
            "mood": mood,
            "moodAfter": mood_after,
            "notes": notes,
            "createdAt": now,
            "updatedAt": now,
        }

        result = await self._progress_collection.insert_one(doc)
        doc["_id"] = result.inserted_id

        logger.info(f"Meditation session recorded for user {user_id}: {duration} min")
        return doc

    async def list_sessions(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> List[dict]:
        """
        A user's sessions, newest first, with the meditation summary expanded.

        Args:
            user_id: Owner's MongoDB ID
            start: Earliest completedAt (inclusive)
            end: Latest completedAt (inclusive)
        """
        query: Dict[str, Any] = {"user": ObjectId(user_id)}
        if start or end:
            query["completedAt"] = {}
            if start:
                query["completedAt"]["$gte"] = start
            if end:
                query["completedAt"]["$lte"] = end

        cursor = self._progress_collection.find(query).sort("completedAt", -1)
        sessions = await cursor.to_list(length=1000)

        meditation_ids = list({s["meditation"] for s in sessions if isinstance(s.get("meditation"), ObjectId)})
        if meditation_ids:
            cursor = self._meditations_collection.find(
                {"_id": {"$in": meditation_ids}},
                {"title": 1, "duration": 1, "category": 1}
            )
            meditations = {m["_id"]: m for m in await cursor.to_list(length=len(meditation_ids))}
            for session in sessions:
                session["meditation"] = meditations.get(session.get("meditation"), session.get("meditation"))

        return sessions
