"""
Badge service for gamification achievements.

Checks the award rules after XP-earning actions and records badges
that were newly earned.
"""

import logging
from typing import List, Dict, Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

logger = logging.getLogger(__name__)


BADGES: Dict[str, Dict[str, str]] = {
    # Task badges
    "FIRST_TASK": {"name": "Task Taker", "description": "Completed your first task."},
    "TEN_TASKS": {"name": "Task Master", "description": "Completed 10 tasks."},
    "FIRST_COLLAB": {"name": "Team Player", "description": "Completed a collaborative task."},

    # Wellness badges
    "STREAK_7": {"name": "Week-Long Warrior", "description": "Maintained a 7-day streak."},
    "STREAK_30": {"name": "Monthly Motivator", "description": "Maintained a 30-day streak."},
    "PERFECT_DAY": {
        "name": "Perfect Day",
        "description": "Met your calorie goal and completed at least one task.",
    },

    # Community badges
    "FIRST_POST": {"name": "Town Crier", "description": "Made your first post."},
    "LIKED_POST": {"name": "Good Neighbor", "description": "Liked 10 posts."},
}


class BadgeService:
    """
    Awards badges based on task, streak and post counts.

    Team Player, Perfect Day and Good Neighbor are defined but not yet awarded.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize BadgeService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._users_collection = db["users"]
        self._tasks_collection = db["tasks"]
        self._posts_collection = db["posts"]

    async def check_and_award(self, user_id: Any) -> List[Dict[str, str]]:
        """
        Evaluate every badge rule for a user and persist new badges.

        Reads the user fresh so earlier updates in the same request
        (streak, XP) are taken into account.

        Args:
            user_id: MongoDB user ID

        Returns:
            List of newly earned badges ({name, description}), possibly empty
        """
        oid = ObjectId(str(user_id))
        user = await self._users_collection.find_one({"_id": oid}, {"badges": 1, "streak": 1})
        if not user:
            return []

        owned = set(user.get("badges") or [])
        streak = user.get("streak") or 0
        new_badges: List[Dict[str, str]] = []

        def award(key: str) -> None:
            badge = BADGES[key]
            if badge["name"] not in owned:
                owned.add(badge["name"])
                new_badges.append(badge)

        needs_task_count = not {BADGES["FIRST_TASK"]["name"], BADGES["TEN_TASKS"]["name"]} <= owned
        if needs_task_count:
            completed = await self._tasks_collection.count_documents({"owner": oid, "isCompleted": True})
            if completed >= 1:
                award("FIRST_TASK")
            if completed >= 10:
                award("TEN_TASKS")

        if streak >= 7:
            award("STREAK_7")
        if streak >= 30:
            award("STREAK_30")

        if BADGES["FIRST_POST"]["name"] not in owned:
            post_count = await self._posts_collection.count_documents({"author": oid})
            if post_count >= 1:
                award("FIRST_POST")

        if new_badges:
            await self._users_collection.update_one(
                {"_id": oid},
                {"$addToSet": {"badges": {"$each": [b["name"] for b in new_badges]}}}
            )
            logger.info(f"User {user_id} earned badges: {[b['name'] for b in new_badges]}")

        return new_badges
