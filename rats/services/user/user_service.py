"""
User service for account and profile data.

Handles user creation, lookup, profile updates and XP bookkeeping.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from common.utils.exceptions import BadRequestException, NotFoundException

logger = logging.getLogger(__name__)


PUBLIC_PROFILE_FIELDS = {
    "username": 1,
    "profilePictureUrl": 1,
    "bio": 1,
    "location": 1,
    "socialLinks": 1,
    "streak": 1,
    "xp": 1,
    "badges": 1,
    "createdAt": 1,
}

SOCIAL_LINK_KEYS = ("twitter", "instagram", "facebook", "linkedin", "website")


def _email_exists() -> BadRequestException:
    return BadRequestException(message="User with this email already exists", code="EMAIL_EXISTS")


def _username_taken() -> BadRequestException:
    return BadRequestException(message="This username is already taken", code="USERNAME_TAKEN")


class UserService:
    """
    Manages user accounts and profile data.
    """

    DEFAULT_CALORIE_GOAL = 2000

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize UserService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._users_collection = db["users"]

    async def create_user(
        self,
        email: str,
        username: str,
        password_hash: str
    ) -> dict:
        """
        Create a new user record with default profile and gamification fields.

        Args:
            email: User's email address
            username: Unique handle
            password_hash: bcrypt hash of the password

        Returns:
            Created user document (without password)

        Raises:
            BadRequestException: Email or username already in use
        """
        email = email.strip().lower()
        username = username.strip().lower()

        if await self._users_collection.find_one({"email": email}, {"_id": 1}):
            raise _email_exists()

        if await self._users_collection.find_one({"username": username}, {"_id": 1}):
            raise _username_taken()

        now = datetime.now(timezone.utc)
        user_doc = {
            "email": email,
            "username": username,
            "password": password_hash,
            "dailyCalorieGoal": self.DEFAULT_CALORIE_GOAL,
            "streak": 0,
            "lastStreakUpdate": None,
            "profilePictureUrl": "",
            "bio": "",
            "location": "",
            "socialLinks": {key: "" for key in SOCIAL_LINK_KEYS},
            "socialMediaAuth": {},
            "savedPosts": [],
            "sharedPosts": [],
            "xp": 0,
            "badges": [],
            "meditationPreferences": {
                "goals": [],
                "preferredDuration": 5,
                "experienceLevel": "beginner",
                "preferredTime": "morning",
                "reminders": False,
                "reminderTime": "08:00",
            },
            "meditationStats": {
                "totalSessions": 0,
                "totalMinutes": 0,
                "longestStreak": 0,
                "currentStreak": 0,
                "lastMeditationDate": None,
                "favoriteCategories": [],
            },
            "savedMeditations": [],
            "downloadedMeditations": [],
            "isPremium": False,
            "createdAt": now,
            "updatedAt": now,
        }

        try:
            result = await self._users_collection.insert_one(user_doc)
        except DuplicateKeyError as e:
            # Lost a race with a concurrent registration
            key_pattern = (e.details or {}).get("keyPattern") or {}
            if "username" in key_pattern:
                raise _username_taken()
            raise _email_exists()
        user_doc["_id"] = result.inserted_id

        logger.info(f"User created: {result.inserted_id}")
        user_doc.pop("password")
        return user_doc

    async def get_user_by_id(self, user_id: str, include_password: bool = False) -> Optional[dict]:
        """
        Load user by MongoDB ID.

        Args:
            user_id: MongoDB ObjectId as string
            include_password: Keep the password hash in the result

        Returns:
            User document or None if not found
        """
        try:
            oid = ObjectId(str(user_id))
        except (InvalidId, TypeError):
            return None

        projection = None if include_password else {"password": 0}
        return await self._users_collection.find_one({"_id": oid}, projection)

    async def get_user_by_email(self, email: str) -> Optional[dict]:
        """
        Load user by email address, including the password hash.

        Args:
            email: User's email address

        Returns:
            User document or None if not found
        """
        return await self._users_collection.find_one({"email": email.strip().lower()})

    async def get_user_by_username(self, username: str) -> Optional[dict]:
        """Case-insensitive username lookup (usernames are stored lowercase)."""
        return await self._users_collection.find_one(
            {"username": username.strip().lower()},
            {"password": 0}
        )

    async def get_public_profile(self, username: str) -> dict:
        """
        Get the public part of a user's profile.

        Raises:
            NotFoundException: Unknown username
        """
        user = await self._users_collection.find_one(
            {"username": username.strip().lower()},
            PUBLIC_PROFILE_FIELDS
        )
        if not user:
            raise NotFoundException(message="User not found", code="USER_NOT_FOUND")
        return user

    async def get_users_by_ids(
        self,
        user_ids: List[ObjectId],
        projection: Optional[Dict[str, int]] = None
    ) -> Dict[str, dict]:
        """
        Batch-load users keyed by str(_id).

        Args:
            user_ids: ObjectIds to load
            projection: Optional field projection

        Returns:
            Mapping of id string to user document
        """
        ids = list({oid for oid in user_ids if oid})
        if not ids:
            return {}

        cursor = self._users_collection.find(
            {"_id": {"$in": ids}},
            projection or {"username": 1, "profilePictureUrl": 1}
        )
        users = await cursor.to_list(length=len(ids))
        return {str(u["_id"]): u for u in users}

    async def set_calorie_goal(self, user_id: str, goal: int) -> int:
        """
        Update the daily calorie goal.

        Raises:
            BadRequestException: Negative goal
        """
        if goal is None or goal < 0:
            raise BadRequestException(
                message="Please provide a valid calorie goal.",
                code="INVALID_GOAL"
            )

        await self._users_collection.update_one(
            {"_id": ObjectId(user_id)},
            {"$set": {"dailyCalorieGoal": goal, "updatedAt": datetime.now(timezone.utc)}}
        )
        return goal

    async def update_profile(
        self,
        user_id: str,
        updates: Dict[str, Any],
        social_links: Optional[Dict[str, str]] = None
    ) -> dict:
        """
        Update profile fields; social links are merged key by key.

        Args:
            user_id: MongoDB user ID
            updates: Top-level fields (bio, location, profilePictureUrl)
            social_links: Partial socialLinks mapping

        Returns:
            Updated user document (without password)
        """
        set_fields: Dict[str, Any] = {
            key: value for key, value in updates.items() if value is not None
        }
        for key, value in (social_links or {}).items():
            if key in SOCIAL_LINK_KEYS and value is not None:
                set_fields[f"socialLinks.{key}"] = value.strip()

        set_fields["updatedAt"] = datetime.now(timezone.utc)

        user = await self._users_collection.find_one_and_update(
            {"_id": ObjectId(user_id)},
            {"$set": set_fields},
            projection={"password": 0},
            return_document=ReturnDocument.AFTER
        )
        if not user:
            raise NotFoundException(message="User not found", code="USER_NOT_FOUND")
        return user

    async def add_xp(self, user_id: Any, amount: int) -> None:
        """Increment a user's XP."""
        await self._users_collection.update_one(
            {"_id": ObjectId(str(user_id))},
            {"$inc": {"xp": amount}}
        )

    async def add_xp_many(self, user_ids: List[Any], amount: int) -> None:
        """Increment XP for several users at once."""
        ids = [ObjectId(str(uid)) for uid in user_ids]
        if not ids:
            return
        await self._users_collection.update_many(
            {"_id": {"$in": ids}},
            {"$inc": {"xp": amount}}
        )

    async def set_streak(self, user_id: Any, streak: int, updated_at: datetime) -> None:
        """Persist the calorie-goal streak."""
        await self._users_collection.update_one(
            {"_id": ObjectId(str(user_id))},
            {"$set": {"streak": streak, "lastStreakUpdate": updated_at}}
        )

    async def get_streak_leaderboard(self, limit: int = 100) -> List[dict]:
        """
        Users with an active streak, highest first.

        Returns:
            List of {username, streak}
        """
        cursor = self._users_collection.find(
            {"streak": {"$gt": 0}},
            {"_id": 0, "username": 1, "streak": 1}
        ).sort("streak", -1).limit(limit)
        return await cursor.to_list(length=limit)

    async def toggle_saved_post(self, user_id: str, post_id: ObjectId) -> List[ObjectId]:
        """
        Add or remove a post from the user's saved list.

        Returns:
            The updated savedPosts list
        """
        user = await self._users_collection.find_one(
            {"_id": ObjectId(user_id)},
            {"savedPosts": 1}
        )
        saved = (user or {}).get("savedPosts", [])
        operator = "$pull" if post_id in saved else "$addToSet"

        updated = await self._users_collection.find_one_and_update(
            {"_id": ObjectId(user_id)},
            {operator: {"savedPosts": post_id}},
            projection={"savedPosts": 1},
            return_document=ReturnDocument.AFTER
        )
        return (updated or {}).get("savedPosts", [])

    async def add_shared_post(self, user_id: str, post_id: ObjectId) -> None:
        await self._users_collection.update_one(
            {"_id": ObjectId(user_id)},
            {"$addToSet": {"sharedPosts": post_id}}
        )

    async def remove_post_references(self, post_ids: List[ObjectId]) -> int:
        """
        Pull deleted posts out of every user's saved and shared lists.

        Returns:
            Number of users modified
        """
        if not post_ids:
            return 0
        result = await self._users_collection.update_many(
            {"$or": [
                {"savedPosts": {"$in": post_ids}},
                {"sharedPosts": {"$in": post_ids}},
            ]},
            {"$pull": {
                "savedPosts": {"$in": post_ids},
                "sharedPosts": {"$in": post_ids},
            }}
        )
        return result.modified_count

    async def set_social_auth(self, user_id: str, platform: str, credentials: Dict[str, Any]) -> None:
        """Store OAuth credentials for a social platform."""
        await self._users_collection.update_one(
            {"_id": ObjectId(user_id)},
            {"$set": {f"socialMediaAuth.{platform}": credentials, "updatedAt": datetime.now(timezone.utc)}}
        )
        logger.info(f"Stored {platform} credentials for user {user_id}")

    async def clear_social_auth(self, user_id: str, platform: str) -> None:
        """Remove stored OAuth credentials for a social platform."""
        await self._users_collection.update_one(
            {"_id": ObjectId(user_id)},
            {"$unset": {f"socialMediaAuth.{platform}": ""}}
        )
        logger.info(f"Removed {platform} credentials for user {user_id}")

    # ─────────────────────────────────────────────────────────────────
    # Meditation library
    # ─────────────────────────────────────────────────────────────────

    async def set_meditation_stats(self, user_id: Any, stats: Dict[str, Any]) -> None:
        await self._users_collection.update_one(
            {"_id": ObjectId(str(user_id))},
            {"$set": {"meditationStats": stats, "updatedAt": datetime.now(timezone.utc)}}
        )

    async def toggle_saved_meditation(
        self,
        user_id: str,
        content_id: ObjectId,
        content_type: str
    ) -> bool:
        """
        Add or remove content from the saved meditations list.

        Returns:
            True when the content is saved after the call
        """
        user = await self._users_collection.find_one(
            {"_id": ObjectId(user_id)},
            {"savedMeditations": 1}
        )
        if not user:
            raise NotFoundException(message="User not found", code="USER_NOT_FOUND")

        was_saved = content_id in (user.get("savedMeditations") or [])
        operator = "$pull" if was_saved else "$addToSet"

        await self._users_collection.update_one(
            {"_id": ObjectId(user_id)},
            {
                operator: {"savedMeditations": content_id},
                "$set": {"meditationContentType": content_type},
            }
        )
        return not was_saved

    async def add_downloaded_meditation(
        self,
        user_id: str,
        content_id: ObjectId,
        content_type: str
    ) -> None:
        await self._users_collection.update_one(
            {"_id": ObjectId(user_id), "downloadedMeditations": {"$ne": content_id}},
            {
                "$push": {"downloadedMeditations": content_id},
                "$set": {"downloadContentType": content_type},
            }
        )

    async def update_meditation_preferences(
        self,
        user_id: str,
        preferences: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Partially update meditation preferences.

        Args:
            user_id: MongoDB user ID
            preferences: Only the supplied keys are changed

        Returns:
            The full preferences after the update
        """
        set_fields = {
            f"meditationPreferences.{key}": value
            for key, value in preferences.items()
            if value is not None
        }
        set_fields["updatedAt"] = datetime.now(timezone.utc)

        user = await self._users_collection.find_one_and_update(
            {"_id": ObjectId(user_id)},
            {"$set": set_fields},
            projection={"meditationPreferences": 1},
            return_document=ReturnDocument.AFTER
        )
        if not user:
            raise NotFoundException(message="User not found", code="USER_NOT_FOUND")
        return user.get("meditationPreferences") or {}
