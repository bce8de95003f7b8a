"""
Custom meditation service.

User-built meditation configurations (voice, breathwork, background sound).
"""

import logging
from datetime import datetime, timezone
from typing import List, Dict, Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from common.utils.exceptions import NotFoundException, ForbiddenException
from common.utils.serialization import to_object_id

logger = logging.getLogger(__name__)


class CustomMeditationService:
    """
    CRUD for a user's custom meditations.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize CustomMeditationService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._custom_collection = db["customMeditations"]

    async def create(self, user_id: str, data: Dict[str, Any]) -> dict:
        now = datetime.now(timezone.utc)
        doc = {
            "user": ObjectId(user_id),
            "name": data["name"].strip(),
            "introVoice": data["introVoice"],
            "breathworkType": data["breathworkType"],
            "backgroundSound": data["backgroundSound"],
            "duration": data["duration"],
            "isFavorite": False,
            "createdAt": now,
            "updatedAt": now,
        }
        result = await self._custom_collection.insert_one(doc)
        doc["_id"] = result.inserted_id

        logger.info(f"Custom meditation created: {result.inserted_id}")
        return doc

    async def list_for_user(self, user_id: str) -> List[dict]:
        """Favorites first, then newest."""
        cursor = self._custom_collection.find(
            {"user": ObjectId(user_id)}
        ).sort([("isFavorite", -1), ("createdAt", -1)])
        return await cursor.to_list(length=500)

    async def get_owned(self, custom_id: str, user_id: str) -> dict:
        """
        Load a custom meditation owned by user_id.

        Raises:
            NotFoundException: Unknown id
            ForbiddenException: Owned by someone else
        """
        oid = to_object_id(custom_id, "Custom meditation not found")
        doc = await self._custom_collection.find_one({"_id": oid})
        if not doc:
            raise NotFoundException(message="Custom meditation not found", code="CUSTOM_MEDITATION_NOT_FOUND")
        if str(doc["user"]) != str(user_id):
            raise ForbiddenException(message="Not authorized", code="CUSTOM_MEDITATION_FORBIDDEN")
        return doc

    async def update(self, custom_id: str, user_id: str, fields: Dict[str, Any]) -> dict:
        """
        Update the supplied fields of an owned custom meditation.

        Returns:
            Updated document
        """
        doc = await self.get_owned(custom_id, user_id)

        set_fields = {key: value for key, value in fields.items() if value is not None}
        set_fields["updatedAt"] = datetime.now(timezone.utc)

        return await self._custom_collection.find_one_and_update(
            {"_id": doc["_id"]},
            {"$set": set_fields},
            return_document=ReturnDocument.AFTER
        )

    async def delete(self, custom_id: str, user_id: str) -> None:
        doc = await self.get_owned(custom_id, user_id)
        await self._custom_collection.delete_one({"_id": doc["_id"]})
        logger.info(f"Custom meditation deleted: {doc['_id']}")
