"""
Food recommendation service.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from common.utils.exceptions import NotFoundException, ForbiddenException
from common.utils.serialization import to_object_id

logger = logging.getLogger(__name__)


RECOMMENDATION_FIELDS = (
    "foodName",
    "category",
    "calories",
    "protein",
    "carbs",
    "fat",
    "fiber",
    "portion",
    "nutritionalBenefits",
    "whyRecommended",
    "bestTimeToConsume",
    "preparationMethods",
    "quickRecipe",
)


class FoodRecommendationService:
    """
    Stores generated food recommendations and user feedback on them.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize FoodRecommendationService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._recommendations_collection = db["foodRecommendations"]

    async def list_active(self, user_id: str) -> List[dict]:
        """Recommendations the user has not rejected."""
        cursor = self._recommendations_collection.find({
            "user": ObjectId(user_id),
            "rejected": {"$ne": True},
        })
        return await cursor.to_list(length=500)

    async def create_many(self, user_id: str, items: List[Dict[str, Any]]) -> List[dict]:
        """
        Persist generated recommendations.

        Args:
            user_id: Owner's MongoDB ID
            items: Parsed AI output; only known fields are kept
        """
        if not items:
            return []

        now = datetime.now(timezone.utc)
        docs = []
        for item in items:
            doc = {key: item.get(key) for key in RECOMMENDATION_FIELDS if key in item}
            doc.update({
                "user": ObjectId(user_id),
                "accepted": False,
                "rejected": False,
                "createdAt": now,
                "updatedAt": now,
            })
            docs.append(doc)

        result = await self._recommendations_collection.insert_many(docs)
        for doc, inserted_id in zip(docs, result.inserted_ids):
            doc["_id"] = inserted_id

        logger.info(f"Created {len(docs)} food recommendations for user {user_id}")
        return docs

    async def set_feedback(
        self,
        recommendation_id: str,
        user_id: str,
        accepted: Optional[bool] = None,
        rejected: Optional[bool] = None
    ) -> dict:
        """
        Record accept/reject feedback.

        Raises:
            NotFoundException: Unknown recommendation
            ForbiddenException: Recommendation belongs to another user
        """
        oid = to_object_id(recommendation_id, "Recommendation not found")
        recommendation = await self._recommendations_collection.find_one({"_id": oid})
        if not recommendation:
            raise NotFoundException(message="Recommendation not found", code="RECOMMENDATION_NOT_FOUND")
        if str(recommendation["user"]) != str(user_id):
            raise ForbiddenException(
                message="Not authorized to update this recommendation",
                code="RECOMMENDATION_FORBIDDEN"
            )

        set_fields: Dict[str, Any] = {"updatedAt": datetime.now(timezone.utc)}
        if accepted is not None:
            set_fields["accepted"] = accepted
        if rejected is not None:
            set_fields["rejected"] = rejected

        return await self._recommendations_collection.find_one_and_update(
            {"_id": oid},
            {"$set": set_fields},
            return_document=ReturnDocument.AFTER
        )
