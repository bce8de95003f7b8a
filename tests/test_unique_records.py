"""Unit tests for one-record-per-key rules: unique indexes and duplicate-key handling."""

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from common.utils.exceptions import BadRequestException
from rats.models import DOCUMENT_MODELS, NutritionBehavior, WellnessLog
from rats.services.nutrition.behavior_service import NutritionBehaviorService
from rats.services.user.user_service import UserService


def _unique_keys(model):
    return [
        list(index.document["key"].items())
        for index in model.Settings.indexes
        if index.document.get("unique")
    ]


# ─────────────────────────────────────────────────────────────────
# Document models
# ─────────────────────────────────────────────────────────────────


class TestDocumentModels:
    def test_daily_records_are_unique_per_user_and_day(self):
        assert _unique_keys(WellnessLog) == [[("user", 1), ("date", 1)]]
        assert _unique_keys(NutritionBehavior) == [[("user", 1), ("date", 1)]]

    def test_models_are_registered(self):
        names = {model.Settings.name for model in DOCUMENT_MODELS}

        assert names == {"users", "nutritionProfiles", "nutritionBehaviors", "wellnessLogs"}


# ─────────────────────────────────────────────────────────────────
# Registration races
# ─────────────────────────────────────────────────────────────────


class TestCreateUserDuplicates:
    @pytest.mark.asyncio
    async def test_duplicate_email_on_insert(self, mock_db, collections):
        service = UserService(mock_db)
        collections["users"].find_one.return_value = None
        collections["users"].insert_one.side_effect = DuplicateKeyError(
            "E11000 duplicate key error", 11000, {"keyPattern": {"email": 1}}
        )

        with pytest.raises(BadRequestException) as exc_info:
            await service.create_user(email="sam@example.com", username="sam", password_hash="hash")

        assert exc_info.value.message == "User with this email already exists"

    @pytest.mark.asyncio
    async def test_duplicate_username_on_insert(self, mock_db, collections):
        service = UserService(mock_db)
        collections["users"].find_one.return_value = None
        collections["users"].insert_one.side_effect = DuplicateKeyError(
            "E11000 duplicate key error", 11000, {"keyPattern": {"username": 1}}
        )

        with pytest.raises(BadRequestException) as exc_info:
            await service.create_user(email="sam@example.com", username="Sam", password_hash="hash")

        assert exc_info.value.message == "This username is already taken"

    @pytest.mark.asyncio
    async def test_stores_lowercase_identity(self, mock_db, collections):
        service = UserService(mock_db)
        collections["users"].find_one.return_value = None
        collections["users"].insert_one.return_value.inserted_id = ObjectId()

        user = await service.create_user(email=" Sam@Example.com ", username="Sam", password_hash="hash")

        assert user["email"] == "sam@example.com"
        assert user["username"] == "sam"
        assert "password" not in user


# ─────────────────────────────────────────────────────────────────
# Daily behavior upsert
# ─────────────────────────────────────────────────────────────────


class TestBehaviorUpsert:
    @pytest.mark.asyncio
    async def test_concurrent_insert_falls_back_to_update(self, mock_db, collections, sample_user_id, now):
        service = NutritionBehaviorService(mock_db)
        existing = {"_id": ObjectId(), "user": ObjectId(sample_user_id), "waterIntake": 8}
        collections["nutritionBehaviors"].find_one_and_update.side_effect = [
            DuplicateKeyError("E11000 duplicate key error", 11000),
            existing,
        ]

        behavior = await service.upsert_for_today(sample_user_id, {"waterIntake": 8}, now=now)

        assert behavior == existing
        first, second = collections["nutritionBehaviors"].find_one_and_update.call_args_list
        assert first[1]["upsert"] is True
        assert "upsert" not in second[1]
        assert second[0] == first[0]
