"""Unit tests for AI content fallbacks, food and nutrition pipelines, and endpoint functions called directly."""

import pytest
from datetime import timedelta
from unittest.mock import AsyncMock
from bson import ObjectId

from fastapi.responses import RedirectResponse

from common.ai.base import AIProviderError
from common.utils.exceptions import BadRequestException, InternalServerException
from rats.pipelines.food import log_food_pipeline
from rats.pipelines.nutrition import get_recommendations_pipeline
from rats.routers.nutrition import analyze_image, analyze_text
from rats.routers.social_auth import instagram_callback
from rats.routers.wellness import get_today
from rats.schemas.nutrition import AnalyzeImageRequest, AnalyzeTextRequest
from rats.services.events.event_content_generator import EventContentGenerator, fallback_message
from rats.services.nutrition.nutrition_coach import NutritionCoach, fallback_text_analysis


@pytest.fixture
def sample_user(sample_user_id):
    return {"_id": ObjectId(sample_user_id), "username": "sam"}


# ─────────────────────────────────────────────────────────────────
# EventContentGenerator
# ─────────────────────────────────────────────────────────────────


class TestEventContentGenerator:
    @pytest.mark.asyncio
    async def test_uses_ai_text_when_available(self):
        provider = AsyncMock()
        provider.chat.return_value = "Happy birthday, Jo!"
        generator = EventContentGenerator(ai_provider=provider)

        message = await generator.generate_message("birthday", "Jo", "sister", notes="loves hiking")

        assert message == "Happy birthday, Jo!"
        assert "loves hiking" in provider.chat.call_args[0][0]

    @pytest.mark.asyncio
    async def test_falls_back_to_template_on_ai_error(self):
        provider = AsyncMock()
        provider.chat.side_effect = AIProviderError("quota exceeded")
        generator = EventContentGenerator(ai_provider=provider)

        message, plan = await generator.generate_for_event({
            "eventType": "anniversary",
            "recipientName": "Alex",
            "recipientRelation": "partner",
        })

        assert message == fallback_message("anniversary", "Alex", "partner")
        assert message.startswith("Happy Anniversary, Alex!")
        assert "Alex" in plan

    @pytest.mark.asyncio
    async def test_without_provider_uses_templates(self):
        generator = EventContentGenerator(ai_provider=None)

        message = await generator.generate_message("graduation", "Kim", "friend")

        assert message.startswith("Thinking of you, Kim!")


# ─────────────────────────────────────────────────────────────────
# NutritionCoach
# ─────────────────────────────────────────────────────────────────


class TestNutritionCoach:
    @pytest.mark.asyncio
    async def test_food_text_fallback(self):
        assistant = AsyncMock()
        assistant.generate_ai_response.return_value = "Roughly 300 calories."
        coach = NutritionCoach(assistant)

        result = await coach.analyze_food_text("chicken wrap")

        assert result == fallback_text_analysis("chicken wrap")
        assert result["calories"] == 200

    @pytest.mark.asyncio
    async def test_meal_plan_requires_json(self, now):
        assistant = AsyncMock()
        assistant.generate_ai_response.return_value = "Eat more vegetables."
        coach = NutritionCoach(assistant)

        with pytest.raises(InternalServerException) as exc_info:
            await coach.generate_meal_plan({"calorieGoal": 2000}, {}, now)

        assert exc_info.value.message == "Failed to generate meal plan"

    @pytest.mark.asyncio
    async def test_recommendations_filter_non_objects(self):
        assistant = AsyncMock()
        assistant.generate_ai_response.return_value = '[{"foodName": "Lentils"}, "oops"]'
        coach = NutritionCoach(assistant)

        items = await coach.generate_recommendations({}, {})

        assert items == [{"foodName": "Lentils"}]


# ─────────────────────────────────────────────────────────────────
# Endpoint functions
# ─────────────────────────────────────────────────────────────────


class TestEndpoints:
    @pytest.mark.asyncio
    async def test_wellness_today_without_log_returns_null_data(self, sample_user):
        wellness_service = AsyncMock()
        wellness_service.get_today.return_value = None

        response = await get_today(user=sample_user, wellness_service=wellness_service)

        assert response == {"success": True, "data": None}

    @pytest.mark.asyncio
    async def test_instagram_callback_redirects(self):
        instagram_service = AsyncMock()
        instagram_service.complete_oauth.return_value = "user-1"

        response = await instagram_callback(instagram_service=instagram_service, code="abc", state="xyz")

        assert isinstance(response, RedirectResponse)
        assert response.headers["location"].endswith("/settings/social-accounts?connected=instagram")

    @pytest.mark.asyncio
    async def test_analyze_text_requires_text(self, sample_user):
        with pytest.raises(BadRequestException) as exc_info:
            await analyze_text(body=AnalyzeTextRequest(text="  "), user=sample_user, coach=AsyncMock())

        assert exc_info.value.message == "Food description is required"

    @pytest.mark.asyncio
    async def test_analyze_image_is_simulated(self, sample_user):
        response = await analyze_image(body=AnalyzeImageRequest(image="data:image/jpeg;base64,AAAA"), user=sample_user)

        assert response["data"]["totalNutrition"] == {"calories": 436, "protein": 39.7, "carbs": 56.2, "fat": 6}
        assert response["data"]["analysis"]["quality"] == 9

    @pytest.mark.asyncio
    async def test_analyze_image_requires_image(self, sample_user):
        with pytest.raises(BadRequestException):
            await analyze_image(body=AnalyzeImageRequest(), user=sample_user)


# ─────────────────────────────────────────────────────────────────
# log_food_pipeline
# ─────────────────────────────────────────────────────────────────


class TestLogFoodPipeline:
    @pytest.fixture
    def services(self):
        food_log_service = AsyncMock()
        food_log_service.create_log.return_value = {"_id": ObjectId(), "foodName": "Oatmeal", "calories": 300}
        user_service = AsyncMock()
        badge_service = AsyncMock()
        badge_service.check_and_award.return_value = []
        return food_log_service, user_service, badge_service

    @pytest.mark.asyncio
    async def test_reaching_goal_extends_streak(self, services, sample_user, sample_user_id, now):
        food_log_service, user_service, badge_service = services
        user_service.get_user_by_id.return_value = {
            **sample_user,
            "dailyCalorieGoal": 2000,
            "streak": 3,
            "lastStreakUpdate": now - timedelta(days=1),
        }
        food_log_service.get_calories_for_day.return_value = 2100
        badge_service.check_and_award.return_value = [{"name": "Week Warrior", "icon": "🔥"}]

        result = await log_food_pipeline(
            food_log_service, user_service, badge_service,
            sample_user_id, {"foodName": "Oatmeal"}, xp_reward=5, now=now,
        )

        user_service.add_xp.assert_awaited_once_with(sample_user_id, 5)
        user_service.set_streak.assert_awaited_once_with(sample_user_id, 4, now)
        assert result["newLog"]["foodName"] == "Oatmeal"
        assert result["newBadges"] == [{"name": "Week Warrior", "icon": "🔥"}]

    @pytest.mark.asyncio
    async def test_below_goal_keeps_streak(self, services, sample_user, sample_user_id, now):
        food_log_service, user_service, badge_service = services
        user_service.get_user_by_id.return_value = {**sample_user, "dailyCalorieGoal": 2000, "streak": 3}
        food_log_service.get_calories_for_day.return_value = 900

        await log_food_pipeline(
            food_log_service, user_service, badge_service,
            sample_user_id, {"foodName": "Oatmeal"}, xp_reward=5, now=now,
        )

        user_service.add_xp.assert_awaited_once_with(sample_user_id, 5)
        user_service.set_streak.assert_not_called()
        badge_service.check_and_award.assert_awaited_once_with(sample_user_id)

    @pytest.mark.asyncio
    async def test_missing_user_still_saves_log(self, services, sample_user_id, now):
        food_log_service, user_service, badge_service = services
        user_service.get_user_by_id.return_value = None

        result = await log_food_pipeline(
            food_log_service, user_service, badge_service,
            sample_user_id, {"foodName": "Oatmeal"}, xp_reward=5, now=now,
        )

        assert result["newBadges"] == []
        user_service.add_xp.assert_not_called()
        badge_service.check_and_award.assert_not_called()


# ─────────────────────────────────────────────────────────────────
# get_recommendations_pipeline
# ─────────────────────────────────────────────────────────────────


class TestNutritionRecommendationsPipeline:
    @pytest.fixture
    def services(self):
        recommendation_service = AsyncMock()
        profile_service = AsyncMock()
        profile_service.require_profile.return_value = {"dietType": "vegetarian", "calorieGoal": 1800}
        food_log_service = AsyncMock()
        food_log_service.get_recent_logs.return_value = []
        behavior_service = AsyncMock()
        behavior_service.get_recent.return_value = []
        coach = AsyncMock()
        return recommendation_service, profile_service, food_log_service, behavior_service, coach

    @pytest.mark.asyncio
    async def test_enough_active_recommendations_are_returned(self, services, sample_user_id):
        recommendation_service, profile_service, food_log_service, behavior_service, coach = services
        existing = [{"_id": ObjectId(), "foodName": f"Food {i}"} for i in range(5)]
        recommendation_service.list_active.return_value = existing

        result = await get_recommendations_pipeline(
            recommendation_service, profile_service, food_log_service, behavior_service, coach, sample_user_id
        )

        assert [r["foodName"] for r in result] == [f"Food {i}" for i in range(5)]
        profile_service.require_profile.assert_not_called()
        coach.generate_recommendations.assert_not_called()

    @pytest.mark.asyncio
    async def test_tops_up_when_fewer_than_five(self, services, sample_user_id):
        recommendation_service, profile_service, food_log_service, behavior_service, coach = services
        existing = [{"_id": ObjectId(), "foodName": "Lentil soup"}]
        items = [{"foodName": "Greek yogurt"}, {"foodName": "Chickpea salad"}]
        created = [{"_id": ObjectId(), **item} for item in items]
        recommendation_service.list_active.return_value = existing
        coach.generate_recommendations.return_value = items
        recommendation_service.create_many.return_value = created

        result = await get_recommendations_pipeline(
            recommendation_service, profile_service, food_log_service, behavior_service, coach, sample_user_id
        )

        assert [r["foodName"] for r in result] == ["Lentil soup", "Greek yogurt", "Chickpea salad"]
        recommendation_service.create_many.assert_awaited_once_with(sample_user_id, items)
        profile, context = coach.generate_recommendations.call_args[0]
        assert profile["dietType"] == "vegetarian"
        assert context["nutritionGoals"]["calorieGoal"] == 1800
