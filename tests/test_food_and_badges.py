"""Unit tests for food totals, the calorie streak rule and badge awards."""

import pytest
from datetime import datetime, timedelta, timezone
from bson import ObjectId

from rats.services.food.food_log_service import daily_totals, macro_percentages
from rats.services.food.streak import next_calorie_streak
from rats.services.user.badge_service import BadgeService, BADGES


# ─────────────────────────────────────────────────────────────────
# daily_totals / macro_percentages
# ─────────────────────────────────────────────────────────────────


class TestDailyTotals:
    def test_sums_every_nutrient(self):
        logs = [
            {"calories": 300, "protein": 20, "carbs": 30, "fat": 10, "fiber": 4, "sugar": 6},
            {"calories": 200, "protein": 5, "carbs": 25, "fat": 8, "fiber": 1, "sugar": 12},
        ]

        totals = daily_totals(logs)

        assert totals == {
            "calories": 500, "protein": 25, "carbs": 55, "fat": 18, "fiber": 5, "sugar": 18,
        }

    def test_missing_and_null_fields_count_as_zero(self):
        logs = [{"calories": 120}, {"calories": None, "protein": 7}]

        totals = daily_totals(logs)

        assert totals["calories"] == 120
        assert totals["protein"] == 7
        assert totals["fat"] == 0

    def test_no_logs_gives_zeroes(self):
        assert all(value == 0 for value in daily_totals([]).values())


class TestMacroPercentages:
    def test_weights_fat_at_nine_kcal(self):
        # 50g protein = 200 kcal, 50g carbs = 200 kcal, 0g fat
        assert macro_percentages({"protein": 50, "carbs": 50, "fat": 0}) == {
            "protein": 50, "carbs": 50, "fat": 0,
        }

    def test_rounds_percentages(self):
        # 120 / 120 / 180 kcal of 420
        result = macro_percentages({"protein": 30, "carbs": 30, "fat": 20})
        assert result == {"protein": 29, "carbs": 29, "fat": 43}

    def test_nothing_eaten_gives_zeroes(self):
        assert macro_percentages({"protein": 0, "carbs": 0, "fat": 0}) == {
            "protein": 0, "carbs": 0, "fat": 0,
        }


# ─────────────────────────────────────────────────────────────────
# next_calorie_streak
# ─────────────────────────────────────────────────────────────────


class TestCalorieStreak:
    def test_no_change_below_goal(self, now):
        assert next_calorie_streak(3, now - timedelta(days=1), 1500, 2000, now) is None

    def test_no_change_without_goal(self, now):
        assert next_calorie_streak(3, now - timedelta(days=1), 2500, None, now) is None

    def test_no_change_when_today_already_counted(self, now):
        assert next_calorie_streak(3, now - timedelta(hours=2), 2100, 2000, now) is None

    def test_extends_when_last_counted_yesterday(self, now):
        assert next_calorie_streak(3, now - timedelta(days=1), 2000, 2000, now) == 4

    def test_restarts_after_a_gap(self, now):
        assert next_calorie_streak(9, now - timedelta(days=3), 2000, 2000, now) == 1

    def test_starts_at_one_for_first_goal_day(self, now):
        assert next_calorie_streak(0, None, 2200, 2000, now) == 1

    def test_day_boundaries_are_utc(self):
        now = datetime(2025, 6, 15, 0, 30, tzinfo=timezone.utc)
        last = datetime(2025, 6, 14, 23, 50, tzinfo=timezone.utc)
        assert next_calorie_streak(2, last, 2000, 2000, now) == 3


# ─────────────────────────────────────────────────────────────────
# BadgeService
# ─────────────────────────────────────────────────────────────────


class TestBadgeService:
    @pytest.mark.asyncio
    async def test_awards_first_task_and_week_streak(self, mock_db, collections, sample_user_id):
        service = BadgeService(mock_db)
        collections["users"].find_one.return_value = {"_id": ObjectId(sample_user_id), "badges": [], "streak": 7}
        collections["tasks"].count_documents.return_value = 1
        collections["posts"].count_documents.return_value = 0

        new_badges = await service.check_and_award(sample_user_id)

        names = [b["name"] for b in new_badges]
        assert names == [BADGES["FIRST_TASK"]["name"], BADGES["STREAK_7"]["name"]]
        update = collections["users"].update_one.call_args[0][1]
        assert update == {"$addToSet": {"badges": {"$each": names}}}

    @pytest.mark.asyncio
    async def test_does_not_award_owned_badges_again(self, mock_db, collections, sample_user_id):
        service = BadgeService(mock_db)
        collections["users"].find_one.return_value = {
            "_id": ObjectId(sample_user_id),
            "badges": [
                BADGES["FIRST_TASK"]["name"],
                BADGES["STREAK_7"]["name"],
                BADGES["FIRST_POST"]["name"],
            ],
            "streak": 8,
        }
        collections["tasks"].count_documents.return_value = 3

        new_badges = await service.check_and_award(sample_user_id)

        assert new_badges == []
        collections["users"].update_one.assert_not_called()
        collections["posts"].count_documents.assert_not_called()

    @pytest.mark.asyncio
    async def test_first_post_and_ten_tasks(self, mock_db, collections, sample_user_id):
        service = BadgeService(mock_db)
        collections["users"].find_one.return_value = {"_id": ObjectId(sample_user_id), "badges": [], "streak": 0}
        collections["tasks"].count_documents.return_value = 10
        collections["posts"].count_documents.return_value = 2

        new_badges = await service.check_and_award(sample_user_id)

        assert {b["name"] for b in new_badges} == {
            BADGES["FIRST_TASK"]["name"],
            BADGES["TEN_TASKS"]["name"],
            BADGES["FIRST_POST"]["name"],
        }

    @pytest.mark.asyncio
    async def test_unknown_user_earns_nothing(self, mock_db, collections, sample_user_id):
        service = BadgeService(mock_db)
        collections["users"].find_one.return_value = None

        assert await service.check_and_award(sample_user_id) == []
