"""Unit tests for meditation stats and recommendations, nutrition score and event reminder helpers."""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock
from bson import ObjectId

from common.utils.exceptions import NotFoundException
from rats.pipelines.meditation import record_progress_pipeline
from rats.services.events.event_service import toggle_reminder_day, days_until, add_one_year
from rats.services.meditation.catalog_service import MeditationCatalogService
from rats.services.meditation.progress_service import next_meditation_stats
from rats.services.nutrition.score import nutrition_score, BASE_SCORE


# ─────────────────────────────────────────────────────────────────
# next_meditation_stats
# ─────────────────────────────────────────────────────────────────


class TestMeditationStats:
    def test_first_session_starts_streak(self, now):
        stats = next_meditation_stats(None, 10, "calm", now)

        assert stats["totalSessions"] == 1
        assert stats["totalMinutes"] == 10
        assert stats["currentStreak"] == 1
        assert stats["longestStreak"] == 1
        assert stats["lastMeditationDate"] == now
        assert stats["favoriteCategories"] == ["calm"]

    def test_consecutive_day_extends_streak(self, now):
        previous = {
            "totalSessions": 4,
            "totalMinutes": 40,
            "currentStreak": 4,
            "longestStreak": 4,
            "lastMeditationDate": now - timedelta(days=1),
            "favoriteCategories": ["calm"],
        }

        stats = next_meditation_stats(previous, 15, "calm", now)

        assert stats["currentStreak"] == 5
        assert stats["longestStreak"] == 5
        assert stats["favoriteCategories"] == ["calm"]

    def test_second_session_same_day_keeps_streak(self, now):
        previous = {"currentStreak": 3, "longestStreak": 6, "lastMeditationDate": now - timedelta(hours=3)}

        stats = next_meditation_stats(previous, 5, None, now)

        assert stats["currentStreak"] == 3
        assert stats["longestStreak"] == 6
        assert stats["totalSessions"] == 1

    def test_gap_resets_streak_but_keeps_longest(self, now):
        previous = {"currentStreak": 8, "longestStreak": 8, "lastMeditationDate": now - timedelta(days=4)}

        stats = next_meditation_stats(previous, 5, "sleep", now)

        assert stats["currentStreak"] == 1
        assert stats["longestStreak"] == 8

    def test_input_is_not_modified(self, now):
        previous = {"totalSessions": 1, "favoriteCategories": ["focus"]}

        next_meditation_stats(previous, 5, "sleep", now)

        assert previous == {"totalSessions": 1, "favoriteCategories": ["focus"]}


# ─────────────────────────────────────────────────────────────────
# nutrition_score
# ─────────────────────────────────────────────────────────────────


def _log(day, calories=0, protein=0, name="apple"):
    return {"createdAt": day, "calories": calories, "protein": protein, "foodName": name}


class TestNutritionScore:
    def test_base_score_without_data(self):
        assert nutrition_score({}, [], []) == BASE_SCORE

    def test_counts_distinct_days_not_logs(self, now):
        logs = [_log(now), _log(now), _log(now - timedelta(days=1))]

        # 2 days * 3
        assert nutrition_score({}, logs, []) == BASE_SCORE + 6

    def test_calorie_adherence_per_day(self, now):
        logs = [
            _log(now, calories=1000, name="oats"),
            _log(now, calories=1000, name="rice"),
            _log(now - timedelta(days=1), calories=500, name="soup"),
        ]

        # 2 days logged (+6), one of them within 85-115% of 2000 (+2)
        assert nutrition_score({"calorieGoal": 2000}, logs, []) == BASE_SCORE + 8

    def test_protein_water_and_variety(self, now):
        logs = [
            _log(now - timedelta(days=i % 5), protein=30, name=f"food {i}")
            for i in range(15)
        ]
        behaviors = [{"waterIntake": 8}, {"waterIntake": 9}]

        # 5 days (+15), protein 90/day vs goal 80 (+5), water (+5), 15 foods (+5)
        assert nutrition_score({"proteinGoal": 80}, logs, behaviors) == 100

    def test_moderate_water_and_variety(self, now):
        logs = [_log(now, name=f"food {i}") for i in range(10)]
        behaviors = [{"waterIntake": 6}]

        # 1 day (+3), water 6 (+3), 10 foods (+3)
        assert nutrition_score({}, logs, behaviors) == BASE_SCORE + 9

    def test_accepts_naive_datetimes(self):
        day = datetime(2025, 6, 15, 10, 0)

        assert nutrition_score({}, [_log(day)], []) == BASE_SCORE + 3


# ─────────────────────────────────────────────────────────────────
# Event helpers
# ─────────────────────────────────────────────────────────────────


class TestToggleReminderDay:
    def test_adds_missing_day_sorted(self):
        assert toggle_reminder_day([7, 1], 3) == [1, 3, 7]

    def test_removes_present_day(self):
        assert toggle_reminder_day([1, 3, 7], 3) == [1, 7]

    def test_handles_empty_list(self):
        assert toggle_reminder_day(None, 14) == [14]

    def test_drops_duplicates(self):
        assert toggle_reminder_day([1, 1, 7], 2) == [1, 2, 7]


class TestEventDates:
    def test_days_until_rounds_up(self, now):
        assert days_until(now + timedelta(days=6, hours=1), now) == 7

    def test_event_time_is_day_zero(self, now):
        assert days_until(now, now) == 0

    def test_past_event_is_negative(self, now):
        assert days_until(now - timedelta(days=2), now) == -2

    def test_add_one_year(self):
        value = datetime(2024, 3, 10, tzinfo=timezone.utc)
        assert add_one_year(value) == datetime(2025, 3, 10, tzinfo=timezone.utc)

    def test_leap_day_becomes_feb_28(self):
        value = datetime(2024, 2, 29, tzinfo=timezone.utc)
        assert add_one_year(value) == datetime(2025, 2, 28, tzinfo=timezone.utc)


# ─────────────────────────────────────────────────────────────────
# Meditation recommendations
# ─────────────────────────────────────────────────────────────────


class TestRecommend:
    @pytest.mark.asyncio
    async def test_mood_maps_to_categories(self, mock_db, collections, cursor_of):
        service = MeditationCatalogService(mock_db)
        picks = [{"_id": ObjectId(), "title": "Calm breath", "category": "calm"}]
        collections["meditations"].find.return_value = cursor_of(picks)

        result = await service.recommend(
            {"experienceLevel": "beginner", "preferredDuration": 10, "preferredTime": "morning"},
            mood="stressed",
        )

        assert result == {"meditations": picks, "sleepContent": []}
        collections["meditations"].find.assert_called_once_with({
            "level": "beginner",
            "duration": {"$lte": 10},
            "category": {"$in": ["calm", "anxiety"]},
        })
        collections["sleepContent"].find.assert_not_called()

    @pytest.mark.asyncio
    async def test_limits_to_five_meditations(self, mock_db, collections, cursor_of):
        service = MeditationCatalogService(mock_db)
        cursor = cursor_of([])
        collections["meditations"].find.return_value = cursor

        await service.recommend({}, mood="happy")

        cursor.sort.assert_called_once_with("isFeatured", -1)
        cursor.limit.assert_called_once_with(5)
        cursor.to_list.assert_awaited_once_with(length=5)

    @pytest.mark.asyncio
    async def test_unknown_mood_does_not_filter(self, mock_db, collections):
        service = MeditationCatalogService(mock_db)

        await service.recommend({}, mood="bored")

        collections["meditations"].find.assert_called_once_with({})

    @pytest.mark.asyncio
    async def test_evening_and_night_add_sleep_content(self, mock_db, collections, cursor_of):
        service = MeditationCatalogService(mock_db)
        stories = [{"_id": ObjectId(), "title": "Rain on the roof"}]

        for preferred_time in ("evening", "night"):
            sleep_cursor = cursor_of(stories)
            collections["sleepContent"].find.return_value = sleep_cursor

            result = await service.recommend({"preferredTime": preferred_time})

            assert result["sleepContent"] == stories
            sleep_cursor.limit.assert_called_once_with(3)


# ─────────────────────────────────────────────────────────────────
# record_progress_pipeline
# ─────────────────────────────────────────────────────────────────


class TestRecordProgress:
    @pytest.fixture
    def services(self):
        progress_service = AsyncMock()
        progress_service.record_session.return_value = {"_id": ObjectId(), "duration": 15}
        catalog_service = AsyncMock()
        catalog_service.find_content_category.return_value = "sleep"
        user_service = AsyncMock()
        badge_service = AsyncMock()
        badge_service.check_and_award.return_value = [{"name": "Zen Master", "icon": "🧘"}]
        return progress_service, catalog_service, user_service, badge_service

    @pytest.mark.asyncio
    async def test_awards_xp_and_appends_category(self, services, sample_user_id, now):
        progress_service, catalog_service, user_service, badge_service = services
        user_service.get_user_by_id.return_value = {
            "_id": ObjectId(sample_user_id),
            "meditationStats": {"totalSessions": 2, "totalMinutes": 20, "favoriteCategories": ["calm"]},
        }

        result = await record_progress_pipeline(
            progress_service, catalog_service, user_service, badge_service,
            sample_user_id, str(ObjectId()), "Meditation", 15, "calm", now=now,
        )

        user_service.add_xp.assert_awaited_once_with(sample_user_id, 20)
        stats = user_service.set_meditation_stats.call_args[0][1]
        assert stats["favoriteCategories"] == ["calm", "sleep"]
        assert stats["totalSessions"] == 3
        assert stats["totalMinutes"] == 35
        assert result["stats"]["lastMeditationDate"] == now.isoformat()
        assert result["newBadges"] == [{"name": "Zen Master", "icon": "🧘"}]

    @pytest.mark.asyncio
    async def test_known_category_is_not_repeated(self, services, sample_user_id, now):
        progress_service, catalog_service, user_service, badge_service = services
        user_service.get_user_by_id.return_value = {
            "_id": ObjectId(sample_user_id),
            "meditationStats": {"favoriteCategories": ["sleep"]},
        }

        await record_progress_pipeline(
            progress_service, catalog_service, user_service, badge_service,
            sample_user_id, str(ObjectId()), "SleepContent", 30, "tired", now=now,
        )

        assert user_service.set_meditation_stats.call_args[0][1]["favoriteCategories"] == ["sleep"]

    @pytest.mark.asyncio
    async def test_unknown_user_is_not_found(self, services, sample_user_id, now):
        progress_service, catalog_service, user_service, badge_service = services
        user_service.get_user_by_id.return_value = None

        with pytest.raises(NotFoundException):
            await record_progress_pipeline(
                progress_service, catalog_service, user_service, badge_service,
                sample_user_id, str(ObjectId()), "Meditation", 15, "calm", now=now,
            )

        progress_service.record_session.assert_not_called()
        user_service.add_xp.assert_not_called()
