"""
Food logging pipeline functions.

Shared by the calorie tracker and the nutrition food log: both award
XP, advance the calorie streak and run the badge check.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any

from common.utils.serialization import serialize_document
from rats.services.food.food_log_service import FoodLogService, daily_totals, macro_percentages
from rats.services.food.streak import next_calorie_streak
from rats.services.user.badge_service import BadgeService
from rats.services.user.user_service import UserService

logger = logging.getLogger(__name__)


async def log_food_pipeline(
    food_log_service: FoodLogService,
    user_service: UserService,
    badge_service: BadgeService,
    user_id: str,
    data: Dict[str, Any],
    xp_reward: int,
    now: Optional[datetime] = None
) -> Dict[str, Any]:
    """
    Record a food log and apply its gamification effects.

    Args:
        food_log_service: For persistence and today's calorie total
        user_service: For XP and streak updates
        badge_service: For the badge check
        user_id: Current user's ID
        data: Food log fields from the request
        xp_reward: XP for one log
        now: Clock override

    Returns:
        {"newLog": ..., "newBadges": [...]}
    """
    now = now or datetime.now(timezone.utc)
    new_log = await food_log_service.create_log(user_id, data)

    user = await user_service.get_user_by_id(user_id)
    new_badges: List[Dict[str, str]] = []

    if user:
        await user_service.add_xp(user_id, xp_reward)

        goal = user.get("dailyCalorieGoal")
        if goal:
            calories_today = await food_log_service.get_calories_for_day(user_id, now)
            streak = next_calorie_streak(
                user.get("streak") or 0,
                user.get("lastStreakUpdate"),
                calories_today,
                goal,
                now,
            )
            if streak is not None:
                await user_service.set_streak(user_id, streak, now)
                logger.info(f"Calorie streak for {user_id} is now {streak}")

        new_badges = await badge_service.check_and_award(user_id)

    return {"newLog": serialize_document(new_log), "newBadges": new_badges}


async def get_today_logs_pipeline(food_log_service: FoodLogService, user_id: str) -> List[Dict[str, Any]]:
    logs = await food_log_service.get_logs_for_day(user_id)
    return [serialize_document(log) for log in logs]


async def get_daily_summary_pipeline(
    food_log_service: FoodLogService,
    user_service: UserService,
    user_id: str
) -> Dict[str, Any]:
    """
    Today's nutrient totals, macro split and calories left against the goal.
    """
    logs = await food_log_service.get_logs_for_day(user_id)
    totals = daily_totals(logs)

    user = await user_service.get_user_by_id(user_id) or {}
    goal = user.get("dailyCalorieGoal") or UserService.DEFAULT_CALORIE_GOAL

    return {
        "totals": totals,
        "macroPercentages": macro_percentages(totals),
        "dailyCalorieGoal": goal,
        "remainingCalories": goal - totals["calories"],
        "logCount": len(logs),
    }


async def get_leaderboard_pipeline(user_service: UserService) -> List[Dict[str, Any]]:
    return await user_service.get_streak_leaderboard()
