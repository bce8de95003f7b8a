"""Food logging services."""

from rats.services.food.food_log_service import FoodLogService, daily_totals, macro_percentages
from rats.services.food.streak import next_calorie_streak

__all__ = [
    "FoodLogService",
    "daily_totals",
    "macro_percentages",
    "next_calorie_streak",
]
