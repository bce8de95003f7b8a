"""
Nutrition score.

A 0-100 rating of the last week built from logging consistency, calorie
adherence, protein, water and variety.
"""

from collections import defaultdict
from typing import List, Dict, Any

from common.utils.dates import ensure_utc


BASE_SCORE = 70
SCORE_WINDOW_DAYS = 7

CALORIE_RANGE = (0.85, 1.15)


def nutrition_score(
    profile: Dict[str, Any],
    food_logs: List[Dict[str, Any]],
    behaviors: List[Dict[str, Any]]
) -> int:
    """
    Score a week of food logs and behavior entries.

    Args:
        profile: Nutrition profile (calorieGoal, proteinGoal)
        food_logs: Food logs from the scoring window
        behaviors: Behavior entries from the scoring window

    Returns:
        Integer score clamped to 0..100
    """
    score = BASE_SCORE

    calories_by_day: Dict[Any, float] = defaultdict(float)
    for log in food_logs:
        day = ensure_utc(log["createdAt"]).date()
        calories_by_day[day] += log.get("calories") or 0

    unique_days = len(calories_by_day)
    score += min(unique_days * 3, 15)

    calorie_goal = profile.get("calorieGoal")
    if calorie_goal:
        low, high = calorie_goal * CALORIE_RANGE[0], calorie_goal * CALORIE_RANGE[1]
        days_within = sum(1 for total in calories_by_day.values() if low <= total <= high)
        score += min(days_within * 2, 10)

    protein_goal = profile.get("proteinGoal")
    if protein_goal:
        total_protein = sum(log.get("protein") or 0 for log in food_logs)
        avg_protein = total_protein / max(unique_days, 1)
        if avg_protein / protein_goal >= 0.9:
            score += 5

    avg_water = sum(b.get("waterIntake") or 0 for b in behaviors) / max(len(behaviors), 1)
    if avg_water >= 8:
        score += 5
    elif avg_water >= 6:
        score += 3

    unique_foods = len({(log.get("foodName") or "").lower() for log in food_logs})
    if unique_foods >= 15:
        score += 5
    elif unique_foods >= 10:
        score += 3

    return round(max(0, min(100, score)))
