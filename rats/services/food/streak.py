"""
Calorie-goal streak rule.

A streak day is counted once the day's calories reach the goal.
"""

from datetime import datetime
from typing import Optional

from common.utils.dates import is_same_day, is_previous_day


def next_calorie_streak(
    current_streak: int,
    last_update: Optional[datetime],
    calories_today: float,
    goal: Optional[float],
    now: datetime
) -> Optional[int]:
    """
    Compute the streak after a food log.

    Args:
        current_streak: Stored streak value
        last_update: When the streak was last counted
        calories_today: Total calories logged today, including the new log
        goal: Daily calorie goal
        now: Current time

    Returns:
        The new streak, or None when nothing changes (goal not reached,
        or today already counted)
    """
    if not goal or calories_today < goal:
        return None

    if is_same_day(last_update, now):
        return None

    if is_previous_day(last_update, now):
        return (current_streak or 0) + 1

    return 1
