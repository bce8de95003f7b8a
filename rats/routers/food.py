"""
FastAPI router for calorie tracking endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from common.utils import success_response
from rats.config import settings
from rats.dependencies import (
    require_auth,
    get_food_log_service,
    get_user_service,
    get_badge_service,
)
from rats.pipelines import food as pipelines
from rats.schemas.food import FoodLogRequest
from rats.services.food.food_log_service import FoodLogService
from rats.services.user.badge_service import BadgeService
from rats.services.user.user_service import UserService

router = APIRouter(prefix="/food", tags=["food"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def log_food(
    body: FoodLogRequest,
    user: Annotated[dict, Depends(require_auth)],
    food_log_service: Annotated[FoodLogService, Depends(get_food_log_service)],
    user_service: Annotated[UserService, Depends(get_user_service)],
    badge_service: Annotated[BadgeService, Depends(get_badge_service)],
):
    """
    Log a food item.

    Awards XP, advances the calorie streak once the goal is reached and
    runs the badge check.
    """
    result = await pipelines.log_food_pipeline(
        food_log_service=food_log_service,
        user_service=user_service,
        badge_service=badge_service,
        user_id=str(user["_id"]),
        data=body.model_dump(exclude_none=True),
        xp_reward=settings.XP_FOOD_LOG,
    )
    return success_response(result)


@router.get("/today")
async def get_today_logs(
    user: Annotated[dict, Depends(require_auth)],
    food_log_service: Annotated[FoodLogService, Depends(get_food_log_service)],
):
    result = await pipelines.get_today_logs_pipeline(
        food_log_service=food_log_service,
        user_id=str(user["_id"]),
    )
    return success_response(result)


@router.get("/summary")
async def get_daily_summary(
    user: Annotated[dict, Depends(require_auth)],
    food_log_service: Annotated[FoodLogService, Depends(get_food_log_service)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Today's totals, macro split and remaining calories."""
    result = await pipelines.get_daily_summary_pipeline(
        food_log_service=food_log_service,
        user_service=user_service,
        user_id=str(user["_id"]),
    )
    return success_response(result)


@router.get("/leaderboard")
async def get_leaderboard(
    user: Annotated[dict, Depends(require_auth)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    result = await pipelines.get_leaderboard_pipeline(user_service=user_service)
    return success_response(result)
