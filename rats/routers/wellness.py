"""
FastAPI router for the daily wellness log.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from common.utils import success_response
from rats.dependencies import require_auth, get_wellness_service
from rats.pipelines import wellness as pipelines
from rats.schemas.wellness import WellnessLogRequest
from rats.services.wellness.wellness_service import WellnessService

router = APIRouter(prefix="/wellness", tags=["wellness"])


@router.post("")
async def log_wellness(
    body: WellnessLogRequest,
    user: Annotated[dict, Depends(require_auth)],
    wellness_service: Annotated[WellnessService, Depends(get_wellness_service)],
):
    """Create or update today's wellness log."""
    result = await pipelines.log_wellness_pipeline(
        wellness_service=wellness_service,
        user_id=str(user["_id"]),
        data=body.model_dump(exclude_none=True),
    )
    return success_response(result)


@router.get("/today")
async def get_today(
    user: Annotated[dict, Depends(require_auth)],
    wellness_service: Annotated[WellnessService, Depends(get_wellness_service)],
):
    """Today's log; data is null when nothing was logged yet."""
    result = await pipelines.get_today_wellness_pipeline(
        wellness_service=wellness_service,
        user_id=str(user["_id"]),
    )
    response = success_response(result)
    response.setdefault("data", None)
    return response
