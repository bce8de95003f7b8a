"""
FastAPI router for meditation endpoints.

Catalog browsing, session progress, custom meditations, the personal
library and recommendations. Static paths are declared before /{id}.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status

from common.utils import success_response
from common.utils.dates import parse_date
from rats.config import settings
from rats.dependencies import (
    require_auth,
    get_catalog_service,
    get_progress_service,
    get_custom_meditation_service,
    get_user_service,
    get_badge_service,
)
from rats.pipelines import meditation as pipelines
from rats.schemas.meditation import (
    RecordProgressRequest,
    CreateCustomMeditationRequest,
    UpdateCustomMeditationRequest,
    ContentTypeRequest,
    MeditationPreferencesRequest,
)
from rats.services.meditation.catalog_service import MeditationCatalogService
from rats.services.meditation.custom_meditation_service import CustomMeditationService
from rats.services.meditation.progress_service import MeditationProgressService
from rats.services.user.badge_service import BadgeService
from rats.services.user.user_service import UserService

router = APIRouter(prefix="/meditation", tags=["meditation"])


# =============================================================================
# Catalog
# =============================================================================

@router.get("")
async def list_meditations(
    user: Annotated[dict, Depends(require_auth)],
    catalog_service: Annotated[MeditationCatalogService, Depends(get_catalog_service)],
    category: Optional[str] = Query(None),
    level: Optional[str] = Query(None),
    isPremium: Optional[bool] = Query(None),
    duration: Optional[int] = Query(None, ge=1, description="Maximum minutes"),
    search: Optional[str] = Query(None),
):
    result = await pipelines.list_meditations_pipeline(
        catalog_service=catalog_service,
        category=category,
        level=level,
        is_premium=isPremium,
        max_duration=duration,
        search=search,
    )
    return success_response(result)


@router.get("/courses")
async def list_courses(
    user: Annotated[dict, Depends(require_auth)],
    catalog_service: Annotated[MeditationCatalogService, Depends(get_catalog_service)],
    level: Optional[str] = Query(None),
    isPremium: Optional[bool] = Query(None),
):
    result = await pipelines.list_courses_pipeline(
        catalog_service=catalog_service,
        level=level,
        is_premium=isPremium,
    )
    return success_response(result)


@router.get("/courses/{course_id}")
async def get_course(
    course_id: str,
    user: Annotated[dict, Depends(require_auth)],
    catalog_service: Annotated[MeditationCatalogService, Depends(get_catalog_service)],
):
    result = await pipelines.get_course_pipeline(catalog_service=catalog_service, course_id=course_id)
    return success_response(result)


@router.get("/sleep")
async def list_sleep_content(
    user: Annotated[dict, Depends(require_auth)],
    catalog_service: Annotated[MeditationCatalogService, Depends(get_catalog_service)],
    type: Optional[str] = Query(None, description="story | soundscape"),
    category: Optional[str] = Query(None),
    isPremium: Optional[bool] = Query(None),
):
    result = await pipelines.list_sleep_content_pipeline(
        catalog_service=catalog_service,
        content_type=type,
        category=category,
        is_premium=isPremium,
    )
    return success_response(result)


@router.get("/sleep/{content_id}")
async def get_sleep_content(
    content_id: str,
    user: Annotated[dict, Depends(require_auth)],
    catalog_service: Annotated[MeditationCatalogService, Depends(get_catalog_service)],
):
    result = await pipelines.get_sleep_content_pipeline(catalog_service=catalog_service, content_id=content_id)
    return success_response(result)


# =============================================================================
# Progress
# =============================================================================

@router.post("/progress", status_code=status.HTTP_201_CREATED)
async def record_progress(
    body: RecordProgressRequest,
    user: Annotated[dict, Depends(require_auth)],
    progress_service: Annotated[MeditationProgressService, Depends(get_progress_service)],
    catalog_service: Annotated[MeditationCatalogService, Depends(get_catalog_service)],
    user_service: Annotated[UserService, Depends(get_user_service)],
    badge_service: Annotated[BadgeService, Depends(get_badge_service)],
):
    """Record a completed session; updates stats, XP and badges."""
    result = await pipelines.record_progress_pipeline(
        progress_service=progress_service,
        catalog_service=catalog_service,
        user_service=user_service,
        badge_service=badge_service,
        user_id=str(user["_id"]),
        meditation_id=body.meditationId,
        content_type=body.contentType,
        duration=body.duration,
        mood=body.mood,
        mood_after=body.moodAfter,
        notes=body.notes,
        xp_reward=settings.XP_MEDITATION,
    )
    return success_response(result)


@router.get("/progress")
async def get_progress(
    user: Annotated[dict, Depends(require_auth)],
    progress_service: Annotated[MeditationProgressService, Depends(get_progress_service)],
    user_service: Annotated[UserService, Depends(get_user_service)],
    startDate: Optional[str] = Query(None, description="YYYY-MM-DD format"),
    endDate: Optional[str] = Query(None, description="YYYY-MM-DD format"),
):
    result = await pipelines.get_progress_pipeline(
        progress_service=progress_service,
        user_service=user_service,
        user_id=str(user["_id"]),
        start=parse_date(startDate) if startDate else None,
        end=parse_date(endDate) if endDate else None,
    )
    return success_response(result)


# =============================================================================
# Custom meditations
# =============================================================================

@router.post("/custom", status_code=status.HTTP_201_CREATED)
async def create_custom_meditation(
    body: CreateCustomMeditationRequest,
    user: Annotated[dict, Depends(require_auth)],
    custom_service: Annotated[CustomMeditationService, Depends(get_custom_meditation_service)],
):
    result = await pipelines.create_custom_pipeline(
        custom_service=custom_service,
        user_id=str(user["_id"]),
        data=body.model_dump(),
    )
    return success_response(result)


@router.get("/custom")
async def list_custom_meditations(
    user: Annotated[dict, Depends(require_auth)],
    custom_service: Annotated[CustomMeditationService, Depends(get_custom_meditation_service)],
):
    result = await pipelines.list_custom_pipeline(custom_service=custom_service, user_id=str(user["_id"]))
    return success_response(result)


@router.put("/custom/{custom_id}")
async def update_custom_meditation(
    custom_id: str,
    body: UpdateCustomMeditationRequest,
    user: Annotated[dict, Depends(require_auth)],
    custom_service: Annotated[CustomMeditationService, Depends(get_custom_meditation_service)],
):
    result = await pipelines.update_custom_pipeline(
        custom_service=custom_service,
        custom_id=custom_id,
        user_id=str(user["_id"]),
        fields=body.model_dump(exclude_none=True),
    )
    return success_response(result)


@router.delete("/custom/{custom_id}")
async def delete_custom_meditation(
    custom_id: str,
    user: Annotated[dict, Depends(require_auth)],
    custom_service: Annotated[CustomMeditationService, Depends(get_custom_meditation_service)],
):
    result = await pipelines.delete_custom_pipeline(
        custom_service=custom_service,
        custom_id=custom_id,
        user_id=str(user["_id"]),
    )
    return success_response(result)


# =============================================================================
# Library and recommendations
# =============================================================================

@router.get("/saved")
async def get_saved(
    user: Annotated[dict, Depends(require_auth)],
    catalog_service: Annotated[MeditationCatalogService, Depends(get_catalog_service)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    result = await pipelines.get_saved_pipeline(
        catalog_service=catalog_service,
        user_service=user_service,
        user_id=str(user["_id"]),
    )
    return success_response(result)


@router.get("/downloads")
async def get_downloads(
    user: Annotated[dict, Depends(require_auth)],
    catalog_service: Annotated[MeditationCatalogService, Depends(get_catalog_service)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    result = await pipelines.get_downloads_pipeline(
        catalog_service=catalog_service,
        user_service=user_service,
        user_id=str(user["_id"]),
    )
    return success_response(result)


@router.put("/preferences")
async def update_preferences(
    body: MeditationPreferencesRequest,
    user: Annotated[dict, Depends(require_auth)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    result = await pipelines.update_preferences_pipeline(
        user_service=user_service,
        user_id=str(user["_id"]),
        preferences=body.model_dump(exclude_none=True),
    )
    return success_response(result)


@router.get("/recommendations")
async def get_recommendations(
    user: Annotated[dict, Depends(require_auth)],
    catalog_service: Annotated[MeditationCatalogService, Depends(get_catalog_service)],
    user_service: Annotated[UserService, Depends(get_user_service)],
    mood: Optional[str] = Query(None),
):
    """Meditations for the user's level, duration and current mood."""
    result = await pipelines.recommendations_pipeline(
        catalog_service=catalog_service,
        user_service=user_service,
        user_id=str(user["_id"]),
        mood=mood,
    )
    return success_response(result)


@router.get("/{meditation_id}")
async def get_meditation(
    meditation_id: str,
    user: Annotated[dict, Depends(require_auth)],
    catalog_service: Annotated[MeditationCatalogService, Depends(get_catalog_service)],
):
    result = await pipelines.get_meditation_pipeline(catalog_service=catalog_service, meditation_id=meditation_id)
    return success_response(result)


@router.post("/{content_id}/save")
async def toggle_saved(
    content_id: str,
    body: ContentTypeRequest,
    user: Annotated[dict, Depends(require_auth)],
    catalog_service: Annotated[MeditationCatalogService, Depends(get_catalog_service)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    result = await pipelines.toggle_saved_pipeline(
        catalog_service=catalog_service,
        user_service=user_service,
        user_id=str(user["_id"]),
        content_id=content_id,
        content_type=body.contentType,
    )
    return success_response(result)


@router.post("/{content_id}/download")
async def download(
    content_id: str,
    body: ContentTypeRequest,
    user: Annotated[dict, Depends(require_auth)],
    catalog_service: Annotated[MeditationCatalogService, Depends(get_catalog_service)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    result = await pipelines.download_pipeline(
        catalog_service=catalog_service,
        user_service=user_service,
        user_id=str(user["_id"]),
        content_id=content_id,
        content_type=body.contentType,
    )
    return success_response(result)
