"""
Meditation pipeline functions.

Catalog reads, session logging with stats/XP/badges, the personal
library (saved and downloaded content) and recommendations.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any

from common.utils.exceptions import BadRequestException, NotFoundException
from common.utils.serialization import serialize_document, to_object_id
from rats.services.meditation.catalog_service import MeditationCatalogService
from rats.services.meditation.custom_meditation_service import CustomMeditationService
from rats.services.meditation.progress_service import (
    MeditationProgressService,
    next_meditation_stats,
)
from rats.services.user.badge_service import BadgeService
from rats.services.user.user_service import UserService

logger = logging.getLogger(__name__)


def _serialize_all(docs: List[dict]) -> List[Dict[str, Any]]:
    return [serialize_document(d) for d in docs]


def _require_content_type(content_type: Optional[str]) -> str:
    if not content_type:
        raise BadRequestException(message="Content type is required", code="CONTENT_TYPE_REQUIRED")
    return content_type


# =============================================================================
# Catalog
# =============================================================================

async def list_meditations_pipeline(
    catalog_service: MeditationCatalogService,
    category: Optional[str] = None,
    level: Optional[str] = None,
    is_premium: Optional[bool] = None,
    max_duration: Optional[int] = None,
    search: Optional[str] = None
) -> List[Dict[str, Any]]:
    meditations = await catalog_service.list_meditations(
        category=category,
        level=level,
        is_premium=is_premium,
        max_duration=max_duration,
        search=search,
    )
    return _serialize_all(meditations)


async def get_meditation_pipeline(catalog_service: MeditationCatalogService, meditation_id: str) -> Dict[str, Any]:
    return serialize_document(await catalog_service.get_meditation(meditation_id))


async def list_courses_pipeline(
    catalog_service: MeditationCatalogService,
    level: Optional[str] = None,
    is_premium: Optional[bool] = None
) -> List[Dict[str, Any]]:
    return _serialize_all(await catalog_service.list_courses(level=level, is_premium=is_premium))


async def get_course_pipeline(catalog_service: MeditationCatalogService, course_id: str) -> Dict[str, Any]:
    return serialize_document(await catalog_service.get_course(course_id))


async def list_sleep_content_pipeline(
    catalog_service: MeditationCatalogService,
    content_type: Optional[str] = None,
    category: Optional[str] = None,
    is_premium: Optional[bool] = None
) -> List[Dict[str, Any]]:
    items = await catalog_service.list_sleep_content(
        content_type=content_type,
        category=category,
        is_premium=is_premium,
    )
    return _serialize_all(items)


async def get_sleep_content_pipeline(catalog_service: MeditationCatalogService, content_id: str) -> Dict[str, Any]:
    return serialize_document(await catalog_service.get_sleep_content(content_id))


# =============================================================================
# Progress
# =============================================================================

async def record_progress_pipeline(
    progress_service: MeditationProgressService,
    catalog_service: MeditationCatalogService,
    user_service: UserService,
    badge_service: BadgeService,
    user_id: str,
    meditation_id: str,
    content_type: str,
    duration: int,
    mood: str,
    mood_after: Optional[str] = None,
    notes: Optional[str] = None,
    xp_reward: int = 20,
    now: Optional[datetime] = None
) -> Dict[str, Any]:
    """
    Record a completed session and update stats, XP and badges.

    Args:
        progress_service: For the session record
        catalog_service: For the content's category
        user_service: For stats and XP
        badge_service: For the badge check
        user_id: Current user's ID
        meditation_id: Meditation or sleep content ID
        content_type: "Meditation" or "SleepContent"
        duration: Minutes meditated
        mood: Mood before the session
        mood_after: Mood after the session
        notes: Free text
        xp_reward: XP for one session
        now: Clock override

    Returns:
        {"progress": ..., "stats": ..., "newBadges": [...]}

    Raises:
        NotFoundException: The account no longer exists
    """
    now = now or datetime.now(timezone.utc)

    user = await user_service.get_user_by_id(user_id)
    if not user:
        raise NotFoundException(message="User not found", code="USER_NOT_FOUND")

    content_oid = to_object_id(meditation_id, "Content not found")
    progress = await progress_service.record_session(
        user_id,
        content_oid,
        content_type,
        duration,
        mood,
        mood_after=mood_after,
        notes=notes,
    )

    category = await catalog_service.find_content_category(content_oid, content_type)
    stats = next_meditation_stats(user.get("meditationStats"), duration, category, now)

    await user_service.set_meditation_stats(user_id, stats)
    await user_service.add_xp(user_id, xp_reward)
    new_badges = await badge_service.check_and_award(user_id)

    return {
        "progress": serialize_document(progress),
        "stats": serialize_document(stats),
        "newBadges": new_badges,
    }


async def get_progress_pipeline(
    progress_service: MeditationProgressService,
    user_service: UserService,
    user_id: str,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None
) -> Dict[str, Any]:
    sessions = await progress_service.list_sessions(user_id, start, end)
    user = await user_service.get_user_by_id(user_id) or {}
    return {
        "progress": _serialize_all(sessions),
        "stats": serialize_document(user.get("meditationStats") or {}),
    }


# =============================================================================
# Custom meditations
# =============================================================================

async def create_custom_pipeline(
    custom_service: CustomMeditationService,
    user_id: str,
    data: Dict[str, Any]
) -> Dict[str, Any]:
    return serialize_document(await custom_service.create(user_id, data))


async def list_custom_pipeline(custom_service: CustomMeditationService, user_id: str) -> List[Dict[str, Any]]:
    return _serialize_all(await custom_service.list_for_user(user_id))


async def update_custom_pipeline(
    custom_service: CustomMeditationService,
    custom_id: str,
    user_id: str,
    fields: Dict[str, Any]
) -> Dict[str, Any]:
    return serialize_document(await custom_service.update(custom_id, user_id, fields))


async def delete_custom_pipeline(custom_service: CustomMeditationService, custom_id: str, user_id: str) -> Dict[str, Any]:
    await custom_service.delete(custom_id, user_id)
    return {"message": "Custom meditation deleted"}


# =============================================================================
# Library
# =============================================================================

async def toggle_saved_pipeline(
    catalog_service: MeditationCatalogService,
    user_service: UserService,
    user_id: str,
    content_id: str,
    content_type: Optional[str]
) -> Dict[str, Any]:
    """
    Save or unsave a meditation or sleep item.

    Raises:
        BadRequestException: Missing content type
        NotFoundException: Unknown content
    """
    content_type = _require_content_type(content_type)
    content = await catalog_service.get_content(content_id, content_type)

    is_saved = await user_service.toggle_saved_meditation(user_id, content["_id"], content_type)
    return {
        "message": "Added to saved" if is_saved else "Removed from saved",
        "isSaved": is_saved,
    }


async def download_pipeline(
    catalog_service: MeditationCatalogService,
    user_service: UserService,
    user_id: str,
    content_id: str,
    content_type: Optional[str]
) -> Dict[str, Any]:
    """
    Add downloadable content to the user's downloads.

    Raises:
        BadRequestException: Missing content type, or content not downloadable
        NotFoundException: Unknown content
    """
    content_type = _require_content_type(content_type)
    content = await catalog_service.get_content(content_id, content_type)

    if not content.get("isDownloadable"):
        raise BadRequestException(
            message="This content is not available for download",
            code="NOT_DOWNLOADABLE"
        )

    await user_service.add_downloaded_meditation(user_id, content["_id"], content_type)
    return {"message": "Added to downloads", "isDownloaded": True}


async def get_saved_pipeline(
    catalog_service: MeditationCatalogService,
    user_service: UserService,
    user_id: str
) -> List[Dict[str, Any]]:
    user = await user_service.get_user_by_id(user_id)
    if not user:
        raise NotFoundException(message="User not found", code="USER_NOT_FOUND")
    meditations = await catalog_service.get_meditations_by_ids(user.get("savedMeditations") or [])
    return _serialize_all(meditations)


async def get_downloads_pipeline(
    catalog_service: MeditationCatalogService,
    user_service: UserService,
    user_id: str
) -> List[Dict[str, Any]]:
    user = await user_service.get_user_by_id(user_id)
    if not user:
        raise NotFoundException(message="User not found", code="USER_NOT_FOUND")
    meditations = await catalog_service.get_meditations_by_ids(user.get("downloadedMeditations") or [])
    return _serialize_all(meditations)


async def update_preferences_pipeline(
    user_service: UserService,
    user_id: str,
    preferences: Dict[str, Any]
) -> Dict[str, Any]:
    return await user_service.update_meditation_preferences(user_id, preferences)


async def recommendations_pipeline(
    catalog_service: MeditationCatalogService,
    user_service: UserService,
    user_id: str,
    mood: Optional[str] = None
) -> Dict[str, Any]:
    """
    Meditations matching the user's preferences and current mood.

    Returns:
        {"meditations": [...], "sleepContent": [...]}
    """
    user = await user_service.get_user_by_id(user_id)
    if not user:
        raise NotFoundException(message="User not found", code="USER_NOT_FOUND")

    result = await catalog_service.recommend(user.get("meditationPreferences") or {}, mood)
    return {
        "meditations": _serialize_all(result["meditations"]),
        "sleepContent": _serialize_all(result["sleepContent"]),
    }
