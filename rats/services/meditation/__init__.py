"""Meditation services."""

from rats.services.meditation.catalog_service import MeditationCatalogService
from rats.services.meditation.progress_service import MeditationProgressService, next_meditation_stats
from rats.services.meditation.custom_meditation_service import CustomMeditationService

__all__ = [
    "MeditationCatalogService",
    "MeditationProgressService",
    "next_meditation_stats",
    "CustomMeditationService",
]
