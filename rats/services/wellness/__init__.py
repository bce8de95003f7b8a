"""Wellness log services."""

from rats.services.wellness.wellness_service import WellnessService

__all__ = ["WellnessService"]
