"""Event services."""

from rats.services.events.event_service import EventService, toggle_reminder_day
from rats.services.events.event_content_generator import EventContentGenerator
from rats.services.events.reminder_service import ReminderService

__all__ = [
    "EventService",
    "toggle_reminder_day",
    "EventContentGenerator",
    "ReminderService",
]
