"""
Event service.

Stores special events (birthdays, anniversaries, holidays) and answers
calendar and reminder queries.
"""

import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Optional, List, Dict, Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from common.utils.dates import ensure_utc, month_range
from common.utils.exceptions import NotFoundException, ForbiddenException
from common.utils.serialization import to_object_id

logger = logging.getLogger(__name__)


EVENT_TYPES = ("birthday", "anniversary", "holiday", "other")
DEFAULT_REMINDER_DAYS = [1, 7]
UPCOMING_WINDOW_DAYS = 30


def days_until(event_date: datetime, now: datetime) -> int:
    """Whole days until the event, rounded up (the day of the event is 0)."""
    delta = ensure_utc(event_date) - ensure_utc(now)
    return math.ceil(delta.total_seconds() / 86400)


def toggle_reminder_day(days: List[int], day: int) -> List[int]:
    """
    Add day to the reminder list, or remove it if present.

    Returns:
        A new sorted list without duplicates
    """
    selected = set(days or [])
    if day in selected:
        selected.remove(day)
    else:
        selected.add(day)
    return sorted(selected)


def add_one_year(value: datetime) -> datetime:
    """Same calendar date next year; Feb 29 becomes Feb 28."""
    try:
        return value.replace(year=value.year + 1)
    except ValueError:
        return value.replace(year=value.year + 1, day=28)


class EventService:
    """
    Handles event persistence and ownership checks.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize EventService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._events_collection = db["events"]

    async def create_event(self, user_id: str, data: Dict[str, Any]) -> dict:
        """
        Create an event with default reminder settings.

        Args:
            user_id: Owner's MongoDB ID
            data: Event fields (title, eventType, date, recipientName, ...)

        Returns:
            Created event document
        """
        now = datetime.now(timezone.utc)
        reminder_days = data.get("reminderDays")
        is_recurring = data.get("isRecurring")

        doc = {
            "user": ObjectId(user_id),
            "title": data["title"].strip(),
            "eventType": data["eventType"],
            "date": ensure_utc(data["date"]),
            "recipientName": data["recipientName"].strip(),
            "recipientRelation": data["recipientRelation"].strip(),
            "recipientContact": data.get("recipientContact") or {},
            "socialMediaHandles": data.get("socialMediaHandles") or {},
            "notes": data.get("notes"),
            "reminderDays": sorted(set(reminder_days)) if reminder_days else list(DEFAULT_REMINDER_DAYS),
            "isRecurring": True if is_recurring is None else is_recurring,
            "isActive": True,
            "aiGeneratedMessage": None,
            "aiGeneratedPlan": None,
            "lastMessageSent": None,
            "createdAt": now,
            "updatedAt": now,
        }

        result = await self._events_collection.insert_one(doc)
        doc["_id"] = result.inserted_id

        logger.info(f"Event created: {result.inserted_id} for user {user_id}")
        return doc

    async def list_events(
        self,
        user_id: str,
        month: Optional[int] = None,
        year: Optional[int] = None,
        upcoming: bool = False,
        now: Optional[datetime] = None
    ) -> List[dict]:
        """
        List a user's events sorted by date.

        Args:
            user_id: Owner's MongoDB ID
            month: 1-12, used together with year
            year: Calendar year
            upcoming: Only events in the next 30 days (overrides month/year)
            now: Reference time (default: current time)
        """
        query: Dict[str, Any] = {"user": ObjectId(user_id)}

        if month and year:
            start, end = month_range(year, month)
            query["date"] = {"$gte": start, "$lt": end}

        if upcoming:
            now = now or datetime.now(timezone.utc)
            query["date"] = {"$gte": now, "$lte": now + timedelta(days=UPCOMING_WINDOW_DAYS)}

        cursor = self._events_collection.find(query).sort("date", 1)
        return await cursor.to_list(length=1000)

    async def get_owned_event(self, event_id: str, user_id: str, action: str = "access") -> dict:
        """
        Load an event and verify the caller owns it.

        Args:
            event_id: Event ID from the path
            user_id: Caller's MongoDB ID
            action: Verb used in the error message

        Raises:
            NotFoundException: Unknown event
            ForbiddenException: Event belongs to another user
        """
        oid = to_object_id(event_id, "Event not found")
        event = await self._events_collection.find_one({"_id": oid})

        if not event:
            raise NotFoundException(message="Event not found", code="EVENT_NOT_FOUND")

        if str(event["user"]) != str(user_id):
            raise ForbiddenException(
                message=f"Not authorized to {action} this event",
                code="EVENT_FORBIDDEN"
            )

        return event

    async def update_event(self, event_id: Any, fields: Dict[str, Any]) -> Optional[dict]:
        """
        Apply a partial update.

        Returns:
            Updated event document
        """
        if "date" in fields and fields["date"] is not None:
            fields["date"] = ensure_utc(fields["date"])
        if fields.get("reminderDays"):
            fields["reminderDays"] = sorted(set(fields["reminderDays"]))

        fields["updatedAt"] = datetime.now(timezone.utc)
        return await self._events_collection.find_one_and_update(
            {"_id": ObjectId(str(event_id))},
            {"$set": fields},
            return_document=ReturnDocument.AFTER
        )

    async def delete_event(self, event_id: Any) -> bool:
        result = await self._events_collection.delete_one({"_id": ObjectId(str(event_id))})
        if result.deleted_count > 0:
            logger.info(f"Event deleted: {event_id}")
            return True
        return False

    async def get_due_reminders(self, user_id: str, now: Optional[datetime] = None) -> List[dict]:
        """
        Active events whose days-until value is one of their reminder days.
        """
        now = now or datetime.now(timezone.utc)
        cursor = self._events_collection.find({"user": ObjectId(user_id), "isActive": True})
        events = await cursor.to_list(length=1000)
        return [
            event for event in events
            if days_until(event["date"], now) in (event.get("reminderDays") or [])
        ]

    async def get_active_events(self) -> List[dict]:
        """All active events across users (reminder job)."""
        cursor = self._events_collection.find({"isActive": True})
        return await cursor.to_list(length=None)

    async def mark_message_sent(self, event_id: Any, sent_at: datetime) -> None:
        await self._events_collection.update_one(
            {"_id": ObjectId(str(event_id))},
            {"$set": {"lastMessageSent": sent_at}}
        )

    async def reschedule(self, event_id: Any, new_date: datetime) -> None:
        await self._events_collection.update_one(
            {"_id": ObjectId(str(event_id))},
            {"$set": {"date": new_date, "updatedAt": datetime.now(timezone.utc)}}
        )
