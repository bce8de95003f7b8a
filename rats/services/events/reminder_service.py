"""
Event reminder processing.

Runs once a day: reminds owners about upcoming events, delivers the
generated greeting on the day itself and rolls recurring events forward.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Dict, Any

from common.utils.dates import is_same_day
from rats.services.email.email_service import EmailService
from rats.services.events.event_service import EventService, days_until, add_one_year
from rats.services.user.user_service import UserService

logger = logging.getLogger(__name__)


SOCIAL_HANDLE_PLATFORMS = ("facebook", "instagram", "twitter", "whatsapp")


class ReminderService:
    """
    Processes reminders for every active event.
    """

    def __init__(
        self,
        event_service: EventService,
        user_service: UserService,
        email_service: EmailService
    ):
        """
        Initialize ReminderService.

        Args:
            event_service: For loading and updating events
            user_service: For looking up event owners
            email_service: For sending reminder and greeting emails
        """
        self._event_service = event_service
        self._user_service = user_service
        self._email_service = email_service

    async def process_reminders(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Handle reminders, day-of greetings and recurring roll-forward.

        Failures for one event are logged and collected; they do not
        stop the run.

        Args:
            now: Reference time (default: current time)

        Returns:
            Summary counts and per-event errors
        """
        now = now or datetime.now(timezone.utc)
        results: Dict[str, Any] = {
            "eventsChecked": 0,
            "remindersSent": 0,
            "greetingsSent": 0,
            "eventsRescheduled": 0,
            "errors": [],
        }

        events = await self._event_service.get_active_events()

        for event in events:
            results["eventsChecked"] += 1
            try:
                days = days_until(event["date"], now)

                if days in (event.get("reminderDays") or []):
                    if await self._send_reminder(event, days):
                        results["remindersSent"] += 1

                if days == 0 and await self._send_greeting(event, now):
                    results["greetingsSent"] += 1

                if event.get("isRecurring") and days < 0:
                    await self._event_service.reschedule(event["_id"], add_one_year(event["date"]))
                    results["eventsRescheduled"] += 1

            except Exception as e:
                logger.error(f"Error processing event {event.get('_id')}: {e}")
                results["errors"].append({"eventId": str(event.get("_id")), "error": str(e)})

        logger.info(
            f"Reminders processed: {results['eventsChecked']} events, "
            f"{results['remindersSent']} reminders, {results['greetingsSent']} greetings"
        )
        return results

    async def _send_reminder(self, event: dict, days: int) -> bool:
        owner = await self._user_service.get_user_by_id(str(event["user"]))
        if not owner or not owner.get("email"):
            logger.error(f"Cannot send reminder: owner missing for event {event['_id']}")
            return False

        result = await self._email_service.send_event_reminder(owner["email"], event, days)
        if result.get("success"):
            logger.info(f"Reminder sent for event {event['_id']} to {owner['email']}")
        return bool(result.get("success"))

    async def _send_greeting(self, event: dict, now: datetime) -> bool:
        """Deliver the day-of greeting at most once per day."""
        if not event.get("aiGeneratedMessage"):
            logger.info(f"No message to send for event {event['_id']}")
            return False

        if is_same_day(event.get("lastMessageSent"), now):
            logger.info(f"Message already sent today for event {event['_id']}")
            return False

        sent = False

        recipient_email = (event.get("recipientContact") or {}).get("email")
        if recipient_email:
            result = await self._email_service.send_event_greeting(recipient_email, event)
            sent = sent or bool(result.get("success"))

        handles = event.get("socialMediaHandles") or {}
        for platform in SOCIAL_HANDLE_PLATFORMS:
            if handles.get(platform):
                # Direct messages are not delivered yet; the handle is only logged
                logger.info(f"Sending message to {platform.capitalize()}: {handles[platform]}")
                sent = True

        if sent:
            await self._event_service.mark_message_sent(event["_id"], now)
            logger.info(f"Message sent for event {event['_id']}")
        else:
            logger.info(f"No channels configured to send message for event {event['_id']}")

        return sent
