"""
Event reminder background job.

Sends reminder emails before upcoming events, day-of greetings, and
rolls recurring events forward once they have passed.
This job should be run daily via CRON.

Usage:
    Run via CRON:
        0 8 * * * cd /path/to/project && python -m jobs.event_reminders

    Or run directly:
        python -m jobs.event_reminders
"""

import asyncio
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Dict, Any

from dotenv import load_dotenv
from motor.motor_asyncio import AsyncIOMotorClient

load_dotenv()

from rats.config import settings
from rats.dependencies import build_email_service
from rats.services.events import EventService, ReminderService
from rats.services.user import UserService

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


class EventReminderJob:
    """
    Runs one pass of the reminder engine over all active events.

    Actions performed:
    1. Sends a reminder when today is one of the event's reminder days
    2. Sends a greeting on the event day
    3. Moves recurring (yearly) events to the same date next year once past
    """

    def __init__(self, db_uri: str, db_name: str = "rats"):
        """
        Initialize the event reminder job.

        Args:
            db_uri: MongoDB URI
            db_name: Database name
        """
        self._client = AsyncIOMotorClient(db_uri, tz_aware=True)
        self._db = self._client[db_name]

        self._reminder_service = ReminderService(
            event_service=EventService(db=self._db),
            user_service=UserService(db=self._db),
            email_service=build_email_service(settings),
        )

    async def run(self) -> Dict[str, Any]:
        """
        Execute the event reminder job.

        Returns:
            Dict with job results including counts and any errors
        """
        logger.info("Starting event reminder job")
        start_time = datetime.now(timezone.utc)

        results: Dict[str, Any] = {
            "startTime": start_time.isoformat(),
            "eventsChecked": 0,
            "remindersSent": 0,
            "greetingsSent": 0,
            "eventsRescheduled": 0,
            "errors": [],
        }

        try:
            results.update(await self._reminder_service.process_reminders(now=start_time))
        except Exception as e:
            error_msg = f"Job failed: {str(e)}"
            logger.error(error_msg)
            results["errors"].append(error_msg)

        results["endTime"] = datetime.now(timezone.utc).isoformat()
        results["durationSeconds"] = (
            datetime.now(timezone.utc) - start_time
        ).total_seconds()

        logger.info(
            f"Event reminder job completed. "
            f"Checked: {results['eventsChecked']} events, "
            f"Errors: {len(results['errors'])}"
        )

        return results

    async def close(self):
        """Close database connection."""
        self._client.close()


async def main():
    """Main entry point for the event reminder job."""
    db_uri = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
    db_name = os.getenv("MONGODB_DATABASE", "rats")

    job = EventReminderJob(db_uri=db_uri, db_name=db_name)

    try:
        results = await job.run()

        print("\n=== Event Reminder Job Results ===")
        print(f"Start Time: {results['startTime']}")
        print(f"End Time: {results['endTime']}")
        print(f"Duration: {results['durationSeconds']:.2f} seconds")
        print(f"Events Checked: {results['eventsChecked']}")
        print(f"Reminders Sent: {results['remindersSent']}")
        print(f"Greetings Sent: {results['greetingsSent']}")
        print(f"Events Rescheduled: {results['eventsRescheduled']}")

        if results["errors"]:
            print(f"\nErrors ({len(results['errors'])}):")
            for error in results["errors"]:
                print(f"  - {error}")

        exit_code = 1 if results["errors"] else 0
        sys.exit(exit_code)

    finally:
        await job.close()


if __name__ == "__main__":
    asyncio.run(main())
