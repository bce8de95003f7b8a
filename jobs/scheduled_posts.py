"""
Scheduled social media posts job.

Publishes scheduled posts whose time has come.
This job should be run hourly via CRON.

Usage:
    Run via CRON:
        0 * * * * cd /path/to/project && python -m jobs.scheduled_posts

    Or run directly:
        python -m jobs.scheduled_posts
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
from rats.dependencies import build_instagram_service
from rats.services.social import SocialPostService
from rats.services.user import UserService

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


class ScheduledPostsJob:
    """Publishes due posts; a failed post is marked failed and the run continues."""

    def __init__(self, db_uri: str, db_name: str = "rats"):
        self._client = AsyncIOMotorClient(db_uri, tz_aware=True)
        self._db = self._client[db_name]

        self._instagram_service = build_instagram_service(
            settings,
            UserService(db=self._db),
            SocialPostService(db=self._db),
        )

    async def run(self) -> Dict[str, Any]:
        """
        Execute the scheduled posts job.

        Returns:
            Dict with job results including counts and any errors
        """
        logger.info("Starting scheduled posts job")
        start_time = datetime.now(timezone.utc)

        results: Dict[str, Any] = {
            "startTime": start_time.isoformat(),
            "processed": 0,
            "published": 0,
            "failed": 0,
            "errors": [],
        }

        try:
            results.update(await self._instagram_service.process_scheduled_posts(now=start_time))
        except Exception as e:
            error_msg = f"Job failed: {str(e)}"
            logger.error(error_msg)
            results["errors"].append(error_msg)

        results["endTime"] = datetime.now(timezone.utc).isoformat()
        results["durationSeconds"] = (
            datetime.now(timezone.utc) - start_time
        ).total_seconds()

        logger.info(
            f"Scheduled posts job completed. "
            f"Published: {results['published']}, Failed: {results['failed']}"
        )

        return results

    async def close(self):
        """Close database connection."""
        self._client.close()


async def main():
    """Main entry point for the scheduled posts job."""
    db_uri = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
    db_name = os.getenv("MONGODB_DATABASE", "rats")

    job = ScheduledPostsJob(db_uri=db_uri, db_name=db_name)

    try:
        results = await job.run()

        print("\n=== Scheduled Posts Job Results ===")
        print(f"Start Time: {results['startTime']}")
        print(f"End Time: {results['endTime']}")
        print(f"Duration: {results['durationSeconds']:.2f} seconds")
        print(f"Posts Processed: {results['processed']}")
        print(f"Published: {results['published']}")
        print(f"Failed: {results['failed']}")

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
