"""
Achievement backfill background job.

Persists devotional achievement unlocks for readers who earned badges
before unlocks were recorded, dated to the day each threshold was
actually crossed.

Usage:
    Run via CRON:
        30 2 * * * cd /path/to/project && python -m jobs.achievement_backfill

    Or run directly:
        python -m jobs.achievement_backfill
"""

import asyncio
import logging
import sys
from datetime import datetime, timezone
from typing import Dict, Any

from motor.motor_asyncio import AsyncIOMotorClient

from sycamore.config import settings
from sycamore.devotional.engagement import (
    achievement_unlock_dates,
    collect_reading_days,
    unlock_timestamp,
)
from sycamore.devotional.services.reading_service import ReadingService
from sycamore.devotional.services.achievement_service import AchievementService

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


class AchievementBackfillJob:
    """
    Replays every reader's history and records missing unlocks.

    Safe to run repeatedly: existing unlocks are never overwritten.
    """

    def __init__(
        self,
        reading_service: ReadingService,
        achievement_service: AchievementService,
    ):
        """
        Initialize the backfill job.

        Args:
            reading_service: For reading histories
            achievement_service: For persisting unlocks
        """
        self._reading_service = reading_service
        self._achievement_service = achievement_service

    async def run(self) -> Dict[str, Any]:
        """
        Execute the backfill.

        Returns:
            Dict with job results including counts and any errors
        """
        logger.info("Starting achievement backfill job")
        start_time = datetime.now(timezone.utc)

        results = {
            "startTime": start_time.isoformat(),
            "usersProcessed": 0,
            "unlocksRecorded": 0,
            "errors": [],
        }

        user_ids = await self._reading_service.get_reading_user_ids()
        logger.info(f"Found {len(user_ids)} users with devotional readings")

        for user_id in user_ids:
            try:
                results["unlocksRecorded"] += await self._backfill_user(str(user_id))
                results["usersProcessed"] += 1
            except Exception as e:
                error_msg = f"Failed to backfill user {user_id}: {str(e)}"
                logger.error(error_msg)
                results["errors"].append(error_msg)

        results["endTime"] = datetime.now(timezone.utc).isoformat()
        results["durationSeconds"] = (
            datetime.now(timezone.utc) - start_time
        ).total_seconds()

        logger.info(
            f"Achievement backfill completed. "
            f"Processed: {results['usersProcessed']} users, "
            f"Recorded: {results['unlocksRecorded']} unlocks, "
            f"Errors: {len(results['errors'])}"
        )

        return results

    async def _backfill_user(self, user_id: str) -> int:
        """
        Record the unlocks a single user is missing.

        Returns:
            Number of unlocks recorded
        """
        now = datetime.now(timezone.utc)
        readings = await self._reading_service.get_readings(user_id)
        unlock_dates = achievement_unlock_dates(collect_reading_days(readings))
        existing = await self._achievement_service.get_unlocks(user_id)

        recorded = 0
        for achievement_id, day in unlock_dates.items():
            if achievement_id in existing:
                continue
            await self._achievement_service.record_unlock(
                user_id, achievement_id, unlock_timestamp(day, now)
            )
            recorded += 1

        if recorded:
            logger.debug(f"Recorded {recorded} unlocks for user {user_id}")
        return recorded


async def main():
    """Main entry point for the achievement backfill job."""
    client = AsyncIOMotorClient(settings.MONGODB_URI)
    db = client[settings.MONGODB_DATABASE]

    job = AchievementBackfillJob(
        reading_service=ReadingService(db),
        achievement_service=AchievementService(db),
    )

    try:
        results = await job.run()

        print("\n=== Achievement Backfill Job Results ===")
        print(f"Start Time: {results['startTime']}")
        print(f"End Time: {results['endTime']}")
        print(f"Duration: {results['durationSeconds']:.2f} seconds")
        print(f"Users Processed: {results['usersProcessed']}")
        print(f"Unlocks Recorded: {results['unlocksRecorded']}")

        if results["errors"]:
            print(f"\nErrors ({len(results['errors'])}):")
            for error in results["errors"]:
                print(f"  - {error}")

        sys.exit(1 if results["errors"] else 0)

    finally:
        client.close()


if __name__ == "__main__":
    asyncio.run(main())
