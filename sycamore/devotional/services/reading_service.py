"""
Devotional reading CRUD service.

Handles storage and retrieval of "devotional read" records.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any, Tuple

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import DuplicateKeyError

from common.utils.exceptions import InternalServerException, ValidationException
from sycamore.devotional.engagement import DATE_FORMAT, parse_reading_date

logger = logging.getLogger(__name__)


class ReadingService:
    """
    Handles devotional reading storage and retrieval.
    Pure CRUD - stats are computed by the engagement tracker.

    At most one reading exists per (userId, date); the unique index
    created by ensure_indexes() backs the check-then-insert in
    mark_as_read().
    """

    DEFAULT_MAX_LIMIT = 90

    def __init__(self, db: AsyncIOMotorDatabase, max_limit: int = DEFAULT_MAX_LIMIT):
        """
        Initialize ReadingService.

        Args:
            db: MongoDB database connection
            max_limit: Upper bound for paginated history requests
        """
        self._db = db
        self._readings_collection = db["devotionalReadings"]
        self._max_limit = max_limit

    @property
    def max_limit(self) -> int:
        """Largest page get_history() will return."""
        return self._max_limit

    async def ensure_indexes(self) -> None:
        """Create the one-reading-per-day index."""
        await self._readings_collection.create_index(
            [("userId", ASCENDING), ("date", ASCENDING)],
            unique=True,
            name="user_date_unique",
        )

    async def mark_as_read(
        self,
        user_id: str,
        devotional_id: Optional[str] = None,
        date: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Tuple[Dict[str, Any], bool]:
        """
        Record that a user read a devotional on a calendar day.

        Args:
            user_id: MongoDB user ID
            devotional_id: Optional devotional reference
            date: YYYY-MM-DD day or ISO timestamp; defaults to today (UTC)
            now: Creation timestamp (defaults to current UTC time)

        Returns:
            (reading document, created) - created is False when the day
            was already recorded and the existing reading is returned

        Raises:
            ValidationException: Date is not a valid calendar day
            InternalServerException: Insert was not acknowledged
        """
        now = now or datetime.now(timezone.utc)
        date_string = self.resolve_date(date, now)
        user_oid = ObjectId(user_id)

        existing = await self._readings_collection.find_one({
            "userId": user_oid,
            "date": date_string,
        })
        if existing:
            logger.debug(f"Reading already recorded for user {user_id} on {date_string}")
            return existing, False

        reading = {
            "userId": user_oid,
            "devotionalId": devotional_id or None,
            "date": date_string,
            "createdAt": now,
        }

        try:
            result = await self._readings_collection.insert_one(reading)
        except DuplicateKeyError:
            # Lost a race with a concurrent request for the same day
            existing = await self._readings_collection.find_one({
                "userId": user_oid,
                "date": date_string,
            })
            if existing is None:
                raise
            return existing, False

        if not result.inserted_id:
            raise InternalServerException(
                message="Failed to create reading record",
                code="READING_NOT_CREATED",
            )

        reading["_id"] = result.inserted_id
        logger.info(f"Devotional reading recorded for user {user_id} on {date_string}")
        return reading, True

    async def get_readings(self, user_id: str) -> List[Dict[str, Any]]:
        """
        Get every reading for a user.

        Returns:
            List of reading dicts sorted by date descending
        """
        cursor = self._readings_collection.find({"userId": ObjectId(user_id)})
        cursor = cursor.sort("date", DESCENDING)
        return await cursor.to_list(length=None)

    async def get_history(
        self,
        user_id: str,
        limit: int = 30,
        offset: int = 0,
    ) -> List[Dict[str, Any]]:
        """
        Get paginated reading history.

        Args:
            user_id: MongoDB user ID
            limit: Max records to return (capped at max_limit)
            offset: Number of records to skip

        Returns:
            List of reading dicts sorted by date descending
        """
        limit = min(limit, self._max_limit)

        cursor = self._readings_collection.find({"userId": ObjectId(user_id)})
        cursor = cursor.sort("date", DESCENDING)
        cursor = cursor.skip(offset)
        cursor = cursor.limit(limit)

        return await cursor.to_list(length=limit)

    async def count_readings(self, user_id: str) -> int:
        """Get total number of readings for a user."""
        return await self._readings_collection.count_documents(
            {"userId": ObjectId(user_id)}
        )

    async def get_reading_user_ids(self) -> List[ObjectId]:
        """Get the ids of every user with at least one reading."""
        return await self._readings_collection.distinct("userId")

    @staticmethod
    def resolve_date(value: Optional[str], now: datetime) -> str:
        """
        Resolve a requested reading day to a YYYY-MM-DD string.

        Accepts a calendar day or an ISO-8601 timestamp, whose UTC date
        is used. Defaults to the UTC date of ``now``.

        Raises:
            ValidationException: Value is neither
        """
        if not value:
            return now.astimezone(timezone.utc).strftime(DATE_FORMAT)

        if parse_reading_date(value):
            return value

        try:
            timestamp = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            raise ValidationException(
                message=f"Invalid date: {value}. Expected YYYY-MM-DD",
                code="INVALID_DATE",
            )

        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return timestamp.astimezone(timezone.utc).strftime(DATE_FORMAT)
