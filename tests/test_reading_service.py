"""
Tests for ReadingService.

Tests the one-reading-per-day write path and history queries.
"""

import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId
from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError

from common.utils.exceptions import InternalServerException, ValidationException
from sycamore.devotional.services.reading_service import ReadingService

from conftest import NOW, make_cursor, make_reading


# ─────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────


@pytest.fixture
def reading_service(mock_db):
    return ReadingService(mock_db, max_limit=90)


# ─────────────────────────────────────────────────────────────────
# mark_as_read
# ─────────────────────────────────────────────────────────────────


class TestMarkAsRead:
    @pytest.mark.asyncio
    async def test_creates_reading_for_today(self, reading_service, mock_collection, sample_user_id):
        inserted_id = ObjectId()
        mock_collection.find_one.return_value = None
        mock_collection.insert_one.return_value = MagicMock(inserted_id=inserted_id)

        reading, created = await reading_service.mark_as_read(sample_user_id, now=NOW)

        assert created is True
        assert reading["_id"] == inserted_id
        assert reading["date"] == "2025-06-03"
        assert reading["userId"] == ObjectId(sample_user_id)
        assert reading["devotionalId"] is None
        assert reading["createdAt"] == NOW

    @pytest.mark.asyncio
    async def test_stores_devotional_reference(self, reading_service, mock_collection, sample_user_id):
        mock_collection.find_one.return_value = None
        mock_collection.insert_one.return_value = MagicMock(inserted_id=ObjectId())

        await reading_service.mark_as_read(
            sample_user_id, devotional_id="dev-123", date="2025-06-01", now=NOW
        )

        inserted = mock_collection.insert_one.call_args[0][0]
        assert inserted["devotionalId"] == "dev-123"
        assert inserted["date"] == "2025-06-01"

    @pytest.mark.asyncio
    async def test_existing_day_is_returned_without_insert(self, reading_service, mock_collection, sample_user_id):
        existing = make_reading(sample_user_id, "2025-06-03")
        mock_collection.find_one.return_value = existing

        reading, created = await reading_service.mark_as_read(sample_user_id, now=NOW)

        assert created is False
        assert reading is existing
        mock_collection.insert_one.assert_not_called()
        query = mock_collection.find_one.call_args[0][0]
        assert query == {"userId": ObjectId(sample_user_id), "date": "2025-06-03"}

    @pytest.mark.asyncio
    async def test_concurrent_insert_resolves_to_existing(self, reading_service, mock_collection, sample_user_id):
        existing = make_reading(sample_user_id, "2025-06-03")
        mock_collection.find_one.side_effect = [None, existing]
        mock_collection.insert_one.side_effect = DuplicateKeyError("duplicate key")

        reading, created = await reading_service.mark_as_read(sample_user_id, now=NOW)

        assert created is False
        assert reading is existing
        assert mock_collection.find_one.call_count == 2

    @pytest.mark.asyncio
    async def test_duplicate_without_record_is_raised(self, reading_service, mock_collection, sample_user_id):
        mock_collection.find_one.return_value = None
        mock_collection.insert_one.side_effect = DuplicateKeyError("duplicate key")

        with pytest.raises(DuplicateKeyError):
            await reading_service.mark_as_read(sample_user_id, now=NOW)

    @pytest.mark.asyncio
    async def test_unacknowledged_insert_raises(self, reading_service, mock_collection, sample_user_id):
        mock_collection.find_one.return_value = None
        mock_collection.insert_one.return_value = MagicMock(inserted_id=None)

        with pytest.raises(InternalServerException) as exc_info:
            await reading_service.mark_as_read(sample_user_id, now=NOW)

        assert exc_info.value.detail["code"] == "READING_NOT_CREATED"

    @pytest.mark.asyncio
    async def test_invalid_date_is_rejected(self, reading_service, mock_collection, sample_user_id):
        with pytest.raises(ValidationException) as exc_info:
            await reading_service.mark_as_read(sample_user_id, date="next tuesday", now=NOW)

        assert exc_info.value.status_code == 422
        assert exc_info.value.detail["code"] == "INVALID_DATE"
        mock_collection.find_one.assert_not_called()


# ─────────────────────────────────────────────────────────────────
# resolve_date
# ─────────────────────────────────────────────────────────────────


class TestResolveDate:
    def test_defaults_to_utc_today(self):
        late_evening = datetime(2025, 6, 3, 23, 30, tzinfo=timezone.utc)

        assert ReadingService.resolve_date(None, late_evening) == "2025-06-03"
        assert ReadingService.resolve_date("", late_evening) == "2025-06-03"

    def test_calendar_day_kept(self):
        assert ReadingService.resolve_date("2024-02-29", NOW) == "2024-02-29"

    def test_timestamp_uses_utc_day(self):
        assert ReadingService.resolve_date("2025-06-03T23:30:00-05:00", NOW) == "2025-06-04"
        assert ReadingService.resolve_date("2025-06-03T08:15:00Z", NOW) == "2025-06-03"

    @pytest.mark.parametrize("value", ["2025-02-30", "06/03/2025", "tomorrow"])
    def test_invalid_values(self, value):
        with pytest.raises(ValidationException):
            ReadingService.resolve_date(value, NOW)


# ─────────────────────────────────────────────────────────────────
# Queries
# ─────────────────────────────────────────────────────────────────


class TestQueries:
    @pytest.mark.asyncio
    async def test_get_readings_sorted_newest_first(self, reading_service, mock_collection, sample_user_id):
        docs = [make_reading(sample_user_id, "2025-06-03"), make_reading(sample_user_id, "2025-06-01")]
        cursor = make_cursor(docs)
        mock_collection.find.return_value = cursor

        readings = await reading_service.get_readings(sample_user_id)

        assert readings == docs
        mock_collection.find.assert_called_once_with({"userId": ObjectId(sample_user_id)})
        cursor.sort.assert_called_once_with("date", DESCENDING)
        cursor.to_list.assert_awaited_once_with(length=None)

    @pytest.mark.asyncio
    async def test_get_history_paginates(self, reading_service, mock_collection, sample_user_id):
        cursor = make_cursor([])
        mock_collection.find.return_value = cursor

        await reading_service.get_history(sample_user_id, limit=10, offset=20)

        cursor.skip.assert_called_once_with(20)
        cursor.limit.assert_called_once_with(10)
        cursor.to_list.assert_awaited_once_with(length=10)

    @pytest.mark.asyncio
    async def test_get_history_caps_limit(self, reading_service, mock_collection, sample_user_id):
        cursor = make_cursor([])
        mock_collection.find.return_value = cursor

        await reading_service.get_history(sample_user_id, limit=500)

        cursor.limit.assert_called_once_with(90)

    @pytest.mark.asyncio
    async def test_count_readings(self, reading_service, mock_collection, sample_user_id):
        mock_collection.count_documents.return_value = 12

        assert await reading_service.count_readings(sample_user_id) == 12
        mock_collection.count_documents.assert_awaited_once_with({"userId": ObjectId(sample_user_id)})

    @pytest.mark.asyncio
    async def test_ensure_indexes_is_unique_per_day(self, reading_service, mock_collection):
        await reading_service.ensure_indexes()

        keys = mock_collection.create_index.call_args[0][0]
        assert [k for k, _ in keys] == ["userId", "date"]
        assert mock_collection.create_index.call_args[1]["unique"] is True
