"""Shared test fixtures for Sycamore backend tests."""

import pytest
from datetime import date, datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId


TODAY = date(2025, 6, 3)
NOW = datetime(2025, 6, 3, 9, 0, tzinfo=timezone.utc)


def make_cursor(docs):
    """Motor-style cursor: chainable sort/skip/limit, async to_list."""
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.skip.return_value = cursor
    cursor.limit.return_value = cursor
    cursor.to_list = AsyncMock(return_value=list(docs))
    return cursor


def make_reading(user_id, day, devotional_id=None):
    if isinstance(day, date):
        day = day.strftime("%Y-%m-%d")
    return {
        "_id": ObjectId(),
        "userId": ObjectId(user_id),
        "devotionalId": devotional_id,
        "date": day,
        "createdAt": NOW,
    }


def days_back(count, end=TODAY):
    """``count`` consecutive days ending at ``end``, newest first."""
    return [end - timedelta(days=i) for i in range(count)]


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def sample_user_id():
    return str(ObjectId())


@pytest.fixture
def mock_collection():
    collection = AsyncMock()
    # Motor's find() returns a cursor synchronously (not a coroutine),
    # so use MagicMock for it. Async methods like find_one, insert_one,
    # count_documents etc. stay as AsyncMock.
    collection.find = MagicMock(return_value=make_cursor([]))
    return collection


@pytest.fixture
def mock_db(mock_collection):
    db = MagicMock()
    db.__getitem__ = MagicMock(return_value=mock_collection)
    return db
