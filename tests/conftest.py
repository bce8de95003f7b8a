"""Shared test fixtures for RATS backend tests."""

import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId


def make_cursor(docs=None):
    """Cursor mock supporting the sort/limit/to_list chain."""
    cursor = MagicMock()
    cursor.sort = MagicMock(return_value=cursor)
    cursor.limit = MagicMock(return_value=cursor)
    cursor.to_list = AsyncMock(return_value=list(docs or []))
    return cursor


def make_collection():
    collection = AsyncMock()
    # Motor's find() returns a cursor synchronously (not a coroutine),
    # so use MagicMock for it. Async methods like find_one, insert_one,
    # count_documents etc. stay as AsyncMock.
    collection.find = MagicMock(return_value=make_cursor())
    return collection


@pytest.fixture
def sample_user_id():
    return str(ObjectId())


@pytest.fixture
def collections():
    """One mock collection per name, created on first access."""
    return {}


@pytest.fixture
def mock_db(collections):
    def get_collection(name):
        if name not in collections:
            collections[name] = make_collection()
        return collections[name]

    db = MagicMock()
    db.__getitem__ = MagicMock(side_effect=get_collection)
    return db


@pytest.fixture
def now():
    return datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def cursor_of():
    """Build a cursor mock that yields the given documents."""
    return make_cursor
