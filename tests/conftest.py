"""Pytest configuration and fixtures."""
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import AsyncClient, ASGITransport

COLLECTIONS = ("users", "projects", "timecards", "globalsettings", "transactions")


def _cursor(docs):
    cursor = MagicMock()
    cursor.to_list = AsyncMock(return_value=docs)
    cursor.sort.return_value = cursor
    return cursor


def _collection():
    collection = MagicMock()
    collection.find_one = AsyncMock(return_value=None)
    collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id=ObjectId()))
    collection.update_one = AsyncMock()
    collection.delete_many = AsyncMock(return_value=MagicMock(deleted_count=0))
    collection.count_documents = AsyncMock(return_value=0)
    collection.distinct = AsyncMock(return_value=[])
    collection.find.return_value = _cursor([])
    collection.aggregate.return_value = _cursor([])
    return collection


@pytest.fixture
def make_cursor():
    """Factory for Motor-like cursors returning ``docs``."""
    return _cursor


@pytest.fixture
def mock_db():
    """
    MagicMock database whose collections behave like Motor collections.

    Every collection returns empty results until a test configures it.
    """
    collections = {name: _collection() for name in COLLECTIONS}
    db = MagicMock()
    db.__getitem__.side_effect = lambda key: collections[key]
    return db


def user_doc(name="Test User", is_admin=False, inactive=False, **profile):
    """Build a stored user document."""
    now = datetime.utcnow()
    return {
        "_id": ObjectId(),
        "emails": [{"address": f"{name.lower().replace(' ', '.')}@example.com", "verified": True}],
        "profile": {"name": name, **profile},
        "isAdmin": is_admin,
        "inactive": inactive,
        "hashed_password": "",
        "created_at": now,
        "updated_at": now,
    }


@pytest.fixture
def admin_doc():
    """An active administrator."""
    return user_doc(name="Ada Admin", is_admin=True)


@pytest.fixture
def member_doc():
    """An active non-admin user."""
    return user_doc(name="Max Member")


@pytest_asyncio.fixture
async def app_client(mock_db):
    """
    Async HTTP client for the app with the database replaced by ``mock_db``.

    The lifespan is not run, so no MongoDB connection is made.
    """
    from timesheet.database import get_database
    from timesheet.main import app

    app.dependency_overrides[get_database] = lambda: mock_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()


def auth_headers(user: dict) -> dict:
    """Bearer header for a user document."""
    from timesheet.utils.auth import create_access_token

    token = create_access_token(user_id=str(user["_id"]))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers_for():
    """Factory for bearer headers of a user document."""
    return auth_headers


@pytest.fixture
def make_user():
    """Factory for stored user documents."""
    return user_doc
