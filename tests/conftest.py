"""
Shared fixtures.

Environment is pinned before any app module is imported: in-memory SQLite,
no Redis, no Kafka, a fixed JWT secret.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_ENABLED"] = "false"
os.environ["KAFKA_ENABLED"] = "false"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-for-attendance-tracker"
os.environ["GEOFENCE_ENFORCED"] = "false"
os.environ.pop("BOOTSTRAP_ADMIN_EMAIL", None)

from datetime import datetime  # noqa: E402

import pytest  # noqa: E402

from app.core.clock import FixedClock  # noqa: E402
from app.core.security import AuthContext  # noqa: E402
from app.models import UserRole  # noqa: E402
from app.repositories import InMemoryRecordStore  # noqa: E402
from tests.factories import make_user  # noqa: E402


@pytest.fixture
def clock():
    """A clock pinned to Monday 2024-03-04 08:30 local time."""
    return FixedClock(datetime(2024, 3, 4, 8, 30))


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture
def employee():
    return AuthContext(user_id="alice", role=UserRole.EMPLOYEE, email="alice@company.com")


@pytest.fixture
def admin():
    return AuthContext(user_id="boss", role=UserRole.ADMIN, email="boss@company.com")


@pytest.fixture
async def seeded_store(store):
    """Store holding one admin and two active employees."""
    await store.create_user(make_user("boss", UserRole.ADMIN))
    await store.create_user(make_user("alice"))
    await store.create_user(make_user("bob"))
    return store
