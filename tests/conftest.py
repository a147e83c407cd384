"""
Shared fixtures.

API tests run against the real FastAPI app with auth overridden and the
engine singleton replaced by a fake whose services are AsyncMocks. The
TestClient is used without a context manager, so startup (database pool)
never runs.
"""
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from expocrm.app import app
from expocrm.routes.auth import get_current_user
from expocrm.services import engine_service

TEST_USER = {"user_id": "user-1", "email": "owner@example.com"}

SERVICES = (
    "event_service", "target_service", "contact_service", "company_service",
    "follow_up_service", "capture_service", "note_service", "document_service",
    "email_service", "enrichment_service", "meeting_service", "reminder_service",
    "dashboard_service", "spreadsheet_service", "profile_service", "ai_service",
)


def at(day: int, hour: int = 12, minute: int = 0, second: int = 0) -> datetime:
    """Aware timestamp in March 2025"""
    return datetime(2025, 3, day, hour, minute, second, tzinfo=timezone.utc)


@pytest.fixture
def engine(monkeypatch):
    """Fake engine installed as the process singleton"""
    fake = MagicMock()
    for name in SERVICES:
        setattr(fake, name, AsyncMock())
    fake.note_service.should_analyze = MagicMock(return_value=False)
    fake.event_storage.ping = AsyncMock(return_value=True)
    fake.is_initialized = True
    monkeypatch.setattr(engine_service, "_engine_service", fake)
    return fake


@pytest.fixture
def client(engine):
    app.dependency_overrides[get_current_user] = lambda: TEST_USER
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def anon_client(engine):
    app.dependency_overrides.clear()
    return TestClient(app)


@pytest.fixture
def new_id():
    return uuid4
