"""Shared pytest fixtures and configuration."""

import os
import pytest
from freezegun import freeze_time

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("AUTOSAVE_INTERVAL_SECONDS", "30")
os.environ.setdefault("DEFAULT_SEARCH_RADIUS_KM", "25")

from src.models.profile import Profile
from src.services.permissions import SessionContext
from src.services.supabase_client import (
    CLIENT_BRIEFS,
    INSPECTION_JOBS,
    StaticSessionProvider,
)
from tests.utils.factories import (
    INSPECTOR_ID,
    MELBOURNE,
    SYDNEY,
    create_client_brief_data,
    create_inspection_job_data,
)
from tests.utils.fake_supabase import FakeSupabase


@pytest.fixture
def fake_supabase(monkeypatch):
    """In-memory Supabase backend patched in place of the real client."""
    db = FakeSupabase()
    monkeypatch.setattr("src.services.supabase_client.get_supabase_client", lambda: db)
    return db


@pytest.fixture
def session_provider():
    return StaticSessionProvider("test-access-token")


@pytest.fixture
def inspector_context():
    """Signed-in, verified inspector."""
    return SessionContext.resolve(INSPECTOR_ID, is_verified=True)


@pytest.fixture
def client_brief_row():
    return create_client_brief_data(id="brief-1", pool_priority="must_have", garden_priority="important")


@pytest.fixture
def assigned_job_row(client_brief_row):
    return create_inspection_job_data(
        id="job-1",
        inspector_id=INSPECTOR_ID,
        status="assigned",
        client_brief_id=client_brief_row["id"],
        requesting_agent_id="agent-1",
        property_address="12 Harbour St, Sydney NSW",
        agreed_price=1000,
    )


@pytest.fixture
def seeded_backend(fake_supabase, assigned_job_row, client_brief_row):
    """Backend holding one assigned job with a client brief."""
    fake_supabase.seed(INSPECTION_JOBS, assigned_job_row)
    fake_supabase.seed(CLIENT_BRIEFS, client_brief_row)
    return fake_supabase


@pytest.fixture
def sydney_melbourne_profiles():
    """One professional in Sydney, one without a location, one in Melbourne."""
    return [
        Profile(id="1", full_name="Ava Chen", latitude=SYDNEY[0], longitude=SYDNEY[1]),
        Profile(id="2", full_name="Ben Ortiz"),
        Profile(id="3", full_name="Cara Walsh", latitude=MELBOURNE[0], longitude=MELBOURNE[1]),
    ]


@pytest.fixture
def freeze_time_fixture():
    """Fixture for freezing time in tests."""
    with freeze_time("2024-12-09 12:00:00", real_asyncio=True) as frozen_time:
        yield frozen_time
