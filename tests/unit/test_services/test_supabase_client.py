"""Tests for the Supabase client wrapper."""

import httpx
import pytest
from unittest.mock import Mock, patch

from src.services import supabase_client
from src.services.supabase_client import (
    INSPECTION_REPORTS,
    PROFILES,
    SupabaseClient,
    _backend_error,
    _search_filter,
    get_report_for_job,
    insert_report,
    query_rows,
    update_report,
)
from src.utils.app_config import AppConfig
from src.utils.errors import (
    BackendError,
    BackendTimeoutError,
    ConfigurationError,
    ReportSubmittedError,
)


@pytest.mark.unit
def test_backend_error_maps_timeout():
    """Test transport timeouts get their own error and message."""
    error = _backend_error("Failed to query profiles", httpx.ReadTimeout("slow"))
    assert isinstance(error, BackendTimeoutError)
    assert "took too long" in error.user_message


@pytest.mark.unit
def test_backend_error_wraps_other_failures():
    """Test other exceptions become BackendError."""
    error = _backend_error("Failed to query profiles", RuntimeError("boom"))
    assert type(error) is BackendError
    assert "boom" in str(error)


@pytest.mark.unit
def test_backend_error_passes_marketplace_errors_through():
    """Test errors already in the hierarchy are not rewrapped."""
    original = ReportSubmittedError("done")
    assert _backend_error("x", original) is original


@pytest.mark.unit
def test_search_filter_strips_filter_syntax():
    """Test search text cannot inject extra PostgREST clauses."""
    assert _search_filter("bondi, (beach)", ("city", "title")) == (
        "city.ilike.%bondi beach%,title.ilike.%bondi beach%"
    )


@pytest.mark.unit
def test_client_requires_credentials(monkeypatch):
    """Test a missing anon key raises ConfigurationError."""
    monkeypatch.setattr(AppConfig, "SUPABASE_ANON_KEY", None)
    monkeypatch.setattr(supabase_client, "_client", None)

    with pytest.raises(ConfigurationError):
        supabase_client.get_supabase_client()


@pytest.mark.unit
def test_client_singleton(monkeypatch):
    """Test the client is created once with the configured timeout."""
    monkeypatch.setattr(supabase_client, "_client", None)
    with patch("src.services.supabase_client.create_client", return_value=Mock()) as create:
        first = supabase_client.get_supabase_client()
        second = supabase_client.get_supabase_client()

    assert first is second
    create.assert_called_once()
    options = create.call_args.args[2]
    assert options.postgrest_client_timeout == AppConfig.SUPABASE_TIMEOUT_SECONDS
    supabase_client.reset_supabase_client()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_context_manager_applies_session_token(fake_supabase, session_provider):
    """Test the caller's token is set on the PostgREST session."""
    async with SupabaseClient(session_provider) as client:
        assert client is fake_supabase

    assert fake_supabase.postgrest.tokens == ["test-access-token"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_anonymous_query_after_authenticated_uses_anon_key(fake_supabase, session_provider):
    """Test a signed-in user's token is not reused by a later anonymous query."""
    await query_rows(PROFILES, session_provider)
    await query_rows(PROFILES)

    assert fake_supabase.authorizations == [
        "Bearer test-access-token",
        f"Bearer {AppConfig.SUPABASE_ANON_KEY}",
    ]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_query_rows_filters_orders_and_pages(fake_supabase):
    """Test equality, search, ordering and paging are applied."""
    fake_supabase.seed(
        PROFILES,
        {"id": "1", "city": "Sydney", "user_type": "buyers_agent", "reputation_score": 50},
        {"id": "2", "city": "Sydney", "user_type": "buyers_agent", "reputation_score": 90},
        {"id": "3", "city": "Sydney", "user_type": "conveyancer", "reputation_score": 70},
        {"id": "4", "city": "Perth", "user_type": "buyers_agent", "reputation_score": 99},
    )

    rows = await query_rows(
        PROFILES,
        equals={"user_type": "buyers_agent"},
        search="syd",
        search_columns=("city",),
        order_by="reputation_score",
        limit=1,
    )

    assert [r["id"] for r in rows] == ["2"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_query_rows_timeout(fake_supabase):
    """Test a timed out read raises BackendTimeoutError."""
    fake_supabase.failures[("select", PROFILES)] = httpx.ConnectTimeout("slow")

    with pytest.raises(BackendTimeoutError):
        await query_rows(PROFILES)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_insert_and_fetch_report(fake_supabase):
    """Test a report row round-trips through insert and lookup."""
    saved = await insert_report({"job_id": "job-1", "inspector_id": "i-1", "weather": "Sunny"})

    found = await get_report_for_job("job-1", "i-1")
    missing = await get_report_for_job("job-1", "i-2")

    assert found["id"] == saved["id"]
    assert found["weather"] == "Sunny"
    assert missing is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_insert_report_without_id(fake_supabase):
    """Test an insert that returns no row raises BackendError."""
    empty = Mock()
    empty.execute.return_value = Mock(data=[])
    with patch.object(fake_supabase, "table", return_value=Mock(insert=Mock(return_value=empty))):
        with pytest.raises(BackendError, match="no ID returned"):
            await insert_report({"job_id": "job-1"})


@pytest.mark.unit
@pytest.mark.asyncio
async def test_update_report_refuses_submitted_row(fake_supabase):
    """Test updating a submitted report raises ReportSubmittedError."""
    fake_supabase.seed(
        INSPECTION_REPORTS,
        {"id": "d1", "job_id": "job-1", "inspector_id": "i-1", "submitted_at": "2024-12-09T12:00:00+00:00"},
    )

    with pytest.raises(ReportSubmittedError):
        await update_report("d1", {"weather": "Rain"})
    assert fake_supabase.tables[INSPECTION_REPORTS][0].get("weather") is None
