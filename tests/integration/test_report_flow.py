"""Integration tests: an inspector's report from first open to submission."""

import pytest

from src.models.report import MatchStatus, Recommendation
from src.services.report_draft import DraftState, ReportDraftSession
from src.services.supabase_client import INSPECTION_JOBS, INSPECTION_REPORTS, NOTIFICATIONS
from tests.utils.assertions import assert_valid_report_row


@pytest.mark.integration
@pytest.mark.asyncio
async def test_report_written_over_two_visits(seeded_backend, inspector_context, session_provider):
    """Test a draft saved on one visit is resumed and submitted on the next."""
    first = ReportDraftSession("job-1", inspector_context, session_provider)
    await first.load()
    first.update_field("inspection_time", "09:30")
    first.update_field("weather", "Light rain")
    first.update_brief_match(0, MatchStatus.MEETS, notes="Three plus a study")
    first.toggle_item("red_flags", "Damp/mould")
    first.add_section_photos(10, ["https://cdn.test/damp.jpg"])
    first.confirm_disclaimer()
    assert await first.autosave() is True

    second = ReportDraftSession("job-1", inspector_context, session_provider)
    await second.load()

    assert second.draft_id == first.draft_id
    assert second.state is DraftState.DRAFT
    assert second.form.weather == "Light rain"
    assert second.form.brief_matches[0].notes == "Three plus a study"
    assert second.form.red_flags == ["Damp/mould"]
    assert second.form.section_photos == {"10": ["https://cdn.test/damp.jpg"]}
    assert second.disclaimer_confirmed is False

    second.update_field("overall_score", 6)
    second.update_field("recommendation", Recommendation.WORTH_CONSIDERING)
    second.update_field("summary_comments", "Sound house with a damp problem in the laundry.")
    second.confirm_disclaimer()
    second.open_submit_dialog()
    await second.submit()

    rows = seeded_backend.tables[INSPECTION_REPORTS]
    assert len(rows) == 1
    assert_valid_report_row(rows[0])
    assert rows[0]["submitted_at"] is not None
    assert seeded_backend.tables[INSPECTION_JOBS][0]["status"] == "pending_review"
    assert len(seeded_backend.tables[NOTIFICATIONS]) == 1
    assert set(seeded_backend.postgrest.tokens) == {"test-access-token"}

    third = ReportDraftSession("job-1", inspector_context, session_provider)
    await third.load()
    assert third.state is DraftState.SUBMITTED
    assert await third.autosave() is False
