"""Custom assertion helpers."""

from typing import Any, Dict


def assert_valid_browse_response(payload: Dict[str, Any], collection: str) -> None:
    """Assert that a browse endpoint payload is well formed."""
    assert payload["collection"] == collection
    assert isinstance(payload["results"], list)
    assert payload["count"] == len(payload["results"])
    for item in payload["results"]:
        assert "id" in item
        assert "distance_km" in item


def assert_valid_report_row(row: Dict[str, Any]) -> None:
    """Assert that an inspection_reports row carries its keys and JSON columns as text."""
    assert row.get("id")
    assert row.get("job_id")
    assert row.get("inspector_id")
    assert isinstance(row["brief_matches"], str)
    assert isinstance(row["section_photos"], str)
