"""Tests for the UseCase dataclass and record helpers.

Updates:
  v0.2.0 - 2026-09-14 - Cover display buckets for unrecognised enum values.
  v0.1.1 - 2026-09-02 - Cover monotonic ``updatedAt`` on merge.
  v0.1.0 - 2026-08-20 - Cover defaults, round trips, and legacy ``case_id`` migration.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from models.use_case_model import (
    RECORD_FIELDS,
    UNCATEGORIZED_BUCKET,
    UseCase,
    format_timestamp,
    implementation_bucket,
    priority_bucket,
    record_identifier,
    record_matches_id,
    status_bucket,
)


def _full_payload() -> dict[str, object]:
    return {
        "id": "uc_full",
        "title": "Summarize tickets",
        "description": "Condense support tickets into one paragraph",
        "category": "support",
        "aiModel": "gpt-4",
        "prompt": "Summarize the following ticket:",
        "tags": ["support", "summaries"],
        "status": "draft",
        "createdAt": "2026-01-02T03:04:05.678Z",
        "updatedAt": "2026-01-03T03:04:05.678Z",
        "priority": "high",
        "examples": ["ticket 1", "ticket 2"],
        "notes": "pilot with tier-1",
        "implementationEffort": 3,
        "businessBenefit": 8,
        "implementationStatus": "work_in_progress",
        "gridX": 120.5,
        "gridY": 42.0,
    }


def test_from_record_applies_defaults_for_partial_input() -> None:
    """Ensure absent fields fall back to their documented defaults."""
    record = UseCase.from_record({"title": "Only a title"}).to_record()

    assert list(record) == list(RECORD_FIELDS)
    assert record["id"].startswith("uc_")
    assert record["title"] == "Only a title"
    assert record["description"] == ""
    assert record["category"] == "general"
    assert record["aiModel"] == ""
    assert record["tags"] == []
    assert record["status"] == "active"
    assert record["priority"] == "medium"
    assert record["examples"] == []
    assert record["implementationEffort"] == 5
    assert record["businessBenefit"] == 5
    assert record["implementationStatus"] == "backlog"
    assert record["gridX"] is None
    assert record["gridY"] is None
    assert record["createdAt"].endswith("Z")
    assert record["updatedAt"] >= record["createdAt"]


def test_from_record_treats_none_as_absent() -> None:
    """Ensure explicit nulls are replaced with defaults."""
    use_case = UseCase.from_record({"category": None, "tags": None, "businessBenefit": None})

    assert use_case.category == "general"
    assert use_case.tags == []
    assert use_case.business_benefit == 5


def test_full_payload_round_trip_is_lossless() -> None:
    """Ensure construct, serialise, construct preserves every field."""
    payload = _full_payload()

    first = UseCase.from_record(payload)
    record = first.to_record()
    second = UseCase.from_record(record)

    assert record == payload
    assert second == first
    assert second.to_record() == payload


def test_legacy_case_id_is_migrated_to_id() -> None:
    """Ensure records saved with ``case_id`` load under ``id``."""
    use_case = UseCase.from_record({"case_id": "legacy-7", "title": "Old"})

    assert use_case.id == "legacy-7"
    assert "case_id" not in use_case.to_record()


def test_id_wins_over_legacy_case_id() -> None:
    use_case = UseCase.from_record({"id": "new", "case_id": "old"})

    assert use_case.id == "new"


def test_update_advances_updated_at_and_keeps_identity() -> None:
    """Ensure merges refresh ``updatedAt`` without touching ``id`` or ``createdAt``."""
    use_case = UseCase.from_record(_full_payload())
    before_updated = use_case.updated_at
    before_created = use_case.created_at

    applied = use_case.update(
        {
            "implementationStatus": "implemented",
            "id": "hijack",
            "createdAt": "1999-01-01T00:00:00.000Z",
            "case_id": "hijack-too",
            "unknown": "ignored",
        }
    )

    assert use_case.implementation_status == "implemented"
    assert use_case.id == "uc_full"
    assert use_case.created_at == before_created
    assert use_case.updated_at >= before_updated
    assert applied == ["implementationStatus", "updatedAt"]


def test_update_never_moves_updated_at_backwards() -> None:
    """Ensure a future ``updatedAt`` is kept when the clock is behind it."""
    future = datetime.now(UTC) + timedelta(days=365)
    use_case = UseCase(title="Ahead", updated_at=future)

    use_case.update({"title": "Still ahead"})

    assert use_case.updated_at >= future.replace(microsecond=(future.microsecond // 1000) * 1000)


def test_update_accepts_attribute_names_and_coerces_types() -> None:
    """Ensure snake_case keys are accepted and values coerced to stored types."""
    use_case = UseCase(title="Coerce")

    applied = use_case.update(
        {"ai_model": "claude-3", "implementation_effort": "7", "tags": "solo", "gridX": "3.5"}
    )

    assert use_case.ai_model == "claude-3"
    assert use_case.implementation_effort == 7
    assert use_case.tags == ["solo"]
    assert use_case.grid_x == 3.5
    assert applied[:4] == ["aiModel", "implementationEffort", "tags", "gridX"]


def test_created_after_updated_is_normalised() -> None:
    use_case = UseCase.from_record(
        {"createdAt": "2026-05-01T00:00:00.000Z", "updatedAt": "2026-04-01T00:00:00.000Z"}
    )

    assert use_case.updated_at == use_case.created_at


def test_format_timestamp_uses_millisecond_z_suffix() -> None:
    moment = datetime(2026, 8, 20, 12, 30, 15, 123456, tzinfo=UTC)

    assert format_timestamp(moment) == "2026-08-20T12:30:15.123Z"


def test_display_buckets_map_unknown_values() -> None:
    """Ensure unrecognised enum values are grouped rather than rejected."""
    assert status_bucket("archived") == "archived"
    assert status_bucket("paused") == UNCATEGORIZED_BUCKET
    assert priority_bucket("urgent") == UNCATEGORIZED_BUCKET
    assert implementation_bucket("implemented") == "implemented"
    assert implementation_bucket("shipped") == UNCATEGORIZED_BUCKET


def test_record_identifier_helpers() -> None:
    assert record_identifier({"case_id": "abc"}) == "abc"
    assert record_identifier({}) is None
    assert record_matches_id({"case_id": "abc"}, "abc")
    assert record_matches_id({"id": "abc"}, "abc")
    assert not record_matches_id({"id": "abc"}, "xyz")
