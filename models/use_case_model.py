"""Use case data model definitions.

Updates:
  v0.3.0 - 2026-09-14 - Map unrecognised enum values to an uncategorised display bucket.
  v0.2.1 - 2026-09-02 - Keep updated_at monotonic when merging partial updates.
  v0.2.0 - 2026-08-27 - Migrate legacy ``case_id`` identifiers into ``id`` on load.
  v0.1.0 - 2026-08-20 - Initial UseCase schema with record serialization helpers.
"""
from __future__ import annotations

import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

STATUS_CHOICES: tuple[str, ...] = ("active", "archived", "draft")
PRIORITY_CHOICES: tuple[str, ...] = ("low", "medium", "high")
IMPLEMENTATION_STATUS_CHOICES: tuple[str, ...] = (
    "backlog",
    "work_in_progress",
    "implemented",
    "ignored",
)
UNCATEGORIZED_BUCKET = "uncategorized"

DEFAULT_CATEGORY = "general"
DEFAULT_STATUS = "active"
DEFAULT_PRIORITY = "medium"
DEFAULT_IMPLEMENTATION_STATUS = "backlog"
DEFAULT_SCORE = 5

LEGACY_ID_KEY = "case_id"

# Record key -> dataclass attribute, in serialization order.
RECORD_FIELDS: dict[str, str] = {
    "id": "id",
    "title": "title",
    "description": "description",
    "category": "category",
    "aiModel": "ai_model",
    "prompt": "prompt",
    "tags": "tags",
    "status": "status",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "priority": "priority",
    "examples": "examples",
    "notes": "notes",
    "implementationEffort": "implementation_effort",
    "businessBenefit": "business_benefit",
    "implementationStatus": "implementation_status",
    "gridX": "grid_x",
    "gridY": "grid_y",
}
_ATTRIBUTE_TO_KEY: dict[str, str] = {attr: key for key, attr in RECORD_FIELDS.items()}
_IMMUTABLE_ATTRIBUTES = frozenset({"id", "created_at"})


def _utc_now() -> datetime:
    """Return an aware UTC timestamp."""
    return datetime.now(UTC)


def generate_use_case_id() -> str:
    """Return a fresh opaque use case identifier."""
    return f"uc_{uuid.uuid4().hex[:12]}"


def format_timestamp(value: datetime) -> str:
    """Serialise *value* as a millisecond-precision UTC ISO-8601 string with ``Z`` suffix."""
    utc_value = value.astimezone(UTC) if value.tzinfo else value.replace(tzinfo=UTC)
    return utc_value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _ensure_datetime(value: Any, fallback: datetime | None = None) -> datetime:
    """Parse incoming datetime values (isoformat strings or datetime)."""
    if isinstance(value, datetime):
        parsed = value
    elif value in (None, ""):
        return fallback or _utc_now()
    else:
        try:
            parsed = datetime.fromisoformat(str(value).strip())
        except ValueError:
            return fallback or _utc_now()
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    # Drop sub-millisecond precision so stored values survive a round trip.
    return parsed.astimezone(UTC).replace(microsecond=(parsed.microsecond // 1000) * 1000)


def _text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return str(value)


def _string_list(value: Any) -> list[str]:
    """Coerce list-like inputs into lists of strings, preserving order and duplicates."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value else []
    if isinstance(value, Iterable):
        return [str(item) for item in value]
    return [str(value)]


def _score(value: Any) -> int:
    if value is None or value == "":
        return DEFAULT_SCORE
    try:
        return int(value)
    except (TypeError, ValueError):
        return DEFAULT_SCORE


def _optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _bucket(value: str, choices: tuple[str, ...]) -> str:
    return value if value in choices else UNCATEGORIZED_BUCKET


def status_bucket(value: str) -> str:
    """Return the display bucket for a lifecycle status value."""
    return _bucket(value, STATUS_CHOICES)


def priority_bucket(value: str) -> str:
    """Return the display bucket for a priority value."""
    return _bucket(value, PRIORITY_CHOICES)


def implementation_bucket(value: str) -> str:
    """Return the display bucket for an implementation status value."""
    return _bucket(value, IMPLEMENTATION_STATUS_CHOICES)


def record_identifier(record: Mapping[str, Any]) -> str | None:
    """Return the canonical identifier of a raw record, honouring the legacy alias."""
    value = record.get("id") or record.get(LEGACY_ID_KEY)
    return str(value) if value else None


def record_matches_id(record: Mapping[str, Any], use_case_id: str) -> bool:
    """Return True when *record* carries *use_case_id* as ``id`` or legacy ``case_id``."""
    return use_case_id in (record.get("id"), record.get(LEGACY_ID_KEY))


@dataclass(slots=True)
class UseCase:
    """Dataclass representation of a cataloged AI use case."""

    id: str = field(default_factory=generate_use_case_id)
    title: str = ""
    description: str = ""
    category: str = DEFAULT_CATEGORY
    ai_model: str = ""
    prompt: str = ""
    tags: list[str] = field(default_factory=list)
    status: str = DEFAULT_STATUS
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)
    priority: str = DEFAULT_PRIORITY
    examples: list[str] = field(default_factory=list)
    notes: str = ""
    implementation_effort: int = DEFAULT_SCORE
    business_benefit: int = DEFAULT_SCORE
    implementation_status: str = DEFAULT_IMPLEMENTATION_STATUS
    grid_x: float | None = None
    grid_y: float | None = None

    def __post_init__(self) -> None:
        """Normalise timestamps so ``updated_at`` never precedes ``created_at``."""
        self.created_at = _ensure_datetime(self.created_at)
        self.updated_at = _ensure_datetime(self.updated_at, fallback=self.created_at)
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    def touch(self) -> None:
        """Refresh ``updated_at`` without ever moving it backwards."""
        now = _ensure_datetime(_utc_now())
        self.updated_at = max(now, self.updated_at)

    def update(self, data: Mapping[str, Any]) -> list[str]:
        """Shallow-merge *data* over the current fields and refresh ``updated_at``.

        Keys may use the serialised camelCase names or the attribute names.
        Identifier, timestamps, and unknown keys are ignored. Returns the
        record keys that were written, ``updatedAt`` always included.
        """
        applied: list[str] = []
        for key, value in data.items():
            attribute = RECORD_FIELDS.get(key) or (key if key in _ATTRIBUTE_TO_KEY else None)
            if attribute is None or attribute in _IMMUTABLE_ATTRIBUTES:
                continue
            if attribute == "updated_at":
                continue
            setattr(self, attribute, _coerce_attribute(attribute, value))
            applied.append(_ATTRIBUTE_TO_KEY[attribute])
        self.touch()
        applied.append("updatedAt")
        return applied

    def to_record(self) -> dict[str, Any]:
        """Return a flat JSON-serialisable mapping in stable field order."""
        record: dict[str, Any] = {}
        for key, attribute in RECORD_FIELDS.items():
            value = getattr(self, attribute)
            if isinstance(value, datetime):
                value = format_timestamp(value)
            elif isinstance(value, list):
                value = list(value)
            record[key] = value
        return record

    @classmethod
    def from_record(cls, data: Mapping[str, Any]) -> UseCase:
        """Hydrate a UseCase from a stored or partial mapping, applying defaults."""
        identifier = record_identifier(data) or generate_use_case_id()
        created_at = _ensure_datetime(data.get("createdAt"))
        return cls(
            id=identifier,
            title=_text(data.get("title")),
            description=_text(data.get("description")),
            category=_text(data.get("category")) or DEFAULT_CATEGORY,
            ai_model=_text(data.get("aiModel")),
            prompt=_text(data.get("prompt")),
            tags=_string_list(data.get("tags")),
            status=_text(data.get("status")) or DEFAULT_STATUS,
            created_at=created_at,
            updated_at=_ensure_datetime(data.get("updatedAt"), fallback=created_at),
            priority=_text(data.get("priority")) or DEFAULT_PRIORITY,
            examples=_string_list(data.get("examples")),
            notes=_text(data.get("notes")),
            implementation_effort=_score(data.get("implementationEffort")),
            business_benefit=_score(data.get("businessBenefit")),
            implementation_status=(
                _text(data.get("implementationStatus")) or DEFAULT_IMPLEMENTATION_STATUS
            ),
            grid_x=_optional_float(data.get("gridX")),
            grid_y=_optional_float(data.get("gridY")),
        )


def _coerce_attribute(attribute: str, value: Any) -> Any:
    """Coerce a merged value into the attribute's stored type."""
    if attribute in {"tags", "examples"}:
        return _string_list(value)
    if attribute in {"implementation_effort", "business_benefit"}:
        return _score(value)
    if attribute in {"grid_x", "grid_y"}:
        return _optional_float(value)
    return _text(value)


__all__ = [
    "DEFAULT_CATEGORY",
    "DEFAULT_IMPLEMENTATION_STATUS",
    "DEFAULT_PRIORITY",
    "DEFAULT_SCORE",
    "DEFAULT_STATUS",
    "IMPLEMENTATION_STATUS_CHOICES",
    "LEGACY_ID_KEY",
    "PRIORITY_CHOICES",
    "RECORD_FIELDS",
    "STATUS_CHOICES",
    "UNCATEGORIZED_BUCKET",
    "UseCase",
    "format_timestamp",
    "generate_use_case_id",
    "implementation_bucket",
    "priority_bucket",
    "record_identifier",
    "record_matches_id",
    "status_bucket",
]
