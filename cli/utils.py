"""Shared CLI utility functions for Use Case Manager commands.

Updates:
  v0.2.0 - 2026-09-14 - Add comma-separated tag parsing and score validation helpers.
  v0.1.0 - 2026-08-20 - Extract stdout logging, masking, and path helpers.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from logging import Logger
else:  # pragma: no cover - runtime placeholders for type-only imports
    Logger = Any

SCORE_MIN = 1
SCORE_MAX = 10


def print_and_log(logger: Logger, level: int, message: str) -> None:
    """Log *message* at *level* and mirror it to stdout."""
    logger.log(level, message)
    print(message)


def mask_secret(value: str | None) -> str:
    """Return an obfuscated representation of secret configuration values."""
    if not value:
        return "not set"
    secret = value.strip()
    if len(secret) <= 6:
        return "set (****)"
    prefix = secret[:4]
    suffix = secret[-4:]
    return f"set ({prefix}...{suffix})"


def describe_path(path_value: object, *, expect_directory: bool) -> str:
    """Return a human-friendly description of *path_value* suitability."""
    try:
        path = Path(path_value) if path_value is not None else None  # type: ignore[arg-type]
    except TypeError:
        path = None
    if path is None:
        return "not set"

    resolved = path.expanduser()
    if resolved.exists():
        if expect_directory and not resolved.is_dir():
            return f"{resolved} (exists but is not a directory)"
        if not expect_directory and resolved.is_dir():
            return f"{resolved} (exists but is a directory)"
        return f"{resolved} (exists)"
    return f"{resolved} (missing - created on demand)"


def parse_tags(value: str | None) -> list[str]:
    """Split a comma-separated tag string, dropping blanks."""
    if not value:
        return []
    return [tag.strip() for tag in value.split(",") if tag.strip()]


def parse_score(value: str | int | None) -> int:
    """Return *value* as an integer score in the 1-10 range or raise ValueError."""
    if value is None:
        raise ValueError("a score between 1 and 10 is required")
    try:
        score = int(str(value).strip())
    except ValueError as exc:
        raise ValueError(f"Please enter a number between 1 and 10 (got {value!r})") from exc
    if not SCORE_MIN <= score <= SCORE_MAX:
        raise ValueError(f"Please enter a number between 1 and 10 (got {score})")
    return score
