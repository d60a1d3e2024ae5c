"""Data models for Use Case Manager.

Updates: v0.2.0 - 2026-09-14 - Export display bucket helpers.
Updates: v0.1.0 - 2026-08-20 - Export UseCase dataclass.
"""

from .use_case_model import (
    UseCase,
    format_timestamp,
    generate_use_case_id,
    implementation_bucket,
    priority_bucket,
    status_bucket,
)

__all__ = [
    "UseCase",
    "format_timestamp",
    "generate_use_case_id",
    "implementation_bucket",
    "priority_bucket",
    "status_bucket",
]
