"""CLI command handlers for Use Case Manager.

Updates:
  v0.3.0 - 2026-09-20 - Add ``serve`` handler that hosts the HTTP API for the shared catalog.
  v0.2.1 - 2026-09-14 - Display unknown status values under an uncategorised bucket.
  v0.2.0 - 2026-09-02 - Non-interactive edit flags and delete confirmation bypass.
  v0.1.0 - 2026-08-20 - Initial add/list/show/stats/backup handlers.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from core import UseCaseManagerError
from models.use_case_model import (
    DEFAULT_CATEGORY,
    implementation_bucket,
    status_bucket,
)
from web import run_server

from .utils import parse_score, parse_tags, print_and_log

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from core import UseCaseCatalog
    from models.use_case_model import UseCase
else:  # pragma: no cover - runtime placeholders for type-only imports
    UseCaseCatalog = object
    UseCase = object

CommandHandler = Callable[[UseCaseCatalog | None, argparse.Namespace, logging.Logger], int]

_STATUS_LABELS = {
    "active": "[active]",
    "archived": "[archived]",
    "draft": "[draft]",
    "uncategorized": "[?]",
}
_IMPLEMENTATION_LABELS = {
    "backlog": "backlog",
    "work_in_progress": "work in progress",
    "implemented": "implemented",
    "ignored": "ignored",
    "uncategorized": "uncategorized",
}
# argparse destination -> record key for field flags shared by add/edit.
_FIELD_FLAGS: dict[str, str] = {
    "title": "title",
    "description": "description",
    "category": "category",
    "ai_model": "aiModel",
    "priority": "priority",
    "status": "status",
    "implementation_status": "implementationStatus",
    "prompt": "prompt",
    "notes": "notes",
}


@dataclass(frozen=True)
class CommandSpec:
    """Metadata for dispatching CLI command handlers."""

    handler: CommandHandler
    requires_catalog: bool = True


def _stdin_is_interactive() -> bool:
    return sys.stdin.isatty()


def _collect_fields(args: argparse.Namespace) -> dict[str, Any]:
    """Return record fields supplied via CLI flags, validating scores."""
    fields: dict[str, Any] = {}
    for dest, key in _FIELD_FLAGS.items():
        value = getattr(args, dest, None)
        if value is not None:
            fields[key] = value
    tags = getattr(args, "tags", None)
    if tags is not None:
        fields["tags"] = parse_tags(tags)
    for dest, key in (
        ("implementation_effort", "implementationEffort"),
        ("business_benefit", "businessBenefit"),
    ):
        value = getattr(args, dest, None)
        if value is not None:
            fields[key] = parse_score(value)
    return fields


def _format_summary(use_case: UseCase) -> list[str]:
    status = _STATUS_LABELS[status_bucket(use_case.status)]
    implementation = _IMPLEMENTATION_LABELS[implementation_bucket(use_case.implementation_status)]
    lines = [
        f"{status} {use_case.title} ({use_case.id})",
        f"   {use_case.description}",
        (
            f"   Category: {use_case.category} | Priority: {use_case.priority} "
            f"| Model: {use_case.ai_model or 'n/a'}"
        ),
        (
            f"   Implementation: {implementation} | "
            f"Effort: {use_case.implementation_effort}/10 | "
            f"Benefit: {use_case.business_benefit}/10"
        ),
    ]
    if use_case.tags:
        lines.append("   Tags: " + " ".join(f"#{tag}" for tag in use_case.tags))
    return lines


def _format_local_time(use_case_time: Any) -> str:
    return use_case_time.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def run_add(
    catalog: UseCaseCatalog | None,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    if catalog is None:
        raise ValueError("Use case catalog is required to add use cases.")
    try:
        fields = _collect_fields(args)
    except ValueError as exc:
        logger.error("Invalid use case fields: %s", exc)
        return 5
    title = str(fields.get("title") or "").strip()
    if not title and _stdin_is_interactive():
        title = input("Use case title: ").strip()
    if not title:
        logger.error("Title is required")
        return 5
    fields["title"] = title
    fields.setdefault("category", DEFAULT_CATEGORY)
    try:
        use_case = catalog.create(fields)
    except UseCaseManagerError as exc:
        logger.error("Failed to create use case: %s", exc)
        return 5
    print_and_log(logger, logging.INFO, "Use case created successfully!")
    print(f"ID: {use_case.id}")
    return 0


def run_list(
    catalog: UseCaseCatalog | None,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    if catalog is None:
        raise ValueError("Use case catalog is required to list use cases.")
    catalog.load()
    filters = {
        "status": getattr(args, "status", None),
        "category": getattr(args, "category", None),
        "priority": getattr(args, "priority", None),
        "tag": getattr(args, "tag", None),
        "implementation": getattr(args, "implementation", None),
        "search": getattr(args, "search", None),
    }
    use_cases = catalog.get_all(filters)
    if not use_cases:
        print("No use cases found.")
        return 0
    print(f"\nFound {len(use_cases)} use case(s):\n")
    for use_case in use_cases:
        print("\n".join(_format_summary(use_case)))
        print()
    return 0


def run_show(
    catalog: UseCaseCatalog | None,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    if catalog is None:
        raise ValueError("Use case catalog is required to show use cases.")
    use_case = catalog.get_by_id(args.use_case_id)
    if use_case is None:
        print_and_log(logger, logging.ERROR, "Use case not found.")
        return 4
    status = _STATUS_LABELS[status_bucket(use_case.status)]
    print("\nUse Case Details:\n")
    print(f"{status} {use_case.title}")
    print(f"ID: {use_case.id}")
    print(f"Description: {use_case.description}")
    print(f"Category: {use_case.category}")
    print(f"AI Model: {use_case.ai_model or 'n/a'}")
    print(f"Priority: {use_case.priority}")
    print(f"Status: {use_case.status}")
    print(
        "Implementation: "
        f"{_IMPLEMENTATION_LABELS[implementation_bucket(use_case.implementation_status)]} "
        f"(effort {use_case.implementation_effort}/10, "
        f"benefit {use_case.business_benefit}/10)"
    )
    if use_case.tags:
        print("Tags: " + " ".join(f"#{tag}" for tag in use_case.tags))
    print(f"Created: {_format_local_time(use_case.created_at)}")
    print(f"Updated: {_format_local_time(use_case.updated_at)}")
    if use_case.prompt:
        print("\nPrompt/Instructions:")
        print(use_case.prompt)
    if use_case.notes:
        print("\nNotes:")
        print(use_case.notes)
    if use_case.examples:
        print("\nExamples:")
        for index, example in enumerate(use_case.examples, start=1):
            print(f"{index}. {example}")
    return 0


def run_edit(
    catalog: UseCaseCatalog | None,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    if catalog is None:
        raise ValueError("Use case catalog is required to edit use cases.")
    try:
        fields = _collect_fields(args)
    except ValueError as exc:
        logger.error("Invalid use case fields: %s", exc)
        return 5
    if catalog.get_by_id(args.use_case_id) is None:
        print_and_log(logger, logging.ERROR, "Use case not found.")
        return 4
    if not fields:
        logger.error("Nothing to update; pass at least one field option.")
        return 5
    try:
        catalog.update(args.use_case_id, fields)
    except UseCaseManagerError as exc:
        logger.error("Failed to update use case: %s", exc)
        return 5
    print_and_log(logger, logging.INFO, "Use case updated successfully!")
    return 0


def run_delete(
    catalog: UseCaseCatalog | None,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    if catalog is None:
        raise ValueError("Use case catalog is required to delete use cases.")
    use_case = catalog.get_by_id(args.use_case_id)
    if use_case is None:
        print_and_log(logger, logging.ERROR, "Use case not found.")
        return 4
    if not getattr(args, "yes", False):
        if not _stdin_is_interactive():
            logger.error("Refusing to delete without confirmation; pass --yes.")
            return 5
        answer = input(f'Are you sure you want to delete "{use_case.title}"? [y/N]: ')
        if answer.strip().lower() not in {"y", "yes"}:
            print("Delete cancelled.")
            return 0
    try:
        catalog.delete(args.use_case_id)
    except UseCaseManagerError as exc:
        logger.error("Failed to delete use case: %s", exc)
        return 5
    print_and_log(logger, logging.INFO, "Use case deleted successfully!")
    return 0


def run_stats(
    catalog: UseCaseCatalog | None,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    if catalog is None:
        raise ValueError("Use case catalog is required for statistics.")
    stats = catalog.get_stats()
    print("\nUse Case Statistics:\n")
    print(f"Total use cases: {stats.total}")
    for heading, counts in (
        ("By Status", stats.by_status),
        ("By Category", stats.by_category),
        ("By Priority", stats.by_priority),
    ):
        if not counts:
            continue
        print(f"\n{heading}:")
        for label, count in counts.items():
            print(f"  {label}: {count}")
    return 0


def run_backup(
    catalog: UseCaseCatalog | None,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    if catalog is None:
        raise ValueError("Use case catalog is required for backups.")
    backup_file = catalog.backup()
    if backup_file is None:
        print_and_log(logger, logging.ERROR, "Failed to create backup.")
        return 5
    print_and_log(logger, logging.INFO, "Backup created successfully!")
    print(f"File: {backup_file}")
    return 0


def run_serve(
    catalog: UseCaseCatalog | None,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    if catalog is None:
        raise ValueError("Use case catalog is required to serve the HTTP API.")
    host = str(args.host)
    port = int(args.port)
    logger.info("AI Use Case Manager server running on http://%s:%s", host, port)
    run_server(catalog, host=host, port=port)
    return 0


COMMAND_SPECS: dict[str | None, CommandSpec] = {
    "add": CommandSpec(run_add),
    "list": CommandSpec(run_list),
    "show": CommandSpec(run_show),
    "edit": CommandSpec(run_edit),
    "delete": CommandSpec(run_delete),
    "stats": CommandSpec(run_stats),
    "backup": CommandSpec(run_backup),
    "serve": CommandSpec(run_serve),
}


__all__ = ["CommandSpec", "COMMAND_SPECS"]
