"""Argument parser for Use Case Manager CLI.

Updates:
  v0.3.0 - 2026-09-20 - Add the ``serve`` command and global ``--storage`` override.
  v0.2.0 - 2026-09-02 - Add edit flags, delete confirmation bypass, and list filters.
  v0.1.0 - 2026-08-20 - Initial add/list/show/stats/backup commands.
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from pathlib import Path

from models.use_case_model import (
    IMPLEMENTATION_STATUS_CHOICES,
    PRIORITY_CHOICES,
    STATUS_CHOICES,
)


def _add_record_options(parser: argparse.ArgumentParser) -> None:
    """Attach the field flags shared by ``add`` and ``edit``."""
    parser.add_argument("-t", "--title", type=str, default=None, help="Use case title.")
    parser.add_argument(
        "-d",
        "--description",
        type=str,
        default=None,
        help="Use case description.",
    )
    parser.add_argument("-c", "--category", type=str, default=None, help="Use case category.")
    parser.add_argument(
        "-m",
        "--model",
        dest="ai_model",
        type=str,
        default=None,
        help="AI model to use (e.g. gpt-4, claude-3).",
    )
    parser.add_argument(
        "-p",
        "--priority",
        choices=PRIORITY_CHOICES,
        default=None,
        help="Priority (low, medium, high).",
    )
    parser.add_argument(
        "--effort",
        dest="implementation_effort",
        type=str,
        default=None,
        help="Implementation effort score (1-10).",
    )
    parser.add_argument(
        "--benefit",
        dest="business_benefit",
        type=str,
        default=None,
        help="Business benefit score (1-10).",
    )
    parser.add_argument(
        "--implementation-status",
        dest="implementation_status",
        choices=IMPLEMENTATION_STATUS_CHOICES,
        default=None,
        help="Implementation status.",
    )
    parser.add_argument(
        "--prompt",
        type=str,
        default=None,
        help="Prompt or instructions text.",
    )
    parser.add_argument(
        "--tags",
        type=str,
        default=None,
        help="Comma-separated tags.",
    )
    parser.add_argument("--notes", type=str, default=None, help="Free-form notes.")


def build_parser() -> argparse.ArgumentParser:
    """Return the configured argument parser for the ``ucm`` launcher."""
    parser = argparse.ArgumentParser(
        prog="ucm",
        description="AI Use Case Manager - Organize and manage your AI use cases",
    )
    parser.add_argument(
        "--logging-config",
        type=Path,
        default=None,
        help="Path to logging configuration file (INI format)",
    )
    parser.add_argument(
        "--print-settings",
        action="store_true",
        help="Print resolved settings and exit",
    )
    parser.add_argument(
        "--storage",
        choices=("local", "nocodb"),
        default=None,
        help="Override the configured storage backend for this invocation.",
    )

    subparsers = parser.add_subparsers(dest="command")

    add_parser = subparsers.add_parser("add", help="Add a new use case.")
    _add_record_options(add_parser)

    list_parser = subparsers.add_parser("list", help="List use cases.")
    list_parser.add_argument(
        "-s",
        "--status",
        type=str,
        default=None,
        help=f"Filter by status ({', '.join(STATUS_CHOICES)}).",
    )
    list_parser.add_argument("-c", "--category", type=str, default=None, help="Filter by category.")
    list_parser.add_argument("-p", "--priority", type=str, default=None, help="Filter by priority.")
    list_parser.add_argument("-t", "--tag", type=str, default=None, help="Filter by tag.")
    list_parser.add_argument(
        "-i",
        "--implementation",
        type=str,
        default=None,
        help=(
            "Filter by implementation status "
            f"({', '.join(IMPLEMENTATION_STATUS_CHOICES)})."
        ),
    )
    list_parser.add_argument(
        "--search",
        type=str,
        default=None,
        help="Search in title, description, and tags.",
    )

    show_parser = subparsers.add_parser("show", help="Show detailed information about a use case.")
    show_parser.add_argument("use_case_id", type=str, help="Use case ID.")

    edit_parser = subparsers.add_parser("edit", help="Edit a use case.")
    edit_parser.add_argument("use_case_id", type=str, help="Use case ID.")
    _add_record_options(edit_parser)
    edit_parser.add_argument(
        "-s",
        "--status",
        choices=STATUS_CHOICES,
        default=None,
        help="Lifecycle status.",
    )

    delete_parser = subparsers.add_parser("delete", help="Delete a use case.")
    delete_parser.add_argument("use_case_id", type=str, help="Use case ID.")
    delete_parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="Skip the confirmation prompt.",
    )

    subparsers.add_parser("stats", help="Show statistics about your use cases.")
    subparsers.add_parser("backup", help="Create a backup of your use cases.")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API server.")
    serve_parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Interface to bind (defaults to the configured host).",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (defaults to the configured port).",
    )

    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Return parsed CLI arguments for the Use Case Manager launcher."""
    return build_parser().parse_args(argv)
