"""Application entry point for Use Case Manager.

Updates:
  v0.3.0 - 2026-09-20 - Add ``serve`` dispatch and per-invocation ``--storage`` override.
  v0.2.0 - 2026-09-02 - Release remote HTTP clients when commands finish.
  v0.1.0 - 2026-08-20 - Wire settings, logging, the catalog, and CLI commands.
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from cli.commands import COMMAND_SPECS
from cli.parser import build_parser, parse_args
from cli.runtime import setup_logging
from cli.settings_summary import print_settings_summary
from config import SettingsError, load_settings
from core import build_catalog

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from config import UseCaseManagerSettings
    from core import UseCaseCatalog


def _initialise_catalog(
    settings: UseCaseManagerSettings,
    logger: logging.Logger,
) -> UseCaseCatalog | None:
    try:
        return build_catalog(settings)
    except Exception as exc:  # pragma: no cover - surfaced to CLI
        logger.error("Failed to initialise use case catalog: %s", exc)
        return None


def _apply_setting_defaults(args: argparse.Namespace, settings: UseCaseManagerSettings) -> None:
    """Fill server options omitted on the command line from resolved settings."""
    if hasattr(args, "host") and args.host is None:
        args.host = settings.host
    if hasattr(args, "port") and args.port is None:
        args.port = settings.port


def _close_backend(catalog: UseCaseCatalog) -> None:
    close = getattr(catalog.backend, "close", None)
    if callable(close):
        close()


def main(argv: Sequence[str] | None = None) -> int:
    """Entrypoint that wires settings, the catalog, and CLI commands."""
    args = parse_args(argv)
    setup_logging(args.logging_config)

    logger = logging.getLogger("use_case_manager.main")
    overrides: dict[str, Any] = {}
    if args.storage:
        overrides["storage_backend"] = args.storage
    try:
        settings = load_settings(**overrides)
    except SettingsError as exc:
        cause = exc.__cause__ or exc
        logger.error("Failed to load settings: %s", cause)
        return 2

    if args.print_settings:
        print_settings_summary(settings)
        return 0

    command = getattr(args, "command", None)
    spec = COMMAND_SPECS.get(command)
    if spec is None:
        build_parser().print_help()
        return 1
    _apply_setting_defaults(args, settings)

    catalog = None
    if spec.requires_catalog:
        catalog = _initialise_catalog(settings, logger)
        if catalog is None:
            return 3

    try:
        return spec.handler(catalog, args, logger)
    finally:
        if catalog is not None:
            _close_backend(catalog)


if __name__ == "__main__":
    raise SystemExit(main())
