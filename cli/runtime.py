"""Runtime boot helpers for Use Case Manager CLI.

Updates:
  v0.1.1 - 2026-09-20 - Quieten httpx request logging unless debug logging is enabled.
  v0.1.0 - 2026-08-20 - Extract logging configuration helpers.
"""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path

DEFAULT_LOGGING_CONFIG = Path("config/logging.conf")


def setup_logging(logging_conf_path: Path | None) -> None:
    """Configure logging using *logging_conf_path* when available."""
    path = logging_conf_path or DEFAULT_LOGGING_CONFIG
    if path.exists():
        try:
            logging.config.fileConfig(path, disable_existing_loggers=False)
            return
        except Exception:  # pragma: no cover - configuration fallback
            pass
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    configure_http_logging(logging.getLogger().isEnabledFor(logging.DEBUG))


def configure_http_logging(enabled: bool) -> None:
    """Enable or disable per-request logs from the httpx client stack."""
    for name in ("httpx", "httpcore"):
        http_logger = logging.getLogger(name)
        http_logger.setLevel(logging.NOTSET if enabled else logging.WARNING)
