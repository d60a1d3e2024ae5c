"""HTTP API for the use case catalog.

Updates:
  v0.1.0 - 2026-08-20 - Expose the FastAPI application factory and server runner.
"""

from .app import create_app, run_server

__all__ = ["create_app", "run_server"]
