"""FastAPI application exposing the use case catalog over JSON.

Every list, lookup, and stats request reloads the catalog from its backend first so
edits made by other processes (the CLI, a shared NocoDB table) are visible.
Error payloads use a flat ``{"error": message}`` body.

Updates:
  v0.3.1 - 2026-10-18 - Reload before single lookups; answer duplicate ids with 409.
  v0.3.0 - 2026-09-20 - Add category and tag listing routes.
  v0.2.0 - 2026-09-02 - Map storage and not-found errors to JSON responses.
  v0.1.0 - 2026-08-20 - Initial CRUD, position, stats, and backup routes.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import uvicorn
from fastapi import Body, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.exceptions import (
    UseCaseConflictError,
    UseCaseManagerError,
    UseCaseNotFoundError,
)

if TYPE_CHECKING:  # pragma: no cover - typing only
    from core.catalog import UseCaseCatalog

logger = logging.getLogger("use_case_manager.web")

NOT_FOUND_MESSAGE = "Use case not found"
POSITION_FIELDS: tuple[str, ...] = (
    "gridX",
    "gridY",
    "implementationEffort",
    "businessBenefit",
)


def _not_found() -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": NOT_FOUND_MESSAGE})


def create_app(catalog: UseCaseCatalog) -> FastAPI:
    """Return a FastAPI application serving *catalog*."""
    app = FastAPI(
        title="AI Use Case Manager",
        description="Organize and manage AI use cases",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.catalog = catalog

    @app.exception_handler(UseCaseNotFoundError)
    def _handle_not_found(request: Request, exc: UseCaseNotFoundError) -> JSONResponse:
        logger.warning("%s %s: %s", request.method, request.url.path, exc)
        return _not_found()

    @app.exception_handler(UseCaseConflictError)
    def _handle_conflict(request: Request, exc: UseCaseConflictError) -> JSONResponse:
        logger.warning("%s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=409, content={"error": str(exc)})

    @app.exception_handler(UseCaseManagerError)
    def _handle_manager_error(request: Request, exc: UseCaseManagerError) -> JSONResponse:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={"error": str(exc)})

    @app.exception_handler(Exception)
    def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error serving %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": str(exc)})

    @app.get("/api/use-cases")
    def list_use_cases(request: Request) -> list[dict[str, Any]]:
        catalog.load()
        filters = dict(request.query_params)
        return [use_case.to_record() for use_case in catalog.get_all(filters)]

    @app.get("/api/use-cases/{use_case_id}", response_model=None)
    def get_use_case(use_case_id: str) -> dict[str, Any] | JSONResponse:
        catalog.load()
        use_case = catalog.get_by_id(use_case_id)
        if use_case is None:
            return _not_found()
        return use_case.to_record()

    @app.post("/api/use-cases", status_code=201)
    def create_use_case(
        payload: dict[str, Any] | None = Body(default=None),
    ) -> dict[str, Any]:
        use_case = catalog.create(payload or {})
        return use_case.to_record()

    @app.put("/api/use-cases/{use_case_id}", response_model=None)
    def update_use_case(
        use_case_id: str,
        payload: dict[str, Any] | None = Body(default=None),
    ) -> dict[str, Any] | JSONResponse:
        use_case = catalog.update(use_case_id, payload or {})
        if use_case is None:
            return _not_found()
        return use_case.to_record()

    @app.patch("/api/use-cases/{use_case_id}/position", response_model=None)
    def update_position(
        use_case_id: str,
        payload: dict[str, Any] | None = Body(default=None),
    ) -> dict[str, Any] | JSONResponse:
        body = payload or {}
        fields = {key: body[key] for key in POSITION_FIELDS if key in body}
        use_case = catalog.update(use_case_id, fields)
        if use_case is None:
            return _not_found()
        return use_case.to_record()

    @app.delete("/api/use-cases/{use_case_id}", response_model=None)
    def delete_use_case(use_case_id: str) -> dict[str, str] | JSONResponse:
        if catalog.delete(use_case_id) is None:
            return _not_found()
        return {"message": "Use case deleted successfully"}

    @app.get("/api/stats")
    def get_stats() -> dict[str, Any]:
        catalog.load()
        return catalog.get_stats().to_dict()

    @app.get("/api/categories")
    def get_categories() -> list[str]:
        return catalog.get_categories()

    @app.get("/api/tags")
    def get_tags() -> list[str]:
        return catalog.get_tags()

    @app.post("/api/backup", response_model=None)
    def create_backup() -> dict[str, str] | JSONResponse:
        backup_file = catalog.backup()
        if backup_file is None:
            return JSONResponse(status_code=500, content={"error": "Failed to create backup"})
        return {"message": "Backup created successfully", "file": str(backup_file)}

    return app


def run_server(catalog: UseCaseCatalog, *, host: str, port: int) -> None:
    """Serve *catalog* with uvicorn until interrupted."""
    uvicorn.run(create_app(catalog), host=host, port=port, log_config=None)
