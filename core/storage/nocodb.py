"""NocoDB record-store backend with one-way local fallback.

The backend talks to the NocoDB v2 REST API over ``httpx``. The first
operation decides whether the remote table is usable; when the API token or
table id is missing, or the reachability probe fails, every later call is
delegated to an internal :class:`~core.storage.local.JsonFileBackend` for the
rest of the process lifetime.

Updates:
  v0.3.0 - 2026-09-20 - Follow ``pageInfo`` when listing rows.
  v0.2.0 - 2026-09-02 - Cache the direct/fallback decision as an explicit backend mode.
  v0.1.0 - 2026-08-20 - Introduce NocoDB backend with local JSON fallback.
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx

from models.use_case_model import record_matches_id

from ..exceptions import UseCaseNotFoundError, UseCaseStorageError
from .base import RawRecord, backup_timestamp, ensure_directory, json_dumps_records, logger
from .local import JsonFileBackend

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

DEFAULT_BASE_URL = "http://localhost:8080"
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_PAGE_SIZE = 100
ROW_ID_KEY = "Id"


class BackendMode(str, Enum):
    """Enumerate the resolved operating mode of the remote backend."""

    DIRECT = "direct"
    FALLBACK = "fallback"


class NocoDBBackend:
    """Persist use cases in a NocoDB table, degrading to a local JSON document."""

    backup_prefix = "nocodb-backup"

    def __init__(
        self,
        *,
        base_url: str | None = DEFAULT_BASE_URL,
        api_token: str | None = None,
        table_id: str | None = None,
        data_dir: str | Path = "data",
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        page_size: int = DEFAULT_PAGE_SIZE,
        client_factory: Callable[[], httpx.Client] | None = None,
        fallback: JsonFileBackend | None = None,
    ) -> None:
        self._base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self._api_token = (api_token or "").strip() or None
        self._table_id = (table_id or "").strip() or None
        self._data_dir = Path(data_dir).expanduser()
        self._timeout = timeout_seconds
        self._page_size = max(1, int(page_size))
        self._client_factory = client_factory
        self._client: httpx.Client | None = None
        self._fallback_store = fallback
        self._mode: BackendMode | None = None

    # ------------------------------------------------------------------
    # Mode resolution
    # ------------------------------------------------------------------

    @property
    def mode(self) -> BackendMode:
        """Return the resolved mode, probing the remote table on first access."""
        if self._mode is None:
            self._mode = self._resolve_mode()
        return self._mode

    @property
    def is_fallback(self) -> bool:
        return self.mode is BackendMode.FALLBACK

    @property
    def fallback_store(self) -> JsonFileBackend:
        if self._fallback_store is None:
            self._fallback_store = JsonFileBackend(self._data_dir)
        return self._fallback_store

    @property
    def table_url(self) -> str:
        return f"{self._base_url}/api/v2/tables/{self._table_id}/records"

    def _resolve_mode(self) -> BackendMode:
        if not self._api_token or not self._table_id:
            logger.warning(
                "NOCODB_API_TOKEN or NOCODB_TABLE_ID not set; using local JSON storage at %s",
                self._data_dir,
            )
            return BackendMode.FALLBACK
        try:
            response = self._http().get(self.table_url, params={"limit": 1})
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning(
                "Unable to reach NocoDB at %s (%s); falling back to local JSON storage at %s",
                self._base_url,
                exc,
                self._data_dir,
            )
            return BackendMode.FALLBACK
        logger.info("Connected to NocoDB table %s at %s", self._table_id, self._base_url)
        return BackendMode.DIRECT

    def _http(self) -> httpx.Client:
        if self._client is None:
            if self._client_factory is not None:
                self._client = self._client_factory()
            else:
                self._client = httpx.Client(timeout=self._timeout)
            self._client.headers.update(
                {"xc-token": self._api_token or "", "Content-Type": "application/json"}
            )
        return self._client

    def close(self) -> None:
        """Release the underlying HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------
    # StorageBackend contract
    # ------------------------------------------------------------------

    def load(self) -> list[RawRecord]:
        if self.is_fallback:
            return self.fallback_store.load()
        try:
            return self._list_rows()
        except httpx.HTTPError as exc:
            logger.error("Error loading data from NocoDB: %s", exc)
            return []

    def create(self, record: Mapping[str, Any]) -> RawRecord | None:
        if self.is_fallback:
            return self.fallback_store.create(record)
        try:
            response = self._http().post(self.table_url, json=dict(record))
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Error creating record in NocoDB: %s", exc)
            raise UseCaseStorageError(f"Failed to create use case {record.get('id')}") from exc
        try:
            payload: object = response.json() if response.content else {}
        except ValueError:
            payload = {}
        return dict(payload) if isinstance(payload, dict) else dict(record)

    def update(self, use_case_id: str, fields: Mapping[str, Any]) -> bool:
        if self.is_fallback:
            return self.fallback_store.update(use_case_id, fields)
        row_id = self._find_row_id(use_case_id)
        try:
            response = self._http().patch(self.table_url, json={ROW_ID_KEY: row_id, **fields})
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Error updating record in NocoDB: %s", exc)
            raise UseCaseStorageError(f"Failed to update use case {use_case_id}") from exc
        return True

    def delete(self, use_case_id: str) -> bool:
        if self.is_fallback:
            return self.fallback_store.delete(use_case_id)
        row_id = self._find_row_id(use_case_id)
        try:
            response = self._http().request("DELETE", self.table_url, json={ROW_ID_KEY: row_id})
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Error deleting record from NocoDB: %s", exc)
            raise UseCaseStorageError(f"Failed to delete use case {use_case_id}") from exc
        return True

    def backup(self) -> Path | None:
        if self.is_fallback:
            return self.fallback_store.backup()
        records = self.load()
        backup_file = self._data_dir / f"{self.backup_prefix}-{backup_timestamp()}.json"
        try:
            ensure_directory(self._data_dir)
            backup_file.write_text(json_dumps_records(records), encoding="utf-8")
        except OSError as exc:
            logger.error("Error creating backup %s: %s", backup_file, exc)
            return None
        logger.info("Backup written to %s", backup_file)
        return backup_file

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _list_rows(self) -> list[RawRecord]:
        rows: list[RawRecord] = []
        offset = 0
        client = self._http()
        while True:
            response = client.get(
                self.table_url,
                params={"limit": self._page_size, "offset": offset},
            )
            response.raise_for_status()
            try:
                payload: object = response.json()
            except json.JSONDecodeError:
                logger.error("NocoDB returned a non-JSON payload for %s", self.table_url)
                return rows
            if not isinstance(payload, dict):
                return rows
            page = payload.get("list")
            if not isinstance(page, list):
                return rows
            rows.extend(dict(item) for item in page if isinstance(item, dict))
            page_info = payload.get("pageInfo")
            if not isinstance(page_info, dict) or page_info.get("isLastPage", True):
                return rows
            if len(page) < self._page_size:
                return rows
            offset += len(page)

    def _find_row_id(self, use_case_id: str) -> Any:
        try:
            rows = self._list_rows()
        except httpx.HTTPError as exc:
            logger.error("Error locating record in NocoDB: %s", exc)
            raise UseCaseStorageError(f"Failed to look up use case {use_case_id}") from exc
        for row in rows:
            if record_matches_id(row, use_case_id):
                row_id = row.get(ROW_ID_KEY)
                if row_id is not None:
                    return row_id
        raise UseCaseNotFoundError(f"Record not found: {use_case_id}")


__all__ = ["BackendMode", "NocoDBBackend"]
