"""Tests for the FastAPI use case routes.

Updates:
  v0.3.1 - 2026-10-18 - Cover reloading lookups, duplicate ids, and unexpected errors.
  v0.3.0 - 2026-09-20 - Cover category and tag listing routes.
  v0.2.0 - 2026-09-02 - Cover JSON error payloads for not-found and storage failures.
  v0.1.0 - 2026-08-20 - Cover CRUD, position, stats, and backup routes.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from core import UseCaseCatalog, UseCaseNotFoundError, UseCaseStorageError
from core.storage import JsonFileBackend
from web import create_app


@pytest.fixture()
def backend(tmp_path: Path) -> JsonFileBackend:
    return JsonFileBackend(tmp_path / "data")


@pytest.fixture()
def client(backend: JsonFileBackend) -> TestClient:
    return TestClient(create_app(UseCaseCatalog(backend)))


def _create(client: TestClient, **fields: object) -> dict[str, object]:
    response = client.post("/api/use-cases", json=fields)
    assert response.status_code == 201
    return response.json()


def test_create_returns_record_with_defaults(client: TestClient) -> None:
    """Ensure POST answers 201 with the fully defaulted record."""
    record = _create(client, title="Summarize tickets", implementationEffort=3)

    assert record["title"] == "Summarize tickets"
    assert record["implementationEffort"] == 3
    assert record["businessBenefit"] == 5
    assert record["priority"] == "medium"
    assert record["implementationStatus"] == "backlog"
    assert client.get(f"/api/use-cases/{record['id']}").json() == record


def test_create_without_body_uses_defaults(client: TestClient) -> None:
    response = client.post("/api/use-cases")

    assert response.status_code == 201
    assert response.json()["category"] == "general"


def test_list_reloads_and_filters(client: TestClient, backend: JsonFileBackend) -> None:
    """Ensure list requests see external writes and honour query filters."""
    _create(client, title="Kept", status="archived", tags=["ops"])
    _create(client, title="Other", status="active")
    backend.create({"id": "external", "title": "From CLI", "status": "archived"})

    response = client.get("/api/use-cases", params={"status": "archived"})

    assert response.status_code == 200
    assert [item["title"] for item in response.json()] == ["Kept", "From CLI"]
    tagged = client.get("/api/use-cases", params={"tag": "ops", "search": "KEP"}).json()
    assert [item["title"] for item in tagged] == ["Kept"]


def test_get_by_id_sees_external_writes(client: TestClient, backend: JsonFileBackend) -> None:
    backend.create({"id": "external", "title": "From CLI"})

    response = client.get("/api/use-cases/external")

    assert response.status_code == 200
    assert response.json()["title"] == "From CLI"


def test_duplicate_id_is_rejected_with_conflict(client: TestClient) -> None:
    """Ensure a second create with an existing id is refused and not stored."""
    _create(client, id="dup", title="First")

    response = client.post("/api/use-cases", json={"id": "dup", "title": "Second"})

    assert response.status_code == 409
    assert "dup" in response.json()["error"]
    listed = client.get("/api/use-cases").json()
    assert [item["title"] for item in listed] == ["First"]


def test_unknown_id_returns_not_found_payload(client: TestClient) -> None:
    for response in (
        client.get("/api/use-cases/missing"),
        client.put("/api/use-cases/missing", json={"title": "x"}),
        client.patch("/api/use-cases/missing/position", json={"gridX": 1}),
        client.delete("/api/use-cases/missing"),
    ):
        assert response.status_code == 404
        assert response.json() == {"error": "Use case not found"}


def test_put_merges_fields(client: TestClient) -> None:
    record = _create(client, title="Before", notes="keep me")

    response = client.put(
        f"/api/use-cases/{record['id']}",
        json={"title": "After", "id": "ignored"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == record["id"]
    assert body["title"] == "After"
    assert body["notes"] == "keep me"
    assert body["createdAt"] == record["createdAt"]
    assert body["updatedAt"] >= record["updatedAt"]


def test_position_patch_applies_only_layout_fields(client: TestClient) -> None:
    """Ensure the position route ignores anything but grid and score fields."""
    record = _create(client, title="Plotted")

    response = client.patch(
        f"/api/use-cases/{record['id']}/position",
        json={"gridX": 10.5, "gridY": 20, "businessBenefit": 9, "title": "Nope"},
    )

    body = response.json()
    assert response.status_code == 200
    assert body["gridX"] == 10.5
    assert body["gridY"] == 20.0
    assert body["businessBenefit"] == 9
    assert body["title"] == "Plotted"


def test_delete_returns_message(client: TestClient) -> None:
    record = _create(client, title="Short lived")

    response = client.delete(f"/api/use-cases/{record['id']}")

    assert response.status_code == 200
    assert response.json() == {"message": "Use case deleted successfully"}
    assert client.get(f"/api/use-cases/{record['id']}").status_code == 404


def test_stats_categories_and_tags(client: TestClient) -> None:
    _create(client, title="A", category="support", tags=["b", "a"], priority="high")
    _create(client, title="B", category="legal", tags=["a"], status="draft")

    stats = client.get("/api/stats").json()

    assert stats == {
        "total": 2,
        "byStatus": {"active": 1, "draft": 1},
        "byCategory": {"support": 1, "legal": 1},
        "byPriority": {"high": 1, "medium": 1},
    }
    assert client.get("/api/categories").json() == ["legal", "support"]
    assert client.get("/api/tags").json() == ["a", "b"]


def test_backup_route_reports_file(client: TestClient, backend: JsonFileBackend) -> None:
    _create(client, title="Saved")

    response = client.post("/api/backup")

    body = response.json()
    assert response.status_code == 200
    assert body["message"] == "Backup created successfully"
    backup_file = Path(body["file"])
    assert backup_file.parent == backend.data_dir
    assert json.loads(backup_file.read_text(encoding="utf-8"))[0]["title"] == "Saved"


class _BrokenBackend(JsonFileBackend):
    def update(self, use_case_id: str, fields: object) -> bool:  # type: ignore[override]
        raise UseCaseStorageError("remote write failed")

    def delete(self, use_case_id: str) -> bool:
        raise UseCaseNotFoundError(f"Record not found: {use_case_id}")

    def backup(self) -> Path | None:
        return None


def test_storage_failures_map_to_json_errors(tmp_path: Path) -> None:
    """Ensure backend errors surface as 500/404 payloads and leave memory intact."""
    backend = _BrokenBackend(tmp_path)
    catalog = UseCaseCatalog(backend)
    client = TestClient(create_app(catalog))
    record = _create(client, title="Fragile")

    update = client.put(f"/api/use-cases/{record['id']}", json={"title": "Changed"})
    assert update.status_code == 500
    assert update.json() == {"error": "remote write failed"}
    stored = catalog.get_by_id(str(record["id"]))
    assert stored is not None
    assert stored.title == "Fragile"

    delete = client.delete(f"/api/use-cases/{record['id']}")
    assert delete.status_code == 404
    assert catalog.get_by_id(str(record["id"])) is not None

    backup = client.post("/api/backup")
    assert backup.status_code == 500
    assert backup.json() == {"error": "Failed to create backup"}


class _ExplodingBackend(JsonFileBackend):
    def backup(self) -> Path | None:
        raise RuntimeError("disk on fire")


def test_unexpected_errors_return_json_payload(tmp_path: Path) -> None:
    client = TestClient(
        create_app(UseCaseCatalog(_ExplodingBackend(tmp_path))),
        raise_server_exceptions=False,
    )

    response = client.post("/api/backup")

    assert response.status_code == 500
    assert response.json() == {"error": "disk on fire"}
