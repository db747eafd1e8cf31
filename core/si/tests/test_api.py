"""
API route tests with the shared manager replaced by a temporary one.
"""

import pytest
from fastapi.testclient import TestClient

from si import __version__
from si.api.manager_store import get_manager, get_reconciler
from si.api.routes import models as model_routes
from si.main import app
from si.models.catalog import ModelRecord
from si.models.manager import CatalogManager
from si.models.reconciler import Reconciler


@pytest.fixture
def manager(models_dir, fake_hub):
    return CatalogManager(models_dir, hub=fake_hub)


@pytest.fixture
def client(manager, cache_root):
    app.dependency_overrides[get_manager] = lambda: manager
    app.dependency_overrides[get_reconciler] = lambda: Reconciler(manager, cache_root=cache_root)
    model_routes.active_downloads.clear()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "version": __version__}


def test_list_models_empty(client):
    response = client.get("/api/models")

    assert response.status_code == 200
    assert response.json() == {"models": []}


def test_list_models_malformed_catalog(client, models_dir):
    (models_dir / "model_index.json").write_text("invalid json")

    response = client.get("/api/models")

    assert response.status_code == 500


def test_get_model_with_slash_in_id(client, manager):
    manager.register(ModelRecord(model_id="acme/model-a", files=[]))

    response = client.get("/api/models/acme/model-a")

    assert response.status_code == 200
    assert response.json()["model"] == {"model_id": "acme/model-a", "files": [], "total_size": 0}


def test_get_unknown_model(client):
    response = client.get("/api/models/acme/unknown")

    assert response.status_code == 404


def test_download_runs_in_background(client, fake_hub):
    fake_hub.repos["acme/model-a"] = {"a.bin": b"0" * 4, "b.bin": b"0" * 6}

    response = client.post("/api/models/download", json={"model_id": "acme/model-a"})

    assert response.json() == {"status": "started", "model_id": "acme/model-a"}

    status = client.get("/api/models/download/acme/model-a/status").json()
    assert status["status"] == "completed"
    assert status["files_done"] == 2

    listed = client.get("/api/models").json()["models"]
    assert [m["model_id"] for m in listed] == ["acme/model-a"]
    assert listed[0]["total_size"] == 10


def test_download_failure_is_tracked(client, fake_hub):
    response = client.post("/api/models/download", json={"model_id": "acme/missing"})
    assert response.status_code == 200

    status = client.get("/api/models/download/acme/missing/status").json()
    assert status["status"] == "error"
    assert "acme/missing" in status["error"]


def test_download_status_unknown(client):
    response = client.get("/api/models/download/acme/nothing/status")

    assert response.status_code == 404


def test_sync_dry_run(client, cache_entry, models_dir):
    cache_entry("acme/model-a", {"weights.bin": b"0" * 10})

    response = client.post("/api/models/sync", params={"dry_run": True})

    assert response.status_code == 200
    body = response.json()
    assert body["dry_run"] is True
    assert body["added"] == ["acme/model-a"]
    assert body["discrepancy_count"] == 1
    assert not (models_dir / "model_index.json").exists()


def test_sync_adds_models(client, cache_entry):
    cache_entry("acme/model-a", {"weights.bin": b"0" * 10})

    body = client.post("/api/models/sync").json()

    assert body["added"] == ["acme/model-a"]
    assert client.get("/api/models/acme/model-a").status_code == 200


def test_unexpected_download_error_does_not_block_retry(client, fake_hub):
    fake_hub.repos["acme/model-a"] = {"a.bin": b"0"}

    async def broken(model_id, filename):
        raise RuntimeError("boom")

    fake_hub.download_file = broken

    client.post("/api/models/download", json={"model_id": "acme/model-a"})

    status = client.get("/api/models/download/acme/model-a/status").json()
    assert status["status"] == "error"
    assert status["error"] == "boom"

    retry = client.post("/api/models/download", json={"model_id": "acme/model-a"})
    assert retry.json()["status"] == "started"
