"""Shared fixtures: fake hub caches and an offline hub client."""

from pathlib import Path
from typing import Optional

import pytest

from si.models.errors import RemoteError
from si.models.scanner import cache_dir_name


def make_cache_entry(
    cache_root: Path,
    model_id: str,
    files: dict[str, bytes],
    revision: str = "0123456789abcdef",
) -> Path:
    """Create a hub cache entry with refs/main pointing at one snapshot."""
    model_dir = cache_root / cache_dir_name(model_id)
    refs = model_dir / "refs"
    snapshot = model_dir / "snapshots" / revision
    refs.mkdir(parents=True, exist_ok=True)
    snapshot.mkdir(parents=True, exist_ok=True)
    (refs / "main").write_text(revision)

    for name, content in files.items():
        path = snapshot / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)

    return model_dir


class FakeHub:
    """In-memory stand-in for HubClient. Downloads write files under root."""

    def __init__(self, root: Path):
        self.root = root
        self.repos: dict[str, dict[str, bytes]] = {}
        self.fail_on: Optional[str] = None
        self.downloaded: list[tuple[str, str]] = []

    async def get_remote_file_list(self, model_id: str) -> list[str]:
        if model_id not in self.repos:
            raise RemoteError(f"Failed to get info for `{model_id}`", model_id)
        return list(self.repos[model_id])

    async def download_file(self, model_id: str, filename: str) -> Path:
        if filename == self.fail_on:
            raise RemoteError(f"{filename} download failed", model_id, filename)
        path = self.root / model_id.replace("/", "--") / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.repos[model_id][filename])
        self.downloaded.append((model_id, filename))
        return path

    def resolve_local_path(self, model_id, filename, cache_dir=None):
        return None


@pytest.fixture
def cache_root(tmp_path):
    root = tmp_path / "hub"
    root.mkdir()
    return root


@pytest.fixture
def models_dir(tmp_path):
    return tmp_path / "models"


@pytest.fixture
def fake_hub(tmp_path):
    return FakeHub(tmp_path / "downloads")


@pytest.fixture
def cache_entry(cache_root):
    """Factory creating cache entries under cache_root."""

    def _make(model_id: str, files: dict[str, bytes], revision: str = "0123456789abcdef"):
        return make_cache_entry(cache_root, model_id, files, revision)

    return _make
