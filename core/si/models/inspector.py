"""
Rebuild catalog records from the raw contents of the hub cache.
"""

import os
from pathlib import Path

from huggingface_hub.utils import HFValidationError

from si.models.catalog import ModelFile, ModelRecord
from si.models.errors import CatalogIOError, ReconstructionError
from si.models.hub import HubClient
from si.models.scanner import cache_dir_name
from si.utils.logging import logger


class CacheInspector:
    """
    Reconstructs a ModelRecord for a model that is cached but not cataloged.

    Well-known files are looked up through the hub client first. If none are
    cached, every file of the first non-empty snapshot is recorded instead.
    """

    # Config, weights and tokenizer files most repositories ship
    WELL_KNOWN_FILES = [
        "config.json",
        "generation_config.json",
        "model.safetensors",
        "model.safetensors.index.json",
        "pytorch_model.bin",
        "pytorch_model.bin.index.json",
        "tokenizer.json",
        "tokenizer_config.json",
        "special_tokens_map.json",
        "vocab.json",
        "merges.txt",
        "tokenizer.model",
    ]

    def __init__(self, hub: HubClient | None = None):
        self.hub = hub or HubClient()

    def reconstruct(self, cache_root: Path, model_id: str) -> ModelRecord:
        """
        Build a record for model_id from the cache.

        Args:
            cache_root: Hub cache directory
            model_id: Model ID, e.g. "acme/model-a"

        Returns:
            Record listing the cached files with their sizes

        Raises:
            ReconstructionError: If the model directory or its files are missing
        """
        model_dir = Path(cache_root) / cache_dir_name(model_id)
        if not model_dir.is_dir():
            raise ReconstructionError(
                f"No cache directory for `{model_id}` at {model_dir}", model_id
            )

        try:
            files = self._probe_well_known(Path(cache_root), model_id)
        except HFValidationError as e:
            raise ReconstructionError(
                f"`{model_id}` is not a valid hub repository ID: {e}", model_id
            ) from e

        if not files:
            logger.debug(f"No well-known files for {model_id}, walking snapshots")
            try:
                files = self._walk_snapshots(model_dir)
            except OSError as e:
                raise ReconstructionError(
                    f"Failed to read snapshots of `{model_id}`: {e}", model_id
                ) from e

        if not files:
            raise ReconstructionError(f"No cached files found for `{model_id}`", model_id)

        return ModelRecord(model_id=model_id, files=files)

    def _probe_well_known(self, cache_root: Path, model_id: str) -> list[ModelFile]:
        files = []
        for filename in self.WELL_KNOWN_FILES:
            path = self.hub.resolve_local_path(model_id, filename, cache_dir=cache_root)
            logger.debug(f"Probe {model_id}/{filename}: {path}")
            if path is not None:
                files.append(_model_file(path))
        return files

    def _walk_snapshots(self, model_dir: Path) -> list[ModelFile]:
        """Record all files of the first snapshot that has any, in listing order."""
        snapshots = model_dir / "snapshots"
        if not snapshots.is_dir():
            return []

        with os.scandir(snapshots) as it:
            snapshot_dirs = [Path(entry.path) for entry in it if entry.is_dir()]

        for snapshot in snapshot_dirs:
            files: list[ModelFile] = []
            _collect_files(snapshot, files)
            if files:
                return files
        return []


def _collect_files(directory: Path, files: list[ModelFile]) -> None:
    # Symlinked directories are not followed; symlinked files are
    with os.scandir(directory) as it:
        for entry in it:
            if entry.is_dir(follow_symlinks=False):
                _collect_files(Path(entry.path), files)
            elif entry.is_file():
                files.append(_model_file(Path(entry.path)))


def _model_file(path: Path) -> ModelFile:
    try:
        size = path.stat().st_size
    except OSError as e:
        raise CatalogIOError(f"Couldn't get file size for `{path}`: {e}", str(path)) from e
    return ModelFile(size=size, path=path.absolute())
