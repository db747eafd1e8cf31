"""
Scan a Hugging Face hub cache for directories that hold downloaded models.

Cache entries use the layout `models--<org>--<repo>/{refs,snapshots/<hash>/...}`.
"""

import os
from pathlib import Path
from typing import Optional

from si.utils.logging import logger

CACHE_TAG = "models"
CACHE_SEPARATOR = "--"
HIDDEN_PREFIX = "."


def parse_cache_dir_name(name: str) -> Optional[str]:
    """
    Derive a model ID from a cache directory name.

    "models--microsoft--DialoGPT-medium" -> "microsoft/DialoGPT-medium"

    Returns:
        The model ID, or None if the name is not a model cache entry
    """
    parts = name.split(CACHE_SEPARATOR)
    if len(parts) != 3 or parts[0] != CACHE_TAG:
        return None
    org, repo = parts[1], parts[2]
    if not org or not repo:
        return None
    return f"{org}/{repo}"


def cache_dir_name(model_id: str) -> str:
    """Inverse of parse_cache_dir_name: "org/repo" -> "models--org--repo"."""
    return CACHE_SEPARATOR.join([CACHE_TAG, *model_id.split("/")])


def is_model_cache_dir(path: Path) -> bool:
    """
    Check whether a directory looks like a downloaded model.

    It needs both `refs/` and `snapshots/`, and at least one snapshot.
    """
    snapshots = path / "snapshots"
    if not (path / "refs").is_dir() or not snapshots.is_dir():
        return False
    try:
        with os.scandir(snapshots) as it:
            return any(entry.is_dir() for entry in it)
    except OSError as e:
        logger.debug(f"Cannot list {snapshots}: {e}")
        return False


class CacheScanner:
    """Enumerates candidate model IDs in a cache root."""

    def scan(self, cache_root: Path) -> set[str]:
        """
        List model IDs present in the cache root.

        Only immediate children are inspected. Hidden entries, plain files,
        directories without a snapshot and names that do not parse as
        `models--org--repo` are skipped.
        """
        cache_root = Path(cache_root)
        if not cache_root.is_dir():
            logger.debug(f"Cache root {cache_root} does not exist")
            return set()

        found: set[str] = set()
        with os.scandir(cache_root) as it:
            for entry in it:
                if entry.name.startswith(HIDDEN_PREFIX) or not entry.is_dir():
                    continue
                if not is_model_cache_dir(Path(entry.path)):
                    logger.debug(f"Skipping {entry.name}: no snapshots")
                    continue

                model_id = parse_cache_dir_name(entry.name)
                if model_id is None:
                    logger.debug(f"Skipping {entry.name}: not a model directory")
                    continue
                found.add(model_id)

        logger.debug(f"Found {len(found)} cached models in {cache_root}")
        return found
