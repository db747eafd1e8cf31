"""Models module - catalog, hub cache scanning and reconciliation."""

from si.models.catalog import CatalogDocument, CatalogStore, ModelFile, ModelRecord
from si.models.errors import (
    CatalogError,
    CatalogIOError,
    CatalogLockTimeout,
    CatalogParseError,
    ReconstructionError,
    RemoteError,
)
from si.models.hub import HubClient
from si.models.inspector import CacheInspector
from si.models.manager import CatalogManager
from si.models.reconciler import Reconciler, SyncReport
from si.models.scanner import CacheScanner, cache_dir_name, parse_cache_dir_name

__all__ = [
    "CatalogDocument",
    "CatalogStore",
    "ModelFile",
    "ModelRecord",
    "CatalogError",
    "CatalogIOError",
    "CatalogLockTimeout",
    "CatalogParseError",
    "ReconstructionError",
    "RemoteError",
    "HubClient",
    "CacheInspector",
    "CatalogManager",
    "Reconciler",
    "SyncReport",
    "CacheScanner",
    "cache_dir_name",
    "parse_cache_dir_name",
]
