"""Shared catalog manager instance for API routes."""

from typing import Optional

from si.config import HF_CACHE_DIR, MODELS_DIR
from si.models.hub import HubClient
from si.models.manager import CatalogManager
from si.models.reconciler import Reconciler

manager: Optional[CatalogManager] = None
reconciler: Optional[Reconciler] = None


def get_manager() -> CatalogManager:
    """Get or create the catalog manager."""
    global manager
    if manager is None:
        manager = CatalogManager(MODELS_DIR, hub=HubClient(cache_dir=HF_CACHE_DIR))
    return manager


def get_reconciler() -> Reconciler:
    """Get or create the reconciler bound to the shared manager."""
    global reconciler
    if reconciler is None:
        reconciler = Reconciler(get_manager(), cache_root=HF_CACHE_DIR)
    return reconciler
