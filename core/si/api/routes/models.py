"""Models API routes."""

from dataclasses import dataclass
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException

from si.api.manager_store import get_manager, get_reconciler
from si.api.schemas import DownloadRequest, ModelResponse, SyncResponse
from si.models.catalog import ModelRecord
from si.models.errors import CatalogError, CatalogParseError
from si.models.manager import CatalogManager
from si.models.reconciler import Reconciler
from si.utils.logging import logger

router = APIRouter(prefix="/models", tags=["models"])


@dataclass
class DownloadTracker:
    """Track download progress of one model."""
    status: str = "pending"
    files_done: int = 0
    files_total: int = 0
    progress_percent: float = 0.0
    error: Optional[str] = None

    def update_progress(self, done: int, total: int):
        self.files_done = done
        self.files_total = total
        if total > 0:
            self.progress_percent = round((done / total) * 100, 1)

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "files_done": self.files_done,
            "files_total": self.files_total,
            "progress_percent": self.progress_percent,
            "error": self.error,
        }


# Track active downloads by model ID
active_downloads: dict[str, DownloadTracker] = {}


def _to_response(record: ModelRecord) -> dict:
    return ModelResponse(
        model_id=record.model_id,
        files=[{"size": f.size, "path": str(f.path)} for f in record.files],
        total_size=record.total_size,
    ).model_dump()


# ─────────────────────────────────────────────────────────
# ENDPOINTS
# ─────────────────────────────────────────────────────────


@router.get("")
def list_models(manager: CatalogManager = Depends(get_manager)):
    """List all cataloged models."""
    logger.info("Listing models")
    try:
        models = manager.list_models()
    except CatalogParseError as e:
        raise HTTPException(500, str(e))
    return {"models": [_to_response(m) for m in models]}


@router.post("/download")
async def download_model(
    request: DownloadRequest,
    background_tasks: BackgroundTasks,
    manager: CatalogManager = Depends(get_manager),
):
    """Start downloading a model."""
    model_id = request.model_id

    tracker = active_downloads.get(model_id)
    if tracker and tracker.status in ("starting", "downloading"):
        return {"status": "already_downloading", "model_id": model_id}

    active_downloads[model_id] = DownloadTracker(status="starting")
    background_tasks.add_task(_download_task, manager, model_id)

    return {"status": "started", "model_id": model_id}


async def _download_task(manager: CatalogManager, model_id: str):
    """Background download task."""
    tracker = active_downloads[model_id]

    try:
        tracker.status = "downloading"
        await manager.download_model(model_id, progress_callback=tracker.update_progress)
        tracker.status = "completed"
        tracker.progress_percent = 100.0
        logger.info(f"Model {model_id} downloaded and cataloged")

    except CatalogError as e:
        logger.error(f"Download failed: {e}")
        tracker.status = "error"
        tracker.error = str(e)

    except Exception as e:
        logger.error(f"Unexpected error downloading {model_id}: {e}")
        tracker.status = "error"
        tracker.error = str(e)


@router.get("/download/{model_id:path}/status")
async def download_status(model_id: str):
    """Check download status."""
    if model_id not in active_downloads:
        raise HTTPException(404, "Download not found")
    return active_downloads[model_id].to_dict()


@router.post("/sync", response_model=SyncResponse)
def sync_models(dry_run: bool = False, reconciler: Reconciler = Depends(get_reconciler)):
    """Reconcile the catalog with the local hub cache."""
    logger.info(f"Syncing catalog (dry_run={dry_run})")
    report = reconciler.sync(dry_run=dry_run)
    return report.to_dict()


@router.get("/{model_id:path}")
def get_model(model_id: str, manager: CatalogManager = Depends(get_manager)):
    """Get a specific model."""
    try:
        model = manager.get_model(model_id)
    except CatalogParseError as e:
        raise HTTPException(500, str(e))
    if not model:
        raise HTTPException(404, "Model not found")

    return {"model": _to_response(model)}
