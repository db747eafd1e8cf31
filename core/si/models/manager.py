"""Catalog manager - downloads models and keeps the catalog up to date."""

import asyncio
from pathlib import Path
from typing import Callable, Optional

from si.models.catalog import CatalogStore, ModelFile, ModelRecord
from si.models.errors import CatalogIOError, RemoteError
from si.models.hub import HubClient
from si.utils.logging import logger


class CatalogManager:
    """Owns the catalog for one models directory."""

    def __init__(self, models_dir: Path, hub: HubClient | None = None) -> None:
        """Initialize the manager.

        Args:
            models_dir: Directory holding the catalog document
            hub: Hub client used for downloads
        """
        self.models_dir = Path(models_dir)
        if not self.models_dir.exists():
            logger.debug(f"Creating models directory at {self.models_dir}")
            try:
                self.models_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise CatalogIOError(
                    f"Failed to create models dir {self.models_dir}: {e}", str(self.models_dir)
                ) from e

        self.store = CatalogStore(self.models_dir)
        self.hub = hub or HubClient()

    def list_models(self) -> list[ModelRecord]:
        """List cataloged models. CatalogParseError propagates to the caller."""
        return self.store.list()

    def get_model(self, model_id: str) -> Optional[ModelRecord]:
        """Get a cataloged model, or None."""
        return self.store.get(model_id)

    def register(self, record: ModelRecord) -> None:
        """Add or replace a record in the catalog."""
        self.store.upsert(record)

    async def download_model(
        self,
        model_id: str,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> ModelRecord:
        """
        Download every file of a model and record it in the catalog.

        Files are fetched one at a time. The first failure aborts the whole
        download and leaves the catalog untouched; files already fetched stay
        in the hub cache.

        Args:
            model_id: Hugging Face repository ID
            progress_callback: Optional callback (files_done, files_total)

        Returns:
            The record written to the catalog

        Raises:
            RemoteError: If listing or downloading fails
            CatalogIOError: If a downloaded file cannot be read or the catalog written
        """
        logger.info(f"Downloading model {model_id}...")
        try:
            filenames = await self.hub.get_remote_file_list(model_id)
        except RemoteError as e:
            logger.error(f"Download failed: {e}")
            raise
        total = len(filenames)

        files: list[ModelFile] = []
        for i, filename in enumerate(filenames, start=1):
            try:
                local_path = await self.hub.download_file(model_id, filename)
            except RemoteError as e:
                logger.error(f"Download failed: {e}")
                raise

            try:
                size = local_path.stat().st_size
            except OSError as e:
                raise CatalogIOError(
                    f"Couldn't get file size for `{local_path}`: {e}", str(local_path)
                ) from e
            files.append(ModelFile(size=size, path=local_path.absolute()))

            if progress_callback:
                progress_callback(i, total)

        record = ModelRecord(model_id=model_id, files=files)
        # Upsert may wait on the catalog lock; keep it off the event loop
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self.register, record)

        logger.info(f"Downloaded {model_id}: {total} files, {record.total_size} bytes")
        return record
