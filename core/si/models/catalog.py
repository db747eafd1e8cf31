"""
Catalog of downloaded models.
Persists model records as a single JSON document under the models directory.
"""

import fcntl
import os
import tempfile
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from pydantic import BaseModel, NonNegativeInt, ValidationError

from si.config import CATALOG_FILENAME, CATALOG_LOCK_TIMEOUT
from si.models.errors import CatalogIOError, CatalogLockTimeout, CatalogParseError
from si.utils.logging import logger


class ModelFile(BaseModel):
    """A single file belonging to a model."""

    size: NonNegativeInt  # bytes
    path: Path  # absolute location on disk


class ModelRecord(BaseModel):
    """A model known to the catalog."""

    model_id: str  # e.g. "microsoft/DialoGPT-medium"
    files: list[ModelFile] = []

    @property
    def total_size(self) -> int:
        return sum(f.size for f in self.files)


class CatalogDocument(BaseModel):
    """The persisted catalog: model records in insertion order."""

    models: list[ModelRecord] = []


class CatalogStore:
    """
    File-backed catalog document.

    Writes replace the document atomically and upserts run under an
    exclusive advisory lock, so a single writer is enforced across processes.
    """

    def __init__(self, models_dir: Path, lock_timeout: float = CATALOG_LOCK_TIMEOUT):
        self.models_dir = Path(models_dir)
        self.path = self.models_dir / CATALOG_FILENAME
        self.lock_path = self.path.with_name(self.path.name + ".lock")
        self.lock_timeout = lock_timeout

    def load(self) -> CatalogDocument:
        """
        Read the catalog document.

        Returns:
            The stored document, or an empty one if the file does not exist

        Raises:
            CatalogParseError: If the file exists but is not a valid catalog
            CatalogIOError: If the file exists but cannot be read
        """
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug(f"Catalog not found at {self.path}, using empty catalog")
            return CatalogDocument()
        except UnicodeDecodeError as e:
            raise CatalogParseError(
                f"Catalog {self.path} is not valid UTF-8: {e}", str(self.path)
            ) from e
        except OSError as e:
            raise CatalogIOError(f"Failed to read catalog {self.path}: {e}", str(self.path)) from e

        logger.debug(f"Reading catalog from {self.path}")
        try:
            return CatalogDocument.model_validate_json(text)
        except ValidationError as e:
            raise CatalogParseError(
                f"Failed to parse catalog {self.path}: {e}", str(self.path)
            ) from e

    def save(self, doc: CatalogDocument) -> None:
        """Overwrite the catalog with doc, replacing the file atomically."""
        logger.debug(f"Saving catalog to {self.path}")
        data = doc.model_dump_json(indent=2)

        tmp_name = None
        try:
            self.models_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.models_dir, prefix=f".{CATALOG_FILENAME}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise CatalogIOError(f"Failed to write catalog {self.path}: {e}", str(self.path)) from e

    def upsert(self, record: ModelRecord) -> None:
        """Replace the record with the same model_id, or append it."""
        with self.lock():
            doc = self.load()
            for i, existing in enumerate(doc.models):
                if existing.model_id == record.model_id:
                    logger.debug(f"Model {record.model_id} already in catalog, replacing")
                    doc.models[i] = record
                    break
            else:
                logger.debug(f"Adding model {record.model_id} to catalog")
                doc.models.append(record)

            self.save(doc)

        logger.info(f"Upserted {record.model_id} ({len(record.files)} files)")

    def list(self) -> list[ModelRecord]:
        """List all catalog records."""
        return self.load().models

    def get(self, model_id: str) -> Optional[ModelRecord]:
        """Get a record by model ID."""
        for record in self.list():
            if record.model_id == model_id:
                return record
        return None

    @contextmanager
    def lock(self) -> Generator[None, None, None]:
        """
        Hold an exclusive lock on the catalog for a read-modify-write cycle.

        Raises:
            CatalogLockTimeout: If the lock is not acquired within lock_timeout
        """
        try:
            self.models_dir.mkdir(parents=True, exist_ok=True)
            lock_file = open(self.lock_path, "w")
        except OSError as e:
            raise CatalogIOError(
                f"Failed to open catalog lock {self.lock_path}: {e}", str(self.lock_path)
            ) from e

        start_time = time.monotonic()
        acquired = False

        try:
            while True:
                try:
                    fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
                    acquired = True
                    break
                except OSError:
                    if time.monotonic() - start_time >= self.lock_timeout:
                        break
                    time.sleep(0.05)

            if not acquired:
                raise CatalogLockTimeout(
                    f"Could not lock {self.lock_path} within {self.lock_timeout} seconds"
                )

            yield

        finally:
            if acquired:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)
            lock_file.close()
