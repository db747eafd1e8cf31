"""
Reconcile the catalog with the contents of the hub cache.
"""

from dataclasses import dataclass, field
from pathlib import Path

from si.models.errors import CatalogIOError, CatalogParseError, ReconstructionError
from si.models.inspector import CacheInspector
from si.models.manager import CatalogManager
from si.models.scanner import CacheScanner
from si.utils.logging import logger


@dataclass
class SyncReport:
    """Outcome of a sync run. Not persisted."""

    dry_run: bool = False
    messages: list[str] = field(default_factory=list)
    added: set[str] = field(default_factory=set)
    # Never populated: sync does not prune the catalog
    removed: set[str] = field(default_factory=set)
    missing: set[str] = field(default_factory=set)

    @property
    def discrepancy_count(self) -> int:
        return len(self.added) + len(self.removed) + len(self.missing)

    def log(self, message: str) -> None:
        self.messages.append(message)
        logger.info(message)

    def to_dict(self) -> dict:
        return {
            "dry_run": self.dry_run,
            "messages": list(self.messages),
            "added": sorted(self.added),
            "removed": sorted(self.removed),
            "missing": sorted(self.missing),
            "discrepancy_count": self.discrepancy_count,
        }


class Reconciler:
    """
    Diffs the catalog against the hub cache and repairs what it can.

    Models found in the cache but not in the catalog are reconstructed and
    added. Cataloged models missing from the cache are only reported.
    """

    def __init__(
        self,
        manager: CatalogManager,
        cache_root: Path,
        scanner: CacheScanner | None = None,
        inspector: CacheInspector | None = None,
    ):
        self.manager = manager
        self.cache_root = Path(cache_root)
        self.scanner = scanner or CacheScanner()
        self.inspector = inspector or CacheInspector(manager.hub)

    def sync(self, cache_root: Path | None = None, dry_run: bool = False) -> SyncReport:
        """
        Compare catalog and cache.

        Args:
            cache_root: Cache to scan, defaults to the reconciler's cache root
            dry_run: Report drift without writing to the catalog

        Returns:
            SyncReport with messages and the added/missing model IDs
        """
        cache_root = Path(cache_root) if cache_root else self.cache_root
        report = SyncReport(dry_run=dry_run)

        try:
            indexed = {m.model_id for m in self.manager.list_models()}
        except CatalogParseError as e:
            # A malformed catalog is treated as empty here, unlike list_models()
            logger.warning(f"Ignoring unreadable catalog during sync: {e}")
            indexed = set()

        present = self.scanner.scan(cache_root)

        not_indexed = present - indexed
        not_cached = indexed - present

        for model_id in sorted(not_indexed):
            if dry_run:
                report.log(f"Found local model not in index: {model_id} (would add)")
                report.added.add(model_id)
                continue

            report.log(f"Found local model not in index: {model_id}")
            try:
                record = self.inspector.reconstruct(cache_root, model_id)
                self.manager.register(record)
            except (ReconstructionError, CatalogIOError, CatalogParseError) as e:
                report.log(f"Failed to add {model_id} to index: {e}")
                logger.warning(f"Skipping {model_id}: {e}")
                continue

            report.log(f"Added {model_id} to index ({len(record.files)} files)")
            report.added.add(model_id)

        for model_id in sorted(not_cached):
            report.log(f"Indexed but missing in cache: {model_id}")
            report.missing.add(model_id)

        if not not_indexed and not not_cached:
            report.log("All models are in sync")

        return report
