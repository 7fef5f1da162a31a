"""
Reconciliation service — persists a committed change set.

Order: internal-meta edits, then deletions (one batch), then accepted sync
values. Each entity is written on its own so one failure never blocks the
others; the report lists every outcome so callers can retry the failed
subset only.
Version: 1.0.0
"""
import logging
from typing import Any, Dict, List, Tuple

from catalog_hub.db.catalog_store import CatalogStore
from catalog_hub.schemas.catalog import Variant
from catalog_hub.schemas.commit import ChangeSet, CommitReport, EntityResult, EntityStatus
from catalog_hub.utils.batch_grouping import run_in_chunks

logger = logging.getLogger("reconciliation_service")


def _ok(entity_id: int, operation: str) -> EntityResult:
    return EntityResult(entity_id=entity_id, operation=operation, status=EntityStatus.SUCCESS)


def _failed(entity_id: int, operation: str, exc: Exception) -> EntityResult:
    logger.warning("commit %s failed variant_id=%s error=%s", operation, entity_id, exc)
    return EntityResult(entity_id=entity_id, operation=operation, status=EntityStatus.FAILED, reason=str(exc))


class ReconciliationService:
    """Writes edits, deletions and accepted sync values to the catalog store."""

    def __init__(self, catalog_store: CatalogStore, chunk_size: int = 50) -> None:
        self._store = catalog_store
        self._chunk_size = chunk_size

    async def commit(self, change_set: ChangeSet) -> CommitReport:
        results: List[EntityResult] = []

        results += await run_in_chunks(
            list(change_set.meta_edits.items()), self._persist_meta, self._chunk_size,
        )

        deleted = set(change_set.deletions)
        results += await self._delete(change_set.deletions)

        sync_items = [
            (variant_id, fields)
            for variant_id, fields in change_set.sync_updates.items()
            if variant_id not in deleted
        ]
        results += await run_in_chunks(sync_items, self._apply_sync, self._chunk_size)

        new_variants = [v for v in change_set.new_variants if v.variant_id not in deleted]
        results += await run_in_chunks(new_variants, self._insert_new, self._chunk_size)

        report = CommitReport(results=results)
        logger.info("commit finished succeeded=%d failed=%d", report.succeeded, report.failed)
        return report

    async def _persist_meta(self, item: Tuple[int, Dict[str, Any]]) -> EntityResult:
        variant_id, changes = item
        try:
            await self._store.merge_internal_meta(variant_id, changes)
        except Exception as exc:
            return _failed(variant_id, "edit", exc)
        return _ok(variant_id, "edit")

    async def _delete(self, variant_ids: List[int]) -> List[EntityResult]:
        if not variant_ids:
            return []
        try:
            await self._store.delete_variants(variant_ids)
        except Exception as exc:
            return [_failed(variant_id, "delete", exc) for variant_id in variant_ids]
        return [_ok(variant_id, "delete") for variant_id in variant_ids]

    async def _apply_sync(self, item: Tuple[int, Dict[str, Any]]) -> EntityResult:
        variant_id, fields = item
        try:
            await self._store.update_fields(variant_id, fields)
        except Exception as exc:
            return _failed(variant_id, "sync", exc)
        return _ok(variant_id, "sync")

    async def _insert_new(self, variant: Variant) -> EntityResult:
        try:
            await self._store.upsert_variant(variant)
        except Exception as exc:
            return _failed(variant.variant_id, "insert", exc)
        return _ok(variant.variant_id, "insert")
