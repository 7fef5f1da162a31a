"""
Edit/stage buffer — uncommitted field edits and the sync accept/reject gate.

One buffer belongs to one editing session: a single writer and a single
reader, so there is no locking. Nothing here is persisted; commit() hands
the grouped changes to the committer and clears the buffer.
Version: 1.0.0
"""
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from catalog_hub.core.constants.catalog import RECENT_EDIT_WINDOW_SECONDS, SYNC_FIELDS
from catalog_hub.core.exceptions import ValidationError
from catalog_hub.schemas.catalog import SyncPreview, Variant, VariantDiff
from catalog_hub.schemas.commit import ChangeSet, EditSource, StagedEdit
from catalog_hub.utils.recent_edits import merge_recent_fields
from catalog_hub.utils.type_converters import is_blank, to_decimal, to_int

logger = logging.getLogger("stage_buffer")

NUMERIC_FIELDS: Dict[str, Callable[[Any], Any]] = {
    "cost_price": to_decimal,
    "manual_inventory": to_int,
}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class EditBuffer:
    """Last-write-wins staging keyed by (entity_id, field)."""

    def __init__(
        self,
        clock: Optional[Callable[[], datetime]] = None,
        window_seconds: int = RECENT_EDIT_WINDOW_SECONDS,
    ) -> None:
        self._clock = clock or _utc_now
        self._window_seconds = window_seconds
        self._staged: Dict[Tuple[int, str], StagedEdit] = {}
        # entity_id -> (fields touched in window, window anchor, last modified)
        self._activity: Dict[int, Tuple[List[str], datetime, datetime]] = {}
        self._deletions: List[int] = []
        self._pending_diffs: Dict[int, VariantDiff] = {}
        self._pending_new: Dict[int, Variant] = {}
        self._accepted_new: Dict[int, Variant] = {}

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def stage(self, entity_id: int, field: str, value: Any, source: EditSource = EditSource.LOCAL) -> None:
        if source == EditSource.LOCAL and field in SYNC_FIELDS:
            raise ValidationError(f"{field} is owned by the platform and cannot be edited locally")
        if source == EditSource.LOCAL and field in NUMERIC_FIELDS:
            if not is_blank(value) and NUMERIC_FIELDS[field](value) is None:
                raise ValidationError(f"{field} must be numeric, got {value!r}")

        self._staged[(entity_id, field)] = StagedEdit(
            entity_id=entity_id, field=field, value=value, source=source,
        )
        if source != EditSource.LOCAL:
            return

        now = self._clock()
        self._touch(entity_id, field, now)
        if field == "manual_inventory":
            self._staged[(entity_id, "inventory_updated_at")] = StagedEdit(
                entity_id=entity_id, field="inventory_updated_at", value=now.isoformat(),
            )

    def _touch(self, entity_id: int, field: str, now: datetime) -> None:
        fields, anchor, _ = self._activity.get(entity_id, ([], None, None))
        fields, anchor = merge_recent_fields(fields, anchor, field, now, self._window_seconds)
        self._activity[entity_id] = (fields, anchor, now)

    def get_effective(self, entity_id: int, field: str, fallback: Any = None) -> Any:
        """Staged value if any, else the persisted value passed as fallback."""
        edit = self._staged.get((entity_id, field))
        return edit.value if edit is not None else fallback

    def is_staged(self, entity_id: int, field: str) -> bool:
        return (entity_id, field) in self._staged

    def recent_fields(self, entity_id: int) -> List[str]:
        activity = self._activity.get(entity_id)
        return list(activity[0]) if activity else []

    def last_modified_at(self, entity_id: int) -> Optional[datetime]:
        activity = self._activity.get(entity_id)
        return activity[2] if activity else None

    def stage_deletions(self, variant_ids: Iterable[int]) -> None:
        for variant_id in variant_ids:
            if variant_id not in self._deletions:
                self._deletions.append(variant_id)

    # ------------------------------------------------------------------
    # Sync gate
    # ------------------------------------------------------------------

    def load_preview(self, preview: SyncPreview) -> None:
        """Register live diffs and new variants awaiting accept/reject."""
        self._pending_diffs = dict(preview.diffs)
        self._pending_new = {v.variant_id: v for v in preview.new_variants}

    @property
    def pending_sync_ids(self) -> List[int]:
        return [*self._pending_diffs.keys(), *self._pending_new.keys()]

    def accept(self, variant_id: int) -> bool:
        diff = self._pending_diffs.pop(variant_id, None)
        if diff is not None:
            for field in diff.changed_fields:
                self.stage(variant_id, field, diff.live.get(field), source=EditSource.SYNC)
            return True
        variant = self._pending_new.pop(variant_id, None)
        if variant is not None:
            self._accepted_new[variant_id] = variant
            return True
        logger.warning("accept ignored, no pending sync change variant_id=%s", variant_id)
        return False

    def accept_all(self) -> int:
        ids = self.pending_sync_ids
        for variant_id in ids:
            self.accept(variant_id)
        return len(ids)

    def reject(self, variant_id: int) -> bool:
        dropped = self._pending_diffs.pop(variant_id, None) or self._pending_new.pop(variant_id, None)
        return dropped is not None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_dirty(self) -> bool:
        return bool(self._staged or self._deletions or self._accepted_new)

    def discard_all(self) -> None:
        self._staged.clear()
        self._activity.clear()
        self._deletions.clear()
        self._pending_diffs.clear()
        self._pending_new.clear()
        self._accepted_new.clear()

    def commit(self) -> ChangeSet:
        """Group staged changes by entity and clear the buffer."""
        change_set = ChangeSet(
            new_variants=list(self._accepted_new.values()),
            deletions=list(self._deletions),
        )
        for edit in self._staged.values():
            target = change_set.meta_edits if edit.source == EditSource.LOCAL else change_set.sync_updates
            target.setdefault(edit.entity_id, {})[edit.field] = edit.value

        logger.info(
            "buffer committed meta=%d sync=%d new=%d deletions=%d",
            len(change_set.meta_edits), len(change_set.sync_updates),
            len(change_set.new_variants), len(change_set.deletions),
        )
        self.discard_all()
        return change_set
