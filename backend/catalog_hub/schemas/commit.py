"""
Commit schemas — staged edits in, per-entity outcomes out.
Version: 1.0.0
"""
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, computed_field

from catalog_hub.schemas.catalog import Variant


class EditSource(str, Enum):
    LOCAL = "local"
    SYNC = "sync"


class StagedEdit(BaseModel):
    entity_id: int
    field: str
    value: Any = None
    source: EditSource = EditSource.LOCAL


class ChangeSet(BaseModel):
    """Everything a commit hands to the committer, grouped by entity."""
    meta_edits: Dict[int, Dict[str, Any]] = Field(default_factory=dict)
    sync_updates: Dict[int, Dict[str, Any]] = Field(default_factory=dict)
    new_variants: List[Variant] = Field(default_factory=list)
    deletions: List[int] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.meta_edits or self.sync_updates or self.new_variants or self.deletions)


class EntityStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"


class EntityResult(BaseModel):
    entity_id: int
    operation: str
    status: EntityStatus
    reason: Optional[str] = None


class CommitReport(BaseModel):
    results: List[EntityResult] = Field(default_factory=list)

    @computed_field
    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.status == EntityStatus.SUCCESS)

    @computed_field
    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if r.status == EntityStatus.FAILED)

    @computed_field
    @property
    def failures(self) -> List[EntityResult]:
        return [r for r in self.results if r.status == EntityStatus.FAILED]


# -- Request bodies -------------------------------------------------------

class EditIn(BaseModel):
    variant_id: int
    field: str
    value: Any = None


class CommitRequest(BaseModel):
    edits: List[EditIn] = Field(default_factory=list)
    # "variant-<id>" or "spu-<product_id>"
    deletions: List[str] = Field(default_factory=list)
    accept_variant_ids: List[int] = Field(default_factory=list)
    accept_all: bool = False
