"""
Recent edits — "recently modified columns" grouping for display.

Edits landing within the window of the anchor accumulate; a later edit
starts a new window holding only its own field. Display heuristic only.
Version: 1.0.0
"""
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from catalog_hub.core.constants.catalog import RECENT_EDIT_WINDOW_SECONDS


def merge_recent_fields(
    fields: List[str],
    anchor: Optional[datetime],
    field: str,
    now: datetime,
    window_seconds: int = RECENT_EDIT_WINDOW_SECONDS,
) -> Tuple[List[str], datetime]:
    """Return the updated field list and window anchor after touching field at now."""
    if anchor is None or now - anchor > timedelta(seconds=window_seconds):
        return [field], now
    if field in fields:
        return list(fields), anchor
    return [*fields, field], anchor


def split_columns(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def join_columns(fields: List[str]) -> str:
    return ",".join(fields)
