"""
Base store — shared Supabase client access for all stores.

All domain-specific stores inherit from this class to get
standardised insert / upsert / select / update / delete primitives.
supabase-py is synchronous; queries run in a worker thread so chunked
merges can overlap.
Version: 1.0.0
"""

import asyncio
import logging
from typing import Any, Dict, Iterable, List

from postgrest.exceptions import APIError

from catalog_hub.clients.supabase_client import SupabaseClient
from catalog_hub.core.exceptions import DatabaseError

logger = logging.getLogger("base_store")


class BaseStore:
    """Base class for all Supabase stores providing shared CRUD operations."""

    def __init__(self, supabase_client: SupabaseClient) -> None:
        self._supabase_client = supabase_client

    @property
    def _client(self):
        """Get the Supabase client instance."""
        return self._supabase_client.client

    async def _execute(self, table: str, action: str, query) -> List[Dict[str, Any]]:
        try:
            response = await asyncio.to_thread(query.execute)
        except APIError as e:
            logger.info("supabase error table=%s action=%s detail=%s", table, action, str(e))
            raise DatabaseError(table, f"{action} failed: {e}") from e
        return response.data or []

    async def _insert(self, table: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Insert rows into a table."""
        if not rows:
            return []
        return await self._execute(table, "insert", self._client.table(table).insert(rows))

    async def _upsert(
        self, table: str, rows: List[Dict[str, Any]], on_conflict: str | None = None
    ) -> List[Dict[str, Any]]:
        """Upsert rows into a table (insert or update on conflict)."""
        if not rows:
            return []
        if on_conflict:
            query = self._client.table(table).upsert(rows, on_conflict=on_conflict)
        else:
            query = self._client.table(table).upsert(rows)
        return await self._execute(table, "upsert", query)

    async def _select(
        self,
        table: str,
        columns: str = "*",
        filters: Dict[str, Any] | None = None,
        order: str | None = None,
        desc: bool = False,
        limit: int | None = None,
    ) -> List[Dict[str, Any]]:
        """Select rows from a table with optional equality filters."""
        query = self._client.table(table).select(columns)
        for key, value in (filters or {}).items():
            query = query.eq(key, value)
        if order:
            query = query.order(order, desc=desc)
        if limit:
            query = query.range(0, limit - 1)
        return await self._execute(table, "select", query)

    async def _update(
        self, table: str, filters: Dict[str, Any], payload: Dict[str, Any]
    ) -> List[Dict[str, Any]]:
        """Update rows in a table matching the filters."""
        query = self._client.table(table).update(payload)
        for key, value in filters.items():
            query = query.eq(key, value)
        return await self._execute(table, "update", query)

    async def _delete_in(self, table: str, column: str, values: Iterable[Any]) -> List[Dict[str, Any]]:
        """Delete rows whose column is in values."""
        values = list(values)
        if not values:
            return []
        query = self._client.table(table).delete().in_(column, values)
        return await self._execute(table, "delete", query)
