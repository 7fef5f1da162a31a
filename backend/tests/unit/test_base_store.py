"""
Unit tests for BaseStore.

Tests the shared CRUD primitives against a mocked PostgREST query chain
and the APIError -> DatabaseError translation.

Version: 1.0.0
"""
from unittest.mock import MagicMock

import pytest
from postgrest.exceptions import APIError

from catalog_hub.core.exceptions import DatabaseError
from catalog_hub.db.base_store import BaseStore


pytestmark = pytest.mark.unit


@pytest.fixture
def store(mock_supabase_client):
    return BaseStore(mock_supabase_client)


class TestWrites:

    @pytest.mark.asyncio
    async def test_insert_returns_rows(self, store, mock_table, mock_supabase_client):
        mock_table.execute.return_value = MagicMock(data=[{"id": 1}])

        rows = await store._insert("products", [{"title": "x"}])

        assert rows == [{"id": 1}]
        mock_supabase_client.client.table.assert_called_with("products")
        mock_table.insert.assert_called_once_with([{"title": "x"}])

    @pytest.mark.asyncio
    async def test_empty_rows_skip_call(self, store, mock_table):
        assert await store._insert("products", []) == []
        assert await store._upsert("products", []) == []
        assert await store._delete_in("products", "variant_id", []) == []
        mock_table.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_upsert_on_conflict(self, store, mock_table):
        await store._upsert("products", [{"variant_id": 1}], on_conflict="variant_id")

        mock_table.upsert.assert_called_once_with([{"variant_id": 1}], on_conflict="variant_id")

    @pytest.mark.asyncio
    async def test_update_applies_filters(self, store, mock_table):
        await store._update("products", {"variant_id": 5}, {"price": 1})

        mock_table.update.assert_called_once_with({"price": 1})
        mock_table.eq.assert_called_once_with("variant_id", 5)

    @pytest.mark.asyncio
    async def test_delete_in(self, store, mock_table):
        mock_table.execute.return_value = MagicMock(data=[{"variant_id": 1}, {"variant_id": 2}])

        rows = await store._delete_in("products", "variant_id", (1, 2))

        assert len(rows) == 2
        mock_table.in_.assert_called_once_with("variant_id", [1, 2])


class TestSelect:

    @pytest.mark.asyncio
    async def test_filters_order_limit(self, store, mock_table):
        await store._select("products", columns="variant_id", filters={"handle": "tote"},
                            order="created_at", desc=True, limit=10)

        mock_table.select.assert_called_once_with("variant_id")
        mock_table.eq.assert_called_once_with("handle", "tote")
        mock_table.order.assert_called_once_with("created_at", desc=True)
        mock_table.range.assert_called_once_with(0, 9)

    @pytest.mark.asyncio
    async def test_none_data_is_empty_list(self, store, mock_table):
        mock_table.execute.return_value = MagicMock(data=None)
        assert await store._select("products") == []


class TestErrors:

    @pytest.mark.asyncio
    async def test_api_error_translated(self, store, mock_table):
        mock_table.execute.side_effect = APIError({"message": "permission denied", "code": "42501"})

        with pytest.raises(DatabaseError) as exc_info:
            await store._select("products")

        assert exc_info.value.table == "products"
        assert "select failed" in str(exc_info.value)
