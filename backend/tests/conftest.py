"""
Pytest configuration and shared fixtures for Catalog Hub tests.
Provides mock clients, stores, services, and sample test data.
Version: 1.0.0
"""
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_settings():
    """Settings object with test defaults (no real credentials)."""
    from catalog_hub.core.config import Settings
    return Settings(
        supabase_url="https://test.supabase.co",
        supabase_service_role_key="test-supabase-key",
        shopify_store_domain="test-store.myshopify.com",
        shopify_admin_api_token="shpat_test_token",
        shopify_api_version="2024-10",
        storefront_domain="shop.example.com",
        storefront_products_url=None,
        catalog_page_size=2,
        db_merge_chunk_size=2,
        weight_fetch_chunk_size=2,
        http_timeout_seconds=5.0,
        cors_allow_origins=["*"],
    )


# ---------------------------------------------------------------------------
# Clients (mocked)
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_shopify_client():
    """Mocked ShopifyClient (HTTP transport only)."""
    client = MagicMock()
    client.call_shopify = AsyncMock(return_value={})
    client.call_shopify_graphql = AsyncMock(return_value={})
    return client


@pytest.fixture
def mock_storefront_client():
    client = MagicMock()
    client.domain = "shop.example.com"
    client.fetch_all_products = AsyncMock(return_value=[])
    client.fetch_product = AsyncMock(return_value=None)
    return client


@pytest.fixture
def mock_table():
    """Chainable PostgREST query builder."""
    table = MagicMock()
    for method in ("select", "insert", "upsert", "update", "delete", "eq", "in_", "order", "range"):
        getattr(table, method).return_value = table
    table.execute.return_value = MagicMock(data=[])
    return table


@pytest.fixture
def mock_supabase_client(mock_table):
    """Mocked SupabaseClient."""
    client = MagicMock()
    client.client.table.return_value = mock_table
    return client


# ---------------------------------------------------------------------------
# DB Stores (mocked)
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_catalog_store():
    store = MagicMock()
    store.list_variants = AsyncMock(return_value=[])
    store.get_internal_meta = AsyncMock(return_value={})
    store.merge_internal_meta = AsyncMock(return_value={})
    store.update_fields = AsyncMock()
    store.upsert_variant = AsyncMock()
    store.delete_variants = AsyncMock(return_value=0)
    store.list_weight_rows = AsyncMock(return_value=[])
    store.update_weight = AsyncMock()
    return store


@pytest.fixture
def mock_listing_store():
    store = MagicMock()
    store.list_drafts = AsyncMock(return_value=[])
    store.get_draft = AsyncMock()
    store.create_draft = AsyncMock()
    store.update_draft = AsyncMock()
    store.delete_draft = AsyncMock()
    store.mark_pushed = AsyncMock()
    return store


@pytest.fixture
def mock_expense_store():
    store = MagicMock()
    store.load_tree = AsyncMock()
    store.save_tree = AsyncMock(return_value=0)
    store.apply_edit = AsyncMock()
    return store


# ---------------------------------------------------------------------------
# Services (mocked)
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_shopify_orchestrator():
    shopify = MagicMock()
    shopify.create_product = AsyncMock()
    shopify.update_inventory_item_cost = AsyncMock()
    shopify.get_first_active_location = AsyncMock(return_value="gid://shopify/Location/1")
    shopify.set_on_hand_quantities = AsyncMock()
    return shopify


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------

@pytest.fixture
def make_variant():
    """Factory for Variant models with sensible defaults."""
    from catalog_hub.schemas.catalog import Variant

    def _make(variant_id=1001, product_id=1, **overrides):
        data = {
            "variant_id": variant_id,
            "product_id": product_id,
            "title": "Linen Shirt - Blue / M",
            "handle": "linen-shirt",
            "sku": f"LS-{variant_id}",
            "price": "10.00",
            "compare_at_price": None,
            "inventory_quantity": 5,
            "internal_meta": {},
        }
        data.update(overrides)
        return Variant.model_validate(data)

    return _make


@pytest.fixture
def sample_product_row():
    """products.json product as returned by the storefront."""
    return {
        "id": 7001,
        "title": "Linen Shirt",
        "handle": "linen-shirt",
        "images": [
            {"id": 1, "src": "https://cdn.example.com/first.jpg"},
            {"id": 2, "src": "https://cdn.example.com/blue.jpg"},
        ],
        "variants": [
            {
                "id": 9001,
                "title": "Blue / M",
                "sku": "LS-BL-M",
                "price": "29.90",
                "compare_at_price": "39.90",
                "grams": 250,
                "position": 1,
                "image_id": 2,
            },
            {
                "id": 9002,
                "title": "Red / M",
                "sku": None,
                "price": "29.90",
                "compare_at_price": None,
                "grams": 260,
                "position": 2,
                "featured_image": {"src": "https://cdn.example.com/red.jpg"},
            },
        ],
    }


@pytest.fixture
def sample_draft_row():
    return {
        "id": "5b7f0c1e-0000-4000-8000-000000000001",
        "product_id": None,
        "status": "draft",
        "draft_data": {
            "title": "Canvas Tote",
            "description": "<p>Sturdy tote</p>",
            "vendor": "Acme",
            "product_type": "Bags",
            "options": [{"name": "Color", "values": ["Black", "Sand"]}],
            "variants": [
                {"id": "v-1", "price": "20.00", "sku": "TOTE-BLK", "weight": 300,
                 "cost": "8.50", "inventory_quantity": 4, "option1": "Black"},
                {"id": "v-2", "price": "20.00", "sku": "TOTE-SND", "weight": 300,
                 "cost": "8.50", "inventory_quantity": 2, "option1": "Sand"},
                {"id": "v-3", "price": "22.00", "sku": "TOTE-XL", "weight": 400,
                 "cost": "9.00", "inventory_quantity": 1, "option1": "Sand"},
            ],
        },
    }


class FakeClock:
    """Manually advanced clock for time-window tests."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def fake_clock():
    return FakeClock(datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc))
