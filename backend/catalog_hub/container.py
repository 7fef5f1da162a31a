"""
Lazy DI container — singleton access to clients, stores, and services.

Nothing is constructed at import time; routes depend on these getters so
tests can swap them through app.dependency_overrides.
Version: 1.0.0
"""

from functools import lru_cache

from catalog_hub.core.config import get_settings
from catalog_hub.clients.supabase_client import SupabaseClient
from catalog_hub.clients.shopify_client import ShopifyClient
from catalog_hub.clients.storefront_client import StorefrontClient
from catalog_hub.db.catalog_store import CatalogStore
from catalog_hub.db.listing_store import ListingStore
from catalog_hub.db.expense_store import ExpenseStore
from catalog_hub.services.catalog_service import CatalogService
from catalog_hub.services.publishing_service import PublishingService
from catalog_hub.services.reconciliation_service import ReconciliationService
from catalog_hub.services.shopify_orchestrator import ShopifyOrchestrator


# -- Clients ---------------------------------------------------------------

@lru_cache(maxsize=1)
def get_supabase_client():
    return SupabaseClient(get_settings())


@lru_cache(maxsize=1)
def get_shopify_client():
    return ShopifyClient(get_settings())


@lru_cache(maxsize=1)
def get_storefront_client():
    return StorefrontClient(get_settings())


# -- DB Stores -------------------------------------------------------------

@lru_cache(maxsize=1)
def get_catalog_store():
    return CatalogStore(get_supabase_client())


@lru_cache(maxsize=1)
def get_listing_store():
    return ListingStore(get_supabase_client())


@lru_cache(maxsize=1)
def get_expense_store():
    return ExpenseStore(get_supabase_client())


# -- Services --------------------------------------------------------------

@lru_cache(maxsize=1)
def get_shopify_orchestrator():
    return ShopifyOrchestrator(client=get_shopify_client())


@lru_cache(maxsize=1)
def get_reconciliation_service():
    return ReconciliationService(
        catalog_store=get_catalog_store(),
        chunk_size=get_settings().db_merge_chunk_size,
    )


@lru_cache(maxsize=1)
def get_catalog_service():
    return CatalogService(
        catalog_store=get_catalog_store(),
        storefront=get_storefront_client(),
        reconciliation=get_reconciliation_service(),
        settings=get_settings(),
    )


@lru_cache(maxsize=1)
def get_publishing_service():
    return PublishingService(
        shopify=get_shopify_orchestrator(),
        listing_store=get_listing_store(),
    )
