import json
import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel


load_dotenv()


class Settings(BaseModel):
    # Supabase
    supabase_url: str | None = os.getenv("SUPABASE_URL")
    supabase_service_role_key: str | None = os.getenv("SUPABASE_SERVICE_ROLE_KEY")

    # Shopify Admin API (publish pipeline)
    shopify_store_domain: str | None = os.getenv("SHOPIFY_STORE_DOMAIN")
    shopify_admin_api_token: str | None = os.getenv("SHOPIFY_ADMIN_API_TOKEN")
    shopify_api_version: str = os.getenv("SHOPIFY_API_VERSION", "2024-10")

    # Public storefront (live catalog snapshot and weight lookups)
    # Example: STOREFRONT_DOMAIN=shop.example.com
    storefront_domain: str | None = os.getenv("STOREFRONT_DOMAIN")
    storefront_products_url: str | None = os.getenv("STOREFRONT_PRODUCTS_URL")

    # Batch sizes
    catalog_page_size: int = int(os.getenv("CATALOG_PAGE_SIZE", "250"))
    db_merge_chunk_size: int = int(os.getenv("DB_MERGE_CHUNK_SIZE", "50"))
    weight_fetch_chunk_size: int = int(os.getenv("WEIGHT_FETCH_CHUNK_SIZE", "10"))

    http_timeout_seconds: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "30"))

    cors_allow_origins: list[str] = json.loads(os.getenv("CORS_ALLOW_ORIGINS", '["*"]'))

    @property
    def products_feed_url(self) -> str | None:
        """Storefront products.json URL, derived from the domain when not set explicitly."""
        if self.storefront_products_url:
            return self.storefront_products_url
        if self.storefront_domain:
            return f"https://{self.storefront_domain}/products.json"
        return None


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = Settings()
