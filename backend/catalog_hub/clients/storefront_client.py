"""
Storefront client — public products.json reads (no Admin token).

Live catalog snapshot and per-handle product lookups used by weight sync.
Version: 1.0.0
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from catalog_hub.core.config import Settings
from catalog_hub.core.exceptions import ConnectionTimeoutError, ExternalAPIError

logger = logging.getLogger("storefront_client")

_HEADERS = {"User-Agent": "Mozilla/5.0", "Accept": "application/json"}


class StorefrontClient:
    def __init__(self, settings: Settings) -> None:
        self._products_url = settings.products_feed_url
        self._domain = settings.storefront_domain
        self._timeout = settings.http_timeout_seconds

    @property
    def domain(self) -> Optional[str]:
        return self._domain

    def _require_products_url(self) -> str:
        if not self._products_url:
            raise ExternalAPIError("Storefront", "STOREFRONT_DOMAIN or STOREFRONT_PRODUCTS_URL must be set")
        return self._products_url

    async def _get(self, url: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                return await client.get(url, headers=_HEADERS, params=params)
        except httpx.TimeoutException as exc:
            raise ConnectionTimeoutError("Storefront", f"GET {url} timed out") from exc
        except httpx.HTTPError as exc:
            raise ExternalAPIError("Storefront", f"GET {url} failed: {exc}") from exc

    @staticmethod
    def _json(resp: httpx.Response, source: str) -> Dict[str, Any]:
        try:
            body = resp.json()
        except ValueError as exc:
            raise ExternalAPIError(
                "Storefront", f"{source} returned a non-JSON body", status_code=resp.status_code,
            ) from exc
        if not isinstance(body, dict):
            raise ExternalAPIError("Storefront", f"{source} returned unexpected JSON", status_code=resp.status_code)
        return body

    async def fetch_products_page(self, page: int, limit: int) -> List[Dict[str, Any]]:
        """Fetch one page of products.json. Any non-2xx status is a hard failure."""
        url = self._require_products_url()
        resp = await self._get(url, params={"page": page, "limit": limit})
        logger.info("storefront page=%s status=%s", page, resp.status_code)
        if not resp.is_success:
            raise ExternalAPIError(
                "Storefront",
                f"products page {page} returned {resp.status_code}",
                status_code=resp.status_code,
            )
        return self._json(resp, f"products page {page}").get("products") or []

    async def fetch_all_products(self, page_size: int) -> List[Dict[str, Any]]:
        """Paginate until a page is empty or shorter than page_size."""
        products: List[Dict[str, Any]] = []
        page = 1
        while True:
            batch = await self.fetch_products_page(page, page_size)
            products.extend(batch)
            if len(batch) < page_size:
                break
            page += 1
        logger.info("storefront products fetched=%d pages=%d", len(products), page)
        return products

    async def fetch_product(self, handle: str) -> Optional[Dict[str, Any]]:
        """Fetch /products/<handle>.json. Returns None when the product is not available."""
        if not self._domain:
            raise ExternalAPIError("Storefront", "STOREFRONT_DOMAIN must be set")
        resp = await self._get(f"https://{self._domain}/products/{handle}.json")
        if not resp.is_success:
            logger.warning("storefront product fetch failed handle=%s status=%s", handle, resp.status_code)
            return None
        return self._json(resp, f"product {handle}").get("product")
