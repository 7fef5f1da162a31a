"""
Shopify client — Admin API transport (REST + GraphQL).

Only transport concerns live here: URL building, auth header, timeout,
status handling. Product semantics live in the publisher service.
Version: 1.0.0
"""
import logging
from typing import Any, Dict, Optional

import httpx

from catalog_hub.core.config import Settings
from catalog_hub.core.exceptions import ConnectionTimeoutError, ExternalAPIError

logger = logging.getLogger("shopify_client")


class ShopifyClient:
    def __init__(self, settings: Settings) -> None:
        raw_domain = settings.shopify_store_domain
        self._store_domain = self._normalize_store_domain(raw_domain)
        self._token = settings.shopify_admin_api_token
        self._api_version = settings.shopify_api_version
        self._timeout = settings.http_timeout_seconds
        logger.info("ShopifyClient initialized: domain=%s (raw: %s)", self._store_domain, raw_domain)

    @staticmethod
    def _normalize_store_domain(domain: Optional[str]) -> Optional[str]:
        """
        Normalize Shopify store domain to ensure it has .myshopify.com suffix.

        - "my-store" -> "my-store.myshopify.com"
        - "https://my-store.myshopify.com/" -> "my-store.myshopify.com"
        """
        if not domain:
            return domain
        domain = domain.replace("https://", "").replace("http://", "").rstrip("/")
        if not domain.endswith(".myshopify.com"):
            domain = f"{domain}.myshopify.com"
        return domain

    def _base_url(self) -> str:
        if not self._store_domain or not self._token:
            raise ExternalAPIError("Shopify", "SHOPIFY_STORE_DOMAIN / SHOPIFY_ADMIN_API_TOKEN missing")
        return f"https://{self._store_domain}/admin/api/{self._api_version}"

    async def call_shopify(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        url = f"{self._base_url()}{path}"
        logger.info("shopify request method=%s path=%s params=%s", method, path, params)

        headers = {
            "X-Shopify-Access-Token": self._token or "",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.request(method=method, url=url, headers=headers, json=json, params=params)
        except httpx.TimeoutException as exc:
            raise ConnectionTimeoutError("Shopify", f"{method} {path} timed out") from exc
        except httpx.HTTPError as exc:
            raise ExternalAPIError("Shopify", f"{method} {path} failed: {exc}") from exc

        logger.info("shopify response status=%s path=%s", resp.status_code, path)
        if not resp.is_success:
            raise ExternalAPIError("Shopify", resp.text, status_code=resp.status_code)

        if not resp.text:
            return {}
        try:
            return resp.json()
        except ValueError as exc:
            raise ExternalAPIError(
                "Shopify", f"{method} {path} returned a non-JSON body", status_code=resp.status_code,
            ) from exc

    async def call_shopify_graphql(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """POST a GraphQL document. Top-level `errors` are transport-level failures."""
        payload = {"query": query, "variables": variables or {}}
        data = await self.call_shopify("POST", "/graphql.json", json=payload)
        if data.get("errors"):
            raise ExternalAPIError("Shopify", str(data.get("errors")), status_code=502)
        return data
