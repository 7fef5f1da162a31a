"""
Custom exception hierarchy for Catalog Hub.

Exceptions are grouped by how callers react to them:
- Transport errors (ExternalAPIError, ConnectionTimeoutError): the remote
  call did not complete. Hard failure for single-call steps, isolated per
  item for per-item steps.
- Structured platform errors (ShopifyUserError): the platform answered and
  rejected the request. Always surfaced verbatim.
- Data-integrity errors (DataIntegrityError): an expected correlated value
  is missing. The dependent step is skipped and logged.
- Local validation errors (ValidationError): rejected before any network call.
"""
from typing import Any, Dict, List, Optional


class CatalogHubException(Exception):
    """Base exception for Catalog Hub."""
    pass


# ============================================
# TRANSPORT ERRORS
# ============================================
class ExternalAPIError(CatalogHubException):
    """
    Error from an external API (Shopify Admin, storefront).

    status_code is the HTTP status when the remote answered, None when the
    request never completed.
    """
    def __init__(self, service: str, message: str, status_code: Optional[int] = None):
        self.service = service
        self.status_code = status_code
        super().__init__(f"{service} API error: {message}")


class ConnectionTimeoutError(ExternalAPIError):
    """Connection or timeout error talking to an external service."""
    def __init__(self, service: str, message: str = "request timed out"):
        super().__init__(service, message, status_code=None)


# ============================================
# STRUCTURED PLATFORM ERRORS
# ============================================
class ShopifyUserError(CatalogHubException):
    """
    Shopify accepted the request but returned userErrors.

    user_errors keeps the platform's {field, message, code} entries as-is.
    """
    def __init__(self, operation: str, user_errors: List[Dict[str, Any]]):
        self.operation = operation
        self.user_errors = user_errors
        messages = "; ".join(str(err.get("message")) for err in user_errors) or "unknown error"
        super().__init__(f"Shopify {operation} rejected: {messages}")


# ============================================
# DATA AND INPUT ERRORS
# ============================================
class DataIntegrityError(CatalogHubException):
    """An expected correlated value (inventory item id, location) is missing."""
    pass


class ValidationError(CatalogHubException):
    """Invalid input data, rejected before any remote call."""
    pass


class DraftNotFoundError(CatalogHubException):
    """Listing draft does not exist."""
    def __init__(self, draft_id: str):
        self.draft_id = draft_id
        super().__init__(f"Listing draft not found: {draft_id}")


class DatabaseError(CatalogHubException):
    """Supabase / PostgREST call failed."""
    def __init__(self, table: str, message: str):
        self.table = table
        super().__init__(f"Supabase {table} failed: {message}")
