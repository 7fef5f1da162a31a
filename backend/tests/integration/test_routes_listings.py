"""
Integration tests for listing routes.

Tests draft CRUD under /api/v1/listings and POST /api/v1/listings/{id}/publish,
including the mapping of publish failures to HTTP status codes.
Version: 1.0.0
"""
import pytest
from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient

from catalog_hub.core.exceptions import DraftNotFoundError, ShopifyUserError, ValidationError
from catalog_hub.schemas.listings import DraftStatus, ListingDraft, PublishResult, PublishState, StepError

DRAFT_ID = "5b7f0c1e-0000-4000-8000-000000000001"


@pytest.fixture
def mock_publishing_service():
    service = MagicMock()
    service.publish_draft = AsyncMock()
    return service


@pytest.fixture
def client(mock_listing_store, mock_publishing_service):
    from catalog_hub.main import app
    from catalog_hub.container import get_listing_store, get_publishing_service

    app.dependency_overrides[get_listing_store] = lambda: mock_listing_store
    app.dependency_overrides[get_publishing_service] = lambda: mock_publishing_service
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.mark.integration
class TestDraftCrud:

    def test_list(self, client, mock_listing_store, sample_draft_row):
        mock_listing_store.list_drafts.return_value = [ListingDraft.from_row(sample_draft_row)]

        response = client.get("/api/v1/listings")

        assert response.status_code == 200
        assert response.json()[0]["id"] == DRAFT_ID

    def test_create(self, client, mock_listing_store, sample_draft_row):
        mock_listing_store.create_draft.return_value = ListingDraft.from_row(sample_draft_row)

        response = client.post("/api/v1/listings", json={"title": "Canvas Tote"})

        assert response.status_code == 200
        mock_listing_store.create_draft.assert_awaited_once_with({"title": "Canvas Tote"})
        assert response.json()["draft_data"]["title"] == "Canvas Tote"

    def test_patch_splits_status(self, client, mock_listing_store, sample_draft_row):
        mock_listing_store.update_draft.return_value = ListingDraft.from_row(sample_draft_row)

        response = client.patch(f"/api/v1/listings/{DRAFT_ID}", json={"note": "ship friday", "status": "ready"})

        assert response.status_code == 200
        mock_listing_store.update_draft.assert_awaited_once_with(
            DRAFT_ID, {"note": "ship friday"}, status=DraftStatus.READY,
        )

    def test_patch_invalid_status(self, client, mock_listing_store):
        response = client.patch(f"/api/v1/listings/{DRAFT_ID}", json={"status": "archived"})

        assert response.status_code == 400
        mock_listing_store.update_draft.assert_not_called()

    def test_delete(self, client, mock_listing_store):
        response = client.delete(f"/api/v1/listings/{DRAFT_ID}")

        assert response.status_code == 200
        assert response.json() == {"success": True}

    def test_delete_missing(self, client, mock_listing_store):
        mock_listing_store.delete_draft.side_effect = DraftNotFoundError("nope")

        response = client.delete("/api/v1/listings/nope")

        assert response.status_code == 404


@pytest.mark.integration
class TestPublish:

    def test_publish_with_step_errors(self, client, mock_publishing_service):
        mock_publishing_service.publish_draft.return_value = PublishResult(
            success=True,
            draft_id=DRAFT_ID,
            state=PublishState.PUBLISHED,
            product_id="123",
            product_gid="gid://shopify/Product/123",
            variants_count=3,
            errors=[StepError(step="cost", index=1, message="cost rejected")],
            pushed_flag_saved=True,
        )

        response = client.post(f"/api/v1/listings/{DRAFT_ID}/publish")

        assert response.status_code == 200
        data = response.json()
        assert data["product_id"] == "123"
        assert data["state"] == "published"
        assert data["errors"][0]["step"] == "cost"

    def test_publish_user_errors(self, client, mock_publishing_service):
        mock_publishing_service.publish_draft.side_effect = ShopifyUserError(
            "productSet", [{"field": ["title"], "message": "Title can't be blank", "code": "BLANK"}],
        )

        response = client.post(f"/api/v1/listings/{DRAFT_ID}/publish")

        assert response.status_code == 422
        assert response.json()["user_errors"][0]["code"] == "BLANK"

    def test_publish_validation_error(self, client, mock_publishing_service):
        mock_publishing_service.publish_draft.side_effect = ValidationError("variants[0].cost must be numeric")

        response = client.post(f"/api/v1/listings/{DRAFT_ID}/publish")

        assert response.status_code == 400

    def test_publish_missing_draft(self, client, mock_publishing_service):
        mock_publishing_service.publish_draft.side_effect = DraftNotFoundError("nope")

        response = client.post("/api/v1/listings/nope/publish")

        assert response.status_code == 404
