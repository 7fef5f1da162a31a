"""
Integration tests for catalog routes.

Tests GET /api/v1/catalog/products, /live, /sync/preview, /weights and
POST /api/v1/catalog/commit, /weights with the catalog service mocked.
Version: 1.0.0
"""
import pytest
from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient

from catalog_hub.core.exceptions import ExternalAPIError
from catalog_hub.schemas.commit import CommitReport, EntityResult, EntityStatus
from catalog_hub.schemas.catalog import WeightSyncPreview, WeightSyncResult
from catalog_hub.utils.hierarchy import build_hierarchy
from catalog_hub.utils.snapshot_diff import diff_snapshots


@pytest.fixture
def mock_catalog_service():
    service = MagicMock()
    service.get_hierarchy = AsyncMock(return_value=[])
    service.fetch_live = AsyncMock(return_value=[])
    service.preview_sync = AsyncMock()
    service.commit = AsyncMock(return_value=CommitReport())
    service.preview_weights = AsyncMock(return_value=WeightSyncPreview())
    service.apply_weights = AsyncMock(return_value=WeightSyncResult())
    return service


@pytest.fixture
def client(mock_catalog_service):
    from catalog_hub.main import app
    from catalog_hub.container import get_catalog_service

    app.dependency_overrides[get_catalog_service] = lambda: mock_catalog_service
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.mark.integration
class TestListProducts:

    def test_returns_product_nodes(self, client, mock_catalog_service, make_variant):
        mock_catalog_service.get_hierarchy.return_value = build_hierarchy([
            make_variant(1001, price="10"), make_variant(1002, price="20"),
        ])

        response = client.get("/api/v1/catalog/products")

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["kind"] == "product"
        assert data[0]["title"] == "Linen Shirt"
        assert data[0]["aggregates"]["price_range"]["display"] == "$10.00 - $20.00"
        assert [row["kind"] for row in data[0]["variants"]] == ["variant", "variant"]

    def test_live_storefront_failure(self, client, mock_catalog_service):
        mock_catalog_service.fetch_live.side_effect = ExternalAPIError("Storefront", "page 2 returned 500", 500)

        response = client.get("/api/v1/catalog/live")

        assert response.status_code == 502
        assert "Storefront" in response.json()["detail"]


@pytest.mark.integration
class TestSyncPreview:

    def test_preview(self, client, mock_catalog_service, make_variant):
        mock_catalog_service.preview_sync.return_value = diff_snapshots(
            [make_variant(1001, inventory_quantity=5)],
            [make_variant(1001, inventory_quantity=3), make_variant(2001, product_id=2, title="Cap")],
        )

        response = client.get("/api/v1/catalog/sync/preview")

        assert response.status_code == 200
        data = response.json()
        assert data["changed_count"] == 1
        assert data["new_count"] == 1
        assert [node["product_id"] for node in data["nodes"]] == [2, 1]
        assert data["diffs"]["1001"]["inventory_changed"] is True


@pytest.mark.integration
class TestCommit:

    def test_commit_delegates(self, client, mock_catalog_service):
        mock_catalog_service.commit.return_value = CommitReport(results=[
            EntityResult(entity_id=1001, operation="edit", status=EntityStatus.SUCCESS),
            EntityResult(entity_id=1002, operation="edit", status=EntityStatus.FAILED, reason="row locked"),
        ])

        response = client.post("/api/v1/catalog/commit", json={
            "edits": [{"variant_id": 1001, "field": "cost_price", "value": 4}],
            "deletions": ["variant-5"],
            "accept_all": True,
        })

        assert response.status_code == 200
        data = response.json()
        assert data["succeeded"] == 1
        assert data["failed"] == 1
        assert data["failures"] == [
            {"entity_id": 1002, "operation": "edit", "status": "failed", "reason": "row locked"},
        ]
        request = mock_catalog_service.commit.await_args.args[0]
        assert request.edits[0].field == "cost_price"
        assert request.deletions == ["variant-5"]
        assert request.accept_all is True

    def test_invalid_body(self, client):
        response = client.post("/api/v1/catalog/commit", json={"edits": [{"field": "notes"}]})
        assert response.status_code == 422


@pytest.mark.integration
class TestWeights:

    def test_preview(self, client, mock_catalog_service):
        mock_catalog_service.preview_weights.return_value = WeightSyncPreview(
            total_products=1, total_variants=2, failed_handles=["mug"],
        )

        response = client.get("/api/v1/catalog/weights")

        assert response.status_code == 200
        assert response.json()["failed_handles"] == ["mug"]

    def test_apply(self, client, mock_catalog_service):
        mock_catalog_service.apply_weights.return_value = WeightSyncResult(updated=3, failed=[7])

        response = client.post("/api/v1/catalog/weights")

        assert response.status_code == 200
        assert response.json() == {"updated": 3, "failed": [7]}
