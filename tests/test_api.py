"""Tests for the HTTP surface."""

import base64

import pytest
from fastapi.testclient import TestClient

from src.api.main import create_app
from src.models.schemas import MediaType

from tests.test_corpus import FailingProvider
from tests.test_pipeline import BrokenCatalog

CUSTOM_RANGE = {"startDate": "2026-01-01", "endDate": "2026-03-31"}


# ============================================================================
# Test Fixtures
# ============================================================================


@pytest.fixture
def client(catalog, store, settings):
    with TestClient(create_app(catalog, store, settings)) as test_client:
        yield test_client


@pytest.fixture
def failing_client(catalog, settings):
    app = create_app(catalog, FailingProvider(MediaType.WEB), settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def broken_catalog_client(store, settings):
    with TestClient(create_app(BrokenCatalog(), store, settings)) as test_client:
        yield test_client


# ============================================================================
# Tests
# ============================================================================


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestAnalytics:
    """Tests for GET /api/reports/pr-presence-analytics."""

    def test_returns_report_model(self, client):
        response = client.get(
            "/api/reports/pr-presence-analytics",
            params={"clientId": "acme", **CUSTOM_RANGE},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["client_name"] == "Acme Bank"
        assert body["total_stories"] == 5
        assert body["date_range_label"] == "January 2026 – March 2026"
        assert len(body["key_takeouts"]) == 6

    def test_missing_client_id(self, client):
        response = client.get("/api/reports/pr-presence-analytics")
        assert response.status_code == 400
        assert response.json()["detail"] == "Client ID is required"

    def test_unknown_client(self, client):
        response = client.get("/api/reports/pr-presence-analytics", params={"clientId": "nobody"})
        assert response.status_code == 404
        assert response.json()["detail"] == "Client not found"

    def test_reversed_custom_range(self, client):
        response = client.get(
            "/api/reports/pr-presence-analytics",
            params={"clientId": "acme", "startDate": "2026-03-31", "endDate": "2026-01-01"},
        )
        assert response.status_code == 400

    def test_unknown_preset(self, client):
        response = client.get(
            "/api/reports/pr-presence-analytics",
            params={"clientId": "acme", "dateRange": "5y"},
        )
        assert response.status_code == 400

    def test_storage_failure_is_generic(self, failing_client):
        response = failing_client.get("/api/reports/pr-presence-analytics", params={"clientId": "acme"})
        assert response.status_code == 500
        assert response.json()["detail"] == "export failed"


class TestExports:
    """Tests for the export endpoints."""

    def test_export_pptx(self, client):
        response = client.post(
            "/api/reports/export-pr-presence",
            json={"clientId": "acme", "dateRange": CUSTOM_RANGE},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["filename"] == "Acme_Bank_PR_Presence_Analysis_January_2026_–_March_2026.pptx"
        assert base64.b64decode(body["data"]).startswith(b"PK")

    def test_export_pdf(self, client):
        response = client.post(
            "/api/reports/export-pr-presence-pdf",
            json={"clientId": "acme", "dateRange": CUSTOM_RANGE},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["filename"].endswith(".pdf")
        assert base64.b64decode(body["data"]).startswith(b"%PDF-")

    def test_export_unknown_client(self, client):
        response = client.post("/api/reports/export-pr-presence-pdf", json={"clientId": "nobody"})
        assert response.status_code == 404

    def test_export_missing_client_id(self, client):
        response = client.post("/api/reports/export-pr-presence", json={"dateRange": "30d"})
        assert response.status_code == 422

    def test_export_failure_is_generic(self, failing_client):
        response = failing_client.post("/api/reports/export-pr-presence", json={"clientId": "acme"})
        assert response.status_code == 500
        assert response.json()["detail"] == "export failed"

    def test_catalog_failure_is_generic(self, broken_catalog_client):
        response = broken_catalog_client.post("/api/reports/export-pr-presence-pdf", json={"clientId": "acme"})
        assert response.status_code == 500
        assert response.json()["detail"] == "export failed"

    def test_analytics_catalog_failure_is_generic(self, broken_catalog_client):
        response = broken_catalog_client.get("/api/reports/pr-presence-analytics", params={"clientId": "acme"})
        assert response.status_code == 500
        assert response.json()["detail"] == "export failed"
