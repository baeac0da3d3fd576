"""Tests for the template API routes."""

import pytest
from fastapi.testclient import TestClient

from mailblocks.core.config import Settings
from mailblocks.main import create_app
from mailblocks.strategies.email_engine.catalog import get_system_template
from mailblocks.strategies.email_engine.generator import LegacyCodeGenerator


@pytest.fixture
def client():
    """Create a test client with file logging disabled."""
    app = create_app(Settings(log_to_file=False, copyright_year=2025))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def template_json(payment_template):
    return payment_template.model_dump(mode="json")


# =============================================================================
# Catalog
# =============================================================================


class TestCatalogRoutes:
    """Test suite for catalog endpoints."""

    def test_health(self, client):
        """Test the health check."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_list_templates(self, client):
        """Test that the catalog lists all system templates."""
        body = client.get("/templates").json()
        assert body["total"] == 9
        first = body["templates"][0]
        assert first["slug"] == "qr_daily"
        assert first["color_scheme"] == "green"
        assert first["variables"] == ["customer_name", "day_name", "date_formatted"]

    def test_get_template(self, client):
        """Test that a system template is returned in its stored shape."""
        body = client.get("/templates/dunning_soft").json()
        assert body["colorScheme"] == "amber"
        assert body["blocks"][0]["nameVariable"] == "{{customer_name}}"

    def test_get_unknown_template(self, client):
        """Test that unknown slugs answer 404."""
        assert client.get("/templates/welcome").status_code == 404

    def test_variables_for_context(self, client):
        """Test that the variable list is filtered by context."""
        body = client.get("/templates/variables", params={"context": "admin_magic_link"}).json()
        assert body["context"] == "admin_magic_link"
        assert [v["name"] for v in body["variables"]] == ["magic_link"]


# =============================================================================
# Rendering
# =============================================================================


class TestRenderRoutes:
    """Test suite for render, preview and validate endpoints."""

    def test_render(self, client, template_json, payment_values):
        """Test substitution and the rendered subject."""
        response = client.post("/templates/render", json={"template": template_json, "variables": payment_values})
        assert response.status_code == 200
        body = response.json()
        assert body["subject"] == "Payment due for Alex"
        assert "https://pay.example.com/inv_123" in body["html"]
        assert body["unresolved_variables"] == []

    def test_render_reports_unresolved(self, client, template_json):
        """Test that missing values are listed, not rejected."""
        body = client.post("/templates/render", json={"template": template_json}).json()
        assert body["unresolved_variables"] == ["customer_name", "amount_due", "payment_url"]
        assert "{{customer_name}}" in body["html"]

    def test_render_malformed_block(self, client, template_json):
        """Test that malformed blocks answer 422 with the block id."""
        template_json["blocks"].append({"id": "steps-1", "type": "steplist", "steps": []})
        response = client.post("/templates/render", json={"template": template_json})
        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "MALFORMED_BLOCK"
        assert body["extra"]["block_id"] == "steps-1"

    def test_render_invalid_template(self, client, template_json):
        """Test that schema violations answer 422."""
        template_json["colorScheme"] = "purple"
        response = client.post("/templates/render", json={"template": template_json})
        assert response.status_code == 422
        assert response.json()["detail"] == "Validation error"

    def test_preview_fills_examples(self, client, template_json):
        """Test that preview falls back to declared examples."""
        body = client.post(
            "/templates/preview",
            json={"template": template_json, "variables": {"customer_name": "Alex"}},
        ).json()
        assert body["subject"] == "Payment due for Alex"
        assert "$15.00" in body["html"]
        assert body["unresolved_variables"] == []

    def test_validate(self, client, template_json):
        """Test that validation issues use the stored JSON shape."""
        template_json["blocks"].append({"id": "b2", "type": "button", "label": "", "urlVariable": "x"})
        body = client.post("/templates/validate", json={"template": template_json}).json()
        assert body["valid"] is False
        assert body["errors"][0]["blockId"] == "b2"


# =============================================================================
# Import / Export
# =============================================================================


class TestImportExportRoutes:
    """Test suite for legacy source import and export."""

    def test_export_then_import(self, client):
        """Test that exported source imports back to the same slug and blocks."""
        template = get_system_template("telegram_link")
        exported = client.post("/templates/export", json={"template": template.model_dump(mode="json")}).json()
        assert exported["filename"] == "telegram-link.ts"
        assert exported["source"] == LegacyCodeGenerator().generate(template)

        imported = client.post("/templates/import", json={"source": exported["source"]}).json()
        assert imported["errors"] == []
        assert imported["template"]["slug"] == "telegram_link"
        assert [b["id"] for b in imported["template"]["blocks"]] == [b.id for b in template.blocks]

    def test_import_garbage_is_reported(self, client):
        """Test that extraction failures answer 200 with errors."""
        response = client.post("/templates/import", json={"source": "not a module"})
        assert response.status_code == 200
        body = response.json()
        assert body["template"] is None
        assert body["errors"]

    def test_import_empty_source_rejected(self, client):
        """Test that empty source fails request validation."""
        assert client.post("/templates/import", json={"source": ""}).status_code == 422
