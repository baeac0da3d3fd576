"""Unit tests for the system template catalog."""

import pytest

from mailblocks.strategies.email_engine.catalog import (
    get_system_template,
    get_system_template_slugs,
    get_template_info,
    is_system_template,
    list_templates,
)
from mailblocks.strategies.email_engine.styles import ColorSchemeName
from mailblocks.strategies.email_engine.validation import validate_template
from mailblocks.strategies.email_engine.variables import extract_template_variables


class TestCatalogListing:
    """Test suite for catalog lookups."""

    def test_nine_system_templates(self):
        """Test that the catalog lists every system email in a fixed order."""
        assert get_system_template_slugs() == [
            "qr_daily",
            "telegram_link",
            "telegram_correction",
            "dunning_soft",
            "dunning_retry",
            "dunning_final",
            "canceled_notice",
            "schedule_change",
            "admin_magic_link",
        ]
        assert len(list_templates()) == 9

    def test_unknown_slug(self):
        """Test that unknown slugs return None instead of raising."""
        assert is_system_template("welcome") is False
        assert get_system_template("welcome") is None
        assert get_template_info("welcome") is None

    def test_template_info(self):
        """Test that info carries the scheme and declared variable names."""
        info = get_template_info("dunning_final")
        assert info.name == "Payment Final Notice"
        assert info.color_scheme is ColorSchemeName.RED
        assert info.variables == ("customer_name", "amount_due", "update_payment_url")

    def test_fresh_instances(self):
        """Test that each lookup builds a new template."""
        assert get_system_template("qr_daily") is not get_system_template("qr_daily")
        assert get_system_template("qr_daily") == get_system_template("qr_daily")


class TestCatalogTemplates:
    """Test suite for the block definitions themselves."""

    @pytest.mark.parametrize("slug", get_system_template_slugs())
    def test_block_ids(self, slug):
        """Test that block ids are unique and prefixed by the slug."""
        template = get_system_template(slug)
        ids = [block.id for block in template.blocks]
        assert len(ids) == len(set(ids))
        assert all(block_id.startswith(f"{slug}-{block.type}-") for block_id, block in zip(ids, template.blocks))

    @pytest.mark.parametrize("slug", get_system_template_slugs())
    def test_references_declared(self, slug):
        """Test that every reference a template uses is declared."""
        template = get_system_template(slug)
        declared = {v.name for v in template.variables}
        assert set(extract_template_variables(template)) <= declared

    @pytest.mark.parametrize("slug", get_system_template_slugs())
    def test_renders_with_examples(self, renderer, slug):
        """Test that preview rendering resolves every reference."""
        result = renderer.render_preview(get_system_template(slug))
        assert result.unresolved_variables == []
        assert "{{" not in result.html

    @pytest.mark.parametrize("slug", get_system_template_slugs())
    def test_validates_cleanly(self, slug):
        """Test that catalog templates pass validation without warnings."""
        result = validate_template(get_system_template(slug))
        assert result.valid
        assert result.errors == []
        assert result.warnings == []

    def test_qr_daily_shape(self):
        """Test the daily QR email block sequence."""
        template = get_system_template("qr_daily")
        assert template.color_scheme is ColorSchemeName.GREEN
        assert template.blocks[0].type == "greeting"
        assert any(block.type == "image" for block in template.blocks)
        assert template.footer.type == "support"

    def test_admin_magic_link_minimal_footer(self):
        """Test that the admin login email uses the minimal footer."""
        template = get_system_template("admin_magic_link")
        assert template.footer.type == "minimal"
        assert [v.name for v in template.variables] == ["magic_link"]
