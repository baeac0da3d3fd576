"""Unit tests for the component factory."""

from mailblocks.core.config import Settings
from mailblocks.core.factory import ComponentFactory


class TestComponentFactory:
    """Test suite for settings-driven component wiring."""

    def test_components_are_cached(self):
        """Test that repeated lookups share one instance until cleared."""
        factory = ComponentFactory(Settings(log_to_file=False))
        renderer = factory.get_renderer()
        assert factory.get_renderer() is renderer
        factory.clear_cache()
        assert factory.get_renderer() is not renderer

    def test_brand_settings_reach_the_footer(self, payment_template):
        """Test that brand settings flow into the rendered footer."""
        settings = Settings(
            log_to_file=False,
            brand_name="Acme Meals",
            support_handle="@acme",
            support_url="https://t.me/acme",
            copyright_year=2031,
        )
        html = ComponentFactory(settings).get_renderer().render_preview(payment_template).html
        assert "&copy; 2031 Acme Meals. All rights reserved." in html
        assert 'href="https://t.me/acme"' in html
        assert ">@acme</a>" in html

    def test_escaping_can_be_disabled(self, payment_template):
        """Test that the escape setting reaches the renderer."""
        factory = ComponentFactory(Settings(log_to_file=False, escape_variable_values=False))
        html = factory.get_renderer().render(payment_template, {"customer_name": "<b>Al</b>"}).html
        assert "Hi <b>Al</b>," in html

    def test_generator_uses_brand_name(self):
        """Test that the generator prints the configured brand."""
        factory = ComponentFactory(Settings(log_to_file=False, brand_name="Acme Meals"))
        assert factory.get_generator().brand_name == "Acme Meals"
