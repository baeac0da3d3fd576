"""Unit tests for the legacy source importer."""

import pytest

from mailblocks.interfaces.importer import TemplateImportError
from mailblocks.strategies.email_engine.catalog import get_system_template, get_system_template_slugs
from mailblocks.strategies.email_engine.generator import LegacyCodeGenerator
from mailblocks.strategies.email_engine.importer import (
    LegacySourceImporter,
    evaluate_style_expression,
    guess_variable_type,
    pascal_to_snake,
)
from mailblocks.strategies.email_engine.models import (
    ButtonBlock,
    CodeBlock,
    CustomBlock,
    GreetingBlock,
    InfoBoxBlock,
    ParagraphBlock,
    RenderMode,
)
from mailblocks.strategies.email_engine.styles import BRAND_COLORS, STYLES, ColorSchemeName

HAND_WRITTEN_SOURCE = """
import { buildEmailHTML, brandColors, getSupportFooter, styles } from './base';

export function getDunningSoftEmail(data: {
  customer_name: string;
  amount_due: string;
  update_payment_url: string;
}) {
  const subject = 'Payment issue with your Frontier Meals subscription';

  const headerContent = `
    <div style="font-size: 48px; margin-bottom: 12px;">💳</div>
    <h1>Payment Needs Attention</h1>
    <p>We had trouble processing your payment</p>
  `;

  const bodyContent = `
    <p style="${styles.pLead}">Hi ${data.customer_name},</p>
    <p style="${styles.p}">We had trouble processing your payment of <strong>${data.amount_due}</strong>.</p>
    <div class="text-center">
      <a href="${data.update_payment_url}" class="email-button" style="background-color: #b45309;">Update Payment Method</a>
    </div>
    <div class="info-box info-box-success">
      <p><strong>Good news</strong></p>
      <p>We'll automatically retry in 24-48 hours.</p>
    </div>
    <marquee>Legacy flourish</marquee>
  `;

  return {
    subject,
    html: buildEmailHTML({
      colorScheme: brandColors.amber,
      title: subject,
      preheader: 'Please update your payment method to keep your meal service active.',
      headerContent,
      bodyContent,
      footerContent: getSupportFooter(brandColors.amber),
    }),
  };
}
"""


@pytest.fixture
def importer():
    """Create an importer instance."""
    return LegacySourceImporter()


class TestHelpers:
    """Test suite for importer helper functions."""

    @pytest.mark.parametrize(
        "name,expected",
        [("QRDaily", "qr_daily"), ("DunningSoft", "dunning_soft"), ("dayName", "day_name")],
    )
    def test_pascal_to_snake(self, name, expected):
        """Test identifier case conversion."""
        assert pascal_to_snake(name) == expected

    def test_guess_variable_type(self):
        """Test semantic type guessing from names."""
        assert guess_variable_type("update_payment_url") == "url"
        assert guess_variable_type("effective_date") == "date"
        assert guess_variable_type("amount_due") == "money"
        assert guess_variable_type("customer_name") == "string"

    def test_evaluate_style_expressions(self):
        """Test that style helper expressions resolve to literal CSS."""
        scheme = BRAND_COLORS[ColorSchemeName.TEAL]
        assert evaluate_style_expression("styles.pMuted", scheme) == STYLES["pMuted"]
        assert evaluate_style_expression("scheme.onPrimary", scheme) == scheme.on_primary
        assert evaluate_style_expression("brandColors.red.primary", scheme) == "#b91c1c"
        assert evaluate_style_expression("tokens.fontSize.sm", scheme) == "14px"
        assert evaluate_style_expression("formatDate(x)", scheme) is None


class TestHandWrittenImport:
    """Test suite for importing a hand-written legacy module."""

    @pytest.fixture
    def result(self, importer):
        return importer.parse(HAND_WRITTEN_SOURCE)

    def test_envelope(self, result):
        """Test slug, name, scheme, subject, header and footer extraction."""
        template = result.template
        assert result.ok
        assert template.slug == "dunning_soft"
        assert template.name == "Dunning Soft"
        assert template.color_scheme is ColorSchemeName.AMBER
        assert template.subject == "Payment issue with your Frontier Meals subscription"
        assert template.preheader.startswith("Please update your payment method")
        assert template.header.emoji == "💳"
        assert template.header.title == "Payment Needs Attention"
        assert template.header.subtitle == "We had trouble processing your payment"
        assert template.footer.type == "support"

    def test_blocks(self, result):
        """Test that known fragments map to blocks with deterministic ids."""
        blocks = result.template.blocks
        assert [b.id for b in blocks] == [
            "dunning_soft-greeting-1",
            "dunning_soft-paragraph-1",
            "dunning_soft-button-1",
            "dunning_soft-infobox-1",
            "dunning_soft-custom-1",
        ]
        greeting, paragraph, button, info_box, custom = blocks
        assert isinstance(greeting, GreetingBlock)
        assert greeting.name_variable == "{{customer_name}}"
        assert isinstance(paragraph, ParagraphBlock)
        assert "<strong>{{amount_due}}</strong>" in paragraph.content
        assert isinstance(button, ButtonBlock)
        assert button.url_variable == "{{update_payment_url}}"
        assert button.label == "Update Payment Method"
        assert button.color_scheme is None
        assert isinstance(info_box, InfoBoxBlock)
        assert info_box.box_type == "success"
        assert info_box.content == "We'll automatically retry in 24-48 hours."
        assert isinstance(custom, CustomBlock)
        assert custom.html == "<marquee>Legacy flourish</marquee>"

    def test_unrecognized_markup_warns(self, result):
        """Test that unmapped fragments are reported, not dropped."""
        assert any("dunning_soft-custom-1" in warning for warning in result.warnings)

    def test_declared_variables(self, result):
        """Test that inline data fields become declared variables."""
        variables = {v.name: v for v in result.template.variables}
        assert list(variables) == ["customer_name", "amount_due", "update_payment_url"]
        assert variables["amount_due"].type == "money"
        assert variables["update_payment_url"].label == "Update Payment URL"


class TestImportFailures:
    """Test suite for extraction failures and warnings."""

    def test_missing_subject(self, importer):
        """Test that a module without a subject yields an error and no template."""
        source = HAND_WRITTEN_SOURCE.replace(
            "const subject = 'Payment issue with your Frontier Meals subscription';", ""
        )
        result = importer.parse(source)
        assert result.template is None
        assert not result.ok
        assert len(result.errors) == 1
        assert result.errors[0].severity == "error"
        assert "subject" in result.errors[0].message

    def test_blank_subject_is_missing(self, importer):
        """Test that a whitespace-only subject counts as missing."""
        source = HAND_WRITTEN_SOURCE.replace(
            "'Payment issue with your Frontier Meals subscription'", "'   '"
        )
        result = importer.parse(source)
        assert result.template is None
        assert [error.message for error in result.errors] == ["Could not extract subject line"]

    def test_empty_header_title_is_missing(self, importer):
        """Test that a header with an empty h1 counts as missing."""
        source = HAND_WRITTEN_SOURCE.replace("<h1>Payment Needs Attention</h1>", "<h1>  </h1>")
        result = importer.parse(source)
        assert result.template is None
        assert [error.message for error in result.errors] == ["Could not extract header content"]

    def test_invalid_slug_falls_back(self, importer):
        """Test that a function name giving an unusable slug uses the default."""
        result = importer.parse(HAND_WRITTEN_SOURCE.replace("getDunningSoftEmail", "get_Email"))
        assert result.ok
        assert result.template.slug == "untitled"
        assert result.template.name == "Untitled Template"
        assert result.template.blocks[0].id == "untitled-greeting-1"
        assert any("invalid slug '_'" in warning for warning in result.warnings)

    def test_garbage_never_raises(self, importer):
        """Test that arbitrary text is reported, not raised."""
        result = importer.parse("this is not a template module")
        assert result.template is None
        assert len(result.errors) == 2
        assert any("slug 'untitled'" in warning for warning in result.warnings)

    def test_parse_or_raise(self, importer):
        """Test that the strict helper raises on errors."""
        with pytest.raises(TemplateImportError):
            importer.parse_or_raise("")

    def test_unknown_expressions_reported(self, importer):
        """Test that bare identifiers convert and other expressions stay verbatim."""
        source = HAND_WRITTEN_SOURCE.replace(
            "Update Payment Method</a>", "${buttonText}</a>"
        ).replace("Legacy flourish", "${formatDate(data.due)}")
        result = importer.parse(source)
        button = result.template.blocks[2]
        assert button.label == "{{button_text}}"
        assert "${formatDate(data.due)}" in result.template.blocks[-1].html
        assert any("converted to variable {{button_text}}" in w for w in result.warnings)
        assert any("kept verbatim" in w for w in result.warnings)

    def test_importer_is_pure(self, importer):
        """Test that repeated parses give equal results."""
        assert importer.parse(HAND_WRITTEN_SOURCE) == importer.parse(HAND_WRITTEN_SOURCE)


class TestGeneratedRoundTrip:
    """Test suite for importing modules written by the generator."""

    @pytest.mark.parametrize("style", ["inline", "block"])
    def test_code_markup_survives(self, importer, payment_template, style):
        """Test that code content holding markup imports back as one block."""
        template = payment_template.model_copy(
            update={"blocks": [CodeBlock(id="code-1", content="x</code>y & <b>", style=style)]}
        )
        result = importer.parse(LegacyCodeGenerator().generate(template))

        assert result.ok, result.errors
        blocks = result.template.blocks
        assert len(blocks) == 1
        assert isinstance(blocks[0], CodeBlock)
        assert blocks[0].content == "x</code>y & <b>"
        assert blocks[0].style == style

    @pytest.mark.parametrize("slug", get_system_template_slugs())
    def test_catalog_round_trip(self, importer, renderer, slug):
        """Test that generated catalog modules import back to equivalent templates."""
        original = get_system_template(slug)
        source = LegacyCodeGenerator().generate(original)

        result = importer.parse(source)

        assert result.ok, result.errors
        imported = result.template
        assert imported.slug == original.slug
        assert imported.name == original.name
        assert imported.color_scheme is original.color_scheme
        assert imported.subject == original.subject
        assert imported.preheader == original.preheader
        assert imported.header == original.header
        assert imported.footer.type == original.footer.type
        assert [b.id for b in imported.blocks] == [b.id for b in original.blocks]
        assert not any(isinstance(b, CustomBlock) for b in imported.blocks)
        assert [v.name for v in imported.variables] == [v.name for v in original.variables]
        assert (
            renderer.render(imported, mode=RenderMode.PRESERVE).html
            == renderer.render(original, mode=RenderMode.PRESERVE).html
        )
