"""Unit tests for the block model and template envelope."""

import pytest
from pydantic import ValidationError

from mailblocks.strategies.email_engine.blocks import BLOCK_TYPES, create_block
from mailblocks.strategies.email_engine.models import (
    ButtonBlock,
    EmailHeader,
    EmailTemplate,
    GreetingBlock,
    ParagraphBlock,
    ParseError,
    ParseResult,
    normalize_variable_ref,
)
from mailblocks.strategies.email_engine.styles import ColorSchemeName, resolve_scheme


def _template(**overrides):
    data = {
        "slug": "welcome",
        "name": "Welcome",
        "subject": "Hello",
        "color_scheme": "teal",
        "header": {"emoji": "👋", "title": "Welcome"},
    }
    data.update(overrides)
    return EmailTemplate.model_validate(data)


class TestVariableRefs:
    """Test suite for variable reference normalization."""

    def test_bare_name_is_wrapped(self):
        """Test that a bare identifier becomes a full reference."""
        assert normalize_variable_ref("customer_name") == "{{customer_name}}"

    def test_full_reference_is_kept(self):
        """Test that an already wrapped reference is unchanged."""
        assert normalize_variable_ref(" {{deep_link}} ") == "{{deep_link}}"

    @pytest.mark.parametrize("value", ["", "customer-name", "{{a b}}", "{{x}}}"])
    def test_invalid_identifiers_rejected(self, value):
        """Test that identifiers outside [A-Za-z0-9_] are rejected."""
        with pytest.raises(ValueError):
            normalize_variable_ref(value)

    def test_block_fields_are_normalized(self):
        """Test that block reference fields store the wrapped form."""
        block = ButtonBlock(id="b1", label="Go", url_variable="payment_url")
        assert block.url_variable == "{{payment_url}}"


class TestBlocks:
    """Test suite for block construction and the closed union."""

    def test_empty_id_rejected(self):
        """Test that a block needs a non-empty id."""
        with pytest.raises(ValidationError):
            ParagraphBlock(id="", content="Hello")

    def test_blocks_are_frozen(self):
        """Test that blocks cannot be mutated in place."""
        block = ParagraphBlock(id="p1", content="Hello")
        with pytest.raises(ValidationError):
            block.content = "Changed"

    def test_camel_case_input_and_output(self):
        """Test that the stored camelCase JSON shape round-trips."""
        block = GreetingBlock.model_validate({"id": "g1", "nameVariable": "{{customer_name}}"})
        dumped = block.model_dump()
        assert dumped["nameVariable"] == "{{customer_name}}"
        assert dumped["type"] == "greeting"

    def test_discriminated_union_from_dicts(self):
        """Test that template blocks are built from their type tag."""
        template = _template(
            blocks=[
                {"id": "b1", "type": "button", "label": "Pay", "urlVariable": "payment_url"},
                {"id": "d1", "type": "divider"},
            ]
        )
        assert isinstance(template.blocks[0], ButtonBlock)
        assert template.blocks[1].type == "divider"

    def test_unknown_block_type_rejected(self):
        """Test that the block union is closed."""
        with pytest.raises(ValidationError):
            _template(blocks=[{"id": "x", "type": "carousel"}])

    def test_every_block_type_has_a_factory(self):
        """Test that create_block covers every variant of the union."""
        for index, block_type in enumerate(BLOCK_TYPES):
            block = create_block(block_type, f"block-{index}")
            assert block.type == block_type
            assert block.id == f"block-{index}"

    def test_create_block_unknown_type(self):
        """Test that an unknown type raises ValueError."""
        with pytest.raises(ValueError, match="Unknown block type"):
            create_block("carousel", "x")


class TestEmailTemplate:
    """Test suite for the template envelope."""

    def test_unknown_color_scheme_rejected(self):
        """Test that only the six named schemes are accepted."""
        with pytest.raises(ValidationError):
            _template(color_scheme="purple")

    def test_resolve_scheme_rejects_unknown(self):
        """Test that scheme resolution raises for unknown names."""
        assert resolve_scheme("teal").primary == "#0f766e"
        with pytest.raises(ValueError):
            resolve_scheme("purple")

    def test_duplicate_block_ids_rejected(self):
        """Test that block ids are unique within a template."""
        with pytest.raises(ValidationError, match="Duplicate block id"):
            _template(
                blocks=[
                    {"id": "same", "type": "divider"},
                    {"id": "same", "type": "spacer"},
                ]
            )

    def test_invalid_slug_rejected(self):
        """Test that slugs are lowercase identifiers."""
        with pytest.raises(ValidationError):
            _template(slug="Not A Slug")

    def test_get_block(self):
        """Test block lookup by id."""
        template = _template(blocks=[{"id": "d1", "type": "divider"}])
        assert template.get_block("d1").type == "divider"
        assert template.get_block("missing") is None

    def test_defaults(self):
        """Test the envelope defaults."""
        template = EmailTemplate(
            slug="plain",
            name="Plain",
            subject="Hi",
            color_scheme=ColorSchemeName.GRAY,
            header=EmailHeader(emoji="📄", title="Plain"),
        )
        assert template.blocks == []
        assert template.footer.type == "support"
        assert template.variables == []


class TestParseResult:
    """Test suite for the importer result model."""

    def test_template_forbidden_with_errors(self):
        """Test that an errored result cannot also carry a template."""
        with pytest.raises(ValidationError):
            ParseResult(template=_template(), errors=[ParseError(message="boom")])

    def test_ok_ignores_warnings(self):
        """Test that warning-severity entries keep the result ok."""
        result = ParseResult(errors=[ParseError(message="minor", severity="warning")])
        assert result.ok is True
        assert ParseResult(errors=[ParseError(message="boom")]).ok is False
