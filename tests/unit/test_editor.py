"""Unit tests for the editor store."""

import itertools

import pytest
from pydantic import ValidationError

from mailblocks.strategies.email_engine.editor import (
    AddBlock,
    DeleteBlock,
    DuplicateBlock,
    EditorStore,
    MoveBlock,
    UpdateBlock,
    default_id_factory,
)
from mailblocks.strategies.email_engine.models import ParagraphBlock
from mailblocks.strategies.email_engine.styles import ColorSchemeName


@pytest.fixture
def store(payment_template):
    """Create a store with predictable ids for new blocks."""
    counter = itertools.count(1)
    return EditorStore(payment_template, id_factory=lambda block_type: f"{block_type}-new-{next(counter)}")


def _ids(store):
    return [block.id for block in store.template.blocks]


class TestBlockOperations:
    """Test suite for block operations."""

    def test_add_appends_and_selects(self, store):
        """Test that added blocks go last by default and become selected."""
        block = store.apply(AddBlock("divider"))
        assert block.id == "divider-new-1"
        assert _ids(store)[-1] == "divider-new-1"
        assert store.selected_block_id == "divider-new-1"

    def test_add_at_index(self, store):
        """Test inserting a block at a position."""
        store.apply(AddBlock("spacer", index=0))
        assert _ids(store)[0] == "spacer-new-1"

    def test_add_unknown_type(self, store, payment_template):
        """Test that unknown block types leave the template unchanged."""
        with pytest.raises(ValueError):
            store.apply(AddBlock("carousel"))
        assert store.template == payment_template
        assert not store.can_undo

    def test_delete_clears_selection(self, store):
        """Test that deleting the selected block clears the selection."""
        store.selected_block_id = "button-1"
        assert store.apply(DeleteBlock("button-1")) is None
        assert _ids(store) == ["greeting-1", "paragraph-1"]
        assert store.selected_block_id is None

    def test_unknown_block_id(self, store):
        """Test that operations on missing ids raise KeyError."""
        with pytest.raises(KeyError):
            store.apply(DeleteBlock("missing"))

    @pytest.mark.parametrize(
        "to_index,expected",
        [
            (0, ["button-1", "greeting-1", "paragraph-1"]),
            (1, ["greeting-1", "button-1", "paragraph-1"]),
            (99, ["greeting-1", "paragraph-1", "button-1"]),
            (-5, ["button-1", "greeting-1", "paragraph-1"]),
        ],
    )
    def test_move_clamps(self, store, to_index, expected):
        """Test that move targets are clamped to the block range."""
        store.apply(MoveBlock("button-1", to_index))
        assert _ids(store) == expected

    def test_duplicate_inserts_after(self, store):
        """Test that duplicates get a new id and follow the original."""
        copy = store.apply(DuplicateBlock("paragraph-1"))
        assert _ids(store) == ["greeting-1", "paragraph-1", "paragraph-new-1", "button-1"]
        assert copy.content == store.template.get_block("paragraph-1").content
        assert store.selected_block_id == "paragraph-new-1"

    def test_duplicate_id_from_factory(self, payment_template):
        """Test that the store refuses ids already in use."""
        store = EditorStore(payment_template, id_factory=lambda block_type: "greeting-1")
        with pytest.raises(ValueError, match="already in use"):
            store.apply(AddBlock("paragraph"))

    def test_update_replaces_by_id(self, store):
        """Test that updates swap the block with the same id."""
        store.apply(UpdateBlock(ParagraphBlock(id="paragraph-1", content="Changed")))
        assert store.template.get_block("paragraph-1").content == "Changed"
        assert _ids(store) == ["greeting-1", "paragraph-1", "button-1"]

    def test_default_id_factory(self):
        """Test the default id shape."""
        block_id = default_id_factory("button")
        assert block_id.startswith("button-")
        assert len(block_id) == len("button-") + 8


class TestHistory:
    """Test suite for undo, redo and the dirty flag."""

    def test_undo_redo(self, store, payment_template):
        """Test stepping back and forward through snapshots."""
        store.apply(DeleteBlock("paragraph-1"))
        after_delete = store.template

        assert store.undo() is True
        assert store.template == payment_template
        assert store.can_redo

        assert store.redo() is True
        assert store.template == after_delete
        assert store.redo() is False

    def test_new_change_clears_redo(self, store):
        """Test that editing after an undo drops the redo stack."""
        store.apply(AddBlock("divider"))
        store.undo()
        store.apply(AddBlock("spacer"))
        assert not store.can_redo

    def test_undo_drops_stale_selection(self, store):
        """Test that undoing an add clears the selection of the removed block."""
        store.apply(AddBlock("divider"))
        store.undo()
        assert store.selected_block_id is None

    def test_history_limit(self, payment_template):
        """Test that only the configured number of undo steps is kept."""
        store = EditorStore(payment_template, history_limit=2)
        for _ in range(3):
            store.apply(AddBlock("spacer"))
        assert store.undo() and store.undo()
        assert store.undo() is False

    def test_dirty_flag(self, store):
        """Test that dirty tracks the last saved snapshot."""
        assert not store.dirty
        store.apply(AddBlock("divider"))
        assert store.dirty
        store.mark_saved()
        assert not store.dirty
        store.undo()
        assert store.dirty


class TestSettings:
    """Test suite for envelope settings and preview values."""

    def test_update_header_and_envelope(self, store):
        """Test that header keys and template keys are routed correctly."""
        template = store.update_settings(title="Invoice Ready", subject="Invoice", color_scheme="teal")
        assert template.header.title == "Invoice Ready"
        assert template.header.emoji == "💳"
        assert template.subject == "Invoice"
        assert template.color_scheme is ColorSchemeName.TEAL
        assert store.can_undo

    def test_unknown_setting(self, store):
        """Test that unknown settings raise ValueError."""
        with pytest.raises(ValueError, match="slug"):
            store.update_settings(slug="renamed")

    def test_invalid_setting_value(self, store, payment_template):
        """Test that invalid values are rejected and nothing is committed."""
        with pytest.raises(ValidationError):
            store.update_settings(color_scheme="purple")
        assert store.template == payment_template

    def test_preview_values(self, store):
        """Test setting and removing preview values."""
        store.set_preview_value("customer_name", "Alex")
        store.delete_preview_value("customer_name")
        store.delete_preview_value("never_set")
        assert store.preview_values == {}

    def test_detected_variables(self, store):
        """Test that detection follows the current template."""
        store.apply(DeleteBlock("button-1"))
        assert store.detected_variables() == ["customer_name", "amount_due"]
