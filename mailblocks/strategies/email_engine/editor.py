"""Editor store.

Holds the working copy of a template for an editing session. The caller
owns the store; nothing here is global. Every change produces a new frozen
``EmailTemplate`` snapshot, so undo and redo just move between snapshots.
"""

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from mailblocks.strategies.email_engine.blocks import create_block
from mailblocks.strategies.email_engine.models import EmailBlock, EmailTemplate
from mailblocks.strategies.email_engine.variables import extract_template_variables

logger = logging.getLogger(__name__)

HEADER_SETTINGS = frozenset({"emoji", "title", "subtitle"})
TEMPLATE_SETTINGS = frozenset(
    {"name", "description", "subject", "preheader", "color_scheme", "footer", "variables", "metadata"}
)


# =============================================================================
# Operations
# =============================================================================


@dataclass(frozen=True)
class AddBlock:
    block_type: str
    index: int | None = None


@dataclass(frozen=True)
class DeleteBlock:
    block_id: str


@dataclass(frozen=True)
class MoveBlock:
    block_id: str
    to_index: int


@dataclass(frozen=True)
class DuplicateBlock:
    block_id: str


@dataclass(frozen=True)
class UpdateBlock:
    """Replace the block whose id matches ``block.id``."""

    block: EmailBlock


EditorOperation = AddBlock | DeleteBlock | MoveBlock | DuplicateBlock | UpdateBlock


def default_id_factory(block_type: str) -> str:
    return f"{block_type}-{uuid.uuid4().hex[:8]}"


class EditorStore:
    """Working state of one template editing session.

    Args:
        template: Template to edit.
        id_factory: Builds ids for new and duplicated blocks from the block
            type. Must not return ids already in use.
        history_limit: Maximum number of undo steps kept.
    """

    def __init__(
        self,
        template: EmailTemplate,
        id_factory: Callable[[str], str] = default_id_factory,
        history_limit: int = 100,
    ) -> None:
        self._template = template
        self._saved = template
        self._undo: list[EmailTemplate] = []
        self._redo: list[EmailTemplate] = []
        self._id_factory = id_factory
        self._history_limit = history_limit
        self.preview_values: dict[str, str] = {}
        self.selected_block_id: str | None = None

    @property
    def template(self) -> EmailTemplate:
        return self._template

    @property
    def dirty(self) -> bool:
        """True when the current snapshot differs from the last saved one."""
        return self._template != self._saved

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def mark_saved(self) -> None:
        self._saved = self._template

    # -------------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------------

    def _commit(self, template: EmailTemplate) -> None:
        self._undo.append(self._template)
        if len(self._undo) > self._history_limit:
            self._undo.pop(0)
        self._redo.clear()
        self._template = template

    def undo(self) -> bool:
        """Step back one snapshot. Returns False when there is nothing to undo."""
        if not self._undo:
            return False
        self._redo.append(self._template)
        self._template = self._undo.pop()
        self._drop_stale_selection()
        return True

    def redo(self) -> bool:
        if not self._redo:
            return False
        self._undo.append(self._template)
        self._template = self._redo.pop()
        self._drop_stale_selection()
        return True

    def _drop_stale_selection(self) -> None:
        if self.selected_block_id and self._template.get_block(self.selected_block_id) is None:
            self.selected_block_id = None

    # -------------------------------------------------------------------------
    # Block operations
    # -------------------------------------------------------------------------

    def _index_of(self, block_id: str) -> int:
        for index, block in enumerate(self._template.blocks):
            if block.id == block_id:
                return index
        raise KeyError(block_id)

    def _new_id(self, block_type: str) -> str:
        block_id = self._id_factory(block_type)
        if self._template.get_block(block_id) is not None:
            raise ValueError(f"Id factory returned an id already in use: {block_id}")
        return block_id

    def apply(self, operation: EditorOperation) -> EmailBlock | None:
        """Apply a block operation and record an undo snapshot.

        Args:
            operation: One of ``AddBlock``, ``DeleteBlock``, ``MoveBlock``,
                ``DuplicateBlock`` or ``UpdateBlock``.

        Returns:
            The added, duplicated, moved or updated block; None after a delete.

        Raises:
            KeyError: If the operation names a block id the template lacks.
            ValueError: If ``AddBlock`` names an unknown block type.
        """
        blocks = list(self._template.blocks)
        result: EmailBlock | None

        match operation:
            case AddBlock(block_type=block_type, index=index):
                result = create_block(block_type, self._new_id(block_type))
                if index is None:
                    blocks.append(result)
                else:
                    blocks.insert(index, result)
                self.selected_block_id = result.id
            case DeleteBlock(block_id=block_id):
                del blocks[self._index_of(block_id)]
                result = None
                if self.selected_block_id == block_id:
                    self.selected_block_id = None
            case MoveBlock(block_id=block_id, to_index=to_index):
                result = blocks.pop(self._index_of(block_id))
                blocks.insert(max(0, min(to_index, len(blocks))), result)
            case DuplicateBlock(block_id=block_id):
                index = self._index_of(block_id)
                original = blocks[index]
                result = original.model_copy(update={"id": self._new_id(original.type)})
                blocks.insert(index + 1, result)
                self.selected_block_id = result.id
            case UpdateBlock(block=block):
                index = self._index_of(block.id)
                blocks[index] = result = block
            case _:
                raise TypeError(f"Unsupported editor operation: {operation!r}")

        self._commit(self._template.model_copy(update={"blocks": blocks}))
        logger.debug(f"Applied {type(operation).__name__} to '{self._template.slug}'")
        return result

    # -------------------------------------------------------------------------
    # Settings and preview values
    # -------------------------------------------------------------------------

    def update_settings(self, **changes: Any) -> EmailTemplate:
        """Change envelope settings.

        Header keys (``emoji``, ``title``, ``subtitle``) update the header;
        the other keys are template fields. The result is re-validated.

        Raises:
            ValueError: On an unknown setting name.
            pydantic.ValidationError: If the new values are invalid.
        """
        unknown = set(changes) - HEADER_SETTINGS - TEMPLATE_SETTINGS
        if unknown:
            raise ValueError(f"Unknown template settings: {', '.join(sorted(unknown))}")

        data = self._template.model_dump(by_alias=False)
        data["header"].update({k: v for k, v in changes.items() if k in HEADER_SETTINGS})
        data.update({k: v for k, v in changes.items() if k in TEMPLATE_SETTINGS})
        self._commit(EmailTemplate.model_validate(data))
        return self._template

    def set_preview_value(self, name: str, value: str) -> None:
        self.preview_values[name] = value

    def delete_preview_value(self, name: str) -> None:
        self.preview_values.pop(name, None)

    def detected_variables(self) -> list[str]:
        """Identifiers referenced anywhere in the current template."""
        return extract_template_variables(self._template)
