"""Block renderer interface."""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from mailblocks.strategies.email_engine.models import (
        EmailBlock,
        EmailTemplate,
        RenderMode,
        RenderResult,
    )
    from mailblocks.strategies.email_engine.styles import ColorSchemeName


class BaseBlockRenderer(ABC):
    """Abstract base class for block model renderers.

    Implementations must be deterministic: the same template and the same
    values always produce byte-identical output.
    """

    @abstractmethod
    def render(
        self,
        template: "EmailTemplate",
        variable_values: Mapping[str, Any] | None = None,
        mode: "RenderMode | None" = None,
    ) -> "RenderResult":
        """Render a template to a complete email document.

        Args:
            template: The template to render.
            variable_values: Values keyed by variable name.
            mode: Substitute references or keep them literal.

        Returns:
            Subject, markup and the references left unresolved.

        Raises:
            MalformedBlockError: If a block cannot be rendered.
        """

    @abstractmethod
    def render_blocks(
        self,
        blocks: Sequence["EmailBlock"],
        color_scheme: "ColorSchemeName",
        variable_values: Mapping[str, Any] | None = None,
        mode: "RenderMode | None" = None,
    ) -> str:
        """Render body fragments only, joined by a blank line."""

    @abstractmethod
    def render_preview(
        self,
        template: "EmailTemplate",
        values: Mapping[str, Any] | None = None,
    ) -> "RenderResult":
        """Render in substitute mode with missing values filled from examples."""


class MalformedBlockError(ValueError):
    """Raised when a block violates its variant's structural rules.

    Attributes:
        block_id: Id of the offending block.
        field: Name of the offending field.
    """

    def __init__(self, block_id: str, field: str, message: str) -> None:
        self.block_id = block_id
        self.field = field
        self.message = message
        super().__init__(f"Block {block_id!r} field {field!r}: {message}")
