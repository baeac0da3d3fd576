"""Markup shell interface.

The shell wraps rendered header, body and footer fragments in the full
email document (doctype, client conditionals, wrapper tables).
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mailblocks.strategies.email_engine.styles import ColorScheme


class BaseMarkupShell(ABC):
    """Abstract base class for email envelopes."""

    @abstractmethod
    def build(
        self,
        scheme: "ColorScheme",
        title: str,
        preheader: str | None,
        header_content: str,
        body_content: str,
        footer_content: str | None,
    ) -> str:
        """Assemble a complete email document.

        Args:
            scheme: Resolved color scheme for header and links.
            title: Document title (already escaped).
            preheader: Hidden inbox preview text, or None.
            header_content: Header fragment.
            body_content: Body fragment.
            footer_content: Footer fragment; None selects the minimal footer.

        Returns:
            The complete markup.
        """

    @abstractmethod
    def support_footer(self, scheme: "ColorScheme") -> str:
        """Return the footer with the support contact and copyright line."""

    @abstractmethod
    def minimal_footer(self) -> str:
        """Return the copyright-only footer."""
