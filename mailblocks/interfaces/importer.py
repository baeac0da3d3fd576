"""Legacy template importer interface."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mailblocks.strategies.email_engine.models import (
        EmailTemplate,
        ParseError,
        ParseResult,
    )


class BaseTemplateImporter(ABC):
    """Abstract base class for importers reconstructing a block model.

    ``parse`` never raises; extraction failures are reported inside the
    returned result.
    """

    @abstractmethod
    def parse(self, source_text: str) -> "ParseResult":
        """Parse template source into a block model.

        Args:
            source_text: Full source of a legacy template module.

        Returns:
            ParseResult with the template (or None) plus errors and warnings.
        """

    def parse_or_raise(self, source_text: str) -> "EmailTemplate":
        """Parse and return the template, raising if extraction failed.

        Raises:
            TemplateImportError: If the result carries any error entry.
        """
        result = self.parse(source_text)
        if result.template is None:
            raise TemplateImportError(result.errors)
        return result.template


class TemplateImportError(Exception):
    """Exception raised when a template cannot be imported."""

    def __init__(self, errors: "list[ParseError]") -> None:
        self.errors = errors
        messages = "; ".join(error.message for error in errors) or "unknown error"
        super().__init__(f"Template import failed: {messages}")
