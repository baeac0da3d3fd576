"""Abstract base classes for the email engine strategies."""

from mailblocks.interfaces.generator import BaseCodeGenerator
from mailblocks.interfaces.importer import BaseTemplateImporter, TemplateImportError
from mailblocks.interfaces.renderer import BaseBlockRenderer, MalformedBlockError
from mailblocks.interfaces.shell import BaseMarkupShell

__all__ = [
    "BaseMarkupShell",
    "BaseBlockRenderer",
    "BaseTemplateImporter",
    "BaseCodeGenerator",
    "MalformedBlockError",
    "TemplateImportError",
]
