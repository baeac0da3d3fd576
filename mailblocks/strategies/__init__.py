"""Concrete strategy implementations."""

from mailblocks.strategies.email_engine import (
    BlockRenderer,
    LegacyCodeGenerator,
    LegacyMarkupShell,
    LegacySourceImporter,
)

__all__ = [
    "BlockRenderer",
    "LegacyCodeGenerator",
    "LegacyMarkupShell",
    "LegacySourceImporter",
]
