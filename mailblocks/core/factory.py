"""Component Factory for strategy instantiation.

Builds the email engine components from settings so the API, the export
script and tests share one wiring. Every component is stateless; cached
instances can be shared freely.
"""

import logging

from mailblocks.core.config import Settings, get_settings
from mailblocks.interfaces.generator import BaseCodeGenerator
from mailblocks.interfaces.importer import BaseTemplateImporter
from mailblocks.interfaces.renderer import BaseBlockRenderer
from mailblocks.interfaces.shell import BaseMarkupShell
from mailblocks.strategies.email_engine import (
    BlockRenderer,
    LegacyCodeGenerator,
    LegacyMarkupShell,
    LegacySourceImporter,
)

logger = logging.getLogger(__name__)


class ComponentFactory:
    """Factory for creating email engine components based on configuration.

    Example:
        ```python
        factory = ComponentFactory(get_settings())

        renderer = factory.get_renderer()
        importer = factory.get_importer()
        generator = factory.get_generator()
        ```
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the factory with optional settings.

        Args:
            settings: Application settings. If None, uses global settings.
        """
        self._settings = settings or get_settings()
        self._shell_cache: BaseMarkupShell | None = None
        self._renderer_cache: BaseBlockRenderer | None = None
        self._importer_cache: BaseTemplateImporter | None = None
        self._generator_cache: BaseCodeGenerator | None = None

    @property
    def settings(self) -> Settings:
        return self._settings

    def get_shell(self) -> BaseMarkupShell:
        """Get the markup shell configured with the brand settings."""
        if self._shell_cache is None:
            logger.info("Instantiating markup shell")
            self._shell_cache = LegacyMarkupShell(
                brand_name=self._settings.brand_name,
                support_handle=self._settings.support_handle,
                support_url=self._settings.support_url,
                copyright_year=self._settings.copyright_year,
            )
        return self._shell_cache

    def get_renderer(self) -> BaseBlockRenderer:
        """Get a renderer instance.

        Returns:
            A BaseBlockRenderer implementation using the configured shell.
        """
        if self._renderer_cache is None:
            logger.info("Instantiating block renderer")
            self._renderer_cache = BlockRenderer(
                shell=self.get_shell(),
                escape_values=self._settings.escape_variable_values,
            )
        return self._renderer_cache

    def get_importer(self) -> BaseTemplateImporter:
        if self._importer_cache is None:
            logger.info("Instantiating legacy source importer")
            self._importer_cache = LegacySourceImporter()
        return self._importer_cache

    def get_generator(self) -> BaseCodeGenerator:
        if self._generator_cache is None:
            logger.info("Instantiating legacy code generator")
            self._generator_cache = LegacyCodeGenerator(brand_name=self._settings.brand_name)
        return self._generator_cache

    def clear_cache(self) -> None:
        """Clear all cached component instances.

        This forces new instances to be created on next access.
        Useful for testing or when settings change.
        """
        self._shell_cache = None
        self._renderer_cache = None
        self._importer_cache = None
        self._generator_cache = None
        logger.debug("Component factory cache cleared")


# Global factory instance
_factory: ComponentFactory | None = None


def get_factory() -> ComponentFactory:
    """Get or create the global ComponentFactory instance.

    Returns:
        The singleton ComponentFactory instance.
    """
    global _factory
    if _factory is None:
        _factory = ComponentFactory()
    return _factory
