"""FastAPI dependencies for dependency injection.

Provides the application's component factory to routes.
"""

import logging

from fastapi import Request

from mailblocks.core.factory import ComponentFactory, get_factory

logger = logging.getLogger(__name__)


def get_components(request: Request) -> ComponentFactory:
    """Dependency returning the factory bound to the running application.

    Falls back to the global factory when the app was built without one.

    Args:
        request: Incoming request.

    Returns:
        The ComponentFactory for this application.
    """
    factory = getattr(request.app.state, "factory", None)
    if factory is None:
        logger.debug("No factory on app state, using global factory")
        factory = get_factory()
    return factory
