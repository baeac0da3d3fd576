"""FastAPI routers and dependencies."""

from mailblocks.api.deps import get_components
from mailblocks.api.templates import router as templates_router

__all__ = [
    "get_components",
    "templates_router",
]
