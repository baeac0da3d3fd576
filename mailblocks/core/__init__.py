"""Core configuration and factory components."""

from mailblocks.core.config import Settings, get_settings
from mailblocks.core.factory import ComponentFactory

__all__ = [
    "Settings",
    "get_settings",
    "ComponentFactory",
]
