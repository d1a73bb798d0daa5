"""Core configuration and factory components."""

from termsite.core.config import Settings, get_settings
from termsite.core.factory import ComponentFactory, Storages, get_factory

__all__ = [
    "Settings",
    "get_settings",
    "ComponentFactory",
    "Storages",
    "get_factory",
]
