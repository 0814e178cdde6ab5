"""Testing utilities for Keepsake."""

from .factory import ItemFactory, ProfileFactory
from .fixtures import app_fixture, memory_app

__all__ = [
    "ItemFactory",
    "ProfileFactory",
    "app_fixture",
    "memory_app",
]
