"""Storage backends for Keepsake."""

from .base import (
    LETTER_LOCK_KEY,
    OPENED_LETTERS_KEY,
    PROFILE_KEY,
    KeyValueStore,
    NamespacedKeyValueStore,
)
from .memory import InMemoryKeyValueStore
from .sqlalchemy import AsyncSQLAlchemyKeyValueStore, AsyncSQLAlchemyStorage
from .profiles import ProfileStore

__all__ = [
    "LETTER_LOCK_KEY",
    "OPENED_LETTERS_KEY",
    "PROFILE_KEY",
    "KeyValueStore",
    "NamespacedKeyValueStore",
    "InMemoryKeyValueStore",
    "AsyncSQLAlchemyKeyValueStore",
    "AsyncSQLAlchemyStorage",
    "ProfileStore",
]
