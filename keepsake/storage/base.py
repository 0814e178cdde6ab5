"""Storage abstractions used by the Keepsake services."""

from __future__ import annotations

from typing import Protocol

PROFILE_KEY = "app_profile_v1"
LETTER_LOCK_KEY = "open_when_lock_info_v1"
OPENED_LETTERS_KEY = "open_when_opened_v1"


class KeyValueStore(Protocol):
    """String key-value storage; values are JSON documents."""

    async def get(self, key: str) -> str | None:
        ...

    async def set(self, key: str, value: str) -> None:
        ...

    async def delete(self, key: str) -> None:
        ...


class NamespacedKeyValueStore(KeyValueStore):
    """Prefix every key so several players can share one backend."""

    def __init__(self, inner: KeyValueStore, namespace: str) -> None:
        self._inner = inner
        self._prefix = f"{namespace}:"

    @property
    def prefix(self) -> str:
        return self._prefix

    async def get(self, key: str) -> str | None:
        return await self._inner.get(self._prefix + key)

    async def set(self, key: str, value: str) -> None:
        await self._inner.set(self._prefix + key, value)

    async def delete(self, key: str) -> None:
        await self._inner.delete(self._prefix + key)
