"""Top level application object for Keepsake."""

from __future__ import annotations

from dataclasses import dataclass
from random import Random
from typing import Any, Iterable, Sequence

from .config import KeepsakeConfig
from .domain.arcade import ArcadeGame, ArcadeService
from .domain.events import EventBus
from .domain.inventory import InventoryService
from .domain.items import ItemCatalog
from .domain.letters import Letter, LetterService
from .domain.player import ProfileService
from .domain.wheel import WheelSegment, WheelService
from .loaders.json_loader import load_arcade, load_catalog, load_letters, load_wheel
from .storage.base import KeyValueStore, NamespacedKeyValueStore
from .storage.memory import InMemoryKeyValueStore
from .storage.profiles import ProfileStore
from .storage.sqlalchemy import AsyncSQLAlchemyStorage


@dataclass(slots=True)
class PlayerContext:
    """Services bound to one profile's storage namespace."""

    namespace: str | None
    storage: KeyValueStore
    store: ProfileStore
    profiles: ProfileService
    inventory: InventoryService
    wheel: WheelService
    arcade: ArcadeService
    letters: LetterService


class KeepsakeApp:
    """Central dependency container used by the bot, the CLI and tests."""

    def __init__(
        self,
        config: KeepsakeConfig,
        *,
        storage: KeyValueStore | None = None,
        catalog: ItemCatalog | None = None,
        segments: Sequence[WheelSegment] | None = None,
        games: Iterable[ArcadeGame] | None = None,
        letters: Iterable[Letter] | None = None,
        event_bus: EventBus | None = None,
        rng: Random | None = None,
    ) -> None:
        self.config = config
        self.event_bus = event_bus or EventBus()
        self.catalog = catalog if catalog is not None else load_catalog(config.catalog_path)
        self.segments = tuple(segments) if segments is not None else tuple(
            load_wheel(config.wheel.segments_path)
        )
        self.games = list(games) if games is not None else load_arcade(config.arcade_path)
        self.letters = (
            list(letters) if letters is not None else load_letters(config.letters.letters_path)
        )

        self._rng = rng or (Random(config.rng_seed) if config.rng_seed is not None else Random())
        self._sqlalchemy_storage: AsyncSQLAlchemyStorage | None = None
        self.storage = storage or self._wire_storage()
        self._players: dict[str | None, PlayerContext] = {}

    def _wire_storage(self) -> KeyValueStore:
        backend = self.config.storage.backend
        if backend == "memory":
            return InMemoryKeyValueStore()
        if backend == "sqlalchemy":
            dsn = self.config.storage.resolve_dsn()
            if not dsn:
                raise ValueError("SQLAlchemy backend requires a DSN")
            storage = AsyncSQLAlchemyStorage(dsn, echo=self.config.storage.echo_sql)
            self._sqlalchemy_storage = storage
            return storage.key_value_store()
        raise ValueError(f"Unsupported storage backend {backend}")

    def player(self, namespace: str | None = None) -> PlayerContext:
        """Return the services for one profile, creating them on first use.

        ``None`` addresses the un-prefixed keys, which is the single-profile
        layout. Each namespace gets its own store lock and wheel busy flag.
        """
        context = self._players.get(namespace)
        if context is not None:
            return context

        storage = (
            self.storage
            if namespace is None
            else NamespacedKeyValueStore(self.storage, namespace)
        )
        progression = self.config.progression
        store = ProfileStore(storage, progression)
        context = PlayerContext(
            namespace=namespace,
            storage=storage,
            store=store,
            profiles=ProfileService(store, progression, self.event_bus),
            inventory=InventoryService(
                store, self.catalog, self.config.equipment, self.event_bus
            ),
            wheel=WheelService(
                store,
                self.segments,
                self.config.wheel,
                progression,
                self.event_bus,
                rng=self._rng,
            ),
            arcade=ArcadeService(store, self.games, progression, self.event_bus),
            letters=LetterService(
                storage, self.letters, self.config.letters, self.event_bus, rng=self._rng
            ),
        )
        self._players[namespace] = context
        return context

    def snapshot(self) -> dict[str, Any]:
        """Export current configuration for debugging."""
        return {
            "storage": self.config.storage.backend,
            "items": [item.item_id for item in self.catalog.iter_items()],
            "wheel": [segment.segment_id for segment in self.segments],
            "arcade": [game.game_id for game in self.games],
            "letters": [letter.letter_id for letter in self.letters],
            "players": len(self._players),
        }

    async def init_backend(self) -> None:
        """Initialize storage backend resources (e.g., database tables)."""
        if self._sqlalchemy_storage:
            await self._sqlalchemy_storage.init_models()

    async def close(self) -> None:
        if self._sqlalchemy_storage:
            await self._sqlalchemy_storage.dispose()
