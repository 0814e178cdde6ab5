"""Arcade games gated by keys, with first-completion rewards."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable

from ..config import ProgressionConfig
from .events import ARCADE_COMPLETED, EventBus
from .exceptions import ContentLocked, InvalidAmount, KeepsakeError, UnknownGame
from .profile import PlayerProfile
from .results import ActionResult
from .rewards import ProgressReward

if TYPE_CHECKING:
    from ..storage.profiles import ProfileStore

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ArcadeGame:
    game_id: str
    title: str
    subtitle: str = ""
    required_keys: int = 0
    first_reward: ProgressReward = field(default_factory=ProgressReward)
    repeat_reward: ProgressReward = field(default_factory=ProgressReward)


@dataclass(slots=True)
class CompletionResult(ActionResult):
    game: ArcadeGame | None = None
    first_time: bool = False


def is_locked(game: ArcadeGame, profile: PlayerProfile) -> bool:
    return profile.arcade_keys < game.required_keys


class ArcadeService:
    """Registry of arcade games plus the key counter that unlocks them in order."""

    def __init__(
        self,
        store: "ProfileStore",
        games: Iterable[ArcadeGame],
        progression: ProgressionConfig,
        event_bus: EventBus,
    ) -> None:
        self._store = store
        self._progression = progression
        self._event_bus = event_bus
        self._games: dict[str, ArcadeGame] = {}
        for game in games:
            if game.game_id in self._games:
                raise ValueError(f"Arcade game {game.game_id} already registered")
            self._games[game.game_id] = game

    def games(self) -> list[ArcadeGame]:
        return sorted(self._games.values(), key=lambda game: game.required_keys)

    def get(self, game_id: str) -> ArcadeGame:
        try:
            return self._games[game_id]
        except KeyError as exc:
            raise KeyError(f"Arcade game {game_id} not found") from exc

    def unlocked(self, profile: PlayerProfile) -> list[ArcadeGame]:
        return [game for game in self.games() if not is_locked(game, profile)]

    async def grant_keys(self, amount: int = 1) -> ActionResult:
        try:
            if amount <= 0:
                raise InvalidAmount("Keys can only be added")
            async with self._store.transaction() as profile:
                profile.arcade_keys += amount
        except KeepsakeError as exc:
            return ActionResult.failure(exc, await self._store.read())
        return ActionResult.success(profile)

    async def record_completion(self, game_id: str) -> CompletionResult:
        game = self._games.get(game_id)
        try:
            if game is None:
                raise UnknownGame(f"Arcade game {game_id} not found")
            async with self._store.transaction() as profile:
                if is_locked(game, profile):
                    raise ContentLocked(
                        f"{game.title} needs {game.required_keys} keys, have {profile.arcade_keys}"
                    )
                first_time = game.game_id not in profile.arcade_completions
                reward = game.first_reward if first_time else game.repeat_reward
                reward.apply(profile, self._progression)
                profile.arcade_completions.add(game.game_id)
        except KeepsakeError as exc:
            return CompletionResult.failure(exc, await self._store.read())

        logger.info("Completed %s (first time: %s).", game.game_id, first_time)
        await self._event_bus.publish(
            ARCADE_COMPLETED, {"game_id": game.game_id, "first_time": first_time}
        )
        return CompletionResult(
            ok=True,
            profile=profile,
            message=reward.describe(),
            game=game,
            first_time=first_time,
        )
