"""Player-centric operations: onboarding, shards and experience."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..config import ProgressionConfig
from .events import EXP_CHANGED, LEVEL_UP, SHARDS_CHANGED, EventBus
from .exceptions import KeepsakeError, ProfileMissing
from .profile import MAX_NAME_LENGTH, PlayerProfile
from .progression import apply_experience, credit_shards, debit_shards
from .results import ActionResult

if TYPE_CHECKING:
    from ..storage.profiles import ProfileStore

logger = logging.getLogger(__name__)


class ProfileService:
    """Expose read/write operations for the player profile."""

    def __init__(
        self,
        store: "ProfileStore",
        progression: ProgressionConfig,
        event_bus: EventBus,
    ) -> None:
        self._store = store
        self._progression = progression
        self._event_bus = event_bus

    async def read(self) -> PlayerProfile | None:
        return await self._store.read()

    async def save(self, profile: PlayerProfile) -> None:
        await self._store.save(profile)

    async def create(self, name: str, avatar: str | None = None) -> ActionResult:
        try:
            profile = await self._store.create(name, avatar)
        except KeepsakeError as exc:
            return ActionResult.failure(exc, await self._store.read())
        return ActionResult.success(profile)

    async def update_identity(
        self, *, name: str | None = None, avatar: str | None = None
    ) -> ActionResult:
        try:
            async with self._store.transaction() as profile:
                if name is not None and name.strip():
                    profile.name = name.strip()[:MAX_NAME_LENGTH]
                if avatar:
                    profile.avatar = avatar
        except KeepsakeError as exc:
            return ActionResult.failure(exc)
        return ActionResult.success(profile)

    async def add_shards(self, amount: int) -> ActionResult:
        if amount <= 0:
            logger.debug("Ignoring non-positive shard grant %s.", amount)
            return await self._unchanged()
        try:
            async with self._store.transaction() as profile:
                credit_shards(profile, amount)
        except KeepsakeError as exc:
            return ActionResult.failure(exc)
        await self._event_bus.publish(SHARDS_CHANGED, {"shards": profile.shards, "delta": amount})
        return ActionResult.success(profile)

    async def add_exp(self, amount: int) -> ActionResult:
        if amount <= 0:
            return await self._unchanged()
        try:
            async with self._store.transaction() as profile:
                gained = apply_experience(profile, amount, self._progression)
        except KeepsakeError as exc:
            return ActionResult.failure(exc)

        await self._event_bus.publish(
            EXP_CHANGED,
            {"level": profile.level, "exp": profile.exp, "exp_to_next": profile.exp_to_next},
        )
        if gained:
            logger.info("Profile reached level %s.", profile.level)
            await self._event_bus.publish(LEVEL_UP, {"level": profile.level, "gained": gained})
        return ActionResult.success(profile)

    async def spend_shards(self, cost: int) -> ActionResult:
        try:
            async with self._store.transaction() as profile:
                debit_shards(profile, cost)
        except KeepsakeError as exc:
            return ActionResult.failure(exc, await self._store.read())
        await self._event_bus.publish(SHARDS_CHANGED, {"shards": profile.shards, "delta": -cost})
        return ActionResult.success(profile)

    async def _unchanged(self) -> ActionResult:
        profile = await self._store.read()
        if profile is None:
            return ActionResult.failure(ProfileMissing("No profile yet; onboarding has not run"))
        return ActionResult.success(profile)
