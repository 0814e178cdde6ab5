"""Persisted player profile record."""

from __future__ import annotations

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from ..config import ProgressionConfig
from ..domain.exceptions import InvalidName, ProfileExists, ProfileMissing
from ..domain.profile import DEFAULT_AVATAR, MAX_NAME_LENGTH, PlayerProfile, normalize_profile
from ..domain.progression import exp_to_next
from .base import PROFILE_KEY, KeyValueStore

logger = logging.getLogger(__name__)


class ProfileStore:
    """Read, normalize and write the single profile record kept under ``key``.

    Writes are best effort: when the backend rejects a write the payload is
    kept in memory, so the rest of the session still sees the change even
    though it will not survive a restart.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        progression: ProgressionConfig,
        *,
        key: str = PROFILE_KEY,
    ) -> None:
        self._storage = storage
        self._progression = progression
        self._key = key
        self._lock = asyncio.Lock()
        self._unsaved: str | None = None

    @property
    def has_unsaved_changes(self) -> bool:
        return self._unsaved is not None

    async def read(self) -> PlayerProfile | None:
        raw = self._unsaved
        if raw is None:
            try:
                raw = await self._storage.get(self._key)
            except Exception:
                logger.warning("Profile read from '%s' failed.", self._key, exc_info=True)
                return None
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Profile under '%s' is not valid JSON; ignoring it.", self._key)
            return None
        if not isinstance(data, dict):
            return None
        return normalize_profile(data, self._progression)

    async def save(self, profile: PlayerProfile) -> None:
        payload = json.dumps(profile.to_dict(), ensure_ascii=False)
        try:
            await self._storage.set(self._key, payload)
        except Exception:
            logger.warning(
                "Profile write to '%s' failed; keeping it for this session only.",
                self._key,
                exc_info=True,
            )
            self._unsaved = payload
            return
        self._unsaved = None

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[PlayerProfile]:
        """Yield a fresh profile and save it unless the block raises.

        The lock keeps read-modify-write cycles of concurrent callers from
        interleaving.
        """
        async with self._lock:
            profile = await self.read()
            if profile is None:
                raise ProfileMissing("No profile yet; onboarding has not run")
            yield profile
            await self.save(profile)

    async def create(self, name: str, avatar: str | None = None) -> PlayerProfile:
        trimmed = (name or "").strip()
        if not trimmed:
            raise InvalidName("Nickname must not be blank")
        if len(trimmed) > MAX_NAME_LENGTH:
            raise InvalidName(f"Nickname must be at most {MAX_NAME_LENGTH} characters")
        async with self._lock:
            if await self.read() is not None:
                raise ProfileExists("A profile already exists")
            profile = PlayerProfile(
                name=trimmed,
                avatar=avatar or DEFAULT_AVATAR,
                exp_to_next=exp_to_next(1, self._progression),
            )
            await self.save(profile)
        logger.info("Created profile '%s'.", trimmed)
        return profile
