"""Letters to open when..., with a short lock after each opening.

Opening any letter locks every other letter for ``lock_minutes``; the letter
that was just opened stays readable until the lock runs out.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from random import Random
from typing import Iterable, Literal

from ..config import LetterConfig
from ..storage.base import LETTER_LOCK_KEY, OPENED_LETTERS_KEY, KeyValueStore
from .events import LETTER_OPENED, EventBus
from .exceptions import ContentLocked, KeepsakeError, UnknownLetter
from .profile import ensure_utc, from_epoch_ms, to_epoch_ms
from .results import ActionResult

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class LetterVariant:
    kind: Literal["text", "image"]
    content: str
    caption: str | None = None


@dataclass(slots=True, frozen=True)
class Letter:
    letter_id: str
    title: str
    hint: str
    variants: tuple[LetterVariant, ...]


@dataclass(slots=True, frozen=True)
class LetterLock:
    until: datetime
    allowed_id: str | None = None


@dataclass(slots=True)
class LetterOpenResult(ActionResult):
    letter: Letter | None = None
    variant: LetterVariant | None = None
    locked_until: datetime | None = None


def parse_lock(raw: str | None) -> LetterLock | None:
    """Decode lock metadata; a bare number is an expiry with no allowed letter."""
    if not raw:
        return None
    text = raw.strip()
    if text.isdigit():
        until = from_epoch_ms(int(text))
        return LetterLock(until=until) if until else None
    try:
        data = json.loads(text)
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    until_raw = data.get("until")
    if isinstance(until_raw, bool) or not isinstance(until_raw, (int, float)):
        return None
    until = from_epoch_ms(until_raw)
    if until is None:
        return None
    allowed = data.get("allowedId")
    return LetterLock(until=until, allowed_id=allowed if isinstance(allowed, str) and allowed else None)


class LetterService:
    def __init__(
        self,
        storage: KeyValueStore,
        letters: Iterable[Letter],
        config: LetterConfig,
        event_bus: EventBus,
        *,
        rng: Random | None = None,
    ) -> None:
        self._storage = storage
        self._letters = {letter.letter_id: letter for letter in letters}
        self._config = config
        self._event_bus = event_bus
        self._rng = rng or Random()
        self._last_variant: dict[str, int] = {}
        self._lock = asyncio.Lock()

    def letters(self) -> list[Letter]:
        return list(self._letters.values())

    def get(self, letter_id: str) -> Letter:
        try:
            return self._letters[letter_id]
        except KeyError as exc:
            raise KeyError(f"Letter {letter_id} not found") from exc

    async def read_lock(self, now: datetime | None = None) -> LetterLock | None:
        """Return the active lock, deleting it once it has expired."""
        try:
            lock = parse_lock(await self._storage.get(LETTER_LOCK_KEY))
        except Exception:
            logger.warning("Letter lock read failed.", exc_info=True)
            return None
        if lock is None:
            return None
        if ensure_utc(now or datetime.now(timezone.utc)) >= lock.until:
            await self._delete(LETTER_LOCK_KEY)
            return None
        return lock

    async def is_locked(self, letter_id: str, now: datetime | None = None) -> bool:
        lock = await self.read_lock(now)
        if lock is None:
            return False
        return lock.allowed_id != letter_id if lock.allowed_id else True

    async def remaining(self, now: datetime | None = None) -> timedelta:
        moment = ensure_utc(now or datetime.now(timezone.utc))
        lock = await self.read_lock(moment)
        if lock is None:
            return timedelta(0)
        return max(lock.until - moment, timedelta(0))

    async def opened(self) -> list[str]:
        try:
            raw = await self._storage.get(OPENED_LETTERS_KEY)
        except Exception:
            logger.warning("Opened letters read failed.", exc_info=True)
            return []
        try:
            data = json.loads(raw) if raw else []
        except ValueError:
            return []
        return [str(item) for item in data] if isinstance(data, list) else []

    async def open(self, letter_id: str, now: datetime | None = None) -> LetterOpenResult:
        moment = ensure_utc(now or datetime.now(timezone.utc))
        async with self._lock:
            try:
                letter = self._letters.get(letter_id)
                if letter is None:
                    raise UnknownLetter(f"Letter {letter_id} not found")
                if await self.is_locked(letter_id, moment):
                    raise ContentLocked("Letters are locked; only the last opened one is readable")
            except KeepsakeError as exc:
                return LetterOpenResult.failure(exc)

            variant = letter.variants[self._pick_variant(letter)]
            until = moment + timedelta(minutes=self._config.lock_minutes)
            await self._write(
                LETTER_LOCK_KEY,
                json.dumps({"until": to_epoch_ms(until), "allowedId": letter_id}),
            )
            opened = await self.opened()
            if letter_id not in opened:
                opened.append(letter_id)
                await self._write(OPENED_LETTERS_KEY, json.dumps(opened))

        await self._event_bus.publish(LETTER_OPENED, {"letter_id": letter_id})
        return LetterOpenResult(
            ok=True,
            message=variant.content,
            letter=letter,
            variant=variant,
            locked_until=until,
        )

    def _pick_variant(self, letter: Letter) -> int:
        count = len(letter.variants)
        if count <= 1:
            index = 0
        else:
            index = self._rng.randrange(count)
            if index == self._last_variant.get(letter.letter_id):
                index = (index + 1) % count
        self._last_variant[letter.letter_id] = index
        return index

    async def _write(self, key: str, value: str) -> None:
        try:
            await self._storage.set(key, value)
        except Exception:
            logger.warning("Write to '%s' failed; letter state not persisted.", key, exc_info=True)

    async def _delete(self, key: str) -> None:
        try:
            await self._storage.delete(key)
        except Exception:
            logger.warning("Delete of '%s' failed.", key, exc_info=True)
