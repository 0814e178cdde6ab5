from datetime import datetime, timezone

import pytest

from keepsake.app import KeepsakeApp, PlayerContext
from keepsake.testing.fixtures import app_fixture, memory_app  # noqa: F401


@pytest.fixture()
def app() -> KeepsakeApp:
    return app_fixture()


@pytest.fixture()
def t0() -> datetime:
    return datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def register():
    """Onboard a profile and optionally fund it."""

    async def _register(
        app: KeepsakeApp, *, shards: int = 0, namespace: str | None = None
    ) -> PlayerContext:
        player = app.player(namespace)
        result = await player.profiles.create("Tester")
        assert result.ok
        if shards:
            await player.profiles.add_shards(shards)
        return player

    return _register


class EventRecorder:
    def __init__(self) -> None:
        self.events: list[tuple[str, dict]] = []

    def listen(self, bus, *names: str) -> "EventRecorder":
        for name in names:

            async def listener(payload, _name=name) -> None:
                self.events.append((_name, dict(payload)))

            bus.subscribe(name, listener)
        return self

    def names(self) -> list[str]:
        return [name for name, _ in self.events]


@pytest.fixture()
def recorder() -> EventRecorder:
    return EventRecorder()
