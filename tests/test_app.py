import pytest

from keepsake.app import KeepsakeApp
from keepsake.config import KeepsakeConfig, StorageConfig
from keepsake.storage.base import PROFILE_KEY, NamespacedKeyValueStore
from keepsake.storage.memory import InMemoryKeyValueStore


def test_default_app_loads_bundled_definitions(memory_app):
    assert len(memory_app.catalog) == 31
    assert len(memory_app.segments) == 10
    assert [game.game_id for game in memory_app.games] == [
        "reaction",
        "aim",
        "memory",
        "rocks",
        "flappy",
        "rhythm",
    ]
    assert [letter.letter_id for letter in memory_app.letters] == ["sad", "miss", "happy", "rainy"]


def test_player_contexts_are_cached(app):
    assert app.player() is app.player()
    assert app.player("user:1") is app.player("user:1")
    assert app.player("user:1") is not app.player("user:2")
    assert app.player().storage is app.storage
    assert isinstance(app.player("user:1").storage, NamespacedKeyValueStore)


@pytest.mark.asyncio()
async def test_players_are_isolated(app, register):
    first = await register(app, shards=100, namespace="user:1")
    second = app.player("user:2")

    assert await second.profiles.read() is None
    assert (await first.profiles.read()).shards == 100
    assert set(app.storage.keys()) == {f"user:1:{PROFILE_KEY}"}


@pytest.mark.asyncio()
async def test_shared_storage_is_used_when_given():
    storage = InMemoryKeyValueStore()
    app = KeepsakeApp(KeepsakeConfig(), storage=storage)
    await app.player().profiles.create("Ana")
    assert PROFILE_KEY in storage.dump()


@pytest.mark.asyncio()
async def test_snapshot_reports_definitions(app, register):
    await register(app)
    snapshot = app.snapshot()
    assert snapshot["storage"] == "memory"
    assert "head_headband" in snapshot["items"]
    assert snapshot["wheel"][0] == "ms_1500"
    assert snapshot["arcade"][0] == "reaction"
    assert snapshot["letters"] == ["sad", "miss", "happy", "rainy"]
    assert snapshot["players"] == 1


def test_unsupported_backend_is_rejected():
    with pytest.raises(ValueError, match="Unsupported storage backend"):
        KeepsakeApp(KeepsakeConfig(storage=StorageConfig(backend="redis")))


@pytest.mark.asyncio()
async def test_memory_backend_lifecycle_is_noop(app):
    await app.init_backend()
    await app.close()
