import pytest

from keepsake.domain.arcade import ArcadeGame, ArcadeService, is_locked
from keepsake.domain.events import ARCADE_COMPLETED
from keepsake.domain.profile import PlayerProfile


def test_games_are_ordered_by_required_keys(app):
    games = app.player().arcade.games()
    assert [game.game_id for game in games] == ["reaction", "aim", "memory", "rocks", "flappy", "rhythm"]
    assert [game.required_keys for game in games] == [0, 1, 2, 3, 4, 5]


def test_lock_predicate():
    game = ArcadeGame(game_id="memory", title="Memory Match", required_keys=2)
    assert is_locked(game, PlayerProfile(name="a", arcade_keys=1))
    assert not is_locked(game, PlayerProfile(name="a", arcade_keys=2))
    assert not is_locked(game, PlayerProfile(name="a", arcade_keys=7))


def test_unlocked_lists_reachable_games(app):
    profile = PlayerProfile(name="a", arcade_keys=2)
    assert [game.game_id for game in app.player().arcade.unlocked(profile)] == ["reaction", "aim", "memory"]


def test_duplicate_game_ids_are_rejected(app):
    game = ArcadeGame(game_id="aim", title="Aim")
    with pytest.raises(ValueError):
        ArcadeService(app.player().store, [game, game], app.config.progression, app.event_bus)


@pytest.mark.asyncio()
async def test_keys_only_grow(app, register):
    player = await register(app)
    assert (await player.arcade.grant_keys(2)).profile.arcade_keys == 2
    assert (await player.arcade.grant_keys(0)).reason == "invalid_amount"
    assert (await player.arcade.grant_keys(-1)).profile.arcade_keys == 2


@pytest.mark.asyncio()
async def test_locked_game_cannot_be_completed(app, register):
    player = await register(app)
    result = await player.arcade.record_completion("aim")
    assert not result.ok
    assert result.reason == "locked"
    assert result.profile.arcade_completions == set()


@pytest.mark.asyncio()
async def test_first_and_repeat_rewards(app, register, recorder):
    player = await register(app)
    await player.arcade.grant_keys(1)
    recorder.listen(app.event_bus, ARCADE_COMPLETED)

    first = await player.arcade.record_completion("aim")
    assert first.ok and first.first_time
    assert first.game.title == "Aim Trainer"
    assert (first.profile.shards, first.profile.exp) == (100, 50)
    assert first.message == "+100 MS, +50 EXP"

    repeat = await player.arcade.record_completion("aim")
    assert repeat.ok and not repeat.first_time
    assert (repeat.profile.shards, repeat.profile.exp) == (125, 60)
    assert repeat.profile.arcade_completions == {"aim"}
    assert recorder.events == [
        (ARCADE_COMPLETED, {"game_id": "aim", "first_time": True}),
        (ARCADE_COMPLETED, {"game_id": "aim", "first_time": False}),
    ]


@pytest.mark.asyncio()
async def test_unknown_game(app, register):
    player = await register(app)
    assert (await player.arcade.record_completion("pong")).reason == "unknown_game"
