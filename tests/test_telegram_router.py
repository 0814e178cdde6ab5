from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from aiogram.filters import CommandObject
from aiogram.types import CallbackQuery, Message

from keepsake.domain.profile import AVATARS
from keepsake.domain.results import ActionResult
from keepsake.telegram import (
    CallbackPrefix,
    PlayerFilter,
    arcade_keyboard,
    avatar_keyboard,
    build_router,
    describe_failure,
    letters_keyboard,
    menu_keyboard,
    player_namespace,
    shop_keyboard,
    wheel_keyboard,
)


def _callback_data(markup) -> list[str]:
    return [button.callback_data for row in markup.inline_keyboard for button in row]


def _handlers(observer) -> dict:
    return {handler.callback.__name__: handler.callback for handler in observer.handlers}


def _last_text(message: AsyncMock) -> str:
    return message.answer.await_args.args[0]


def test_describe_failure_prefers_friendly_text():
    assert describe_failure(ActionResult(ok=False, reason="busy")) == "The wheel is already spinning."
    assert describe_failure(ActionResult(ok=False, reason="weird", message="Boom")) == "Boom"
    assert describe_failure(ActionResult(ok=False)) == "Something went wrong."


@pytest.mark.asyncio()
async def test_player_filter_injects_namespaced_context(app):
    player_filter = PlayerFilter(app)

    result = await player_filter(SimpleNamespace(from_user=SimpleNamespace(id=5)))

    assert result == {"player": app.player("user:5")}
    assert result["player"].namespace == player_namespace(5) == "user:5"
    assert await player_filter(SimpleNamespace(from_user=None)) is False


@pytest.mark.asyncio()
async def test_callback_prefix_extracts_argument():
    buy = CallbackPrefix("buy")
    assert await buy(SimpleNamespace(data="keepsake:buy:wp_hellblade")) == {"arg": "wp_hellblade"}
    assert await buy(SimpleNamespace(data="keepsake:buy")) == {"arg": None}
    assert await buy(SimpleNamespace(data="keepsake:buying")) is False
    assert await buy(SimpleNamespace(data=None)) is False


def test_keyboards_use_prefixed_callbacks(app):
    assert _callback_data(menu_keyboard()) == [
        "keepsake:profile",
        "keepsake:inventory",
        "keepsake:shop",
        "keepsake:wheel",
        "keepsake:arcade",
        "keepsake:letters",
    ]
    avatars = avatar_keyboard(AVATARS)
    assert len(avatars.inline_keyboard) == 3
    assert _callback_data(avatars)[-1] == f"keepsake:avatar:{len(AVATARS) - 1}"

    categories = _callback_data(shop_keyboard(app.catalog))
    assert categories[0] == "keepsake:shop:0"
    assert len(categories) == len(app.catalog.categories())
    weapons = _callback_data(shop_keyboard(app.catalog, "Weapon"))
    assert len(weapons) == 6
    assert weapons[0] == "keepsake:buy:wp_kitchen_knife"
    assert _callback_data(shop_keyboard(app.catalog, "Nope")) == []

    games = app.player().arcade.games()[:2]
    assert _callback_data(arcade_keyboard(games)) == ["keepsake:played:reaction", "keepsake:played:aim"]

    assert _callback_data(wheel_keyboard(app.config.wheel)) == ["keepsake:spin", "keepsake:resetwheel"]

    letters = letters_keyboard(app.letters, ["sad"])
    assert letters.inline_keyboard[0][0].text == "🔒 Open when you're sad"
    assert letters.inline_keyboard[1][0].text == "💌 Open when you miss me"
    assert _callback_data(letters)[0] == "keepsake:open:sad"


def test_router_registers_every_command(app):
    router = build_router(app)
    messages = _handlers(router.message)
    callbacks = _handlers(router.callback_query)

    assert len(messages) == 14
    assert len(callbacks) == 12
    assert {"handle_start", "handle_register", "handle_spin", "handle_open"} <= set(messages)
    assert {"handle_avatar", "handle_buy_callback", "handle_open_callback", "handle_played_callback"} <= set(callbacks)


@pytest.mark.asyncio()
async def test_onboarding_flow(app):
    handlers = _handlers(build_router(app).message)
    player = app.player("user:1")
    message = AsyncMock()

    await handlers["handle_start"](message, player=player)
    assert _last_text(message) == "Welcome! Choose a name to begin: /register <name>"

    await handlers["handle_register"](message, command=CommandObject(command="register", args="  "), player=player)
    assert _last_text(message) == "Pick a name between 1 and 24 characters."

    await handlers["handle_register"](message, command=CommandObject(command="register", args="Ana"), player=player)
    assert _last_text(message) == "Nice to meet you, Ana! Pick an avatar:"

    await handlers["handle_register"](message, command=CommandObject(command="register", args="Bo"), player=player)
    assert _last_text(message) == "You already have a profile. Use /profile to see it."

    await handlers["handle_start"](message, player=player)
    assert _last_text(message) == "Welcome back, 🙂 Ana!"


@pytest.mark.asyncio()
async def test_avatar_callback_updates_profile(app, register):
    player = await register(app, namespace="user:1")
    handlers = _handlers(build_router(app).callback_query)
    callback = AsyncMock(spec=CallbackQuery)
    callback.answer = AsyncMock()
    callback.message = AsyncMock(spec=Message)
    callback.message.answer = AsyncMock()

    await handlers["handle_avatar"](callback, arg="2", player=player)

    assert (await player.profiles.read()).avatar == AVATARS[2]
    callback.answer.assert_awaited()
    assert callback.message.answer.await_args.args[0] == f"Avatar set to {AVATARS[2]}"


@pytest.mark.asyncio()
async def test_shop_commands(app, register):
    player = await register(app, shards=250, namespace="user:1")
    handlers = _handlers(build_router(app).message)
    message = AsyncMock()

    await handlers["handle_buy"](message, command=CommandObject(command="buy"), player=player)
    assert _last_text(message).startswith("Usage: /buy")

    await handlers["handle_buy"](message, command=CommandObject(command="buy", args="head_headband"), player=player)
    assert _last_text(message) == "Not enough Memory Shards."

    await handlers["handle_buy"](message, command=CommandObject(command="buy", args="itm_mystery"), player=player)
    assert _last_text(message) == "There is no such item in the shop."

    await player.profiles.add_shards(100)
    await handlers["handle_buy"](message, command=CommandObject(command="buy", args="head_headband"), player=player)
    assert _last_text(message) == "Purchased Headband for 300 MS."

    await handlers["handle_equip"](message, command=CommandObject(command="equip", args="head head_headband"), player=player)
    assert _last_text(message) == "Equipped head_headband as Head."

    await handlers["handle_equip"](message, command=CommandObject(command="equip"), player=player)
    assert "Head (head): head_headband x1" in _last_text(message)

    await handlers["handle_unequip"](message, command=CommandObject(command="unequip", args="hat"), player=player)
    assert _last_text(message).startswith("Usage: /unequip")

    await handlers["handle_unequip"](message, command=CommandObject(command="unequip", args="head"), player=player)
    assert _last_text(message) == "Head slot cleared."


@pytest.mark.asyncio()
async def test_wheel_commands(app, register):
    player = await register(app, shards=800, namespace="user:1")
    handlers = _handlers(build_router(app).message)
    message = AsyncMock()

    await handlers["handle_wheel"](message, player=player)
    assert _last_text(message).startswith("🎡 Ready to spin!")

    await handlers["handle_spin"](message, player=player)
    assert _last_text(message).startswith("🎯 ")

    await handlers["handle_spin"](message, player=player)
    assert _last_text(message).startswith("Cooldown: ~")

    await handlers["handle_reset"](message, player=player)
    profile = await player.profiles.read()
    if profile.shards >= 2000:
        assert _last_text(message).startswith("Cooldown reset.")
    else:
        assert _last_text(message) == "Not enough Memory Shards."


@pytest.mark.asyncio()
async def test_letter_commands(app):
    handlers = _handlers(build_router(app).message)
    player = app.player("user:1")
    message = AsyncMock()

    await handlers["handle_open"](message, command=CommandObject(command="open", args="nope"), player=player)
    assert _last_text(message) == "There is no such letter. Use /letters to see them all."

    await handlers["handle_open"](message, command=CommandObject(command="open", args="sad"), player=player)
    assert _last_text(message).startswith("💌 Open when you're sad\n\n")

    await handlers["handle_open"](message, command=CommandObject(command="open", args="happy"), player=player)
    assert _last_text(message).startswith("🔒 Locked ")

    await handlers["handle_letters"](message, player=player)
    listing = _last_text(message)
    assert "(happy)" in listing
    assert listing.count("[Locked ") == 3


@pytest.mark.asyncio()
async def test_arcade_completion_buttons(app, register):
    player = await register(app, namespace="user:1")
    router = build_router(app)
    messages = _handlers(router.message)
    callbacks = _handlers(router.callback_query)
    message = AsyncMock()

    await messages["handle_arcade"](message, player=player)
    markup = message.answer.await_args.kwargs["reply_markup"]
    assert _callback_data(markup) == ["keepsake:played:reaction"]

    callback = AsyncMock(spec=CallbackQuery)
    callback.answer = AsyncMock()
    callback.message = AsyncMock(spec=Message)
    callback.message.answer = AsyncMock()

    await callbacks["handle_played_callback"](callback, arg="reaction", player=player)
    assert _last_text(callback.message).startswith("🏆 Reaction Time cleared for the first time!\n+100 MS, +50 EXP\n")

    await callbacks["handle_played_callback"](callback, arg="reaction", player=player)
    assert _last_text(callback.message).startswith("🔁 Reaction Time cleared again.\n+25 MS, +10 EXP\n")

    await callbacks["handle_played_callback"](callback, arg="aim", player=player)
    callback.answer.assert_awaited_with(show_alert=True, text="That is still locked.")

    await callbacks["handle_played_callback"](callback, arg="tetris", player=player)
    callback.answer.assert_awaited_with(show_alert=True, text="There is no such game.")
    assert callback.message.answer.await_count == 2

    profile = await player.profiles.read()
    assert profile.shards == 125
    assert profile.arcade_completions == {"reaction"}
