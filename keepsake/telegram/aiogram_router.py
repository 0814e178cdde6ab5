"""Factory helpers to wire Keepsake services into aiogram."""

from __future__ import annotations

from aiogram import F, Router
from aiogram.filters import Command, CommandObject
from aiogram.types import CallbackQuery, Message

from ..app import KeepsakeApp, PlayerContext
from ..domain.items import SLOT_LABELS, EquipmentSlot
from ..domain.profile import AVATARS, MAX_NAME_LENGTH
from ..domain.results import ActionResult
from ..formatting import (
    format_arcade,
    format_countdown,
    format_inventory,
    format_letter,
    format_letters,
    format_profile,
    format_profile_line,
    format_shards,
    format_shop,
    format_wheel_header,
)
from .api_utils import acknowledge, reply, warn
from .filters import CallbackPrefix, PlayerFilter
from .keyboards import (
    arcade_keyboard,
    avatar_keyboard,
    letters_keyboard,
    menu_keyboard,
    shop_keyboard,
    wheel_keyboard,
)

REASON_MESSAGES = {
    "insufficient_funds": "Not enough Memory Shards.",
    "not_owned": "You don't own that item.",
    "slot_mismatch": "That item doesn't fit this slot.",
    "unknown_item": "There is no such item in the shop.",
    "busy": "The wheel is already spinning.",
    "no_profile": "Create your profile first: /register <name>",
    "profile_exists": "You already have a profile. Use /profile to see it.",
    "invalid_name": f"Pick a name between 1 and {MAX_NAME_LENGTH} characters.",
    "locked": "That is still locked.",
    "unknown_letter": "There is no such letter. Use /letters to see them all.",
    "unknown_game": "There is no such game.",
}


def describe_failure(result: ActionResult) -> str:
    return REASON_MESSAGES.get(result.reason or "", result.message or "Something went wrong.")


def build_router(app: KeepsakeApp) -> Router:
    router = Router()
    with_player = PlayerFilter(app)

    async def send_profile(event: Message | CallbackQuery, player: PlayerContext) -> None:
        profile = await player.profiles.read()
        if profile is None:
            await warn(event, REASON_MESSAGES["no_profile"])
            return
        await reply(
            event,
            format_profile(profile, app.catalog, app.config.progression),
            reply_markup=menu_keyboard(),
        )

    async def send_inventory(event: Message | CallbackQuery, player: PlayerContext) -> None:
        profile = await player.profiles.read()
        if profile is None:
            await warn(event, REASON_MESSAGES["no_profile"])
            return
        await reply(event, format_inventory(profile, app.catalog))

    async def send_wheel(event: Message | CallbackQuery, player: PlayerContext) -> None:
        profile = await player.profiles.read()
        if profile is None:
            await warn(event, REASON_MESSAGES["no_profile"])
            return
        remaining = await player.wheel.cooldown_remaining()
        await reply(
            event,
            f"🎡 {format_wheel_header(remaining)}\n{format_profile_line(profile, app.config.progression)}",
            reply_markup=wheel_keyboard(app.config.wheel),
        )

    async def spin(event: Message | CallbackQuery, player: PlayerContext) -> None:
        result = await player.wheel.spin()
        if not result.ok:
            if result.reason == "on_cooldown":
                remaining = await player.wheel.cooldown_remaining()
                await warn(event, format_wheel_header(remaining))
            else:
                await warn(event, describe_failure(result))
            return
        lines = [f"🎯 {result.segment.label}"]
        if result.message:
            lines.append(result.message)
        lines.append(format_profile_line(result.profile, app.config.progression))
        await reply(event, "\n".join(lines))

    async def reset_wheel(event: Message | CallbackQuery, player: PlayerContext) -> None:
        result = await player.wheel.reset_cooldown()
        if not result.ok:
            await warn(event, describe_failure(result))
            return
        await reply(
            event,
            f"Cooldown reset. Ready to spin!\n{format_profile_line(result.profile, app.config.progression)}",
            reply_markup=wheel_keyboard(app.config.wheel),
        )

    async def buy(event: Message | CallbackQuery, player: PlayerContext, item_id: str) -> None:
        result = await player.inventory.purchase_item(item_id)
        if not result.ok:
            await warn(event, describe_failure(result))
            return
        item = app.catalog.get_item(item_id)
        await reply(event, f"Purchased {item.name} for {format_shards(item.price)}.")

    async def send_arcade(event: Message | CallbackQuery, player: PlayerContext) -> None:
        profile = await player.profiles.read()
        if profile is None:
            await warn(event, REASON_MESSAGES["no_profile"])
            return
        await reply(
            event,
            f"🕹 Arcade\n\n{format_arcade(player.arcade.games(), profile)}",
            reply_markup=arcade_keyboard(player.arcade.unlocked(profile)),
        )

    async def finish_game(event: Message | CallbackQuery, player: PlayerContext, game_id: str) -> None:
        result = await player.arcade.record_completion(game_id)
        if not result.ok:
            await warn(event, describe_failure(result))
            return
        title = result.game.title
        headline = f"🏆 {title} cleared for the first time!" if result.first_time else f"🔁 {title} cleared again."
        await reply(
            event,
            f"{headline}\n{result.message}\n{format_profile_line(result.profile, app.config.progression)}",
        )

    async def send_letters(event: Message | CallbackQuery, player: PlayerContext) -> None:
        remaining = await player.letters.remaining()
        locked = {
            letter.letter_id: remaining
            for letter in player.letters.letters()
            if await player.letters.is_locked(letter.letter_id)
        }
        await reply(
            event,
            format_letters(player.letters.letters(), locked),
            reply_markup=letters_keyboard(player.letters.letters(), locked),
        )

    async def open_letter(event: Message | CallbackQuery, player: PlayerContext, letter_id: str) -> None:
        result = await player.letters.open(letter_id)
        if not result.ok:
            if result.reason == "locked":
                remaining = await player.letters.remaining()
                await warn(event, f"🔒 Locked {format_countdown(remaining)}")
            else:
                await warn(event, describe_failure(result))
            return
        await reply(event, format_letter(result.letter, result.variant))

    @router.message(Command("start"), with_player)
    async def handle_start(message: Message, player: PlayerContext) -> None:
        profile = await player.profiles.read()
        if profile is None:
            await reply(message, "Welcome! Choose a name to begin: /register <name>")
            return
        await reply(
            message,
            f"Welcome back, {profile.avatar} {profile.name}!",
            reply_markup=menu_keyboard(),
        )

    @router.message(Command("register"), with_player)
    async def handle_register(message: Message, command: CommandObject, player: PlayerContext) -> None:
        result = await player.profiles.create(command.args or "")
        if not result.ok:
            await warn(message, describe_failure(result))
            return
        await reply(
            message,
            f"Nice to meet you, {result.profile.name}! Pick an avatar:",
            reply_markup=avatar_keyboard(AVATARS),
        )

    @router.callback_query(CallbackPrefix("avatar"), with_player)
    async def handle_avatar(callback: CallbackQuery, arg: str | None, player: PlayerContext) -> None:
        if not arg or not arg.isdigit() or int(arg) >= len(AVATARS):
            await acknowledge(callback)
            return
        result = await player.profiles.update_identity(avatar=AVATARS[int(arg)])
        if not result.ok:
            await warn(callback, describe_failure(result))
            return
        await reply(callback, f"Avatar set to {result.profile.avatar}", reply_markup=menu_keyboard())

    @router.message(Command("profile"), with_player)
    async def handle_profile(message: Message, player: PlayerContext) -> None:
        await send_profile(message, player)

    @router.callback_query(F.data == "keepsake:profile", with_player)
    async def handle_profile_callback(callback: CallbackQuery, player: PlayerContext) -> None:
        await send_profile(callback, player)

    @router.message(Command("inventory"), with_player)
    async def handle_inventory(message: Message, player: PlayerContext) -> None:
        await send_inventory(message, player)

    @router.callback_query(F.data == "keepsake:inventory", with_player)
    async def handle_inventory_callback(callback: CallbackQuery, player: PlayerContext) -> None:
        await send_inventory(callback, player)

    @router.message(Command("shop"))
    async def handle_shop(message: Message) -> None:
        await reply(message, format_shop(app.catalog), parse_mode="HTML", reply_markup=shop_keyboard(app.catalog))

    @router.callback_query(CallbackPrefix("shop"))
    async def handle_shop_callback(callback: CallbackQuery, arg: str | None) -> None:
        categories = app.catalog.categories()
        if arg and arg.isdigit() and int(arg) < len(categories):
            category = categories[int(arg)]
            await reply(
                callback,
                f"🛒 {category.name}",
                edit=True,
                reply_markup=shop_keyboard(app.catalog, category.name),
            )
            return
        await reply(
            callback,
            format_shop(app.catalog),
            edit=True,
            parse_mode="HTML",
            reply_markup=shop_keyboard(app.catalog),
        )

    @router.message(Command("buy"), with_player)
    async def handle_buy(message: Message, command: CommandObject, player: PlayerContext) -> None:
        if not command.args:
            await reply(message, "Usage: /buy <item_id>. See /shop for ids.")
            return
        await buy(message, player, command.args.strip())

    @router.callback_query(CallbackPrefix("buy"), with_player)
    async def handle_buy_callback(callback: CallbackQuery, arg: str | None, player: PlayerContext) -> None:
        if arg:
            await buy(callback, player, arg)

    @router.message(Command("equip"), with_player)
    async def handle_equip(message: Message, command: CommandObject, player: PlayerContext) -> None:
        parts = (command.args or "").split()
        slot = _parse_slot(parts[0]) if parts else None
        if slot is None or len(parts) != 2:
            profile = await player.profiles.read()
            lines = ["Usage: /equip <slot> <item_id>", ""]
            for each, label in SLOT_LABELS.items():
                owned = player.inventory.items_for_slot(profile, each) if profile else []
                names = ", ".join(f"{item.item_id} x{qty}" for item, qty in owned) or "nothing owned"
                lines.append(f"{label} ({each.value}): {names}")
            await reply(message, "\n".join(lines))
            return
        result = await player.inventory.equip_item(slot, parts[1])
        if not result.ok:
            await warn(message, describe_failure(result))
            return
        await reply(message, f"Equipped {parts[1]} as {SLOT_LABELS[slot]}.")

    @router.message(Command("unequip"), with_player)
    async def handle_unequip(message: Message, command: CommandObject, player: PlayerContext) -> None:
        slot = _parse_slot((command.args or "").strip())
        if slot is None:
            await reply(message, "Usage: /unequip <head|body|legs|accessory|weapon>")
            return
        result = await player.inventory.unequip_item(slot)
        if not result.ok:
            await warn(message, describe_failure(result))
            return
        await reply(message, f"{SLOT_LABELS[slot]} slot cleared.")

    @router.message(Command("wheel"), with_player)
    async def handle_wheel(message: Message, player: PlayerContext) -> None:
        await send_wheel(message, player)

    @router.callback_query(F.data == "keepsake:wheel", with_player)
    async def handle_wheel_callback(callback: CallbackQuery, player: PlayerContext) -> None:
        await send_wheel(callback, player)

    @router.message(Command("spin"), with_player)
    async def handle_spin(message: Message, player: PlayerContext) -> None:
        await spin(message, player)

    @router.callback_query(F.data == "keepsake:spin", with_player)
    async def handle_spin_callback(callback: CallbackQuery, player: PlayerContext) -> None:
        await spin(callback, player)

    @router.message(Command("resetwheel"), with_player)
    async def handle_reset(message: Message, player: PlayerContext) -> None:
        await reset_wheel(message, player)

    @router.callback_query(F.data == "keepsake:resetwheel", with_player)
    async def handle_reset_callback(callback: CallbackQuery, player: PlayerContext) -> None:
        await reset_wheel(callback, player)

    @router.message(Command("arcade"), with_player)
    async def handle_arcade(message: Message, player: PlayerContext) -> None:
        await send_arcade(message, player)

    @router.callback_query(F.data == "keepsake:arcade", with_player)
    async def handle_arcade_callback(callback: CallbackQuery, player: PlayerContext) -> None:
        await send_arcade(callback, player)

    @router.callback_query(CallbackPrefix("played"), with_player)
    async def handle_played_callback(callback: CallbackQuery, arg: str | None, player: PlayerContext) -> None:
        if arg:
            await finish_game(callback, player, arg)
        else:
            await acknowledge(callback)

    @router.message(Command("letters"), with_player)
    async def handle_letters(message: Message, player: PlayerContext) -> None:
        await send_letters(message, player)

    @router.callback_query(F.data == "keepsake:letters", with_player)
    async def handle_letters_callback(callback: CallbackQuery, player: PlayerContext) -> None:
        await send_letters(callback, player)

    @router.message(Command("open"), with_player)
    async def handle_open(message: Message, command: CommandObject, player: PlayerContext) -> None:
        if not command.args:
            await send_letters(message, player)
            return
        await open_letter(message, player, command.args.strip())

    @router.callback_query(CallbackPrefix("open"), with_player)
    async def handle_open_callback(callback: CallbackQuery, arg: str | None, player: PlayerContext) -> None:
        if arg:
            await open_letter(callback, player, arg)

    return router


def _parse_slot(raw: str) -> EquipmentSlot | None:
    try:
        return EquipmentSlot(raw.lower())
    except ValueError:
        return None
