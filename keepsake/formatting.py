"""Plain-text renderings shared by the bot and the console tools."""

from __future__ import annotations

import math
from datetime import timedelta
from typing import Iterable

from .config import ProgressionConfig
from .domain.arcade import ArcadeGame, is_locked
from .domain.items import SLOT_LABELS, ItemCatalog
from .domain.letters import Letter, LetterVariant
from .domain.profile import PlayerProfile

CURRENCY = "MS"


def format_shards(amount: int) -> str:
    return f"{amount} {CURRENCY}"


def format_profile_line(
    profile: PlayerProfile, progression: ProgressionConfig | None = None
) -> str:
    max_level = (progression or ProgressionConfig()).max_level
    exp = "EXP MAX" if profile.level >= max_level else f"EXP {profile.exp}/{profile.exp_to_next}"
    return f"LVL {profile.level} • {exp} • {format_shards(profile.shards)}"


def format_profile(
    profile: PlayerProfile,
    catalog: ItemCatalog,
    progression: ProgressionConfig | None = None,
) -> str:
    lines = [f"{profile.avatar} {profile.name}", format_profile_line(profile, progression)]
    if profile.equipped:
        lines.append("")
        for slot, label in SLOT_LABELS.items():
            item_id = profile.equipped.get(slot.value)
            if item_id:
                lines.append(f"{label}: {_item_name(catalog, item_id)}")
    lines.append(f"🗝 Arcade keys: {profile.arcade_keys}")
    return "\n".join(lines)


def format_countdown(remaining: timedelta) -> str:
    """Render a lock countdown as ``mm:ss``, rounding seconds up."""
    total = max(0, math.ceil(remaining.total_seconds()))
    minutes, seconds = divmod(total, 60)
    return f"{minutes:02d}:{seconds:02d}"


def format_wheel_header(remaining: timedelta) -> str:
    if remaining <= timedelta(0):
        return "Ready to spin!"
    minutes = math.ceil(remaining.total_seconds() / 60)
    return f"Cooldown: ~{minutes} min left"


def format_inventory(profile: PlayerProfile, catalog: ItemCatalog) -> str:
    if not profile.inventory:
        return "Your inventory is empty."
    equipped = set(profile.equipped.values())
    lines = []
    for item_id, quantity in profile.inventory.items():
        marker = " (equipped)" if item_id in equipped else ""
        lines.append(f"• {_item_name(catalog, item_id)} x{quantity}{marker}")
    return "\n".join(lines)


def format_shop(catalog: ItemCatalog) -> str:
    sections = []
    for category in catalog.categories():
        rows = [f"<b>{category.name}</b>"]
        rows.extend(
            f"• {item.name} ({item.item_id}): {format_shards(item.price)}"
            for item in category.items
        )
        sections.append("\n".join(rows))
    return "\n\n".join(sections)


def format_arcade(games: Iterable[ArcadeGame], profile: PlayerProfile) -> str:
    lines = []
    for game in games:
        if is_locked(game, profile):
            status = f"🔒 {game.required_keys} keys"
        elif game.game_id in profile.arcade_completions:
            status = "✅"
        else:
            status = "▶️"
        lines.append(f"{status} {game.title}: {game.subtitle}")
    return "\n".join(lines)


def format_letters(letters: Iterable[Letter], locked: dict[str, timedelta]) -> str:
    """List letters; ``locked`` maps locked letter ids to the time left."""
    lines = []
    for letter in letters:
        line = f"💌 {letter.title} ({letter.letter_id}): {letter.hint}"
        if letter.letter_id in locked:
            line += f" [Locked {format_countdown(locked[letter.letter_id])}]"
        lines.append(line)
    return "\n".join(lines)


def _item_name(catalog: ItemCatalog, item_id: str) -> str:
    item = catalog.find_item(item_id)
    return item.name if item else item_id


def format_letter(letter: Letter, variant: LetterVariant) -> str:
    if variant.kind == "image":
        caption = variant.caption or letter.title
        return f"💌 {letter.title}\n\n🖼 {caption}\n{variant.content}"
    return f"💌 {letter.title}\n\n{variant.content}"
