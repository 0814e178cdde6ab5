"""Run the Keepsake Telegram bot with polling."""

from __future__ import annotations

import asyncio
import logging

from aiogram import Bot, Dispatcher
from rich.console import Console

from .app import KeepsakeApp
from .config import KeepsakeConfig
from .diagnostics.wheel_simulator import expected_shards
from .telegram import build_router

console = Console()


async def run_bot(config: KeepsakeConfig | None = None) -> None:
    config = config or KeepsakeConfig.from_env()
    if not config.bot_token:
        raise RuntimeError("Set KEEPSAKE_BOT_TOKEN to run the bot.")

    app = KeepsakeApp(config)
    await app.init_backend()

    bot = Bot(config.bot_token)
    dp = Dispatcher()
    dp.include_router(build_router(app))

    console.print(
        f"[bold green]Keepsake ready![/bold green]\n"
        f"{len(app.catalog)} items, {len(app.segments)} wheel segments "
        f"(≈{expected_shards(app.segments):.0f} MS per spin), "
        f"{len(app.games)} arcade games, {len(app.letters)} letters.",
    )
    try:
        await dp.start_polling(bot)
    finally:
        await app.close()
        await bot.session.close()


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    asyncio.run(run_bot())


if __name__ == "__main__":
    main()
