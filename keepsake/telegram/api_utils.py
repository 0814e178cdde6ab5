"""Bot API calls used by the Keepsake handlers.

Handlers never talk to ``Message``/``CallbackQuery`` methods directly: they
``reply`` to the event that reached them, ``warn`` about a refused action and
``acknowledge`` button presses. Every call goes through ``safe_api_call`` so a
blocked chat or a rate limit never aborts a handler.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import ParamSpec, TypeVar

from aiogram.exceptions import (
    TelegramAPIError,
    TelegramBadRequest,
    TelegramForbiddenError,
    TelegramRetryAfter,
)
from aiogram.types import CallbackQuery, Message

P = ParamSpec("P")
T = TypeVar("T")

logger = logging.getLogger(__name__)

Event = Message | CallbackQuery


async def safe_api_call(
    label: str,
    func: Callable[P, Awaitable[T]],
    *args: P.args,
    retries: int = 3,
    **kwargs: P.kwargs,
) -> T | None:
    """Await a Bot API call, waiting out rate limits for up to ``retries`` attempts.

    Returns ``None`` instead of raising for any aiogram API error.
    """
    for attempt in range(1, retries + 1):
        try:
            return await func(*args, **kwargs)
        except TelegramRetryAfter as exc:
            if attempt == retries:
                logger.warning("%s: still rate limited after %s attempts.", label, attempt)
                break
            delay = float(exc.retry_after or 1)
            logger.info("%s: rate limited, waiting %.1f s (%s/%s).", label, delay, attempt, retries)
            await asyncio.sleep(delay)
        except TelegramForbiddenError:
            logger.info("%s: the player blocked the bot.", label)
            break
        except TelegramBadRequest as exc:
            if "message is not modified" in str(exc).lower():
                logger.debug("%s: screen already up to date.", label)
            else:
                logger.warning("%s: rejected: %s", label, exc)
            break
        except TelegramAPIError:
            logger.exception("%s: Bot API call failed.", label)
            break
    return None


async def acknowledge(
    callback: CallbackQuery, text: str | None = None, *, alert: bool = False
) -> bool:
    """Stop the button spinner; ``text`` shows as a toast, or a popup with ``alert``."""
    params: dict = {"show_alert": True} if alert else {}
    if text is not None:
        params["text"] = text
    return (await safe_api_call("callback.answer", callback.answer, **params)) is not None


async def reply(event: Event, text: str, *, edit: bool = False, **kwargs) -> bool:
    """Write ``text`` to the chat ``event`` came from.

    Button presses are acknowledged first. With ``edit`` the message carrying
    the pressed keyboard is rewritten in place, which is how menus page
    between screens; commands always get a new message.
    """
    if not isinstance(event, CallbackQuery):
        return await _send(event, text, **kwargs)
    await acknowledge(event)
    message = event.message if isinstance(event.message, Message) else None
    if message is None:
        return False
    if edit:
        return await _edit(message, text, **kwargs)
    return await _send(message, text, **kwargs)


async def warn(event: Event, text: str) -> bool:
    """Tell the player an action was refused.

    A popup for button presses keeps the chat free of error noise; commands
    get the explanation as a normal message.
    """
    if isinstance(event, CallbackQuery):
        return await acknowledge(event, text, alert=True)
    return await _send(event, text)


async def _send(message: Message, text: str, **kwargs) -> bool:
    return (await safe_api_call("message.answer", message.answer, text, **kwargs)) is not None


async def _edit(message: Message, text: str, **kwargs) -> bool:
    return (await safe_api_call("message.edit_text", message.edit_text, text, **kwargs)) is not None
