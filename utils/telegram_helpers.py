"""
Telegram API wrappers that never raise into a handler.

The drill keeps editing one message in place. Delayed edits (the
auto-advance after an answer) can land after the learner already moved on,
so "message is not modified" is treated as success everywhere here.

All text is sent with parse_mode='HTML'; callers must html.escape() card
text before embedding it.
"""

import logging
from typing import Any

from telegram import CallbackQuery, InlineKeyboardMarkup, Message
from telegram.error import BadRequest, Forbidden, TimedOut, NetworkError

logger = logging.getLogger(__name__)


def _not_modified(error: BadRequest) -> bool:
    return "message is not modified" in str(error).lower()


async def safe_edit_text(
    query: CallbackQuery,
    text: str,
    reply_markup: InlineKeyboardMarkup | None = None,
    parse_mode: str = 'HTML',
) -> bool:
    """Edit the message behind a button press. Falls back to a reply on failure."""
    try:
        await query.edit_message_text(text, reply_markup=reply_markup, parse_mode=parse_mode)
        return True
    except BadRequest as e:
        if _not_modified(e):
            return True
        logger.warning(f"safe_edit_text BadRequest: {e}")
        return await _fallback_reply(query, text, reply_markup, parse_mode)
    except (TimedOut, NetworkError) as e:
        logger.warning(f"safe_edit_text network error: {e}")
        return False


async def safe_edit_message(
    bot: Any,
    chat_id: int,
    message_id: int,
    text: str,
    reply_markup: InlineKeyboardMarkup | None = None,
    parse_mode: str = 'HTML',
) -> bool:
    """Edit a message by id, for edits that happen outside a handler call."""
    try:
        await bot.edit_message_text(
            text,
            chat_id=chat_id,
            message_id=message_id,
            reply_markup=reply_markup,
            parse_mode=parse_mode,
        )
        return True
    except BadRequest as e:
        if _not_modified(e):
            return True
        logger.warning(f"safe_edit_message BadRequest: {e}")
        return False
    except (Forbidden, TimedOut, NetworkError) as e:
        logger.warning(f"safe_edit_message failed: {e}")
        return False


async def safe_send_text(
    message: Message,
    text: str,
    reply_markup: InlineKeyboardMarkup | None = None,
    parse_mode: str = 'HTML',
) -> bool:
    try:
        await message.reply_text(text, reply_markup=reply_markup, parse_mode=parse_mode)
        return True
    except Forbidden:
        logger.warning("Bot was blocked by user")
        return False
    except (TimedOut, NetworkError) as e:
        logger.warning(f"safe_send_text network error: {e}")
        return False
    except BadRequest as e:
        logger.warning(f"safe_send_text BadRequest: {e}")
        return False


async def safe_answer(query: CallbackQuery, text: str | None = None) -> bool:
    """Acknowledge a button press, optionally with a toast."""
    try:
        await query.answer(text)
        return True
    except (BadRequest, TimedOut, NetworkError) as e:
        # stale queries (older than ~15s) can no longer be answered
        logger.debug(f"safe_answer failed: {e}")
        return False


async def _fallback_reply(
    query: CallbackQuery,
    text: str,
    reply_markup: InlineKeyboardMarkup | None,
    parse_mode: str = 'HTML',
) -> bool:
    try:
        await query.message.reply_text(text, reply_markup=reply_markup, parse_mode=parse_mode)
        return True
    except (BadRequest, Forbidden, TimedOut, NetworkError) as e:
        logger.warning(f"_fallback_reply also failed: {e}")
        return False
