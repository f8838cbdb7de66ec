from telegram import Update, InlineKeyboardButton, InlineKeyboardMarkup
from telegram.ext import ContextTypes

from utils.constants import MAX_HISTORY
from utils.telegram_helpers import safe_answer, safe_edit_text, safe_send_text


HELP_TEXT = (
    "<b>\u2753 How it works</b>\n\n"
    "1. Pick <b>Recite</b>, <b>Perform</b> or <b>All</b>\n"
    "2. Read the prompt, then tap Show answer\n"
    "3. Mark yourself \u2705 Correct or \u274c Wrong\n"
    "4. Skip counts as wrong\n\n"
    f"I remember your last {MAX_HISTORY} answers per card and put the "
    "shakiest cards first when you reshuffle. "
    "Leave any time \u2014 you'll pick up where you stopped \U0001f94b"
)

_MARKUP = InlineKeyboardMarkup([
    [InlineKeyboardButton("Menu", callback_data='main_menu')]
])


async def help_entry(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    query = update.callback_query
    await safe_answer(query)
    await safe_edit_text(query, HELP_TEXT, reply_markup=_MARKUP)


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await safe_send_text(update.message, HELP_TEXT, reply_markup=_MARKUP)
