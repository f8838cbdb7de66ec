import html
import logging

from telegram import Update, InlineKeyboardButton, InlineKeyboardMarkup
from telegram.ext import ContextTypes

from utils.constants import BELTS, BELT_EMOJI, CATEGORY_NAMES, CURRENT_BELT, Category
from utils.session import session_progress
from utils.telegram_helpers import safe_edit_text, safe_send_text, safe_answer


def progress_bar(percent: float, width: int = 10) -> str:
    percent = min(max(percent, 0.0), 100.0)
    filled = round(percent / 100 * width)
    return '\u2588' * filled + '\u2591' * (width - filled)


def build_main_menu(belt_id: str = CURRENT_BELT) -> tuple[str, InlineKeyboardMarkup]:
    """
    Returns (message_text, markup) for the category picker.
    Each category line shows how far the saved session for it has got.
    """
    belt = BELTS[belt_id]
    emoji = BELT_EMOJI.get(belt['color'], '')

    lines = [f"{emoji} <b>{html.escape(belt['name'])}</b> \u00b7 {html.escape(belt['color'])} belt\n"]
    for category in Category:
        percent = session_progress(belt_id, category)
        lines.append(
            f"<code>{progress_bar(percent)}</code> {CATEGORY_NAMES[category]} \u00b7 {percent:.0f}%"
        )
    lines.append("\n<i>Pick what to drill:</i>")

    markup = InlineKeyboardMarkup([
        [
            InlineKeyboardButton(CATEGORY_NAMES[category], callback_data=f'category_{category.value}')
            for category in Category
        ],
        [InlineKeyboardButton('\u2753 How it works', callback_data='help')],
    ])

    return '\n'.join(lines), markup


async def start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    logging.info("Started /start")

    name = update.effective_user.first_name
    text, markup = build_main_menu()
    await safe_send_text(
        update.message,
        f"Hey {html.escape(name)} \U0001f44b\n\n{text}",
        reply_markup=markup,
    )


async def main_menu(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Callback handler for the 'Menu' button (outside the drill conversation)."""
    query = update.callback_query
    await safe_answer(query)

    text, markup = build_main_menu()
    await safe_edit_text(query, text, reply_markup=markup)
