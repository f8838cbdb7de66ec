import asyncio
import html
import logging
from typing import Any, Callable

from telegram import Update, InlineKeyboardButton, InlineKeyboardMarkup, CallbackQuery
from telegram.ext import ContextTypes, ConversationHandler

from handlers.start import build_main_menu, progress_bar
from utils.constants import BELTS, CATEGORY_NAMES, CURRENT_BELT, FLIP_RESET_DELAY, Category, DrillState
from utils.deck import DeckLoadError, load_deck
from utils.navigation import Navigator
from utils.telegram_helpers import safe_answer, safe_edit_message, safe_edit_text, safe_send_text


async def drill_category(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """User picked a category: resume its saved session or start a fresh one."""
    query = update.callback_query
    category = Category(query.data.split('_', 1)[1])  # category_<name>
    return await _load(query, context, category, force_new=False)


async def restart_deck(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Reshuffle the current category and start over, discarding the saved order."""
    query = update.callback_query
    nav = _navigator(context)
    if nav is None:
        return await _lost_session(query)
    return await _load(query, context, Category(nav.category), force_new=True)


async def flip_card(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    query = update.callback_query
    nav = _navigator(context)
    if nav is None:
        return await _lost_session(query)

    await safe_answer(query)
    nav.toggle_flip()
    await _render(query, context)
    return DrillState.STUDYING


async def mark_card(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """User rates the revealed card; the next card follows after a short delay."""
    query = update.callback_query
    nav = _navigator(context)
    if nav is None:
        return await _lost_session(query)

    # taps right after the flip are most likely a double tap on the card
    if nav.is_debouncing():
        await safe_answer(query)
        return DrillState.STUDYING

    await safe_answer(query)
    is_correct = query.data == 'mark_correct'
    was_flipped = nav.is_flipped
    if nav.mark(is_correct):
        await _render(query, context)
    else:
        await _after_move(query, context, was_flipped)
    return DrillState.STUDYING


async def skip_card(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Next button: a revealed card that wasn't rated counts as wrong."""
    query = update.callback_query
    nav = _navigator(context)
    if nav is None:
        return await _lost_session(query)

    await safe_answer(query)
    was_flipped = nav.is_flipped
    if nav.skip():
        await _render(query, context)
    else:
        await _after_move(query, context, was_flipped)
    return DrillState.STUDYING


async def next_card(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    return await _move(update, context, Navigator.next)


async def previous_card(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    return await _move(update, context, Navigator.previous)


async def reset_deck(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Back to the first card, same order."""
    return await _move(update, context, Navigator.reset)


async def leave_drill(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Back to the category picker. Works for both the Menu button and /cancel."""
    _cleanup_drill_data(context)
    text, markup = build_main_menu()

    if update.callback_query:
        await safe_answer(update.callback_query)
        await safe_edit_text(update.callback_query, text, reply_markup=markup)
    else:
        await safe_send_text(update.message, text, reply_markup=markup)

    return ConversationHandler.END


# ============================================================
# Private helpers
# ============================================================

async def _load(
    query: CallbackQuery,
    context: ContextTypes.DEFAULT_TYPE,
    category: Category,
    force_new: bool,
) -> int:
    # One load at a time per chat; a second tap while fetching is dropped
    if context.user_data.get('drill_loading'):
        await safe_answer(query, "Still loading\u2026")
        return DrillState.STUDYING

    context.user_data['drill_loading'] = True
    try:
        cards, current_index = await load_deck(category, force_new=force_new, belt_id=CURRENT_BELT)
    except DeckLoadError as e:
        logging.error(f"Error loading flashcards: {e}")
        if _navigator(context) is not None:
            # the deck on screen is still usable, so only a toast
            await safe_answer(query, "\u26a0\ufe0f Error loading flashcards.")
            return DrillState.STUDYING

        await safe_answer(query)
        await safe_edit_text(
            query,
            "\u26a0\ufe0f Error loading flashcards.",
            reply_markup=InlineKeyboardMarkup([
                [InlineKeyboardButton("\U0001f501 Try again", callback_data=f'category_{category.value}')],
                [InlineKeyboardButton("\U0001f3e0 Menu", callback_data='main_menu')],
            ]),
        )
        return ConversationHandler.END
    finally:
        context.user_data['drill_loading'] = False

    await safe_answer(query)
    context.user_data['navigator'] = Navigator(
        cards,
        CURRENT_BELT,
        category.value,
        current_index,
        schedule=_scheduler(context),
    )
    context.user_data['drill_message'] = (query.message.chat_id, query.message.message_id)

    logging.info(f"Drilling {category.value}: {len(cards)} cards, starting at {current_index + 1}")
    await _render(query, context)
    return DrillState.STUDYING


async def _move(
    update: Update,
    context: ContextTypes.DEFAULT_TYPE,
    step: Callable[[Navigator], Any],
) -> int:
    query = update.callback_query
    nav = _navigator(context)
    if nav is None:
        return await _lost_session(query)

    await safe_answer(query)
    was_flipped = nav.is_flipped
    step(nav)
    await _after_move(query, context, was_flipped)
    return DrillState.STUDYING


async def _after_move(query: CallbackQuery, context: ContextTypes.DEFAULT_TYPE, was_flipped: bool) -> None:
    if was_flipped:
        # let the old answer close before the next prompt shows
        await asyncio.sleep(FLIP_RESET_DELAY)
    await _render(query, context)


def _scheduler(context: ContextTypes.DEFAULT_TYPE) -> Callable[[float, Callable[[], Any]], None]:
    """
    Navigator scheduler backed by application tasks.

    Nothing is cancelled: if the learner already moved on, the callback's
    next() is a no-op or one more step, and the message is re-rendered from
    whatever state the navigator is in by then.
    """
    def schedule(delay: float, callback: Callable[[], Any]) -> None:
        async def run() -> None:
            await asyncio.sleep(delay)
            if callback():
                await _render_in_place(context)

        context.application.create_task(run())

    return schedule


def _navigator(context: ContextTypes.DEFAULT_TYPE) -> Navigator | None:
    return context.user_data.get('navigator')


def _card_view(nav: Navigator) -> tuple[str, InlineKeyboardMarkup]:
    belt = BELTS[nav.belt_id]
    category_name = CATEGORY_NAMES[Category(nav.category)]
    header = f"<b>{html.escape(belt['name'])}</b> \u00b7 {category_name}"

    card = nav.current_card()
    if card is None:
        text = f"{header}\n\n<i>No cards in this deck.</i>"
        return text, InlineKeyboardMarkup([
            [InlineKeyboardButton("\U0001f3e0 Menu", callback_data='main_menu')]
        ])

    total = len(nav.cards)
    counter = f"{nav.current_index + 1}/{total}"
    text = (
        f"{header}\n"
        f"<code>{progress_bar(nav.progress())}</code> {counter}\n\n"
        f"\u2753 {html.escape(card['front'])}"
    )
    if nav.is_flipped:
        text += f"\n\n\U0001f4a1 {html.escape(card['back'])}"
    text += f"\n\n\u2705 {nav.stats_text()} \u274c"

    rows: list[list[InlineKeyboardButton]] = []
    if not nav.is_flipped:
        rows.append([InlineKeyboardButton("\U0001f440 Show answer", callback_data='flip')])
    elif nav.can_mark():
        rows.append([
            InlineKeyboardButton("\u2705 Correct", callback_data='mark_correct'),
            InlineKeyboardButton("\u274c Wrong", callback_data='mark_wrong'),
        ])
        rows.append([InlineKeyboardButton("\U0001f648 Hide answer", callback_data='flip')])

    nav_row: list[InlineKeyboardButton] = []
    if nav.can_go_previous():
        nav_row.append(InlineKeyboardButton("\u25c0 Prev", callback_data='prev'))
    if nav.can_go_next():
        if nav.can_mark():
            nav_row.append(InlineKeyboardButton("Skip \u23ed", callback_data='skip'))
        else:
            nav_row.append(InlineKeyboardButton("Next \u25b6", callback_data='next'))
    if nav_row:
        rows.append(nav_row)

    rows.append([
        InlineKeyboardButton("\u23ee First", callback_data='reset'),
        InlineKeyboardButton("\U0001f500 Reshuffle", callback_data='restart'),
        InlineKeyboardButton("\U0001f3e0 Menu", callback_data='main_menu'),
    ])
    return text, InlineKeyboardMarkup(rows)


def _render_lock(context: ContextTypes.DEFAULT_TYPE) -> asyncio.Lock:
    """
    Serializes edits of the drill message for one user.

    The view is built inside the lock, so a delayed auto-advance edit waits
    for a slow handler edit and then shows the newer state instead of being
    overwritten by the older one.
    """
    lock = context.user_data.get('drill_render_lock')
    if lock is None:
        lock = context.user_data['drill_render_lock'] = asyncio.Lock()
    return lock


async def _render(query: CallbackQuery, context: ContextTypes.DEFAULT_TYPE) -> None:
    async with _render_lock(context):
        nav = _navigator(context)
        if nav is None:
            return
        text, markup = _card_view(nav)
        await safe_edit_text(query, text, reply_markup=markup)


async def _render_in_place(context: ContextTypes.DEFAULT_TYPE) -> None:
    async with _render_lock(context):
        nav = _navigator(context)
        target = context.user_data.get('drill_message')
        if nav is None or target is None:
            return
        chat_id, message_id = target
        text, markup = _card_view(nav)
        await safe_edit_message(context.bot, chat_id, message_id, text, reply_markup=markup)


async def _lost_session(query: CallbackQuery) -> int:
    """Button pressed on an old message after a restart; send the picker again."""
    await safe_answer(query, "Session expired")
    text, markup = build_main_menu()
    await safe_edit_text(query, text, reply_markup=markup)
    return ConversationHandler.END


def _cleanup_drill_data(context: ContextTypes.DEFAULT_TYPE) -> None:
    context.user_data.pop('navigator', None)
    context.user_data.pop('drill_message', None)
    context.user_data.pop('drill_loading', None)
