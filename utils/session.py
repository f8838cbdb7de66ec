"""
Saved drill position per (belt, category).

Stored under '<SESSION_KEY>_<belt>_<category>' as
{'currentIndex': int, 'cardOrder': [front, ...]}. The card order is a
snapshot of fronts, so a deck rebuilt from the source files can be put back
into the order the learner was working through.
"""

import json
import logging
import math
import sqlite3
from typing import Any

import database.database as db
from utils.constants import SESSION_KEY, Category

logger = logging.getLogger(__name__)


def session_key(belt_id: str, category: str) -> str:
    return f"{SESSION_KEY}_{belt_id}_{Category(category).value}"


def save_session(belt_id: str, category: str, current_index: int, card_fronts: list[str]) -> None:
    session = {
        'currentIndex': current_index,
        'cardOrder': list(card_fronts),
    }
    try:
        db.set_value(session_key(belt_id, category), json.dumps(session))
    except (sqlite3.Error, ValueError, TypeError) as e:
        logger.error(f"Failed to save session: {e}")


def load_session(belt_id: str, category: str) -> dict[str, Any] | None:
    try:
        data = db.get_value(session_key(belt_id, category))
        if not data:
            return None
        session = json.loads(data)
    except (sqlite3.Error, ValueError, TypeError):
        return None

    if not isinstance(session, dict):
        return None
    return session


def clear_session(belt_id: str, category: str) -> None:
    try:
        db.remove_value(session_key(belt_id, category))
    except sqlite3.Error as e:
        logger.error(f"Failed to clear session: {e}")


def restore_order(cards: list[dict[str, Any]], session: dict[str, Any]) -> tuple[list[dict[str, Any]], int]:
    """
    Put freshly built cards back into the saved order and pick the resume index.

    Fronts missing from the saved order go last, in source order. The cursor
    resumes one past the last card reached, clamped to the last card.
    """
    order = session.get('cardOrder')
    positions: dict[str, int] = {}
    if isinstance(order, list):
        for idx, front in enumerate(order):
            # a hand-edited or corrupt record may hold non-string entries
            if isinstance(front, str):
                positions[front] = idx

    cards.sort(key=lambda card: positions.get(card['front'], math.inf))

    try:
        saved_index = int(session.get('currentIndex', -1))
    except (TypeError, ValueError):
        saved_index = -1

    return cards, min(saved_index + 1, len(cards) - 1)


def session_progress(belt_id: str, category: str) -> float:
    """Percent through the saved session, counting the card after the last one reached."""
    session = load_session(belt_id, category)
    if not session:
        return 0.0

    order = session.get('cardOrder')
    if not isinstance(order, list) or not order:
        return 0.0

    try:
        current = int(session.get('currentIndex', 0))
    except (TypeError, ValueError):
        return 0.0
    return (current + 1) / len(order) * 100
