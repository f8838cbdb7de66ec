"""
Answer history per card front.

The whole history lives in one JSON blob under STATS_KEY:

    {front: {'history': [True, False, ...]}}      # current shape
    {front: {'correct': 3, 'wrong': 1}}           # legacy shape, read-only

Every write is a full read-modify-write of the blob. There is exactly one
writer (the bot's event loop), so no locking is done.
"""

import json
import logging
import sqlite3
from typing import Any

import database.database as db
from utils.constants import MAX_HISTORY, STATS_KEY

logger = logging.getLogger(__name__)


def load_stats() -> dict[str, Any]:
    """Read the stats blob. Anything unreadable is treated as an empty store."""
    try:
        data = db.get_value(STATS_KEY)
        if not data:
            return {}
        stats = json.loads(data)
    except (sqlite3.Error, ValueError, TypeError) as e:
        logger.warning(f"Unreadable stats store, starting empty: {e}")
        return {}

    if not isinstance(stats, dict):
        logger.warning("Stats store is not a JSON object, starting empty")
        return {}
    return stats


def save_stats(stats: dict[str, Any]) -> None:
    try:
        db.set_value(STATS_KEY, json.dumps(stats))
    except (sqlite3.Error, ValueError, TypeError) as e:
        logger.error(f"Failed to save stats: {e}")


def get_card_stats(front: str) -> dict[str, int]:
    """
    returns: {'correct': int, 'wrong': int}

    Counts come from the stored history when there is one, otherwise from a
    legacy flat record, otherwise both are zero.
    """
    record = load_stats().get(front)
    if not isinstance(record, dict):
        return {'correct': 0, 'wrong': 0}

    history = record.get('history')
    if isinstance(history, list):
        correct = sum(1 for answer in history if answer)
        return {'correct': correct, 'wrong': len(history) - correct}

    if 'correct' in record or 'wrong' in record:
        return {
            'correct': _as_count(record.get('correct')),
            'wrong': _as_count(record.get('wrong')),
        }

    return {'correct': 0, 'wrong': 0}


def record_answer(front: str, is_correct: bool) -> None:
    """Append one outcome, keeping only the last MAX_HISTORY answers."""
    stats = load_stats()

    # A legacy flat record is dropped, not converted, on the first new answer
    record = stats.get(front)
    if not isinstance(record, dict) or not isinstance(record.get('history'), list):
        stats[front] = {'history': []}

    history = stats[front]['history']
    history.append(bool(is_correct))
    while len(history) > MAX_HISTORY:
        history.pop(0)

    save_stats(stats)


def _as_count(value: Any) -> int:
    try:
        return max(0, int(value or 0))
    except (TypeError, ValueError):
        return 0
