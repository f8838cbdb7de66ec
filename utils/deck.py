"""
Builds a drill deck from the belt's CSV files.

Each file has a header line followed by `front,back` rows. Files are fetched
one after another, never concurrently, and their cards are concatenated in
file order.
"""

import asyncio
import logging
import os
import random
from typing import Any

import httpx

import config
from utils.constants import BELTS, CURRENT_BELT, Category
from utils.history import get_card_stats
from utils.ordering import prioritize_weak_cards
from utils.session import load_session, restore_order, save_session
from utils.utils import parse_line

logger = logging.getLogger(__name__)

FETCH_TIMEOUT = 10.0


class DeckLoadError(Exception):
    """A source file could not be fetched; no deck was built."""


def get_category_files(category: str, belt_id: str = CURRENT_BELT) -> list[str]:
    belt = BELTS.get(belt_id)
    if belt is None:
        raise ValueError(f"Unknown belt: {belt_id}")

    category = Category(category)
    if category == Category.ALL:
        return [f"{belt['path']}/{name}" for name in belt['files'].values()]
    return [f"{belt['path']}/{belt['files'][category]}"]


async def fetch_text(path: str) -> str:
    """Fetch one source file over HTTP if STUDY_BASE_URL is set, else from STUDY_DIR."""
    if config.STUDY_BASE_URL:
        url = f"{config.STUDY_BASE_URL.rstrip('/')}/{path}"
        try:
            async with httpx.AsyncClient(timeout=FETCH_TIMEOUT) as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.text
        except httpx.HTTPError as e:
            raise DeckLoadError(f"Could not fetch {url}: {e}") from e

    full_path = os.path.join(config.STUDY_DIR, path)
    try:
        return await asyncio.to_thread(_read_file, full_path)
    except (OSError, UnicodeDecodeError) as e:
        raise DeckLoadError(f"Could not read {full_path}: {e}") from e


def _read_file(path: str) -> str:
    with open(path, encoding='utf-8') as f:
        return f.read()


def parse_cards(csv_text: str) -> list[dict[str, Any]]:
    """Turn a source file into card dicts, joining each with its answer stats."""
    cards: list[dict[str, Any]] = []
    lines = csv_text.split('\n')

    # line 0 is the header
    for raw in lines[1:]:
        line = raw.strip()
        if not line:
            continue
        values = parse_line(line)
        if len(values) < 2:
            continue
        stats = get_card_stats(values[0])
        cards.append({
            'front': values[0],
            'back': values[1],
            'correct': stats['correct'],
            'wrong': stats['wrong'],
        })

    return cards


async def build_deck(category: str, belt_id: str = CURRENT_BELT) -> list[dict[str, Any]]:
    cards: list[dict[str, Any]] = []
    for path in get_category_files(category, belt_id):
        text = await fetch_text(path)
        cards.extend(parse_cards(text))
    return cards


async def load_deck(
    category: str,
    force_new: bool = False,
    belt_id: str = CURRENT_BELT,
    rng: random.Random | None = None,
) -> tuple[list[dict[str, Any]], int]:
    """
    Build the deck and decide where the learner starts.

    Resumes the saved order and position unless force_new is set or there
    is no saved session; a fresh start is weakness-prioritized and saved
    right away. Raises DeckLoadError if any file can't be fetched.
    """
    cards = await build_deck(category, belt_id)

    session = load_session(belt_id, category)
    if not force_new and session and isinstance(session.get('cardOrder'), list):
        cards, current_index = restore_order(cards, session)
        logger.info(f"Resumed {belt_id}/{Category(category).value} at card {current_index + 1} of {len(cards)}")
    else:
        prioritize_weak_cards(cards, rng)
        current_index = 0
        save_session(belt_id, category, current_index, [card['front'] for card in cards])
        logger.info(f"Started fresh {belt_id}/{Category(category).value} with {len(cards)} cards")

    return cards, current_index
