"""
Cursor over a loaded deck.

Each card is in one of three states:

    unflipped/unanswered -> flipped/unanswered -> flipped/answered

Every index change drops back to unflipped/unanswered. Delayed work (the
auto-advance after an answer) goes through a fire-and-forget scheduler with
no cancellation, so every transition here must be safe to run late: a stale
auto-advance is just one more next().
"""

import asyncio
import logging
import time
from typing import Any, Callable

from utils.constants import AUTO_ADVANCE_DELAY, FLIP_DEBOUNCE
from utils.history import record_answer
from utils.session import save_session

logger = logging.getLogger(__name__)

Scheduler = Callable[[float, Callable[[], Any]], None]


def call_later(delay: float, callback: Callable[[], Any]) -> None:
    """
    Default scheduler: the running event loop.

    Outside a loop the callback is dropped, never run early: the answered card
    stays on screen until the learner moves on.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        logger.debug(f"No running loop, dropping callback scheduled in {delay}s")
        return
    loop.call_later(delay, callback)


class Navigator:
    def __init__(
        self,
        cards: list[dict[str, Any]],
        belt_id: str,
        category: str,
        current_index: int = 0,
        schedule: Scheduler | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.cards = cards
        self.belt_id = belt_id
        self.category = category
        self.current_index = self._clamp(current_index)
        self.is_flipped = False
        self.has_answered_current = False

        self._schedule = schedule or call_later
        self._clock = clock
        self._flipped_at: float | None = None

    # ── Queries ───────────────────────────────────────────────

    def current_card(self) -> dict[str, Any] | None:
        if not self.cards:
            return None
        return self.cards[self.current_index]

    def can_go_previous(self) -> bool:
        return self.current_index > 0

    def can_go_next(self) -> bool:
        return bool(self.cards) and self.current_index < len(self.cards) - 1

    def can_mark(self) -> bool:
        return self.is_flipped and not self.has_answered_current

    def is_debouncing(self) -> bool:
        """True for a short window after flipping, to swallow an accidental double tap."""
        if self._flipped_at is None:
            return False
        return self._clock() - self._flipped_at < FLIP_DEBOUNCE

    def progress(self) -> float:
        if not self.cards:
            return 0.0
        return (self.current_index + 1) / len(self.cards) * 100

    def stats_text(self) -> str:
        card = self.current_card()
        if card is None:
            return '0/0'
        return f"{card['correct']}/{card['wrong']}"

    # ── Transitions ───────────────────────────────────────────

    def flip(self) -> None:
        if self.is_flipped or not self.cards:
            return
        self.is_flipped = True
        self._flipped_at = self._clock()

    def toggle_flip(self) -> None:
        if self.is_flipped:
            self.is_flipped = False
        else:
            self.flip()

    def mark(self, is_correct: bool) -> bool:
        """
        Record an answer for the current card.

        Returns True if an answer was recorded. A second mark on an answered
        card is treated as next(), which covers a tap racing the auto-advance.
        """
        if self.has_answered_current:
            self.next()
            return False

        card = self.current_card()
        if card is None or not self.is_flipped:
            return False

        record_answer(card['front'], is_correct)
        self.has_answered_current = True
        if is_correct:
            card['correct'] += 1
        else:
            card['wrong'] += 1

        logger.info(f"Card {card['front']!r}: marked {'correct' if is_correct else 'wrong'}, now {self.stats_text()}")

        self.save()
        self._schedule(AUTO_ADVANCE_DELAY, self.next)
        return True

    def skip(self) -> bool:
        """Move on; a revealed but unanswered card counts as wrong."""
        if self.can_mark():
            return self.mark(False)
        self.next()
        return False

    def next(self) -> bool:
        if not self.can_go_next():
            return False
        self._go_to(self.current_index + 1)
        return True

    def previous(self) -> bool:
        if not self.can_go_previous():
            return False
        self._go_to(self.current_index - 1)
        return True

    def reset(self) -> None:
        """Back to the first card without reshuffling or touching the saved order."""
        self._go_to(0)

    def save(self) -> None:
        save_session(
            self.belt_id,
            self.category,
            self.current_index,
            [card['front'] for card in self.cards],
        )

    # ── Private helpers ───────────────────────────────────────

    def _go_to(self, index: int) -> None:
        self.current_index = self._clamp(index)
        self.is_flipped = False
        self.has_answered_current = False
        self._flipped_at = None

    def _clamp(self, index: int) -> int:
        if not self.cards:
            return 0
        return min(max(index, 0), len(self.cards) - 1)
