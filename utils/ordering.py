import random
from typing import Any


def shuffle_cards(cards: list[Any], rng: random.Random | None = None) -> None:
    """In-place Fisher-Yates shuffle."""
    rng = rng or random
    for i in range(len(cards) - 1, 0, -1):
        j = rng.randint(0, i)
        cards[i], cards[j] = cards[j], cards[i]


def weakness_score(card: dict[str, Any]) -> int:
    return card['wrong'] - card['correct']


def prioritize_weak_cards(cards: list[dict[str, Any]], rng: random.Random | None = None) -> None:
    """
    Order a fresh deck: weakest cards first.

    Shuffling first makes ties come out in random order; list.sort is stable,
    so the shuffled order survives within each score.
    """
    shuffle_cards(cards, rng)
    cards.sort(key=weakness_score, reverse=True)
