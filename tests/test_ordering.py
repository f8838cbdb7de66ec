"""
Tests for utils/ordering.py — pure Python, no Telegram, no DB.
"""
import random

from utils.ordering import prioritize_weak_cards, shuffle_cards, weakness_score


def card(front, correct=0, wrong=0):
    return {'front': front, 'back': '', 'correct': correct, 'wrong': wrong}


class TestShuffle:
    def test_is_a_permutation(self):
        items = list(range(20))
        shuffle_cards(items, random.Random(1))
        assert sorted(items) == list(range(20))

    def test_same_seed_same_order(self):
        a, b = list(range(10)), list(range(10))
        shuffle_cards(a, random.Random(42))
        shuffle_cards(b, random.Random(42))
        assert a == b

    def test_empty_and_single(self):
        empty, single = [], ['x']
        shuffle_cards(empty)
        shuffle_cards(single)
        assert empty == []
        assert single == ['x']

    def test_every_position_reachable(self):
        seen = set()
        for seed in range(200):
            items = ['a', 'b', 'c']
            shuffle_cards(items, random.Random(seed))
            seen.add(tuple(items))
        assert len(seen) == 6


class TestPrioritize:
    def test_weakness_score(self):
        assert weakness_score(card('x', correct=1, wrong=3)) == 2

    def test_sorted_by_descending_score(self):
        cards = [
            card('w1', wrong=2),
            card('strong', correct=1),
            card('w2', wrong=2),
            card('even'),
        ]
        prioritize_weak_cards(cards, random.Random(7))

        assert [weakness_score(c) for c in cards] == [2, 2, 0, -1]
        assert {cards[0]['front'], cards[1]['front']} == {'w1', 'w2'}
        assert cards[2]['front'] == 'even'
        assert cards[3]['front'] == 'strong'

    def test_ties_follow_shuffle(self):
        orders = set()
        for seed in range(50):
            cards = [card('a'), card('b'), card('c')]
            prioritize_weak_cards(cards, random.Random(seed))
            orders.add(tuple(c['front'] for c in cards))
        assert len(orders) > 1

    def test_deterministic_given_seed(self):
        def run():
            cards = [card(str(i), wrong=i % 3) for i in range(12)]
            prioritize_weak_cards(cards, random.Random(3))
            return [c['front'] for c in cards]

        assert run() == run()

    def test_sorts_in_place(self):
        cards = [card('a'), card('b', wrong=1)]
        result = prioritize_weak_cards(cards, random.Random(0))
        assert result is None
        assert cards[0]['front'] == 'b'
