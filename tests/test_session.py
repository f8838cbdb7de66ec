"""
Tests for utils/session.py — saved drill position on a temp SQLite store.
"""
import json
import sqlite3

import database.database as db
from utils import session as session_mod
from utils.constants import Category
from utils.session import (
    clear_session, load_session, restore_order, save_session, session_key, session_progress,
)


def card(front):
    return {'front': front, 'back': front.lower(), 'correct': 0, 'wrong': 0}


def fronts(cards):
    return [c['front'] for c in cards]


def _raise(*args, **kwargs):
    raise sqlite3.OperationalError('database is locked')


class TestSessionKey:
    def test_pattern(self):
        assert session_key('gokyu', 'recite') == 'flashcard_session_gokyu_recite'

    def test_accepts_enum(self):
        assert session_key('gokyu', Category.ALL) == 'flashcard_session_gokyu_all'


class TestPersistence:
    def test_save_and_load(self, tdb):
        save_session('gokyu', 'recite', 1, ['A', 'B', 'C'])
        assert load_session('gokyu', 'recite') == {'currentIndex': 1, 'cardOrder': ['A', 'B', 'C']}

    def test_stored_as_json_with_camel_case_keys(self, tdb):
        save_session('gokyu', 'perform', 0, ['X'])
        raw = json.loads(db.get_value('flashcard_session_gokyu_perform'))
        assert raw == {'currentIndex': 0, 'cardOrder': ['X']}

    def test_missing_returns_none(self, tdb):
        assert load_session('gokyu', 'all') is None

    def test_categories_are_separate(self, tdb):
        save_session('gokyu', 'recite', 3, ['A'])
        assert load_session('gokyu', 'perform') is None

    def test_save_overwrites(self, tdb):
        save_session('gokyu', 'recite', 0, ['A', 'B'])
        save_session('gokyu', 'recite', 1, ['B', 'A'])
        assert load_session('gokyu', 'recite') == {'currentIndex': 1, 'cardOrder': ['B', 'A']}

    def test_corrupt_returns_none(self, tdb):
        db.set_value(session_key('gokyu', 'recite'), '{oops')
        assert load_session('gokyu', 'recite') is None

    def test_non_object_returns_none(self, tdb):
        db.set_value(session_key('gokyu', 'recite'), '"just a string"')
        assert load_session('gokyu', 'recite') is None

    def test_clear(self, tdb):
        save_session('gokyu', 'recite', 0, ['A'])
        clear_session('gokyu', 'recite')
        assert load_session('gokyu', 'recite') is None

    def test_store_failures_never_raise(self, tdb, monkeypatch):
        monkeypatch.setattr(session_mod.db, 'set_value', _raise)
        monkeypatch.setattr(session_mod.db, 'get_value', _raise)
        monkeypatch.setattr(session_mod.db, 'remove_value', _raise)
        save_session('gokyu', 'recite', 0, ['A'])
        assert load_session('gokyu', 'recite') is None
        clear_session('gokyu', 'recite')


class TestRestoreOrder:
    def test_reproduces_saved_order(self):
        cards = [card('C'), card('A'), card('B')]
        restored, index = restore_order(cards, {'cardOrder': ['A', 'B', 'C'], 'currentIndex': 1})
        assert fronts(restored) == ['A', 'B', 'C']
        assert index == 2

    def test_removed_card_clamps_cursor(self):
        cards = [card('C'), card('A')]
        restored, index = restore_order(cards, {'cardOrder': ['A', 'B', 'C'], 'currentIndex': 1})
        assert fronts(restored) == ['A', 'C']
        assert index == 1

    def test_unseen_cards_go_last_in_source_order(self):
        cards = [card('E'), card('C'), card('D'), card('A')]
        restored, _ = restore_order(cards, {'cardOrder': ['A', 'B', 'C'], 'currentIndex': 0})
        assert fronts(restored) == ['A', 'C', 'E', 'D']

    def test_finished_deck_stays_on_last_card(self):
        cards = [card('A'), card('B')]
        _, index = restore_order(cards, {'cardOrder': ['A', 'B'], 'currentIndex': 1})
        assert index == 1

    def test_empty_deck(self):
        restored, index = restore_order([], {'cardOrder': ['A'], 'currentIndex': 0})
        assert restored == []
        assert index == -1

    def test_non_string_fronts_in_saved_order_are_ignored(self):
        cards = [card('A'), card('B')]
        restored, index = restore_order(cards, {'cardOrder': [['A'], {'x': 1}, 'B'], 'currentIndex': 0})
        assert fronts(restored) == ['B', 'A']
        assert index == 1

    def test_non_list_saved_order(self):
        cards = [card('A'), card('B')]
        restored, _ = restore_order(cards, {'cardOrder': 'AB', 'currentIndex': 0})
        assert fronts(restored) == ['A', 'B']


class TestSessionProgress:
    def test_no_session(self, tdb):
        assert session_progress('gokyu', 'recite') == 0.0

    def test_counts_card_after_last_reached(self, tdb):
        save_session('gokyu', 'recite', 1, ['A', 'B', 'C', 'D'])
        assert session_progress('gokyu', 'recite') == 50.0

    def test_empty_order(self, tdb):
        save_session('gokyu', 'recite', 0, [])
        assert session_progress('gokyu', 'recite') == 0.0
