"""
Tests for utils/constants.py — belt selection from the BELT setting.
"""
from utils.constants import BELTS, CURRENT_BELT, pick_belt


class TestPickBelt:
    def test_enabled_belt(self):
        assert pick_belt('gokyu') == 'gokyu'

    def test_disabled_belt_falls_back(self):
        assert BELTS['shodan']['enabled'] is False
        assert pick_belt('shodan') == 'gokyu'

    def test_unknown_belt_falls_back(self):
        assert pick_belt('judan') == 'gokyu'
        assert pick_belt(None) == 'gokyu'

    def test_current_belt_is_enabled(self):
        assert BELTS[CURRENT_BELT]['enabled'] is True
