"""
Tests for utils/utils.py — parse_line (pure Python, no Telegram, no DB).
"""
from utils.utils import parse_line


class TestParseLine:
    def test_two_fields(self):
        assert parse_line('x,y') == ['x', 'y']

    def test_single_field(self):
        assert parse_line('only') == ['only']

    def test_quoted_comma(self):
        assert parse_line('a,"b,c",d') == ['a', 'b,c', 'd']

    def test_fields_are_trimmed(self):
        assert parse_line('  Rei ,  Bow  ') == ['Rei', 'Bow']

    def test_quotes_are_dropped(self):
        assert parse_line('"Ippon","Full point"') == ['Ippon', 'Full point']

    def test_doubled_quote_just_toggles_twice(self):
        assert parse_line('say ""hi"",x') == ['say hi', 'x']

    def test_empty_line_yields_one_empty_field(self):
        assert parse_line('') == ['']

    def test_trailing_comma_yields_empty_last_field(self):
        assert parse_line('a,') == ['a', '']

    def test_unbalanced_quote_swallows_rest(self):
        assert parse_line('a,"b,c') == ['a', 'b,c']

    def test_whitespace_inside_quotes_is_trimmed_with_field(self):
        assert parse_line('" padded ",x') == ['padded', 'x']
