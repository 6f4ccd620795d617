"""Tests for the flat token stream."""

from csscalc.tokens import Token, TokenType, tokenize


def _pairs(text):
    return [(t.type, t.value) for t in tokenize(text)]


class TestTokenize:
    def test_calc_expression(self):
        assert _pairs("calc(1px + 2%)") == [
            (TokenType.FUNCTION, "calc("),
            (TokenType.DIMENSION, "1px"),
            (TokenType.WHITESPACE, " "),
            (TokenType.OTHER, "+"),
            (TokenType.WHITESPACE, " "),
            (TokenType.OTHER, "2%"),
            (TokenType.PAREN_CLOSE, ")"),
            (TokenType.EOF, ""),
        ]

    def test_dimension_fields(self):
        token = tokenize("1.5EM")[0]
        assert token == Token(TokenType.DIMENSION, "1.5em", number=1.5, unit="em")

    def test_parentheses(self):
        assert _pairs("(1)") == [
            (TokenType.PAREN_OPEN, "("),
            (TokenType.OTHER, "1"),
            (TokenType.PAREN_CLOSE, ")"),
            (TokenType.EOF, ""),
        ]

    def test_nested_functions(self):
        types = [t.type for t in tokenize("max(calc(1px), 2px)")]
        assert types.count(TokenType.FUNCTION) == 2
        assert types.count(TokenType.PAREN_CLOSE) == 2

    def test_comment_kept(self):
        assert (TokenType.COMMENT, "/* x */") in _pairs("1px /* x */")

    def test_empty_input(self):
        assert _pairs("") == [(TokenType.EOF, "")]
