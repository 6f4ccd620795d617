"""Flat CSS token stream built on top of tinycss2 component values."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import tinycss2
from tinycss2 import ast


class TokenType(str, Enum):
    DIMENSION = "dimension"
    FUNCTION = "function"
    PAREN_OPEN = "paren-open"
    PAREN_CLOSE = "paren-close"
    WHITESPACE = "whitespace"
    COMMENT = "comment"
    EOF = "eof"
    OTHER = "other"


@dataclass(frozen=True)
class Token:
    """One flat token: raw text plus, for dimensions, the decoded number and unit."""

    type: TokenType
    value: str
    number: float | None = None
    unit: str | None = None


_BRACKETS = {
    "[] block": ("[", "]"),
    "{} block": ("{", "}"),
}


def tokenize(text: str) -> list[Token]:
    """Tokenize CSS text into a flat list ending with an EOF token.

    Function and parenthesis blocks are unrolled into an opening token
    (``name(`` or ``(``), their contents, and a ``)`` token.
    """
    nodes = tinycss2.parse_component_value_list(text, skip_comments=False)
    tokens: list[Token] = []
    _flatten(nodes, tokens)
    tokens.append(Token(TokenType.EOF, ""))
    return tokens


def _flatten(nodes: list, out: list[Token]) -> None:
    for node in nodes:
        if isinstance(node, ast.WhitespaceToken):
            out.append(Token(TokenType.WHITESPACE, node.value))
        elif isinstance(node, ast.Comment):
            out.append(Token(TokenType.COMMENT, f"/*{node.value}*/"))
        elif isinstance(node, ast.DimensionToken):
            out.append(
                Token(
                    TokenType.DIMENSION,
                    f"{node.representation}{node.lower_unit}",
                    number=float(node.value),
                    unit=node.lower_unit,
                )
            )
        elif isinstance(node, ast.FunctionBlock):
            out.append(Token(TokenType.FUNCTION, f"{node.name}("))
            _flatten(node.arguments, out)
            out.append(Token(TokenType.PAREN_CLOSE, ")"))
        elif isinstance(node, ast.ParenthesesBlock):
            out.append(Token(TokenType.PAREN_OPEN, "("))
            _flatten(node.content, out)
            out.append(Token(TokenType.PAREN_CLOSE, ")"))
        elif node.type in _BRACKETS:
            start, end = _BRACKETS[node.type]
            out.append(Token(TokenType.OTHER, start))
            _flatten(node.content, out)
            out.append(Token(TokenType.OTHER, end))
        elif isinstance(node, ast.ParseError):
            if node.kind == ")":
                out.append(Token(TokenType.PAREN_CLOSE, ")"))
            elif node.kind in ("]", "}"):
                out.append(Token(TokenType.OTHER, node.kind))
        else:
            out.append(Token(TokenType.OTHER, tinycss2.serialize([node])))
