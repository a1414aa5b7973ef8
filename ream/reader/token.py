"""Ream tokens."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from ream.types.span import Span


class TokenKind(Enum):
    # The value is the display name used in error messages
    IDENTIFIER = "Identifier"

    QUOTE = "quote"
    LET = "let"
    FN = "fn"
    LAMBDA = "lambda"
    SEQ = "seq"
    BEGIN = "begin"
    IF = "if"
    INCLUDE = "include"

    BOTTOM = "Bottom"
    TUPLE = "Tuple"
    LIST = "List"
    VECTOR = "Vector"
    FUNCTION = "Function"
    SUM = "Sum"
    PRODUCT = "Product"

    BOOLEAN = "Boolean"
    INTEGER = "Integer"
    FLOAT = "Float"
    CHARACTER = "Character"
    STRING = "String"
    ATOM = "Atom"

    LEFT_PAREN = "("
    RIGHT_PAREN = ")"
    PERIOD = "."
    BACKTICK = "`"

    EOF = "end-of-file"

    def __str__(self) -> str:
        return self.value


KEYWORDS: dict[str, TokenKind] = {
    "quote": TokenKind.QUOTE,
    "let": TokenKind.LET,
    "fn": TokenKind.FN,
    "lambda": TokenKind.LAMBDA,
    "seq": TokenKind.SEQ,
    "begin": TokenKind.BEGIN,
    "if": TokenKind.IF,
    "include": TokenKind.INCLUDE,
    "Bottom": TokenKind.BOTTOM,
    "Tuple": TokenKind.TUPLE,
    "List": TokenKind.LIST,
    "Vector": TokenKind.VECTOR,
    "Function": TokenKind.FUNCTION,
    "Sum": TokenKind.SUM,
    "Product": TokenKind.PRODUCT,
}

TYPE_KEYWORDS: frozenset[TokenKind] = frozenset(
    {
        TokenKind.BOTTOM,
        TokenKind.TUPLE,
        TokenKind.LIST,
        TokenKind.VECTOR,
        TokenKind.FUNCTION,
        TokenKind.SUM,
        TokenKind.PRODUCT,
    }
)

LITERAL_KINDS: frozenset[TokenKind] = frozenset(
    {
        TokenKind.BOOLEAN,
        TokenKind.INTEGER,
        TokenKind.FLOAT,
        TokenKind.CHARACTER,
        TokenKind.STRING,
        TokenKind.ATOM,
    }
)


@dataclass(frozen=True)
class Token:
    """A single lexeme: its kind, its decoded value (if any) and where it came from.

    Values: identifier and keyword text, bool, int, float, the one-character
    str of a character literal, the decoded str of a string literal, and the
    atom text including its leading colon.
    """

    span: Span
    kind: TokenKind
    value: Any = None


def eof_token(span: Span) -> Token:
    return Token(span, TokenKind.EOF)
