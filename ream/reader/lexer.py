"""
  Ream Lexer

- Single pass over the source with one character of lookahead
- Lazy: tokens are produced one at a time as the parser pulls them
- Spans are absolute character offsets into the source string
- Whitespace and `;` line comments are skipped, never tokenized
- No recovery: a LexError describes the token that failed; the lexer has
  already moved past the offending text, so a caller may keep pulling
"""

from __future__ import annotations

import string
from typing import Callable, Iterator, Optional

from ream.errors import (
    BOOLEAN_LITERAL_HELP,
    NON_DECIMAL_FLOAT_LITERAL,
    LexError,
    LexErrorKind,
)
from ream.reader.token import KEYWORDS, Token, TokenKind
from ream.types.span import Span

U64_MAX = (1 << 64) - 1

PUNCTUATION: dict[str, TokenKind] = {
    "(": TokenKind.LEFT_PAREN,
    ")": TokenKind.RIGHT_PAREN,
    ".": TokenKind.PERIOD,
    "`": TokenKind.BACKTICK,
}

CHAR_ESCAPES: dict[str, str] = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "\\": "\\",
    "0": "\0",
    "'": "'",
}

# Strings additionally allow an escaped double quote
STRING_ESCAPES: dict[str, str] = {**CHAR_ESCAPES, '"': '"'}

BOOLEANS: dict[str, bool] = {"#t": True, "#true": True, "#f": False, "#false": False}

RADIX_PREFIXES: dict[str, int] = {"0x": 16, "0o": 8, "0b": 2}

RADIX_DIGITS: dict[int, frozenset[str]] = {
    2: frozenset("01"),
    8: frozenset(string.octdigits),
    10: frozenset(string.digits),
    16: frozenset(string.hexdigits),
}

NUMBER_CHARS = frozenset(string.hexdigits + "xXoO_.")
ID_EXTRA_START = frozenset("!$%&*/<=>?^_~:+-")
ID_EXTRA_CONTINUE = frozenset(".@")
DELIMITERS = frozenset("()\"';`")


def is_id_start(c: str) -> bool:
    # str.isidentifier() is XID_Start (plus "_") for a single character
    return c.isidentifier() or c in ID_EXTRA_START


def is_id_continue(c: str) -> bool:
    return is_id_start(c) or ("_" + c).isidentifier() or c.isnumeric() or c in ID_EXTRA_CONTINUE


def is_delimiter(c: str) -> bool:
    return c.isspace() or c in DELIMITERS


class Lexer:
    """A lexer for a single source text; iterate it to pull tokens."""

    def __init__(self, source: str):
        self.source = source
        self.len = len(source)
        # Start of the current token
        self.start = 0
        # Index of the next unconsumed character
        self.idx = 0

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        token = self.next_token()
        if token is None:
            raise StopIteration
        return token

    # --- Character cursor ---
    def peek(self) -> Optional[str]:
        return self.source[self.idx] if self.idx < self.len else None

    def advance(self) -> Optional[str]:
        if self.idx >= self.len:
            return None
        c = self.source[self.idx]
        self.idx += 1
        return c

    def take_while(self, pred: Callable[[str], bool]) -> str:
        """Consume while ``pred`` holds; return the text from the token start."""
        while self.idx < self.len and pred(self.source[self.idx]):
            self.idx += 1
        return self.source[self.start:self.idx]

    def span(self) -> Span:
        return Span(self.start, self.idx - self.start)

    def eof(self) -> LexError:
        return LexError(LexErrorKind.UNEXPECTED_EOF, Span(self.idx, 0))

    def skip_trivia(self) -> None:
        while (c := self.peek()) is not None:
            if c == ";":
                while (c := self.peek()) is not None and c != "\n":
                    self.idx += 1
            elif c.isspace():
                self.idx += 1
            else:
                return

    # --- Tokens ---
    def next_token(self) -> Optional[Token]:
        """Lex one token. Returns None once the input is exhausted."""
        self.skip_trivia()
        self.start = self.idx
        c = self.advance()
        if c is None:
            return None

        if c in PUNCTUATION:
            return Token(self.span(), PUNCTUATION[c])
        if c == ":":
            return self.make_atom()
        if c == "#":
            return self.make_boolean()
        if c == "'":
            return self.make_character()
        if c == '"':
            return self.make_string()
        if c in string.digits:
            return self.make_number()
        if is_id_start(c):
            return self.make_identifier()
        raise LexError(LexErrorKind.UNKNOWN_SYMBOL, self.span(), found=c)

    def make_atom(self) -> Token:
        atom = self.take_while(lambda c: not is_delimiter(c))
        return Token(self.span(), TokenKind.ATOM, atom)

    def make_boolean(self) -> Token:
        nxt = self.peek()
        if nxt is None:
            raise self.eof()
        if nxt not in ("t", "f"):
            self.idx += 1
            raise LexError(
                LexErrorKind.UNEXPECTED_SYMBOL,
                Span(self.start, 1),
                found=nxt,
                expected=["t", "f"],
            )
        raw = self.take_while(lambda c: not is_delimiter(c))
        if raw not in BOOLEANS:
            raise LexError(
                LexErrorKind.INVALID_BOOLEAN, self.span(), found=raw, help=BOOLEAN_LITERAL_HELP
            )
        return Token(self.span(), TokenKind.BOOLEAN, BOOLEANS[raw])

    def make_character(self) -> Token:
        """Lex ``'c'`` or ``'\\e'`` where e is one of ``n r t \\ 0 '``."""
        chr_ = self.advance()
        if chr_ is None:
            raise self.eof()

        if chr_ == "\\":
            escaped = self.advance()
            if escaped is None:
                raise self.eof()
            self._expect_char_close()
            if escaped not in CHAR_ESCAPES:
                raise LexError(
                    LexErrorKind.INVALID_ESCAPE, Span(self.start + 1, 2), found="\\" + escaped
                )
            return Token(self.span(), TokenKind.CHARACTER, CHAR_ESCAPES[escaped])

        self._expect_char_close()
        return Token(self.span(), TokenKind.CHARACTER, chr_)

    def _expect_char_close(self) -> None:
        close = self.advance()
        if close is None:
            raise self.eof()
        if close != "'":
            raise LexError(
                LexErrorKind.UNEXPECTED_SYMBOL,
                Span(self.idx - 1, 1),
                found=close,
                expected=["'"],
            )

    def make_string(self) -> Token:
        """Lex up to the first ``"`` not escaped by a backslash."""
        chars: list[str] = []
        while True:
            c = self.advance()
            if c is None:
                raise self.eof()
            if c == '"':
                break
            if c == "\\":
                escaped = self.advance()
                if escaped is None:
                    raise self.eof()
                # Unknown escapes are kept as written
                chars.append(STRING_ESCAPES.get(escaped, "\\" + escaped))
            else:
                chars.append(c)
        return Token(self.span(), TokenKind.STRING, "".join(chars))

    def make_number(self) -> Token:
        """Lex a decimal, hex, octal or binary u64, or a decimal f64."""
        raw = self.take_while(lambda c: c in NUMBER_CHARS).replace("_", "")
        span = self.span()

        prefix = raw[:2]
        if prefix in RADIX_PREFIXES and "." in raw:
            raise LexError(
                LexErrorKind.INVALID_NUMBER, span, found=raw, help=NON_DECIMAL_FLOAT_LITERAL
            )

        if "." in raw:
            try:
                return Token(span, TokenKind.FLOAT, float(raw))
            except ValueError:
                raise LexError(LexErrorKind.INVALID_NUMBER, span, found=raw) from None

        base = RADIX_PREFIXES.get(prefix, 10)
        digits = raw[2:] if base != 10 else raw
        if not digits or not set(digits) <= RADIX_DIGITS[base]:
            raise LexError(LexErrorKind.INVALID_NUMBER, span, found=raw)
        value = int(digits, base)
        if value > U64_MAX:
            raise LexError(LexErrorKind.INVALID_NUMBER, span, found=raw)
        return Token(span, TokenKind.INTEGER, value)

    def make_identifier(self) -> Token:
        raw = self.take_while(is_id_continue)
        return Token(self.span(), KEYWORDS.get(raw, TokenKind.IDENTIFIER), raw)


def lex(source: str) -> Iterator[Token]:
    """Token generator over ``source``."""
    yield from Lexer(source)


def tokenize(source: str) -> list[Token]:
    return list(Lexer(source))
