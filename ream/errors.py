"""Error types for every layer of Ream.

Each error carries a span, a kind (one Enum per layer) and a formatted message.
Rendering against a Source gives a plain-text diagnostic; colouring and other
presentation is left to the host.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar, Optional, Sequence

from ream.source import Source
from ream.types.span import Span

NON_DECIMAL_FLOAT_LITERAL = (
    "this number appears to be a float, however floats can only be created using decimal notation"
)
BOOLEAN_LITERAL_HELP = "valid boolean literals are `#t`, `#true`, `#f`, and `#false`"


def format_expected(expected: Sequence[Any]) -> str:
    """Shape an expected-items list: "`A`" for one item, "one of `A`, `B`" for several."""
    if len(expected) == 1:
        return f"`{expected[0]}`"
    return "one of " + ", ".join(f"`{e}`" for e in expected)


class LexErrorKind(Enum):
    UNEXPECTED_EOF = "unexpected_eof"
    UNEXPECTED_SYMBOL = "unexpected_symbol"
    INVALID_BOOLEAN = "invalid_boolean"
    INVALID_ESCAPE = "invalid_escape"
    INVALID_NUMBER = "invalid_number"
    UNKNOWN_SYMBOL = "unknown_symbol"


class ParseErrorKind(Enum):
    UNEXPECTED_EOF = "unexpected_eof"
    UNEXPECTED_TOKEN = "unexpected_token"
    INVALID_EXPRESSION = "invalid_expression"
    INVALID_ANNOTATION = "invalid_annotation"
    INVALID_DATUM = "invalid_datum"
    INVALID_LAMBDA_FORMALS = "invalid_lambda_formals"


class EvalErrorKind(Enum):
    UNKNOWN_IDENTIFIER = "unknown_identifier"
    NOT_A_FUNCTION = "not_a_function"
    WRONG_ARGUMENT_COUNT = "wrong_argument_count"
    WRONG_TYPE = "wrong_type"
    DIVISION_BY_ZERO = "division_by_zero"
    UNSUPPORTED = "unsupported"


class InterpretErrorKind(Enum):
    WRONG_TYPE = "wrong_type"
    STACK_OVERFLOW = "stack_overflow"
    STACK_UNDERFLOW = "stack_underflow"
    DIVISION_BY_ZERO = "division_by_zero"
    INTEGER_OVERFLOW = "integer_overflow"
    INVALID_CONSTANT = "invalid_constant"


class ReamError(Exception):
    """ Base class for all Ream errors"""

    layer: ClassVar[str] = "error"
    messages: ClassVar[dict[Enum, str]] = {}

    def __init__(
        self,
        kind: Enum,
        span: Span,
        *,
        found: Any = None,
        expected: Any = None,
        callee: Optional[str] = None,
        help: Optional[str] = None,
    ):
        self.kind = kind
        self.span = span
        self.found = found
        self.expected = expected
        self.callee = callee
        self.help = help
        self.message = self._format_message()
        super().__init__(self.message)

    def _format_message(self) -> str:
        expected = self.expected
        if isinstance(expected, (list, tuple)):
            expected = format_expected(expected)
        return self.messages[self.kind].format(found=self.found, expected=expected, callee=self.callee)

    @property
    def code(self) -> str:
        return f"ream::{self.layer}::{self.kind.value}"

    def render(self, source: Source) -> str:
        """Plain-text diagnostic pointing at this error's span in ``source``."""
        line, col = source.location(self.span.offset)
        text = source.line_text(line)
        gutter = len(str(line))
        width = max(1, min(self.span.length, len(text) - col + 1))
        pad = " " * gutter
        out = [
            f"error[{self.code}]: {self.message}",
            f"{pad}--> {source.name}:{line}:{col}",
            f"{pad} |",
            f"{line} | {text}",
            f"{pad} | {' ' * (col - 1)}{'^' * width}",
        ]
        if self.help:
            out.append(f"{pad} = help: {self.help}")
        return "\n".join(out)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind.name}, {self.span!r}, {self.message!r})"


class LexError(ReamError):
    """ Raised when the source text cannot be split into tokens"""

    layer = "lex_error"
    messages = {
        LexErrorKind.UNEXPECTED_EOF: "Unexpected end-of-file",
        LexErrorKind.UNEXPECTED_SYMBOL: "Unexpected Symbol: found {found!r}, expected {expected}",
        LexErrorKind.INVALID_BOOLEAN: "Invalid Boolean: {found!r}",
        LexErrorKind.INVALID_ESCAPE: "Invalid Escape Sequence: {found!r}",
        LexErrorKind.INVALID_NUMBER: "Invalid Number: {found!r}",
        LexErrorKind.UNKNOWN_SYMBOL: "Unknown Symbol: {found!r}",
    }


class ParseError(ReamError):
    """ Raised when the token stream does not match the grammar"""

    layer = "parse_error"
    messages = {
        ParseErrorKind.UNEXPECTED_EOF: "Unexpected end-of-file",
        ParseErrorKind.UNEXPECTED_TOKEN: "Unexpected Token: found `{found}`, expected {expected}",
        ParseErrorKind.INVALID_EXPRESSION: "Invalid Expression: found `{found}`, expected {expected}",
        ParseErrorKind.INVALID_ANNOTATION: "Invalid Annotation Type: found `{found}`, expected {expected}",
        ParseErrorKind.INVALID_DATUM: "Invalid Datum: found `{found}`, expected {expected}",
        ParseErrorKind.INVALID_LAMBDA_FORMALS: "Invalid Lambda Formals: found `{found}`, expected {expected}",
    }


class EvalError(ReamError):
    """ Raised when a well-formed program fails while being evaluated"""

    layer = "eval_error"
    messages = {
        EvalErrorKind.UNKNOWN_IDENTIFIER: "Could not find value for `{found}` in this scope",
        EvalErrorKind.NOT_A_FUNCTION: "`{found}` is not a function",
        EvalErrorKind.WRONG_ARGUMENT_COUNT: "`{callee}` takes {expected} arguments, got {found}",
        EvalErrorKind.WRONG_TYPE: "Wrong Type: expected {expected}, found {found}",
        EvalErrorKind.DIVISION_BY_ZERO: "Division by zero in `{callee}`",
        EvalErrorKind.UNSUPPORTED: "`{found}` expressions cannot be evaluated yet",
    }


class InterpretError(ReamError):
    """ Raised by the virtual machine while executing a chunk"""

    layer = "runtime_error"
    messages = {
        InterpretErrorKind.WRONG_TYPE: "Wrong Type: expected {expected}, found {found}",
        InterpretErrorKind.STACK_OVERFLOW: "Stack overflow: capacity is {expected} values",
        InterpretErrorKind.STACK_UNDERFLOW: "Stack underflow",
        InterpretErrorKind.DIVISION_BY_ZERO: "Division by zero",
        InterpretErrorKind.INTEGER_OVERFLOW: "Integer overflow: {found} does not fit in 64 bits",
        InterpretErrorKind.INVALID_CONSTANT: "Invalid constant index {found}",
    }
