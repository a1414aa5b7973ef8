"""Primitive procedures for the Ream runtime.

The primitive table is fixed and keyed by exact operator text. Application
consults it before any scope lookup, so user definitions can never shadow a
primitive in operator position. The same Primitive objects are also bound in
the global scope so that they can be passed around as values.

Every primitive receives already-evaluated arguments and checks its own arity
and operand types, reporting errors at the span of the offending operand.
"""
from __future__ import annotations

import operator
import sys
from contextvars import ContextVar
from typing import Callable, Optional, TextIO

from ream import Value
from ream.errors import EvalError, EvalErrorKind
from ream.types.closure import Primitive, PrimitiveFn
from ream.types.scope import Scope
from ream.types.span import Span
from ream.types.unit import Unit
from ream.types.value import format_value, is_integer, truncate_div, type_name, values_equal

# Stream written by `print`; unset means sys.stdout at call time
OUTPUT: ContextVar[Optional[TextIO]] = ContextVar("ream_output", default=None)


def expect_args(span: Span, name: str, args: list[Value], count: int) -> None:
    if len(args) != count:
        raise EvalError(
            EvalErrorKind.WRONG_ARGUMENT_COUNT,
            span,
            callee=name,
            expected=count,
            found=len(args),
        )


def numeric_pair(args: list[Value], arg_spans: list[Span]) -> tuple[Value, Value]:
    """Return both operands if they are numbers of the same subtype.

    The left operand decides the expected subtype; mixed operands are never coerced.
    """
    a, b = args
    if is_integer(a):
        expected = "Integer"
        ok = is_integer(b)
    elif isinstance(a, float):
        expected = "Float"
        ok = isinstance(b, float)
    else:
        raise EvalError(
            EvalErrorKind.WRONG_TYPE, arg_spans[0], expected="Integer or Float", found=type_name(a)
        )
    if not ok:
        raise EvalError(EvalErrorKind.WRONG_TYPE, arg_spans[1], expected=expected, found=type_name(b))
    return a, b


# -------------------------------
# Arithmetic
# -------------------------------
def divide(span: Span, name: str, a: Value, b: Value) -> Value:
    """Float division, or integer division truncated toward zero."""
    if b == 0:
        raise EvalError(EvalErrorKind.DIVISION_BY_ZERO, span, callee=name)
    if isinstance(a, float):
        return a / b
    return truncate_div(a, b)


def binary(op: Callable[[Value, Value], Value]) -> PrimitiveFn:
    """Wrap a two-operand numeric operation as a primitive."""

    def primitive(span: Span, name: str, args: list[Value], arg_spans: list[Span]) -> Value:
        expect_args(span, name, args, 2)
        a, b = numeric_pair(args, arg_spans)
        return op(a, b)

    return primitive


def div(span: Span, name: str, args: list[Value], arg_spans: list[Span]) -> Value:
    expect_args(span, name, args, 2)
    a, b = numeric_pair(args, arg_spans)
    return divide(span, name, a, b)


# -------------------------------
# Comparison
# -------------------------------
def equals(span: Span, name: str, args: list[Value], arg_spans: list[Span]) -> bool:
    """Structural equality; values of different types are never equal."""
    expect_args(span, name, args, 2)
    return values_equal(*args)


def not_equals(span: Span, name: str, args: list[Value], arg_spans: list[Span]) -> bool:
    return not equals(span, name, args, arg_spans)


# -------------------------------
# Output
# -------------------------------
def print_(span: Span, name: str, args: list[Value], arg_spans: list[Span]) -> Value:
    """Write the display form of each argument, space separated, then a newline."""
    out = OUTPUT.get() or sys.stdout
    out.write(" ".join(format_value(a) for a in args) + "\n")
    return Unit


PRIMITIVE_FNS: dict[str, PrimitiveFn] = {
    "+": binary(operator.add),
    "-": binary(operator.sub),
    "*": binary(operator.mul),
    "/": div,
    "==": equals,
    "!=": not_equals,
    ">": binary(operator.gt),
    ">=": binary(operator.ge),
    "<": binary(operator.lt),
    "<=": binary(operator.le),
    "print": print_,
}

PRIMITIVES: dict[str, Primitive] = {name: Primitive(name, fn) for name, fn in PRIMITIVE_FNS.items()}


def register(scope: Scope) -> None:
    """Bind every primitive in ``scope`` under its operator text."""
    scope.update(PRIMITIVES)
