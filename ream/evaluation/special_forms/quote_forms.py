"""Quotation: turning parsed data into runtime values without evaluating it."""

from ream import EvaluatorFn, Value
from ream.ast import Datum, DatumKind, Literal
from ream.types.char import Char
from ream.types.scope import Scope
from ream.types.symbol import Atom, Symbol


def datum_to_value(datum: Datum) -> Value:
    """Convert a Datum to the equivalent value; identifiers become Symbols, never lookups."""
    match datum.kind:
        case DatumKind.LIST:
            return [datum_to_value(d) for d in datum.value]
        case DatumKind.IDENTIFIER:
            return Symbol(datum.value)
        case DatumKind.ATOM:
            return Atom(datum.value)
        case DatumKind.CHARACTER:
            return Char(datum.value)
        case _:
            return datum.value


def quote_form(expr: Literal, scope: Scope, _: EvaluatorFn) -> Value:
    """(quote datum) or `datum"""
    return datum_to_value(expr.value)
