"""Helpers that classify, compare and display runtime values.

Type mapping:
    Boolean -> bool          Integer -> int        Float -> float
    Character -> Char        String -> str         Identifier -> Symbol
    Atom -> Atom             List -> list          Primitive -> Primitive
    Closure -> Closure       Unit -> Unit
"""

from __future__ import annotations

from ream import Value
from ream.types.char import Char
from ream.types.closure import Closure, Primitive
from ream.types.symbol import Atom, Symbol
from ream.types.unit import UnitType


def type_name(value: Value) -> str:
    """Return the language-level type name of ``value``."""
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "Boolean"
    if isinstance(value, int):
        return "Integer"
    if isinstance(value, float):
        return "Float"
    if isinstance(value, Char):
        return "Character"
    if isinstance(value, str):
        return "String"
    if isinstance(value, Atom):
        return "Atom"
    if isinstance(value, Symbol):
        return "Identifier"
    if isinstance(value, list):
        return "List"
    if isinstance(value, Primitive):
        return "Primitive"
    if isinstance(value, Closure):
        return "Closure"
    if isinstance(value, UnitType):
        return "Unit"
    raise TypeError(f"Not a Ream value: {value!r}")


def is_integer(value: Value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_truthy(value: Value) -> bool:
    """Booleans are themselves, numbers are true when nonzero, strings and
    lists when non-empty, everything else is always true."""
    match type_name(value):
        case "Boolean":
            return value
        case "Integer" | "Float":
            return value != 0
        case "String" | "List":
            return len(value) > 0
        case _:
            return True


def values_equal(a: Value, b: Value) -> bool:
    """Structural equality that never equates values of different types."""
    if type_name(a) != type_name(b):
        return False
    if isinstance(a, list):
        return len(a) == len(b) and all(values_equal(x, y) for x, y in zip(a, b))
    if isinstance(a, (Closure, Primitive)):
        return a is b
    return a == b


def format_value(value: Value) -> str:
    """Display form used by ``print`` and by the VM trace."""
    match type_name(value):
        case "Boolean":
            return "#t" if value else "#f"
        case "Float":
            return repr(value)
        case "List":
            return "(" + " ".join(format_value(v) for v in value) + ")"
        case "Unit":
            return "#unit"
        case "Primitive" | "Closure":
            return repr(value)
        case _:
            return str(value)


def truncate_div(a: int, b: int) -> int:
    """Integer division rounded toward zero; ``b`` must be nonzero."""
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b >= 0) else -quotient
