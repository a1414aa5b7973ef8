from ream.types.span import Span
from ream.types.symbol import Symbol, Atom
from ream.types.char import Char
from ream.types.unit import Unit, UnitType
from ream.types.scope import Scope
from ream.types.closure import Closure, Primitive, PrimitiveFn
from ream.types.value import (
    type_name,
    is_integer,
    is_truthy,
    values_equal,
    format_value,
    truncate_div,
)

__all__ = [
    "Span",
    "Symbol",
    "Atom",
    "Char",
    "Unit",
    "UnitType",
    "Scope",
    "Closure",
    "Primitive",
    "PrimitiveFn",
    "type_name",
    "is_integer",
    "is_truthy",
    "values_equal",
    "format_value",
    "truncate_div",
]
