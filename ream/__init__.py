# Core type aliases for Ream's data model.
# Runtime values are plain Python objects where the language type maps onto one
# unambiguously (bool, int, float, str, list), and small wrapper classes where it
# does not (Char, Symbol, Atom, Unit, Closure, Primitive). See ream.types.value.

from typing import Any, Callable

# Runtime value alias
Value = Any

# Evaluator function type: passed into special forms and application
EvaluatorFn = Callable[..., Value]

__version__ = "0.1.0"
