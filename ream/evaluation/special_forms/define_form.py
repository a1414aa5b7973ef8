from ream import EvaluatorFn, Value
from ream.ast import Definition
from ream.types.scope import Scope
from ream.types.unit import Unit


def define_form(expr: Definition, scope: Scope, evaluate_fn: EvaluatorFn) -> Value:
    """
    (let name value)
    The value is evaluated in the current scope and bound in the current table,
    shadowing any outer binding of the same name.
    """
    value = evaluate_fn(expr.value, scope)
    scope.set(expr.target.name, value)
    return Unit
