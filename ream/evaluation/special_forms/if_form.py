from ream import EvaluatorFn, Value
from ream.ast import Conditional
from ream.types.scope import Scope
from ream.types.unit import Unit
from ream.types.value import is_truthy


def if_form(expr: Conditional, scope: Scope, evaluate_fn: EvaluatorFn) -> Value:
    if is_truthy(evaluate_fn(expr.test, scope)):
        return evaluate_fn(expr.consequent, scope)
    elif expr.alternate is not None:
        return evaluate_fn(expr.alternate, scope)
    else:
        return Unit  # no else branch
