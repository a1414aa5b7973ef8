from ream import EvaluatorFn, Value
from ream.ast import Sequence
from ream.types.scope import Scope
from ream.types.unit import Unit


def seq_form(expr: Sequence, scope: Scope, evaluate_fn: EvaluatorFn) -> Value:
    """(seq e1 e2 ...) evaluates its body in one shared child scope."""
    frame = Scope.extend(scope)
    result: Value = Unit
    for e in expr.body:
        result = evaluate_fn(e, frame)
    return result
