from ream import EvaluatorFn, Value
from ream.ast import LambdaExpression
from ream.types.closure import Closure
from ream.types.scope import Scope


def lambda_form(expr: LambdaExpression, scope: Scope, _: EvaluatorFn) -> Value:
    # The body is not evaluated here. The closure captures a snapshot of the
    # defining scope, so definitions made after this point are not visible to it.
    return Closure(expr.formals, expr.body, scope.close())
