"""Application engine for Ream.

Resolves the operator of a procedure call and applies it to already-evaluated
arguments:
- The fixed primitive table is consulted first, by exact operator text.
- Otherwise the operator is looked up in scope; a Closure is called with
  exact arity, and a Primitive bound under another name is called directly.
"""

from ream import EvaluatorFn, Value
from ream.ast import Identifier
from ream.builtin.env_builtin import PRIMITIVES
from ream.errors import EvalError, EvalErrorKind
from ream.types.closure import Closure, Primitive
from ream.types.scope import Scope
from ream.types.span import Span
from ream.types.unit import Unit


def apply_closure(
    fn: Closure,
    operator: Identifier,
    args: list[Value],
    evaluate_fn: EvaluatorFn,
) -> Value:
    """Apply a Closure value.

    The body runs in a fresh child of the captured scope, with formals bound
    positionally. The result is the value of the last body form, or Unit for
    an empty body.
    """
    if len(args) != fn.arity:
        raise EvalError(
            EvalErrorKind.WRONG_ARGUMENT_COUNT,
            operator.span,
            callee=operator.name,
            expected=fn.arity,
            found=len(args),
        )

    call_scope = fn.bind(args)
    result: Value = Unit
    for expr in fn.body:
        result = evaluate_fn(expr, call_scope)
    return result


def apply(
    operator: Identifier,
    args: list[Value],
    arg_spans: list[Span],
    scope: Scope,
    evaluate_fn: EvaluatorFn,
) -> Value:
    primitive = PRIMITIVES.get(operator.name)
    if primitive is not None:
        return primitive(operator.span, args, arg_spans)

    head = scope.get(operator.name)
    if head is None:
        raise EvalError(EvalErrorKind.UNKNOWN_IDENTIFIER, operator.span, found=operator.name)
    if isinstance(head, Closure):
        return apply_closure(head, operator, args, evaluate_fn)
    if isinstance(head, Primitive):
        return head(operator.span, args, arg_spans)
    raise EvalError(EvalErrorKind.NOT_A_FUNCTION, operator.span, found=operator.name)
