"""Tree-walking evaluator for Ream.

Evaluates span-annotated AST nodes against a chained Scope. Special forms are
dispatched through SPECIAL_FORMS; procedure calls evaluate their operands
left to right in the caller's scope before application.
"""

from __future__ import annotations

import logging
from typing import Optional, TextIO

from ream import Value
from ream import ast
from ream.builtin.env_builtin import OUTPUT, register
from ream.errors import EvalError, EvalErrorKind
from ream.evaluation.apply import apply
from ream.evaluation.special_forms import SPECIAL_FORMS, quote_form
from ream.types.char import Char
from ream.types.scope import Scope
from ream.types.symbol import Atom

logger = logging.getLogger(__name__)


def literal_value(expr: ast.Literal) -> Value:
    match expr.kind:
        case ast.LiteralKind.CHARACTER:
            return Char(expr.value)
        case ast.LiteralKind.ATOM:
            return Atom(expr.value)
        case _:
            return expr.value


def evaluate(expr: ast.Expression, scope: Scope) -> Value:
    """Evaluate a single expression in ``scope``."""
    match expr:
        case ast.Identifier(name=name):
            found = scope.find(name)
            if found is None:
                raise EvalError(EvalErrorKind.UNKNOWN_IDENTIFIER, expr.span, found=name)
            return found.vars[name]

        case ast.Literal(kind=ast.LiteralKind.QUOTATION):
            return quote_form(expr, scope, evaluate)

        case ast.Literal():
            return literal_value(expr)

        case ast.ProcedureCall(operator=operator, operands=operands):
            args = [evaluate(arg, scope) for arg in operands]
            return apply(operator, args, [arg.span for arg in operands], scope, evaluate)

        case ast.TypeAlias() | ast.AlgebraicTypeDefinition() | ast.Annotation() | ast.Inclusion():
            # Parsed but never evaluated
            raise EvalError(EvalErrorKind.UNSUPPORTED, expr.span, found=expr.kind_name)

    return SPECIAL_FORMS[type(expr)](expr, scope, evaluate)


def global_scope() -> Scope:
    """A fresh root scope seeded with the primitive table."""
    scope = Scope()
    register(scope)
    return scope


def run_program(program: ast.Program, out: Optional[TextIO] = None) -> list[Value]:
    """Evaluate every top-level form in one fresh global scope, left to right."""
    return run_in_scope(program, global_scope(), out)


def run_in_scope(program: ast.Program, scope: Scope, out: Optional[TextIO] = None) -> list[Value]:
    logger.debug("evaluating %d top-level forms", len(program))
    token = OUTPUT.set(out)
    try:
        return [evaluate(expr, scope) for expr in program]
    finally:
        OUTPUT.reset(token)
