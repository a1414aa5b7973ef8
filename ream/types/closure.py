"""Closure and primitive procedure representations for Ream."""

from __future__ import annotations

from io import StringIO
from typing import Callable, TYPE_CHECKING

from ream import Value
from ream.types.scope import Scope
from ream.types.span import Span

if TYPE_CHECKING:
    from ream.ast import Expression, Identifier


class Closure:
    """A lambda's formals and body paired with a snapshot of its defining scope.

    Several closures created in the same scope state may share one snapshot;
    nothing mutates a snapshot after ``Scope.close`` builds it.
    """

    __slots__ = ("formals", "body", "scope")

    def __init__(
        self,
        formals: tuple[Identifier, ...],
        body: tuple[Expression, ...],
        scope: Scope,
    ):
        self.formals = tuple(formals)
        self.body = tuple(body)
        self.scope: Scope = scope

    @property
    def arity(self) -> int:
        return len(self.formals)

    def bind(self, args: list[Value]) -> Scope:
        """Return a fresh child of the captured scope with formals bound positionally."""
        call_scope = Scope.extend(self.scope)
        for formal, arg in zip(self.formals, args):
            call_scope.set(formal.name, arg)
        return call_scope

    def __str__(self) -> str:
        with StringIO() as buffer:
            buffer.write("(lambda (")
            buffer.write(" ".join(f.name for f in self.formals))
            buffer.write(") ...)")
            return buffer.getvalue()

    def __repr__(self) -> str:
        return f"<closure {self}>"


# (call span, callee name, evaluated args, operand spans) -> value
PrimitiveFn = Callable[[Span, str, list[Value], list[Span]], Value]


class Primitive:
    """A native procedure from the fixed primitive table."""

    __slots__ = ("name", "fn")

    def __init__(self, name: str, fn: PrimitiveFn):
        self.name = name
        self.fn = fn

    def __call__(self, span: Span, args: list[Value], arg_spans: list[Span]) -> Value:
        return self.fn(span, self.name, args, arg_spans)

    def __repr__(self) -> str:
        return f"<primitive {self.name}>"
