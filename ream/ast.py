"""Ream AST: span-annotated parse-time node definitions.

Every node records the span of exactly the source text it was parsed from.
Nodes are frozen; a Program is immutable once parsed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, TYPE_CHECKING, Union

from ream.types.span import Span

if TYPE_CHECKING:
    from ream import Value


# ============================================================
# BASE
# ============================================================


@dataclass(frozen=True)
class Node:
    """Base for all AST nodes."""

    span: Span

    @property
    def kind_name(self) -> str:
        return type(self).__name__


# ============================================================
# QUOTED DATA
# ============================================================


class DatumKind(Enum):
    IDENTIFIER = "Identifier"
    BOOLEAN = "Boolean"
    INTEGER = "Integer"
    FLOAT = "Float"
    CHARACTER = "Character"
    STRING = "String"
    ATOM = "Atom"
    LIST = "List"


@dataclass(frozen=True)
class Datum(Node):
    """An unevaluated s-expression. ``value`` is a tuple of Datum for LIST."""

    kind: DatumKind
    value: object


# ============================================================
# TYPES (parsed, never checked)
# ============================================================


@dataclass(frozen=True)
class TypeConstructor(Node):
    """Base for the built-in type constructors."""


@dataclass(frozen=True)
class BottomType(TypeConstructor):
    pass


@dataclass(frozen=True)
class TupleType(TypeConstructor):
    fields: tuple[TypeSpec, ...]


@dataclass(frozen=True)
class ListType(TypeConstructor):
    element: TypeSpec


@dataclass(frozen=True)
class VectorType(TypeConstructor):
    element: TypeSpec


@dataclass(frozen=True)
class FunctionType(TypeConstructor):
    arguments: tuple[TypeSpec, ...]
    values: tuple[TypeSpec, ...]


@dataclass(frozen=True)
class NamedTypeSpec(Node):
    """A labelled field of a Sum or Product, e.g. ``(:some Integer)`` or ``:none``."""

    name: str
    spec: Optional[TypeSpec] = None


@dataclass(frozen=True)
class SumType(TypeConstructor):
    fields: tuple[NamedTypeSpec, ...]


@dataclass(frozen=True)
class ProductType(TypeConstructor):
    fields: tuple[NamedTypeSpec, ...]


# ============================================================
# EXPRESSIONS
# ============================================================


@dataclass(frozen=True)
class Expression(Node):
    """Base for everything that can appear as a top-level form."""


@dataclass(frozen=True)
class Identifier(Expression):
    name: str


class LiteralKind(Enum):
    QUOTATION = "Quotation"
    BOOLEAN = "Boolean"
    INTEGER = "Integer"
    FLOAT = "Float"
    CHARACTER = "Character"
    STRING = "String"
    ATOM = "Atom"


@dataclass(frozen=True)
class Literal(Expression):
    """A self-evaluating literal. ``value`` is a Datum for QUOTATION."""

    kind: LiteralKind
    value: object


@dataclass(frozen=True)
class Definition(Expression):
    target: Identifier
    value: Expression


@dataclass(frozen=True)
class TypeAlias(Expression):
    target: Identifier
    spec: TypeSpec


@dataclass(frozen=True)
class AlgebraicTypeDefinition(Expression):
    target: Identifier
    spec: TypeSpec


@dataclass(frozen=True)
class Annotation(Expression):
    target: Identifier


@dataclass(frozen=True)
class TypeAnnotation(Annotation):
    spec: TypeSpec


@dataclass(frozen=True)
class DocAnnotation(Annotation):
    doc: str


@dataclass(frozen=True)
class Sequence(Expression):
    body: tuple[Expression, ...]


@dataclass(frozen=True)
class ProcedureCall(Expression):
    operator: Identifier
    operands: tuple[Expression, ...]


@dataclass(frozen=True)
class LambdaExpression(Expression):
    formals: tuple[Identifier, ...]
    body: tuple[Expression, ...]


@dataclass(frozen=True)
class Conditional(Expression):
    test: Expression
    consequent: Expression
    alternate: Optional[Expression] = None


@dataclass(frozen=True)
class Inclusion(Expression):
    """``(include "a.rm" ...)``; resolving the files is left to the host."""

    files: tuple[str, ...]


TypeSpec = Union[Identifier, TypeConstructor]


# ============================================================
# PROGRAM
# ============================================================


@dataclass(frozen=True)
class Program:
    """The ordered top-level forms of one source text."""

    expressions: tuple[Expression, ...]

    def __iter__(self):
        return iter(self.expressions)

    def __len__(self) -> int:
        return len(self.expressions)

    def run(self, out=None) -> list[Value]:
        """Evaluate every form, left to right, in one fresh global scope."""
        # Lazy import to avoid circular imports
        from ream.evaluation.evaluator import run_program
        return run_program(self, out=out)
