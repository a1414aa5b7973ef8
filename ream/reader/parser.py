"""
  Ream Parser

Recursive descent over the token stream with one token of lookahead.

    Program    := Expression*
    Expression := Identifier | Literal | '`' Datum | '(' ParenExpr
    ParenExpr  := Atom AnnotationTail
                | 'quote' Datum ')'
                | 'let' Identifier (Expression | TypeCtor) ')'
                | ('seq' | 'begin') Expression+ ')'
                | ('lambda' | 'fn') Formals Expression* ')'
                | 'if' Expression Expression Expression? ')'
                | 'include' String+ ')'
                | Identifier Expression* ')'
    Formals        := Identifier | '(' Identifier* ')'
    AnnotationTail := ':type' Identifier TypeSpec ')' | ':doc' Identifier String ')'

- Every node's span encloses exactly the tokens it consumed
- Errors are fatal: the first one is raised, nothing is resynchronized
- Lexer errors pass through unchanged
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Optional

from ream import ast
from ream.errors import ParseError, ParseErrorKind
from ream.reader.lexer import Lexer
from ream.reader.token import LITERAL_KINDS, TYPE_KEYWORDS, Token, TokenKind, eof_token
from ream.types.span import Span

logger = logging.getLogger(__name__)

EXPRESSION_START: list[str] = sorted(
    ["Identifier", "Boolean", "Integer", "Float", "Character", "String", "Atom", "(", "`"]
)
PAREN_START: list[str] = sorted(
    ["Atom", "Identifier", "quote", "let", "seq", "begin", "lambda", "fn", "if", "include"]
)
DATUM_START: list[str] = sorted(
    ["Identifier", "Boolean", "Integer", "Float", "Character", "String", "Atom", "("]
)
ANNOTATION_KINDS: list[str] = [":doc", ":type"]


def _names(kinds: Iterable[TokenKind]) -> list[str]:
    return sorted(str(k) for k in kinds)


class Parser:
    """A parser for a single source text."""

    def __init__(self, source: str, tokens: Optional[Iterable[Token]] = None):
        self.source = source
        self.tokens: Iterator[Token] = iter(tokens) if tokens is not None else Lexer(source)
        self.buffer: Optional[Token] = None
        self.exhausted = False
        self.prev_span = Span(0, 0)

    # --- Token cursor ---
    def peek(self) -> Token:
        """Return the next token without consuming it; a synthetic EOF token
        located just past the last consumed token once input runs out."""
        if self.buffer is None and not self.exhausted:
            self.buffer = next(self.tokens, None)
            self.exhausted = self.buffer is None
        if self.buffer is None:
            return eof_token(self.prev_span.increment())
        return self.buffer

    def next(self) -> Token:
        token = self.peek()
        if token.kind is TokenKind.EOF:
            raise ParseError(ParseErrorKind.UNEXPECTED_EOF, token.span)
        self.buffer = None
        self.prev_span = token.span
        return token

    def expect(self, *kinds: TokenKind) -> Token:
        """Consume and return the next token if it has one of ``kinds``."""
        token = self.peek()
        if token.kind in kinds:
            return self.next()
        if token.kind is TokenKind.EOF:
            raise ParseError(ParseErrorKind.UNEXPECTED_EOF, token.span)
        raise ParseError(
            ParseErrorKind.UNEXPECTED_TOKEN,
            token.span,
            found=str(token.kind),
            expected=_names(kinds),
        )

    # --- Program ---
    def parse(self) -> ast.Program:
        exprs: list[ast.Expression] = []
        while self.peek().kind is not TokenKind.EOF:
            exprs.append(self.parse_expression())
        logger.debug("parsed %d top-level forms", len(exprs))
        return ast.Program(tuple(exprs))

    # --- Expressions ---
    def parse_expression(self) -> ast.Expression:
        token = self.next()
        match token.kind:
            case TokenKind.IDENTIFIER:
                return ast.Identifier(token.span, token.value)
            case kind if kind in LITERAL_KINDS:
                return ast.Literal(token.span, ast.LiteralKind[kind.name], token.value)
            case TokenKind.BACKTICK:
                datum = self.parse_datum()
                return ast.Literal(token.span.combine(datum.span), ast.LiteralKind.QUOTATION, datum)
            case TokenKind.LEFT_PAREN:
                return self.parse_parenthesized(token.span)
            case kind:
                raise ParseError(
                    ParseErrorKind.INVALID_EXPRESSION,
                    token.span,
                    found=str(kind),
                    expected=EXPRESSION_START,
                )

    def parse_parenthesized(self, open_span: Span) -> ast.Expression:
        """Parse any expression that starts with ``(``; the paren is already consumed."""
        token = self.next()
        match token.kind:
            case TokenKind.ATOM:
                return self.parse_annotation(open_span, token)
            case TokenKind.QUOTE:
                datum = self.parse_datum()
                close = self.expect(TokenKind.RIGHT_PAREN)
                return ast.Literal(open_span.combine(close.span), ast.LiteralKind.QUOTATION, datum)
            case TokenKind.LET:
                return self.parse_definition(open_span)
            case TokenKind.SEQ | TokenKind.BEGIN:
                return self.parse_sequence(open_span)
            case TokenKind.LAMBDA | TokenKind.FN:
                return self.parse_lambda(open_span)
            case TokenKind.IF:
                return self.parse_conditional(open_span)
            case TokenKind.INCLUDE:
                return self.parse_inclusion(open_span)
            case TokenKind.IDENTIFIER:
                operator = ast.Identifier(token.span, token.value)
                operands, close = self.parse_body()
                return ast.ProcedureCall(open_span.combine(close.span), operator, tuple(operands))
            case kind:
                raise ParseError(
                    ParseErrorKind.INVALID_EXPRESSION,
                    token.span,
                    found=str(kind),
                    expected=PAREN_START,
                )

    def parse_body(self) -> tuple[list[ast.Expression], Token]:
        """Parse expressions up to and including the closing paren."""
        body: list[ast.Expression] = []
        while self.peek().kind is not TokenKind.RIGHT_PAREN:
            body.append(self.parse_expression())
        return body, self.next()

    def parse_definition(self, open_span: Span) -> ast.Expression:
        """``(let <identifier> <expression>)``, or a type definition when the
        value is a type constructor. ``(`` and ``let`` already consumed."""
        target_token = self.expect(TokenKind.IDENTIFIER)
        target = ast.Identifier(target_token.span, target_token.value)

        token = self.peek()
        if token.kind is TokenKind.BOTTOM:
            self.next()
            close = self.expect(TokenKind.RIGHT_PAREN)
            return ast.TypeAlias(open_span.combine(close.span), target, ast.BottomType(token.span))

        if token.kind is TokenKind.LEFT_PAREN:
            inner_open = self.next()
            if self.peek().kind in TYPE_KEYWORDS:
                type_spec = self.parse_type_constructor(inner_open.span)
                close = self.expect(TokenKind.RIGHT_PAREN)
                node = (
                    ast.AlgebraicTypeDefinition
                    if isinstance(type_spec, (ast.SumType, ast.ProductType))
                    else ast.TypeAlias
                )
                return node(open_span.combine(close.span), target, type_spec)
            value = self.parse_parenthesized(inner_open.span)
        else:
            value = self.parse_expression()

        close = self.expect(TokenKind.RIGHT_PAREN)
        return ast.Definition(open_span.combine(close.span), target, value)

    def parse_sequence(self, open_span: Span) -> ast.Sequence:
        body, close = self.parse_body()
        if not body:
            raise ParseError(
                ParseErrorKind.INVALID_EXPRESSION,
                close.span,
                found=str(close.kind),
                expected=EXPRESSION_START,
            )
        return ast.Sequence(open_span.combine(close.span), tuple(body))

    def parse_lambda(self, open_span: Span) -> ast.LambdaExpression:
        formals = self.parse_formals()
        body, close = self.parse_body()
        return ast.LambdaExpression(open_span.combine(close.span), formals, tuple(body))

    def parse_formals(self) -> tuple[ast.Identifier, ...]:
        token = self.next()
        if token.kind is TokenKind.IDENTIFIER:
            return (ast.Identifier(token.span, token.value),)
        if token.kind is not TokenKind.LEFT_PAREN:
            raise ParseError(
                ParseErrorKind.INVALID_LAMBDA_FORMALS,
                token.span,
                found=str(token.kind),
                expected=["(", "Identifier"],
            )

        formals: list[ast.Identifier] = []
        while (token := self.next()).kind is not TokenKind.RIGHT_PAREN:
            if token.kind is not TokenKind.IDENTIFIER:
                raise ParseError(
                    ParseErrorKind.INVALID_LAMBDA_FORMALS,
                    token.span,
                    found=str(token.kind),
                    expected=[")", "Identifier"],
                )
            formals.append(ast.Identifier(token.span, token.value))
        return tuple(formals)

    def parse_conditional(self, open_span: Span) -> ast.Conditional:
        test = self.parse_expression()
        consequent = self.parse_expression()
        alternate = None
        if self.peek().kind is not TokenKind.RIGHT_PAREN:
            alternate = self.parse_expression()
        close = self.expect(TokenKind.RIGHT_PAREN)
        return ast.Conditional(open_span.combine(close.span), test, consequent, alternate)

    def parse_inclusion(self, open_span: Span) -> ast.Inclusion:
        files = [self.expect(TokenKind.STRING).value]
        while (token := self.expect(TokenKind.RIGHT_PAREN, TokenKind.STRING)).kind is TokenKind.STRING:
            files.append(token.value)
        return ast.Inclusion(open_span.combine(token.span), tuple(files))

    # --- Annotations ---
    def parse_annotation(self, open_span: Span, atom: Token) -> ast.Annotation:
        """``(:type <identifier> <typespec>)`` or ``(:doc <identifier> <string>)``."""
        if atom.value not in ANNOTATION_KINDS:
            raise ParseError(
                ParseErrorKind.INVALID_ANNOTATION,
                atom.span,
                found=atom.value,
                expected=ANNOTATION_KINDS,
            )

        target_token = self.expect(TokenKind.IDENTIFIER)
        target = ast.Identifier(target_token.span, target_token.value)

        if atom.value == ":type":
            spec = self.parse_type_spec()
            close = self.expect(TokenKind.RIGHT_PAREN)
            return ast.TypeAnnotation(open_span.combine(close.span), target, spec)

        doc = self.expect(TokenKind.STRING)
        close = self.expect(TokenKind.RIGHT_PAREN)
        return ast.DocAnnotation(open_span.combine(close.span), target, doc.value)

    # --- Type specifications ---
    def parse_type_spec(self) -> ast.TypeSpec:
        token = self.next()
        match token.kind:
            case TokenKind.IDENTIFIER:
                return ast.Identifier(token.span, token.value)
            case TokenKind.BOTTOM:
                return ast.BottomType(token.span)
            case TokenKind.LEFT_PAREN:
                return self.parse_type_constructor(token.span)
            case kind:
                raise ParseError(
                    ParseErrorKind.UNEXPECTED_TOKEN,
                    token.span,
                    found=str(kind),
                    expected=["(", "Bottom", "Identifier"],
                )

    def parse_type_constructor(self, open_span: Span) -> ast.TypeConstructor:
        """Parse a constructor after its ``(``, through the closing ``)``."""
        keyword = self.expect(*TYPE_KEYWORDS)
        match keyword.kind:
            case TokenKind.BOTTOM:
                node, args = ast.BottomType, ()
            case TokenKind.TUPLE:
                node, args = ast.TupleType, (self.parse_type_specs(),)
            case TokenKind.LIST:
                node, args = ast.ListType, (self.parse_type_spec(),)
            case TokenKind.VECTOR:
                node, args = ast.VectorType, (self.parse_type_spec(),)
            case TokenKind.FUNCTION:
                arguments = self.parse_type_list()
                node, args = ast.FunctionType, (arguments, self.parse_type_list())
            case TokenKind.SUM:
                node, args = ast.SumType, (self.parse_named_fields(),)
            case _:
                node, args = ast.ProductType, (self.parse_named_fields(),)
        close = self.expect(TokenKind.RIGHT_PAREN)
        return node(open_span.combine(close.span), *args)

    def parse_type_specs(self) -> tuple[ast.TypeSpec, ...]:
        specs = []
        while self.peek().kind is not TokenKind.RIGHT_PAREN:
            specs.append(self.parse_type_spec())
        return tuple(specs)

    def parse_type_list(self) -> tuple[ast.TypeSpec, ...]:
        self.expect(TokenKind.LEFT_PAREN)
        specs = self.parse_type_specs()
        self.next()
        return specs

    def parse_named_fields(self) -> tuple[ast.NamedTypeSpec, ...]:
        fields = []
        while self.peek().kind is not TokenKind.RIGHT_PAREN:
            fields.append(self.parse_named_type_spec())
        return tuple(fields)

    def parse_named_type_spec(self) -> ast.NamedTypeSpec:
        token = self.expect(TokenKind.ATOM, TokenKind.LEFT_PAREN)
        if token.kind is TokenKind.ATOM:
            return ast.NamedTypeSpec(token.span, token.value)
        name = self.expect(TokenKind.ATOM)
        spec = self.parse_type_spec()
        close = self.expect(TokenKind.RIGHT_PAREN)
        return ast.NamedTypeSpec(token.span.combine(close.span), name.value, spec)

    # --- Quoted data ---
    def parse_datum(self) -> ast.Datum:
        token = self.next()
        if token.kind is TokenKind.IDENTIFIER:
            return ast.Datum(token.span, ast.DatumKind.IDENTIFIER, token.value)
        if token.kind in LITERAL_KINDS:
            return ast.Datum(token.span, ast.DatumKind[token.kind.name], token.value)
        if token.kind is TokenKind.LEFT_PAREN:
            return self.parse_datum_list(token.span)
        raise ParseError(
            ParseErrorKind.INVALID_DATUM,
            token.span,
            found=str(token.kind),
            expected=DATUM_START,
        )

    def parse_datum_list(self, open_span: Span) -> ast.Datum:
        """``(<datum>*)`` or ``(<datum>+ . (<datum>*))``; ``(`` already consumed.

        A dotted tail list is kept as the final item.
        """
        items: list[ast.Datum] = []
        while True:
            token = self.peek()
            if token.kind is TokenKind.RIGHT_PAREN:
                close = self.next()
                return ast.Datum(open_span.combine(close.span), ast.DatumKind.LIST, tuple(items))
            if token.kind is TokenKind.PERIOD and items:
                self.next()
                tail_open = self.expect(TokenKind.LEFT_PAREN)
                tail = self.parse_datum_list(tail_open.span)
                items.append(tail)
                close = self.expect(TokenKind.RIGHT_PAREN)
                return ast.Datum(open_span.combine(close.span), ast.DatumKind.LIST, tuple(items))
            items.append(self.parse_datum())


def parse(source: str) -> ast.Program:
    """Lex and parse ``source`` into a Program."""
    return Parser(source).parse()
