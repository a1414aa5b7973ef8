import pytest
from hypothesis import given, strategies as st

from ream.ast import Program
from ream.errors import EvalError, EvalErrorKind
from ream.evaluation.evaluator import evaluate, run_program
from ream.reader.parser import parse
from ream.types import Atom, Char, Closure, Primitive, Span, Symbol, Unit, truncate_div
from ream.types.value import format_value, is_truthy, type_name, values_equal


def eval_(interp, code):
    return interp.eval(code)


def eval_error(interp, code):
    with pytest.raises(EvalError) as e:
        interp.eval(code)
    return e.value


# -----------------------------------------------------
# Literals and identifiers
# -----------------------------------------------------
@pytest.mark.parametrize(
    "source,expected",
    [
        ("42", 42),
        ("0x10", 16),
        ("3.5", 3.5),
        ("#t", True),
        ("#false", False),
        ('"hi"', "hi"),
        ("'a'", Char("a")),
        (":key", Atom(":key")),
    ],
)
def test_self_evaluating_literals(interp, source, expected):
    value = eval_(interp, source)
    assert value == expected
    assert type(value) is type(expected)


def test_unknown_identifier(interp):
    err = eval_error(interp, "nope")
    assert err.kind is EvalErrorKind.UNKNOWN_IDENTIFIER
    assert err.span == Span(0, 4)
    assert err.message == "Could not find value for `nope` in this scope"


def test_primitives_are_bound_in_global_scope(interp):
    assert isinstance(eval_(interp, "+"), Primitive)


def test_empty_input_is_unit(interp):
    assert eval_(interp, "") is Unit


# -----------------------------------------------------
# Definitions
# -----------------------------------------------------
def test_definition_returns_unit_and_binds(interp):
    assert eval_(interp, "(let x 5)") is Unit
    assert eval_(interp, "x") == 5


def test_redefinition_shadows(interp):
    assert eval_(interp, "(let x 1) (let x (+ x 1)) x") == 2


def test_program_run_returns_every_value():
    values = parse("(let x 1) x (+ x 1)").run()
    assert values == [Unit, 1, 2]


def test_program_run_uses_fresh_scope():
    parse("(let x 1)").run()
    with pytest.raises(EvalError):
        parse("x").run()


def test_run_program_empty():
    assert run_program(Program(())) == []


# -----------------------------------------------------
# Primitives
# -----------------------------------------------------
@pytest.mark.parametrize(
    "source,expected",
    [
        ("(+ 1 2)", 3),
        ("(- 10 3)", 7),
        ("(- 3 10)", -7),
        ("(* 4 5)", 20),
        ("(/ 7 2)", 3),
        ("(/ (- 0 7) 2)", -3),
        ("(+ 1.5 2.5)", 4.0),
        ("(/ 7.0 2.0)", 3.5),
        ("(+ (* 2 3) (- 10 4))", 12),
        ("(== 1 1)", True),
        ("(== 1 1.0)", False),
        ('(== "a" "a")', True),
        ("(== 'a' \"a\")", False),
        ("(== `(a 1) `(a 1))", True),
        ("(== `(a 1) `(a 2))", False),
        ("(== :a :a)", True),
        ("(== `a :a)", False),
        ("(!= 1 2)", True),
        ("(!= #t #t)", False),
        ("(< 1 2)", True),
        ("(<= 2 2)", True),
        ("(> 1 2)", False),
        ("(>= 2.0 3.0)", False),
    ],
)
def test_primitives(interp, source, expected):
    value = eval_(interp, source)
    assert value == expected
    assert type(value) is type(expected)


@pytest.mark.parametrize(
    "source,span,expected,found",
    [
        ("(+ 1 2.0)", Span(5, 3), "Integer", "Float"),
        ("(+ 1.0 2)", Span(7, 1), "Float", "Integer"),
        ("(* #t 1)", Span(3, 2), "Integer or Float", "Boolean"),
        ('(- "a" 1)', Span(3, 3), "Integer or Float", "String"),
        ("(< 1 `a)", Span(5, 2), "Integer", "Identifier"),
        ("(/ 1 'c')", Span(5, 3), "Integer", "Character"),
    ],
)
def test_primitive_wrong_type(interp, source, span, expected, found):
    err = eval_error(interp, source)
    assert err.kind is EvalErrorKind.WRONG_TYPE
    assert err.span == span
    assert err.expected == expected
    assert err.found == found


@pytest.mark.parametrize("source,found", [("(+ 1)", 1), ("(- 1 2 3)", 3), ("(== 1)", 1), ("(<)", 0)])
def test_primitive_arity(interp, source, found):
    err = eval_error(interp, source)
    assert err.kind is EvalErrorKind.WRONG_ARGUMENT_COUNT
    assert err.expected == 2
    assert err.found == found


def test_arity_message(interp):
    err = eval_error(interp, "(+ 1)")
    assert err.callee == "+"
    assert err.message == "`+` takes 2 arguments, got 1"
    assert err.span == Span(1, 1)


@pytest.mark.parametrize("source", ["(/ 1 0)", "(/ 1.0 0.0)"])
def test_division_by_zero(interp, source):
    err = eval_error(interp, source)
    assert err.kind is EvalErrorKind.DIVISION_BY_ZERO
    assert err.callee == "/"


def test_print_writes_display_form(interp, out):
    assert eval_(interp, '(print 1 "a" #t 2.5 `(b :c) \'d\')') is Unit
    assert out.getvalue() == "1 a #t 2.5 (b :c) d\n"


def test_print_without_arguments(interp, out):
    eval_(interp, "(print)")
    assert out.getvalue() == "\n"


def test_print_defaults_to_stdout(capsys):
    parse('(print "hello")').run()
    assert capsys.readouterr().out == "hello\n"


def test_operands_evaluated_left_to_right(interp, out):
    assert eval_(interp, "(+ (seq (print 1) 1) (seq (print 2) 2))") == 3
    assert out.getvalue() == "1\n2\n"


def test_primitives_cannot_be_shadowed(interp):
    eval_(interp, "(let + (lambda (a b) 0))")
    assert eval_(interp, "(+ 1 2)") == 3


def test_primitive_bound_under_another_name(interp):
    eval_(interp, "(let add +)")
    assert eval_(interp, "(add 2 3)") == 5
    err = eval_error(interp, "(add 1)")
    assert err.callee == "+"


# -----------------------------------------------------
# Lambdas and application
# -----------------------------------------------------
def test_lambda_body_not_evaluated(interp):
    value = eval_(interp, "(lambda (x) (nope x))")
    assert isinstance(value, Closure)
    assert value.arity == 1


def test_closure_call(interp):
    eval_(interp, "(let add1 (lambda (x) (+ x 1)))")
    assert eval_(interp, "(add1 41)") == 42


def test_closure_returns_last_body_value(interp, out):
    eval_(interp, '(let f (fn (x) (print "called") (* x x)))')
    assert eval_(interp, "(f 4)") == 16
    assert out.getvalue() == "called\n"


def test_empty_body_returns_unit(interp):
    eval_(interp, "(let f (lambda ()))")
    assert eval_(interp, "(f)") is Unit


def test_single_identifier_formal(interp):
    eval_(interp, "(let id (fn x x))")
    assert eval_(interp, "(id 7)") == 7
    err = eval_error(interp, "(id 1 2)")
    assert err.kind is EvalErrorKind.WRONG_ARGUMENT_COUNT


def test_closure_arity(interp):
    eval_(interp, "(let f (lambda (x y) x))")
    err = eval_error(interp, "(f 1)")
    assert err.kind is EvalErrorKind.WRONG_ARGUMENT_COUNT
    assert (err.callee, err.expected, err.found) == ("f", 2, 1)


def test_nested_closures(interp):
    eval_(interp, "(let make-adder (lambda (n) (lambda (m) (+ n m))))")
    eval_(interp, "(let add5 (make-adder 5))")
    assert eval_(interp, "(add5 10)") == 15


def test_recursion_through_own_name_is_not_visible(interp):
    eval_(interp, "(let loop (lambda (n) (loop n)))")
    err = eval_error(interp, "(loop 1)")
    assert err.kind is EvalErrorKind.UNKNOWN_IDENTIFIER
    assert err.found == "loop"


def test_not_a_function(interp):
    eval_(interp, "(let x 5)")
    err = eval_error(interp, "(x 1)")
    assert err.kind is EvalErrorKind.NOT_A_FUNCTION
    assert err.span == Span(1, 1)


def test_unknown_operator(interp):
    err = eval_error(interp, "(nope 1)")
    assert err.kind is EvalErrorKind.UNKNOWN_IDENTIFIER
    assert err.span == Span(1, 4)


def test_operand_errors_come_first(interp):
    err = eval_error(interp, "(nope missing)")
    assert err.found == "missing"


# -----------------------------------------------------
# Conditionals
# -----------------------------------------------------
@pytest.mark.parametrize(
    "source,expected",
    [
        ("(if #t 1 2)", 1),
        ("(if #f 1 2)", 2),
        ("(if 0 1 2)", 2),
        ("(if 7 1 2)", 1),
        ("(if 0.0 1 2)", 2),
        ('(if "" 1 2)', 2),
        ('(if "a" 1 2)', 1),
        ("(if `() 1 2)", 2),
        ("(if `(a) 1 2)", 1),
        ("(if 'c' 1 2)", 1),
        ("(if :a 1 2)", 1),
        ("(if `x 1 2)", 1),
        ("(if + 1 2)", 1),
        ("(if (lambda () 0) 1 2)", 1),
        ("(if (print) 1 2)", 1),
    ],
)
def test_truthiness(interp, source, expected):
    assert eval_(interp, source) == expected


def test_missing_alternate_is_unit(interp):
    assert eval_(interp, "(if #f 1)") is Unit


def test_only_one_branch_evaluated(interp, out):
    eval_(interp, "(if #t (print 1) (print 2))")
    assert out.getvalue() == "1\n"


# -----------------------------------------------------
# Quotation
# -----------------------------------------------------
@pytest.mark.parametrize(
    "source,expected",
    [
        ("(quote x)", Symbol("x")),
        ("`x", Symbol("x")),
        ("`()", []),
        ('`(a 1 "s" :k \'c\' #t 2.5)', [Symbol("a"), 1, "s", Atom(":k"), Char("c"), True, 2.5]),
        ("`(1 . (2 3))", [1, [2, 3]]),
        ("(quote (a . (b c)))", [Symbol("a"), [Symbol("b"), Symbol("c")]]),
        ("`(f (x))", [Symbol("f"), [Symbol("x")]]),
    ],
)
def test_quotation(interp, source, expected):
    assert eval_(interp, source) == expected


def test_quoted_identifier_is_not_looked_up(interp):
    # `undefined` is never bound, quoting it must not fail
    assert eval_(interp, "`undefined") == Symbol("undefined")


# -----------------------------------------------------
# Parse-only forms
# -----------------------------------------------------
@pytest.mark.parametrize(
    "source,found",
    [
        ('(include "a.rm")', "Inclusion"),
        ("(let T (Tuple Integer))", "TypeAlias"),
        ("(let O (Sum :none))", "AlgebraicTypeDefinition"),
        ('(:doc f "x")', "DocAnnotation"),
        ("(:type f Integer)", "TypeAnnotation"),
    ],
)
def test_unsupported_forms(interp, source, found):
    err = eval_error(interp, source)
    assert err.kind is EvalErrorKind.UNSUPPORTED
    assert err.found == found
    assert err.span == Span(0, len(source))


# -----------------------------------------------------
# Interpreter state
# -----------------------------------------------------
def test_interpreter_keeps_global_scope(interp):
    eval_(interp, "(let x 3)")
    assert eval_(interp, "(* x x)") == 9


def test_interpreter_returns_last_value(interp):
    assert eval_(interp, "1 2 3") == 3


def test_evaluate_single_expression(scope):
    (expr,) = parse("(+ 2 2)").expressions
    assert evaluate(expr, scope) == 4


# -----------------------------------------------------
# Value helpers
# -----------------------------------------------------
@pytest.mark.parametrize(
    "value,name",
    [
        (True, "Boolean"),
        (1, "Integer"),
        (1.0, "Float"),
        (Char("a"), "Character"),
        ("a", "String"),
        (Symbol("a"), "Identifier"),
        (Atom(":a"), "Atom"),
        ([], "List"),
        (Unit, "Unit"),
    ],
)
def test_type_name(value, name):
    assert type_name(value) == name


def test_values_equal_respects_type_tags():
    assert not values_equal(1, True)
    assert not values_equal(Symbol("a"), Atom("a"))
    assert values_equal([1, [Char("x")]], [1, [Char("x")]])
    assert not values_equal([1], [1, 2])


def test_truthiness_of_unit():
    assert is_truthy(Unit)


@pytest.mark.parametrize(
    "value,text",
    [(True, "#t"), (False, "#f"), (Unit, "#unit"), ([1, [2.0]], "(1 (2.0))"), (Atom(":a"), ":a")],
)
def test_format_value(value, text):
    assert format_value(value) == text


@pytest.mark.parametrize("a,b,q", [(7, 2, 3), (-7, 2, -3), (7, -2, -3), (-7, -2, 3), (6, 3, 2), (0, 5, 0)])
def test_truncate_div(a, b, q):
    assert truncate_div(a, b) == q


# -------------------------------
# Hypothesis tests
# -------------------------------
naturals = st.integers(min_value=0, max_value=10**12)


@given(naturals, naturals)
def test_integer_arithmetic_matches_python(a, b):
    values = parse(f"(+ {a} {b}) (- {a} {b}) (* {a} {b}) (< {a} {b}) (== {a} {b})").run()
    assert values == [a + b, a - b, a * b, a < b, a == b]


@given(naturals, st.integers(min_value=1, max_value=10**6))
def test_integer_division_truncates(a, b):
    assert parse(f"(/ {a} {b})").run() == [a // b]
