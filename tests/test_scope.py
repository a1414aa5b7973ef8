import pytest

from ream.errors import EvalError, EvalErrorKind
from ream.types import Closure, Scope


def test_lookup_falls_through_to_outer():
    parent = Scope()
    parent.set("x", 1)
    child = Scope.extend(parent)
    assert child.get("x") == 1
    assert "x" in child
    assert child.find("x") is parent


def test_extend_shares_parent():
    parent = Scope()
    child = Scope.extend(parent)
    parent.set("late", 2)
    assert child.get("late") == 2


def test_set_writes_current_table_only():
    parent = Scope()
    parent.set("x", 1)
    child = Scope.extend(parent)
    child.set("x", 2)
    assert child.get("x") == 2
    assert parent.get("x") == 1


def test_unbound_is_none():
    scope = Scope()
    assert scope.get("nope") is None
    assert "nope" not in scope
    assert scope.find("nope") is None


def test_close_is_a_snapshot():
    parent = Scope()
    parent.set("x", 1)
    scope = Scope.extend(parent)
    scope.set("y", 2)

    snapshot = scope.close()
    assert snapshot.outer is None
    assert snapshot.vars == {"x": 1, "y": 2}

    parent.set("x", 10)
    scope.set("z", 3)
    assert snapshot.get("x") == 1
    assert snapshot.get("z") is None


def test_bindings_inner_shadows_outer():
    parent = Scope()
    parent.update({"x": 1, "y": 1})
    child = Scope.extend(parent)
    child.set("x", 2)
    assert child.bindings() == {"x": 2, "y": 1}


def test_chain_order():
    root = Scope()
    mid = Scope.extend(root)
    leaf = Scope.extend(mid)
    assert list(leaf.chain()) == [leaf, mid, root]


def test_closure_bind():
    captured = Scope()
    captured.set("n", 5)
    fn = Closure((), (), captured)
    call_scope = fn.bind([])
    assert call_scope.outer is captured
    assert call_scope.get("n") == 5


def test_scope_str():
    parent = Scope()
    parent.set("x", 1)
    child = Scope.extend(parent)
    assert str(parent) == "{x: 1}"
    assert str(child) == "{} -> ..."
    assert repr(child) == "<Scope chain: {} -> {x: 1}>"


# -------------------------------
# Capture semantics through the evaluator
# -------------------------------
def test_closure_isolation(interp):
    interp.eval("(let f (lambda (x) x))")
    interp.eval("(let x 10)")
    assert interp.eval("(f 5)") == 5


def test_later_definitions_do_not_leak_into_closure(interp):
    interp.eval("(let f (lambda () y))")
    interp.eval("(let y 1)")
    with pytest.raises(EvalError) as e:
        interp.eval("(f)")
    assert e.value.kind is EvalErrorKind.UNKNOWN_IDENTIFIER
    assert e.value.found == "y"


def test_capture_sees_earlier_definitions(interp):
    interp.eval("(let y 1)")
    interp.eval("(let f (lambda () y))")
    interp.eval("(let y 2)")
    assert interp.eval("(f)") == 1


def test_seq_siblings_share_frame(interp):
    assert interp.eval("(seq (let a 1) (let b (+ a 1)) b)") == 2


def test_seq_frame_is_not_visible_outside(interp):
    interp.eval("(seq (let inner 1) inner)")
    with pytest.raises(EvalError) as e:
        interp.eval("inner")
    assert e.value.kind is EvalErrorKind.UNKNOWN_IDENTIFIER


def test_seq_sees_outer_definitions(interp):
    interp.eval("(let outer 40)")
    assert interp.eval("(seq (let two 2) (+ outer two))") == 42


def test_call_scope_does_not_leak(interp):
    interp.eval("(let f (lambda (arg) (let local arg) local))")
    assert interp.eval("(f 3)") == 3
    with pytest.raises(EvalError):
        interp.eval("local")
