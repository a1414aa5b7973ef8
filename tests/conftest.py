import io

import pytest

from ream.compiler.chunk import Chunk
from ream.evaluation.evaluator import global_scope
from ream.interpreter import Interpreter
from ream.source import Source


@pytest.fixture
def out():
    return io.StringIO()


@pytest.fixture
def interp(out):
    return Interpreter(out=out)


@pytest.fixture
def scope():
    return global_scope()


@pytest.fixture
def chunk():
    # Five three-character lines; spans (0,3), (4,3), ... each cover one line
    source = Source("test_source", "foo\nfoo\nfoo\nfoo\nfoo\n")
    return Chunk("main", source)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("REAM_STACK_SIZE", raising=False)
    monkeypatch.delenv("REAM_TRACE", raising=False)
