from __future__ import annotations

import logging
from typing import Optional, TextIO

from ream import Value
from ream.ast import Program
from ream.evaluation.evaluator import global_scope, run_in_scope
from ream.reader.lexer import tokenize
from ream.reader.parser import parse
from ream.types.scope import Scope
from ream.types.unit import Unit

logger = logging.getLogger(__name__)

__all__ = ["Interpreter", "parse", "tokenize"]


class Interpreter:
    """
    Reads and evaluates Ream code.
    Maintains one global scope, seeded with the primitives, across calls.
    """

    def __init__(self, out: Optional[TextIO] = None):
        self.out = out
        self.scope: Scope = global_scope()

    def parse(self, code: str) -> Program:
        return parse(code)

    def eval(self, code: str, name: str = "<input>") -> Value:
        """Evaluate every top-level form of ``code``; return the last value, or Unit."""
        logger.debug("evaluating %s (%d chars)", name, len(code))
        program = self.parse(code)
        results = run_in_scope(program, self.scope, self.out)
        if not results:
            return Unit
        return results[-1]

