from __future__ import annotations

import logging
import sys
from typing import Any, Callable, List, Optional, TextIO, Tuple

from ream import config
from ream.errors import InterpretError, InterpretErrorKind
from ream.types.value import is_integer, truncate_div, type_name

from .chunk import Chunk
from .disasm import disassemble_instruction, format_constant
from .opcodes import Instruction, Opcode

logger = logging.getLogger(__name__)

I64_MIN = -(1 << 63)
I64_MAX = (1 << 63) - 1

Handler = Callable[[Instruction], Tuple[int, Any]]


class VM:
    """A stack machine executing one Chunk.

    The value stack has a fixed capacity. Execution starts at instruction 0
    and stops when the instruction pointer runs off the end of the chunk or
    a Return executes. The first runtime error stops the machine.
    """

    class RunSignal:
        NORMAL = 0
        RETURN = 1

    def __init__(
        self,
        chunk: Optional[Chunk] = None,
        *,
        stack_size: Optional[int] = None,
        out: Optional[TextIO] = None,
    ):
        self.chunk = chunk
        self.ip = 0
        self.stack_size = stack_size if stack_size is not None else config.get_stack_size()
        self.stack: List[Any] = []
        self.out = out
        # Opcode dispatch table
        self._dispatch: dict[Opcode, Handler] = {
            Opcode.RETURN: self.op_return,
            Opcode.LOAD_IMMEDIATE: self.op_load_immediate,
            Opcode.LOAD_CONSTANT: self.op_load_constant,
            Opcode.NEGATE: self.op_negate,
            Opcode.ADD: self.op_add,
            Opcode.SUB: self.op_sub,
            Opcode.MUL: self.op_mul,
            Opcode.DIV: self.op_div,
        }

    # --- Errors ---
    def error(self, kind: InterpretErrorKind, **payload: Any) -> InterpretError:
        """Build a runtime error located at the executing instruction."""
        return InterpretError(kind, self.chunk.spans[self.ip], **payload)

    def check_range(self, value: Any) -> Any:
        if is_integer(value) and not I64_MIN <= value <= I64_MAX:
            raise self.error(InterpretErrorKind.INTEGER_OVERFLOW, found=value)
        return value

    # --- Per-op handlers ---
    def op_return(self, inst: Instruction) -> Tuple[int, Any]:
        return VM.RunSignal.RETURN, self.pop()

    def op_load_immediate(self, inst: Instruction) -> Tuple[int, Any]:
        self.push(self.check_range(inst.operand))
        return VM.RunSignal.NORMAL, None

    def op_load_constant(self, inst: Instruction) -> Tuple[int, Any]:
        idx = inst.operand
        if not 0 <= idx < len(self.chunk.constants):
            raise self.error(InterpretErrorKind.INVALID_CONSTANT, found=idx)
        self.push(self.chunk.constants[idx])
        return VM.RunSignal.NORMAL, None

    def op_negate(self, inst: Instruction) -> Tuple[int, Any]:
        v = self.pop()
        if not (is_integer(v) or isinstance(v, float)):
            raise self.error(
                InterpretErrorKind.WRONG_TYPE, expected=["Integer", "Float"], found=type_name(v)
            )
        self.push(self.check_range(-v))
        return VM.RunSignal.NORMAL, None

    def _arith2(self, fn: Callable[[Any, Any], Any]) -> Tuple[int, Any]:
        # Right operand is on top of the stack
        b = self.pop()
        a = self.pop()
        if is_integer(a):
            if not is_integer(b):
                raise self.error(InterpretErrorKind.WRONG_TYPE, expected=["Integer"], found=type_name(b))
        elif isinstance(a, float):
            if not isinstance(b, float):
                raise self.error(InterpretErrorKind.WRONG_TYPE, expected=["Float"], found=type_name(b))
        else:
            raise self.error(
                InterpretErrorKind.WRONG_TYPE, expected=["Integer", "Float"], found=type_name(a)
            )
        self.push(self.check_range(fn(a, b)))
        return VM.RunSignal.NORMAL, None

    def op_add(self, inst: Instruction) -> Tuple[int, Any]:
        return self._arith2(lambda a, b: a + b)

    def op_sub(self, inst: Instruction) -> Tuple[int, Any]:
        return self._arith2(lambda a, b: a - b)

    def op_mul(self, inst: Instruction) -> Tuple[int, Any]:
        return self._arith2(lambda a, b: a * b)

    def op_div(self, inst: Instruction) -> Tuple[int, Any]:
        return self._arith2(self._divide)

    def _divide(self, a: Any, b: Any) -> Any:
        if b == 0:
            raise self.error(InterpretErrorKind.DIVISION_BY_ZERO)
        if isinstance(a, float):
            return a / b
        return truncate_div(a, b)

    # --- Stack helpers ---
    def push(self, v: Any) -> None:
        if len(self.stack) >= self.stack_size:
            raise self.error(InterpretErrorKind.STACK_OVERFLOW, expected=self.stack_size)
        self.stack.append(v)

    def pop(self) -> Any:
        if not self.stack:
            raise self.error(InterpretErrorKind.STACK_UNDERFLOW)
        return self.stack.pop()

    # --- Execution ---
    def trace_step(self) -> None:
        out = self.out or sys.stdout
        out.write("[" + "".join(f"{format_constant(v)} " for v in self.stack) + "]\n")
        out.write(disassemble_instruction(self.chunk, self.ip) + "\n")

    def run(self, chunk: Optional[Chunk] = None, trace: Optional[bool] = None) -> Any:
        """Execute ``chunk`` (or the current chunk) from its first instruction.

        Returns the value reported by Return, or None if execution runs off
        the end of the chunk.
        """
        if chunk is not None:
            self.chunk = chunk
        if self.chunk is None:
            raise ValueError("VM has no chunk to run")
        if trace is None:
            trace = config.trace_enabled()
        self.ip = 0
        self.stack.clear()

        instructions = self.chunk.instructions
        logger.debug("running chunk %r: %d instructions", self.chunk.name, len(instructions))
        while self.ip < len(instructions):
            inst = instructions[self.ip]
            if trace:
                self.trace_step()
            signal, value = self._dispatch[inst.opcode](inst)
            if signal == VM.RunSignal.RETURN:
                logger.debug("chunk %r returned %r", self.chunk.name, value)
                return value
            self.ip += 1
        logger.debug("chunk %r ran off the end", self.chunk.name)
        return None


def run_chunk(chunk: Chunk, trace: Optional[bool] = None, out: Optional[TextIO] = None) -> Any:
    vm = VM(chunk, out=out)
    return vm.run(trace=trace)
