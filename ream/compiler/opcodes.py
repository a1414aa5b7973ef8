from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


class Opcode(IntEnum):
    RETURN = 0x00
    LOAD_IMMEDIATE = 0x01  # i64 operand
    LOAD_CONSTANT = 0x02  # constant index operand
    NEGATE = 0x10

    # Arithmetic
    ADD = 0x20
    SUB = 0x21
    MUL = 0x22
    DIV = 0x23

    @property
    def mnemonic(self) -> str:
        return MNEMONICS[self]


MNEMONICS: dict[Opcode, str] = {
    Opcode.RETURN: "Return",
    Opcode.LOAD_IMMEDIATE: "LoadImmediate",
    Opcode.LOAD_CONSTANT: "LoadConstant",
    Opcode.NEGATE: "Negate",
    Opcode.ADD: "Add",
    Opcode.SUB: "Sub",
    Opcode.MUL: "Mul",
    Opcode.DIV: "Div",
}

# Opcodes that carry an operand
WITH_OPERAND = frozenset({Opcode.LOAD_IMMEDIATE, Opcode.LOAD_CONSTANT})


@dataclass(frozen=True)
class Instruction:
    """One decoded instruction: an opcode and its operand, if it takes one."""

    opcode: Opcode
    operand: Optional[int] = None

    def __post_init__(self):
        if (self.opcode in WITH_OPERAND) != (self.operand is not None):
            raise ValueError(f"{self.opcode.mnemonic} operand mismatch: {self.operand!r}")

    def __str__(self) -> str:
        if self.operand is None:
            return self.opcode.mnemonic
        return f"{self.opcode.mnemonic} {self.operand}"


def load_immediate(value: int) -> Instruction:
    return Instruction(Opcode.LOAD_IMMEDIATE, value)


def load_constant(index: int) -> Instruction:
    return Instruction(Opcode.LOAD_CONSTANT, index)


RETURN = Instruction(Opcode.RETURN)
NEGATE = Instruction(Opcode.NEGATE)
ADD = Instruction(Opcode.ADD)
SUB = Instruction(Opcode.SUB)
MUL = Instruction(Opcode.MUL)
DIV = Instruction(Opcode.DIV)
