from __future__ import annotations
from typing import Any

from ream.types.char import Char
from .chunk import Chunk
from .opcodes import Opcode


def format_constant(value: Any) -> str:
    """Display form of a VM value, as shown in disassembly and traces."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Char):
        return f"'{value}'"
    if isinstance(value, str):
        return f'"{value}"'
    return str(value)


def disassemble_instruction(chunk: Chunk, idx: int) -> str:
    """One line: ``IIII | instruction | [LLL CC] source-text``."""
    inst = chunk.instructions[idx]
    text = str(inst)
    if inst.opcode == Opcode.LOAD_CONSTANT:
        if 0 <= inst.operand < len(chunk.constants):
            text += f" = {format_constant(chunk.constants[inst.operand])}"
        else:
            text += " = ?"

    span = chunk.spans[idx]
    line, col = chunk.source.location(span.offset)
    contents = chunk.source.read_span(span)
    return f"{idx:04} | {text:32} | [{line:03} {col:02}] {contents}"


def disassemble_chunk(chunk: Chunk) -> str:
    out = [f"== {chunk.name} =="]
    for idx in range(len(chunk.instructions)):
        out.append(disassemble_instruction(chunk, idx))
    return "\n".join(out)
