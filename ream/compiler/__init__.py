from __future__ import annotations

# Public surface for the compiler package
from .opcodes import Opcode, Instruction
from .chunk import Chunk
from .disasm import disassemble_chunk, disassemble_instruction
from .vm import VM, run_chunk

__all__ = [
    "Opcode",
    "Instruction",
    "Chunk",
    "disassemble_chunk",
    "disassemble_instruction",
    "VM",
    "run_chunk",
]
