from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List

from ream.compiler.opcodes import Instruction
from ream.source import Source
from ream.types.span import Span


@dataclass
class Chunk:
    """A unit of bytecode: instructions, their source spans and a constant pool.

    Append-only: ``instructions`` and ``spans`` always have the same length and
    entries are never removed or reordered.
    """

    name: str
    source: Source
    instructions: List[Instruction] = field(default_factory=list)
    constants: List[Any] = field(default_factory=list)
    spans: List[Span] = field(default_factory=list)

    def push_instruction(self, inst: Instruction, span: Span) -> int:
        self.instructions.append(inst)
        self.spans.append(span)
        return len(self.instructions) - 1

    def push_constant(self, value: Any) -> int:
        """Append ``value`` to the pool and return its index for LoadConstant.

        Constants are never deduplicated.
        """
        self.constants.append(value)
        return len(self.constants) - 1

    def __len__(self) -> int:
        return len(self.instructions)

    def __str__(self) -> str:
        # Lazy import to avoid circular imports
        from ream.compiler.disasm import disassemble_chunk
        return disassemble_chunk(self)
