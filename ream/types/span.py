from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Span:
    """A half-open ``[offset, offset + length)`` region of the source text."""

    offset: int
    length: int

    @property
    def end(self) -> int:
        return self.offset + self.length

    def combine(self, other: Span) -> Span:
        """Return the smallest span enclosing both ``self`` and ``other``."""
        start = min(self.offset, other.offset)
        end = max(self.end, other.end)
        return Span(start, end - start)

    def increment(self) -> Span:
        """Return the zero-width span immediately after this one."""
        return Span(self.end, 0)

    def __repr__(self) -> str:
        return f"Span({self.offset}, {self.length})"
