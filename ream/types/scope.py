"""Lexical scopes for the Ream evaluator.

A Scope stores bindings of identifier names to evaluated values and links to an
optional ``outer`` scope. Two ways of deriving a scope exist and must not be
confused:

- ``Scope.extend(parent)`` makes a child that *shares* ``parent``: bindings
  added to the parent later are visible through the child.
- ``scope.close()`` makes a parentless *snapshot* of every binding reachable
  from ``scope`` right now. Closures capture their defining scope this way, so
  later definitions in the defining scope never leak into them.
"""

from __future__ import annotations

from io import StringIO
from typing import Iterator, Mapping, Optional

from ream import Value


class Scope:
    """Hierarchical mapping from identifier names to Ream values."""

    __slots__ = ("vars", "outer")

    def __init__(self, outer: Optional[Scope] = None):
        self.vars: dict[str, Value] = {}
        self.outer: Scope | None = outer

    @classmethod
    def extend(cls, parent: Scope) -> Scope:
        """Create an empty child scope whose lookups fall through to ``parent``."""
        return cls(outer=parent)

    def close(self) -> Scope:
        """Snapshot every binding reachable from this scope into a new root scope."""
        snapshot = Scope()
        snapshot.vars = self.bindings()
        return snapshot

    def bindings(self) -> dict[str, Value]:
        """Flatten the chain into one dict; inner bindings shadow outer ones."""
        chain = list(self.chain())
        merged: dict[str, Value] = {}
        for scope in reversed(chain):
            merged.update(scope.vars)
        return merged

    def chain(self) -> Iterator[Scope]:
        scope: Optional[Scope] = self
        while scope is not None:
            yield scope
            scope = scope.outer

    def find(self, name: str) -> Optional[Scope]:
        """Find the innermost scope in the chain that binds ``name``."""
        for scope in self.chain():
            if name in scope.vars:
                return scope
        return None

    def get(self, name: str) -> Optional[Value]:
        """Look up ``name`` from innermost to outermost; None when unbound."""
        scope = self.find(name)
        if scope is None:
            return None
        return scope.vars[name]

    def set(self, name: str, value: Value) -> None:
        """Bind ``name`` in this scope only; outer bindings are shadowed, never updated."""
        self.vars[name] = value

    def update(self, mapping: Mapping[str, Value]) -> None:
        """Bulk-define a mapping of name -> value in the current frame."""
        for k, v in mapping.items():
            self.set(k, v)

    def __contains__(self, name: str) -> bool:
        return self.find(name) is not None

    def _write_vars(self, buffer: StringIO) -> None:
        buffer.write("{")
        buffer.write(", ".join(f"{k}: {v!r}" for k, v in self.vars.items()))
        buffer.write("}")

    def __str__(self) -> str:
        with StringIO() as buffer:
            self._write_vars(buffer)
            if self.outer is not None:
                buffer.write(" -> ...")  # indicate parent exists
            return buffer.getvalue()

    def __repr__(self) -> str:
        with StringIO() as buffer:
            buffer.write("<Scope chain: ")
            for i, scope in enumerate(self.chain()):
                if i:
                    buffer.write(" -> ")
                scope._write_vars(buffer)
            buffer.write(">")
            return buffer.getvalue()
