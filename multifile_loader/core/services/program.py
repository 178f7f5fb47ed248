"""
Output program — the generated module as an ordered fragment log.

Fragments are appended while the engine walks the component and are
joined exactly once, at the end.  Nothing reads the log back during
assembly; once frozen it can only be rendered.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator


class ProgramFrozenError(RuntimeError):
    """Raised when emitting into a program that was already frozen."""


class OutputProgram:
    """Append-only list of generated statements."""

    def __init__(self, fragments: Iterable[str] = ()):
        self._fragments: list[str] = list(fragments)
        self._frozen = False

    def emit(self, *fragments: str) -> None:
        """Append fragments in order.  Empty strings are skipped."""
        if self._frozen:
            raise ProgramFrozenError("cannot emit into a frozen program")
        self._fragments.extend(f for f in fragments if f)

    def extend(self, fragments: Iterable[str]) -> None:
        self.emit(*fragments)

    def freeze(self) -> tuple[str, ...]:
        """Stop accepting fragments and return them."""
        self._frozen = True
        return tuple(self._fragments)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def render(self) -> str:
        """Join the (frozen) fragments into module text."""
        return "\n".join(self.freeze())

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._fragments))

    def __len__(self) -> int:
        return len(self._fragments)
