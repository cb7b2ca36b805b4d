"""
Diagnostics
===========

Error taxonomy of the compiler and the declaration-path context used to
produce actionable messages.
"""

from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence

from a2mlgen.models.ast import SourcePosition


class A2mlError(Exception):
    """Base class for errors raised while compiling a specification."""

    pass


class A2mlSyntaxError(A2mlError):
    """Exception raised when the specification text is malformed."""

    def __init__(
        self,
        message: str,
        position: Optional[SourcePosition] = None,
        found: Optional[str] = None,
        expected: Optional[str] = None,
    ) -> None:
        self.message = message
        self.position = position
        self.found = found
        self.expected = expected
        super().__init__(self._format())

    def _format(self) -> str:
        text = self.message
        if self.expected is not None:
            text = f"{text}: expected {self.expected}"
            if self.found is not None:
                text = f"{text}, found {self.found}"
        elif self.found is not None:
            text = f"{text}: {self.found}"
        if self.position is not None:
            text = f"{self.position}: {text}"
        return text


class A2mlSemanticError(A2mlError):
    """Exception raised when a parsed specification is not valid."""

    def __init__(
        self,
        message: str,
        positions: Sequence[SourcePosition] = (),
        context: Optional[str] = None,
    ) -> None:
        self.message = message
        self.positions = list(positions)
        self.context = context
        super().__init__(self._format())

    def _format(self) -> str:
        text = self.message
        if self.context:
            text = f"{text} (in {self.context})"
        if self.positions:
            text = f"{text} [{'; '.join(str(p) for p in self.positions)}]"
        return text


class ErrorContext:
    """Path of enclosing declarations during a single resolver pass."""

    def __init__(self) -> None:
        self._path: List[str] = []

    @contextmanager
    def enter(self, label: str) -> Iterator[None]:
        self._path.append(label)
        try:
            yield
        finally:
            self._path.pop()

    @property
    def path(self) -> str:
        return " > ".join(self._path)

    def error(self, message: str, *positions: SourcePosition) -> A2mlSemanticError:
        """Build a semantic error carrying the current declaration path."""
        return A2mlSemanticError(message, positions, self.path or None)
