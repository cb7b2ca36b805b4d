"""
Duplicate Tracking
==================

A small registry that remembers where each key was first seen, shared by
struct members, tagged entries, enum variants and type names.
"""

from typing import Collection, Dict, Optional

from a2mlgen.models.ast import SourcePosition
from a2mlgen.utils.diagnostics import ErrorContext


class DuplicateTracker:
    """Detect repeated keys within one scope."""

    def __init__(self, what: str, context: ErrorContext) -> None:
        self.what = what
        self.context = context
        self._seen: Dict[str, SourcePosition] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._seen

    def first_position(self, key: str) -> Optional[SourcePosition]:
        return self._seen.get(key)

    def add(self, key: str, position: SourcePosition) -> None:
        """Register key, raising a semantic error naming both occurrences."""
        previous = self._seen.get(key)
        if previous is not None:
            raise self.context.error(f"duplicate {self.what} '{key}'", previous, position)
        self._seen[key] = position

    def unique(self, base: str, reserved: Collection[str] = ()) -> str:
        """First of base, base_2, base_3, ... neither registered nor reserved."""
        name = base
        counter = 2
        while name in self._seen or name in reserved:
            name = f"{base}_{counter}"
            counter += 1
        return name
