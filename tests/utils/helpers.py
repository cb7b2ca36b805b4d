"""
Test Helpers
============

Helper functions for common testing operations.
"""

from types import ModuleType
from typing import Any, Optional

from a2mlgen.core.compiler import a2ml_specification
from a2mlgen.core.dsl.parser import parse_plain, parse_specification
from a2mlgen.core.schema.resolver import resolve_specification
from a2mlgen.models.schema import Schema
from a2mlgen.runtime.generic import GenericNode

__all__ = ["resolve_text", "resolve_plain", "load_text", "leaf", "tagged", "untagged"]


def resolve_text(text: str) -> Schema:
    """Parse and resolve an enhanced A2ML specification."""
    return resolve_specification(parse_specification(text))


def resolve_plain(text: str, name: str = "A2ml") -> Schema:
    """Parse and resolve header-less plain A2ML."""
    return resolve_specification(parse_plain(text, name))


def load_text(text: str) -> ModuleType:
    """Compile a specification and load the generated module."""
    return a2ml_specification(text)


def leaf(value: Any) -> GenericNode:
    """Untagged node carrying a scalar value."""
    return GenericNode(value=value)


def tagged(
    tag: str, *children: GenericNode, value: Optional[Any] = None, is_block: bool = False
) -> GenericNode:
    """Tagged node with optional value and children."""
    return GenericNode(tag=tag, value=value, children=list(children), is_block=is_block)


def untagged(*children: GenericNode) -> GenericNode:
    """Untagged node grouping children, e.g. a struct or a root."""
    return GenericNode(children=list(children))
