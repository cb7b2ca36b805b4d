"""
Canonical Text Renderer
=======================

Renders a resolved schema back into plain A2ML: names and documentation are
erased, references are inlined and every enum value is written explicitly.
Each top-level block is rendered on a line of its own.
"""

from typing import List, Tuple

from a2mlgen.models.ast import Multiplicity
from a2mlgen.models.schema import (
    ArrayItem,
    CharArrayItem,
    EnumType,
    ScalarItem,
    Schema,
    SchemaItem,
    SequenceItem,
    StructType,
    TaggedEntry,
    TaggedStructType,
)


class CanonicalRenderer:
    """Render the plain A2ML text of a schema."""

    def __init__(self, schema: Schema) -> None:
        self.schema = schema

    def render(self) -> str:
        return "\n".join(self._render_entry(entry) for entry in self.schema.root_type.entries)

    def _render_member(self, item: SchemaItem) -> str:
        if isinstance(item, SequenceItem):
            return f"({self._render_member(item.element)})*"
        base, dims = self._split_dims(item)
        return base + "".join(f"[{size}]" for size in dims)

    def _split_dims(self, item: SchemaItem) -> Tuple[str, List[int]]:
        """Base type text and array dimensions, outermost first."""
        dims: List[int] = []
        while isinstance(item, ArrayItem):
            dims.append(item.size)
            item = item.element
        if isinstance(item, CharArrayItem):
            return "char", dims + [item.size]
        return self._render_type(item), dims

    def _render_type(self, item: SchemaItem) -> str:
        if isinstance(item, ScalarItem):
            return item.scalar.value
        named = self.schema.lookup(item)
        if isinstance(named, StructType):
            members = " ".join(f"{self._render_member(m.item)};" for m in named.members)
            return f"struct {{ {members} }}" if members else "struct { }"
        if isinstance(named, EnumType):
            variants = ", ".join(f'"{_escape(v.tag)}" = {v.value}' for v in named.variants)
            return f"enum {{ {variants} }}"
        if isinstance(named, TaggedStructType):
            keyword, entries = "taggedstruct", named.entries
        else:
            keyword, entries = "taggedunion", named.variants
        body = " ".join(f"{self._render_entry(entry)}" for entry in entries)
        return f"{keyword} {{ {body} }}" if body else f"{keyword} {{ }}"

    def _render_entry(self, entry: TaggedEntry) -> str:
        text = f'"{_escape(entry.tag)}"'
        if entry.is_block:
            text = f"block {text}"
        if entry.item is not None:
            text = f"{text} {self._render_member(entry.item)}"
        if entry.multiplicity == Multiplicity.REPEATED:
            text = f"({text})*"
        return f"{text};"


def _escape(tag: str) -> str:
    return (
        tag.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\t", "\\t")
    )


def render_canonical_text(schema: Schema) -> str:
    """
    Render the canonical plain A2ML text of a schema.

    Args:
        schema: Resolved schema

    Returns:
        One line per top-level block, e.g. ``block "TAG1" struct { uint; uint; };``
    """
    return CanonicalRenderer(schema).render()
