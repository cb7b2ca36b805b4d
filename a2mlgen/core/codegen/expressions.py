"""
Codegen Expressions
===================

Python source fragments for the annotation, decode and encode of schema
items. The fragments refer to the aliases the module template defines:
``_typing``, ``_runtime``, ``_int``/``_float``/``_str``/``_bool``/``_list`` and one
``_T_<Name>`` alias per generated class.
"""

from typing import Optional

from a2mlgen.models.ast import Multiplicity
from a2mlgen.models.schema import (
    ArrayItem,
    CharArrayItem,
    ScalarItem,
    SchemaItem,
    SequenceItem,
    TaggedEntry,
)


def class_alias(name: str) -> str:
    """Module-level alias of a generated class, safe from field shadowing."""
    return f"_T_{name}"


def annotation(item: SchemaItem) -> str:
    """Type annotation of a field holding item."""
    if isinstance(item, ScalarItem):
        return "_float" if item.scalar.is_float else "_int"
    if isinstance(item, CharArrayItem):
        return "_str"
    if isinstance(item, (ArrayItem, SequenceItem)):
        return f"_typing.List[{annotation(item.element)}]"
    return class_alias(item.name)


def decode_expr(item: SchemaItem, node: str, context: str) -> str:
    """Expression decoding the node expression into a value of item."""
    if isinstance(item, ScalarItem):
        if item.scalar.is_float:
            return f"_runtime.decode_float({node}, {context!r})"
        return f"_runtime.decode_integer({node}, {item.scalar.value!r}, {context!r})"
    if isinstance(item, CharArrayItem):
        return f"_runtime.decode_string({node}, {item.size}, {context!r})"
    if isinstance(item, ArrayItem):
        element = decoder(item.element, f"{context}[]")
        return f"_runtime.decode_array({node}, {item.size}, {element}, {context!r})"
    if isinstance(item, SequenceItem):
        return f"_runtime.decode_sequence({node}, {decoder(item.element, f'{context}[]')})"
    return f"{class_alias(item.name)}.decode({node})"


def decoder(item: SchemaItem, context: str) -> str:
    """Callable expression taking a node and returning a decoded value."""
    if not isinstance(item, (ScalarItem, CharArrayItem, ArrayItem, SequenceItem)):
        return f"{class_alias(item.name)}.decode"
    return f"lambda n: {decode_expr(item, 'n', context)}"


def encode_expr(item: SchemaItem, value: str) -> str:
    """Expression encoding the value expression into a generic node."""
    if isinstance(item, (ScalarItem, CharArrayItem)):
        return f"_runtime.encode_scalar({value})"
    if isinstance(item, (ArrayItem, SequenceItem)):
        return f"_runtime.encode_list({value}, {encoder(item.element)})"
    return f"{value}.encode()"


def encoder(item: SchemaItem) -> str:
    """Callable expression taking a value and returning a generic node."""
    if isinstance(item, (ScalarItem, CharArrayItem)):
        return "_runtime.encode_scalar"
    if isinstance(item, (ArrayItem, SequenceItem)):
        return f"lambda v: {encode_expr(item, 'v')}"
    return f"{class_alias(item.name)}.encode"


# ----------------------------------------------------------------------
# Tagged struct entries
# ----------------------------------------------------------------------


def entry_annotation(entry: TaggedEntry) -> str:
    if entry.item is None:
        return "_bool" if entry.multiplicity == Multiplicity.OPTIONAL else "_int"
    if entry.multiplicity == Multiplicity.REPEATED:
        return f"_typing.List[{annotation(entry.item)}]"
    return f"_typing.Optional[{annotation(entry.item)}]"


def entry_default(entry: TaggedEntry) -> str:
    """First argument of the entry's Field() call."""
    if entry.item is None:
        return "False" if entry.multiplicity == Multiplicity.OPTIONAL else "0"
    if entry.multiplicity == Multiplicity.REPEATED:
        return "default_factory=_list"
    return "None"


def entry_decode(entry: TaggedEntry, context: str) -> str:
    """Expression reading the entry out of the ``groups`` mapping."""
    tag = repr(entry.tag)
    if entry.item is None:
        if entry.multiplicity == Multiplicity.OPTIONAL:
            return f"_runtime.entry_present(groups, {tag})"
        return f"_runtime.entry_count(groups, {tag})"
    function = "repeated_entry" if entry.multiplicity == Multiplicity.REPEATED else "optional_entry"
    element_context = f"{context}.{entry.name}"
    return f"_runtime.{function}(groups, {tag}, {decoder(entry.item, element_context)})"


def entry_encode(entry: TaggedEntry, value: str) -> str:
    """Expression producing the list of nodes for the entry."""
    args = f"{value}, {entry.tag!r}, {entry.is_block}"
    if entry.item is None:
        if entry.multiplicity == Multiplicity.OPTIONAL:
            return f"_runtime.flag_nodes({args})"
        return f"_runtime.count_nodes({args})"
    function = "repeated_nodes" if entry.multiplicity == Multiplicity.REPEATED else "optional_nodes"
    return f"_runtime.{function}({args}, {encoder(entry.item)})"


def multiplicity_literal(entry: TaggedEntry) -> str:
    return repr("repeated" if entry.multiplicity == Multiplicity.REPEATED else "optional")


def variant_decode(entry: TaggedEntry, context: str) -> Optional[str]:
    """Expression decoding a union variant's value from ``node``, or None when tag-only."""
    if entry.item is None:
        return None
    return decode_expr(entry.item, "node", f"{context}.{entry.name}")


def variant_encode(entry: TaggedEntry) -> str:
    if entry.item is None:
        return f"_runtime.tag_only({entry.tag!r}, {entry.is_block})"
    return f"_runtime.with_tag({encode_expr(entry.item, 'self.value')}, {entry.tag!r}, {entry.is_block})"
