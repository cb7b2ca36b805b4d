"""
Generic Tree Runtime
====================

The generic tagged-token tree that generated modules decode from and encode
to, together with the helpers the generated code calls.

A node carries an optional tag, an optional scalar payload and an ordered
list of children. A tagged item is a single node: the tag and the payload of
the item live on the same node, e.g. ``block "TAG1" struct { uint; uint; }``
holding 5 and 7 is ``GenericNode(tag="TAG1", children=[5, 7])``.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, TypeVar, Union

from pydantic import BaseModel, Field, StrictFloat, StrictInt, StrictStr

T = TypeVar("T")

Scalar = Union[StrictInt, StrictFloat, StrictStr]

INTEGER_RANGES: Dict[str, tuple] = {
    "char": (-(2**7), 2**7 - 1),
    "int": (-(2**15), 2**15 - 1),
    "long": (-(2**31), 2**31 - 1),
    "int64": (-(2**63), 2**63 - 1),
    "uchar": (0, 2**8 - 1),
    "uint": (0, 2**16 - 1),
    "ulong": (0, 2**32 - 1),
    "uint64": (0, 2**64 - 1),
}


class GenericNode(BaseModel):
    """One node of the generic tagged-token tree."""

    tag: Optional[str] = Field(None, description="Tag of a tagged item")
    value: Optional[Scalar] = Field(None, description="Scalar payload")
    children: List["GenericNode"] = Field(default_factory=list)
    is_block: bool = Field(False, description="Whether the tag was written as a block")
    line: int = Field(0, ge=0, description="Source line, 0 when unknown")

    @classmethod
    def from_data(cls, data: Any) -> "GenericNode":
        """
        Build a tree from plain Python data.

        Scalars become leaf nodes, lists become untagged nodes whose children
        are the list items, and dicts map directly onto the node fields.

        Args:
            data: int, float, str, list or dict

        Returns:
            GenericNode for the data
        """
        if isinstance(data, GenericNode):
            return data
        if isinstance(data, list):
            return cls(children=[cls.from_data(item) for item in data])
        if isinstance(data, dict):
            fields = dict(data)
            fields["children"] = [cls.from_data(item) for item in fields.get("children", [])]
            return cls(**fields)
        return cls(value=data)

    def to_data(self) -> Any:
        """Inverse of from_data, omitting empty fields."""
        if self.tag is None and not self.is_block and not self.line:
            if not self.children and self.value is not None:
                return self.value
            if self.value is None:
                return [child.to_data() for child in self.children]
        data: Dict[str, Any] = {}
        if self.tag is not None:
            data["tag"] = self.tag
        if self.value is not None:
            data["value"] = self.value
        if self.children:
            data["children"] = [child.to_data() for child in self.children]
        if self.is_block:
            data["is_block"] = True
        if self.line:
            data["line"] = self.line
        return data

    def describe(self) -> str:
        if self.tag is not None:
            return f'tag "{self.tag}"'
        if self.value is not None:
            return repr(self.value)
        return f"node with {len(self.children)} children"


GenericNode.model_rebuild()


class DecodeError(Exception):
    """Exception raised when a generic tree does not match the schema."""

    def __init__(self, message: str, tag: Optional[str] = None, line: int = 0) -> None:
        self.message = message
        self.tag = tag
        self.line = line
        text = message
        if tag is not None:
            text = f'{text} (tag "{tag}")'
        if line:
            text = f"{text} at line {line}"
        super().__init__(text)


def _fail(message: str, node: GenericNode, context: str) -> DecodeError:
    return DecodeError(f"{context}: {message}", tag=node.tag, line=node.line)


# ----------------------------------------------------------------------
# Scalars
# ----------------------------------------------------------------------


def decode_integer(node: GenericNode, kind: str, context: str) -> int:
    """
    Decode an integer payload and check it against the range of its kind.

    Args:
        node: Node carrying the value
        kind: A2ML integer type name, e.g. "uint"
        context: Location used in error messages

    Returns:
        The integer value

    Raises:
        DecodeError: If the payload is missing, not an integer or out of range
    """
    value = node.value
    if isinstance(value, bool) or not isinstance(value, int):
        raise _fail(f"expected {kind} value, found {node.describe()}", node, context)
    low, high = INTEGER_RANGES[kind]
    if not low <= value <= high:
        raise _fail(f"value {value} out of range for {kind} [{low}, {high}]", node, context)
    return value


def decode_float(node: GenericNode, context: str) -> float:
    """Decode a float or double payload; integers are accepted."""
    value = node.value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _fail(f"expected floating point value, found {node.describe()}", node, context)
    return float(value)


def decode_string(node: GenericNode, size: int, context: str) -> str:
    """Decode a fixed-length string payload of at most size characters."""
    value = node.value
    if not isinstance(value, str):
        raise _fail(f"expected string value, found {node.describe()}", node, context)
    if len(value) > size:
        raise _fail(f"string of length {len(value)} exceeds char[{size}]", node, context)
    return value


def decode_enum(node: GenericNode, members: Mapping[str, T], context: str) -> T:
    """Decode an enum whose payload is the variant tag."""
    value = node.value
    if not isinstance(value, str):
        raise _fail(f"expected enum tag, found {node.describe()}", node, context)
    if value not in members:
        raise _fail(
            f"unknown enum tag '{value}', expected one of {', '.join(members)}", node, context
        )
    return members[value]


def encode_scalar(value: Scalar) -> GenericNode:
    return GenericNode(value=value)


# ----------------------------------------------------------------------
# Arrays and sequences
# ----------------------------------------------------------------------


def decode_array(
    node: GenericNode, size: int, decode: Callable[[GenericNode], T], context: str
) -> List[T]:
    """Decode a fixed-size array; the node must have exactly size children."""
    if len(node.children) != size:
        raise _fail(
            f"expected {size} array elements, found {len(node.children)}", node, context
        )
    return [decode(child) for child in node.children]


def decode_sequence(node: GenericNode, decode: Callable[[GenericNode], T]) -> List[T]:
    """Decode a repeated sequence; every child is one element."""
    return [decode(child) for child in node.children]


def encode_list(values: List[T], encode: Callable[[T], GenericNode]) -> GenericNode:
    return GenericNode(children=[encode(value) for value in values])


# ----------------------------------------------------------------------
# Structs, tagged structs and tagged unions
# ----------------------------------------------------------------------


def struct_children(node: GenericNode, count: int, context: str) -> List[GenericNode]:
    """Children of a struct node, one per member in declaration order."""
    found = len(node.children)
    if found < count:
        raise _fail(f"missing member: expected {count} members, found {found}", node, context)
    if found > count:
        extra = node.children[count]
        raise _fail(
            f"unexpected extra member {extra.describe()}: expected {count} members",
            extra,
            context,
        )
    return node.children


def group_tagged(
    node: GenericNode, multiplicities: Mapping[str, str], context: str
) -> Dict[str, List[GenericNode]]:
    """
    Group the children of a tagged struct by tag.

    Args:
        node: Tagged struct node
        multiplicities: Allowed tags mapped to "optional" or "repeated"
        context: Location used in error messages

    Returns:
        Children grouped by tag, in order of appearance

    Raises:
        DecodeError: On untagged children, unknown tags or repeated optional tags
    """
    groups: Dict[str, List[GenericNode]] = {}
    for child in node.children:
        if child.tag is None:
            raise _fail(f"expected a tagged item, found {child.describe()}", child, context)
        if child.tag not in multiplicities:
            raise _fail(f'unrecognised tag "{child.tag}"', child, context)
        group = groups.setdefault(child.tag, [])
        if group and multiplicities[child.tag] != "repeated":
            raise _fail(f'tag "{child.tag}" may only appear once', child, context)
        group.append(child)
    return groups


def optional_entry(
    groups: Mapping[str, List[GenericNode]], tag: str, decode: Callable[[GenericNode], T]
) -> Optional[T]:
    nodes = groups.get(tag)
    return decode(nodes[0]) if nodes else None


def repeated_entry(
    groups: Mapping[str, List[GenericNode]], tag: str, decode: Callable[[GenericNode], T]
) -> List[T]:
    return [decode(node) for node in groups.get(tag, [])]


def entry_present(groups: Mapping[str, List[GenericNode]], tag: str) -> bool:
    return bool(groups.get(tag))


def entry_count(groups: Mapping[str, List[GenericNode]], tag: str) -> int:
    return len(groups.get(tag, []))


def select_variant(node: GenericNode, variants: Mapping[str, Any], context: str) -> GenericNode:
    """The single tagged child of a tagged union node."""
    if not node.children:
        raise _fail(
            f"missing tagged union variant, expected one of {', '.join(variants)}", node, context
        )
    if len(node.children) > 1:
        extra = node.children[1]
        raise _fail(f"unexpected second union variant {extra.describe()}", extra, context)
    child = node.children[0]
    if child.tag not in variants:
        raise _fail(
            f"unrecognised variant {child.describe()}, expected one of {', '.join(variants)}",
            child,
            context,
        )
    return child


def with_tag(node: GenericNode, tag: str, is_block: bool) -> GenericNode:
    """Attach a tag to an encoded item."""
    return node.model_copy(update={"tag": tag, "is_block": is_block})


def tag_only(tag: str, is_block: bool) -> GenericNode:
    return GenericNode(tag=tag, is_block=is_block)


def optional_nodes(
    value: Optional[T], tag: str, is_block: bool, encode: Callable[[T], GenericNode]
) -> List[GenericNode]:
    if value is None:
        return []
    return [with_tag(encode(value), tag, is_block)]


def repeated_nodes(
    values: List[T], tag: str, is_block: bool, encode: Callable[[T], GenericNode]
) -> List[GenericNode]:
    return [with_tag(encode(value), tag, is_block) for value in values]


def flag_nodes(present: bool, tag: str, is_block: bool) -> List[GenericNode]:
    return [tag_only(tag, is_block)] if present else []


def count_nodes(count: int, tag: str, is_block: bool) -> List[GenericNode]:
    return [tag_only(tag, is_block) for _ in range(count)]
