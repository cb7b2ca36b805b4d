"""
Syntax Tree Models
==================

Pydantic models for the abstract syntax tree of an enhanced A2ML
specification. The parser builds these nodes; the resolver consumes them.
"""

from typing import Annotated, List, Literal, Optional, Union
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


# Enums
class ScalarKind(str, Enum):
    """Predefined A2ML scalar types."""
    CHAR = "char"
    INT = "int"
    LONG = "long"
    INT64 = "int64"
    UCHAR = "uchar"
    UINT = "uint"
    ULONG = "ulong"
    UINT64 = "uint64"
    FLOAT = "float"
    DOUBLE = "double"

    @property
    def is_float(self) -> bool:
        return self in (ScalarKind.FLOAT, ScalarKind.DOUBLE)


class Multiplicity(str, Enum):
    """How often a tagged entry may occur."""
    ONE = "one"
    OPTIONAL = "optional"
    REPEATED = "repeated"


class SourcePosition(BaseModel):
    """Line and column of a token in the specification text."""
    model_config = ConfigDict(frozen=True)

    line: int = Field(..., ge=1, description="1-based line number")
    column: int = Field(..., ge=1, description="1-based column number")

    def __str__(self) -> str:
        return f"line {self.line}, column {self.column}"


# Base Models
class AstNode(BaseModel):
    """Base node with source position and trailing documentation."""
    position: SourcePosition
    doc: Optional[str] = Field(None, description="Documentation comment")


class ScalarNode(AstNode):
    kind: Literal["scalar"] = "scalar"
    scalar: ScalarKind


class CharArrayNode(AstNode):
    """Fixed-length string, written char[N]."""
    kind: Literal["char_array"] = "char_array"
    size: int = Field(..., ge=1)


class ArrayNode(AstNode):
    kind: Literal["array"] = "array"
    element: "TypeNode"
    size: int = Field(..., ge=1)


class SequenceNode(AstNode):
    """Zero or more repetitions of an item, written (item)*."""
    kind: Literal["sequence"] = "sequence"
    element: "TypeNode"


class MemberNode(AstNode):
    """Struct member: an item with an optional field name."""
    name: Optional[str] = None
    item: "TypeNode"


class StructNode(AstNode):
    """Struct definition, or a reference when members is None."""
    kind: Literal["struct"] = "struct"
    name: Optional[str] = None
    members: Optional[List[MemberNode]] = None


class TaggedEntryNode(AstNode):
    """Entry of a taggedstruct or variant of a taggedunion."""
    tag: str
    name: Optional[str] = None
    item: Optional["TypeNode"] = None
    multiplicity: Multiplicity = Multiplicity.OPTIONAL
    is_block: bool = False


class TaggedStructNode(AstNode):
    kind: Literal["taggedstruct"] = "taggedstruct"
    name: Optional[str] = None
    entries: Optional[List[TaggedEntryNode]] = None


class TaggedUnionNode(AstNode):
    kind: Literal["taggedunion"] = "taggedunion"
    name: Optional[str] = None
    variants: Optional[List[TaggedEntryNode]] = None


class EnumeratorNode(AstNode):
    tag: str
    value: Optional[int] = None


class EnumNode(AstNode):
    kind: Literal["enum"] = "enum"
    name: Optional[str] = None
    enumerators: Optional[List[EnumeratorNode]] = None


TypeNode = Annotated[
    Union[
        ScalarNode,
        CharArrayNode,
        ArrayNode,
        SequenceNode,
        StructNode,
        TaggedStructNode,
        TaggedUnionNode,
        EnumNode,
    ],
    Field(discriminator="kind"),
]

NamedTypeNode = Union[StructNode, TaggedStructNode, TaggedUnionNode, EnumNode]


class BlockNode(AstNode):
    """Top-level block declaration."""
    tag: str
    name: Optional[str] = None
    item: TypeNode
    repeated: bool = False


class SpecificationNode(BaseModel):
    """A complete specification: root name, blocks and type definitions."""
    name: str
    position: SourcePosition
    blocks: List[BlockNode] = Field(default_factory=list)
    types: List[NamedTypeNode] = Field(default_factory=list)


# Update forward references
ArrayNode.model_rebuild()
SequenceNode.model_rebuild()
MemberNode.model_rebuild()
StructNode.model_rebuild()
TaggedEntryNode.model_rebuild()
TaggedStructNode.model_rebuild()
TaggedUnionNode.model_rebuild()
BlockNode.model_rebuild()
SpecificationNode.model_rebuild()
