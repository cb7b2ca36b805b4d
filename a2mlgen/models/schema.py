"""
Schema Models
=============

Immutable models of a resolved specification. Named types live in a flat
table keyed by class name; items refer to them through TypeRef.
"""

from typing import Annotated, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from a2mlgen.models.ast import Multiplicity, ScalarKind


class SchemaModel(BaseModel):
    """Base for all schema models; instances are immutable."""
    model_config = ConfigDict(frozen=True)


# Items
class ScalarItem(SchemaModel):
    kind: Literal["scalar"] = "scalar"
    scalar: ScalarKind


class CharArrayItem(SchemaModel):
    kind: Literal["char_array"] = "char_array"
    size: int = Field(..., ge=1)


class ArrayItem(SchemaModel):
    kind: Literal["array"] = "array"
    element: "SchemaItem"
    size: int = Field(..., ge=1)


class SequenceItem(SchemaModel):
    kind: Literal["sequence"] = "sequence"
    element: "SchemaItem"


class TypeRef(SchemaModel):
    """Reference to a named type in the schema's type table."""
    kind: Literal["ref"] = "ref"
    name: str


SchemaItem = Annotated[
    Union[ScalarItem, CharArrayItem, ArrayItem, SequenceItem, TypeRef],
    Field(discriminator="kind"),
]


# Named types
class StructMember(SchemaModel):
    name: str = Field(..., description="Field name in the generated class")
    item: SchemaItem
    doc: Optional[str] = None


class StructType(SchemaModel):
    kind: Literal["struct"] = "struct"
    name: str
    members: List[StructMember] = Field(default_factory=list)
    doc: Optional[str] = None


class EnumVariant(SchemaModel):
    tag: str
    name: str = Field(..., description="Enum member name in the generated class")
    value: int
    doc: Optional[str] = None


class EnumType(SchemaModel):
    kind: Literal["enum"] = "enum"
    name: str
    variants: List[EnumVariant] = Field(default_factory=list)
    doc: Optional[str] = None


class TaggedEntry(SchemaModel):
    """Entry of a tagged struct, or variant of a tagged union."""
    tag: str
    name: str = Field(..., description="Field or variant name")
    item: Optional[SchemaItem] = Field(None, description="None for tag-only entries")
    multiplicity: Multiplicity = Multiplicity.OPTIONAL
    is_block: bool = False
    class_name: Optional[str] = Field(None, description="Variant class of a tagged union")
    doc: Optional[str] = None


class TaggedStructType(SchemaModel):
    kind: Literal["taggedstruct"] = "taggedstruct"
    name: str
    entries: List[TaggedEntry] = Field(default_factory=list)
    doc: Optional[str] = None


class TaggedUnionType(SchemaModel):
    kind: Literal["taggedunion"] = "taggedunion"
    name: str
    variants: List[TaggedEntry] = Field(default_factory=list)
    doc: Optional[str] = None


NamedType = Annotated[
    Union[StructType, EnumType, TaggedStructType, TaggedUnionType],
    Field(discriminator="kind"),
]

ArrayItem.model_rebuild()
SequenceItem.model_rebuild()


class Schema(SchemaModel):
    """A resolved specification."""
    name: str = Field(..., description="Specification name, also the root class name")
    text_constant: str = Field(..., description="Name of the canonical text constant")
    types: Dict[str, NamedType] = Field(default_factory=dict)
    order: List[str] = Field(
        default_factory=list, description="Type names, referenced types before their users"
    )

    @property
    def root_type(self) -> TaggedStructType:
        """The root type; its entries are the top-level blocks."""
        return self.types[self.name]

    def lookup(self, item: TypeRef) -> NamedType:
        return self.types[item.name]

    def item_signature(self, item: Optional[SchemaItem]) -> Tuple:
        """Structure of an item with all names and documentation removed."""
        if item is None:
            return ("none",)
        if isinstance(item, ScalarItem):
            return ("scalar", item.scalar.value)
        if isinstance(item, CharArrayItem):
            return ("char_array", item.size)
        if isinstance(item, ArrayItem):
            return ("array", item.size, self.item_signature(item.element))
        if isinstance(item, SequenceItem):
            return ("sequence", self.item_signature(item.element))
        named = self.lookup(item)
        if isinstance(named, StructType):
            return ("struct", tuple(self.item_signature(m.item) for m in named.members))
        if isinstance(named, EnumType):
            return ("enum", tuple((v.tag, v.value) for v in named.variants))
        entries = named.entries if isinstance(named, TaggedStructType) else named.variants
        return (named.kind, self.entries_signature(entries))

    def entries_signature(self, entries: List[TaggedEntry]) -> Tuple:
        return tuple(
            (e.tag, e.multiplicity.value, e.is_block, self.item_signature(e.item)) for e in entries
        )

    def signature(self) -> Tuple:
        """Structure of the whole specification, comparable across dialects."""
        return self.entries_signature(self.root_type.entries)
