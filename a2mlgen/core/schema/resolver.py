"""
Schema Resolver
===============

Validates a parsed specification and turns it into an immutable Schema.

Resolution runs in two passes. The first pass registers every explicitly
named type definition, so types may be referenced before they are defined.
The second pass resolves bodies and references, synthesizes names for
anonymous types, checks uniqueness of tags and names, and assigns enum
values.
"""

from typing import Dict, List, NamedTuple, Optional, Set

from a2mlgen.config.logging import get_logger
from a2mlgen.config.settings import get_settings
from a2mlgen.models.ast import (
    ArrayNode,
    CharArrayNode,
    EnumNode,
    Multiplicity,
    NamedTypeNode,
    ScalarNode,
    SequenceNode,
    SourcePosition,
    SpecificationNode,
    StructNode,
    TaggedEntryNode,
    TaggedStructNode,
    TaggedUnionNode,
    TypeNode,
)
from a2mlgen.models.schema import (
    ArrayItem,
    CharArrayItem,
    EnumType,
    EnumVariant,
    NamedType,
    ScalarItem,
    Schema,
    SchemaItem,
    SequenceItem,
    StructMember,
    StructType,
    TaggedEntry,
    TaggedStructType,
    TaggedUnionType,
    TypeRef,
)
from a2mlgen.utils.diagnostics import ErrorContext
from a2mlgen.utils.naming import identifier_problem, to_camel_case, to_constant_case, to_snake_case
from a2mlgen.utils.tracking import DuplicateTracker

logger = get_logger(__name__)

_KIND_WORDS = {
    StructNode: "struct",
    TaggedStructNode: "taggedstruct",
    TaggedUnionNode: "taggedunion",
    EnumNode: "enum",
}


class _Hint(NamedTuple):
    """Where an item occurs; used to synthesize names of anonymous types."""
    tag: Optional[str]
    parent: str
    label: str
    doc: Optional[str] = None


def _has_body(node: NamedTypeNode) -> bool:
    if isinstance(node, StructNode):
        return node.members is not None
    if isinstance(node, TaggedStructNode):
        return node.entries is not None
    if isinstance(node, TaggedUnionNode):
        return node.variants is not None
    return node.enumerators is not None


def _children(node: TypeNode) -> List[TypeNode]:
    """Directly nested items of a node."""
    if isinstance(node, (ArrayNode, SequenceNode)):
        return [node.element]
    if isinstance(node, StructNode):
        return [m.item for m in node.members or []]
    if isinstance(node, TaggedStructNode):
        return [e.item for e in node.entries or [] if e.item is not None]
    if isinstance(node, TaggedUnionNode):
        return [v.item for v in node.variants or [] if v.item is not None]
    return []


class SchemaResolver:
    """Resolve one parsed specification into a Schema."""

    def __init__(self, spec: SpecificationNode) -> None:
        self.spec = spec
        self.settings = get_settings()
        self.logger = logger.bind(stage="resolver", specification=spec.name)
        self.context = ErrorContext()

        self._declared: Dict[str, NamedTypeNode] = {}
        self._explicit: Set[str] = set()
        self._class_names = DuplicateTracker("type name", self.context)
        self._types: Dict[str, NamedType] = {}
        self._order: List[str] = []
        self._resolving: Set[str] = set()

    def resolve(self) -> Schema:
        """
        Run both passes.

        Returns:
            The resolved Schema

        Raises:
            A2mlSemanticError: On the first semantic problem found
        """
        root_name = self._check_name(self.spec.name, "specification name", self.spec.position)
        text_constant = f"{self.spec.name.upper()}{self.settings.text_suffix}"
        self._register_explicit(root_name, self.spec.position)
        self._register_explicit(text_constant, self.spec.position)

        self._collect()

        for node in self.spec.types:
            with self.context.enter(f"{_KIND_WORDS[type(node)]} {node.name or '<anonymous>'}"):
                if node.name is None:
                    raise self.context.error(
                        "top-level type definitions must be named", node.position
                    )
                if not _has_body(node):
                    raise self.context.error(
                        f"top-level declaration of '{node.name}' has no body", node.position
                    )
            self._resolve_declared(node.name)

        entries = [
            TaggedEntryNode(
                tag=block.tag,
                name=block.name,
                item=block.item,
                multiplicity=Multiplicity.REPEATED if block.repeated else Multiplicity.OPTIONAL,
                is_block=True,
                doc=block.doc,
                position=block.position,
            )
            for block in self.spec.blocks
        ]
        root = TaggedStructType(
            name=root_name, entries=self._resolve_entries(entries, root_name, union=False)
        )
        self._store(root)

        schema = Schema(
            name=root_name, text_constant=text_constant, types=self._types, order=self._order
        )
        self.logger.info("Resolved specification", types=len(self._types))
        return schema

    # ------------------------------------------------------------------
    # Pass 1: collect explicitly named definitions
    # ------------------------------------------------------------------

    def _collect(self) -> None:
        pending: List[TypeNode] = list(self.spec.types)
        pending.extend(block.item for block in self.spec.blocks)
        while pending:
            node = pending.pop(0)
            if isinstance(node, tuple(_KIND_WORDS)) and node.name is not None and _has_body(node):
                with self.context.enter(f"{_KIND_WORDS[type(node)]} {node.name}"):
                    self._check_name(node.name, "type name", node.position)
                    if node.name in self._declared:
                        raise self.context.error(
                            f"type '{node.name}' is defined more than once",
                            self._declared[node.name].position,
                            node.position,
                        )
                    self._register_explicit(node.name, node.position)
                    self._declared[node.name] = node
            pending.extend(_children(node))

    def _register_explicit(self, name: str, position: SourcePosition) -> None:
        self._class_names.add(name, position)
        self._explicit.add(name)

    # ------------------------------------------------------------------
    # Pass 2: resolve items
    # ------------------------------------------------------------------

    def _resolve_item(self, node: TypeNode, hint: _Hint) -> SchemaItem:
        if isinstance(node, ScalarNode):
            return ScalarItem(scalar=node.scalar)
        if isinstance(node, CharArrayNode):
            return CharArrayItem(size=node.size)
        if isinstance(node, ArrayNode):
            return ArrayItem(element=self._resolve_item(node.element, hint), size=node.size)
        if isinstance(node, SequenceNode):
            return SequenceItem(element=self._resolve_item(node.element, hint))
        return self._resolve_named(node, hint)

    def _resolve_named(self, node: NamedTypeNode, hint: _Hint) -> TypeRef:
        kind = _KIND_WORDS[type(node)]
        if not _has_body(node):
            if node.name is None:
                raise self.context.error(f"anonymous {kind} must have a body", node.position)
            target = self._declared.get(node.name)
            if target is None:
                raise self.context.error(f"reference to undefined {kind} '{node.name}'", node.position)
            if type(target) is not type(node):
                raise self.context.error(
                    f"'{node.name}' is a {_KIND_WORDS[type(target)]}, not a {kind}",
                    node.position,
                    target.position,
                )
            return self._resolve_declared(node.name, node.position)
        if node.name is not None:
            return self._resolve_declared(node.name, node.position, hint.doc)

        name = self._synthesize(hint, node.position)
        with self.context.enter(f"{kind} {name}"):
            self._store(self._build(node, name, hint.doc))
        return TypeRef(name=name)

    def _resolve_declared(
        self, name: str, position: Optional[SourcePosition] = None, doc: Optional[str] = None
    ) -> TypeRef:
        if name in self._types:
            return TypeRef(name=name)
        node = self._declared[name]
        if name in self._resolving:
            raise self.context.error(
                f"type '{name}' refers to itself", node.position, *(p for p in [position] if p)
            )
        self._resolving.add(name)
        with self.context.enter(f"{_KIND_WORDS[type(node)]} {name}"):
            built = self._build(node, name, doc)
        self._resolving.discard(name)
        self._store(built)
        return TypeRef(name=name)

    def _store(self, named: NamedType) -> None:
        self._types[named.name] = named
        self._order.append(named.name)

    def _build(self, node: NamedTypeNode, name: str, doc: Optional[str]) -> NamedType:
        doc = node.doc or doc
        if isinstance(node, StructNode):
            return StructType(name=name, members=self._resolve_members(node, name), doc=doc)
        if isinstance(node, TaggedStructNode):
            entries = self._resolve_entries(node.entries, name, union=False)
            return TaggedStructType(name=name, entries=entries, doc=doc)
        if isinstance(node, TaggedUnionNode):
            variants = self._resolve_entries(node.variants, name, union=True)
            return TaggedUnionType(name=name, variants=variants, doc=doc)
        return EnumType(name=name, variants=self._resolve_enumerators(node), doc=doc)

    def _resolve_members(self, node: StructNode, name: str) -> List[StructMember]:
        fields = DuplicateTracker("member name", self.context)
        members = []
        for index, member in enumerate(node.members):
            if member.name is not None:
                field = self._check_name(member.name, "member name", member.position)
            else:
                field = f"item_{index}"
            fields.add(field, member.position)
            hint = _Hint(tag=None, parent=name, label=member.name or f"item{index}", doc=member.doc)
            item = self._resolve_item(member.item, hint)
            members.append(StructMember(name=field, item=item, doc=member.doc))
        return members

    def _resolve_entries(
        self, entries: List[TaggedEntryNode], name: str, union: bool
    ) -> List[TaggedEntry]:
        tags = DuplicateTracker("tag", self.context)
        fields = DuplicateTracker("variant name" if union else "member name", self.context)
        explicit = {entry.name for entry in entries if entry.name is not None}
        resolved = []
        for entry in entries:
            tags.add(entry.tag, entry.position)
            if entry.name is not None:
                field = self._check_name(entry.name, "member name", entry.position)
            else:
                field = to_snake_case(entry.tag)
                # Tags differing only in case or punctuation share a base name
                if field not in explicit:
                    field = fields.unique(field, explicit)
            fields.add(field, entry.position)

            item = None
            if entry.item is not None:
                hint = _Hint(tag=entry.tag, parent=name, label=field, doc=entry.doc)
                with self.context.enter(f'"{entry.tag}"'):
                    item = self._resolve_item(entry.item, hint)

            class_name = None
            if union:
                class_name = self._unique_class_name(f"{name}{to_camel_case(field)}", entry.position)
            resolved.append(
                TaggedEntry(
                    tag=entry.tag,
                    name=field,
                    item=item,
                    multiplicity=Multiplicity.ONE if union else entry.multiplicity,
                    is_block=entry.is_block,
                    class_name=class_name,
                    doc=entry.doc,
                )
            )
        return resolved

    def _resolve_enumerators(self, node: EnumNode) -> List[EnumVariant]:
        tags = DuplicateTracker("enum tag", self.context)
        members = DuplicateTracker("enum member", self.context)
        values = DuplicateTracker("enum value", self.context)
        variants = []
        next_value = 0
        for enumerator in node.enumerators:
            tags.add(enumerator.tag, enumerator.position)
            member = members.unique(to_constant_case(enumerator.tag))
            members.add(member, enumerator.position)
            # An explicit value resets the baseline for the following variants
            value = enumerator.value if enumerator.value is not None else next_value
            values.add(str(value), enumerator.position)
            next_value = value + 1
            variants.append(
                EnumVariant(tag=enumerator.tag, name=member, value=value, doc=enumerator.doc)
            )
        return variants

    # ------------------------------------------------------------------
    # Names
    # ------------------------------------------------------------------

    def _check_name(self, name: str, what: str, position: SourcePosition) -> str:
        problem = identifier_problem(name)
        if problem:
            raise self.context.error(f"{what} '{name}' {problem}", position)
        return name

    def _synthesize(self, hint: _Hint, position: SourcePosition) -> str:
        if hint.tag is not None:
            base = to_camel_case(hint.tag)
        else:
            base = f"{hint.parent}{to_camel_case(hint.label)}"
        if base in self._explicit:
            raise self.context.error(
                f"synthesized name '{base}' collides with an explicitly named type",
                self._class_names.first_position(base),
                position,
            )
        if base in self._class_names and hint.tag is not None:
            base = f"{hint.parent}{base}"
        return self._unique_class_name(base, position)

    def _unique_class_name(self, base: str, position: SourcePosition) -> str:
        name = base
        counter = 2
        while name in self._class_names:
            name = f"{base}{counter}"
            counter += 1
        self._class_names.add(name, position)
        return name


def resolve_specification(spec: SpecificationNode) -> Schema:
    """
    Resolve a parsed specification.

    Args:
        spec: Specification produced by the parser

    Returns:
        Validated, immutable Schema
    """
    return SchemaResolver(spec).resolve()
