"""
A2ML Parser
===========

Recursive-descent parser for the enhanced A2ML dialect. Every name in the
enhanced dialect is optional, so plain A2ML is accepted by the same rules.

Parsing is purely syntax-directed: tag uniqueness, enum values, references
and names are checked later by the schema resolver.
"""

from typing import List, Optional, Tuple

from a2mlgen.config.logging import get_logger
from a2mlgen.core.dsl.lexer import Token, TokenType, parse_int, tokenize
from a2mlgen.models.ast import (
    ArrayNode,
    BlockNode,
    CharArrayNode,
    EnumNode,
    EnumeratorNode,
    MemberNode,
    Multiplicity,
    ScalarKind,
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
from a2mlgen.utils.diagnostics import A2mlSyntaxError

logger = get_logger(__name__)

_SCALAR_KEYWORDS = {kind.value: kind for kind in ScalarKind}
_TYPE_KEYWORDS = {"struct", "taggedstruct", "taggedunion", "enum"}
KEYWORDS = frozenset(_SCALAR_KEYWORDS) | _TYPE_KEYWORDS | {"block"}


def parse_specification(text: str) -> SpecificationNode:
    """
    Parse an enhanced A2ML specification.

    The text starts with a <Name> header followed by top-level declarations.

    Args:
        text: Specification source

    Returns:
        SpecificationNode for the whole specification

    Raises:
        A2mlSyntaxError: If the text is malformed
    """
    spec = _Parser(tokenize(text)).parse_specification()
    logger.debug(
        "Parsed specification", name=spec.name, blocks=len(spec.blocks), types=len(spec.types)
    )
    return spec


def parse_plain(text: str, name: str = "A2ml") -> SpecificationNode:
    """
    Parse plain A2ML declarations that have no <Name> header.

    Args:
        text: Plain A2ML source, e.g. a canonical text rendering
        name: Root name to give the resulting specification

    Returns:
        SpecificationNode for the declarations
    """
    return _Parser(tokenize(text)).parse_declarations(name)


class _Parser:
    """Recursive-descent parser over a token list."""

    def __init__(self, tokens: List[Token]) -> None:
        self._tokens = tokens
        self._pos = 0

    # ------------------------------------------------------------------
    # Token access helpers
    # ------------------------------------------------------------------

    def _current(self) -> Token:
        # Documentation comments that do not trail a declaration are ignored
        while self._tokens[self._pos].type == TokenType.DOC:
            self._pos += 1
        return self._tokens[self._pos]

    def _peek(self, offset: int = 1) -> Token:
        self._current()
        index = self._pos
        while offset > 0 and index < len(self._tokens) - 1:
            index += 1
            if self._tokens[index].type != TokenType.DOC:
                offset -= 1
        return self._tokens[index]

    def _advance(self) -> Token:
        tok = self._current()
        if tok.type != TokenType.EOF:
            self._pos += 1
        return tok

    def _check(self, value: str) -> bool:
        tok = self._current()
        return tok.type in (TokenType.PUNCT, TokenType.IDENT) and tok.value == value

    def _error(self, expected: str) -> A2mlSyntaxError:
        tok = self._current()
        return A2mlSyntaxError("syntax error", tok.position, found=tok.describe(), expected=expected)

    def _expect(self, value: str) -> Token:
        if not self._check(value):
            raise self._error(f"'{value}'")
        return self._advance()

    def _expect_type(self, token_type: TokenType, expected: str) -> Token:
        if self._current().type != token_type:
            raise self._error(expected)
        return self._advance()

    def _optional_name(self) -> Optional[str]:
        tok = self._current()
        if tok.type == TokenType.IDENT and tok.value not in KEYWORDS:
            self._advance()
            return tok.value
        return None

    def _take_doc(self) -> Optional[str]:
        """Consume documentation comments directly following the last token."""
        lines = []
        while self._tokens[self._pos].type == TokenType.DOC:
            lines.append(self._tokens[self._pos].value)
            self._pos += 1
        return "\n".join(lines) if lines else None

    # ------------------------------------------------------------------
    # Top-level declarations
    # ------------------------------------------------------------------

    def parse_specification(self) -> SpecificationNode:
        start = self._expect("<")
        name = self._expect_type(TokenType.IDENT, "specification name").value
        self._expect(">")
        return self._parse_body(name, start.position)

    def parse_declarations(self, name: str) -> SpecificationNode:
        return self._parse_body(name, self._current().position)

    def _parse_body(self, name: str, position: SourcePosition) -> SpecificationNode:
        spec = SpecificationNode(name=name, position=position)
        while self._current().type != TokenType.EOF:
            self._parse_declaration(spec)
        return spec

    def _parse_declaration(self, spec: SpecificationNode) -> None:
        if self._check("block"):
            node = self._parse_block()
            spec.blocks.append(node)
        elif self._check("(") and self._peek().value == "block":
            self._advance()
            node = self._parse_block()
            self._expect(")")
            self._expect("*")
            node.repeated = True
            spec.blocks.append(node)
        elif self._current().type == TokenType.IDENT and self._current().value in _TYPE_KEYWORDS:
            node = self._parse_type_name()
            spec.types.append(node)
        else:
            raise self._error("'block' or a type definition")
        self._expect(";")
        node.doc = self._take_doc() or node.doc

    def _parse_block(self) -> BlockNode:
        start = self._expect("block")
        tag = self._expect_type(TokenType.STRING, "block tag string").value
        name, item = self._parse_member_or_sequence()
        return BlockNode(tag=tag, name=name, item=item, position=start.position)

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------

    def _parse_member_or_sequence(self) -> Tuple[Optional[str], TypeNode]:
        """member | "(" member ")" "*" """
        if self._check("("):
            start = self._advance()
            name, item = self._parse_member()
            self._expect(")")
            self._expect("*")
            return name, SequenceNode(element=item, position=start.position)
        return self._parse_member()

    def _parse_member(self) -> Tuple[Optional[str], TypeNode]:
        """type_name dims [IDENT] dims"""
        item = self._parse_type_name()
        dims = self._parse_dims()
        name = self._optional_name()
        dims.extend(self._parse_dims())
        return name, self._apply_dims(item, dims)

    def _parse_dims(self) -> List[int]:
        dims = []
        while self._check("["):
            self._advance()
            tok = self._expect_type(TokenType.INT, "array size")
            size = parse_int(tok)
            if size < 1:
                raise A2mlSyntaxError(
                    "array size must be positive", tok.position, found=tok.describe()
                )
            self._expect("]")
            dims.append(size)
        return dims

    @staticmethod
    def _apply_dims(item: TypeNode, dims: List[int]) -> TypeNode:
        if not dims:
            return item
        if isinstance(item, ScalarNode) and item.scalar == ScalarKind.CHAR:
            # The innermost dimension of a char array is a fixed-length string
            item = CharArrayNode(size=dims[-1], position=item.position)
            dims = dims[:-1]
        for size in reversed(dims):
            item = ArrayNode(element=item, size=size, position=item.position)
        return item

    # ------------------------------------------------------------------
    # Type names
    # ------------------------------------------------------------------

    def _parse_type_name(self) -> TypeNode:
        tok = self._current()
        if tok.type == TokenType.IDENT:
            if tok.value in _SCALAR_KEYWORDS:
                self._advance()
                return ScalarNode(scalar=_SCALAR_KEYWORDS[tok.value], position=tok.position)
            if tok.value == "struct":
                return self._parse_struct()
            if tok.value == "taggedstruct":
                return self._parse_taggedstruct()
            if tok.value == "taggedunion":
                return self._parse_taggedunion()
            if tok.value == "enum":
                return self._parse_enum()
        raise self._error("type name")

    def _parse_struct(self) -> StructNode:
        start = self._expect("struct")
        name = self._optional_name()
        if not self._check("{"):
            return StructNode(name=name, position=start.position)
        self._advance()
        members: List[MemberNode] = []
        while not self._check("}"):
            position = self._current().position
            member_name, item = self._parse_member_or_sequence()
            self._expect(";")
            members.append(
                MemberNode(name=member_name, item=item, doc=self._take_doc(), position=position)
            )
        self._advance()
        return StructNode(name=name, members=members, position=start.position)

    def _parse_taggedstruct(self) -> TaggedStructNode:
        start = self._expect("taggedstruct")
        name = self._optional_name()
        if not self._check("{"):
            return TaggedStructNode(name=name, position=start.position)
        self._advance()
        entries: List[TaggedEntryNode] = []
        while not self._check("}"):
            if self._check("("):
                self._advance()
                entry = self._parse_tagged_definition()
                self._expect(")")
                self._expect("*")
                entry.multiplicity = Multiplicity.REPEATED
            else:
                entry = self._parse_tagged_definition()
            self._expect(";")
            entry.doc = self._take_doc()
            entries.append(entry)
        self._advance()
        return TaggedStructNode(name=name, entries=entries, position=start.position)

    def _parse_taggedunion(self) -> TaggedUnionNode:
        start = self._expect("taggedunion")
        name = self._optional_name()
        if not self._check("{"):
            return TaggedUnionNode(name=name, position=start.position)
        self._advance()
        variants: List[TaggedEntryNode] = []
        while not self._check("}"):
            entry = self._parse_tagged_definition()
            entry.multiplicity = Multiplicity.ONE
            self._expect(";")
            entry.doc = self._take_doc()
            variants.append(entry)
        self._advance()
        return TaggedUnionNode(name=name, variants=variants, position=start.position)

    def _parse_tagged_definition(self) -> TaggedEntryNode:
        """["block"] STRING [member_or_sequence]"""
        tok = self._current()
        is_block = False
        if self._check("block"):
            self._advance()
            is_block = True
        elif tok.type != TokenType.STRING:
            raise self._error("tag string or 'block'")
        tag = self._expect_type(TokenType.STRING, "tag string").value
        if is_block or not (self._check(";") or self._check(")")):
            name, item = self._parse_member_or_sequence()
        else:
            name, item = None, None
        return TaggedEntryNode(
            tag=tag, name=name, item=item, is_block=is_block, position=tok.position
        )

    def _parse_enum(self) -> EnumNode:
        start = self._expect("enum")
        name = self._optional_name()
        if not self._check("{"):
            return EnumNode(name=name, position=start.position)
        self._advance()
        enumerators: List[EnumeratorNode] = []
        while True:
            tok = self._expect_type(TokenType.STRING, "enumerator tag string")
            value = None
            if self._check("="):
                self._advance()
                value = parse_int(self._expect_type(TokenType.INT, "enumerator value"))
            docs = [self._take_doc()]
            more = self._check(",")
            if more:
                self._advance()
                docs.append(self._take_doc())
            doc = "\n".join(d for d in docs if d) or None
            enumerators.append(
                EnumeratorNode(tag=tok.value, value=value, doc=doc, position=tok.position)
            )
            if not more or self._check("}"):
                break
        self._expect("}")
        return EnumNode(name=name, enumerators=enumerators, position=start.position)
