"""
A2ML Lexer
==========

Splits enhanced A2ML text into tokens carrying line and column information.
Comments are dropped, except for /// documentation comments which are kept
as DOC tokens so the parser can attach them to the preceding member.
"""

import re
from enum import Enum
from typing import Iterator, List, NamedTuple

from a2mlgen.models.ast import SourcePosition
from a2mlgen.utils.diagnostics import A2mlSyntaxError


class TokenType(str, Enum):
    IDENT = "identifier"
    STRING = "string"
    INT = "integer"
    DOC = "doc comment"
    PUNCT = "punctuation"
    EOF = "end of input"


class Token(NamedTuple):
    type: TokenType
    value: str
    line: int
    column: int

    @property
    def position(self) -> SourcePosition:
        return SourcePosition(line=self.line, column=self.column)

    def describe(self) -> str:
        """Human readable form used in syntax errors."""
        if self.type == TokenType.EOF:
            return "end of input"
        if self.type == TokenType.STRING:
            return f'string "{self.value}"'
        return f"'{self.value}'"


_TOKEN_SPEC = [
    ("DOC", r"///[^\n]*"),
    ("LINE_COMMENT", r"//[^\n]*"),
    ("BLOCK_COMMENT", r"/\*.*?\*/"),
    ("STRING", r'"(?:[^"\\\n]|\\.)*"'),
    ("INT", r"[+-]?(?:0[xX][0-9A-Fa-f]+|[0-9]+)"),
    ("IDENT", r"[A-Za-z_][A-Za-z0-9_]*"),
    ("PUNCT", r"[<>{}()\[\];,=*]"),
    ("NEWLINE", r"\n"),
    ("SKIP", r"[ \t\r\f]+"),
    ("MISMATCH", r"."),
]
_TOKEN_RE = re.compile("|".join(f"(?P<{name}>{pattern})" for name, pattern in _TOKEN_SPEC), re.S)

_ESCAPES = {'"': '"', "\\": "\\", "n": "\n", "t": "\t"}


def _unescape(text: str) -> str:
    return re.sub(r"\\(.)", lambda m: _ESCAPES.get(m.group(1), m.group(1)), text)


def _iter_tokens(text: str) -> Iterator[Token]:
    line = 1
    line_start = 0
    for match in _TOKEN_RE.finditer(text):
        kind = match.lastgroup
        value = match.group()
        column = match.start() - line_start + 1
        if kind == "NEWLINE":
            line += 1
            line_start = match.end()
            continue
        if kind == "SKIP" or kind == "LINE_COMMENT":
            continue
        if kind == "BLOCK_COMMENT":
            newlines = value.count("\n")
            if newlines:
                line += newlines
                line_start = match.start() + value.rfind("\n") + 1
            continue
        if kind == "MISMATCH":
            if value == '"':
                raise A2mlSyntaxError(
                    "unterminated string literal", SourcePosition(line=line, column=column)
                )
            if text.startswith("/*", match.start()):
                raise A2mlSyntaxError(
                    "unterminated block comment", SourcePosition(line=line, column=column)
                )
            raise A2mlSyntaxError(
                "unexpected character", SourcePosition(line=line, column=column), found=repr(value)
            )
        if kind == "DOC":
            doc = value[3:]
            if doc.startswith(" "):
                doc = doc[1:]
            yield Token(TokenType.DOC, doc.rstrip(), line, column)
        elif kind == "STRING":
            yield Token(TokenType.STRING, _unescape(value[1:-1]), line, column)
        else:
            yield Token(TokenType[kind], value, line, column)
    yield Token(TokenType.EOF, "", line, len(text) - line_start + 1)


def tokenize(text: str) -> List[Token]:
    """
    Tokenize specification text.

    Args:
        text: Enhanced or plain A2ML source

    Returns:
        List of tokens terminated by an EOF token

    Raises:
        A2mlSyntaxError: On characters that cannot start a token
    """
    return list(_iter_tokens(text))


def parse_int(token: Token) -> int:
    """Integer value of an INT token; hex literals are accepted."""
    text = token.value
    sign = -1 if text.startswith("-") else 1
    digits = text.lstrip("+-")
    if digits[:2].lower() == "0x":
        return sign * int(digits[2:], 16)
    return sign * int(digits, 10)
