"""
Name Normalization
==================

Conversion of A2ML tag strings into Python identifiers and validation of
names given explicitly in a specification.
"""

import keyword
import re
from typing import Optional

from pydantic import BaseModel

# Attribute names that generated classes define themselves; BaseModel
# attributes are checked separately.
RESERVED_NAMES = frozenset({"decode", "encode", "decode_variant", "encode_variant", "TAG"})

_WORD_SPLIT = re.compile(r"[^0-9A-Za-z]+")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def _words(text: str) -> list:
    words = []
    for chunk in _WORD_SPLIT.split(text):
        words.extend(w for w in _CAMEL_BOUNDARY.split(chunk) if w)
    return words


def tag_to_identifier(tag: str) -> str:
    """Turn a tag into an identifier-safe string, keeping its case."""
    text = "_".join(w for w in _WORD_SPLIT.split(tag) if w)
    if not text:
        return "T"
    if text[0].isdigit():
        return f"T{text}"
    return text


def to_snake_case(text: str) -> str:
    """IF_DATA -> if_data, SomeData -> some_data."""
    name = "_".join(w.lower() for w in _words(text))
    if not name:
        name = "item"
    if name[0].isdigit():
        name = f"t{name}"
    if keyword.iskeyword(name) or name in RESERVED_NAMES or hasattr(BaseModel, name):
        name = f"{name}_"
    return name


def to_camel_case(text: str) -> str:
    """IF_DATA -> IfData, some_data -> SomeData."""
    name = "".join(w[:1].upper() + w[1:].lower() if w.isupper() else w[:1].upper() + w[1:]
                   for w in _words(text))
    if not name:
        name = "Item"
    if name[0].isdigit():
        name = f"T{name}"
    if keyword.iskeyword(name):
        name = f"{name}_"
    return name


def to_constant_case(text: str) -> str:
    """Upper-case identifier for enum members and module constants."""
    return tag_to_identifier(text).upper()


def identifier_problem(name: str) -> Optional[str]:
    """Return why name cannot be used for a generated item, or None if it can."""
    if not name.isidentifier():
        return "is not a valid identifier"
    if keyword.iskeyword(name):
        return "is a Python keyword"
    if name.startswith("_"):
        return "must not start with an underscore"
    if name.startswith("model_"):
        return "must not start with 'model_'"
    if name in RESERVED_NAMES or hasattr(BaseModel, name):
        return "is reserved by the generated code"
    return None
