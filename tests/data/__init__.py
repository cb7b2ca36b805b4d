"""
Test Data Package
=================

Sample enhanced A2ML specifications and generic trees used across the
test suite.
"""

from .sample_specifications import (
    ALL_SPECIFICATIONS,
    A2ML_TEST_CANONICAL_TEXT,
    A2ML_TEST_SPECIFICATION,
    ENUM_SPECIFICATION,
    IF_DATA_SPECIFICATION,
    INVALID_SPECIFICATIONS,
    NESTED_SPECIFICATION,
    REPEATED_BLOCK_SPECIFICATION,
    SEQUENCE_SPECIFICATION,
    SIMPLE_STRUCT_SPECIFICATION,
)

__all__ = [
    "ALL_SPECIFICATIONS",
    "A2ML_TEST_CANONICAL_TEXT",
    "A2ML_TEST_SPECIFICATION",
    "ENUM_SPECIFICATION",
    "IF_DATA_SPECIFICATION",
    "INVALID_SPECIFICATIONS",
    "NESTED_SPECIFICATION",
    "REPEATED_BLOCK_SPECIFICATION",
    "SEQUENCE_SPECIFICATION",
    "SIMPLE_STRUCT_SPECIFICATION",
]
