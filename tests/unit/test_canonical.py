"""
Unit Tests for Canonical Text Renderer
======================================

Tests for the plain A2ML rendering of resolved schemas.
"""

import pytest

from a2mlgen.core.codegen.canonical import render_canonical_text

from tests.data.sample_specifications import (
    A2ML_TEST_CANONICAL_TEXT,
    A2ML_TEST_SPECIFICATION,
    ALL_SPECIFICATIONS,
    ENUM_SPECIFICATION,
    NESTED_SPECIFICATION,
    REPEATED_BLOCK_SPECIFICATION,
    SEQUENCE_SPECIFICATION,
    SIMPLE_STRUCT_SPECIFICATION,
)
from tests.utils.assertions import assert_same_structure
from tests.utils.helpers import resolve_plain, resolve_text


class TestRenderCanonicalText:
    """Test canonical text of sample specifications."""

    def test_simple_struct(self):
        """Test names and docs are erased."""
        text = render_canonical_text(resolve_text(SIMPLE_STRUCT_SPECIFICATION))

        assert text == 'block "TAG1" struct { uint; uint; };'

    def test_enum_values_explicit(self):
        """Test every enum value is written out."""
        text = render_canonical_text(resolve_text(ENUM_SPECIFICATION))

        assert text.splitlines() == [
            'block "MODE" enum { "E1" = 1, "E2" = 2 };',
            'block "LEVEL" enum { "LOW" = 0, "HIGH" = 10, "TOP" = 11 };',
        ]

    def test_sequence(self):
        """Test sequences keep their (item)* form."""
        text = render_canonical_text(resolve_text(SEQUENCE_SPECIFICATION))

        assert text == 'block "TAG" (char[256])*;'

    def test_repeated_blocks_and_tag_only_entries(self):
        """Test repeated blocks and tag-only taggedstruct entries."""
        text = render_canonical_text(resolve_text(REPEATED_BLOCK_SPECIFICATION))

        assert text.splitlines() == [
            '(block "ITEM" struct { uint; double; })*;',
            'block "FLAGS" taggedstruct { "ENABLED"; ("MARK")*; ("LIMIT" long)*; "NAME" char[16]; };',
        ]

    def test_references_inlined(self):
        """Test references are replaced by the referenced definition."""
        text = render_canonical_text(resolve_text(NESTED_SPECIFICATION))

        assert text == (
            'block "SHAPE" taggedstruct { '
            '"ORIGIN" struct { long; long; }; '
            '("VERTEX" struct { long; long; })*; '
            '"COLOR" enum { "RED" = 0, "GREEN" = 1, "BLUE" = 2 }; '
            '"SIZE" float[2]; '
            '"LABELS" char[4][8]; };'
        )

    def test_a2ml_test(self):
        """Test the full sample."""
        text = render_canonical_text(resolve_text(A2ML_TEST_SPECIFICATION))

        assert text == A2ML_TEST_CANONICAL_TEXT

    def test_escaped_tag(self):
        """Test quotes in tags are escaped."""
        text = render_canonical_text(resolve_text('<Spec>\nblock "A\\"B" uint;'))

        assert text == 'block "A\\"B" uint;'

    def test_empty_specification(self):
        """Test a specification without blocks renders empty text."""
        assert render_canonical_text(resolve_text("<Empty>")) == ""


class TestCanonicalEquivalence:
    """Test canonical text describes the same format as the source."""

    @pytest.mark.parametrize("name", sorted(ALL_SPECIFICATIONS))
    def test_reparse_same_structure(self, name):
        """Test the canonical text re-parses into a structurally equal schema."""
        schema = resolve_text(ALL_SPECIFICATIONS[name])
        text = render_canonical_text(schema)

        assert_same_structure(schema, resolve_plain(text))

    @pytest.mark.parametrize("name", sorted(ALL_SPECIFICATIONS))
    def test_canonical_text_is_stable(self, name):
        """Test rendering the re-parsed text gives the same text."""
        text = render_canonical_text(resolve_text(ALL_SPECIFICATIONS[name]))

        assert render_canonical_text(resolve_plain(text)) == text

    def test_structure_differs(self):
        """Test signatures tell different formats apart."""
        first = resolve_plain('block "A" struct { uint; uint; };')
        second = resolve_plain('block "A" struct { uint; int; };')

        assert first.signature() != second.signature()
