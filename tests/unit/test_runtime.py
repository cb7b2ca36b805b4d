"""
Unit Tests for Generic Tree Runtime
===================================

Tests for GenericNode and the decode/encode helpers used by generated code.
"""

import pytest

from a2mlgen.runtime.generic import (
    DecodeError,
    GenericNode,
    count_nodes,
    decode_array,
    decode_enum,
    decode_float,
    decode_integer,
    decode_sequence,
    decode_string,
    encode_list,
    encode_scalar,
    entry_count,
    entry_present,
    flag_nodes,
    group_tagged,
    optional_entry,
    optional_nodes,
    repeated_entry,
    repeated_nodes,
    select_variant,
    struct_children,
    tag_only,
    with_tag,
)

from tests.utils.helpers import leaf, tagged, untagged


class TestGenericNode:
    """Test the generic tree node."""

    def test_from_data(self):
        """Test plain data converts into nodes."""
        node = GenericNode.from_data({"tag": "TAG1", "children": [5, 7], "is_block": True})

        assert node.tag == "TAG1"
        assert node.is_block is True
        assert [child.value for child in node.children] == [5, 7]

    def test_from_data_list_and_scalar(self):
        """Test lists become untagged nodes and scalars leaves."""
        node = GenericNode.from_data([1, "two", 3.5])

        assert node.tag is None
        assert node.children == [leaf(1), leaf("two"), leaf(3.5)]

    def test_to_data_inverse(self):
        """Test to_data reverses from_data."""
        data = {"tag": "A", "children": [1, {"tag": "B", "value": "x"}, [2, 3]], "line": 4}

        assert GenericNode.from_data(data).to_data() == data

    def test_value_types(self):
        """Test values keep their Python type."""
        assert isinstance(leaf(1).value, int)
        assert isinstance(leaf(1.0).value, float)
        assert isinstance(leaf("1").value, str)


class TestDecodeError:
    """Test decode error formatting."""

    def test_message_with_tag_and_line(self):
        """Test the message names tag and line."""
        error = DecodeError("bad value", tag="TAG1", line=12)

        assert str(error) == 'bad value (tag "TAG1") at line 12'
        assert error.tag == "TAG1"
        assert error.line == 12

    def test_message_only(self):
        """Test the message alone when tag and line are unknown."""
        assert str(DecodeError("bad value")) == "bad value"


class TestScalars:
    """Test scalar decoding."""

    @pytest.mark.parametrize(
        "kind,low,high",
        [
            ("char", -128, 127),
            ("int", -32768, 32767),
            ("long", -(2**31), 2**31 - 1),
            ("int64", -(2**63), 2**63 - 1),
            ("uchar", 0, 255),
            ("uint", 0, 65535),
            ("ulong", 0, 2**32 - 1),
            ("uint64", 0, 2**64 - 1),
        ],
    )
    def test_integer_ranges(self, kind, low, high):
        """Test integer bounds per kind."""
        assert decode_integer(leaf(low), kind, "ctx") == low
        assert decode_integer(leaf(high), kind, "ctx") == high
        with pytest.raises(DecodeError, match="out of range"):
            decode_integer(leaf(low - 1), kind, "ctx")
        with pytest.raises(DecodeError, match="out of range"):
            decode_integer(leaf(high + 1), kind, "ctx")

    def test_integer_type_mismatch(self):
        """Test non-integer payloads are rejected."""
        with pytest.raises(DecodeError, match="expected uint value"):
            decode_integer(leaf("5"), "uint", "S.a")
        with pytest.raises(DecodeError, match="expected uint value"):
            decode_integer(leaf(5.0), "uint", "S.a")
        with pytest.raises(DecodeError, match="expected uint value"):
            decode_integer(GenericNode(), "uint", "S.a")

    def test_error_context_and_line(self):
        """Test errors carry the location and the node's line."""
        node = GenericNode(tag="X", value=-1, line=7)

        with pytest.raises(DecodeError) as exc_info:
            decode_integer(node, "uint", "S.a")

        assert str(exc_info.value).startswith("S.a: value -1 out of range")
        assert exc_info.value.line == 7
        assert exc_info.value.tag == "X"

    def test_float(self):
        """Test floats accept integers and floats."""
        assert decode_float(leaf(2), "ctx") == 2.0
        assert isinstance(decode_float(leaf(2), "ctx"), float)
        assert decode_float(leaf(2.5), "ctx") == 2.5
        with pytest.raises(DecodeError, match="expected floating point value"):
            decode_float(leaf("2.5"), "ctx")

    def test_string(self):
        """Test strings are limited to the declared size."""
        assert decode_string(leaf("abcd"), 4, "ctx") == "abcd"
        with pytest.raises(DecodeError, match="exceeds char\\[3\\]"):
            decode_string(leaf("abcd"), 3, "ctx")
        with pytest.raises(DecodeError, match="expected string value"):
            decode_string(leaf(1), 3, "ctx")

    def test_enum(self):
        """Test enums decode from their tag."""
        members = {"A": 1, "B": 2}

        assert decode_enum(leaf("B"), members, "E") == 2
        with pytest.raises(DecodeError, match="unknown enum tag 'C'"):
            decode_enum(leaf("C"), members, "E")
        with pytest.raises(DecodeError, match="expected enum tag"):
            decode_enum(leaf(1), members, "E")

    def test_encode_scalar(self):
        """Test scalars encode into leaves."""
        assert encode_scalar(5) == leaf(5)
        assert encode_scalar("x") == leaf("x")


class TestArraysAndSequences:
    """Test array and sequence helpers."""

    def _uint(self, node):
        return decode_integer(node, "uint", "ctx")

    def test_array_exact_size(self):
        """Test arrays need exactly N elements."""
        node = untagged(leaf(1), leaf(2), leaf(3))

        assert decode_array(node, 3, self._uint, "A.arr") == [1, 2, 3]
        with pytest.raises(DecodeError, match="expected 4 array elements, found 3"):
            decode_array(node, 4, self._uint, "A.arr")

    def test_sequence(self):
        """Test sequences collect all children, including none."""
        assert decode_sequence(untagged(leaf(1), leaf(2)), self._uint) == [1, 2]
        assert decode_sequence(untagged(), self._uint) == []

    def test_encode_list(self):
        """Test lists encode into untagged nodes."""
        assert encode_list([1, 2], encode_scalar) == untagged(leaf(1), leaf(2))


class TestStructs:
    """Test struct and tagged struct helpers."""

    def test_struct_children(self):
        """Test structs need one child per member."""
        node = untagged(leaf(1), leaf(2))

        assert struct_children(node, 2, "S") == node.children
        with pytest.raises(DecodeError, match="missing member"):
            struct_children(node, 3, "S")
        with pytest.raises(DecodeError, match="unexpected extra member"):
            struct_children(node, 1, "S")

    def test_group_tagged(self):
        """Test children are grouped by tag in order."""
        node = untagged(tagged("A", value=1), tagged("B", value=2), tagged("A", value=3))
        groups = group_tagged(node, {"A": "repeated", "B": "optional"}, "T")

        assert [n.value for n in groups["A"]] == [1, 3]
        assert [n.value for n in groups["B"]] == [2]

    def test_group_tagged_unknown_tag(self):
        """Test unrecognised tags are rejected."""
        with pytest.raises(DecodeError, match='unrecognised tag "C"'):
            group_tagged(untagged(tagged("C")), {"A": "optional"}, "T")

    def test_group_tagged_repeated_optional(self):
        """Test an optional tag may only appear once."""
        with pytest.raises(DecodeError, match='tag "A" may only appear once'):
            group_tagged(untagged(tagged("A"), tagged("A")), {"A": "optional"}, "T")

    def test_group_tagged_untagged_child(self):
        """Test every child of a tagged struct needs a tag."""
        with pytest.raises(DecodeError, match="expected a tagged item"):
            group_tagged(untagged(leaf(1)), {"A": "optional"}, "T")

    def test_entries(self):
        """Test reading entries out of the groups."""
        groups = {"A": [tagged("A", value=1), tagged("A", value=2)], "F": [tagged("F")]}

        def value(node):
            return node.value

        assert optional_entry(groups, "A", value) == 1
        assert optional_entry(groups, "X", value) is None
        assert repeated_entry(groups, "A", value) == [1, 2]
        assert repeated_entry(groups, "X", value) == []
        assert entry_present(groups, "F") is True
        assert entry_present(groups, "X") is False
        assert entry_count(groups, "A") == 2
        assert entry_count(groups, "X") == 0

    def test_encode_entries(self):
        """Test entry encoders attach tags and block flags."""
        assert optional_nodes(None, "A", False, encode_scalar) == []
        assert optional_nodes(5, "A", True, encode_scalar) == [
            tagged("A", value=5, is_block=True)
        ]
        assert repeated_nodes([1, 2], "A", False, encode_scalar) == [
            tagged("A", value=1),
            tagged("A", value=2),
        ]
        assert flag_nodes(False, "F", False) == []
        assert flag_nodes(True, "F", False) == [tagged("F")]
        assert count_nodes(2, "M", True) == [tag_only("M", True), tag_only("M", True)]

    def test_with_tag_copies(self):
        """Test with_tag leaves the original node untouched."""
        node = untagged(leaf(1))
        result = with_tag(node, "T", True)

        assert result.tag == "T"
        assert result.is_block is True
        assert node.tag is None


class TestSelectVariant:
    """Test tagged union variant selection."""

    VARIANTS = {"A": object(), "B": object()}

    def test_single_variant(self):
        """Test the single tagged child is returned."""
        child = tagged("B", value=1)

        assert select_variant(untagged(child), self.VARIANTS, "U") == child

    def test_missing_variant(self):
        """Test a union node needs a child."""
        with pytest.raises(DecodeError, match="missing tagged union variant"):
            select_variant(untagged(), self.VARIANTS, "U")

    def test_second_variant(self):
        """Test a union node holds exactly one child."""
        with pytest.raises(DecodeError, match="unexpected second union variant"):
            select_variant(untagged(tagged("A"), tagged("B")), self.VARIANTS, "U")

    def test_unknown_variant(self):
        """Test the child's tag must name a variant."""
        with pytest.raises(DecodeError, match="unrecognised variant"):
            select_variant(untagged(tagged("C")), self.VARIANTS, "U")
