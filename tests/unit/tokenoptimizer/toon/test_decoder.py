# -*- coding: utf-8 -*-
"""Unit tests for the TOON parser."""

import pytest

from tokenoptimizer.toon.decoder import coerce_scalar, parse, parse_object, unescape
from tokenoptimizer.toon.errors import (
    InvalidInputError,
    MalformedArrayHeaderError,
    SchemaArityMismatchError,
    ToonDecodeError,
    UnexpectedStructureError,
)


class TestParseObjects:
    """Test decoding of objects."""

    def test_flat_object(self):
        """key: value lines decode with coerced scalars."""
        assert parse("name: John\nage: 30\ncity: New York") == {"name": "John", "age": 30, "city": "New York"}

    def test_key_order_preserved(self):
        """Keys keep document order."""
        assert list(parse("z: 1\na: 2\nm: 3")) == ["z", "a", "m"]

    def test_nested_objects(self):
        """Deeper blocks become nested objects."""
        text = "server:\n  host: localhost\n  tls:\n    enabled: true\nport: 8080"
        assert parse(text) == {"server": {"host": "localhost", "tls": {"enabled": True}}, "port": 8080}

    def test_blank_value_without_block_is_empty_object(self):
        """A key with no value and no deeper block is an empty object."""
        assert parse("meta:\nn: 1") == {"meta": {}, "n": 1}
        assert parse("meta:") == {"meta": {}}

    def test_quoted_values(self):
        """Quoted values are always strings and escapes are decoded."""
        assert parse('id: "42"\nflag: "true"\nnote: "a\\nb"') == {"id": "42", "flag": "true", "note": "a\nb"}

    def test_quoted_keys(self):
        """Quoted keys may hold structural characters."""
        assert parse('"a:b": 1\n"x[0]": 2\n"": 3') == {"a:b": 1, "x[0]": 2, "": 3}

    def test_keys_with_spaces(self):
        """Bare keys may contain spaces."""
        assert parse("first name: Ann") == {"first name": "Ann"}

    def test_boolean_case_insensitive(self):
        """Booleans are recognised in any case, null only in lowercase."""
        assert parse("a: TRUE\nb: False\nc: NULL") == {"a": True, "b": False, "c": "NULL"}

    def test_blank_lines_ignored(self):
        """Blank lines between properties are skipped."""
        assert parse("\n\na: 1\n\n   \nb: 2\n\n") == {"a": 1, "b": 2}

    def test_crlf_line_endings(self):
        """Windows line endings are accepted."""
        assert parse("a: 1\r\nb:\r\n  c: x\r\n") == {"a": 1, "b": {"c": "x"}}

    def test_tabs_count_as_two_spaces(self):
        """A tab indents like two spaces."""
        assert parse("a:\n\tb: 1\n\tc:\n\t\td: 2") == parse("a:\n  b: 1\n  c:\n    d: 2")

    def test_empty_document(self):
        """A blank document is an empty object."""
        assert parse("") == {}
        assert parse("  \n\n") == {}


class TestParseArrays:
    """Test decoding of the three array forms."""

    def test_inline_array(self):
        """Inline items are coerced individually."""
        assert parse("ids[4]: 1,2.5,true,null") == {"ids": [1, 2.5, True, None]}

    def test_inline_quoted_items(self):
        """Quoted items stay strings and may contain separators."""
        assert parse('tags[3]: hello,"42","a, b"') == {"tags": ["hello", "42", "a, b"]}

    def test_inline_spaces_around_items(self):
        """Whitespace around inline items is ignored."""
        assert parse("ids[3]: 1 , 2 ,3") == {"ids": [1, 2, 3]}

    def test_empty_array(self):
        """A zero count with no items is an empty array."""
        assert parse("items[0]:\nnext: 1") == {"items": [], "next": 1}

    def test_tabular_array(self):
        """Rows zip with the schema."""
        result = parse('metrics[2]{id,v}:\n  "1",1\n  "2",2')
        assert result == {"metrics": [{"id": "1", "v": 1}, {"id": "2", "v": 2}]}
        assert isinstance(result["metrics"][0]["id"], str)
        assert isinstance(result["metrics"][0]["v"], int)

    def test_tabular_with_quoted_column(self):
        """Columns may be quoted."""
        assert parse('rows[2]{"a,b",c}:\n  1,2\n  3,4') == {"rows": [{"a,b": 1, "c": 2}, {"a,b": 3, "c": 4}]}

    def test_tabular_followed_by_property(self):
        """The table ends after its declared rows."""
        assert parse("rows[2]{a}:\n  1\n  2\ntotal: 2") == {"rows": [{"a": 1}, {"a": 2}], "total": 2}

    def test_expanded_items(self):
        """List items hold objects whose first key shares the marker line."""
        text = "items[2]:\n  - id: 1\n    tags[2]: a,b\n  - id: 2\n    meta:\n      x: 1"
        assert parse(text) == {"items": [{"id": 1, "tags": ["a", "b"]}, {"id": 2, "meta": {"x": 1}}]}

    def test_expanded_item_with_nested_object_first(self):
        """A nested object can be the first property of a list item."""
        assert parse("items[1]:\n  - meta:\n      x: 1\n    y: 2") == {"items": [{"meta": {"x": 1}, "y": 2}]}

    def test_expanded_item_with_table_first(self):
        """A table can be the first property of a list item."""
        assert parse("groups[1]:\n  - rows[2]{a}:\n      1\n      2") == {"groups": [{"rows": [{"a": 1}, {"a": 2}]}]}

    def test_bare_marker_is_empty_object(self):
        """A lone '-' is an empty object."""
        assert parse("items[2]:\n  -\n  - a: 1") == {"items": [{}, {"a": 1}]}

    def test_scalar_list_items(self):
        """List items without a key are read as scalars."""
        assert parse("items[2]:\n  - 1\n  - hello") == {"items": [1, "hello"]}

    def test_nested_inline_arrays(self):
        """Counted nested arrays consume exactly their items."""
        assert parse("matrix[3]: [2]: 1,2,[0]:,[1]: x") == {"matrix": [[1, 2], [], ["x"]]}

    def test_brace_objects_inline(self):
        """Brace objects inside inline arrays decode to objects."""
        assert parse('mixed[3]: 1,{k:v,n:[2]: 1,2},{"a,b":"c d"}') == {"mixed": [1, {"k": "v", "n": [1, 2]}, {"a,b": "c d"}]}


class TestParseRoots:
    """Test non-object roots."""

    def test_root_array(self):
        """A document starting with '[' is an array."""
        assert parse("[3]: 1,2,3") == [1, 2, 3]
        assert parse("[0]:") == []
        assert parse("[2]{a}:\n  1\n  2") == [{"a": 1}, {"a": 2}]
        assert parse("[1]:\n  - a: 1") == [{"a": 1}]

    def test_root_scalar(self):
        """A single line without a key is a scalar."""
        assert parse("hello") == "hello"
        assert parse("42") == 42
        assert parse("null") is None
        assert parse('"a: b"') == "a: b"

    def test_parse_object_rejects_other_roots(self):
        """parse_object requires an object root."""
        assert parse_object("a: 1") == {"a": 1}
        with pytest.raises(UnexpectedStructureError):
            parse_object("[1]: 1")
        with pytest.raises(UnexpectedStructureError):
            parse_object("hello")


class TestParseErrors:
    """Test malformed documents."""

    def test_none_and_non_string(self):
        """Only strings are accepted."""
        with pytest.raises(InvalidInputError):
            parse(None)
        with pytest.raises(InvalidInputError):
            parse(b"a: 1")

    def test_missing_bracket(self):
        """An unterminated count is a malformed header."""
        with pytest.raises(MalformedArrayHeaderError):
            parse("items[2: a,b")

    def test_non_digit_count(self):
        """The count must be digits."""
        with pytest.raises(MalformedArrayHeaderError) as exc_info:
            parse("a: 1\nb[x]: 2")
        assert exc_info.value.line == 2
        assert exc_info.value.column == 3

    def test_unterminated_schema(self):
        """A schema must be closed on the header line."""
        with pytest.raises(MalformedArrayHeaderError):
            parse("rows[2]{a,b:\n  1,2\n  3,4")

    def test_empty_schema_with_rows(self):
        """A table with rows needs columns."""
        with pytest.raises(MalformedArrayHeaderError):
            parse("rows[1]{}:\n  1")

    def test_row_arity_mismatch(self):
        """Rows must have one value per column."""
        with pytest.raises(SchemaArityMismatchError) as exc_info:
            parse("rows[2]{a,b}:\n  1,2\n  3")
        assert exc_info.value.line == 3
        assert exc_info.value.column == 3
        assert "(line 3, column 3)" in str(exc_info.value)

    def test_missing_rows(self):
        """A table must have as many rows as declared."""
        with pytest.raises(UnexpectedStructureError):
            parse("rows[3]{a}:\n  1\n  2")

    def test_inline_count_mismatch(self):
        """Inline arrays must hold exactly the declared number of items."""
        with pytest.raises(UnexpectedStructureError):
            parse("ids[3]: 1,2")

    def test_missing_list_items(self):
        """Expanded arrays must have as many items as declared."""
        with pytest.raises(UnexpectedStructureError):
            parse("items[2]:\n  - a: 1")

    def test_over_indented_line(self):
        """A line deeper than its siblings is rejected."""
        with pytest.raises(UnexpectedStructureError):
            parse("a: 1\n    b: 2")

    def test_duplicate_key(self):
        """Keys must be unique within an object."""
        with pytest.raises(UnexpectedStructureError, match="Duplicate key"):
            parse("a: 1\na: 2")

    def test_line_without_separator(self):
        """Every object line needs ':' or '['."""
        with pytest.raises(UnexpectedStructureError):
            parse("a\nb")

    def test_trailing_content_after_root_array(self):
        """Nothing may follow a root array."""
        with pytest.raises(UnexpectedStructureError):
            parse("[1]: 1\nextra: 2")

    def test_unterminated_quoted_key(self):
        """A quoted key must be closed."""
        with pytest.raises(UnexpectedStructureError):
            parse('"abc: 1\nb: 2')

    def test_all_decode_errors_share_base(self):
        """Callers can catch every parse failure at once."""
        for text in ("items[x]: 1", "rows[2]{a}:\n  1,2\n  3", "a: 1\na: 2"):
            with pytest.raises(ToonDecodeError):
                parse(text)


class TestScalars:
    """Test scalar coercion and unescaping."""

    @pytest.mark.parametrize(
        "token,expected",
        [
            ("null", None),
            ("true", True),
            ("False", False),
            ("0", 0),
            ("-3.5", -3.5),
            ('"007"', "007"),
            ('""', ""),
            ("hello world", "hello world"),
            ("1.2.3", "1.2.3"),
            ("nan", "nan"),
            ("\u0663", "\u0663"),
        ],
    )
    def test_coerce_scalar(self, token, expected):
        """Tokens become the matching scalar type."""
        value = coerce_scalar(token)
        assert value == expected
        assert type(value) is type(expected)

    def test_non_ascii_digits_stay_strings(self):
        """Only ASCII digits form numbers."""
        assert parse("n: \u0663\nm: \uff11\uff12") == {"n": "\u0663", "m": "\uff11\uff12"}

    def test_unescape(self):
        """Known escapes decode and unknown ones are kept."""
        assert unescape('a\\"b\\\\c\\nd\\te\\rf') == 'a"b\\c\nd\te\rf'
        assert unescape("\\x") == "\\x"
        assert unescape("plain") == "plain"
