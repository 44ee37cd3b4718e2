# -*- coding: utf-8 -*-
"""Location: ./tokenoptimizer/toon/encoder.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

TOON serializer.

Renders a value tree into TOON text. Objects become ``key: value`` lines,
nested objects become indented blocks and arrays pick one of three forms:

1. Inline: ``key[N]: v1,v2,v3`` for arrays that are not all objects
2. Tabular: ``key[N]{c1,c2}:`` followed by one row per element, for two or
   more flat objects sharing the same key set
3. Expanded: ``key[N]:`` followed by ``- `` list items for every other
   array of objects

Examples:
    >>> print(serialize({"name": "John", "age": 30, "city": "New York"}))
    name: John
    age: 30
    city: New York
    >>> print(serialize({"metrics": [{"id": "1", "v": 1}, {"id": "2", "v": 2}]}))
    metrics[2]{id,v}:
      "1",1
      "2",2
    >>> print(serialize({"tags": ["a", "b c", "42"], "empty": []}))
    tags[3]: a,"b c","42"
    empty[0]:
"""

# Standard
from typing import Any, List, Optional

# First-Party
from tokenoptimizer.toon.constants import (
    ARRAY_END,
    ARRAY_START,
    ESCAPES,
    INDENT_SIZE,
    INLINE_SPECIAL_CHARS,
    KEY_SPECIAL_CHARS,
    KEY_VALUE_SEPARATOR,
    LIST_ITEM_MARKER,
    LIST_ITEM_PREFIX,
    NEWLINE,
    NULL_LITERAL,
    OBJECT_END,
    OBJECT_START,
    QUOTE,
    SEPARATOR,
)
from tokenoptimizer.toon.values import format_bool, format_number, is_reserved_literal, is_scalar, JsonArray, JsonObject, kind_of, looks_numeric, ValueKind


class LineWriter:
    """Accumulates indented output lines for one serialization call.

    Examples:
        >>> writer = LineWriter()
        >>> writer.push(0, "a:")
        >>> writer.push(1, "b: 1")
        >>> writer.to_string()
        'a:\\n  b: 1'
    """

    def __init__(self, indent_size: int = INDENT_SIZE) -> None:
        """Initialize an empty writer.

        Args:
            indent_size: Number of spaces per depth level.
        """
        self._indent = " " * indent_size
        self._lines: List[str] = []

    def push(self, depth: int, content: str) -> None:
        """Append a line at the given depth.

        Args:
            depth: Indentation depth.
            content: Line content without indentation.
        """
        self._lines.append(self._indent * depth + content)

    def to_string(self) -> str:
        """Join the accumulated lines.

        Returns:
            The document text, without a trailing newline.
        """
        return NEWLINE.join(self._lines)


def serialize(value: Any) -> str:
    """Serialize a value tree to TOON text.

    The primary input is an object. A root array is rendered without a key
    and a root scalar is rendered in its inline text form.

    Args:
        value: Value tree to serialize.

    Returns:
        TOON-formatted string.

    Raises:
        TypeError: If the tree contains a non-JSON value or a non-string key.

    Examples:
        >>> serialize({})
        ''
        >>> serialize([1, 2, 3])
        '[3]: 1,2,3'
        >>> serialize("a: b")
        '"a: b"'
        >>> print(serialize({"outer": {"inner": True, "none": None}}))
        outer:
          inner: true
          none: null
    """
    kind = kind_of(value)
    if kind is ValueKind.OBJECT:
        writer = LineWriter()
        _write_object(value, writer, 0)
        return writer.to_string()
    if kind is ValueKind.ARRAY:
        writer = LineWriter()
        _write_array("", value, writer, 0)
        return writer.to_string()
    return format_inline(value)


def _write_object(obj: JsonObject, writer: LineWriter, depth: int) -> None:
    """Write every property of an object at ``depth``.

    Args:
        obj: Object to write.
        writer: Output accumulator.
        depth: Depth of the object's keys.
    """
    for key, value in obj.items():
        _write_property(key, value, writer, depth)


def _write_property(key: str, value: Any, writer: LineWriter, depth: int, marker: str = "") -> None:
    """Write one ``key: value`` property.

    Args:
        key: Property name.
        value: Property value.
        writer: Output accumulator.
        depth: Depth of the property; nested content goes to ``depth + 1``.
        marker: List item prefix placed before the key on the line above
            ``depth``, used for the first property of an expanded array item.
    """
    encoded_key = encode_key(key)
    kind = kind_of(value)
    if kind is ValueKind.OBJECT:
        _push_first(writer, depth, marker, f"{encoded_key}{KEY_VALUE_SEPARATOR}")
        _write_object(value, writer, depth + 1)
    elif kind is ValueKind.ARRAY:
        _write_array(encoded_key, value, writer, depth, marker)
    else:
        _push_first(writer, depth, marker, f"{encoded_key}{KEY_VALUE_SEPARATOR} {format_property_scalar(value)}")


def _push_first(writer: LineWriter, depth: int, marker: str, content: str) -> None:
    """Push the first line of a property, honouring a list item marker.

    Args:
        writer: Output accumulator.
        depth: Depth of the property.
        marker: List item prefix, or empty.
        content: Line content.
    """
    if marker:
        writer.push(depth - 1, f"{marker}{content}")
    else:
        writer.push(depth, content)


def _write_array(encoded_key: str, arr: JsonArray, writer: LineWriter, depth: int, marker: str = "") -> None:
    """Write an array property (or a key-less root array).

    Args:
        encoded_key: Already encoded key, empty for a root array.
        arr: Array to write.
        writer: Output accumulator.
        depth: Depth of the header line; rows and items go one level deeper.
        marker: List item prefix for the header line, or empty.
    """
    header = f"{encoded_key}{ARRAY_START}{len(arr)}{ARRAY_END}"
    if not arr:
        _push_first(writer, depth, marker, f"{header}{KEY_VALUE_SEPARATOR}")
        return

    if not all(kind_of(item) is ValueKind.OBJECT for item in arr):
        _push_first(writer, depth, marker, f"{header}{KEY_VALUE_SEPARATOR} {_join_inline(arr)}")
        return

    schema = detect_tabular_schema(arr)
    if schema is not None:
        columns = SEPARATOR.join(encode_key(column) for column in schema)
        _push_first(writer, depth, marker, f"{header}{OBJECT_START}{columns}{OBJECT_END}{KEY_VALUE_SEPARATOR}")
        for obj in arr:
            writer.push(depth + 1, _join_inline([obj[column] for column in schema]))
        return

    _push_first(writer, depth, marker, f"{header}{KEY_VALUE_SEPARATOR}")
    for obj in arr:
        _write_list_item(obj, writer, depth + 1)


def _write_list_item(obj: JsonObject, writer: LineWriter, depth: int) -> None:
    """Write an object as an expanded array item.

    The first property shares the ``- `` line; the others follow one level deeper.

    Args:
        obj: Array element.
        writer: Output accumulator.
        depth: Depth of the ``-`` marker.
    """
    if not obj:
        writer.push(depth, LIST_ITEM_MARKER)
        return
    for index, (key, value) in enumerate(obj.items()):
        _write_property(key, value, writer, depth + 1, LIST_ITEM_PREFIX if index == 0 else "")


def detect_tabular_schema(arr: List[JsonObject]) -> Optional[List[str]]:
    """Return the column list if an array of objects qualifies for the tabular form.

    The array needs more than one element, every element must have the same
    non-empty key set as the first one and no value may be an array or object.

    Args:
        arr: Array of objects.

    Returns:
        Column names in the first element's key order, or None.

    Examples:
        >>> detect_tabular_schema([{"a": 1, "b": 2}, {"b": 3, "a": 4}])
        ['a', 'b']
        >>> detect_tabular_schema([{"a": 1}]) is None
        True
        >>> detect_tabular_schema([{"a": 1}, {"b": 2}]) is None
        True
        >>> detect_tabular_schema([{"a": [1]}, {"a": [2]}]) is None
        True
    """
    if len(arr) < 2:
        return None
    first_keys = list(arr[0].keys())
    if not first_keys:
        return None
    first_keys_set = set(first_keys)
    for obj in arr:
        if set(obj.keys()) != first_keys_set:
            return None
        if not all(is_scalar(value) for value in obj.values()):
            return None
    return first_keys


def _join_inline(values: JsonArray) -> str:
    """Render values as a comma-joined inline list.

    Args:
        values: Values to render.

    Returns:
        Joined text.
    """
    return SEPARATOR.join(format_inline(value) for value in values)


def format_inline(value: Any) -> str:
    """Render a value in an inline position (array item, table cell).

    Nested arrays are rendered as ``[N]: a,b`` and objects fall back to the
    brace form ``{k:v,...}``.

    Args:
        value: Value to render.

    Returns:
        Inline text.

    Examples:
        >>> format_inline("hello"), format_inline("42"), format_inline("")
        ('hello', '"42"', '""')
        >>> format_inline([1, [2, 3], []])
        '[3]: 1,[2]: 2,3,[0]:'
        >>> format_inline({"k": "v w", "n": None})
        '{k:"v w",n:null}'
    """
    kind = kind_of(value)
    if kind is ValueKind.NULL:
        return NULL_LITERAL
    if kind is ValueKind.BOOL:
        return format_bool(value)
    if kind is ValueKind.NUMBER:
        return format_number(value)
    if kind is ValueKind.STRING:
        return quote_string(value) if needs_inline_quotes(value) else value
    if kind is ValueKind.ARRAY:
        header = f"{ARRAY_START}{len(value)}{ARRAY_END}{KEY_VALUE_SEPARATOR}"
        return f"{header} {_join_inline(value)}" if value else header
    if kind is ValueKind.OBJECT:
        fields = SEPARATOR.join(f"{encode_key(k)}{KEY_VALUE_SEPARATOR}{format_inline(v)}" for k, v in value.items())
        return f"{OBJECT_START}{fields}{OBJECT_END}"
    raise TypeError(f"Unhandled value kind: {kind}")


def format_property_scalar(value: Any) -> str:
    """Render a scalar in the ``key: value`` position.

    Args:
        value: Scalar to render.

    Returns:
        Property text.

    Examples:
        >>> format_property_scalar("New York"), format_property_scalar("42"), format_property_scalar(42)
        ('New York', '"42"', '42')
    """
    kind = kind_of(value)
    if kind is ValueKind.NULL:
        return NULL_LITERAL
    if kind is ValueKind.BOOL:
        return format_bool(value)
    if kind is ValueKind.NUMBER:
        return format_number(value)
    if kind is ValueKind.STRING:
        return quote_string(value) if needs_property_quotes(value) else value
    raise TypeError(f"Expected a scalar, got {kind.value}")


def needs_inline_quotes(s: str) -> bool:
    """Determine if a string must be quoted in an inline position.

    Args:
        s: String to check.

    Returns:
        True if the string is empty, numeric-looking, a reserved literal or
        contains a structural character.

    Examples:
        >>> needs_inline_quotes("hello"), needs_inline_quotes("a,b"), needs_inline_quotes("true")
        (False, True, True)
        >>> needs_inline_quotes("-3.5"), needs_inline_quotes("x-ray")
        (True, False)
    """
    if not s or s != s.strip():
        return True
    if looks_numeric(s) or is_reserved_literal(s):
        return True
    return any(c in INLINE_SPECIAL_CHARS for c in s)


def needs_property_quotes(s: str) -> bool:
    """Determine if a string must be quoted in the ``key: value`` position.

    Only strings that a bare rendering would turn into another type, or
    would lose characters of, are quoted.

    Args:
        s: String to check.

    Returns:
        True if quoting is required for a faithful round trip.

    Examples:
        >>> needs_property_quotes("New York"), needs_property_quotes("a, b: c")
        (False, False)
        >>> needs_property_quotes("007"), needs_property_quotes("false"), needs_property_quotes(" pad")
        (True, True, True)
    """
    if not s or s != s.strip():
        return True
    if looks_numeric(s) or is_reserved_literal(s):
        return True
    if "\n" in s or "\r" in s:
        return True
    return s.startswith(QUOTE)


def encode_key(key: str) -> str:
    """Encode an object key, quoting it only when the parser could misread it.

    Args:
        key: Object key.

    Returns:
        Key text.

    Raises:
        TypeError: If the key is not a string.

    Examples:
        >>> encode_key("user_id"), encode_key("first name"), encode_key("a:b"), encode_key("")
        ('user_id', 'first name', '"a:b"', '""')
    """
    if not isinstance(key, str):
        raise TypeError(f"Object keys must be strings, got {type(key).__name__}")
    if not key or key != key.strip() or any(c in KEY_SPECIAL_CHARS for c in key):
        return quote_string(key)
    return key


def quote_string(s: str) -> str:
    """Quote a string and escape backslashes, quotes and control whitespace.

    Args:
        s: String to quote.

    Returns:
        Quoted string.

    Examples:
        >>> print(quote_string('say "hi"'))
        "say \\"hi\\""
        >>> print(quote_string("two\\nlines"))
        "two\\nlines"
    """
    return QUOTE + "".join(ESCAPES.get(char, char) for char in s) + QUOTE
