# -*- coding: utf-8 -*-
"""Location: ./tokenoptimizer/toon/decoder.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

TOON parser.

Reconstructs a value tree from TOON text with a single forward cursor.
Indentation is the only block delimiter: an object ends as soon as a line
is indented less than its keys, and every decision re-measures the current
line's indentation (a tab counts as two spaces).

Examples:
    >>> parse("name: John\\nage: 30\\ncity: New York")
    {'name': 'John', 'age': 30, 'city': 'New York'}
    >>> parse('metrics[2]{id,v}:\\n  "1",1\\n  "2",2')
    {'metrics': [{'id': '1', 'v': 1}, {'id': '2', 'v': 2}]}
    >>> parse("items[2]:\\n  - id: 1\\n    tags[2]: a,b\\n  - id: 2")
    {'items': [{'id': 1, 'tags': ['a', 'b']}, {'id': 2}]}
    >>> parse("")
    {}
"""

# Standard
from typing import Any, List, Optional, Tuple, Type

# First-Party
from tokenoptimizer.toon.constants import (
    ARRAY_END,
    ARRAY_START,
    BACKSLASH,
    FALSE_LITERAL,
    KEY_VALUE_SEPARATOR,
    LIST_ITEM_MARKER,
    NULL_LITERAL,
    OBJECT_END,
    OBJECT_START,
    QUOTE,
    SEPARATOR,
    TAB_WIDTH,
    TRUE_LITERAL,
    UNESCAPES,
)
from tokenoptimizer.toon.errors import InvalidInputError, MalformedArrayHeaderError, SchemaArityMismatchError, ToonDecodeError, UnexpectedStructureError
from tokenoptimizer.toon.values import JsonArray, JsonObject, JsonValue, parse_number

_INDENT_CHARS = " \t"
_LINE_END_CHARS = "\n\r"


def parse(text: str) -> JsonValue:
    """Parse TOON text into a value tree.

    Args:
        text: TOON document.

    Returns:
        The decoded value; blank input decodes to an empty object.

    Raises:
        InvalidInputError: If ``text`` is not a string.
        ToonDecodeError: If the document is malformed.

    Examples:
        >>> parse("[3]: 1,2,3")
        [1, 2, 3]
        >>> parse('"42"')
        '42'
        >>> parse("tags[2]: x,y\\nempty[0]:")
        {'tags': ['x', 'y'], 'empty': []}
    """
    if text is None:
        raise InvalidInputError("TOON text cannot be None")
    if not isinstance(text, str):
        raise InvalidInputError(f"TOON text must be a string, got {type(text).__name__}")
    return ToonParser(text).parse()


def parse_object(text: str) -> JsonObject:
    """Parse a TOON document whose root must be an object.

    Args:
        text: TOON document.

    Returns:
        The decoded object.

    Raises:
        UnexpectedStructureError: If the root is an array or a scalar.

    Examples:
        >>> parse_object("a: 1")
        {'a': 1}
        >>> parse_object("[1]: 1")
        Traceback (most recent call last):
            ...
        tokenoptimizer.toon.errors.UnexpectedStructureError: Document root is not an object (line 1, column 1)
    """
    value = parse(text)
    if not isinstance(value, dict):
        raise UnexpectedStructureError("Document root is not an object", line=1, column=1)
    return value


def coerce_scalar(token: str) -> Any:
    """Turn a raw token into a scalar value.

    ``null`` becomes None, a double-quoted token becomes a string, integer
    and decimal literals become numbers, ``true``/``false`` (any case) become
    booleans and anything else stays a string.

    Args:
        token: Raw token, already stripped of surrounding whitespace.

    Returns:
        Decoded scalar.

    Examples:
        >>> coerce_scalar("null"), coerce_scalar('"42"'), coerce_scalar("42"), coerce_scalar("4.5")
        (None, '42', 42, 4.5)
        >>> coerce_scalar("TRUE"), coerce_scalar("false"), coerce_scalar("New York")
        (True, False, 'New York')
    """
    if token == NULL_LITERAL:
        return None
    if len(token) >= 2 and token[0] == QUOTE and token[-1] == QUOTE:
        return unescape(token[1:-1])
    number = parse_number(token)
    if number is not None:
        return number
    lowered = token.lower()
    if lowered == TRUE_LITERAL:
        return True
    if lowered == FALSE_LITERAL:
        return False
    return token


def unescape(s: str) -> str:
    """Decode backslash escapes inside a quoted string.

    Unknown escape sequences are kept verbatim.

    Args:
        s: Quoted content without the surrounding quotes.

    Returns:
        Decoded string.

    Examples:
        >>> print(unescape('say \\\\"hi\\\\"'))
        say "hi"
        >>> unescape("C:\\\\dir")
        'C:\\\\dir'
    """
    if BACKSLASH not in s:
        return s
    result = []
    i = 0
    while i < len(s):
        char = s[i]
        if char == BACKSLASH and i + 1 < len(s):
            nxt = s[i + 1]
            result.append(UNESCAPES.get(nxt, char + nxt))
            i += 2
        else:
            result.append(char)
            i += 1
    return "".join(result)


class ToonParser:
    """Cursor over one TOON document.

    A parser instance is single use: it owns the position into its
    immutable input and is discarded after ``parse`` returns.
    """

    def __init__(self, text: str) -> None:
        """Initialize the cursor at the start of ``text``.

        Args:
            text: TOON document.
        """
        self._text = text
        self._pos = 0
        self._length = len(text)

    def parse(self) -> JsonValue:
        """Parse the whole document.

        Returns:
            Decoded value tree.

        Raises:
            UnexpectedStructureError: If content remains after the root value.
        """
        self._skip_blank_lines()
        if self._at_end():
            return {}

        indent, content = self._measure_indent()
        if self._text.startswith(ARRAY_START, content):
            self._pos = content
            value: JsonValue = self._parse_array_value(indent)
        elif self._is_single_line(content) and not self._line_has_key(content):
            self._pos = content
            value = coerce_scalar(self._read_line_rest().strip())
        else:
            value = self._parse_object(indent)

        self._skip_blank_lines()
        if not self._at_end():
            raise self._error(UnexpectedStructureError, "Unexpected content after the end of the document")
        return value

    # ------------------------------------------------------------------
    # Objects
    # ------------------------------------------------------------------

    def _parse_object(self, indent: int, inline_first: bool = False) -> JsonObject:
        """Parse object properties whose keys sit at ``indent``.

        Args:
            indent: Indentation of this object's keys.
            inline_first: The cursor already points at the first key, which
                shares its line with a list item marker.

        Returns:
            Decoded object.
        """
        result: JsonObject = {}
        pending_inline = inline_first
        while True:
            if pending_inline:
                pending_inline = False
            else:
                self._skip_blank_lines()
                if self._at_end():
                    break
                line_indent, content = self._measure_indent()
                if line_indent < indent:
                    break
                self._pos = content
                if line_indent > indent:
                    raise self._error(UnexpectedStructureError, f"Unexpected indentation {line_indent}, expected {indent}")

            key_pos = self._pos
            key = self._parse_key()
            if key in result:
                raise self._error(UnexpectedStructureError, f"Duplicate key {key!r}", key_pos)

            char = self._peek()
            if char == ARRAY_START:
                result[key] = self._parse_array_value(indent)
            elif char == KEY_VALUE_SEPARATOR:
                self._pos += 1
                result[key] = self._parse_property_value(indent)
            else:
                raise self._error(UnexpectedStructureError, f"Expected ':' or '[' after key {key!r}")
        return result

    def _parse_key(self) -> str:
        """Parse a bare or quoted key, leaving the cursor on ``:`` or ``[``.

        Returns:
            Key text.
        """
        if self._peek() == QUOTE:
            key, end = self._scan_quoted(self._pos)
            self._pos = end
            self._skip_spaces()
            return key

        start = self._pos
        while self._pos < self._length and self._text[self._pos] not in ":[\n\r":
            self._pos += 1
        key = self._text[start:self._pos].strip()
        if not key:
            raise self._error(UnexpectedStructureError, "Missing key", start)
        return key

    def _parse_property_value(self, indent: int) -> JsonValue:
        """Parse what follows ``key:``.

        A value on the same line is a scalar. A blank value followed by a
        deeper block is a nested object; without one it is an empty object.

        Args:
            indent: Indentation of the owning key.

        Returns:
            Decoded value.
        """
        rest = self._read_line_rest().strip()
        if rest:
            return coerce_scalar(rest)
        child_indent = self._peek_indent()
        if child_indent is not None and child_indent > indent:
            return self._parse_object(child_indent)
        return {}

    # ------------------------------------------------------------------
    # Arrays
    # ------------------------------------------------------------------

    def _parse_array_value(self, indent: int) -> JsonArray:
        """Parse an array from its ``[count]`` header onwards.

        Args:
            indent: Indentation of the line holding the header.

        Returns:
            Decoded array.
        """
        count = self._parse_count()
        schema = self._parse_schema() if self._peek() == OBJECT_START else None
        self._skip_spaces()
        if self._peek() == KEY_VALUE_SEPARATOR:
            self._pos += 1

        if schema is not None:
            if self._read_line_rest().strip():
                raise self._error(UnexpectedStructureError, "Unexpected content after tabular array header")
            if count and not schema:
                raise self._error(MalformedArrayHeaderError, "Tabular array header has an empty schema")
            return self._parse_table_rows(count, schema, indent)

        self._skip_spaces()
        if not self._at_line_end():
            items_pos = self._pos
            items = self._parse_inline_items()
            self._consume_line_end()
            if len(items) != count:
                raise self._error(UnexpectedStructureError, f"Array declares {count} items but has {len(items)}", items_pos)
            return items

        self._consume_line_end()
        if count == 0:
            return []
        return self._parse_list_items(count, indent)

    def _parse_count(self) -> int:
        """Parse ``[count]``.

        Returns:
            Declared element count.

        Raises:
            MalformedArrayHeaderError: On a missing ``]`` or a non-digit count.
        """
        start = self._pos
        self._pos += 1
        while not self._at_line_end() and self._peek() != ARRAY_END:
            self._pos += 1
        if self._peek() != ARRAY_END:
            raise self._error(MalformedArrayHeaderError, "Missing ']' in array header", start)
        digits = self._text[start + 1:self._pos].strip()
        if not (digits.isascii() and digits.isdigit()):
            raise self._error(MalformedArrayHeaderError, f"Invalid array count {digits!r}", start + 1)
        self._pos += 1
        return int(digits)

    def _parse_schema(self) -> List[str]:
        """Parse a ``{c1,c2}`` column list.

        Returns:
            Column names in order.

        Raises:
            MalformedArrayHeaderError: If the list is not closed on the header line.
        """
        start = self._pos
        self._pos += 1
        columns: List[str] = []
        self._skip_spaces()
        if self._peek() == OBJECT_END:
            self._pos += 1
            return columns

        while True:
            self._skip_spaces()
            if self._peek() == QUOTE:
                column, self._pos = self._scan_quoted(self._pos)
            else:
                column_start = self._pos
                while not self._at_line_end() and self._peek() not in (SEPARATOR, OBJECT_END):
                    self._pos += 1
                column = self._text[column_start:self._pos].strip()
            if column in columns:
                raise self._error(UnexpectedStructureError, f"Duplicate column {column!r}")
            columns.append(column)
            self._skip_spaces()
            char = self._peek()
            if char == SEPARATOR:
                self._pos += 1
            elif char == OBJECT_END:
                self._pos += 1
                return columns
            else:
                raise self._error(MalformedArrayHeaderError, "Missing '}' in array schema", start)

    def _parse_table_rows(self, count: int, schema: List[str], indent: int) -> List[JsonObject]:
        """Parse ``count`` tabular rows into objects.

        Args:
            count: Declared row count.
            schema: Column names.
            indent: Indentation of the header line; rows must be deeper.

        Returns:
            One object per row.

        Raises:
            SchemaArityMismatchError: If a row's value count differs from the schema.
        """
        rows: List[JsonObject] = []
        row_indent: Optional[int] = None
        for index in range(count):
            self._skip_blank_lines()
            if self._at_end():
                raise self._error(UnexpectedStructureError, f"Expected {count} rows but found {index}")
            line_indent, content = self._measure_indent()
            self._pos = content
            if line_indent <= indent:
                raise self._error(UnexpectedStructureError, f"Expected {count} rows but found {index}")
            if row_indent is None:
                row_indent = line_indent
            elif line_indent != row_indent:
                raise self._error(UnexpectedStructureError, "Inconsistent row indentation")

            values = self._parse_inline_items()
            if len(values) != len(schema):
                raise self._error(SchemaArityMismatchError, f"Expected {len(schema)} values but got {len(values)}", content)
            self._consume_line_end()
            rows.append(dict(zip(schema, values)))
        return rows

    def _parse_list_items(self, count: int, indent: int) -> JsonArray:
        """Parse ``count`` expanded ``-`` items.

        Args:
            count: Declared item count.
            indent: Indentation of the header line; items must be deeper.

        Returns:
            Decoded items.
        """
        items: JsonArray = []
        item_indent: Optional[int] = None
        for index in range(count):
            self._skip_blank_lines()
            if self._at_end():
                raise self._error(UnexpectedStructureError, f"Expected {count} list items but found {index}")
            line_indent, content = self._measure_indent()
            self._pos = content
            if line_indent <= indent:
                raise self._error(UnexpectedStructureError, f"Expected {count} list items but found {index}")
            if item_indent is None:
                item_indent = line_indent
            elif line_indent != item_indent:
                raise self._error(UnexpectedStructureError, "Inconsistent list item indentation")
            if self._peek() != LIST_ITEM_MARKER:
                raise self._error(UnexpectedStructureError, "Expected '-' list item marker")
            self._pos += 1
            items.append(self._parse_list_item(item_indent))
        return items

    def _parse_list_item(self, item_indent: int) -> JsonValue:
        """Parse the content following a ``-`` marker.

        Args:
            item_indent: Indentation of the marker.

        Returns:
            The item: an object, or leniently a nested array or a scalar.
        """
        if self._at_line_end():
            self._consume_line_end()
            return {}
        if self._peek() not in _INDENT_CHARS:
            raise self._error(UnexpectedStructureError, "Expected a space after '-'")

        column = item_indent + 1
        while self._peek() in _INDENT_CHARS and not self._at_end():
            column += TAB_WIDTH if self._peek() == "\t" else 1
            self._pos += 1
        if self._at_line_end():
            self._consume_line_end()
            return {}

        if self._peek() == ARRAY_START:
            return self._parse_array_value(item_indent)
        if self._line_has_key(self._pos):
            return self._parse_object(column, inline_first=True)
        return coerce_scalar(self._read_line_rest().strip())

    # ------------------------------------------------------------------
    # Inline items
    # ------------------------------------------------------------------

    def _parse_inline_items(self) -> JsonArray:
        """Parse comma-separated items up to the end of the current line.

        Returns:
            Decoded items; an empty line yields no items.
        """
        items: JsonArray = []
        self._skip_spaces()
        if self._at_line_end():
            return items
        while True:
            items.append(self._parse_inline_item(SEPARATOR))
            self._skip_spaces()
            if self._at_line_end():
                return items
            if self._peek() != SEPARATOR:
                raise self._error(UnexpectedStructureError, "Expected ',' between array items")
            self._pos += 1

    def _parse_inline_item(self, stop: str) -> JsonValue:
        """Parse one inline item.

        Args:
            stop: Characters that end a bare token.

        Returns:
            A scalar, a counted ``[N]:`` array or a ``{k:v}`` object.
        """
        self._skip_spaces()
        char = self._peek()
        if char == ARRAY_START:
            return self._parse_inline_array(stop)
        if char == OBJECT_START:
            return self._parse_inline_object()
        return coerce_scalar(self._read_token(stop))

    def _parse_inline_array(self, stop: str) -> JsonArray:
        """Parse a nested ``[N]: a,b`` array that consumes exactly N items.

        Args:
            stop: Token terminators of the enclosing context.

        Returns:
            Decoded array.
        """
        count = self._parse_count()
        if self._peek() == KEY_VALUE_SEPARATOR:
            self._pos += 1
        items: JsonArray = []
        for index in range(count):
            if index:
                self._skip_spaces()
                if self._peek() != SEPARATOR:
                    raise self._error(UnexpectedStructureError, f"Nested array declares {count} items but has {index}")
                self._pos += 1
            items.append(self._parse_inline_item(stop))
        return items

    def _parse_inline_object(self) -> JsonObject:
        """Parse a ``{k:v,...}`` object.

        Returns:
            Decoded object.
        """
        start = self._pos
        self._pos += 1
        result: JsonObject = {}
        self._skip_spaces()
        if self._peek() == OBJECT_END:
            self._pos += 1
            return result
        while True:
            self._skip_spaces()
            key_pos = self._pos
            key = self._parse_inline_key()
            if key in result:
                raise self._error(UnexpectedStructureError, f"Duplicate key {key!r}", key_pos)
            self._pos += 1
            result[key] = self._parse_inline_item(SEPARATOR + OBJECT_END)
            self._skip_spaces()
            char = self._peek()
            if char == SEPARATOR:
                self._pos += 1
            elif char == OBJECT_END:
                self._pos += 1
                return result
            else:
                raise self._error(UnexpectedStructureError, "Unterminated inline object", start)

    def _parse_inline_key(self) -> str:
        """Parse a key inside ``{...}``, leaving the cursor on ``:``.

        Returns:
            Key text.
        """
        if self._peek() == QUOTE:
            key, self._pos = self._scan_quoted(self._pos)
            self._skip_spaces()
        else:
            start = self._pos
            while self._pos < self._length and self._text[self._pos] not in ":,}\n\r":
                self._pos += 1
            key = self._text[start:self._pos].strip()
            if not key:
                raise self._error(UnexpectedStructureError, "Missing key in inline object", start)
        if self._peek() != KEY_VALUE_SEPARATOR:
            raise self._error(UnexpectedStructureError, f"Expected ':' after inline key {key!r}")
        return key

    def _read_token(self, stop: str) -> str:
        """Read a bare or quoted token, honouring quotes.

        Separators inside a double-quoted span do not end the token.

        Args:
            stop: Characters that end the token outside quotes.

        Returns:
            Raw token text, stripped.
        """
        start = self._pos
        pos = start
        in_quotes = False
        while pos < self._length:
            char = self._text[pos]
            if char == "\n":
                break
            if in_quotes:
                if char == BACKSLASH and pos + 1 < self._length and self._text[pos + 1] != "\n":
                    pos += 2
                    continue
                if char == QUOTE:
                    in_quotes = False
            elif char in stop or char == "\r":
                break
            elif char == QUOTE:
                in_quotes = True
            pos += 1
        self._pos = pos
        return self._text[start:pos].strip()

    def _scan_quoted(self, pos: int) -> Tuple[str, int]:
        """Decode the quoted string starting at ``pos``.

        Args:
            pos: Position of the opening quote.

        Returns:
            Tuple of (decoded string, position after the closing quote).

        Raises:
            UnexpectedStructureError: If the string is not closed on its line.
        """
        i = pos + 1
        while i < self._length:
            char = self._text[i]
            if char == BACKSLASH and i + 1 < self._length and self._text[i + 1] not in _LINE_END_CHARS:
                i += 2
                continue
            if char == QUOTE:
                return unescape(self._text[pos + 1:i]), i + 1
            if char in _LINE_END_CHARS:
                break
            i += 1
        raise self._error(UnexpectedStructureError, "Unterminated quoted string", pos)

    # ------------------------------------------------------------------
    # Cursor helpers
    # ------------------------------------------------------------------

    def _at_end(self) -> bool:
        """Return True when the cursor is past the last character."""
        return self._pos >= self._length

    def _peek(self) -> str:
        """Return the character under the cursor, or an empty string at the end."""
        return self._text[self._pos] if self._pos < self._length else ""

    def _at_line_end(self) -> bool:
        """Return True at a line break or at the end of the text."""
        return self._pos >= self._length or self._text[self._pos] in _LINE_END_CHARS

    def _skip_spaces(self) -> None:
        """Advance over spaces and tabs within the current line."""
        while self._pos < self._length and self._text[self._pos] in _INDENT_CHARS:
            self._pos += 1

    def _consume_line_end(self) -> None:
        """Advance past the end of the current line, which must hold nothing else."""
        self._skip_spaces()
        if self._peek() == "\r":
            self._pos += 1
        if self._peek() == "\n":
            self._pos += 1
        elif not self._at_end():
            raise self._error(UnexpectedStructureError, "Unexpected trailing content")

    def _read_line_rest(self) -> str:
        """Return the rest of the current line and move to the next one."""
        end = self._text.find("\n", self._pos)
        if end == -1:
            end = self._length
        line = self._text[self._pos:end]
        self._pos = min(end + 1, self._length)
        return line.rstrip("\r")

    def _skip_blank_lines(self) -> None:
        """Move the cursor to the start of the next line holding content."""
        while self._pos < self._length:
            pos = self._pos
            while pos < self._length and self._text[pos] in " \t\r":
                pos += 1
            if pos >= self._length:
                self._pos = pos
                return
            if self._text[pos] != "\n":
                return
            self._pos = pos + 1

    def _measure_indent(self) -> Tuple[int, int]:
        """Measure the indentation of the line starting at the cursor.

        Returns:
            Tuple of (indent width with tabs counted as two spaces, position of the first content character).
        """
        width = 0
        pos = self._pos
        while pos < self._length and self._text[pos] in _INDENT_CHARS:
            width += TAB_WIDTH if self._text[pos] == "\t" else 1
            pos += 1
        return width, pos

    def _peek_indent(self) -> Optional[int]:
        """Return the indentation of the next content line without moving the cursor."""
        saved = self._pos
        self._skip_blank_lines()
        indent = None if self._at_end() else self._measure_indent()[0]
        self._pos = saved
        return indent

    def _is_single_line(self, pos: int) -> bool:
        """Return True if nothing but whitespace follows the line holding ``pos``."""
        end = self._text.find("\n", pos)
        return end == -1 or not self._text[end:].strip()

    def _line_has_key(self, pos: int) -> bool:
        """Return True if the line content at ``pos`` starts with ``key:`` or ``key[``."""
        if pos < self._length and self._text[pos] == QUOTE:
            try:
                _, pos = self._scan_quoted(pos)
            except ToonDecodeError:
                return False
            while pos < self._length and self._text[pos] in _INDENT_CHARS:
                pos += 1
            return pos < self._length and self._text[pos] in ":["
        while pos < self._length and self._text[pos] not in ":[\n\r":
            pos += 1
        return pos < self._length and self._text[pos] in ":["

    def _error(self, error_class: Type[ToonDecodeError], message: str, pos: Optional[int] = None) -> ToonDecodeError:
        """Build a decode error located at ``pos`` (default: the cursor).

        Args:
            error_class: Error type to build.
            message: Description of the problem.
            pos: Offending position.

        Returns:
            The error, ready to raise.
        """
        if pos is None:
            pos = self._pos
        pos = min(pos, self._length)
        line = self._text.count("\n", 0, pos) + 1
        column = pos - (self._text.rfind("\n", 0, pos) + 1) + 1
        return error_class(message, line=line, column=column)
