# -*- coding: utf-8 -*-
"""Location: ./tokenoptimizer/toon/constants.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

TOON lexical constants.
This module stores the structural characters and literals shared by the
TOON encoder and decoder.
"""

# Layout.
INDENT_SIZE = 2
TAB_WIDTH = 2
NEWLINE = "\n"
LIST_ITEM_MARKER = "-"
LIST_ITEM_PREFIX = "- "

# Structural characters.
SEPARATOR = ","
KEY_VALUE_SEPARATOR = ":"
ARRAY_START = "["
ARRAY_END = "]"
OBJECT_START = "{"
OBJECT_END = "}"
QUOTE = '"'
BACKSLASH = "\\"

# Literals.
NULL_LITERAL = "null"
TRUE_LITERAL = "true"
FALSE_LITERAL = "false"

# Characters that force quoting of a string in an inline (array item or table cell) position.
INLINE_SPECIAL_CHARS = frozenset(" ,:[]{}\r\n\t\"\\")

# Characters that force quoting of an object key.
KEY_SPECIAL_CHARS = frozenset(",:[]{}\r\n\"\\")

# Escapes valid inside a quoted string, keyed by the escaped character.
ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t"}
UNESCAPES = {"\\": "\\", '"': '"', "n": "\n", "r": "\r", "t": "\t"}
