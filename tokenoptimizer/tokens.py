# -*- coding: utf-8 -*-
"""Location: ./tokenoptimizer/tokens.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Token counting.

Two strategies are available:

- a generic estimate averaging a character-based (4 characters per token)
  and a word-based (0.75 words per token) approximation;
- exact counting with tiktoken for a given model or encoding name.

tiktoken encodings are expensive to load, so they live in an
``EncodingCache`` that the process creates once and hands to every
``TokenCounter`` that should share it.

Examples:
    >>> estimate_tokens("")
    0
    >>> estimate_tokens("hello world")
    3
    >>> count_tokens_detailed("a: 1, b")
    5
    >>> TokenCounter().count("hello world")
    3
"""

# Standard
import logging
import math
import threading
from typing import Dict, Optional

# Third-Party
import tiktoken

# First-Party
from tokenoptimizer.toon.errors import InvalidInputError

logger = logging.getLogger(__name__)

CHARS_PER_TOKEN = 4.0
WORDS_PER_TOKEN = 0.75
MIN_TOKEN_COUNT = 0


class EncodingCache:
    """Process-owned cache of tiktoken encodings keyed by model name.

    Examples:
        >>> cache = EncodingCache()
        >>> len(cache)
        0
        >>> "gpt-4o" in cache
        False
    """

    def __init__(self) -> None:
        """Initialize an empty cache."""
        self._encodings: Dict[str, tiktoken.Encoding] = {}
        self._lock = threading.Lock()

    def get(self, model: str) -> tiktoken.Encoding:
        """Return the encoding for a model, loading it on first use.

        ``model`` may be a model name (``gpt-4o``) or an encoding name
        (``cl100k_base``).

        Args:
            model: Model or encoding name.

        Returns:
            The tiktoken encoding.

        Raises:
            KeyError: If tiktoken knows neither a model nor an encoding by that name.
        """
        with self._lock:
            encoding = self._encodings.get(model)
            if encoding is None:
                encoding = _load_encoding(model)
                self._encodings[model] = encoding
            return encoding

    def clear(self) -> None:
        """Drop every cached encoding."""
        with self._lock:
            self._encodings.clear()

    def __contains__(self, model: object) -> bool:
        """Return True if an encoding for ``model`` is loaded."""
        return model in self._encodings

    def __len__(self) -> int:
        """Return the number of loaded encodings."""
        return len(self._encodings)


def _load_encoding(model: str) -> tiktoken.Encoding:
    """Load a tiktoken encoding by model name, falling back to encoding name.

    Args:
        model: Model or encoding name.

    Returns:
        The tiktoken encoding.
    """
    try:
        return tiktoken.encoding_for_model(model)
    except KeyError:
        return tiktoken.get_encoding(model)


class TokenCounter:
    """Counts tokens for one model, or estimates them when no model is set.

    Attributes:
        model: tiktoken model or encoding name; None selects the estimate.
    """

    def __init__(self, model: Optional[str] = None, cache: Optional[EncodingCache] = None) -> None:
        """Initialize the counter.

        Args:
            model: tiktoken model or encoding name, or None for the estimate.
            cache: Shared encoding cache; a private one is created when omitted.
        """
        self.model = model
        self._cache = cache if cache is not None else EncodingCache()

    def count(self, text: str) -> int:
        """Count the tokens in ``text``.

        Falls back to ``estimate_tokens`` when the tiktoken encoding cannot
        be loaded.

        Args:
            text: Text to measure.

        Returns:
            Token count.

        Raises:
            InvalidInputError: If ``text`` is None.
        """
        if text is None:
            raise InvalidInputError("Text cannot be None")
        if not text:
            return MIN_TOKEN_COUNT
        if self.model is None:
            return estimate_tokens(text)
        try:
            encoding = self._cache.get(self.model)
        except Exception as e:
            logger.warning(f"Failed to load tiktoken encoding for '{self.model}', using estimate: {e}")
            return estimate_tokens(text)
        return len(encoding.encode(text, disallowed_special=()))


def estimate_tokens(text: str) -> int:
    """Estimate a token count without a tokenizer.

    Averages ``ceil(chars / 4)`` and ``ceil(words / 0.75)``.

    Args:
        text: Text to measure.

    Returns:
        Estimated token count.

    Raises:
        InvalidInputError: If ``text`` is None.
    """
    if text is None:
        raise InvalidInputError("Text cannot be None")
    if not text:
        return MIN_TOKEN_COUNT
    char_based = math.ceil(len(text) / CHARS_PER_TOKEN)
    word_based = math.ceil(len(text.split()) / WORDS_PER_TOKEN)
    return (char_based + word_based) // 2


def count_tokens_detailed(text: str) -> int:
    """Count tokens as alphanumeric runs plus one token per symbol.

    Args:
        text: Text to measure.

    Returns:
        Token count.

    Raises:
        InvalidInputError: If ``text`` is None.
    """
    if text is None:
        raise InvalidInputError("Text cannot be None")
    count = 0
    in_word = False
    for char in text:
        if char.isalnum():
            if not in_word:
                count += 1
                in_word = True
        elif char.isspace():
            in_word = False
        else:
            count += 1
            in_word = False
    return count
