# -*- coding: utf-8 -*-
"""Location: ./tokenoptimizer/__init__.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Token Optimizer.

Converts payloads between JSON and TOON (Token-Oriented Object Notation) and
selects the rendering that costs the fewest LLM tokens.
"""

__version__ = "0.1.0"

# First-Party
from tokenoptimizer.converter import from_toon, json_to_toon, to_toon, toon_to_json  # noqa: E402
from tokenoptimizer.optimizer import (  # noqa: E402
    FormatType,
    OptimizationCriteria,
    OptimizationPolicy,
    OptimizationResult,
    PayloadFormat,
    select_format,
    TokenOptimizer,
)
from tokenoptimizer.tokens import EncodingCache, estimate_tokens, TokenCounter  # noqa: E402

__all__ = [
    "__version__",
    "to_toon",
    "json_to_toon",
    "from_toon",
    "toon_to_json",
    "TokenOptimizer",
    "OptimizationPolicy",
    "OptimizationResult",
    "OptimizationCriteria",
    "PayloadFormat",
    "FormatType",
    "select_format",
    "TokenCounter",
    "EncodingCache",
    "estimate_tokens",
]
