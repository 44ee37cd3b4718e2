# -*- coding: utf-8 -*-
"""Location: ./tokenoptimizer/optimizer.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Payload format selection.

Renders a payload as both compact JSON and TOON, measures each rendering
(tokens, characters, UTF-8 bytes) and picks the one to send according to an
``OptimizationPolicy``:

- ``json_only`` / ``toon_only`` force a format regardless of cost;
- ``auto`` switches to TOON when it is not costlier than JSON and saves at
  least ``min_savings_percent_for_switch`` percent of the JSON cost.

Examples:
    >>> optimizer = TokenOptimizer()
    >>> result = optimizer.optimize({"users": [{"id": 1, "name": "Ann"}, {"id": 2, "name": "Bob"}]})
    >>> result.optimal_format
    <FormatType.TOON: 'toon'>
    >>> print(result.optimal_content)
    users[2]{id,name}:
      1,Ann
      2,Bob
    >>> optimizer.get_stats()["payloads_processed"]
    1
"""

# Standard
from enum import Enum
import logging
import threading
import time
from typing import Any, Dict, Optional

# Third-Party
from pydantic import BaseModel, ConfigDict, Field

# First-Party
from tokenoptimizer.config import get_settings, Settings
from tokenoptimizer.json_codec import parse_json_text, to_value_tree, write_json_text
from tokenoptimizer.tokens import TokenCounter
from tokenoptimizer.toon import serialize
from tokenoptimizer.toon.errors import InvalidInputError
from tokenoptimizer.toon.values import JsonValue

logger = logging.getLogger(__name__)


class PayloadFormat(str, Enum):
    """Format preference of an optimization policy.

    Examples:
        >>> PayloadFormat("toon_only")
        <PayloadFormat.TOON_ONLY: 'toon_only'>
        >>> PayloadFormat.AUTO.value
        'auto'
    """

    AUTO = "auto"
    JSON_ONLY = "json_only"
    TOON_ONLY = "toon_only"


class FormatType(str, Enum):
    """Concrete payload format.

    Examples:
        >>> FormatType.TOON.value
        'toon'
    """

    JSON = "json"
    TOON = "toon"


class OptimizationCriteria(str, Enum):
    """Metric compared when selecting a format.

    Examples:
        >>> OptimizationCriteria("bytes")
        <OptimizationCriteria.BYTES: 'bytes'>
    """

    TOKENS = "tokens"
    BYTES = "bytes"
    CHARACTERS = "characters"


class OptimizationPolicy(BaseModel):
    """Format selection policy.

    Attributes:
        prefer_format: Forced format or automatic selection.
        min_savings_percent_for_switch: Savings (percent of the JSON cost) TOON must reach in auto mode.
        criteria: Metric compared between the two renderings.

    Examples:
        >>> policy = OptimizationPolicy(prefer_format="toon_only")
        >>> policy.prefer_format
        <PayloadFormat.TOON_ONLY: 'toon_only'>
        >>> policy.min_savings_percent_for_switch, policy.criteria
        (0.0, <OptimizationCriteria.TOKENS: 'tokens'>)
        >>> try:
        ...     OptimizationPolicy(min_savings_percent_for_switch=-1)
        ... except ValueError:
        ...     print("error")
        error
    """

    model_config = ConfigDict(frozen=True)

    prefer_format: PayloadFormat = Field(default=PayloadFormat.AUTO, description="Forced format or automatic selection")
    min_savings_percent_for_switch: float = Field(default=0.0, ge=0.0, le=100.0, description="Minimum TOON savings in percent")
    criteria: OptimizationCriteria = Field(default=OptimizationCriteria.TOKENS, description="Metric compared between formats")

    @classmethod
    def from_settings(cls, cfg: Optional[Settings] = None) -> "OptimizationPolicy":
        """Build a policy from configuration.

        Args:
            cfg: Settings to read; the cached process settings when omitted.

        Returns:
            The configured policy.

        Examples:
            >>> OptimizationPolicy.from_settings(Settings(prefer_format="json_only", min_savings_percent=10)).prefer_format
            <PayloadFormat.JSON_ONLY: 'json_only'>
        """
        cfg = cfg or get_settings()
        return cls(
            prefer_format=PayloadFormat(cfg.prefer_format),
            min_savings_percent_for_switch=cfg.min_savings_percent,
            criteria=OptimizationCriteria(cfg.optimization_criteria),
        )


def savings_percent(baseline: int, candidate: int) -> float:
    """Return how much cheaper ``candidate`` is than ``baseline`` in percent.

    Args:
        baseline: Reference cost.
        candidate: Compared cost.

    Returns:
        Savings percentage; 0.0 when the baseline is zero.

    Examples:
        >>> savings_percent(200, 150)
        25.0
        >>> savings_percent(0, 0)
        0.0
    """
    if baseline == 0:
        return 0.0
    return (baseline - candidate) * 100.0 / baseline


def select_format(json_cost: int, toon_cost: int, policy: OptimizationPolicy) -> FormatType:
    """Pick the payload format for the given costs.

    Args:
        json_cost: Cost of the JSON rendering under the policy's criteria.
        toon_cost: Cost of the TOON rendering under the policy's criteria.
        policy: Selection policy.

    Returns:
        The selected format.

    Examples:
        >>> select_format(100, 80, OptimizationPolicy())
        <FormatType.TOON: 'toon'>
        >>> select_format(100, 80, OptimizationPolicy(min_savings_percent_for_switch=25))
        <FormatType.JSON: 'json'>
        >>> select_format(100, 120, OptimizationPolicy(prefer_format="toon_only"))
        <FormatType.TOON: 'toon'>
        >>> select_format(100, 100, OptimizationPolicy())
        <FormatType.TOON: 'toon'>
    """
    if policy.prefer_format == PayloadFormat.JSON_ONLY:
        return FormatType.JSON
    if policy.prefer_format == PayloadFormat.TOON_ONLY:
        return FormatType.TOON
    if toon_cost > json_cost:
        return FormatType.JSON
    if savings_percent(json_cost, toon_cost) >= policy.min_savings_percent_for_switch:
        return FormatType.TOON
    return FormatType.JSON


class PayloadMetrics(BaseModel):
    """One rendering of a payload and its measurements.

    Examples:
        >>> m = PayloadMetrics.measure("olá", TokenCounter())
        >>> m.character_count, m.byte_count
        (3, 4)
    """

    model_config = ConfigDict(frozen=True)

    content: str
    token_count: int = Field(ge=0)
    character_count: int = Field(ge=0)
    byte_count: int = Field(ge=0)

    @classmethod
    def measure(cls, content: str, counter: TokenCounter) -> "PayloadMetrics":
        """Measure a rendering.

        Args:
            content: Rendered payload.
            counter: Token counter to use.

        Returns:
            The measured rendering.
        """
        return cls(
            content=content,
            token_count=counter.count(content),
            character_count=len(content),
            byte_count=len(content.encode("utf-8")),
        )

    def cost(self, criteria: OptimizationCriteria) -> int:
        """Return the measurement selected by ``criteria``.

        Args:
            criteria: Metric to read.

        Returns:
            The token, byte or character count.
        """
        if criteria == OptimizationCriteria.BYTES:
            return self.byte_count
        if criteria == OptimizationCriteria.CHARACTERS:
            return self.character_count
        return self.token_count


class OptimizationResult(BaseModel):
    """Outcome of a format selection.

    Savings compare the selected rendering with the costlier of the two, so
    they are never negative under automatic selection.

    Examples:
        >>> counter = TokenCounter()
        >>> result = OptimizationResult(
        ...     optimal_format=FormatType.TOON,
        ...     json_metrics=PayloadMetrics.measure('{"a":1}', counter),
        ...     toon_metrics=PayloadMetrics.measure("a: 1", counter),
        ... )
        >>> result.optimal_content
        'a: 1'
        >>> result.character_savings, round(result.character_savings_percent, 2)
        (3, 42.86)
    """

    model_config = ConfigDict(frozen=True)

    optimal_format: FormatType
    json_metrics: PayloadMetrics
    toon_metrics: PayloadMetrics

    @property
    def optimal(self) -> PayloadMetrics:
        """Metrics of the selected rendering."""
        return self.toon_metrics if self.optimal_format == FormatType.TOON else self.json_metrics

    @property
    def optimal_content(self) -> str:
        """Selected rendering."""
        return self.optimal.content

    @property
    def json_content(self) -> str:
        """Compact JSON rendering."""
        return self.json_metrics.content

    @property
    def toon_content(self) -> str:
        """TOON rendering."""
        return self.toon_metrics.content

    @property
    def optimal_token_count(self) -> int:
        """Token count of the selected rendering."""
        return self.optimal.token_count

    @property
    def token_savings(self) -> int:
        """Tokens saved versus the costlier rendering."""
        return max(self.json_metrics.token_count, self.toon_metrics.token_count) - self.optimal.token_count

    @property
    def token_savings_percent(self) -> float:
        """Token savings in percent of the costlier rendering."""
        return savings_percent(max(self.json_metrics.token_count, self.toon_metrics.token_count), self.optimal.token_count)

    @property
    def character_savings(self) -> int:
        """Characters saved versus the longer rendering."""
        return max(self.json_metrics.character_count, self.toon_metrics.character_count) - self.optimal.character_count

    @property
    def character_savings_percent(self) -> float:
        """Character savings in percent of the longer rendering."""
        return savings_percent(max(self.json_metrics.character_count, self.toon_metrics.character_count), self.optimal.character_count)

    @property
    def byte_savings(self) -> int:
        """Bytes saved versus the larger rendering."""
        return max(self.json_metrics.byte_count, self.toon_metrics.byte_count) - self.optimal.byte_count

    @property
    def byte_savings_percent(self) -> float:
        """Byte savings in percent of the larger rendering."""
        return savings_percent(max(self.json_metrics.byte_count, self.toon_metrics.byte_count), self.optimal.byte_count)

    def __str__(self) -> str:
        """Summarize the result as ``optimal/json/toon`` counts with savings per metric.

        Returns:
            Human-readable summary.
        """
        j, t, o = self.json_metrics, self.toon_metrics, self.optimal
        return (
            f"OptimizationResult(optimal_format={self.optimal_format.value}, "
            f"tokens={o.token_count}/{j.token_count}/{t.token_count} "
            f"(savings: {self.token_savings}, {self.token_savings_percent:.2f}%), "
            f"chars={o.character_count}/{j.character_count}/{t.character_count} "
            f"(savings: {self.character_savings}, {self.character_savings_percent:.2f}%), "
            f"bytes={o.byte_count}/{j.byte_count}/{t.byte_count} "
            f"(savings: {self.byte_savings}, {self.byte_savings_percent:.2f}%))"
        )


class TokenOptimizer:
    """Select the cheaper of JSON and TOON for payloads.

    An instance may be shared between threads; its statistics are updated
    under a lock.

    Attributes:
        policy: Format selection policy.
        counter: Token counter used for the token metric.
    """

    def __init__(self, policy: Optional[OptimizationPolicy] = None, counter: Optional[TokenCounter] = None) -> None:
        """Initialize the optimizer.

        Args:
            policy: Selection policy; defaults to automatic selection with no threshold.
            counter: Token counter; defaults to the built-in estimate.
        """
        self.policy = policy or OptimizationPolicy()
        self.counter = counter or TokenCounter()

        # Metrics for observability
        self._stats_lock = threading.Lock()
        self._payloads_processed: int = 0
        self._toon_selected: int = 0
        self._json_selected: int = 0
        # Relative to always sending JSON; negative when TOON is forced and larger
        self._total_tokens_saved: int = 0
        self._total_bytes_saved: int = 0

    def optimize(self, obj: Any) -> OptimizationResult:
        """Render an object as JSON and TOON and select one.

        Args:
            obj: Value tree or host object (pydantic model, dataclass, ...).

        Returns:
            The optimization result.

        Raises:
            InvalidInputError: If ``obj`` is None.
        """
        if obj is None:
            raise InvalidInputError("Object cannot be None")
        return self._optimize_tree(to_value_tree(obj))

    def optimize_json(self, text: str) -> OptimizationResult:
        """Parse JSON text and select a format for it.

        Args:
            text: JSON document.

        Returns:
            The optimization result.

        Raises:
            InvalidInputError: If the text is None, blank or not valid JSON.

        Examples:
            >>> TokenOptimizer(OptimizationPolicy(prefer_format="json_only")).optimize_json('{ "a" : 1 }').optimal_content
            '{"a":1}'
        """
        return self._optimize_tree(parse_json_text(text))

    def optimized_content(self, obj: Any) -> str:
        """Return only the selected rendering of an object.

        Args:
            obj: Value tree or host object.

        Returns:
            Selected rendering.
        """
        return self.optimize(obj).optimal_content

    def optimized_content_from_json(self, text: str) -> str:
        """Return only the selected rendering of a JSON document.

        Args:
            text: JSON document.

        Returns:
            Selected rendering.
        """
        return self.optimize_json(text).optimal_content

    def _optimize_tree(self, tree: JsonValue) -> OptimizationResult:
        """Measure both renderings of a value tree and apply the policy.

        Args:
            tree: Value tree.

        Returns:
            The optimization result.
        """
        start_time = time.monotonic()
        json_metrics = PayloadMetrics.measure(write_json_text(tree), self.counter)
        toon_metrics = PayloadMetrics.measure(serialize(tree), self.counter)

        criteria = self.policy.criteria
        optimal_format = select_format(json_metrics.cost(criteria), toon_metrics.cost(criteria), self.policy)
        result = OptimizationResult(optimal_format=optimal_format, json_metrics=json_metrics, toon_metrics=toon_metrics)

        with self._stats_lock:
            self._payloads_processed += 1
            self._total_tokens_saved += json_metrics.token_count - result.optimal.token_count
            self._total_bytes_saved += json_metrics.byte_count - result.optimal.byte_count
            if optimal_format == FormatType.TOON:
                self._toon_selected += 1
            else:
                self._json_selected += 1
        duration_ms = (time.monotonic() - start_time) * 1000

        if optimal_format == FormatType.TOON:
            logger.info(
                f"TokenOptimizer: Selected TOON, saved {json_metrics.token_count - toon_metrics.token_count} tokens "
                f"({savings_percent(json_metrics.token_count, toon_metrics.token_count):.1f}%), took {duration_ms:.2f}ms"
            )
        else:
            logger.debug(
                f"TokenOptimizer: Kept JSON (policy={self.policy.prefer_format.value}, criteria={criteria.value}, "
                f"json={json_metrics.cost(criteria)}, toon={toon_metrics.cost(criteria)})"
            )
        return result

    def get_stats(self) -> Dict[str, Any]:
        """Get optimizer statistics for monitoring.

        Returns:
            Dictionary with selection statistics.

        Examples:
            >>> stats = TokenOptimizer().get_stats()
            >>> stats["payloads_processed"], stats["toon_selection_rate"]
            (0, 0.0)
        """
        with self._stats_lock:
            return {
                "payloads_processed": self._payloads_processed,
                "toon_selected": self._toon_selected,
                "json_selected": self._json_selected,
                "toon_selection_rate": (self._toon_selected / self._payloads_processed * 100 if self._payloads_processed > 0 else 0.0),
                # Size stats
                "total_tokens_saved": self._total_tokens_saved,
                "total_bytes_saved": self._total_bytes_saved,
            }
