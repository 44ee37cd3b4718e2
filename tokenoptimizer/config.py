# -*- coding: utf-8 -*-
"""Location: ./tokenoptimizer/config.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Token Optimizer Configuration.
This module defines configuration settings for the token optimizer using Pydantic.
It loads configuration from environment variables (or a ``.env`` file) with sensible defaults.

Environment variables:
- LOG_LEVEL: Logging level (default: "INFO")
- PREFER_FORMAT: Format selection mode, one of auto/json_only/toon_only (default: "auto")
- MIN_SAVINGS_PERCENT: Minimum TOON savings in percent before switching from JSON (default: 0.0)
- OPTIMIZATION_CRITERIA: Metric compared between formats, one of tokens/bytes/characters (default: "tokens")
- TOKEN_MODEL: tiktoken model or encoding name; unset uses the built-in estimate (default: None)
- JSON_INDENT: Pretty-print JSON output (default: False)

Examples:
    >>> from tokenoptimizer.config import Settings
    >>> s = Settings(log_level="debug", min_savings_percent=12.5)
    >>> s.log_level
    'DEBUG'
    >>> s.min_savings_percent
    12.5
    >>> try:
    ...     Settings(min_savings_percent=150)
    ... except ValueError:
    ...     print("error")
    error
"""

# Standard
from functools import lru_cache
import logging
import sys
from typing import Any, Literal, Optional

# Third-Party
import orjson
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Token optimizer configuration settings.

    Examples:
        >>> s = Settings(prefer_format="toon_only", token_model="cl100k_base")
        >>> s.prefer_format, s.token_model
        ('toon_only', 'cl100k_base')
        >>> Settings().optimization_criteria
        'tokens'
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore")

    log_level: str = Field(default="INFO", description="Logging level")
    prefer_format: Literal["auto", "json_only", "toon_only"] = Field(default="auto", description="Format selection mode")
    min_savings_percent: float = Field(default=0.0, ge=0.0, le=100.0, description="Minimum TOON savings (percent) required to switch from JSON")
    optimization_criteria: Literal["tokens", "bytes", "characters"] = Field(default="tokens", description="Metric compared between formats")
    token_model: Optional[str] = Field(default=None, description="tiktoken model or encoding name; None uses the estimate")
    json_indent: bool = Field(default=False, description="Pretty-print JSON output")

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """
        Normalize and validate the log level value.

        Args:
            v (str): The log level string provided via configuration or environment.

        Returns:
            str: The validated and normalized (uppercase) log level.

        Raises:
            ValueError: If the provided value is not one of
                {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}.

        Examples:
            >>> Settings.validate_log_level("warning")
            'WARNING'
        """
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_up = str(v).upper()
        if v_up not in allowed:
            raise ValueError(f"Invalid log_level: {v}")
        return v_up

    @field_validator("prefer_format", "optimization_criteria", mode="before")
    @classmethod
    def normalize_choice(cls, v: Any) -> Any:
        """
        Lowercase enumerated choices so ``TOON_ONLY`` and ``toon_only`` are equivalent.

        Args:
            v: Raw value.

        Returns:
            The lowercased value when it is a string, otherwise the value unchanged.
        """
        if isinstance(v, str):
            return v.strip().lower()
        return v

    def log_summary(self) -> None:
        """Log a summary of the active settings at INFO level."""
        logger.info(f"Token optimizer settings summary: {self.model_dump()}")


@lru_cache()
def get_settings(**kwargs: Any) -> Settings:
    """Get cached settings instance.

    Args:
        **kwargs: Keyword arguments to pass to the Settings setup.

    Returns:
        Settings: A cached instance of the Settings class.

    Examples:
        >>> settings = get_settings()
        >>> isinstance(settings, Settings)
        True
        >>> settings is get_settings()
        True
    """
    return Settings(**kwargs)


def generate_settings_schema() -> dict[str, Any]:
    """
    Return the JSON Schema describing the Settings model.

    Returns:
        dict: A dictionary representing the JSON Schema of the Settings model.

    Examples:
        >>> "min_savings_percent" in generate_settings_schema()["properties"]
        True
    """
    return Settings.model_json_schema(mode="validation")


class LazySettingsWrapper:
    """Lazily initialize settings singleton on getattr"""

    def __getattr__(self, key: str) -> Any:
        """Get the real settings object and forward to it

        Args:
            key: The key to fetch from settings

        Returns:
            Any: The value of the attribute on the settings
        """
        return getattr(get_settings(), key)


settings = LazySettingsWrapper()


if __name__ == "__main__":
    if "--schema" in sys.argv:
        schema = generate_settings_schema()
        print(orjson.dumps(schema, option=orjson.OPT_INDENT_2).decode())
        sys.exit(0)
    settings.log_summary()
