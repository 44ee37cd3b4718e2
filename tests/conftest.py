# -*- coding: utf-8 -*-
"""Location: ./tests/conftest.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
"""

# Third-Party
import pytest

# First-Party
from tokenoptimizer.config import get_settings

SETTINGS_ENV_VARS = ["LOG_LEVEL", "PREFER_FORMAT", "MIN_SAVINGS_PERCENT", "OPTIMIZATION_CRITERIA", "TOKEN_MODEL", "JSON_INDENT"]


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch, tmp_path):
    """Isolate every test from the caller's environment and ``.env`` file."""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def person():
    """Flat object from the README example."""
    return {"name": "John", "age": 30, "city": "New York"}


@pytest.fixture
def metrics_payload():
    """Uniform array of flat objects with numeric-looking string ids."""
    return {"metrics": [{"id": "1", "v": 1}, {"id": "2", "v": 2}]}


@pytest.fixture
def nested_payload():
    """Payload exercising every array form and nesting level."""
    return {
        "service": "billing",
        "version": 3,
        "ratio": 0.75,
        "enabled": True,
        "owner": None,
        "tags": ["prod", "eu west", "42"],
        "empty": [],
        "limits": {"cpu": 2, "memory": "4Gi", "burst": {"enabled": False}},
        "users": [
            {"id": 1, "name": "Alice", "role": "admin"},
            {"id": 2, "name": "Bob", "role": "user"},
        ],
        "events": [
            {"type": "deploy", "targets": ["eu", "us"]},
            {"type": "rollback", "meta": {"reason": "failed check"}},
            {},
        ],
        "matrix": [[1, 2], [3, 4]],
        "mixed": [1, "two", None, {"three": 3}],
    }
