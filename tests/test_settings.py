"""Typed smoke tests for the settings loader.

These tests verify four guarantees:
1) `load_settings()` yields a cached `BucketSettings` instance and rejects
   invalid limits.
2) Environment variables override defaults after clearing the loader cache.
3) `get_logger()` respects the configured LOG_LEVEL when constructing loggers.
4) `Bucket.from_settings()` builds buckets from the configured limits.
"""

from __future__ import annotations

import logging
from typing import Any

import pytest
from pydantic import ValidationError

from undobucket.core.bucket.memory import Bucket
from undobucket.core.contracts.limits import OverflowPolicy
from undobucket.core.settings import (
    BucketSettings,
    get_logger,
    load_settings,
)


def test_settings_instance_type() -> None:
    """`load_settings()` returns one cached, typed `BucketSettings` model."""
    s = load_settings()
    assert isinstance(s, BucketSettings)
    assert load_settings() is s


@pytest.mark.parametrize(
    ("var", "value"),
    [("BUCKET_MAX_ITEMS", "0"), ("BUCKET_MAX_ITEMS", "-2"), ("BUCKET_MAX_HISTORY", "-1")],
)  # type: ignore[misc]
def test_invalid_env_limits_fail_on_load(monkeypatch: Any, var: str, value: str) -> None:
    """Out-of-range limits are rejected when settings load, not later."""
    monkeypatch.setenv(var, value)
    load_settings.cache_clear()
    with pytest.raises(ValidationError):
        load_settings()


def test_env_overrides_with_cache_clear(monkeypatch: Any) -> None:
    """Changing env vars should take effect after `load_settings.cache_clear()`."""
    monkeypatch.setenv("UNDOBUCKET_ENV", "test")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("BUCKET_MAX_ITEMS", "5")
    monkeypatch.setenv("BUCKET_MAX_HISTORY", "0")
    monkeypatch.setenv("BUCKET_OVERFLOW", "reject")
    monkeypatch.setenv("BUCKET_BATCH_UNDO", "true")

    load_settings.cache_clear()
    s = load_settings()

    assert s.environment == "test" and s.is_test
    assert s.log_level == "DEBUG"
    assert s.max_items == 5
    assert s.max_history == 0
    assert s.overflow is OverflowPolicy.REJECT
    assert s.batch_undo is True


def test_get_logger_respects_level(monkeypatch: Any) -> None:
    """`get_logger()` should apply the numeric level derived from `LOG_LEVEL`.

    A unique logger name avoids side effects between tests.
    """
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    load_settings.cache_clear()

    logger = get_logger("undobucket.tests.settings")

    assert logger.level == logging.ERROR
    assert logger.handlers, "Expected at least one StreamHandler to be attached."


def test_bucket_from_settings_env(monkeypatch: Any) -> None:
    """A bucket built from settings picks up the env-configured limits."""
    monkeypatch.setenv("BUCKET_MAX_ITEMS", "2")
    monkeypatch.setenv("BUCKET_MAX_HISTORY", "1")
    load_settings.cache_clear()

    b: Bucket[int] = Bucket.from_settings("env")
    assert b.max_items == 2
    assert b.max_history == 1
    b.add_items([1, 2, 3])
    assert list(b) == [2, 3]
    assert b.history_len == 1


def test_bucket_from_explicit_settings() -> None:
    """Explicit settings win over the cached environment-derived instance."""
    s = BucketSettings(max_items=3, overflow=OverflowPolicy.REJECT)
    b: Bucket[str] = Bucket.from_settings("explicit", s)
    assert b.max_items == 3
    assert b.max_history is None
    assert b.overflow is OverflowPolicy.REJECT
