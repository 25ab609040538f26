"""Centralized bucket configuration using Pydantic Settings (v2).

This module exposes a cached `load_settings()` loader that reads from:
- Real environment variables (highest precedence)
- `.env` files at the repository root: .env, .env.local, .env.dev/.env.test/.env.prod

The bucket limits configured here are only *defaults*: a `Bucket` constructed
directly with explicit limits ignores them. Use `Bucket.from_settings()` to
build a bucket from the environment.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from undobucket.core.contracts.limits import BucketLimits, OverflowPolicy

EnvName = Literal["dev", "test", "prod"]
LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class BucketSettings(BaseSettings):
    """Typed configuration loaded from env and `.env` files.

    Attributes
    ----------
    environment : EnvName
        Runtime environment flag; maps from `UNDOBUCKET_ENV`.
    log_level : LogLevelName
        Global log level string; maps from `LOG_LEVEL`.
    max_items : Optional[int]
        Default item capacity; maps from `BUCKET_MAX_ITEMS`. Unset means unbounded.
    max_history : Optional[int]
        Default history depth; maps from `BUCKET_MAX_HISTORY`. Unset means unbounded.
    overflow : OverflowPolicy
        Default capacity policy; maps from `BUCKET_OVERFLOW` (`evict` or `reject`).
    batch_undo : bool
        Whether `add_items` is recorded as one history step; maps from `BUCKET_BATCH_UNDO`.
    """

    environment: EnvName = Field(default="dev", alias="UNDOBUCKET_ENV")
    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")
    max_items: int | None = Field(default=None, gt=0, alias="BUCKET_MAX_ITEMS")
    max_history: int | None = Field(default=None, ge=0, alias="BUCKET_MAX_HISTORY")
    overflow: OverflowPolicy = Field(default=OverflowPolicy.EVICT, alias="BUCKET_OVERFLOW")
    batch_undo: bool = Field(default=False, alias="BUCKET_BATCH_UNDO")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local", ".env.dev", ".env.test", ".env.prod"),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def is_dev(self) -> bool:
        """Return True if running in the development environment."""
        return self.environment == "dev"

    @property
    def is_test(self) -> bool:
        """Return True if running in the test environment."""
        return self.environment == "test"

    @property
    def is_prod(self) -> bool:
        """Return True if running in the production environment."""
        return self.environment == "prod"

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return getattr(logging, self.log_level, logging.INFO)

    def limits(self) -> BucketLimits:
        """Return the configured defaults as a validated `BucketLimits`."""
        return BucketLimits(
            max_items=self.max_items,
            max_history=self.max_history,
            overflow=self.overflow,
            batch_undo=self.batch_undo,
        )


@lru_cache(maxsize=1)
def load_settings() -> BucketSettings:
    """Create and cache a `BucketSettings` instance.

    We keep this behind an LRU cache so tests can force a rebuild via
    `load_settings.cache_clear()` after mutating `os.environ`. Nothing reads the
    environment at import time, so an invalid `BUCKET_*` value surfaces as a
    `ValidationError` from this call rather than as an import failure.
    """
    os.environ.setdefault("UNDOBUCKET_ENV", "dev")
    return BucketSettings()


def get_logger(name: str = "undobucket") -> logging.Logger:
    """Return a process-global logger configured to the current `LOG_LEVEL`."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(load_settings().log_level_numeric())
    logger.propagate = False
    return logger
