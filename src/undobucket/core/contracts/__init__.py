"""Pydantic contracts shared across undobucket."""

from __future__ import annotations

from .limits import BucketLimits, OverflowPolicy

__all__ = ["BucketLimits", "OverflowPolicy"]
