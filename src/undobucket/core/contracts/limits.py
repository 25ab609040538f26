"""
Bucket limits contract.

This Pydantic model validates the construction-time options of a bucket:
its item capacity, its history depth, what happens when an insert would
exceed the capacity, and how batch inserts are recorded in the history.

Absent limits (``None``) mean "unbounded" for that dimension.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class OverflowPolicy(str, Enum):
    """Capacity policy applied when an insert would exceed ``max_items``."""

    EVICT = "evict"
    """Drop the oldest items until the bound holds (FIFO cache)."""

    REJECT = "reject"
    """Leave the bucket unchanged and report the insert as not accepted."""


class BucketLimits(BaseModel):
    """Validated capacity and history options of a bucket."""

    model_config = ConfigDict(frozen=True)

    max_items: int | None = Field(
        default=None, gt=0, description="Maximum live item count; None means unbounded."
    )
    max_history: int | None = Field(
        default=None,
        ge=0,
        description="Maximum number of snapshots kept; None means unbounded, 0 disables undo.",
    )
    overflow: OverflowPolicy = Field(
        default=OverflowPolicy.EVICT, description="Policy applied on capacity overflow."
    )
    batch_undo: bool = Field(
        default=False, description="Record a whole add_items call as one history step."
    )


__all__ = ["BucketLimits", "OverflowPolicy"]
