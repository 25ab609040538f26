"""
Snapshot definition.

This module defines the immutable record of a bucket's contents captured
just *before* a mutating operation. Instances are what ``Bucket.history()``
returns; the record is kept apart from ``memory.py`` so the container module
holds only behavior, and it is exported on its own from ``undobucket.core.bucket``.

Design Notes
------------
- **Immutability**: Once created, a snapshot should not change. We use
  ``frozen=True`` and store the items as a tuple of duplicated elements.
- **Timestamps**: stored as ISO-8601 strings, frozen at the moment of capture.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Generic, TypeVar

T = TypeVar("T")


def utc_timestamp() -> str:
    """Return the current UTC time as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    now = datetime.now(UTC)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


@dataclass(frozen=True, slots=True)
class Snapshot(Generic[T]):
    """
    Immutable record of a bucket's items before a mutation.

    Attributes
    ----------
    items : tuple[T, ...]
        Duplicated contents of the bucket, oldest item first.
    epoch : int
        The bucket epoch at capture time (i.e., before the mutation applied).
    operation : str
        Name of the mutation that produced this record
        (``"add_item"``, ``"add_items"``, ``"poll"`` or ``"clear"``).
    timestamp : str
        ISO-8601 UTC timestamp string (e.g., "2025-10-27T10:00:00.123Z").
    """

    items: tuple[T, ...]
    epoch: int
    operation: str
    timestamp: str

    def __len__(self) -> int:
        return len(self.items)


__all__ = ["Snapshot", "utc_timestamp"]
