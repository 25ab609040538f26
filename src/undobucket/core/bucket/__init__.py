"""Bounded, undoable bucket and its snapshot record."""

from __future__ import annotations

from .memory import Bucket
from .snapshot import Snapshot

__all__ = ["Bucket", "Snapshot"]
