"""Core package initializer for undobucket.

Downstream code can do:
    from undobucket.core.settings import load_settings, BucketSettings, get_logger
    from undobucket.core.bucket import Bucket, Snapshot
"""

from __future__ import annotations

__all__ = ["__doc__"]
