"""
Smoke tests for the undobucket package surface.

These only check that the public names resolve: the package root re-exports
the container and its contracts, and the console-script target exists.
"""

from __future__ import annotations

import importlib

import undobucket
from undobucket import Bucket, BucketLimits, OverflowPolicy, Snapshot, __version__


def test_version_is_set() -> None:
    """The package carries a non-empty version string."""
    assert isinstance(__version__, str) and __version__


def test_root_exports_match_all() -> None:
    """Every name in `undobucket.__all__` resolves on the package root."""
    for name in undobucket.__all__:
        assert hasattr(undobucket, name), name


def test_root_exports_are_the_core_types() -> None:
    """The re-exported names are the same objects as in `undobucket.core`."""
    from undobucket.core.bucket import memory, snapshot
    from undobucket.core.contracts import limits

    assert Bucket is memory.Bucket
    assert Snapshot is snapshot.Snapshot
    assert BucketLimits is limits.BucketLimits
    assert OverflowPolicy is limits.OverflowPolicy
    assert Bucket("smoke").epoch == 0


def test_console_script_target_exists() -> None:
    """`undobucket.cli:app` (the `undobucket` console script) is importable."""
    cli = importlib.import_module("undobucket.cli")
    assert hasattr(cli, "app"), "undobucket.cli must expose an 'app' Typer object."
