"""undobucket: a bounded, undoable, epoch-versioned container.

Example
-------
>>> from undobucket import Bucket
>>> b: Bucket[str] = Bucket("fruit", max_items=2)
>>> b.add_items(["apple", "banana", "cherry"])
3
>>> list(b)
['banana', 'cherry']
>>> b.undo()
True
>>> list(b)
['apple', 'banana']
"""

from __future__ import annotations

from undobucket.core.bucket import Bucket, Snapshot
from undobucket.core.contracts import BucketLimits, OverflowPolicy

__all__ = ["Bucket", "BucketLimits", "OverflowPolicy", "Snapshot", "__version__"]
__version__ = "0.1.0"
