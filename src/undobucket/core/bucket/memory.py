"""
In-memory bounded bucket with epoch counter and undo history.

This module implements a small, generic container that keeps an ordered
collection of items of one caller-chosen type. It provides:

- ``add_item(item)`` / ``add_items(items)``: append at the back, enforcing
  the optional ``max_items`` bound.
- ``poll()``: remove and return the oldest item.
- ``clear()``: drop every item.
- ``undo()``: restore the contents captured before the latest mutation.
- ``epoch``: a counter bumped once per applied mutation (undo included).

History Model
-------------
Before every mutation a :class:`Snapshot` of the *full* item sequence is
appended to the history, oldest snapshot first. ``undo()`` pops the newest
snapshot and makes it the live contents. Undo itself records nothing, so
there is no redo. ``max_history`` bounds the history (oldest dropped first);
``max_history=0`` disables snapshots entirely.

Capacity Model
--------------
With ``OverflowPolicy.EVICT`` (default) the bucket behaves like a FIFO cache:
inserting past ``max_items`` drops the oldest items so the newest survive.
With ``OverflowPolicy.REJECT`` an insert into a full bucket changes nothing.

Ownership
---------
Elements are duplicated with ``copy_item`` (``copy.deepcopy`` by default) when
they are inserted and when they are captured into a snapshot, so the caller
never shares a stored element by reference.

Concurrency
-----------
A bucket is a plain owned value with no internal locking. Callers sharing one
across threads must guard every call with their own lock.
"""

from __future__ import annotations

import copy
import logging
from collections import deque
from collections.abc import Callable, Iterable, Iterator
from typing import Generic, TypeVar

from undobucket.core.contracts.limits import BucketLimits, OverflowPolicy
from undobucket.core.settings import BucketSettings, load_settings

from .snapshot import Snapshot, utc_timestamp

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Bucket(Generic[T]):
    """
    Named, bounded, undoable ordered container.

    Attributes
    ----------
    _name : str
        Immutable label used for diagnostics.
    _limits : BucketLimits
        Validated capacity, history and overflow options.
    _items : deque[T]
        Live contents, oldest first.
    _history : deque[Snapshot[T]]
        Snapshots taken before each mutation, most recent last.
    _epoch : int
        Monotonically increasing mutation counter.
    _copy_item : Callable[[T], T]
        Duplicates an element on insert and when it is captured into a snapshot.
    """

    __slots__ = ("_name", "_limits", "_items", "_history", "_epoch", "_copy_item")

    def __init__(
        self,
        name: str,
        max_items: int | None = None,
        max_history: int | None = None,
        *,
        overflow: OverflowPolicy = OverflowPolicy.EVICT,
        batch_undo: bool = False,
        copy_item: Callable[[T], T] = copy.deepcopy,
    ) -> None:
        self._name: str = name
        self._limits: BucketLimits = BucketLimits(
            max_items=max_items,
            max_history=max_history,
            overflow=overflow,
            batch_undo=batch_undo,
        )
        self._items: deque[T] = deque()
        self._history: deque[Snapshot[T]] = deque()
        self._epoch: int = 0
        self._copy_item: Callable[[T], T] = copy_item

    @classmethod
    def from_limits(
        cls,
        name: str,
        limits: BucketLimits,
        *,
        copy_item: Callable[[T], T] = copy.deepcopy,
    ) -> Bucket[T]:
        """Build an empty bucket from an already validated ``BucketLimits``."""
        return cls(
            name,
            limits.max_items,
            limits.max_history,
            overflow=limits.overflow,
            batch_undo=limits.batch_undo,
            copy_item=copy_item,
        )

    @classmethod
    def from_settings(cls, name: str, settings: BucketSettings | None = None) -> Bucket[T]:
        """Build an empty bucket using the configured defaults.

        Parameters
        ----------
        name : str
            Label of the new bucket.
        settings : BucketSettings | None
            Explicit settings; the cached ``load_settings()`` instance is used
            when omitted.
        """
        cfg = settings if settings is not None else load_settings()
        return cls.from_limits(name, cfg.limits())

    # ------------------------------- Accessors ------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def epoch(self) -> int:
        """Number of mutations applied so far (undo counts as one)."""
        return self._epoch

    @property
    def limits(self) -> BucketLimits:
        return self._limits

    @property
    def max_items(self) -> int | None:
        return self._limits.max_items

    @property
    def max_history(self) -> int | None:
        return self._limits.max_history

    @property
    def overflow(self) -> OverflowPolicy:
        return self._limits.overflow

    @property
    def batch_undo(self) -> bool:
        return self._limits.batch_undo

    @property
    def history_len(self) -> int:
        """Number of snapshots currently available to ``undo()``."""
        return len(self._history)

    def history(self) -> tuple[Snapshot[T], ...]:
        """Return all retained snapshots, oldest first (immutable tuple)."""
        return tuple(self._history)

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)

    def iter(self) -> Iterator[T]:
        """Return a fresh iterator over the live items in insertion order.

        The traversal is read-only and restartable: every call starts from the
        oldest item. Mutating the bucket while an iterator is in use raises
        ``RuntimeError`` on the next step.
        """
        return iter(self._items)

    def __iter__(self) -> Iterator[T]:
        return self.iter()

    def peek(self, default: T | None = None) -> T | None:
        """Return the oldest item without removing it, or ``default`` if empty."""
        if not self._items:
            return default
        return self._items[0]

    # ------------------------------- Mutations ------------------------------

    def add_item(self, item: T) -> bool:
        """
        Append a duplicate of ``item`` at the back of the bucket.

        The bucket owns what it stores: mutating ``item`` afterwards does not
        change the live contents.

        Returns
        -------
        bool
            ``True`` when the item was stored. ``False`` only under
            ``OverflowPolicy.REJECT`` when the bucket is already full; in that
            case nothing changes and the epoch stays the same.
        """
        if self._is_full() and self.overflow is OverflowPolicy.REJECT:
            logger.debug("bucket %r full (%d items); rejected insert", self._name, len(self))
            return False

        self._record("add_item")
        self._items.append(self._copy_item(item))
        self._evict()
        self._epoch += 1
        return True

    def add_items(self, items: Iterable[T]) -> int:
        """
        Append every element of ``items`` in order.

        By default each element is its own history step (one snapshot and one
        epoch bump per element), so ``undo()`` only reverses the last element.
        With ``batch_undo`` the whole call is a single step.

        Returns
        -------
        int
            Number of elements accepted into the bucket.
        """
        batch = list(items)
        if not batch:
            return 0

        if not self.batch_undo:
            return sum(1 for item in batch if self.add_item(item))

        if self.overflow is OverflowPolicy.REJECT and self.max_items is not None:
            room = max(self.max_items - len(self._items), 0)
            if room < len(batch):
                logger.debug(
                    "bucket %r has room for %d of %d items; rejected the rest",
                    self._name,
                    room,
                    len(batch),
                )
            batch = batch[:room]
            if not batch:
                return 0

        self._record("add_items")
        self._items.extend(self._copy_item(item) for item in batch)
        self._evict()
        self._epoch += 1
        return len(batch)

    def poll(self, default: T | None = None) -> T | None:
        """Remove and return the oldest item, or ``default`` if the bucket is empty.

        Polling an empty bucket is a no-op: no snapshot, no epoch change.
        """
        if not self._items:
            return default

        self._record("poll")
        item = self._items.popleft()
        self._epoch += 1
        return item

    def clear(self) -> bool:
        """Drop every item. Returns ``False`` (no-op) if already empty."""
        if not self._items:
            return False

        self._record("clear")
        self._items.clear()
        self._epoch += 1
        return True

    def undo(self) -> bool:
        """
        Restore the contents captured before the most recent mutation.

        The consumed snapshot is discarded and no new one is recorded, so two
        consecutive undos walk two steps back; there is no redo.

        Returns
        -------
        bool
            ``True`` if a snapshot was restored, ``False`` if the history was
            empty (no-op, epoch unchanged).
        """
        if not self._history:
            return False

        snap = self._history.pop()
        self._items = deque(snap.items)
        self._epoch += 1
        logger.debug(
            "bucket %r undid %s from epoch %d (%d items restored)",
            self._name,
            snap.operation,
            snap.epoch,
            len(snap),
        )
        return True

    # ------------------------------- Copying --------------------------------

    def copy(self) -> Bucket[T]:
        """
        Return an independent duplicate of this bucket.

        Name, limits, items, history and epoch are carried over. Elements are
        duplicated with the bucket's ``copy_item`` so that later mutation of
        either bucket (or of its elements) does not leak into the other.
        """
        dup: Bucket[T] = type(self).from_limits(
            self._name, self._limits, copy_item=self._copy_item
        )
        dup._items = deque(self._copy_item(item) for item in self._items)
        dup._history = deque(
            Snapshot(
                items=tuple(self._copy_item(item) for item in snap.items),
                epoch=snap.epoch,
                operation=snap.operation,
                timestamp=snap.timestamp,
            )
            for snap in self._history
        )
        dup._epoch = self._epoch
        return dup

    def __copy__(self) -> Bucket[T]:
        return self.copy()

    def __repr__(self) -> str:
        return (
            f"Bucket(name={self._name!r}, items={len(self._items)}, "
            f"epoch={self._epoch}, history={len(self._history)})"
        )

    # ------------------------------- Internals ------------------------------

    def _is_full(self) -> bool:
        return self.max_items is not None and len(self._items) >= self.max_items

    def _record(self, operation: str) -> None:
        """Push a snapshot of the current items, trimming the oldest ones."""
        max_history = self.max_history
        if max_history == 0:
            return

        snap: Snapshot[T] = Snapshot(
            items=tuple(self._copy_item(item) for item in self._items),
            epoch=self._epoch,
            operation=operation,
            timestamp=utc_timestamp(),
        )
        self._history.append(snap)

        # Enforce max history (oldest first)
        while max_history is not None and len(self._history) > max_history:
            dropped = self._history.popleft()
            logger.debug(
                "bucket %r history full; dropped snapshot from epoch %d",
                self._name,
                dropped.epoch,
            )

    def _evict(self) -> None:
        """Drop items from the front until ``max_items`` holds."""
        max_items = self.max_items
        while max_items is not None and len(self._items) > max_items:
            evicted = self._items.popleft()
            logger.debug("bucket %r over capacity; evicted %r", self._name, evicted)


__all__ = ["Bucket"]
