"""
FIFO worklist of folders awaiting a scan.

First-in first-out order gives breadth-first traversal: every folder at
depth d is dequeued before any folder at depth d + 1.
"""

from __future__ import annotations

from collections import deque
from pathlib import Path

from scriptree.core.errors import EmptyQueueError
from scriptree.core.models import QueueItem


class TraversalQueue:
    """
    Ordered worklist of (source, destination) pairs.

    Use as a context manager to guarantee the queue is drained on exit,
    whether the scan finished or raised.
    """

    def __init__(self):
        self._items: deque[QueueItem] = deque()

    def enqueue(self, source: Path, destination: Path, depth: int = 0) -> QueueItem:
        """Append one item and return it."""
        item = QueueItem(source=Path(source), destination=Path(destination), depth=depth)
        self._items.append(item)
        return item

    def dequeue(self) -> QueueItem:
        """Remove and return the oldest item."""
        if not self._items:
            raise EmptyQueueError("Traversal queue is empty")
        return self._items.popleft()

    def clear(self) -> None:
        """Drop all pending items."""
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __enter__(self):
        self.clear()
        return self

    def __exit__(self, *args):
        self.clear()
