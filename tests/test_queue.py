from __future__ import annotations

from pathlib import Path

import pytest

from scriptree.core.build.queue import TraversalQueue
from scriptree.core.errors import EmptyQueueError


@pytest.mark.unit
def test_dequeue_returns_items_in_fifo_order() -> None:
    queue = TraversalQueue()
    queue.enqueue(Path("/src/a"), Path("/out/a"))
    queue.enqueue(Path("/src/b"), Path("/out/b"), depth=1)

    first = queue.dequeue()
    second = queue.dequeue()

    assert (first.source, first.destination, first.depth) == (Path("/src/a"), Path("/out/a"), 0)
    assert (second.source, second.depth) == (Path("/src/b"), 1)
    assert len(queue) == 0


@pytest.mark.unit
def test_dequeue_on_empty_queue_raises() -> None:
    with pytest.raises(EmptyQueueError):
        TraversalQueue().dequeue()


@pytest.mark.unit
def test_clear_drops_pending_items() -> None:
    queue = TraversalQueue()
    for name in ("a", "b", "c"):
        queue.enqueue(Path(name), Path("out") / name)
    assert len(queue) == 3

    queue.clear()

    assert len(queue) == 0
    assert not queue


@pytest.mark.unit
def test_context_manager_clears_on_error_exit() -> None:
    queue = TraversalQueue()
    with pytest.raises(RuntimeError):
        with queue:
            queue.enqueue(Path("a"), Path("b"))
            raise RuntimeError("boom")
    assert len(queue) == 0


@pytest.mark.unit
def test_context_manager_starts_empty() -> None:
    queue = TraversalQueue()
    queue.enqueue(Path("stale"), Path("stale-out"))
    with queue as active:
        assert len(active) == 0
