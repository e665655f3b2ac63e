"""Tests for store.py: generation snapshots and atomic replacement."""
from __future__ import annotations

import threading

from pdf_chat.schema import Segment
from pdf_chat.store import SegmentStore


def _generation(label: str, size: int = 50) -> list[Segment]:
    return [Segment(text=f"{label}-{idx}", source=label) for idx in range(size)]


class TestSegmentStore:
    def test_starts_empty(self):
        store = SegmentStore()
        assert len(store) == 0
        assert store.snapshot() == ()
        assert store.generation == 0

    def test_initial_segments(self):
        store = SegmentStore(_generation("a", 3))
        assert len(store) == 3

    def test_replace_publishes_new_generation(self):
        store = SegmentStore()
        assert store.replace(_generation("a", 2)) == 1
        assert store.replace(_generation("b", 4)) == 2
        assert len(store) == 4
        assert store.generation == 2

    def test_snapshot_is_unaffected_by_later_replace(self):
        store = SegmentStore(_generation("old", 3))
        snapshot = store.snapshot()
        store.replace(_generation("new", 5))
        assert len(snapshot) == 3
        assert all(segment.source == "old" for segment in snapshot)

    def test_replace_copies_input(self):
        segments = _generation("a", 2)
        store = SegmentStore()
        store.replace(segments)
        segments.append(Segment(text="late"))
        assert len(store) == 2

    def test_clear_empties_store(self):
        store = SegmentStore(_generation("a", 2))
        store.clear()
        assert len(store) == 0


class TestConcurrentReaders:
    def test_readers_never_see_mixed_generations(self):
        store = SegmentStore(_generation("a"))
        generations = [_generation("a"), _generation("b")]
        mixed: list[set[str]] = []
        stop = threading.Event()

        def reader() -> None:
            while not stop.is_set():
                sources = {segment.source for segment in store.snapshot()}
                if len(sources) != 1:
                    mixed.append(sources)

        threads = [threading.Thread(target=reader) for _ in range(4)]
        for thread in threads:
            thread.start()
        for idx in range(500):
            store.replace(generations[idx % 2])
        stop.set()
        for thread in threads:
            thread.join()

        assert mixed == []
