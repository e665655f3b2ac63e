from __future__ import annotations

import threading
from collections.abc import Iterable

from .schema import Segment


class SegmentStore:
    """Holds the current generation of segments.

    A generation is an immutable tuple. Readers call `snapshot()` once at the
    start of a query and work on that tuple; `replace()` publishes a new tuple
    with a single reference assignment, so readers never see a mix of
    generations.
    """

    def __init__(self, segments: Iterable[Segment] = ()) -> None:
        self._segments: tuple[Segment, ...] = tuple(segments)
        self._generation = 0
        self._write_lock = threading.Lock()

    def snapshot(self) -> tuple[Segment, ...]:
        return self._segments

    def replace(self, segments: Iterable[Segment]) -> int:
        """Publish a new generation and return its number."""
        new_segments = tuple(segments)
        with self._write_lock:
            self._segments = new_segments
            self._generation += 1
            return self._generation

    def clear(self) -> int:
        return self.replace(())

    @property
    def generation(self) -> int:
        return self._generation

    def __len__(self) -> int:
        return len(self._segments)
