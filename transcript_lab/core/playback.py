"""Active segment resolution for a continuously advancing playhead.

WHY: The player highlights the segment being spoken and calls back several
times per second. A naive ``start <= t < end`` check leaves nothing
highlighted in every silence gap and flickers at boundaries where one
segment ends exactly as the next begins. Long word-level transcripts have
thousands of segments, so a linear scan per tick is wasteful.

HOW: The resolver sorts once at construction and keeps three parallel
arrays: start times, a running maximum of end times, and the caller's
original indices. Each query is two binary searches:
  1. Containment — the earliest segment (by start) with start <= t < end.
     The first position where the running end maximum exceeds t is that
     segment, provided its start is <= t.
  2. Fallback — the last segment whose start is <= t + epsilon.
If neither matches, the playhead precedes every segment.

RULES:
- Returned indices refer to the caller's list, not the sorted order
- Segments with end < start never contain the playhead but still count
  for the fallback rule
- epsilon defaults to ACTIVE_SEGMENT_EPSILON_S (0.05 s)
- Instances are read-only after construction and safe to share
"""

from __future__ import annotations

from bisect import bisect_right
from typing import List, Optional, Sequence

from transcript_lab.config import ACTIVE_SEGMENT_EPSILON_S
from transcript_lab.core.ir import Segment


class ActiveSegmentResolver:
    """Answer "which segment is active at time t" in O(log n).

    Args:
        segments: Canonical segments in any order.
        epsilon_s: Look-ahead used by the fallback rule.
    """

    def __init__(
        self,
        segments: Sequence[Segment],
        epsilon_s: float = ACTIVE_SEGMENT_EPSILON_S,
    ) -> None:
        order = sorted(range(len(segments)), key=lambda i: segments[i].start_s)
        self._epsilon_s = epsilon_s
        self._indices: List[int] = order
        self._starts: List[float] = [segments[i].start_s for i in order]
        self._max_ends: List[float] = []
        running = float("-inf")
        for i in order:
            running = max(running, segments[i].end_s)
            self._max_ends.append(running)

    def __len__(self) -> int:
        return len(self._indices)

    def resolve(self, playhead: float) -> Optional[int]:
        """Return the caller-side index of the active segment, or None."""
        if not self._indices:
            return None

        # Containment: positions [0, started) have start <= playhead.
        started = bisect_right(self._starts, playhead)
        first_open = bisect_right(self._max_ends, playhead)
        if first_open < started:
            return self._indices[first_open]

        # Fallback: last segment starting within the hysteresis window.
        candidate = bisect_right(self._starts, playhead + self._epsilon_s) - 1
        if candidate >= 0:
            return self._indices[candidate]
        return None


def find_active_segment(
    segments: Sequence[Segment],
    playhead: float,
    epsilon_s: float = ACTIVE_SEGMENT_EPSILON_S,
) -> Optional[int]:
    """One-shot lookup; build an ActiveSegmentResolver for repeated queries."""
    return ActiveSegmentResolver(segments, epsilon_s).resolve(playhead)
