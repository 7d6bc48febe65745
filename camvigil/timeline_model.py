"""Day timeline coverage model: recording spans clipped, capped and merged."""

from __future__ import annotations

from dataclasses import dataclass, replace
from itertools import zip_longest
from typing import Iterable, Protocol


class _SpanLike(Protocol):
    start_ns: int
    end_ns: int


@dataclass(frozen=True)
class TimelineSpan:
    """A covered interval of wall-clock time, in nanoseconds."""

    start_ns: int = 0
    end_ns: int = 0

    @property
    def duration_ns(self) -> int:
        return max(0, self.end_ns - self.start_ns)


def _clip(span: _SpanLike, lo: int, hi: int) -> TimelineSpan:
    start = max(span.start_ns, lo)
    end = min(span.end_ns, hi)
    return TimelineSpan(start, max(start, end))


class TimelineModel:
    """Coverage of one day, built from raw recording segments."""

    def __init__(self) -> None:
        self._spans: list[TimelineSpan] = []
        self._t0 = 0
        self._t1 = 0

    @property
    def spans(self) -> tuple[TimelineSpan, ...]:
        return tuple(self._spans)

    @property
    def day_start_ns(self) -> int:
        return self._t0

    @property
    def day_end_ns(self) -> int:
        return self._t1

    def build(
        self,
        day_start_ns: int,
        day_end_ns: int,
        raw_segments: Iterable[_SpanLike],
    ) -> None:
        """Rebuild the coverage for the window [day_start_ns, day_end_ns)."""
        self._t0, self._t1 = day_start_ns, day_end_ns
        self._spans = []

        clipped = sorted(
            (
                _clip(s, day_start_ns, day_end_ns)
                for s in raw_segments
                if not (s.end_ns <= day_start_ns or s.start_ns >= day_end_ns)
            ),
            key=lambda s: s.start_ns,
        )
        if not clipped:
            return

        # Cap each span's end at the start of the one after it.
        capped: list[TimelineSpan] = []
        for span, following in zip_longest(clipped, clipped[1:]):
            end = max(span.end_ns, span.start_ns)
            if following is not None and end > following.start_ns:
                end = max(span.start_ns, following.start_ns)
            capped.append(
                _clip(TimelineSpan(span.start_ns, end), day_start_ns, day_end_ns)
            )

        # Merge overlapping or touching spans; real gaps remain.
        for span in capped:
            if not self._spans or span.start_ns > self._spans[-1].end_ns:
                self._spans.append(span)
            else:
                last = self._spans[-1]
                self._spans[-1] = replace(last, end_ns=max(last.end_ns, span.end_ns))

    def fraction_for(self, t_ns: int) -> float:
        """Position of ``t_ns`` within the day as a fraction in [0, 1]."""
        if self._t1 <= self._t0 or t_ns <= self._t0:
            return 0.0
        if t_ns >= self._t1:
            return 1.0
        return (t_ns - self._t0) / (self._t1 - self._t0)

    def total_covered_ns(self) -> int:
        return sum(s.duration_ns for s in self._spans)