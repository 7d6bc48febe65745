"""Index of one day's recording files, with gap detection and time lookup."""

from __future__ import annotations

import logging
from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Iterable, Protocol

log = logging.getLogger(__name__)

DEFAULT_GAP_THRESHOLD_NS = 2_000_000_000
_LOGGED_INPUTS = 8


class _SegmentLike(Protocol):
    path: str
    start_ns: int
    end_ns: int


@dataclass(frozen=True)
class Segment:
    """A recorded file as listed by the database."""

    path: str
    start_ns: int
    end_ns: int


@dataclass(frozen=True)
class FileSeg:
    """A playable part of one file, in wall-clock nanoseconds (end exclusive)."""

    path: str
    start_ns: int = 0
    end_ns: int = 0

    @property
    def duration_ns(self) -> int:
        return max(0, self.end_ns - self.start_ns)


@dataclass(frozen=True)
class Gap:
    """A stretch of the day with no recording."""

    start_ns: int = 0
    end_ns: int = 0

    @property
    def duration_ns(self) -> int:
        return max(0, self.end_ns - self.start_ns)


@dataclass
class StitchingArrays:
    """Parallel per-segment arrays consumed by the stitching player."""

    paths: list[str] = field(default_factory=list)
    wall_starts: list[int] = field(default_factory=list)
    offsets: list[int] = field(default_factory=list)
    durations: list[int] = field(default_factory=list)


def _clamp(value: int, lo: int, hi: int) -> int:
    if hi < lo:
        lo, hi = hi, lo
    return min(max(value, lo), hi)


def _sec(ns: int) -> float:
    return ns / 1e9


class SegmentIndex:
    """Same-day file segments, kept per file, with significant gaps recorded."""

    def __init__(self, gap_threshold_ns: int = DEFAULT_GAP_THRESHOLD_NS) -> None:
        self._playlist: list[FileSeg] = []
        self._gaps: list[Gap] = []
        self._starts: list[int] = []
        self._t0 = 0
        self._t1 = 0
        self._gap_thr = max(0, gap_threshold_ns)

    @property
    def gap_threshold_ns(self) -> int:
        return self._gap_thr

    @gap_threshold_ns.setter
    def gap_threshold_ns(self, ns: int) -> None:
        self._gap_thr = max(0, ns)

    @property
    def playlist(self) -> tuple[FileSeg, ...]:
        return tuple(self._playlist)

    @property
    def gaps(self) -> tuple[Gap, ...]:
        return tuple(self._gaps)

    @property
    def empty(self) -> bool:
        return not self._playlist

    @property
    def day_start(self) -> int:
        return self._t0

    @property
    def day_end(self) -> int:
        return self._t1

    @property
    def first_ns(self) -> int:
        return self._playlist[0].start_ns if self._playlist else self._t0

    @property
    def last_ns(self) -> int:
        return self._playlist[-1].end_ns if self._playlist else self._t0

    @property
    def total_span_ns(self) -> int:
        return max(0, self._t1 - self._t0)

    def build(
        self,
        segments: Iterable[_SegmentLike],
        day_start_ns: int,
        day_end_ns: int,
    ) -> None:
        """Rebuild the index for the window [day_start_ns, day_end_ns)."""
        self._playlist = []
        self._gaps = []
        self._starts = []
        self._t0, self._t1 = day_start_ns, day_end_ns

        if day_end_ns <= day_start_ns:
            log.warning("[SegIndex] invalid day window %d %d", day_start_ns, day_end_ns)
            return

        raw: list[FileSeg] = []
        for n, seg in enumerate(segments):
            a = _clamp(seg.start_ns, day_start_ns, day_end_ns)
            b = _clamp(seg.end_ns, day_start_ns, day_end_ns)
            if n < _LOGGED_INPUTS:
                log.debug(
                    "[SegIndex] in start=%d end=%d -> clipped a=%d b=%d",
                    seg.start_ns, seg.end_ns, a, b,
                )
            if b > a:
                raw.append(FileSeg(seg.path, a, b))

        if not raw:
            log.info("[SegIndex] no segments within day")
            return

        raw.sort(key=lambda fs: fs.start_ns)

        last_end = day_start_ns
        for fs in raw:
            if fs.start_ns > last_end and fs.start_ns - last_end > self._gap_thr:
                self._gaps.append(Gap(last_end, fs.start_ns))
            # On overlap the earlier file wins; the later one starts where it ends.
            start = max(fs.start_ns, last_end)
            if fs.end_ns > start:
                self._playlist.append(FileSeg(fs.path, start, fs.end_ns))
                last_end = fs.end_ns

        if self._playlist:
            tail = self._playlist[-1].end_ns
            if day_end_ns > tail and day_end_ns - tail > self._gap_thr:
                self._gaps.append(Gap(tail, day_end_ns))
        else:
            self._gaps.append(Gap(day_start_ns, day_end_ns))

        self._starts = [fs.start_ns for fs in self._playlist]

        log.info(
            "[SegIndex] built segs=%d gaps=%d covered_s=%.3f span_s=%.3f thr_s=%.3f",
            len(self._playlist), len(self._gaps),
            _sec(self.total_covered_ns()), _sec(self.total_span_ns), _sec(self._gap_thr),
        )

    def total_covered_ns(self) -> int:
        return sum(fs.duration_ns for fs in self._playlist)

    def map_wall_clock(self, wall_ns: int) -> tuple[int, int] | None:
        """Return (segment index, offset into file) for ``wall_ns``, or None in a gap."""
        idx = bisect_right(self._starts, wall_ns) - 1
        if idx < 0:
            return None
        seg = self._playlist[idx]
        if wall_ns >= seg.end_ns:
            return None
        return idx, wall_ns - seg.start_ns

    def next_segment_index_after(self, wall_ns: int) -> int | None:
        """Index of the first segment starting strictly after ``wall_ns``."""
        idx = bisect_right(self._starts, wall_ns)
        return idx if idx < len(self._playlist) else None

    def export_for_stitching(self) -> StitchingArrays:
        """Arrays for gapless playback: wall starts relative to the day start."""
        arrays = StitchingArrays()
        acc = 0
        for seg in self._playlist:
            arrays.paths.append(seg.path)
            arrays.wall_starts.append(seg.start_ns - self._t0)
            arrays.offsets.append(acc)
            arrays.durations.append(seg.duration_ns)
            acc += seg.duration_ns
        return arrays

    def debug_dump(self, tag: str = "SegIndex") -> list[str]:
        """Log and return a readable description of the index."""
        lines = [
            f"[{tag}] window {self._t0} .. {self._t1} "
            f"(span {_sec(self.total_span_ns):.3f} s)"
        ]
        lines.extend(
            f"  seg[{i}]: {s.start_ns} .. {s.end_ns}  "
            f"dur={_sec(s.duration_ns):.3f}s  path={s.path}"
            for i, s in enumerate(self._playlist)
        )
        lines.extend(
            f"  GAP[{i}]: {g.start_ns} .. {g.end_ns}  dur={_sec(g.duration_ns):.3f}s"
            for i, g in enumerate(self._gaps)
        )
        for line in lines:
            log.info(line)
        return lines