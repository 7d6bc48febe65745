"""Turns a "Go" request (camera name + day) into a built day timeline."""

from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Callable, Iterable, Protocol

from camvigil.timeline_model import TimelineModel, TimelineSpan

log = logging.getLogger(__name__)

NS_PER_SECOND = 1_000_000_000

SegmentLister = Callable[[int, str], Any]
CameraResolver = Callable[[str], int]


class _SpanLike(Protocol):
    start_ns: int
    end_ns: int


def _emit(callback: Callable[..., Any] | None, *args: Any) -> None:
    if callback is not None:
        callback(*args)


def day_start_ns(day: dt.date) -> int:
    """Local midnight of ``day`` as nanoseconds since the epoch."""
    midnight = dt.datetime(day.year, day.month, day.day)
    return int(midnight.timestamp()) * NS_PER_SECOND


def day_end_ns(day: dt.date) -> int:
    """Local midnight of the day after ``day``, in epoch nanoseconds."""
    return day_start_ns(day + dt.timedelta(days=1))


class TimelineController:
    """Requests a camera's segments for a day and builds its timeline model.

    ``list_segments(camera_id, "YYYY-MM-DD")`` asks the database for segments;
    the answer comes back through :meth:`on_segments_ready`. Events go out
    through the optional callbacks ``built(day, model)`` and ``log(message)``.
    """

    def __init__(
        self,
        list_segments: SegmentLister | None = None,
        resolve_camera_id: CameraResolver | None = None,
    ) -> None:
        self._list_segments = list_segments
        self.resolve_camera_id = resolve_camera_id
        self._pending_cid = -1
        self._pending_day: dt.date | None = None
        self.model = TimelineModel()

        self.built: Callable[[dt.date, TimelineModel], Any] | None = None
        self.log: Callable[[str], Any] | None = None

    @property
    def pending_camera_id(self) -> int:
        return self._pending_cid

    @property
    def pending_day(self) -> dt.date | None:
        return self._pending_day

    @property
    def attached(self) -> bool:
        return self._list_segments is not None

    def _log(self, message: str) -> None:
        log.info(message)
        _emit(self.log, message)

    def attach(self, list_segments: SegmentLister | None) -> None:
        if list_segments is self._list_segments:
            return
        self._list_segments = list_segments
        if list_segments is not None:
            self._log("[Ctl] attached segment source")

    def detach(self) -> None:
        if self._list_segments is None:
            return
        self._list_segments = None
        self._log("[Ctl] detached segment source")

    def on_go(self, camera_name: str, day: dt.date | None) -> None:
        """Resolve the camera and ask for its segments on ``day``."""
        if self._list_segments is None:
            self._log("[Ctl] onGo ignored: no DbReader")
            return
        if self.resolve_camera_id is None:
            self._log("[Ctl] onGo ignored: no camera resolver")
            return
        cid = self.resolve_camera_id(camera_name)
        self._log(f"[Ctl] onGo: camName='{camera_name}' resolved to cid={cid}")
        if cid <= 0 or day is None:
            valid = "true" if day is not None else "false"
            self._log(f"[Ctl] onGo ignored: cid={cid} day.valid={valid}")
            return
        self._pending_cid = cid
        self._pending_day = day
        self._log(f"[Go] cid={cid} day={day.isoformat()}")
        self._list_segments(cid, day.isoformat())

    def on_segments_ready(self, camera_id: int, segments: Iterable[_SpanLike]) -> None:
        """Build the timeline when the answer is for the pending request."""
        if camera_id != self._pending_cid or self._pending_day is None:
            return
        day = self._pending_day
        raw = [TimelineSpan(s.start_ns, s.end_ns) for s in segments]
        self.model.build(day_start_ns(day), day_end_ns(day), raw)
        _emit(self.built, day, self.model)
        self._log(
            f"[Timeline] built spans={len(self.model.spans)} "
            f"covered_s={self.model.total_covered_ns() / 1e9:.3f}"
        )