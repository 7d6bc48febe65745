"""Day timeline bar: playhead, hover time, seeking and trim-selection handles."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from camvigil.timeline_model import TimelineModel

DAY_NS = 24 * 3600 * 1_000_000_000
DRAG_EMIT_MS = 90
HANDLE_PX = 8
_MIN_SELECTION_NS = 1_000_000_000


def _bound(lo: float, value: float, hi: float) -> float:
    return max(lo, min(value, hi))


def _emit(callback: Callable[..., Any] | None, *args: Any) -> None:
    if callback is not None:
        callback(*args)


class DragKind(Enum):
    NONE = "none"
    PLAYHEAD = "playhead"
    START_HANDLE = "start_handle"
    END_HANDLE = "end_handle"


@dataclass(frozen=True)
class Rect:
    """Integer rectangle; right and bottom are the last pixels inside it."""

    x: int
    y: int
    width: int
    height: int

    @property
    def left(self) -> int:
        return self.x

    @property
    def top(self) -> int:
        return self.y

    @property
    def right(self) -> int:
        return self.x + self.width - 1

    @property
    def bottom(self) -> int:
        return self.y + self.height - 1

    def adjusted(self, dx1: int, dy1: int, dx2: int, dy2: int) -> Rect:
        return Rect(
            self.x + dx1, self.y + dy1,
            self.width + dx2 - dx1, self.height + dy2 - dy1,
        )

    def contains(self, px: int, py: int) -> bool:
        return self.left <= px <= self.right and self.top <= py <= self.bottom


def hover_label(t_ns: int) -> str:
    """Tooltip text "HH:MM" for a time since midnight."""
    fx = _bound(0.0, t_ns / DAY_NS, 1.0)
    hh = int(fx * 24.0)
    mm = int(math.fmod(fx * 24.0, 1.0) * 60.0)
    return f"{hh:02d}:{mm:02d}"


class TimelineView:
    """Interaction state of the timeline bar for a widget of a given size.

    Events go out through the optional callbacks ``hover_time_ns``,
    ``seek_requested`` and ``selection_changed``.
    """

    def __init__(self, width: int = 800, height: int = 64) -> None:
        self.width = width
        self.height = height
        self.model: TimelineModel | None = None
        self.tooltip = ""
        self._playhead = 0
        self._dragging = False
        self._drag_kind = DragKind.NONE
        self._drag_tick: int | None = None
        self._sel_enabled = False
        self._sel_start = 0
        self._sel_end = 0

        self.hover_time_ns: Callable[[int], Any] | None = None
        self.seek_requested: Callable[[int], Any] | None = None
        self.selection_changed: Callable[[int, int], Any] | None = None

    @property
    def playhead_ns(self) -> int:
        return self._playhead

    @property
    def selection_enabled(self) -> bool:
        return self._sel_enabled

    @property
    def selection_start_ns(self) -> int:
        return self._sel_start

    @property
    def selection_end_ns(self) -> int:
        return self._sel_end

    @property
    def dragging(self) -> bool:
        return self._dragging

    @property
    def drag_kind(self) -> DragKind:
        return self._drag_kind

    def bar_rect(self) -> Rect:
        return Rect(0, 0, self.width, self.height).adjusted(16, 16, -16, -24)

    def set_playhead_ns(self, ns_from_midnight: int) -> None:
        self._playhead = min(max(ns_from_midnight, 0), DAY_NS - 1)

    def set_selection(self, start_ns: int, end_ns: int, enabled: bool) -> None:
        self._sel_enabled = enabled
        self._sel_start = max(0, min(start_ns, DAY_NS - 1))
        self._sel_end = max(0, min(end_ns, DAY_NS - 1))
        self._clamp_selection()

    def _clamp_selection(self) -> None:
        if not self._sel_enabled:
            return
        if self._sel_end <= self._sel_start:
            self._sel_end = min(self._sel_start + _MIN_SELECTION_NS, DAY_NS - 1)
        self._sel_start = int(_bound(0, self._sel_start, DAY_NS - 2))
        self._sel_end = int(_bound(self._sel_start + 1, self._sel_end, DAY_NS - 1))

    def pos_to_ns(self, x: int) -> int:
        r = self.bar_rect()
        fx = _bound(0.0, (x - r.left) / r.width, 1.0)
        return int(fx * DAY_NS)

    def handle_rect_at(self, ns: int) -> Rect:
        r = self.bar_rect()
        fx = _bound(0.0, ns / DAY_NS, 1.0)
        cx = int(r.left + fx * r.width)
        return Rect(cx - HANDLE_PX, r.top + 1, 2 * HANDLE_PX, r.height - 2)

    def press(self, x: int, y: int, now_ms: int) -> None:
        """Left-button press: grab a selection handle or jump the playhead."""
        if not self.bar_rect().contains(x, y):
            return
        t = self.pos_to_ns(x)
        if self._sel_enabled:
            if self.handle_rect_at(self._sel_start).contains(x, y):
                self._dragging, self._drag_kind = True, DragKind.START_HANDLE
                return
            if self.handle_rect_at(self._sel_end).contains(x, y):
                self._dragging, self._drag_kind = True, DragKind.END_HANDLE
                return
        self._dragging, self._drag_kind = True, DragKind.PLAYHEAD
        self._drag_tick = now_ms
        self.set_playhead_ns(t)
        _emit(self.seek_requested, t)

    def move(self, x: int, y: int, now_ms: int) -> None:
        """Pointer motion: update the tooltip and continue any drag."""
        if not self.bar_rect().contains(x, y):
            self.tooltip = ""
            return
        t = self.pos_to_ns(x)
        self.tooltip = hover_label(t)
        _emit(self.hover_time_ns, t)
        if not self._dragging:
            return
        if self._drag_kind is DragKind.START_HANDLE and self._sel_enabled:
            self._sel_start = min(t, self._sel_end - 1)
            self._clamp_selection()
            _emit(self.selection_changed, self._sel_start, self._sel_end)
            return
        if self._drag_kind is DragKind.END_HANDLE and self._sel_enabled:
            self._sel_end = max(t, self._sel_start + 1)
            self._clamp_selection()
            _emit(self.selection_changed, self._sel_start, self._sel_end)
            return
        self.set_playhead_ns(t)
        if self._drag_tick is None or now_ms - self._drag_tick >= DRAG_EMIT_MS:
            self._drag_tick = now_ms
            _emit(self.seek_requested, t)

    def release(self) -> None:
        self._dragging = False
        self._drag_kind = DragKind.NONE

    def leave(self) -> None:
        self.tooltip = ""