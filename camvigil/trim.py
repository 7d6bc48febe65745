"""Trim/export panel state: selection range, durations and progress phases."""

from __future__ import annotations

import datetime as dt
from enum import Enum

NS_PER_SECOND = 1_000_000_000
SECONDS_PER_DAY = 86_400

IDLE_COLOR = "#555"
ERROR_COLOR = "#F44336"


def _tdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def _tmod(a: int, b: int) -> int:
    return a - b * _tdiv(a, b)


def ns_to_clock(ns: int) -> dt.time:
    """Time of day for nanoseconds since midnight, whole seconds, wrapping at 24h."""
    if ns < 0:
        raise ValueError(f"negative time offset: {ns}")
    seconds = (ns // NS_PER_SECOND) % SECONDS_PER_DAY
    hour, rest = divmod(seconds, 3600)
    minute, second = divmod(rest, 60)
    return dt.time(hour, minute, second)


def clock_to_ns(hour: int, minute: int, second: int) -> int:
    return (hour * 3600 + minute * 60 + second) * NS_PER_SECOND


def format_duration(dur_ns: int) -> str:
    """Render a duration as the panel's "Duration: HH:MM:SS" label."""
    s = _tdiv(dur_ns, NS_PER_SECOND)
    hh = _tdiv(s, 3600)
    mm = _tdiv(_tmod(s, 3600), 60)
    ss = _tmod(s, 60)
    return f"Duration: {hh:02d}:{mm:02d}:{ss:02d}"


class Phase(Enum):
    IDLE = "idle"
    CLIPPING = "clipping"
    CLIPPED = "clipped"
    SAVING = "saving"
    SAVED = "saved"
    ERROR = "error"


class TrimPanel:
    """State of the trim panel: range editors, progress bar and save button."""

    def __init__(self) -> None:
        self.panel_enabled = False
        self.trim_mode = False
        self.day_start_ns = 0
        self.start = dt.time(0)
        self.end = dt.time(0)
        self.duration_label = format_duration(0)
        self.progress: int | None = 0
        self.progress_format = ""
        self.chunk_color = ""
        self.save_enabled = False
        self.phase = Phase.IDLE
        self.set_phase_idle()

    @property
    def start_ns(self) -> int:
        return clock_to_ns(self.start.hour, self.start.minute, self.start.second)

    @property
    def end_ns(self) -> int:
        return clock_to_ns(self.end.hour, self.end.minute, self.end.second)

    @property
    def progress_text(self) -> str:
        """Text the progress bar shows; empty while it holds no value."""
        if self.progress is None:
            return ""
        return self.progress_format.replace("%p", str(self.progress))

    def set_range_ns(self, start_ns: int, end_ns: int) -> None:
        self.start = ns_to_clock(start_ns)
        self.end = ns_to_clock(end_ns)
        self.duration_label = format_duration(end_ns - start_ns)

    def set_phase_idle(self) -> None:
        self.phase = Phase.IDLE
        self.progress = None
        self.progress_format = "Idle"
        self.chunk_color = IDLE_COLOR
        self.save_enabled = False

    def set_phase_clipping(self) -> None:
        self.phase = Phase.CLIPPING
        if self.progress != 0:
            self.progress = 0
        self.progress_format = "Clipping %p%"
        self.save_enabled = False

    def set_phase_clipped(self) -> None:
        self.phase = Phase.CLIPPED
        self.progress = 100
        self.progress_format = "Video clipped"
        self.save_enabled = True

    def set_phase_saving(self) -> None:
        self.phase = Phase.SAVING
        if self.progress != 0:
            self.progress = 0
        self.progress_format = "Saving %p%"
        self.save_enabled = False

    def set_phase_saved(self) -> None:
        self.phase = Phase.SAVED
        self.progress = 100
        self.progress_format = "Video saved"
        self.save_enabled = False

    def set_phase_error(self, message: str) -> None:
        self.phase = Phase.ERROR
        self.progress = 100
        self.progress_format = message
        self.chunk_color = ERROR_COLOR
        self.save_enabled = False

    def set_progress(self, pct: float) -> None:
        self.progress = int(min(max(pct, 0.0), 100.0))