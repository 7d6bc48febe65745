"""Playback selection controls: group, camera, date and the Go button."""

from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Callable, Iterable, Sequence

log = logging.getLogger(__name__)

DEFAULT_MIN_DATE = dt.date(2000, 1, 1)
DEFAULT_MAX_DATE = dt.date(2099, 12, 31)
GO_TEXT = "Go"
BUSY_TEXT = "Building…"


def _emit(callback: Callable[..., Any] | None, *args: Any) -> None:
    if callback is not None:
        callback(*args)


def nearest_available(dates: Iterable[dt.date], base: dt.date) -> dt.date | None:
    """The date closest to ``base``; on a tie the earlier one. None if there are none."""
    best: dt.date | None = None
    best_diff: int | None = None
    for d in sorted(dates):
        diff = abs((base - d).days)
        if best_diff is None or diff < best_diff:
            best, best_diff = d, diff
    return best


class PlaybackControls:
    """State of the playback selection bar.

    Events go out through the optional callbacks ``group_changed``,
    ``camera_changed``, ``date_changed`` and ``go_pressed``.
    """

    def __init__(self, today: dt.date | None = None) -> None:
        self._today = today if today is not None else dt.date.today()
        self.group_names: list[str] = []
        self.group_index = -1
        self.group_enabled = True
        self.camera_names: list[str] = []
        self.camera_index = -1
        self.camera_enabled = True
        self.minimum_date = dt.date.min.replace(year=1752, month=9, day=14)
        self.maximum_date = dt.date(9999, 12, 31)
        self._date = self._today
        self.available_dates: frozenset[dt.date] = frozenset()
        self.go_enabled = True
        self.go_text = GO_TEXT

        self.group_changed: Callable[[int], Any] | None = None
        self.camera_changed: Callable[[str], Any] | None = None
        self.date_changed: Callable[[dt.date], Any] | None = None
        self.go_pressed: Callable[[str, dt.date], Any] | None = None

    @property
    def selected_camera(self) -> str:
        if 0 <= self.camera_index < len(self.camera_names):
            return self.camera_names[self.camera_index]
        return ""

    @property
    def selected_date(self) -> dt.date:
        return self._date

    def _store_date(self, day: dt.date, notify: bool) -> None:
        day = min(max(day, self.minimum_date), self.maximum_date)
        if day == self._date:
            return
        self._date = day
        if notify:
            self.set_go_idle()
            _emit(self.date_changed, day)

    def set_go_idle(self) -> None:
        self.go_enabled = True
        self.go_text = GO_TEXT

    def set_go_busy(self) -> None:
        self.go_enabled = False
        self.go_text = BUSY_TEXT

    def set_group_list(self, names: Sequence[str], current_index: int) -> None:
        """Replace the groups without announcing a group change."""
        self.group_names = list(names)
        if self.group_names:
            valid = 0 <= current_index < len(self.group_names)
            self.group_index = current_index if valid else 0
            self.group_enabled = True
        else:
            self.group_index = -1
            self.group_enabled = False

    def set_camera_list(self, names: Sequence[str]) -> None:
        """Replace the cameras without announcing a camera change."""
        self.camera_names = list(names)
        self.camera_index = 0 if self.camera_names else -1
        self.camera_enabled = bool(self.camera_names)

    def set_date_bounds(self, minimum: dt.date | None, maximum: dt.date | None) -> None:
        self.minimum_date = minimum if minimum is not None else DEFAULT_MIN_DATE
        self.maximum_date = maximum if maximum is not None else DEFAULT_MAX_DATE
        if self.maximum_date < self.minimum_date:
            self.maximum_date = self.minimum_date
        self._store_date(self._date, notify=True)

    def set_date(self, day: dt.date | None) -> None:
        """Set the date quietly; None means today."""
        self._store_date(day if day is not None else self._today, notify=False)

    def set_current_camera(self, name: str) -> None:
        """Select a camera by exact name, quietly; unknown names are ignored."""
        if name in self.camera_names:
            self.camera_index = self.camera_names.index(name)

    def set_available_dates(self, dates: Iterable[dt.date]) -> None:
        """Restrict selection to these dates, snapping the current date if needed."""
        self.available_dates = frozenset(dates)
        if self.available_dates and self._date not in self.available_dates:
            nearest = nearest_available(self.available_dates, self._date)
            if nearest is not None:
                self._store_date(nearest, notify=False)

    def pick_date(self, day: dt.date) -> None:
        """A date chosen in the calendar; unavailable dates snap to the nearest one."""
        self._store_date(day, notify=True)
        if self.available_dates and day not in self.available_dates:
            nearest = nearest_available(self.available_dates, day)
            if nearest is not None:
                self._store_date(nearest, notify=False)

    def press_go(self) -> tuple[str, dt.date]:
        """Mark the button busy and announce the chosen camera and date."""
        self.set_go_busy()
        cam, day = self.selected_camera, self.selected_date
        log.info("[UI] Go pressed cam=%s date=%s", cam, day.isoformat())
        _emit(self.go_pressed, cam, day)
        return cam, day