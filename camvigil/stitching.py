"""Gapless playback of a day's recordings as one continuous virtual timeline."""

from __future__ import annotations

import logging
from bisect import bisect_right
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Protocol, Sequence

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SegmentMeta:
    """One file of the virtual timeline."""

    path: str
    wall_start_ns: int
    offset_ns: int
    duration_ns: int


class _Player(Protocol):
    def open(self, path: str) -> Any: ...

    def play(self) -> Any: ...

    def pause(self) -> Any: ...

    def stop(self) -> Any: ...

    def seek_ns(self, t_ns: int) -> Any: ...

    def set_rate(self, rate: float) -> Any: ...


def _emit(callback: Callable[..., Any] | None, *args: Any) -> None:
    if callback is not None:
        callback(*args)


def _locate(starts: Sequence[int], durations: Sequence[int], t_ns: int) -> tuple[int, int] | None:
    """Find the segment holding ``t_ns`` in [start, start + duration)."""
    idx = bisect_right(starts, t_ns) - 1
    if idx < 0 or t_ns >= starts[idx] + durations[idx]:
        return None
    return idx, t_ns - starts[idx]


class StitchingPlayer:
    """Drives a single-file player across a playlist, skipping recording gaps.

    The attached player reports back through :meth:`on_player_eos` and
    :meth:`on_player_position`. Events go out through the optional callbacks
    ``error_text``, ``reached_end``, ``wall_position_ns``, ``segment_changed``
    and ``state_changed``.
    """

    def __init__(self) -> None:
        self._player: _Player | None = None
        self._segments: list[SegmentMeta] = []
        self._wall_starts: list[int] = []
        self._offsets: list[int] = []
        self._durations: list[int] = []
        self._total_virt = 0
        self._day_start_ns = 0
        self._cur = -1
        self._rate = 1.0
        self._playing = False

        self.error_text: Callable[[str], Any] | None = None
        self.reached_end: Callable[[], Any] | None = None
        self.wall_position_ns: Callable[[int], Any] | None = None
        self.segment_changed: Callable[[int], Any] | None = None
        self.state_changed: Callable[[bool], Any] | None = None

    @property
    def is_playing(self) -> bool:
        return self._playing

    @property
    def has_playlist(self) -> bool:
        return bool(self._segments)

    @property
    def current_segment(self) -> int:
        return self._cur

    @property
    def rate(self) -> float:
        return self._rate

    @property
    def total_virtual_ns(self) -> int:
        return self._total_virt

    def attach_player(self, player: _Player | None) -> None:
        self._player = player
        if player is not None:
            player.set_rate(self._rate)

    def set_playlist(self, metas: Iterable[SegmentMeta], day_start_ns: int) -> None:
        self._segments = list(metas)
        self._wall_starts = [m.wall_start_ns for m in self._segments]
        self._offsets = [m.offset_ns for m in self._segments]
        self._durations = [m.duration_ns for m in self._segments]
        self._total_virt = max(
            (m.offset_ns + m.duration_ns for m in self._segments), default=0
        )
        self._total_virt = max(self._total_virt, 0)
        self._cur = -1
        self._day_start_ns = day_start_ns
        self._playing = False
        log.info(
            "[Stitch] playlist set - segments: %d total duration: %.3f s",
            len(self._segments), self._total_virt / 1e9,
        )

    def play(self) -> None:
        """Start from the beginning, or resume the open segment."""
        if not self.has_playlist:
            _emit(self.error_text, "Cannot play: No playlist loaded")
            return
        if self._playing:
            return
        if self._cur < 0:
            self.play_at_virtual(0)
        else:
            self._call("play")
            _emit(self.state_changed, True)
            self._playing = True

    def pause(self) -> None:
        if not self._playing:
            log.info("[Stitch] not playing, ignoring pause")
            return
        self._call("pause")
        self._playing = False
        _emit(self.state_changed, False)

    def stop(self) -> None:
        self._call("stop")
        self._cur = -1
        self._playing = False
        _emit(self.state_changed, False)

    def set_rate(self, rate: float) -> None:
        self._rate = 1.0 if rate == 0.0 else rate
        self._call("set_rate", self._rate)

    def play_at_virtual(self, virt_ns: int) -> None:
        """Start playing at a position of the gapless virtual timeline."""
        if not self._segments or self._player is None:
            log.warning("[Stitch] cannot play: no playlist or no player")
            return
        virt_ns = max(virt_ns, 0)
        if virt_ns >= self._total_virt:
            virt_ns = self._total_virt - 1
        found = _locate(self._offsets, self._durations, virt_ns)
        if found is None:
            log.warning("[Stitch] no segment at virtual position %d", virt_ns)
            return
        idx, in_seg = found
        if idx != self._cur:
            self._open_index(idx)
        self._call("seek_ns", in_seg)
        self._call("play")
        self._playing = True
        _emit(self.state_changed, True)

    def seek_wall(self, wall_ns: int) -> None:
        """Seek by wall-clock time; a time inside a gap jumps to the next segment."""
        if not self._segments or self._player is None:
            return
        found = _locate(self._wall_starts, self._durations, wall_ns)
        if found is None:
            following = next(
                (i for i, start in enumerate(self._wall_starts) if wall_ns < start),
                None,
            )
            if following is None:
                return
            found = (following, 0)
        idx, in_seg = found
        if idx != self._cur:
            self._open_index(idx)
        self._call("seek_ns", in_seg)
        self._call("play")
        if not self._playing:
            self._playing = True
            _emit(self.state_changed, True)

    def on_player_eos(self) -> None:
        """The current file ended: continue with the next one or finish."""
        following = self._cur + 1
        if 0 <= following < len(self._segments):
            self._open_index(following)
            self._call("seek_ns", 0)
            self._call("play")
        else:
            self._playing = False
            _emit(self.state_changed, False)
            _emit(self.reached_end)

    def on_player_position(self, in_seg_pos_ns: int) -> None:
        if not 0 <= self._cur < len(self._offsets):
            return
        virt = self._offsets[self._cur] + in_seg_pos_ns
        _emit(self.wall_position_ns, self.virtual_to_wall(virt) - self._day_start_ns)

    def virtual_to_wall(self, virt_ns: int) -> int:
        found = _locate(self._offsets, self._durations, virt_ns)
        if found is None:
            return self._day_start_ns
        idx, in_seg = found
        return self._wall_starts[idx] + in_seg

    def _open_index(self, idx: int) -> None:
        self._cur = idx
        _emit(self.segment_changed, idx)
        self._call("open", self._segments[idx].path)
        self._call("set_rate", self._rate)

    def _call(self, method: str, *args: Any) -> None:
        if self._player is not None:
            getattr(self._player, method)(*args)