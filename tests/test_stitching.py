import pytest

from camvigil.stitching import SegmentMeta, StitchingPlayer


class FakePlayer:
    def __init__(self):
        self.calls = []

    def open(self, path):
        self.calls.append(("open", path))

    def play(self):
        self.calls.append(("play",))

    def pause(self):
        self.calls.append(("pause",))

    def stop(self):
        self.calls.append(("stop",))

    def seek_ns(self, t):
        self.calls.append(("seek", t))

    def set_rate(self, r):
        self.calls.append(("rate", r))


METAS = [
    SegmentMeta("a.mkv", wall_start_ns=0, offset_ns=0, duration_ns=10),
    SegmentMeta("b.mkv", wall_start_ns=20, offset_ns=10, duration_ns=10),
]


@pytest.fixture
def setup():
    player = FakePlayer()
    sp = StitchingPlayer()
    sp.attach_player(player)
    sp.set_playlist(METAS, 0)
    player.calls.clear()
    states = []
    sp.state_changed = states.append
    return sp, player, states


def test_attach_pushes_rate():
    player = FakePlayer()
    sp = StitchingPlayer()
    sp.attach_player(player)
    assert player.calls == [("rate", 1.0)]


def test_play_without_playlist_reports_error():
    sp = StitchingPlayer()
    errors = []
    sp.error_text = errors.append
    sp.play()
    assert errors == ["Cannot play: No playlist loaded"]
    assert not sp.is_playing


def test_play_opens_first_segment(setup):
    sp, player, states = setup
    sp.play()
    assert player.calls == [("open", "a.mkv"), ("rate", 1.0), ("seek", 0), ("play",)]
    assert sp.is_playing and states == [True]
    assert sp.current_segment == 0


def test_play_at_virtual_maps_to_second_segment(setup):
    sp, player, _ = setup
    sp.play_at_virtual(15)
    assert ("open", "b.mkv") in player.calls
    assert ("seek", 5) in player.calls
    assert sp.current_segment == 1


def test_play_at_virtual_clamps_past_end(setup):
    sp, player, _ = setup
    sp.play_at_virtual(10_000)
    assert sp.current_segment == 1
    assert ("seek", sp.total_virtual_ns - 1 - 10) in player.calls


def test_seek_wall_inside_gap_jumps_to_next(setup):
    sp, player, states = setup
    sp.seek_wall(15)
    assert ("open", "b.mkv") in player.calls
    assert ("seek", 0) in player.calls
    assert states == [True]


def test_seek_wall_after_everything_does_nothing(setup):
    sp, player, states = setup
    sp.seek_wall(1000)
    assert player.calls == []
    assert states == []


def test_pause_and_resume(setup):
    sp, player, states = setup
    sp.play()
    sp.pause()
    assert not sp.is_playing
    player.calls.clear()
    sp.play()
    assert player.calls == [("play",)]
    assert states == [True, False, True]


def test_pause_when_not_playing_is_ignored(setup):
    sp, player, states = setup
    sp.pause()
    assert player.calls == [] and states == []


def test_eos_advances_then_ends(setup):
    sp, player, states = setup
    ended = []
    sp.reached_end = lambda: ended.append(True)
    sp.play()
    sp.on_player_eos()
    assert sp.current_segment == 1
    assert ended == []
    sp.on_player_eos()
    assert ended == [True]
    assert states[-1] is False
    assert not sp.is_playing


def test_position_reports_wall_time(setup):
    sp, _, _ = setup
    positions = []
    sp.wall_position_ns = positions.append
    sp.play_at_virtual(12)
    sp.on_player_position(3)
    assert positions == [METAS[1].wall_start_ns + 3]


def test_virtual_to_wall_roundtrip(setup):
    sp, _, _ = setup
    for meta in METAS:
        for k in range(meta.duration_ns):
            assert sp.virtual_to_wall(meta.offset_ns + k) == meta.wall_start_ns + k


def test_virtual_to_wall_out_of_range_returns_day_start():
    sp = StitchingPlayer()
    sp.set_playlist(METAS, 77)
    assert sp.virtual_to_wall(-5) == 77


def test_set_rate_zero_means_normal(setup):
    sp, player, _ = setup
    sp.set_rate(2.0)
    sp.set_rate(0.0)
    assert player.calls == [("rate", 2.0), ("rate", 1.0)]
    assert sp.rate == 1.0


def test_stop_resets(setup):
    sp, player, states = setup
    sp.play()
    sp.stop()
    assert sp.current_segment == -1
    assert player.calls[-1] == ("stop",)
    assert states[-1] is False