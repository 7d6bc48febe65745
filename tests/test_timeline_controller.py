import datetime as dt

from camvigil.segment_index import Segment
from camvigil.timeline_controller import (
    NS_PER_SECOND,
    TimelineController,
    day_end_ns,
    day_start_ns,
)
from camvigil.timeline_model import TimelineSpan

DAY = dt.date(2024, 1, 15)


def make_controller(cameras=None):
    calls = []
    logs = []
    built = []
    cameras = cameras if cameras is not None else {"Front": 3}
    ctl = TimelineController(
        list_segments=lambda cid, day: calls.append((cid, day)),
        resolve_camera_id=lambda name: cameras.get(name, -1),
    )
    ctl.log = logs.append
    ctl.built = lambda day, model: built.append((day, model.spans))
    return ctl, calls, logs, built


def test_day_end_is_next_day_start():
    assert day_end_ns(DAY) == day_start_ns(DAY + dt.timedelta(days=1))


def test_day_start_round_trips_to_local_midnight():
    start = day_start_ns(DAY)
    assert start % NS_PER_SECOND == 0
    assert dt.datetime.fromtimestamp(start // NS_PER_SECOND) == dt.datetime(2024, 1, 15)


def test_go_without_reader_is_ignored():
    ctl = TimelineController(resolve_camera_id=lambda name: 1)
    logs = []
    ctl.log = logs.append
    ctl.on_go("Front", DAY)
    assert logs == ["[Ctl] onGo ignored: no DbReader"]
    assert ctl.pending_camera_id == -1


def test_go_without_resolver_is_ignored():
    calls = []
    ctl = TimelineController(list_segments=lambda cid, day: calls.append(cid))
    logs = []
    ctl.log = logs.append
    ctl.on_go("Front", DAY)
    assert logs == ["[Ctl] onGo ignored: no camera resolver"]
    assert calls == []


def test_go_requests_segments():
    ctl, calls, logs, _ = make_controller()
    ctl.on_go("Front", DAY)
    assert calls == [(3, "2024-01-15")]
    assert ctl.pending_camera_id == 3
    assert ctl.pending_day == DAY
    assert "[Go] cid=3 day=2024-01-15" in logs


def test_go_with_unknown_camera_is_ignored():
    ctl, calls, logs, _ = make_controller()
    ctl.on_go("Back", DAY)
    assert calls == []
    assert "[Ctl] onGo ignored: cid=-1 day.valid=true" in logs


def test_go_without_day_is_ignored():
    ctl, calls, _, _ = make_controller()
    ctl.on_go("Front", None)
    assert calls == []
    assert ctl.pending_day is None


def test_segments_ready_builds_model():
    ctl, _, _, built = make_controller()
    ctl.on_go("Front", DAY)
    t0 = day_start_ns(DAY)
    hour = 3600 * NS_PER_SECOND
    segs = [
        Segment("b.mkv", t0 + 3 * hour, t0 + 4 * hour),
        Segment("a.mkv", t0 + hour, t0 + 2 * hour),
    ]
    ctl.on_segments_ready(3, segs)
    assert built == [
        (
            DAY,
            (
                TimelineSpan(t0 + hour, t0 + 2 * hour),
                TimelineSpan(t0 + 3 * hour, t0 + 4 * hour),
            ),
        )
    ]
    assert ctl.model.total_covered_ns() == 2 * hour


def test_segments_are_clipped_to_the_day():
    ctl, _, _, built = make_controller()
    ctl.on_go("Front", DAY)
    t0, t1 = day_start_ns(DAY), day_end_ns(DAY)
    ctl.on_segments_ready(3, [Segment("x.mkv", t0 - 100, t1 + 100)])
    assert built[0][1] == (TimelineSpan(t0, t1),)


def test_segments_for_other_camera_are_ignored():
    ctl, _, _, built = make_controller()
    ctl.on_go("Front", DAY)
    t0 = day_start_ns(DAY)
    ctl.on_segments_ready(4, [Segment("x.mkv", t0, t0 + 10)])
    assert built == []


def test_detach_then_go_is_ignored():
    ctl, calls, logs, _ = make_controller()
    ctl.detach()
    assert not ctl.attached
    ctl.on_go("Front", DAY)
    assert calls == []
    assert logs[-1] == "[Ctl] onGo ignored: no DbReader"