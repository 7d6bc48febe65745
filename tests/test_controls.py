import datetime as dt

from camvigil.controls import PlaybackControls, nearest_available

D = dt.date


def make():
    return PlaybackControls(today=D(2024, 5, 10))


def test_nearest_available_empty():
    assert nearest_available([], D(2024, 5, 10)) is None


def test_nearest_available_exact_and_closest():
    dates = {D(2024, 5, 1), D(2024, 5, 20)}
    assert nearest_available(dates, D(2024, 5, 20)) == D(2024, 5, 20)
    assert nearest_available(dates, D(2024, 5, 3)) == D(2024, 5, 1)
    assert nearest_available(dates, D(2024, 5, 18)) == D(2024, 5, 20)


def test_nearest_available_tie_prefers_earlier():
    dates = [D(2024, 5, 12), D(2024, 5, 8)]
    assert nearest_available(dates, D(2024, 5, 10)) == D(2024, 5, 8)


def test_group_list_invalid_index_falls_back_to_first():
    c = make()
    seen = []
    c.group_changed = seen.append
    c.set_group_list(["All Cameras", "Gate"], 5)
    assert c.group_index == 0
    assert c.group_enabled
    assert seen == []
    c.set_group_list(["All Cameras", "Gate"], 1)
    assert c.group_index == 1


def test_group_list_empty_disables():
    c = make()
    c.set_group_list([], 0)
    assert not c.group_enabled
    assert c.group_names == []


def test_camera_list():
    c = make()
    c.set_camera_list(["cam1", "cam2"])
    assert c.selected_camera == "cam1"
    assert c.camera_enabled
    c.set_camera_list([])
    assert c.selected_camera == ""
    assert not c.camera_enabled


def test_set_current_camera():
    c = make()
    c.set_camera_list(["cam1", "cam2"])
    c.set_current_camera("cam2")
    assert c.selected_camera == "cam2"
    c.set_current_camera("missing")
    assert c.selected_camera == "cam2"


def test_date_bounds_defaults_and_clamp():
    c = make()
    c.set_date_bounds(None, None)
    assert c.minimum_date == D(2000, 1, 1)
    assert c.maximum_date == D(2099, 12, 31)
    c.set_date_bounds(D(2024, 6, 1), D(2024, 6, 30))
    assert c.selected_date == D(2024, 6, 1)


def test_set_date_quiet_and_none_means_today():
    c = make()
    seen = []
    c.date_changed = seen.append
    c.set_date(D(2024, 1, 2))
    assert c.selected_date == D(2024, 1, 2)
    c.set_date(None)
    assert c.selected_date == D(2024, 5, 10)
    assert seen == []


def test_available_dates_snap_current():
    c = make()
    c.set_available_dates({D(2024, 5, 1), D(2024, 5, 12)})
    assert c.selected_date == D(2024, 5, 12)
    c.set_available_dates(set())
    assert c.selected_date == D(2024, 5, 12)


def test_pick_date_snaps_to_available():
    c = make()
    c.set_available_dates({D(2024, 5, 10), D(2024, 5, 20)})
    c.pick_date(D(2024, 5, 19))
    assert c.selected_date == D(2024, 5, 20)
    assert c.selected_date in c.available_dates


def test_press_go_and_date_change_resets():
    c = make()
    c.set_camera_list(["cam1"])
    pressed = []
    c.go_pressed = lambda cam, day: pressed.append((cam, day))
    result = c.press_go()
    assert result == ("cam1", D(2024, 5, 10))
    assert pressed == [result]
    assert not c.go_enabled
    assert c.go_text == "Building…"
    changed = []
    c.date_changed = changed.append
    c.pick_date(D(2024, 5, 11))
    assert changed == [D(2024, 5, 11)]
    assert c.go_enabled
    assert c.go_text == "Go"