import pytest

from camvigil.groups import (
    CameraGroup,
    build_groups,
    clamp_group_index,
    fallback_group,
    visible_order_for,
)


def test_fallback_group_holds_every_camera():
    g = fallback_group(4)
    assert g.id == -1
    assert g.name == "All Cameras"
    assert g.camera_indexes == [0, 1, 2, 3]


def test_fallback_group_with_no_cameras():
    assert fallback_group(0).camera_indexes == []


def test_build_groups_maps_ids_and_drops_unknown():
    infos = [CameraGroup(1, "Gate"), CameraGroup(2, "Yard")]
    members = {1: [10, 99, 12], 2: [11]}
    mapping = {10: 0, 11: 1, 12: 2}
    groups = build_groups(infos, lambda gid: members[gid], mapping)
    assert groups == [
        CameraGroup(1, "Gate", [0, 2]),
        CameraGroup(2, "Yard", [1]),
    ]


def test_build_groups_keeps_member_order():
    mapping = {5: 3, 6: 0, 7: 1}
    groups = build_groups([CameraGroup(8, "G")], lambda gid: [7, 5, 6], mapping)
    assert groups[0].camera_indexes == [1, 3, 0]


def test_build_groups_empty():
    assert build_groups([], lambda gid: [], {}) == []


@pytest.mark.parametrize(
    "index,count,expected",
    [(1, 3, 1), (0, 3, 0), (-1, 3, 0), (3, 3, 0), (0, 0, -1), (5, 0, -1)],
)
def test_clamp_group_index(index, count, expected):
    assert clamp_group_index(index, count) == expected


def test_visible_order_for_selected_group():
    groups = [CameraGroup(1, "A", [2, 0]), CameraGroup(2, "B", [1])]
    assert visible_order_for(groups, 0, 3) == [2, 0]
    assert visible_order_for(groups, 1, 3) == [1]


def test_visible_order_falls_back_to_all_cameras():
    groups = [CameraGroup(1, "A", [2])]
    assert visible_order_for(groups, -1, 3) == [0, 1, 2]
    assert visible_order_for(groups, 5, 2) == [0, 1]
    assert visible_order_for([], 0, 2) == [0, 1]


def test_visible_order_is_a_copy():
    groups = [CameraGroup(1, "A", [2, 0])]
    order = visible_order_for(groups, 0, 3)
    order.append(1)
    assert groups[0].camera_indexes == [2, 0]