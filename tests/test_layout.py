import pytest

from camvigil.layout import GridItem, GridLayout, LayoutManager


def make(rows=2, cols=2):
    layout = GridLayout()
    manager = LayoutManager(layout)
    manager.set_grid_size(rows, cols)
    return layout, manager


@pytest.mark.parametrize("rows, cols", [(0, 3), (3, 0), (-1, 2)])
def test_invalid_grid_size_raises(rows, cols):
    with pytest.raises(ValueError):
        LayoutManager(GridLayout()).set_grid_size(rows, cols)


def test_grid_size_sets_stretch():
    layout, manager = make(3, 2)
    assert (manager.rows, manager.cols) == (3, 2)
    assert layout.row_stretch == {0: 1, 1: 1, 2: 1}
    assert layout.column_stretch == {0: 1, 1: 1}


def test_apply_count_mismatch_raises():
    _, manager = make()
    with pytest.raises(ValueError):
        manager.apply(["a", "b", "c"])


def test_apply_places_row_major():
    layout, manager = make()
    manager.apply(["a", "b", "c", "d"])
    assert [(i.widget, i.row, i.col) for i in layout.items] == [
        ("a", 0, 0), ("b", 0, 1), ("c", 1, 0), ("d", 1, 1),
    ]


def test_apply_skips_missing_widgets():
    layout, manager = make()
    manager.apply(["a", None, "c", "d"])
    assert [i.widget for i in layout.items] == ["a", "c", "d"]
    assert layout.items[1] == GridItem("c", 1, 0)


def test_apply_replaces_previous_contents():
    layout, manager = make(1, 2)
    manager.apply(["a", "b"])
    manager.apply(["x", "y"])
    assert [i.widget for i in layout.items] == ["x", "y"]


def test_clear_returns_removed_widgets():
    layout = GridLayout()
    layout.add("w", 0, 0, 3, 4)
    assert layout.clear() == ["w"]
    assert layout.items == []


def test_apply_without_size_accepts_only_empty():
    manager = LayoutManager(GridLayout())
    with pytest.raises(ValueError):
        manager.apply(["a"])