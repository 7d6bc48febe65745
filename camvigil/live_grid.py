"""Custom live-view layout: one large camera plus eight small ones per page."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from camvigil.groups import CameraGroup, clamp_group_index, visible_order_for

log = logging.getLogger(__name__)

CAMERAS_PER_CUSTOM_PAGE = 9
GRID_ROWS = 4
GRID_COLS = 5

# (row, col, row_span, col_span) for each position on a custom page.
_SLOTS: tuple[tuple[int, int, int, int], ...] = (
    (0, 0, 3, 4),
    (0, 4, 1, 1),
    (1, 4, 1, 1),
    (2, 4, 1, 1),
    (3, 0, 1, 1),
    (3, 1, 1, 1),
    (3, 2, 1, 1),
    (3, 3, 1, 1),
    (3, 4, 1, 1),
)


@dataclass(frozen=True)
class Placement:
    """Where one camera goes in the 4x5 custom grid."""

    camera_index: int
    visible_index: int
    row: int
    col: int
    row_span: int = 1
    col_span: int = 1


def custom_total_pages(visible_count: int) -> int:
    """Number of custom pages needed for ``visible_count`` cameras (may be 0)."""
    return (visible_count + CAMERAS_PER_CUSTOM_PAGE - 1) // CAMERAS_PER_CUSTOM_PAGE


def custom_page_placements(
    visible_order: Sequence[int], page: int, camera_count: int
) -> list[Placement]:
    """Placements for one page; entries naming unknown cameras leave their slot empty."""
    start = page * CAMERAS_PER_CUSTOM_PAGE
    to_show = min(CAMERAS_PER_CUSTOM_PAGE, len(visible_order) - start)
    placements: list[Placement] = []
    for position, slot in zip(range(max(0, to_show)), _SLOTS):
        visible_index = start + position
        if not 0 <= visible_index < len(visible_order):
            continue
        camera = visible_order[visible_index]
        if not 0 <= camera < camera_count:
            continue
        row, col, row_span, col_span = slot
        log.debug(
            "camera %d globalIndex %d -> (%d,%d,%d,%d)",
            position, camera, row, col, row_span, col_span,
        )
        placements.append(Placement(camera, visible_index, row, col, row_span, col_span))
    return placements


class CustomLiveView:
    """Paging and group selection for the custom live-view layout."""

    def __init__(self, camera_count: int) -> None:
        self.camera_count = camera_count
        self.groups: list[CameraGroup] = []
        self.current_group = -1
        self.current_page = 0
        self.visible_order: list[int] = list(range(camera_count))

    def _apply_current_group(self) -> None:
        self.visible_order = visible_order_for(
            self.groups, self.current_group, self.camera_count
        )
        self.current_page = 0

    def set_groups(self, groups: Sequence[CameraGroup], current_index: int) -> None:
        """Replace the groups, keep a valid selection and go back to the first page."""
        self.groups = list(groups)
        self.current_group = clamp_group_index(current_index, len(self.groups))
        self._apply_current_group()

    def select_group(self, index: int) -> bool:
        """Show another group; an out-of-range index is ignored and returns False."""
        if not 0 <= index < len(self.groups):
            return False
        self.current_group = index
        self._apply_current_group()
        return True

    def next_page(self) -> None:
        if self.current_page + 1 < custom_total_pages(len(self.visible_order)):
            self.current_page += 1

    def previous_page(self) -> None:
        if self.current_page > 0:
            self.current_page -= 1

    def page_info(self) -> tuple[int, int]:
        """(1-based page, total pages), with at least one page."""
        total = max(1, custom_total_pages(len(self.visible_order)))
        return min(self.current_page + 1, total), total

    def placements(self) -> list[Placement]:
        return custom_page_placements(
            self.visible_order, self.current_page, self.camera_count
        )