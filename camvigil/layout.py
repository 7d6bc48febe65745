"""Fixed grid placement of live-view widgets in row-major order."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from itertools import product
from typing import Any, Sequence

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class GridItem:
    """A widget placed in the grid."""

    widget: Any
    row: int
    col: int
    row_span: int = 1
    col_span: int = 1


@dataclass
class GridLayout:
    """A grid of placed widgets with per-row and per-column stretch factors."""

    items: list[GridItem] = field(default_factory=list)
    row_stretch: dict[int, int] = field(default_factory=dict)
    column_stretch: dict[int, int] = field(default_factory=dict)

    def add(self, widget: Any, row: int, col: int, row_span: int = 1, col_span: int = 1) -> None:
        self.items.append(GridItem(widget, row, col, row_span, col_span))

    def clear(self) -> list[Any]:
        """Remove every item and return the widgets that were in the grid."""
        removed = [item.widget for item in self.items]
        self.items.clear()
        return removed


class LayoutManager:
    """Fills a grid layout with exactly rows*cols widgets."""

    def __init__(self, layout: GridLayout) -> None:
        self.layout = layout
        self._rows = 0
        self._cols = 0

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    def set_grid_size(self, rows: int, cols: int) -> None:
        if rows <= 0 or cols <= 0:
            raise ValueError(f"invalid grid size: {rows} x {cols}")
        self._rows, self._cols = rows, cols
        for r in range(rows):
            self.layout.row_stretch[r] = 1
        for c in range(cols):
            self.layout.column_stretch[c] = 1

    def apply(self, widgets: Sequence[Any]) -> None:
        """Replace the grid contents; ``widgets`` must hold rows*cols entries."""
        expected = self._rows * self._cols
        if len(widgets) != expected:
            raise ValueError(
                f"widget count mismatch: expected {expected}, got {len(widgets)}"
            )
        self.layout.clear()
        log.info(
            "[LayoutManager] applying %d widgets in %dx%d grid",
            len(widgets), self._rows, self._cols,
        )
        cells = product(range(self._rows), range(self._cols))
        for index, ((r, c), widget) in enumerate(zip(cells, widgets)):
            if widget is None:
                log.warning("[LayoutManager] null widget at index %d", index)
                continue
            self.layout.add(widget, r, c)