"""
Edge-deduplicating line drawer.

Adjacent cells share edges. Each page owns one ``Stroker`` that remembers the
edges already drawn on that page, keyed by their endpoints rounded to two
decimals and put in a fixed order, so ``stroke(a, b)`` and ``stroke(b, a)``
draw a single line. A new page always gets a new ``Stroker``.
"""

from __future__ import annotations

from typing import Any, Set, Tuple

from ..config import BORDER_COLOR, BORDER_THICKNESS
from .geometry import Rect, round2
from .unified_layout import LayoutBlock, LayoutPage

EdgeKey = Tuple[Tuple[float, float], Tuple[float, float]]


def edge_key(x1: float, y1: float, x2: float, y2: float) -> EdgeKey:
    a = (round2(x1), round2(y1))
    b = (round2(x2), round2(y2))
    return (a, b) if a <= b else (b, a)


class Stroker:
    """Callable line drawer bound to one page."""

    def __init__(
        self,
        page: LayoutPage,
        color: Tuple[float, float, float] = BORDER_COLOR,
        thickness: float = BORDER_THICKNESS,
    ) -> None:
        self.page = page
        self.color = color
        self.thickness = thickness
        self._seen: Set[EdgeKey] = set()

    @property
    def drawn(self) -> int:
        return len(self._seen)

    def has(self, x1: float, y1: float, x2: float, y2: float) -> bool:
        return edge_key(x1, y1, x2, y2) in self._seen

    def __call__(self, x1: float, y1: float, x2: float, y2: float) -> bool:
        key = edge_key(x1, y1, x2, y2)
        if key in self._seen:
            return False
        self._seen.add(key)
        self.page.add_block(
            LayoutBlock(
                frame=Rect(min(x1, x2), min(y1, y2), abs(x2 - x1), abs(y2 - y1)),
                block_type="line",
                content=(x1, y1, x2, y2),
                style={"color": self.color, "thickness": self.thickness},
                page_number=self.page.number,
            )
        )
        return True


def make_stroker(page: LayoutPage, color=BORDER_COLOR, thickness: float = BORDER_THICKNESS) -> Stroker:
    return Stroker(page, color, thickness)


def stroke_rect(stroke: Stroker, x: float, y: float, width: float, height: float) -> None:
    """Outline a rectangle whose bottom-left corner is ``(x, y)``."""
    stroke(x, y, x + width, y)
    stroke(x, y + height, x + width, y + height)
    stroke(x, y, x, y + height)
    stroke(x + width, y, x + width, y + height)


def draw_cell_borders(stroke: Stroker, cell: Any, x: float, y_top: float, width: float, height: float) -> None:
    """Draw the borders of a cell hanging down from ``y_top``, honoring its border flags."""
    y_bottom = y_top - height
    if getattr(cell, "border_top", True):
        stroke(x, y_top, x + width, y_top)
    if getattr(cell, "border_bottom", True):
        stroke(x, y_bottom, x + width, y_bottom)
    if getattr(cell, "border_left", True):
        stroke(x, y_bottom, x, y_top)
    if getattr(cell, "border_right", True):
        stroke(x + width, y_bottom, x + width, y_top)
