"""

Page overflow control.

Two states: FLOWING while drawing on the current page and PAGINATING while
switching to a new one. A unit (table row, merge group, signature row-group)
of height ``h`` at cursor ``y`` forces a break when ``y - h < min_y``; a row
ending exactly on ``min_y`` still fits. The check always runs before the unit
is drawn.

On a break: a new page with a fresh stroker, the cursor back at the header
top, the recurring page header drawn again, then the current table's
continuation (margin, title, header row) before the unit itself.

"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional, Tuple

from ..config import OverflowPolicy
from ..exceptions import LayoutError
from .render_context import Cursor, RenderContext

logger = logging.getLogger(__name__)

PageCallback = Callable[[Cursor], Cursor]


class PaginationState(str, Enum):
    FLOWING = "flowing"
    PAGINATING = "paginating"


class PaginationManager:
    """Owns page allocation for one render."""

    def __init__(self, context: RenderContext, on_page_start: Optional[PageCallback] = None) -> None:
        self.context = context
        self.on_page_start = on_page_start
        self.state = PaginationState.FLOWING
        self.breaks = 0
        self.oversized = 0
        # Top of the newest page and how many blocks it held there.
        self._fresh: Optional[Tuple[Cursor, int]] = None

    def needs_break(self, cursor: Cursor, height: float) -> bool:
        return cursor.y - height < self.context.min_y

    def start_page(self) -> Cursor:
        """Allocate a page and draw the recurring header on it."""
        cursor = self.context.new_page()
        if self.on_page_start is not None:
            cursor = self.on_page_start(cursor)
        self.mark_fresh(cursor)
        return cursor

    def mark_fresh(self, cursor: Cursor) -> None:
        """Treat what the page holds so far as page furniture, with content starting at ``cursor``."""
        self._fresh = (cursor, len(self.context.page(cursor).blocks))

    def is_fresh(self, cursor: Cursor, height: float) -> bool:
        """True when nothing was drawn since the page started and even its top cannot hold ``height``."""
        if self._fresh is None:
            return False
        top, drawn = self._fresh
        return (
            cursor.page_index == top.page_index
            and len(self.context.page(cursor).blocks) == drawn
            and self.needs_break(top, height)
        )

    def ensure_space(
        self,
        cursor: Cursor,
        height: float,
        on_new_page: Optional[PageCallback] = None,
        unit: str = "row",
    ) -> Cursor:
        """Return where a unit of ``height`` should start, breaking the page if needed."""
        if not self.needs_break(cursor, height):
            return cursor

        if self.is_fresh(cursor, height):
            # Nothing drawn since the page started; another page would not help.
            return self._place_oversized(cursor, height, unit)

        self.state = PaginationState.PAGINATING
        try:
            new_cursor = self.start_page()
            if on_new_page is not None:
                new_cursor = on_new_page(new_cursor)
        finally:
            self.state = PaginationState.FLOWING

        self.breaks += 1
        self.mark_fresh(new_cursor)
        logger.debug(
            "Page break before %s (%.2fpt at y=%.2f); continuing on page %d at y=%.2f",
            unit,
            height,
            cursor.y,
            new_cursor.page_index + 1,
            new_cursor.y,
        )

        if self.needs_break(new_cursor, height):
            return self._place_oversized(new_cursor, height, unit)
        return new_cursor

    def _place_oversized(self, cursor: Cursor, height: float, unit: str) -> Cursor:
        available = cursor.y - self.context.min_y
        if self.context.options.overflow_policy == OverflowPolicy.ERROR:
            raise LayoutError(
                f"{unit} does not fit on an empty page",
                f"needs {height:.2f}pt, page has {available:.2f}pt",
            )
        self.oversized += 1
        logger.warning(
            "%s needs %.2fpt but an empty page only has %.2fpt; drawing past the footer margin",
            unit,
            height,
            available,
        )
        return cursor
