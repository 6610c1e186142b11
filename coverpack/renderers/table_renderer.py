"""
Rendering of bordered tables: fixed rows and data driven rows.

Both variants draw the same head (optional full width title, then one
centered bold cell per header column) and then body rows. A row is as tall as
its tallest cell and never shorter than the configured row height.

Participant fan-out (fixed tables): a row whose cell sources index a list with
``[0]`` (``{{participants.reviewers[0].name}}``), or whose ``data_source``
names a list, becomes one physical row per list entry. When that yields more
than one row they form a merge group: the first column is drawn once across
the whole group and only the remaining columns get inner dividers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, List, Optional, Sequence, Tuple, Union

from ..engine.geometry import round2
from ..engine.pagination_manager import PaginationManager
from ..engine.placeholder_resolver import collection_path, is_placeholder, reindex, resolve_array, text_content
from ..engine.render_context import Cursor, RenderContext
from ..engine.stroker import stroke_rect
from ..models.table import CellConfig, DynamicTable, FixedRow, FixedTable, RowStyle
from .cell_renderer import CellRenderer

logger = logging.getLogger(__name__)

GridTable = Union[FixedTable, DynamicTable]


@dataclass(slots=True)
class BodyRow:
    texts: Tuple[Optional[str], ...]
    height: float


@dataclass(slots=True)
class RowGroup:
    """Rows that paginate together; ``merged`` groups share one first-column cell."""

    rows: List[BodyRow] = field(default_factory=list)
    merged: bool = False

    @property
    def height(self) -> float:
        return sum(row.height for row in self.rows)


class BaseTableRenderer:
    """Holds the render context, the pagination controller and the cell renderer."""

    def __init__(self, context: RenderContext, pagination: PaginationManager, cells: CellRenderer) -> None:
        self.context = context
        self.pagination = pagination
        self.cells = cells


class GridTableRenderer(BaseTableRenderer):
    """Shared head drawing, row sizing and row drawing."""

    def __init__(self, context: RenderContext, pagination: PaginationManager, cells: CellRenderer) -> None:
        super().__init__(context, pagination, cells)
        self.rows_drawn = 0

    # head ----------------------------------------------------------------

    def head_height(self, table: GridTable) -> float:
        title = table.title.height if table.title else 0.0
        return title + table.header.height

    def draw_head(self, table: GridTable, cursor: Cursor) -> Cursor:
        """Draw the title and header rows hanging from ``cursor``."""
        stroke = self.context.stroker(cursor)
        x = self.context.left
        width = self.context.usable_width

        if table.title:
            h = table.title.height
            stroke_rect(stroke, x, cursor.y - h, width, h)
            self.cells.draw_aligned_text(cursor, table.title.text, x, cursor.y - h, width, h, table.title.text_size)
            cursor = cursor.down(h)

        header = table.header
        h = header.height
        stroke_rect(stroke, x, cursor.y - h, width, h)
        acc = x
        for col in header.columns:
            self.cells.draw_aligned_text(cursor, col.text, acc, cursor.y - h, col.width, h, header.text_size)
            acc += col.width
            if round2(acc) < round2(x + width):
                stroke(acc, cursor.y - h, acc, cursor.y)
        return cursor.down(h)

    def continuation(self, table: GridTable):
        """Callback that repeats the table margin and head on a continuation page."""
        return lambda cursor: self.draw_head(table, cursor.down(table.margin_top))

    # body ----------------------------------------------------------------

    def size_row(self, texts: Sequence[Optional[str]], widths: Sequence[float], style: RowStyle) -> BodyRow:
        height = style.height
        for text, width in zip(texts, widths):
            if text:
                height = max(height, self.cells.text_height(text, width, style.text_size, style.height))
        return BodyRow(texts=tuple(texts), height=height)

    def draw_row(self, cursor: Cursor, row: BodyRow, widths: Sequence[float], style: RowStyle,
                 first_column: int = 0) -> None:
        """Cells ``first_column`` onward of one row, with separators between them."""
        stroke = self.context.stroker(cursor)
        y_bottom = cursor.y - row.height
        cell_x = self.context.left + sum(widths[:first_column])
        last = min(len(row.texts), len(widths)) - 1

        for j in range(first_column, last + 1):
            width = widths[j]
            if row.texts[j]:
                self.cells.draw_text(cursor, row.texts[j], cell_x, y_bottom, width, row.height,
                                     style.text_size, style.align)
            if j < last:
                stroke(cell_x + width, cursor.y, cell_x + width, y_bottom)
            cell_x += width
        self.rows_drawn += 1

    def draw_group(self, cursor: Cursor, group: RowGroup, widths: Sequence[float], style: RowStyle) -> Cursor:
        stroke = self.context.stroker(cursor)
        x = self.context.left
        width = self.context.usable_width
        height = group.height
        stroke_rect(stroke, x, cursor.y - height, width, height)

        if not group.merged:
            for row in group.rows:
                self.draw_row(cursor, row, widths, style)
                cursor = cursor.down(row.height)
            return cursor

        first_width = widths[0]
        self.cells.draw_text(cursor, group.rows[0].texts[0], x, cursor.y - height, first_width, height,
                             style.text_size, style.align)
        stroke(x + first_width, cursor.y, x + first_width, cursor.y - height)

        for k, row in enumerate(group.rows):
            if k > 0:
                stroke(x + first_width, cursor.y, x + width, cursor.y)
            self.draw_row(cursor, row, widths, style, first_column=1)
            cursor = cursor.down(row.height)
        return cursor

    def render_body(self, table: GridTable, groups: Sequence[RowGroup], cursor: Cursor, style: RowStyle) -> Cursor:
        widths = table.header.widths
        lead = table.margin_top + self.head_height(table) + (groups[0].height if groups else 0.0)
        cursor = self.pagination.ensure_space(cursor, lead, unit=f"head of table {table.id}")
        # An oversized lead was already placed together with the first group.
        lead_placed = self.pagination.needs_break(cursor, lead)
        cursor = self.draw_head(table, cursor.down(table.margin_top))

        continuation = self.continuation(table)
        for index, group in enumerate(groups):
            unit = f"{'merge group' if group.merged else 'row'} {index + 1} of table {table.id}"
            if index > 0 or not lead_placed:
                cursor = self.pagination.ensure_space(cursor, group.height, continuation, unit=unit)
            cursor = self.draw_group(cursor, group, widths, style)
        return cursor


class FixedTableRenderer(GridTableRenderer):
    """Static rows, with participant fan-out into merge groups."""

    def render(self, table: FixedTable, payload: Any, cursor: Cursor) -> Cursor:
        groups = self.build_groups(table, payload)
        start_page = cursor.page_index
        cursor = self.render_body(table, groups, cursor, table.rows_config)
        logger.debug("Table %s: %d row groups over %d page(s)", table.id, len(groups),
                     cursor.page_index - start_page + 1)
        return cursor

    def build_groups(self, table: FixedTable, payload: Any) -> List[RowGroup]:
        widths = table.header.widths
        groups: List[RowGroup] = []

        for row in table.rows:
            anchor = self.fan_out_source(row)
            if anchor is None:
                texts = [text_content(cell, payload) for cell in row.cells]
                groups.append(RowGroup([self.size_row(texts, widths, table.rows_config)]))
                continue

            entries = resolve_array(anchor, payload)
            if not entries:
                logger.debug("Table %s: no entries for %s, row skipped", table.id, anchor)
                continue

            rows = [
                self.size_row([self.entry_text(cell, payload, idx) for cell in row.cells], widths, table.rows_config)
                for idx in range(len(entries))
            ]
            groups.append(RowGroup(rows, merged=len(rows) > 1))
        return groups

    @staticmethod
    def fan_out_source(row: FixedRow) -> Optional[str]:
        if row.data_source:
            return row.data_source
        for cell in row.cells:
            path = collection_path(cell.source)
            if path:
                return path
        return None

    @staticmethod
    def entry_text(cell: CellConfig, payload: Any, index: int) -> Optional[str]:
        """Text of ``cell`` for list entry ``index``; entries without their own value fall back to ``[0]``."""
        if cell.text and not is_placeholder(cell.text):
            return cell.text
        if not cell.source or index == 0 or "[0]" not in cell.source:
            return text_content(cell, payload)
        value = text_content(replace(cell, source=reindex(cell.source, index)), payload)
        return value if value is not None else text_content(cell, payload)


class DynamicTableRenderer(GridTableRenderer):
    """One row per entry of the list at ``data_source``."""

    def render(self, table: DynamicTable, payload: Any, cursor: Cursor) -> Cursor:
        widths = table.header.widths
        entries = resolve_array(table.data_source, payload)

        if entries:
            groups = [
                RowGroup([self.size_row([text_content(cell, entry) for cell in table.cells], widths,
                                        table.row_template)])
                for entry in entries
            ]
        else:
            # Empty list still shows the table with one blank row.
            blank = BodyRow(texts=tuple(None for _ in widths), height=table.row_template.height)
            groups = [RowGroup([blank])]

        start_page = cursor.page_index
        cursor = self.render_body(table, groups, cursor, table.row_template)
        logger.debug("Table %s: %d entries over %d page(s)", table.id, len(entries),
                     cursor.page_index - start_page + 1)
        return cursor
