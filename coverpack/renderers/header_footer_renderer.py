"""Rendering of the recurring cover header and of per-page footers."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from ..config import DEFAULT_MIN_HEIGHT, FOOTER_TEXT_COLOR, LINE_SPACING, SEPARATOR_COLOR
from ..engine.geometry import Rect
from ..engine.placeholder_resolver import resolve_path, resolve_template, text_content
from ..engine.render_context import Cursor, RenderContext
from ..engine.unified_layout import LayoutBlock
from ..models.layout import HeaderRow
from ..models.table import CellConfig
from .cell_renderer import CellRenderer

logger = logging.getLogger(__name__)

BODY_HEADER_SIZE = 9.0
BODY_HEADER_OFFSET = 30.0
BODY_HEADER_MAX_CHARS = 50
HASH_TAIL = 8


class HeaderFooterRenderer:
    """

    Draws the cover header region and the footers.

    The header is drawn on the first page and again on every page the
    pagination controller allocates; footers are drawn once all pages exist,
    so ``{h}`` knows the total.

    """

    def __init__(self, context: RenderContext, cells: CellRenderer) -> None:
        self.context = context
        self.cells = cells
        self.config = context.config

    # header --------------------------------------------------------------

    def _text_need(self, cell: CellConfig, payload: Any, width: float) -> float:
        """Height the text of ``cell`` needs, or 0 when it has none."""
        if not cell.has_text:
            return 0.0
        text = text_content(cell, payload)
        if not text:
            return 0.0
        return self.cells.text_height(text, width, cell.text_size, DEFAULT_MIN_HEIGHT, cell.bold)

    def sub_row_height(self, sub_row: CellConfig, payload: Any, column_width: float) -> float:
        height = sub_row.fixed_height
        if sub_row.type == "columns" and sub_row.columns:
            for sub_col in sub_row.columns:
                height = max(height, self._text_need(sub_col, payload, sub_col.fixed_width))
        else:
            height = max(height, self._text_need(sub_row, payload, column_width))
        return height

    def row_height(self, row: HeaderRow, payload: Any) -> float:
        height = row.base_height
        for col in row.columns:
            if col.type == "container" and col.rows:
                total = sum(self.sub_row_height(sub, payload, col.fixed_width) for sub in col.rows)
                height = max(height, total)
            elif col.type == "columns" and col.columns:
                for sub_col in col.columns:
                    height = max(height, self._text_need(sub_col, payload, sub_col.fixed_width))
            else:
                height = max(height, self._text_need(col, payload, col.fixed_width))
        return height

    def render_header(self, cursor: Cursor) -> Cursor:
        """Draw every header row from ``cursor`` downward and return the cursor below them."""
        payload = self.context.payload
        for row in self.config.header.rows:
            row_height = self.row_height(row, payload)
            x = self.context.left
            for col in row.columns:
                if col.type == "container" and col.rows:
                    self._draw_container(cursor, col, payload, x)
                elif col.type == "columns" and col.columns:
                    self._draw_columns(cursor, col.columns, payload, x, cursor.y, row_height)
                else:
                    self.cells.draw_cell(cursor, col, payload, x, cursor.y, col.fixed_width, row_height)
                x += col.fixed_width
            cursor = cursor.down(row_height)
        return cursor

    def _draw_container(self, cursor: Cursor, col: CellConfig, payload: Any, x: float) -> None:
        y = cursor.y
        for sub_row in col.rows:
            height = self.sub_row_height(sub_row, payload, col.fixed_width)
            if sub_row.type == "columns" and sub_row.columns:
                self._draw_columns(cursor, sub_row.columns, payload, x, y, height)
            else:
                self.cells.draw_cell(cursor, sub_row, payload, x, y, col.fixed_width, height)
            y -= height

    def _draw_columns(self, cursor: Cursor, columns, payload: Any, x: float, y_top: float, height: float) -> None:
        for sub_col in columns:
            self.cells.draw_cell(cursor, sub_col, payload, x, y_top, sub_col.fixed_width, height)
            x += sub_col.fixed_width

    def render_body_header(self, cursor: Cursor) -> None:
        """One centered ``code - title`` line used on body pages instead of the full header."""
        payload = self.context.payload
        text = f"{resolve_path(payload, 'document.code') or ''} - {resolve_path(payload, 'document.title') or ''}"
        metrics = self.cells.metrics
        if metrics.width(text, BODY_HEADER_SIZE) > self.context.usable_width:
            text = text[:BODY_HEADER_MAX_CHARS] + "..."
        page_width = self.config.page.width
        self._emit(cursor, text, (page_width - metrics.width(text, BODY_HEADER_SIZE)) / 2,
                   self.context.header_top - BODY_HEADER_OFFSET, BODY_HEADER_SIZE)

    # footer --------------------------------------------------------------

    def footer_text(self, page_number: int, total_pages: int) -> str:
        data = self.context.footer_data()
        parts: List[str] = []
        for element in self.config.footer.content.elements:
            if element.text:
                parts.append(element.text.replace("{v}", str(page_number)).replace("{h}", str(total_pages)))
            elif element.source:
                value = resolve_template(element.source, data)
                tail = element.tail or (HASH_TAIL if "hashSha256" in element.source else None)
                if tail and len(value) > tail:
                    value = value[-tail:]
                parts.append(value)
        return "".join(parts)

    def render_footer(self, cursor: Cursor, page_number: int, total_pages: int) -> None:
        footer = self.config.footer
        page = self.context.page(cursor)
        page_width = self.config.page.width
        margins = self.config.page.margins

        separator = footer.separator
        if separator.enabled:
            x1 = margins.left + separator.margin_left
            x2 = page_width - margins.right - separator.margin_right
            page.add_block(
                LayoutBlock(
                    frame=Rect(x1, separator.y_position, x2 - x1, 0.0),
                    block_type="line",
                    content=(x1, separator.y_position, x2, separator.y_position),
                    style={"color": SEPARATOR_COLOR, "thickness": separator.thickness},
                    page_number=page.number,
                )
            )

        content = footer.content
        text = self.footer_text(page_number, total_pages)
        available = page_width - content.margin_left - content.margin_right
        metrics = self.cells.metrics
        y = footer.y_position
        for line in metrics.wrap(text, available, content.text_size, margin=0):
            if content.align == "center":
                x = (page_width - metrics.width(line, content.text_size)) / 2
            elif content.align == "right":
                x = page_width - (content.margin_right or margins.right) - metrics.width(line, content.text_size)
            else:
                x = content.margin_left or margins.left
            self._emit(cursor, line, x, y, content.text_size)
            y -= content.text_size * LINE_SPACING

    def render_footers(self, page_offset: int = 0, total_pages: Optional[int] = None) -> int:
        """Footer on every page; numbering starts at ``page_offset + 1``."""
        count = self.context.page_count
        total = total_pages or (page_offset + count)
        for index in range(count):
            self.render_footer(Cursor(index, self.config.footer.y_position), page_offset + index + 1, total)
        return total

    def _emit(self, cursor: Cursor, text: str, x: float, baseline: float, size: float) -> None:
        page = self.context.page(cursor)
        metrics = self.cells.metrics
        page.add_block(
            LayoutBlock(
                frame=Rect(x, baseline, metrics.width(text, size), size),
                block_type="text",
                content=text,
                style={"font": metrics.fonts.regular, "size": size, "color": FOOTER_TEXT_COLOR},
                page_number=page.number,
            )
        )
