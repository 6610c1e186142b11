"""
Signature blocks.

Blocks are placed at ``(x, y)`` offsets from the group anchor instead of
flowing. Blocks with the same ``y`` form a band; a band is as tall as its
tallest block and bands stack downward ``BLOCK_SPACING`` apart. Pagination
works per band, so a block is never split across pages.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import groupby
from typing import Any, List, Tuple

from ..config import BLOCK_SPACING
from ..engine.render_context import Cursor
from ..models.table import CellConfig, SignatureBlock, SignatureBlockGroup
from .table_renderer import BaseTableRenderer

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SizedBlock:
    block: SignatureBlock
    row_heights: Tuple[float, ...]

    @property
    def height(self) -> float:
        return sum(self.row_heights)


@dataclass(slots=True)
class Band:
    y: float
    blocks: List[SizedBlock]

    @property
    def height(self) -> float:
        return max((sized.height for sized in self.blocks), default=0.0)


class SignatureRenderer(BaseTableRenderer):
    """Render a :class:`SignatureBlockGroup` band by band."""

    def row_height(self, row: CellConfig, payload: Any, block_width: float) -> float:
        """Configured height, grown to fit the row's text (or its tallest sub-column)."""
        height = row.fixed_height
        if row.type == "columns" and row.columns:
            for col in row.columns:
                height = max(height, self.cells.cell_height(col, payload, col.fixed_width, row.fixed_height))
        elif row.has_text:
            height = max(height, self.cells.cell_height(row, payload, block_width, row.fixed_height))
        return height

    def bands(self, group: SignatureBlockGroup, payload: Any) -> List[Band]:
        sized = [
            SizedBlock(block, tuple(self.row_height(row, payload, block.width) for row in block.rows))
            for block in group.blocks
        ]
        ordered = sorted(sized, key=lambda item: item.block.y)
        return [Band(y, list(items)) for y, items in groupby(ordered, key=lambda item: item.block.y)]

    def render(self, group: SignatureBlockGroup, payload: Any, cursor: Cursor) -> Cursor:
        bands = self.bands(group, payload)
        if not bands:
            return cursor

        cursor = cursor.down(group.margin_top)

        def continuation(new_cursor: Cursor) -> Cursor:
            return new_cursor.down(group.margin_top)

        start_page = cursor.page_index

        for index, band in enumerate(bands):
            if index > 0:
                cursor = cursor.down(BLOCK_SPACING)
            cursor = self.pagination.ensure_space(
                cursor, band.height, continuation, unit=f"signature band {index + 1} of {group.id}"
            )
            for sized in band.blocks:
                self.draw_block(cursor, sized, payload)
            cursor = cursor.down(band.height)

        logger.debug("Signature group %s: %d band(s) over %d page(s)", group.id, len(bands),
                     cursor.page_index - start_page + 1)
        return cursor

    def draw_block(self, cursor: Cursor, sized: SizedBlock, payload: Any) -> None:
        block = sized.block
        stroke = self.context.stroker(cursor)
        block_x = self.context.left + block.x
        block_y = cursor.y

        for row, height in zip(block.rows, sized.row_heights):
            y_bottom = block_y - height
            if row.type == "columns" and row.columns:
                col_x = block_x
                for i, col in enumerate(row.columns):
                    col_w = col.fixed_width
                    stroke(col_x, block_y, col_x + col_w, block_y)
                    stroke(col_x, y_bottom, col_x + col_w, y_bottom)
                    stroke(col_x, y_bottom, col_x, block_y)
                    if i == len(row.columns) - 1:
                        stroke(col_x + col_w, y_bottom, col_x + col_w, block_y)
                    self.cells.draw_cell(cursor.at(block_y), col, payload, col_x, block_y, col_w, height,
                                         borders=False)
                    col_x += col_w
            else:
                self.cells.draw_cell(cursor.at(block_y), row, payload, block_x, block_y, block.width, height)
            block_y = y_bottom
