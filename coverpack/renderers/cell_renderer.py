"""
Cell renderer.

Sizes and draws one logical cell: borders per flag, then wrapped text
centered vertically (or an image, or a QR code). Heights and drawing use the
same ``TextMetrics`` calls, so a row sized by ``cell_height`` always fits the
text ``draw_cell`` puts in it.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Tuple

from ..config import DEFAULT_MIN_HEIGHT, LINE_SPACING, QR_SIZE, TEXT_MARGIN
from ..engine.geometry import Rect
from ..engine.placeholder_resolver import resolve_path, resolve_template, text_content
from ..engine.render_context import Cursor, RenderContext
from ..engine.stroker import draw_cell_borders
from ..engine.unified_layout import LayoutBlock
from ..exceptions import MediaError
from ..models.table import CellConfig
from .image_renderer import fit_image, load_image

logger = logging.getLogger(__name__)

BLACK: Tuple[float, float, float] = (0.0, 0.0, 0.0)


def build_qr_url(payload: Any) -> str:
    """Verification URL: ``document.qr.baseUrl`` + ``document.code`` + ``document.semanticVersion``."""
    base_url = resolve_path(payload, "document.qr.baseUrl")
    if not base_url:
        return ""
    code = resolve_path(payload, "document.code") or ""
    version = resolve_path(payload, "document.semanticVersion") or ""
    return f"{base_url}{code}{version}"


class CellRenderer:
    """Measure and draw cells on the pages of one render context."""

    def __init__(self, context: RenderContext) -> None:
        self.context = context
        self.metrics = context.metrics

    # measurement -------------------------------------------------------

    def text_height(self, text: Optional[str], width: float, text_size: float,
                    min_height: float = DEFAULT_MIN_HEIGHT, bold: bool = False) -> float:
        return self.metrics.required_height(text, width, text_size, min_height=min_height, bold=bold)

    def cell_height(self, cell: CellConfig, payload: Any, width: float,
                    min_height: float = DEFAULT_MIN_HEIGHT) -> float:
        """Height ``cell`` needs at ``width``; never less than ``min_height``."""
        if not cell.has_text:
            return float(min_height)
        return self.text_height(text_content(cell, payload), width, cell.text_size, min_height, cell.bold)

    # drawing -----------------------------------------------------------

    def _emit_text(self, cursor: Cursor, line: str, x: float, baseline: float, size: float,
                   bold: bool, color: Tuple[float, float, float]) -> None:
        page = self.context.page(cursor)
        page.add_block(
            LayoutBlock(
                frame=Rect(x, baseline, self.metrics.width(line, size, bold), size),
                block_type="text",
                content=line,
                style={"font": self.metrics.fonts.name(bold), "size": size, "color": color},
                page_number=page.number,
            )
        )

    def _line_x(self, line: str, x: float, width: float, size: float, align: str, bold: bool) -> float:
        if align == "center":
            available = width - 2 * TEXT_MARGIN
            return x + TEXT_MARGIN + (available - self.metrics.width(line, size, bold)) / 2
        if align == "right":
            return x + width - TEXT_MARGIN - self.metrics.width(line, size, bold)
        return x + TEXT_MARGIN

    def draw_text(self, cursor: Cursor, text: Optional[str], x: float, y_bottom: float, width: float,
                  height: float, size: float, align: str = "left", bold: bool = False,
                  color: Tuple[float, float, float] = BLACK) -> int:
        """Draw wrapped text centered vertically in the box; return the number of lines."""
        lines = self.metrics.wrap(text, width, size, TEXT_MARGIN, bold)
        if not lines:
            return 0

        line_height = size * LINE_SPACING
        padding = (height - len(lines) * line_height) / 2
        baseline = y_bottom + padding + (len(lines) - 1) * line_height + size * 0.25
        for line in lines:
            self._emit_text(cursor, line, self._line_x(line, x, width, size, align, bold), baseline, size, bold, color)
            baseline -= line_height
        return len(lines)

    def draw_aligned_text(self, cursor: Cursor, text: Optional[str], x: float, y_bottom: float, width: float,
                          height: float, size: float, align: str = "center", bold: bool = True) -> None:
        """Single line text for titles and header cells."""
        if not text:
            return
        baseline = y_bottom + height / 2 - size * 0.3
        self._emit_text(cursor, text, self._line_x(text, x, width, size, align, bold), baseline, size, bold, BLACK)

    def draw_cell(self, cursor: Cursor, cell: CellConfig, payload: Any, x: float, y_top: float,
                  width: float, height: float, borders: bool = True) -> None:
        if borders:
            draw_cell_borders(self.context.stroker(cursor), cell, x, y_top, width, height)
        y_bottom = y_top - height

        match cell.type:
            case "image":
                self.draw_image(cursor, cell, payload, x, y_bottom, width, height)
            case "qr":
                self.draw_qr(cursor, cell, payload, x, y_bottom, width, height)
            case _:
                self.draw_text(cursor, text_content(cell, payload), x, y_bottom, width, height,
                               cell.text_size, cell.align, cell.bold)

    def draw_image(self, cursor: Cursor, cell: CellConfig, payload: Any, x: float, y_bottom: float,
                   width: float, height: float) -> bool:
        source = resolve_template(cell.source, payload) if cell.source else (cell.text or "")
        if not source:
            return False
        try:
            image = load_image(source, self.context.options.assets)
        except MediaError as exc:
            logger.warning("Skipping image in cell %s: %s", cell.id or "<anonymous>", exc)
            return False

        frame = fit_image(image, x, y_bottom, width, height)
        if frame is None:
            logger.warning("Cell %s is too small for an image", cell.id or "<anonymous>")
            return False
        page = self.context.page(cursor)
        page.add_block(
            LayoutBlock(frame=frame, block_type="image", content=image.data, style={}, page_number=page.number,
                        source_uid=cell.id)
        )
        return True

    def draw_qr(self, cursor: Cursor, cell: CellConfig, payload: Any, x: float, y_bottom: float,
                width: float, height: float) -> bool:
        value = text_content(cell, payload) or build_qr_url(payload)
        if not value:
            logger.warning("No QR value for cell %s", cell.id or "<anonymous>")
            return False
        size = min(QR_SIZE, width, height)
        page = self.context.page(cursor)
        page.add_block(
            LayoutBlock(
                frame=Rect(x + (width - size) / 2, y_bottom + (height - size) / 2, size, size),
                block_type="qr",
                content=value,
                style={},
                page_number=page.number,
                source_uid=cell.id,
            )
        )
        return True
