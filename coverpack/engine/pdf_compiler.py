"""

PDFCompiler - replays a UnifiedLayout onto a ReportLab canvas.

All positions are final by the time a layout reaches the compiler; this
module only translates blocks into canvas calls and returns the PDF bytes.

"""

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import Optional, Union

from reportlab.graphics import renderPDF
from reportlab.graphics.barcode.qr import QrCodeWidget
from reportlab.graphics.shapes import Drawing
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from ..exceptions import CompilationError
from .unified_layout import LayoutBlock, UnifiedLayout

logger = logging.getLogger(__name__)


class PDFCompiler:
    """Compile a UnifiedLayout into PDF bytes."""

    def __init__(self, layout: UnifiedLayout, title: Optional[str] = None, author: Optional[str] = None) -> None:
        self.layout = layout
        self.title = title
        self.author = author

    def compile(self, output_path: Optional[Union[str, Path]] = None) -> bytes:
        if not self.layout.pages:
            raise CompilationError("Layout has no pages")

        buffer = BytesIO()
        first = self.layout.pages[0].size
        try:
            pdf = canvas.Canvas(buffer, pagesize=(first.width, first.height))
            if self.title:
                pdf.setTitle(self.title)
            if self.author:
                pdf.setAuthor(self.author)

            for page in self.layout.pages:
                pdf.setPageSize((page.size.width, page.size.height))
                for block in page.blocks:
                    self._draw_block(pdf, block)
                pdf.showPage()
            pdf.save()
        except CompilationError:
            raise
        except Exception as exc:
            raise CompilationError("Failed to write PDF", str(exc)) from exc

        data = buffer.getvalue()
        if output_path is not None:
            Path(output_path).write_bytes(data)
        logger.debug("Compiled %d page(s), %d bytes", len(self.layout.pages), len(data))
        return data

    def _draw_block(self, pdf: canvas.Canvas, block: LayoutBlock) -> None:
        style = block.style or {}
        match block.block_type:
            case "line":
                x1, y1, x2, y2 = block.content
                pdf.setStrokeColorRGB(*style.get("color", (0, 0, 0)))
                pdf.setLineWidth(style.get("thickness", 0.5))
                pdf.line(x1, y1, x2, y2)
            case "text":
                pdf.setFillColorRGB(*style.get("color", (0, 0, 0)))
                pdf.setFont(style.get("font", "Helvetica"), style.get("size", 9))
                pdf.drawString(block.frame.x, block.frame.y, block.content)
            case "image":
                self._draw_image(pdf, block)
            case "qr":
                self._draw_qr(pdf, block)
            case other:
                logger.debug("Skipping unknown block type %s", other)

    def _draw_image(self, pdf: canvas.Canvas, block: LayoutBlock) -> None:
        frame = block.frame
        try:
            image = ImageReader(BytesIO(block.content))
            pdf.drawImage(image, frame.x, frame.y, width=frame.width, height=frame.height,
                          preserveAspectRatio=True, mask="auto")
        except Exception as exc:
            # Image bytes were validated during layout; a failure here only loses the picture.
            logger.warning("Failed to embed image %s: %s", block.source_uid or "<anonymous>", exc)

    def _draw_qr(self, pdf: canvas.Canvas, block: LayoutBlock) -> None:
        frame = block.frame
        widget = QrCodeWidget(block.content, barLevel="M", barBorder=0,
                              barWidth=frame.width, barHeight=frame.height)
        drawing = Drawing(frame.width, frame.height)
        drawing.add(widget)
        renderPDF.draw(drawing, pdf, frame.x, frame.y)
