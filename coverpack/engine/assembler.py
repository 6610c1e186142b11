"""

DocumentAssembler - drives one cover render from config to PDF bytes.

Order is fixed: cover header, tables one after another on a shared cursor,
footers on every produced page, compilation.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from ..config import RenderOptions
from ..exceptions import RenderingError
from ..models.layout import LayoutConfig
from ..models.table import DynamicTable, FixedTable, SignatureBlockGroup, TableConfig, TableSet
from ..renderers.cell_renderer import CellRenderer
from ..renderers.header_footer_renderer import HeaderFooterRenderer
from ..renderers.signature_renderer import SignatureRenderer
from ..renderers.table_renderer import DynamicTableRenderer, FixedTableRenderer
from .font_registry import resolve_font_set
from .pagination_manager import PaginationManager
from .pdf_compiler import PDFCompiler
from .placeholder_resolver import resolve_path
from .render_context import Cursor, FooterStamp, RenderContext
from .text_metrics import TextMetrics
from .unified_layout import UnifiedLayout

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LayoutResult:
    """Laid out document plus pagination figures."""

    layout: UnifiedLayout
    total_pages: int
    page_breaks: int = 0
    oversized_units: int = 0

    @property
    def page_count(self) -> int:
        return self.layout.page_count


class _Renderers:
    """Renderers bound to one RenderContext."""

    def __init__(self, context: RenderContext) -> None:
        self.cells = CellRenderer(context)
        self.header_footer = HeaderFooterRenderer(context, self.cells)
        self.pagination = PaginationManager(context, on_page_start=self.header_footer.render_header)
        self.fixed = FixedTableRenderer(context, self.pagination, self.cells)
        self.dynamic = DynamicTableRenderer(context, self.pagination, self.cells)
        self.signatures = SignatureRenderer(context, self.pagination, self.cells)

    def render_table(self, table: TableConfig, payload: Any, cursor: Cursor) -> Cursor:
        match table:
            case FixedTable():
                return self.fixed.render(table, payload, cursor)
            case DynamicTable():
                return self.dynamic.render(table, payload, cursor)
            case SignatureBlockGroup():
                return self.signatures.render(table, payload, cursor)
        raise RenderingError("Unsupported table config", type(table).__name__)


class DocumentAssembler:
    """

    Renders cover documents for one template pack.

    Fonts are resolved once here (a missing font is a FontError before any
    page exists); everything else is created per ``render`` call, so one
    assembler can serve concurrent renders.

    """

    def __init__(
        self,
        layout: LayoutConfig,
        tables: TableSet,
        font_bytes: Optional[Mapping[str, bytes]] = None,
        options: Optional[RenderOptions] = None,
    ) -> None:
        self.layout_config = layout
        self.tables = tables
        self.options = options or RenderOptions()
        self.fonts = resolve_font_set(layout.fonts.regular, layout.fonts.bold, font_bytes)
        self.metrics = TextMetrics(self.fonts)

    def build_layout(
        self,
        payload: Any,
        stamp: Optional[FooterStamp] = None,
        options: Optional[RenderOptions] = None,
    ) -> LayoutResult:
        options = options or self.options
        context = RenderContext(self.layout_config, payload, self.metrics, options, stamp)
        renderers = _Renderers(context)

        cursor = renderers.pagination.start_page()
        for table in self.tables.ordered(options.table_order):
            cursor = renderers.render_table(table, payload, cursor)

        total = renderers.header_footer.render_footers(options.page_offset, options.total_pages)
        return LayoutResult(
            layout=context.layout,
            total_pages=total,
            page_breaks=renderers.pagination.breaks,
            oversized_units=renderers.pagination.oversized,
        )

    def render(
        self,
        payload: Any,
        stamp: Optional[FooterStamp] = None,
        output_path: Optional[Union[str, Path]] = None,
        options: Optional[RenderOptions] = None,
    ) -> bytes:
        code = resolve_path(payload, "document.code") or "<unknown>"
        logger.info("Rendering cover for %s", code)

        result = self.build_layout(payload, stamp, options)
        title = resolve_path(payload, "document.title")
        data = PDFCompiler(result.layout, title=str(title) if title else None).compile(output_path)

        logger.info(
            "Cover for %s rendered: %d page(s), %d page break(s), %d bytes",
            code,
            result.page_count,
            result.page_breaks,
            len(data),
        )
        return data
