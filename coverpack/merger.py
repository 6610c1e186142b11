"""
Publishing: body stamping, cover + body merging and document hashing.

The body PDF gets the short ``code - title`` header and the standard footer
on every page, numbered after the cover pages. The cover comes first in the
merged document. The SHA-256 of the merged bytes can be handed to a
timestamp service, whose answer is printed in the cover footer on a second
pass.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, replace
from io import BytesIO
from typing import Any, Callable, Optional

from PyPDF2 import PdfReader, PdfWriter
from PyPDF2.errors import PdfReadError

from .config import RenderOptions
from .engine.assembler import DocumentAssembler
from .engine.pdf_compiler import PDFCompiler
from .engine.render_context import FooterStamp, RenderContext
from .exceptions import MergeError
from .renderers.cell_renderer import CellRenderer
from .renderers.header_footer_renderer import HeaderFooterRenderer

logger = logging.getLogger(__name__)

Timestamper = Callable[[str], FooterStamp]


def compute_sha256(data: bytes) -> str:
    digest = hashlib.sha256(data).hexdigest()
    logger.debug("SHA-256 computed: %s (%d bytes)", digest, len(data))
    return digest


def short_hash(digest: Optional[str]) -> Optional[str]:
    """Last 8 characters of a digest, for display."""
    if not digest or len(digest) < 8:
        return digest
    return digest[-8:]


def _read_pdf(data: bytes, what: str) -> PdfReader:
    if not data or not data.startswith(b"%PDF"):
        raise MergeError(f"{what} is not a PDF")
    try:
        return PdfReader(BytesIO(data))
    except (PdfReadError, ValueError) as exc:
        raise MergeError(f"Failed to read {what}", str(exc)) from exc


def page_count(data: bytes) -> int:
    return len(_read_pdf(data, "document").pages)


def merge_pdfs(cover: bytes, body: bytes) -> bytes:
    """Cover pages first, then body pages."""
    writer = PdfWriter()
    cover_reader = _read_pdf(cover, "cover")
    body_reader = _read_pdf(body, "body")
    for page in cover_reader.pages:
        writer.add_page(page)
    for page in body_reader.pages:
        writer.add_page(page)

    buffer = BytesIO()
    writer.write(buffer)
    merged = buffer.getvalue()
    logger.info(
        "PDFs merged: %d cover + %d body page(s), %d bytes",
        len(cover_reader.pages),
        len(body_reader.pages),
        len(merged),
    )
    return merged


@dataclass(slots=True)
class PublishResult:
    pdf: bytes
    sha256: str
    cover_pages: int
    body_pages: int
    stamp: Optional[FooterStamp] = None

    @property
    def total_pages(self) -> int:
        return self.cover_pages + self.body_pages

    @property
    def short_hash(self) -> Optional[str]:
        return short_hash(self.sha256)


class DocumentPublisher:
    """Cover render, body stamping and merging for one template pack."""

    def __init__(self, assembler: DocumentAssembler) -> None:
        self.assembler = assembler

    def stamp_overlay(self, payload: Any, pages: int, page_offset: int, total_pages: int,
                      stamp: Optional[FooterStamp] = None) -> bytes:
        """A PDF of ``pages`` transparent pages carrying only the body header and footer."""
        options = RenderOptions(page_offset=page_offset, total_pages=total_pages)
        context = RenderContext(self.assembler.layout_config, payload, self.assembler.metrics, options, stamp)
        header_footer = HeaderFooterRenderer(context, CellRenderer(context))
        for _ in range(pages):
            header_footer.render_body_header(context.new_page())
        header_footer.render_footers(page_offset, total_pages)
        return PDFCompiler(context.layout).compile()

    def stamp_body(self, body: bytes, payload: Any, page_offset: int = 0, total_pages: Optional[int] = None,
                   stamp: Optional[FooterStamp] = None) -> bytes:
        reader = _read_pdf(body, "body")
        count = len(reader.pages)
        total = total_pages or page_offset + count
        overlay = PdfReader(BytesIO(self.stamp_overlay(payload, count, page_offset, total, stamp)))

        writer = PdfWriter()
        for page, stamp_page in zip(reader.pages, overlay.pages):
            page.merge_page(stamp_page)
            writer.add_page(page)
        buffer = BytesIO()
        writer.write(buffer)
        logger.info("Header/footer applied to %d body page(s)", count)
        return buffer.getvalue()

    def publish(self, payload: Any, body: Optional[bytes] = None,
                timestamper: Optional[Timestamper] = None) -> PublishResult:
        """Render the cover, stamp and append the body, hash, and optionally re-render with a timestamp."""
        body_pages = page_count(body) if body else 0

        # First pass only counts cover pages; footers need the document total.
        cover_pages = self.assembler.build_layout(payload).page_count
        total = cover_pages + body_pages
        options = replace(self.assembler.options, page_offset=0, total_pages=total)

        cover = self.assembler.render(payload, options=options)
        stamped_body = self.stamp_body(body, payload, cover_pages, total) if body else None
        document = merge_pdfs(cover, stamped_body) if stamped_body else cover
        digest = compute_sha256(document)

        stamp = None
        if timestamper is not None:
            stamp = timestamper(digest)
            logger.info("Timestamp received for %s", short_hash(digest))
            cover = self.assembler.render(payload, stamp=stamp, options=options)
            document = merge_pdfs(cover, stamped_body) if stamped_body else cover

        return PublishResult(pdf=document, sha256=digest, cover_pages=cover_pages, body_pages=body_pages,
                             stamp=stamp)
