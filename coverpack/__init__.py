"""
coverpack - template driven cover sheets for compliance documents.

A template pack (``HeaderFooter.json`` + ``Manifest.json`` + fonts) describes
the page, a recurring header, a footer and an ordered list of tables. Given a
document payload the engine lays out the cover sheet over as many pages as
needed and writes a PDF with ReportLab; the publisher stamps and appends the
document body and hashes the result.

Quick Start:
    from coverpack import load_template

    pack = load_template("templates/default")
    pdf_bytes = pack.assembler().render(payload, output_path="cover.pdf")

    from coverpack import DocumentPublisher
    result = DocumentPublisher(pack.assembler()).publish(payload, body_bytes)
"""

from .version import __version__

from .exceptions import (
    CoverpackError,
    ConfigurationError,
    LayoutError,
    RenderingError,
    FontError,
    MediaError,
    CompilationError,
    MergeError,
)

from .config import OverflowPolicy, RenderOptions, Settings
from .engine.assembler import DocumentAssembler, LayoutResult
from .engine.render_context import Cursor, FooterStamp
from .merger import DocumentPublisher, PublishResult, compute_sha256, merge_pdfs
from .models import LayoutConfig, TableSet
from .template_loader import TemplateLoader, TemplatePack, load_template

__all__ = [
    "__version__",
    # Exceptions
    "CoverpackError",
    "ConfigurationError",
    "LayoutError",
    "RenderingError",
    "FontError",
    "MediaError",
    "CompilationError",
    "MergeError",
    # Configuration
    "OverflowPolicy",
    "RenderOptions",
    "Settings",
    "LayoutConfig",
    "TableSet",
    # Rendering
    "Cursor",
    "DocumentAssembler",
    "FooterStamp",
    "LayoutResult",
    # Templates
    "TemplateLoader",
    "TemplatePack",
    "load_template",
    # Publishing
    "DocumentPublisher",
    "PublishResult",
    "compute_sha256",
    "merge_pdfs",
]
