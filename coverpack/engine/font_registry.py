from __future__ import annotations

import hashlib
import logging
from io import BytesIO
from threading import Lock
from typing import Dict, Mapping, Optional

from reportlab.pdfbase import pdfmetrics  # type: ignore
from reportlab.pdfbase.ttfonts import TTFont  # type: ignore

from ..exceptions import FontError
from .text_metrics import FontSet

logger = logging.getLogger(__name__)

STANDARD_FONTS = frozenset(
    {
        "Courier",
        "Courier-Bold",
        "Courier-Oblique",
        "Courier-BoldOblique",
        "Helvetica",
        "Helvetica-Bold",
        "Helvetica-Oblique",
        "Helvetica-BoldOblique",
        "Times-Roman",
        "Times-Bold",
        "Times-Italic",
        "Times-BoldItalic",
        "Symbol",
        "ZapfDingbats",
    }
)

# Bold face used when a layout names a standard regular font without a bold one.
STANDARD_BOLD = {"Helvetica": "Helvetica-Bold", "Times-Roman": "Times-Bold", "Courier": "Courier-Bold"}

# Font bytes digest -> registered ReportLab name. ReportLab's registry is
# process-global, so registration happens once per distinct font file.
_REGISTERED: Dict[str, str] = {}
_LOCK = Lock()


def _font_stem(reference: str) -> str:
    stem = reference.rsplit("/", 1)[-1]
    if stem.lower().endswith((".ttf", ".otf")):
        stem = stem[:-4]
    return "".join(ch for ch in stem if ch.isalnum() or ch in "-_") or "Font"


def register_font_bytes(reference: str, data: bytes) -> str:
    """Register TrueType ``data`` with ReportLab and return the font name to draw with."""
    if not data:
        raise FontError("Font bytes are empty", reference)

    digest = hashlib.sha256(data).hexdigest()
    with _LOCK:
        registered = _REGISTERED.get(digest)
        if registered:
            return registered

        name = f"{_font_stem(reference)}-{digest[:8]}"
        try:
            pdfmetrics.registerFont(TTFont(name, BytesIO(data)))
        except Exception as exc:
            raise FontError(f"Failed to register font {reference!r}", str(exc)) from exc

        _REGISTERED[digest] = name
        logger.debug("Registered font %s as %s", reference, name)
        return name


def resolve_font(reference: str, font_bytes: Optional[Mapping[str, bytes]] = None) -> str:
    """Font name for a LayoutConfig font reference.

    Standard PDF fonts are used by name; anything else needs its bytes.
    """
    if not reference:
        raise FontError("Missing font reference")
    data = (font_bytes or {}).get(reference)
    if data is not None:
        return register_font_bytes(reference, data)
    if reference in STANDARD_FONTS:
        return reference
    raise FontError("Font bytes not provided", reference)


def resolve_font_set(
    regular: str,
    bold: Optional[str] = None,
    font_bytes: Optional[Mapping[str, bytes]] = None,
) -> FontSet:
    regular_name = resolve_font(regular, font_bytes)
    if bold:
        bold_name = resolve_font(bold, font_bytes)
    else:
        bold_name = STANDARD_BOLD.get(regular_name, regular_name)
    return FontSet(regular=regular_name, bold=bold_name)
