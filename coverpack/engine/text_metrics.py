"""

TextMetrics - measuring, wrapping and sizing cell text.

Widths come from ReportLab font metrics. The same text is measured once to
size a row and once to draw it, so every method here is pure and memoized:
identical arguments always give identical results.

"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import List, Tuple

from reportlab.pdfbase import pdfmetrics

from ..config import DEFAULT_MIN_HEIGHT, LINE_SPACING, TEXT_MARGIN, TEXT_PADDING


@dataclass(slots=True, frozen=True)
class FontSet:
    """Registered font names used for regular and bold text."""

    regular: str = "Helvetica"
    bold: str = "Helvetica-Bold"

    def name(self, bold: bool = False) -> str:
        return self.bold if bold else self.regular


class TextMetrics:
    """

    Text measurement and greedy line wrapping.

    ``wrap`` splits on single spaces and fills each line while
    ``width(line + " " + word) <= max_width - 2 * margin``. A word that is
    wider than the whole line is split character by character.

    """

    def __init__(self, fonts: FontSet | None = None) -> None:
        self.fonts = fonts or FontSet()
        self._wrap_cached = lru_cache(maxsize=4096)(self._wrap)

    def width(self, text: str, font_size: float, bold: bool = False) -> float:
        return pdfmetrics.stringWidth(text, self.fonts.name(bold), font_size)

    def wrap(
        self,
        text: str | None,
        max_width: float,
        font_size: float,
        margin: float = TEXT_MARGIN,
        bold: bool = False,
    ) -> List[str]:
        if not text or not text.strip():
            return []
        return list(self._wrap_cached(text, float(max_width), float(font_size), float(margin), bold))

    def _wrap(self, text: str, max_width: float, font_size: float, margin: float, bold: bool) -> Tuple[str, ...]:
        available = max_width - 2 * margin
        lines: List[str] = []
        current = ""

        for word in text.split(" "):
            candidate = f"{current} {word}" if current else word
            if self.width(candidate, font_size, bold) <= available:
                current = candidate
                continue

            if current:
                lines.append(current)
                current = ""

            if self.width(word, font_size, bold) <= available:
                current = word
                continue

            # Unbreakable word: fall back to per-character splitting
            chunk = ""
            for char in word:
                if chunk and self.width(chunk + char, font_size, bold) > available:
                    lines.append(chunk)
                    chunk = char
                else:
                    chunk += char
            current = chunk

        if current:
            lines.append(current)
        return tuple(lines)

    def required_height(
        self,
        text: str | None,
        max_width: float,
        font_size: float,
        margin: float = TEXT_MARGIN,
        line_spacing: float = LINE_SPACING,
        min_height: float = DEFAULT_MIN_HEIGHT,
        bold: bool = False,
    ) -> float:
        """Height a cell needs for ``text``: ``max(min_height, lines * size * spacing + padding)``."""
        lines = self.wrap(text, max_width, font_size, margin, bold)
        if not lines:
            return float(min_height)
        return max(float(min_height), len(lines) * font_size * line_spacing + TEXT_PADDING)

    def fit_width(self, text: str, max_width: float, font_size: float, ellipsis: str = "...") -> str:
        """Cut ``text`` so that it plus ``ellipsis`` fits within ``max_width``."""
        if self.width(text, font_size) <= max_width:
            return text
        while text and self.width(text + ellipsis, font_size) > max_width:
            text = text[:-1]
        return text + ellipsis
