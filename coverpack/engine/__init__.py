"""Layout engine: geometry, text metrics, pagination and PDF compilation."""

from .geometry import Margins, Rect, Size, round2
from .unified_layout import LayoutBlock, LayoutPage, UnifiedLayout

__all__ = ["LayoutBlock", "LayoutPage", "Margins", "Rect", "Size", "UnifiedLayout", "round2"]
