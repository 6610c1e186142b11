"""Per-render state: the page list, one stroker per page and the cursor type."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Mapping, Optional

from ..config import RenderOptions
from ..models.layout import LayoutConfig
from .stroker import Stroker, make_stroker
from .text_metrics import TextMetrics
from .unified_layout import LayoutPage, UnifiedLayout


@dataclass(slots=True, frozen=True)
class Cursor:
    """Vertical drawing position on one page."""

    page_index: int
    y: float

    def down(self, amount: float) -> "Cursor":
        return replace(self, y=self.y - amount)

    def at(self, y: float) -> "Cursor":
        return replace(self, y=y)


@dataclass(slots=True, frozen=True)
class FooterStamp:
    """Hash, timestamp and serial computed outside the engine and printed in footers."""

    hash_sha256: str = ""
    timestamp: str = ""
    serial: str = ""

    def as_dict(self) -> Dict[str, str]:
        return {"hash": self.hash_sha256, "timestamp": self.timestamp, "serial": self.serial}

    def as_security(self) -> Dict[str, str]:
        return {"hashSha256": self.hash_sha256, "tsaTime": self.timestamp, "tsaSerial": self.serial}


class RenderContext:
    """Everything one render call owns.

    The layout config, metrics and options are shared read-only; the page
    list and the strokers are created here and never outlive the render.
    """

    def __init__(
        self,
        config: LayoutConfig,
        payload: Any,
        metrics: TextMetrics,
        options: Optional[RenderOptions] = None,
        stamp: Optional[FooterStamp] = None,
    ) -> None:
        self.config = config
        self.payload = payload
        self.metrics = metrics
        self.options = options or RenderOptions()
        self.stamp = stamp
        self.layout = UnifiedLayout()
        self._strokers: List[Stroker] = []

    @property
    def min_y(self) -> float:
        return self.config.min_y

    @property
    def header_top(self) -> float:
        return self.config.header_top

    @property
    def left(self) -> float:
        return self.config.page.margins.left

    @property
    def usable_width(self) -> float:
        return self.config.usable_width

    @property
    def page_count(self) -> int:
        return self.layout.page_count

    def new_page(self) -> Cursor:
        """Append a page with a fresh stroker; the cursor starts at the header top."""
        page = self.layout.new_page(self.config.page.size, self.config.page.margins)
        self._strokers.append(
            make_stroker(page, self.options.border_color, self.options.border_thickness)
        )
        return Cursor(page_index=len(self.layout.pages) - 1, y=self.header_top)

    def page(self, cursor: Cursor) -> LayoutPage:
        return self.layout.pages[cursor.page_index]

    def stroker(self, cursor: Cursor) -> Stroker:
        return self._strokers[cursor.page_index]

    def footer_data(self) -> Mapping[str, Any]:
        """Payload seen by footer templates.

        The stamp is exposed as ``stamp.*`` and also merged into a copy of
        ``document.security`` as ``hashSha256``, ``tsaTime`` and ``tsaSerial``.
        """
        data = dict(self.payload) if isinstance(self.payload, Mapping) else {}
        if self.stamp is not None:
            data["stamp"] = self.stamp.as_dict()
            document = data.get("document")
            document = dict(document) if isinstance(document, Mapping) else {}
            security = document.get("security")
            security = dict(security) if isinstance(security, Mapping) else {}
            security.update(self.stamp.as_security())
            document["security"] = security
            data["document"] = document
        return data
