"""
Page geometry, cover header and footer description from ``HeaderFooter.json``.

Coordinates are PDF points with the origin at the bottom-left corner of the
page. The header region hangs down from ``header.y_position + header.height``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

from ..config import FOOTER_CLEARANCE
from ..engine.geometry import Margins, Size
from ..exceptions import ConfigurationError
from .table import ALIGNMENTS, AUTO, CellConfig, Dimension, _dimension, _number, _require


@dataclass(slots=True, frozen=True)
class PageConfig:
    width: float
    height: float
    margins: Margins

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PageConfig":
        margins = data.get("margins") or {}
        return cls(
            width=_number(_require(data, "width", "page"), field="page width"),
            height=_number(_require(data, "height", "page"), field="page height"),
            margins=Margins(
                top=_number(margins.get("top"), 0.0, "margin"),
                bottom=_number(margins.get("bottom"), 0.0, "margin"),
                left=_number(margins.get("left"), 0.0, "margin"),
                right=_number(margins.get("right"), 0.0, "margin"),
            ),
        )

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)


@dataclass(slots=True, frozen=True)
class FontRefs:
    """Font references; either standard PDF font names or font file names."""

    regular: str = "Helvetica"
    bold: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "FontRefs":
        data = data or {}
        return cls(regular=str(data.get("regular") or "Helvetica"), bold=data.get("bold"))


@dataclass(slots=True, frozen=True)
class HeaderRow:
    height: Dimension
    columns: Tuple[CellConfig, ...]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HeaderRow":
        return cls(
            height=_dimension(data.get("height"), "header row height"),
            columns=tuple(CellConfig.from_dict(col) for col in _require(data, "columns", "header row")),
        )

    @property
    def base_height(self) -> float:
        """Configured height; ``auto`` sums the sub-row heights of the container column."""
        if self.height == AUTO or self.height is None:
            for col in self.columns:
                if col.type == "container" and col.rows:
                    return sum(row.fixed_height for row in col.rows)
            return 0.0
        return self.height


@dataclass(slots=True, frozen=True)
class HeaderConfig:
    y_position: float
    height: float
    rows: Tuple[HeaderRow, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HeaderConfig":
        return cls(
            y_position=_number(_require(data, "y_position", "header"), field="header y_position"),
            height=_number(data.get("height"), 0.0, "header height"),
            rows=tuple(HeaderRow.from_dict(row) for row in data.get("rows") or ()),
        )

    @property
    def top(self) -> float:
        return self.y_position + self.height


@dataclass(slots=True, frozen=True)
class SeparatorLine:
    enabled: bool = False
    y_position: float = 0.0
    margin_left: float = 0.0
    margin_right: float = 0.0
    thickness: float = 0.5

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "SeparatorLine":
        data = data or {}
        return cls(
            enabled=bool(data.get("enabled", False)),
            y_position=_number(data.get("y_position"), 0.0, "separator y_position"),
            margin_left=_number(data.get("margin_left"), 0.0, "separator margin"),
            margin_right=_number(data.get("margin_right"), 0.0, "separator margin"),
            thickness=_number(data.get("thickness"), 0.5, "separator thickness"),
        )


@dataclass(slots=True, frozen=True)
class FooterContent:
    elements: Tuple[CellConfig, ...] = ()
    text_size: float = 7.0
    align: str = "left"
    margin_left: float = 0.0
    margin_right: float = 0.0

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "FooterContent":
        data = data or {}
        align = str(data.get("align") or "left").lower()
        if align not in ALIGNMENTS:
            raise ConfigurationError("Unknown footer alignment", align)
        return cls(
            elements=tuple(CellConfig.from_dict(elem) for elem in data.get("elements") or ()),
            text_size=_number(data.get("text_size"), 7.0, "footer text_size"),
            align=align,
            margin_left=_number(data.get("margin_left"), 0.0, "footer margin"),
            margin_right=_number(data.get("margin_right"), 0.0, "footer margin"),
        )


@dataclass(slots=True, frozen=True)
class FooterConfig:
    y_position: float
    separator: SeparatorLine
    content: FooterContent

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FooterConfig":
        return cls(
            y_position=_number(_require(data, "y_position", "footer"), field="footer y_position"),
            separator=SeparatorLine.from_dict(data.get("separator_line")),
            content=FooterContent.from_dict(data.get("content")),
        )

    @property
    def reserved_top(self) -> float:
        """Highest Y used by the footer region."""
        if self.separator.enabled or self.separator.y_position:
            return self.separator.y_position
        return self.y_position


@dataclass(slots=True, frozen=True)
class LayoutConfig:
    """Immutable page layout loaded once per template pack."""

    page: PageConfig
    fonts: FontRefs
    header: HeaderConfig
    footer: FooterConfig

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LayoutConfig":
        if not isinstance(data, Mapping):
            raise ConfigurationError("Layout config must be an object")
        config = cls(
            page=PageConfig.from_dict(_require(data, "page", "layout")),
            fonts=FontRefs.from_dict(data.get("fonts")),
            header=HeaderConfig.from_dict(_require(data, "header", "layout")),
            footer=FooterConfig.from_dict(_require(data, "footer", "layout")),
        )
        if config.min_y >= config.header_top:
            raise ConfigurationError(
                "Footer reservation overlaps the header",
                f"min_y={config.min_y} header_top={config.header_top}",
            )
        return config

    @property
    def usable_width(self) -> float:
        margins = self.page.margins
        return self.page.width - margins.left - margins.right

    @property
    def header_top(self) -> float:
        return self.header.top

    @property
    def min_y(self) -> float:
        """Lowest Y a table row may reach before a page break is forced."""
        return self.footer.reserved_top + FOOTER_CLEARANCE
