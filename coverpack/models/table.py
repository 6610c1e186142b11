"""
Table descriptors from ``Manifest.json``.

``TableConfig`` is a closed set of variants, told apart by the ``type`` key:

- ``fixed_table``      -> :class:`FixedTable`
- ``dynamic_table``    -> :class:`DynamicTable`
- ``signature_blocks`` -> :class:`SignatureBlockGroup`
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Mapping, Optional, Sequence, Tuple, Union

from ..config import DEFAULT_MIN_HEIGHT, DEFAULT_TEXT_SIZE
from ..exceptions import ConfigurationError

Dimension = Union[float, str, None]
AUTO = "auto"
ALIGNMENTS = ("left", "center", "right")


def _number(value: Any, default: Optional[float] = None, field: str = "value") -> Optional[float]:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid {field}", repr(value))
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid {field}", repr(value)) from exc


def _dimension(value: Any, field: str) -> Dimension:
    if isinstance(value, str) and value.strip().lower() == AUTO:
        return AUTO
    return _number(value, None, field)


def _require(data: Mapping[str, Any], key: str, where: str) -> Any:
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"{where} must be an object", repr(data))
    if key not in data or data[key] is None:
        raise ConfigurationError(f"Missing '{key}'", where)
    return data[key]


@dataclass(slots=True, frozen=True)
class CellConfig:
    """A logical cell: text, template source or image, plus borders and size."""

    type: str = "text"
    id: Optional[str] = None
    text: Optional[str] = None
    source: Optional[str] = None
    width: Dimension = None
    height: Dimension = None
    align: str = "left"
    text_size: float = DEFAULT_TEXT_SIZE
    bold: bool = False
    border_top: bool = True
    border_bottom: bool = True
    border_left: bool = True
    border_right: bool = True
    tail: Optional[int] = None
    columns: Tuple["CellConfig", ...] = ()
    rows: Tuple["CellConfig", ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CellConfig":
        if not isinstance(data, Mapping):
            raise ConfigurationError("Cell must be an object", repr(data))

        cell_type = str(data.get("type") or "text")
        if cell_type == "image" and data.get("id") == "qr_code":
            cell_type = "qr"
        if cell_type not in ("text", "image", "qr", "columns", "container"):
            raise ConfigurationError("Unknown cell type", cell_type)

        align = str(data.get("align") or "left").lower()
        if align not in ALIGNMENTS:
            raise ConfigurationError("Unknown alignment", align)

        tail = data.get("tail")
        return cls(
            type=cell_type,
            id=data.get("id"),
            text=data.get("text"),
            source=data.get("source"),
            width=_dimension(data.get("width"), "width"),
            height=_dimension(data.get("height"), "height"),
            align=align,
            text_size=_number(data.get("text_size"), DEFAULT_TEXT_SIZE, "text_size"),
            bold=bool(data.get("bold", False)),
            border_top=data.get("border_top") is not False,
            border_bottom=data.get("border_bottom") is not False,
            border_left=data.get("border_left") is not False,
            border_right=data.get("border_right") is not False,
            tail=int(tail) if tail else None,
            columns=tuple(cls.from_dict(col) for col in data.get("columns") or ()),
            rows=tuple(cls.from_dict(row) for row in data.get("rows") or ()),
        )

    @property
    def fixed_width(self) -> float:
        return self.width if isinstance(self.width, float) else 0.0

    @property
    def fixed_height(self) -> float:
        return self.height if isinstance(self.height, float) else 0.0

    @property
    def has_text(self) -> bool:
        return self.type not in ("image", "qr")


@dataclass(slots=True, frozen=True)
class ColumnConfig:
    text: Optional[str]
    width: float

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ColumnConfig":
        return cls(text=data.get("text"), width=_number(_require(data, "width", "header column"), field="width"))


@dataclass(slots=True, frozen=True)
class TitleConfig:
    text: Optional[str]
    height: float
    text_size: float = DEFAULT_TEXT_SIZE

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> Optional["TitleConfig"]:
        if not data:
            return None
        return cls(
            text=data.get("text"),
            height=_number(_require(data, "height", "title"), field="title height"),
            text_size=_number(data.get("text_size"), DEFAULT_TEXT_SIZE, "text_size"),
        )


@dataclass(slots=True, frozen=True)
class HeaderRowConfig:
    height: float
    columns: Tuple[ColumnConfig, ...]
    text_size: float = DEFAULT_TEXT_SIZE

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], where: str) -> "HeaderRowConfig":
        columns = _require(data, "columns", f"{where}.header")
        if not columns:
            raise ConfigurationError("Table header needs at least one column", where)
        return cls(
            height=_number(_require(data, "height", f"{where}.header"), field="header height"),
            columns=tuple(ColumnConfig.from_dict(col) for col in columns),
            text_size=_number(data.get("text_size"), DEFAULT_TEXT_SIZE, "text_size"),
        )

    @property
    def widths(self) -> Tuple[float, ...]:
        return tuple(col.width for col in self.columns)

    @property
    def total_width(self) -> float:
        return sum(self.widths)


@dataclass(slots=True, frozen=True)
class RowStyle:
    """Minimum height, text size and alignment shared by body rows."""

    height: float = DEFAULT_MIN_HEIGHT
    text_size: float = DEFAULT_TEXT_SIZE
    align: str = "left"

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "RowStyle":
        data = data or {}
        return cls(
            height=_number(data.get("height"), DEFAULT_MIN_HEIGHT, "row height"),
            text_size=_number(data.get("text_size"), DEFAULT_TEXT_SIZE, "text_size"),
            align=str(data.get("align") or "left").lower(),
        )


@dataclass(slots=True, frozen=True)
class FixedRow:
    cells: Tuple[CellConfig, ...]
    data_source: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FixedRow":
        return cls(
            cells=tuple(CellConfig.from_dict(cell) for cell in _require(data, "cells", "row")),
            data_source=data.get("data_source"),
        )


@dataclass(slots=True, frozen=True)
class FixedTable:
    id: str
    header: HeaderRowConfig
    rows_config: RowStyle
    rows: Tuple[FixedRow, ...]
    title: Optional[TitleConfig] = None
    margin_top: float = 0.0


@dataclass(slots=True, frozen=True)
class DynamicTable:
    id: str
    header: HeaderRowConfig
    row_template: RowStyle
    cells: Tuple[CellConfig, ...]
    data_source: str
    title: Optional[TitleConfig] = None
    margin_top: float = 0.0


@dataclass(slots=True, frozen=True)
class SignatureBlock:
    x: float
    y: float
    width: float
    rows: Tuple[CellConfig, ...]
    id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SignatureBlock":
        return cls(
            id=data.get("id"),
            x=_number(data.get("x"), 0.0, "block x"),
            y=_number(data.get("y"), 0.0, "block y"),
            width=_number(_require(data, "width", "signature block"), field="block width"),
            rows=tuple(CellConfig.from_dict(row) for row in data.get("rows") or ()),
        )


@dataclass(slots=True, frozen=True)
class SignatureBlockGroup:
    id: str
    blocks: Tuple[SignatureBlock, ...]
    margin_top: float = 0.0


TableConfig = Union[FixedTable, DynamicTable, SignatureBlockGroup]


def parse_table(data: Mapping[str, Any]) -> TableConfig:
    """Build the table variant named by ``data["type"]``."""
    table_id = str(_require(data, "id", "table"))
    margin_top = _number(data.get("margin_top"), 0.0, "margin_top")

    match data.get("type"):
        case "fixed_table":
            return FixedTable(
                id=table_id,
                margin_top=margin_top,
                title=TitleConfig.from_dict(data.get("title")),
                header=HeaderRowConfig.from_dict(_require(data, "header", table_id), table_id),
                rows_config=RowStyle.from_dict(data.get("rows_config")),
                rows=tuple(FixedRow.from_dict(row) for row in data.get("rows") or ()),
            )
        case "dynamic_table":
            template = _require(data, "row_template", table_id)
            return DynamicTable(
                id=table_id,
                margin_top=margin_top,
                title=TitleConfig.from_dict(data.get("title")),
                header=HeaderRowConfig.from_dict(_require(data, "header", table_id), table_id),
                row_template=RowStyle.from_dict(template),
                cells=tuple(CellConfig.from_dict(cell) for cell in _require(template, "cells", table_id)),
                data_source=str(_require(data, "data_source", table_id)),
            )
        case "signature_blocks":
            return SignatureBlockGroup(
                id=table_id,
                margin_top=margin_top,
                blocks=tuple(SignatureBlock.from_dict(block) for block in data.get("blocks") or ()),
            )
        case other:
            raise ConfigurationError(f"Unknown table type for '{table_id}'", repr(other))


@dataclass(slots=True, frozen=True)
class TableSet:
    """Ordered table descriptors of a template pack."""

    tables: Tuple[TableConfig, ...] = ()

    @classmethod
    def from_manifest(cls, manifest: Mapping[str, Any]) -> "TableSet":
        content = manifest.get("content") if isinstance(manifest, Mapping) else None
        tables = (content or {}).get("tables")
        if tables is None:
            raise ConfigurationError("Manifest has no content.tables")
        return cls.from_list(tables)

    @classmethod
    def from_list(cls, tables: Sequence[Mapping[str, Any]]) -> "TableSet":
        parsed = tuple(parse_table(table) for table in tables)
        seen = set()
        for table in parsed:
            if table.id in seen:
                raise ConfigurationError("Duplicate table id", table.id)
            seen.add(table.id)
        return cls(parsed)

    def get(self, table_id: str) -> Optional[TableConfig]:
        for table in self.tables:
            if table.id == table_id:
                return table
        return None

    def ordered(self, order: Optional[Sequence[str]] = None) -> Tuple[TableConfig, ...]:
        """Tables in ``order`` (ids missing from the manifest are skipped), else manifest order."""
        if not order:
            return self.tables
        return tuple(table for table in (self.get(table_id) for table_id in order) if table is not None)

    def __iter__(self) -> Iterator[TableConfig]:
        return iter(self.tables)

    def __len__(self) -> int:
        return len(self.tables)
