"""Template pack models: page layout and table descriptors."""

from .layout import (
    FontRefs,
    FooterConfig,
    FooterContent,
    HeaderConfig,
    HeaderRow,
    LayoutConfig,
    PageConfig,
    SeparatorLine,
)
from .table import (
    CellConfig,
    ColumnConfig,
    DynamicTable,
    FixedRow,
    FixedTable,
    HeaderRowConfig,
    RowStyle,
    SignatureBlock,
    SignatureBlockGroup,
    TableConfig,
    TableSet,
    TitleConfig,
    parse_table,
)

__all__ = [
    "CellConfig",
    "ColumnConfig",
    "DynamicTable",
    "FixedRow",
    "FixedTable",
    "FontRefs",
    "FooterConfig",
    "FooterContent",
    "HeaderConfig",
    "HeaderRow",
    "HeaderRowConfig",
    "LayoutConfig",
    "PageConfig",
    "RowStyle",
    "SeparatorLine",
    "SignatureBlock",
    "SignatureBlockGroup",
    "TableConfig",
    "TableSet",
    "TitleConfig",
    "parse_table",
]
