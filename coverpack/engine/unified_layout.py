"""

Unified layout model - the positioned document ready for compilation.

Renderers never draw directly; they append blocks to the current page and
``PDFCompiler`` replays them onto a ReportLab canvas.

Block types: ``line``, ``text``, ``image``, ``qr``.

"""

from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional

from .geometry import Margins, Rect, Size


@dataclass(slots=True)
class LayoutBlock:
    """Single positioned draw operation."""
    frame: Rect
    block_type: str
    content: Any
    style: dict
    page_number: Optional[int] = None
    source_uid: Optional[str] = None


@dataclass(slots=True)
class LayoutPage:
    """Page with its positioned blocks."""
    number: int
    size: Size
    margins: Margins
    blocks: List[LayoutBlock] = field(default_factory=list)

    def add_block(self, block: LayoutBlock) -> None:
        self.blocks.append(block)

    def blocks_of(self, block_type: str) -> List[LayoutBlock]:
        return [block for block in self.blocks if block.block_type == block_type]

    def texts(self) -> List[str]:
        return [block.content for block in self.blocks if block.block_type == "text"]


@dataclass
class UnifiedLayout:
    """Layout of the entire document: pages, positions and styles."""
    pages: List[LayoutPage] = field(default_factory=list)
    current_page: int = 1

    def add_block(self, block: LayoutBlock) -> None:
        if not self.pages:
            raise RuntimeError("No active page - call new_page() before adding blocks.")
        self.pages[-1].add_block(block)

    def new_page(self, size: Size, margins: Margins) -> LayoutPage:
        page = LayoutPage(number=self.current_page, size=size, margins=margins)
        self.pages.append(page)
        self.current_page += 1
        return page

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def __iter__(self) -> Iterator[LayoutPage]:
        return iter(self.pages)
