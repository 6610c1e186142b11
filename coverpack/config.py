"""
Render options and process settings.

Layout constants live here so every renderer measures and draws with the
same numbers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

LINE_SPACING = 1.2
TEXT_MARGIN = 4.0
TEXT_PADDING = 4.0
DEFAULT_MIN_HEIGHT = 17.0
DEFAULT_TEXT_SIZE = 9.0
BLOCK_SPACING = 30.0
FOOTER_CLEARANCE = 20.0
IMAGE_MARGIN = 4.0
QR_SIZE = 50.0

BORDER_COLOR: Tuple[float, float, float] = (0.0, 0.0, 0.0)
BORDER_THICKNESS = 0.5
SEPARATOR_COLOR: Tuple[float, float, float] = (0.0, 0.0, 1.0)
FOOTER_TEXT_COLOR: Tuple[float, float, float] = (0.3, 0.3, 0.3)


class OverflowPolicy(str, Enum):
    """What to do with a unit taller than an empty page can hold."""

    DRAW = "draw"
    ERROR = "error"


@dataclass(slots=True)
class RenderOptions:
    """Per-render switches for the document assembler."""

    table_order: Optional[Tuple[str, ...]] = None
    overflow_policy: OverflowPolicy = OverflowPolicy.DRAW
    page_offset: int = 0
    total_pages: Optional[int] = None
    border_color: Tuple[float, float, float] = BORDER_COLOR
    border_thickness: float = BORDER_THICKNESS
    assets: Dict[str, bytes] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "RenderOptions":
        if not data:
            return cls()
        order = data.get("table_order")
        return cls(
            table_order=tuple(order) if order else None,
            overflow_policy=OverflowPolicy(data.get("overflow_policy", OverflowPolicy.DRAW.value)),
            page_offset=int(data.get("page_offset", 0)),
            total_pages=data.get("total_pages"),
            border_color=tuple(data.get("border_color", BORDER_COLOR)),
            border_thickness=float(data.get("border_thickness", BORDER_THICKNESS)),
            assets=dict(data.get("assets") or {}),
        )


@dataclass(slots=True)
class Settings:
    """Process-level settings read from the environment by the CLI."""

    template_path: Optional[Path] = None
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        template = env.get("COVERPACK_TEMPLATE_PATH")
        return cls(
            template_path=Path(template) if template else None,
            log_level=env.get("COVERPACK_LOG_LEVEL", "INFO").upper(),
            log_file=env.get("COVERPACK_LOG_FILE") or None,
        )
