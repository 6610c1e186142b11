"""
Template pack loading.

A template pack is a directory::

    HeaderFooter.json   page geometry, cover header, footer, font references
    Manifest.json       content.tables, the ordered table descriptors
    fonts/              TrueType files named by HeaderFooter.json

Parsed configs and font bytes are cached for the life of the process and
are never mutated after loading.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .config import RenderOptions
from .engine.assembler import DocumentAssembler
from .engine.font_registry import STANDARD_FONTS
from .exceptions import ConfigurationError, FontError
from .models.layout import LayoutConfig
from .models.table import TableSet
from .utils.cache import Cache

logger = logging.getLogger(__name__)

LAYOUT_FILE = "HeaderFooter.json"
MANIFEST_FILE = "Manifest.json"
FONTS_DIR = "fonts"

_CACHE = Cache(max_size=64)


@dataclass(slots=True, frozen=True)
class TemplatePack:
    root: Path
    layout: LayoutConfig
    tables: TableSet
    fonts: Dict[str, bytes] = field(default_factory=dict)

    def assembler(self, options: Optional[RenderOptions] = None) -> DocumentAssembler:
        return DocumentAssembler(self.layout, self.tables, self.fonts, options)


class TemplateLoader:
    """Read and cache the files of one template pack."""

    def __init__(self, root: Union[str, Path], cache: Optional[Cache] = None) -> None:
        self.root = Path(root)
        self.cache = cache if cache is not None else _CACHE

    def _key(self, name: str) -> str:
        return f"{self.root.resolve()}::{name}"

    def _read_json(self, name: str) -> Any:
        path = self.root / name
        try:
            with path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except FileNotFoundError as exc:
            raise ConfigurationError(f"Failed to load {name}", f"{path} does not exist") from exc
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigurationError(f"Failed to load {name}", str(exc)) from exc
        logger.info("%s loaded from %s", name, path)
        return data

    def load_layout(self) -> LayoutConfig:
        return self.cache.get_or_set(
            self._key(LAYOUT_FILE), lambda: LayoutConfig.from_dict(self._read_json(LAYOUT_FILE))
        )

    def load_tables(self) -> TableSet:
        return self.cache.get_or_set(
            self._key(MANIFEST_FILE), lambda: TableSet.from_manifest(self._read_json(MANIFEST_FILE))
        )

    def font_path(self, reference: str) -> Path:
        for candidate in (self.root / reference, self.root / FONTS_DIR / reference):
            if candidate.is_file():
                return candidate
        raise FontError("Font file not found", f"{reference} in {self.root}")

    def load_fonts(self) -> Dict[str, bytes]:
        """Bytes of every non-standard font the layout references."""

        def read() -> Dict[str, bytes]:
            fonts = self.load_layout().fonts
            data: Dict[str, bytes] = {}
            for reference in (fonts.regular, fonts.bold):
                if not reference or reference in STANDARD_FONTS or reference in data:
                    continue
                path = self.font_path(reference)
                try:
                    data[reference] = path.read_bytes()
                except OSError as exc:
                    raise FontError(f"Failed to read font {reference}", str(exc)) from exc
                logger.debug("Font %s loaded (%d bytes)", reference, len(data[reference]))
            return data

        return self.cache.get_or_set(self._key(FONTS_DIR), read)

    def load(self) -> TemplatePack:
        return TemplatePack(
            root=self.root,
            layout=self.load_layout(),
            tables=self.load_tables(),
            fonts=self.load_fonts(),
        )


def load_template(root: Union[str, Path]) -> TemplatePack:
    return TemplateLoader(root).load()
