"""Loading and placing images for image cells."""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from io import BytesIO
from typing import Mapping, Optional

from PIL import Image, UnidentifiedImageError

from ..config import IMAGE_MARGIN
from ..engine.geometry import Rect
from ..exceptions import MediaError

_DATA_URI = re.compile(r"^data:image/(png|jpe?g|gif|bmp);base64,(.*)$", re.IGNORECASE | re.DOTALL)


@dataclass(slots=True, frozen=True)
class LoadedImage:
    data: bytes
    width: int
    height: int


def decode_image_source(source: str, assets: Optional[Mapping[str, bytes]] = None) -> bytes:
    """Raw bytes for an image source.

    Accepts ``data:image/...;base64,`` URIs or a key into ``assets`` (bytes
    supplied by the caller). Anything else is a MediaError.
    """
    source = (source or "").strip()
    if not source:
        raise MediaError("Empty image source")

    match = _DATA_URI.match(source)
    if match:
        try:
            return base64.b64decode(match.group(2), validate=False)
        except (binascii.Error, ValueError) as exc:
            raise MediaError("Invalid base64 image data", str(exc)) from exc

    if assets and source in assets:
        return assets[source]

    raise MediaError("Unsupported image source", source[:64])


def load_image(source: str, assets: Optional[Mapping[str, bytes]] = None) -> LoadedImage:
    data = decode_image_source(source, assets)
    try:
        with Image.open(BytesIO(data)) as image:
            width, height = image.size
    except (UnidentifiedImageError, OSError) as exc:
        raise MediaError("Cannot decode image", str(exc)) from exc
    if width <= 0 or height <= 0:
        raise MediaError("Image has no pixels", source[:64])
    return LoadedImage(data=data, width=width, height=height)


def fit_image(image: LoadedImage, x: float, y_bottom: float, width: float, height: float,
              margin: float = IMAGE_MARGIN) -> Optional[Rect]:
    """Frame that scales ``image`` into the cell minus ``margin``, keeping its aspect ratio, centered."""
    box_w = width - 2 * margin
    box_h = height - 2 * margin
    if box_w <= 0 or box_h <= 0:
        return None
    scale = min(box_w / image.width, box_h / image.height)
    draw_w = image.width * scale
    draw_h = image.height * scale
    return Rect(
        x + margin + (box_w - draw_w) / 2,
        y_bottom + margin + (box_h - draw_h) / 2,
        draw_w,
        draw_h,
    )

