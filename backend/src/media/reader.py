"""Source decoding via Pillow: still images and multi-frame animations.

Animated sources are handed to the compositor as frame patches: the frame
rectangle, its disposal method and the RGBA pixels inside the rectangle.
"""

import logging
from dataclasses import dataclass, field

import numpy as np
from PIL import Image, UnidentifiedImageError

from engine.compositor import DISPOSE_NONE, FramePatch, InvalidDimensions

logger = logging.getLogger(__name__)


@dataclass
class SourceMedia:
    """Decoded source: canvas size plus one patch per frame."""

    width: int
    height: int
    patches: list[FramePatch]
    durations: list[int] = field(default_factory=list)

    @property
    def frame_count(self) -> int:
        return len(self.patches)

    @property
    def is_animated(self) -> bool:
        return len(self.patches) > 1


def probe(path: str) -> dict:
    """Probe an image file for metadata. Fast: reads only headers."""
    try:
        img = Image.open(path)
    except (FileNotFoundError, UnidentifiedImageError, OSError) as e:
        logger.exception("Probe failed for %s", path)
        return {"ok": False, "error": f"Failed to open image: {type(e).__name__}"}

    with img:
        frame_count = int(getattr(img, "n_frames", 1))
        return {
            "ok": True,
            "width": img.width,
            "height": img.height,
            "format": img.format,
            "mode": img.mode,
            "frame_count": frame_count,
            "animated": frame_count > 1,
        }


def _frame_patch(img: Image.Image, width: int, height: int) -> FramePatch:
    """Cut the current frame's rectangle out of the decoded canvas."""
    extent = getattr(img, "dispose_extent", None) or (0, 0, width, height)
    x0, y0, x1, y1 = (int(v) for v in extent)
    x0, y0 = max(0, x0), max(0, y0)
    x1, y1 = min(width, x1), min(height, y1)
    if x1 <= x0 or y1 <= y0:
        x0, y0, x1, y1 = 0, 0, width, height

    disposal = getattr(img, "disposal_method", DISPOSE_NONE) or DISPOSE_NONE
    rgba = img.convert("RGBA").crop((x0, y0, x1, y1))
    pixels = np.array(rgba, dtype=np.uint8)
    return FramePatch(x0, y0, x1 - x0, y1 - y0, int(disposal), pixels)


def load_source(path: str) -> SourceMedia:
    """Decode a still image or animation into frame patches.

    Raises:
        ValueError: If the file cannot be decoded as an image.
    """
    try:
        img = Image.open(path)
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError(f"Cannot decode image {path}: {type(e).__name__}") from e

    with img:
        width, height = img.size
        frame_count = int(getattr(img, "n_frames", 1))

        if frame_count <= 1:
            pixels = np.array(img.convert("RGBA"), dtype=np.uint8)
            patch = FramePatch(0, 0, width, height, DISPOSE_NONE, pixels)
            return SourceMedia(width, height, [patch], [int(img.info.get("duration", 0))])

        patches: list[FramePatch] = []
        durations: list[int] = []
        for i in range(frame_count):
            img.seek(i)
            patches.append(_frame_patch(img, width, height))
            durations.append(int(img.info.get("duration", 0)))

    logger.info("Loaded %s: %dx%d, %d frames", path, width, height, len(patches))
    return SourceMedia(width, height, patches, durations)


def resize_bitmap(bitmap: np.ndarray, width: int, height: int) -> np.ndarray:
    """Nearest-neighbour resample to (width, height).

    Raises:
        InvalidDimensions: If width or height is not positive.
    """
    if width <= 0 or height <= 0:
        raise InvalidDimensions(f"Target size must be positive, got {width}x{height}")
    if bitmap.shape[1] == width and bitmap.shape[0] == height:
        return bitmap.copy()
    img = Image.fromarray(np.ascontiguousarray(bitmap))
    return np.array(img.resize((width, height), Image.NEAREST), dtype=np.uint8)
