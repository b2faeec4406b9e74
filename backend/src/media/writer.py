"""Frame output via Pillow: numbered PNG files or a ZIP of them."""

import io
import zipfile
from pathlib import Path

import numpy as np
from PIL import Image

DEFAULT_PREFIX = "vhs_frame"


def frame_name(index: int, prefix: str = DEFAULT_PREFIX) -> str:
    """1-based, zero-padded file name: vhs_frame_001.png."""
    return f"{prefix}_{index + 1:03d}.png"


def encode_png(bitmap: np.ndarray) -> bytes:
    """Encode one RGBA frame as PNG bytes."""
    buf = io.BytesIO()
    Image.fromarray(np.ascontiguousarray(bitmap)).save(buf, format="PNG")
    return buf.getvalue()


def write_frames(
    bitmaps: list[np.ndarray], out_dir: str, prefix: str = DEFAULT_PREFIX
) -> list[Path]:
    """Write each frame as a PNG into out_dir. Returns the written paths."""
    target = Path(out_dir)
    target.mkdir(parents=True, exist_ok=True)
    paths = []
    for i, bitmap in enumerate(bitmaps):
        path = target / frame_name(i, prefix)
        path.write_bytes(encode_png(bitmap))
        paths.append(path)
    return paths


def write_zip(
    bitmaps: list[np.ndarray], path: str, prefix: str = DEFAULT_PREFIX
) -> Path:
    """Write every frame as a PNG entry of one ZIP archive."""
    archive = Path(path)
    archive.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(archive, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for i, bitmap in enumerate(bitmaps):
            zf.writestr(frame_name(i, prefix), encode_png(bitmap))
    return archive
