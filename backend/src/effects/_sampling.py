"""Shared pixel helpers for the stage library.

All helpers operate on (H, W, C) arrays. Sampling clamps coordinates to the
frame so no stage can index outside the buffer.
"""

import numpy as np
from scipy.ndimage import uniform_filter

LUMA_R = 0.299
LUMA_G = 0.587
LUMA_B = 0.114


def luma(rgb: np.ndarray) -> np.ndarray:
    """Perceptual luma of an (H, W, 3) array, as float32 (H, W)."""
    rgb = rgb.astype(np.float32)
    return LUMA_R * rgb[:, :, 0] + LUMA_G * rgb[:, :, 1] + LUMA_B * rgb[:, :, 2]


def to_uint8(values: np.ndarray) -> np.ndarray:
    """Round half-to-even and clamp to the byte range."""
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


def box_mean(values: np.ndarray, radius_y: int, radius_x: int) -> np.ndarray:
    """Edge-truncated box average over a (2*ry+1) x (2*rx+1) window.

    Only in-bounds neighbours are counted, so border pixels average over a
    smaller window instead of picking up zero padding.
    """
    size_2d = (2 * radius_y + 1, 2 * radius_x + 1)
    data = values.astype(np.float64)
    size = size_2d + (1,) * (data.ndim - 2)

    sums = uniform_filter(data, size=size, mode="constant", cval=0.0)
    counts = uniform_filter(
        np.ones(data.shape[:2], dtype=np.float64),
        size=size_2d,
        mode="constant",
        cval=0.0,
    )
    if data.ndim == 3:
        counts = counts[:, :, np.newaxis]
    return sums / counts


def sample_columns(channel: np.ndarray, offsets) -> np.ndarray:
    """Read channel[y, clamp(x + offset)] for every pixel.

    ``offsets`` broadcasts against (H, W): a scalar, a per-row (H, 1) column
    or a per-pixel (H, W) array.
    """
    h, w = channel.shape[:2]
    cols = np.arange(w)[np.newaxis, :] + np.asarray(offsets, dtype=np.intp)
    cols = np.broadcast_to(np.clip(cols, 0, w - 1), (h, w))
    rows = np.broadcast_to(np.arange(h)[:, np.newaxis], (h, w))
    return channel[rows, cols]
