"""Color Shift: random per-pixel RGB separation."""

import math

import numpy as np

from effects._sampling import sample_columns
from engine.determinism import make_rng

EFFECT_ID = "fx.color_shift"
EFFECT_NAME = "Color Shift"
EFFECT_CATEGORY = "distortion"

PARAMS: dict = {
    "colorShift": {
        "type": "float",
        "min": 0.0,
        "max": 20.0,
        "default": 0.0,
        "label": "Color Shift",
        "curve": "linear",
        "unit": "px",
        "description": "Maximum random R/B sample offset",
    },
}


def apply(
    frame: np.ndarray,
    params: dict,
    state_in: dict | None = None,
    *,
    frame_index: int,
    seed: int,
    resolution: tuple[int, int],
) -> tuple[np.ndarray, dict | None]:
    """Red from x + [0, shift], blue from x - [0, shift], drawn per pixel."""
    max_shift = math.floor(max(0.0, min(20.0, float(params.get("colorShift", 0.0)))))

    if max_shift <= 0 or frame.size == 0:
        return frame.copy(), None

    rng = make_rng(seed)
    h, w = frame.shape[:2]
    red_offsets = rng.integers(0, max_shift + 1, size=(h, w))
    blue_offsets = rng.integers(0, max_shift + 1, size=(h, w))

    output = frame.copy()
    output[:, :, 0] = sample_columns(frame[:, :, 0], red_offsets)
    output[:, :, 2] = sample_columns(frame[:, :, 2], -blue_offsets)
    return output, None
