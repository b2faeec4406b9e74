"""Chromatic Aberration: R/B channel split to simulate lens fringing."""

import math

import numpy as np

from effects._sampling import sample_columns

EFFECT_ID = "fx.chromatic_aberration"
EFFECT_NAME = "Chromatic Aberration"
EFFECT_CATEGORY = "distortion"

PARAMS: dict = {
    "chromatic": {
        "type": "float",
        "min": 0.0,
        "max": 10.0,
        "default": 0.0,
        "label": "Chromatic",
        "curve": "linear",
        "unit": "px",
        "description": "Red sampled from x - shift, blue from x + shift",
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
    """Chromatic aberration: split RGB channels for lens fringing."""
    shift = math.floor(max(0.0, min(10.0, float(params.get("chromatic", 0.0)))))

    if shift <= 0 or frame.size == 0:
        return frame.copy(), None

    output = frame.copy()
    output[:, :, 0] = sample_columns(frame[:, :, 0], -shift)
    output[:, :, 2] = sample_columns(frame[:, :, 2], shift)
    return output, None
