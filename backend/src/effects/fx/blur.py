"""Blur effect: square box blur over interior pixels."""

import math

import numpy as np

from effects._sampling import box_mean, to_uint8

EFFECT_ID = "fx.blur"
EFFECT_NAME = "Blur"
EFFECT_CATEGORY = "distortion"

PARAMS: dict = {
    "blur": {
        "type": "float",
        "min": 0.0,
        "max": 5.0,
        "default": 0.0,
        "label": "Blur",
        "curve": "linear",
        "unit": "px",
        "description": "Box radius; a border of the same width is left untouched",
    }
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
    """Apply box blur. Stateless."""
    radius = math.floor(max(0.0, min(5.0, float(params.get("blur", 0.0)))))

    h, w = frame.shape[:2]
    if radius <= 0 or h <= 2 * radius or w <= 2 * radius:
        return frame.copy(), None

    blurred = box_mean(frame[:, :, :3], radius, radius)

    output = frame.copy()
    output[radius : h - radius, radius : w - radius, :3] = to_uint8(
        blurred[radius : h - radius, radius : w - radius]
    )
    return output, None
