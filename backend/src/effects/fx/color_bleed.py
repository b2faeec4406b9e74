"""Color Bleed: 1-D box average along rows, then along columns."""

import math

import numpy as np

from effects._sampling import box_mean, to_uint8

EFFECT_ID = "fx.color_bleed"
EFFECT_NAME = "Color Bleed"
EFFECT_CATEGORY = "texture"

PARAMS: dict = {
    "colorBleedH": {
        "type": "float",
        "min": 0.0,
        "max": 5.0,
        "default": 0.0,
        "label": "Color Bleed H",
        "curve": "linear",
        "unit": "px",
        "description": "Horizontal averaging radius",
    },
    "colorBleedV": {
        "type": "float",
        "min": 0.0,
        "max": 5.0,
        "default": 0.0,
        "label": "Color Bleed V",
        "curve": "linear",
        "unit": "px",
        "description": "Vertical averaging radius",
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
    """Horizontal pass first, vertical pass on its result. Each radius < 1 is a no-op."""
    radius_h = math.floor(max(0.0, min(5.0, float(params.get("colorBleedH", 0.0)))))
    radius_v = math.floor(max(0.0, min(5.0, float(params.get("colorBleedV", 0.0)))))

    output = frame.copy()
    if frame.size == 0:
        return output, None

    if radius_h > 0:
        output[:, :, :3] = to_uint8(box_mean(output[:, :, :3], 0, radius_h))
    if radius_v > 0:
        output[:, :, :3] = to_uint8(box_mean(output[:, :, :3], radius_v, 0))
    return output, None
