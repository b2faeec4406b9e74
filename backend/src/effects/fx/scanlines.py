"""Scanlines: CRT-style darkening of every odd row."""

import numpy as np

from effects._sampling import to_uint8

EFFECT_ID = "fx.scanlines"
EFFECT_NAME = "Scanlines"
EFFECT_CATEGORY = "distortion"

PARAMS: dict = {
    "scanlines": {
        "type": "float",
        "min": 0.0,
        "max": 100.0,
        "default": 0.0,
        "label": "Scanlines",
        "curve": "linear",
        "unit": "%",
        "description": "Odd rows are scaled by 1 - value / 200",
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
    """Scanlines: horizontal dark rows like a CRT monitor."""
    value = max(0.0, min(100.0, float(params.get("scanlines", 0.0))))

    if value == 0.0 or frame.size == 0:
        return frame.copy(), None

    factor = 1.0 - value / 200.0
    output = frame.copy()
    output[1::2, :, :3] = to_uint8(frame[1::2, :, :3].astype(np.float32) * factor)
    return output, None
