"""Tape Age: faded sepia cast of old tape stock."""

import numpy as np

from effects._sampling import to_uint8

EFFECT_ID = "fx.tape_age"
EFFECT_NAME = "Tape Age"
EFFECT_CATEGORY = "color"

PARAMS: dict = {
    "tapeAge": {
        "type": "float",
        "min": 0.0,
        "max": 100.0,
        "default": 0.0,
        "label": "Tape Age",
        "curve": "linear",
        "unit": "%",
        "description": "Blend toward sepia",
    },
}

SEPIA = np.array(
    [
        [0.393, 0.769, 0.189],
        [0.349, 0.686, 0.168],
        [0.272, 0.534, 0.131],
    ],
    dtype=np.float32,
)


def apply(
    frame: np.ndarray,
    params: dict,
    state_in: dict | None = None,
    *,
    frame_index: int,
    seed: int,
    resolution: tuple[int, int],
) -> tuple[np.ndarray, dict | None]:
    factor = max(0.0, min(100.0, float(params.get("tapeAge", 0.0)))) / 100.0

    if factor == 0.0 or frame.size == 0:
        return frame.copy(), None

    rgb = frame[:, :, :3].astype(np.float32)
    sepia = rgb @ SEPIA.T

    output = frame.copy()
    output[:, :, :3] = to_uint8(rgb * (1.0 - factor) + sepia * factor)
    return output, None
