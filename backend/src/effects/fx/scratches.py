"""Scratches: random bright or dark film-style line scratches."""

import math

import numpy as np

from effects._sampling import to_uint8
from engine.determinism import make_rng

EFFECT_ID = "fx.scratches"
EFFECT_NAME = "Scratches"
EFFECT_CATEGORY = "texture"

PARAMS: dict = {
    "scratches": {
        "type": "float",
        "min": 0.0,
        "max": 100.0,
        "default": 0.0,
        "label": "Scratches",
        "curve": "linear",
        "unit": "%",
        "description": "Scratch count is floor(value / 10 * 3)",
    },
}

VERTICAL_THRESHOLD = 0.3
BRIGHT_GAIN = 1.3
DARK_GAIN = 0.7


def scratch_count(value: float) -> int:
    return math.floor((value / 10.0) * 3)


def apply(
    frame: np.ndarray,
    params: dict,
    state_in: dict | None = None,
    *,
    frame_index: int,
    seed: int,
    resolution: tuple[int, int],
) -> tuple[np.ndarray, dict | None]:
    """Draw 1-px scratches. Uses seeded RNG for determinism."""
    value = max(0.0, min(100.0, float(params.get("scratches", 0.0))))

    num_scratches = scratch_count(value)
    if num_scratches <= 0 or frame.size == 0:
        return frame.copy(), None

    rng = make_rng(seed)
    output = frame.copy()
    h, w = frame.shape[:2]

    for _ in range(num_scratches):
        vertical = float(rng.random()) > VERTICAL_THRESHOLD
        gain = BRIGHT_GAIN if float(rng.random()) > 0.5 else DARK_GAIN

        if vertical:
            x = int(float(rng.random()) * w)
            start = int(float(rng.random()) * h * 0.5)
            length = int(h * 0.3 + float(rng.random()) * h * 0.4)
            line = (slice(start, min(h, start + length)), x)
        else:
            y = int(float(rng.random()) * h)
            start = int(float(rng.random()) * w * 0.3)
            length = int(w * 0.4 + float(rng.random()) * w * 0.3)
            line = (y, slice(start, min(w, start + length)))

        segment = output[line[0], line[1], :3].astype(np.float32)
        output[line[0], line[1], :3] = to_uint8(segment * gain)

    return output, None
