"""Tracking Noise: one random horizontal jolt applied to every third row."""

import math

import numpy as np

from effects._sampling import sample_columns
from engine.determinism import make_rng

EFFECT_ID = "fx.tracking_noise"
EFFECT_NAME = "Tracking Noise"
EFFECT_CATEGORY = "distortion"

ROW_PERIOD = 3

PARAMS: dict = {
    "trackingNoise": {
        "type": "float",
        "min": 0.0,
        "max": 50.0,
        "default": 0.0,
        "label": "Tracking Noise",
        "curve": "linear",
        "unit": "px",
        "description": "Maximum magnitude of the per-frame row shift",
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
    """Shift rows where row % 3 == 0. Uses seeded RNG for determinism."""
    value = max(0.0, min(50.0, float(params.get("trackingNoise", 0.0))))

    if value == 0.0 or frame.size == 0:
        return frame.copy(), None

    rng = make_rng(seed)
    shift = math.floor(rng.uniform(-value, value))
    if shift == 0:
        return frame.copy(), None

    output = frame.copy()
    rows = frame[::ROW_PERIOD]
    for ch in range(3):
        output[::ROW_PERIOD, :, ch] = sample_columns(rows[:, :, ch], shift)
    return output, None
