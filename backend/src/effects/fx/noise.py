"""Noise effect: independent colour noise per channel."""

import numpy as np

from effects._sampling import to_uint8
from engine.determinism import make_rng

EFFECT_ID = "fx.noise"
EFFECT_NAME = "Noise"
EFFECT_CATEGORY = "texture"

PARAMS: dict = {
    "noise": {
        "type": "float",
        "min": 0.0,
        "max": 100.0,
        "default": 0.0,
        "label": "Noise",
        "curve": "linear",
        "unit": "%",
        "description": "Uniform noise span per channel as a percentage of full scale",
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
    """Add colour noise. Uses seeded RNG for determinism."""
    value = max(0.0, min(100.0, float(params.get("noise", 0.0))))

    if value == 0.0 or frame.size == 0:
        return frame.copy(), None

    amount = value * 2.55
    rng = make_rng(seed)
    h, w = frame.shape[:2]

    # Generate noise for RGB channels only, preserve alpha
    noise = ((rng.random((h, w, 3)) - 0.5) * amount).astype(np.float32)
    output = frame.copy()
    output[:, :, :3] = to_uint8(frame[:, :, :3].astype(np.float32) + noise)
    return output, None
