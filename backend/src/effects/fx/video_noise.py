"""Video Noise: monochrome noise, one offset per pixel shared by R, G and B."""

import numpy as np

from effects._sampling import to_uint8
from engine.determinism import make_rng

EFFECT_ID = "fx.video_noise"
EFFECT_NAME = "Video Noise"
EFFECT_CATEGORY = "texture"

PARAMS: dict = {
    "videoNoise": {
        "type": "float",
        "min": 0.0,
        "max": 100.0,
        "default": 0.0,
        "label": "Video Noise",
        "curve": "linear",
        "unit": "%",
        "description": "Uniform noise span as a percentage of full scale",
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
    """Add luma-correlated noise. Uses seeded RNG for determinism."""
    value = max(0.0, min(100.0, float(params.get("videoNoise", 0.0))))

    if value == 0.0 or frame.size == 0:
        return frame.copy(), None

    amount = value * 2.55
    rng = make_rng(seed)
    h, w = frame.shape[:2]

    noise = ((rng.random((h, w)) - 0.5) * amount).astype(np.float32)
    rgb = frame[:, :, :3].astype(np.float32) + noise[:, :, np.newaxis]

    output = frame.copy()
    output[:, :, :3] = to_uint8(rgb)
    return output, None
