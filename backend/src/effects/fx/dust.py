"""Dust: scattered dark specks with a radial falloff."""

import math

import numpy as np

from effects._sampling import to_uint8
from engine.determinism import make_rng

EFFECT_ID = "fx.dust"
EFFECT_NAME = "Dust"
EFFECT_CATEGORY = "texture"

PARAMS: dict = {
    "dust": {
        "type": "float",
        "min": 0.0,
        "max": 100.0,
        "default": 0.0,
        "label": "Dust",
        "curve": "linear",
        "unit": "%",
        "description": "Speck density (spots per 10k pixels scale with value / 10)",
    },
}


def spot_count(height: int, width: int, value: float) -> int:
    return math.floor((width * height / 10000.0) * (value / 10.0))


def apply(
    frame: np.ndarray,
    params: dict,
    state_in: dict | None = None,
    *,
    frame_index: int,
    seed: int,
    resolution: tuple[int, int],
) -> tuple[np.ndarray, dict | None]:
    """Darken random circular spots. Uses seeded RNG for determinism."""
    value = max(0.0, min(100.0, float(params.get("dust", 0.0))))

    h, w = frame.shape[:2]
    num_spots = spot_count(h, w, value) if frame.size else 0
    if num_spots <= 0:
        return frame.copy(), None

    rng = make_rng(seed)
    output = frame.copy()

    for _ in range(num_spots):
        x = int(rng.integers(0, w))
        y = int(rng.integers(0, h))
        size = int(rng.integers(1, 6))
        darkness = 0.3 + 0.4 * float(rng.random())

        y0, y1 = max(0, y - size), min(h, y + size + 1)
        x0, x1 = max(0, x - size), min(w, x + size + 1)
        dy = np.arange(y0, y1, dtype=np.float32)[:, np.newaxis] - y
        dx = np.arange(x0, x1, dtype=np.float32)[np.newaxis, :] - x
        dist = np.sqrt(dx * dx + dy * dy)
        factor = np.where(dist <= size, 1.0 - (dist / size) * darkness, 1.0)

        region = output[y0:y1, x0:x1, :3].astype(np.float32)
        output[y0:y1, x0:x1, :3] = to_uint8(region * factor[:, :, np.newaxis])

    return output, None
