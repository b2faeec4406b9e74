"""Vignette: radial darkening proportional to distance from centre."""

import math

import numpy as np

from effects._sampling import to_uint8

EFFECT_ID = "fx.vignette"
EFFECT_NAME = "Vignette"
EFFECT_CATEGORY = "color"

PARAMS: dict = {
    "vignette": {
        "type": "float",
        "min": 0.0,
        "max": 100.0,
        "default": 0.0,
        "label": "Vignette",
        "curve": "linear",
        "unit": "%",
        "description": "Darkening at the farthest corner",
    },
}


def vignette_mask(height: int, width: int, strength: float) -> np.ndarray:
    """Multiplier per pixel: 1 - (dist / max_dist) * strength."""
    cx, cy = width / 2.0, height / 2.0
    max_dist = math.sqrt(cx * cx + cy * cy)
    dy = np.arange(height, dtype=np.float32)[:, np.newaxis] - cy
    dx = np.arange(width, dtype=np.float32)[np.newaxis, :] - cx
    dist = np.sqrt(dx * dx + dy * dy)
    return 1.0 - (dist / max_dist) * strength


def apply(
    frame: np.ndarray,
    params: dict,
    state_in: dict | None = None,
    *,
    frame_index: int,
    seed: int,
    resolution: tuple[int, int],
) -> tuple[np.ndarray, dict | None]:
    strength = max(0.0, min(100.0, float(params.get("vignette", 0.0)))) / 100.0

    if strength == 0.0 or frame.size == 0:
        return frame.copy(), None

    h, w = frame.shape[:2]
    mask = vignette_mask(h, w, strength)[:, :, np.newaxis]

    output = frame.copy()
    output[:, :, :3] = to_uint8(frame[:, :, :3].astype(np.float32) * mask)
    return output, None
