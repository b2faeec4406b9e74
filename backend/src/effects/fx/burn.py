"""Burn: warm corner fade, red falls off fastest."""

import numpy as np

from effects._sampling import to_uint8

EFFECT_ID = "fx.burn"
EFFECT_NAME = "Corner Burn"
EFFECT_CATEGORY = "color"

PARAMS: dict = {
    "burn": {
        "type": "float",
        "min": 0.0,
        "max": 100.0,
        "default": 0.0,
        "label": "Burn",
        "curve": "linear",
        "unit": "%",
        "description": "Corner fade strength",
    },
}

# Per-channel falloff weights (R, G, B)
CHANNEL_WEIGHTS = np.array([0.8, 0.6, 0.5], dtype=np.float32)


def fade_map(height: int, width: int, factor: float) -> np.ndarray:
    """Normalised distance from centre, scaled by factor. Shape (H, W)."""
    half_w, half_h = width / 2.0, height / 2.0
    dx = np.abs(np.arange(width, dtype=np.float32) - half_w) / half_w
    dy = np.abs(np.arange(height, dtype=np.float32) - half_h) / half_h
    return np.sqrt(dx[np.newaxis, :] ** 2 + dy[:, np.newaxis] ** 2) * factor


def apply(
    frame: np.ndarray,
    params: dict,
    state_in: dict | None = None,
    *,
    frame_index: int,
    seed: int,
    resolution: tuple[int, int],
) -> tuple[np.ndarray, dict | None]:
    factor = max(0.0, min(100.0, float(params.get("burn", 0.0)))) / 100.0

    if factor == 0.0 or frame.size == 0:
        return frame.copy(), None

    h, w = frame.shape[:2]
    fade = fade_map(h, w, factor)[:, :, np.newaxis]
    gains = 1.0 - fade * CHANNEL_WEIGHTS

    output = frame.copy()
    output[:, :, :3] = to_uint8(frame[:, :, :3].astype(np.float32) * gains)
    return output, None
