"""TV Glow: soft CRT bloom from a wide box blur."""

import numpy as np

from effects._sampling import box_mean, to_uint8

EFFECT_ID = "fx.tv_glow"
EFFECT_NAME = "TV Glow"
EFFECT_CATEGORY = "enhance"

GLOW_RADIUS = 5

PARAMS: dict = {
    "tvGlow": {
        "type": "float",
        "min": 0.0,
        "max": 100.0,
        "default": 0.0,
        "label": "TV Glow",
        "curve": "linear",
        "unit": "%",
        "description": "Blend toward a radius-5 box blur",
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
    """TV glow. Stateless."""
    strength = max(0.0, min(100.0, float(params.get("tvGlow", 0.0)))) / 100.0

    if strength == 0.0 or frame.size == 0:
        return frame.copy(), None

    rgb = frame[:, :, :3].astype(np.float32)
    glow = box_mean(rgb, GLOW_RADIUS, GLOW_RADIUS)

    output = frame.copy()
    output[:, :, :3] = to_uint8(rgb * (1.0 - strength) + glow * strength)
    return output, None
