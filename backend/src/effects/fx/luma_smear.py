"""Luma Smear: vertical luma bleed, desaturating toward the smeared brightness."""

import math

import numpy as np

from effects._sampling import box_mean, luma, to_uint8

EFFECT_ID = "fx.luma_smear"
EFFECT_NAME = "Luma Smear"
EFFECT_CATEGORY = "texture"

PARAMS: dict = {
    "lumaSmear": {
        "type": "float",
        "min": 0.0,
        "max": 10.0,
        "default": 0.0,
        "label": "Luma Smear",
        "curve": "linear",
        "unit": "px",
        "description": "Vertical window radius; blend factor is amount / 10",
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
    """Luma smear. Stateless."""
    amount = max(0.0, min(10.0, float(params.get("lumaSmear", 0.0))))

    if amount == 0.0 or frame.size == 0:
        return frame.copy(), None

    radius = max(1, math.floor(amount))
    mix = min(1.0, amount / 10.0)

    rgb = frame[:, :, :3].astype(np.float32)
    smeared = box_mean(luma(rgb), radius, 0).astype(np.float32)[:, :, np.newaxis]

    output = frame.copy()
    output[:, :, :3] = to_uint8(rgb * (1.0 - mix) + smeared * mix)
    return output, None
