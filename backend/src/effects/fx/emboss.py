"""Emboss: directional relief blended over the original."""

import numpy as np
from scipy.ndimage import correlate

from effects._sampling import to_uint8

EFFECT_ID = "fx.emboss"
EFFECT_NAME = "Emboss"
EFFECT_CATEGORY = "enhance"

PARAMS: dict = {
    "emboss": {
        "type": "float",
        "min": 0.0,
        "max": 2.0,
        "default": 0.0,
        "label": "Emboss",
        "curve": "linear",
        "unit": "",
        "description": "Relief strength (blend factor is amount / 2)",
    },
}

KERNEL = np.array(
    [
        [-2.0, -1.0, 0.0],
        [-1.0, 1.0, 1.0],
        [0.0, 1.0, 2.0],
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
    """Emboss interior pixels; the 1-pixel border is left untouched."""
    amount = max(0.0, min(2.0, float(params.get("emboss", 0.0))))

    h, w = frame.shape[:2]
    if amount == 0.0 or h < 3 or w < 3:
        return frame.copy(), None

    snapshot = frame[:, :, :3].astype(np.float32)
    embossed = np.empty_like(snapshot)
    for ch in range(3):
        embossed[:, :, ch] = correlate(snapshot[:, :, ch], KERNEL, mode="nearest")
    embossed = np.clip(embossed + 128.0, 0, 255)

    blend = amount / 2.0
    blended = snapshot * (1.0 - blend) + embossed * blend

    output = frame.copy()
    output[1:-1, 1:-1, :3] = to_uint8(blended[1:-1, 1:-1])
    return output, None
