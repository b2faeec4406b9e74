"""Sharpen: 4-neighbour high-pass boost."""

import numpy as np

from effects._sampling import to_uint8

EFFECT_ID = "fx.sharpen"
EFFECT_NAME = "Sharpen"
EFFECT_CATEGORY = "enhance"

PARAMS: dict = {
    "sharpen": {
        "type": "float",
        "min": 0.0,
        "max": 3.0,
        "default": 0.0,
        "label": "Sharpen",
        "curve": "linear",
        "unit": "",
        "description": "High-pass gain over the up/down/left/right neighbours",
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
    """Sharpen interior pixels; the 1-pixel border is left untouched."""
    amount = max(0.0, min(3.0, float(params.get("sharpen", 0.0))))

    h, w = frame.shape[:2]
    if amount == 0.0 or h < 3 or w < 3:
        return frame.copy(), None

    snapshot = frame[:, :, :3].astype(np.float32)
    center = snapshot[1:-1, 1:-1]
    neighbours = (
        snapshot[:-2, 1:-1]
        + snapshot[2:, 1:-1]
        + snapshot[1:-1, :-2]
        + snapshot[1:-1, 2:]
    )

    output = frame.copy()
    output[1:-1, 1:-1, :3] = to_uint8(center + amount * (4.0 * center - neighbours))
    return output, None
