"""Chroma Loss: washes colour out toward luma."""

import numpy as np

from effects._sampling import luma, to_uint8

EFFECT_ID = "fx.chroma_loss"
EFFECT_NAME = "Chroma Loss"
EFFECT_CATEGORY = "color"

PARAMS: dict = {
    "chromaLoss": {
        "type": "float",
        "min": 0.0,
        "max": 100.0,
        "default": 0.0,
        "label": "Chroma Loss",
        "curve": "linear",
        "unit": "%",
        "description": "Blend toward luma",
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
    loss = max(0.0, min(100.0, float(params.get("chromaLoss", 0.0)))) / 100.0

    if loss == 0.0 or frame.size == 0:
        return frame.copy(), None

    rgb = frame[:, :, :3].astype(np.float32)
    gray = luma(rgb)[:, :, np.newaxis]

    output = frame.copy()
    output[:, :, :3] = to_uint8(rgb * (1.0 - loss) + gray * loss)
    return output, None
