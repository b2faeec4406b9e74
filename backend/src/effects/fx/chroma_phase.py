"""Chroma Phase: red sampled from the right, blue from the left."""

import math

import numpy as np

from effects._sampling import sample_columns

EFFECT_ID = "fx.chroma_phase"
EFFECT_NAME = "Chroma Phase"
EFFECT_CATEGORY = "distortion"

PARAMS: dict = {
    "chromaPhase": {
        "type": "float",
        "min": 0.0,
        "max": 10.0,
        "default": 0.0,
        "label": "Chroma Phase",
        "curve": "linear",
        "unit": "px",
        "description": "R/B phase error in whole pixels",
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
    """Chroma phase error. Green is untouched."""
    shift = math.floor(max(0.0, min(10.0, float(params.get("chromaPhase", 0.0)))))

    if shift <= 0 or frame.size == 0:
        return frame.copy(), None

    output = frame.copy()
    output[:, :, 0] = sample_columns(frame[:, :, 0], shift)
    output[:, :, 2] = sample_columns(frame[:, :, 2], -shift)
    return output, None
