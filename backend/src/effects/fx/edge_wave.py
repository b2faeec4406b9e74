"""Edge Wave: sinusoidal per-row horizontal wobble."""

import numpy as np

from effects._sampling import sample_columns

EFFECT_ID = "fx.edge_wave"
EFFECT_NAME = "Edge Wave"
EFFECT_CATEGORY = "distortion"

PARAMS: dict = {
    "edgeWave": {
        "type": "float",
        "min": 0.0,
        "max": 3.0,
        "default": 0.0,
        "label": "Edge Wave",
        "curve": "linear",
        "unit": "",
        "description": "Row offset is floor(sin(row * 0.1) * intensity * 5) px",
    },
}


def row_offsets(height: int, intensity: float) -> np.ndarray:
    """Integer column offset per row, shape (H, 1)."""
    rows = np.arange(height, dtype=np.float64)
    offsets = np.floor(np.sin(rows * 0.1) * intensity * 5.0).astype(np.intp)
    return offsets[:, np.newaxis]


def apply(
    frame: np.ndarray,
    params: dict,
    state_in: dict | None = None,
    *,
    frame_index: int,
    seed: int,
    resolution: tuple[int, int],
) -> tuple[np.ndarray, dict | None]:
    """Shift each row by its wave offset, clamping samples at the row edges."""
    intensity = max(0.0, min(3.0, float(params.get("edgeWave", 0.0))))

    if intensity == 0.0 or frame.size == 0:
        return frame.copy(), None

    offsets = row_offsets(frame.shape[0], intensity)
    output = frame.copy()
    for ch in range(3):
        output[:, :, ch] = sample_columns(frame[:, :, ch], offsets)
    return output, None
