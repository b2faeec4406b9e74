"""Color correction: tone curve, brightness, contrast, saturation, grayscale, invert.

Always runs, right after emboss and TV glow. With neutral params it returns
the input unchanged.
"""

import math

import numpy as np

from effects._sampling import luma, to_uint8

EFFECT_ID = "util.color_correct"
EFFECT_NAME = "Color Correction"
EFFECT_CATEGORY = "util"

PARAMS: dict = {
    "blackPoint": {
        "type": "int",
        "min": 0,
        "max": 128,
        "default": 0,
        "label": "Black Point",
        "curve": "linear",
        "unit": "",
        "description": "Input level mapped to black",
    },
    "whitePoint": {
        "type": "int",
        "min": 127,
        "max": 255,
        "default": 255,
        "label": "White Point",
        "curve": "linear",
        "unit": "",
        "description": "Input level mapped to white",
    },
    "gamma": {
        "type": "float",
        "min": 0.1,
        "max": 3.0,
        "default": 1.0,
        "label": "Gamma",
        "curve": "logarithmic",
        "unit": "",
        "description": "Tone curve exponent (applied as 1/gamma)",
    },
    "brightness": {
        "type": "float",
        "min": -100.0,
        "max": 100.0,
        "default": 0.0,
        "label": "Brightness",
        "curve": "linear",
        "unit": "",
        "description": "Additive offset on every channel",
    },
    "contrast": {
        "type": "float",
        "min": -100.0,
        "max": 100.0,
        "default": 0.0,
        "label": "Contrast",
        "curve": "linear",
        "unit": "",
        "description": "Contrast curve around mid-grey",
    },
    "saturation": {
        "type": "float",
        "min": -100.0,
        "max": 100.0,
        "default": 0.0,
        "label": "Saturation",
        "curve": "linear",
        "unit": "%",
        "description": "Blend away from (positive) or toward (negative) luma",
    },
    "grayscale": {
        "type": "bool",
        "default": False,
        "label": "Grayscale",
        "description": "Collapse every pixel to its luma",
    },
    "invert": {
        "type": "bool",
        "default": False,
        "label": "Invert",
        "description": "Invert RGB channels",
    },
}


def _flag(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _number(params: dict, key: str, lo: float, hi: float) -> float:
    value = float(params.get(key, PARAMS[key]["default"]))
    if not math.isfinite(value):
        value = float(PARAMS[key]["default"])
    return max(lo, min(hi, value))


def _build_tone_lut(black_point: float, white_point: float, gamma: float) -> np.ndarray:
    """Build a 256-entry LUT for the black/white/gamma tone curve."""
    span = (white_point - black_point) or 1.0
    t = (np.arange(256, dtype=np.float64) - black_point) / span
    t = np.power(np.clip(t, 0.0, 1.0), 1.0 / gamma)
    # Round half up
    return np.floor(t * 255.0 + 0.5)


def contrast_factor(contrast: float) -> float:
    return (259.0 * (contrast + 255.0)) / (255.0 * (259.0 - contrast))


def apply(
    frame: np.ndarray,
    params: dict,
    state_in: dict | None = None,
    *,
    frame_index: int,
    seed: int,
    resolution: tuple[int, int],
) -> tuple[np.ndarray, dict | None]:
    """Apply base color correction. Stateless."""
    if frame.size == 0:
        return frame.copy(), None

    black_point = _number(params, "blackPoint", 0, 128)
    white_point = _number(params, "whitePoint", 127, 255)
    gamma = _number(params, "gamma", 0.1, 3.0)
    brightness = _number(params, "brightness", -100.0, 100.0)
    contrast = _number(params, "contrast", -100.0, 100.0)
    saturation = _number(params, "saturation", -100.0, 100.0)
    grayscale = _flag(params.get("grayscale", False))
    invert = _flag(params.get("invert", False))

    lut = _build_tone_lut(black_point, white_point, gamma)
    rgb = np.take(lut, frame[:, :, :3]).astype(np.float32)

    if brightness:
        rgb = rgb + brightness
    if contrast:
        rgb = contrast_factor(contrast) * (rgb - 128.0) + 128.0
    if saturation:
        gray = luma(rgb)[:, :, np.newaxis]
        sat = 1.0 + saturation / 100.0
        rgb = gray + sat * (rgb - gray)
    if grayscale:
        rgb = np.repeat(luma(rgb)[:, :, np.newaxis], 3, axis=2)
    if invert:
        rgb = 255.0 - rgb

    output = frame.copy()
    output[:, :, :3] = to_uint8(rgb)
    return output, None
