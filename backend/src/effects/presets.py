"""Named parameter bundles.

Each preset is a partial bundle; fields it does not name keep the base
value (neutral defaults unless a base is given).
"""

from effects.registry import resolve_params

PRESETS: dict[str, dict] = {
    "original": {
        "brightness": 0, "contrast": 0, "saturation": 0, "grayscale": False,
        "invert": False, "gamma": 1, "blackPoint": 0, "whitePoint": 255,
        "chromatic": 0, "scanlines": 0, "noise": 0, "blur": 0, "vignette": 0,
        "edgeWave": 0, "sharpen": 0, "colorBleedH": 0, "colorBleedV": 0,
        "chromaPhase": 0, "chromaLoss": 0, "videoNoise": 0, "lumaSmear": 0,
        "colorShift": 0, "burn": 0, "trackingNoise": 0, "emboss": 0,
        "tvGlow": 0, "tapeAge": 0, "dust": 0, "scratches": 0,
    },
    # Starting settings of the interactive converter
    "studio_default": {
        "chromatic": 2, "scanlines": 10, "sharpen": 0.5,
    },
    "classic_vhs": {
        "brightness": -5, "contrast": 15, "saturation": -20, "chromatic": 3,
        "scanlines": 25, "blur": 1, "vignette": 30, "sharpen": 0.8,
        "colorBleedH": 2, "chromaPhase": 2, "chromaLoss": 15, "videoNoise": 8,
        "burn": 15, "trackingNoise": 5, "tvGlow": 20,
        "tapeAge": 30, "dust": 20, "scratches": 15,
    },
    "camcorder_90s": {
        "brightness": 10, "contrast": 20, "saturation": 30, "chromatic": 2,
        "scanlines": 15, "blur": 0, "vignette": 20, "sharpen": 1.2,
        "colorBleedH": 1, "colorBleedV": 1, "chromaPhase": 1, "videoNoise": 5,
        "colorShift": 3, "burn": 10, "tvGlow": 15,
        "tapeAge": 10, "dust": 5, "scratches": 5,
    },
    "damaged_tape": {
        "brightness": -15, "contrast": -10, "saturation": -40, "chromatic": 8,
        "scanlines": 40, "blur": 2, "vignette": 50, "edgeWave": 2,
        "colorBleedH": 4, "colorBleedV": 3, "chromaPhase": 5, "chromaLoss": 60,
        "videoNoise": 30, "trackingNoise": 35, "colorShift": 10, "burn": 40,
        "emboss": 0.3, "tvGlow": 10,
        "tapeAge": 80, "dust": 60, "scratches": 50,
    },
    "dreamy_retro": {
        "brightness": 5, "contrast": 10, "saturation": -30, "gamma": 1.2,
        "chromatic": 5, "scanlines": 20, "blur": 2, "vignette": 70,
        "sharpen": 0.3, "lumaSmear": 5, "chromaLoss": 30, "videoNoise": 12,
        "burn": 50, "tvGlow": 60, "emboss": 0.5,
        "tapeAge": 40, "dust": 30, "scratches": 20,
    },
    "bw_vintage": {
        "brightness": -10, "contrast": 30, "saturation": 0, "grayscale": True,
        "gamma": 1.3, "scanlines": 35, "vignette": 60, "sharpen": 1.5,
        "videoNoise": 20, "burn": 30, "trackingNoise": 15, "tvGlow": 25,
        "tapeAge": 70, "dust": 50, "scratches": 40,
    },
}


def list_presets() -> list[str]:
    return list(PRESETS)


def get_preset(name: str) -> dict:
    """Return a copy of the raw (partial) preset bundle. Raises KeyError."""
    if name not in PRESETS:
        raise KeyError(f"Unknown preset: {name!r} (available: {list_presets()})")
    return dict(PRESETS[name])


def apply_preset(name: str, base: dict | None = None) -> dict:
    """Overlay a preset on ``base`` and return the full, clamped bundle."""
    return resolve_params(get_preset(name), base=base)
