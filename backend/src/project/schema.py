"""Settings file schema: serialize/deserialize saved effect settings (.vhs.json)."""

import json

from effects.presets import PRESETS, apply_preset
from effects.registry import param_schema, resolve_params

CURRENT_VERSION = "1.0.0"

REQUIRED_KEYS = {"version", "params"}
OPTIONAL_KEYS = {"preset", "canvas", "seed"}


def new_settings(
    preset: str | None = None,
    params: dict | None = None,
    canvas: tuple[int, int] | None = None,
    seed: int | None = None,
) -> dict:
    """Create a settings document. Params are stored fully resolved."""
    if preset is not None:
        resolved = apply_preset(preset, base=None)
        resolved = resolve_params(params, base=resolved)
    else:
        resolved = resolve_params(params)

    settings = {
        "version": CURRENT_VERSION,
        "preset": preset,
        "params": resolved,
        "canvas": None,
        "seed": seed,
    }
    if canvas is not None:
        settings["canvas"] = {"width": int(canvas[0]), "height": int(canvas[1])}
    return settings


def validate(settings: dict) -> list[str]:
    """Validate a settings dict. Returns list of error strings (empty = valid).

    Parameter values are not range-checked here; they are clamped on load.
    """
    errors = []

    if not isinstance(settings, dict):
        return ["Settings must be a JSON object"]

    missing = REQUIRED_KEYS - set(settings.keys())
    if missing:
        errors.append(f"Missing top-level keys: {sorted(missing)}")
        return errors  # Can't validate further

    unknown = set(settings.keys()) - REQUIRED_KEYS - OPTIONAL_KEYS
    if unknown:
        errors.append(f"Unknown top-level keys: {sorted(unknown)}")

    if not isinstance(settings["version"], str):
        errors.append("'version' must be a string")

    params = settings["params"]
    if not isinstance(params, dict):
        errors.append("'params' must be a dict")
    else:
        schema = param_schema()
        bad_keys = sorted(k for k in params if k not in schema)
        if bad_keys:
            errors.append(f"Unknown params: {bad_keys}")

    preset = settings.get("preset")
    if preset is not None and preset not in PRESETS:
        errors.append(f"Unknown preset: {preset!r}")

    canvas = settings.get("canvas")
    if canvas is not None:
        if not isinstance(canvas, dict) or set(canvas.keys()) != {"width", "height"}:
            errors.append("'canvas' must be {'width': int, 'height': int}")
        else:
            for key in ("width", "height"):
                value = canvas[key]
                if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                    errors.append(f"'canvas.{key}' must be a positive integer")

    seed = settings.get("seed")
    if seed is not None and (not isinstance(seed, int) or isinstance(seed, bool)):
        errors.append("'seed' must be an integer or null")

    return errors


def serialize(settings: dict) -> str:
    """Serialize settings to JSON string."""
    return json.dumps(settings, indent=2)


def deserialize(data: str) -> dict:
    """Deserialize JSON string to settings dict with params resolved.

    The preset (if any) is applied first, explicit params override it.

    Raises:
        ValueError: On invalid JSON or schema.
    """
    try:
        settings = json.loads(data)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON: {e}") from e

    errors = validate(settings)
    if errors:
        raise ValueError(f"Invalid settings: {'; '.join(errors)}")

    base = apply_preset(settings["preset"]) if settings.get("preset") else None
    settings["params"] = resolve_params(settings["params"], base=base)
    settings.setdefault("preset", None)
    settings.setdefault("canvas", None)
    settings.setdefault("seed", None)
    return settings
