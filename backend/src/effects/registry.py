"""Stage registry: central lookup for all pipeline stages and their parameters."""

import logging
import math
from typing import Any, Callable

EffectFn = Callable[..., tuple[Any, dict | None]]

logger = logging.getLogger(__name__)

_REGISTRY: dict[str, dict] = {}

# Pipeline order. Later stages read the output of earlier ones.
STAGE_ORDER: list[str] = []


def register(effect_id: str, fn: EffectFn, params: dict, name: str, category: str):
    """Register a stage. Registration order defines pipeline order."""
    _REGISTRY[effect_id] = {
        "fn": fn,
        "params": params,
        "name": name,
        "category": category,
    }
    if effect_id not in STAGE_ORDER:
        STAGE_ORDER.append(effect_id)


def get(effect_id: str) -> dict | None:
    """Get stage info by ID."""
    return _REGISTRY.get(effect_id)


def list_all() -> list[dict]:
    """List all registered stages, in pipeline order, with metadata."""
    return [
        {
            "id": eid,
            "name": _REGISTRY[eid]["name"],
            "category": _REGISTRY[eid]["category"],
            "params": _REGISTRY[eid]["params"],
        }
        for eid in STAGE_ORDER
    ]


def param_schema() -> dict[str, dict]:
    """Merged schema of every bundle field, keyed by field name."""
    schema: dict[str, dict] = {}
    for eid in STAGE_ORDER:
        for key, pdef in _REGISTRY[eid]["params"].items():
            schema[key] = dict(pdef, stage=eid)
    return schema


def default_params() -> dict:
    """Neutral bundle: running the pipeline with it leaves a frame unchanged."""
    return {key: pdef["default"] for key, pdef in param_schema().items()}


def _coerce_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def clamp_value(pdef: dict, value):
    """Clamp one value into its schema range. Bad values fall back to the default."""
    ptype = pdef.get("type")
    if ptype == "bool":
        return _coerce_bool(value)

    try:
        number = float(value)
    except (TypeError, ValueError):
        return pdef["default"]
    if not math.isfinite(number):
        return pdef["default"]

    number = max(pdef["min"], min(pdef["max"], number))
    if ptype == "int":
        return int(round(number))
    return number


def resolve_params(overrides: dict | None = None, base: dict | None = None) -> dict:
    """Build a full, clamped parameter bundle.

    Starts from ``base`` (defaults when omitted), overlays ``overrides`` and
    clamps every field into range. Out-of-range values are clamped, never
    rejected; unknown keys are ignored.
    """
    schema = param_schema()
    resolved = default_params()

    for source in (base, overrides):
        if not source:
            continue
        for key, value in source.items():
            pdef = schema.get(key)
            if pdef is None:
                logger.debug("Ignoring unknown parameter %s", key)
                continue
            resolved[key] = clamp_value(pdef, value)

    return resolved


def _auto_register():
    """Import and register all built-in stages in pipeline order."""
    from effects.fx import (
        emboss,
        tv_glow,
        sharpen,
        edge_wave,
        luma_smear,
        color_bleed,
        chroma_phase,
        chroma_loss,
        video_noise,
        vignette,
        chromatic_aberration,
        blur,
        noise,
        scanlines,
        color_shift,
        burn,
        tracking_noise,
        tape_age,
        dust,
        scratches,
    )
    from effects.util import color_correct

    # Emboss and glow act on the source before the base color correction
    for mod in [
        emboss,
        tv_glow,
        color_correct,
        sharpen,
        edge_wave,
        luma_smear,
        color_bleed,
        chroma_phase,
        chroma_loss,
        video_noise,
        vignette,
        chromatic_aberration,
        blur,
        noise,
        scanlines,
        color_shift,
        burn,
        tracking_noise,
        tape_age,
        dust,
        scratches,
    ]:
        register(
            mod.EFFECT_ID, mod.apply, mod.PARAMS, mod.EFFECT_NAME, mod.EFFECT_CATEGORY
        )


_auto_register()
