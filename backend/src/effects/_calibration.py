"""Stage parameter calibration: verifies every param produces visible change.

Each numeric field is swept across its range with every other field at its
neutral default, so the measured difference belongs to that field alone.

Run:  python -m effects._calibration   (with backend/src on the path)
"""

import sys

import numpy as np

from effects.registry import default_params, get, list_all

VALID_CURVES = {"linear", "logarithmic", "exponential", "s-curve"}

LEVELS = (0, 25, 50, 75, 100)


def _test_frame(w: int = 200, h: int = 150) -> np.ndarray:
    """Create a deterministic opaque test frame (RGBA uint8)."""
    rng = np.random.default_rng(42)
    frame = rng.integers(0, 256, (h, w, 4), dtype=np.uint8)
    frame[:, :, 3] = 255
    return frame


def _mean_diff(a: np.ndarray, b: np.ndarray) -> float:
    """Mean |a - b| over the colour channels."""
    delta = a[..., :3].astype(np.int16) - b[..., :3].astype(np.int16)
    return float(np.abs(delta).mean())


def calibrate_all(frame: np.ndarray | None = None) -> list[dict]:
    """Sweep every numeric param of every stage.

    Returns a list of result dicts:
      {effect_id, param, level_pct, value, mean_pixel_diff, curve, unit}
    """
    if frame is None:
        frame = _test_frame()
    h, w = frame.shape[:2]
    kw = {"frame_index": 0, "seed": 12345, "resolution": (w, h)}
    neutral = default_params()
    results: list[dict] = []

    for info in list_all():
        fn = get(info["id"])["fn"]
        ref_out, _ = fn(frame, dict(neutral), None, **kw)

        for key, pdef in info["params"].items():
            ptype = pdef.get("type")
            if ptype not in ("float", "int"):
                continue
            pmin, pmax = pdef["min"], pdef["max"]

            for level_pct in LEVELS:
                value = pmin + (pmax - pmin) * level_pct / 100.0
                if ptype == "int":
                    value = int(round(value))
                out, _ = fn(frame, dict(neutral, **{key: value}), None, **kw)
                results.append(
                    {
                        "effect_id": info["id"],
                        "param": key,
                        "level_pct": level_pct,
                        "value": value,
                        "mean_pixel_diff": round(_mean_diff(ref_out, out), 2),
                        "curve": pdef.get("curve", "linear"),
                        "unit": pdef.get("unit", ""),
                    }
                )

    return results


def find_dead_params(results: list[dict]) -> list[str]:
    """Params whose full sweep never changes a pixel. Returns 'stage.param' names."""
    peak: dict[str, float] = {}
    for r in results:
        name = f"{r['effect_id']}.{r['param']}"
        peak[name] = max(peak.get(name, 0.0), r["mean_pixel_diff"])
    return sorted(name for name, diff in peak.items() if diff == 0)


def validate_curves() -> list[str]:
    """Check that every param with a 'curve' field uses a valid curve name."""
    errors: list[str] = []
    for info in list_all():
        for key, pdef in info["params"].items():
            curve = pdef.get("curve")
            if curve is not None and curve not in VALID_CURVES:
                errors.append(
                    f"{info['id']}.{key}: invalid curve '{curve}' "
                    f"(valid: {sorted(VALID_CURVES)})"
                )
    return errors


def print_report(results: list[dict]) -> None:
    print(
        f"{'Stage':<28} {'Param':<20} {'Level%':>6} {'Value':>8} {'PixDiff':>8} {'Unit'}"
    )
    print("-" * 80)

    current = ""
    for r in results:
        eid = r["effect_id"] if r["effect_id"] != current else ""
        current = r["effect_id"]
        print(
            f"{eid:<28} {r['param']:<20} {r['level_pct']:>5}% "
            f"{r['value']:>8.2f} {r['mean_pixel_diff']:>8.2f} {r['unit']}"
        )

    dead = find_dead_params(results)
    print("\n--- Params with no visible effect ---")
    for name in dead:
        print(f"  WARNING: {name}")
    if not dead:
        print("  None.")


def main() -> int:
    bad = validate_curves()
    for line in bad:
        print(line, file=sys.stderr)
    if bad:
        return 1
    print_report(calibrate_all())
    return 0


if __name__ == "__main__":
    sys.exit(main())
