import argparse
import logging
import os
import sys
from pathlib import Path

import sentry_sdk

from _version import __version__
from diagnostics import init_diagnostics
from effects.presets import apply_preset, list_presets
from effects.registry import param_schema, resolve_params
from engine.export import default_workers, prepare_frames, render_frames
from engine.pipeline import apply_pipeline
from media.writer import encode_png, write_frames, write_zip
from project.schema import deserialize
from security import (
    strip_pii,
    validate_canvas,
    validate_frame_count,
    validate_input,
    validate_output_path,
)

logger = logging.getLogger(__name__)

# Consent-gated Sentry init
_consent_path = os.path.expanduser("~/.vhs-converter/telemetry_consent")
_dsn = ""
if os.path.exists(_consent_path) and Path(_consent_path).read_text().strip() == "yes":
    _dsn = os.environ.get("SENTRY_DSN", "")

sentry_sdk.init(
    dsn=_dsn,
    release=f"vhs-converter@{__version__}",
    environment=os.environ.get("SENTRY_ENV", "development"),
    traces_sample_rate=0.1,
    before_send=strip_pii,
    max_breadcrumbs=50,
)


class CLIError(Exception):
    """User-facing failure; message is printed and the process exits 1."""


def parse_overrides(pairs: list[str] | None) -> dict:
    """Parse ``key=value`` pairs into a params dict.

    Values are coerced by the schema type of the key; clamping happens later
    in resolve_params.
    """
    schema = param_schema()
    overrides: dict = {}
    for pair in pairs or []:
        key, sep, raw = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise CLIError(f"Expected key=value, got {pair!r}")
        pdef = schema.get(key)
        if pdef is None:
            raise CLIError(f"Unknown parameter: {key}")
        raw = raw.strip()
        try:
            if pdef["type"] == "bool":
                overrides[key] = raw.lower() in ("1", "true", "yes", "on")
            elif pdef["type"] == "int":
                overrides[key] = int(float(raw))
            else:
                overrides[key] = float(raw)
        except ValueError as e:
            raise CLIError(f"Invalid value for {key}: {raw!r}") from e
    return overrides


def build_params(args: argparse.Namespace) -> tuple[dict, int | None, tuple]:
    """Resolve the parameter bundle: settings file, then preset, then --set.

    Returns (params, seed, (width, height)) where unset values are None.
    """
    params = resolve_params()
    seed = None
    width = height = None

    if args.settings:
        try:
            settings = deserialize(Path(args.settings).read_text())
        except OSError as e:
            raise CLIError(f"Cannot read settings: {e}") from e
        except ValueError as e:
            raise CLIError(str(e)) from e
        params = settings["params"]
        seed = settings["seed"]
        if settings["canvas"]:
            width = settings["canvas"]["width"]
            height = settings["canvas"]["height"]

    if args.preset:
        try:
            params = apply_preset(args.preset, base=params)
        except KeyError as e:
            raise CLIError(
                f"Unknown preset {args.preset!r}. Available: {', '.join(list_presets())}"
            ) from e

    params = resolve_params(parse_overrides(args.set), base=params)

    if args.seed is not None:
        seed = args.seed
    if args.width is not None:
        width = args.width
    if args.height is not None:
        height = args.height
    return params, seed, (width, height)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vhs-render",
        description="Apply a degraded analog video look to an image or animated GIF.",
    )
    parser.add_argument("input", help="Source image or GIF")
    parser.add_argument(
        "-o",
        "--output",
        required=True,
        help="Output directory for PNG frames (or .zip with --zip, .png with --frame)",
    )
    parser.add_argument("--preset", help=f"Preset name ({', '.join(list_presets())})")
    parser.add_argument("--settings", help="Saved settings file (.vhs.json)")
    parser.add_argument(
        "--set",
        action="append",
        metavar="KEY=VALUE",
        help="Override one parameter (repeatable)",
    )
    parser.add_argument("--seed", type=int, help="Run seed for reproducible output")
    parser.add_argument("--width", type=int, help="Target width in pixels")
    parser.add_argument("--height", type=int, help="Target height in pixels")
    parser.add_argument(
        "--workers", type=int, default=None, help="Render threads (default: CPU count)"
    )
    parser.add_argument("--zip", action="store_true", help="Write a single .zip archive")
    parser.add_argument(
        "--frame", type=int, default=None, help="Render only this frame index (preview)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log to stderr")
    parser.add_argument("--version", action="version", version=__version__)
    return parser


def run(args: argparse.Namespace) -> list[Path]:
    """Execute one conversion. Returns the written paths.

    Raises:
        CLIError: On any validation failure.
    """
    errors = validate_input(args.input)
    if errors:
        raise CLIError("; ".join(errors))

    params, seed, (width, height) = build_params(args)

    if width is not None or height is not None:
        errors = validate_canvas(
            1 if width is None else width, 1 if height is None else height
        )
        if errors:
            raise CLIError("; ".join(errors))

    single = args.frame is not None
    if not single:
        errors = validate_output_path(args.output, as_zip=args.zip)
        if errors:
            raise CLIError("; ".join(errors))

    try:
        frames = prepare_frames(args.input, width, height)
    except ValueError as e:
        raise CLIError(str(e)) from e

    errors = validate_frame_count(len(frames))
    if errors:
        raise CLIError("; ".join(errors))
    h, w = frames[0].shape[:2]
    errors = validate_canvas(w, h)
    if errors:
        raise CLIError("; ".join(errors))

    if single:
        if not 0 <= args.frame < len(frames):
            raise CLIError(f"Frame {args.frame} out of range (0..{len(frames) - 1})")
        out = Path(args.output)
        if out.suffix.lower() != ".png":
            raise CLIError("--frame output must be a .png file")
        # Same frame_index as a full render, so the preview matches that frame
        preview = apply_pipeline(
            frames[args.frame], params, seed=seed, frame_index=args.frame
        )
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_bytes(encode_png(preview))
        return [out]

    workers = args.workers or default_workers()
    logger.info(
        "Rendering %d frames at %dx%d with %d workers", len(frames), w, h, workers
    )
    rendered = render_frames(frames, params, seed=seed, max_workers=workers)
    if args.zip:
        return [write_zip(rendered, args.output)]
    return write_frames(rendered, args.output)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    init_diagnostics(console=args.verbose)
    try:
        written = run(args)
    except CLIError as e:
        logger.warning("Conversion rejected: %s", e)
        print(f"error: {e}", file=sys.stderr)
        return 1
    for path in written:
        print(path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
