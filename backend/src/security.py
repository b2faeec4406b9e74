"""Security validation gates for the VHS converter."""

import os
import re
from pathlib import Path

# SEC-1: Input validation
MAX_INPUT_SIZE = 100 * 1024 * 1024  # 100 MB
ALLOWED_EXTENSIONS = {".gif", ".png", ".jpg", ".jpeg", ".bmp", ".webp"}

# SEC-2: Frame count cap
MAX_FRAME_COUNT = 5_000

# SEC-3: Canvas cap (pixels per frame)
MAX_CANVAS_PIXELS = 4096 * 4096


def _unsafe_name(name: str) -> bool:
    return ".." in name or "/" in name or "\\" in name or "\x00" in name


def validate_input(path: str) -> list[str]:
    """Validate a source file path. Returns list of errors (empty = valid).

    Checks (SEC-1):
    - File exists
    - Not a symlink
    - Extension in whitelist
    - File size <= 100 MB
    - Filename is safe (no path traversal)
    """
    errors: list[str] = []
    p = Path(path)

    # Symlink check before resolving
    if p.is_symlink():
        errors.append("Symlinks are not allowed")
        return errors

    if not p.is_file():
        errors.append(f"File not found: {path}")
        return errors

    ext = p.suffix.lower()
    if ext not in ALLOWED_EXTENSIONS:
        errors.append(
            f"Extension '{ext}' not allowed. Allowed: {sorted(ALLOWED_EXTENSIONS)}"
        )

    size = p.stat().st_size
    if size > MAX_INPUT_SIZE:
        size_mb = size / (1024 * 1024)
        errors.append(
            f"File too large: {size_mb:.1f} MB (max {MAX_INPUT_SIZE // (1024 * 1024)} MB)"
        )

    if _unsafe_name(p.name):
        errors.append(f"Unsafe filename: {p.name}")

    return errors


def validate_frame_count(count: int) -> list[str]:
    """Validate frame count against SEC-2 cap. Returns list of errors."""
    errors: list[str] = []
    if count > MAX_FRAME_COUNT:
        errors.append(f"Frame count {count} exceeds maximum {MAX_FRAME_COUNT} (SEC-2)")
    return errors


def validate_canvas(width: int, height: int) -> list[str]:
    """Validate target canvas size (SEC-3). Returns list of errors."""
    errors: list[str] = []
    if width <= 0 or height <= 0:
        errors.append(f"Canvas size must be positive, got {width}x{height}")
    elif width * height > MAX_CANVAS_PIXELS:
        errors.append(
            f"Canvas {width}x{height} exceeds maximum of {MAX_CANVAS_PIXELS} pixels (SEC-3)"
        )
    return errors


BLOCKED_OUTPUT_PREFIXES = (
    "/System",
    "/Library",
    "/usr",
    "/bin",
    "/sbin",
    "/etc",
    "/private/var",
    "/private/etc",
)


def validate_output_path(path: str, as_zip: bool = False) -> list[str]:
    """Validate an export target. Returns list of errors (empty = valid).

    ``path`` is a frame directory, or a .zip file when ``as_zip`` is set.
    Checks:
    - Not a system directory
    - Archive extension is .zip
    - Nearest existing ancestor is writable
    - Name is safe (no traversal)
    """
    errors: list[str] = []
    p = Path(path).resolve()

    for prefix in BLOCKED_OUTPUT_PREFIXES:
        if str(p).startswith(prefix):
            errors.append(f"Cannot write to system directory: {prefix}")
            return errors

    if as_zip and p.suffix.lower() != ".zip":
        errors.append(f"Archive extension '{p.suffix}' not allowed, expected .zip")

    if p.exists() and not as_zip and not p.is_dir():
        errors.append(f"Output path exists and is not a directory: {p}")

    ancestor = p.parent if as_zip else p
    while not ancestor.exists() and ancestor != ancestor.parent:
        ancestor = ancestor.parent
    if not os.access(str(ancestor), os.W_OK):
        errors.append(f"Output location is not writable: {ancestor}")

    if _unsafe_name(Path(path).name):
        errors.append(f"Unsafe output name: {Path(path).name}")

    return errors


# --- PII stripping for Sentry ---

_HOME = os.path.expanduser("~")
_USERNAME = os.path.basename(_HOME)
_USER_DIR = re.compile(r"/Users/[^/\s]+|/home/[^/\s]+|C:\\Users\\[^\\\s]+")
_SENSITIVE_KEYS = ("token", "auth", "key", "secret", "password", "dsn")
_SCRUBBED_SECTIONS = ("extra", "contexts", "tags")


def _scrub_text(text: str) -> str:
    text = text.replace(_HOME, "<HOME>")
    if _USERNAME:
        text = text.replace(_USERNAME, "<USER>")
    return _USER_DIR.sub("<REDACTED_PATH>", text)


def _scrub(value, redact_keys: bool):
    """Return a copy of ``value`` with paths scrubbed from every string.

    With ``redact_keys`` set, dict entries whose key looks like a credential
    are replaced outright.
    """
    if isinstance(value, str):
        return _scrub_text(value)
    if isinstance(value, dict):
        out = {}
        for k, v in value.items():
            if redact_keys and any(s in str(k).lower() for s in _SENSITIVE_KEYS):
                out[k] = "<REDACTED>"
            else:
                out[k] = _scrub(v, redact_keys)
        return out
    if isinstance(value, (list, tuple)):
        return [_scrub(v, redact_keys) for v in value]
    return value


def strip_pii(event: dict, hint: dict) -> dict:
    """Sentry before_send hook. Strips home paths and credential-like values."""
    cleaned = {}
    for section, body in event.items():
        cleaned[section] = _scrub(body, redact_keys=section in _SCRUBBED_SECTIONS)
    return cleaned
