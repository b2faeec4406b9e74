"""Diagnostics for render runs.

Two layers are installed by init_diagnostics():
  - a JSON-lines log under the app directory, rotated by size and pruned by age
  - faulthandler writing native crash tracebacks to its own file

Stage failures carry ``stage`` and ``frame_index`` extras so a bad frame can
be traced back to the stage that produced it.
"""

import faulthandler
import json
import logging
import logging.handlers
import os
import sys
import time
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)

APP_DIR = "~/.vhs-converter"
LOG_NAME = "vhs.log"
FAULT_LOG_NAME = "vhs_fault.log"

MAX_LOG_AGE_DAYS = 7
MAX_LOG_BYTES = 10_000_000
LOG_BACKUPS = 7

# LogRecord attributes copied into the JSON entry when a caller supplies them
CONTEXT_FIELDS = ("stage", "frame_index")


def _app_root() -> Path:
    return Path(os.path.expanduser(APP_DIR))


def _validate_log_dir(env_dir: str) -> str:
    """Resolve the log directory. Paths outside the app directory fall back to the default."""
    default = str(_app_root() / "logs")
    if not env_dir:
        return default
    candidate = Path(os.path.realpath(env_dir))
    root = Path(os.path.realpath(_app_root()))
    if candidate != root and root not in candidate.parents:
        logger.warning("APP_LOG_DIR %s is outside %s, using default", env_dir, root)
        return default
    return str(candidate)


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                entry[field] = value
        exc = record.exc_info[1] if record.exc_info else None
        if exc is not None:
            entry["exception"] = {
                "type": type(exc).__name__,
                "traceback": self.formatException(record.exc_info),
            }
        return json.dumps(entry, default=str)


def _cleanup_old_logs(log_dir: str):
    """Remove rotated logs whose mtime is older than MAX_LOG_AGE_DAYS."""
    oldest_allowed = time.time() - MAX_LOG_AGE_DAYS * 86400
    try:
        stale = [
            p
            for p in Path(log_dir).glob(f"{LOG_NAME}*")
            if p.stat().st_mtime < oldest_allowed
        ]
        for p in stale:
            p.unlink(missing_ok=True)
    except OSError:
        logger.debug("Log cleanup skipped for %s", log_dir)


def setup_structured_logging(log_dir: str | None = None, console: bool = False) -> str:
    """Attach the rotating JSON handler (and optionally a stderr handler) to the root logger.

    The level comes from APP_LOG_LEVEL (default INFO). Returns the directory
    actually used.
    """
    target = _validate_log_dir(log_dir or os.environ.get("APP_LOG_DIR", ""))
    Path(target).mkdir(mode=0o700, parents=True, exist_ok=True)

    file_handler = logging.handlers.RotatingFileHandler(
        os.path.join(target, LOG_NAME),
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
    )
    file_handler.setFormatter(JSONFormatter())
    handlers: list[logging.Handler] = [file_handler]

    if console:
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setFormatter(
            logging.Formatter("%(levelname)s %(name)s: %(message)s")
        )
        handlers.append(stderr_handler)

    level_name = os.environ.get("APP_LOG_LEVEL", "INFO").upper()
    root = logging.getLogger()
    root.setLevel(getattr(logging, level_name, logging.INFO))
    for h in handlers:
        root.addHandler(h)

    _cleanup_old_logs(target)
    return target


def setup_faulthandler(log_dir: str):
    """Send native crash tracebacks to FAULT_LOG_NAME.

    Kept out of the rotating log: rotation would close the descriptor
    faulthandler writes to.
    """
    path = os.path.join(log_dir, FAULT_LOG_NAME)
    try:
        stream = open(path, "a", buffering=1)  # noqa: SIM115
        os.chmod(path, 0o600)
        faulthandler.enable(file=stream, all_threads=True)
    except OSError as e:
        print(f"WARNING: faulthandler disabled ({e})", file=sys.stderr)


def init_diagnostics(console: bool = False) -> str:
    """Install logging and faulthandler. Returns the log directory."""
    log_dir = setup_structured_logging(console=console)
    setup_faulthandler(log_dir)
    logger.info("Diagnostics ready in %s", log_dir)
    return log_dir
