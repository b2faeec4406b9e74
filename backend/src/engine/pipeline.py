"""Effect pipeline: applies the fixed-order stage chain to one frame.

Stages run in registry order: emboss and TV glow on the source, then base
color correction, then the rest with tape age, dust and scratches last. Each stage reads the previous stage's output.

Stages that fail DISABLE_THRESHOLD times in a row are skipped until
reset_stage_health(); per-stage wall time is kept in a rolling window.
Both trackers are shared by every thread that calls apply_pipeline.
"""

import logging
import threading
import time
from collections import deque

import numpy as np
import sentry_sdk

from effects import registry
from engine.container import StageContainer
from engine.determinism import new_run_seed

logger = logging.getLogger(__name__)

# Per-stage timing threshold (milliseconds)
STAGE_WARN_MS = 250

# Consecutive failures before a stage is skipped
DISABLE_THRESHOLD = 3

TIMING_WINDOW = 100


class _StageHealth:
    """Consecutive-failure counts and the set of auto-disabled stages."""

    def __init__(self):
        self._lock = threading.Lock()
        self.failures: dict[str, int] = {}
        self.disabled: set[str] = set()

    def check(self, stage_id: str) -> int | None:
        """Prior failure count, or None when the stage is disabled."""
        with self._lock:
            if stage_id in self.disabled:
                return None
            return self.failures.get(stage_id, 0)

    def failed(self, stage_id: str) -> bool:
        """Count a failure. True only on the call that disables the stage."""
        with self._lock:
            count = self.failures.get(stage_id, 0) + 1
            self.failures[stage_id] = count
            if count < DISABLE_THRESHOLD or stage_id in self.disabled:
                return False
            self.disabled.add(stage_id)
            return True

    def succeeded(self, stage_id: str):
        with self._lock:
            self.failures[stage_id] = 0

    def snapshot(self) -> dict:
        with self._lock:
            return {
                "failure_counts": dict(self.failures),
                "disabled_stages": sorted(self.disabled),
            }

    def reset(self, stage_id: str | None = None):
        with self._lock:
            if stage_id is None:
                self.failures.clear()
                self.disabled.clear()
            else:
                self.failures.pop(stage_id, None)
                self.disabled.discard(stage_id)


class _StageTimer:
    """Last TIMING_WINDOW wall times (ms) per stage."""

    def __init__(self):
        self._lock = threading.Lock()
        self._samples: dict[str, deque] = {}

    def add(self, stage_id: str, elapsed_ms: float):
        with self._lock:
            window = self._samples.setdefault(stage_id, deque(maxlen=TIMING_WINDOW))
            window.append(elapsed_ms)

    def stats(self) -> dict[str, dict]:
        with self._lock:
            copies = {sid: sorted(w) for sid, w in self._samples.items()}
        return {sid: _summarize(s) for sid, s in copies.items()}

    def clear(self):
        with self._lock:
            self._samples.clear()


def _summarize(ordered: list[float]) -> dict:
    n = len(ordered)
    return {
        "p50": ordered[n // 2] if n else 0,
        # p95 is meaningless on a handful of samples
        "p95": ordered[int(n * 0.95)] if n >= 20 else None,
        "max": ordered[-1] if n else 0,
        "samples": n,
    }


_health = _StageHealth()
_timer = _StageTimer()


def get_stage_health() -> dict:
    """Failure counts and disabled stage ids."""
    return _health.snapshot()


def reset_stage_health(stage_id: str | None = None):
    """Re-enable one stage, or all of them."""
    _health.reset(stage_id)


def record_timing(stage_id: str, elapsed_ms: float):
    _timer.add(stage_id, elapsed_ms)


def get_stage_stats() -> dict[str, dict]:
    """p50/p95/max and sample count per stage."""
    return _timer.stats()


def flush_timing():
    _timer.clear()


def _check_frame(frame: np.ndarray):
    if not isinstance(frame, np.ndarray):
        raise ValueError(f"Expected ndarray frame, got {type(frame).__name__}")
    if frame.ndim != 3 or frame.shape[2] != 4:
        raise ValueError(f"Expected RGBA frame (H, W, 4), got shape {frame.shape}")
    if frame.dtype != np.uint8:
        raise ValueError(f"Expected uint8 frame, got {frame.dtype}")


def apply_pipeline(
    frame: np.ndarray,
    params: dict | None = None,
    *,
    seed: int | None = None,
    frame_index: int = 0,
) -> np.ndarray:
    """Apply the full stage chain to one RGBA frame.

    Args:
        frame:       Input RGBA frame (H, W, 4) uint8. Never mutated.
        params:      Full or partial parameter bundle. Missing fields take
                     their neutral default; values are clamped into range.
        seed:        Run seed. None draws a fresh one, so randomized stages
                     differ call to call. A fixed seed reproduces the output.
        frame_index: Frame number (0-based), mixed into each stage's seed.

    Returns:
        New RGBA frame with the same shape as the input.

    Raises:
        ValueError: If frame is not an (H, W, 4) uint8 array.
    """
    _check_frame(frame)

    if frame.size == 0:
        return frame.copy()

    bundle = registry.resolve_params(params)
    run_seed = new_run_seed() if seed is None else int(seed)

    output = frame.copy()

    for position, stage_id in enumerate(registry.STAGE_ORDER):
        prior_failures = _health.check(stage_id)
        if prior_failures is None:
            logger.debug("Skipping auto-disabled stage %s", stage_id)
            continue
        if prior_failures:
            sentry_sdk.add_breadcrumb(
                category="stage",
                message=f"{stage_id} running after {prior_failures} failure(s)",
                data={"chain_position": position, "frame_index": frame_index},
                level="warning",
            )

        container = StageContainer(registry.get(stage_id)["fn"], stage_id)
        started = time.monotonic()
        output = container.process(
            output, bundle, frame_index=frame_index, run_seed=run_seed
        )
        elapsed_ms = (time.monotonic() - started) * 1000
        _timer.add(stage_id, elapsed_ms)

        if container.last_error is None:
            _health.succeeded(stage_id)
        elif _health.failed(stage_id):
            logger.warning(
                "Stage %s disabled after %d consecutive failures",
                stage_id,
                DISABLE_THRESHOLD,
            )

        if elapsed_ms > STAGE_WARN_MS:
            logger.warning(
                "Stage %s took %.0fms on frame %d (warn at %dms)",
                stage_id,
                elapsed_ms,
                frame_index,
                STAGE_WARN_MS,
            )

    return output
