"""Stage container: wraps a pure stage function with seeding and output checks."""

import logging
import math

import numpy as np
import sentry_sdk

from engine.determinism import derive_seed

logger = logging.getLogger(__name__)


def _capture_with_context(e: Exception, stage_id: str, extra: dict):
    """Report to Sentry, grouped per stage and exception type."""
    with sentry_sdk.new_scope() as scope:
        scope.set_tag("stage_id", stage_id)
        scope.fingerprint = ["stage-crash", stage_id, type(e).__name__]
        scope.set_context("stage", extra)
        sentry_sdk.capture_exception(e, scope=scope)


def _finite_params(params: dict) -> dict:
    """Drop NaN/Inf floats so the stage falls back to its default for them."""
    return {
        k: v
        for k, v in params.items()
        if not isinstance(v, float) or math.isfinite(v)
    }


def _checked_output(out, frame: np.ndarray) -> np.ndarray:
    """Coerce a stage result to the input's shape and dtype.

    Raises:
        TypeError: Result is not an ndarray.
        ValueError: Result shape differs from the input.
    """
    if not isinstance(out, np.ndarray):
        raise TypeError(f"Stage returned {type(out).__name__}, expected ndarray")
    if out.shape != frame.shape:
        raise ValueError(f"Stage returned shape {out.shape}, expected {frame.shape}")
    if out.dtype != np.uint8:
        out = np.clip(out, 0, 255).astype(np.uint8)
    return out


class StageContainer:
    """Runs one stage: seed, call, check.

    A failing stage never raises out of process(); the error is kept on
    ``last_error`` and a copy of the input frame is returned instead.
    """

    def __init__(self, stage_fn, stage_id: str):
        self.stage_fn = stage_fn
        self.stage_id = stage_id
        self.last_error: Exception | None = None

    def _fail(self, e: Exception, what: str, frame: np.ndarray, ctx: dict) -> np.ndarray:
        self.last_error = e
        _capture_with_context(e, self.stage_id, ctx)
        logger.error(
            "Stage %s %s on frame %d: %s",
            self.stage_id,
            what,
            ctx["frame_index"],
            type(e).__name__,
            extra={"stage": self.stage_id, "frame_index": ctx["frame_index"]},
        )
        logger.debug("Stage %s detail: %s", self.stage_id, e)
        return frame.copy()

    def process(
        self,
        frame: np.ndarray,
        params: dict,
        *,
        frame_index: int,
        run_seed: int,
    ) -> np.ndarray:
        self.last_error = None
        h, w = frame.shape[:2]
        seed = derive_seed(run_seed, self.stage_id, frame_index)
        stage_params = _finite_params(params)

        # Parameter names only; values stay out of error reports
        ctx = {
            "frame_index": frame_index,
            "param_names": sorted(stage_params),
            "seed": seed,
            "frame_shape": list(frame.shape),
        }

        try:
            out, _ = self.stage_fn(
                frame,
                stage_params,
                None,
                frame_index=frame_index,
                seed=seed,
                resolution=(w, h),
            )
        except Exception as e:
            return self._fail(e, "failed", frame, ctx)

        try:
            return _checked_output(out, frame)
        except (TypeError, ValueError) as e:
            return self._fail(e, "produced invalid output", frame, ctx)
