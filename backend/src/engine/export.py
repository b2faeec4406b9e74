"""Export: multi-frame rendering and background export jobs.

Compositing is sequential (disposal state carries frame to frame); the
effect pipeline has no inter-frame dependency, so frames are rendered on a
worker pool. Each task gets its own frame and its own copy of the bundle.
"""

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable

import numpy as np
import sentry_sdk

from effects.registry import resolve_params
from engine.compositor import compose
from engine.determinism import new_run_seed
from engine.pipeline import apply_pipeline
from media.reader import load_source, resize_bitmap
from media.writer import write_frames, write_zip

logger = logging.getLogger(__name__)


class ExportStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETE = "complete"
    CANCELLED = "cancelled"
    ERROR = "error"


class ExportCancelled(Exception):
    """Raised inside a job when cancel() was requested."""


def default_workers() -> int:
    return max(1, min(8, os.cpu_count() or 1))


def render_frames(
    bitmaps: list[np.ndarray],
    params: dict | None,
    *,
    seed: int | None = None,
    max_workers: int | None = None,
    progress: Callable[[int], None] | None = None,
    cancel_event: threading.Event | None = None,
) -> list[np.ndarray]:
    """Run the effect pipeline over every frame, in parallel.

    Output order equals input order. A fixed seed makes the whole render
    reproducible regardless of worker count; frame i uses frame_index=i.

    Raises:
        ExportCancelled: If cancel_event is set before all frames finish.
    """
    if not bitmaps:
        return []

    bundle = resolve_params(params)
    run_seed = new_run_seed() if seed is None else int(seed)
    workers = max_workers or default_workers()

    def _render(index: int) -> np.ndarray:
        if cancel_event is not None and cancel_event.is_set():
            raise ExportCancelled()
        return apply_pipeline(
            bitmaps[index], dict(bundle), seed=run_seed, frame_index=index
        )

    results: list[np.ndarray | None] = [None] * len(bitmaps)
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(_render, i) for i in range(len(bitmaps))]
        try:
            for i, future in enumerate(futures):
                results[i] = future.result()
                if progress is not None:
                    progress(i + 1)
        except ExportCancelled:
            for f in futures:
                f.cancel()
            raise

    logger.debug("Rendered %d frames with %d workers", len(bitmaps), workers)
    return results


def prepare_frames(
    input_path: str,
    width: int | None = None,
    height: int | None = None,
) -> list[np.ndarray]:
    """Load a source, resolve animation frames and resample to the target size."""
    source = load_source(input_path)
    frames = compose(source.patches, source.width, source.height)
    if width or height:
        w = width or source.width
        h = height or source.height
        frames = [resize_bitmap(f, w, h) for f in frames]
    return frames


_IDLE_STATUS = {
    "status": ExportStatus.IDLE.value,
    "progress": 0.0,
    "current_frame": 0,
    "total_frames": 0,
}


@dataclass
class ExportJob:
    """One background export. Fields are guarded by ``_lock``."""

    output_path: str = ""
    status: ExportStatus = ExportStatus.IDLE
    current_frame: int = 0
    total_frames: int = 0
    written: list[str] = field(default_factory=list)
    error: str | None = None
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _cancel_event: threading.Event = field(default_factory=threading.Event, repr=False)
    _thread: threading.Thread | None = field(default=None, repr=False)

    @property
    def progress(self) -> float:
        return self.current_frame / self.total_frames if self.total_frames else 0.0

    @property
    def running(self) -> bool:
        return self.status == ExportStatus.RUNNING

    def update(self, **changes):
        with self._lock:
            for name, value in changes.items():
                setattr(self, name, value)

    def snapshot(self) -> dict:
        with self._lock:
            return {
                "status": self.status.value,
                "progress": round(self.progress, 4),
                "current_frame": self.current_frame,
                "total_frames": self.total_frames,
                "output_path": self.output_path,
                "written": [Path(p).name for p in self.written],
                "error": self.error,
            }

    def cancel(self):
        self._cancel_event.set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the worker thread exits. Returns False on timeout."""
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()


class ExportManager:
    """Runs at most one export at a time on a daemon thread.

    The job goes load, compose, render, write. Status is polled through
    get_status(); cancel() stops it between frames.
    """

    def __init__(self, max_workers: int | None = None):
        self.max_workers = max_workers
        self._job: ExportJob | None = None

    @property
    def job(self) -> ExportJob | None:
        return self._job

    def start(
        self,
        input_path: str,
        output_path: str,
        params: dict | None,
        seed: int | None = None,
        *,
        as_zip: bool = False,
        width: int | None = None,
        height: int | None = None,
    ) -> ExportJob:
        """Launch an export and return its job.

        ``output_path`` is a directory for PNG frames, or the archive path
        when ``as_zip`` is set.

        Raises:
            RuntimeError: If an export is already running.
        """
        if self._job is not None and self._job.running:
            raise RuntimeError("Export already in progress")

        job = ExportJob(output_path=output_path, status=ExportStatus.RUNNING)
        job._thread = threading.Thread(
            target=self._work,
            args=(job, input_path, dict(params or {}), seed),
            kwargs={"as_zip": as_zip, "size": (width, height)},
            name="vhs-export",
            daemon=True,
        )
        self._job = job
        job._thread.start()
        return job

    def _work(
        self,
        job: ExportJob,
        input_path: str,
        params: dict,
        seed: int | None,
        *,
        as_zip: bool,
        size: tuple,
    ):
        try:
            frames = prepare_frames(input_path, *size)
            job.update(total_frames=len(frames))
            rendered = render_frames(
                frames,
                params,
                seed=seed,
                max_workers=self.max_workers,
                progress=lambda done: job.update(current_frame=done),
                cancel_event=job._cancel_event,
            )
            if job._cancel_event.is_set():
                raise ExportCancelled()

            if as_zip:
                written = [str(write_zip(rendered, job.output_path))]
            else:
                written = [str(p) for p in write_frames(rendered, job.output_path)]
        except ExportCancelled:
            job.update(status=ExportStatus.CANCELLED)
            logger.info("Export cancelled at frame %d", job.current_frame)
        except Exception as e:
            sentry_sdk.capture_exception(e)
            logger.exception("Export of %s failed", input_path)
            job.update(
                status=ExportStatus.ERROR,
                error=f"Export failed: {type(e).__name__}",
            )
        else:
            job.update(written=written, status=ExportStatus.COMPLETE)
            logger.info("Exported %d frames to %s", len(rendered), job.output_path)

    def get_status(self) -> dict:
        """Serializable status of the current (or last) job."""
        if self._job is None:
            return dict(_IDLE_STATUS)
        return self._job.snapshot()

    def cancel(self) -> bool:
        """Request cancellation. Returns True if a running job was signalled."""
        job = self._job
        if job is None or not job.running:
            return False
        job.cancel()
        return True
