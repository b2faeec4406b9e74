"""Frame compositor: rebuilds full-canvas frames from animation frame patches.

Each patch carries an offset, a size, a disposal code and raw RGBA pixels.
The disposal code of a frame is honoured before the *next* frame is drawn:

    0, 1  leave the canvas as drawn
    2     clear the canvas to transparent
    3     restore the canvas to how it was before this frame was drawn

Patches replace the pixels under their rectangle (no alpha blending) and are
clipped to the canvas. The compositor is a sequential fold over the patch
list; each step returns the next state and the resolved frame.
"""

import logging
from dataclasses import dataclass
from typing import Iterable

import numpy as np

logger = logging.getLogger(__name__)

DISPOSE_NONE = 0
DISPOSE_KEEP = 1
DISPOSE_BACKGROUND = 2
DISPOSE_PREVIOUS = 3


class EmptyAnimation(ValueError):
    """Raised when the compositor is given no frame patches."""


class InvalidDimensions(ValueError):
    """Raised for a non-positive canvas width or height."""


@dataclass(frozen=True)
class FramePatch:
    """One decoded animation frame, as handed over by the container decoder."""

    left: int
    top: int
    width: int
    height: int
    disposal: int
    pixels: np.ndarray

    @classmethod
    def from_buffer(
        cls,
        left: int,
        top: int,
        width: int,
        height: int,
        disposal: int,
        data,
    ) -> "FramePatch":
        """Build a patch from a flat interleaved RGBA buffer (bytes or array)."""
        if width < 0 or height < 0:
            raise InvalidDimensions(f"Patch size must be non-negative, got {width}x{height}")
        if isinstance(data, (bytes, bytearray, memoryview)):
            flat = np.frombuffer(bytes(data), dtype=np.uint8)
        else:
            flat = np.asarray(data, dtype=np.uint8).ravel()
        expected = width * height * 4
        if flat.size != expected:
            raise ValueError(
                f"Patch buffer has {flat.size} bytes, expected {expected} for {width}x{height}"
            )
        return cls(left, top, width, height, disposal, flat.reshape(height, width, 4))


@dataclass(frozen=True)
class CompositorState:
    """Canvas carried between frames.

    ``restore_point`` is the canvas as it was just before the previous patch
    was drawn; ``pending_disposal`` is the previous patch's disposal code.
    """

    canvas: np.ndarray
    restore_point: np.ndarray | None = None
    pending_disposal: int = DISPOSE_NONE


def new_canvas(width: int, height: int) -> np.ndarray:
    """Fully transparent RGBA canvas."""
    if width <= 0 or height <= 0:
        raise InvalidDimensions(
            f"Canvas size must be positive, got {width}x{height}"
        )
    return np.zeros((height, width, 4), dtype=np.uint8)


def initial_state(width: int, height: int) -> CompositorState:
    return CompositorState(canvas=new_canvas(width, height))


def _patch_pixels(patch: FramePatch) -> np.ndarray:
    if patch.width < 0 or patch.height < 0:
        raise InvalidDimensions(
            f"Patch size must be non-negative, got {patch.width}x{patch.height}"
        )
    pixels = np.asarray(patch.pixels, dtype=np.uint8)
    if pixels.ndim != 3:
        pixels = pixels.reshape(patch.height, patch.width, 4)
    if pixels.shape != (patch.height, patch.width, 4):
        raise ValueError(
            f"Patch pixels have shape {pixels.shape}, expected "
            f"{(patch.height, patch.width, 4)}"
        )
    return pixels


def _blit(canvas: np.ndarray, patch: FramePatch):
    """Copy patch pixels onto the canvas in place, clipped to canvas bounds."""
    pixels = _patch_pixels(patch)
    ch, cw = canvas.shape[:2]

    x0 = max(0, patch.left)
    y0 = max(0, patch.top)
    x1 = min(cw, patch.left + patch.width)
    y1 = min(ch, patch.top + patch.height)
    if x0 >= x1 or y0 >= y1:
        logger.debug(
            "Patch at (%d, %d) %dx%d lies outside the %dx%d canvas",
            patch.left,
            patch.top,
            patch.width,
            patch.height,
            cw,
            ch,
        )
        return

    canvas[y0:y1, x0:x1] = pixels[
        y0 - patch.top : y1 - patch.top, x0 - patch.left : x1 - patch.left
    ]


def compose_step(
    state: CompositorState, patch: FramePatch
) -> tuple[CompositorState, np.ndarray]:
    """Draw one patch. Returns (next state, resolved full-canvas frame)."""
    canvas = state.canvas.copy()

    # 1. Previous frame's disposal
    if state.pending_disposal == DISPOSE_BACKGROUND:
        canvas[:] = 0
    elif state.pending_disposal == DISPOSE_PREVIOUS and state.restore_point is not None:
        canvas = state.restore_point.copy()

    # 2. Snapshot for a restore-to-previous on the next frame
    restore_point = canvas.copy()

    # 3. Overwrite the patch rectangle
    _blit(canvas, patch)

    disposal = int(patch.disposal)
    if disposal not in (DISPOSE_NONE, DISPOSE_KEEP, DISPOSE_BACKGROUND, DISPOSE_PREVIOUS):
        logger.debug("Unknown disposal code %d treated as 'none'", disposal)
        disposal = DISPOSE_NONE

    next_state = CompositorState(
        canvas=canvas, restore_point=restore_point, pending_disposal=disposal
    )
    # 4. Emit a copy so later steps never alias an emitted frame
    return next_state, canvas.copy()


def compose(
    patches: Iterable[FramePatch], canvas_width: int, canvas_height: int
) -> list[np.ndarray]:
    """Resolve every patch into a full RGBA frame of the canvas size.

    Returns one (canvas_height, canvas_width, 4) uint8 frame per patch, in
    input order.

    Raises:
        InvalidDimensions: If the canvas size is not positive.
        EmptyAnimation: If no patches are supplied.
    """
    if canvas_width <= 0 or canvas_height <= 0:
        raise InvalidDimensions(
            f"Canvas size must be positive, got {canvas_width}x{canvas_height}"
        )
    patches = list(patches)
    if not patches:
        raise EmptyAnimation("Animation has no frames")

    state = initial_state(canvas_width, canvas_height)
    frames: list[np.ndarray] = []
    for patch in patches:
        state, frame = compose_step(state, patch)
        frames.append(frame)

    logger.debug(
        "Composited %d frames onto %dx%d canvas",
        len(frames),
        canvas_width,
        canvas_height,
    )
    return frames
