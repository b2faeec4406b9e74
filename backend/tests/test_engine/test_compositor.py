"""Tests for the frame compositor: disposal semantics, clipping and errors."""

import numpy as np
import pytest

from engine.compositor import (
    DISPOSE_BACKGROUND,
    DISPOSE_KEEP,
    DISPOSE_NONE,
    DISPOSE_PREVIOUS,
    CompositorState,
    EmptyAnimation,
    FramePatch,
    InvalidDimensions,
    compose,
    compose_step,
    initial_state,
)

pytestmark = pytest.mark.smoke

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)
CLEAR = (0, 0, 0, 0)


def _patch(left, top, w, h, color, disposal=DISPOSE_NONE):
    pixels = np.zeros((h, w, 4), dtype=np.uint8)
    pixels[:, :] = color
    return FramePatch(left, top, w, h, disposal, pixels)


def _px(frame, x, y):
    return tuple(int(v) for v in frame[y, x])


class TestSinglePatch:
    def test_full_canvas_patch_returned_verbatim(self):
        pixels = np.arange(2 * 2 * 4, dtype=np.uint8).reshape(2, 2, 4)
        frames = compose([FramePatch(0, 0, 2, 2, DISPOSE_NONE, pixels)], 2, 2)
        assert len(frames) == 1
        np.testing.assert_array_equal(frames[0], pixels)

    def test_partial_patch_leaves_rest_transparent(self):
        frames = compose([_patch(1, 1, 2, 2, RED)], 4, 4)
        assert _px(frames[0], 0, 0) == CLEAR
        assert _px(frames[0], 1, 1) == RED
        assert _px(frames[0], 2, 2) == RED
        assert _px(frames[0], 3, 3) == CLEAR

    def test_no_alpha_blending(self):
        half = (10, 20, 30, 128)
        frames = compose([_patch(0, 0, 2, 2, RED), _patch(0, 0, 1, 1, half)], 2, 2)
        assert _px(frames[1], 0, 0) == half
        assert _px(frames[1], 1, 1) == RED


class TestDisposal:
    @pytest.mark.parametrize("code", [DISPOSE_NONE, DISPOSE_KEEP])
    def test_keep_codes_leave_canvas(self, code):
        frames = compose([_patch(0, 0, 4, 4, RED, code), _patch(0, 0, 2, 2, GREEN)], 4, 4)
        assert _px(frames[1], 0, 0) == GREEN
        assert _px(frames[1], 3, 3) == RED

    def test_background_clears_before_next_frame(self):
        frames = compose(
            [_patch(0, 0, 4, 4, RED, DISPOSE_BACKGROUND), _patch(0, 0, 2, 2, GREEN)], 4, 4
        )
        assert _px(frames[0], 3, 3) == RED
        assert _px(frames[1], 0, 0) == GREEN
        assert _px(frames[1], 3, 3) == CLEAR

    def test_previous_restores_pre_draw_canvas(self):
        frames = compose(
            [
                _patch(0, 0, 4, 4, RED),
                _patch(0, 0, 2, 2, GREEN, DISPOSE_PREVIOUS),
                _patch(3, 3, 1, 1, BLUE),
            ],
            4,
            4,
        )
        assert _px(frames[1], 0, 0) == GREEN
        # Green is undone, red underneath comes back
        assert _px(frames[2], 0, 0) == RED
        assert _px(frames[2], 3, 3) == BLUE

    def test_previous_on_first_frame_restores_blank(self):
        frames = compose(
            [_patch(0, 0, 2, 2, RED, DISPOSE_PREVIOUS), _patch(1, 1, 1, 1, GREEN)], 2, 2
        )
        assert _px(frames[1], 0, 0) == CLEAR
        assert _px(frames[1], 1, 1) == GREEN

    def test_disposal_applies_to_next_frame_only(self):
        frames = compose(
            [
                _patch(0, 0, 2, 2, RED, DISPOSE_BACKGROUND),
                _patch(0, 0, 1, 1, GREEN),
                _patch(1, 1, 1, 1, BLUE),
            ],
            2,
            2,
        )
        assert _px(frames[2], 0, 0) == GREEN
        assert _px(frames[2], 1, 1) == BLUE
        assert _px(frames[2], 1, 0) == CLEAR

    def test_unknown_code_treated_as_none(self):
        frames = compose([_patch(0, 0, 2, 2, RED, 7), _patch(0, 0, 1, 1, GREEN)], 2, 2)
        assert _px(frames[1], 1, 1) == RED


class TestClipping:
    def test_patch_past_right_bottom_is_clipped(self):
        frames = compose([_patch(2, 2, 5, 5, RED)], 4, 4)
        assert frames[0].shape == (4, 4, 4)
        assert _px(frames[0], 3, 3) == RED
        assert _px(frames[0], 1, 1) == CLEAR

    def test_negative_offset_is_clipped(self):
        pixels = np.zeros((3, 3, 4), dtype=np.uint8)
        pixels[2, 2] = BLUE
        frames = compose([FramePatch(-2, -2, 3, 3, DISPOSE_NONE, pixels)], 2, 2)
        assert _px(frames[0], 0, 0) == BLUE
        assert _px(frames[0], 1, 1) == CLEAR

    def test_patch_fully_outside_draws_nothing(self):
        frames = compose([_patch(10, 10, 2, 2, RED)], 4, 4)
        assert not frames[0].any()

    def test_zero_size_patch(self):
        frames = compose([_patch(0, 0, 0, 0, RED)], 3, 3)
        assert not frames[0].any()


class TestSequence:
    def test_n_patches_give_n_frames(self):
        patches = [_patch(i % 4, 0, 1, 1, RED) for i in range(9)]
        frames = compose(patches, 4, 2)
        assert len(frames) == 9
        assert all(f.shape == (2, 4, 4) for f in frames)

    def test_emitted_frames_do_not_alias(self):
        frames = compose([_patch(0, 0, 1, 1, RED), _patch(1, 0, 1, 1, GREEN)], 2, 1)
        frames[1][:] = 0
        assert _px(frames[0], 0, 0) == RED

    def test_accepts_generator(self):
        frames = compose((_patch(0, 0, 1, 1, RED) for _ in range(3)), 1, 1)
        assert len(frames) == 3

    def test_compose_step_is_pure(self):
        state = initial_state(2, 2)
        next_state, frame = compose_step(state, _patch(0, 0, 1, 1, RED))
        assert not state.canvas.any()
        assert isinstance(next_state, CompositorState)
        assert next_state.pending_disposal == DISPOSE_NONE
        np.testing.assert_array_equal(next_state.canvas, frame)


class TestErrors:
    def test_empty_animation(self):
        with pytest.raises(EmptyAnimation):
            compose([], 4, 4)

    @pytest.mark.parametrize("w,h", [(0, 4), (4, 0), (-1, 3)])
    def test_invalid_dimensions(self, w, h):
        with pytest.raises(InvalidDimensions):
            compose([_patch(0, 0, 1, 1, RED)], w, h)

    def test_invalid_dimensions_checked_before_empty(self):
        with pytest.raises(InvalidDimensions):
            compose([], 0, 0)

    def test_error_kinds_are_value_errors(self):
        assert issubclass(EmptyAnimation, ValueError)
        assert issubclass(InvalidDimensions, ValueError)


class TestFromBuffer:
    def test_bytes_buffer(self):
        data = bytes(range(16))
        patch = FramePatch.from_buffer(1, 2, 2, 2, DISPOSE_KEEP, data)
        assert patch.pixels.shape == (2, 2, 4)
        assert tuple(patch.pixels[0, 1]) == (4, 5, 6, 7)

    def test_wrong_length_rejected(self):
        with pytest.raises(ValueError):
            FramePatch.from_buffer(0, 0, 2, 2, DISPOSE_NONE, bytes(15))

    def test_negative_size_rejected(self):
        with pytest.raises(InvalidDimensions):
            FramePatch.from_buffer(0, 0, -1, 2, DISPOSE_NONE, b"")
