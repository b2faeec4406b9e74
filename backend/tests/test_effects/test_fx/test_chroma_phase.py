"""Tests for fx.chroma_phase: red sampled right, blue sampled left."""

import numpy as np
import pytest

from effects.fx.chroma_phase import apply

pytestmark = pytest.mark.smoke

KW = {"frame_index": 0, "seed": 42, "resolution": (10, 2)}


def _gradient():
    frame = np.zeros((2, 10, 4), dtype=np.uint8)
    ramp = np.arange(10, dtype=np.uint8) * 10
    frame[:, :, 0] = ramp
    frame[:, :, 1] = ramp
    frame[:, :, 2] = ramp
    frame[:, :, 3] = 255
    return frame


def test_channel_directions():
    frame = _gradient()
    result, _ = apply(frame, {"chromaPhase": 2.7}, None, **KW)
    cols = np.arange(10)
    np.testing.assert_array_equal(result[0, :, 0], frame[0, np.clip(cols + 2, 0, 9), 0])
    np.testing.assert_array_equal(result[0, :, 2], frame[0, np.clip(cols - 2, 0, 9), 2])
    np.testing.assert_array_equal(result[:, :, 1], frame[:, :, 1])


def test_edges_clamp():
    result, _ = apply(_gradient(), {"chromaPhase": 10}, None, **KW)
    np.testing.assert_array_equal(result[0, :, 0], 90)
    np.testing.assert_array_equal(result[0, :, 2], 0)


def test_boundary():
    frame = _gradient()
    r_min, _ = apply(frame, {"chromaPhase": 0.9}, None, **KW)
    np.testing.assert_array_equal(r_min, frame)


def test_state():
    _, state = apply(_gradient(), {"chromaPhase": 3}, None, **KW)
    assert state is None
