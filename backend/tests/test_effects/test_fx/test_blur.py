"""Tests for fx.blur: 4-test contract (basic, determinism, boundary, state)."""

import numpy as np
import pytest

from effects.fx.blur import EFFECT_ID, PARAMS, apply

pytestmark = pytest.mark.smoke


def _frame(h=100, w=100):
    rng = np.random.default_rng(42)
    return rng.integers(0, 256, (h, w, 4), dtype=np.uint8)


KW = {"frame_index": 0, "seed": 42, "resolution": (100, 100)}


def test_basic():
    frame = _frame()
    result, state = apply(frame, {"blur": 3.0}, None, **KW)
    assert result.shape == frame.shape
    assert result.dtype == np.uint8
    # Blur reduces variance in the frame
    assert np.std(result[:, :, 0].astype(float)) < np.std(frame[:, :, 0].astype(float))
    np.testing.assert_array_equal(result[:, :, 3], frame[:, :, 3])


def test_border_band_untouched():
    frame = _frame()
    result, _ = apply(frame, {"blur": 2.9}, None, **KW)
    np.testing.assert_array_equal(result[:2], frame[:2])
    np.testing.assert_array_equal(result[-2:], frame[-2:])
    np.testing.assert_array_equal(result[:, :2], frame[:, :2])
    np.testing.assert_array_equal(result[:, -2:], frame[:, -2:])


def test_interior_is_box_mean():
    frame = _frame(10, 10)
    result, _ = apply(frame, {"blur": 1}, None, **KW)
    window = frame[3:6, 4:7, 0].astype(float)
    assert result[4, 5, 0] == np.rint(window.mean())


def test_determinism():
    frame = _frame()
    r1, _ = apply(frame, {"blur": 4.0}, None, **KW)
    r2, _ = apply(frame, {"blur": 4.0}, None, **KW)
    np.testing.assert_array_equal(r1, r2)


def test_boundary():
    frame = _frame()
    r_min, _ = apply(frame, {"blur": 0.9}, None, **KW)
    np.testing.assert_array_equal(r_min, frame)
    r_max, _ = apply(frame, {"blur": PARAMS["blur"]["max"]}, None, **KW)
    assert r_max.shape == frame.shape
    # Frame too small for the window is left alone
    small = _frame(4, 4)
    r_small, _ = apply(small, {"blur": 2}, None, **KW)
    np.testing.assert_array_equal(r_small, small)


def test_state():
    _, state = apply(_frame(), {"blur": 1.0}, None, **KW)
    assert state is None
    assert EFFECT_ID == "fx.blur"
