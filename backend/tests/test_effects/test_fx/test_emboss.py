"""Tests for fx.emboss: 4-test contract plus border handling."""

import numpy as np
import pytest

from effects.fx.emboss import EFFECT_ID, PARAMS, apply

pytestmark = pytest.mark.smoke


def _frame(h=32, w=32):
    rng = np.random.default_rng(42)
    return rng.integers(0, 256, (h, w, 4), dtype=np.uint8)


KW = {"frame_index": 0, "seed": 42, "resolution": (32, 32)}


def test_basic():
    frame = _frame()
    result, _ = apply(frame, {"emboss": 1.0}, None, **KW)
    assert result.shape == frame.shape
    assert not np.array_equal(result[1:-1, 1:-1, :3], frame[1:-1, 1:-1, :3])
    np.testing.assert_array_equal(result[:, :, 3], frame[:, :, 3])


def test_border_untouched():
    frame = _frame()
    result, _ = apply(frame, {"emboss": 2.0}, None, **KW)
    np.testing.assert_array_equal(result[0], frame[0])
    np.testing.assert_array_equal(result[-1], frame[-1])
    np.testing.assert_array_equal(result[:, 0], frame[:, 0])
    np.testing.assert_array_equal(result[:, -1], frame[:, -1])


def test_flat_region_goes_to_relief_grey():
    # Kernel sums to 1, so a flat field v becomes v + 128 (clamped), blended by amount/2
    frame = np.full((8, 8, 4), 100, dtype=np.uint8)
    result, _ = apply(frame, {"emboss": 2.0}, None, **KW)
    np.testing.assert_array_equal(result[1:-1, 1:-1, :3], 228)


def test_determinism():
    frame = _frame()
    r1, _ = apply(frame, {"emboss": 0.7}, None, **KW)
    r2, _ = apply(frame, {"emboss": 0.7}, None, **KW)
    np.testing.assert_array_equal(r1, r2)


def test_boundary():
    frame = _frame()
    r_min, _ = apply(frame, {"emboss": 0.0}, None, **KW)
    np.testing.assert_array_equal(r_min, frame)
    tiny = _frame(2, 2)
    r_tiny, _ = apply(tiny, {"emboss": 2.0}, None, **KW)
    np.testing.assert_array_equal(r_tiny, tiny)


def test_state():
    _, state = apply(_frame(), {"emboss": 1.0}, None, **KW)
    assert state is None
