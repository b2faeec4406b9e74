"""Tests for fx.scratches: bright or dark one-pixel lines."""

import numpy as np
import pytest

from effects.fx.scratches import apply, scratch_count

pytestmark = pytest.mark.smoke

KW = {"frame_index": 0, "seed": 42, "resolution": (120, 80)}


def _grey(h=80, w=120):
    return np.full((h, w, 4), 100, dtype=np.uint8)


def test_scratch_count_formula():
    assert scratch_count(0) == 0
    assert scratch_count(3) == 0
    assert scratch_count(4) == 1
    assert scratch_count(100) == 30


def test_single_scratch_uses_one_gain():
    result, _ = apply(_grey(), {"scratches": 4}, None, **KW)
    values = set(np.unique(result[:, :, :3]).tolist())
    assert values <= {70, 100, 130}
    assert values != {100}


def test_alpha_untouched():
    frame = _grey()
    result, _ = apply(frame, {"scratches": 100}, None, **KW)
    np.testing.assert_array_equal(result[:, :, 3], frame[:, :, 3])


def test_determinism():
    frame = _grey()
    r1, _ = apply(frame, {"scratches": 60}, None, **KW)
    r2, _ = apply(frame, {"scratches": 60}, None, **KW)
    np.testing.assert_array_equal(r1, r2)


def test_boundary():
    frame = _grey()
    r_min, _ = apply(frame, {"scratches": 3}, None, **KW)
    np.testing.assert_array_equal(r_min, frame)


def test_state():
    _, state = apply(_grey(), {"scratches": 10}, None, **KW)
    assert state is None
