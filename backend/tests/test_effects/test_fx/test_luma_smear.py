"""Tests for fx.luma_smear: vertical luma bleed."""

import numpy as np
import pytest

from effects.fx.luma_smear import apply

pytestmark = pytest.mark.smoke

KW = {"frame_index": 0, "seed": 42, "resolution": (8, 20)}


def _bars(h=20, w=8):
    frame = np.zeros((h, w, 4), dtype=np.uint8)
    frame[: h // 2, :, :3] = 255
    frame[:, :, 3] = 255
    return frame


def test_full_mix_is_grey():
    result, _ = apply(_bars(), {"lumaSmear": 10}, None, **KW)
    rgb = result[:, :, :3]
    assert np.all(rgb[:, :, 0] == rgb[:, :, 1])
    assert np.all(rgb[:, :, 1] == rgb[:, :, 2])


def test_smears_vertically_only():
    frame = _bars()
    result, _ = apply(frame, {"lumaSmear": 4}, None, **KW)
    # Rows just below the edge pick up brightness
    assert result[10, 0, 0] > 0
    # Columns are identical, nothing moves horizontally
    for col in range(1, 8):
        np.testing.assert_array_equal(result[:, col], result[:, 0])


def test_determinism():
    frame = _bars()
    r1, _ = apply(frame, {"lumaSmear": 3.5}, None, **KW)
    r2, _ = apply(frame, {"lumaSmear": 3.5}, None, **KW)
    np.testing.assert_array_equal(r1, r2)


def test_boundary():
    frame = _bars()
    r_min, _ = apply(frame, {"lumaSmear": 0}, None, **KW)
    np.testing.assert_array_equal(r_min, frame)
    # amount < 1 still uses radius 1
    r_small, _ = apply(frame, {"lumaSmear": 0.5}, None, **KW)
    assert not np.array_equal(r_small, frame)


def test_state():
    _, state = apply(_bars(), {"lumaSmear": 2}, None, **KW)
    assert state is None
