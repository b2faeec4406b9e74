"""Tests for PNG / ZIP frame output."""

import io
import zipfile

import numpy as np
from PIL import Image

from media.writer import encode_png, frame_name, write_frames, write_zip


def _frames(n=3):
    out = []
    for i in range(n):
        f = np.zeros((4, 5, 4), dtype=np.uint8)
        f[:, :] = (i * 40, 10, 20, 200)
        out.append(f)
    return out


def test_frame_name_is_one_based_and_padded():
    assert frame_name(0) == "vhs_frame_001.png"
    assert frame_name(41) == "vhs_frame_042.png"
    assert frame_name(0, prefix="clip") == "clip_001.png"


def test_encode_png_is_lossless():
    frame = _frames(1)[0]
    decoded = np.array(Image.open(io.BytesIO(encode_png(frame))))
    np.testing.assert_array_equal(decoded, frame)


def test_write_frames_creates_directory(tmp_path):
    out_dir = tmp_path / "nested" / "frames"
    paths = write_frames(_frames(), str(out_dir))
    assert [p.name for p in paths] == [frame_name(i) for i in range(3)]
    assert all(p.is_file() for p in paths)
    second = np.array(Image.open(paths[1]))
    assert tuple(second[0, 0]) == (40, 10, 20, 200)


def test_write_zip(tmp_path):
    archive = write_zip(_frames(), str(tmp_path / "frames.zip"))
    with zipfile.ZipFile(archive) as zf:
        assert zf.namelist() == [frame_name(i) for i in range(3)]
        third = np.array(Image.open(io.BytesIO(zf.read(frame_name(2)))))
    assert tuple(third[0, 0]) == (80, 10, 20, 200)
