import numpy as np
import pytest
from PIL import Image

from engine.pipeline import flush_timing, reset_stage_health


@pytest.fixture(autouse=True)
def _clean_pipeline_state():
    """Stage health and timing are module-global; isolate every test."""
    reset_stage_health()
    flush_timing()
    yield
    reset_stage_health()
    flush_timing()


@pytest.fixture
def rgba_frame():
    """Random opaque 64x64 RGBA frame."""
    rng = np.random.default_rng(42)
    frame = rng.integers(0, 256, (64, 64, 4), dtype=np.uint8)
    frame[:, :, 3] = 255
    return frame


@pytest.fixture
def gif_path(tmp_path):
    """Three-frame 8x6 animated GIF: red, green, blue."""
    colors = [(255, 0, 0), (0, 255, 0), (0, 0, 255)]
    images = [Image.new("RGB", (8, 6), c) for c in colors]
    path = tmp_path / "clip.gif"
    images[0].save(
        path,
        save_all=True,
        append_images=images[1:],
        duration=[100, 120, 140],
        loop=0,
        disposal=1,
    )
    return path


@pytest.fixture
def png_path(tmp_path):
    """Static 10x5 PNG with a half-transparent right half."""
    img = Image.new("RGBA", (10, 5), (200, 100, 50, 255))
    for y in range(5):
        for x in range(5, 10):
            img.putpixel((x, y), (10, 20, 30, 128))
    path = tmp_path / "still.png"
    img.save(path)
    return path
