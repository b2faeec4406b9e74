"""Tests for security validation gates: input, frame count, canvas, output path, PII stripping."""

import os
from pathlib import Path

import pytest

from security import (
    ALLOWED_EXTENSIONS,
    MAX_CANVAS_PIXELS,
    MAX_FRAME_COUNT,
    MAX_INPUT_SIZE,
    strip_pii,
    validate_canvas,
    validate_frame_count,
    validate_input,
    validate_output_path,
)


class TestInput:
    def test_valid_gif_accepted(self, tmp_path):
        f = tmp_path / "clip.gif"
        f.write_bytes(b"\x00" * 1024)
        assert validate_input(str(f)) == []

    @pytest.mark.parametrize("ext", [".exe", ".txt", ".mp4"])
    def test_other_extensions_rejected(self, tmp_path, ext):
        f = tmp_path / f"file{ext}"
        f.write_bytes(b"\x00")
        assert any("not allowed" in e for e in validate_input(str(f)))

    def test_nonexistent_file_rejected(self, tmp_path):
        errors = validate_input(str(tmp_path / "missing.gif"))
        assert any("not found" in e.lower() for e in errors)

    def test_directory_rejected(self, tmp_path):
        d = tmp_path / "dir.gif"
        d.mkdir()
        assert validate_input(str(d))

    def test_symlink_rejected(self, tmp_path):
        target = tmp_path / "real.png"
        target.write_bytes(b"\x00")
        link = tmp_path / "link.png"
        link.symlink_to(target)
        assert any("Symlink" in e for e in validate_input(str(link)))

    def test_oversized_rejected(self, tmp_path):
        f = tmp_path / "huge.png"
        with open(f, "wb") as fh:
            fh.truncate(MAX_INPUT_SIZE + 1)
        assert any("too large" in e for e in validate_input(str(f)))

    def test_extension_whitelist(self):
        assert ".gif" in ALLOWED_EXTENSIONS
        assert ".png" in ALLOWED_EXTENSIONS


class TestLimits:
    def test_frame_count_at_limit(self):
        assert validate_frame_count(MAX_FRAME_COUNT) == []

    def test_frame_count_over_limit(self):
        assert validate_frame_count(MAX_FRAME_COUNT + 1)

    def test_canvas_ok(self):
        assert validate_canvas(640, 480) == []

    @pytest.mark.parametrize("w,h", [(0, 10), (10, 0), (-5, -5)])
    def test_canvas_non_positive(self, w, h):
        assert any("positive" in e for e in validate_canvas(w, h))

    def test_canvas_too_large(self):
        assert validate_canvas(MAX_CANVAS_PIXELS, 2)


class TestOutputPath:
    def test_new_directory_ok(self, tmp_path):
        assert validate_output_path(str(tmp_path / "out")) == []

    def test_zip_ok(self, tmp_path):
        assert validate_output_path(str(tmp_path / "frames.zip"), as_zip=True) == []

    def test_zip_requires_zip_extension(self, tmp_path):
        errors = validate_output_path(str(tmp_path / "frames.tar"), as_zip=True)
        assert any(".zip" in e for e in errors)

    def test_existing_file_is_not_a_directory(self, tmp_path):
        f = tmp_path / "taken"
        f.write_text("x")
        assert validate_output_path(str(f))

    def test_system_directory_blocked(self):
        errors = validate_output_path("/usr/local/share/vhs_out")
        assert any("system directory" in e for e in errors)


class TestStripPii:
    def test_home_path_scrubbed(self):
        home = os.path.expanduser("~")
        event = {"message": f"failed reading {home}/clips/cat.gif"}
        cleaned = strip_pii(event, {})
        assert home not in cleaned["message"]

    def test_foreign_user_paths_scrubbed(self):
        event = {"message": "open /Users/alice/x.gif and /home/bob/y.gif"}
        cleaned = strip_pii(event, {})
        assert "alice" not in cleaned["message"]
        assert "bob" not in cleaned["message"]

    def test_sensitive_keys_redacted(self):
        event = {
            "extra": {"api_token": "abc", "frame_index": 3},
            "contexts": {"stage": {"secret_value": "s", "param_names": ["noise"]}},
        }
        cleaned = strip_pii(event, {})
        assert cleaned["extra"]["api_token"] == "<REDACTED>"
        assert cleaned["extra"]["frame_index"] == 3
        assert cleaned["contexts"]["stage"]["secret_value"] == "<REDACTED>"
        assert cleaned["contexts"]["stage"]["param_names"] == ["noise"]
