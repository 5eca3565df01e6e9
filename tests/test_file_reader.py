"""Tests for file reading and line slicing."""

import pytest

from context_hopper.file_reader import FileReadError
from context_hopper.file_reader import read_file
from context_hopper.file_reader import slice_lines
from context_hopper.models import LineRange


def test_slice_lines_inclusive():
    assert slice_lines("a\nb\nc\nd\n", LineRange(start=1, end=2)) == "b\nc"


def test_slice_lines_past_end_is_clamped():
    assert slice_lines("a\nb", LineRange(start=1, end=10)) == "b"


def test_slice_lines_keeps_form_feed_inside_line():
    text = "line0\nline1 \x0c page\nline2\nline3\n"
    assert slice_lines(text, LineRange(start=2, end=2)) == "line2"
    assert slice_lines(text, LineRange(start=1, end=1)) == "line1 \x0c page"


def test_slice_lines_mixed_line_endings():
    assert slice_lines("a\r\nb\rc\nd", LineRange(start=1, end=2)) == "b\nc"


def test_slice_lines_without_range():
    assert slice_lines("a\nb\n", None) == "a\nb\n"


def test_read_file_whole_and_range(tmp_path):
    path = tmp_path / "x.ts"
    path.write_text("one\ntwo\nthree\n", encoding="utf-8")
    assert read_file(str(path)) == "one\ntwo\nthree\n"
    assert read_file(str(path), LineRange(start=0, end=0)) == "one"


def test_missing_file_raises(tmp_path):
    missing = str(tmp_path / "missing.ts")
    with pytest.raises(FileReadError) as exc_info:
        read_file(missing)
    assert exc_info.value.path == missing
    assert isinstance(exc_info.value, OSError)


def test_binary_file_raises(tmp_path):
    path = tmp_path / "blob.bin"
    path.write_bytes(b"\xff\xfe\x00\x81")
    with pytest.raises(FileReadError, match="Cannot read"):
        read_file(str(path))
