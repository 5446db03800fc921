"""Shared fixtures for the resizer tests."""

import os
from pathlib import Path

import pytest

from resizer.data_models import RunConfiguration, TranscodeResult
from resizer.video_converter import Transcoder


class FakeTranscoder(Transcoder):
    """Writes a small file instead of running FFmpeg."""

    def __init__(self, fail_on=(), output_size=10):
        self.fail_on = set(fail_on)
        self.output_size = output_size
        self.calls = []

    def transcode(self, source, dest, config):
        self.calls.append((source, dest))
        if source.name in self.fail_on:
            return TranscodeResult.failed("corrupt input")
        dest.write_bytes(b"x" * self.output_size)
        return TranscodeResult.ok(source.stat().st_size, dest.stat().st_size)


def write_file(path: Path, size: int = 100, mtime: float = None) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"v" * size)
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


@pytest.fixture
def source_tree(tmp_path):
    source = tmp_path / "originals"
    write_file(source / "clip.mp4", 100)
    write_file(source / "holiday" / "beach.MOV", 200)
    write_file(source / "holiday" / "day2" / "sunset.mkv", 300)
    write_file(source / "holiday" / "notes.txt", 50)
    write_file(source / "old.avi", 400)
    return source


@pytest.fixture
def dest_dir(tmp_path):
    dest = tmp_path / "resized"
    dest.mkdir()
    return dest


@pytest.fixture
def run_config(source_tree, dest_dir):
    return RunConfiguration(source_dir=source_tree, dest_dir=dest_dir, quiet=True)


@pytest.fixture
def fake_transcoder():
    return FakeTranscoder()
