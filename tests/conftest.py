"""Shared test fixtures: sources, synthetic videos, offscreen setup."""

import os
import shutil
import tempfile

import numpy as np
import pytest

from videdit.model.source import SourceDescriptor

# Force offscreen rendering for headless CI
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture()
def full_hd_source():
    """Two-minute 1920x1080 source."""
    return SourceDescriptor(path="/videos/clip.mp4", duration_ms=120_000, width=1920, height=1080)


@pytest.fixture()
def small_source():
    return SourceDescriptor(path="/videos/small.mov", duration_ms=10_000, width=640, height=480)


@pytest.fixture(scope="session")
def tmp_video_dir():
    """Session-scoped temp directory for synthetic test videos."""
    with tempfile.TemporaryDirectory(prefix="videdit_test_") as d:
        yield d


def _make_video(path: str, duration: float, fps: float, size: tuple[int, int], make_frame):
    """Helper to create a synthetic video using MoviePy."""
    from moviepy import VideoClip

    clip = VideoClip(make_frame, duration=duration).with_fps(fps)
    clip = clip.resized(size)
    clip.write_videofile(
        path,
        codec="libx264",
        audio=False,
        logger=None,
    )
    clip.close()


@pytest.fixture(scope="session")
def static_video(tmp_video_dir):
    """Uniform blue video. 2s @ 24fps, 160x120."""
    if shutil.which("ffmpeg") is None:
        pytest.skip("ffmpeg not installed")
    path = os.path.join(tmp_video_dir, "static.mp4")

    def make_frame(t):
        frame = np.zeros((120, 160, 3), dtype=np.uint8)
        frame[:, :] = [40, 60, 200]
        return frame

    _make_video(path, duration=2.0, fps=24, size=(160, 120), make_frame=make_frame)
    return path
