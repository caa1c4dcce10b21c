"""Source metadata extraction via ffprobe."""

import json
import logging
import subprocess
from pathlib import Path

from videdit.model.geometry import round_half_up
from videdit.model.source import SourceDescriptor

logger = logging.getLogger(__name__)


def probe(video_path: str, ffprobe: str = "ffprobe") -> dict:
    """Run ffprobe and return its parsed JSON output.

    Raises:
        FileNotFoundError: If video_path does not exist.
        RuntimeError: If ffprobe is missing, fails, or prints invalid JSON.
    """
    path = Path(video_path)
    if not path.exists():
        raise FileNotFoundError(f"Video file not found: {video_path}")

    try:
        result = subprocess.run(
            [
                ffprobe,
                "-v", "quiet",
                "-print_format", "json",
                "-show_format",
                "-show_streams",
                str(path),
            ],
            capture_output=True,
            text=True,
            timeout=10,
        )
    except FileNotFoundError:
        raise RuntimeError(
            f"{ffprobe} not found. Install FFmpeg: brew install ffmpeg (macOS) "
            "or sudo apt install ffmpeg (Linux)"
        )

    if result.returncode != 0:
        raise RuntimeError(f"ffprobe failed: {result.stderr.strip()}")

    try:
        data = json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise RuntimeError(f"ffprobe returned invalid JSON: {e}")

    return data


def get_video_stream(data: dict) -> dict:
    """Extract the first video stream from ffprobe data.

    Raises:
        RuntimeError: If no video stream found.
    """
    for stream in data.get("streams", []):
        if stream.get("codec_type") == "video":
            return stream
    raise RuntimeError("No video stream found in file")


def _frame_rate(stream: dict) -> float:
    # r_frame_rate looks like "24/1" or "30000/1001"
    try:
        num, den = stream.get("r_frame_rate", "0/1").split("/")
        if int(den) != 0:
            return int(num) / int(den)
    except (ValueError, ZeroDivisionError):
        pass
    return 0.0


def parse_duration(data: dict) -> float:
    """Best-effort duration in seconds; 0.0 when nothing usable is present."""
    stream = get_video_stream(data)
    fmt = data.get("format", {})

    for source in [fmt, stream]:
        raw = source.get("duration")
        if raw is not None:
            try:
                duration = float(raw)
                if duration > 0:
                    return duration
            except (ValueError, TypeError):
                pass

    # Fallback: nb_frames / fps
    fps = _frame_rate(stream)
    if fps > 0 and stream.get("nb_frames") is not None:
        try:
            duration = int(stream["nb_frames"]) / fps
            if duration > 0:
                return duration
        except (ValueError, TypeError):
            pass

    # Fallback: tags.DURATION ("HH:MM:SS.microseconds", common in MKV)
    for source in [stream, fmt]:
        tag_dur = source.get("tags", {}).get("DURATION")
        if tag_dur:
            try:
                hours, minutes, seconds = tag_dur.split(":")
                duration = float(hours) * 3600 + float(minutes) * 60 + float(seconds)
                if duration > 0:
                    return duration
            except ValueError:
                pass

    return 0.0


def extract_source(video_path: str, ffprobe: str = "ffprobe") -> SourceDescriptor:
    """Probe *video_path* and return its SourceDescriptor.

    Raises:
        FileNotFoundError: If video_path does not exist.
        RuntimeError: If the file cannot be probed or reports no usable
            duration or dimensions.
    """
    data = probe(video_path, ffprobe=ffprobe)
    stream = get_video_stream(data)
    duration = parse_duration(data)

    try:
        source = SourceDescriptor(
            path=video_path,
            duration_ms=round_half_up(duration * 1000),
            width=int(stream.get("width", 0)),
            height=int(stream.get("height", 0)),
        )
    except ValueError as e:
        raise RuntimeError(f"Unusable video metadata in {video_path}: {e}")

    logger.info(
        "Probed %s: %.3fs, %dx%d", video_path, source.duration, source.width, source.height
    )
    return source
