"""FFmpeg invocation: run one argument list, report success or failure."""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TranscodeResult:
    ok: bool
    message: str = ""
    output_path: str = ""

    @classmethod
    def success(cls, output_path: str = "") -> TranscodeResult:
        return cls(ok=True, output_path=output_path)

    @classmethod
    def failure(cls, message: str, output_path: str = "") -> TranscodeResult:
        return cls(ok=False, message=message, output_path=output_path)


def format_command(args: list[str], ffmpeg: str = "ffmpeg") -> str:
    """Shell-quoted command line, for logs and dry runs."""
    return shlex.join([ffmpeg, *args])


def run_ffmpeg(
    args: list[str],
    ffmpeg: str = "ffmpeg",
    output_path: str = "",
) -> TranscodeResult:
    """Run FFmpeg with *args* and wait for it to finish.

    Process problems are reported in the result, never raised. The output
    is not interpreted beyond the exit code; stderr becomes the failure
    message.
    """
    logger.info("Running %s", format_command(args, ffmpeg))
    try:
        result = subprocess.run(
            [ffmpeg, *args],
            capture_output=True,
            text=True,
        )
    except FileNotFoundError:
        return TranscodeResult.failure(
            f"{ffmpeg} not found. Install FFmpeg: brew install ffmpeg (macOS) "
            "or sudo apt install ffmpeg (Linux)",
            output_path,
        )
    except OSError as e:
        return TranscodeResult.failure(f"Failed to start {ffmpeg}: {e}", output_path)

    if result.returncode != 0:
        message = result.stderr.strip() or f"{ffmpeg} exited with code {result.returncode}"
        logger.warning("FFmpeg failed (exit %d)", result.returncode)
        return TranscodeResult.failure(message, output_path)

    return TranscodeResult.success(output_path)


class FfmpegTranscoder:
    """Transcoder collaborator that runs FFmpeg synchronously."""

    def __init__(self, ffmpeg: str = "ffmpeg"):
        self.ffmpeg = ffmpeg

    def run(self, args: list[str], output_path: str) -> TranscodeResult:
        return run_ffmpeg(args, ffmpeg=self.ffmpeg, output_path=output_path)
