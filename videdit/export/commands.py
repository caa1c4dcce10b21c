"""FFmpeg argument synthesis for each edit kind.

Every function here is pure: parameters in, ordered argument list out.
FFmpeg is positional about inputs/outputs and filters, so the order of the
returned tokens matters and is part of the contract.
"""

from __future__ import annotations

from pathlib import Path

from videdit.model.params import (
    Container,
    ConvertParameters,
    CropParameters,
    EditParameters,
    ResizeParameters,
    TrimParameters,
)

GIF_FILTER = "fps=10,scale=320:-1:flags=lanczos,split[s0][s1];[s0]palettegen[p];[s1][p]paletteuse"

VIDEO_ENCODERS = {
    Container.MP4: "libx264",
    Container.MOV: "libx264",
    Container.MKV: "libx264",
    Container.WEBM: "libvpx-vp9",
    Container.AVI: "mjpeg",
    Container.GIF: None,  # palette filter chain, see _video_args
}


def format_seconds(seconds: float) -> str:
    """Format a timestamp at millisecond precision without trailing zeros."""
    text = f"{seconds:.3f}".rstrip("0").rstrip(".")
    return text or "0"


def _input_args(source_path: str) -> list[str]:
    return ["-y", "-i", str(source_path)]


def trim_args(params: TrimParameters, source_path: str, output_path: str) -> list[str]:
    """Cut [start, end] by stream copy.

    No re-encode means the cut lands on the nearest keyframe rather than
    the exact frame.
    """
    return [
        *_input_args(source_path),
        "-ss", format_seconds(params.start),
        "-to", format_seconds(params.end),
        "-c", "copy",
        str(output_path),
    ]


def crop_filter(params: CropParameters) -> str:
    return f"crop={params.width}:{params.height}:{params.x}:{params.y}"


def crop_args(params: CropParameters, source_path: str, output_path: str) -> list[str]:
    return [
        *_input_args(source_path),
        "-vf", crop_filter(params),
        "-c:a", "copy",
        str(output_path),
    ]


def scale_filter(params: ResizeParameters) -> str:
    return f"scale={params.width}:{params.height}:flags={params.algorithm.value}"


def resize_args(params: ResizeParameters, source_path: str, output_path: str) -> list[str]:
    return [
        *_input_args(source_path),
        "-vf", scale_filter(params),
        "-c:a", "copy",
        str(output_path),
    ]


def _audio_args(params: ConvertParameters) -> list[str]:
    if not params.audio_available:
        return []
    if not params.include_audio:
        return ["-an"]
    return ["-c:a", params.audio_codec.value, "-b:a", f"{params.audio_bitrate_kbps}k"]


def _video_args(params: ConvertParameters) -> list[str]:
    encoder = VIDEO_ENCODERS[params.container]
    if encoder is None:
        # GIF is palette based; the bitrate setting does not apply.
        return ["-vf", GIF_FILTER, "-loop", "0"]
    return ["-c:v", encoder, "-b:v", f"{params.video_bitrate_kbps}k"]


def convert_args(params: ConvertParameters, source_path: str, output_path: str) -> list[str]:
    return [
        *_input_args(source_path),
        *_audio_args(params),
        *_video_args(params),
        str(output_path),
    ]


def synthesize(params: EditParameters, source_path: str, output_path: str) -> list[str]:
    """Build the argument list for any parameter model."""
    if isinstance(params, TrimParameters):
        return trim_args(params, source_path, output_path)
    if isinstance(params, CropParameters):
        return crop_args(params, source_path, output_path)
    if isinstance(params, ResizeParameters):
        return resize_args(params, source_path, output_path)
    if isinstance(params, ConvertParameters):
        return convert_args(params, source_path, output_path)
    raise TypeError(f"Unsupported edit parameters: {type(params).__name__}")


def frame_grab_args(source_path: str, output_image: str, at_seconds: float = 1.0) -> list[str]:
    """Extract a single still used as the crop preview."""
    return [
        *_input_args(source_path),
        "-ss", format_seconds(at_seconds),
        "-frames:v", "1",
        "-q:v", "2",
        str(output_image),
    ]


def suggested_output_path(
    source_path: str, suffix: str, container: Container | None = None
) -> str:
    """Default save-dialog name: ``clip.mp4`` -> ``clip_trimmed.mp4``."""
    path = Path(source_path)
    extension = container.extension if container is not None else path.suffix
    return str(path.with_name(f"{path.stem}_{suffix}{extension}"))
