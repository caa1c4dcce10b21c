"""YAML edit-job files for batch/CLI usage.

A job names one source, one operation and that operation's options::

    source: clip.mp4
    output: clip_small.mp4
    operation: resize
    resize:
      preset: hd
      algorithm: lanczos
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from videdit.config import Settings
from videdit.model.params import (
    AudioCodec,
    Container,
    ConvertParameters,
    CropParameters,
    EditParameters,
    ResizeParameters,
    ResizePreset,
    ScalingAlgorithm,
    TrimParameters,
)
from videdit.model.source import SourceDescriptor
from videdit.session import EditKind, initial_parameters

KNOWN_TOP_KEYS = {"source", "output", "operation"} | {kind.value for kind in EditKind}
KNOWN_OPTION_KEYS = {
    EditKind.TRIM: {"start", "end"},
    EditKind.CROP: {"x", "y", "width", "height"},
    EditKind.RESIZE: {"width", "height", "preset", "maintain_aspect_ratio", "algorithm"},
    EditKind.CONVERT: {
        "container",
        "video_bitrate",
        "include_audio",
        "audio_codec",
        "audio_bitrate",
    },
}


@dataclass
class EditJob:
    source: str
    kind: EditKind
    output: str | None = None
    options: dict = field(default_factory=dict)


def _warn_unknown_keys(keys: set[str], known: set[str], section: str) -> None:
    unknown = keys - known
    for key in sorted(unknown):
        warnings.warn(f"Unknown key '{key}' in {section} section of edit job", stacklevel=3)


def _resolve(path: str, base_dir: Path) -> str:
    # Relative paths are relative to the job file, not the working directory
    if Path(path).is_absolute():
        return path
    return str((base_dir / path).resolve())


def load_edit_job(path: str | Path) -> EditJob:
    """Load a YAML edit-job file and return an EditJob."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Job file not found: {path}")

    raw = yaml.safe_load(path.read_text())
    if not isinstance(raw, dict):
        kind = "empty file" if raw is None else type(raw).__name__
        raise ValueError(f"Edit job must be a YAML mapping, got {kind}")

    _warn_unknown_keys(set(raw.keys()), KNOWN_TOP_KEYS, "top-level")

    if "source" not in raw:
        raise ValueError("Edit job is missing 'source'")
    if "operation" not in raw:
        raise ValueError("Edit job is missing 'operation'")

    try:
        kind = EditKind(str(raw["operation"]).lower())
    except ValueError:
        choices = ", ".join(k.value for k in EditKind)
        raise ValueError(f"Unknown operation {raw['operation']!r} (expected one of: {choices})")

    options = raw.get(kind.value) or {}
    if not isinstance(options, dict):
        raise ValueError(f"'{kind.value}' must be a mapping")
    _warn_unknown_keys(set(options.keys()), KNOWN_OPTION_KEYS[kind], kind.value)

    base_dir = path.resolve().parent
    output = raw.get("output")
    return EditJob(
        source=_resolve(str(raw["source"]), base_dir),
        kind=kind,
        output=_resolve(str(output), base_dir) if output is not None else None,
        options=options,
    )


def _parse_enum(enum_cls, value, aliases: dict | None = None):
    text = str(value).strip().lower()
    if aliases and text in aliases:
        return aliases[text]
    for member in enum_cls:
        if text in (member.name.lower(), str(member.value).lower()):
            return member
    choices = ", ".join(m.name.lower() for m in enum_cls)
    raise ValueError(f"Unknown {enum_cls.__name__} {value!r} (expected one of: {choices})")


def _number(opts: dict, key: str, section: str) -> float:
    value = opts[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"'{section}.{key}' must be a number, got {value!r}")
    return float(value)


def _integer(opts: dict, key: str, section: str, default: int | None = None) -> int:
    if key not in opts and default is not None:
        return default
    return int(_number(opts, key, section))


def _flag(opts: dict, key: str, section: str) -> bool:
    # bool("no") is True, so only real YAML booleans are accepted
    value = opts[key]
    if not isinstance(value, bool):
        raise ValueError(f"'{section}.{key}' must be true or false, got {value!r}")
    return value


PRESET_ALIASES = {
    "2k": ResizePreset.QHD_2K,
    "4k": ResizePreset.UHD_4K,
    "fullhd": ResizePreset.FULL_HD,
    "50%": ResizePreset.HALF,
    "25%": ResizePreset.QUARTER,
}


def _apply_trim(params: TrimParameters, opts: dict) -> TrimParameters:
    if "start" in opts:
        params = params.set_start(_number(opts, "start", "trim"))
    if "end" in opts:
        params = params.set_end(_number(opts, "end", "trim"))
    return params


def _apply_crop(params: CropParameters, opts: dict) -> CropParameters:
    return params.set_numeric(
        _integer(opts, "x", "crop", params.x),
        _integer(opts, "y", "crop", params.y),
        _integer(opts, "width", "crop", params.width),
        _integer(opts, "height", "crop", params.height),
    )


def _apply_resize(params: ResizeParameters, opts: dict) -> ResizeParameters:
    if "maintain_aspect_ratio" in opts:
        params = params.set_maintain_aspect_ratio(_flag(opts, "maintain_aspect_ratio", "resize"))
    if "algorithm" in opts:
        params = params.set_algorithm(_parse_enum(ScalingAlgorithm, opts["algorithm"]))
    if "preset" in opts:
        params = params.apply_preset(_parse_enum(ResizePreset, opts["preset"], PRESET_ALIASES))
    if "width" in opts:
        params = params.set_width(_integer(opts, "width", "resize"))
    if "height" in opts:
        params = params.set_height(_integer(opts, "height", "resize"))
    return params


def _apply_convert(params: ConvertParameters, opts: dict) -> ConvertParameters:
    if "container" in opts:
        params = params.set_container(_parse_enum(Container, opts["container"]))
    if "include_audio" in opts:
        params = params.set_include_audio(_flag(opts, "include_audio", "convert"))
    if "audio_codec" in opts:
        params = params.set_audio_codec(_parse_enum(AudioCodec, opts["audio_codec"]))
    if "video_bitrate" in opts:
        params = params.set_video_bitrate(_integer(opts, "video_bitrate", "convert"))
    if "audio_bitrate" in opts:
        params = params.set_audio_bitrate(_integer(opts, "audio_bitrate", "convert"))
    return params


OPTION_APPLIERS = {
    EditKind.TRIM: _apply_trim,
    EditKind.CROP: _apply_crop,
    EditKind.RESIZE: _apply_resize,
    EditKind.CONVERT: _apply_convert,
}


def build_parameters(
    job: EditJob, source: SourceDescriptor, settings: Settings | None = None
) -> EditParameters:
    """Turn a job's options into a parameter model via the regular setters."""
    params = initial_parameters(job.kind, source, settings)
    return OPTION_APPLIERS[job.kind](params, job.options)
