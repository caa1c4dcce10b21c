"""Edit parameter models: Trim, Crop, Resize and Convert.

Each model is a frozen dataclass. Setters never mutate; they return a new,
already validated instance. Out-of-range input is clamped to the nearest
legal value instead of being rejected, since the UI feeds these from
bounded controls anyway.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from videdit.model.geometry import Rect, round_half_up, selection_to_source, to_display
from videdit.model.source import SourceDescriptor

MIN_TRIM_GAP_MS = 100

MIN_CROP_SIZE = 10

MIN_DIMENSION = 10
MAX_WIDTH = 7680
MAX_HEIGHT = 4320

MIN_VIDEO_BITRATE = 500
MAX_VIDEO_BITRATE = 20000
MIN_AUDIO_BITRATE = 32
MAX_AUDIO_BITRATE = 320


def _clamp(value, low, high):
    return max(low, min(high, value))


# ── Trim ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class TrimParameters:
    """Start/end of the kept range, stored in whole milliseconds."""

    duration_ms: int
    start_ms: int = 0
    end_ms: int = 0

    @classmethod
    def for_source(cls, source: SourceDescriptor) -> TrimParameters:
        return cls(duration_ms=source.duration_ms, start_ms=0, end_ms=source.duration_ms)

    @property
    def start(self) -> float:
        return self.start_ms / 1000.0

    @property
    def end(self) -> float:
        return self.end_ms / 1000.0

    @property
    def duration(self) -> float:
        return self.duration_ms / 1000.0

    @property
    def length(self) -> float:
        return (self.end_ms - self.start_ms) / 1000.0

    def _to_ms(self, seconds: float) -> int:
        return _clamp(round_half_up(seconds * 1000.0), 0, self.duration_ms)

    def set_start(self, seconds: float) -> TrimParameters:
        return self._resolved(self._to_ms(seconds), self.end_ms)

    def set_end(self, seconds: float) -> TrimParameters:
        return self._resolved(self.start_ms, self._to_ms(seconds))

    def _resolved(self, start_ms: int, end_ms: int) -> TrimParameters:
        # An end at or before the start is pushed past it; if that runs into
        # the end of the source, the start gives way instead.
        if start_ms >= end_ms:
            end_ms = min(start_ms + MIN_TRIM_GAP_MS, self.duration_ms)
        if end_ms - start_ms < MIN_TRIM_GAP_MS:
            start_ms = max(0, end_ms - MIN_TRIM_GAP_MS)
        return replace(self, start_ms=start_ms, end_ms=end_ms)


# ── Crop ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class CropParameters:
    source_width: int
    source_height: int
    x: int = 0
    y: int = 0
    width: int = MIN_CROP_SIZE
    height: int = MIN_CROP_SIZE

    @classmethod
    def for_source(cls, source: SourceDescriptor) -> CropParameters:
        return cls(
            source_width=source.width,
            source_height=source.height,
            x=0,
            y=0,
            width=source.width,
            height=source.height,
        )

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)

    @property
    def full_frame(self) -> Rect:
        return Rect(0, 0, self.source_width, self.source_height)

    def set_numeric(self, x: int, y: int, width: int, height: int) -> CropParameters:
        """Set the crop box from numeric fields.

        A box that runs past the right or bottom edge is shrunk to fit;
        x and y stay where they were put.
        """
        x = _clamp(int(x), 0, max(0, self.source_width - MIN_CROP_SIZE))
        y = _clamp(int(y), 0, max(0, self.source_height - MIN_CROP_SIZE))
        width = min(max(int(width), MIN_CROP_SIZE), self.source_width - x)
        height = min(max(int(height), MIN_CROP_SIZE), self.source_height - y)
        return replace(self, x=x, y=y, width=width, height=height)

    def set_from_selection(self, selection: Rect, display_frame: Rect) -> CropParameters:
        """Set the crop box from a rubber-band selection in display pixels."""
        mapped = selection_to_source(
            selection, display_frame, self.full_frame.size
        )
        if mapped.width < MIN_CROP_SIZE or mapped.height < MIN_CROP_SIZE:
            mapped = self.full_frame
        return self.set_numeric(mapped.x, mapped.y, mapped.width, mapped.height)

    def display_rect(self, display_frame: Rect) -> Rect:
        """Where the current crop box sits on the preview surface."""
        return to_display(self.rect, display_frame, self.full_frame.size)


# ── Resize ────────────────────────────────────────────────────────────


class ScalingAlgorithm(Enum):
    BILINEAR = "bilinear"
    BICUBIC = "bicubic"
    LANCZOS = "lanczos"
    SPLINE = "spline"

    @property
    def label(self) -> str:
        return self.name.capitalize()


class ResizePreset(Enum):
    CUSTOM = "Custom"
    HD = "HD (1280x720)"
    FULL_HD = "Full HD (1920x1080)"
    QHD_2K = "2K (2560x1440)"
    UHD_4K = "4K (3840x2160)"
    HALF = "50%"
    QUARTER = "25%"

    @property
    def label(self) -> str:
        return self.value


FIXED_PRESET_SIZES = {
    ResizePreset.HD: (1280, 720),
    ResizePreset.FULL_HD: (1920, 1080),
    ResizePreset.QHD_2K: (2560, 1440),
    ResizePreset.UHD_4K: (3840, 2160),
}

SOURCE_DIVISORS = {
    ResizePreset.HALF: 2,
    ResizePreset.QUARTER: 4,
}


@dataclass(frozen=True)
class ResizeParameters:
    source_width: int
    source_height: int
    width: int
    height: int
    maintain_aspect_ratio: bool = True
    algorithm: ScalingAlgorithm = ScalingAlgorithm.BILINEAR

    @classmethod
    def for_source(cls, source: SourceDescriptor) -> ResizeParameters:
        params = cls(
            source_width=source.width,
            source_height=source.height,
            width=source.width,
            height=source.height,
        )
        return params._locked_fit(source.width, source.height)

    @property
    def source_aspect_ratio(self) -> float:
        # Always taken from the source, never from the current fields, so
        # repeated edits cannot accumulate rounding drift.
        return self.source_width / self.source_height

    def _locked_fit(self, width: float, height: float) -> ResizeParameters:
        """Scale an aspect-locked size until both sides are within limits.

        Hitting a limit on one side scales the other by the source ratio.
        Only ratios too extreme for any legal size end up clamped apart.
        """
        aspect = self.source_aspect_ratio
        if width > MAX_WIDTH:
            width, height = MAX_WIDTH, MAX_WIDTH / aspect
        if height > MAX_HEIGHT:
            width, height = MAX_HEIGHT * aspect, MAX_HEIGHT
        if width < MIN_DIMENSION:
            width, height = MIN_DIMENSION, MIN_DIMENSION / aspect
        if height < MIN_DIMENSION:
            width, height = MIN_DIMENSION * aspect, MIN_DIMENSION
        return replace(
            self,
            width=_clamp(round_half_up(width), MIN_DIMENSION, MAX_WIDTH),
            height=_clamp(round_half_up(height), MIN_DIMENSION, MAX_HEIGHT),
        )

    def set_width(self, width: int) -> ResizeParameters:
        width = _clamp(int(width), MIN_DIMENSION, MAX_WIDTH)
        if not self.maintain_aspect_ratio:
            return replace(self, width=width)
        return self._locked_fit(width, width / self.source_aspect_ratio)

    def set_height(self, height: int) -> ResizeParameters:
        height = _clamp(int(height), MIN_DIMENSION, MAX_HEIGHT)
        if not self.maintain_aspect_ratio:
            return replace(self, height=height)
        return self._locked_fit(height * self.source_aspect_ratio, height)

    def set_maintain_aspect_ratio(self, enabled: bool) -> ResizeParameters:
        updated = replace(self, maintain_aspect_ratio=bool(enabled))
        if enabled:
            return updated.set_width(updated.width)
        return updated

    def set_algorithm(self, algorithm: ScalingAlgorithm) -> ResizeParameters:
        return replace(self, algorithm=ScalingAlgorithm(algorithm))

    def apply_preset(self, preset: ResizePreset) -> ResizeParameters:
        """Set both dimensions from a preset. The aspect lock is left alone."""
        if preset in FIXED_PRESET_SIZES:
            width, height = FIXED_PRESET_SIZES[preset]
        elif preset in SOURCE_DIVISORS:
            divisor = SOURCE_DIVISORS[preset]
            width, height = self.source_width // divisor, self.source_height // divisor
        else:
            return self
        return replace(
            self,
            width=_clamp(width, MIN_DIMENSION, MAX_WIDTH),
            height=_clamp(height, MIN_DIMENSION, MAX_HEIGHT),
        )


# ── Convert ───────────────────────────────────────────────────────────


class Container(Enum):
    MP4 = "mp4"
    WEBM = "webm"
    MKV = "mkv"
    AVI = "avi"
    MOV = "mov"
    GIF = "gif"

    @property
    def extension(self) -> str:
        return f".{self.value}"

    @property
    def supports_audio(self) -> bool:
        return self is not Container.GIF

    @property
    def label(self) -> str:
        return CONTAINER_LABELS[self]


CONTAINER_LABELS = {
    Container.MP4: "MP4 (H.264)",
    Container.WEBM: "WebM (VP9)",
    Container.MKV: "MKV (H.264)",
    Container.AVI: "AVI (MJPEG)",
    Container.MOV: "MOV (H.264)",
    Container.GIF: "GIF (animated)",
}


class AudioCodec(Enum):
    """Audio codecs, valued by the encoder name FFmpeg expects."""

    AAC = "aac"
    MP3 = "libmp3lame"
    OPUS = "libopus"
    FLAC = "flac"

    @property
    def label(self) -> str:
        return "Opus" if self is AudioCodec.OPUS else self.name


# None keeps whatever codec is currently chosen.
RECOMMENDED_AUDIO_CODEC = {
    Container.MP4: AudioCodec.AAC,
    Container.MOV: AudioCodec.AAC,
    Container.WEBM: AudioCodec.OPUS,
    Container.AVI: AudioCodec.FLAC,
    Container.MKV: None,
    Container.GIF: None,
}


@dataclass(frozen=True)
class ConvertParameters:
    container: Container = Container.MP4
    video_bitrate_kbps: int = 2000
    include_audio: bool = True
    audio_codec: AudioCodec = AudioCodec.AAC
    audio_bitrate_kbps: int = 128

    @classmethod
    def for_source(cls, source: SourceDescriptor) -> ConvertParameters:
        return cls()

    @property
    def audio_available(self) -> bool:
        return self.container.supports_audio

    def set_container(self, container: Container) -> ConvertParameters:
        """Switch container, picking its usual audio codec.

        GIF has no audio stream, so selecting it switches audio off. Leaving
        GIF makes audio available again but does not switch it back on.
        """
        container = Container(container)
        codec = RECOMMENDED_AUDIO_CODEC[container] or self.audio_codec
        include_audio = self.include_audio and container.supports_audio
        return replace(
            self, container=container, audio_codec=codec, include_audio=include_audio
        )

    def set_include_audio(self, enabled: bool) -> ConvertParameters:
        return replace(self, include_audio=bool(enabled) and self.audio_available)

    def set_audio_codec(self, codec: AudioCodec) -> ConvertParameters:
        return replace(self, audio_codec=AudioCodec(codec))

    def set_video_bitrate(self, kbps: int) -> ConvertParameters:
        return replace(
            self, video_bitrate_kbps=_clamp(int(kbps), MIN_VIDEO_BITRATE, MAX_VIDEO_BITRATE)
        )

    def set_audio_bitrate(self, kbps: int) -> ConvertParameters:
        return replace(
            self, audio_bitrate_kbps=_clamp(int(kbps), MIN_AUDIO_BITRATE, MAX_AUDIO_BITRATE)
        )


EditParameters = TrimParameters | CropParameters | ResizeParameters | ConvertParameters
