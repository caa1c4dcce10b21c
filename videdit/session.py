"""Edit session: one source, one active parameter model, one transcode at a time."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Protocol

from videdit.config import Settings
from videdit.export.commands import synthesize
from videdit.export.ffmpeg import FfmpegTranscoder, TranscodeResult
from videdit.model.params import (
    ConvertParameters,
    CropParameters,
    EditParameters,
    ResizeParameters,
    TrimParameters,
)
from videdit.model.source import SourceDescriptor

logger = logging.getLogger(__name__)


class EditKind(Enum):
    TRIM = "trim"
    CROP = "crop"
    RESIZE = "resize"
    CONVERT = "convert"

    @property
    def output_suffix(self) -> str:
        """Suffix for the default output name, e.g. ``clip_trimmed.mp4``."""
        return OUTPUT_SUFFIXES[self]


OUTPUT_SUFFIXES = {
    EditKind.TRIM: "trimmed",
    EditKind.CROP: "cropped",
    EditKind.RESIZE: "resized",
    EditKind.CONVERT: "converted",
}

PARAMETER_TYPES = {
    EditKind.TRIM: TrimParameters,
    EditKind.CROP: CropParameters,
    EditKind.RESIZE: ResizeParameters,
    EditKind.CONVERT: ConvertParameters,
}


class Transcoder(Protocol):
    def run(self, args: list[str], output_path: str) -> TranscodeResult: ...


class EchoGuard:
    """Scope inside which change notifications are programmatic echoes.

    Code that pushes one representation of a value into another (numeric
    fields into a selection box, or back) does so inside ``with guard:``;
    change handlers return early while ``guard.active`` is true.
    """

    def __init__(self):
        self._depth = 0

    @property
    def active(self) -> bool:
        return self._depth > 0

    def __enter__(self) -> EchoGuard:
        self._depth += 1
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._depth -= 1


def initial_parameters(
    kind: EditKind, source: SourceDescriptor, settings: Settings | None = None
) -> EditParameters:
    """Default parameter model for *kind*, with user preferences applied."""
    params = PARAMETER_TYPES[kind].for_source(source)
    if settings is None:
        return params

    if isinstance(params, ResizeParameters):
        params = params.set_algorithm(settings.default_scaling_algorithm)
        params = params.set_maintain_aspect_ratio(settings.maintain_aspect_ratio)
    elif isinstance(params, ConvertParameters):
        params = (
            params.set_container(settings.default_container)
            .set_audio_codec(settings.default_audio_codec)
            .set_include_audio(settings.include_audio)
            .set_video_bitrate(settings.video_bitrate_kbps)
            .set_audio_bitrate(settings.audio_bitrate_kbps)
        )
    return params


class EditSession:
    """Hosts the parameter model for the edit currently being configured.

    The session is the single writer of that model: callers hand it pure
    transitions through :meth:`update`. Confirming turns the model into an
    argument list and drops it; only one transcode may be in flight.
    """

    def __init__(
        self,
        source: SourceDescriptor,
        transcoder: Transcoder | None = None,
        settings: Settings | None = None,
    ):
        self.source = source
        self.settings = settings or Settings()
        self.transcoder = transcoder or FfmpegTranscoder(self.settings.ffmpeg_path)
        self._params: EditParameters | None = None
        self._in_flight = False
        self.last_result: TranscodeResult | None = None

    @property
    def params(self) -> EditParameters | None:
        return self._params

    @property
    def is_editing(self) -> bool:
        return self._params is not None

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def begin(self, kind: EditKind) -> EditParameters:
        """Start configuring a new edit, replacing any unconfirmed one."""
        if self._in_flight:
            raise RuntimeError("A transcode is already running")
        self._params = initial_parameters(kind, self.source, self.settings)
        logger.debug("Began %s edit of %s", kind.value, self.source.path)
        return self._params

    def update(self, transition: Callable[[EditParameters], EditParameters]) -> EditParameters:
        """Apply one transition, e.g. ``lambda p: p.set_start(3.5)``."""
        if self._params is None:
            raise RuntimeError("No edit in progress")
        self._params = transition(self._params)
        return self._params

    def cancel(self) -> None:
        self._params = None

    def confirm(self, output_path: str) -> list[str]:
        """Synthesize the argument list and close the edit.

        The caller must report the transcode outcome with :meth:`finish`.
        """
        if self._params is None:
            raise RuntimeError("No edit in progress")
        if self._in_flight:
            raise RuntimeError("A transcode is already running")
        args = synthesize(self._params, self.source.path, output_path)
        self._params = None
        self._in_flight = True
        return args

    def finish(self, result: TranscodeResult) -> TranscodeResult:
        self._in_flight = False
        self.last_result = result
        if result.ok:
            logger.info("Wrote %s", result.output_path)
        else:
            logger.warning("Transcode failed: %s", result.message)
        return result

    def run(self, output_path: str) -> TranscodeResult:
        """Confirm and run the transcode synchronously through the transcoder."""
        args = self.confirm(output_path)
        try:
            result = self.transcoder.run(args, output_path)
        except Exception as e:
            result = TranscodeResult.failure(str(e), output_path)
        return self.finish(result)
