"""Tests for the edit session and echo guard."""

from unittest.mock import MagicMock

import pytest

from videdit.config import Settings
from videdit.export.ffmpeg import TranscodeResult
from videdit.model.params import (
    AudioCodec,
    Container,
    ConvertParameters,
    CropParameters,
    ResizeParameters,
    ScalingAlgorithm,
    TrimParameters,
)
from videdit.session import EchoGuard, EditKind, EditSession, initial_parameters


@pytest.fixture()
def transcoder():
    mock = MagicMock()
    mock.run.side_effect = lambda args, output_path: TranscodeResult.success(output_path)
    return mock


@pytest.fixture()
def session(full_hd_source, transcoder):
    return EditSession(full_hd_source, transcoder=transcoder)


class TestEchoGuard:
    def test_inactive_by_default(self):
        assert not EchoGuard().active

    def test_active_inside_scope(self):
        guard = EchoGuard()
        with guard:
            assert guard.active
        assert not guard.active

    def test_nested_scopes(self):
        guard = EchoGuard()
        with guard:
            with guard:
                pass
            assert guard.active
        assert not guard.active

    def test_released_on_error(self):
        guard = EchoGuard()
        with pytest.raises(ValueError):
            with guard:
                raise ValueError("boom")
        assert not guard.active


class TestInitialParameters:
    @pytest.mark.parametrize(
        "kind, cls",
        [
            (EditKind.TRIM, TrimParameters),
            (EditKind.CROP, CropParameters),
            (EditKind.RESIZE, ResizeParameters),
            (EditKind.CONVERT, ConvertParameters),
        ],
    )
    def test_type_per_kind(self, full_hd_source, kind, cls):
        assert isinstance(initial_parameters(kind, full_hd_source), cls)

    def test_resize_preferences(self, full_hd_source):
        settings = Settings(scaling_algorithm="lanczos", maintain_aspect_ratio=False)
        params = initial_parameters(EditKind.RESIZE, full_hd_source, settings)
        assert params.algorithm is ScalingAlgorithm.LANCZOS
        assert params.maintain_aspect_ratio is False

    def test_convert_preferences(self, full_hd_source):
        settings = Settings(
            container="webm", audio_codec="flac", video_bitrate_kbps=5000, audio_bitrate_kbps=256
        )
        params = initial_parameters(EditKind.CONVERT, full_hd_source, settings)
        assert params.container is Container.WEBM
        assert params.audio_codec is AudioCodec.FLAC
        assert params.video_bitrate_kbps == 5000
        assert params.audio_bitrate_kbps == 256

    def test_gif_preference_disables_audio(self, full_hd_source):
        params = initial_parameters(EditKind.CONVERT, full_hd_source, Settings(container="gif"))
        assert params.include_audio is False

    def test_out_of_range_preferences_are_clamped(self, full_hd_source):
        settings = Settings(video_bitrate_kbps=1, audio_bitrate_kbps=99999)
        params = initial_parameters(EditKind.CONVERT, full_hd_source, settings)
        assert params.video_bitrate_kbps == 500
        assert params.audio_bitrate_kbps == 320


class TestEditSession:
    def test_idle_on_creation(self, session):
        assert session.params is None
        assert not session.is_editing
        assert not session.in_flight

    def test_begin(self, session):
        params = session.begin(EditKind.TRIM)
        assert session.is_editing
        assert session.params is params

    def test_begin_replaces_unconfirmed_edit(self, session):
        session.begin(EditKind.TRIM)
        session.begin(EditKind.CROP)
        assert isinstance(session.params, CropParameters)

    def test_update_applies_transition(self, session):
        session.begin(EditKind.TRIM)
        params = session.update(lambda p: p.set_start(3.5))
        assert params.start == 3.5
        assert session.params.start == 3.5

    def test_update_without_edit(self, session):
        with pytest.raises(RuntimeError):
            session.update(lambda p: p)

    def test_cancel_discards(self, session, transcoder):
        session.begin(EditKind.TRIM)
        session.cancel()
        assert not session.is_editing
        transcoder.run.assert_not_called()

    def test_confirm_returns_args_and_closes_edit(self, session):
        session.begin(EditKind.CROP)
        session.update(lambda p: p.set_numeric(10, 20, 300, 200))
        args = session.confirm("/out/crop.mp4")
        assert "crop=300:200:10:20" in args
        assert args[-1] == "/out/crop.mp4"
        assert not session.is_editing
        assert session.in_flight

    def test_confirm_without_edit(self, session):
        with pytest.raises(RuntimeError):
            session.confirm("out.mp4")

    def test_single_transcode_in_flight(self, session):
        session.begin(EditKind.TRIM)
        session.confirm("out.mp4")
        with pytest.raises(RuntimeError):
            session.begin(EditKind.CROP)

    def test_finish_clears_in_flight(self, session):
        session.begin(EditKind.TRIM)
        session.confirm("out.mp4")
        result = session.finish(TranscodeResult.failure("bad"))
        assert not session.in_flight
        assert session.last_result is result
        session.begin(EditKind.CROP)

    def test_run_uses_transcoder(self, session, transcoder):
        session.begin(EditKind.RESIZE)
        session.update(lambda p: p.set_width(1280))
        result = session.run("/out/small.mp4")
        assert result.ok
        assert result.output_path == "/out/small.mp4"
        args, output = transcoder.run.call_args.args
        assert "scale=1280:720:flags=bilinear" in args
        assert output == "/out/small.mp4"
        assert not session.in_flight

    def test_run_reports_failure(self, session, transcoder):
        transcoder.run.side_effect = None
        transcoder.run.return_value = TranscodeResult.failure("Invalid data found")
        session.begin(EditKind.TRIM)
        result = session.run("out.mp4")
        assert not result.ok
        assert result.message == "Invalid data found"
        assert not session.in_flight

    def test_run_turns_exceptions_into_failures(self, session, transcoder):
        transcoder.run.side_effect = OSError("disk full")
        session.begin(EditKind.TRIM)
        result = session.run("out.mp4")
        assert not result.ok
        assert "disk full" in result.message
        assert not session.in_flight

    def test_source_unchanged_by_edits(self, session, full_hd_source):
        session.begin(EditKind.RESIZE)
        session.update(lambda p: p.set_width(640))
        session.run("out.mp4")
        assert session.source == full_hd_source
