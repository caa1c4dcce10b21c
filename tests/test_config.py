"""Tests for persisted user settings."""

import json

from videdit.config import Settings
from videdit.model.params import AudioCodec, Container, ScalingAlgorithm


class TestSettings:
    def test_defaults(self):
        s = Settings()
        assert s.ffmpeg_path == "ffmpeg"
        assert s.ffprobe_path == "ffprobe"
        assert s.default_container is Container.MP4
        assert s.video_bitrate_kbps == 2000
        assert s.default_audio_codec is AudioCodec.AAC
        assert s.audio_bitrate_kbps == 128
        assert s.default_scaling_algorithm is ScalingAlgorithm.BILINEAR
        assert s.maintain_aspect_ratio is True

    def test_save_load_round_trip(self, tmp_path):
        path = tmp_path / "sub" / "settings.json"
        Settings(container="webm", video_bitrate_kbps=6000, frame_grab_seconds=2.5).save(path)
        loaded = Settings.load(path)
        assert loaded.default_container is Container.WEBM
        assert loaded.video_bitrate_kbps == 6000
        assert loaded.frame_grab_seconds == 2.5

    def test_load_missing_file(self, tmp_path):
        assert Settings.load(tmp_path / "nope.json") == Settings()

    def test_load_corrupt_file(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{not json")
        assert Settings.load(path) == Settings()

    def test_load_ignores_unknown_keys(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"audio_bitrate_kbps": 192, "theme": "dark"}))
        loaded = Settings.load(path)
        assert loaded.audio_bitrate_kbps == 192
        assert not hasattr(loaded, "theme")

    def test_invalid_enum_values_fall_back(self):
        s = Settings(container="flv", audio_codec="vorbis", scaling_algorithm="nearest")
        assert s.default_container is Container.MP4
        assert s.default_audio_codec is AudioCodec.AAC
        assert s.default_scaling_algorithm is ScalingAlgorithm.BILINEAR
