"""Settings dataclass with JSON persistence."""

import json
from dataclasses import asdict, dataclass
from pathlib import Path

from videdit.model.params import AudioCodec, Container, ScalingAlgorithm

DEFAULT_CONFIG_DIR = Path.home() / ".videdit"
DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_DIR / "settings.json"


@dataclass
class Settings:
    # External tools
    ffmpeg_path: str = "ffmpeg"
    ffprobe_path: str = "ffprobe"

    # Convert defaults
    container: str = Container.MP4.value
    video_bitrate_kbps: int = 2000
    include_audio: bool = True
    audio_codec: str = AudioCodec.AAC.value
    audio_bitrate_kbps: int = 128

    # Resize defaults
    scaling_algorithm: str = ScalingAlgorithm.BILINEAR.value
    maintain_aspect_ratio: bool = True

    # Crop preview: where to grab the still frame from
    frame_grab_seconds: float = 1.0

    def save(self, path: Path | None = None) -> None:
        path = path or DEFAULT_CONFIG_PATH
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(asdict(self), indent=2))

    @classmethod
    def load(cls, path: Path | None = None) -> "Settings":
        path = path or DEFAULT_CONFIG_PATH
        if not path.exists():
            return cls()
        try:
            data = json.loads(path.read_text())
            return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})
        except (json.JSONDecodeError, TypeError):
            return cls()

    @property
    def default_container(self) -> Container:
        try:
            return Container(self.container)
        except ValueError:
            return Container.MP4

    @property
    def default_audio_codec(self) -> AudioCodec:
        try:
            return AudioCodec(self.audio_codec)
        except ValueError:
            return AudioCodec.AAC

    @property
    def default_scaling_algorithm(self) -> ScalingAlgorithm:
        try:
            return ScalingAlgorithm(self.scaling_algorithm)
        except ValueError:
            return ScalingAlgorithm.BILINEAR
