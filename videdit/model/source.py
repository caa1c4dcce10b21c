"""SourceDescriptor: the immutable description of an opened video."""

from dataclasses import dataclass

from videdit.model.geometry import Size


@dataclass(frozen=True)
class SourceDescriptor:
    path: str
    duration_ms: int
    width: int
    height: int

    def __post_init__(self) -> None:
        if not self.path:
            raise ValueError("Source path must not be empty")
        if self.duration_ms <= 0:
            raise ValueError(f"Source duration must be positive, got {self.duration_ms}ms")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Source dimensions must be positive, got {self.width}x{self.height}"
            )

    @property
    def duration(self) -> float:
        """Duration in seconds."""
        return self.duration_ms / 1000.0

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height
