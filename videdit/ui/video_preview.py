"""Video preview widget wrapping QMediaPlayer + QVideoWidget."""

from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtCore import Qt, QUrl, Slot
from PySide6.QtMultimedia import QAudioOutput, QMediaPlayer
from PySide6.QtMultimediaWidgets import QVideoWidget
from PySide6.QtWidgets import QHBoxLayout, QPushButton, QSlider, QVBoxLayout, QWidget

logger = logging.getLogger(__name__)


class VideoPreview(QWidget):
    """Video preview with a play/pause toggle and a seek slider."""

    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        self._setup_ui()
        self._connect_signals()

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)

        self.video_widget = QVideoWidget()
        self.video_widget.setMinimumSize(640, 360)
        layout.addWidget(self.video_widget)

        controls = QHBoxLayout()
        self.play_button = QPushButton("Play")
        self.play_button.setEnabled(False)
        self.timeline_slider = QSlider(Qt.Orientation.Horizontal)
        self.timeline_slider.setRange(0, 0)
        controls.addWidget(self.play_button)
        controls.addWidget(self.timeline_slider)
        layout.addLayout(controls)

        self.player = QMediaPlayer()
        self.audio_output = QAudioOutput()
        self.player.setAudioOutput(self.audio_output)
        self.player.setVideoOutput(self.video_widget)

    def _connect_signals(self) -> None:
        self.play_button.clicked.connect(self.toggle_playback)
        self.player.playbackStateChanged.connect(self._on_state_changed)
        self.player.durationChanged.connect(self._on_duration_changed)
        self.player.positionChanged.connect(self._on_position_changed)
        self.player.errorOccurred.connect(self._on_error)
        self.timeline_slider.sliderMoved.connect(self.player.setPosition)

    def _on_error(self, error: QMediaPlayer.Error, message: str) -> None:
        logger.warning("Media player error (%s): %s", error, message)
        self.player.stop()

    def cleanup(self) -> None:
        """Stop playback and release media resources.

        Call before widget destruction to avoid segfaults from the
        underlying FFmpeg backend trying to finalize during teardown.
        """
        self.player.stop()
        self.player.setSource(QUrl())
        self.player.setVideoOutput(None)
        self.player.setAudioOutput(None)

    def closeEvent(self, event) -> None:
        self.cleanup()
        super().closeEvent(event)

    def load(self, path: str) -> None:
        """Load a video file for playback."""
        if not Path(path).is_file():
            logger.warning("Cannot load, file not found: %s", path)
            return
        self.player.setSource(QUrl.fromLocalFile(path))
        self.play_button.setText("Play")
        self.play_button.setEnabled(True)

    @Slot()
    def toggle_playback(self) -> None:
        if self.is_playing:
            self.player.pause()
        else:
            self.player.play()

    @Slot(QMediaPlayer.PlaybackState)
    def _on_state_changed(self, state: QMediaPlayer.PlaybackState) -> None:
        is_playing = state == QMediaPlayer.PlaybackState.PlayingState
        self.play_button.setText("Pause" if is_playing else "Play")

    @Slot(int)
    def _on_duration_changed(self, duration_ms: int) -> None:
        self.timeline_slider.setRange(0, duration_ms)

    @Slot(int)
    def _on_position_changed(self, position_ms: int) -> None:
        if not self.timeline_slider.isSliderDown():
            self.timeline_slider.setValue(position_ms)

    @property
    def is_playing(self) -> bool:
        return (
            self.player.playbackState()
            == QMediaPlayer.PlaybackState.PlayingState
        )

    @property
    def duration_ms(self) -> int:
        return self.player.duration()
