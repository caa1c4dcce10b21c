"""Convert dialog: container, bitrates and audio options."""

from __future__ import annotations

from pathlib import Path

from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QGroupBox,
    QLabel,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from videdit.model.params import (
    MAX_AUDIO_BITRATE,
    MAX_VIDEO_BITRATE,
    MIN_AUDIO_BITRATE,
    MIN_VIDEO_BITRATE,
    AudioCodec,
    Container,
    ConvertParameters,
)
from videdit.session import EchoGuard, EditSession


class ConvertDialog(QDialog):
    def __init__(self, session: EditSession, parent: QWidget | None = None):
        super().__init__(parent)
        self.setWindowTitle("Convert Video Format")
        self.setMinimumWidth(400)
        self.session = session
        self._echo = EchoGuard()
        self._setup_ui()
        self._sync_fields()
        self._connect_signals()

    @property
    def params(self) -> ConvertParameters:
        return self.session.params

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)

        current_ext = Path(self.session.source.path).suffix.lstrip(".").lower()
        layout.addWidget(QLabel(f"Current format: {current_ext}"))

        format_group = QGroupBox("Format Settings")
        format_layout = QFormLayout()
        self.container_combo = QComboBox()
        for container in Container:
            self.container_combo.addItem(container.label, container.value)
        format_layout.addRow("Target Format:", self.container_combo)

        self.video_bitrate_spin = QSpinBox()
        self.video_bitrate_spin.setRange(MIN_VIDEO_BITRATE, MAX_VIDEO_BITRATE)
        self.video_bitrate_spin.setSuffix(" kbps")
        format_layout.addRow("Video Bitrate:", self.video_bitrate_spin)
        format_group.setLayout(format_layout)
        layout.addWidget(format_group)

        audio_group = QGroupBox("Audio Settings")
        audio_layout = QFormLayout()
        self.audio_checkbox = QCheckBox("Include audio")
        audio_layout.addRow("", self.audio_checkbox)

        self.audio_codec_combo = QComboBox()
        for codec in AudioCodec:
            self.audio_codec_combo.addItem(codec.label, codec.value)
        audio_layout.addRow("Audio Codec:", self.audio_codec_combo)

        self.audio_bitrate_spin = QSpinBox()
        self.audio_bitrate_spin.setRange(MIN_AUDIO_BITRATE, MAX_AUDIO_BITRATE)
        self.audio_bitrate_spin.setSuffix(" kbps")
        audio_layout.addRow("Audio Bitrate:", self.audio_bitrate_spin)
        audio_group.setLayout(audio_layout)
        layout.addWidget(audio_group)

        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel
        )
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def _connect_signals(self) -> None:
        self.container_combo.currentIndexChanged.connect(self._on_container_changed)
        self.video_bitrate_spin.valueChanged.connect(self._on_video_bitrate_changed)
        self.audio_checkbox.toggled.connect(self._on_audio_toggled)
        self.audio_codec_combo.currentIndexChanged.connect(self._on_audio_codec_changed)
        self.audio_bitrate_spin.valueChanged.connect(self._on_audio_bitrate_changed)

    def _sync_fields(self) -> None:
        params = self.params
        with self._echo:
            self.container_combo.setCurrentIndex(
                self.container_combo.findData(params.container.value)
            )
            self.video_bitrate_spin.setValue(params.video_bitrate_kbps)
            self.audio_checkbox.setChecked(params.include_audio)
            self.audio_codec_combo.setCurrentIndex(
                self.audio_codec_combo.findData(params.audio_codec.value)
            )
            self.audio_bitrate_spin.setValue(params.audio_bitrate_kbps)

        self.video_bitrate_spin.setEnabled(params.container is not Container.GIF)
        self.audio_checkbox.setEnabled(params.audio_available)
        self.audio_codec_combo.setEnabled(params.include_audio)
        self.audio_bitrate_spin.setEnabled(params.include_audio)

    def _apply(self, transition) -> None:
        if self._echo.active:
            return
        self.session.update(transition)
        self._sync_fields()

    def _on_container_changed(self, index: int) -> None:
        container = Container(self.container_combo.itemData(index))
        self._apply(lambda p: p.set_container(container))

    def _on_video_bitrate_changed(self, value: int) -> None:
        self._apply(lambda p: p.set_video_bitrate(value))

    def _on_audio_toggled(self, checked: bool) -> None:
        self._apply(lambda p: p.set_include_audio(checked))

    def _on_audio_codec_changed(self, index: int) -> None:
        codec = AudioCodec(self.audio_codec_combo.itemData(index))
        self._apply(lambda p: p.set_audio_codec(codec))

    def _on_audio_bitrate_changed(self, value: int) -> None:
        self._apply(lambda p: p.set_audio_bitrate(value))
