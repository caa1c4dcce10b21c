"""Resize dialog: target size, aspect lock, presets and scaling algorithm."""

from __future__ import annotations

from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QLabel,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from videdit.model.params import (
    MAX_HEIGHT,
    MAX_WIDTH,
    MIN_DIMENSION,
    ResizeParameters,
    ResizePreset,
    ScalingAlgorithm,
)
from videdit.session import EchoGuard, EditSession


class ResizeDialog(QDialog):
    def __init__(self, session: EditSession, parent: QWidget | None = None):
        super().__init__(parent)
        self.setWindowTitle("Resize Video")
        self.setMinimumWidth(400)
        self.session = session
        self._echo = EchoGuard()
        self._setup_ui()
        self._sync_fields()
        self._connect_signals()

    @property
    def params(self) -> ResizeParameters:
        return self.session.params

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)
        params = self.params

        layout.addWidget(
            QLabel(f"Original size: {params.source_width} x {params.source_height}")
        )

        form = QFormLayout()
        self.width_spin = QSpinBox()
        self.width_spin.setRange(MIN_DIMENSION, MAX_WIDTH)
        self.width_spin.setSuffix(" px")
        form.addRow("Width:", self.width_spin)

        self.height_spin = QSpinBox()
        self.height_spin.setRange(MIN_DIMENSION, MAX_HEIGHT)
        self.height_spin.setSuffix(" px")
        form.addRow("Height:", self.height_spin)

        self.aspect_checkbox = QCheckBox("Maintain aspect ratio")
        form.addRow("", self.aspect_checkbox)

        self.preset_combo = QComboBox()
        for preset in ResizePreset:
            self.preset_combo.addItem(preset.label, preset.name)
        form.addRow("Preset sizes:", self.preset_combo)

        self.algorithm_combo = QComboBox()
        for algorithm in ScalingAlgorithm:
            self.algorithm_combo.addItem(algorithm.label, algorithm.value)
        form.addRow("Scaling Algorithm:", self.algorithm_combo)
        layout.addLayout(form)

        self.summary_label = QLabel()
        layout.addWidget(self.summary_label)

        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel
        )
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def _connect_signals(self) -> None:
        self.width_spin.valueChanged.connect(self._on_width_changed)
        self.height_spin.valueChanged.connect(self._on_height_changed)
        self.aspect_checkbox.toggled.connect(self._on_aspect_toggled)
        self.preset_combo.currentIndexChanged.connect(self._on_preset_changed)
        self.algorithm_combo.currentIndexChanged.connect(self._on_algorithm_changed)

    def _sync_fields(self) -> None:
        params = self.params
        with self._echo:
            self.width_spin.setValue(params.width)
            self.height_spin.setValue(params.height)
            self.aspect_checkbox.setChecked(params.maintain_aspect_ratio)
            self.algorithm_combo.setCurrentIndex(
                self.algorithm_combo.findData(params.algorithm.value)
            )
        self.summary_label.setText(
            f"{params.source_width} x {params.source_height} → {params.width} x {params.height}"
        )

    def _apply(self, transition) -> None:
        self.session.update(transition)
        self._sync_fields()

    def _on_width_changed(self, value: int) -> None:
        if not self._echo.active:
            self._apply(lambda p: p.set_width(value))

    def _on_height_changed(self, value: int) -> None:
        if not self._echo.active:
            self._apply(lambda p: p.set_height(value))

    def _on_aspect_toggled(self, checked: bool) -> None:
        if self._echo.active:
            return
        self._apply(lambda p: p.set_maintain_aspect_ratio(checked))
        with self._echo:
            self.preset_combo.setCurrentIndex(0)

    def _on_preset_changed(self, index: int) -> None:
        if self._echo.active:
            return
        preset = ResizePreset[self.preset_combo.itemData(index)]
        self._apply(lambda p: p.apply_preset(preset))

    def _on_algorithm_changed(self, index: int) -> None:
        if self._echo.active:
            return
        algorithm = ScalingAlgorithm(self.algorithm_combo.itemData(index))
        self._apply(lambda p: p.set_algorithm(algorithm))
