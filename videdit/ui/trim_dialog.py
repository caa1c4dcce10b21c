"""Trim dialog: start/end time fields bound to TrimParameters."""

from __future__ import annotations

from PySide6.QtWidgets import QDialog, QDialogButtonBox, QDoubleSpinBox, QFormLayout, QWidget

from videdit.model.params import TrimParameters
from videdit.session import EchoGuard, EditSession


class TrimDialog(QDialog):
    def __init__(self, session: EditSession, parent: QWidget | None = None):
        super().__init__(parent)
        self.setWindowTitle("Trim Video")
        self.session = session
        self._echo = EchoGuard()
        self._setup_ui()
        self._sync_fields()
        self.start_spin.valueChanged.connect(self._on_start_changed)
        self.end_spin.valueChanged.connect(self._on_end_changed)

    @property
    def params(self) -> TrimParameters:
        return self.session.params

    def _setup_ui(self) -> None:
        layout = QFormLayout(self)
        duration = self.params.duration

        self.start_spin = QDoubleSpinBox()
        self.start_spin.setDecimals(3)
        self.start_spin.setRange(0.0, duration)
        self.start_spin.setSuffix(" sec")
        layout.addRow("Start Time:", self.start_spin)

        self.end_spin = QDoubleSpinBox()
        self.end_spin.setDecimals(3)
        self.end_spin.setRange(0.0, duration)
        self.end_spin.setSuffix(" sec")
        layout.addRow("End Time:", self.end_spin)

        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel
        )
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        layout.addRow(buttons)

    def _sync_fields(self) -> None:
        with self._echo:
            self.start_spin.setValue(self.params.start)
            self.end_spin.setValue(self.params.end)

    def _on_start_changed(self, value: float) -> None:
        if self._echo.active:
            return
        self.session.update(lambda p: p.set_start(value))
        self._sync_fields()

    def _on_end_changed(self, value: float) -> None:
        if self._echo.active:
            return
        self.session.update(lambda p: p.set_end(value))
        self._sync_fields()
