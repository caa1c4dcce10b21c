"""Crop dialog: rubber-band selection over a still frame plus numeric fields.

Both representations edit the same CropParameters. Whichever one the user
touches goes through the session first; the other is then refreshed inside
an EchoGuard so the refresh is not mistaken for a new edit.
"""

from __future__ import annotations

import logging
import os
import tempfile

from PySide6.QtCore import QRect, Qt, Signal
from PySide6.QtGui import QPainter, QPixmap
from PySide6.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QLabel,
    QRubberBand,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from videdit.export.commands import frame_grab_args
from videdit.model.geometry import Rect, Size, fit_frame
from videdit.model.params import MIN_CROP_SIZE, CropParameters
from videdit.session import EchoGuard, EditSession
from videdit.workers.transcode_worker import TranscodeWorker

logger = logging.getLogger(__name__)


def _to_qrect(rect: Rect) -> QRect:
    return QRect(rect.x, rect.y, rect.width, rect.height)


class CropSelectionWidget(QWidget):
    """Draws the frame letterboxed and lets the user drag a selection."""

    selection_made = Signal(object)  # Rect in widget coordinates
    display_frame_changed = Signal(object)  # Rect where the frame is drawn

    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        self.setMinimumSize(640, 360)
        self._frame = QPixmap()
        self._origin: tuple[int, int] | None = None
        self.display_frame = Rect()
        self.rubber_band = QRubberBand(QRubberBand.Shape.Rectangle, self)

    @property
    def has_frame(self) -> bool:
        return not self._frame.isNull()

    def set_frame_image(self, pixmap: QPixmap) -> None:
        self._frame = pixmap
        self._update_display_frame()
        self.update()

    def show_selection(self, rect: Rect) -> None:
        """Show *rect* (widget coordinates) without emitting anything."""
        if rect.is_empty:
            self.rubber_band.hide()
            return
        self.rubber_band.setGeometry(_to_qrect(rect))
        self.rubber_band.show()

    def _update_display_frame(self) -> None:
        frame = Rect()
        if self.has_frame:
            frame = fit_frame(
                Size(self.width(), self.height()),
                Size(self._frame.width(), self._frame.height()),
            )
        if frame != self.display_frame:
            self.display_frame = frame
            self.display_frame_changed.emit(frame)

    def resizeEvent(self, event) -> None:
        self._update_display_frame()
        super().resizeEvent(event)

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.fillRect(self.rect(), Qt.GlobalColor.black)
        if self.has_frame and not self.display_frame.is_empty:
            painter.drawPixmap(_to_qrect(self.display_frame), self._frame)

    def mousePressEvent(self, event) -> None:
        if event.button() == Qt.MouseButton.LeftButton and self.has_frame:
            pos = event.position().toPoint()
            self._origin = (pos.x(), pos.y())
            self.show_selection(Rect(pos.x(), pos.y(), 1, 1))

    def mouseMoveEvent(self, event) -> None:
        if self._origin is None:
            return
        pos = event.position().toPoint()
        rect = Rect.from_points(*self._origin, pos.x(), pos.y())
        self.show_selection(rect.intersected(self.display_frame))

    def mouseReleaseEvent(self, event) -> None:
        if event.button() != Qt.MouseButton.LeftButton or self._origin is None:
            return
        pos = event.position().toPoint()
        rect = Rect.from_points(*self._origin, pos.x(), pos.y())
        self._origin = None
        self.selection_made.emit(rect)


class CropDialog(QDialog):
    def __init__(
        self,
        session: EditSession,
        parent: QWidget | None = None,
        load_preview: bool = True,
    ):
        super().__init__(parent)
        self.setWindowTitle("Crop Video")
        self.resize(800, 600)
        self.session = session
        self._echo = EchoGuard()
        self._preview_worker: TranscodeWorker | None = None
        self._preview_path = ""
        self._setup_ui()
        self._sync_fields()
        self._connect_signals()
        if load_preview:
            self.load_preview()

    @property
    def params(self) -> CropParameters:
        return self.session.params

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)

        self.selection_widget = CropSelectionWidget()
        layout.addWidget(self.selection_widget)

        form = QFormLayout()
        source_width = self.params.source_width
        source_height = self.params.source_height

        self.x_spin = QSpinBox()
        self.x_spin.setRange(0, source_width)
        self.x_spin.setSuffix(" px")
        form.addRow("X:", self.x_spin)

        self.y_spin = QSpinBox()
        self.y_spin.setRange(0, source_height)
        self.y_spin.setSuffix(" px")
        form.addRow("Y:", self.y_spin)

        self.width_spin = QSpinBox()
        self.width_spin.setRange(MIN_CROP_SIZE, source_width)
        self.width_spin.setSuffix(" px")
        form.addRow("Width:", self.width_spin)

        self.height_spin = QSpinBox()
        self.height_spin.setRange(MIN_CROP_SIZE, source_height)
        self.height_spin.setSuffix(" px")
        form.addRow("Height:", self.height_spin)
        layout.addLayout(form)

        self.status_label = QLabel("")
        layout.addWidget(self.status_label)

        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel
        )
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def _connect_signals(self) -> None:
        self.selection_widget.selection_made.connect(self._on_selection_made)
        self.selection_widget.display_frame_changed.connect(self._on_display_frame_changed)
        for spin in (self.x_spin, self.y_spin, self.width_spin, self.height_spin):
            spin.valueChanged.connect(self._on_numeric_changed)

    def _sync_fields(self) -> None:
        params = self.params
        with self._echo:
            self.x_spin.setValue(params.x)
            self.y_spin.setValue(params.y)
            self.width_spin.setValue(params.width)
            self.height_spin.setValue(params.height)
            self.selection_widget.show_selection(
                params.display_rect(self.selection_widget.display_frame)
            )

    def _on_display_frame_changed(self, _frame: Rect) -> None:
        # The rubber band is placed in widget pixels and has to follow the frame
        self._sync_fields()

    def _on_selection_made(self, selection: Rect) -> None:
        frame = self.selection_widget.display_frame
        if frame.is_empty:
            return
        self.session.update(lambda p: p.set_from_selection(selection, frame))
        self._sync_fields()

    def _on_numeric_changed(self, _value: int) -> None:
        if self._echo.active:
            return
        self.session.update(
            lambda p: p.set_numeric(
                self.x_spin.value(),
                self.y_spin.value(),
                self.width_spin.value(),
                self.height_spin.value(),
            )
        )
        self._sync_fields()

    # ── Preview frame ────────────────────────────────────────────────

    def load_preview(self) -> None:
        """Grab one still from the source in the background."""
        fd, self._preview_path = tempfile.mkstemp(prefix="videdit_frame_", suffix=".jpg")
        os.close(fd)
        settings = self.session.settings
        args = frame_grab_args(
            self.session.source.path, self._preview_path, settings.frame_grab_seconds
        )
        self.status_label.setText("Loading video frame...")
        self._preview_worker = TranscodeWorker(
            args, self._preview_path, ffmpeg=settings.ffmpeg_path, parent=self
        )
        self._preview_worker.complete.connect(self._on_preview_ready)
        self._preview_worker.error.connect(self._on_preview_error)
        self._preview_worker.start()

    def _on_preview_ready(self, path: str) -> None:
        pixmap = QPixmap(path)
        if pixmap.isNull():
            self.status_label.setText("Failed to load video frame")
            return
        self.set_preview_image(pixmap)
        self.status_label.setText("")

    def _on_preview_error(self, message: str) -> None:
        logger.warning("Frame grab failed: %s", message)
        self.status_label.setText(f"Error extracting frame: {message}")

    def set_preview_image(self, pixmap: QPixmap) -> None:
        self.selection_widget.set_frame_image(pixmap)
        self._sync_fields()

    def done(self, result: int) -> None:
        if self._preview_worker is not None:
            self._preview_worker.wait()
        if self._preview_path and os.path.exists(self._preview_path):
            os.remove(self._preview_path)
        super().done(result)
