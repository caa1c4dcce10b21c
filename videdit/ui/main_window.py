"""Main window: preview, edit tools, menus and status bar."""

from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtWidgets import (
    QDialog,
    QFileDialog,
    QHBoxLayout,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from videdit.config import Settings
from videdit.export.commands import suggested_output_path
from videdit.export.ffmpeg import TranscodeResult
from videdit.export.ffprobe import extract_source
from videdit.model.params import Container, ConvertParameters
from videdit.model.source import SourceDescriptor
from videdit.session import EditKind, EditSession
from videdit.ui.convert_dialog import ConvertDialog
from videdit.ui.crop_dialog import CropDialog
from videdit.ui.resize_dialog import ResizeDialog
from videdit.ui.trim_dialog import TrimDialog
from videdit.ui.video_preview import VideoPreview
from videdit.workers.transcode_worker import TranscodeWorker

logger = logging.getLogger(__name__)

DIALOGS = {
    EditKind.TRIM: TrimDialog,
    EditKind.CROP: CropDialog,
    EditKind.RESIZE: ResizeDialog,
    EditKind.CONVERT: ConvertDialog,
}

OPEN_FILTER = "Video Files (*.mp4 *.avi *.mkv *.mov *.wmv *.webm);;All Files (*)"


class MainWindow(QMainWindow):
    """Video editor main window."""

    def __init__(self, settings: Settings | None = None, parent: QWidget | None = None):
        super().__init__(parent)
        self.setWindowTitle("Simple Video Editor")
        self.resize(1024, 768)

        self.settings = settings or Settings()
        self.session: EditSession | None = None
        self._worker: TranscodeWorker | None = None

        central = QWidget()
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)

        self.video_preview = VideoPreview()
        layout.addWidget(self.video_preview)

        tools = QHBoxLayout()
        self.tool_buttons: dict[EditKind, QPushButton] = {}
        for kind in EditKind:
            button = QPushButton(kind.value.capitalize())
            button.clicked.connect(lambda _checked=False, k=kind: self.start_edit(k))
            tools.addWidget(button)
            self.tool_buttons[kind] = button
        layout.addLayout(tools)

        self._create_menus()
        self._set_tools_enabled(False)
        self.statusBar().showMessage("Ready")

    def _create_menus(self) -> None:
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("&File")
        self.open_action = file_menu.addAction("&Open…")
        self.open_action.triggered.connect(self._browse_open)
        file_menu.addSeparator()
        exit_action = file_menu.addAction("E&xit")
        exit_action.triggered.connect(self.close)

        edit_menu = menu_bar.addMenu("&Edit")
        self.edit_actions = {}
        for kind, text in [
            (EditKind.TRIM, "&Trim"),
            (EditKind.CROP, "&Crop"),
            (EditKind.RESIZE, "Re&size"),
            (EditKind.CONVERT, "Con&vert"),
        ]:
            action = edit_menu.addAction(text)
            action.triggered.connect(lambda _checked=False, k=kind: self.start_edit(k))
            self.edit_actions[kind] = action

        help_menu = menu_bar.addMenu("&Help")
        about_action = help_menu.addAction("&About")
        about_action.triggered.connect(self._show_about)

    def _set_tools_enabled(self, enabled: bool) -> None:
        for button in self.tool_buttons.values():
            button.setEnabled(enabled)
        for action in self.edit_actions.values():
            action.setEnabled(enabled)

    # ── Source ───────────────────────────────────────────────────────

    def _browse_open(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Open Video", "", OPEN_FILTER)
        if path:
            self.open_file(path)

    def open_file(self, path: str) -> bool:
        """Probe and load *path*. Returns False if it could not be opened."""
        try:
            source = extract_source(path, ffprobe=self.settings.ffprobe_path)
        except (FileNotFoundError, RuntimeError) as e:
            logger.warning("Cannot open %s: %s", path, e)
            QMessageBox.warning(self, "Open Video", f"Could not open {path}:\n{e}")
            return False
        self.set_source(source)
        return True

    def set_source(self, source: SourceDescriptor) -> None:
        self.session = EditSession(source, settings=self.settings)
        self.video_preview.load(source.path)
        self._set_tools_enabled(True)
        self.statusBar().showMessage(f"Loaded: {source.path}")

    # ── Editing ──────────────────────────────────────────────────────

    def start_edit(self, kind: EditKind) -> None:
        """Open the dialog for *kind* and run the edit if it is confirmed."""
        if self.session is None:
            QMessageBox.warning(self, "Warning", f"No video loaded to {kind.value}")
            return
        if self.is_transcoding:
            return

        self.session.begin(kind)
        dialog = DIALOGS[kind](self.session, parent=self)
        if dialog.exec() != QDialog.DialogCode.Accepted:
            self.session.cancel()
            return

        output_path = self._choose_output_path(kind)
        if not output_path:
            self.session.cancel()
            return

        args = self.session.confirm(output_path)
        self.start_transcode(args, output_path)

    def _choose_output_path(self, kind: EditKind) -> str:
        params = self.session.params
        if isinstance(params, ConvertParameters):
            container = params.container
        else:
            container = None
        default = suggested_output_path(
            self.session.source.path, kind.output_suffix, container
        )
        extension = Path(default).suffix or ".mp4"
        path, _ = QFileDialog.getSaveFileName(
            self,
            f"Save {kind.output_suffix.capitalize()} Video",
            default,
            f"Video Files (*{extension});;All Files (*)",
        )
        return path

    def start_transcode(self, args: list[str], output_path: str) -> None:
        self._set_tools_enabled(False)
        self.statusBar().showMessage("Processing video…")
        self._worker = TranscodeWorker(args, output_path, ffmpeg=self.settings.ffmpeg_path)
        self._worker.complete.connect(self._on_transcode_complete)
        self._worker.error.connect(self._on_transcode_error)
        self._worker.start()

    def _on_transcode_complete(self, output_path: str) -> None:
        self._worker = None
        self._set_tools_enabled(True)
        self.session.finish(TranscodeResult.success(output_path))
        self.statusBar().showMessage(f"Saved: {output_path}")
        if output_path.lower().endswith(Container.GIF.extension):
            return
        reply = QMessageBox.question(
            self,
            "Operation Complete",
            "Would you like to load the new video?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
        )
        if reply == QMessageBox.StandardButton.Yes:
            self.open_file(output_path)

    def _on_transcode_error(self, message: str) -> None:
        self._worker = None
        self._set_tools_enabled(True)
        self.session.finish(TranscodeResult.failure(message))
        self.statusBar().showMessage("FFmpeg error")
        QMessageBox.critical(self, "Error", f"FFmpeg error: {message}")

    @property
    def is_transcoding(self) -> bool:
        return self._worker is not None and self._worker.isRunning()

    def _show_about(self) -> None:
        QMessageBox.about(
            self,
            "About Simple Video Editor",
            "A basic video editor using an FFmpeg backend.\n"
            "Features: trim, crop, resize, and format conversion.",
        )

    def closeEvent(self, event) -> None:
        if self._worker is not None:
            self._worker.wait()
        self.video_preview.cleanup()
        super().closeEvent(event)
