"""UI tests: main window wiring of open → edit → save → transcode."""

from unittest.mock import MagicMock, patch

import pytest
from PySide6.QtWidgets import QDialog, QMessageBox

from videdit.config import Settings
from videdit.export.ffmpeg import TranscodeResult
from videdit.session import EditKind
from videdit.ui.convert_dialog import ConvertDialog
from videdit.ui.main_window import MainWindow
from videdit.ui.trim_dialog import TrimDialog
from videdit.workers.transcode_worker import TranscodeWorker


@pytest.fixture()
def window(qtbot):
    w = MainWindow(settings=Settings())
    qtbot.addWidget(w)
    # The FFmpeg media backend crashes in headless CI
    w.video_preview.player.setSource = MagicMock()
    yield w
    w.video_preview.cleanup()


@pytest.fixture()
def loaded(window, full_hd_source):
    window.set_source(full_hd_source)
    return window


class TestInitialState:
    def test_title(self, window):
        assert window.windowTitle() == "Simple Video Editor"

    def test_tools_disabled(self, window):
        assert all(not b.isEnabled() for b in window.tool_buttons.values())
        assert all(not a.isEnabled() for a in window.edit_actions.values())

    def test_no_session(self, window):
        assert window.session is None

    def test_one_button_per_edit(self, window):
        assert set(window.tool_buttons) == set(EditKind)


class TestOpen:
    def test_set_source_enables_tools(self, loaded):
        assert all(b.isEnabled() for b in loaded.tool_buttons.values())
        assert loaded.session is not None
        assert "clip.mp4" in loaded.statusBar().currentMessage()

    def test_open_file_probes(self, window, full_hd_source):
        with patch("videdit.ui.main_window.extract_source", return_value=full_hd_source) as probe:
            assert window.open_file("/videos/clip.mp4") is True
        probe.assert_called_once_with("/videos/clip.mp4", ffprobe="ffprobe")
        assert window.session.source == full_hd_source

    @patch.object(QMessageBox, "warning")
    def test_open_failure_warns(self, mock_warning, window):
        with patch(
            "videdit.ui.main_window.extract_source",
            side_effect=RuntimeError("No video stream found in file"),
        ):
            assert window.open_file("/videos/song.mp3") is False
        mock_warning.assert_called_once()
        assert window.session is None
        assert not window.tool_buttons[EditKind.TRIM].isEnabled()


class TestStartEdit:
    @patch.object(QMessageBox, "warning")
    def test_without_source_warns(self, mock_warning, window):
        window.start_edit(EditKind.TRIM)
        mock_warning.assert_called_once()
        assert "No video loaded to trim" in mock_warning.call_args.args[2]

    @patch.object(TranscodeWorker, "start")
    @patch.object(TrimDialog, "exec", return_value=QDialog.DialogCode.Rejected)
    def test_cancelled_dialog_runs_nothing(self, _exec, mock_start, loaded):
        loaded.start_edit(EditKind.TRIM)
        mock_start.assert_not_called()
        assert not loaded.session.is_editing

    @patch.object(TranscodeWorker, "start")
    @patch("videdit.ui.main_window.QFileDialog.getSaveFileName", return_value=("", ""))
    @patch.object(TrimDialog, "exec", return_value=QDialog.DialogCode.Accepted)
    def test_cancelled_save_runs_nothing(self, _exec, _save, mock_start, loaded):
        loaded.start_edit(EditKind.TRIM)
        mock_start.assert_not_called()
        assert not loaded.session.is_editing
        assert not loaded.session.in_flight

    @patch.object(TranscodeWorker, "start")
    @patch(
        "videdit.ui.main_window.QFileDialog.getSaveFileName",
        return_value=("/out/clip_trimmed.mp4", ""),
    )
    @patch.object(TrimDialog, "exec", return_value=QDialog.DialogCode.Accepted)
    def test_confirmed_edit_starts_transcode(self, _exec, mock_save, mock_start, loaded):
        loaded.start_edit(EditKind.TRIM)
        mock_start.assert_called_once()
        assert mock_save.call_args.args[2] == "/videos/clip_trimmed.mp4"
        assert loaded._worker.args == [
            "-y", "-i", "/videos/clip.mp4", "-ss", "0", "-to", "120", "-c", "copy",
            "/out/clip_trimmed.mp4",
        ]
        assert loaded.session.in_flight
        assert not loaded.tool_buttons[EditKind.CROP].isEnabled()

    @patch.object(TranscodeWorker, "start")
    @patch(
        "videdit.ui.main_window.QFileDialog.getSaveFileName",
        return_value=("/out/clip_converted.webm", ""),
    )
    def test_convert_suggests_container_extension(self, mock_save, mock_start, loaded):
        def choose_webm(dialog):
            dialog.container_combo.setCurrentIndex(dialog.container_combo.findData("webm"))
            return QDialog.DialogCode.Accepted

        with patch.object(ConvertDialog, "exec", choose_webm):
            loaded.start_edit(EditKind.CONVERT)
        assert mock_save.call_args.args[2] == "/videos/clip_converted.webm"
        assert "libvpx-vp9" in loaded._worker.args


class TestTranscodeOutcome:
    @pytest.fixture()
    def running(self, loaded):
        loaded.session.begin(EditKind.TRIM)
        loaded.session.confirm("/out/clip_trimmed.mp4")
        loaded._set_tools_enabled(False)
        return loaded

    @patch.object(QMessageBox, "question", return_value=QMessageBox.StandardButton.No)
    def test_complete(self, mock_question, running):
        running._on_transcode_complete("/out/clip_trimmed.mp4")
        assert not running.session.in_flight
        assert running.session.last_result == TranscodeResult.success("/out/clip_trimmed.mp4")
        assert "Saved" in running.statusBar().currentMessage()
        assert running.tool_buttons[EditKind.TRIM].isEnabled()
        mock_question.assert_called_once()

    @patch.object(QMessageBox, "question", return_value=QMessageBox.StandardButton.Yes)
    def test_complete_can_load_result(self, _question, running):
        with patch.object(running, "open_file") as mock_open:
            running._on_transcode_complete("/out/clip_trimmed.mp4")
        mock_open.assert_called_once_with("/out/clip_trimmed.mp4")

    @patch.object(QMessageBox, "question")
    def test_gif_is_not_offered_for_loading(self, mock_question, running):
        running._on_transcode_complete("/out/clip_converted.gif")
        mock_question.assert_not_called()

    @patch.object(QMessageBox, "critical")
    def test_error(self, mock_critical, running):
        running._on_transcode_error("Invalid data found when processing input")
        assert not running.session.in_flight
        assert not running.session.last_result.ok
        assert "Invalid data found" in mock_critical.call_args.args[2]
        assert running.tool_buttons[EditKind.TRIM].isEnabled()
