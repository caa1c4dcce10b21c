"""QThread worker for one FFmpeg invocation."""

from __future__ import annotations

from PySide6.QtCore import QThread, Signal

from videdit.export.ffmpeg import run_ffmpeg


class TranscodeWorker(QThread):
    """Runs FFmpeg in a background thread.

    Signals:
        complete: output_path
        error: FFmpeg's error text
    """

    complete = Signal(str)
    error = Signal(str)

    def __init__(
        self,
        args: list[str],
        output_path: str,
        ffmpeg: str = "ffmpeg",
        parent=None,
    ):
        super().__init__(parent)
        self.args = list(args)
        self.output_path = output_path
        self.ffmpeg = ffmpeg
        self.result = None

    def run(self) -> None:
        self.result = run_ffmpeg(self.args, ffmpeg=self.ffmpeg, output_path=self.output_path)
        if self.result.ok:
            self.complete.emit(self.output_path)
        else:
            self.error.emit(self.result.message)
