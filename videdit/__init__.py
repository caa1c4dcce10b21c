"""videdit - a small video editor that drives FFmpeg."""

__version__ = "0.1.0"
