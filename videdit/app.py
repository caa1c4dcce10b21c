"""QApplication setup and headless job runner."""

from __future__ import annotations

import sys


def run_gui(files: list[str] | None = None) -> int:
    """Launch the editor GUI, opening the first file if one is given."""
    from PySide6.QtWidgets import QApplication

    from videdit.config import Settings
    from videdit.ui.main_window import MainWindow

    app = QApplication(sys.argv)
    app.setApplicationName("Simple Video Editor")
    app.setOrganizationName("videdit")

    window = MainWindow(settings=Settings.load())
    if files:
        window.open_file(files[0])
    window.show()

    return app.exec()


def run_job(job_path: str, output: str | None = None, dry_run: bool = False) -> int:
    """Run one YAML edit job without any GUI.

    Probes the source, builds the parameters through the same setters the
    dialogs use, then either prints the FFmpeg command (dry run) or runs it.

    Returns 0 on success, 1 on failure.
    """
    import yaml

    from videdit.config import Settings
    from videdit.export.commands import suggested_output_path
    from videdit.export.ffmpeg import format_command
    from videdit.export.ffprobe import extract_source
    from videdit.model.params import ConvertParameters
    from videdit.session import EditSession
    from videdit.yaml_config import build_parameters, load_edit_job

    settings = Settings.load()

    try:
        job = load_edit_job(job_path)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        print(f"Error: invalid job file {job_path}: {e}", file=sys.stderr)
        return 1

    try:
        source = extract_source(job.source, ffprobe=settings.ffprobe_path)
    except (FileNotFoundError, RuntimeError) as e:
        print(f"Error: failed to read {job.source}: {e}", file=sys.stderr)
        return 1

    try:
        params = build_parameters(job, source, settings)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Precedence: CLI --output > job output > derived from the source name
    container = params.container if isinstance(params, ConvertParameters) else None
    output_path = output or job.output or suggested_output_path(
        source.path, job.kind.output_suffix, container
    )

    session = EditSession(source, settings=settings)
    session.begin(job.kind)
    session.update(lambda _: params)

    if dry_run:
        args = session.confirm(output_path)
        print(format_command(args, settings.ffmpeg_path))
        return 0

    print(f"Running {job.kind.value} on {source.path} ({source.duration:.1f}s, "
          f"{source.width}x{source.height})...")
    result = session.run(output_path)
    if not result.ok:
        print(f"Error: FFmpeg failed: {result.message}", file=sys.stderr)
        return 1

    print(f"Done! Output saved to: {output_path}")
    return 0
