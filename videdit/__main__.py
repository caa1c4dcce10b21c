"""Entry point for videdit - handles CLI arg parsing."""

import argparse
import logging
import sys

from videdit import __version__


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="videdit",
        description="Simple video editor: trim, crop, resize and convert with FFmpeg",
    )
    parser.add_argument(
        "files",
        nargs="*",
        help="Video file to open in the editor",
    )
    parser.add_argument(
        "--job", "-j",
        type=str,
        default=None,
        help="Run a YAML edit job headlessly instead of opening the GUI",
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Output file path for --job (overrides the job's output)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="With --job, print the FFmpeg command instead of running it",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    args = parser.parse_args(argv)
    if args.dry_run and not args.job:
        parser.error("--dry-run requires --job")
    return args


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.job:
        from videdit.app import run_job

        return run_job(args.job, output=args.output, dry_run=args.dry_run)

    from videdit.app import run_gui

    return run_gui(args.files)


if __name__ == "__main__":
    sys.exit(main())
