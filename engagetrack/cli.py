"""Command-line interface for engagetrack."""

import argparse
from pathlib import Path

from . import __version__
from .config import METRIC_INTERVAL_S, ProcessingConfig

EPILOG = """\
Examples:
  engagetrack live
  engagetrack live --camera 1 --session standup --participant alice
  engagetrack analyze recording.mp4 -o annotated.mp4
  engagetrack analyze portrait.jpg --frames 30

Engagement levels:
  fully_engaged      attention >= 70%
  partially_engaged  attention >= 40%
  passively_present  face visible, attention < 40%
  away               no face detected
"""


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="engagetrack",
        description="Estimate participant attention from webcam or recorded frames.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-V", "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--session",
        type=str,
        default=None,
        help="Session identifier recorded with each sample (default: random)",
    )
    common.add_argument(
        "--participant",
        type=str,
        default=None,
        help="Participant identifier recorded with each sample (default: random)",
    )
    common.add_argument(
        "--no-consent",
        action="store_true",
        help="Run detection without recording any samples",
    )
    common.add_argument(
        "--metric-interval",
        type=float,
        default=METRIC_INTERVAL_S,
        help="Minimum seconds between recorded samples (default: 1.0)",
    )
    common.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="mode", required=True)

    live = subparsers.add_parser(
        "live",
        parents=[common],
        help="Track the local camera with a preview window",
    )
    live.add_argument(
        "--camera",
        type=int,
        default=0,
        help="Camera device index (default: 0)",
    )
    live.add_argument(
        "--no-window",
        action="store_true",
        help="Do not open a preview window",
    )

    analyze = subparsers.add_parser(
        "analyze",
        parents=[common],
        help="Analyze a recorded video or still image",
    )
    analyze.add_argument(
        "input",
        type=str,
        help="Input image (.jpg, .png) or video (.mp4, .avi) file",
    )
    analyze.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Write an annotated video to this path",
    )
    analyze.add_argument(
        "--frames",
        type=int,
        default=90,
        help="Frames to replay for image input; ignored for video (default: 90)",
    )
    analyze.add_argument(
        "--fps",
        type=int,
        default=15,
        help="Frame rate for image input; ignored for video (default: 15)",
    )

    return parser


def parse_args(args=None) -> ProcessingConfig:
    """Parse command-line arguments.

    Args:
        args: Arguments to parse (defaults to sys.argv).

    Returns:
        ProcessingConfig with parsed options.
    """
    parser = build_parser()
    parsed = parser.parse_args(args)

    if parsed.metric_interval < 0:
        parser.error("--metric-interval must not be negative")

    if parsed.mode == "analyze":
        if not Path(parsed.input).exists():
            parser.error(f"Input file not found: {parsed.input}")
        if parsed.frames < 1:
            parser.error("--frames must be at least 1")
        if parsed.fps < 1:
            parser.error("--fps must be at least 1")

    return ProcessingConfig.from_args(
        mode=parsed.mode,
        input_path=getattr(parsed, "input", None),
        camera_device=getattr(parsed, "camera", 0),
        session_id=parsed.session,
        participant_id=parsed.participant,
        consent=not parsed.no_consent,
        metric_interval=parsed.metric_interval,
        output_path=getattr(parsed, "output", None),
        fps=getattr(parsed, "fps", 15),
        frames=getattr(parsed, "frames", 90),
        display_enabled=not getattr(parsed, "no_window", False),
        verbose=parsed.verbose,
    )
