"""
CLI interface for chatpreview
"""
import argparse
import logging
import sys
from pathlib import Path

import yaml
from pydantic import ValidationError

from .config import PreviewSettings
from .display import InlineDisplay, ViewerDisplay
from .models import ViewportSize
from .previewer import ImagePreviewer
from .transcript import Transcript


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser"""
    parser = argparse.ArgumentParser(
        description="Fetch and scale images linked from chat lines"
    )

    parser.add_argument(
        "lines",
        nargs="*",
        help="Chat lines to scan (read from stdin when omitted)"
    )

    parser.add_argument(
        "--images-path",
        help="Directory for downloaded images"
    )

    parser.add_argument(
        "--fixed-size",
        type=int,
        help="Scale images to a square of this size when not fitting the viewport"
    )

    parser.add_argument(
        "--no-rescale",
        action="store_true",
        help="Do not fit large images into the viewport"
    )

    parser.add_argument(
        "--no-resize-animated",
        action="store_true",
        help="Never transcode animated images"
    )

    parser.add_argument(
        "--viewport",
        default="800x600",
        help="Viewport size as WIDTHxHEIGHT"
    )

    parser.add_argument(
        "--rules",
        help="YAML file with the URL rule table"
    )

    parser.add_argument(
        "--viewer",
        action="store_true",
        help="Open images in a separate viewer instead of inline"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )

    return parser


def main():
    """Main CLI entry point"""
    parser = create_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = _build_settings(args)
        viewport = ViewportSize.parse(args.viewport)
        transcript = Transcript()
        if args.viewer:
            display = ViewerDisplay()
        else:
            display = InlineDisplay(transcript, animation_seconds=settings.animation_seconds)
        previewer = ImagePreviewer.from_settings(
            settings,
            display=display,
            viewport=lambda: viewport,
        )
    except (ValueError, ValidationError, FileNotFoundError, yaml.YAMLError) as exc:
        if args.verbose:
            raise
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    lines = args.lines or (line.rstrip("\n") for line in sys.stdin)
    with previewer:
        for line in lines:
            message_id = transcript.append(line)
            previewer.handle_line(line, message_id)

    print(transcript.render())


def _build_settings(args: argparse.Namespace) -> PreviewSettings:
    overrides = {}
    if args.images_path:
        overrides["images_path"] = Path(args.images_path)
    if args.fixed_size is not None:
        overrides["fixed_size"] = args.fixed_size
    if args.no_rescale:
        overrides["rescale_to_viewport"] = False
    if args.no_resize_animated:
        overrides["resize_animated"] = False
    if args.rules:
        overrides["rules_file"] = Path(args.rules)
    return PreviewSettings(**overrides)


if __name__ == "__main__":
    main()
