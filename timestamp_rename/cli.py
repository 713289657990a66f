#!/usr/bin/env python3
"""
Command-line interface for timestamp_rename.
"""

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .config import DEFAULT_LOG_LEVEL, DEFAULT_MAX_WORKERS, LOG_FORMAT
from .core import TimestampRenamer
from .errors import TimestampRenameError

PROG = "timestamp_rename"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Rename photos and videos to the time they were taken",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  timestamp_rename
  timestamp_rename --dry-run ~/Pictures/2025-01
  timestamp_rename --yes --workers 16 /Volumes/Card/DCIM/100APPLE

Files are renamed as YYYY-MM-DD_HH-MM-SS.ext using:
  Photos: EXIF DateTimeOriginal (JPG, JPEG, HEIC, HEIF, TIFF, WEBP, DNG)
  Videos: QuickTime creation time (MOV, MP4, M4V, 3GP)
  Screenshots: XMP create date (PNG)

Live photos (IMG_0001.HEIC + IMG_0001.MOV) both get the still's timestamp.
Nothing is renamed if two files would end up with the same name.
        """
    )

    parser.add_argument(
        'directory',
        nargs='?',
        default='.',
        help='Directory whose files are renamed (default: current directory, not recursive)'
    )

    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Show what would be renamed without actually renaming files'
    )

    parser.add_argument(
        '-y', '--yes',
        action='store_true',
        help='Do not ask for confirmation when some files have warnings'
    )

    parser.add_argument(
        '--workers',
        type=int,
        default=DEFAULT_MAX_WORKERS,
        help=f'Number of threads reading metadata (default: {DEFAULT_MAX_WORKERS})'
    )

    parser.add_argument(
        '--no-progress',
        action='store_true',
        help='Hide the progress bar'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Log details about every file'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    return parser


def main(argv=None) -> int:
    """Main entry point for the timestamp_rename command."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else DEFAULT_LOG_LEVEL,
        format=LOG_FORMAT,
    )

    print(f"-=[ timestamp-rename - v{__version__} ]=-")
    if args.dry_run:
        print("Note: This is a dry run. No files will be actually renamed.")

    renamer = TimestampRenamer(
        dry_run=args.dry_run,
        assume_yes=args.yes,
        max_workers=max(1, args.workers),
        show_progress=not args.no_progress,
    )

    try:
        context = renamer.process_directory(Path(args.directory))
    except KeyboardInterrupt:
        print("\n\nOperation cancelled by user.")
        return 130
    except TimestampRenameError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if context.aborted or context.failed_outcomes:
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
