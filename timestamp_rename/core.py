"""
Core pipeline: snapshot, extract, pair, plan, rename.
"""

import logging
import sys
from pathlib import Path
from typing import Callable, Optional

from .config import DEFAULT_MAX_WORKERS
from .dispatcher import extract_all
from .errors import NamingConflictError
from .executor import SafeRenamer
from .models import Missing, Resolved, RunContext, Unsupported
from .pairing import pair_live_photos
from .planner import build_plan, describe_conflicts
from .scanner import DirectoryScanner

logger = logging.getLogger(__name__)


def ask_yes_no(prompt: str) -> Optional[bool]:
    """Ask y/n on stdin. Returns None for any other answer or a closed stdin."""
    try:
        response = input(f"{prompt} [y/n] ").strip()
    except EOFError:
        print()
        return None
    if response in ('Y', 'y'):
        return True
    if response in ('N', 'n'):
        return False
    return None


class TimestampRenamer:
    """
    Renames the media files of one directory to the time they were taken.

    Features:
    - Reads EXIF DateTimeOriginal, QuickTime creation time and XMP create dates
    - Gives live photo pairs the timestamp of their still image
    - Refuses to rename anything if two files would get the same name
    - Asks for confirmation when some files could not be handled
    """

    def __init__(
        self,
        dry_run: bool = False,
        assume_yes: bool = False,
        max_workers: int = DEFAULT_MAX_WORKERS,
        show_progress: bool = False,
        confirm: Callable[[str], Optional[bool]] = ask_yes_no,
    ):
        """
        Initialize the TimestampRenamer.

        Args:
            dry_run: If True, only show what would be renamed without actual changes
            assume_yes: Skip the confirmation prompt when there are warnings
            max_workers: Number of threads reading metadata
            show_progress: Show a progress bar while reading metadata
            confirm: Prompt used to confirm warnings
        """
        self.dry_run = dry_run
        self.assume_yes = assume_yes
        self.max_workers = max_workers
        self.show_progress = show_progress
        self.confirm = confirm

    def plan_directory(self, directory: Path) -> RunContext:
        """Run every stage up to the rename plan; nothing on disk changes."""
        context = RunContext(directory)

        context.entries, context.warnings = DirectoryScanner(directory).scan()
        extracted = extract_all(context.entries, self.max_workers, self.show_progress)
        context.results, context.groups = pair_live_photos(extracted)

        for entry, result in context.entries_with(Missing):
            context.warnings.append(f"{result.reason}: \"{entry.path}\". Not renaming...")
        for entry, result in context.entries_with(Resolved):
            if result.needs_manual_check:
                context.warnings.append(
                    f"Creation time of \"{entry.path}\" comes from an MP4 container, "
                    f"please check it manually ({result.timestamp})"
                )

        try:
            context.plan = build_plan(context.results, occupied=context.entries)
        except NamingConflictError as e:
            logger.debug(f"Plan rejected: {e}")
            context.conflicts = e.report

        return context

    def process_directory(self, directory: Path) -> RunContext:
        """Plan the directory and, if the plan is conflict free and confirmed, rename."""
        context = self.plan_directory(directory)
        print(f"Files found: {len(context.entries)}")

        for group in context.groups:
            names = ", ".join(member.name for member in group.members)
            print(f"Live photo: {names} -> timestamp of {group.canonical_entry.name}")
        for entry, _ in context.entries_with(Unsupported):
            print(f"Skipping unsupported file: {entry.name}")
        for warning in context.warnings:
            print(f"Warning: {warning}", file=sys.stderr)

        if context.conflicts is not None:
            for line in describe_conflicts(context.conflicts):
                print(line, file=sys.stderr)
            print("Error: Found conflicting timestamps, exiting...", file=sys.stderr)
            context.aborted = True
            return context

        if not context.plan.items:
            print("No files to rename.")
            return context

        if context.warnings and not self.assume_yes and not self.dry_run:
            answer = self.confirm("Are all the warnings okay with you?")
            if answer is None:
                print("Invalid response, exiting...", file=sys.stderr)
                context.aborted = True
                return context
            if not answer:
                print("Exiting...")
                context.aborted = True
                return context

        context.outcomes = SafeRenamer(dry_run=self.dry_run).rename_all(context.plan)
        for outcome in context.outcomes:
            if outcome.status == 'failed':
                print(f"Error: Renaming failed for \"{outcome.source}\" - {outcome.error}", file=sys.stderr)
            elif outcome.status == 'unchanged':
                print(f"Skipping \"{outcome.source.name}\" (already named)")
            else:
                action = "WOULD RENAME" if self.dry_run else "RENAMED"
                print(f"{action}: \"{outcome.source.name}\" -> \"{outcome.target.name}\"")

        print(f"\n{'Dry run' if self.dry_run else 'Processing'} completed!")
        return context
