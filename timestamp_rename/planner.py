"""
Rename plan construction.

The plan is validated in full before anything is renamed: renames across
several files are not transactional, so a single collision aborts the run.
"""

import logging
from collections import defaultdict
from pathlib import Path
from typing import Dict, Iterable, List

from .errors import NamingConflictError
from .models import ConflictReport, FileEntry, RenamePlan, Resolved, TimestampResult
from .timestamps import format_filename

logger = logging.getLogger(__name__)


def target_name(entry: FileEntry, result: Resolved) -> str:
    return format_filename(result.timestamp, entry.extension)


def build_plan(
    results: Dict[FileEntry, TimestampResult],
    occupied: Iterable[FileEntry] = (),
) -> RenamePlan:
    """
    Map every resolved entry to its target filename.

    Entries without a resolved timestamp are left out. ``occupied`` lists the
    other files of the directory (those not being renamed); a target equal to
    one of their names is a conflict as well.

    Raises:
        NamingConflictError: with a ConflictReport of every colliding group;
            no partial plan is ever returned
    """
    items = [
        (entry, target_name(entry, result))
        for entry, result in results.items()
        if isinstance(result, Resolved)
    ]

    claimants: Dict[str, List[FileEntry]] = defaultdict(list)
    for entry, target in items:
        claimants[target].append(entry)

    renamed = {entry for entry, _ in items}
    for entry in occupied:
        if entry not in renamed and entry.name in claimants:
            claimants[entry.name].append(entry)

    conflicts = []
    for target, entries in claimants.items():
        if len(entries) > 1:
            entries = sorted(entries, key=lambda e: e.index)
            conflicts.append((target, entries))

    if conflicts:
        conflicts.sort(key=lambda item: item[1][0].index)
        report = ConflictReport(groups=tuple(
            (target, tuple(e.path for e in entries)) for target, entries in conflicts
        ))
        logger.debug(f"Plan rejected: {len(report.groups)} conflicting target(s)")
        raise NamingConflictError(report)

    return RenamePlan(items=tuple(sorted(items, key=lambda item: item[0].index)))


def describe_conflicts(report: ConflictReport) -> List[str]:
    """Human-readable lines for a conflict report."""
    lines = []
    for target, paths in report.groups:
        first, *others = paths
        for other in others:
            lines.append(
                f"Error: Attempted to add \"{other}\"\n"
                f"\t...but the target name ({target}) is already claimed by \"{first}\""
            )
    return lines


def planned_path(entry: FileEntry, target: str) -> Path:
    return entry.path.with_name(target)
