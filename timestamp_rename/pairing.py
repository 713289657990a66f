"""
Live photo pairing.

A live photo is a still image plus a short companion video sharing a base
name (IMG_0369.HEIC + IMG_0369.MOV). Photo viewers show the pair with the
still's timestamp, while the video's own creation time is often off by
seconds or missing. All members of a pair therefore get the still's
timestamp so they stay adjacent after renaming.

Known limitation: pairing only looks at names. Unrelated files that happen
to share a base name are paired too, however far apart their timestamps are.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Tuple

from .config import LIVE_PHOTO_STILL_EXTENSIONS, LIVE_PHOTO_VIDEO_EXTENSIONS
from .models import FileEntry, LivePhotoGroup, Resolved, TimestampResult

logger = logging.getLogger(__name__)

PAIRING_EXTENSIONS = LIVE_PHOTO_STILL_EXTENSIONS | LIVE_PHOTO_VIDEO_EXTENSIONS


def group_by_base_name(entries) -> Dict[str, List[FileEntry]]:
    """Group entries by base name; groups and members keep snapshot order."""
    groups: Dict[str, List[FileEntry]] = defaultdict(list)
    for entry in sorted(entries, key=lambda e: (e.base_name, e.index)):
        groups[entry.base_name].append(entry)
    return dict(sorted(groups.items(), key=lambda item: item[1][0].index))


def find_live_photo_group(
    base_name: str,
    members: List[FileEntry],
    results: Dict[FileEntry, TimestampResult],
):
    """Return the LivePhotoGroup for one base name, or None if it does not qualify."""
    candidates = [m for m in members if m.extension in PAIRING_EXTENSIONS]
    if len({m.extension for m in candidates}) < 2:
        return None

    resolved = [m for m in candidates if isinstance(results[m], Resolved)]
    if not resolved:
        return None

    stills = [m for m in resolved if m.extension in LIVE_PHOTO_STILL_EXTENSIONS]
    canonical_entry = stills[0] if stills else resolved[0]
    return LivePhotoGroup(
        base_name=base_name,
        members=tuple(candidates),
        canonical=results[canonical_entry],
        canonical_entry=canonical_entry,
    )


def pair_live_photos(
    results: Dict[FileEntry, TimestampResult],
) -> Tuple[Dict[FileEntry, TimestampResult], List[LivePhotoGroup]]:
    """
    Unify the timestamps of live photo groups.

    Returns:
        (new result mapping in the original order, qualifying groups)
    """
    paired: Dict[FileEntry, TimestampResult] = dict(results)
    live_groups: List[LivePhotoGroup] = []

    for base_name, members in group_by_base_name(results).items():
        if len(members) < 2:
            continue
        group = find_live_photo_group(base_name, members, results)
        if group is None:
            continue

        live_groups.append(group)
        canonical = group.canonical
        for member in group.members:
            paired[member] = Resolved(
                canonical.timestamp,
                source=f"live photo: {group.canonical_entry.name}",
                needs_manual_check=canonical.needs_manual_check,
            )
            if member != group.canonical_entry:
                logger.info(
                    f"Applied live photo timestamp: {member.name} -> "
                    f"{canonical.timestamp} from {group.canonical_entry.name}"
                )

    return paired, live_groups
