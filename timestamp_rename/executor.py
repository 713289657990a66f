import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

from .models import FileEntry, RenameOutcome, RenamePlan
from .planner import planned_path

logger = logging.getLogger(__name__)

STAGING_SUFFIX = '.timestamp-rename-tmp'


class SafeRenamer:
    """
    Executes a validated rename plan, best effort.

    A failing rename is recorded and the remaining items still run. Existing
    files are never overwritten. When a file's target is the current name of
    another planned file, that file is moved out of the way first; cycles
    (e.g. two files swapping names) go through a temporary name.
    """

    def __init__(self, dry_run: bool = False):
        self.dry_run = dry_run

    def rename_one(self, entry: FileEntry, target: str, source: Optional[Path] = None) -> RenameOutcome:
        """Rename one file; ``source`` overrides the current location (staged files)."""
        source = source or entry.path
        destination = planned_path(entry, target)

        if entry.name == destination.name:
            return RenameOutcome(entry.path, destination, 'unchanged')

        if self.dry_run:
            return RenameOutcome(entry.path, destination, 'dry-run')

        try:
            if destination.exists() and not os.path.samefile(source, destination):
                raise FileExistsError(f"Target file already exists: {destination.name}")
            os.rename(source, destination)
        except OSError as e:
            logger.error(f"Renaming failed for {entry.path}: {e}")
            error = str(e)
            if source != entry.path:
                error += f" (file left as {source.name})"
            return RenameOutcome(entry.path, destination, 'failed', error)

        logger.debug(f"Renamed {source} -> {destination}")
        return RenameOutcome(entry.path, destination, 'renamed')

    def rename_all(self, plan: RenamePlan) -> List[RenameOutcome]:
        """Execute the plan; outcomes are returned in plan order whatever order the renames ran in."""
        outcomes: Dict[int, RenameOutcome] = {}
        pending = []  # [entry, target, current location]
        for entry, target in plan.items:
            if self.dry_run or entry.name == target:
                outcomes[entry.index] = self.rename_one(entry, target)
            else:
                pending.append([entry, target, entry.path])

        while pending:
            held = {source.name for _, _, source in pending}
            ready = [item for item in pending if item[1] not in held]

            if not ready:
                # Every remaining target is still occupied: a cycle
                entry, target, _ = pending[0]
                staged = self._stage(entry)
                if staged is None:
                    outcomes[entry.index] = RenameOutcome(
                        entry.path, planned_path(entry, target), 'failed',
                        "could not move to a temporary name to break a rename cycle",
                    )
                    pending.pop(0)
                else:
                    pending[0][2] = staged
                continue

            for entry, target, source in ready:
                outcomes[entry.index] = self.rename_one(entry, target, source)
            pending = [item for item in pending if item not in ready]

        return [outcomes[entry.index] for entry, _ in plan.items]

    def _stage(self, entry: FileEntry) -> Optional[Path]:
        staged = entry.path.with_name(f".{entry.name}{STAGING_SUFFIX}")
        try:
            if staged.exists():
                raise FileExistsError(f"Temporary file already exists: {staged.name}")
            os.rename(entry.path, staged)
        except OSError as e:
            logger.error(f"Could not stage {entry.path}: {e}")
            return None
        logger.debug(f"Staged {entry.path} as {staged.name} to break a rename cycle")
        return staged
