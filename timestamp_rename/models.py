"""
Data containers shared by every stage of the rename pipeline.
"""

from datetime import datetime
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional, Tuple, Union


class FileEntry(NamedTuple):
    """A regular file from the directory snapshot."""
    path: Path
    base_name: str
    extension: str
    index: int

    @classmethod
    def from_path(cls, path: Path, index: int) -> "FileEntry":
        return cls(
            path=path,
            base_name=path.stem,
            extension=path.suffix[1:].lower(),
            index=index,
        )

    @property
    def name(self) -> str:
        return self.path.name


class Resolved(NamedTuple):
    """A creation timestamp was found."""
    timestamp: datetime
    source: str
    needs_manual_check: bool = False


class Missing(NamedTuple):
    """The file is supported but carries no usable creation timestamp."""
    reason: str


class Unsupported(NamedTuple):
    """The file type has no metadata reader."""
    extension: str


TimestampResult = Union[Resolved, Missing, Unsupported]


class LivePhotoGroup(NamedTuple):
    """Files sharing a base name that receive one canonical timestamp."""
    base_name: str
    members: Tuple[FileEntry, ...]
    canonical: Resolved
    canonical_entry: FileEntry


class RenamePlan(NamedTuple):
    """Ordered (entry, target name) pairs with pairwise distinct targets."""
    items: Tuple[Tuple[FileEntry, str], ...]


class ConflictReport(NamedTuple):
    """Every target name claimed by more than one file, with the claimants."""
    groups: Tuple[Tuple[str, Tuple[Path, ...]], ...]

    def paths(self) -> List[Path]:
        return [path for _, paths in self.groups for path in paths]


class RenameOutcome(NamedTuple):
    """Result of executing a single plan item."""
    source: Path
    target: Path
    status: str  # 'renamed', 'unchanged', 'dry-run' or 'failed'
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status != 'failed'


class RunContext:
    """
    State of a single run, threaded through every pipeline stage.

    Created fresh for each invocation; nothing here outlives the run.
    """

    def __init__(self, directory: Path):
        self.directory = directory
        self.entries: List[FileEntry] = []
        self.results: Dict[FileEntry, TimestampResult] = {}
        self.groups: List[LivePhotoGroup] = []
        self.plan: Optional[RenamePlan] = None
        self.conflicts: Optional[ConflictReport] = None
        self.outcomes: List[RenameOutcome] = []
        self.warnings: List[str] = []
        self.aborted = False

    def entries_with(self, result_type) -> List[Tuple[FileEntry, TimestampResult]]:
        return [(e, r) for e, r in self.results.items() if isinstance(r, result_type)]

    @property
    def failed_outcomes(self) -> List[RenameOutcome]:
        return [o for o in self.outcomes if not o.ok]
