import logging
import os
from pathlib import Path
from typing import List, Tuple

from .errors import DirectoryError
from .models import FileEntry

logger = logging.getLogger(__name__)


class DirectoryScanner:
    """Takes a one-shot, non-recursive snapshot of the regular files in a directory."""

    def __init__(self, root: Path, ignore_hidden: bool = True):
        self.root = root
        self.ignore_hidden = ignore_hidden

    def scan(self) -> Tuple[List[FileEntry], List[str]]:
        """
        Returns:
            (entries in filename order, warnings for entries that could not be inspected)
        """
        try:
            names = sorted(os.listdir(self.root))
        except FileNotFoundError:
            raise DirectoryError(f"Directory does not exist: {self.root}")
        except NotADirectoryError:
            raise DirectoryError(f"Not a directory: {self.root}")
        except OSError as e:
            raise DirectoryError(f"Directory isn't accessible: {self.root} ({e})")

        entries: List[FileEntry] = []
        warnings: List[str] = []
        for name in names:
            if self.ignore_hidden and name.startswith('.'):
                continue
            path = self.root / name
            try:
                if not path.is_file():
                    continue
            except OSError as e:
                warnings.append(f"A file can't be read: \"{path}\" ({e})")
                continue
            entries.append(FileEntry.from_path(path, len(entries)))

        logger.debug(f"Snapshot of {self.root}: {len(entries)} files")
        return entries, warnings
