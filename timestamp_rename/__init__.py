"""
Timestamp Rename - rename photos and videos to the time they were taken.

This package provides functionality to:
- Extract creation timestamps from EXIF, QuickTime and XMP metadata
- Give live photo pairs the timestamp of their still image
- Detect naming collisions before any file is renamed
- Rename files as YYYY-MM-DD_HH-MM-SS.ext
"""

__version__ = "1.1.0"

from .core import TimestampRenamer
from .models import FileEntry, Missing, Resolved, Unsupported

__all__ = ["TimestampRenamer", "FileEntry", "Resolved", "Missing", "Unsupported"]
