"""
Parsing of metadata date strings and formatting of target filenames.
"""

import re
from datetime import datetime
from typing import Optional

# Matches "2023:05:14 21:08:53" (EXIF) and "2023-05-14T21:08:53.120+02:00" (XMP/ISO 8601).
# Seconds are optional in XMP; fractions and zone designators are ignored.
_TIMESTAMP_REGEX = re.compile(
    r'^\s*(\d{4})[-:](\d{2})[-:](\d{2})[T ](\d{2}):(\d{2})(?::(\d{2}))?'
)


def parse_timestamp(value) -> Optional[datetime]:
    """
    Parse a metadata date string into a naive, second-precision datetime.

    The wall-clock time is kept as written; any zone offset is dropped so that
    photos keep the local time they were taken at.

    Returns:
        The parsed datetime, or None for empty, placeholder or invalid values
    """
    if isinstance(value, bytes):
        value = value.decode('utf-8', errors='ignore')
    if not isinstance(value, str):
        value = str(value)

    match = _TIMESTAMP_REGEX.match(value.strip('\x00'))
    if not match:
        return None

    year, month, day, hour, minute, second = (int(g) if g else 0 for g in match.groups())
    try:
        return datetime(year, month, day, hour, minute, second)
    except ValueError:
        # Covers the "0000:00:00 00:00:00" placeholder cameras write
        return None


def format_filename(timestamp: datetime, extension: str) -> str:
    """Build the target filename, e.g. 2023-05-14_21-08-53.jpg."""
    t = timestamp
    # strftime does not zero-pad years below 1000 on every platform
    stem = f"{t.year:04d}-{t.month:02d}-{t.day:02d}_{t.hour:02d}-{t.minute:02d}-{t.second:02d}"
    if not extension:
        return stem
    return f"{stem}.{extension.lower()}"
