"""
Routes every file to the readers of its format family.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Tuple

from tqdm import tqdm

from .config import DEFAULT_MAX_WORKERS
from .formats import FormatFamily, detect_format
from .models import FileEntry, Missing, Resolved, TimestampResult, Unsupported
from .quicktime import QuickTimeReader
from .readers import ExifReader, MetadataReader, XmpReader

logger = logging.getLogger(__name__)

EXIF_READER = ExifReader()
QUICKTIME_READER = QuickTimeReader()
XMP_READER = XmpReader()

# Readers per family, in fallback order. The first reader's Missing reason is
# the one reported when nothing resolves.
READER_CHAINS: Dict[FormatFamily, Tuple[MetadataReader, ...]] = {
    FormatFamily.EXIF: (EXIF_READER, XMP_READER),
    FormatFamily.QUICKTIME: (QUICKTIME_READER,),
    FormatFamily.XMP: (XMP_READER, EXIF_READER),
}


def reader_chain(family: FormatFamily) -> Tuple[MetadataReader, ...]:
    return READER_CHAINS.get(family, ())


def extract_one(entry: FileEntry) -> TimestampResult:
    """Extract the timestamp of a single file; never raises."""
    family = detect_format(entry.extension)
    if family is FormatFamily.UNSUPPORTED:
        return Unsupported(entry.extension)

    first_missing = None
    for reader in reader_chain(family):
        try:
            result = reader.extract(entry)
        except Exception as e:
            logger.exception(f"{reader.name} reader failed on {entry.path}")
            result = Missing(f"{reader.name} reader failed: {e}")

        if isinstance(result, Resolved):
            logger.debug(f"{entry.name}: {result.timestamp} from {result.source}")
            return result
        if first_missing is None:
            first_missing = result
        logger.debug(f"{entry.name}: {reader.name} reader: {result.reason}")

    return first_missing


def extract_all(
    entries: Iterable[FileEntry],
    max_workers: int = DEFAULT_MAX_WORKERS,
    show_progress: bool = False,
) -> Dict[FileEntry, TimestampResult]:
    """
    Extract timestamps for all entries.

    Reads run in parallel when ``max_workers > 1``; the returned mapping is
    always in the order of ``entries``.
    """
    entries: List[FileEntry] = list(entries)
    progress = dict(total=len(entries), desc="Reading metadata", unit="file", disable=not show_progress)

    if max_workers > 1 and len(entries) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            results = list(tqdm(executor.map(extract_one, entries), **progress))
    else:
        results = [extract_one(entry) for entry in tqdm(entries, **progress)]

    return dict(zip(entries, results))
