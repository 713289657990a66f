"""
QuickTime / MP4 creation time reader.

Walks the atom tree directly with ``struct``; no external tool is needed.
Two sources are consulted inside ``moov``:

- ``meta`` (``keys`` + ``ilst``) ``com.apple.quicktime.creationdate``, written
  by iPhones in local wall-clock time, preferred when present;
- ``mvhd`` creation time, seconds since 1904-01-01 in UTC, converted to the
  local time zone to match the EXIF convention of still images.
"""

import logging
import os
import struct
from datetime import datetime
from typing import BinaryIO, Iterator, Optional, Tuple

from .config import (
    QUICKTIME_CREATIONDATE_KEY,
    QUICKTIME_EPOCH_ADJUSTER,
    QUICKTIME_NATIVE_EXTENSIONS,
)
from .errors import ContainerFormatError
from .models import FileEntry, Missing, Resolved, TimestampResult
from .readers import MetadataReader
from .timestamps import parse_timestamp

logger = logging.getLogger(__name__)

Atom = Tuple[bytes, int, int]  # (type, payload start, payload end)


def iter_atoms(f: BinaryIO, start: int, end: int) -> Iterator[Atom]:
    """Yield the atoms laid out between two file offsets."""
    offset = start
    while offset + 8 <= end:
        f.seek(offset)
        header = f.read(8)
        if len(header) < 8:
            raise ContainerFormatError(f"truncated atom header at offset {offset}")
        size, atom_type = struct.unpack('>I4s', header)
        header_size = 8

        if size == 1:
            extended = f.read(8)
            if len(extended) < 8:
                raise ContainerFormatError(f"truncated 64-bit size for {atom_type!r}")
            size = struct.unpack('>Q', extended)[0]
            header_size = 16
        elif size == 0:
            # Atom extends to the end of its parent
            size = end - offset

        if size < header_size or offset + size > end:
            raise ContainerFormatError(f"invalid size {size} for atom {atom_type!r} at offset {offset}")

        yield atom_type, offset + header_size, offset + size
        offset += size


def find_atom(f: BinaryIO, start: int, end: int, atom_type: bytes) -> Optional[Atom]:
    for atom in iter_atoms(f, start, end):
        if atom[0] == atom_type:
            return atom
    return None


def read_mvhd_creation_time(f: BinaryIO, start: int, end: int) -> int:
    """Return the raw mvhd creation time (seconds since 1904)."""
    f.seek(start)
    version = f.read(4)[:1]
    if not version:
        raise ContainerFormatError("empty mvhd atom")

    if version[0] == 1:
        raw = f.read(8)
        fmt = '>Q'
    else:
        raw = f.read(4)
        fmt = '>I'
    if start + 4 + len(raw) > end or len(raw) != struct.calcsize(fmt):
        raise ContainerFormatError("truncated mvhd atom")
    return struct.unpack(fmt, raw)[0]


def _meta_children_start(f: BinaryIO, start: int, end: int) -> int:
    # ISO meta is a full box (4 bytes version/flags); QuickTime meta is not
    f.seek(start)
    probe = f.read(8)
    if len(probe) == 8 and probe[4:8] == b'hdlr':
        return start
    return start + 4


def read_apple_creation_date(f: BinaryIO, start: int, end: int) -> Optional[str]:
    """Return the com.apple.quicktime.creationdate string from a moov/meta atom."""
    children = _meta_children_start(f, start, end)
    keys = find_atom(f, children, end, b'keys')
    ilst = find_atom(f, children, end, b'ilst')
    if keys is None or ilst is None:
        return None

    _, keys_start, keys_end = keys
    if keys_start + 8 > keys_end:
        raise ContainerFormatError("truncated keys atom")
    f.seek(keys_start + 4)
    (entry_count,) = struct.unpack('>I', f.read(4))
    key_index = None
    offset = keys_start + 8
    for index in range(1, entry_count + 1):
        if offset + 8 > keys_end:
            raise ContainerFormatError("truncated keys atom")
        f.seek(offset)
        key_size, _namespace = struct.unpack('>I4s', f.read(8))
        if key_size < 8:
            raise ContainerFormatError("invalid key size in keys atom")
        if offset + key_size > keys_end:
            raise ContainerFormatError("key runs past the end of the keys atom")
        if f.read(key_size - 8) == QUICKTIME_CREATIONDATE_KEY:
            key_index = index
            break
        offset += key_size

    if key_index is None:
        return None

    _, ilst_start, ilst_end = ilst
    item = find_atom(f, ilst_start, ilst_end, struct.pack('>I', key_index))
    if item is None:
        return None
    data = find_atom(f, item[1], item[2], b'data')
    if data is None:
        return None

    _, data_start, data_end = data
    if data_end - data_start < 8:
        raise ContainerFormatError("truncated data atom")
    f.seek(data_start + 8)  # type indicator, locale
    return f.read(data_end - data_start - 8).decode('utf-8', errors='ignore')


class QuickTimeReader(MetadataReader):
    """
    Reads the creation time of MOV/MP4 containers.

    MP4-family results are flagged for manual verification: those files come
    from many different writers and their creation time is less reliable.
    """

    name = 'quicktime'

    def extract(self, entry: FileEntry) -> TimestampResult:
        try:
            with open(entry.path, 'rb') as f:
                timestamp = self._read_timestamp(f, entry)
        except ContainerFormatError as e:
            logger.warning(f"Malformed QuickTime container {entry.path}: {e}")
            return Missing(f"malformed QuickTime container: {e}")
        except OSError as e:
            logger.warning(f"Could not read {entry.path}: {e}")
            return Missing(f"cannot read file: {e}")

        if isinstance(timestamp, Missing):
            return timestamp
        needs_check = entry.extension not in QUICKTIME_NATIVE_EXTENSIONS
        if needs_check:
            logger.info(f"{entry.name}: MP4 creation time read, please verify it manually")
        return Resolved(timestamp, self.name, needs_manual_check=needs_check)

    def _read_timestamp(self, f: BinaryIO, entry: FileEntry):
        file_size = os.fstat(f.fileno()).st_size
        moov = find_atom(f, 0, file_size, b'moov')
        if moov is None:
            return Missing("no moov atom")
        _, moov_start, moov_end = moov

        meta = find_atom(f, moov_start, moov_end, b'meta')
        if meta is not None:
            creation_date = read_apple_creation_date(f, meta[1], meta[2])
            timestamp = parse_timestamp(creation_date) if creation_date else None
            if timestamp is not None:
                return timestamp
            if creation_date:
                logger.debug(f"{entry.name}: unparsable creationdate {creation_date!r}")

        mvhd = find_atom(f, moov_start, moov_end, b'mvhd')
        if mvhd is None:
            return Missing("no mvhd atom in moov")
        creation_time = read_mvhd_creation_time(f, mvhd[1], mvhd[2])
        if creation_time == 0:
            return Missing("QuickTime creation time not set")

        try:
            return datetime.fromtimestamp(creation_time - QUICKTIME_EPOCH_ADJUSTER)
        except (OverflowError, OSError, ValueError) as e:
            return Missing(f"QuickTime creation time out of range: {e}")
