"""
Metadata readers for still images: EXIF (exifread, Pillow) and XMP.

Every reader implements ``extract(entry) -> TimestampResult`` and never raises
for a single file; problems are reported as ``Missing`` with a reason.
"""

import logging
import re
from pathlib import Path
from typing import Optional, Tuple

import exifread
from PIL import ExifTags, Image, UnidentifiedImageError

from .config import XMP_DATE_FIELDS, XMP_PNG_INFO_KEY, XMP_SIDECAR_EXTENSION
from .models import FileEntry, Missing, Resolved, TimestampResult
from .timestamps import parse_timestamp

logger = logging.getLogger(__name__)

NO_EXIF = "no EXIF data"
NO_DATETIME_ORIGINAL = "EXIF present but no DateTimeOriginal"
NO_XMP = "no XMP metadata"
NO_XMP_DATE = "XMP present but no creation date"

# exifread keys for DateTimeOriginal: the Exif sub-IFD first, then IFD0 where some writers put it
EXIFREAD_DATE_TAGS = ('EXIF DateTimeOriginal', 'Image DateTimeOriginal')

_XMP_PACKET_REGEX = re.compile(rb'<x:xmpmeta[\s>].*?</x:xmpmeta>', re.DOTALL)


class MetadataReader:
    """Base class for the format readers."""

    name = 'metadata'

    def extract(self, entry: FileEntry) -> TimestampResult:
        raise NotImplementedError


class ExifReader(MetadataReader):
    """
    Reads EXIF DateTimeOriginal.

    DateTime is deliberately not used: it is supposed to change whenever the
    image is edited. Thumbnail IFD tags are ignored.
    """

    name = 'exif'

    def extract(self, entry: FileEntry) -> TimestampResult:
        try:
            has_exif, raw_value = self._read_exifread(entry.path)
            if not has_exif:
                has_exif, raw_value = self._read_pillow(entry.path)
        except OSError as e:
            logger.warning(f"Could not read {entry.path}: {e}")
            return Missing(f"cannot read file: {e}")

        if not has_exif:
            return Missing(NO_EXIF)
        if raw_value is None:
            return Missing(NO_DATETIME_ORIGINAL)

        timestamp = parse_timestamp(raw_value)
        if timestamp is None:
            return Missing(f"unparsable DateTimeOriginal: {str(raw_value).strip()!r}")
        return Resolved(timestamp, self.name)

    def _read_exifread(self, filepath: Path) -> Tuple[bool, Optional[str]]:
        """Return (EXIF present, DateTimeOriginal value) using exifread."""
        with open(filepath, 'rb') as f:
            try:
                tags = exifread.process_file(f, details=False)
            except Exception as e:
                # exifread raises assorted errors on truncated or malformed containers
                logger.debug(f"exifread failed on {filepath}: {e}")
                return False, None

        primary = {k: v for k, v in tags.items() if not k.startswith('Thumbnail')}
        if not primary:
            return False, None
        for date_tag in EXIFREAD_DATE_TAGS:
            if date_tag in primary:
                return True, str(primary[date_tag].values)
        return True, None

    def _read_pillow(self, filepath: Path) -> Tuple[bool, Optional[str]]:
        """Fallback for containers exifread does not understand (e.g. PNG eXIf)."""
        try:
            with Image.open(filepath) as img:
                exif = img.getexif()
        except (UnidentifiedImageError, SyntaxError, ValueError) as e:
            logger.debug(f"Pillow could not open {filepath}: {e}")
            return False, None

        if not exif:
            return False, None
        value = exif.get_ifd(ExifTags.IFD.Exif).get(ExifTags.Base.DateTimeOriginal)
        if value is None:
            value = exif.get(ExifTags.Base.DateTimeOriginal)
        return True, value


class XmpReader(MetadataReader):
    """
    Reads a creation date from XMP.

    Looks at a sidecar file first, then at a packet embedded in the file
    (PNG iTXt via Pillow, or a raw ``<x:xmpmeta>`` packet anywhere in the bytes).
    Older screenshots carry their date only here.
    """

    name = 'xmp'

    def extract(self, entry: FileEntry) -> TimestampResult:
        try:
            packet = self._find_packet(entry.path)
        except OSError as e:
            logger.warning(f"Could not read {entry.path}: {e}")
            return Missing(f"cannot read file: {e}")

        if packet is None:
            return Missing(NO_XMP)

        for field in XMP_DATE_FIELDS:
            raw_value = find_xmp_field(packet, field)
            if raw_value is None:
                continue
            timestamp = parse_timestamp(raw_value)
            if timestamp is not None:
                return Resolved(timestamp, self.name)
            logger.debug(f"Ignoring unparsable {field} {raw_value!r} in {entry.path}")

        return Missing(NO_XMP_DATE)

    def _find_packet(self, filepath: Path) -> Optional[str]:
        for sidecar in sidecar_paths(filepath):
            if sidecar.is_file():
                logger.debug(f"Using XMP sidecar {sidecar.name} for {filepath.name}")
                return sidecar.read_text(encoding='utf-8', errors='ignore')

        packet = self._read_pillow_packet(filepath)
        if packet:
            return packet

        data = filepath.read_bytes()
        match = _XMP_PACKET_REGEX.search(data)
        if match:
            return match.group(0).decode('utf-8', errors='ignore')
        return None

    def _read_pillow_packet(self, filepath: Path) -> Optional[str]:
        try:
            with Image.open(filepath) as img:
                packet = img.info.get(XMP_PNG_INFO_KEY) or img.info.get('xmp')
        except (UnidentifiedImageError, SyntaxError, ValueError):
            return None

        if isinstance(packet, bytes):
            packet = packet.decode('utf-8', errors='ignore')
        return packet or None


def sidecar_paths(filepath: Path) -> Tuple[Path, Path]:
    """Candidate sidecars: IMG_1.png.xmp, then IMG_1.xmp."""
    return (
        filepath.with_name(f"{filepath.name}.{XMP_SIDECAR_EXTENSION}"),
        filepath.with_name(f"{filepath.stem}.{XMP_SIDECAR_EXTENSION}"),
    )


def find_xmp_field(packet: str, field: str) -> Optional[str]:
    """Find a simple XMP property in element or attribute form."""
    name = re.escape(field)
    for rx in (
        re.compile(rf'<{name}>\s*([^<]+?)\s*</{name}>', re.IGNORECASE),
        re.compile(rf'{name}\s*=\s*"([^"]+)"', re.IGNORECASE),
        re.compile(rf"{name}\s*=\s*'([^']+)'", re.IGNORECASE),
    ):
        match = rx.search(packet)
        if match:
            return match.group(1)
    return None
