"""
Classification of files into metadata format families by extension.
"""

from enum import Enum

from .config import EXIF_EXTENSIONS, QUICKTIME_EXTENSIONS, XMP_EXTENSIONS


class FormatFamily(Enum):
    EXIF = 'exif'
    QUICKTIME = 'quicktime'
    XMP = 'xmp'
    UNSUPPORTED = 'unsupported'


FORMAT_FAMILIES = {
    **{ext: FormatFamily.EXIF for ext in EXIF_EXTENSIONS},
    **{ext: FormatFamily.QUICKTIME for ext in QUICKTIME_EXTENSIONS},
    **{ext: FormatFamily.XMP for ext in XMP_EXTENSIONS},
}


def detect_format(extension: str) -> FormatFamily:
    """Return the format family for an extension such as 'JPG', '.mov' or 'png'."""
    return FORMAT_FAMILIES.get(extension.lower().lstrip('.'), FormatFamily.UNSUPPORTED)
