"""Configuration constants for timestamp_rename."""

import logging

# Format families by lowercase extension (no leading dot)
EXIF_EXTENSIONS = {'jpg', 'jpeg', 'heic', 'heif', 'tif', 'tiff', 'webp', 'dng'}
QUICKTIME_EXTENSIONS = {'mov', 'mp4', 'm4v', '3gp'}
XMP_EXTENSIONS = {'png'}

# QuickTime containers whose creation time is trusted without a manual check
QUICKTIME_NATIVE_EXTENSIONS = {'mov'}

# Live photo pairing set: a still image and its companion video
LIVE_PHOTO_STILL_EXTENSIONS = {'jpg', 'jpeg', 'heic', 'heif', 'png'}
LIVE_PHOTO_VIDEO_EXTENSIONS = {'mov', 'mp4'}

# Seconds between 1904-01-01 (QuickTime epoch) and 1970-01-01
QUICKTIME_EPOCH_ADJUSTER = 2082844800
QUICKTIME_CREATIONDATE_KEY = b'com.apple.quicktime.creationdate'

# XMP fields holding a creation date, in priority order
XMP_DATE_FIELDS = ('exif:DateTimeOriginal', 'photoshop:DateCreated', 'xmp:CreateDate')
XMP_PNG_INFO_KEY = 'XML:com.adobe.xmp'
XMP_SIDECAR_EXTENSION = 'xmp'

# Logging configuration
DEFAULT_LOG_LEVEL = logging.WARNING
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'

# Processing configuration
DEFAULT_MAX_WORKERS = 8
