"""Shared fixtures: synthetic media files with known metadata."""

import struct
from datetime import datetime
from pathlib import Path

import pytest
from PIL import ExifTags, Image
from PIL.PngImagePlugin import PngInfo

QUICKTIME_EPOCH_ADJUSTER = 2082844800


def atom(atom_type: bytes, payload: bytes = b'') -> bytes:
    return struct.pack('>I4s', 8 + len(payload), atom_type) + payload


def mvhd_atom(creation_time: int, version: int = 0) -> bytes:
    if version == 1:
        times = struct.pack('>QQIQ', creation_time, creation_time, 600, 0)
    else:
        times = struct.pack('>IIII', creation_time, creation_time, 600, 0)
    return atom(b'mvhd', bytes([version, 0, 0, 0]) + times + b'\x00' * 80)


def apple_meta_atom(creation_date: str, iso_full_box: bool = False) -> bytes:
    key = b'com.apple.quicktime.creationdate'
    hdlr = atom(b'hdlr', b'\x00' * 8 + b'mdta' + b'\x00' * 12 + b'\x00')
    keys = atom(
        b'keys',
        struct.pack('>II', 0, 2)
        + struct.pack('>I4s', 8 + len(b'com.apple.quicktime.make'), b'mdta') + b'com.apple.quicktime.make'
        + struct.pack('>I4s', 8 + len(key), b'mdta') + key,
    )
    make_item = atom(struct.pack('>I', 1), atom(b'data', struct.pack('>II', 1, 0) + b'Apple'))
    date_item = atom(struct.pack('>I', 2), atom(b'data', struct.pack('>II', 1, 0) + creation_date.encode()))
    ilst = atom(b'ilst', make_item + date_item)
    prefix = b'\x00\x00\x00\x00' if iso_full_box else b''
    return atom(b'meta', prefix + hdlr + keys + ilst)


@pytest.fixture
def make_jpeg(tmp_path):
    """
    Create a JPEG with an optional DateTimeOriginal.

    Cameras store DateTimeOriginal in the Exif sub-IFD (``sub_ifd=True``);
    some tools write it to IFD0 instead, which is the default here.
    """
    def factory(name, datetime_original=None, with_exif=True, directory=None, sub_ifd=False) -> Path:
        path = (directory or tmp_path) / name
        img = Image.new('RGB', (8, 8), color=(200, 30, 30))
        if not with_exif:
            img.save(path, format='JPEG')
            return path
        exif = Image.Exif()
        exif[ExifTags.Base.Model] = "Test Camera"
        if datetime_original is not None and sub_ifd:
            exif[ExifTags.IFD.Exif] = {ExifTags.Base.DateTimeOriginal: datetime_original}
        elif datetime_original is not None:
            exif[ExifTags.Base.DateTimeOriginal] = datetime_original
        img.save(path, format='JPEG', exif=exif.tobytes())
        return path
    return factory


@pytest.fixture
def make_png(tmp_path):
    """Create a PNG, optionally with an embedded XMP packet."""
    def factory(name, xmp_packet=None, directory=None) -> Path:
        path = (directory or tmp_path) / name
        img = Image.new('RGB', (8, 8), color=(30, 30, 200))
        info = PngInfo()
        if xmp_packet is not None:
            info.add_itxt('XML:com.adobe.xmp', xmp_packet)
        img.save(path, format='PNG', pnginfo=info)
        return path
    return factory


@pytest.fixture
def make_mov(tmp_path):
    """Create a minimal QuickTime container with the given creation metadata."""
    def factory(name, mvhd_time=None, apple_date=None, directory=None,
                mvhd_version=0, iso_meta=False, large_mdat=False) -> Path:
        path = (directory or tmp_path) / name
        moov_children = b''
        if mvhd_time is not None:
            moov_children += mvhd_atom(mvhd_time, mvhd_version)
        if apple_date is not None:
            moov_children += apple_meta_atom(apple_date, iso_full_box=iso_meta)

        ftyp = atom(b'ftyp', b'qt  ' + b'\x00\x00\x02\x00' + b'qt  ')
        payload = b'\x00' * 32
        if large_mdat:
            mdat = struct.pack('>I4sQ', 1, b'mdat', 16 + len(payload)) + payload
        else:
            mdat = atom(b'mdat', payload)
        path.write_bytes(ftyp + mdat + atom(b'moov', moov_children))
        return path
    return factory


def xmp_packet(create_date: str, field: str = 'xmp:CreateDate', attribute: bool = False) -> str:
    if attribute:
        description = f'<rdf:Description rdf:about="" {field}="{create_date}"/>'
    else:
        description = f'<rdf:Description rdf:about=""><{field}>{create_date}</{field}></rdf:Description>'
    return (
        '<x:xmpmeta xmlns:x="adobe:ns:meta/">'
        '<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#">'
        + description +
        '</rdf:RDF></x:xmpmeta>'
    )


@pytest.fixture
def make_xmp():
    return xmp_packet


def quicktime_seconds(moment: datetime) -> int:
    """Local wall-clock time to seconds since the QuickTime epoch."""
    return int(moment.timestamp()) + QUICKTIME_EPOCH_ADJUSTER


@pytest.fixture
def qt_seconds():
    return quicktime_seconds
