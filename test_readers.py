"""Tests for the EXIF and XMP readers."""
from datetime import datetime

from timestamp_rename.models import FileEntry, Missing, Resolved
from timestamp_rename.readers import (
    NO_DATETIME_ORIGINAL,
    NO_EXIF,
    NO_XMP,
    NO_XMP_DATE,
    ExifReader,
    XmpReader,
    find_xmp_field,
)


def entry_for(path):
    return FileEntry.from_path(path, 0)


class TestExifReader:

    def test_reads_datetime_original(self, make_jpeg):
        path = make_jpeg("IMG_0001.JPG", "2023:05:14 21:08:53")
        result = ExifReader().extract(entry_for(path))
        assert result == Resolved(datetime(2023, 5, 14, 21, 8, 53), 'exif')

    def test_reads_datetime_original_from_exif_sub_ifd(self, make_jpeg):
        """Where cameras put it: the Exif IFD behind IFD0's pointer tag."""
        path = make_jpeg("IMG_0001.JPG", "2023:05:14 21:08:53", sub_ifd=True)
        result = ExifReader().extract(entry_for(path))
        assert result == Resolved(datetime(2023, 5, 14, 21, 8, 53), 'exif')

    def test_pillow_fallback_reads_sub_ifd(self, make_jpeg):
        path = make_jpeg("IMG_0001.JPG", "2023:05:14 21:08:53", sub_ifd=True)
        assert ExifReader()._read_pillow(path) == (True, "2023:05:14 21:08:53")

    def test_pillow_fallback_reads_ifd0(self, make_jpeg):
        path = make_jpeg("IMG_0001.JPG", "2023:05:14 21:08:53")
        assert ExifReader()._read_pillow(path) == (True, "2023:05:14 21:08:53")

    def test_pillow_fallback_when_exifread_sees_nothing(self, make_jpeg, monkeypatch):
        path = make_jpeg("IMG_0001.JPG", "2023:05:14 21:08:53", sub_ifd=True)
        monkeypatch.setattr(ExifReader, '_read_exifread', lambda self, filepath: (False, None))
        result = ExifReader().extract(entry_for(path))
        assert result == Resolved(datetime(2023, 5, 14, 21, 8, 53), 'exif')

    def test_exif_without_datetime_original(self, make_jpeg):
        path = make_jpeg("IMG_9999.JPG")
        assert ExifReader().extract(entry_for(path)) == Missing(NO_DATETIME_ORIGINAL)

    def test_no_exif(self, make_jpeg):
        path = make_jpeg("plain.jpg", with_exif=False)
        assert ExifReader().extract(entry_for(path)) == Missing(NO_EXIF)

    def test_not_an_image(self, tmp_path):
        path = tmp_path / "broken.jpg"
        path.write_bytes(b"this is not a jpeg at all")
        assert ExifReader().extract(entry_for(path)) == Missing(NO_EXIF)

    def test_placeholder_value(self, make_jpeg):
        path = make_jpeg("zero.jpg", "0000:00:00 00:00:00")
        result = ExifReader().extract(entry_for(path))
        assert isinstance(result, Missing)
        assert "unparsable DateTimeOriginal" in result.reason

    def test_missing_file(self, tmp_path):
        result = ExifReader().extract(entry_for(tmp_path / "gone.jpg"))
        assert isinstance(result, Missing)
        assert result.reason.startswith("cannot read file")


class TestXmpReader:

    def test_embedded_png_packet(self, make_png, make_xmp):
        path = make_png("Screenshot.png", make_xmp("2019-07-04T18:30:12"))
        result = XmpReader().extract(entry_for(path))
        assert result == Resolved(datetime(2019, 7, 4, 18, 30, 12), 'xmp')

    def test_attribute_form(self, make_png, make_xmp):
        path = make_png("Screenshot.png", make_xmp("2019-07-04T18:30:12+02:00", attribute=True))
        assert XmpReader().extract(entry_for(path)).timestamp == datetime(2019, 7, 4, 18, 30, 12)

    def test_field_priority(self, make_png):
        packet = (
            '<x:xmpmeta xmlns:x="adobe:ns:meta/"><rdf:RDF><rdf:Description '
            'xmp:CreateDate="2020-01-01T00:00:00" '
            'photoshop:DateCreated="2019-12-31T23:59:59"/></rdf:RDF></x:xmpmeta>'
        )
        path = make_png("Screenshot.png", packet)
        assert XmpReader().extract(entry_for(path)).timestamp == datetime(2019, 12, 31, 23, 59, 59)

    def test_sidecar(self, make_png, make_xmp, tmp_path):
        path = make_png("IMG_0002.png")
        (tmp_path / "IMG_0002.xmp").write_text(make_xmp("2018-03-03T03:03:03"), encoding="utf-8")
        assert XmpReader().extract(entry_for(path)).timestamp == datetime(2018, 3, 3, 3, 3, 3)

    def test_sidecar_with_full_name_wins(self, make_png, make_xmp, tmp_path):
        path = make_png("IMG_0002.png")
        (tmp_path / "IMG_0002.xmp").write_text(make_xmp("2018-03-03T03:03:03"), encoding="utf-8")
        (tmp_path / "IMG_0002.png.xmp").write_text(make_xmp("2017-01-01T01:01:01"), encoding="utf-8")
        assert XmpReader().extract(entry_for(path)).timestamp == datetime(2017, 1, 1, 1, 1, 1)

    def test_no_packet(self, make_png):
        path = make_png("Screenshot.png")
        assert XmpReader().extract(entry_for(path)) == Missing(NO_XMP)

    def test_packet_without_date(self, make_png):
        packet = '<x:xmpmeta xmlns:x="adobe:ns:meta/"><rdf:RDF/></x:xmpmeta>'
        path = make_png("Screenshot.png", packet)
        assert XmpReader().extract(entry_for(path)) == Missing(NO_XMP_DATE)

    def test_raw_packet_in_unknown_bytes(self, tmp_path, make_xmp):
        path = tmp_path / "odd.heic"
        path.write_bytes(b"\x00garbage" + make_xmp("2021-02-03T04:05:06").encode() + b"\x00tail")
        assert XmpReader().extract(entry_for(path)).timestamp == datetime(2021, 2, 3, 4, 5, 6)


def test_find_xmp_field_element_and_attribute():
    assert find_xmp_field('<xmp:CreateDate> 2020-01-01 </xmp:CreateDate>', 'xmp:CreateDate') == '2020-01-01'
    assert find_xmp_field("xmp:CreateDate='2020-01-02'", 'xmp:CreateDate') == '2020-01-02'
    assert find_xmp_field('<xmp:ModifyDate>2020</xmp:ModifyDate>', 'xmp:CreateDate') is None
