"""Unit tests for PPTX container extraction."""

from __future__ import annotations

import io
import zipfile

import pytest

from smartslide.document.container import (
    ContainerExtractor,
    check_signature,
    detect_encoding,
    extract_slides,
    slide_index_from_name,
)
from smartslide.document.errors import (
    ConversionError,
    ConversionErrorKind,
    CorruptArchiveError,
    EmptyInputError,
    InvalidSignatureError,
    LegacyFormatError,
    NoSlidesFoundError,
    TooSmallError,
)
from smartslide.document.markup import extract_paragraphs


@pytest.mark.parametrize(
    ("data", "error", "kind"),
    [
        (b"", EmptyInputError, ConversionErrorKind.EMPTY_INPUT),
        (b"PK\x03", TooSmallError, ConversionErrorKind.TOO_SMALL),
        (
            b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + b"\x00" * 64,
            LegacyFormatError,
            ConversionErrorKind.LEGACY_FORMAT,
        ),
        (b"%PDF-1.7\n%stuff", InvalidSignatureError, ConversionErrorKind.INVALID_SIGNATURE),
    ],
)
def test_signature_errors(
    data: bytes, error: type[ConversionError], kind: ConversionErrorKind
) -> None:
    with pytest.raises(error) as excinfo:
        ContainerExtractor().extract(data)
    assert excinfo.value.kind is kind
    assert excinfo.value.message


def test_check_signature_accepts_zip_prefix() -> None:
    check_signature(b"PK\x03\x04")


def test_legacy_message_is_actionable() -> None:
    with pytest.raises(LegacyFormatError) as excinfo:
        check_signature(b"\xd0\xcf\x11\xe0")
    assert ".pptx" in excinfo.value.message
    assert excinfo.value.to_dict()["error"] == "LegacyFormat"


def test_corrupt_archive_after_valid_signature() -> None:
    with pytest.raises(CorruptArchiveError) as excinfo:
        extract_slides(b"PK\x03\x04 this is not really a zip archive")
    assert isinstance(excinfo.value.__cause__, zipfile.BadZipFile)


def test_archive_without_slides(pptx_factory) -> None:
    data = pptx_factory({"ppt/slideLayouts/slideLayout1.xml": "<layout/>"})
    with pytest.raises(NoSlidesFoundError) as excinfo:
        extract_slides(data)
    assert excinfo.value.kind is ConversionErrorKind.NO_SLIDES_FOUND


def test_slides_sorted_numerically(pptx_factory, slide_xml) -> None:
    data = pptx_factory(
        {
            "ppt/slides/slide10.xml": slide_xml("ten"),
            "ppt/slides/slide2.xml": slide_xml("two"),
            "ppt/slides/slide1.xml": slide_xml("one"),
        }
    )
    slides = extract_slides(data)
    assert [s.index for s in slides] == [1, 2, 10]
    assert [s.entry_name for s in slides] == [
        "ppt/slides/slide1.xml",
        "ppt/slides/slide2.xml",
        "ppt/slides/slide10.xml",
    ]
    assert "ten" in slides[-1].raw_xml


def test_gaps_in_numbering_are_tolerated(pptx_factory, slide_xml) -> None:
    data = pptx_factory(
        {
            "ppt/slides/slide7.xml": slide_xml("seven"),
            "ppt/slides/slide3.xml": slide_xml("three"),
        }
    )
    assert [s.index for s in extract_slides(data)] == [3, 7]


def test_non_slide_entries_are_ignored(pptx_factory, slide_xml) -> None:
    data = pptx_factory(
        [slide_xml("only")],
        extra_entries={
            "ppt/slides/_rels/slide1.xml.rels": "<Relationships/>",
            "ppt/slideLayouts/slideLayout1.xml": "<layout/>",
            "ppt/slides/slide1.xml.bak": "<backup/>",
            "ppt/notesSlides/notesSlide1.xml": "<notes/>",
            "PPT/SLIDES/SLIDE2.XML": "<upper/>",
        },
    )
    slides = extract_slides(data)
    assert len(slides) == 1
    assert slides[0].entry_name == "ppt/slides/slide1.xml"


def test_slide_without_number_sorts_first(pptx_factory, slide_xml) -> None:
    data = pptx_factory(
        {
            "ppt/slides/slide1.xml": slide_xml("numbered"),
            "ppt/slides/slide.xml": slide_xml("unnumbered"),
        }
    )
    slides = extract_slides(data)
    assert [s.index for s in slides] == [0, 1]
    assert "unnumbered" in slides[0].raw_xml


def test_byte_order_mark_is_stripped(pptx_factory, slide_xml) -> None:
    xml = slide_xml("bom")
    data = pptx_factory({"ppt/slides/slide1.xml": b"\xef\xbb\xbf" + xml.encode()})
    assert extract_slides(data)[0].raw_xml.startswith("<?xml")


@pytest.mark.parametrize("codec", ["utf-16", "utf-16-le", "utf-16-be"])
def test_utf16_slide_parts_are_decoded(pptx_factory, slide_xml, codec: str) -> None:
    xml = slide_xml("Привет", "日本語").replace('encoding="UTF-8"', 'encoding="UTF-16"')
    data = pptx_factory({"ppt/slides/slide1.xml": xml.encode(codec)})
    slide = extract_slides(data)[0]
    assert extract_paragraphs(slide.raw_xml) == ["Привет", "日本語"]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (b"\xef\xbb\xbf<?xml version=\"1.0\"?>", "utf-8-sig"),
        ("\ufeff<a/>".encode("utf-16-le"), "utf-16"),
        ("<?xml version=\"1.0\"?>".encode("utf-16-be"), "utf-16-be"),
        (b"<?xml version=\"1.0\" encoding=\"ISO-8859-1\"?>", "iso8859-1"),
        (b"<?xml version=\"1.0\" encoding=\"no-such-codec\"?>", "utf-8"),
        (b"<p:sld/>", "utf-8"),
    ],
)
def test_detect_encoding(raw: bytes, expected: str) -> None:
    assert detect_encoding(raw) == expected


def test_latin1_declaration_is_honoured(pptx_factory, slide_xml) -> None:
    xml = slide_xml("café").replace('encoding="UTF-8"', 'encoding="ISO-8859-1"')
    data = pptx_factory({"ppt/slides/slide1.xml": xml.encode("latin-1")})
    assert extract_paragraphs(extract_slides(data)[0].raw_xml) == ["café"]


def test_directory_entries_are_skipped(slide_xml) -> None:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr(zipfile.ZipInfo("ppt/slides/"), b"")
        archive.writestr("ppt/slides/slide1.xml", slide_xml("x"))
    slides = extract_slides(buffer.getvalue())
    assert [s.entry_name for s in slides] == ["ppt/slides/slide1.xml"]


def test_truncated_entry_is_corrupt(pptx_factory, slide_xml) -> None:
    data = pptx_factory([slide_xml("Some text " * 200)])
    # Keep the local headers but cut off the central directory
    with pytest.raises(CorruptArchiveError):
        extract_slides(data[: len(data) // 2])


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("ppt/slides/slide1.xml", 1),
        ("ppt/slides/slide42.xml", 42),
        ("ppt/slides/slide007.xml", 7),
        ("ppt/slides/slide.xml", 0),
        ("ppt/slides/slideA.xml", None),
        ("ppt/slides/slide1.xml.rels", None),
        ("ppt/slideLayouts/slideLayout1.xml", None),
        ("docProps/app.xml", None),
    ],
)
def test_slide_index_from_name(name: str, expected: int | None) -> None:
    assert slide_index_from_name(name) == expected
