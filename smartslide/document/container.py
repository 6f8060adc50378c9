"""
Presentation container extraction for SmartSlide.

A PPTX file is a ZIP archive whose slides live at ``ppt/slides/slideN.xml``.
This module validates the archive signature, opens the archive in memory and
returns the slide parts as text, ordered by their slide number.
"""

from __future__ import annotations

import codecs
import io
import re
import zipfile
import zlib
from dataclasses import dataclass

from loguru import logger

from .errors import (
    CorruptArchiveError,
    EmptyInputError,
    InvalidSignatureError,
    LegacyFormatError,
    NoSlidesFoundError,
    TooSmallError,
)

ZIP_SIGNATURE = b"PK"
# OLE2 compound file: legacy .ppt, and also password-protected .pptx
LEGACY_SIGNATURE = b"\xd0\xcf\x11\xe0"
MIN_SIGNATURE_BYTES = 4

SLIDE_PART_PATTERN = re.compile(r"^ppt/slides/slide([0-9]*)\.xml$")
_XML_DECLARED_ENCODING = re.compile(
    rb"""\s*<\?xml[^>]*?\bencoding\s*=\s*["']([A-Za-z0-9._-]+)["']"""
)


@dataclass(frozen=True)
class SlidePayload:
    """Raw markup of one slide part, tagged with its slide number."""

    index: int
    raw_xml: str
    entry_name: str = ""


def slide_index_from_name(entry_name: str) -> int | None:
    """Return the numeric suffix of a slide part name, or None if not a slide part.

    Names that match the slide-part layout but carry no parsable number map
    to 0 so they sort ahead of the numbered slides instead of being rejected.
    """
    match = SLIDE_PART_PATTERN.match(entry_name)
    if not match:
        return None
    try:
        return int(match.group(1))
    except ValueError:
        logger.warning(f"Slide part {entry_name!r} has no numeric index, using 0")
        return 0


def check_signature(data: bytes) -> None:
    """Validate the leading bytes of ``data`` before any archive parsing."""
    if len(data) == 0:
        raise EmptyInputError()
    if len(data) < MIN_SIGNATURE_BYTES:
        raise TooSmallError()
    if data[:2] != ZIP_SIGNATURE:
        if data[:4] == LEGACY_SIGNATURE:
            raise LegacyFormatError()
        raise InvalidSignatureError()


class ContainerExtractor:
    """Extracts ordered slide markup from an in-memory PPTX archive."""

    def extract(self, data: bytes) -> list[SlidePayload]:
        check_signature(data)

        try:
            archive = zipfile.ZipFile(io.BytesIO(data))
        except (zipfile.BadZipFile, zipfile.LargeZipFile, EOFError, OSError) as exc:
            raise CorruptArchiveError() from exc

        with archive:
            entries: dict[str, zipfile.ZipInfo] = {}
            for info in archive.infolist():
                if info.filename in entries:
                    logger.warning(f"Duplicate archive entry {info.filename!r}")
                entries[info.filename] = info
            logger.debug(f"Archive contains {len(entries)} entries")

            slides: list[SlidePayload] = []
            for name, info in entries.items():
                if info.is_dir():
                    continue
                index = slide_index_from_name(name)
                if index is None:
                    continue
                slides.append(
                    SlidePayload(
                        index=index,
                        raw_xml=self._read_text(archive, info),
                        entry_name=name,
                    )
                )

        if not slides:
            raise NoSlidesFoundError()

        slides.sort(key=lambda slide: (slide.index, slide.entry_name))
        logger.debug(f"Found {len(slides)} slide parts")
        return slides

    def _read_text(self, archive: zipfile.ZipFile, info: zipfile.ZipInfo) -> str:
        try:
            raw = archive.read(info)
        except (
            zipfile.BadZipFile,
            zlib.error,
            EOFError,
            OSError,
            RuntimeError,
            NotImplementedError,
        ) as exc:
            # RuntimeError covers ZIP-level password protection
            raise CorruptArchiveError() from exc
        return decode_part(raw)


def detect_encoding(raw: bytes) -> str:
    """Encoding of an XML part from its byte order mark or XML declaration.

    Follows the XML autodetection order: a BOM wins, then the UTF-16 form of
    ``<?`` without a BOM, then the ``encoding`` pseudo-attribute, then UTF-8.
    """
    if raw.startswith(codecs.BOM_UTF8):
        return "utf-8-sig"
    if raw.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
        return "utf-16"
    if raw.startswith(b"<\x00?\x00"):
        return "utf-16-le"
    if raw.startswith(b"\x00<\x00?"):
        return "utf-16-be"
    match = _XML_DECLARED_ENCODING.match(raw)
    if match:
        declared = match.group(1).decode("ascii")
        try:
            return codecs.lookup(declared).name
        except LookupError:
            logger.warning(f"Unknown XML encoding {declared!r}, decoding as UTF-8")
    return "utf-8"


def decode_part(raw: bytes) -> str:
    return raw.decode(detect_encoding(raw), errors="replace")


def extract_slides(data: bytes) -> list[SlidePayload]:
    return ContainerExtractor().extract(data)
