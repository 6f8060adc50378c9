"""
Error types raised by the presentation converter.

Every error is terminal for the conversion attempt that raised it. Each one
carries a machine-readable ``kind`` and a message that can be shown to the
person who uploaded the file as-is.
"""

from __future__ import annotations

from enum import Enum


class ConversionErrorKind(str, Enum):
    EMPTY_INPUT = "EmptyInput"
    TOO_SMALL = "TooSmall"
    LEGACY_FORMAT = "LegacyFormat"
    INVALID_SIGNATURE = "InvalidSignature"
    CORRUPT_ARCHIVE = "CorruptArchive"
    NO_SLIDES_FOUND = "NoSlidesFound"
    MALFORMED_MARKUP = "MalformedMarkup"
    RENDER_ERROR = "RenderError"


class ConversionError(Exception):
    """Base class for all converter failures."""

    kind: ConversionErrorKind
    default_message = "Failed to process the presentation."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, str]:
        return {"error": self.kind.value, "message": self.message}


class ExtractionError(ConversionError):
    """Raised while opening the container and collecting slide parts."""


class CompositionError(ConversionError):
    """Raised while turning slide markup into the output document."""


class EmptyInputError(ExtractionError):
    kind = ConversionErrorKind.EMPTY_INPUT
    default_message = "The uploaded file is empty."


class TooSmallError(ExtractionError):
    kind = ConversionErrorKind.TOO_SMALL
    default_message = "File is too small to be a valid presentation."


class LegacyFormatError(ExtractionError):
    kind = ConversionErrorKind.LEGACY_FORMAT
    default_message = (
        "This appears to be a legacy PowerPoint (.ppt) file. Please save it as a "
        "modern PowerPoint (.pptx) or PDF before uploading."
    )


class InvalidSignatureError(ExtractionError):
    kind = ConversionErrorKind.INVALID_SIGNATURE
    default_message = (
        "Invalid file format. Please ensure you are uploading a valid .pptx file, "
        "not a renamed .ppt."
    )


class CorruptArchiveError(ExtractionError):
    kind = ConversionErrorKind.CORRUPT_ARCHIVE
    default_message = "Corrupted or invalid PPTX file structure."


class NoSlidesFoundError(ExtractionError):
    kind = ConversionErrorKind.NO_SLIDES_FOUND
    default_message = "No slides found in this PPTX. It might be encrypted or empty."


class MalformedMarkupError(CompositionError):
    kind = ConversionErrorKind.MALFORMED_MARKUP
    default_message = "A slide in this presentation contains unreadable markup."

    def __init__(self, slide_number: int, detail: str | None = None) -> None:
        self.slide_number = slide_number
        message = f"Slide {slide_number} contains unreadable markup."
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class RenderError(CompositionError):
    kind = ConversionErrorKind.RENDER_ERROR
    default_message = "Failed to generate the PDF document."
