"""
Document conversion package for SmartSlide.

This package validates PPTX containers, extracts slide text and composes the
paginated text-only PDF used for review.
"""

from .composer import ComposedDocument, DocumentComposer, MalformedSlidePolicy
from .container import ContainerExtractor, SlidePayload, extract_slides
from .converter import (
    ConversionResult,
    build_composer,
    convert_configured,
    convert_presentation,
    convert_presentation_detailed,
    convert_to_base64,
    convert_upload,
    encode_document,
    read_presentation,
)
from .errors import (
    CompositionError,
    ConversionError,
    ConversionErrorKind,
    CorruptArchiveError,
    EmptyInputError,
    ExtractionError,
    InvalidSignatureError,
    LegacyFormatError,
    MalformedMarkupError,
    NoSlidesFoundError,
    RenderError,
    TooSmallError,
)
from .layout import LayoutSettings

__all__ = [
    "ComposedDocument",
    "CompositionError",
    "ContainerExtractor",
    "ConversionError",
    "ConversionErrorKind",
    "ConversionResult",
    "CorruptArchiveError",
    "DocumentComposer",
    "EmptyInputError",
    "ExtractionError",
    "InvalidSignatureError",
    "LayoutSettings",
    "LegacyFormatError",
    "MalformedMarkupError",
    "MalformedSlidePolicy",
    "NoSlidesFoundError",
    "RenderError",
    "SlidePayload",
    "TooSmallError",
    "build_composer",
    "convert_configured",
    "convert_presentation",
    "convert_presentation_detailed",
    "convert_to_base64",
    "convert_upload",
    "encode_document",
    "extract_slides",
    "read_presentation",
]
