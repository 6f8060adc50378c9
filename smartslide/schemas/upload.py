"""
Pydantic models for upload endpoints.
"""

from __future__ import annotations

import base64
import binascii
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

PPTX_MIME_TYPE = (
    "application/vnd.openxmlformats-officedocument.presentationml.presentation"
)
SUPPORTED_EXTENSIONS = {".pptx", ".pdf"}
DEFAULT_SUBJECT = "General Technical Topic"

SourceType = Literal["pdf", "slides"]


def source_type_for(filename: str) -> SourceType:
    """Derive the source type from a filename, rejecting unsupported ones."""
    ext = Path(filename).suffix.lower()
    if ext == ".ppt":
        raise ValueError(
            "Legacy PowerPoint (.ppt) files are not supported. Please save it as "
            ".pptx or PDF before uploading."
        )
    if ext not in SUPPORTED_EXTENSIONS:
        raise ValueError("Please upload a PDF or PPTX file.")
    return "pdf" if ext == ".pdf" else "slides"


def normalize_subject(course_name: str | None) -> str:
    if course_name is None or not course_name.strip():
        return DEFAULT_SUBJECT
    return course_name.strip()


class ConvertPayload(BaseModel):
    """Schema for JSON conversion requests."""

    filename: str = Field(..., description="Name of the file being uploaded")
    file_data: str = Field(..., description="Base64 encoded file data")

    @field_validator("filename")
    @classmethod
    def validate_filename(cls, v: str) -> str:
        """Validate filename has a supported extension."""
        if not v:
            raise ValueError("Filename is required")
        source_type_for(v)
        return v

    @field_validator("file_data")
    @classmethod
    def validate_file_data(cls, v: str) -> str:
        """Validate file data is base64 encoded, tolerating a data URI prefix."""
        if not v:
            raise ValueError("File data is required")
        candidate = v.split(",", 1)[1] if v.startswith("data:") else v
        candidate = candidate.strip()
        try:
            base64.b64decode(candidate, validate=True)
        except (ValueError, binascii.Error) as exc:
            raise ValueError("Invalid base64 file data") from exc
        return candidate

    @property
    def source_type(self) -> SourceType:
        return source_type_for(self.filename)

    def decoded(self) -> bytes:
        return base64.b64decode(self.file_data)


class AnalyzePayload(ConvertPayload):
    """Schema for JSON analysis requests."""

    course_name: str | None = Field(
        None,
        description="Course or subject the deck belongs to",
        validate_default=True,
    )

    @field_validator("course_name")
    @classmethod
    def validate_course_name(cls, v: str | None) -> str:
        """Fall back to a general subject when no course is given."""
        return normalize_subject(v)
