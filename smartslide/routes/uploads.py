"""
Request parsing shared by the conversion and analysis routes.

Accepts either a multipart form (``file`` plus optional ``course_name``) or a
JSON body with a Base64 ``file_data`` field, and enforces the upload size
ceiling and the PPTX / PDF allow-list before any conversion work starts.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from fastapi import HTTPException, Request
from loguru import logger
from pydantic import ValidationError
from starlette.datastructures import UploadFile as StarletteUploadFile

from smartslide.configs.config import config
from smartslide.document.converter import PDF_MIME_TYPE
from smartslide.schemas.upload import (
    PPTX_MIME_TYPE,
    AnalyzePayload,
    SourceType,
    normalize_subject,
    source_type_for,
)

_READ_CHUNK_BYTES = 1024 * 1024
_SIZE_LIMIT_DETAIL = "Uploaded file exceeds size limit"


@dataclass(frozen=True)
class ReceivedUpload:
    filename: str
    data: bytes
    source_type: SourceType
    course_name: str


def _coerce_optional_str(value: Any) -> str | None:
    if value is None or isinstance(value, StarletteUploadFile):
        return None
    value_str = str(value).strip()
    return value_str or None


def _check_content_length(request: Request) -> None:
    content_length = request.headers.get("content-length")
    if content_length is None:
        return
    try:
        too_large = int(content_length) > config.max_upload_bytes
    except ValueError:
        return
    if too_large:
        raise HTTPException(status_code=413, detail=_SIZE_LIMIT_DETAIL)


async def _read_upload_file(upload: StarletteUploadFile) -> bytes:
    limit = config.max_upload_bytes
    remainder = limit
    chunks: list[bytes] = []
    while True:
        # Read one byte past the limit so an oversize file is detected
        data = await upload.read(min(_READ_CHUNK_BYTES, remainder + 1))
        if not data:
            break
        remainder -= len(data)
        if remainder < 0:
            raise HTTPException(status_code=413, detail=_SIZE_LIMIT_DETAIL)
        chunks.append(data)
    return b"".join(chunks)


def resolve_source_type(filename: str, content_type: str | None = None) -> SourceType:
    """Classify an upload by extension, falling back to its declared MIME type."""
    try:
        return source_type_for(filename)
    except ValueError as e:
        if Path(filename).suffix.lower() != ".ppt":
            mime = (content_type or "").split(";", 1)[0].strip().lower()
            if mime == PPTX_MIME_TYPE:
                return "slides"
            if mime == PDF_MIME_TYPE:
                return "pdf"
        raise HTTPException(status_code=400, detail=str(e)) from e


def _validation_detail(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid upload payload"
    message = str(errors[0].get("msg", "Invalid upload payload"))
    # pydantic prefixes messages raised from validators
    return message.removeprefix("Value error, ")


async def _parse_multipart(request: Request) -> ReceivedUpload:
    _check_content_length(request)
    form = await request.form()
    upload = form.get("file")
    if not isinstance(upload, StarletteUploadFile):
        raise HTTPException(status_code=400, detail="File field 'file' is required")

    filename = upload.filename or ""
    source_type = resolve_source_type(filename, upload.content_type)
    try:
        data = await _read_upload_file(upload)
    finally:
        await upload.close()

    return ReceivedUpload(
        filename=filename,
        data=data,
        source_type=source_type,
        course_name=normalize_subject(_coerce_optional_str(form.get("course_name"))),
    )


async def _parse_json(request: Request) -> ReceivedUpload:
    _check_content_length(request)
    try:
        body = await request.json()
    except ValueError as e:
        raise HTTPException(status_code=400, detail="Invalid JSON body") from e

    try:
        payload = AnalyzePayload.model_validate(body)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=_validation_detail(e)) from e

    data = payload.decoded()
    if len(data) > config.max_upload_bytes:
        raise HTTPException(status_code=413, detail=_SIZE_LIMIT_DETAIL)

    return ReceivedUpload(
        filename=payload.filename,
        data=data,
        source_type=payload.source_type,
        course_name=payload.course_name or normalize_subject(None),
    )


async def parse_upload_request(request: Request) -> ReceivedUpload:
    """Read and gate the uploaded presentation from a multipart or JSON request."""
    content_type = (request.headers.get("content-type") or "").lower()
    if "multipart/form-data" in content_type:
        received = await _parse_multipart(request)
    elif "application/json" in content_type:
        received = await _parse_json(request)
    else:
        raise HTTPException(
            status_code=400,
            detail="Expected a multipart form upload or a JSON body",
        )

    logger.info(
        f"Received upload {received.filename!r}: {len(received.data)} bytes, "
        f"source={received.source_type}"
    )
    return received
