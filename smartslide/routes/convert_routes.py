"""
Conversion routes: turn an uploaded PPTX deck into a text-only PDF.

Conversion failures propagate as ``ConversionError`` and are rendered by the
application's exception handler as ``{"error": kind, "message": message}``.
"""

from typing import Any

from fastapi import APIRouter, HTTPException, Request
from fastapi.concurrency import run_in_threadpool

from smartslide.configs.config import config
from smartslide.core.rate_limit import limiter
from smartslide.document.converter import (
    PDF_MIME_TYPE,
    convert_configured,
)

from .uploads import parse_upload_request

router = APIRouter(prefix="/api", tags=["convert"])


def pdf_filename_for(filename: str) -> str:
    stem = filename.rsplit(".", 1)[0] if "." in filename else filename
    return f"{stem or 'presentation'}.pdf"


@router.post("/convert")
@limiter.limit(config.rate_limit)
async def convert_presentation_route(request: Request) -> dict[str, Any]:
    """Convert a PPTX upload and return the PDF as Base64."""
    upload = await parse_upload_request(request)
    if upload.source_type != "slides":
        raise HTTPException(
            status_code=400,
            detail="Only PPTX presentations can be converted to PDF.",
        )

    result = await run_in_threadpool(convert_configured, upload.data)
    return {
        "filename": pdf_filename_for(upload.filename),
        "mime_type": PDF_MIME_TYPE,
        "pdf_base64": result.base64,
        "slide_count": result.slide_count,
        "page_count": result.page_count,
    }
