"""
Analysis routes: review a slide deck with the configured LLM.

PDF uploads are sent to the model unchanged; PPTX uploads are converted to
PDF first. The model call is blocking and runs in a worker thread.
"""

from fastapi import APIRouter, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from loguru import logger

from smartslide.configs.config import config
from smartslide.core.rate_limit import limiter
from smartslide.document.converter import (
    PDF_MIME_TYPE,
    convert_configured,
    encode_document,
)
from smartslide.review.analyzer import AnalysisError, PresentationAnalyzer
from smartslide.schemas.analysis import AnalysisResult

from .uploads import parse_upload_request

router = APIRouter(prefix="/api", tags=["analyze"])


@router.post("/analyze", response_model=AnalysisResult)
@limiter.limit(config.rate_limit)
async def analyze_presentation_route(request: Request) -> AnalysisResult:
    """Review an uploaded PDF or PPTX deck for the given course."""
    if not config.google_gemini_api_key:
        raise HTTPException(
            status_code=500, detail="Server Configuration Error: API Key missing."
        )

    upload = await parse_upload_request(request)
    if upload.source_type == "slides":
        converted = await run_in_threadpool(convert_configured, upload.data)
        document_base64 = converted.base64
    else:
        document_base64 = encode_document(upload.data)

    analyzer = PresentationAnalyzer()
    try:
        return await run_in_threadpool(
            analyzer.analyze, document_base64, PDF_MIME_TYPE, upload.course_name
        )
    except AnalysisError as e:
        logger.error(f"Analysis failed for {upload.filename!r}: {e}")
        raise HTTPException(status_code=502, detail=str(e)) from e
