"""
End-to-end PPTX to PDF conversion.

Chains :class:`ContainerExtractor` and :class:`DocumentComposer`, and provides
the boundary helpers around them: reading the input from a path or file
handle, awaiting an upload, and Base64 transport encoding of the result.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, BinaryIO, Protocol

from fastapi.concurrency import run_in_threadpool
from loguru import logger

from smartslide.configs.config import config

from .composer import DocumentComposer, MalformedSlidePolicy
from .container import ContainerExtractor
from .layout import LayoutSettings

PDF_MIME_TYPE = "application/pdf"


class AsyncReadable(Protocol):
    async def read(self, size: int = -1) -> bytes: ...


@dataclass(frozen=True)
class ConversionResult:
    content: bytes
    slide_count: int
    page_count: int

    @property
    def base64(self) -> str:
        return encode_document(self.content)


def build_composer(
    cfg: Any = config, malformed_policy: MalformedSlidePolicy | str | None = None
) -> DocumentComposer:
    """Return the composer for the configured layout, font and policy.

    Composers are stateless between conversions, so one is built per distinct
    configuration and shared. The font file is read and registered once.
    """
    policy = MalformedSlidePolicy.parse(malformed_policy or cfg.malformed_slide_policy)
    return _cached_composer(LayoutSettings.from_config(cfg), policy, cfg.pdf_font_path)


@lru_cache(maxsize=8)
def _cached_composer(
    settings: LayoutSettings, policy: MalformedSlidePolicy, font_path: str | None
) -> DocumentComposer:
    logger.debug(f"Building document composer (font_path={font_path})")
    return DocumentComposer(settings, malformed_policy=policy, font_path=font_path)


def convert_presentation_detailed(
    data: bytes, *, composer: DocumentComposer | None = None
) -> ConversionResult:
    slides = ContainerExtractor().extract(data)
    document = (composer or DocumentComposer()).compose_document(slides)
    logger.info(
        f"Converted presentation: {len(slides)} slide(s), "
        f"{document.page_count} page(s)"
    )
    return ConversionResult(
        content=document.content,
        slide_count=len(slides),
        page_count=document.page_count,
    )


def convert_configured(data: bytes, cfg: Any = config) -> ConversionResult:
    """Convert with the composer for ``cfg``; blocking, meant for a worker thread."""
    return convert_presentation_detailed(data, composer=build_composer(cfg))


def convert_presentation(
    data: bytes, *, composer: DocumentComposer | None = None
) -> bytes:
    return convert_presentation_detailed(data, composer=composer).content


def encode_document(content: bytes) -> str:
    return base64.b64encode(content).decode("ascii")


def convert_to_base64(
    data: bytes, *, composer: DocumentComposer | None = None
) -> str:
    return encode_document(convert_presentation(data, composer=composer))


def read_presentation(source: str | Path | BinaryIO) -> bytes:
    """Read the whole presentation from a path or an open binary handle."""
    if isinstance(source, str | Path):
        return Path(source).read_bytes()
    return source.read()


async def convert_upload(
    upload: AsyncReadable, *, composer: DocumentComposer | None = None
) -> ConversionResult:
    """Await the upload's bytes, then run the synchronous converter off the loop."""
    data = await upload.read()
    return await run_in_threadpool(
        convert_presentation_detailed, data, composer=composer
    )
