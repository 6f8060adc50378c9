"""
Shared fixtures for the SmartSlide test suite.

Presentations are built in memory as ZIP archives shaped like PPTX packages,
so no binary fixtures are needed.
"""

from __future__ import annotations

import io
import zipfile
from collections.abc import Callable, Generator, Mapping, Sequence
from xml.sax.saxutils import escape

import pytest
from fastapi.testclient import TestClient

DRAWINGML_NS = "http://schemas.openxmlformats.org/drawingml/2006/main"
PRESENTATIONML_NS = "http://schemas.openxmlformats.org/presentationml/2006/main"

_CONTENT_TYPES = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types"/>'
)

Paragraph = str | Sequence[str]


def make_slide_xml(*paragraphs: Paragraph, namespace: str = DRAWINGML_NS) -> str:
    """Slide markup with one text body; a paragraph given as a list becomes several runs."""
    body = []
    for paragraph in paragraphs:
        runs = [paragraph] if isinstance(paragraph, str) else list(paragraph)
        body.append(
            "<a:p>"
            + "".join(f"<a:r><a:t>{escape(run)}</a:t></a:r>" for run in runs)
            + "</a:p>"
        )
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<p:sld xmlns:a="{namespace}" xmlns:p="{PRESENTATIONML_NS}">'
        "<p:cSld><p:spTree><p:sp><p:txBody>"
        f"{''.join(body)}"
        "</p:txBody></p:sp></p:spTree></p:cSld></p:sld>"
    )


def make_pptx(
    slides: Sequence[str] | Mapping[str, str],
    extra_entries: Mapping[str, str | bytes] | None = None,
) -> bytes:
    """Zip slide markup into a PPTX-shaped archive.

    A sequence is stored as ``ppt/slides/slide1.xml``, ``slide2.xml`` and so
    on; a mapping gives explicit entry names.
    """
    if isinstance(slides, Mapping):
        entries: dict[str, str | bytes] = dict(slides)
    else:
        entries = {
            f"ppt/slides/slide{number}.xml": xml
            for number, xml in enumerate(slides, 1)
        }
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        archive.writestr("[Content_Types].xml", _CONTENT_TYPES)
        archive.writestr("ppt/presentation.xml", "<presentation/>")
        for name, content in {**entries, **(extra_entries or {})}.items():
            archive.writestr(name, content)
    return buffer.getvalue()


@pytest.fixture
def slide_xml() -> Callable[..., str]:
    return make_slide_xml


@pytest.fixture
def pptx_factory() -> Callable[..., bytes]:
    return make_pptx


@pytest.fixture
def sample_pptx() -> bytes:
    """Two slides: one with text, one without."""
    return make_pptx(
        [
            make_slide_xml("Introduction", ["Welcome to ", "the course"]),
            make_slide_xml(),
        ]
    )


@pytest.fixture(autouse=True)
def _disable_rate_limiting(monkeypatch: pytest.MonkeyPatch) -> None:
    from smartslide.core.rate_limit import limiter

    monkeypatch.setattr(limiter, "enabled", False)


@pytest.fixture(autouse=True)
def _fresh_composer_cache() -> Generator[None, None, None]:
    from smartslide.document.converter import _cached_composer

    _cached_composer.cache_clear()
    yield
    _cached_composer.cache_clear()


@pytest.fixture
def test_client() -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI app."""
    from smartslide.server import app

    yield TestClient(app)


@pytest.fixture
def log_messages() -> Generator[list[str], None, None]:
    """Warnings and errors emitted through loguru while the test runs."""
    from loguru import logger

    messages: list[str] = []
    handler_id = logger.add(messages.append, level="WARNING", format="{message}")
    yield messages
    logger.remove(handler_id)
