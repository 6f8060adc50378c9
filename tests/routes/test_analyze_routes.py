"""
Tests for the analysis route with the LLM reviewer mocked out.
"""

from __future__ import annotations

import base64
from typing import Any

import pytest
from fastapi.testclient import TestClient

from smartslide.configs.config import config
from smartslide.review.analyzer import AnalysisError
from smartslide.routes import analyze_routes
from smartslide.schemas.analysis import AnalysisResult
from smartslide.schemas.upload import PPTX_MIME_TYPE

_RESULT = AnalysisResult.model_validate(
    {
        "technicalCorrectness": [
            {
                "issue": "Wrong complexity",
                "explanation": "Binary search is O(log n)",
                "slideNumber": "Slide 3",
            }
        ],
        "areasForImprovement": [{"suggestion": "Add a diagram", "details": "Slide 4"}],
        "strengths": [{"point": "Clear structure", "details": "Logical flow"}],
    }
)


class _RecordingAnalyzer:
    calls: list[dict[str, Any]] = []
    error: Exception | None = None

    def analyze(
        self, document_base64: str, mime_type: str, course_name: str | None = None
    ) -> AnalysisResult:
        self.calls.append(
            {
                "document": base64.b64decode(document_base64),
                "mime_type": mime_type,
                "course_name": course_name,
            }
        )
        if self.error is not None:
            raise self.error
        return _RESULT


@pytest.fixture
def analyzer(monkeypatch: pytest.MonkeyPatch) -> type[_RecordingAnalyzer]:
    monkeypatch.setattr(config, "google_gemini_api_key", "test-key")
    monkeypatch.setattr(_RecordingAnalyzer, "calls", [])
    monkeypatch.setattr(_RecordingAnalyzer, "error", None)
    monkeypatch.setattr(analyze_routes, "PresentationAnalyzer", _RecordingAnalyzer)
    return _RecordingAnalyzer


def test_pdf_is_passed_through_unchanged(
    test_client: TestClient, analyzer: type[_RecordingAnalyzer]
) -> None:
    pdf = b"%PDF-1.4 native deck"
    response = test_client.post(
        "/api/analyze",
        files={"file": ("deck.pdf", pdf, "application/pdf")},
        data={"course_name": "Algorithms"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["technicalCorrectness"][0]["slideNumber"] == "Slide 3"
    assert body["areasForImprovement"][0]["suggestion"] == "Add a diagram"
    assert body["strengths"][0]["point"] == "Clear structure"

    (call,) = analyzer.calls
    assert call == {
        "document": pdf,
        "mime_type": "application/pdf",
        "course_name": "Algorithms",
    }


def test_pptx_is_converted_first(
    test_client: TestClient, analyzer: type[_RecordingAnalyzer], sample_pptx: bytes
) -> None:
    response = test_client.post(
        "/api/analyze", files={"file": ("deck.pptx", sample_pptx, PPTX_MIME_TYPE)}
    )
    assert response.status_code == 200
    (call,) = analyzer.calls
    assert call["document"].startswith(b"%PDF-")
    assert call["mime_type"] == "application/pdf"
    assert call["course_name"] == "General Technical Topic"


def test_json_payload(
    test_client: TestClient, analyzer: type[_RecordingAnalyzer], sample_pptx: bytes
) -> None:
    response = test_client.post(
        "/api/analyze",
        json={
            "filename": "deck.pptx",
            "file_data": base64.b64encode(sample_pptx).decode(),
            "course_name": "  Networks  ",
        },
    )
    assert response.status_code == 200
    assert analyzer.calls[0]["course_name"] == "Networks"


def test_blank_course_uses_default_subject(
    test_client: TestClient, analyzer: type[_RecordingAnalyzer]
) -> None:
    test_client.post(
        "/api/analyze",
        files={"file": ("deck.pdf", b"%PDF-1.4", "application/pdf")},
        data={"course_name": "   "},
    )
    assert analyzer.calls[0]["course_name"] == "General Technical Topic"


def test_analysis_failure_maps_to_502(
    test_client: TestClient, analyzer: type[_RecordingAnalyzer]
) -> None:
    analyzer.error = AnalysisError("No response received from AI.")
    response = test_client.post(
        "/api/analyze", files={"file": ("deck.pdf", b"%PDF-1.4", "application/pdf")}
    )
    assert response.status_code == 502
    assert response.json()["detail"] == "No response received from AI."


def test_conversion_failure_maps_to_422(
    test_client: TestClient, analyzer: type[_RecordingAnalyzer]
) -> None:
    response = test_client.post(
        "/api/analyze",
        files={"file": ("deck.pptx", b"PK\x03\x04 broken", PPTX_MIME_TYPE)},
    )
    assert response.status_code == 422
    assert response.json()["error"] == "CorruptArchive"
    assert analyzer.calls == []


def test_bad_page_format_maps_to_422(
    test_client: TestClient,
    analyzer: type[_RecordingAnalyzer],
    sample_pptx: bytes,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(config, "pdf_page_format", "b5")
    response = test_client.post(
        "/api/analyze", files={"file": ("deck.pptx", sample_pptx, PPTX_MIME_TYPE)}
    )
    assert response.status_code == 422
    assert response.json()["error"] == "RenderError"
    assert analyzer.calls == []


def test_missing_api_key_is_a_server_error(
    test_client: TestClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(config, "google_gemini_api_key", None)
    response = test_client.post(
        "/api/analyze", files={"file": ("deck.pdf", b"%PDF-1.4", "application/pdf")}
    )
    assert response.status_code == 500
    assert response.json()["detail"] == "Server Configuration Error: API Key missing."


def test_unsupported_file_is_rejected(
    test_client: TestClient, analyzer: type[_RecordingAnalyzer]
) -> None:
    response = test_client.post(
        "/api/analyze", files={"file": ("deck.key", b"keynote", "application/zip")}
    )
    assert response.status_code == 400
    assert analyzer.calls == []
