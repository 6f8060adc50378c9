"""
Pydantic models for presentation analysis results.

``AnalysisResult`` is the single definition of the analysis contract: the
JSON schema sent to the model is generated from it, and model output is
validated against it before it reaches API clients.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class TechnicalIssue(_CamelModel):
    issue: str = Field(..., description="Factual, logical or technical error found")
    explanation: str = Field(..., description="Why it is wrong and how to fix it")
    slide_number: str | None = Field(
        None,
        alias="slideNumber",
        description="e.g., 'Slide 5' or 'General'",
    )


class ImprovementSuggestion(_CamelModel):
    suggestion: str
    details: str


class Strength(_CamelModel):
    point: str
    details: str


class AnalysisResult(_CamelModel):
    technical_correctness: list[TechnicalIssue] = Field(
        ..., alias="technicalCorrectness"
    )
    areas_for_improvement: list[ImprovementSuggestion] = Field(
        ..., alias="areasForImprovement"
    )
    strengths: list[Strength]


def analysis_json_schema() -> dict[str, Any]:
    """JSON schema of the wire format (camelCase keys) handed to the model."""
    return AnalysisResult.model_json_schema(by_alias=True)
