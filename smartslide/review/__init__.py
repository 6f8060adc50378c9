from .analyzer import (
    AnalysisError,
    PresentationAnalyzer,
    build_review_prompt,
    parse_analysis_response,
)

__all__ = [
    "AnalysisError",
    "PresentationAnalyzer",
    "build_review_prompt",
    "parse_analysis_response",
]
