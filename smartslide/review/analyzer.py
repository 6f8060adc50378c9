"""Module for reviewing a converted slide deck with an LLM.

Sends the PDF (native, or produced by the PPTX converter) to the configured
model together with a review prompt for the course subject, and validates
the JSON answer against :class:`~smartslide.schemas.analysis.AnalysisResult`.
"""

import re

from loguru import logger
from pydantic import ValidationError

from smartslide.configs.config import config
from smartslide.llm import chat_completion
from smartslide.schemas.analysis import AnalysisResult, analysis_json_schema
from smartslide.schemas.upload import normalize_subject

REVIEW_PROMPT = """You are an expert technical course reviewer and educator specializing in **{subject}**.
Analyze the attached presentation document which is a slide deck for the course "{subject}".

Note: If the document appears to be a plain text PDF, it may have been auto-converted from a slide deck (PPTX). Treat each page or section as a slide.

Your Goal:
1. **Find Errors (Technical Correctness)**:
   - Identify factual mistakes, logical flaws, or technical errors in the text specifically related to **{subject}**.
   - Ignore minor typos unless they affect meaning.
   - If no major errors are found, return an empty list or a single "No critical errors found" item.

2. **Enhance Quality (Areas for Improvement)**:
   - **CRITICAL**: Suggest ONLY enhancements related to the SPECIFIC topics covered in the slides. Do NOT suggest advanced topics that are completely out of scope for the current lecture level.
   - **Context**: Ensure all suggestions are pedagogical and suitable for a course on **{subject}**.
   - **Actionable & Concise**: Provide specific, actionable advice (e.g., "Add a flowchart for the process on Slide 4", "Clarify the definition of X with a real-world example", "Break down the dense text on Slide 10").
   - **Quantity**: Provide **5 to 8** distinct, high-quality suggestions. This should be the most detailed section.

3. **Know Your Strengths**:
   - Highlight what is done well (pedagogy, topic coverage, clarity) in the context of teaching **{subject}**.
   - Keep this section positive but honest.

Constraints:
- Focus ONLY on the textual content and logical flow.
- Do NOT critique the visual design (colors, fonts, layout) unless it severely impedes understanding (or if using a native PDF upload).
- Output strictly in JSON format matching the schema."""

UNSUPPORTED_CONTENT_MESSAGE = (
    "The file format or content is not supported. Please try a different PDF."
)

_FENCE_OPEN = re.compile(r"^\s*```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\s*```\s*$")


class AnalysisError(Exception):
    """Raised when the analysis model fails or answers outside the schema."""


def build_review_prompt(course_name: str | None) -> str:
    return REVIEW_PROMPT.format(subject=normalize_subject(course_name))


def strip_code_fences(text: str) -> str:
    """Remove a Markdown code fence the model may wrap around its JSON."""
    return _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", text))


def parse_analysis_response(text: str) -> AnalysisResult:
    if not text or not text.strip():
        raise AnalysisError("No response received from AI.")
    try:
        return AnalysisResult.model_validate_json(strip_code_fences(text))
    except ValidationError as e:
        raise AnalysisError(f"AI response did not match the analysis schema: {e}") from e


class PresentationAnalyzer:
    """Reviewer for slide decks delivered as PDF."""

    def __init__(self, model: str | None = None) -> None:
        self.model = model or config.analysis_model

    def analyze(
        self, document_base64: str, mime_type: str, course_name: str | None = None
    ) -> AnalysisResult:
        prompt = build_review_prompt(course_name)
        try:
            text = chat_completion(
                model=self.model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": prompt},
                            {
                                "type": "document",
                                "mime_type": mime_type,
                                "data": document_base64,
                            },
                        ],
                    }
                ],
                response_mime_type="application/json",
                response_json_schema=analysis_json_schema(),
                temperature=config.analysis_temperature,
            )
        except Exception as e:
            logger.error(f"Presentation analysis failed: {e}")
            if "400" in str(e):
                raise AnalysisError(UNSUPPORTED_CONTENT_MESSAGE) from e
            raise AnalysisError(str(e) or "Failed to analyze presentation") from e

        result = parse_analysis_response(text)
        logger.info(
            "Analysis complete: "
            f"{len(result.technical_correctness)} issue(s), "
            f"{len(result.areas_for_improvement)} suggestion(s), "
            f"{len(result.strengths)} strength(s)"
        )
        return result
