"""
Configuration module for SmartSlide (configs).
"""

import os

from dotenv import load_dotenv

load_dotenv()

DEFAULT_FOOTER_TEXT = "Generated from PPTX by SmartSlide Reviewer"


class Config:
    def __init__(self) -> None:
        # Logging / runtime
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        self.log_file = os.getenv("LOG_FILE")
        self.log_dir = os.getenv("LOG_DIR", "logs")
        self.port = int(os.getenv("PORT", "8000"))

        # Rate limiting for the conversion and analysis endpoints
        self.rate_limit = os.getenv("RATE_LIMIT", "10/minute")
        self.rate_limit_enabled = os.getenv("RATE_LIMIT_ENABLED", "true").lower() in (
            "true",
            "1",
            "yes",
        )

        # Upload gating (100 MiB, same ceiling as the web client)
        self.max_upload_bytes = int(
            os.getenv("MAX_UPLOAD_BYTES", str(100 * 1024 * 1024))
        )

        # PDF layout
        self.pdf_page_format = os.getenv("PDF_PAGE_FORMAT", "a4").lower()
        self.pdf_orientation = os.getenv("PDF_ORIENTATION", "landscape").lower()
        self.pdf_margin_mm = float(os.getenv("PDF_MARGIN_MM", "10"))
        self.pdf_font_name = os.getenv("PDF_FONT_NAME", "Helvetica")
        # Built-in fonts only draw cp1252 text; Cyrillic, Greek or CJK need a TTF here
        self.pdf_font_path = os.getenv("PDF_FONT_PATH") or None
        self.pdf_footer_text = os.getenv("PDF_FOOTER_TEXT", DEFAULT_FOOTER_TEXT)

        # "abort" fails the whole conversion, "placeholder" keeps going
        self.malformed_slide_policy = os.getenv(
            "MALFORMED_SLIDE_POLICY", "abort"
        ).lower()

        # Google Gemini configuration
        self.google_gemini_api_key = os.getenv("GOOGLE_GEMINI_API_KEY")
        self.google_gemini_model = (
            os.getenv("GOOGLE_GEMINI_MODEL") or "gemini-2.5-pro"
        )
        self.google_gemini_timeout = float(os.getenv("GOOGLE_GEMINI_TIMEOUT", "60"))
        self.google_gemini_retries = int(os.getenv("GOOGLE_GEMINI_RETRIES", "3"))
        self.google_gemini_backoff = float(os.getenv("GOOGLE_GEMINI_BACKOFF", "0.5"))
        self.google_gemini_endpoint = os.getenv("GOOGLE_GEMINI_ENDPOINT") or None
        self.analysis_temperature = float(os.getenv("ANALYSIS_TEMPERATURE", "0.2"))

        # CORS settings
        self.cors_origins = self._parse_cors_origins(
            os.getenv("CORS_ORIGINS", "http://localhost:3000")
        )

    def _parse_cors_origins(self, origins_str: str) -> list[str]:
        """Parse CORS origins from a comma-separated string."""
        if not origins_str:
            return ["http://localhost:3000"]
        return [origin.strip() for origin in origins_str.split(",") if origin.strip()]

    @property
    def analysis_model(self) -> str:
        """Provider-qualified model name routed through the LLM facade."""
        return f"google/{self.google_gemini_model}"


config = Config()
