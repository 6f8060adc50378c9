"""Google Gemini LLM client implementation using the google-genai SDK."""

from __future__ import annotations

import base64
import time
from typing import Any

from google import genai
from google.genai import types as genai_types
from loguru import logger

from smartslide.configs.config import config

from .base import ChatMessages, GeminiPart, LLMClient, to_gemini_messages


class GeminiLLMClient(LLMClient):
    """LLM client backed by Google Gemini models via the official SDK."""

    def __init__(self) -> None:
        api_key = config.google_gemini_api_key
        if not api_key:
            raise ValueError("GOOGLE_GEMINI_API_KEY is required for Gemini client")

        http_options: dict[str, Any] = {}
        if config.google_gemini_endpoint:
            http_options["base_url"] = config.google_gemini_endpoint
        if config.google_gemini_timeout:
            http_options["timeout"] = _to_millis(config.google_gemini_timeout)

        self._client = genai.Client(
            api_key=api_key,
            http_options=http_options or None,
        )
        self._timeout = config.google_gemini_timeout
        self._retries = config.google_gemini_retries
        self._backoff = config.google_gemini_backoff

    def _prepare_contents(
        self, messages: ChatMessages
    ) -> tuple[dict[str, Any] | None, list[dict[str, Any]]]:
        gemini_messages = to_gemini_messages(messages)
        contents: list[dict[str, Any]] = []
        system_parts: list[dict[str, Any]] = []
        for message in gemini_messages:
            parts = [_to_sdk_part(part) for part in message["parts"]]
            if message["role"] == "system":
                system_parts.extend(parts)
                continue
            contents.append({"role": message["role"], "parts": parts})
        system_instruction = None
        if system_parts:
            system_instruction = {"parts": system_parts}
        return system_instruction, contents

    def _build_generation_config(self, options: dict[str, Any]) -> dict[str, Any]:
        if not options:
            return {}
        allowed_keys = {
            "temperature",
            "top_p",
            "top_k",
            "max_output_tokens",
            "stop_sequences",
            "candidate_count",
            "seed",
            "response_mime_type",
            "response_schema",
            "response_json_schema",
        }
        return {
            key: value
            for key, value in options.items()
            if key in allowed_keys and value is not None
        }

    def _http_options(self, timeout: float | None) -> dict[str, Any] | None:
        if timeout is None or timeout <= 0:
            return None
        return {"timeout": _to_millis(timeout)}

    def chat_completion(
        self,
        messages: ChatMessages,
        model: str,
        *,
        retries: int | None = None,
        backoff: float | None = None,
        timeout: float | None = None,
        **kwargs: Any,
    ) -> str:
        r = max(1, self._retries if retries is None else retries)
        b = self._backoff if backoff is None else backoff
        t = self._timeout if timeout is None else timeout
        system_instruction, contents = self._prepare_contents(messages)

        base_config = self._build_generation_config(dict(kwargs))
        if system_instruction:
            base_config["system_instruction"] = system_instruction

        for attempt in range(r):
            try:
                config_payload = dict(base_config)
                http_options = self._http_options(t)
                if http_options:
                    config_payload["http_options"] = http_options

                response = self._client.models.generate_content(
                    model=model,
                    contents=contents,
                    config=config_payload or None,
                )
                return _extract_text(response) or ""
            except Exception as err:
                if attempt == r - 1:
                    raise
                logger.warning(
                    f"Gemini request failed (attempt {attempt + 1}/{r}): {err}"
                )
                time.sleep(b * (2**attempt))
        return ""


def _to_millis(seconds: float) -> int:
    # HttpOptions.timeout is expressed in milliseconds
    return int(max(1, round(seconds * 1000)))


def _to_sdk_part(part: GeminiPart) -> dict[str, Any]:
    """Decode inline base64 payloads; the SDK expects raw bytes."""
    if "inline_data" in part:
        inline = part["inline_data"]
        return {
            "inline_data": {
                "mime_type": inline["mime_type"],
                "data": base64.b64decode(inline["data"]),
            }
        }
    return dict(part)


def _extract_text(response: genai_types.GenerateContentResponse) -> str | None:
    text = getattr(response, "text", None)
    if isinstance(text, str) and text:
        return text

    candidates = getattr(response, "candidates", None) or []
    for candidate in candidates:
        content = getattr(candidate, "content", None)
        parts = getattr(content, "parts", None) if content is not None else None
        if not parts:
            continue
        for part in parts:
            part_text = getattr(part, "text", None)
            if part_text is None and isinstance(part, dict):
                part_text = part.get("text")
            if part_text:
                return str(part_text)
    return None
