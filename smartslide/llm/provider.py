"""
LLM provider factory and module-level facade functions.
"""

from __future__ import annotations

from typing import Any

from .base import ChatMessages, LLMClient
from .gemini_client import GeminiLLMClient

_llm_clients: dict[str, LLMClient] = {}


def _get_llm(provider: str | None = None) -> LLMClient:
    prov = (provider or "google").lower()
    if prov == "gemini":
        prov = "google"
    if prov in _llm_clients:
        return _llm_clients[prov]

    if prov == "google":
        client: LLMClient = GeminiLLMClient()
    else:
        raise ValueError(f"Unsupported provider: {prov}")

    _llm_clients[prov] = client
    return client


def _resolve_provider_and_model(model: str) -> tuple[str, str]:
    spec_provider, separator, spec_model = model.partition("/")
    if not separator:
        # No explicit provider prefix, default to Gemini models.
        return "google", spec_provider
    if not spec_model:
        raise ValueError(f"Invalid model specification '{model}'")
    return spec_provider.lower(), spec_model


def chat_completion(
    messages: ChatMessages,
    model: str,
    *,
    retries: int | None = None,
    backoff: float | None = None,
    timeout: float | None = None,
    **kwargs: Any,
) -> str:
    provider_name, model_name = _resolve_provider_and_model(model)
    return _get_llm(provider_name).chat_completion(
        messages,
        model_name,
        retries=retries,
        backoff=backoff,
        timeout=timeout,
        **kwargs,
    )
