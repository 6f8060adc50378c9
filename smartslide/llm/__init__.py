"""
LLM package exposing a provider-agnostic facade.

Backed by Google Gemini today.
"""

from .provider import _get_llm, chat_completion

__all__ = ["_get_llm", "chat_completion"]
