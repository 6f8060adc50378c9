from __future__ import annotations

import abc
from collections.abc import Sequence
from typing import Any, Literal, NotRequired, TypedDict, cast

MessageRole = Literal["system", "user", "assistant", "model"]


class TextContent(TypedDict):
    type: Literal["text"]
    text: str


class DocumentContent(TypedDict):
    type: Literal["document"]
    mime_type: str
    data: str


ContentPart = TextContent | DocumentContent


class GeminiInlineData(TypedDict):
    mime_type: str
    data: str


class GeminiTextPart(TypedDict):
    text: str


class GeminiInlineDataPart(TypedDict):
    inline_data: GeminiInlineData


GeminiPart = GeminiTextPart | GeminiInlineDataPart


class GeminiChatMessage(TypedDict):
    role: MessageRole
    parts: list[GeminiPart]


class ContentChatMessage(TypedDict, total=False):
    role: MessageRole
    content: str | list[ContentPart]
    name: NotRequired[str]


ChatMessage = ContentChatMessage | GeminiChatMessage
ChatMessages = Sequence[ChatMessage]


def _map_role_to_gemini(role: MessageRole) -> MessageRole:
    if role == "assistant":
        return "model"
    return role


def to_gemini_messages(messages: ChatMessages) -> list[GeminiChatMessage]:
    """Normalize chat messages into Google Gemini payloads."""

    normalized: list[GeminiChatMessage] = []
    for message in messages:
        if "parts" in message:
            gemini_msg = cast(GeminiChatMessage, dict(message))
            gemini_msg["role"] = _map_role_to_gemini(gemini_msg["role"])
            normalized.append(gemini_msg)
            continue
        if "content" not in message:
            raise ValueError("Chat message must include either 'content' or 'parts'.")
        content = cast(ContentChatMessage, message)["content"]
        parts: list[GeminiPart] = []
        if isinstance(content, str):
            if content:
                parts.append({"text": content})
        elif isinstance(content, list):
            for part in content:
                part_type = part.get("type") if isinstance(part, dict) else None
                if part_type == "text":
                    parts.append({"text": cast(str, part.get("text", ""))})
                elif part_type == "document":
                    document = cast(DocumentContent, part)
                    if not document.get("data") or not document.get("mime_type"):
                        raise ValueError(
                            "Document part requires 'mime_type' and 'data' for Gemini."
                        )
                    parts.append(
                        {
                            "inline_data": {
                                "mime_type": document["mime_type"],
                                "data": document["data"],
                            }
                        }
                    )
                else:
                    raise ValueError(
                        f"Unsupported content part type '{part_type}' for Gemini."
                    )
        else:
            raise ValueError("Unsupported content type for Gemini conversion.")
        normalized.append(
            {
                "role": _map_role_to_gemini(cast(ContentChatMessage, message)["role"]),
                "parts": parts,
            }
        )
    return normalized


class LLMClient(abc.ABC):
    """Abstract LLM client interface used by the app."""

    @abc.abstractmethod
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
        """Return assistant message content as string (may be empty)."""
