"""Uniform response envelopes.

Every invocation answers with an envelope, successful or not. Failures are
reported as ordinary text content; the envelope keeps the originating
:class:`~shop_mcp.errors.MCPError` so callers can inspect its type.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from shop_mcp.errors import MCPError


def serialize_payload(payload: Any) -> str:
    """Serialize a handler result to compact JSON."""
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def error_text(error: MCPError) -> str:
    """Human-readable body for a failed tool or prompt invocation."""
    return f"Error: {error.message}"


@dataclass(frozen=True)
class TextContent:
    """Text content block."""

    text: str
    type: str = "text"

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type, "text": self.text}


@dataclass(frozen=True)
class _Envelope(ABC):
    error: MCPError | None = field(default=None, kw_only=True, compare=False)

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def error_type(self) -> str | None:
        return self.error.error_type if self.error is not None else None

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Wire form of the envelope."""

    def to_json(self) -> str:
        """Serialize the envelope to JSON."""
        return json.dumps(self.to_dict(), ensure_ascii=False)


@dataclass(frozen=True)
class ToolEnvelope(_Envelope):
    """Result of a tool call."""

    content: tuple[TextContent, ...] = ()

    @classmethod
    def success(cls, payload: Any) -> ToolEnvelope:
        return cls(content=(TextContent(serialize_payload(payload)),))

    @classmethod
    def failure(cls, error: MCPError) -> ToolEnvelope:
        return cls(content=(TextContent(error_text(error)),), error=error)

    @property
    def text(self) -> str:
        """Concatenated text of all content blocks."""
        return "".join(block.text for block in self.content)

    def to_dict(self) -> dict[str, Any]:
        return {"content": [block.to_dict() for block in self.content]}


@dataclass(frozen=True)
class ResourceContent:
    """Contents of one resource read."""

    uri: str
    text: str
    mime_type: str | None = None

    def to_dict(self) -> dict[str, str]:
        payload = {"uri": self.uri}
        if self.mime_type:
            payload["mimeType"] = self.mime_type
        payload["text"] = self.text
        return payload


@dataclass(frozen=True)
class ResourceEnvelope(_Envelope):
    """Result of a resource read."""

    contents: tuple[ResourceContent, ...] = ()

    @classmethod
    def success(
        cls, uri: str, text: str, mime_type: str | None = None
    ) -> ResourceEnvelope:
        return cls(contents=(ResourceContent(uri, text, mime_type),))

    @classmethod
    def failure(cls, uri: str, error: MCPError) -> ResourceEnvelope:
        # Resource reads answer with the bare message and no MIME type.
        return cls(contents=(ResourceContent(uri, error.message),), error=error)

    @property
    def text(self) -> str:
        return "".join(item.text for item in self.contents)

    def to_dict(self) -> dict[str, Any]:
        return {"contents": [item.to_dict() for item in self.contents]}


@dataclass(frozen=True)
class PromptMessage:
    """Single prompt message."""

    content: TextContent
    role: str = "user"

    def to_dict(self) -> dict[str, Any]:
        return {"role": self.role, "content": self.content.to_dict()}


@dataclass(frozen=True)
class PromptEnvelope(_Envelope):
    """Rendered prompt."""

    messages: tuple[PromptMessage, ...] = ()
    description: str | None = None

    @classmethod
    def success(cls, text: str, description: str | None = None) -> PromptEnvelope:
        message = PromptMessage(TextContent(text))
        return cls(messages=(message,), description=description)

    @classmethod
    def failure(cls, error: MCPError) -> PromptEnvelope:
        message = PromptMessage(TextContent(error_text(error)))
        return cls(messages=(message,), error=error)

    @property
    def text(self) -> str:
        return "".join(message.content.text for message in self.messages)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "messages": [message.to_dict() for message in self.messages]
        }
        if self.description:
            payload["description"] = self.description
        return payload
