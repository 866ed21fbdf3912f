"""Custom error types for the dispatch engine."""

from __future__ import annotations

from typing import TypedDict


class MCPErrorPayload(TypedDict):
    """Structured JSON payload for MCP errors."""

    error: dict[str, object | None]


class MCPError(Exception):
    """Structured MCP error containing a JSON-friendly payload."""

    def __init__(
        self, error_type: str, message: str, details: object | None = None
    ) -> None:
        """Create a structured MCP error payload."""
        super().__init__(message)
        self.error_type = error_type
        self.message = message
        self.details = details

    def to_dict(self) -> MCPErrorPayload:
        """Return the structured error payload."""
        return {
            "error": {
                "type": self.error_type,
                "message": self.message,
                "details": self.details,
            }
        }


class InputValidationError(MCPError):
    """Incoming parameters do not satisfy the declared input shape."""

    def __init__(self, message: str, details: object | None = None) -> None:
        super().__init__("ValidationError", message, details)


class ResolutionError(MCPError):
    """No registry entry matches the requested name or URI."""

    def __init__(self, message: str, details: object | None = None) -> None:
        super().__init__("ResolutionError", message, details)


class UpstreamError(MCPError):
    """The external catalog API failed or answered with garbage."""

    def __init__(self, message: str, details: object | None = None) -> None:
        super().__init__("UpstreamError", message, details)


class ResourceReadError(MCPError):
    """A local document backing a resource could not be read."""

    def __init__(
        self, message: str = "Unable to load resource", details: object | None = None
    ) -> None:
        super().__init__("ResourceReadError", message, details)


class ConfigurationError(MCPError):
    """Start-up configuration is missing or malformed."""

    def __init__(self, message: str, details: object | None = None) -> None:
        super().__init__("ConfigurationError", message, details)
