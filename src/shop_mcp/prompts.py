"""Prompt definitions."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Union

from shop_mcp.tools import InputShape, validate_input

PromptHandler = Callable[[dict[str, Any]], Union[str, Awaitable[str]]]


@dataclass(frozen=True)
class PromptDefinition:
    """Named message template rendered from validated arguments.

    The handler returns the text of the single user message.
    """

    name: str
    description: str
    parameters_model: type[InputShape] | None
    handler: PromptHandler

    def validate(self, parameters: object) -> dict[str, Any]:
        """Validate incoming prompt arguments."""
        return validate_input(self.parameters_model, parameters, operation=self.name)

    def arguments(self) -> list[dict[str, Any]]:
        """Describe prompt arguments for discovery."""
        if self.parameters_model is None:
            return []
        return [
            {
                "name": name,
                "description": field.description,
                "required": field.is_required(),
            }
            for name, field in self.parameters_model.model_fields.items()
        ]

    def metadata(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "arguments": self.arguments(),
        }
