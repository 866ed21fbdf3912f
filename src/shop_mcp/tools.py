"""Tool definitions and the input validation gate."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from shop_mcp.errors import InputValidationError

ToolHandler = Callable[[dict[str, Any]], Union[Any, Awaitable[Any]]]

_EMPTY_SCHEMA: dict[str, Any] = {"type": "object", "properties": {}}


class InputShape(BaseModel):
    """Base parameters schema for tools and prompts.

    Unknown fields are dropped and primitive kinds are checked strictly, so a
    numeric string never passes as a number.
    """

    model_config = ConfigDict(extra="ignore", strict=True)


def _expected_kind(shape: type[InputShape], field: str) -> str | None:
    properties = shape.model_json_schema().get("properties", {})
    return properties.get(field, {}).get("type")


def validate_input(
    shape: type[InputShape] | None,
    raw: object,
    *,
    operation: str = "operation",
) -> dict[str, Any]:
    """Validate raw parameters against an input shape.

    Args:
        shape: Declared input shape, or ``None`` when the operation takes no
            parameters.
        raw: Untyped parameter mapping received from the caller.
        operation: Operation name used in error messages.

    Raises:
        InputValidationError: If a required field is missing or a field has the
            wrong primitive kind.

    Returns:
        Validated parameter dictionary containing only declared fields.
    """
    if shape is None:
        return {}
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise InputValidationError(
            f"Invalid parameters for '{operation}': expected an object"
        )

    try:
        model = shape.model_validate(dict(raw))
    except ValidationError as error:
        problems = []
        for item in error.errors():
            field = ".".join(str(part) for part in item["loc"]) or "<root>"
            problems.append(
                {
                    "field": field,
                    "expected": _expected_kind(shape, str(item["loc"][0]))
                    if item["loc"]
                    else None,
                    "problem": "missing" if item["type"] == "missing" else item["msg"],
                }
            )
        summary = ", ".join(
            f"{problem['field']} ({problem['problem']}; expected "
            f"{problem['expected'] or 'value'})"
            for problem in problems
        )
        raise InputValidationError(
            f"Invalid parameters for '{operation}': {summary}", problems
        ) from error
    # Strict mode only widens int to float; keep the caller's own values.
    return {name: raw.get(name, value) for name, value in model.model_dump().items()}


@dataclass(frozen=True)
class ToolDefinition:
    """Description of a tool that can be registered with the server.

    Attributes:
        name: Unique name of the tool.
        description: Human-readable description of the tool purpose.
        parameters_model: Input shape used to validate parameters, or ``None``
            when the tool accepts and ignores all parameters.
        handler: Callable, sync or async, that executes the tool logic.
    """

    name: str
    description: str
    parameters_model: type[InputShape] | None
    handler: ToolHandler

    def validate(self, parameters: object) -> dict[str, Any]:
        """Validate and coerce incoming tool parameters."""
        return validate_input(self.parameters_model, parameters, operation=self.name)

    def input_schema(self) -> dict[str, Any]:
        """JSON schema advertised for the tool's parameters."""
        if self.parameters_model is None:
            return dict(_EMPTY_SCHEMA)
        return self.parameters_model.model_json_schema()

    def metadata(self) -> dict[str, Any]:
        """Return a discovery-friendly description of the tool."""
        return {
            "name": self.name,
            "description": self.description,
            "schema": self.input_schema(),
        }
