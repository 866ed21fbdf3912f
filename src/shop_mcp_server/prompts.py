"""Prompt templates."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from shop_mcp.prompts import PromptDefinition
from shop_mcp.tools import InputShape


class CustomerWelcomeParams(InputShape):
    """Arguments for customer-welcome."""

    name: str = Field(description="Customer name.")
    style: str = Field(description="Tone of the welcome, e.g. formal.")


def customer_welcome_prompt() -> PromptDefinition:
    """Create the customer-welcome prompt definition."""

    def handler(params: dict[str, Any]) -> str:
        return (
            f"Please welcome our new customer {params['name']} "
            f"in {params['style']} style."
        )

    return PromptDefinition(
        name="customer-welcome",
        description="Welcome a new customer",
        parameters_model=CustomerWelcomeParams,
        handler=handler,
    )


def build_prompts() -> list[PromptDefinition]:
    return [customer_welcome_prompt()]
