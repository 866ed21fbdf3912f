"""Documentation and FAQ resources."""

from __future__ import annotations

from pathlib import Path

import anyio

from shop_mcp.errors import ResourceReadError
from shop_mcp.resources import ResourceDefinition

SHOPPING_POLICY_URI = "docs:///policy/shopping.md"
SHOPPING_POLICY_FILE = "shopping-policy.md"
FAQ_URI_TEMPLATE = "faqs://{q}"

FAQ_ANSWERS = {
    "login": "How I can sign in",
    "checkout": "How I can checkout cart",
    "cart": "How I can add product to cart",
}
FAQ_DEFAULT_ANSWER = "register"


def shopping_policy_resource(docs_dir: Path) -> ResourceDefinition:
    """Create the shopping policy resource backed by a markdown file."""
    path = anyio.Path(docs_dir / SHOPPING_POLICY_FILE)

    async def handler(uri: str, _: dict[str, str]) -> str:
        try:
            return await path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            details = {"path": str(path), "reason": str(exc)}
            raise ResourceReadError(details=details) from exc

    return ResourceDefinition(
        name="Shopping Policy",
        uri=SHOPPING_POLICY_URI,
        handler=handler,
        description="Store shopping policy.",
        mime_type="text/markdown",
    )


def faq_answer(topic: str) -> str:
    """Canned answer for an FAQ topic."""
    return FAQ_ANSWERS.get(topic, FAQ_DEFAULT_ANSWER)


def faq_resource() -> ResourceDefinition:
    """Create the templated FAQ resource."""

    def handler(uri: str, variables: dict[str, str]) -> str:
        return faq_answer(variables["q"])

    return ResourceDefinition(
        name="faq",
        uri=FAQ_URI_TEMPLATE,
        handler=handler,
        description="Frequently asked questions by topic.",
        mime_type="text/plain",
    )


def build_resources(docs_dir: Path) -> list[ResourceDefinition]:
    """Instantiate all resource definitions."""
    return [shopping_policy_resource(docs_dir), faq_resource()]
