"""End-to-end coverage for the registered tools, resources and prompts."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from shop_mcp.server import Dispatcher
from shop_mcp_server.app import build_registry
from shop_mcp_server.catalog_client import CatalogClient
from shop_mcp_server.config import ServerSettings
from shop_mcp_server.resources import FAQ_ANSWERS, faq_answer
from tests.conftest import FakeCatalog


def test_registry_contents(dispatcher: Dispatcher) -> None:
    registry = dispatcher.registry

    assert registry.available("tool") == ["add-product", "get-product", "list-products"]
    assert registry.available("resource") == [
        "docs:///policy/shopping.md",
        "faqs://{q}",
    ]
    assert registry.available("prompt") == ["customer-welcome"]


@pytest.mark.anyio()
async def test_get_product_returns_exact_json(dispatcher: Dispatcher) -> None:
    envelope = await dispatcher.call_tool("get-product", {"id": "42"})

    assert envelope.to_dict() == {
        "content": [{"type": "text", "text": '{"id":"42","name":"Widget"}'}]
    }


@pytest.mark.anyio()
async def test_get_product_is_idempotent(dispatcher: Dispatcher) -> None:
    """The same request against an idempotent upstream yields identical bytes."""
    first = await dispatcher.call_tool("get-product", {"id": "42"})
    second = await dispatcher.call_tool("get-product", {"id": "42"})

    assert first.to_json().encode() == second.to_json().encode()


@pytest.mark.anyio()
async def test_get_product_requires_string_id(
    dispatcher: Dispatcher, fake_catalog: FakeCatalog
) -> None:
    envelope = await dispatcher.call_tool("get-product", {"id": 42})

    assert envelope.error_type == "ValidationError"
    assert fake_catalog.requests == []


@pytest.mark.anyio()
async def test_list_products_ignores_parameters(dispatcher: Dispatcher) -> None:
    envelope = await dispatcher.call_tool("list-products", {"page": 2})

    assert envelope.text == '[{"id":"42","name":"Widget"}]'


@pytest.mark.anyio()
async def test_add_product(dispatcher: Dispatcher, fake_catalog: FakeCatalog) -> None:
    envelope = await dispatcher.call_tool(
        "add-product", {"name": "X", "price": 1.5, "description": "d"}
    )

    assert envelope.text == '{"id":"101","name":"X","price":1.5,"description":"d"}'
    assert fake_catalog.requests[0].method == "POST"


@pytest.mark.anyio()
async def test_add_product_keeps_integer_price(
    dispatcher: Dispatcher, fake_catalog: FakeCatalog
) -> None:
    await dispatcher.call_tool(
        "add-product", {"name": "X", "price": 1, "description": "d"}
    )

    price = json.loads(fake_catalog.requests[0].content)["price"]
    assert price == 1
    assert isinstance(price, int)


@pytest.mark.anyio()
async def test_add_product_network_failure_is_an_envelope(
    dispatcher: Dispatcher, fake_catalog: FakeCatalog
) -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    fake_catalog.fail_with = refuse

    envelope = await dispatcher.call_tool(
        "add-product", {"name": "X", "price": 1.5, "description": "d"}
    )

    assert envelope.text.startswith("Error:")
    assert envelope.error_type == "UpstreamError"


@pytest.mark.anyio()
async def test_add_product_missing_field(dispatcher: Dispatcher) -> None:
    envelope = await dispatcher.call_tool("add-product", {"name": "X", "price": 1.5})

    assert envelope.error_type == "ValidationError"
    assert "description" in envelope.text


@pytest.mark.anyio()
async def test_shopping_policy_is_markdown(dispatcher: Dispatcher) -> None:
    envelope = await dispatcher.read_resource("docs:///policy/shopping.md")

    (content,) = envelope.contents
    assert content.uri == "docs:///policy/shopping.md"
    assert content.mime_type == "text/markdown"
    assert content.text.startswith("# Shopping Policy")


@pytest.mark.anyio()
async def test_shopping_policy_fallback(
    empty_docs_dir: Path, catalog_client: CatalogClient
) -> None:
    settings = ServerSettings(api_base_url="http://x", docs_dir=empty_docs_dir)
    dispatcher = Dispatcher(build_registry(settings, catalog_client))

    envelope = await dispatcher.read_resource("docs:///policy/shopping.md")

    assert envelope.to_dict() == {
        "contents": [
            {"uri": "docs:///policy/shopping.md", "text": "Unable to load resource"}
        ]
    }
    assert envelope.error_type == "ResourceReadError"


@pytest.mark.anyio()
@pytest.mark.parametrize(
    ("topic", "answer"),
    [
        ("login", "How I can sign in"),
        ("checkout", "How I can checkout cart"),
        ("cart", "How I can add product to cart"),
        ("anything-else", "register"),
    ],
)
async def test_faq_answers(dispatcher: Dispatcher, topic: str, answer: str) -> None:
    envelope = await dispatcher.read_resource(f"faqs://{topic}")

    assert envelope.text == answer
    assert envelope.contents[0].uri == f"faqs://{topic}"


def test_faq_answer_table() -> None:
    assert set(FAQ_ANSWERS) == {"login", "checkout", "cart"}
    assert faq_answer("refunds") == "register"


@pytest.mark.anyio()
async def test_customer_welcome_prompt(dispatcher: Dispatcher) -> None:
    envelope = await dispatcher.get_prompt(
        "customer-welcome", {"name": "Ada", "style": "formal"}
    )

    assert envelope.to_dict()["messages"] == [
        {
            "role": "user",
            "content": {
                "type": "text",
                "text": "Please welcome our new customer Ada in formal style.",
            },
        }
    ]


@pytest.mark.anyio()
async def test_customer_welcome_requires_style(dispatcher: Dispatcher) -> None:
    envelope = await dispatcher.get_prompt("customer-welcome", {"name": "Ada"})

    assert envelope.error_type == "ValidationError"
    assert "style" in envelope.text
