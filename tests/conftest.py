"""Shared test fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

from shop_mcp.registry import Registry
from shop_mcp.server import Dispatcher
from shop_mcp_server.app import build_registry
from shop_mcp_server.catalog_client import CatalogClient
from shop_mcp_server.config import ServerSettings

BASE_URL = "http://catalog.test/api"


class FakeCatalog:
    """In-memory stand-in for the upstream product API."""

    def __init__(self) -> None:
        self.products: dict[str, dict[str, object]] = {
            "42": {"id": "42", "name": "Widget"},
        }
        self.requests: list[httpx.Request] = []
        self.fail_with: Callable[[httpx.Request], httpx.Response] | None = None

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            return self.fail_with(request)
        path = request.url.path.removeprefix("/api")
        if path == "/products" and request.method == "GET":
            return httpx.Response(200, json=list(self.products.values()))
        if path == "/products" and request.method == "POST":
            record = json.loads(request.content)
            product = {"id": str(len(self.products) + 100), **record}
            self.products[product["id"]] = product
            return httpx.Response(201, json=product)
        if path.startswith("/products/") and request.method == "GET":
            product_id = path.split("/")[-1]
            if product_id in self.products:
                return httpx.Response(200, json=self.products[product_id])
            return httpx.Response(404, json={"message": "Not found"})
        return httpx.Response(405)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


@pytest.fixture()
def anyio_backend() -> str:
    """Run async tests on asyncio; the FastMCP client requires an asyncio loop."""
    return "asyncio"


@pytest.fixture()
def fake_catalog() -> FakeCatalog:
    """Provide a fresh fake upstream catalog."""
    return FakeCatalog()


@pytest.fixture()
def settings() -> ServerSettings:
    """Settings pointing at the fake catalog and the packaged documents."""
    return ServerSettings(api_base_url=BASE_URL)


@pytest.fixture()
def catalog_client(fake_catalog: FakeCatalog) -> CatalogClient:
    return CatalogClient(BASE_URL, transport=fake_catalog.transport)


@pytest.fixture()
def registry(settings: ServerSettings, catalog_client: CatalogClient) -> Registry:
    return build_registry(settings, catalog_client)


@pytest.fixture()
def dispatcher(registry: Registry) -> Dispatcher:
    return Dispatcher(registry)


@pytest.fixture()
def empty_docs_dir(tmp_path: Path) -> Path:
    """Directory without the shopping policy document."""
    return tmp_path
