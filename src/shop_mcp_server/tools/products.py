"""Product catalog tools."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from shop_mcp.tools import InputShape, ToolDefinition
from shop_mcp_server.catalog_client import CatalogClient


class GetProductParams(InputShape):
    """Parameters for get-product."""

    id: str = Field(description="Product identifier.")


class AddProductParams(InputShape):
    """Parameters for add-product."""

    name: str
    price: float
    description: str


def list_products_tool(client: CatalogClient) -> ToolDefinition:
    """Create the list-products tool definition."""

    async def handler(_: dict[str, Any]) -> Any:
        return await client.list_products()

    return ToolDefinition(
        name="list-products",
        description="List products",
        parameters_model=None,
        handler=handler,
    )


def get_product_tool(client: CatalogClient) -> ToolDefinition:
    """Create the get-product tool definition."""

    async def handler(params: dict[str, Any]) -> Any:
        return await client.get_product(params["id"])

    return ToolDefinition(
        name="get-product",
        description="Get product",
        parameters_model=GetProductParams,
        handler=handler,
    )


def add_product_tool(client: CatalogClient) -> ToolDefinition:
    """Create the add-product tool definition."""

    async def handler(params: dict[str, Any]) -> Any:
        return await client.add_product(params)

    return ToolDefinition(
        name="add-product",
        description="Add product",
        parameters_model=AddProductParams,
        handler=handler,
    )
