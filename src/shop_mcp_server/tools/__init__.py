"""Tool registration helpers for the shop MCP server."""

from __future__ import annotations

from shop_mcp.tools import ToolDefinition
from shop_mcp_server.catalog_client import CatalogClient
from shop_mcp_server.tools.products import (
    add_product_tool,
    get_product_tool,
    list_products_tool,
)


def build_tools(client: CatalogClient) -> list[ToolDefinition]:
    """Instantiate all tool definitions with the provided catalog client."""
    return [
        list_products_tool(client),
        get_product_tool(client),
        add_product_tool(client),
    ]
