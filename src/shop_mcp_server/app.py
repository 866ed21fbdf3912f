"""Start-up wiring: settings and catalog client in, immutable registry out."""

from __future__ import annotations

from shop_mcp.registry import Registry, RegistryBuilder
from shop_mcp_server.catalog_client import CatalogClient
from shop_mcp_server.config import ServerSettings
from shop_mcp_server.prompts import build_prompts
from shop_mcp_server.resources import build_resources
from shop_mcp_server.tools import build_tools


def build_registry(settings: ServerSettings, client: CatalogClient) -> Registry:
    """Register every tool, resource and prompt, then freeze the registry."""
    builder = RegistryBuilder()
    builder.register_tools(*build_tools(client))
    for resource in build_resources(settings.docs_dir):
        builder.register_resource(resource)
    for prompt in build_prompts():
        builder.register_prompt(prompt)
    return builder.build()
