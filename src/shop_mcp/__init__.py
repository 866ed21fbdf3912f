"""shop_mcp package initialization."""

from shop_mcp.prompts import PromptDefinition
from shop_mcp.registry import Registry, RegistryBuilder
from shop_mcp.resources import ResourceDefinition
from shop_mcp.server import Dispatcher
from shop_mcp.tools import InputShape, ToolDefinition

__all__ = [
    "Dispatcher",
    "InputShape",
    "PromptDefinition",
    "Registry",
    "RegistryBuilder",
    "ResourceDefinition",
    "ToolDefinition",
]
