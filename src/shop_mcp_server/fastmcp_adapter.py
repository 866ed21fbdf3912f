"""Adapters for exposing the registry via FastMCP.

FastMCP owns framing and the connection lifecycle. Every component built here
delegates to one :class:`~shop_mcp.server.Dispatcher`, so validation,
resolution and error containment stay in the engine and the transport only
ever sees envelope contents.
"""

from __future__ import annotations

from typing import Any

from fastmcp import FastMCP
from fastmcp.exceptions import NotFoundError
from fastmcp.prompts.prompt import Prompt, PromptArgument
from fastmcp.resources import Resource, ResourceTemplate
from fastmcp.server.middleware import MiddlewareContext
from fastmcp.tools import Tool
from fastmcp.tools.tool import ToolResult
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.types import (
    CallToolRequestParams,
    GetPromptRequestParams,
    GetPromptResult,
    PromptMessage,
    ReadResourceRequestParams,
    TextContent,
)

from shop_mcp.envelope import PromptEnvelope, ToolEnvelope
from shop_mcp.prompts import PromptDefinition
from shop_mcp.registry import Registry
from shop_mcp.resources import ResourceDefinition
from shop_mcp.server import Dispatcher
from shop_mcp.tools import ToolDefinition
from shop_mcp_server import __version__
from shop_mcp_server.app import build_registry
from shop_mcp_server.catalog_client import CatalogClient
from shop_mcp_server.config import ServerSettings

SERVER_NAME = "shop-mcp-server"
INSTRUCTIONS = (
    "Product catalog tools, shopping policy and FAQ documents, and customer "
    "welcome prompts exposed over the Model Context Protocol."
)


def _tool_result(envelope: ToolEnvelope) -> ToolResult:
    return ToolResult(
        content=[
            TextContent(type="text", text=block.text) for block in envelope.content
        ]
    )


def _prompt_messages(envelope: PromptEnvelope) -> list[PromptMessage]:
    return [
        PromptMessage(
            role="user", content=TextContent(type="text", text=message.content.text)
        )
        for message in envelope.messages
    ]


class ToolDefinitionAdapter(Tool):
    """Expose a :class:`ToolDefinition` as a FastMCP tool."""

    def __init__(self, definition: ToolDefinition, dispatcher: Dispatcher) -> None:
        """Create a FastMCP tool wrapper for the provided definition."""
        super().__init__(
            name=definition.name,
            description=definition.description,
            parameters=definition.input_schema(),
            output_schema=None,
            tags=set(),
        )
        self._dispatcher = dispatcher

    async def run(self, arguments: dict[str, Any]) -> ToolResult:
        """Delegate to the dispatcher and return the envelope content."""
        return _tool_result(await self._dispatcher.call_tool(self.name, arguments))


class ResourceDefinitionAdapter(Resource):
    """Expose a :class:`ResourceDefinition` bound to one concrete URI."""

    def __init__(
        self,
        definition: ResourceDefinition,
        dispatcher: Dispatcher,
        uri: str | None = None,
    ) -> None:
        super().__init__(
            uri=uri or definition.uri,
            name=definition.name,
            description=definition.description,
            mime_type=definition.mime_type,
            tags=set(),
        )
        self._dispatcher = dispatcher
        self._key = uri or definition.uri

    async def read(self) -> str:
        envelope = await self._dispatcher.read_resource(self._key)
        return envelope.text


class ResourceTemplateAdapter(ResourceTemplate):
    """Expose a templated :class:`ResourceDefinition` as a FastMCP template."""

    def __init__(self, definition: ResourceDefinition, dispatcher: Dispatcher) -> None:
        super().__init__(
            uri_template=definition.uri,
            name=definition.name,
            description=definition.description,
            mime_type=definition.mime_type,
            parameters={
                "type": "object",
                "properties": {
                    name: {"type": "string"} for name in definition.template.variables
                },
                "required": list(definition.template.variables),
            },
            tags=set(),
        )
        self._definition = definition
        self._dispatcher = dispatcher

    def matches(self, uri: str) -> dict[str, Any] | None:
        return self._definition.template.match(uri)

    async def create_resource(self, uri: str, params: dict[str, Any]) -> Resource:
        """Bind the template to the requested URI."""
        return ResourceDefinitionAdapter(self._definition, self._dispatcher, uri=uri)


class PromptDefinitionAdapter(Prompt):
    """Expose a :class:`PromptDefinition` as a FastMCP prompt."""

    def __init__(self, definition: PromptDefinition, dispatcher: Dispatcher) -> None:
        super().__init__(
            name=definition.name,
            description=definition.description,
            arguments=[
                PromptArgument(
                    name=argument["name"],
                    description=argument["description"],
                    required=argument["required"],
                )
                for argument in definition.arguments()
            ],
            tags=set(),
        )
        self._dispatcher = dispatcher

    async def render(
        self, arguments: dict[str, Any] | None = None
    ) -> list[PromptMessage]:
        envelope = await self._dispatcher.get_prompt(self.name, arguments)
        return _prompt_messages(envelope)


class ShopFastMCP(FastMCP):
    """FastMCP server whose lookups fall back to the dispatcher.

    Names and URIs FastMCP does not know still reach the engine, so a miss is
    answered with an ordinary envelope instead of a protocol error. Resource
    reads always go through the engine resolver, which keeps literal priority,
    template order and the envelope's MIME type authoritative.
    """

    def __init__(self, dispatcher: Dispatcher, **settings: Any) -> None:
        super().__init__(**settings)
        self.dispatcher = dispatcher

    async def _call_tool(
        self, context: MiddlewareContext[CallToolRequestParams]
    ) -> ToolResult:
        try:
            return await super()._call_tool(context)
        except NotFoundError:
            envelope = await self.dispatcher.call_tool(
                context.message.name, context.message.arguments
            )
            return _tool_result(envelope)

    async def _read_resource(
        self, context: MiddlewareContext[ReadResourceRequestParams]
    ) -> list[ReadResourceContents]:
        envelope = await self.dispatcher.read_resource(str(context.message.uri))
        return [
            ReadResourceContents(content=item.text, mime_type=item.mime_type)
            for item in envelope.contents
        ]

    async def _get_prompt(
        self, context: MiddlewareContext[GetPromptRequestParams]
    ) -> GetPromptResult:
        try:
            return await super()._get_prompt(context)
        except NotFoundError:
            envelope = await self.dispatcher.get_prompt(
                context.message.name, context.message.arguments
            )
            return GetPromptResult(
                description=envelope.description,
                messages=_prompt_messages(envelope),
            )


def register_components(
    app: FastMCP, registry: Registry, dispatcher: Dispatcher
) -> None:
    """Add one FastMCP component per registry entry."""
    for tool in registry.tools.values():
        app.add_tool(ToolDefinitionAdapter(tool, dispatcher))
    for resource in registry.resources.values():
        if resource.is_template:
            app.add_template(ResourceTemplateAdapter(resource, dispatcher))
        else:
            app.add_resource(ResourceDefinitionAdapter(resource, dispatcher))
    for prompt in registry.prompts.values():
        app.add_prompt(PromptDefinitionAdapter(prompt, dispatcher))


def build_fastmcp_app(
    settings: ServerSettings,
    *,
    transport: Any | None = None,
) -> tuple[FastMCP, Dispatcher]:
    """Create a FastMCP server instance with every operation registered.

    Args:
        settings: Validated start-up settings.
        transport: Optional httpx transport for the catalog client.
    """
    client = CatalogClient(
        settings.base_url, timeout=settings.request_timeout, transport=transport
    )
    registry = build_registry(settings, client)
    dispatcher = Dispatcher(registry)
    app = ShopFastMCP(
        dispatcher, name=SERVER_NAME, instructions=INSTRUCTIONS, version=__version__
    )
    register_components(app, registry, dispatcher)
    return app, dispatcher
