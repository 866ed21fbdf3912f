"""Handler registry for tools, resources and prompts.

Registration happens once, on a :class:`RegistryBuilder`, during start-up.
:meth:`RegistryBuilder.build` freezes the result into a read-only
:class:`Registry` that dispatchers share by reference.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Literal, Union

from shop_mcp.errors import ResolutionError
from shop_mcp.prompts import PromptDefinition
from shop_mcp.resources import ResourceDefinition
from shop_mcp.templates import UriResolver, UriTemplate
from shop_mcp.tools import ToolDefinition

Namespace = Literal["tool", "resource", "prompt"]
Definition = Union[ToolDefinition, ResourceDefinition, PromptDefinition]

NAMESPACES: tuple[Namespace, ...] = ("tool", "resource", "prompt")


class RegistryBuilder:
    """Mutable registration phase producing an immutable :class:`Registry`."""

    def __init__(self) -> None:
        """Initialize empty namespaces."""
        self._tools: dict[str, ToolDefinition] = {}
        self._resources: dict[str, ResourceDefinition] = {}
        self._prompts: dict[str, PromptDefinition] = {}
        self._built = False

    def _check_open(self) -> None:
        if self._built:
            raise RuntimeError("Registry has already been built")

    def register_tool(self, tool: ToolDefinition) -> None:
        """Register a tool.

        Raises:
            ValueError: If a tool with the same name is already registered.
        """
        self._check_open()
        if not tool.name:
            raise ValueError("Tool name must not be empty")
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")
        self._tools[tool.name] = tool

    def register_tools(self, *tools: ToolDefinition) -> None:
        """Register multiple tools at once."""
        for tool in tools:
            self.register_tool(tool)

    def register_resource(self, resource: ResourceDefinition) -> None:
        """Register a literal or templated resource.

        Raises:
            ValueError: If the same URI or URI template is already registered.
        """
        self._check_open()
        if resource.uri in self._resources:
            raise ValueError(f"Resource '{resource.uri}' is already registered")
        self._resources[resource.uri] = resource

    def register_prompt(self, prompt: PromptDefinition) -> None:
        """Register a prompt.

        Raises:
            ValueError: If a prompt with the same name is already registered.
        """
        self._check_open()
        if not prompt.name:
            raise ValueError("Prompt name must not be empty")
        if prompt.name in self._prompts:
            raise ValueError(f"Prompt '{prompt.name}' is already registered")
        self._prompts[prompt.name] = prompt

    def register(self, namespace: Namespace, definition: Definition) -> None:
        """Register ``definition`` in ``namespace``."""
        if namespace == "tool" and isinstance(definition, ToolDefinition):
            self.register_tool(definition)
        elif namespace == "resource" and isinstance(definition, ResourceDefinition):
            self.register_resource(definition)
        elif namespace == "prompt" and isinstance(definition, PromptDefinition):
            self.register_prompt(definition)
        else:
            raise TypeError(
                f"Cannot register {type(definition).__name__} as a {namespace}"
            )

    def build(self) -> Registry:
        """Freeze the registrations."""
        self._check_open()
        self._built = True
        return Registry(self._tools, self._resources, self._prompts)


class Registry:
    """Read-only mapping of names and URIs to definitions."""

    def __init__(
        self,
        tools: Mapping[str, ToolDefinition],
        resources: Mapping[str, ResourceDefinition],
        prompts: Mapping[str, PromptDefinition],
    ) -> None:
        self.tools: Mapping[str, ToolDefinition] = MappingProxyType(dict(tools))
        self.resources: Mapping[str, ResourceDefinition] = MappingProxyType(
            dict(resources)
        )
        self.prompts: Mapping[str, PromptDefinition] = MappingProxyType(dict(prompts))
        self._resolver: UriResolver[ResourceDefinition] = UriResolver(
            {uri: res for uri, res in self.resources.items() if not res.is_template},
            [(res.template, res) for res in self.resources.values() if res.is_template],
        )

    def _namespace(self, namespace: Namespace) -> Mapping[str, Any]:
        if namespace == "tool":
            return self.tools
        if namespace == "resource":
            return self.resources
        if namespace == "prompt":
            return self.prompts
        raise ValueError(f"Unknown namespace '{namespace}'")

    def lookup(self, namespace: Namespace, key: str) -> Definition:
        """Return the definition registered under ``key``.

        Resource keys are the registered URI or URI template itself; use
        :meth:`resolve_resource` for concrete URIs.

        Raises:
            ResolutionError: If nothing is registered under ``key``.
        """
        entries = self._namespace(namespace)
        if key not in entries:
            raise ResolutionError(
                f"{namespace.capitalize()} '{key}' is not registered",
                {"namespace": namespace, "key": key},
            )
        return entries[key]

    def lookup_tool(self, name: str) -> ToolDefinition:
        return self.lookup("tool", name)  # type: ignore[return-value]

    def lookup_prompt(self, name: str) -> PromptDefinition:
        return self.lookup("prompt", name)  # type: ignore[return-value]

    def resolve_resource(self, uri: str) -> tuple[ResourceDefinition, dict[str, str]]:
        """Resolve a concrete URI to its resource and bound variables."""
        return self._resolver.resolve(uri)

    def overlapping_templates(self, uri: str) -> list[UriTemplate]:
        """Templates that would all match ``uri``; more than one is ambiguous."""
        return self._resolver.overlapping(uri)

    def available(self, namespace: Namespace) -> list[str]:
        """List registered names or URIs in ``namespace``."""
        return sorted(self._namespace(namespace))

    def to_catalog(self) -> dict[str, list[dict[str, Any]]]:
        """Produce a catalog for discovery."""
        return {
            "tools": [tool.metadata() for tool in self.tools.values()],
            "resources": [
                res.metadata() for res in self.resources.values() if not res.is_template
            ],
            "resourceTemplates": [
                res.metadata() for res in self.resources.values() if res.is_template
            ],
            "prompts": [prompt.metadata() for prompt in self.prompts.values()],
        }
