"""Tests for the handler registry."""

from __future__ import annotations

import pytest

from shop_mcp.errors import ResolutionError
from shop_mcp.prompts import PromptDefinition
from shop_mcp.registry import RegistryBuilder
from shop_mcp.resources import ResourceDefinition
from shop_mcp.tools import InputShape, ToolDefinition


class EchoShape(InputShape):
    text: str


def _tool(name: str = "echo") -> ToolDefinition:
    return ToolDefinition(
        name=name,
        description="Echo the input.",
        parameters_model=EchoShape,
        handler=lambda params: params,
    )


def _resource(uri: str, name: str = "doc") -> ResourceDefinition:
    return ResourceDefinition(name=name, uri=uri, handler=lambda uri, _: uri)


def _prompt(name: str = "greet") -> PromptDefinition:
    return PromptDefinition(
        name=name,
        description="Greet someone.",
        parameters_model=EchoShape,
        handler=lambda params: f"Hello {params['text']}",
    )


class TestRegistryBuilder:
    """Registration phase behavior."""

    def test_register_and_lookup(self) -> None:
        # Arrange
        builder = RegistryBuilder()
        tool = _tool()
        prompt = _prompt()

        # Act
        builder.register_tool(tool)
        builder.register("prompt", prompt)
        builder.register_resource(_resource("docs:///a.md"))
        registry = builder.build()

        # Assert
        assert registry.lookup("tool", "echo") is tool
        assert registry.lookup_prompt("greet") is prompt
        assert registry.available("tool") == ["echo"]
        assert registry.available("resource") == ["docs:///a.md"]

    def test_prevents_duplicate_tool_names(self) -> None:
        """Duplicate registrations fail instead of silently replacing."""
        builder = RegistryBuilder()
        builder.register_tool(_tool())

        with pytest.raises(ValueError):
            builder.register_tool(_tool())

    def test_prevents_duplicate_prompts_and_resources(self) -> None:
        builder = RegistryBuilder()
        builder.register_prompt(_prompt())
        builder.register_resource(_resource("faqs://{q}"))

        with pytest.raises(ValueError):
            builder.register_prompt(_prompt())
        with pytest.raises(ValueError):
            builder.register_resource(_resource("faqs://{q}", name="other"))

    def test_same_name_in_different_namespaces_is_allowed(self) -> None:
        builder = RegistryBuilder()
        builder.register_tool(_tool("welcome"))
        builder.register_prompt(_prompt("welcome"))

        registry = builder.build()

        assert registry.available("tool") == registry.available("prompt")

    def test_rejects_empty_names(self) -> None:
        with pytest.raises(ValueError):
            RegistryBuilder().register_tool(_tool(""))

    def test_rejects_definition_in_wrong_namespace(self) -> None:
        with pytest.raises(TypeError):
            RegistryBuilder().register("resource", _tool())

    def test_builder_is_closed_after_build(self) -> None:
        builder = RegistryBuilder()
        builder.build()

        with pytest.raises(RuntimeError):
            builder.register_tool(_tool())


class TestRegistry:
    """Read-only registry behavior."""

    def test_mappings_are_read_only(self) -> None:
        registry = RegistryBuilder().build()

        with pytest.raises(TypeError):
            registry.tools["echo"] = _tool()  # type: ignore[index]

    def test_unknown_key_raises_resolution_error(self) -> None:
        registry = RegistryBuilder().build()

        with pytest.raises(ResolutionError) as excinfo:
            registry.lookup("tool", "missing")

        assert excinfo.value.details == {"namespace": "tool", "key": "missing"}

    def test_resolves_literal_before_template(self) -> None:
        builder = RegistryBuilder()
        builder.register_resource(_resource("docs:///policy/{doc}", name="any"))
        builder.register_resource(_resource("docs:///policy/shopping.md", name="shop"))
        registry = builder.build()

        resource, variables = registry.resolve_resource("docs:///policy/shopping.md")

        assert resource.name == "shop"
        assert variables == {}
        overlapping = registry.overlapping_templates("docs:///policy/shopping.md")
        assert [template.pattern for template in overlapping] == [
            "docs:///policy/{doc}"
        ]

    def test_templates_probe_in_registration_order(self) -> None:
        builder = RegistryBuilder()
        builder.register_resource(_resource("faqs://{q}", name="first"))
        builder.register_resource(_resource("faqs://{topic}", name="second"))
        registry = builder.build()

        resource, variables = registry.resolve_resource("faqs://cart")

        assert resource.name == "first"
        assert variables == {"q": "cart"}
        assert len(registry.overlapping_templates("faqs://cart")) == 2

    def test_catalog_separates_resources_and_templates(self) -> None:
        builder = RegistryBuilder()
        builder.register_tool(_tool())
        builder.register_resource(_resource("docs:///a.md"))
        builder.register_resource(_resource("faqs://{q}", name="faq"))
        builder.register_prompt(_prompt())

        catalog = builder.build().to_catalog()

        assert catalog["tools"][0]["name"] == "echo"
        assert catalog["resources"] == [{"uri": "docs:///a.md", "name": "doc"}]
        assert catalog["resourceTemplates"] == [
            {"uriTemplate": "faqs://{q}", "name": "faq"}
        ]
        assert catalog["prompts"][0]["arguments"] == [
            {"name": "text", "description": None, "required": True}
        ]
