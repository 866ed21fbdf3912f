"""Resource definitions keyed by a literal URI or a URI template."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Union

from shop_mcp.templates import UriTemplate

ResourceHandler = Callable[[str, dict[str, str]], Union[str, Awaitable[str]]]


@dataclass(frozen=True)
class ResourceDefinition:
    """Readable document registered under ``uri``.

    Attributes:
        name: Human-readable resource name.
        uri: Literal URI or URI template such as ``faqs://{q}``.
        handler: Callable receiving the requested URI and the bound template
            variables, returning the document text.
        description: Optional description for discovery.
        mime_type: MIME type reported with successful reads.
    """

    name: str
    uri: str
    handler: ResourceHandler
    description: str = ""
    mime_type: str | None = None
    template: UriTemplate = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "template", UriTemplate(self.uri))

    @property
    def is_template(self) -> bool:
        return not self.template.is_literal

    def metadata(self) -> dict[str, Any]:
        """Return a discovery-friendly description of the resource."""
        key = "uriTemplate" if self.is_template else "uri"
        payload: dict[str, Any] = {key: self.uri, "name": self.name}
        if self.description:
            payload["description"] = self.description
        if self.mime_type:
            payload["mimeType"] = self.mime_type
        return payload
