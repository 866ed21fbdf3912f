"""URI templates and the resource resolver.

A template such as ``faqs://{q}`` is split into its scheme and ``/``-separated
path segments. Matching is segment-wise: literal text must be equal and every
``{variable}`` binds one or more characters of a single segment.

Literal URIs always win over templates. Templates are then probed in
registration order and the first match wins; when two templates can match
the same URI, the one registered later is unreachable for that URI. Use
:meth:`UriResolver.overlapping` to detect such cases.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Generic, TypeVar

from shop_mcp.errors import ResolutionError

_PLACEHOLDER = re.compile(r"\{([^{}]*)\}")
_VARIABLE_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

T = TypeVar("T")


def split_uri(uri: str) -> tuple[str, list[str]]:
    """Split a URI into its scheme and path segments."""
    scheme, separator, rest = uri.partition("://")
    if not separator:
        return "", uri.split("/")
    return scheme, rest.split("/")


def _compile_segment(segment: str, seen: list[str]) -> re.Pattern[str]:
    parts: list[str] = []
    position = 0
    for match in _PLACEHOLDER.finditer(segment):
        literal = segment[position : match.start()]
        if "{" in literal or "}" in literal:
            raise ValueError(f"Unbalanced braces in template segment '{segment}'")
        name = match.group(1)
        if not _VARIABLE_NAME.fullmatch(name):
            raise ValueError(f"Invalid template variable name '{name}'")
        if name in seen:
            raise ValueError(f"Duplicate template variable '{name}'")
        seen.append(name)
        parts.append(re.escape(literal))
        parts.append(f"(?P<{name}>[^/]+?)")
        position = match.end()
    tail = segment[position:]
    if "{" in tail or "}" in tail:
        raise ValueError(f"Unbalanced braces in template segment '{segment}'")
    parts.append(re.escape(tail))
    return re.compile("".join(parts))


class UriTemplate:
    """Parameterized resource URI."""

    def __init__(self, pattern: str) -> None:
        if not pattern:
            raise ValueError("URI template must not be empty")
        self.pattern = pattern
        self.scheme, segments = split_uri(pattern)
        if "{" in self.scheme or "}" in self.scheme:
            raise ValueError(f"Variables are not allowed in the scheme: '{pattern}'")
        names: list[str] = []
        self._segments = [_compile_segment(segment, names) for segment in segments]
        self.variables: tuple[str, ...] = tuple(names)

    @property
    def is_literal(self) -> bool:
        """Whether the template has no variables."""
        return not self.variables

    def match(self, uri: str) -> dict[str, str] | None:
        """Match a concrete URI, returning bound variables or ``None``."""
        if self.is_literal:
            return {} if uri == self.pattern else None
        scheme, segments = split_uri(uri)
        if scheme != self.scheme or len(segments) != len(self._segments):
            return None
        bound: dict[str, str] = {}
        for compiled, segment in zip(self._segments, segments):
            found = compiled.fullmatch(segment)
            if found is None:
                return None
            bound.update(found.groupdict())
        return bound

    def __repr__(self) -> str:
        return f"UriTemplate({self.pattern!r})"


class UriResolver(Generic[T]):
    """Resolve concrete URIs against literal keys and templates."""

    def __init__(
        self,
        literals: dict[str, T],
        templates: Iterable[tuple[UriTemplate, T]],
    ) -> None:
        self._literals = dict(literals)
        self._templates = list(templates)

    def resolve(self, uri: str) -> tuple[T, dict[str, str]]:
        """Find the entry for ``uri`` and the variables bound by its template.

        Raises:
            ResolutionError: If neither a literal nor a template matches.
        """
        if uri in self._literals:
            return self._literals[uri], {}
        for template, entry in self._templates:
            bound = template.match(uri)
            if bound is not None:
                return entry, bound
        raise ResolutionError(f"Resource '{uri}' not found", {"uri": uri})

    def overlapping(self, uri: str) -> list[UriTemplate]:
        """Return every template that matches ``uri``, in probe order."""
        return [
            template
            for template, _ in self._templates
            if template.match(uri) is not None
        ]
