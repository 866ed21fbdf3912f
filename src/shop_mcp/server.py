"""Dispatcher routing invocations through the registry.

One invocation runs at a time. Each passes through
``IDLE -> VALIDATING -> EXECUTING -> RESPONDING`` and ends back in ``IDLE``;
failed validation or resolution skips ``EXECUTING``. Whatever happens inside a
handler, the caller receives an envelope.
"""

from __future__ import annotations

import enum
import inspect
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union

import anyio

from shop_mcp.envelope import PromptEnvelope, ResourceEnvelope, ToolEnvelope
from shop_mcp.errors import MCPError
from shop_mcp.registry import Registry

logger = logging.getLogger(__name__)


class DispatchState(enum.Enum):
    """Lifecycle of a single invocation."""

    IDLE = "idle"
    VALIDATING = "validating"
    EXECUTING = "executing"
    RESPONDING = "responding"


@dataclass(frozen=True)
class ToolInvocation:
    """Request to run a tool with untyped parameters."""

    name: str
    params: Mapping[str, Any] | None = field(default=None)


@dataclass(frozen=True)
class ResourceInvocation:
    """Request to read the resource addressed by ``uri``."""

    uri: str


@dataclass(frozen=True)
class PromptInvocation:
    """Request to render a prompt with untyped arguments."""

    name: str
    params: Mapping[str, Any] | None = field(default=None)


Invocation = Union[ToolInvocation, ResourceInvocation, PromptInvocation]
Envelope = Union[ToolEnvelope, ResourceEnvelope, PromptEnvelope]


def _internal_error(exc: Exception) -> MCPError:
    return MCPError("InternalError", str(exc) or type(exc).__name__)


async def _call(handler: Any, *args: Any) -> Any:
    result = handler(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


class Dispatcher:
    """Top-level entry point turning invocations into envelopes.

    Attributes:
        registry: Immutable registry shared with other dispatchers.
        state: Current :class:`DispatchState`.
        trace: States visited by the most recent invocation.
    """

    def __init__(self, registry: Registry) -> None:
        self.registry = registry
        self.state = DispatchState.IDLE
        self.trace: list[DispatchState] = []
        self._lock = anyio.Lock()

    def _enter(self, state: DispatchState) -> None:
        self.state = state
        self.trace.append(state)

    def _begin(self, kind: str, key: str) -> None:
        logger.debug("Dispatching %s '%s'", kind, key)
        self.trace = [DispatchState.IDLE]
        self._enter(DispatchState.VALIDATING)

    def _finish(self, kind: str, key: str, error: MCPError | None) -> None:
        self._enter(DispatchState.RESPONDING)
        if error is not None:
            logger.warning(
                "%s '%s' failed: [%s] %s", kind, key, error.error_type, error
            )
        self.state = DispatchState.IDLE

    async def call_tool(
        self, name: str, params: Mapping[str, Any] | None = None
    ) -> ToolEnvelope:
        """Validate parameters and run the named tool."""
        async with self._lock:
            self._begin("tool", name)
            error: MCPError | None = None
            try:
                tool = self.registry.lookup_tool(name)
                validated = tool.validate(params)
                self._enter(DispatchState.EXECUTING)
                envelope = ToolEnvelope.success(await _call(tool.handler, validated))
            except MCPError as exc:
                error = exc
                envelope = ToolEnvelope.failure(exc)
            except Exception as exc:
                logger.exception("Unexpected failure in tool '%s'", name)
                error = _internal_error(exc)
                envelope = ToolEnvelope.failure(error)
            self._finish("tool", name, error)
            return envelope

    async def read_resource(self, uri: str) -> ResourceEnvelope:
        """Resolve ``uri`` and read the matching resource."""
        async with self._lock:
            self._begin("resource", uri)
            error: MCPError | None = None
            try:
                resource, variables = self.registry.resolve_resource(uri)
                self._enter(DispatchState.EXECUTING)
                text = await _call(resource.handler, uri, variables)
                envelope = ResourceEnvelope.success(uri, text, resource.mime_type)
            except MCPError as exc:
                error = exc
                envelope = ResourceEnvelope.failure(uri, exc)
            except Exception as exc:
                logger.exception("Unexpected failure reading resource '%s'", uri)
                error = _internal_error(exc)
                envelope = ResourceEnvelope.failure(uri, error)
            self._finish("resource", uri, error)
            return envelope

    async def get_prompt(
        self, name: str, params: Mapping[str, Any] | None = None
    ) -> PromptEnvelope:
        """Validate arguments and render the named prompt."""
        async with self._lock:
            self._begin("prompt", name)
            error: MCPError | None = None
            try:
                prompt = self.registry.lookup_prompt(name)
                validated = prompt.validate(params)
                self._enter(DispatchState.EXECUTING)
                text = await _call(prompt.handler, validated)
                envelope = PromptEnvelope.success(text, prompt.description)
            except MCPError as exc:
                error = exc
                envelope = PromptEnvelope.failure(exc)
            except Exception as exc:
                logger.exception("Unexpected failure in prompt '%s'", name)
                error = _internal_error(exc)
                envelope = PromptEnvelope.failure(error)
            self._finish("prompt", name, error)
            return envelope

    async def dispatch(self, invocation: Invocation) -> Envelope:
        """Route an invocation to the matching namespace."""
        if isinstance(invocation, ToolInvocation):
            return await self.call_tool(invocation.name, invocation.params)
        if isinstance(invocation, ResourceInvocation):
            return await self.read_resource(invocation.uri)
        if isinstance(invocation, PromptInvocation):
            return await self.get_prompt(invocation.name, invocation.params)
        raise TypeError(f"Unsupported invocation {type(invocation).__name__}")
