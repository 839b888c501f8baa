"""Shared test fixtures."""

from __future__ import annotations

import copy
from typing import Any, Callable, Optional, Sequence, Union

import httpx
import pytest
from anthropic.types import Message, TextBlock, ToolUseBlock, Usage
from mcp.types import CallToolResult, TextContent

from weather_bridge.adapters import AnthropicRequestAdapter
from weather_bridge.client import BaseAsyncLLM
from weather_bridge.server import tools
from weather_bridge.server.nws import NWSClient
from weather_bridge.types import ChatMessage, ChatParams, ToolDescriptor


# ---------------------------------------------------------------------------
# Model side
# ---------------------------------------------------------------------------

def text(value: str) -> TextBlock:
    return TextBlock(type="text", text=value)


def tool_use(call_id: str, name: str, **arguments: Any) -> ToolUseBlock:
    return ToolUseBlock(type="tool_use", id=call_id, name=name, input=arguments)


def make_message(*blocks: Union[TextBlock, ToolUseBlock]) -> Message:
    """Build a realistic Anthropic Messages API response."""
    has_tools = any(b.type == "tool_use" for b in blocks)
    return Message(
        id="msg_test",
        type="message",
        role="assistant",
        model="claude-test",
        content=list(blocks),
        stop_reason="tool_use" if has_tools else "end_turn",
        stop_sequence=None,
        usage=Usage(input_tokens=10, output_tokens=5),
    )


class ScriptedLLM(BaseAsyncLLM):
    """Replays canned Anthropic responses (or raises canned errors) in order."""

    def __init__(self, responses: Sequence[Union[Message, Exception]]) -> None:
        super().__init__(model="claude-test")
        self._responses = list(responses)
        self._adapter = AnthropicRequestAdapter()
        self.requests: list[tuple[list[ChatMessage], ChatParams]] = []

    @property
    def adapter(self) -> AnthropicRequestAdapter:
        return self._adapter

    async def _chat_impl(self, messages, params):
        self.requests.append((copy.deepcopy(list(messages)), params))
        if not self._responses:
            raise AssertionError("ScriptedLLM ran out of responses")
        nxt = self._responses.pop(0)
        if isinstance(nxt, Exception):
            raise nxt
        return nxt


# ---------------------------------------------------------------------------
# Tool server side
# ---------------------------------------------------------------------------

def tool_result(value: str, *, is_error: bool = False) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=value)], isError=is_error)


Behaviour = Union[CallToolResult, Exception, Callable[[dict[str, Any]], Any]]


class StubToolServer:
    """Stands in for ToolServerConnection; records calls in order."""

    def __init__(
        self,
        behaviours: Optional[dict[str, Behaviour]] = None,
        descriptors: Sequence[ToolDescriptor] = (),
    ) -> None:
        self.behaviours = behaviours or {}
        self._tools = tuple(descriptors) or tuple(
            ToolDescriptor(name=name, description=f"{name} tool", input_schema={"type": "object"})
            for name in self.behaviours
        )
        self.calls: list[tuple[str, Optional[dict[str, Any]]]] = []

    @property
    def tools(self) -> tuple[ToolDescriptor, ...]:
        return self._tools

    async def call_tool(self, name: str, arguments: Optional[dict[str, Any]] = None) -> Any:
        self.calls.append((name, arguments))
        behaviour = self.behaviours.get(name)
        if behaviour is None:
            raise RuntimeError(f"Unknown tool: {name}")
        if isinstance(behaviour, Exception):
            raise behaviour
        if callable(behaviour):
            return behaviour(arguments or {})
        return behaviour


# ---------------------------------------------------------------------------
# NWS side
# ---------------------------------------------------------------------------

class FakeNWS:
    """Routes NWS GETs by path (plus query) to canned JSON or status codes."""

    def __init__(self, routes: dict[str, Union[dict, int]]) -> None:
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = request.url.path
        if request.url.query:
            key += "?" + request.url.query.decode()
        route = self.routes.get(key, 404)
        if isinstance(route, int):
            return httpx.Response(route, json={"title": "Not Found"})
        return httpx.Response(200, json=route)

    @property
    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


@pytest.fixture
def fake_nws(monkeypatch):
    """Install a FakeNWS behind the tool module's NWS client; returns a factory."""

    def install(routes: dict[str, Union[dict, int]]) -> FakeNWS:
        fake = FakeNWS(routes)
        monkeypatch.setattr(tools, "nws", NWSClient(transport=httpx.MockTransport(fake)))
        return fake

    return install
