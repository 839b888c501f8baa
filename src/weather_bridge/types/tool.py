"""
Provider-neutral dataclasses for tool use between the model and the tool server.

They are intentionally minimal: everything provider-specific lives in adapters.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from mcp.types import TextContent

__all__ = [
    "ToolDescriptor",
    "ToolCallRequest",
    "ToolCallResult",
    "normalize_tool_content",
]


@dataclass(frozen=True, slots=True)
class ToolDescriptor:
    """A tool advertised by the tool server, as shown to the model."""
    name: str
    description: str
    input_schema: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mcp(cls, tool: Any) -> "ToolDescriptor":
        """Build from an ``mcp.types.Tool`` entry of a ``tools/list`` reply."""
        return cls(
            name=tool.name,
            description=tool.description or "",
            input_schema=dict(tool.inputSchema or {}),
        )

    def to_param(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema,
        }


@dataclass(slots=True)
class ToolCallRequest:
    """A model-agnostic request emitted by the LLM to call a server tool."""
    id: str
    name: str
    arguments: dict[str, Any]


@dataclass(slots=True)
class ToolCallResult:
    """Payload to send back to the LLM after the tool finished running."""
    id: str                     # must match the request id
    content: str
    is_error: bool = False


def normalize_tool_content(content: Any) -> str:
    """
    Collapse the ``content`` field of a tool server reply into one string.

    The field is either a list of content items or, from a misbehaving
    server, a scalar. List items resolve as follows:

    - ``TextContent`` (or a mapping tagged ``{"type": "text"}``) yields its text.
    - Anything else (images, embedded resources, unknown objects) yields ``str(item)``.

    Items are joined with newlines. A scalar is rendered with ``str()``.
    """
    if not isinstance(content, (list, tuple)):
        return str(content)

    parts: list[str] = []
    for item in content:
        if isinstance(item, TextContent):
            parts.append(item.text)
        elif isinstance(item, dict) and item.get("type") == "text" and "text" in item:
            parts.append(str(item["text"]))
        else:
            parts.append(str(item))
    return "\n".join(parts)
