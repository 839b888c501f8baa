"""Anthropic adapter for pure request/response transformations."""

from __future__ import annotations

from typing import Any, Sequence

from anthropic.types import Message

from weather_bridge.response import ChatResponse
from weather_bridge.types import (
    ChatMessage,
    ChatParams,
    ContentBlock,
    OpaqueBlock,
    TextBlock,
    ToolUseBlock,
)


class AnthropicRequestAdapter:
    """Adapter for converting between transcript messages and Anthropic format."""

    def to_provider(
        self, messages: Sequence[ChatMessage], params: ChatParams
    ) -> dict[str, Any]:
        """Convert transcript messages and params to Anthropic request kwargs."""
        anthropic_messages: list[dict[str, Any]] = []
        for msg in messages:
            content = msg.get("content")
            if content is None:
                content = ""
            elif not isinstance(content, (str, list)):
                content = str(content)
            anthropic_messages.append({"role": msg["role"], "content": content})

        base_params = params.as_dict(exclude_none=True)
        # Omit an empty tool list rather than sending tools=[]
        if not base_params.get("tools"):
            base_params.pop("tools", None)

        return {"messages": anthropic_messages, **base_params}

    def from_provider(self, raw: Message) -> ChatResponse:
        """Convert an Anthropic response to a unified ChatResponse."""
        blocks = [self.block_from_provider(block) for block in raw.content or []]
        return ChatResponse(blocks=blocks, raw=raw)

    def block_from_provider(self, block: Any) -> ContentBlock:
        """Map one SDK content block onto the content block variant."""
        match block.type:
            case "text":
                return TextBlock(text=block.text)
            case "tool_use":
                arguments = dict(block.input) if hasattr(block.input, "items") else {}
                return ToolUseBlock(id=block.id, name=block.name, input=arguments)
            case _:
                if hasattr(block, "model_dump"):
                    payload = block.model_dump(exclude_none=True)
                else:
                    payload = dict(block)
                return OpaqueBlock(payload=payload)
