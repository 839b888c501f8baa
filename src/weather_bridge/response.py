from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from weather_bridge.errors import BridgeError
from weather_bridge.types import ContentBlock, TextBlock, ToolCallRequest, ToolUseBlock


@dataclass
class ChatResponse:
    """Unified model response: ordered content blocks plus the raw SDK object."""

    blocks: list[ContentBlock] = field(default_factory=list)
    raw: Any = None
    error: Optional[str] = None
    original_exc: Optional[BaseException] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def tool_calls(self) -> list[ToolCallRequest]:
        return [b.to_request() for b in self.blocks if isinstance(b, ToolUseBlock)]

    @property
    def text(self) -> str:
        return "\n".join(b.text for b in self.blocks if isinstance(b, TextBlock))

    def raise_for_error(self) -> None:
        if self.is_error:
            raise BridgeError(self.error, self.original_exc)
