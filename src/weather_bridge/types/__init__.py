from .chat import (
    ChatMessage,
    ChatParams,
    ContentBlock,
    OpaqueBlock,
    TextBlock,
    ToolResultBlock,
    ToolUseBlock,
    Transcript,
    Turn,
)
from .tool import ToolCallRequest, ToolCallResult, ToolDescriptor, normalize_tool_content

__all__ = [
    "ChatMessage",
    "ChatParams",
    "ContentBlock",
    "OpaqueBlock",
    "TextBlock",
    "ToolResultBlock",
    "ToolUseBlock",
    "Transcript",
    "Turn",
    "ToolCallRequest",
    "ToolCallResult",
    "ToolDescriptor",
    "normalize_tool_content",
]
