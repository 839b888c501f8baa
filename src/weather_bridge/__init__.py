"""
Weather Bridge - chat with Claude through the tools of an MCP weather server.
"""

from .client import BaseAsyncLLM, AnthropicLLM
from .config import Settings, get_api_key
from .connection import ToolServerConnection
from .errors import (
    BridgeError,
    ConfigurationError,
    ToolLoopExceededError,
    ToolServerConnectionError,
    UnsupportedServerTargetError,
)
from .mediator import ChatMediator
from .response import ChatResponse
from .types import ToolCallRequest, ToolCallResult, ToolDescriptor, Transcript

__version__ = "0.1.0"

__all__ = [
    "BaseAsyncLLM",
    "AnthropicLLM",
    "Settings",
    "get_api_key",
    "ToolServerConnection",
    "BridgeError",
    "ConfigurationError",
    "ToolLoopExceededError",
    "ToolServerConnectionError",
    "UnsupportedServerTargetError",
    "ChatMediator",
    "ChatResponse",
    "ToolCallRequest",
    "ToolCallResult",
    "ToolDescriptor",
    "Transcript",
]
