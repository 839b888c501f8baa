"""
Owned connection to a tool server process over MCP stdio.
"""

from __future__ import annotations

import logging
import shutil
import sys
from contextlib import AsyncExitStack
from pathlib import PurePath
from typing import Any, Optional, Self

from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client
from mcp.types import CallToolResult

from weather_bridge.errors import ToolServerConnectionError, UnsupportedServerTargetError
from weather_bridge.types import ToolDescriptor

__all__ = ["ToolServerConnection", "server_parameters", "python_command"]


def python_command() -> str:
    """Interpreter used to launch Python tool servers."""
    if sys.executable:
        return sys.executable
    return "python" if sys.platform == "win32" else "python3"


def node_command() -> str:
    return shutil.which("node") or "node"


# extension -> command factory
_LAUNCH_STRATEGIES = {
    ".py": python_command,
    ".js": node_command,
}


def server_parameters(locator: str) -> StdioServerParameters:
    """
    Pick a launch command for a tool server script by its extension.

    Raises:
        UnsupportedServerTargetError: if the extension is not ``.py`` or ``.js``.
    """
    suffix = PurePath(locator).suffix.lower()
    strategy = _LAUNCH_STRATEGIES.get(suffix)
    if strategy is None:
        raise UnsupportedServerTargetError(
            f"Server script must be a .js or .py file, got {locator!r}"
        )
    return StdioServerParameters(command=strategy(), args=[locator])


class ToolServerConnection:
    """
    A single tool server session: spawn, handshake, discover tools, invoke, close.

    Use as an async context manager so the server process is released on
    both normal and error exit.
    """

    def __init__(
        self,
        *,
        logger: Optional[logging.Logger] = None,
        name: Optional[str] = None,
    ) -> None:
        self.logger = logger or logging.getLogger(__name__)
        self.name = name or self.__class__.__name__
        self._exit_stack: Optional[AsyncExitStack] = None
        self._session: Optional[ClientSession] = None
        self._tools: tuple[ToolDescriptor, ...] = ()

    @property
    def tools(self) -> tuple[ToolDescriptor, ...]:
        return self._tools

    @property
    def connected(self) -> bool:
        return self._session is not None

    async def connect(self, locator: str) -> None:
        """
        Launch the server at ``locator`` and fetch its tool list.

        Raises:
            UnsupportedServerTargetError: unknown script type; nothing is spawned.
            ToolServerConnectionError: spawn, handshake or discovery failed.
        """
        if self._session is not None:
            raise ToolServerConnectionError("Already connected to a tool server")

        params = server_parameters(locator)
        stack = AsyncExitStack()
        try:
            read, write = await stack.enter_async_context(stdio_client(params))
            session = await stack.enter_async_context(ClientSession(read, write))
            await session.initialize()
            listing = await session.list_tools()
        except Exception as exc:
            self._log(f"Failed to connect to MCP server: {exc}", logging.ERROR)
            await stack.aclose()
            raise ToolServerConnectionError(
                f"Failed to connect to MCP server {locator!r}: {exc}", exc
            ) from exc

        self._exit_stack = stack
        self._session = session
        self._tools = tuple(ToolDescriptor.from_mcp(tool) for tool in listing.tools)
        self._log(f"Connected to server with tools: {[t.name for t in self._tools]}")

    async def call_tool(
        self, name: str, arguments: Optional[dict[str, Any]] = None
    ) -> CallToolResult:
        if self._session is None:
            raise ToolServerConnectionError("Not connected to a tool server")
        return await self._session.call_tool(name, arguments)

    def _log(self, message: str, level: int = logging.INFO) -> None:
        self.logger.log(level, f"[{self.name}] {message}")

    # --- lifecycle ---------------------------------------------------------
    async def aclose(self) -> None:
        """Terminate the session and the server process. Safe to call multiple times."""
        stack, self._exit_stack = self._exit_stack, None
        self._session = None
        self._tools = ()
        if stack is not None:
            await stack.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
