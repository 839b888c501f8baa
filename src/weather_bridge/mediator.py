"""
Drive one user query through the model, dispatching tool calls to the tool server
until the model answers in plain text.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol, Sequence

from weather_bridge.client import BaseAsyncLLM
from weather_bridge.config import DEFAULT_MAX_TOOL_ROUNDS, MAX_TOKENS
from weather_bridge.errors import ToolLoopExceededError
from weather_bridge.response import ChatResponse
from weather_bridge.types import (
    ChatParams,
    ToolCallRequest,
    ToolCallResult,
    ToolDescriptor,
    Transcript,
    normalize_tool_content,
)

__all__ = ["ToolInvoker", "ChatMediator"]


class ToolInvoker(Protocol):
    """What the mediator needs from a tool server connection."""

    @property
    def tools(self) -> Sequence[ToolDescriptor]: ...

    async def call_tool(self, name: str, arguments: Optional[dict[str, Any]] = None) -> Any: ...


class ChatMediator:
    """
    Mediates between the model and the tool server for one query at a time.

    Each ``process_query`` call starts a fresh transcript; nothing is
    remembered across queries.
    """

    def __init__(
        self,
        llm: BaseAsyncLLM,
        tools: ToolInvoker,
        *,
        max_tool_rounds: Optional[int] = DEFAULT_MAX_TOOL_ROUNDS,
        logger: Optional[logging.Logger] = None,
        name: Optional[str] = None,
    ) -> None:
        """
        Args:
            llm: Model client used for every round.
            tools: Connected tool server; its descriptors are sent with every request.
            max_tool_rounds: Rounds of tool dispatch allowed per query before
                ``ToolLoopExceededError``; None or 0 means unbounded.
            logger: Optional logger; defaults to this module's logger.
            name: Optional name used as the log prefix.
        """
        self.llm = llm
        self.tools = tools
        self.max_tool_rounds = max_tool_rounds
        self.logger = logger or logging.getLogger(__name__)
        self.name = name or self.__class__.__name__

    @property
    def params(self) -> ChatParams:
        return ChatParams(
            max_tokens=MAX_TOKENS,
            tools=[tool.to_param() for tool in self.tools.tools],
        )

    async def process_query(self, query: str) -> str:
        """
        Answer ``query``, invoking tools as often as the model asks.

        Returns:
            The text blocks of the final model response, joined by newlines.

        Raises:
            BridgeError: the model API call failed.
            ToolLoopExceededError: the model kept asking for tools past the bound.
        """
        transcript = Transcript.from_query(query)
        response = await self._ask(transcript)

        rounds = 0
        while calls := response.tool_calls:
            if self.max_tool_rounds and rounds >= self.max_tool_rounds:
                raise ToolLoopExceededError(rounds)
            rounds += 1

            transcript.append_assistant(response.blocks)
            # Sequential on purpose: results keep the order of the requests.
            results = [await self.dispatch(call) for call in calls]
            transcript.append_tool_results(results)

            response = await self._ask(transcript)

        return response.text

    async def dispatch(self, call: ToolCallRequest) -> ToolCallResult:
        """Run one tool call; failures come back as an error result, never raised."""
        self._log(f"Calling tool {call.name} with args: {call.arguments}")
        try:
            result = await self.tools.call_tool(call.name, call.arguments)
        except Exception as exc:
            self._log(f"Error calling tool {call.name}: {exc!r}", logging.ERROR)
            return ToolCallResult(id=call.id, content=f"Error: {exc}", is_error=True)

        content = normalize_tool_content(getattr(result, "content", result))
        is_error = bool(getattr(result, "isError", False))
        if is_error:
            self._log(f"Tool {call.name} reported an error: {content}", logging.WARNING)
        return ToolCallResult(id=call.id, content=content, is_error=is_error)

    async def _ask(self, transcript: Transcript) -> ChatResponse:
        response = await self.llm.chat(transcript.to_messages(), params=self.params)
        response.raise_for_error()
        return response

    def _log(self, message: str, level: int = logging.INFO) -> None:
        self.logger.log(level, f"[{self.name}] {message}")
