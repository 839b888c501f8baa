"""
Async LLM clients with a unified chat() method.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional, Protocol, Self, Sequence

from anthropic import AsyncAnthropic
from anthropic.types import Message

from weather_bridge.adapters import AnthropicRequestAdapter
from weather_bridge.errors import classify_error
from weather_bridge.response import ChatResponse
from weather_bridge.types import ChatMessage, ChatParams


class RequestAdapter(Protocol):
    """Protocol for adapting between transcript messages and a provider format."""

    def to_provider(
        self, messages: Sequence[ChatMessage], params: ChatParams
    ) -> dict[str, Any]:
        """Convert messages and params to provider-specific request kwargs."""
        ...

    def from_provider(self, raw: Any) -> ChatResponse:
        """Convert provider response to unified ChatResponse."""
        ...


class BaseAsyncLLM(ABC):
    """
    Abstract base class for async-first LLM wrappers.
    """

    def __init__(
        self,
        model: str,
        *,
        logger: Optional[logging.Logger] = None,
        name: Optional[str] = None,
    ) -> None:
        self.model = model
        self.logger = logger or logging.getLogger(__name__)
        self.name = name or self.__class__.__name__

    @abstractmethod
    async def _chat_impl(
        self,
        messages: Sequence[ChatMessage],
        params: ChatParams,
    ) -> Any:
        """
        Core asynchronous implementation for sending chat messages to the LLM.
        This method must be implemented by subclasses.

        Args:
            messages: A sequence of chat messages forming the conversation history.
            params: Parameters for the chat completion request.

        Returns:
            A raw provider response.
        """
        ...

    @property
    @abstractmethod
    def adapter(self) -> RequestAdapter:
        """Request adapter for this provider."""
        ...

    async def chat(
        self,
        messages: Sequence[ChatMessage],
        *,
        params: ChatParams,
    ) -> ChatResponse:
        """
        Send chat request and return a single response.

        Provider failures never raise here; they come back as an error
        ChatResponse (see ``ChatResponse.raise_for_error``).
        """
        try:
            raw = await self._chat_impl(messages, params)
            return self.adapter.from_provider(raw)
        except Exception as exc:
            return self._wrap_error(exc)

    def _wrap_error(self, exc: Exception) -> ChatResponse:
        """Wrap exception into an error response."""
        err = classify_error(exc, self.logger)
        return ChatResponse(error=str(err), original_exc=exc)

    def _log(self, message: str, level: int = logging.INFO) -> None:
        self.logger.log(level, f"[{self.name}] {message}")

    # --- lifecycle ---------------------------------------------------------
    async def aclose(self) -> None:
        """
        Close underlying async HTTP clients to avoid cleanup after the loop closes.
        Safe to call multiple times.
        """
        client = getattr(self, "_client", None)
        close = getattr(client, "close", None)
        if close:
            await close()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


class AnthropicLLM(BaseAsyncLLM):
    """
    Anthropic LLM implementation (async-only).

    Use ``AnthropicLLM.from_client`` when you already have an ``AsyncAnthropic`` instance.
    Retries are off by default: a failed request is reported once.
    """

    def __init__(
        self,
        model: str,
        *,
        api_key: str,
        max_retries: int = 0,
        logger: Optional[logging.Logger] = None,
        name: Optional[str] = None,
    ) -> None:
        super().__init__(model=model, logger=logger, name=name)
        self._client = AsyncAnthropic(api_key=api_key, max_retries=max_retries)
        self._adapter = AnthropicRequestAdapter()

    @classmethod
    def from_client(
        cls,
        model: str,
        client: AsyncAnthropic,
        *,
        logger: Optional[logging.Logger] = None,
        name: Optional[str] = None,
    ) -> Self:
        """
        Wrap an existing ``AsyncAnthropic`` client.
        """
        if not isinstance(client, AsyncAnthropic):
            raise TypeError(
                f"AnthropicLLM.from_client expects AsyncAnthropic; got {type(client).__name__}"
            )

        self = cls.__new__(cls)  # bypass __init__
        BaseAsyncLLM.__init__(self, model=model, logger=logger, name=name)
        self._client = client
        self._adapter = AnthropicRequestAdapter()
        return self

    @property
    def adapter(self) -> RequestAdapter:
        """Request adapter for Anthropic provider."""
        return self._adapter

    async def _chat_impl(
        self,
        messages: Sequence[ChatMessage],
        params: ChatParams,
    ) -> Message:
        """Core implementation for Anthropic chat requests."""
        args = {
            "model": self.model,
            **self._adapter.to_provider(messages, params),
        }

        self._log(
            f"Sending request to Anthropic model {self.model} ({len(args['messages'])} messages)",
            logging.DEBUG,
        )
        return await self._client.messages.create(**args)
