"""
Translate noisy provider and transport failures into a unified `BridgeError`,
while preserving the original exception for full tracebacks.
"""

from __future__ import annotations

import logging
from typing import Final, Optional, Type

import anthropic

__all__: tuple[str, ...] = (
    "BridgeError",
    "ConfigurationError",
    "UnsupportedServerTargetError",
    "ToolServerConnectionError",
    "ToolLoopExceededError",
    "classify_error",
)


class BridgeError(RuntimeError):
    """Public bridge-level exception.

    Attributes:
        original_exc: The underlying exception, if any.
    """

    original_exc: Optional[BaseException]

    def __init__(self, message: str, original_exc: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.original_exc = original_exc
        if original_exc is not None:
            self.__cause__ = original_exc


class ConfigurationError(BridgeError):
    """Raised when required configuration is missing or malformed."""


class UnsupportedServerTargetError(BridgeError, ValueError):
    """Raised when a tool server locator has no known launch strategy."""


class ToolServerConnectionError(BridgeError):
    """Raised when the tool server cannot be spawned, handshaken or reached."""


class ToolLoopExceededError(BridgeError):
    """Raised when the model keeps requesting tools past the configured bound."""

    def __init__(self, rounds: int) -> None:
        super().__init__(f"Model still requested tools after {rounds} round(s)")
        self.rounds = rounds


RATE_LIMIT_ERRORS: Final[tuple[Type[Exception], ...]] = (anthropic.RateLimitError,)

CONN_ERRORS: Final[tuple[Type[Exception], ...]] = (
    anthropic.APIConnectionError,
    TimeoutError,
    ConnectionError,
)

API_ERRORS: Final[tuple[Type[Exception], ...]] = (anthropic.APIError,)


def classify_error(
    exc: Exception,
    logger: Optional[logging.Logger] = None,
) -> BridgeError:
    """Wrap an SDK exception in BridgeError with a friendly, concise message."""
    log = logger or logging.getLogger("weather_bridge.errors")

    # Order matters: the SDK's rate-limit and connection errors are APIErrors too.
    if isinstance(exc, RATE_LIMIT_ERRORS):
        msg = "Rate-limit exceeded, please retry later"
    elif isinstance(exc, CONN_ERRORS):
        msg = "Connection problem, unable to reach the model provider"
    elif isinstance(exc, API_ERRORS):
        status = getattr(exc, "status_code", "unknown")
        msg = f"Provider reported an error ({status})"
    else:
        msg = exc.__class__.__name__

    log.warning("Wrapping provider exception: %s", msg, extra={"exc": exc})
    return BridgeError(f"{msg}: {exc}", exc)
