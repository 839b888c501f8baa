"""Environment-backed settings for the chat client."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from weather_bridge.errors import ConfigurationError

API_KEY_ENV = "ANTHROPIC_API_KEY"
MODEL_ENV = "WEATHER_BRIDGE_MODEL"
MAX_TOOL_ROUNDS_ENV = "WEATHER_BRIDGE_MAX_TOOL_ROUNDS"
LOG_LEVEL_ENV = "WEATHER_BRIDGE_LOG_LEVEL"

DEFAULT_MODEL = "claude-3-5-sonnet-20241022"
DEFAULT_MAX_TOOL_ROUNDS = 10
DEFAULT_LOG_LEVEL = "INFO"

# Output-token cap sent with every model request.
MAX_TOKENS = 1000


def get_api_key(env: Optional[Mapping[str, str]] = None) -> str:
    """Return the model API key, loading a ``.env`` file first."""
    if env is None:
        load_dotenv()
        env = os.environ
    key = env.get(API_KEY_ENV)
    if not key:
        raise ConfigurationError(f"{API_KEY_ENV} is not set")
    return key


def parse_max_tool_rounds(value: Optional[str]) -> Optional[int]:
    """Parse a tool-round bound; ``0``, ``none`` or empty mean unbounded."""
    if value is None:
        return DEFAULT_MAX_TOOL_ROUNDS
    value = value.strip().lower()
    if value in ("", "0", "none"):
        return None
    try:
        rounds = int(value)
    except ValueError as exc:
        raise ConfigurationError(
            f"{MAX_TOOL_ROUNDS_ENV} must be an integer, got {value!r}", exc
        ) from exc
    if rounds < 0:
        raise ConfigurationError(f"{MAX_TOOL_ROUNDS_ENV} must not be negative")
    return rounds


def parse_log_level(value: Optional[str]) -> str:
    """Normalise a logging level name; empty or missing gives the default."""
    level = (value or DEFAULT_LOG_LEVEL).strip().upper()
    if level not in logging.getLevelNamesMapping():
        raise ConfigurationError(f"Unknown log level {value!r}")
    return level


@dataclass(frozen=True)
class Settings:
    api_key: str
    model: str = DEFAULT_MODEL
    max_tool_rounds: Optional[int] = DEFAULT_MAX_TOOL_ROUNDS
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def max_tokens(self) -> int:
        return MAX_TOKENS

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from the process environment (after loading ``.env``).

        Args:
            env: Optional mapping used instead of ``os.environ``; no ``.env``
                 file is read when given.

        Raises:
            ConfigurationError: if the API key is missing or a value is malformed.
        """
        if env is None:
            load_dotenv()
            env = os.environ
        return cls(
            api_key=get_api_key(env),
            model=env.get(MODEL_ENV) or DEFAULT_MODEL,
            max_tool_rounds=parse_max_tool_rounds(env.get(MAX_TOOL_ROUNDS_ENV)),
            log_level=parse_log_level(env.get(LOG_LEVEL_ENV)),
        )
