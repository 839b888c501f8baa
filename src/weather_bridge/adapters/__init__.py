"""Pure transformation adapters between transcripts and provider formats."""

from .anthropic import AnthropicRequestAdapter

__all__ = ["AnthropicRequestAdapter"]
