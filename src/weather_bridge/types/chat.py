"""Chat types: request params, content blocks and the per-query transcript."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Literal, Optional, Sequence, Union

from weather_bridge.types.tool import ToolCallRequest, ToolCallResult

# Type alias for chat messages in provider wire shape
ChatMessage = dict[str, Any]

Role = Literal["user", "assistant"]


@dataclass
class ChatParams:
    """Parameters for chat completion requests."""

    max_tokens: int

    # Tool parameters, already in provider shape
    tools: Optional[list[dict[str, Any]]] = None

    def as_dict(self, exclude_none: bool = True) -> dict[str, Any]:
        """
        Convert to dictionary, optionally excluding None values.

        Args:
            exclude_none: If True, exclude fields with None values

        Returns:
            Dictionary representation of the params
        """
        result = asdict(self)
        if exclude_none:
            return {k: v for k, v in result.items() if v is not None}
        return result


# --- content blocks --------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TextBlock:
    text: str
    type: Literal["text"] = "text"

    def to_param(self) -> dict[str, Any]:
        return {"type": "text", "text": self.text}


@dataclass(frozen=True, slots=True)
class ToolUseBlock:
    id: str
    name: str
    input: dict[str, Any] = field(default_factory=dict)
    type: Literal["tool_use"] = "tool_use"

    def to_param(self) -> dict[str, Any]:
        return {"type": "tool_use", "id": self.id, "name": self.name, "input": self.input}

    def to_request(self) -> ToolCallRequest:
        return ToolCallRequest(id=self.id, name=self.name, arguments=dict(self.input))


@dataclass(frozen=True, slots=True)
class ToolResultBlock:
    tool_use_id: str
    content: str
    is_error: bool = False
    type: Literal["tool_result"] = "tool_result"

    @classmethod
    def from_result(cls, result: ToolCallResult) -> "ToolResultBlock":
        return cls(tool_use_id=result.id, content=result.content, is_error=result.is_error)

    def to_param(self) -> dict[str, Any]:
        param: dict[str, Any] = {
            "type": "tool_result",
            "tool_use_id": self.tool_use_id,
            "content": self.content,
        }
        if self.is_error:
            param["is_error"] = True
        return param


@dataclass(frozen=True, slots=True)
class OpaqueBlock:
    """A provider block we do not interpret (e.g. thinking); replayed verbatim."""

    payload: dict[str, Any]
    type: Literal["opaque"] = "opaque"

    def to_param(self) -> dict[str, Any]:
        return dict(self.payload)


ContentBlock = Union[TextBlock, ToolUseBlock, ToolResultBlock, OpaqueBlock]


def block_to_param(block: ContentBlock) -> dict[str, Any]:
    """Render any content block in provider wire shape."""
    match block.type:
        case "text" | "tool_use" | "tool_result" | "opaque":
            return block.to_param()
    raise TypeError(f"Unknown content block: {block!r}")


# --- transcript ------------------------------------------------------------


@dataclass(slots=True)
class Turn:
    role: Role
    content: Union[str, list[ContentBlock]]

    def to_message(self) -> ChatMessage:
        if isinstance(self.content, str):
            return {"role": self.role, "content": self.content}
        return {"role": self.role, "content": [block_to_param(b) for b in self.content]}


class Transcript:
    """
    Ordered turn history exchanged with the model for a single query.

    Append-only. Every tool-use block in the most recent assistant turn must
    be answered, once, by a tool-result block before more turns are added.
    """

    def __init__(self, turns: Sequence[Turn] = ()) -> None:
        self._turns: list[Turn] = list(turns)
        self._outstanding: list[str] = []

    @classmethod
    def from_query(cls, query: str) -> "Transcript":
        return cls([Turn(role="user", content=query)])

    @property
    def turns(self) -> tuple[Turn, ...]:
        return tuple(self._turns)

    @property
    def outstanding_calls(self) -> tuple[str, ...]:
        """Ids of tool calls awaiting a result."""
        return tuple(self._outstanding)

    def __len__(self) -> int:
        return len(self._turns)

    def append_assistant(self, blocks: Sequence[ContentBlock]) -> None:
        """Append a full assistant response, registering its tool calls."""
        self._ensure_settled()
        blocks = list(blocks)
        self._turns.append(Turn(role="assistant", content=blocks))
        self._outstanding = [b.id for b in blocks if isinstance(b, ToolUseBlock)]

    def append_tool_results(self, results: Sequence[ToolCallResult]) -> None:
        """Append results for every outstanding tool call as one user turn."""
        ids = [r.id for r in results]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Duplicate tool result ids: {ids}")
        if sorted(ids) != sorted(self._outstanding):
            raise ValueError(
                f"Tool results {ids} do not answer outstanding calls {self._outstanding}"
            )
        self._turns.append(
            Turn(role="user", content=[ToolResultBlock.from_result(r) for r in results])
        )
        self._outstanding = []

    def to_messages(self) -> list[ChatMessage]:
        self._ensure_settled()
        return [turn.to_message() for turn in self._turns]

    def _ensure_settled(self) -> None:
        if self._outstanding:
            raise ValueError(f"Unanswered tool calls: {self._outstanding}")
