"""Tests for transcript bookkeeping, content blocks and tool content normalization."""

from __future__ import annotations

import pytest
from mcp.types import ImageContent, TextContent

from weather_bridge.types import (
    ChatParams,
    OpaqueBlock,
    TextBlock,
    ToolCallResult,
    ToolDescriptor,
    ToolResultBlock,
    ToolUseBlock,
    Transcript,
    normalize_tool_content,
)


class TestTranscript:
    def test_from_query_starts_with_single_user_turn(self):
        """Test that a transcript starts with one user turn."""
        transcript = Transcript.from_query("Any alerts in CA?")

        assert transcript.to_messages() == [{"role": "user", "content": "Any alerts in CA?"}]

    def test_whitespace_query_is_forwarded_unchanged(self):
        """Test that whitespace queries are kept as-is."""
        transcript = Transcript.from_query("   ")

        assert transcript.to_messages()[0]["content"] == "   "

    def test_assistant_turn_keeps_every_block(self):
        """Test that assistant turns keep every block."""
        transcript = Transcript.from_query("q")
        transcript.append_assistant(
            [TextBlock("Let me check."), ToolUseBlock(id="call_1", name="get-alerts", input={"state": "CA"})]
        )

        assert transcript.outstanding_calls == ("call_1",)
        transcript.append_tool_results([ToolCallResult(id="call_1", content="No active alerts for CA")])

        messages = transcript.to_messages()
        assert messages[1] == {
            "role": "assistant",
            "content": [
                {"type": "text", "text": "Let me check."},
                {"type": "tool_use", "id": "call_1", "name": "get-alerts", "input": {"state": "CA"}},
            ],
        }
        assert messages[2] == {
            "role": "user",
            "content": [
                {"type": "tool_result", "tool_use_id": "call_1", "content": "No active alerts for CA"}
            ],
        }

    def test_error_results_carry_error_marker(self):
        """Test that error results carry the is_error marker."""
        transcript = Transcript.from_query("q")
        transcript.append_assistant([ToolUseBlock(id="a", name="t")])
        transcript.append_tool_results([ToolCallResult(id="a", content="Error: boom", is_error=True)])

        block = transcript.to_messages()[2]["content"][0]
        assert block["is_error"] is True

    def test_results_must_answer_every_call(self):
        """Test that results must answer every outstanding call."""
        transcript = Transcript.from_query("q")
        transcript.append_assistant(
            [ToolUseBlock(id="a", name="t"), ToolUseBlock(id="b", name="t")]
        )

        with pytest.raises(ValueError):
            transcript.append_tool_results([ToolCallResult(id="a", content="x")])
        with pytest.raises(ValueError):
            transcript.append_tool_results(
                [ToolCallResult(id="a", content="x"), ToolCallResult(id="c", content="y")]
            )
        with pytest.raises(ValueError):
            transcript.append_tool_results(
                [
                    ToolCallResult(id="a", content="x"),
                    ToolCallResult(id="a", content="x"),
                    ToolCallResult(id="b", content="y"),
                ]
            )

    def test_cannot_resubmit_with_unanswered_calls(self):
        """Test that a transcript with unanswered calls cannot be sent."""
        transcript = Transcript.from_query("q")
        transcript.append_assistant([ToolUseBlock(id="a", name="t")])

        with pytest.raises(ValueError):
            transcript.to_messages()
        with pytest.raises(ValueError):
            transcript.append_assistant([TextBlock("again")])

    def test_results_may_arrive_in_any_order(self):
        """Test that results may arrive in any order."""
        transcript = Transcript.from_query("q")
        transcript.append_assistant([ToolUseBlock(id="a", name="t"), ToolUseBlock(id="b", name="t")])
        transcript.append_tool_results(
            [ToolCallResult(id="b", content="2"), ToolCallResult(id="a", content="1")]
        )

        assert transcript.outstanding_calls == ()
        assert len(transcript) == 3


class TestContentBlocks:
    def test_tool_use_block_to_request(self):
        """Test converting a tool_use block to a call request."""
        request = ToolUseBlock(id="call_9", name="get-forecast", input={"latitude": 1.0}).to_request()

        assert request.id == "call_9"
        assert request.name == "get-forecast"
        assert request.arguments == {"latitude": 1.0}

    def test_tool_result_block_omits_marker_on_success(self):
        """Test that successful results omit is_error."""
        param = ToolResultBlock.from_result(ToolCallResult(id="x", content="ok")).to_param()

        assert "is_error" not in param

    def test_opaque_block_replays_payload(self):
        """Test that opaque blocks replay their payload unchanged."""
        payload = {"type": "thinking", "thinking": "hmm", "signature": "sig"}

        assert OpaqueBlock(payload).to_param() == payload


class TestNormalizeToolContent:
    def test_joins_text_items_with_newlines(self):
        """Test that text items are joined with newlines."""
        content = [TextContent(type="text", text="one"), TextContent(type="text", text="two")]

        assert normalize_tool_content(content) == "one\ntwo"

    def test_non_text_items_use_str(self):
        """Test that non-text items use their string form."""
        image = ImageContent(type="image", data="AAAA", mimeType="image/png")

        result = normalize_tool_content([TextContent(type="text", text="caption"), image])

        assert result == "caption\n" + str(image)

    def test_text_mappings_are_text_items(self):
        """Test that text mappings count as text items."""
        assert normalize_tool_content([{"type": "text", "text": "hi"}, 42]) == "hi\n42"

    def test_scalar_content_uses_str(self):
        """Test that scalar content uses its string form."""
        assert normalize_tool_content("plain") == "plain"
        assert normalize_tool_content(None) == "None"

    def test_empty_list_is_empty_text(self):
        """Test that an empty list gives empty text."""
        assert normalize_tool_content([]) == ""


class TestToolDescriptor:
    def test_to_param_uses_anthropic_field_names(self):
        """Test that descriptors use Anthropic field names."""
        schema = {"type": "object", "properties": {"state": {"type": "string"}}}
        descriptor = ToolDescriptor(name="get-alerts", description="Alerts", input_schema=schema)

        assert descriptor.to_param() == {
            "name": "get-alerts",
            "description": "Alerts",
            "input_schema": schema,
        }


class TestChatParams:
    def test_as_dict_excludes_none(self):
        """Test that as_dict leaves out None values."""
        assert ChatParams(max_tokens=1000).as_dict() == {"max_tokens": 1000}
