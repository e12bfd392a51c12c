# Copyright (c) 2026 Heureum AI. All rights reserved.

"""Tests for transcript models."""

import pytest
from pydantic import ValidationError

from context_compaction.models import TextPart, ToolCallPart, ToolResultPart, Turn, TurnRole


class TestTurn:
    """Tests for Turn construction and accessors."""

    def test_plain_text_parts(self):
        """Plain text content is exposed as a single text part."""
        turn = Turn.user("hi")
        assert turn.parts() == [TextPart(text="hi")]
        assert turn.tool_calls() == []
        assert not turn.has_tool_calls

    def test_assistant_with_calls(self):
        """Calls passed to the assistant constructor are stored as a tuple and exposed."""
        call = ToolCallPart(call_id="c1", name="search")
        turn = Turn.assistant("", [call])
        assert turn.content == (call,)
        assert turn.tool_calls() == [call]
        assert turn.has_tool_calls

    def test_assistant_text_kept_before_calls(self):
        """Assistant text becomes the first part, ahead of the calls."""
        turn = Turn.assistant("thinking", [ToolCallPart(call_id="c1", name="search")])
        assert isinstance(turn.parts()[0], TextPart)

    def test_parts_from_dicts(self):
        """Content parts are selected by their type tag."""
        turn = Turn.model_validate(
            {
                "role": "assistant",
                "content": [
                    {"type": "text", "text": "let me check"},
                    {"type": "tool_call", "call_id": "c1", "name": "search", "arguments": {"q": "x"}},
                ],
            }
        )
        assert turn.role == TurnRole.ASSISTANT
        assert turn.tool_calls()[0].arguments == {"q": "x"}

    def test_unknown_part_type_rejected(self):
        """A part with an unrecognised type tag fails validation."""
        with pytest.raises(ValidationError):
            Turn.model_validate({"role": "user", "content": [{"type": "image", "url": "x"}]})

    def test_turns_are_immutable(self):
        """Assigning to a frozen turn fails."""
        turn = Turn.user("hi")
        with pytest.raises(ValidationError):
            turn.content = "changed"

    def test_content_parts_cannot_be_appended(self):
        """Parts of a built turn cannot be grown in place."""
        turn = Turn.assistant("", [ToolCallPart(call_id="c1", name="search")])
        with pytest.raises(AttributeError):
            turn.content.append(ToolCallPart(call_id="c2", name="search"))
        assert len(turn.tool_calls()) == 1

    def test_list_input_is_stored_as_tuple(self):
        """Lists given at validation time are stored as tuples."""
        turn = Turn.model_validate({"role": "user", "content": [{"type": "text", "text": "hi"}]})
        assert turn.content == (TextPart(text="hi"),)


class TestToolResultOutputText:
    """Tests for ToolResultPart.output_text."""

    def test_string_output(self):
        """String outputs pass through."""
        assert ToolResultPart(call_id="c1", output="plain").output_text() == "plain"

    def test_value_key(self):
        """A value key is unwrapped."""
        assert ToolResultPart(call_id="c1", output={"value": "inner"}).output_text() == "inner"

    def test_structured_output(self):
        """Other outputs are serialized as compact JSON."""
        assert ToolResultPart(call_id="c1", output=[1, "a"]).output_text() == '[1,"a"]'

    def test_non_ascii_is_kept(self):
        """Non-ASCII text is emitted as-is, not escaped."""
        assert ToolResultPart(call_id="c1", output={"text": "你好"}).output_text() == '{"text":"你好"}'
