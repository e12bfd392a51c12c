# Copyright (c) 2026 Heureum AI. All rights reserved.

"""Tests for the LangChain-backed delegate and message conversion."""

from unittest.mock import MagicMock

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage, ToolMessage

from context_compaction.delegate import ChatDelegate, LangChainDelegate, to_langchain_messages
from context_compaction.models import ChatReply, CompactionOptions, ToolCallPart, Turn
from context_compaction.orchestrator import CompactionOrchestrator


class TestToLangchainMessages:
    """Tests for converting turns to LangChain messages."""

    def test_plain_roles(self):
        """System, user and assistant turns map to their message classes."""
        messages = to_langchain_messages(
            [Turn.system("sys"), Turn.user("hi"), Turn.assistant("hello")]
        )
        assert isinstance(messages[0], SystemMessage)
        assert isinstance(messages[1], HumanMessage)
        assert isinstance(messages[2], AIMessage)
        assert [m.content for m in messages] == ["sys", "hi", "hello"]

    def test_assistant_tool_calls(self):
        """Tool calls are carried on the AIMessage."""
        turn = Turn.assistant(
            "Looking it up",
            [ToolCallPart(call_id="c1", name="search", arguments={"q": "python"})],
        )
        (message,) = to_langchain_messages([turn])
        assert isinstance(message, AIMessage)
        assert message.content == "Looking it up"
        assert message.tool_calls[0]["id"] == "c1"
        assert message.tool_calls[0]["name"] == "search"
        assert message.tool_calls[0]["args"] == {"q": "python"}

    def test_tool_result(self):
        """Tool results become ToolMessages keyed by call id."""
        (message,) = to_langchain_messages([Turn.tool_result("c1", "search", "found it")])
        assert isinstance(message, ToolMessage)
        assert message.tool_call_id == "c1"
        assert message.content == "found it"

    def test_structured_tool_result_is_serialized(self):
        """Dict outputs are sent as compact JSON text."""
        (message,) = to_langchain_messages([Turn.tool_result("c1", "stat", {"size": 3})])
        assert message.content == '{"size":3}'

    def test_plain_text_tool_turn(self):
        """A tool turn without result parts is passed as user-visible text."""
        (message,) = to_langchain_messages([Turn(role="tool", content="raw output")])
        assert isinstance(message, HumanMessage)
        assert message.content == "[Tool result]: raw output"


class TestLangChainDelegate:
    """Tests for LangChainDelegate."""

    def test_returns_model_text(self):
        """The model reply text is returned as a ChatReply."""
        delegate = LangChainDelegate(FakeListChatModel(responses=["a summary"]))
        assert delegate.chat([Turn.user("hi")]) == ChatReply(text="a summary")

    def test_satisfies_protocol(self):
        """LangChainDelegate is a ChatDelegate."""
        assert isinstance(LangChainDelegate(FakeListChatModel(responses=["x"])), ChatDelegate)

    def test_content_blocks_are_joined(self):
        """Text blocks of a list reply are concatenated in order."""
        model = MagicMock()
        model.invoke.return_value = AIMessage(
            content=[{"type": "text", "text": "part one, "}, {"type": "text", "text": "part two"}]
        )
        reply = LangChainDelegate(model).chat([Turn.user("hi")])
        assert reply.text == "part one, part two"
        model.invoke.assert_called_once()

    def test_tools_cannot_be_enabled(self):
        """Asking for a tool-enabled call raises ValueError."""
        model = MagicMock()
        with pytest.raises(ValueError):
            LangChainDelegate(model).chat([Turn.user("hi")], disallow_tools=False)
        model.invoke.assert_not_called()

    def test_model_errors_propagate(self):
        """Errors from the chat model are not wrapped."""
        model = MagicMock()
        model.invoke.side_effect = RuntimeError("maximum context length exceeded")
        with pytest.raises(RuntimeError):
            LangChainDelegate(model).chat([Turn.user("hi")])

    def test_end_to_end_compaction(self, conversation):
        """Compaction runs through a LangChain fake chat model."""
        delegate = LangChainDelegate(FakeListChatModel(responses=["short summary"]))
        result = CompactionOrchestrator().compact(conversation, CompactionOptions.rounds(1), delegate)
        assert result.ok
        assert result.summary == "short summary"
        assert "short summary" in result.new_transcript[0].content
