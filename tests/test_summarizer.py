# Copyright (c) 2026 Heureum AI. All rights reserved.

"""Tests for conversation rendering and summary generation."""

import pytest
from context_compaction.models import ToolCallPart, Turn, TurnRole
from context_compaction.prompts import SUMMARY_SYSTEM_PROMPT
from context_compaction.settings import SummaryConfig, Verbosity
from context_compaction.summarizer import (
    SummaryGenerator,
    build_summary_prompt,
    render_conversation,
    render_turn,
    summarize_turns,
)


def _sent_prompt(delegate) -> str:
    """Text of the user turn the delegate was asked to answer."""
    request = delegate.chat.call_args.args[0]
    return request[-1].content


class TestRenderTurn:
    """Tests for rendering turns as transcript lines."""

    def test_user_turn(self):
        """User turns get the User label."""
        assert render_turn(Turn.user("hi")) == "User: hi"

    def test_role_labels(self):
        """Each role renders with its label."""
        assert render_turn(Turn.system("be brief")) == "System: be brief"
        assert render_turn(Turn.assistant("ok")) == "Assistant: ok"
        assert render_turn(Turn.tool_result("c1", "t", "out")) == "Tool Result: [Tool result: out]"

    def test_tool_call_rendering(self):
        """Tool calls render as [Called name(args)] after the text."""
        turn = Turn.assistant(
            "Let me help",
            [ToolCallPart(call_id="c1", name="tool1", arguments={"key": "value"})],
        )
        assert render_turn(turn) == 'Assistant: Let me help [Called tool1({"key":"value"})]'

    def test_long_tool_result_is_truncated(self):
        """Tool output beyond 100 characters is cut and marked with an ellipsis."""
        turn = Turn.tool_result("c1", "read", "x" * 150)
        assert render_turn(turn) == "Tool Result: [Tool result: " + "x" * 100 + "...]"

    def test_result_at_limit_is_not_truncated(self):
        """Output of exactly 100 characters is rendered whole."""
        turn = Turn.tool_result("c1", "read", "x" * 100)
        assert "..." not in render_turn(turn)

    def test_custom_truncation_limit(self):
        """The truncation limit is configurable."""
        turn = Turn.tool_result("c1", "read", "abcdef")
        assert render_turn(turn, max_tool_result_chars=3) == "Tool Result: [Tool result: abc...]"

    def test_conversation_is_one_line_per_turn(self, conversation):
        """Rendered turns are joined by newlines in transcript order."""
        rendered = render_conversation(conversation)
        assert rendered.splitlines() == [
            "User: Q1",
            "Assistant: A1",
            "User: Q2",
            "Assistant: A2",
            "User: Q3",
            "Assistant: A3",
        ]


class TestBuildSummaryPrompt:
    """Tests for building the summary prompt."""

    def test_default_prompt(self, conversation):
        """The default prompt embeds the conversation and word budget."""
        prompt = build_summary_prompt(conversation)
        assert "User: Q1" in prompt
        assert "200 words" in prompt
        assert "early part" in prompt

    def test_max_words(self, conversation):
        """max_words reaches the prompt."""
        assert "100 words" in build_summary_prompt(conversation, SummaryConfig(max_words=100))

    @pytest.mark.parametrize("language, expected", [("chinese", "in Chinese"), ("english", "in English")])
    def test_language_directive(self, conversation, language, expected):
        """An explicit language adds a directive."""
        assert expected in build_summary_prompt(conversation, SummaryConfig(language=language))

    def test_auto_language_has_no_directive(self, conversation):
        """With language auto the prompt names no output language."""
        prompt = build_summary_prompt(conversation, SummaryConfig(language="auto"))
        assert "in Chinese" not in prompt
        assert "in English" not in prompt

    def test_verbosity(self, conversation):
        """Verbosity selects the directive wording."""
        assert "brief" in build_summary_prompt(conversation, SummaryConfig(verbosity=Verbosity.CONCISE))
        assert "comprehensive" in build_summary_prompt(
            conversation, SummaryConfig(verbosity=Verbosity.DETAILED)
        )

    def test_custom_template(self):
        """Custom templates get placeholders substituted and other braces kept."""
        config = SummaryConfig(
            max_words=150,
            language="chinese",
            custom_template="Custom template with {conversation} and {max_words} words {language} {unknown}",
        )
        prompt = build_summary_prompt([Turn.user("test")], config)
        assert prompt.startswith("Custom template with User: test and 150 words")
        assert "in Chinese" in prompt
        assert "{unknown}" in prompt

    def test_placeholders_in_conversation_stay_literal(self):
        """Placeholder text the user typed is not substituted by the template pass."""
        config = SummaryConfig(max_words=150, custom_template="C: {conversation} W={max_words}")
        prompt = build_summary_prompt([Turn.user("print('{max_words}')")], config)
        assert prompt == "C: User: print('{max_words}') W=150"

    def test_default_prompt_keeps_braces_in_conversation(self):
        """Braces in the conversation survive the built-in prompt."""
        prompt = build_summary_prompt([Turn.user("{language} {max_words}")])
        assert "User: {language} {max_words}" in prompt


class TestSummaryGenerator:
    """Tests for SummaryGenerator."""

    def test_returns_reply_verbatim(self, conversation, mock_delegate):
        """The reply is returned without trimming."""
        delegate = mock_delegate("  Test summary\n")
        assert SummaryGenerator(delegate).summarize(conversation) == "  Test summary\n"

    def test_single_tool_free_call(self, conversation, mock_delegate):
        """The delegate is called once, with tools disallowed."""
        delegate = mock_delegate()
        SummaryGenerator(delegate).summarize(conversation)
        delegate.chat.assert_called_once()
        assert delegate.chat.call_args.kwargs == {"disallow_tools": True}

    def test_request_shape(self, conversation, mock_delegate):
        """The request is a system instruction followed by the prompt."""
        delegate = mock_delegate()
        SummaryGenerator(delegate).summarize(conversation)
        request = delegate.chat.call_args.args[0]
        assert [t.role for t in request] == [TurnRole.SYSTEM, TurnRole.USER]
        assert request[0].content == SUMMARY_SYSTEM_PROMPT
        assert "User: Q3" in _sent_prompt(delegate)

    def test_config_reaches_prompt(self, conversation, mock_delegate):
        """The generator config shapes the prompt."""
        delegate = mock_delegate()
        SummaryGenerator(delegate, SummaryConfig(max_words=50)).summarize(conversation)
        assert "50 words" in _sent_prompt(delegate)

    def test_empty_input_still_calls_delegate(self, mock_delegate):
        """Summarizing nothing still asks the delegate once."""
        delegate = mock_delegate()
        SummaryGenerator(delegate).summarize([])
        delegate.chat.assert_called_once()

    def test_delegate_error_propagates(self, conversation, mock_delegate):
        """Delegate errors propagate unchanged."""
        delegate = mock_delegate()
        delegate.chat.side_effect = RuntimeError("LLM error")
        with pytest.raises(RuntimeError, match="LLM error"):
            SummaryGenerator(delegate).summarize(conversation)

    def test_summarize_turns_helper(self, conversation, mock_delegate):
        """summarize_turns wraps a one-off generator."""
        assert summarize_turns(conversation, mock_delegate("done")) == "done"
