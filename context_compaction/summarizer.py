# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Summary generation for the discarded prefix of a transcript.

Turns are rendered as role-labelled lines, embedded in a directive prompt
and sent to the delegate model in a single call with tool use disabled.
The reply is returned verbatim; the word budget is advisory only.

Delegate errors, including the summarization request itself exceeding the
provider's context window, propagate unchanged. There are no retries here.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence

from context_compaction.delegate import ChatDelegate
from context_compaction.models import TextPart, ToolCallPart, ToolResultPart, Turn, dump_json
from context_compaction.prompts import (
    LANGUAGE_DIRECTIVE,
    ROLE_LABELS,
    SUMMARY_PROMPT,
    SUMMARY_SYSTEM_PROMPT,
    VERBOSITY_DIRECTIVES,
)
from context_compaction.settings import DEFAULT_SUMMARY_CONFIG, SummaryConfig

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{(conversation|max_words|language|verbosity)\}")


def _truncate(text: str, max_chars: int) -> str:
    if len(text) > max_chars:
        return text[:max_chars] + "..."
    return text


def _render_part(part: object, max_tool_result_chars: int) -> str:
    if isinstance(part, TextPart):
        return part.text
    if isinstance(part, ToolCallPart):
        return f"[Called {part.name}({dump_json(part.arguments)})]"
    if isinstance(part, ToolResultPart):
        return f"[Tool result: {_truncate(part.output_text(), max_tool_result_chars)}]"
    raise TypeError(f"Unsupported content part: {part!r}")


def render_turn(turn: Turn, max_tool_result_chars: int = 100) -> str:
    """Render one turn as ``"<Role>: <content>"``.

    Args:
        turn (Turn): Turn to render.
        max_tool_result_chars (int): Tool outputs longer than this are cut
            and suffixed with ``...``.

    Returns:
        str: The rendered line. Parts are joined with single spaces.
    """
    label = ROLE_LABELS.get(turn.role.value, turn.role.value)
    if isinstance(turn.content, str):
        return f"{label}: {turn.content}"
    body = " ".join(_render_part(p, max_tool_result_chars) for p in turn.content)
    return f"{label}: {body}"


def render_conversation(turns: Sequence[Turn], max_tool_result_chars: int = 100) -> str:
    """Render *turns* one per line for the summarization prompt."""
    return "\n".join(render_turn(t, max_tool_result_chars) for t in turns)


def _language_directive(language: str) -> str:
    if not language or language.lower() == "auto":
        return ""
    return LANGUAGE_DIRECTIVE.format(language=language.strip().title())


def build_summary_prompt(turns: Sequence[Turn], config: Optional[SummaryConfig] = None) -> str:
    """Build the directive prompt for summarizing *turns*.

    With ``custom_template`` set, its ``{conversation}``, ``{max_words}``,
    ``{language}`` and ``{verbosity}`` placeholders are substituted and any
    other braces are left untouched.

    Args:
        turns (Sequence[Turn]): Turns to summarize.
        config (Optional[SummaryConfig]): Prompt configuration.

    Returns:
        str: The prompt text.
    """
    config = config or DEFAULT_SUMMARY_CONFIG
    conversation = render_conversation(turns, config.max_tool_result_chars)
    verbosity = VERBOSITY_DIRECTIVES[config.verbosity.value]
    language = _language_directive(config.language)

    if config.custom_template is None:
        return SUMMARY_PROMPT.format(
            conversation=conversation,
            max_words=config.max_words,
            verbosity=verbosity,
            language=language,
        )

    values = {
        "conversation": conversation,
        "max_words": str(config.max_words),
        "language": language,
        "verbosity": verbosity,
    }
    # Single pass over the template: placeholder text inside the conversation stays literal.
    return _PLACEHOLDER.sub(lambda m: values[m.group(1)], config.custom_template)


class SummaryGenerator:
    """Summarizes a run of turns with one delegate call."""

    def __init__(self, delegate: ChatDelegate, config: Optional[SummaryConfig] = None) -> None:
        self.delegate = delegate
        self.config = config or DEFAULT_SUMMARY_CONFIG

    def summarize(self, turns: Sequence[Turn]) -> str:
        """Generate a summary of *turns*.

        Args:
            turns (Sequence[Turn]): Turns to summarize, usually the discarded
                prefix of a transcript.

        Returns:
            str: The delegate's reply text, unmodified.
        """
        prompt = build_summary_prompt(turns, self.config)
        request: List[Turn] = [Turn.system(SUMMARY_SYSTEM_PROMPT), Turn.user(prompt)]
        logger.debug("Summarizing %d turns (prompt: %d chars)", len(turns), len(prompt))
        reply = self.delegate.chat(request, disallow_tools=True)
        return reply.text


def summarize_turns(
    turns: Sequence[Turn],
    delegate: ChatDelegate,
    config: Optional[SummaryConfig] = None,
) -> str:
    """Summarize *turns* with a one-off generator."""
    return SummaryGenerator(delegate, config).summarize(turns)
