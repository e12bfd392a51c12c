# Copyright (c) 2026 Heureum AI. All rights reserved.

"""Shared models for transcripts and compaction results."""

from __future__ import annotations

import json
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class TurnRole(str, Enum):
    """Turn role enumeration.

    Attributes:
        USER (str): User role. Also used for the compaction summary turn.
        ASSISTANT (str): Assistant role; may carry tool calls.
        TOOL (str): Tool result role.
        SYSTEM (str): System role.
    """

    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"
    SYSTEM = "system"


def dump_json(value: Any) -> str:
    """Compact JSON used wherever tool arguments or outputs are billed or rendered.

    Args:
        value (Any): Value to serialise.

    Returns:
        str: Compact JSON text. Values that are not JSON-serialisable fall
            back to ``str()``.
    """
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)


class TextPart(BaseModel):
    """Plain text content part.

    Attributes:
        type (str): Discriminator, always ``"text"``.
        text (str): The text.
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    text: str


class ToolCallPart(BaseModel):
    """Tool invocation issued by the assistant.

    Attributes:
        type (str): Discriminator, always ``"tool_call"``.
        call_id (str): Opaque identifier linking the call to its result.
        name (str): Name of the invoked tool.
        arguments (Dict[str, Any]): Parsed call arguments.
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["tool_call"] = "tool_call"
    call_id: str
    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)


class ToolResultPart(BaseModel):
    """Result of a tool invocation.

    Attributes:
        type (str): Discriminator, always ``"tool_result"``.
        call_id (str): Identifier of the tool call this result answers.
        name (str): Name of the tool that produced the result.
        output (Any): Raw tool output, a string or any JSON-serialisable value.
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["tool_result"] = "tool_result"
    call_id: str
    name: str = ""
    output: Any = None

    def output_text(self) -> str:
        """Textual form of ``output``.

        Strings pass through; mappings exposing a ``value`` key yield that
        value; everything else is serialised to JSON.

        Returns:
            str: The output as text.
        """
        if isinstance(self.output, str):
            return self.output
        if isinstance(self.output, dict) and self.output.get("value") is not None:
            value = self.output["value"]
            return value if isinstance(value, str) else dump_json(value)
        return dump_json(self.output)


ContentPart = Annotated[
    Union[TextPart, ToolCallPart, ToolResultPart],
    Field(discriminator="type"),
]


class Turn(BaseModel):
    """A single transcript turn.

    Turns are immutable. ``content`` is either plain text or an ordered tuple
    of tagged content parts.

    Attributes:
        role (TurnRole): The role of the turn's author.
        content (Union[str, Tuple[ContentPart, ...]]): Plain text or content
            parts. Lists passed in are stored as tuples.
    """

    model_config = ConfigDict(frozen=True)

    role: TurnRole
    content: Union[str, Tuple[ContentPart, ...]]

    @classmethod
    def user(cls, text: str) -> "Turn":
        return cls(role=TurnRole.USER, content=text)

    @classmethod
    def system(cls, text: str) -> "Turn":
        return cls(role=TurnRole.SYSTEM, content=text)

    @classmethod
    def assistant(
        cls,
        text: str = "",
        tool_calls: Optional[List[ToolCallPart]] = None,
    ) -> "Turn":
        """Build an assistant turn, optionally carrying tool calls.

        Args:
            text (str): Assistant text. Omitted from the parts when empty and
                tool calls are present.
            tool_calls (Optional[List[ToolCallPart]]): Tool calls issued by
                this turn.

        Returns:
            Turn: Plain-text turn when there are no tool calls, otherwise a
                turn with content parts.
        """
        if not tool_calls:
            return cls(role=TurnRole.ASSISTANT, content=text)
        parts: List[Union[TextPart, ToolCallPart]] = [TextPart(text=text)] if text else []
        parts.extend(tool_calls)
        return cls(role=TurnRole.ASSISTANT, content=parts)

    @classmethod
    def tool_result(cls, call_id: str, name: str, output: Any) -> "Turn":
        return cls(
            role=TurnRole.TOOL,
            content=[ToolResultPart(call_id=call_id, name=name, output=output)],
        )

    def parts(self) -> List[Union[TextPart, ToolCallPart, ToolResultPart]]:
        """Content as a list of parts; plain text becomes a single TextPart."""
        if isinstance(self.content, str):
            return [TextPart(text=self.content)]
        return list(self.content)

    def tool_calls(self) -> List[ToolCallPart]:
        if isinstance(self.content, str):
            return []
        return [p for p in self.content if isinstance(p, ToolCallPart)]

    def tool_results(self) -> List[ToolResultPart]:
        if isinstance(self.content, str):
            return []
        return [p for p in self.content if isinstance(p, ToolResultPart)]

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls())


class CompactionOptions(BaseModel):
    """Retention options for a single compaction.

    Exactly one of ``keep_rounds`` / ``keep_messages`` must be set to a
    positive value. Validation happens in the orchestrator, not here, so that
    a bad option can still soft-fail under ``silent``.

    Attributes:
        keep_rounds (Optional[int]): Number of most recent rounds to retain.
        keep_messages (Optional[int]): Number of most recent turns to retain.
        silent (bool): Downgrade configuration and sufficiency failures to a
            failed result instead of raising.
    """

    keep_rounds: Optional[int] = None
    keep_messages: Optional[int] = None
    silent: bool = False

    @classmethod
    def rounds(cls, n: int, silent: bool = False) -> "CompactionOptions":
        return cls(keep_rounds=n, silent=silent)

    @classmethod
    def messages(cls, n: int, silent: bool = False) -> "CompactionOptions":
        return cls(keep_messages=n, silent=silent)


class CompactionResult(BaseModel):
    """Outcome of a compaction.

    Invariant: ``discarded_count + len(retained_turns) == original_count``.
    On success ``new_transcript`` is the summary turn followed by
    ``retained_turns``; on a silent failure it is the input, unchanged.

    Attributes:
        ok (bool): Whether compaction happened.
        summary (str): Summary text produced by the delegate, empty on failure.
        original_count (int): Number of turns in the input transcript.
        new_count (int): Number of turns in ``new_transcript``.
        discarded_count (int): Number of turns folded into the summary.
        retained_turns (List[Turn]): Turns kept verbatim.
        new_transcript (List[Turn]): Transcript to use from now on.
        warnings (List[str]): Non-fatal problems found along the way.
        strategy (Optional[str]): Description of the retention strategy used.
    """

    ok: bool
    summary: str = ""
    original_count: int
    new_count: int
    discarded_count: int
    retained_turns: List[Turn]
    new_transcript: List[Turn]
    warnings: List[str] = Field(default_factory=list)
    strategy: Optional[str] = None


class CompactionAdvice(BaseModel):
    """Recommendation returned by ``should_compact``.

    Attributes:
        trigger (bool): Whether the transcript should be compacted now.
        reason (Optional[str]): Which thresholds were hit and why the
            recommended strategy was chosen.
        recommended (Optional[CompactionOptions]): Options to pass to
            ``compact`` when ``trigger`` is set.
        message_count (int): Number of turns inspected.
        token_count (int): Estimated token count.
        round_count (int): Number of user turns.
    """

    trigger: bool
    reason: Optional[str] = None
    recommended: Optional[CompactionOptions] = None
    message_count: int = 0
    token_count: int = 0
    round_count: int = 0


class RoundBoundary(BaseModel):
    """Cut index computed from a round count.

    Attributes:
        index (int): First retained turn index; 0 when nothing is discardable.
        round_count (int): Total number of rounds found in the transcript.
    """

    model_config = ConfigDict(frozen=True)

    index: int
    round_count: int


class PairingReport(BaseModel):
    valid: bool
    issues: List[str] = Field(default_factory=list)


class SufficiencyReport(BaseModel):
    sufficient: bool
    reason: Optional[str] = None


class OptionsReport(BaseModel):
    valid: bool
    error: Optional[str] = None


class ConfigReport(BaseModel):
    """Result of linting a threshold configuration.

    Attributes:
        valid (bool): ``False`` when any hard error was found.
        errors (List[str]): Out-of-range values.
        warnings (List[str]): Inconsistencies that never block compaction.
    """

    valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class ChatReply(BaseModel):
    """Text returned by a delegate model call."""

    text: str
