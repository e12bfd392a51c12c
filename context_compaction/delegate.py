# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Delegate model capability used for summarization.

The orchestrator only needs "given ordered turns, return generated text
without calling tools". ``ChatDelegate`` describes that capability;
``LangChainDelegate`` provides it on top of any LangChain chat model.
Retries, streaming, timeouts and model selection belong to the caller.
"""

from __future__ import annotations

import logging
from typing import Any, List, Protocol, Sequence, runtime_checkable

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage, ToolMessage

from context_compaction.models import ChatReply, TextPart, ToolCallPart, ToolResultPart, Turn, TurnRole

logger = logging.getLogger(__name__)


@runtime_checkable
class ChatDelegate(Protocol):
    """Single-shot, synchronous chat capability."""

    def chat(self, turns: Sequence[Turn], *, disallow_tools: bool = True) -> ChatReply:
        ...


def _assistant_message(turn: Turn) -> AIMessage:
    if isinstance(turn.content, str):
        return AIMessage(content=turn.content)
    texts: List[str] = []
    tool_calls: List[dict] = []
    for part in turn.content:
        if isinstance(part, TextPart):
            texts.append(part.text)
        elif isinstance(part, ToolCallPart):
            tool_calls.append({"name": part.name, "args": dict(part.arguments), "id": part.call_id})
        elif isinstance(part, ToolResultPart):
            logger.debug("Ignoring tool result part inside assistant turn: %s", part.call_id)
        else:
            raise TypeError(f"Unsupported content part: {part!r}")
    return AIMessage(content="\n".join(texts), tool_calls=tool_calls)


def _tool_messages(turn: Turn) -> List[BaseMessage]:
    results = turn.tool_results()
    if not results:
        # Plain-text tool turn without a resolvable call id
        text = turn.content if isinstance(turn.content, str) else "\n".join(
            p.text for p in turn.parts() if isinstance(p, TextPart)
        )
        return [HumanMessage(content=f"[Tool result]: {text}")]
    return [
        ToolMessage(content=r.output_text(), tool_call_id=r.call_id, name=r.name or None)
        for r in results
    ]


def to_langchain_messages(turns: Sequence[Turn]) -> List[BaseMessage]:
    """Convert turns to LangChain messages.

    Tool turns expand to one ``ToolMessage`` per result part.

    Args:
        turns (Sequence[Turn]): Turns to convert.

    Returns:
        List[BaseMessage]: Equivalent LangChain messages, in order.
    """
    messages: List[BaseMessage] = []
    for turn in turns:
        if turn.role == TurnRole.SYSTEM:
            messages.append(SystemMessage(content=_plain_text(turn)))
        elif turn.role == TurnRole.USER:
            messages.append(HumanMessage(content=_plain_text(turn)))
        elif turn.role == TurnRole.ASSISTANT:
            messages.append(_assistant_message(turn))
        elif turn.role == TurnRole.TOOL:
            messages.extend(_tool_messages(turn))
        else:
            raise ValueError(f"Unsupported role: {turn.role!r}")
    return messages


def _plain_text(turn: Turn) -> str:
    if isinstance(turn.content, str):
        return turn.content
    return "\n".join(p.text for p in turn.content if isinstance(p, TextPart))


def _response_text(content: Any) -> str:
    """Extract text from a LangChain response ``content`` (str or blocks)."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        chunks: List[str] = []
        for block in content:
            if isinstance(block, str):
                chunks.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                chunks.append(str(block.get("text", "")))
        return "".join(chunks)
    return str(content)


class LangChainDelegate:
    """``ChatDelegate`` backed by a LangChain chat model.

    The model is invoked as given, so tools are never bound. Pass an
    unbound chat model, not the result of ``bind_tools``.
    """

    def __init__(self, chat_model: BaseChatModel) -> None:
        self.chat_model = chat_model

    def chat(self, turns: Sequence[Turn], *, disallow_tools: bool = True) -> ChatReply:
        """Invoke the chat model once.

        Args:
            turns (Sequence[Turn]): Conversation to send.
            disallow_tools (bool): Must be true; this adapter never exposes
                tools to the model.

        Returns:
            ChatReply: The reply text.
        """
        if not disallow_tools:
            raise ValueError("LangChainDelegate does not support tool calling")
        response = self.chat_model.invoke(to_langchain_messages(turns))
        return ChatReply(text=_response_text(response.content))
