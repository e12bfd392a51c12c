# Copyright (c) 2026 Heureum AI. All rights reserved.

"""Shared test fixtures for the context-compaction test suite."""

from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest
from context_compaction.models import ChatReply, ToolCallPart, Turn


# ---------------------------------------------------------------------------
# Turn factories
# ---------------------------------------------------------------------------


def _call(call_id: str, name: str = "search", arguments: Optional[Dict[str, Any]] = None) -> ToolCallPart:
    """Create a ToolCallPart with sensible defaults."""
    return ToolCallPart(call_id=call_id, name=name, arguments=arguments or {"q": call_id})


def _assistant_calling(*call_ids: str, text: str = "") -> Turn:
    """Create an assistant turn issuing one tool call per id."""
    return Turn.assistant(text, [_call(c) for c in call_ids])


def _tool(call_id: str, output: Any = "ok", name: str = "search") -> Turn:
    """Create a tool turn answering *call_id*."""
    return Turn.tool_result(call_id, name, output)


@pytest.fixture
def conversation() -> List[Turn]:
    """Three plain rounds: [U, A, U, A, U, A]."""
    return [
        Turn.user("Q1"),
        Turn.assistant("A1"),
        Turn.user("Q2"),
        Turn.assistant("A2"),
        Turn.user("Q3"),
        Turn.assistant("A3"),
    ]


@pytest.fixture
def tool_transcript() -> List[Turn]:
    """Two rounds with tool calls, including a parallel call pair.

    0 U, 1 A(c1), 2 T(c1), 3 A, 4 U, 5 A(c2, c3), 6 T(c2), 7 T(c3), 8 A, 9 U
    """
    return [
        Turn.user("find the config"),
        _assistant_calling("c1"),
        _tool("c1", "config.yaml"),
        Turn.assistant("Found config.yaml"),
        Turn.user("now read both files"),
        _assistant_calling("c2", "c3"),
        _tool("c2", "a: 1"),
        _tool("c3", "b: 2"),
        Turn.assistant("Both read"),
        Turn.user("summarize them"),
    ]


@pytest.fixture
def reused_id_transcript() -> List[Turn]:
    """Call id c1 is reused after closing, and its second use interleaves with c2.

    0 U, 1 A, 2 U, 3 A(c1), 4 T(c1), 5 A(c2), 6 A(c1), 7 T(c1), 8 T(c2)
    """
    return [
        Turn.user("start"),
        Turn.assistant("ok"),
        Turn.user("go"),
        _assistant_calling("c1"),
        _tool("c1", "first"),
        _assistant_calling("c2"),
        _assistant_calling("c1"),
        _tool("c1", "second"),
        _tool("c2", "late"),
    ]


@pytest.fixture
def rounds_factory():
    """Factory fixture building *n* plain [user, assistant] rounds."""

    def _factory(n: int, text: str = "message") -> List[Turn]:
        turns: List[Turn] = []
        for i in range(n):
            turns.append(Turn.user(f"{text} {i}"))
            turns.append(Turn.assistant(f"reply {i}"))
        return turns

    return _factory


# ---------------------------------------------------------------------------
# Delegate mocking helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_delegate():
    """Factory fixture for a mocked ChatDelegate returning fixed text."""

    def _factory(text: str = "Test summary") -> MagicMock:
        delegate = MagicMock()
        delegate.chat.return_value = ChatReply(text=text)
        return delegate

    return _factory
