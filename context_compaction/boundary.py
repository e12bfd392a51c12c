# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Cut-point selection that never separates a tool call from its result.

Two strategies:

  Round boundary:   keep the last N rounds, where a round starts at a user
                    turn and runs up to the next user turn.
  Message boundary: keep roughly the last N turns, sliding the cut forward
                    to the first safe point and widening it back to the
                    issuing assistant turn when it lands on a tool result.

Boundaries are memoized by (transcript length, retention target). That key
is only sound while one finder is fed a single growing transcript; do not
reuse an instance across unrelated transcripts of the same length, or call
``clear_cache()`` when switching.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from context_compaction.cache import LRUCache
from context_compaction.models import RoundBoundary, Turn, TurnRole
from context_compaction.settings import DEFAULT_BOUNDARY_CONFIG, BoundaryConfig

logger = logging.getLogger(__name__)


def count_rounds(turns: Sequence[Turn]) -> int:
    """Number of rounds, i.e. user turns, in *turns*."""
    return sum(1 for t in turns if t.role == TurnRole.USER)


def build_result_issuer_index(turns: Sequence[Turn]) -> Dict[int, int]:
    """Map every tool turn to the assistant turn that issued its calls.

    One forward pass tracks the call ids currently open, so a result always
    resolves to the nearest earlier call with its id, even when the id is
    reused after being closed. A tool turn answering calls from several
    assistant turns maps to the earliest of them.

    Args:
        turns (Sequence[Turn]): Transcript to index.

    Returns:
        Dict[int, int]: ``tool turn index -> issuing assistant turn index``.
            Tool turns with no resolvable issuer are absent.
    """
    open_calls: Dict[str, int] = {}
    issuers: Dict[int, int] = {}
    for i, turn in enumerate(turns):
        if turn.role == TurnRole.ASSISTANT:
            for call in turn.tool_calls():
                open_calls[call.call_id] = i
        elif turn.role == TurnRole.TOOL:
            for result in turn.tool_results():
                issuer = open_calls.pop(result.call_id, None)
                if issuer is not None:
                    issuers[i] = min(issuer, issuers.get(i, issuer))
    return issuers


def _earliest_issuers(turns: Sequence[Turn], issuers: Dict[int, int]) -> List[int]:
    """``earliest[j]``: lowest issuer index of any tool turn at or after ``j``."""
    n = len(turns)
    earliest = [n] * (n + 1)
    for i in range(n - 1, -1, -1):
        earliest[i] = min(earliest[i + 1], issuers.get(i, n))
    return earliest


class MessageBoundaryFinder:
    """Finds retention cut indices for a transcript."""

    def __init__(self, config: Optional[BoundaryConfig] = None) -> None:
        self.config = config or DEFAULT_BOUNDARY_CONFIG
        self._round_cache: LRUCache[Tuple[int, int], RoundBoundary] = LRUCache(
            self.config.max_cache_size
        )
        self._message_cache: LRUCache[Tuple[int, int], int] = LRUCache(self.config.max_cache_size)

    def find_round_boundary(self, turns: Sequence[Turn], keep_rounds: int) -> RoundBoundary:
        """Find the cut index that retains the last *keep_rounds* rounds.

        Scans backwards counting user turns. The index is fixed at the user
        turn that completes the count, but the scan continues so that the
        total round count is exact.

        Args:
            turns (Sequence[Turn]): Transcript to inspect.
            keep_rounds (int): Rounds to retain.

        Returns:
            RoundBoundary: ``index`` of the first retained turn (0 when the
                transcript has fewer rounds than requested) and the total
                ``round_count``. Empty input or ``keep_rounds <= 0`` yields
                ``(0, 0)``.
        """
        if not turns or keep_rounds <= 0:
            return RoundBoundary(index=0, round_count=0)

        key = (len(turns), keep_rounds)
        if self.config.enable_cache:
            cached = self._round_cache.get(key)
            if cached is not None:
                logger.debug("Round boundary cache hit for %s", key)
                return cached

        keep_start = 0
        found = False
        rounds = 0
        for i in range(len(turns) - 1, -1, -1):
            if turns[i].role != TurnRole.USER:
                continue
            rounds += 1
            if rounds == keep_rounds and not found:
                keep_start = i
                found = True

        result = RoundBoundary(index=keep_start, round_count=rounds)
        if self.config.enable_cache:
            self._round_cache.set(key, result)
        return result

    def find_message_boundary(self, turns: Sequence[Turn], keep_messages: int) -> int:
        """Find a cut index retaining about *keep_messages* turns.

        Starting at ``len(turns) - keep_messages`` the scan moves forward to
        the first safe cut:

        - a user turn;
        - an assistant turn without tool calls;
        - a tool turn, whose issuing assistant turn becomes the cut so the
          call and its result stay together. A tool turn whose issuer cannot
          be resolved is itself the cut.

        Assistant turns carrying tool calls are never a cut point. When no
        safe point exists the target index is used. The chosen cut then
        moves back while any later result answers a call issued before it,
        so interleaved pairs are never split either.

        Args:
            turns (Sequence[Turn]): Transcript to inspect.
            keep_messages (int): Turns to retain.

        Returns:
            int: Index of the first retained turn; 0 when nothing is
                discardable.
        """
        target = max(0, len(turns) - keep_messages)
        if target == 0:
            return 0

        key = (len(turns), keep_messages)
        if self.config.enable_cache:
            cached = self._message_cache.get(key)
            if cached is not None:
                logger.debug("Message boundary cache hit for %s", key)
                return cached

        cut = self._scan_for_safe_cut(turns, target)
        if self.config.enable_cache:
            self._message_cache.set(key, cut)
        return cut

    def _scan_for_safe_cut(self, turns: Sequence[Turn], target: int) -> int:
        issuers = build_result_issuer_index(turns)
        cut = self._first_safe_point(turns, target, issuers)

        # No call/result pair may straddle the cut.
        earliest = _earliest_issuers(turns, issuers)
        while earliest[cut] < cut:
            cut = earliest[cut]
        return cut

    @staticmethod
    def _first_safe_point(turns: Sequence[Turn], target: int, issuers: Dict[int, int]) -> int:
        for i in range(target, len(turns)):
            turn = turns[i]
            if turn.role == TurnRole.USER:
                return i
            if turn.role == TurnRole.ASSISTANT:
                if not turn.has_tool_calls:
                    return i
                continue
            if turn.role == TurnRole.TOOL:
                if i in issuers:
                    return issuers[i]
                logger.debug("Tool turn at %d has no resolvable issuer, cutting there", i)
                return i

        return target

    def clear_cache(self) -> None:
        self._round_cache.clear()
        self._message_cache.clear()

    def cache_stats(self) -> Dict[str, Dict[str, float]]:
        return {
            "round_boundary": self._round_cache.stats(),
            "message_boundary": self._message_cache.stats(),
        }


def retained_slice(turns: Sequence[Turn], cut_index: int) -> Tuple[List[Turn], List[Turn]]:
    """Split *turns* at *cut_index* into (discarded, retained)."""
    return list(turns[:cut_index]), list(turns[cut_index:])
