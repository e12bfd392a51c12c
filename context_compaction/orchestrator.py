# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Compaction orchestrator.

Picks the cut, checks that there is enough to summarize, asks the delegate
for a summary of the discarded prefix and splices it in front of the
retained suffix:

    [t0 ... t(cut-1)] [t(cut) ... tN]
           |                 |
       summarized         retained
           v                 v
    [summary turn]    [t(cut) ... tN]

Also decides when compaction is due (``should_compact``) and recognises
provider rejections caused by an oversized prompt
(``is_context_length_error``).

Integration (agent loop, outside this package):

    orchestrator = CompactionOrchestrator()   # one per agent loop

    advice = orchestrator.should_compact(history, thresholds)
    if advice.trigger:
        result = orchestrator.compact(history, advice.recommended, delegate)
        history = result.new_transcript

    try:
        reply = llm.invoke(...)
    except Exception as e:
        if thresholds.auto_retry_on_context_error and is_context_length_error(e):
            result = orchestrator.compact(history, CompactionOptions.rounds(1, silent=True), delegate)
            history = result.new_transcript   # then retry once
        else:
            raise
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence, Union

from context_compaction.boundary import MessageBoundaryFinder, count_rounds, retained_slice
from context_compaction.config import CompactionThresholds
from context_compaction.config import settings as default_thresholds
from context_compaction.delegate import ChatDelegate
from context_compaction.errors import CompactionError, InsufficientTurnsError, InvalidStrategyError
from context_compaction.models import (
    CompactionAdvice,
    CompactionOptions,
    CompactionResult,
    PairingReport,
    Turn,
)
from context_compaction.prompts import SUMMARY_FOOTER, SUMMARY_HEADER
from context_compaction.settings import SummaryConfig
from context_compaction.summarizer import SummaryGenerator
from context_compaction.tokens import TokenEstimator
from context_compaction.validation import (
    MIN_COMPRESSIBLE_TURNS,
    check_sufficiency,
    pairing_warnings,
    validate_options,
    validate_tool_pairing,
)

logger = logging.getLogger(__name__)

# Provider phrasings for "the prompt does not fit the context window".
_CONTEXT_LENGTH_PATTERNS = [
    re.compile(p, re.IGNORECASE)
    for p in (
        r"maximum context length",
        r"context[ _]length",
        r"context window",
        r"prompt is too long",
        r"input too long",
        r"token limit",
        r"too many tokens",
        r"exceeds.*token",
        r"context.*exceed",
        r"request too large",
        r"content_too_large",
        r"string too long",
    )
]


def is_context_length_error(error: Union[str, BaseException, None]) -> bool:
    """Check whether an error indicates a context window overflow.

    Args:
        error (Union[str, BaseException, None]): Error text or exception.

    Returns:
        bool: True if the message matches a known overflow phrasing.
    """
    if error is None:
        return False
    text = error if isinstance(error, str) else str(error)
    return any(p.search(text) for p in _CONTEXT_LENGTH_PATTERNS)


def make_summary_turn(summary: str) -> Turn:
    """Wrap *summary* in the fixed frame, as a user turn."""
    return Turn.user(f"{SUMMARY_HEADER}\n{summary}\n\n{SUMMARY_FOOTER}")


def build_compacted_transcript(
    summary: str,
    retained: Sequence[Turn],
    pairing: Optional[PairingReport] = None,
) -> List[Turn]:
    """Prepend the framed summary turn to the retained turns.

    The summary travels as a user turn so that every provider accepts it as
    ordinary context.

    Args:
        summary (str): Summary of the discarded prefix.
        retained (Sequence[Turn]): Turns kept verbatim.
        pairing (Optional[PairingReport]): Pairing report for *retained*,
            when the caller already has one.

    Returns:
        List[Turn]: ``[summary turn] + retained``.
    """
    report = pairing if pairing is not None else validate_tool_pairing(retained)
    if not report.valid:
        logger.warning("Retained turns have tool pairing issues: %s", report.issues)
    return [make_summary_turn(summary), *retained]


def _failed_result(transcript: List[Turn], error: CompactionError, warnings: List[str]) -> CompactionResult:
    warnings.append(f"Compaction failed: {error}")
    return CompactionResult(
        ok=False,
        summary="",
        original_count=len(transcript),
        new_count=len(transcript),
        discarded_count=0,
        retained_turns=list(transcript),
        new_transcript=list(transcript),
        warnings=warnings,
    )


class CompactionOrchestrator:
    """Compacts transcripts for one agent loop.

    Owns its token estimator and boundary finder, so their caches are
    scoped to this instance. Not safe for concurrent use.

    Args:
        estimator (Optional[TokenEstimator]): Token estimator to use.
        boundary_finder (Optional[MessageBoundaryFinder]): Boundary finder
            to use.
        summary_config (Optional[SummaryConfig]): Default summary prompt
            configuration for ``compact``.
    """

    def __init__(
        self,
        estimator: Optional[TokenEstimator] = None,
        boundary_finder: Optional[MessageBoundaryFinder] = None,
        summary_config: Optional[SummaryConfig] = None,
    ) -> None:
        self.estimator = estimator or TokenEstimator()
        self.boundary_finder = boundary_finder or MessageBoundaryFinder()
        self.summary_config = summary_config

    def compact(
        self,
        transcript: Sequence[Turn],
        options: CompactionOptions,
        delegate: ChatDelegate,
        summary_config: Optional[SummaryConfig] = None,
    ) -> CompactionResult:
        """Compact *transcript* by summarizing everything before the cut.

        Args:
            transcript (Sequence[Turn]): Transcript to compact; not modified.
            options (CompactionOptions): Retention mode and silent flag.
            delegate (ChatDelegate): Model used for the single summary call.
            summary_config (Optional[SummaryConfig]): Overrides the
                orchestrator's summary configuration for this call.

        Returns:
            CompactionResult: On success the new transcript and counts. Under
                ``silent``, configuration and sufficiency failures return a
                failed result carrying the input transcript unchanged.

        Raises:
            InvalidStrategyError: If the options are invalid and not silent.
            InsufficientTurnsError: If the cut leaves too little to summarize
                and not silent.
            Exception: Whatever the delegate raises, even when silent.
        """
        history = list(transcript)
        warnings: List[str] = []

        validation = validate_options(options)
        if not validation.valid:
            error = InvalidStrategyError(
                validation.error or "Invalid compaction options",
                {"keep_rounds": options.keep_rounds, "keep_messages": options.keep_messages},
            )
            return self._fail(history, error, warnings, options.silent)

        if options.keep_rounds is not None:
            boundary = self.boundary_finder.find_round_boundary(history, options.keep_rounds)
            cut = boundary.index
            strategy = f"rounds ({boundary.round_count} rounds found)"
        else:
            cut = self.boundary_finder.find_message_boundary(history, options.keep_messages)
            strategy = "messages"

        sufficiency = check_sufficiency(len(history), cut)
        if not sufficiency.sufficient:
            error = InsufficientTurnsError(
                cut,
                MIN_COMPRESSIBLE_TURNS,
                {
                    "strategy": strategy,
                    "transcript_length": len(history),
                    "reason": sufficiency.reason,
                },
            )
            return self._fail(history, error, warnings, options.silent)

        discarded, retained = retained_slice(history, cut)

        pairing = validate_tool_pairing(retained)
        warnings.extend(pairing_warnings(pairing))

        generator = SummaryGenerator(delegate, summary_config or self.summary_config)
        summary = generator.summarize(discarded)

        new_transcript = build_compacted_transcript(summary, retained, pairing)
        # Boundary keys are (length, target); the replaced transcript must not hit old entries.
        self.boundary_finder.clear_cache()

        logger.info(
            "Compacted %d turns -> %d (%d summarized, strategy: %s)",
            len(history),
            len(new_transcript),
            len(discarded),
            strategy,
        )
        return CompactionResult(
            ok=True,
            summary=summary,
            original_count=len(history),
            new_count=len(new_transcript),
            discarded_count=len(discarded),
            retained_turns=retained,
            new_transcript=new_transcript,
            warnings=warnings,
            strategy=strategy,
        )

    @staticmethod
    def _fail(
        history: List[Turn],
        error: CompactionError,
        warnings: List[str],
        silent: bool,
    ) -> CompactionResult:
        if not silent:
            raise error
        logger.warning("Compaction skipped: %s", error)
        return _failed_result(history, error, warnings)

    def should_compact(
        self,
        transcript: Sequence[Turn],
        thresholds: Optional[CompactionThresholds] = None,
    ) -> CompactionAdvice:
        """Decide whether *transcript* should be compacted now, and how.

        Triggers when the turn count reaches ``max_messages`` or the
        estimated token count reaches ``max_tokens``. Strategy:

        - at least ``keep_recent_rounds + 2`` rounds: round-based;
        - one round or fewer: message-based;
        - in between: compute both cuts and keep whichever retains more
          turns, preferring round-based on a tie when its cut is non-zero.

        Args:
            transcript (Sequence[Turn]): Transcript to inspect.
            thresholds (Optional[CompactionThresholds]): Trigger thresholds.
                Defaults to the environment-driven settings.

        Returns:
            CompactionAdvice: Trigger flag, reason and recommended options.
        """
        thresholds = thresholds or default_thresholds
        history = list(transcript)
        message_count = len(history)
        token_count = self.estimator.estimate_transcript(history)
        round_count = count_rounds(history)
        counts = dict(message_count=message_count, token_count=token_count, round_count=round_count)

        if not thresholds.enabled:
            return CompactionAdvice(trigger=False, reason="Compaction disabled", **counts)

        exceeds_messages = message_count >= thresholds.max_messages
        exceeds_tokens = token_count >= thresholds.max_tokens
        if not exceeds_messages and not exceeds_tokens:
            return CompactionAdvice(trigger=False, **counts)

        reasons: List[str] = []
        if exceeds_messages:
            reasons.append(f"messages: {message_count}/{thresholds.max_messages}")
        if exceeds_tokens:
            reasons.append(f"tokens: ~{token_count}/{thresholds.max_tokens}")

        keep_rounds = thresholds.keep_recent_rounds
        keep_messages = thresholds.keep_recent_messages

        if round_count >= keep_rounds + 2:
            recommended = CompactionOptions.rounds(keep_rounds)
            why = f"multi-round conversation ({round_count} rounds), using round-based strategy"
        elif round_count <= 1:
            recommended = CompactionOptions.messages(keep_messages)
            why = f"single round with {message_count} turns, using message-based strategy"
        else:
            by_rounds = self.boundary_finder.find_round_boundary(history, keep_rounds)
            by_messages = self.boundary_finder.find_message_boundary(history, keep_messages)
            kept_by_rounds = message_count - by_rounds.index
            kept_by_messages = message_count - by_messages
            if by_rounds.index > 0 and kept_by_rounds >= kept_by_messages:
                recommended = CompactionOptions.rounds(keep_rounds)
                why = (
                    f"{round_count} rounds, round-based strategy keeps more context "
                    f"({kept_by_rounds} vs {kept_by_messages} turns)"
                )
            else:
                recommended = CompactionOptions.messages(keep_messages)
                why = (
                    f"{round_count} rounds, message-based strategy keeps "
                    f"{kept_by_messages} turns (round-based: {kept_by_rounds})"
                )
        logger.debug("Compaction advised: %s", why)

        return CompactionAdvice(
            trigger=True,
            reason=f"{', '.join(reasons)} - {why}",
            recommended=recommended,
            **counts,
        )

    def estimate_tokens(self, transcript: Sequence[Turn]) -> int:
        return self.estimator.estimate_transcript(transcript)

    def clear_caches(self) -> None:
        """Drop estimator and boundary caches, e.g. before switching transcripts."""
        self.estimator.clear_cache()
        self.boundary_finder.clear_cache()


def compact(
    transcript: Sequence[Turn],
    options: CompactionOptions,
    delegate: ChatDelegate,
    summary_config: Optional[SummaryConfig] = None,
) -> CompactionResult:
    """Compact with a fresh orchestrator. See ``CompactionOrchestrator.compact``."""
    return CompactionOrchestrator().compact(transcript, options, delegate, summary_config)


def should_compact(
    transcript: Sequence[Turn],
    thresholds: Optional[CompactionThresholds] = None,
) -> CompactionAdvice:
    """Advise with a fresh orchestrator. See ``CompactionOrchestrator.should_compact``."""
    return CompactionOrchestrator().should_compact(transcript, thresholds)
