# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Validation utilities.

- Tool-call pairing check (reports, never repairs).
- Compaction option check.
- Sufficiency check for a computed cut index.
- Threshold configuration linter.

None of these raise except ``validate_config_or_raise``.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from context_compaction.config import CompactionThresholds
from context_compaction.errors import ConfigValidationError
from context_compaction.models import (
    CompactionOptions,
    ConfigReport,
    OptionsReport,
    PairingReport,
    SufficiencyReport,
    Turn,
    TurnRole,
)

MIN_COMPRESSIBLE_TURNS = 2
AVG_TOKENS_PER_MESSAGE = 100

logger = logging.getLogger(__name__)


def validate_tool_pairing(turns: Sequence[Turn]) -> PairingReport:
    """Check that every tool call has exactly one matching result.

    Scans in order, tracking the ids opened by assistant tool calls:

    - a tool result whose id is not currently open is an orphan;
    - an id issued again while still open is a duplicate;
    - ids still open at the end are unmatched calls.

    Args:
        turns (Sequence[Turn]): Turns to scan, typically a retained suffix.

    Returns:
        PairingReport: ``valid`` plus a human-readable issue per problem.
    """
    issues: List[str] = []
    pending: Dict[str, int] = {}

    for index, turn in enumerate(turns):
        if turn.role == TurnRole.ASSISTANT:
            for call in turn.tool_calls():
                if call.call_id in pending:
                    issues.append(f"Duplicate tool call id: {call.call_id} at index {index}")
                pending[call.call_id] = index
        elif turn.role == TurnRole.TOOL:
            for result in turn.tool_results():
                if result.call_id not in pending:
                    issues.append(
                        f"Orphan tool result: {result.call_id} at index {index} (no matching tool call)"
                    )
                else:
                    del pending[result.call_id]

    for call_id, index in pending.items():
        issues.append(f"Unmatched tool call: {call_id} at index {index} (no tool result)")

    return PairingReport(valid=not issues, issues=issues)


def validate_options(options: CompactionOptions) -> OptionsReport:
    """Check that exactly one positive retention mode is set.

    Args:
        options (CompactionOptions): Options to check.

    Returns:
        OptionsReport: ``valid`` and, when invalid, the reason.
    """
    rounds, messages = options.keep_rounds, options.keep_messages
    if rounds is None and messages is None:
        return OptionsReport(valid=False, error="Must specify either keep_rounds or keep_messages")
    if rounds is not None and messages is not None:
        return OptionsReport(
            valid=False,
            error=f"Specify only one of keep_rounds ({rounds}) or keep_messages ({messages})",
        )
    if rounds is not None and rounds <= 0:
        return OptionsReport(valid=False, error=f"keep_rounds must be positive, got {rounds}")
    if messages is not None and messages <= 0:
        return OptionsReport(valid=False, error=f"keep_messages must be positive, got {messages}")
    return OptionsReport(valid=True)


def check_sufficiency(
    transcript_length: int,
    cut_index: int,
    min_compressible: int = MIN_COMPRESSIBLE_TURNS,
) -> SufficiencyReport:
    """Check whether a cut index leaves enough turns to summarize.

    Args:
        transcript_length (int): Number of turns in the transcript.
        cut_index (int): Index of the first retained turn.
        min_compressible (int): Minimum number of discarded turns.

    Returns:
        SufficiencyReport: Distinct reasons for "nothing to compact"
            (index 0) and "not enough to compact" (below the floor).
    """
    if cut_index == 0:
        return SufficiencyReport(
            sufficient=False,
            reason=f"Nothing to compact: cut index is 0 ({transcript_length} turns all retained)",
        )
    if cut_index < min_compressible:
        return SufficiencyReport(
            sufficient=False,
            reason=(
                f"Not enough to compact: only {cut_index} turns available "
                f"(need at least {min_compressible})"
            ),
        )
    return SufficiencyReport(sufficient=True)


def validate_config(thresholds: CompactionThresholds) -> ConfigReport:
    """Lint a threshold configuration.

    Out-of-range values are reported as errors; inconsistencies between
    thresholds are warnings and never block compaction.

    Args:
        thresholds (CompactionThresholds): Configuration to lint.

    Returns:
        ConfigReport: Errors and warnings found.
    """
    errors: List[str] = []
    warnings: List[str] = []
    t = thresholds

    if t.max_messages < 2:
        errors.append("max_messages must be at least 2")
    elif t.max_messages < 10:
        warnings.append("max_messages is very small (<10), compaction may trigger too often")
    if t.max_messages > 10_000:
        warnings.append("max_messages is very large (>10000), may impact performance")

    if t.max_tokens < 100:
        errors.append("max_tokens must be at least 100")
    if t.max_tokens > 1_000_000:
        warnings.append("max_tokens is very large (>1M), may exceed model limits")
    if t.max_tokens > 128_000:
        warnings.append("max_tokens exceeds most model limits (typically 32k-128k)")

    if t.keep_recent_messages < 1:
        errors.append("keep_recent_messages must be at least 1")
    elif t.keep_recent_messages > 50:
        warnings.append("keep_recent_messages is very large (>50), compaction may not be effective")

    if t.keep_recent_rounds < 1:
        errors.append("keep_recent_rounds must be at least 1")
    elif t.keep_recent_rounds > 10:
        warnings.append("keep_recent_rounds is very large (>10), compaction may not be effective")

    if t.messages_per_round < 1:
        errors.append("messages_per_round must be at least 1")

    if t.keep_recent_messages >= t.max_messages:
        warnings.append(
            f"keep_recent_messages ({t.keep_recent_messages}) should be less than "
            f"max_messages ({t.max_messages})"
        )
    elif t.max_messages - t.keep_recent_messages < MIN_COMPRESSIBLE_TURNS:
        warnings.append(
            f"Gap between max_messages and keep_recent_messages is too small "
            f"({t.max_messages - t.keep_recent_messages} < {MIN_COMPRESSIBLE_TURNS})"
        )
    if t.max_messages > 0 and t.keep_recent_messages / t.max_messages > 0.8:
        warnings.append(
            f"keep_recent_messages is very close to max_messages "
            f"({t.keep_recent_messages / t.max_messages:.0%}), compaction will be minimal"
        )

    if t.messages_per_round >= 1:
        estimated_kept = t.keep_recent_rounds * t.messages_per_round
        if estimated_kept >= t.max_messages * 0.8:
            warnings.append(
                f"keep_recent_rounds ({t.keep_recent_rounds}) may keep ~{estimated_kept} messages, "
                f"close to or over max_messages ({t.max_messages})"
            )
        if estimated_kept > 0:
            ratio = t.keep_recent_messages / estimated_kept
            if ratio < 0.3 or ratio > 3:
                warnings.append(
                    f"keep_recent_messages ({t.keep_recent_messages}) and keep_recent_rounds "
                    f"({t.keep_recent_rounds}) may be inconsistent (ratio: {ratio:.2f})"
                )

    if t.max_messages * AVG_TOKENS_PER_MESSAGE < t.max_tokens * 0.5:
        warnings.append(
            f"max_messages ({t.max_messages}) may trigger compaction long before "
            f"max_tokens ({t.max_tokens}) is reached"
        )

    if not t.enabled:
        warnings.append("Compaction is disabled (enabled=False)")

    return ConfigReport(valid=not errors, errors=errors, warnings=warnings)


def validate_config_or_raise(thresholds: CompactionThresholds) -> ConfigReport:
    """Lint *thresholds* and raise when hard errors exist.

    Args:
        thresholds (CompactionThresholds): Configuration to lint.

    Returns:
        ConfigReport: The report, when it has no errors. Warnings are left
            to the caller.

    Raises:
        ConfigValidationError: If any value is out of range.
    """
    report = validate_config(thresholds)
    if not report.valid:
        raise ConfigValidationError(report.errors, {"thresholds": thresholds.model_dump()})
    for warning in report.warnings:
        logger.warning("Compaction config: %s", warning)
    return report


def pairing_warnings(report: PairingReport, prefix: Optional[str] = "Tool pairing") -> List[str]:
    """Format pairing issues as result warnings."""
    if report.valid:
        return []
    return [f"{prefix}: {issue}" if prefix else issue for issue in report.issues]
