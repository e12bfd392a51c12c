# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Compaction error types.

Configuration and sufficiency failures are raised as ``CompactionError``
subclasses carrying a stable ``code`` and a structured ``context`` dict.
Errors raised by the delegate model are never wrapped: they reach the
caller exactly as the delegate raised them.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class CompactionError(Exception):
    """Base class for compaction errors.

    Attributes:
        code (str): Machine-readable error code.
        context (Dict[str, Any]): Structured details about the failure.
    """

    code = "COMPACTION_ERROR"

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.context: Dict[str, Any] = dict(context or {})


class InvalidStrategyError(CompactionError):
    """Retention options are missing, ambiguous or non-positive."""

    code = "INVALID_STRATEGY"

    def __init__(self, reason: str, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(
            f"Invalid compaction strategy: {reason}",
            {"reason": reason, **(context or {})},
        )
        self.reason = reason


class InsufficientTurnsError(CompactionError):
    """The computed cut index leaves too little to summarize.

    Args:
        cut_index (int): Index of the first retained turn.
        min_required (int): Minimum number of discardable turns.
        context (Optional[Dict[str, Any]]): Extra details such as the
            strategy, transcript length and the sufficiency reason.
    """

    code = "INSUFFICIENT_TURNS"

    def __init__(
        self,
        cut_index: int,
        min_required: int,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            f"Cannot compact: only {cut_index} turns available (need at least {min_required})",
            {"cut_index": cut_index, "min_required": min_required, **(context or {})},
        )
        self.cut_index = cut_index
        self.min_required = min_required

    @property
    def reason(self) -> Optional[str]:
        return self.context.get("reason")


class ConfigValidationError(CompactionError):
    """Threshold configuration contains out-of-range values."""

    code = "CONFIG_VALIDATION_ERROR"

    def __init__(self, errors: List[str], context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(
            f"Configuration validation failed: {'; '.join(errors)}",
            {"errors": list(errors), **(context or {})},
        )
        self.errors = list(errors)
