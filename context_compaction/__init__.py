# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Context compaction for LLM agent transcripts.

Keeps a growing transcript inside the model's context budget without ever
separating a tool call from its result:

  Token estimation  (tokens.py)
      Script-aware character heuristic with an LRU memo.

  Boundary finding  (boundary.py)
      Round- or message-based cut index that keeps tool call/result pairs
      together.

  Summarization     (summarizer.py)
      One tool-free delegate call summarizing the discarded prefix.

  Validation        (validation.py)
      Pairing check, option check, sufficiency check, config linter.

  Orchestration     (orchestrator.py)
      ``compact``, ``should_compact`` and ``is_context_length_error``.

Usage:

    orchestrator = CompactionOrchestrator()
    advice = orchestrator.should_compact(history, CompactionThresholds())
    if advice.trigger:
        result = orchestrator.compact(history, advice.recommended, LangChainDelegate(llm))
        history = result.new_transcript
"""

from context_compaction.boundary import MessageBoundaryFinder, build_result_issuer_index, count_rounds
from context_compaction.config import CompactionThresholds
from context_compaction.delegate import ChatDelegate, LangChainDelegate, to_langchain_messages
from context_compaction.errors import (
    CompactionError,
    ConfigValidationError,
    InsufficientTurnsError,
    InvalidStrategyError,
)
from context_compaction.models import (
    ChatReply,
    CompactionAdvice,
    CompactionOptions,
    CompactionResult,
    ConfigReport,
    PairingReport,
    RoundBoundary,
    SufficiencyReport,
    TextPart,
    ToolCallPart,
    ToolResultPart,
    Turn,
    TurnRole,
)
from context_compaction.orchestrator import (
    CompactionOrchestrator,
    build_compacted_transcript,
    compact,
    is_context_length_error,
    should_compact,
)
from context_compaction.settings import BoundaryConfig, EstimatorConfig, SummaryConfig, Verbosity
from context_compaction.summarizer import SummaryGenerator, build_summary_prompt, render_conversation
from context_compaction.tokens import TokenEstimator, estimate_tokens
from context_compaction.tool_schema import COMPACT_HISTORY_TOOL_SCHEMA, options_from_tool_arguments
from context_compaction.validation import (
    check_sufficiency,
    validate_config,
    validate_config_or_raise,
    validate_options,
    validate_tool_pairing,
)

__all__ = [
    "Turn",
    "TurnRole",
    "TextPart",
    "ToolCallPart",
    "ToolResultPart",
    "CompactionOptions",
    "CompactionResult",
    "CompactionAdvice",
    "RoundBoundary",
    "PairingReport",
    "SufficiencyReport",
    "ConfigReport",
    "ChatReply",
    "CompactionThresholds",
    "EstimatorConfig",
    "BoundaryConfig",
    "SummaryConfig",
    "Verbosity",
    "CompactionError",
    "InvalidStrategyError",
    "InsufficientTurnsError",
    "ConfigValidationError",
    "TokenEstimator",
    "estimate_tokens",
    "MessageBoundaryFinder",
    "build_result_issuer_index",
    "count_rounds",
    "SummaryGenerator",
    "build_summary_prompt",
    "render_conversation",
    "ChatDelegate",
    "LangChainDelegate",
    "to_langchain_messages",
    "validate_tool_pairing",
    "validate_options",
    "check_sufficiency",
    "validate_config",
    "validate_config_or_raise",
    "CompactionOrchestrator",
    "compact",
    "should_compact",
    "is_context_length_error",
    "build_compacted_transcript",
    "COMPACT_HISTORY_TOOL_SCHEMA",
    "options_from_tool_arguments",
]
