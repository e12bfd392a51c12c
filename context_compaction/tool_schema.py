# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Compaction tool schema in OpenAI function calling format.

When ``CompactionThresholds.enable_tool`` is set, the agent loop may offer
this tool so the model can ask for its own history to be compacted.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from context_compaction.config import CompactionThresholds
from context_compaction.config import settings as default_thresholds
from context_compaction.models import CompactionOptions

COMPACT_HISTORY_TOOL_NAME = "compact_history"

COMPACT_HISTORY_TOOL_SCHEMA = {
    "type": "function",
    "function": {
        "name": COMPACT_HISTORY_TOOL_NAME,
        "description": (
            "Compact the conversation history to save tokens. Call this when the history "
            "has grown long: earlier turns are summarized and the most recent rounds are "
            "kept verbatim."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "keep_recent_rounds": {
                    "type": "integer",
                    "minimum": 1,
                    "description": "Number of most recent rounds to keep (defaults to the configured value)",
                },
            },
            "required": [],
        },
    },
}


def options_from_tool_arguments(
    arguments: Optional[Dict[str, Any]],
    thresholds: Optional[CompactionThresholds] = None,
) -> CompactionOptions:
    """Map ``compact_history`` call arguments to compaction options.

    The call is always silent: a model-initiated compaction that finds
    nothing to do must not fail the task.

    Args:
        arguments (Optional[Dict[str, Any]]): Arguments of the tool call.
        thresholds (Optional[CompactionThresholds]): Provides the default
            round count.

    Returns:
        CompactionOptions: Round-based, silent options.
    """
    thresholds = thresholds or default_thresholds
    keep = (arguments or {}).get("keep_recent_rounds")
    if not isinstance(keep, int) or isinstance(keep, bool) or keep <= 0:
        keep = thresholds.keep_recent_rounds
    return CompactionOptions.rounds(keep, silent=True)
