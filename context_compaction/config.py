# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Compaction trigger thresholds using pydantic-settings.

Values are read from ``COMPACTION_*`` environment variables (or a ``.env``
file), e.g. ``COMPACTION_MAX_MESSAGES=40``.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class CompactionThresholds(BaseSettings):
    """Thresholds feeding the "should compact now" heuristic.

    Attributes:
        enabled (bool): Whether proactive compaction is enabled at all.
        max_messages (int): Turn count at which compaction triggers.
        max_tokens (int): Estimated token count at which compaction triggers.
        keep_recent_rounds (int): Rounds retained by the round-based strategy.
        keep_recent_messages (int): Turns retained by the message-based
            strategy, used for single-round tool-heavy transcripts.
        auto_retry_on_context_error (bool): Whether the agent loop should
            compact and retry after a context-length rejection.
        enable_tool (bool): Whether the agent loop should offer the
            compaction tool to the model.
        messages_per_round (int): Assumed average turns per round, used only
            when linting a configuration.
    """

    model_config = SettingsConfigDict(
        env_prefix="COMPACTION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    enabled: bool = True
    max_messages: int = 20
    max_tokens: int = 8_000
    keep_recent_rounds: int = 3
    keep_recent_messages: int = 10
    auto_retry_on_context_error: bool = True
    enable_tool: bool = True
    messages_per_round: int = 4


settings = CompactionThresholds()
