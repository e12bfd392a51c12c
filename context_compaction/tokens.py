# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Token estimation utilities.

A calibrated character heuristic: the dominant script of a text picks a
tokens-per-character ratio (CJK text is denser than Latin text). Results are
memoized per literal text in an LRU cache owned by the estimator instance.

Tool calls bill the tool name plus the serialised arguments; tool results
bill the full output text. Truncation is a rendering concern of the
summarizer and never affects estimates.

Set ``EstimatorConfig.tiktoken_encoding`` to count with a real tokenizer
instead.
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Dict, Iterable, List, Optional

import tiktoken

from context_compaction.cache import LRUCache
from context_compaction.models import TextPart, ToolCallPart, ToolResultPart, Turn, dump_json
from context_compaction.settings import DEFAULT_ESTIMATOR_CONFIG, EstimatorConfig

# Share of counted characters above which a script is considered dominant.
DOMINANT_SHARE = 0.3

logger = logging.getLogger(__name__)


class ScriptClass(str, Enum):
    CHINESE = "chinese"
    ENGLISH = "english"
    MIXED = "mixed"


def _is_cjk(code: int) -> bool:
    return (
        0x4E00 <= code <= 0x9FFF  # CJK Unified Ideographs
        or 0x3400 <= code <= 0x4DBF  # Extension A
        or 0x20000 <= code <= 0x2A6DF  # Extension B
    )


def _is_latin_letter(code: int) -> bool:
    return 65 <= code <= 90 or 97 <= code <= 122


def detect_script(text: str) -> ScriptClass:
    """Classify the dominant script of *text*.

    Every printable non-space character counts towards the total; CJK
    ideographs and ASCII letters are tallied separately.

    Args:
        text (str): Text to classify.

    Returns:
        ScriptClass: ``CHINESE`` when CJK share exceeds 30 % and Latin share
            does not, ``MIXED`` when both exceed 30 %, ``ENGLISH`` otherwise
            (including empty text).
    """
    cjk = latin = total = 0
    for char in text:
        code = ord(char)
        if _is_cjk(code):
            cjk += 1
            total += 1
        elif _is_latin_letter(code):
            latin += 1
            total += 1
        elif code > 32:
            total += 1

    if total == 0:
        return ScriptClass.ENGLISH

    cjk_share = cjk / total
    latin_share = latin / total
    if cjk_share > DOMINANT_SHARE:
        return ScriptClass.MIXED if latin_share > DOMINANT_SHARE else ScriptClass.CHINESE
    return ScriptClass.ENGLISH


def _billable_texts(turn: Turn) -> List[str]:
    """Strings billed for a turn, one per content part."""
    if isinstance(turn.content, str):
        return [turn.content]
    texts: List[str] = []
    for part in turn.content:
        if isinstance(part, TextPart):
            texts.append(part.text)
        elif isinstance(part, ToolCallPart):
            texts.append(part.name + dump_json(part.arguments))
        elif isinstance(part, ToolResultPart):
            texts.append(part.output_text())
        else:
            raise TypeError(f"Unsupported content part: {part!r}")
    return texts


class TokenEstimator:
    """Estimates token counts for text, turns and transcripts.

    One instance per agent loop; the LRU cache is not thread-safe.
    """

    def __init__(self, config: Optional[EstimatorConfig] = None) -> None:
        self.config = config or DEFAULT_ESTIMATOR_CONFIG
        self._cache: LRUCache[str, int] = LRUCache(self.config.max_cache_size)
        self._encoding = None
        if self.config.tiktoken_encoding:
            self._encoding = tiktoken.get_encoding(self.config.tiktoken_encoding)
            logger.info("Token estimation using tiktoken encoding %s", self.config.tiktoken_encoding)

    def _ratio_for(self, script: ScriptClass) -> float:
        if script is ScriptClass.CHINESE:
            return self.config.chinese_ratio
        if script is ScriptClass.ENGLISH:
            return self.config.english_ratio
        return self.config.default_ratio

    def _compute(self, text: str) -> int:
        if self._encoding is not None:
            return len(self._encoding.encode(text, disallowed_special=()))
        if self.config.enable_smart_detection:
            ratio = self._ratio_for(detect_script(text))
        else:
            ratio = self.config.default_ratio
        return math.ceil(len(text) * ratio)

    def estimate_text(self, text: str) -> int:
        """Estimate the token count of *text*.

        Args:
            text (str): Text to estimate.

        Returns:
            int: Estimated tokens, 0 for empty text.
        """
        if not text:
            return 0
        if not self.config.enable_cache:
            return self._compute(text)

        cached = self._cache.get(text)
        if cached is not None:
            return cached
        tokens = self._compute(text)
        self._cache.set(text, tokens)
        return tokens

    def estimate_turn(self, turn: Turn) -> int:
        """Estimate a single turn, including the fixed per-turn overhead.

        Args:
            turn (Turn): Turn to estimate.

        Returns:
            int: Sum of the part estimates plus ``turn_overhead``.
        """
        return sum(self.estimate_text(t) for t in _billable_texts(turn)) + self.config.turn_overhead

    def estimate_transcript(self, turns: Iterable[Turn]) -> int:
        """Estimate a whole transcript.

        Args:
            turns (Iterable[Turn]): Turns to estimate.

        Returns:
            int: Sum of the per-turn estimates.
        """
        return sum(self.estimate_turn(t) for t in turns)

    def clear_cache(self) -> None:
        self._cache.clear()

    def cache_stats(self) -> Dict[str, float]:
        return self._cache.stats()


def estimate_tokens(turns: Iterable[Turn], config: Optional[EstimatorConfig] = None) -> int:
    """Estimate a transcript with a fresh estimator.

    Args:
        turns (Iterable[Turn]): Turns to estimate.
        config (Optional[EstimatorConfig]): Estimator configuration.
            Defaults to ``DEFAULT_ESTIMATOR_CONFIG``.

    Returns:
        int: Estimated token count.
    """
    return TokenEstimator(config).estimate_transcript(turns)
