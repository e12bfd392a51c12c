# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Component settings.

Frozen dataclasses configuring the token estimator, the boundary finder
and the summary generator. Trigger thresholds live in ``config.py`` because
they are read from the environment.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Verbosity(str, Enum):
    """How much detail the summary should keep.

    Attributes:
        CONCISE (str): Brief summary of the main points only.
        BALANCED (str): Key information, decisions and results.
        DETAILED (str): Comprehensive summary including intermediate steps.
    """

    CONCISE = "concise"
    BALANCED = "balanced"
    DETAILED = "detailed"


@dataclass(frozen=True)
class EstimatorConfig:
    """Token estimator configuration.

    Ratios are tokens per character for each detected script class.

    Attributes:
        default_ratio (float): Ratio for mixed text, and for all text when
            smart detection is off.
        chinese_ratio (float): Ratio for CJK-dominant text.
        english_ratio (float): Ratio for Latin-dominant text.
        turn_overhead (int): Fixed tokens added per turn for role framing.
        enable_smart_detection (bool): Classify the dominant script before
            applying a ratio.
        enable_cache (bool): Memoize text estimates in an LRU cache.
        max_cache_size (int): LRU capacity.
        tiktoken_encoding (Optional[str]): When set, count text tokens with
            this tiktoken encoding instead of the heuristic.
    """

    default_ratio: float = 0.5
    chinese_ratio: float = 1.5
    english_ratio: float = 0.4
    turn_overhead: int = 10
    enable_smart_detection: bool = True
    enable_cache: bool = True
    max_cache_size: int = 1_000
    tiktoken_encoding: Optional[str] = None


@dataclass(frozen=True)
class BoundaryConfig:
    """Boundary finder configuration.

    Attributes:
        enable_cache (bool): Memoize boundaries by (transcript length, target).
        max_cache_size (int): Capacity of each of the two LRU caches.
    """

    enable_cache: bool = True
    max_cache_size: int = 100


@dataclass(frozen=True)
class SummaryConfig:
    """Summary prompt configuration.

    ``custom_template`` replaces the built-in prompt. It may reference the
    placeholders ``{conversation}``, ``{max_words}``, ``{language}`` and
    ``{verbosity}``.

    Attributes:
        max_words (int): Advisory word budget given to the model.
        language (str): ``"auto"`` to follow the conversation, or a language
            name such as ``"english"`` or ``"chinese"``.
        verbosity (Verbosity): Level of detail requested.
        custom_template (Optional[str]): Prompt template overriding the
            built-in one.
        max_tool_result_chars (int): Tool outputs longer than this are cut
            and suffixed with an ellipsis in the rendered conversation.
    """

    max_words: int = 200
    language: str = "auto"
    verbosity: Verbosity = Verbosity.BALANCED
    custom_template: Optional[str] = None
    max_tool_result_chars: int = 100


DEFAULT_ESTIMATOR_CONFIG = EstimatorConfig()
DEFAULT_BOUNDARY_CONFIG = BoundaryConfig()
DEFAULT_SUMMARY_CONFIG = SummaryConfig()
