from __future__ import annotations
from dataclasses import dataclass, field
from typing import FrozenSet, Optional


def happy_moment_noise_words() -> FrozenSet[str]:
    # Frequent in happy moments but carry no topical signal
    return frozenset(
        {
            "happy",
            "happier",
            "happiest",
            "happiness",
            "day",
            "days",
            "time",
            "times",
            "today",
            "yesterday",
            "week",
            "weeks",
            "month",
            "months",
            "year",
            "years",
            "night",
            "morning",
            "evening",
            "moment",
            "moments",
            "life",
            "enjoyed",
            "feel",
            "felt",
            "finally",
            "good",
            "great",
            "nice",
            "amazing",
            "wonderful",
            "awesome",
            "made",
            "make",
            "makes",
            "got",
            "get",
            "went",
            "lot",
            "really",
            "event",
        }
    )


@dataclass(frozen=True)
class NormalizationConfig:
    lowercase: bool = True
    remove_punctuation: bool = True
    remove_numbers: bool = True
    collapse_whitespace: bool = True
    expand_contractions: bool = False  # uses python 'contractions' package

    # None = build from the default source when the normalizer is created
    stopwords: Optional[FrozenSet[str]] = None  # standard English list
    broad_stopwords: Optional[FrozenSet[str]] = None  # broader second list
    noise_words: FrozenSet[str] = field(default_factory=frozenset)
