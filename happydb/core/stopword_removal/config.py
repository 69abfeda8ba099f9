from __future__ import annotations
from dataclasses import dataclass, field
from typing import FrozenSet, Literal


@dataclass(frozen=True)
class StopwordConfig:
    language: str = "english"
    # "nltk": the standard NLTK list; "broad": gensim + scikit-learn lists
    source: Literal["nltk", "broad"] = "nltk"
    custom_stopwords: FrozenSet[str] = field(default_factory=frozenset)
    exclude_stopwords: FrozenSet[str] = field(
        default_factory=frozenset
    )  # words to keep even if in list
    lowercase: bool = True
    preserve_negations: bool = False  # keep {no, not, never}
