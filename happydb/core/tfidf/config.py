from __future__ import annotations
from dataclasses import dataclass, field
from typing import FrozenSet


@dataclass(frozen=True)
class TfIdfConfig:
    group_column: str = "predicted_category"  # groups act as the "documents"
    text_column: str = "text"
    stopwords: FrozenSet[str] = field(default_factory=frozenset)
    top_n: int = 10  # rows per group for presentation
