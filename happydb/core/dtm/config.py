from __future__ import annotations
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DTMConfig:
    min_df: int = 1  # keep terms seen in at least this many documents
    max_features: Optional[int] = None  # CountVectorizer cap
