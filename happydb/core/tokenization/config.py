from __future__ import annotations
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TokenizationConfig:
    method: str = "regex"  # "regex" | "wordpunct"
    pattern: Optional[str] = None  # regex method only; None = \b\w+\b
    lowercase: bool = False  # text is normally lowercased by the normalizer
    min_length: int = 1
    drop_numeric: bool = False  # drop all-digit terms
