from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Iterable, List


class TextNormalizer(ABC):
    """Port: turn raw documents into cleaned token lists."""

    @abstractmethod
    def normalize(self, text: str) -> List[str]: ...

    @abstractmethod
    def normalize_many(self, texts: Iterable[str]) -> List[List[str]]:
        """One token list per input, same order. Lists may be empty."""
        ...
