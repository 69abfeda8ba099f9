from __future__ import annotations
from abc import ABC, abstractmethod
from collections import Counter
from typing import Container, Iterable, List


class Tokenizer(ABC):
    """Port: split normalized text into terms."""

    @abstractmethod
    def tokenize(self, text: str) -> List[str]: ...

    def tokenize_many(self, texts: Iterable[str]) -> List[List[str]]:
        return [self.tokenize(t) for t in texts]

    def count_terms(
        self, texts: Iterable[str], exclude: Container[str] = frozenset()
    ) -> Counter:
        """Term counts pooled over all texts, skipping `exclude`."""
        counts: Counter = Counter()
        for text in texts:
            counts.update(t for t in self.tokenize(text) if t not in exclude)
        return counts
