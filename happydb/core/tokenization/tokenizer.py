from __future__ import annotations
import re
from typing import List

from nltk.tokenize import wordpunct_tokenize

from happydb.core.tokenization.base import Tokenizer
from happydb.core.tokenization.config import TokenizationConfig

WORD_PATTERN = r"\b\w+\b"


class DefaultTokenizer(Tokenizer):
    """
    Adapter: word-boundary regex terms by default, NLTK wordpunct on request.
    Case is kept unless `lowercase` is set, so group tf-idf sees the
    normalizer's output unchanged.
    """

    def __init__(self, config: TokenizationConfig | None = None):
        self.cfg = config or TokenizationConfig()
        if self.cfg.method not in ("regex", "wordpunct"):
            raise ValueError(f"Unknown tokenization method: {self.cfg.method}")
        self._regex = re.compile(self.cfg.pattern or WORD_PATTERN)

    def _split(self, text: str) -> List[str]:
        if self.cfg.method == "wordpunct":
            return wordpunct_tokenize(text)
        return self._regex.findall(text)

    def _keep(self, term: str) -> bool:
        if len(term) < self.cfg.min_length:
            return False
        return not (self.cfg.drop_numeric and term.isdigit())

    def tokenize(self, text: str) -> List[str]:
        terms = self._split(text or "")
        if self.cfg.lowercase:
            terms = [t.lower() for t in terms]
        return [t for t in terms if t and self._keep(t)]
