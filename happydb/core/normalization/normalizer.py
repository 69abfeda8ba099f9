from __future__ import annotations
import re
from typing import FrozenSet, Iterable, List

import contractions
import pandas as pd

from happydb.core.normalization.base import TextNormalizer
from happydb.core.normalization.config import NormalizationConfig
from happydb.core.stopword_removal.config import StopwordConfig
from happydb.core.stopword_removal.removal import DefaultStopwordRemover


class DefaultTextNormalizer(TextNormalizer):
    """
    Corpus-wide cleaning. Each step runs over every document before the next:
      lowercase -> punctuation -> digits -> whitespace
      -> standard stopwords -> broad stopwords -> noise words
    """

    _re_punct = re.compile(r"[^\w\s]|_")
    _re_digits = re.compile(r"\d+")
    _re_multi_ws = re.compile(r"\s+")

    def __init__(self, config: NormalizationConfig | None = None):
        self.cfg = config or NormalizationConfig()
        self._word_lists = self._build_word_lists()

    def _build_word_lists(self) -> List[FrozenSet[str]]:
        stopwords = self.cfg.stopwords
        if stopwords is None:
            stopwords = DefaultStopwordRemover(StopwordConfig()).stopwords
        broad = self.cfg.broad_stopwords
        if broad is None:
            broad = DefaultStopwordRemover(StopwordConfig(source="broad")).stopwords
        lists = [frozenset(stopwords), frozenset(broad), frozenset(self.cfg.noise_words)]
        if self.cfg.lowercase:
            lists = [frozenset(w.lower() for w in words) for words in lists]
        return lists

    @staticmethod
    def _drop_words(tokens: pd.Series, words: FrozenSet[str]) -> pd.Series:
        if not words:
            return tokens
        return tokens.map(lambda toks: [t for t in toks if t not in words])

    def normalize_many(self, texts: Iterable[str]) -> List[List[str]]:
        s = pd.Series(list(texts), dtype=object).fillna("").astype(str)
        if s.empty:
            return []

        if self.cfg.expand_contractions:
            s = s.map(contractions.fix)
        if self.cfg.lowercase:
            s = s.str.lower()
        if self.cfg.remove_punctuation:
            s = s.str.replace(self._re_punct, "", regex=True)
        if self.cfg.remove_numbers:
            s = s.str.replace(self._re_digits, "", regex=True)
        if self.cfg.collapse_whitespace:
            s = s.str.replace(self._re_multi_ws, " ", regex=True)
        s = s.str.strip()

        tokens = s.str.split().map(lambda toks: list(toks) if toks else [])
        for words in self._word_lists:
            tokens = self._drop_words(tokens, words)
        return tokens.tolist()

    def normalize(self, text: str) -> List[str]:
        return self.normalize_many([text])[0]
