from __future__ import annotations
import logging
from typing import FrozenSet, List, Set, Tuple

import nltk
from gensim.parsing.preprocessing import STOPWORDS as GENSIM_STOPWORDS
from nltk.corpus import stopwords as nltk_stopwords
from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS

from happydb.core.stopword_removal.base import StopwordRemover
from happydb.core.stopword_removal.config import StopwordConfig

logger = logging.getLogger(__name__)


def ensure_nltk_stopwords() -> None:
    """Download the NLTK stopword corpus on first use."""
    try:
        nltk.data.find("corpora/stopwords")
    except LookupError:
        logger.info("Downloading NLTK stopwords corpus")
        nltk.download("stopwords", quiet=True)


def nltk_stopword_set(language: str = "english") -> Set[str]:
    ensure_nltk_stopwords()
    return set(nltk_stopwords.words(language))


def broad_stopword_set() -> Set[str]:
    return set(GENSIM_STOPWORDS) | set(ENGLISH_STOP_WORDS)


class DefaultStopwordRemover(StopwordRemover):
    def __init__(self, config: StopwordConfig | None = None):
        self.cfg = config or StopwordConfig()
        self._stopset = self._build_stopset()

    @property
    def stopwords(self) -> FrozenSet[str]:
        return frozenset(self._stopset)

    def _build_stopset(self) -> Set[str]:
        if self.cfg.source == "broad":
            base = broad_stopword_set()
        else:
            base = nltk_stopword_set(self.cfg.language)

        base |= set(self.cfg.custom_stopwords)
        base -= set(self.cfg.exclude_stopwords)

        if self.cfg.preserve_negations:
            for w in ("no", "not", "never"):
                base.discard(w)

        if self.cfg.lowercase:
            base = {w.lower() for w in base}
        return base

    def remove(self, tokens: List[str]) -> Tuple[List[str], List[str]]:
        cleaned: List[str] = []
        removed: List[str] = []
        for t in tokens:
            norm = t.lower() if self.cfg.lowercase else t
            if norm in self._stopset:
                removed.append(t)
                continue
            cleaned.append(t)
        return cleaned, removed
