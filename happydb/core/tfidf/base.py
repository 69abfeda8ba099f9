from __future__ import annotations
from abc import ABC, abstractmethod

import pandas as pd


class TfIdfScorer(ABC):
    """Port: score terms of labeled documents, one row per observed (group, term)."""

    @abstractmethod
    def score(self, df: pd.DataFrame) -> pd.DataFrame: ...
