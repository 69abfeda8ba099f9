from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Hashable, List, Optional

import numpy as np
import pandas as pd

from happydb.core.dtm.base import DocumentTermMatrix

# betas closer than this are treated as equal when ranking terms
TIE_TOLERANCE = 1e-12


@dataclass(frozen=True)
class LDAResult:
    beta: np.ndarray  # shape: (n_topics, n_terms), rows sum to 1
    theta: np.ndarray  # shape: (n_docs, n_topics), rows sum to 1
    vocabulary: List[str]
    doc_ids: List[Hashable]
    log_likelihood: float
    seed: int

    @property
    def num_topics(self) -> int:
        return self.beta.shape[0]

    def topic_term_frame(self) -> pd.DataFrame:
        """Tidy (topic, term, beta) table; topics are numbered from 1."""
        k, v = self.beta.shape
        return pd.DataFrame(
            {
                "topic": np.repeat(np.arange(1, k + 1), v),
                "term": np.tile(np.asarray(self.vocabulary, dtype=object), k),
                "beta": self.beta.ravel(),
            }
        )

    def top_terms(self, n: Optional[int] = 10) -> pd.DataFrame:
        """
        Top-n terms per topic by beta, ties broken by term ascending.
        Betas within TIE_TOLERANCE of the next-higher beta in the same topic
        count as tied (chains of near-equal betas form one tie block).
        Columns: topic, rank, term, beta
        """
        df = self.topic_term_frame().sort_values(
            ["topic", "beta"], ascending=[True, False], kind="mergesort"
        )
        beta = df["beta"].to_numpy()
        topic = df["topic"].to_numpy()
        new_block = np.ones(len(df), dtype=bool)
        new_block[1:] = (topic[1:] != topic[:-1]) | ~np.isclose(
            beta[1:], beta[:-1], rtol=0.0, atol=TIE_TOLERANCE
        )
        df["_block"] = np.cumsum(new_block)
        df = df.sort_values(["_block", "term"], kind="mergesort")
        if n is not None:
            df = df.groupby("topic", sort=True).head(n)
        df = df.drop(columns="_block").reset_index(drop=True)
        df.insert(1, "rank", df.groupby("topic").cumcount() + 1)
        return df

    def dominant_topics(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "doc_id": self.doc_ids,
                "topic": self.theta.argmax(axis=1) + 1,
                "gamma": self.theta.max(axis=1),
            }
        )


class TopicModeler(ABC):
    @abstractmethod
    def fit(
        self, dtm: DocumentTermMatrix, num_topics: Optional[int] = None
    ) -> LDAResult:
        """Fit topics on a document-term matrix."""
        ...
