from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Hashable, List, Optional, Sequence

import numpy as np
import pandas as pd
from scipy import sparse


@dataclass(frozen=True)
class DocumentTermMatrix:
    counts: sparse.csr_matrix  # shape: (n_docs, n_terms)
    vocabulary: List[str]  # column labels, sorted
    doc_ids: List[Hashable]  # row labels, dense 0..n_docs-1

    @property
    def n_docs(self) -> int:
        return self.counts.shape[0]

    @property
    def n_terms(self) -> int:
        return self.counts.shape[1]

    def row_sums(self) -> np.ndarray:
        return np.asarray(self.counts.sum(axis=1)).ravel()

    def to_frame(self) -> pd.DataFrame:
        """Long (doc_id, term, count) table of non-zero cells."""
        coo = self.counts.tocoo()
        return pd.DataFrame(
            {
                "doc_id": [self.doc_ids[i] for i in coo.row],
                "term": [self.vocabulary[j] for j in coo.col],
                "count": coo.data.astype(int),
            }
        )


class DTMBuilder(ABC):
    @abstractmethod
    def build(
        self,
        token_lists: Sequence[List[str]],
        doc_ids: Optional[Sequence[Hashable]] = None,
    ) -> DocumentTermMatrix: ...
