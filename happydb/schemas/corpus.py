from __future__ import annotations
from typing import Callable, List, Optional, Tuple

import numpy as np
import pandas as pd
from pydantic import BaseModel, ConfigDict, Field


class Document(BaseModel):
    """One happy moment."""

    model_config = ConfigDict(frozen=True)

    hmid: str
    wid: str
    text: str
    num_sentence: int = Field(ge=0)
    predicted_category: Optional[str] = None
    group: Optional[str] = None


class Corpus(BaseModel):
    model_config = ConfigDict(frozen=True)

    documents: Tuple[Document, ...] = ()

    def __len__(self) -> int:
        return len(self.documents)

    def filter(self, predicate: Callable[[Document], bool]) -> "Corpus":
        return Corpus(documents=tuple(d for d in self.documents if predicate(d)))

    def sample(self, n: int, seed: int = 1234) -> "Corpus":
        """Random subset of at most n documents, original order kept."""
        if n >= len(self.documents):
            return self
        picked = np.sort(
            np.random.default_rng(seed).choice(len(self.documents), n, replace=False)
        )
        return Corpus(documents=tuple(self.documents[i] for i in picked))

    def texts(self) -> List[str]:
        return [d.text for d in self.documents]

    def ids(self) -> List[str]:
        return [d.hmid for d in self.documents]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [d.model_dump() for d in self.documents],
            columns=list(Document.model_fields),
        )

    @classmethod
    def from_frame(
        cls,
        df: pd.DataFrame,
        text_column: str = "cleaned_hm",
        group_column: Optional[str] = None,
    ) -> "Corpus":
        def _opt(value) -> Optional[str]:
            return None if pd.isna(value) else str(value)

        docs = []
        for row in df.to_dict(orient="records"):
            docs.append(
                Document(
                    hmid=str(row["hmid"]),
                    wid=str(row["wid"]),
                    text="" if pd.isna(row[text_column]) else str(row[text_column]),
                    num_sentence=int(row["num_sentence"]),
                    predicted_category=_opt(row.get("predicted_category")),
                    group=_opt(row[group_column]) if group_column else None,
                )
            )
        return cls(documents=tuple(docs))
