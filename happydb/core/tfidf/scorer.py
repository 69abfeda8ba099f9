from __future__ import annotations
import logging
from collections import Counter
from typing import Dict, Hashable, Iterable, List, Optional

import numpy as np
import pandas as pd

from happydb.core.tfidf.base import TfIdfScorer
from happydb.core.tfidf.config import TfIdfConfig
from happydb.core.tokenization.base import Tokenizer
from happydb.core.tokenization.tokenizer import DefaultTokenizer
from happydb.utils.exceptions import EmptyGroupError

logger = logging.getLogger(__name__)

COLUMNS = ["term", "n", "tf", "df", "idf", "tf_idf"]


class GroupTfIdfScorer(TfIdfScorer):
    """
    TF-IDF where every group (category, country, ...) is one "document":

      tf     = n / total terms in the group
      df     = number of groups containing the term
      idf    = ln(number of groups / df)
      tf_idf = tf * idf

    Only observed (group, term) pairs get a row. Groups left without tokens are
    skipped with a warning.
    """

    def __init__(
        self, config: TfIdfConfig | None = None, tokenizer: Tokenizer | None = None
    ):
        self.cfg = config or TfIdfConfig()
        self.tokenizer = tokenizer or DefaultTokenizer()

    def _group_counts(self, group: Hashable, texts: Iterable[str]) -> Counter:
        counts = self.tokenizer.count_terms(texts, exclude=self.cfg.stopwords)
        if not counts:
            raise EmptyGroupError(group)
        return counts

    def score(self, df: pd.DataFrame) -> pd.DataFrame:
        for col in (self.cfg.group_column, self.cfg.text_column):
            if col not in df.columns:
                raise KeyError(f"Column '{col}' not found in DataFrame.")

        group_col = self.cfg.group_column
        labeled = df[df[group_col].notna()]

        per_group: Dict[Hashable, Counter] = {}
        for group, rows in labeled.groupby(group_col, sort=True):
            try:
                per_group[group] = self._group_counts(
                    group, rows[self.cfg.text_column].fillna("").astype(str)
                )
            except EmptyGroupError as e:
                logger.warning(f"Skipping group: {e}")

        if not per_group:
            return pd.DataFrame(columns=[group_col, *COLUMNS])

        records: List[dict] = []
        for group, counts in per_group.items():
            total = sum(counts.values())
            for term, n in counts.items():
                records.append({group_col: group, "term": term, "n": n, "total": total})
        out = pd.DataFrame.from_records(records)

        n_groups = len(per_group)
        out["tf"] = out["n"] / out["total"]
        out["df"] = out.groupby("term")[group_col].transform("nunique")
        out["idf"] = np.log(n_groups / out["df"])
        out["tf_idf"] = out["tf"] * out["idf"]

        return (
            out.drop(columns="total")
            .sort_values(
                ["tf_idf", group_col, "term"],
                ascending=[False, True, True],
                kind="mergesort",
            )
            .reset_index(drop=True)
        )


def top_per_group(
    table: pd.DataFrame, group_column: str, n: Optional[int] = 10
) -> pd.DataFrame:
    """Highest tf-idf rows for each group, keeping the table's ordering."""
    ranked = table.sort_values(
        [group_column, "tf_idf", "term"],
        ascending=[True, False, True],
        kind="mergesort",
    )
    if n is not None:
        ranked = ranked.groupby(group_column, sort=False).head(n)
    return ranked.reset_index(drop=True)
