from __future__ import annotations
import logging
from typing import Optional, Sequence

import pandas as pd

from happydb.core.normalization.base import TextNormalizer
from happydb.core.tfidf.config import TfIdfConfig
from happydb.core.tfidf.scorer import GroupTfIdfScorer, top_per_group
from happydb.core.tokenization.base import Tokenizer
from happydb.messages import topic_messages
from happydb.utils.exceptions import ConfigError

logger = logging.getLogger(__name__)


class TfIdfService:
    """
    Normalizes the text column with the shared normalizer, then scores
    terms per group (group-as-document tf-idf).
    """

    def __init__(self, normalizer: TextNormalizer, tokenizer: Optional[Tokenizer] = None):
        self.normalizer = normalizer
        self.tokenizer = tokenizer

    def score_groups(
        self,
        df: pd.DataFrame,
        group_column: str,
        *,
        text_column: str = "cleaned_hm",
        groups: Optional[Sequence[str]] = None,
        top_n: Optional[int] = None,
        name: str = "tfidf",
    ) -> pd.DataFrame:
        if group_column not in df.columns:
            raise ConfigError(
                code="UNKNOWN_COLUMN",
                message=f"tf-idf group column '{group_column}' not found in the data.",
            )

        subset = df
        if groups is not None:
            subset = df[df[group_column].isin(list(groups))]

        tokens = self.normalizer.normalize_many(subset[text_column].tolist())
        prepared = pd.DataFrame(
            {
                group_column: subset[group_column].to_numpy(),
                "text": [" ".join(t) for t in tokens],
            }
        )

        scorer = GroupTfIdfScorer(
            TfIdfConfig(group_column=group_column, text_column="text"),
            tokenizer=self.tokenizer,
        )
        table = scorer.score(prepared)
        logger.info(
            topic_messages.TFIDF_COMPLETED.format(
                name=name, groups=table[group_column].nunique(), rows=len(table)
            )
        )
        if top_n is not None:
            table = top_per_group(table, group_column, top_n)
        return table
