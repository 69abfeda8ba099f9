from __future__ import annotations
from typing import Dict, List, Optional, Sequence

import pandas as pd

from happydb.schemas.corpus import Corpus
from happydb.schemas.analysis import BranchSpec, TfIdfSpec
from happydb.services.tfidf_service import TfIdfService
from happydb.services.topic_modeling_service import (
    TopicBranchResult,
    TopicModelingService,
    sentence_range,
)

SUMMARY_COLUMNS = ["n", "mean", "median", "q1", "q3", "min", "max"]


def verbosity_summary(df: pd.DataFrame, by: str) -> pd.DataFrame:
    """Sentence-count distribution per value of `by` (the boxplot numbers)."""
    if by not in df.columns:
        raise KeyError(f"Column '{by}' not found in DataFrame.")
    grouped = df.dropna(subset=[by]).groupby(by, observed=True)["num_sentence"]
    out = pd.DataFrame(
        {
            "n": grouped.size(),
            "mean": grouped.mean(),
            "median": grouped.median(),
            "q1": grouped.quantile(0.25),
            "q3": grouped.quantile(0.75),
            "min": grouped.min(),
            "max": grouped.max(),
        }
    )
    return out.reset_index()


def country_verbosity(df: pd.DataFrame, min_count: int = 10) -> pd.DataFrame:
    """Mean sentence count per ISO3 country, countries with few moments dropped."""
    summary = verbosity_summary(df, "country")
    summary = summary[summary["n"] >= min_count]
    return summary[["country", "n", "mean", "median"]].sort_values(
        "mean", ascending=False
    ).reset_index(drop=True)


class VerbosityAnalysisService:
    """Verbosity comparisons built on the topic and tf-idf services."""

    def __init__(self, topics: TopicModelingService, tfidf: TfIdfService):
        self.topics = topics
        self.tfidf = tfidf

    def compare_topics(
        self,
        corpus: Corpus,
        branches: Sequence[BranchSpec],
        *,
        num_topics: Optional[int] = None,
        top_n: int = 10,
        sample_size: Optional[int] = None,
        sample_seed: int = 1234,
    ) -> Dict[str, TopicBranchResult]:
        predicates = {
            b.name: sentence_range(b.min_sentences, b.max_sentences) for b in branches
        }
        return self.topics.compare(
            corpus,
            predicates,
            num_topics=num_topics,
            top_n=top_n,
            sample_size=sample_size,
            sample_seed=sample_seed,
        )

    def compare_tfidf(
        self, df: pd.DataFrame, specs: Sequence[TfIdfSpec]
    ) -> Dict[str, pd.DataFrame]:
        return {
            spec.name: self.tfidf.score_groups(
                df,
                spec.group_column,
                groups=spec.groups,
                top_n=spec.top_n,
                name=spec.name,
            )
            for spec in specs
        }

    @staticmethod
    def demographic_summaries(
        df: pd.DataFrame, attributes: Sequence[str]
    ) -> Dict[str, pd.DataFrame]:
        present: List[str] = [a for a in attributes if a in df.columns]
        return {a: verbosity_summary(df, a) for a in present}
