from __future__ import annotations
from typing import List

import pandas as pd
from gensim import corpora
from gensim.models import CoherenceModel

from happydb.core.topic_modeling.base import LDAResult


def topic_coherence(
    result: LDAResult,
    token_lists: List[List[str]],
    top_n: int = 10,
    measure: str = "u_mass",
) -> pd.DataFrame:
    """Per-topic coherence of the top terms, scored against the given documents."""
    texts = [t for t in token_lists if t]
    dictionary = corpora.Dictionary(texts)
    top = result.top_terms(top_n)
    topics = [
        group["term"].tolist() for _, group in top.groupby("topic", sort=True)
    ]
    cm = CoherenceModel(
        topics=topics,
        texts=texts,
        corpus=[dictionary.doc2bow(t) for t in texts],
        dictionary=dictionary,
        coherence=measure,
    )
    return pd.DataFrame(
        {
            "topic": list(range(1, len(topics) + 1)),
            "coherence": cm.get_coherence_per_topic(),
        }
    )
