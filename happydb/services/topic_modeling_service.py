from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

import pandas as pd

from happydb.core.dtm.base import DTMBuilder
from happydb.core.normalization.base import TextNormalizer
from happydb.core.topic_modeling.base import LDAResult, TopicModeler
from happydb.core.topic_modeling.utils import topic_coherence
from happydb.messages import topic_messages
from happydb.schemas.corpus import Corpus, Document
from happydb.utils.exceptions import AnalysisError

logger = logging.getLogger(__name__)

Predicate = Callable[[Document], bool]


def sentence_range(
    min_sentences: Optional[int] = None, max_sentences: Optional[int] = None
) -> Predicate:
    """Predicate selecting documents whose sentence count is within bounds (inclusive)."""

    def predicate(doc: Document) -> bool:
        if min_sentences is not None and doc.num_sentence < min_sentences:
            return False
        if max_sentences is not None and doc.num_sentence > max_sentences:
            return False
        return True

    return predicate


def fit_topics(
    subset: Corpus,
    normalizer: TextNormalizer,
    builder: DTMBuilder,
    modeler: TopicModeler,
    num_topics: Optional[int] = None,
) -> Tuple[LDAResult, List[List[str]]]:
    """Fits topics on an already selected corpus; returns the tokens used."""
    tokens = normalizer.normalize_many(subset.texts())
    dtm = builder.build(tokens, subset.ids())
    return modeler.fit(dtm, num_topics), tokens


def run_topic_branch(
    corpus: Corpus,
    predicate: Predicate,
    normalizer: TextNormalizer,
    builder: DTMBuilder,
    modeler: TopicModeler,
    num_topics: Optional[int] = None,
    top_n: int = 10,
) -> Tuple[pd.DataFrame, LDAResult]:
    """(corpus, predicate, parameters) -> top-term table. No shared state."""
    result, _ = fit_topics(
        corpus.filter(predicate), normalizer, builder, modeler, num_topics
    )
    return result.top_terms(top_n), result


@dataclass(frozen=True)
class TopicBranchResult:
    name: str
    n_documents: int
    table: Optional[pd.DataFrame] = None  # topic, rank, term, beta
    result: Optional[LDAResult] = None
    coherence: Optional[pd.DataFrame] = None  # topic, coherence
    error: Optional[AnalysisError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class TopicModelingService:
    """
    Runs named topic branches over one corpus.
    A failing branch is reported in its result and does not stop the others.
    """

    def __init__(
        self,
        normalizer: TextNormalizer,
        builder: DTMBuilder,
        modeler: TopicModeler,
        coherence_measure: Optional[str] = "u_mass",
    ):
        self.normalizer = normalizer
        self.builder = builder
        self.modeler = modeler
        self.coherence_measure = coherence_measure

    def run_branch(
        self,
        corpus: Corpus,
        name: str,
        predicate: Predicate,
        *,
        num_topics: Optional[int] = None,
        top_n: int = 10,
        sample_size: Optional[int] = None,
        sample_seed: int = 1234,
    ) -> TopicBranchResult:
        subset = corpus.filter(predicate)
        if sample_size is not None:
            subset = subset.sample(sample_size, seed=sample_seed)
        n_docs = len(subset)
        logger.info(topic_messages.BRANCH_STARTED.format(name=name, count=n_docs))
        try:
            result, tokens = fit_topics(
                subset, self.normalizer, self.builder, self.modeler, num_topics
            )
        except AnalysisError as e:
            logger.error(
                topic_messages.BRANCH_FAILED.format(name=name, stage=e.stage, error=e)
            )
            return TopicBranchResult(name=name, n_documents=n_docs, error=e)

        logger.info(
            topic_messages.BRANCH_COMPLETED.format(
                name=name, seed=result.seed, ll=result.log_likelihood
            )
        )
        coherence = None
        if self.coherence_measure:
            coherence = topic_coherence(
                result, tokens, top_n=top_n, measure=self.coherence_measure
            )
        return TopicBranchResult(
            name=name,
            n_documents=n_docs,
            table=result.top_terms(top_n),
            result=result,
            coherence=coherence,
        )

    def compare(
        self,
        corpus: Corpus,
        branches: Dict[str, Predicate],
        *,
        num_topics: Optional[int] = None,
        top_n: int = 10,
        sample_size: Optional[int] = None,
        sample_seed: int = 1234,
    ) -> Dict[str, TopicBranchResult]:
        return {
            name: self.run_branch(
                corpus,
                name,
                predicate,
                num_topics=num_topics,
                top_n=top_n,
                sample_size=sample_size,
                sample_seed=sample_seed,
            )
            for name, predicate in branches.items()
        }
