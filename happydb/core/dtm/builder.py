from __future__ import annotations
import logging
from typing import Hashable, List, Optional, Sequence

from sklearn.feature_extraction.text import CountVectorizer

from happydb.core.dtm.base import DTMBuilder, DocumentTermMatrix
from happydb.core.dtm.config import DTMConfig
from happydb.utils.exceptions import InsufficientDataError

logger = logging.getLogger(__name__)


def _passthrough(tokens: List[str]) -> List[str]:
    return tokens


class CountDTMBuilder(DTMBuilder):
    """Adapter: sparse term counts over pre-tokenized documents."""

    def __init__(self, config: DTMConfig | None = None):
        self.cfg = config or DTMConfig()

    def build(
        self,
        token_lists: Sequence[List[str]],
        doc_ids: Optional[Sequence[Hashable]] = None,
    ) -> DocumentTermMatrix:
        if doc_ids is None:
            doc_ids = list(range(len(token_lists)))
        if len(doc_ids) != len(token_lists):
            raise ValueError("doc_ids and token_lists must have the same length.")

        # keep non-empty documents, first occurrence of each id
        seen = set()
        kept_ids: List[Hashable] = []
        kept_docs: List[List[str]] = []
        for doc_id, tokens in zip(doc_ids, token_lists):
            if not tokens or doc_id in seen:
                continue
            seen.add(doc_id)
            kept_ids.append(doc_id)
            kept_docs.append(list(tokens))

        dropped = len(token_lists) - len(kept_docs)
        if dropped:
            logger.info(f"Dropped {dropped} empty or duplicate documents before DTM")
        if not kept_docs:
            raise InsufficientDataError(
                code="EMPTY_CORPUS",
                message="No documents have tokens left after normalization.",
            )

        vect = CountVectorizer(
            analyzer=_passthrough,
            min_df=self.cfg.min_df,
            max_features=self.cfg.max_features,
        )
        try:
            X = vect.fit_transform(kept_docs).tocsr()
        except ValueError as e:
            # sklearn raises when pruning leaves no terms
            raise InsufficientDataError(
                code="EMPTY_VOCABULARY", message=str(e)
            ) from e

        # pruning can empty a row; keep the index dense
        row_sums = X.sum(axis=1).A1
        nonzero = row_sums > 0
        if not nonzero.all():
            X = X[nonzero]
            kept_ids = [d for d, keep in zip(kept_ids, nonzero) if keep]

        vocabulary = [str(t) for t in vect.get_feature_names_out()]
        if X.shape[0] == 0 or not vocabulary:
            raise InsufficientDataError(
                code="EMPTY_VOCABULARY",
                message="Vocabulary is empty after normalization.",
            )
        return DocumentTermMatrix(counts=X, vocabulary=vocabulary, doc_ids=kept_ids)
