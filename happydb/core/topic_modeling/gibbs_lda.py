from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
from joblib import Parallel, delayed
from scipy.special import gammaln

from happydb.core.dtm.base import DocumentTermMatrix
from happydb.core.topic_modeling.base import LDAResult, TopicModeler
from happydb.core.topic_modeling.config import LDAConfig
from happydb.utils.exceptions import InsufficientDataError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChainResult:
    seed: int
    log_likelihood: float
    beta: np.ndarray
    theta: np.ndarray


def expand_tokens(dtm: DocumentTermMatrix) -> Tuple[np.ndarray, np.ndarray]:
    """One (doc, word) pair per token occurrence, row-major."""
    coo = dtm.counts.tocoo()
    order = np.lexsort((coo.col, coo.row))
    rows, cols = coo.row[order], coo.col[order]
    counts = coo.data[order].astype(np.int64)
    return np.repeat(rows, counts), np.repeat(cols, counts)


def log_likelihood(nkw: np.ndarray, nk: np.ndarray, eta: float) -> float:
    """Collapsed log p(w | z) for the current topic-word counts."""
    k, v = nkw.shape
    return float(
        k * (gammaln(v * eta) - v * gammaln(eta))
        + gammaln(nkw + eta).sum()
        - gammaln(nk + v * eta).sum()
    )


def run_chain(
    docs: np.ndarray,
    words: np.ndarray,
    n_docs: int,
    n_terms: int,
    num_topics: int,
    alpha: float,
    eta: float,
    burnin: int,
    iterations: int,
    thin: int,
    seed: int,
) -> ChainResult:
    """
    Collapsed Gibbs sampling for a single chain.
    After burn-in the log-likelihood is checked every `thin` sweeps (and on the
    last sweep); the best sample seen is returned.
    """
    rng = np.random.default_rng(seed)
    n_tokens = docs.shape[0]

    z = rng.integers(num_topics, size=n_tokens)
    ndk = np.zeros((n_docs, num_topics), dtype=np.int64)
    nkw = np.zeros((num_topics, n_terms), dtype=np.int64)
    np.add.at(ndk, (docs, z), 1)
    np.add.at(nkw, (z, words), 1)
    nk = np.bincount(z, minlength=num_topics).astype(np.int64)
    v_eta = n_terms * eta

    best_ll = -np.inf
    best_nkw, best_nk, best_ndk = nkw.copy(), nk.copy(), ndk.copy()

    total = burnin + iterations
    for sweep in range(1, total + 1):
        draws = rng.random(n_tokens)
        for i in range(n_tokens):
            d, w, k = docs[i], words[i], z[i]
            ndk[d, k] -= 1
            nkw[k, w] -= 1
            nk[k] -= 1

            p = (nkw[:, w] + eta) / (nk + v_eta) * (ndk[d] + alpha)
            cum = np.cumsum(p)
            k = int(np.searchsorted(cum, draws[i] * cum[-1], side="right"))
            if k >= num_topics:
                k = num_topics - 1

            z[i] = k
            ndk[d, k] += 1
            nkw[k, w] += 1
            nk[k] += 1

        kept = sweep - burnin
        if kept > 0 and (kept % thin == 0 or sweep == total):
            ll = log_likelihood(nkw, nk, eta)
            if ll > best_ll:
                best_ll = ll
                best_nkw, best_nk, best_ndk = nkw.copy(), nk.copy(), ndk.copy()

    beta = (best_nkw + eta) / (best_nk[:, None] + v_eta)
    theta = (best_ndk + alpha) / (
        best_ndk.sum(axis=1, keepdims=True) + num_topics * alpha
    )
    return ChainResult(seed=seed, log_likelihood=best_ll, beta=beta, theta=theta)


class GibbsLDAModeler(TopicModeler):
    """Collapsed Gibbs-sampled LDA with best-of-N restarts."""

    def __init__(self, cfg: LDAConfig | None = None):
        self.cfg = cfg or LDAConfig()

    def _validate(self, dtm: DocumentTermMatrix, k: int) -> None:
        if k < 1:
            raise ValueError("num_topics must be at least 1.")
        if not self.cfg.seeds:
            raise ValueError("At least one seed is required.")
        if self.cfg.iterations < 1 or self.cfg.thin < 1 or self.cfg.burnin < 0:
            raise ValueError("iterations and thin must be >= 1, burnin >= 0.")
        if dtm.n_terms == 0:
            raise InsufficientDataError(
                code="EMPTY_VOCABULARY",
                message="Vocabulary is empty after normalization.",
            )
        if dtm.n_docs < k:
            raise InsufficientDataError(
                code="TOO_FEW_DOCUMENTS",
                message=f"{dtm.n_docs} document(s) retained, {k} topics requested.",
            )

    def fit(
        self, dtm: DocumentTermMatrix, num_topics: Optional[int] = None
    ) -> LDAResult:
        k = self.cfg.num_topics if num_topics is None else num_topics
        self._validate(dtm, k)

        alpha = self.cfg.alpha if self.cfg.alpha is not None else 50.0 / k
        seeds = list(self.cfg.seeds) if self.cfg.best else [self.cfg.seeds[0]]
        docs, words = expand_tokens(dtm)
        logger.info(
            f"Gibbs LDA: k={k}, docs={dtm.n_docs}, terms={dtm.n_terms}, "
            f"tokens={len(docs)}, chains={len(seeds)}"
        )

        # results come back in seed order
        chains = Parallel(n_jobs=self.cfg.n_jobs)(
            delayed(run_chain)(
                docs,
                words,
                dtm.n_docs,
                dtm.n_terms,
                k,
                alpha,
                self.cfg.eta,
                self.cfg.burnin,
                self.cfg.iterations,
                self.cfg.thin,
                seed,
            )
            for seed in seeds
        )

        best = chains[0]
        for chain in chains[1:]:
            if chain.log_likelihood > best.log_likelihood:
                best = chain
        logger.info(
            f"Selected chain seed={best.seed} log-likelihood={best.log_likelihood:.2f}"
        )

        return LDAResult(
            beta=best.beta,
            theta=best.theta,
            vocabulary=list(dtm.vocabulary),
            doc_ids=list(dtm.doc_ids),
            log_likelihood=best.log_likelihood,
            seed=best.seed,
        )
