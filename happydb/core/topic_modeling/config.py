from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class LDAConfig:
    num_topics: int = 2
    iterations: int = 1000  # sweeps kept after burn-in
    burnin: int = 1000  # sweeps discarded at the start of each chain
    thin: int = 100  # sweeps between log-likelihood evaluations
    seeds: Tuple[int, ...] = (2003, 5, 63, 100001, 765)  # one chain per seed
    best: bool = True  # keep the chain with the highest log-likelihood
    top_n: int = 10
    alpha: Optional[float] = None  # None = 50 / num_topics
    eta: float = 0.1
    n_jobs: int = 1  # joblib workers for independent chains
