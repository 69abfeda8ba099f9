from typing import Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field

from happydb.core.normalization.config import happy_moment_noise_words


class LDAParams(BaseModel):
    num_topics: int = Field(default=2, ge=1)
    iterations: int = Field(default=1000, ge=1)
    burnin: int = Field(default=1000, ge=0)
    thin: int = Field(default=100, ge=1)
    seeds: Tuple[int, ...] = (2003, 5, 63, 100001, 765)
    best: bool = True
    top_n: int = Field(default=10, ge=1)
    alpha: Optional[float] = None
    eta: float = 0.1
    n_jobs: int = 1


class BranchSpec(BaseModel):
    """A named verbosity subset, selected by sentence count bounds (inclusive)."""

    name: str
    min_sentences: Optional[int] = None
    max_sentences: Optional[int] = None


class TfIdfSpec(BaseModel):
    name: str
    group_column: str
    groups: Optional[List[str]] = None
    top_n: int = Field(default=10, ge=1)


class AnalysisConfig(BaseModel):
    noise_words: List[str] = Field(
        default_factory=lambda: sorted(happy_moment_noise_words())
    )
    age_overrides: Dict[str, float] = {}
    age_strategy: Literal["group_mean", "drop", "raise"] = "group_mean"
    impute_by: List[str] = ["marital", "parenthood"]
    age_bins: List[float] = [0, 20, 30, 40, 50, 60, 200]
    branches: List[BranchSpec] = []
    lda: LDAParams = LDAParams()
    tfidf: List[TfIdfSpec] = []
    min_country_count: int = Field(default=10, ge=1)
    sample_size: Optional[int] = None  # cap documents per topic branch
    sample_seed: int = 1234
