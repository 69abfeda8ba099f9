from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Literal, Tuple


@dataclass(frozen=True)
class DemographicConfig:
    min_age: float = 5
    max_age: float = 100
    # caller-supplied corrections, applied before any imputation
    overrides: Dict[str, float] = field(default_factory=dict)
    # what to do with ages that are still invalid after overrides
    strategy: Literal["group_mean", "drop", "raise"] = "group_mean"
    impute_by: Tuple[str, ...] = ("marital", "parenthood")
    round_imputed: bool = True
