from __future__ import annotations
import logging
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from happydb.core.demographics.base import DemographicCleaner
from happydb.core.demographics.config import DemographicConfig
from happydb.utils.exceptions import DemographicRepairError

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["wid", "age", "country", "gender", "marital", "parenthood"]

# leading number of values like "60yrs" or "27.0"
_AGE_PATTERN = r"^\s*(\d+(?:\.\d+)?)"


def parse_age(series: pd.Series) -> pd.Series:
    numeric = pd.to_numeric(series, errors="coerce")
    extracted = pd.to_numeric(
        series.astype(str).str.extract(_AGE_PATTERN, expand=False), errors="coerce"
    )
    return numeric.fillna(extracted).astype(float)


class DefaultDemographicCleaner(DemographicCleaner):
    """
    Adapter: age repair in three steps.
      1. parse ages to numbers; out-of-range or unparsable values are invalid
      2. apply caller overrides keyed by writer id
      3. resolve what is left with the configured strategy
    """

    def __init__(self, config: DemographicConfig | None = None):
        self.cfg = config or DemographicConfig()

    def _invalid(self, age: pd.Series) -> pd.Series:
        return age.isna() | (age < self.cfg.min_age) | (age > self.cfg.max_age)

    def _impute_group_mean(self, df: pd.DataFrame, invalid: pd.Series) -> pd.Series:
        valid_age = df["age"].where(~invalid)
        global_mean = valid_age.mean()
        if np.isnan(global_mean):
            raise DemographicRepairError(
                code="NO_VALID_AGES",
                message="No valid age to impute from.",
                wids=df.loc[invalid, "wid"].tolist(),
            )

        keys = [c for c in self.cfg.impute_by if c in df.columns]
        if keys:
            group_mean = valid_age.groupby(
                [df[k] for k in keys], dropna=False
            ).transform("mean")
            fill = group_mean.fillna(global_mean)
        else:
            fill = pd.Series(global_mean, index=df.index)
        if self.cfg.round_imputed:
            fill = fill.round()
        return df["age"].where(~invalid, fill)

    def clean(self, df: pd.DataFrame) -> pd.DataFrame:
        missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
        if missing:
            raise KeyError(f"Columns {missing} not found in DataFrame.")

        out = df.copy()
        out["wid"] = out["wid"].astype(str)
        out["age"] = parse_age(out["age"])

        if self.cfg.overrides:
            overrides = {str(k): float(v) for k, v in self.cfg.overrides.items()}
            hit = out["wid"].isin(overrides.keys())
            out.loc[hit, "age"] = out.loc[hit, "wid"].map(overrides)
            logger.info(f"Applied {int(hit.sum())} age overrides")

        for col in ("gender", "marital", "parenthood"):
            out[col] = out[col].astype("string").str.strip().str.lower()
        out["country"] = out["country"].astype("string").str.strip().str.upper()

        invalid = self._invalid(out["age"])
        n_invalid = int(invalid.sum())
        if n_invalid:
            bad_wids: List[str] = out.loc[invalid, "wid"].tolist()
            if self.cfg.strategy == "raise":
                raise DemographicRepairError(
                    code="AGE_OUT_OF_RANGE",
                    message=(
                        f"{n_invalid} age value(s) outside "
                        f"[{self.cfg.min_age}, {self.cfg.max_age}] with no override."
                    ),
                    wids=bad_wids,
                )
            if self.cfg.strategy == "drop":
                logger.info(f"Dropping {n_invalid} writers with invalid age")
                out = out[~invalid]
            else:
                logger.info(f"Imputing {n_invalid} invalid ages by group mean")
                out["age"] = self._impute_group_mean(out, invalid)

        return out.reset_index(drop=True)


def add_age_bins(
    df: pd.DataFrame,
    bins: Sequence[float] = (0, 20, 30, 40, 50, 60, 200),
    labels: Optional[Sequence[str]] = None,
) -> pd.DataFrame:
    """Adds an ordered 'age_group' column. Bins are right-open: [lo, hi)."""
    if labels is None:
        labels = [
            f"{int(lo)}-{int(hi) - 1}" if i < len(bins) - 2 else f"{int(lo)}+"
            for i, (lo, hi) in enumerate(zip(bins[:-1], bins[1:]))
        ]
    out = df.copy()
    out["age_group"] = pd.cut(out["age"], bins=list(bins), labels=list(labels), right=False)
    return out
