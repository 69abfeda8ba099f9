from __future__ import annotations
from abc import ABC, abstractmethod

import pandas as pd


class DemographicCleaner(ABC):
    """Port: repair and normalize the writer demographics table."""

    @abstractmethod
    def clean(self, df: pd.DataFrame) -> pd.DataFrame: ...
