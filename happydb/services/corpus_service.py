from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional

import pandas as pd

from happydb.core.config import settings
from happydb.core.demographics.base import DemographicCleaner
from happydb.core.demographics.cleaner import REQUIRED_COLUMNS as DEMOGRAPHIC_COLUMNS
from happydb.schemas.corpus import Corpus
from happydb.services.file_service import FileService

logger = logging.getLogger(__name__)

MOMENT_COLUMNS = ["hmid", "wid", "cleaned_hm", "num_sentence", "predicted_category"]


@dataclass(frozen=True)
class CorpusData:
    moments: pd.DataFrame  # one row per happy moment
    demographics: pd.DataFrame  # one row per writer


class CorpusService:
    """
    - Fetches the happy moments and demographics tables once per run
    - Repairs demographics with the injected cleaner
    - Joins both on the writer id and hands out Corpus views
    """

    def __init__(
        self,
        files: FileService,
        cleaner: DemographicCleaner,
        moments_key: Optional[str] = None,
        demographics_key: Optional[str] = None,
    ):
        self.files = files
        self.cleaner = cleaner
        self.moments_key = moments_key or settings.HAPPY_MOMENTS_FILE
        self.demographics_key = demographics_key or settings.DEMOGRAPHICS_FILE

    def load(self) -> CorpusData:
        moments = self.files.download_df(
            self.moments_key, required_columns=MOMENT_COLUMNS
        )
        demographics = self.files.download_df(
            self.demographics_key, required_columns=DEMOGRAPHIC_COLUMNS
        )
        return CorpusData(moments=moments, demographics=demographics)

    def prepare(self, data: CorpusData) -> pd.DataFrame:
        """Cleaned moments joined with repaired demographics (inner join on wid)."""
        moments = data.moments.copy()
        moments["wid"] = moments["wid"].astype(str)
        moments["hmid"] = moments["hmid"].astype(str)
        moments["num_sentence"] = (
            pd.to_numeric(moments["num_sentence"], errors="coerce")
            .fillna(0)
            .astype(int)
        )

        demographics = self.cleaner.clean(data.demographics)
        demographics = demographics.drop_duplicates(subset="wid", keep="first")

        joined = moments.merge(demographics, on="wid", how="inner")
        lost = len(moments) - len(joined)
        if lost:
            logger.info(f"{lost} moments have no matching writer demographics")
        return joined.reset_index(drop=True)

    @staticmethod
    def build_corpus(
        df: pd.DataFrame, group_column: Optional[str] = None
    ) -> Corpus:
        return Corpus.from_frame(df, text_column="cleaned_hm", group_column=group_column)
