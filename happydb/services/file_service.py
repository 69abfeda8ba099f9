from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Iterable, Optional

import pandas as pd

from happydb.core.file_handler.base import StorageBase, DataFrameCodecBase
from happydb.core.file_handler.codec import CsvCodec
from happydb.utils.exceptions import DataFetchError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FileService:
    """
    High-level read-only file service that:
      - downloads raw bytes from a StorageBase
      - decodes them into DataFrames with the configured codec
      - checks required columns so malformed sources fail at fetch time
    """

    storage: StorageBase
    codec: DataFrameCodecBase = None  # type: ignore[assignment]

    def __post_init__(self):
        if self.codec is None:
            self.codec = CsvCodec()

    def download_raw(self, key: str) -> bytes:
        return self.storage.download(key)

    def download_df(
        self, key: str, required_columns: Optional[Iterable[str]] = None
    ) -> pd.DataFrame:
        """
        Download object and return as DataFrame using the configured codec.
        Raises DataFetchError when the payload is not a usable table.
        """
        raw = self.download_raw(key)
        location = self.storage.location(key)
        try:
            df = self.codec.from_bytes(raw)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            raise DataFetchError(
                code="MALFORMED_CSV", message=f"Invalid CSV format at {location}: {e}"
            ) from e

        missing = [c for c in (required_columns or []) if c not in df.columns]
        if missing:
            raise DataFetchError(
                code="MISSING_COLUMNS",
                message=f"{location} is missing columns: {', '.join(missing)}",
            )
        logger.info(f"Loaded {len(df)} rows from {location}")
        return df
