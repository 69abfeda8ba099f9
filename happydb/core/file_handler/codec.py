from __future__ import annotations
from io import BytesIO
import pandas as pd

from happydb.core.file_handler.base import DataFrameCodecBase


class CsvCodec(DataFrameCodecBase):
    def __init__(self, **read_csv_kwargs):
        # e.g., read_csv_kwargs: {"dtype": {"wid": str}}
        self._read_csv_kwargs = {"encoding": "utf-8", **read_csv_kwargs}

    def from_bytes(self, b: bytes) -> pd.DataFrame:
        return pd.read_csv(BytesIO(b), **self._read_csv_kwargs)
