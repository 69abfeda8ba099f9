from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Protocol
import pandas as pd


class StorageBase(ABC):
    """Abstract read-only source (HTTP, local FS)."""

    @abstractmethod
    def download(self, key: str) -> bytes: ...

    @abstractmethod
    def location(self, key: str) -> str:
        """Human-readable location of the object, for logs and errors."""
        ...


class DataFrameCodecBase(Protocol):
    """Decode DataFrames (CSV)."""

    def from_bytes(self, b: bytes) -> pd.DataFrame: ...
