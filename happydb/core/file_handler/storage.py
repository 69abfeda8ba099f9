from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from happydb.core.config import settings
from happydb.core.file_handler.base import StorageBase
from happydb.utils.exceptions import DataFetchError

logger = logging.getLogger(__name__)


class HttpStorage(StorageBase):
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        backoff_factor: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or settings.HAPPYDB_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.FETCH_TIMEOUT
        max_retries = (
            max_retries if max_retries is not None else settings.FETCH_MAX_RETRIES
        )
        backoff_factor = (
            backoff_factor
            if backoff_factor is not None
            else settings.FETCH_BACKOFF_FACTOR
        )

        # Bounded retries on transient failures only
        self._retry = Retry(
            total=max_retries,
            connect=max_retries,
            read=max_retries,
            backoff_factor=backoff_factor,
            status_forcelist=(429, 500, 502, 503, 504),
            allowed_methods=frozenset({"GET"}),
            raise_on_status=False,
        )
        self._session = session or requests.Session()
        adapter = HTTPAdapter(max_retries=self._retry)
        self._session.mount("https://", adapter)
        self._session.mount("http://", adapter)

    def location(self, key: str) -> str:
        if key.startswith(("http://", "https://")):
            return key
        return f"{self.base_url}/{key.lstrip('/')}"

    def download(self, key: str) -> bytes:
        url = self.location(key)
        try:
            resp = self._session.get(url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.exception(f"HTTP download failed: url={url}: {e}")
            raise DataFetchError(
                code="DOWNLOAD_FAILED", message=f"Could not fetch {url}: {e}"
            ) from e
        return resp.content


class LocalStorage(StorageBase):
    """Reads the same files from a directory (offline runs, tests)."""

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def location(self, key: str) -> str:
        return str(self.root / key)

    def download(self, key: str) -> bytes:
        path = self.root / key
        try:
            return path.read_bytes()
        except OSError as e:
            logger.exception(f"Local read failed: path={path}: {e}")
            raise DataFetchError(
                code="DOWNLOAD_FAILED", message=f"Could not read {path}: {e}"
            ) from e
