# happydb/utils/logging.py

import logging
import sys
from typing import Optional

from happydb.core.config import settings


def setup_logging(level: Optional[str] = None):
    logger = logging.getLogger()
    logger.setLevel((level or settings.LOG_LEVEL).upper())
    logger.handlers = []

    formatter = logging.Formatter(
        "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
    )

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    # gensim and matplotlib are chatty at INFO
    if settings.ENV != "debug":
        for noisy in ("gensim", "matplotlib", "urllib3"):
            logging.getLogger(noisy).setLevel(logging.WARNING)

    logger.info("✅ Logging system initialized")
