from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Console logging, plus a rotating file when ``log_file`` is set."""
    numeric_level = getattr(logging, str(level).upper(), logging.INFO)
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)

    root = logging.getLogger()
    root.setLevel(numeric_level)
    if not log_file:
        return

    # create_app may run more than once per process (tests).
    target = os.path.abspath(log_file)
    for handler in root.handlers:
        if isinstance(handler, RotatingFileHandler) and handler.baseFilename == target:
            return

    folder = os.path.dirname(target)
    if folder and not os.path.exists(folder):
        os.makedirs(folder)

    file_handler = RotatingFileHandler(target, maxBytes=1_000_000, backupCount=5)
    file_handler.setLevel(numeric_level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(file_handler)
