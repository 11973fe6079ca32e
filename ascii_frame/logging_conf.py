#!/usr/bin/env python3
# ascii_frame/logging_conf.py
"""
Central logging setup for ascii_frame.
Supports console and optional rotating file logs.
"""

import logging
from logging.handlers import RotatingFileHandler

from ascii_frame.config import Config

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def setup_logging(cfg: Config, verbose: bool = False) -> None:
    level_name = "DEBUG" if verbose else cfg["logging"].get("level", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("ascii_frame").setLevel(level)

    log_file = cfg["logging"].get("file")
    if log_file:
        handler = RotatingFileHandler(
            log_file,
            maxBytes=int(cfg["logging"].get("rotate_bytes", 5 * 1024 * 1024)),
            backupCount=int(cfg["logging"].get("rotate_keep", 3)),
            encoding="utf-8",
        )
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logging.getLogger().addHandler(handler)

    # Pillow logs every plugin it probes at DEBUG
    logging.getLogger("PIL").setLevel(logging.INFO)
