# core/logger.py
import logging
import os
import sys
from logging.handlers import RotatingFileHandler

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_MAX_BYTES = 1024 * 1024
LOG_BACKUPS = 3

_configured = False


def setup_logging():
    """
    Configure the root logger once. Console output goes to stderr because
    stdout may carry the rendered catalog; LOG_FILE (empty by default) adds a
    rotating file next to it.
    """
    global _configured
    if _configured:
        return

    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    log_file = os.getenv("LOG_FILE", "").strip()

    root = logging.getLogger()
    root.setLevel(level)
    # per-request connection chatter from requests' transport
    logging.getLogger("urllib3").setLevel(max(level, logging.WARNING))

    if not root.handlers:
        formatter = logging.Formatter(LOG_FORMAT)
        ch = logging.StreamHandler(sys.stderr)
        ch.setFormatter(formatter)
        root.addHandler(ch)

        if log_file:
            try:
                log_dir = os.path.dirname(log_file)
                if log_dir:
                    os.makedirs(log_dir, exist_ok=True)
                fh = RotatingFileHandler(
                    log_file, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUPS
                )
                fh.setFormatter(formatter)
                root.addHandler(fh)
            except OSError as e:
                root.warning("Failed to initialize file logging: %s", e)

    _configured = True


def get_logger(name: str | None = None) -> logging.Logger:
    setup_logging()
    return logging.getLogger(name)
