"""Logging configuration setup."""

import copy
import logging
import logging.config
import re
import sys
import threading
from typing import Optional, Set

from jasypt_resolver.constants import DEFAULT_LOG_LEVEL, LOG_DATEFMT, LOG_FORMAT

# ── Secret redaction filter ──────────────────────────────────────────────

_REDACTED = "***REDACTED***"
_MIN_SECRET_LEN = 4


class SecretRedactionFilter(logging.Filter):
    """Logging filter that replaces decrypted values with a placeholder.

    The resolver calls :meth:`register` with every plaintext it produces.
    """

    def __init__(self) -> None:
        super().__init__()
        self._secrets: Set[str] = set()
        self._pattern: Optional["re.Pattern[str]"] = None
        self._lock = threading.Lock()

    def register(self, value: str) -> None:
        """Register a secret value for redaction."""
        if not value or len(value) < _MIN_SECRET_LEN or value in self._secrets:
            return
        with self._lock:
            self._secrets.add(value)
            # Longest first so overlapping secrets are fully masked
            escaped = sorted((re.escape(s) for s in self._secrets), key=len, reverse=True)
            self._pattern = re.compile("|".join(escaped))

    def clear(self) -> None:
        with self._lock:
            self._secrets.clear()
            self._pattern = None

    def redact(self, text: str) -> str:
        pattern = self._pattern
        return pattern.sub(_REDACTED, text) if pattern is not None else text

    def filter(self, record: logging.LogRecord) -> bool:
        if self._pattern is None:
            return True
        if isinstance(record.msg, str):
            record.msg = self.redact(record.msg)
        if record.args:
            if isinstance(record.args, dict):
                record.args = {
                    k: self.redact(v) if isinstance(v, str) else v for k, v in record.args.items()
                }
            elif isinstance(record.args, tuple):
                record.args = tuple(self.redact(a) if isinstance(a, str) else a for a in record.args)
        return True


# Module-level singleton so the resolver can register values at resolve time.
secret_redaction_filter = SecretRedactionFilter()

BASE_LOG_CFG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": LOG_FORMAT,
            "datefmt": LOG_DATEFMT,
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": "DEBUG",
            "formatter": "simple",
            "stream": "ext://sys.stderr",
        },
    },
    "loggers": {
        "jasypt_resolver": {
            "handlers": ["console"],
            "propagate": False,
            "level": DEFAULT_LOG_LEVEL,
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
}


def setup_logging(log_lvl_str: str = DEFAULT_LOG_LEVEL, log_file: Optional[str] = None) -> str:
    """
    Set up the logging system.

    Args:
        log_lvl_str: The desired log level string (e.g., 'debug', 'info').
        log_file: Optional path of an additional log file.

    Returns:
        The validated log level.
    """
    log_lvl_valid = log_lvl_str.upper()
    valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    if log_lvl_valid not in valid_levels:
        print(f"Warning: invalid log level '{log_lvl_str}'. Using 'INFO'.", file=sys.stderr)
        log_lvl_valid = "INFO"

    log_cfg: dict = copy.deepcopy(BASE_LOG_CFG)
    log_cfg["loggers"]["jasypt_resolver"]["level"] = log_lvl_valid
    log_cfg["root"]["level"] = log_lvl_valid if log_lvl_valid == "DEBUG" else "WARNING"

    if log_file:
        log_cfg["handlers"]["file_handler"] = {
            "class": "logging.FileHandler",
            "level": "DEBUG",
            "formatter": "simple",
            "filename": log_file,
            "encoding": "utf-8",
        }
        log_cfg["loggers"]["jasypt_resolver"]["handlers"].append("file_handler")
        log_cfg["root"]["handlers"].append("file_handler")

    logging.config.dictConfig(log_cfg)
    # Attach the redaction filter to every configured handler
    handlers = set(logging.root.handlers) | set(logging.getLogger("jasypt_resolver").handlers)
    for handler in handlers:
        handler.addFilter(secret_redaction_filter)

    return log_lvl_valid
