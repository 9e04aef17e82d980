"""Logging setup for the DeliveryHub server.

Engine modules log through ``logging.getLogger(__name__)``; everything under
the ``deliveryhub`` logger, plus uvicorn's own loggers, shares the handlers
installed here.
"""

from __future__ import annotations

import logging
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE = "deliveryhub.log"
MAX_BYTES = 5 * 1024 * 1024
BACKUP_COUNT = 3

# uvicorn.error and uvicorn.access propagate to "uvicorn".
SERVER_LOGGERS = ("deliveryhub", "uvicorn")

_REDACTIONS = (
    (re.compile(r"Bearer [A-Za-z0-9._~+/=-]+"), "Bearer [REDACTED]"),
    (re.compile(r"(token|api_key|access_token)=[^&\s\"']+"), r"\1=[REDACTED]"),
)


def setup_logging(
    level: str = "INFO",
    log_dir: str | Path | None = None,
    max_bytes: int = MAX_BYTES,
    backup_count: int = BACKUP_COUNT,
    console: bool = True,
) -> logging.Logger:
    """Install handlers on the engine and server loggers.

    Args:
        level: Level name; unknown names fall back to INFO.
        log_dir: Directory for a rotating ``deliveryhub.log``. None logs to
            the console only.
        max_bytes: Size at which the log file rotates.
        backup_count: Rotated files to keep.
        console: Whether to log to stderr.

    Returns:
        The ``deliveryhub`` logger.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: list[logging.Handler] = []
    if console:
        handlers.append(logging.StreamHandler())
    log_path = None
    if log_dir is not None:
        log_path = Path(log_dir) / LOG_FILE
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
            )
        )
    for handler in handlers:
        handler.setFormatter(formatter)

    for name in SERVER_LOGGERS:
        target = logging.getLogger(name)
        for old in target.handlers:
            old.close()
        target.handlers = list(handlers)
        target.setLevel(log_level)

    logger = logging.getLogger("deliveryhub")
    logger.info("Logging configured (level=%s, file=%s)", logging.getLevelName(log_level), log_path)
    return logger


def truncate_output(output: str, max_length: int = 2000) -> str:
    """Cut ``output`` to ``max_length`` characters, noting how much was dropped."""
    if len(output) <= max_length:
        return output
    return output[:max_length] + f"... [{len(output) - max_length} more chars]"


def redact(text: str, *secrets: str) -> str:
    """Mask bearer tokens, credential query parameters and any literal ``secrets``."""
    for secret in secrets:
        if secret:
            text = text.replace(secret, "[REDACTED]")
    for pattern, replacement in _REDACTIONS:
        text = pattern.sub(replacement, text)
    return text
