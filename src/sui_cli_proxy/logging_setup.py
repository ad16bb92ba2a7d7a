"""Logging configuration with secret redaction on every handler."""

from __future__ import annotations

import logging
from pathlib import Path

from sui_cli_proxy.config import AppConfig
from sui_cli_proxy.services.sanitizer import sanitize

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class RedactingFilter(logging.Filter):
    """Sanitize the rendered message of every record passing through."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        cleaned = sanitize(message)
        if cleaned != message:
            record.msg = cleaned
            record.args = None
        return True


def setup_logging(config: AppConfig, console: bool = True) -> None:
    """Configure the root logger from ``config.logging``."""
    log_path = Path(config.logging.file).expanduser().resolve()
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handlers: list[logging.Handler] = [logging.FileHandler(str(log_path))]
    if console:
        handlers.append(logging.StreamHandler())
    for handler in handlers:
        handler.addFilter(RedactingFilter())

    logging.basicConfig(
        level=getattr(logging, config.logging.level.upper(), logging.WARNING),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
