"""
Logging - one "hireflow" logger shared by every component.

Records go to a ring buffer (read back by the CLI to show recent warnings),
to stdout, and to a size-rotated file. The file is optional: when it cannot
be opened the other two keep working.
"""

import logging
import sys
from collections import deque
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from src.utils.config import LoggingConfig, get_settings

LOGGER_NAME = "hireflow"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class LogEntry:
    level: int
    text: str


class MemoryLogHandler(logging.Handler):
    """Ring buffer of recent records, filterable by level"""

    def __init__(self, capacity: int = 1000):
        super().__init__()
        self.buffer: deque[LogEntry] = deque(maxlen=capacity)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.buffer.append(LogEntry(record.levelno, self.format(record)))
        except Exception:
            self.handleError(record)

    def get_logs(self, n: int = 50, min_level: int = logging.NOTSET) -> list[str]:
        """Last ``n`` formatted records at ``min_level`` or above"""
        matching = [entry.text for entry in self.buffer if entry.level >= min_level]
        return matching[-n:]

    def clear(self) -> None:
        self.buffer.clear()


memory_handler = MemoryLogHandler(capacity=1000)


def _file_handler(config: LoggingConfig) -> RotatingFileHandler:
    path = Path(config.file)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        path,
        maxBytes=config.max_size * 1024 * 1024,
        backupCount=config.backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(levelname)s - %(module)s - %(message)s", datefmt=DATE_FORMAT
    ))
    return handler


def setup_logger(name: str = LOGGER_NAME, config: Optional[LoggingConfig] = None) -> logging.Logger:
    logger = logging.getLogger(name)

    # configured once per name
    if logger.handlers:
        return logger

    config = config or get_settings().logging
    logger.setLevel(getattr(logging, config.level.upper(), logging.INFO))

    memory_handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(levelname)s - %(message)s", datefmt=DATE_FORMAT
    ))
    logger.addHandler(memory_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)

    try:
        logger.addHandler(_file_handler(config))
    except OSError as e:
        logger.warning(f"Could not open log file {config.file}: {e}. Logging to memory and stdout only.")

    return logger


logger = setup_logger()
