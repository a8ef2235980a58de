import logging
import sys
from collections import deque
from logging.handlers import RotatingFileHandler
from typing import List, Optional

from backpack.core.config import settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class RecentLogBuffer(logging.Handler):
    """Keeps the last N formatted log lines in memory for the health endpoint."""

    def __init__(self, capacity: int = 100):
        super().__init__(level=logging.INFO)
        self.records = deque(maxlen=capacity)

    def emit(self, record: logging.LogRecord):
        try:
            self.records.append(self.format(record))
        except Exception:
            self.handleError(record)

    def tail(self, count: int = 10) -> List[str]:
        if count <= 0:
            return []
        return list(self.records)[-count:]


def setup_logging(log_file: Optional[str] = None, buffer_size: Optional[int] = None) -> RecentLogBuffer:
    """Configure application logging and return the in-memory log buffer"""

    if log_file is None:
        log_file = settings.LOG_FILE
    if buffer_size is None:
        buffer_size = settings.LOG_BUFFER_SIZE

    logger = logging.getLogger()
    logger.setLevel(logging.INFO)

    # Remove existing handlers
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # File handler (optional)
    if log_file:
        try:
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=10485760,  # 10MB
                backupCount=5
            )
            file_handler.setLevel(logging.INFO)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
        except OSError as e:
            logger.warning(f"File logging disabled ({log_file}): {e}")

    log_buffer = RecentLogBuffer(buffer_size)
    log_buffer.setFormatter(formatter)
    logger.addHandler(log_buffer)

    # Silence noisy libraries
    logging.getLogger('uvicorn').setLevel(logging.WARNING)
    logging.getLogger('sqlalchemy').setLevel(logging.WARNING)

    return log_buffer
