import logging
import os
from collections import deque
from logging.handlers import RotatingFileHandler
from typing import Any, Deque, Dict, List

from ..config.settings import LOG_DIR, LOG_LEVEL, RING_BUFFER_SIZE

LOG_FILE = os.path.join(LOG_DIR, "neomap.log")


class RingBufferHandler(logging.Handler):
    """Keeps the most recent log records in memory for the logs endpoint."""

    def __init__(self, maxlen: int = 2000):
        super().__init__()
        self.buffer: Deque[Dict[str, Any]] = deque(maxlen=maxlen)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.buffer.append({
                "ts": record.created,
                "level": record.levelname,
                "name": record.name,
                "message": record.getMessage(),
                "pathname": record.pathname,
                "lineno": record.lineno,
            })
        except Exception:
            self.handleError(record)

    def get_recent(self, limit: int = 500) -> List[Dict[str, Any]]:
        if limit <= 0:
            return list(self.buffer)
        return list(self.buffer)[-limit:]


_ring_handler: RingBufferHandler | None = None


def get_ring_handler() -> RingBufferHandler:
    global _ring_handler
    if _ring_handler is None:
        _ring_handler = RingBufferHandler(maxlen=RING_BUFFER_SIZE)
    return _ring_handler


def init_logging(log_file: bool = True) -> None:
    """Attach the rotating file handler and the in-memory ring buffer to the root logger."""
    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    root = logging.getLogger()
    if root.level == logging.NOTSET or root.level == logging.WARNING:
        root.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))

    if log_file:
        os.makedirs(LOG_DIR, exist_ok=True)
        file_handler = RotatingFileHandler(
            LOG_FILE,
            maxBytes=5_000_000,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(fmt)
        root.addHandler(file_handler)

    ring = get_ring_handler()
    ring.setFormatter(fmt)
    min_level_name = os.getenv("RING_BUFFER_MIN_LEVEL", "INFO").upper()
    ring.setLevel(getattr(logging, min_level_name, logging.INFO))
    if ring not in root.handlers:
        root.addHandler(ring)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("neo4j").setLevel(logging.WARNING)
