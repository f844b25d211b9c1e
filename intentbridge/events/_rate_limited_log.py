"""
Thread-safe rate-limited logging for the event listener.

A listener that loses its RPC endpoint fails on every tick; this keeps one
warning per distinct failure per interval instead of one per tick.
"""
import logging
import threading
from typing import Optional

from cachetools import TTLCache

logger = logging.getLogger(__name__)


class RateLimitedLogger:
    """Emit each distinct message at most once per ``interval`` seconds."""

    def __init__(
        self,
        logger_instance: Optional[logging.Logger] = None,
        interval: int = 60,
        maxsize: int = 100
    ):
        self.logger = logger_instance or logger
        self._seen = TTLCache(maxsize=maxsize, ttl=interval)
        self._lock = threading.RLock()

    def log(self, message: str, level: str = "warning", key: Optional[str] = None) -> bool:
        """
        Log ``message`` unless the same key was logged within the interval.

        Args:
            message: Message to log
            level: Log level name (debug, info, warning, error, critical)
            key: Deduplication key; defaults to level and message

        Returns:
            True if the message was emitted
        """
        cache_key = key or f"{level}:{message}"
        with self._lock:
            if cache_key in self._seen:
                return False
            self._seen[cache_key] = True
        getattr(self.logger, level.lower(), self.logger.warning)(message)
        return True

    def warning(self, message: str, key: Optional[str] = None) -> bool:
        return self.log(message, level="warning", key=key)

    def reset(self) -> None:
        with self._lock:
            self._seen.clear()
