"""
Bounded, order-preserving channel between the event listener and its consumer.
"""
import logging
import queue
import threading
import time
from typing import Generic, Iterator, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')

DEFAULT_CAPACITY = 100
_POLL_INTERVAL = 0.1


class ChannelClosed(Exception):
    """Raised by ``recv`` once the channel is closed and drained."""
    pass


class EventChannel(Generic[T]):
    """
    FIFO channel with a fixed capacity.

    A full channel applies backpressure to the producer for at most
    ``send_timeout`` seconds. After that, or once the consumer closes the
    channel, ``send`` returns False and the producer is expected to stop.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY, send_timeout: Optional[float] = 30.0):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self.send_timeout = send_timeout
        self._queue: "queue.Queue[T]" = queue.Queue(maxsize=capacity)
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def close(self) -> None:
        """Close the channel. Items already queued can still be received."""
        self._closed.set()

    def send(self, item: T) -> bool:
        """
        Queue an item.

        Returns:
            True if queued, False if the channel is closed or stayed full
            for longer than ``send_timeout``
        """
        deadline = None if self.send_timeout is None else time.monotonic() + self.send_timeout
        while not self.closed:
            try:
                self._queue.put(item, timeout=_POLL_INTERVAL)
                return True
            except queue.Full:
                if deadline is not None and time.monotonic() >= deadline:
                    logger.warning(f"Event channel full ({self.capacity} entries) for {self.send_timeout}s")
                    return False
        return False

    def recv(self, timeout: Optional[float] = None) -> T:
        """
        Take the next item, waiting up to ``timeout`` seconds (forever if None).

        Raises:
            ChannelClosed: If the channel is closed and empty
            queue.Empty: If the timeout expired with the channel still open
        """
        poll = _POLL_INTERVAL if timeout is None else min(timeout, _POLL_INTERVAL)
        remaining = timeout
        while True:
            try:
                return self._queue.get(timeout=poll)
            except queue.Empty:
                if self.closed and self._queue.empty():
                    raise ChannelClosed()
                if remaining is not None:
                    remaining -= poll
                    if remaining <= 0:
                        raise

    def __len__(self) -> int:
        return self._queue.qsize()

    def __iter__(self) -> Iterator[T]:
        while True:
            try:
                yield self.recv()
            except ChannelClosed:
                return
