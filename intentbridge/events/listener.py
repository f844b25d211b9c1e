"""
Event listener for IntentCreated events emitted by the hook contract.

Two log sources are available and one is chosen when the listener is built,
from the RPC endpoint's scheme:

- ``ws://`` / ``wss://``: ``SubscriptionLogSource`` subscribes to logs and
  forwards them as the node pushes them.
- anything else: ``PollingLogSource`` queries new block ranges on a fixed
  interval over HTTP.

Decoded events go to a bounded ``EventChannel`` read by a single consumer.
Delivery is at-least-once: no deduplication and no reorg handling.
"""
import json
import logging
import threading
import urllib.parse
from typing import Any, Callable, Dict, Optional, Protocol

import requests
from web3 import Web3
from web3.exceptions import Web3Exception
from websockets.exceptions import ConnectionClosed, WebSocketException
from websockets.sync.client import connect as ws_connect

from ..exceptions import LogDecodeError
from ..models import IntentCreatedEvent
from ._rate_limited_log import RateLimitedLogger
from .abi import INTENT_CREATED_TOPIC, decode_intent_created
from .channel import DEFAULT_CAPACITY, EventChannel

logger = logging.getLogger(__name__)

# Returns False when the consumer is gone and the source must stop
Deliver = Callable[[IntentCreatedEvent], bool]


class LogSource(Protocol):
    """Produces decoded IntentCreated events until stopped or delivery fails."""

    def run(self, deliver: Deliver, stop_event: threading.Event) -> None:
        ...


def _forward(log: Dict[str, Any], deliver: Deliver) -> bool:
    """Decode one log and deliver it. Undecodable logs are skipped."""
    try:
        event = decode_intent_created(log)
    except LogDecodeError as e:
        logger.warning(f"Failed to parse log: {e}")
        return True
    logger.info(f"Received IntentCreated event: {event.intent_id}")
    return deliver(event)


class PollingLogSource:
    """
    Scan new blocks for hook logs over HTTP.

    Each tick reads the head block and, when it moved past
    ``last_seen_block``, queries logs over ``(last_seen_block, head]``.
    ``last_seen_block`` then advances to the head whether or not logs were
    found.
    """

    def __init__(
        self,
        w3: Web3,
        hook_address: str,
        poll_interval: float = 5.0,
        rate_logger: Optional[RateLimitedLogger] = None
    ):
        self.w3 = w3
        self.hook_address = Web3.to_checksum_address(hook_address)
        self.poll_interval = poll_interval
        self.last_seen_block: Optional[int] = None
        self.rate_logger = rate_logger or RateLimitedLogger(logger)

    @classmethod
    def from_url(cls, rpc_url: str, hook_address: str, poll_interval: float = 5.0) -> "PollingLogSource":
        return cls(Web3(Web3.HTTPProvider(rpc_url)), hook_address, poll_interval)

    def poll_once(self, deliver: Deliver) -> bool:
        """
        Run one scan.

        Returns:
            False if delivery failed and polling must stop
        """
        if self.last_seen_block is None:
            self.last_seen_block = self.w3.eth.block_number
            return True

        current_block = self.w3.eth.block_number
        if current_block <= self.last_seen_block:
            return True

        filter_params = {
            "address": self.hook_address,
            "topics": [INTENT_CREATED_TOPIC],
            "fromBlock": self.last_seen_block + 1,
            "toBlock": current_block,
        }
        try:
            logs = self.w3.eth.get_logs(filter_params)
        except (Web3Exception, requests.RequestException, ValueError) as e:
            self.rate_logger.warning(f"Failed to get logs: {e}", key=f"get_logs:{type(e).__name__}")
            logs = []

        logger.debug(
            f"Scanned blocks {self.last_seen_block + 1}..{current_block}: {len(logs)} logs"
        )
        self.last_seen_block = current_block

        for log in logs:
            if not _forward(log, deliver):
                return False
        return True

    def run(self, deliver: Deliver, stop_event: threading.Event) -> None:
        logger.info(
            f"Starting polling event listener on {self.hook_address} "
            f"(interval: {self.poll_interval}s)"
        )
        while not stop_event.is_set():
            try:
                if not self.poll_once(deliver):
                    return
            except (Web3Exception, requests.RequestException, ValueError) as e:
                self.rate_logger.warning(f"Failed to read block number: {e}", key="block_number")
            stop_event.wait(self.poll_interval)


class SubscriptionLogSource:
    """Receive hook logs pushed by the node over a websocket subscription."""

    SUBSCRIBE_REQUEST_ID = 1

    def __init__(
        self,
        ws_url: str,
        hook_address: str,
        connect: Callable[..., Any] = ws_connect,
        recv_timeout: float = 1.0
    ):
        self.ws_url = ws_url
        self.hook_address = Web3.to_checksum_address(hook_address)
        self._connect = connect
        self.recv_timeout = recv_timeout
        self.subscription_id: Optional[str] = None

    def subscribe_request(self) -> str:
        return json.dumps({
            "jsonrpc": "2.0",
            "id": self.SUBSCRIBE_REQUEST_ID,
            "method": "eth_subscribe",
            "params": ["logs", {"address": self.hook_address, "topics": [INTENT_CREATED_TOPIC]}],
        })

    def handle_message(self, raw: str, deliver: Deliver) -> bool:
        """
        Process one websocket frame.

        Returns:
            False if the source must stop
        """
        try:
            message = json.loads(raw)
        except ValueError:
            logger.warning(f"Ignoring non-JSON websocket frame: {raw[:100]!r}")
            return True

        if message.get("id") == self.SUBSCRIBE_REQUEST_ID:
            if "error" in message:
                logger.error(f"Log subscription rejected: {message['error']}")
                return False
            self.subscription_id = message.get("result")
            logger.info(f"Subscribed to IntentCreated events ({self.subscription_id})")
            return True

        if message.get("method") != "eth_subscription":
            return True
        params = message.get("params") or {}
        if self.subscription_id is not None and params.get("subscription") != self.subscription_id:
            return True
        log = params.get("result")
        if not isinstance(log, dict):
            logger.warning(f"Ignoring subscription frame without a log: {params}")
            return True
        return _forward(log, deliver)

    def run(self, deliver: Deliver, stop_event: threading.Event) -> None:
        logger.info(f"Starting WebSocket event listener on {self.hook_address}")
        with self._connect(self.ws_url) as ws:
            ws.send(self.subscribe_request())
            while not stop_event.is_set():
                try:
                    raw = ws.recv(timeout=self.recv_timeout)
                except TimeoutError:
                    continue
                except ConnectionClosed as e:
                    logger.warning(f"Log subscription closed: {e}")
                    return
                if not self.handle_message(raw, deliver):
                    return


def select_log_source(rpc_url: str, hook_address: str, poll_interval: float = 5.0) -> LogSource:
    """
    Choose the log source for an endpoint.

    Args:
        rpc_url: Chain RPC endpoint
        hook_address: Hook contract address
        poll_interval: Seconds between scans in polling mode

    Returns:
        ``SubscriptionLogSource`` for ws/wss endpoints, else ``PollingLogSource``
    """
    scheme = urllib.parse.urlparse(rpc_url).scheme
    if scheme in ("ws", "wss"):
        return SubscriptionLogSource(rpc_url, hook_address)
    return PollingLogSource.from_url(rpc_url, hook_address, poll_interval)


class HookEventListener:
    """
    Run a log source on a background thread and expose its events as a channel.
    """

    def __init__(
        self,
        source: LogSource,
        capacity: int = DEFAULT_CAPACITY,
        send_timeout: Optional[float] = 30.0
    ):
        self.source = source
        self.capacity = capacity
        self.send_timeout = send_timeout
        self.channel: Optional[EventChannel[IntentCreatedEvent]] = None
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @classmethod
    def for_endpoint(
        cls,
        rpc_url: str,
        hook_address: str,
        poll_interval: float = 5.0,
        **kwargs
    ) -> "HookEventListener":
        return cls(select_log_source(rpc_url, hook_address, poll_interval), **kwargs)

    def start(self) -> EventChannel[IntentCreatedEvent]:
        """
        Start listening.

        Returns:
            Channel receiving events in emission order. It is closed when the
            listener stops for any reason.
        """
        if self._thread is not None:
            raise RuntimeError("Listener already started")
        self.channel = EventChannel(self.capacity, send_timeout=self.send_timeout)
        self._thread = threading.Thread(target=self._run, name="intent-event-listener", daemon=True)
        self._thread.start()
        return self.channel

    def _deliver(self, event: IntentCreatedEvent) -> bool:
        if self._stop.is_set() or not self.channel.send(event):
            logger.warning("Event channel closed, stopping listener")
            return False
        return True

    def _run(self) -> None:
        try:
            self.source.run(self._deliver, self._stop)
        except (Web3Exception, WebSocketException, requests.RequestException, OSError, ValueError) as e:
            logger.error(f"Event listener error: {e}")
        finally:
            self.channel.close()

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        """Stop the background thread and close the channel."""
        self._stop.set()
        if self.channel is not None:
            self.channel.close()
        if self._thread is not None:
            self._thread.join(timeout)

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
