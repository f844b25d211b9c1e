"""
Long-running agent: ingest IntentCreated events from the hook and process them.

Usage:
    HOOK_ADDRESS=0x... intentbridge-agent [--network base-sepolia] [--log-level INFO]
"""
import argparse
import logging
import os
import queue
import sys
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import List, Optional, Set, Tuple

from .bridge.client import CctpClient
from .config import AgentConfig
from .events.channel import ChannelClosed
from .events.listener import HookEventListener
from .exceptions import ConfigError
from .models import IntentStatus
from .nonces import CallbackNonceRegistry
from .orchestrator import IntentOrchestrator
from .service import IntentService
from .store import InMemoryIntentStore
from .version import __version__

logger = logging.getLogger(__name__)


def build_service(config: AgentConfig) -> IntentService:
    """Wire the bridge client, nonce registry, orchestrator and store for ``config``."""
    cctp = CctpClient(attestation_url=config.attestation_url, contracts=config.contracts)
    registry = CallbackNonceRegistry(timeout=config.nonce_timeout)
    orchestrator = IntentOrchestrator(
        cctp,
        registry,
        evm_chain=config.evm_chain,
        attestation_attempts=config.attestation_attempts,
        attestation_interval=config.attestation_interval,
    )
    return IntentService(orchestrator, InMemoryIntentStore(), nonce_registry=registry)


def _collect_finished(futures: Set[Future]) -> int:
    """Drop finished futures from ``futures``; return how many completed their intent."""
    done = {f for f in futures if f.done()}
    futures.difference_update(done)
    completed = 0
    for future in done:
        if future.cancelled():
            continue
        error = future.exception()
        if error is not None:
            logger.error(f"Intent handler failed: {error!r}")
            continue
        intent = future.result()
        if intent is not None and intent.status is IntentStatus.COMPLETED:
            completed += 1
    return completed


def run_agent(
    config: AgentConfig,
    service: Optional[IntentService] = None,
    listener: Optional[HookEventListener] = None,
    stop_event: Optional[threading.Event] = None
) -> Tuple[int, int]:
    """
    Consume hook events until the listener stops or ``stop_event`` is set.

    Each event is handled on a pool of ``config.workers`` threads, so an
    intent waiting for its burn nonce does not hold up the events behind it.
    Intents already being handled finish before this returns.

    Args:
        config: Agent configuration
        service: Intent service (built from ``config`` if omitted)
        listener: Event listener (built from ``config`` if omitted)
        stop_event: Optional event that ends the loop when set

    Returns:
        Tuple of (events handled, intents completed)
    """
    service = service or build_service(config)
    listener = listener or HookEventListener.for_endpoint(
        config.rpc_url,
        config.hook_address,
        poll_interval=config.poll_interval,
        capacity=config.channel_capacity,
    )
    stop_event = stop_event or threading.Event()

    logger.info(
        f"Starting intentbridge agent {__version__} on {config.network} "
        f"(hook={config.hook_address}, rpc={config.rpc_url}, workers={config.workers})"
    )
    executor = ThreadPoolExecutor(max_workers=config.workers, thread_name_prefix="intent-worker")
    in_flight: Set[Future] = set()
    channel = listener.start()
    handled = completed = 0
    try:
        while not stop_event.is_set():
            try:
                event = channel.recv(timeout=1.0)
            except ChannelClosed:
                logger.info("Event channel closed")
                break
            except queue.Empty:
                completed += _collect_finished(in_flight)
                continue
            handled += 1
            in_flight.add(executor.submit(service.handle_event, event))
            completed += _collect_finished(in_flight)
    finally:
        listener.stop()
        executor.shutdown(wait=True, cancel_futures=True)
    completed += _collect_finished(in_flight)

    logger.info(f"Agent stopped: {handled} events handled, {completed} intents completed")
    return handled, completed


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="intentbridge-agent",
        description="Process cross-chain intents emitted by the hook contract",
    )
    parser.add_argument("--network", help="Network preset (overrides INTENT_BRIDGE_NETWORK)")
    parser.add_argument("--rpc-url", help="EVM RPC endpoint; ws:// or wss:// enables push mode")
    parser.add_argument("--hook-address", help="Hook contract address (overrides HOOK_ADDRESS)")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    env = dict(os.environ)
    if args.network:
        env["INTENT_BRIDGE_NETWORK"] = args.network
    if args.rpc_url:
        env["EVM_RPC_URL"] = args.rpc_url
    if args.hook_address:
        env["HOOK_ADDRESS"] = args.hook_address

    try:
        config = AgentConfig.from_env(env)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 2

    stop_event = threading.Event()
    try:
        run_agent(config, stop_event=stop_event)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
        stop_event.set()
    return 0


if __name__ == "__main__":
    sys.exit(main())
