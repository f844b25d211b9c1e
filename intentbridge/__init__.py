"""
intentbridge - cross-chain intent orchestration between EVM chains and Sui over CCTP.
"""
from .version import __version__
from .exceptions import (
    IntentBridgeError, ConfigError, InvalidAmountError, InvalidTransitionError,
    IntentNotFoundError, LogDecodeError, BridgeError, BridgeRequestError, BridgeApiError,
    BridgeParseError, AttestationTimeoutError, BridgeFailedError, BridgeTimeoutError,
)
from .models import (
    BridgeStatus, CreateIntentRequest, Direction, EvmChain, Intent, IntentCreatedEvent,
    IntentStatus, StrategyKind, YieldStrategy, allowed_transitions, list_strategies,
)
from .bridge import CctpClient, CctpDomain
from .events import EventChannel, HookEventListener
from .nonces import BurnSubmission, CallbackNonceRegistry
from .orchestrator import IntentOrchestrator
from .service import IntentService
from .store import InMemoryIntentStore, IntentStore
from .config import AgentConfig, NetworkConfig

__all__ = [
    "__version__",
    "IntentBridgeError",
    "ConfigError",
    "InvalidAmountError",
    "InvalidTransitionError",
    "IntentNotFoundError",
    "LogDecodeError",
    "BridgeError",
    "BridgeRequestError",
    "BridgeApiError",
    "BridgeParseError",
    "AttestationTimeoutError",
    "BridgeFailedError",
    "BridgeTimeoutError",
    "BridgeStatus",
    "CreateIntentRequest",
    "Direction",
    "EvmChain",
    "Intent",
    "IntentCreatedEvent",
    "IntentStatus",
    "StrategyKind",
    "YieldStrategy",
    "allowed_transitions",
    "list_strategies",
    "CctpClient",
    "CctpDomain",
    "EventChannel",
    "HookEventListener",
    "BurnSubmission",
    "CallbackNonceRegistry",
    "IntentOrchestrator",
    "IntentService",
    "InMemoryIntentStore",
    "IntentStore",
    "AgentConfig",
    "NetworkConfig",
]
