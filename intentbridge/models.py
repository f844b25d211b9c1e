"""
Data models for the intentbridge package.

An Intent is a user's declared cross-chain migration request. Its status
moves forward through a fixed lifecycle; the only way to change it is
``Intent.set_status``, which rejects transitions the lifecycle does not
allow for the intent's direction.
"""
import time
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import InvalidTransitionError


class Direction(str, Enum):
    """Direction of an intent between the EVM side and Sui."""
    EVM_TO_SUI = "evm_to_sui"
    SUI_TO_EVM = "sui_to_evm"


class EvmChain(str, Enum):
    """Supported EVM chains."""
    ETHEREUM = "ethereum"
    BASE = "base"
    ARBITRUM = "arbitrum"
    OPTIMISM = "optimism"
    BASE_SEPOLIA = "base_sepolia"
    SEPOLIA = "sepolia"

    @property
    def chain_id(self) -> int:
        return _CHAIN_IDS[self]

    @property
    def is_testnet(self) -> bool:
        return self in (EvmChain.BASE_SEPOLIA, EvmChain.SEPOLIA)


_CHAIN_IDS: Dict[EvmChain, int] = {
    EvmChain.ETHEREUM: 1,
    EvmChain.BASE: 8453,
    EvmChain.ARBITRUM: 42161,
    EvmChain.OPTIMISM: 10,
    EvmChain.BASE_SEPOLIA: 84532,
    EvmChain.SEPOLIA: 11155111,
}


class IntentStatus(str, Enum):
    """Lifecycle states of an intent."""
    PENDING = "pending"
    SWAP_COMPLETED = "swap_completed"
    BRIDGING = "bridging"
    BRIDGE_COMPLETED = "bridge_completed"
    DEPOSITED = "deposited"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL


_TERMINAL: FrozenSet[IntentStatus] = frozenset(
    {IntentStatus.COMPLETED, IntentStatus.FAILED, IntentStatus.CANCELLED}
)

# Forward edges per direction. FAILED and CANCELLED are reachable from any
# non-terminal state and are not listed here.
_TRANSITIONS: Dict[Direction, Dict[IntentStatus, FrozenSet[IntentStatus]]] = {
    Direction.EVM_TO_SUI: {
        IntentStatus.PENDING: frozenset({IntentStatus.SWAP_COMPLETED, IntentStatus.BRIDGING}),
        IntentStatus.SWAP_COMPLETED: frozenset({IntentStatus.BRIDGING}),
        IntentStatus.BRIDGING: frozenset({IntentStatus.BRIDGE_COMPLETED}),
        IntentStatus.BRIDGE_COMPLETED: frozenset({IntentStatus.DEPOSITED}),
        IntentStatus.DEPOSITED: frozenset({IntentStatus.COMPLETED}),
    },
    Direction.SUI_TO_EVM: {
        IntentStatus.PENDING: frozenset({IntentStatus.BRIDGING}),
        IntentStatus.BRIDGING: frozenset({IntentStatus.BRIDGE_COMPLETED}),
        IntentStatus.BRIDGE_COMPLETED: frozenset({IntentStatus.COMPLETED}),
    },
}

# States that require a known USDC amount, per direction.
_NEEDS_USDC: Dict[Direction, FrozenSet[IntentStatus]] = {
    Direction.EVM_TO_SUI: frozenset({
        IntentStatus.BRIDGING, IntentStatus.BRIDGE_COMPLETED,
        IntentStatus.DEPOSITED, IntentStatus.COMPLETED,
    }),
    Direction.SUI_TO_EVM: frozenset({
        IntentStatus.BRIDGING, IntentStatus.BRIDGE_COMPLETED, IntentStatus.COMPLETED,
    }),
}

_NEEDS_NONCE: FrozenSet[IntentStatus] = frozenset({
    IntentStatus.BRIDGE_COMPLETED, IntentStatus.DEPOSITED, IntentStatus.COMPLETED,
})


def allowed_transitions(direction: Direction, current: IntentStatus) -> FrozenSet[IntentStatus]:
    """
    Return the statuses reachable in one step from ``current``.

    Args:
        direction: Direction of the intent
        current: Current status

    Returns:
        Set of statuses ``set_status`` will accept next (empty for terminal states)
    """
    if current.is_terminal:
        return frozenset()
    forward = _TRANSITIONS[direction].get(current, frozenset())
    return forward | {IntentStatus.FAILED, IntentStatus.CANCELLED}


class StrategyKind(str, Enum):
    """Known yield strategies on Sui, plus a catch-all for unrecognised ids."""
    SCALLOP_USDC = "scallop_usdc"
    SCALLOP_SUI = "scallop_sui"
    NAVI_USDC = "navi_usdc"
    NAVI_SUI = "navi_sui"
    CUSTOM = "custom"


# id -> (kind, display name, protocol, asset)
_STRATEGY_TABLE = {
    1: (StrategyKind.SCALLOP_USDC, "Scallop USDC Lending", "Scallop", "USDC"),
    2: (StrategyKind.SCALLOP_SUI, "Scallop SUI Lending", "Scallop", "SUI"),
    3: (StrategyKind.NAVI_USDC, "Navi USDC Lending", "Navi", "USDC"),
    4: (StrategyKind.NAVI_SUI, "Navi SUI Lending", "Navi", "SUI"),
}


class YieldStrategy(BaseModel):
    """Destination-side yield strategy, identified by its on-chain id."""
    model_config = ConfigDict(frozen=True)

    kind: StrategyKind
    id: int

    @classmethod
    def from_id(cls, strategy_id: int) -> "YieldStrategy":
        """Map an on-chain strategy id to a strategy. Unknown ids become CUSTOM."""
        entry = _STRATEGY_TABLE.get(strategy_id)
        if entry is None:
            return cls(kind=StrategyKind.CUSTOM, id=strategy_id)
        return cls(kind=entry[0], id=strategy_id)

    @property
    def name(self) -> str:
        if self.kind is StrategyKind.CUSTOM:
            return "Custom Strategy"
        return _STRATEGY_TABLE[self.id][1]

    @property
    def protocol(self) -> str:
        if self.kind is StrategyKind.CUSTOM:
            return "Custom"
        return _STRATEGY_TABLE[self.id][2]

    @property
    def asset(self) -> str:
        if self.kind is StrategyKind.CUSTOM:
            return "Unknown"
        return _STRATEGY_TABLE[self.id][3]

    @property
    def requires_sui_swap(self) -> bool:
        """Whether USDC must be swapped to SUI on Sui before depositing."""
        return self.kind in (StrategyKind.SCALLOP_SUI, StrategyKind.NAVI_SUI)


def list_strategies() -> List[YieldStrategy]:
    """Return the named strategies in id order."""
    return [YieldStrategy.from_id(strategy_id) for strategy_id in sorted(_STRATEGY_TABLE)]


class Intent(BaseModel):
    """A cross-chain migration request tracked through its lifecycle."""

    id: str = Field(..., frozen=True)
    direction: Direction = Field(..., frozen=True)
    status: IntentStatus = IntentStatus.PENDING
    source_address: str
    dest_address: str
    evm_chain: EvmChain
    input_token: str
    input_amount: str
    usdc_amount: Optional[str] = None
    strategy: Optional[YieldStrategy] = None
    bridge_nonce: Optional[str] = None
    swap_tx_hash: Optional[str] = None
    bridge_tx_hash: Optional[str] = None
    dest_tx_hash: Optional[str] = None
    error_message: Optional[str] = None
    created_at: int = Field(default_factory=lambda: int(time.time()), frozen=True)
    updated_at: int = Field(default_factory=lambda: int(time.time()))

    @classmethod
    def new_evm_to_sui(
        cls,
        intent_id: str,
        source_address: str,
        dest_address: str,
        evm_chain: EvmChain,
        input_token: str,
        input_amount: str,
        strategy: YieldStrategy,
    ) -> "Intent":
        return cls(
            id=intent_id,
            direction=Direction.EVM_TO_SUI,
            source_address=source_address,
            dest_address=dest_address,
            evm_chain=evm_chain,
            input_token=input_token,
            input_amount=input_amount,
            strategy=strategy,
        )

    @classmethod
    def new_sui_to_evm(
        cls,
        intent_id: str,
        source_address: str,
        dest_address: str,
        evm_chain: EvmChain,
        input_token: str,
        input_amount: str,
        usdc_amount: Optional[str] = None,
    ) -> "Intent":
        return cls(
            id=intent_id,
            direction=Direction.SUI_TO_EVM,
            source_address=source_address,
            dest_address=dest_address,
            evm_chain=evm_chain,
            input_token=input_token,
            input_amount=input_amount,
            usdc_amount=usdc_amount,
        )

    def set_status(self, status: IntentStatus) -> None:
        """
        Move the intent to ``status``.

        Args:
            status: Target status

        Raises:
            InvalidTransitionError: If the lifecycle does not allow the move, or
                the intent lacks the usdc_amount / bridge_nonce the target needs.
                The intent is left unchanged.
        """
        current = self.status
        if status not in allowed_transitions(self.direction, current):
            raise InvalidTransitionError(current.value, status.value)
        if status in _NEEDS_USDC[self.direction] and not self.usdc_amount:
            raise InvalidTransitionError(current.value, status.value, "usdc_amount is not set")
        if status in _NEEDS_NONCE and not self.bridge_nonce:
            raise InvalidTransitionError(current.value, status.value, "bridge_nonce is not set")

        self.status = status
        self.updated_at = int(time.time())

    @property
    def source_chain_name(self) -> str:
        if self.direction is Direction.EVM_TO_SUI:
            return self.evm_chain.value
        return "sui"

    @property
    def dest_chain_name(self) -> str:
        if self.direction is Direction.EVM_TO_SUI:
            return "sui"
        return self.evm_chain.value


class IntentCreatedEvent(BaseModel):
    """IntentCreated log emitted by the hook contract, in canonical form."""
    model_config = ConfigDict(frozen=True)

    intent_id: str = Field(..., pattern=r"^0x[0-9a-f]{64}$")
    user: str
    sui_destination: str = Field(..., pattern=r"^0x[0-9a-f]{64}$")
    input_token: str
    input_amount: str
    usdc_amount: str
    strategy_id: int = Field(..., ge=0, le=255)
    timestamp: int
    block_number: Optional[int] = None
    transaction_hash: Optional[str] = None


class CreateIntentRequest(BaseModel):
    """Payload accepted by the intent-creation entry point."""
    direction: Direction
    source_address: str
    dest_address: str
    evm_chain: EvmChain = EvmChain.BASE_SEPOLIA
    input_token: str
    input_amount: str
    usdc_amount: Optional[str] = None
    strategy_id: Optional[int] = Field(None, ge=0, le=255)


class BridgeStatus(BaseModel):
    """Bridge progress summary for one intent."""
    intent_id: str
    status: IntentStatus
    source_chain: str
    dest_chain: str
    amount: str
    nonce: Optional[str] = None
