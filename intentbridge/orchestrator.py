"""
Intent orchestrator - drives cross-chain intents through their lifecycle.

Non-custodial: every on-chain step is an unsigned parameter record. The
orchestrator waits for the external signer to report the burn nonce, polls
the attestation service and hands destination-side work to injected steps.

It keeps no intent table. Each call takes an event or an intent and
returns or mutates the intent; persisting it is the caller's job.

EVM -> Sui (IntentCreated from the hook):
    1. Hook swap produced USDC                        -> swap_completed
    2. depositForBurn params built, nonce reported    -> bridging
    3. Attestation complete, receiveMessage built     -> bridge_completed
    4. Yield deposit on Sui                           -> deposited -> completed

Sui -> EVM (created through the API):
    1. depositForBurn params built, nonce reported    -> bridging
    2. Attestation complete, receiveMessage built     -> bridge_completed
    3. Solver swap / delivery on the EVM chain        -> completed
"""
import logging
from typing import Optional, Protocol

from .bridge.client import CctpClient
from .bridge.domains import CctpDomain
from .bridge.types import DepositForBurnParams, DestinationChain, ReceiveMessageParams
from .models import (
    Direction, EvmChain, Intent, IntentCreatedEvent, IntentStatus, YieldStrategy,
)
from .nonces import BurnSubmission
from .utils import parse_positive_u64, parse_u64

logger = logging.getLogger(__name__)

DEFAULT_ATTESTATION_ATTEMPTS = 60
DEFAULT_ATTESTATION_INTERVAL = 5.0


class NonceSource(Protocol):
    """Supplies the burn nonce once the signer has submitted depositForBurn."""

    def await_nonce(self, intent: Intent, params: DepositForBurnParams) -> BurnSubmission:
        ...


class DepositStep(Protocol):
    """Destination-side yield deposit for EVM -> Sui intents."""

    def deposit(self, intent: Intent, receive_params: ReceiveMessageParams) -> Optional[str]:
        """Return the destination transaction hash if known. Raise BridgeFailedError on failure."""
        ...


class DeliveryStep(Protocol):
    """Destination-side swap and delivery for Sui -> EVM intents."""

    def deliver(self, intent: Intent, receive_params: ReceiveMessageParams) -> Optional[str]:
        """Return the destination transaction hash if known. Raise BridgeFailedError on failure."""
        ...


class HandOffStep:
    """
    Default destination step: the transaction is built and signed outside
    this process, so there is nothing to execute and no hash to record.
    """

    def deposit(self, intent: Intent, receive_params: ReceiveMessageParams) -> Optional[str]:
        strategy = intent.strategy.name if intent.strategy else "none"
        logger.info(f"Intent {intent.id}: deposit into {strategy} handed off for signing")
        return None

    def deliver(self, intent: Intent, receive_params: ReceiveMessageParams) -> Optional[str]:
        logger.info(f"Intent {intent.id}: delivery on {intent.evm_chain.value} handed off to solver")
        return None


class IntentOrchestrator:
    """
    Orchestrates cross-chain intent execution in both directions.
    """

    def __init__(
        self,
        cctp: CctpClient,
        nonce_source: NonceSource,
        deposit_step: Optional[DepositStep] = None,
        delivery_step: Optional[DeliveryStep] = None,
        evm_chain: EvmChain = EvmChain.BASE_SEPOLIA,
        attestation_attempts: int = DEFAULT_ATTESTATION_ATTEMPTS,
        attestation_interval: float = DEFAULT_ATTESTATION_INTERVAL,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the orchestrator

        Args:
            cctp: Bridge client
            nonce_source: Provider of burn nonces reported by the signer
            deposit_step: Yield deposit on Sui (defaults to hand-off)
            delivery_step: Swap / delivery on the EVM chain (defaults to hand-off)
            evm_chain: EVM chain the hook lives on
            attestation_attempts: Attestation lookups before giving up
            attestation_interval: Seconds between attestation lookups
            logger: Optional logger instance
        """
        self.cctp = cctp
        self.nonce_source = nonce_source
        self.deposit_step = deposit_step or HandOffStep()
        self.delivery_step = delivery_step or HandOffStep()
        self.evm_chain = evm_chain
        self.attestation_attempts = attestation_attempts
        self.attestation_interval = attestation_interval
        self.logger = logger or logging.getLogger(__name__)

    @property
    def evm_destination(self) -> DestinationChain:
        if self.evm_chain.is_testnet:
            return DestinationChain.BASE_SEPOLIA
        return DestinationChain.BASE

    def intent_from_event(self, event: IntentCreatedEvent) -> Intent:
        """Build the Pending intent described by a hook event."""
        intent = Intent.new_evm_to_sui(
            event.intent_id,
            event.user,
            event.sui_destination,
            self.evm_chain,
            event.input_token,
            event.input_amount,
            YieldStrategy.from_id(event.strategy_id),
        )
        intent.usdc_amount = event.usdc_amount
        intent.swap_tx_hash = event.transaction_hash
        return intent

    def build_deposit_params(self, intent: Intent) -> DepositForBurnParams:
        """
        Build the depositForBurn record for an intent without changing it.

        Raises:
            InvalidAmountError: If usdc_amount is missing, zero or unparsable
        """
        amount = parse_positive_u64(intent.usdc_amount)
        domain = CctpDomain.SUI if intent.direction is Direction.EVM_TO_SUI else CctpDomain.BASE
        return self.cctp.build_deposit_for_burn(amount, domain, intent.dest_address)

    def _bridge(
        self,
        intent: Intent,
        params: DepositForBurnParams,
        destination: DestinationChain
    ) -> ReceiveMessageParams:
        if intent.status is IntentStatus.BRIDGING and intent.bridge_nonce:
            self.logger.info(f"Intent {intent.id}: resuming attestation polling, nonce={intent.bridge_nonce}")
        else:
            submission = self.nonce_source.await_nonce(intent, params)
            intent.bridge_nonce = submission.nonce
            if submission.tx_hash:
                intent.bridge_tx_hash = submission.tx_hash
            intent.set_status(IntentStatus.BRIDGING)
            self.logger.info(f"Intent {intent.id}: bridging, nonce={submission.nonce}")

        attestation = self.cctp.poll_attestation(
            intent.bridge_nonce, self.attestation_attempts, self.attestation_interval
        )
        receive_params = self.cctp.build_receive_message(attestation, destination)
        intent.set_status(IntentStatus.BRIDGE_COMPLETED)
        self.logger.info(f"Intent {intent.id}: attestation received, bridge completed")
        return receive_params

    def process_evm_to_sui(self, event: IntentCreatedEvent) -> Intent:
        """
        Process an EVM -> Sui intent triggered by a hook event.

        Args:
            event: Decoded IntentCreated event

        Returns:
            The completed intent

        Raises:
            InvalidAmountError: If the event's usdc_amount is not a u64
            BridgeError: Bridge client and step errors, unchanged
        """
        self.logger.info(f"EVM->Sui: intent={event.intent_id}")
        intent = self.intent_from_event(event)
        self.advance_evm_to_sui(intent)
        return intent

    def advance_evm_to_sui(self, intent: Intent) -> None:
        """
        Drive an EVM -> Sui intent to completion. Mutates ``intent``, so the
        caller keeps whatever progress was made when a step raises.

        A Bridging intent that already carries a nonce resumes at attestation
        polling instead of waiting for a new burn.

        Raises:
            ValueError: If the intent is not an EVM -> Sui intent
            InvalidAmountError: If usdc_amount is not a u64
            BridgeError: Bridge client and step errors, unchanged
        """
        if intent.direction is not Direction.EVM_TO_SUI:
            raise ValueError(f"Intent {intent.id} is not an evm_to_sui intent")

        if intent.status is IntentStatus.PENDING:
            intent.set_status(IntentStatus.SWAP_COMPLETED)
            self.logger.info(f"EVM->Sui: swap completed, usdc_amount={intent.usdc_amount}")

        usdc_amount = parse_u64(intent.usdc_amount)
        params = self.cctp.build_deposit_for_burn(usdc_amount, CctpDomain.SUI, intent.dest_address)
        self.logger.info(
            f"EVM->Sui: depositForBurn params ready "
            f"(amount={usdc_amount}, dest_domain={int(CctpDomain.SUI)})"
        )

        receive_params = self._bridge(intent, params, DestinationChain.SUI)

        dest_tx_hash = self.deposit_step.deposit(intent, receive_params)
        if dest_tx_hash:
            intent.dest_tx_hash = dest_tx_hash
        intent.set_status(IntentStatus.DEPOSITED)
        intent.set_status(IntentStatus.COMPLETED)
        self.logger.info(f"EVM->Sui: intent {intent.id} completed")

    def process_sui_to_evm(self, intent: Intent) -> None:
        """
        Process a Sui -> EVM intent created through the API. Mutates ``intent``.

        Raises:
            ValueError: If the intent is not a Sui -> EVM intent
            InvalidAmountError: If usdc_amount is missing, zero or unparsable;
                the intent is left unchanged
            BridgeError: Bridge client and step errors, unchanged
        """
        self.logger.info(f"Sui->EVM: intent={intent.id}")
        if intent.direction is not Direction.SUI_TO_EVM:
            raise ValueError(f"Intent {intent.id} is not a sui_to_evm intent")

        usdc_amount = parse_positive_u64(intent.usdc_amount)
        params = self.cctp.build_deposit_for_burn(usdc_amount, CctpDomain.BASE, intent.dest_address)
        self.logger.info(
            f"Sui->EVM: depositForBurn params ready "
            f"(amount={usdc_amount}, dest_domain={int(CctpDomain.BASE)})"
        )

        receive_params = self._bridge(intent, params, self.evm_destination)

        dest_tx_hash = self.delivery_step.deliver(intent, receive_params)
        if dest_tx_hash:
            intent.dest_tx_hash = dest_tx_hash
        intent.set_status(IntentStatus.COMPLETED)
        self.logger.info(f"Sui->EVM: intent {intent.id} completed, assets delivered")
