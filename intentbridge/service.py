"""
Intent service - the entry points an API layer calls.

Wraps the orchestrator with persistence: intents are read from and written
back to an ``IntentStore`` around every orchestrator call. Orchestrator
errors are recorded on the intent and logged rather than raised, so an API
request that creates an intent still returns it.
"""
import logging
import uuid
from typing import List, Optional

from .bridge.types import DepositForBurnParams
from .exceptions import (
    BridgeFailedError, IntentBridgeError, IntentNotFoundError, InvalidTransitionError,
)
from .models import (
    BridgeStatus, CreateIntentRequest, Direction, Intent, IntentCreatedEvent, IntentStatus,
    YieldStrategy,
)
from .nonces import CallbackNonceRegistry
from .orchestrator import IntentOrchestrator
from .store import IntentStore

logger = logging.getLogger(__name__)


class IntentService:
    """Create, process and query intents."""

    def __init__(
        self,
        orchestrator: IntentOrchestrator,
        store: IntentStore,
        nonce_registry: Optional[CallbackNonceRegistry] = None
    ):
        self.orchestrator = orchestrator
        self.store = store
        self.nonce_registry = nonce_registry

    def _record_failure(self, intent: Intent, error: Exception) -> None:
        intent.error_message = str(error)
        if isinstance(error, BridgeFailedError) and not intent.status.is_terminal:
            intent.set_status(IntentStatus.FAILED)

    def create_intent(self, request: CreateIntentRequest, process: bool = True) -> Intent:
        """
        Create and store an intent. Sui -> EVM intents are processed immediately
        unless ``process`` is False.

        Args:
            request: Intent creation payload
            process: Run ``process_intent`` for Sui -> EVM intents before returning

        Returns:
            The stored intent, after processing where applicable

        Raises:
            ValueError: If an EVM -> Sui request has no strategy
        """
        intent_id = str(uuid.uuid4())
        logger.info(f"Creating intent: id={intent_id}, direction={request.direction.value}")

        if request.direction is Direction.EVM_TO_SUI:
            if request.strategy_id is None:
                raise ValueError("strategy_id is required for evm_to_sui intents")
            intent = Intent.new_evm_to_sui(
                intent_id,
                request.source_address,
                request.dest_address,
                request.evm_chain,
                request.input_token,
                request.input_amount,
                YieldStrategy.from_id(request.strategy_id),
            )
            intent.usdc_amount = request.usdc_amount
        else:
            intent = Intent.new_sui_to_evm(
                intent_id,
                request.source_address,
                request.dest_address,
                request.evm_chain,
                request.input_token,
                request.input_amount,
                request.usdc_amount or request.input_amount,
            )

        self.store.put(intent)
        logger.info(f"Intent {intent_id} stored with status {intent.status.value}")

        if intent.direction is Direction.SUI_TO_EVM and process:
            intent = self.process_intent(intent_id)

        return intent

    def _store_result(self, intent: Intent) -> Intent:
        stored = self.store.put_unless_terminal(intent)
        if stored.status is not intent.status:
            logger.warning(
                f"Intent {intent.id} reached {stored.status.value} while processing; "
                f"discarding {intent.status.value} result"
            )
        return stored

    def process_intent(self, intent_id: str) -> Intent:
        """
        Run the orchestrator on a stored intent and store the result.

        Pending intents start from the beginning. A Bridging intent that
        already has its burn nonce resumes at attestation polling, which is
        how an intent whose attestation timed out is retried.

        Blocks until the burn nonce is reported through ``submit_bridge_nonce``
        and the attestation completes, so API layers usually call this from a
        worker thread. If the intent was cancelled meanwhile, the cancellation
        is kept and returned.

        Raises:
            IntentNotFoundError: If the intent does not exist
            InvalidTransitionError: If the intent is neither Pending nor a
                resumable Bridging intent
        """
        intent = self.get_intent(intent_id)
        resumable = intent.status is IntentStatus.BRIDGING and intent.bridge_nonce
        if intent.status is not IntentStatus.PENDING and not resumable:
            raise InvalidTransitionError(
                intent.status.value, IntentStatus.BRIDGING.value, "intent is not pending"
            )

        try:
            if intent.direction is Direction.SUI_TO_EVM:
                self.orchestrator.process_sui_to_evm(intent)
            else:
                self.orchestrator.advance_evm_to_sui(intent)
            logger.info(f"Intent {intent_id} processed successfully")
        except IntentBridgeError as e:
            logger.error(f"Failed to process intent {intent_id}: {e}")
            self._record_failure(intent, e)
        return self._store_result(intent)

    def handle_event(self, event: IntentCreatedEvent) -> Intent:
        """
        Process an ingested hook event and store the resulting intent.

        Events are delivered at least once, so the same intent id may arrive
        again; the latest processing result overwrites the stored intent
        unless that intent is already terminal.

        Returns:
            The processed intent. If processing raised, the intent as far as
            it got, with ``error_message`` set
        """
        intent = self.orchestrator.intent_from_event(event)
        try:
            self.orchestrator.advance_evm_to_sui(intent)
            logger.info(f"Intent {intent.id} -> {intent.status.value}")
        except IntentBridgeError as e:
            logger.error(f"Failed to process intent {event.intent_id}: {e}")
            self._record_failure(intent, e)
        return self._store_result(intent)

    def get_intent(self, intent_id: str) -> Intent:
        intent = self.store.get(intent_id)
        if intent is None:
            raise IntentNotFoundError(intent_id)
        return intent

    def list_intents(self) -> List[Intent]:
        return self.store.list()

    def list_user_intents(self, address: str) -> List[Intent]:
        return self.store.list_by_creator(address)

    def cancel_intent(self, intent_id: str) -> Intent:
        """
        Cancel a non-terminal intent.

        Raises:
            IntentNotFoundError: If the intent does not exist
            InvalidTransitionError: If the intent is already terminal
        """
        intent = self.get_intent(intent_id)
        intent.set_status(IntentStatus.CANCELLED)
        stored = self.store.put_unless_terminal(intent)
        if stored.status is not IntentStatus.CANCELLED:
            raise InvalidTransitionError(stored.status.value, IntentStatus.CANCELLED.value)
        logger.info(f"Intent {intent_id} cancelled")
        return stored

    def deposit_params(self, intent_id: str) -> DepositForBurnParams:
        """Return the depositForBurn record the user's wallet must sign."""
        return self.orchestrator.build_deposit_params(self.get_intent(intent_id))

    def submit_bridge_nonce(self, intent_id: str, nonce: str, tx_hash: Optional[str] = None) -> None:
        """
        Report the burn nonce for an intent after the user's wallet submitted depositForBurn.

        Raises:
            RuntimeError: If the service has no nonce registry
        """
        if self.nonce_registry is None:
            raise RuntimeError("No nonce registry configured")
        self.nonce_registry.submit(intent_id, nonce, tx_hash)

    def bridge_status(self, intent_id: str) -> BridgeStatus:
        intent = self.get_intent(intent_id)
        return BridgeStatus(
            intent_id=intent.id,
            status=intent.status,
            source_chain=intent.source_chain_name,
            dest_chain=intent.dest_chain_name,
            amount=intent.usdc_amount or "0",
            nonce=intent.bridge_nonce,
        )
