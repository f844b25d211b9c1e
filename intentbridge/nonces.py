"""
Burn nonce hand-off between the API callback and the orchestrator.

The orchestrator never signs ``depositForBurn`` itself. Once the user's
wallet has submitted it, the frontend reports the burn nonce (and the
transaction hash) back through ``submit``; a thread blocked in
``await_nonce`` for that intent then resumes bridging.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Optional

from cachetools import TTLCache

from .bridge.types import DepositForBurnParams
from .exceptions import BridgeTimeoutError
from .models import Intent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BurnSubmission:
    """Result of a submitted ``depositForBurn``."""
    nonce: str
    tx_hash: Optional[str] = None


class CallbackNonceRegistry:
    """
    Thread-safe registry of submitted burn nonces, keyed by intent id.

    Submissions nobody waits for expire after ``ttl`` seconds.
    """

    def __init__(self, timeout: float = 600.0, ttl: int = 3600, maxsize: int = 1024):
        """
        Args:
            timeout: Seconds ``await_nonce`` waits for a submission
            ttl: Seconds an unclaimed submission is kept
            maxsize: Maximum number of unclaimed submissions
        """
        self.timeout = timeout
        self._submissions = TTLCache(maxsize=maxsize, ttl=ttl)
        self._cond = threading.Condition()

    def submit(self, intent_id: str, nonce: str, tx_hash: Optional[str] = None) -> None:
        """Record the burn for ``intent_id`` and wake any waiter."""
        if not nonce:
            raise ValueError("nonce must not be empty")
        with self._cond:
            self._submissions[intent_id] = BurnSubmission(nonce=nonce, tx_hash=tx_hash)
            self._cond.notify_all()
        logger.info(f"Burn nonce submitted for intent {intent_id}")

    def pending(self, intent_id: str) -> bool:
        with self._cond:
            return intent_id in self._submissions

    def await_nonce(self, intent: Intent, params: DepositForBurnParams) -> BurnSubmission:
        """
        Block until the burn for ``intent`` is submitted.

        Args:
            intent: Intent whose burn is awaited
            params: The depositForBurn parameters handed to the signer

        Returns:
            The submitted burn

        Raises:
            BridgeTimeoutError: If nothing is submitted within ``timeout`` seconds
        """
        logger.info(
            f"Waiting for depositForBurn of intent {intent.id} "
            f"(amount={params.amount}, dest_domain={params.destination_domain})"
        )
        with self._cond:
            found = self._cond.wait_for(lambda: intent.id in self._submissions, timeout=self.timeout)
            if not found:
                raise BridgeTimeoutError(
                    f"No burn submitted for intent {intent.id} within {self.timeout}s"
                )
            return self._submissions.pop(intent.id)
