"""
Exceptions for the intentbridge package.
"""
from typing import Optional


class IntentBridgeError(Exception):
    """Base exception for all intentbridge errors."""
    pass


class ConfigError(IntentBridgeError):
    """Raised when required configuration is missing or invalid."""
    pass


class InvalidAmountError(IntentBridgeError):
    """Raised when an intent carries an amount that cannot be bridged.

    Not retriable: the intent must be resubmitted with a valid amount.
    """

    def __init__(self, amount: Optional[str]):
        self.amount = amount
        super().__init__(f"Invalid amount: {amount}")


class InvalidTransitionError(IntentBridgeError):
    """Raised when a status change is not allowed by the lifecycle."""

    def __init__(self, current: str, target: str, reason: Optional[str] = None):
        self.current = current
        self.target = target
        message = f"Invalid status transition: {current} -> {target}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class IntentNotFoundError(IntentBridgeError):
    """Raised when an intent id is not present in the store."""

    def __init__(self, intent_id: str):
        self.intent_id = intent_id
        super().__init__(f"Intent not found: {intent_id}")


class LogDecodeError(IntentBridgeError):
    """Raised when a chain log cannot be decoded into an IntentCreatedEvent."""
    pass


class BridgeError(IntentBridgeError):
    """Base exception for bridge protocol errors."""
    pass


class BridgeRequestError(BridgeError):
    """Raised when the attestation service cannot be reached."""
    pass


class BridgeApiError(BridgeError):
    """Raised when the attestation service returns an error response."""

    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(f"Attestation API error ({status}): {message}")


class BridgeParseError(BridgeError):
    """Raised when an attestation response body is malformed."""
    pass


class AttestationTimeoutError(BridgeError):
    """Raised when attestation polling exhausts its attempts.

    The caller may poll again with the same nonce.
    """

    def __init__(self, nonce: str, attempts: int):
        self.nonce = nonce
        self.attempts = attempts
        super().__init__(f"Attestation polling timed out for nonce {nonce} after {attempts} attempts")


class BridgeFailedError(BridgeError):
    """Raised when a bridging step fails terminally; the intent should be marked failed."""
    pass


class BridgeTimeoutError(BridgeError):
    """Raised when waiting on an external bridging step times out."""
    pass
