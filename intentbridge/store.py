"""
Intent storage.

The orchestrator holds no state; callers read an intent from an
``IntentStore``, hand it to the orchestrator and write the result back.
"""
import threading
from typing import Dict, List, Optional, Protocol

from .models import Intent


class IntentStore(Protocol):
    """Keyed intent storage."""

    def get(self, intent_id: str) -> Optional[Intent]:
        ...

    def put(self, intent: Intent) -> None:
        ...

    def put_unless_terminal(self, intent: Intent) -> Intent:
        ...

    def list(self) -> List[Intent]:
        ...

    def list_by_creator(self, address: str) -> List[Intent]:
        ...


class InMemoryIntentStore:
    """
    Process-local store guarded by a lock.

    Intents are copied on the way in and out, so callers never share a
    mutable instance with the store or with each other.
    """

    def __init__(self):
        self._intents: Dict[str, Intent] = {}
        self._lock = threading.RLock()

    def get(self, intent_id: str) -> Optional[Intent]:
        with self._lock:
            intent = self._intents.get(intent_id)
            return intent.model_copy(deep=True) if intent else None

    def put(self, intent: Intent) -> None:
        with self._lock:
            self._intents[intent.id] = intent.model_copy(deep=True)

    def put_unless_terminal(self, intent: Intent) -> Intent:
        """
        Store ``intent`` unless the stored copy has already reached a terminal
        status, in which case the stored copy wins.

        Returns:
            The intent held by the store after the call
        """
        with self._lock:
            current = self._intents.get(intent.id)
            if current is not None and current.status.is_terminal:
                return current.model_copy(deep=True)
            self._intents[intent.id] = intent.model_copy(deep=True)
            return intent.model_copy(deep=True)

    def list(self) -> List[Intent]:
        with self._lock:
            intents = [i.model_copy(deep=True) for i in self._intents.values()]
        return sorted(intents, key=lambda i: i.created_at)

    def list_by_creator(self, address: str) -> List[Intent]:
        """List intents whose source_address matches ``address`` (case-insensitive)."""
        creator = address.lower()
        return [i for i in self.list() if i.source_address.lower() == creator]

    def __len__(self) -> int:
        with self._lock:
            return len(self._intents)
