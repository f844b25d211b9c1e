"""
Tests for the burn nonce registry.
"""
import threading

import pytest

from intentbridge.bridge.client import CctpClient
from intentbridge.bridge.domains import CctpDomain
from intentbridge.exceptions import BridgeTimeoutError
from intentbridge.models import EvmChain, Intent
from intentbridge.nonces import BurnSubmission, CallbackNonceRegistry
from conftest import TEST_ATTESTATION_URL, TEST_USER


@pytest.fixture
def intent():
    return Intent.new_sui_to_evm(
        "intent-n", "0x" + "ee" * 32, TEST_USER, EvmChain.BASE_SEPOLIA, "0x2::sui::SUI", "10", "10",
    )


@pytest.fixture
def params(intent):
    return CctpClient(attestation_url=TEST_ATTESTATION_URL).build_deposit_for_burn(
        10, CctpDomain.BASE, intent.dest_address
    )


class TestCallbackNonceRegistry:

    def test_submitted_before_wait(self, intent, params):
        registry = CallbackNonceRegistry(timeout=1)
        registry.submit(intent.id, "99", "0xtx")
        assert registry.pending(intent.id)
        assert registry.await_nonce(intent, params) == BurnSubmission(nonce="99", tx_hash="0xtx")
        assert not registry.pending(intent.id)

    def test_submitted_from_another_thread(self, intent, params):
        registry = CallbackNonceRegistry(timeout=5)
        timer = threading.Timer(0.05, registry.submit, args=(intent.id, "77"))
        timer.start()
        submission = registry.await_nonce(intent, params)
        timer.join()
        assert submission.nonce == "77"
        assert submission.tx_hash is None

    def test_other_intents_do_not_wake_waiter(self, intent, params):
        registry = CallbackNonceRegistry(timeout=0.1)
        registry.submit("someone-else", "1")
        with pytest.raises(BridgeTimeoutError, match=intent.id):
            registry.await_nonce(intent, params)
        assert registry.pending("someone-else")

    def test_timeout(self, intent, params):
        registry = CallbackNonceRegistry(timeout=0.05)
        with pytest.raises(BridgeTimeoutError):
            registry.await_nonce(intent, params)

    def test_empty_nonce_rejected(self):
        with pytest.raises(ValueError):
            CallbackNonceRegistry().submit("intent", "")

    def test_resubmit_replaces(self, intent, params):
        registry = CallbackNonceRegistry(timeout=1)
        registry.submit(intent.id, "1")
        registry.submit(intent.id, "2")
        assert registry.await_nonce(intent, params).nonce == "2"
