"""
Pytest fixtures for the intentbridge tests.
"""
import time

import pytest
from eth_abi import encode
from web3 import Web3

from intentbridge.bridge.client import CctpClient
from intentbridge.config import NetworkConfig
from intentbridge.events.abi import INTENT_CREATED_TOPIC
from intentbridge.models import IntentCreatedEvent
from intentbridge.nonces import BurnSubmission

# Test constants
TEST_ATTESTATION_URL = "https://attestation.example.com/v1"
TEST_HOOK_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
TEST_USER = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
TEST_TOKEN = "0x036CbD53842c5426634e7929541eC2318f3dCF7e"
TEST_INTENT_ID = "0x" + "ab" * 32
TEST_SUI_DESTINATION = "0x" + "cd" * 32
TEST_NONCE = "123456"


# Make time.sleep instantaneous so attestation polling doesn't slow the suite down
@pytest.fixture(autouse=True)
def _fast_sleep(monkeypatch):
    monkeypatch.setattr(time, "sleep", lambda *_a, **_kw: None)


@pytest.fixture(autouse=True)
def _reset_network_cache():
    """Keep NetworkConfig's class-level cache from leaking between tests."""
    NetworkConfig._networks_cache = None
    yield
    NetworkConfig._networks_cache = None


def make_event(**overrides) -> IntentCreatedEvent:
    """Build a decoded IntentCreated event with sensible defaults."""
    fields = dict(
        intent_id=TEST_INTENT_ID,
        user=TEST_USER,
        sui_destination=TEST_SUI_DESTINATION,
        input_token=TEST_TOKEN,
        input_amount="1000000000000000000",
        usdc_amount="1500000",
        strategy_id=1,
        timestamp=1700000000,
        block_number=100,
        transaction_hash="0x" + "11" * 32,
    )
    fields.update(overrides)
    return IntentCreatedEvent(**fields)


def make_log(
    intent_id: str = TEST_INTENT_ID,
    user: str = TEST_USER,
    sui_destination: str = TEST_SUI_DESTINATION,
    input_token: str = TEST_TOKEN,
    input_amount: int = 10 ** 18,
    usdc_amount: int = 1_500_000,
    strategy_id: int = 1,
    timestamp: int = 1700000000,
    block_number=100,
    transaction_hash="0x" + "11" * 32,
) -> dict:
    """Build a raw JSON-RPC IntentCreated log (hex strings, as a node returns it)."""
    data = encode(
        ["bytes32", "address", "uint256", "uint256", "uint8", "uint256"],
        [
            bytes.fromhex(sui_destination[2:]),
            input_token,
            input_amount,
            usdc_amount,
            strategy_id,
            timestamp,
        ],
    )
    user_topic = "0x" + "00" * 12 + Web3.to_checksum_address(user)[2:].lower()
    return {
        "address": TEST_HOOK_ADDRESS,
        "topics": [INTENT_CREATED_TOPIC, intent_id, user_topic],
        "data": "0x" + data.hex(),
        "blockNumber": block_number,
        "transactionHash": transaction_hash,
    }


class FakeNonceSource:
    """Nonce source that answers immediately and records what it was asked."""

    def __init__(self, nonce: str = TEST_NONCE, tx_hash: str = "0x" + "22" * 32):
        self.nonce = nonce
        self.tx_hash = tx_hash
        self.calls = []

    def await_nonce(self, intent, params):
        self.calls.append((intent.id, params))
        return BurnSubmission(nonce=self.nonce, tx_hash=self.tx_hash)


@pytest.fixture
def cctp_client():
    return CctpClient(attestation_url=TEST_ATTESTATION_URL, retry_count=0, timeout=5)


@pytest.fixture
def nonce_source():
    return FakeNonceSource()


@pytest.fixture
def complete_attestation_body():
    return {
        "data": {
            "message": "0xdeadbeef",
            "attestation_signature": "0xfeedface",
            "status": "complete",
        }
    }
