"""
Tests for IntentCreated log decoding.
"""
import pytest
from hexbytes import HexBytes
from web3 import Web3

from intentbridge.events.abi import (
    INTENT_CREATED_SIGNATURE, INTENT_CREATED_TOPIC, INTENT_HOOK_ABI, decode_intent_created,
)
from intentbridge.exceptions import LogDecodeError
from conftest import TEST_INTENT_ID, TEST_SUI_DESTINATION, TEST_TOKEN, TEST_USER, make_log


def test_topic_matches_signature():
    assert INTENT_CREATED_TOPIC == "0x" + Web3.keccak(text=INTENT_CREATED_SIGNATURE).hex().removeprefix("0x")
    assert len(INTENT_CREATED_TOPIC) == 66
    assert INTENT_CREATED_TOPIC == INTENT_CREATED_TOPIC.lower()


def test_abi_matches_signature():
    event = INTENT_HOOK_ABI[0]
    types = ",".join(i["type"] for i in event["inputs"])
    assert f"{event['name']}({types})" == INTENT_CREATED_SIGNATURE
    assert [i["name"] for i in event["inputs"] if i["indexed"]] == ["intentId", "user"]


class TestDecode:

    def test_decodes_raw_rpc_log(self):
        event = decode_intent_created(make_log())
        assert event.intent_id == TEST_INTENT_ID
        assert event.user == TEST_USER
        assert event.sui_destination == TEST_SUI_DESTINATION
        assert event.input_token == TEST_TOKEN
        assert event.input_amount == str(10 ** 18)
        assert event.usdc_amount == "1500000"
        assert event.strategy_id == 1
        assert event.timestamp == 1700000000
        assert event.block_number == 100
        assert event.transaction_hash == "0x" + "11" * 32

    def test_decodes_web3_style_log(self):
        raw = make_log(block_number=None, transaction_hash=None)
        log = {
            "topics": [HexBytes(t) for t in raw["topics"]],
            "data": HexBytes(raw["data"]),
            "blockNumber": 12345,
            "transactionHash": HexBytes("0x" + "33" * 32),
        }
        event = decode_intent_created(log)
        assert event.intent_id == TEST_INTENT_ID
        assert event.block_number == 12345
        assert event.transaction_hash == "0x" + "33" * 32

    def test_hex_block_number(self):
        event = decode_intent_created(make_log(block_number="0x1f"))
        assert event.block_number == 31

    def test_addresses_are_checksummed(self):
        event = decode_intent_created(make_log(user=TEST_USER.lower(), input_token=TEST_TOKEN.lower()))
        assert event.user == TEST_USER
        assert event.input_token == TEST_TOKEN

    def test_uppercase_intent_id_canonicalized(self):
        log = make_log()
        log["topics"][1] = "0x" + "AB" * 32
        assert decode_intent_created(log).intent_id == TEST_INTENT_ID

    def test_strategy_and_large_amounts(self):
        event = decode_intent_created(make_log(strategy_id=255, usdc_amount=2 ** 64 - 1))
        assert event.strategy_id == 255
        assert event.usdc_amount == str(2 ** 64 - 1)

    def test_missing_block_metadata(self):
        log = make_log()
        del log["blockNumber"]
        del log["transactionHash"]
        event = decode_intent_created(log)
        assert event.block_number is None
        assert event.transaction_hash is None


class TestDecodeErrors:

    def test_wrong_topic_count(self):
        log = make_log()
        log["topics"] = log["topics"][:2]
        with pytest.raises(LogDecodeError, match="3 topics"):
            decode_intent_created(log)

    def test_wrong_signature(self):
        log = make_log()
        log["topics"][0] = "0x" + "00" * 32
        with pytest.raises(LogDecodeError, match="signature"):
            decode_intent_created(log)

    def test_truncated_data(self):
        log = make_log()
        log["data"] = log["data"][:100]
        with pytest.raises(LogDecodeError):
            decode_intent_created(log)

    def test_missing_data(self):
        log = make_log()
        del log["data"]
        with pytest.raises(LogDecodeError):
            decode_intent_created(log)

    def test_non_hex_topic(self):
        log = make_log()
        log["topics"][1] = "0xnothex"
        with pytest.raises(LogDecodeError):
            decode_intent_created(log)
