"""
ABI definitions and log decoding for the intent hook contract.
"""
from typing import Any, Mapping, Union

from eth_abi import decode
from eth_abi.exceptions import DecodingError
from web3 import Web3

from ..exceptions import LogDecodeError
from ..models import IntentCreatedEvent


INTENT_CREATED_SIGNATURE = (
    "IntentCreated(bytes32,address,bytes32,address,uint256,uint256,uint8,uint256)"
)
INTENT_CREATED_TOPIC = "0x" + bytes(Web3.keccak(text=INTENT_CREATED_SIGNATURE)).hex()

# Non-indexed fields, in log data order
_DATA_TYPES = ["bytes32", "address", "uint256", "uint256", "uint8", "uint256"]

INTENT_HOOK_ABI = [
    {
        "anonymous": False,
        "inputs": [
            {"indexed": True, "internalType": "bytes32", "name": "intentId", "type": "bytes32"},
            {"indexed": True, "internalType": "address", "name": "user", "type": "address"},
            {"indexed": False, "internalType": "bytes32", "name": "suiDestination", "type": "bytes32"},
            {"indexed": False, "internalType": "address", "name": "inputToken", "type": "address"},
            {"indexed": False, "internalType": "uint256", "name": "inputAmount", "type": "uint256"},
            {"indexed": False, "internalType": "uint256", "name": "usdcAmount", "type": "uint256"},
            {"indexed": False, "internalType": "uint8", "name": "strategyId", "type": "uint8"},
            {"indexed": False, "internalType": "uint256", "name": "timestamp", "type": "uint256"}
        ],
        "name": "IntentCreated",
        "type": "event"
    }
]


def _to_bytes(value: Union[str, bytes, bytearray]) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    return Web3.to_bytes(hexstr=value)


def _to_hex(value: Union[str, bytes, bytearray, None]):
    if value is None or isinstance(value, str):
        return value
    return "0x" + bytes(value).hex()


def _to_int(value: Union[int, str, None]):
    if value is None or isinstance(value, int):
        return value
    return int(value, 16)


def decode_intent_created(log: Mapping[str, Any]) -> IntentCreatedEvent:
    """
    Decode an ``IntentCreated`` log.

    Accepts both raw JSON-RPC logs (hex strings) and web3 AttributeDicts
    (bytes values).

    Args:
        log: The log entry

    Returns:
        The decoded event

    Raises:
        LogDecodeError: If the log is not a well-formed IntentCreated log
    """
    try:
        topics = [_to_bytes(t) for t in log["topics"]]
        if len(topics) != 3:
            raise LogDecodeError(f"Expected 3 topics, got {len(topics)}")
        if "0x" + topics[0].hex() != INTENT_CREATED_TOPIC:
            raise LogDecodeError(f"Unexpected event signature: 0x{topics[0].hex()}")

        (sui_destination, input_token, input_amount,
         usdc_amount, strategy_id, timestamp) = decode(_DATA_TYPES, _to_bytes(log["data"]))

        return IntentCreatedEvent(
            intent_id="0x" + topics[1].hex(),
            user=Web3.to_checksum_address(topics[2][-20:]),
            sui_destination="0x" + sui_destination.hex(),
            input_token=Web3.to_checksum_address(input_token),
            input_amount=str(input_amount),
            usdc_amount=str(usdc_amount),
            strategy_id=strategy_id,
            timestamp=timestamp,
            block_number=_to_int(log.get("blockNumber")),
            transaction_hash=_to_hex(log.get("transactionHash")),
        )
    except LogDecodeError:
        raise
    except (DecodingError, KeyError, TypeError, ValueError) as e:
        raise LogDecodeError(f"Failed to decode IntentCreated log: {str(e)}") from e
