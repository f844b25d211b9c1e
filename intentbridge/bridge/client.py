"""
Circle CCTP client for USDC bridging between EVM chains and Sui.

Non-custodial: the client only builds unsigned parameter records and reads
the attestation service. Flow:

1. Source chain: ``depositForBurn`` burns USDC and emits a message
2. The attestation service signs the message
3. Destination chain: ``receiveMessage(message, attestation)`` mints USDC
"""
import logging
import os
import time
import urllib.parse
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..exceptions import (
    AttestationTimeoutError, BridgeApiError, BridgeParseError, BridgeRequestError,
)
from .types import (
    Attestation, AttestationApiResponse, CctpContracts, DepositForBurnParams,
    DestinationChain, ReceiveMessageParams,
)

logger = logging.getLogger(__name__)

ATTESTATION_TESTNET_URL = "https://iris-api-sandbox.circle.com/v1"
ATTESTATION_MAINNET_URL = "https://iris-api.circle.com/v1"

# Base Sepolia
TESTNET_CONTRACTS = CctpContracts(
    token_messenger="0x9f3B8679c73C2Fef8b59B4f3444d4e156fb70AA5",
    usdc="0x036CbD53842c5426634e7929541eC2318f3dCF7e",
    message_transmitter="0x7865fAfC2db2093669d92c0F33AeEF291086BEFD",
)

# Base mainnet
MAINNET_CONTRACTS = CctpContracts(
    token_messenger="0x1682Ae6375C4E4A97e4B583BC394c861A46D8962",
    usdc="0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913",
    message_transmitter="0xAD09780d193884d503182aD4588450C416D6F9D4",
)

ATTESTATION_COMPLETE = "complete"


def to_mint_recipient(address: str) -> str:
    """
    Left-pad a 20-byte EVM address to the 32-byte ``mintRecipient`` format.

    Args:
        address: Hex address with or without 0x prefix

    Returns:
        0x-prefixed, lowercase, 64 hex character string

    Raises:
        ValueError: If the address is not valid hex or longer than 32 bytes
    """
    value = address[2:] if address.lower().startswith("0x") else address
    try:
        bytes.fromhex(value if len(value) % 2 == 0 else "0" + value)
    except ValueError:
        raise ValueError(f"Address is not hex: {address}")
    if len(value) > 64:
        raise ValueError(f"Address longer than 32 bytes: {address}")
    return "0x" + value.lower().rjust(64, "0")


class CctpClient:
    """
    Client for the CCTP bridge.

    Builds ``depositForBurn`` / ``receiveMessage`` parameters for the
    frontend or a relayer to sign and submit, and reads the attestation
    service to learn when a burn can be minted on the destination chain.
    """

    def __init__(
        self,
        attestation_url: str = ATTESTATION_TESTNET_URL,
        contracts: CctpContracts = TESTNET_CONTRACTS,
        retry_count: int = 3,
        timeout: int = 30,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the CCTP client

        Args:
            attestation_url: Base URL of the attestation service (".../v1")
            contracts: CCTP contract addresses used in parameter records
            retry_count: Connection-level retries for HTTP requests
            timeout: Timeout for HTTP requests in seconds
            logger: Optional logger instance

        Raises:
            ValueError: If attestation_url is not https (unless loopback)
        """
        self._validate_url(attestation_url)
        self.attestation_url = attestation_url.rstrip('/')
        self.contracts = contracts
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)

        # Connection failures only; HTTP status handling belongs to get_attestation
        self.session = requests.Session()
        retries = Retry(
            total=retry_count,
            connect=retry_count,
            read=retry_count,
            status=0,
            backoff_factor=0.5,
            allowed_methods=["GET"],
            raise_on_status=False
        )
        self.session.mount("http://", HTTPAdapter(max_retries=retries))
        self.session.mount("https://", HTTPAdapter(max_retries=retries))

    @classmethod
    def testnet(cls, **kwargs) -> "CctpClient":
        return cls(attestation_url=ATTESTATION_TESTNET_URL, contracts=TESTNET_CONTRACTS, **kwargs)

    @classmethod
    def mainnet(cls, **kwargs) -> "CctpClient":
        return cls(attestation_url=ATTESTATION_MAINNET_URL, contracts=MAINNET_CONTRACTS, **kwargs)

    @staticmethod
    def _validate_url(url: str) -> None:
        parsed = urllib.parse.urlparse(url)
        host = parsed.hostname or ""
        is_local = host in ("localhost", "127.0.0.1", "::1")
        if parsed.scheme != "https" and not is_local:
            if os.environ.get("INTENT_BRIDGE_INSECURE_HTTP") != "1":
                raise ValueError(
                    f"attestation_url must use https:// (got: {parsed.scheme}://). "
                    "Set INTENT_BRIDGE_INSECURE_HTTP=1 to allow HTTP for development."
                )

    def build_deposit_for_burn(
        self,
        amount: int,
        destination_domain: int,
        destination_address: str
    ) -> DepositForBurnParams:
        """
        Build ``depositForBurn`` parameters for the source chain.

        Args:
            amount: USDC amount in smallest unit (6 decimals)
            destination_domain: CCTP domain id of the destination chain
            destination_address: Recipient on the destination chain

        Returns:
            Unsigned parameter record
        """
        return DepositForBurnParams(
            burn_contract=self.contracts.token_messenger,
            asset_contract=self.contracts.usdc,
            amount=amount,
            destination_domain=int(destination_domain),
            destination_address=destination_address,
        )

    def get_attestation(self, nonce: str) -> Optional[Attestation]:
        """
        Look up the attestation for a burn.

        Args:
            nonce: Burn message nonce

        Returns:
            The attestation if the service reports it complete, otherwise None

        Raises:
            BridgeRequestError: If the service cannot be reached
            BridgeApiError: For any non-success response other than 404
            BridgeParseError: If the response body is malformed
        """
        url = f"{self.attestation_url}/attestations/{nonce}"
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            self.logger.error(f"Attestation request failed: {e}")
            raise BridgeRequestError(f"Attestation request failed: {str(e)}") from e

        if response.status_code == 404:
            self.logger.debug(f"Attestation for nonce {nonce} not found yet")
            return None

        if not 200 <= response.status_code < 300:
            raise BridgeApiError(response.status_code, response.text)

        try:
            body = AttestationApiResponse.model_validate(response.json())
        except ValueError as e:
            raise BridgeParseError(f"Invalid attestation response: {str(e)}") from e

        if body.data is None or body.data.status != ATTESTATION_COMPLETE:
            return None

        return Attestation(
            message=body.data.message,
            attestation_signature=body.data.attestation_signature,
        )

    def poll_attestation(self, nonce: str, max_attempts: int, interval: float) -> Attestation:
        """
        Poll until the attestation is complete.

        The first lookup happens immediately; ``interval`` seconds pass before
        each later one, so the call blocks for at most about
        ``max_attempts * interval`` seconds.

        Args:
            nonce: Burn message nonce
            max_attempts: Number of lookups before giving up
            interval: Seconds to sleep between lookups

        Returns:
            The completed attestation

        Raises:
            AttestationTimeoutError: If no lookup returned a complete attestation
            BridgeError: Any lookup error is raised immediately
        """
        self.logger.info(f"Polling attestation for nonce: {nonce}")

        for attempt in range(max_attempts):
            if attempt > 0:
                time.sleep(interval)
            attestation = self.get_attestation(nonce)
            if attestation is not None:
                self.logger.info(f"Attestation ready after {attempt + 1} attempts")
                return attestation

        raise AttestationTimeoutError(nonce, max_attempts)

    def build_receive_message(
        self,
        attestation: Attestation,
        destination: DestinationChain
    ) -> ReceiveMessageParams:
        """
        Build ``receiveMessage`` parameters for the destination chain.

        On Sui the mint is a Move call, so no transmitter address is set.
        """
        transmitter = self.contracts.message_transmitter if destination.is_evm else ""
        return ReceiveMessageParams(
            message_transmitter=transmitter,
            message=attestation.message,
            attestation_signature=attestation.attestation_signature,
        )
