"""
Value records exchanged with the CCTP bridge.

None of these have a lifecycle of their own: they are built per call and
handed to the frontend or relayer for signing and submission.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class DestinationChain(str, Enum):
    """Where ``receiveMessage`` is submitted."""
    BASE = "base"
    BASE_SEPOLIA = "base_sepolia"
    SUI = "sui"

    @property
    def is_evm(self) -> bool:
        return self is not DestinationChain.SUI


class CctpContracts(BaseModel):
    """CCTP contract addresses on the EVM side of a deployment."""
    model_config = ConfigDict(frozen=True)

    token_messenger: str
    usdc: str
    message_transmitter: str


class DepositForBurnParams(BaseModel):
    """Parameters for ``TokenMessenger.depositForBurn``, signed by the user's wallet."""
    model_config = ConfigDict(frozen=True)

    burn_contract: str
    asset_contract: str
    amount: int
    destination_domain: int
    destination_address: str


class Attestation(BaseModel):
    """Completed attestation for a burn message."""
    model_config = ConfigDict(frozen=True)

    message: str
    attestation_signature: str


class ReceiveMessageParams(BaseModel):
    """Parameters for ``MessageTransmitter.receiveMessage``; anyone may submit them."""
    model_config = ConfigDict(frozen=True)

    message_transmitter: str
    message: str
    attestation_signature: str


class AttestationData(BaseModel):
    message: str
    attestation_signature: str
    status: str


class AttestationApiResponse(BaseModel):
    data: Optional[AttestationData] = None
