"""
CCTP bridge support: domain registry, parameter records and the attestation client.
"""
from .client import (
    CctpClient, to_mint_recipient,
    ATTESTATION_TESTNET_URL, ATTESTATION_MAINNET_URL, TESTNET_CONTRACTS, MAINNET_CONTRACTS,
)
from .domains import CctpDomain, domain_for_chain
from .types import (
    Attestation, CctpContracts, DepositForBurnParams, DestinationChain, ReceiveMessageParams,
)

__all__ = [
    'CctpClient',
    'to_mint_recipient',
    'CctpDomain',
    'domain_for_chain',
    'Attestation',
    'CctpContracts',
    'DepositForBurnParams',
    'DestinationChain',
    'ReceiveMessageParams',
    'ATTESTATION_TESTNET_URL',
    'ATTESTATION_MAINNET_URL',
    'TESTNET_CONTRACTS',
    'MAINNET_CONTRACTS',
]
