"""
CCTP domain registry.

Domain ids are CCTP's own chain identifiers and differ from EVM chain ids.
"""
from enum import IntEnum
from typing import Dict

from ..models import EvmChain


class CctpDomain(IntEnum):
    """CCTP domain id per chain family."""
    ETHEREUM = 0
    AVALANCHE = 1
    OPTIMISM = 2
    ARBITRUM = 3
    BASE = 5
    SUI = 10


_CHAIN_DOMAINS: Dict[EvmChain, CctpDomain] = {
    EvmChain.ETHEREUM: CctpDomain.ETHEREUM,
    EvmChain.SEPOLIA: CctpDomain.ETHEREUM,
    EvmChain.OPTIMISM: CctpDomain.OPTIMISM,
    EvmChain.ARBITRUM: CctpDomain.ARBITRUM,
    EvmChain.BASE: CctpDomain.BASE,
    EvmChain.BASE_SEPOLIA: CctpDomain.BASE,
}


def domain_for_chain(chain: EvmChain) -> CctpDomain:
    """Return the CCTP domain of an EVM chain. Testnets share their mainnet's domain."""
    return _CHAIN_DOMAINS[chain]
