"""
Tests for the CCTP domain registry.
"""
import pytest

from intentbridge.bridge.domains import CctpDomain, domain_for_chain
from intentbridge.models import EvmChain


def test_domain_ids():
    assert CctpDomain.ETHEREUM == 0
    assert CctpDomain.AVALANCHE == 1
    assert CctpDomain.OPTIMISM == 2
    assert CctpDomain.ARBITRUM == 3
    assert CctpDomain.BASE == 5
    assert CctpDomain.SUI == 10


@pytest.mark.parametrize("chain,domain", [
    (EvmChain.ETHEREUM, CctpDomain.ETHEREUM),
    (EvmChain.SEPOLIA, CctpDomain.ETHEREUM),
    (EvmChain.BASE, CctpDomain.BASE),
    (EvmChain.BASE_SEPOLIA, CctpDomain.BASE),
    (EvmChain.ARBITRUM, CctpDomain.ARBITRUM),
    (EvmChain.OPTIMISM, CctpDomain.OPTIMISM),
])
def test_domain_for_chain(chain, domain):
    assert domain_for_chain(chain) is domain


def test_every_chain_has_a_domain():
    for chain in EvmChain:
        assert isinstance(domain_for_chain(chain), CctpDomain)
