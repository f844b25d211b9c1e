"""
Configuration for the intentbridge agent.

Network presets ship with the package in ``networks.json``; deployment
specifics (hook address, endpoint overrides, polling knobs) come from the
environment. No private keys are ever configured.
"""
import importlib.resources
import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .bridge.types import CctpContracts
from .exceptions import ConfigError
from .models import EvmChain

logger = logging.getLogger(__name__)

DEFAULT_NETWORK = "base-sepolia"


class NetworkConfig:
    """Access to the packaged network presets."""

    _networks_cache: Optional[Dict[str, Dict[str, Any]]] = None

    @classmethod
    def load_networks(cls) -> Dict[str, Dict[str, Any]]:
        """Load ``networks.json`` once per process."""
        if cls._networks_cache is None:
            resource = importlib.resources.files("intentbridge").joinpath("networks.json")
            with resource.open("r", encoding="utf-8") as f:
                cls._networks_cache = json.load(f)
        return cls._networks_cache

    @classmethod
    def get_network(cls, name: str) -> Dict[str, Any]:
        """
        Get one network preset.

        Raises:
            ConfigError: If the network is unknown
        """
        networks = cls.load_networks()
        if name not in networks:
            available = ", ".join(sorted(networks))
            raise ConfigError(f"Unknown network '{name}'. Available networks: {available}")
        return networks[name]

    @classmethod
    def get_contracts(cls, name: str) -> CctpContracts:
        network = cls.get_network(name)
        return CctpContracts(
            token_messenger=network["tokenMessenger"],
            usdc=network["usdc"],
            message_transmitter=network["messageTransmitter"],
        )


def _env_number(env: Mapping[str, str], key: str, default: float, cast=float):
    raw = env.get(key)
    if raw is None or raw == "":
        return cast(default)
    try:
        value = cast(raw)
    except ValueError:
        raise ConfigError(f"{key} must be a number, got {raw!r}")
    if value < 0:
        raise ConfigError(f"{key} must not be negative, got {raw!r}")
    return value


@dataclass(frozen=True)
class AgentConfig:
    """Settings for the listener, bridge client and orchestrator."""
    network: str
    evm_chain: EvmChain
    rpc_url: str
    hook_address: str
    attestation_url: str
    contracts: CctpContracts
    poll_interval: float = 5.0
    attestation_attempts: int = 60
    attestation_interval: float = 5.0
    nonce_timeout: float = 600.0
    channel_capacity: int = 100
    workers: int = 8

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "AgentConfig":
        """
        Load configuration from environment variables.

        Variables:
            HOOK_ADDRESS (required), INTENT_BRIDGE_NETWORK, EVM_RPC_URL,
            CCTP_API_URL, INTENT_BRIDGE_POLL_INTERVAL,
            INTENT_BRIDGE_ATTESTATION_ATTEMPTS, INTENT_BRIDGE_ATTESTATION_INTERVAL,
            INTENT_BRIDGE_NONCE_TIMEOUT, INTENT_BRIDGE_CHANNEL_CAPACITY,
            INTENT_BRIDGE_WORKERS

        Raises:
            ConfigError: If HOOK_ADDRESS is missing or a value is invalid
        """
        env = os.environ if env is None else env

        hook_address = env.get("HOOK_ADDRESS")
        if not hook_address:
            raise ConfigError("Missing environment variable: HOOK_ADDRESS")

        network_name = env.get("INTENT_BRIDGE_NETWORK", DEFAULT_NETWORK)
        network = NetworkConfig.get_network(network_name)

        config = cls(
            network=network_name,
            evm_chain=EvmChain(network["evmChain"]),
            rpc_url=env.get("EVM_RPC_URL") or network["rpc"],
            hook_address=hook_address,
            attestation_url=env.get("CCTP_API_URL") or network["attestationUrl"],
            contracts=NetworkConfig.get_contracts(network_name),
            poll_interval=_env_number(env, "INTENT_BRIDGE_POLL_INTERVAL", 5.0),
            attestation_attempts=_env_number(env, "INTENT_BRIDGE_ATTESTATION_ATTEMPTS", 60, int),
            attestation_interval=_env_number(env, "INTENT_BRIDGE_ATTESTATION_INTERVAL", 5.0),
            nonce_timeout=_env_number(env, "INTENT_BRIDGE_NONCE_TIMEOUT", 600.0),
            channel_capacity=_env_number(env, "INTENT_BRIDGE_CHANNEL_CAPACITY", 100, int),
            workers=_env_number(env, "INTENT_BRIDGE_WORKERS", 8, int),
        )
        if config.channel_capacity < 1:
            raise ConfigError("INTENT_BRIDGE_CHANNEL_CAPACITY must be at least 1")
        if config.workers < 1:
            raise ConfigError("INTENT_BRIDGE_WORKERS must be at least 1")
        logger.debug(f"Loaded config for network {network_name} (chain_id={config.evm_chain.chain_id})")
        return config
