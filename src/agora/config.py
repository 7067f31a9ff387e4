"""
Runtime configuration for the marketplace client.

Values resolve in order: explicit arguments (CLI options), process
environment, then a .env file loaded with python-dotenv.  Settings are
built once at startup and passed explicitly to constructors.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from dotenv import find_dotenv, load_dotenv

from .errors import ConfigurationError

RPC_URL_VARS = ("INFURA_URL", "MARKETPLACE_RPC_URL")
PRIVATE_KEY_VAR = "PRIVATE_KEY"
CONTRACT_ADDRESS_VAR = "MARKETPLACE_ADDRESS"
CHAIN_ID_VAR = "CHAIN_ID"
GAS_LIMIT_VAR = "GAS_LIMIT"
TIMEOUT_VAR = "RPC_TIMEOUT"
ABI_PATH_VAR = "MARKETPLACE_ABI"
LOG_LEVEL_VAR = "AGORA_LOG_LEVEL"

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class Settings:
    """
    Process-lifetime configuration.

    Attributes:
        rpc_url: JSON-RPC endpoint
        private_key: 0x-prefixed hex key (excluded from repr)
        contract_address: Deployed marketplace address
        chain_id: Fixed chain ID (default: queried from the node)
        gas_limit: Fixed gas limit (default: estimated)
        abi_path: Alternative interface file (default: built-in ABI)
    """
    rpc_url: str
    private_key: str = field(repr=False)
    contract_address: str
    chain_id: Optional[int] = None
    gas_limit: Optional[int] = None
    timeout: float = DEFAULT_TIMEOUT
    abi_path: Optional[Path] = None

    @classmethod
    def from_env(
        cls,
        env_path: Optional[Path] = None,
        rpc_url: Optional[str] = None,
        private_key: Optional[str] = None,
        contract_address: Optional[str] = None,
        chain_id: Optional[int] = None,
        gas_limit: Optional[int] = None,
        abi_path: Optional[Union[str, Path]] = None,
    ) -> "Settings":
        """
        Resolve settings from arguments, environment and .env.

        Raises:
            ConfigurationError: Naming the missing or malformed variable
        """
        load_env_file(env_path)

        rpc_url = rpc_url or _first_env(RPC_URL_VARS)
        if not rpc_url:
            raise ConfigurationError(f"{' or '.join(RPC_URL_VARS)} not found", stage="config")

        private_key = private_key or os.environ.get(PRIVATE_KEY_VAR, "").strip()
        if not private_key:
            raise ConfigurationError(f"{PRIVATE_KEY_VAR} not found", stage="config")

        contract_address = contract_address or os.environ.get(CONTRACT_ADDRESS_VAR, "").strip()
        if not contract_address:
            raise ConfigurationError(f"{CONTRACT_ADDRESS_VAR} not found", stage="config")

        abi_path = abi_path or os.environ.get(ABI_PATH_VAR) or None

        return cls(
            rpc_url=rpc_url,
            private_key=private_key,
            contract_address=contract_address,
            chain_id=chain_id if chain_id is not None else _int_env(CHAIN_ID_VAR),
            gas_limit=gas_limit if gas_limit is not None else _int_env(GAS_LIMIT_VAR),
            timeout=_float_env(TIMEOUT_VAR, DEFAULT_TIMEOUT),
            abi_path=Path(abi_path) if abi_path else None,
        )


def load_env_file(env_path: Optional[Path] = None) -> Optional[Path]:
    """Load a .env file without overriding the process environment."""
    dotenv_path = env_path or find_dotenv(usecwd=True)
    if dotenv_path and Path(dotenv_path).exists():
        load_dotenv(dotenv_path, override=False)
        return Path(dotenv_path)
    return None


def _first_env(names: tuple[str, ...]) -> Optional[str]:
    for name in names:
        value = os.environ.get(name, "").strip()
        if value:
            return value
    return None


def _int_env(name: str) -> Optional[int]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return None
    try:
        value = int(raw, 0)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}", stage="config") from None
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}", stage="config")
    return value


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}", stage="config") from None
