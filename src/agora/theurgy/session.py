"""Per-invocation CLI state: option overrides resolved into a Marketplace."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import httpx

from ..config import Settings
from ..pneuma.marketplace import Marketplace


@dataclass
class Session:
    env_path: Optional[Path] = None
    rpc_url: Optional[str] = None
    contract_address: Optional[str] = None
    abi_path: Optional[Path] = None
    transport: Optional[httpx.BaseTransport] = None

    def settings(self) -> Settings:
        return Settings.from_env(
            env_path=self.env_path,
            rpc_url=self.rpc_url,
            contract_address=self.contract_address,
            abi_path=self.abi_path,
        )

    def marketplace(self) -> Marketplace:
        return Marketplace.from_settings(self.settings(), transport=self.transport)
