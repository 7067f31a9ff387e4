"""
Error taxonomy for the Agora marketplace client.

Every failure raised by the client derives from MarketplaceError and
records which contract function and which stage (encode, sign, broadcast,
decode, ...) it came from.  The CLI maps each class to an exit code.
"""

from __future__ import annotations

from typing import Any, Optional


class MarketplaceError(RuntimeError):
    exit_code: int = 1

    def __init__(
        self,
        message: str,
        *,
        function: Optional[str] = None,
        stage: Optional[str] = None,
    ) -> None:
        self.message = message
        self.function = function
        self.stage = stage
        context = "/".join(part for part in (function, stage) if part)
        super().__init__(f"[{context}] {message}" if context else message)


class ConfigurationError(MarketplaceError):
    exit_code = 2


class ChainConnectionError(ConfigurationError):
    """RPC endpoint URL is malformed or unusable."""


class InvalidKeyError(ConfigurationError):
    """Private key is not 32 bytes of hex."""


class InvalidAddressError(ConfigurationError):
    """Address is not a valid 20-byte account address."""


class TransportError(MarketplaceError):
    exit_code = 3


class EncodingError(MarketplaceError):
    exit_code = 4


class DecodingError(MarketplaceError):
    exit_code = 5


class SubmissionError(MarketplaceError):
    exit_code = 6


class ExecutionError(MarketplaceError):
    exit_code = 7


class RpcError(MarketplaceError):
    """JSON-RPC error object returned by the node."""

    def __init__(
        self,
        method: str,
        code: Optional[int],
        rpc_message: str,
        data: Any = None,
    ) -> None:
        self.method = method
        self.code = code
        self.rpc_message = rpc_message
        self.data = data
        super().__init__(f"RPC error {code} from {method}: {rpc_message}")


__all__ = [
    "ChainConnectionError",
    "ConfigurationError",
    "DecodingError",
    "EncodingError",
    "ExecutionError",
    "InvalidAddressError",
    "InvalidKeyError",
    "MarketplaceError",
    "RpcError",
    "SubmissionError",
    "TransportError",
]
