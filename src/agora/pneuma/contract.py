"""
Contract Binding - generic typed proxy for one deployed contract.

The binding knows nothing about individual functions: every call is
encoded and decoded through the InterfaceDescription, so supporting a new
contract function only means extending the description.
"""

from __future__ import annotations

from typing import Any

import structlog

from ..errors import ConfigurationError, InvalidAddressError
from ..models import PendingTransaction
from ..utils import is_checksum_valid, is_hex_address, to_checksum_address
from .abi import FunctionDescription, InterfaceDescription
from .tx import SignedClient

logger = structlog.get_logger(__name__)


def validate_address(address: str, label: str = "contract address") -> str:
    """
    Validate a 20-byte hex address and return it checksummed.

    Raises:
        InvalidAddressError: On wrong length, non-hex input or a bad EIP-55 checksum
    """
    if not is_hex_address(address):
        raise InvalidAddressError(
            f"Invalid {label}: expected 0x followed by 40 hex characters, got {address!r}",
            stage="config",
        )
    if not is_checksum_valid(address):
        raise InvalidAddressError(f"Invalid {label}: EIP-55 checksum mismatch for {address}", stage="config")
    return to_checksum_address(address)


class ContractBinding:
    """
    Typed proxy for one contract instance.

    Args:
        address: Deployed contract address (validated, no network call)
        interface: Interface description of the contract
        client: Signed client used for reads and transactions
    """

    def __init__(
        self,
        address: str,
        interface: InterfaceDescription,
        client: SignedClient,
    ) -> None:
        self.address = validate_address(address)
        self.interface = interface
        self.client = client

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.address!r})"

    def read(self, function_name: str, *args: Any) -> tuple:
        """
        Call a read-only function and decode its return values.

        Returns:
            Decoded values in declared order

        Raises:
            ConfigurationError: If the function is not read-only
            EncodingError / DecodingError / ExecutionError / TransportError
        """
        func = self._function(function_name, read_only=True)
        calldata = func.encode_input(args)
        logger.debug("contract_read", function=func.name, contract=self.address)
        data = self.client.call(self.address, calldata, function=func.name)
        return func.decode_output(data)

    def read_named(self, function_name: str, *args: Any) -> dict[str, Any]:
        """Like read(), keyed by the declared output names."""
        func = self._function(function_name, read_only=True)
        calldata = func.encode_input(args)
        data = self.client.call(self.address, calldata, function=func.name)
        return func.decode_output_named(data)

    def transact(self, function_name: str, *args: Any, value: int = 0) -> PendingTransaction:
        """
        Submit a state-changing call.

        Returns:
            PendingTransaction (not awaited)

        Raises:
            ConfigurationError: If the function is read-only
            EncodingError / SubmissionError / TransportError
        """
        func = self._function(function_name, read_only=False)
        calldata = func.encode_input(args)
        logger.debug("contract_transact", function=func.name, contract=self.address)
        return self.client.send(self.address, calldata, value=value, function=func.name)

    def _function(self, name: str, read_only: bool) -> FunctionDescription:
        func = self.interface.function(name)
        if func.is_read_only != read_only:
            expected = "read" if func.is_read_only else "transact"
            raise ConfigurationError(
                f"{func.signature} is {func.mutability}-only; use {expected}()",
                function=name,
                stage="dispatch",
            )
        return func
