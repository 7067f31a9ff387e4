"""
Signed Client - read contract state and submit signed transactions.

Composes a ChainConnection with a SigningIdentity.  All gas is paid by the
identity's EOA.  Every send is a single attempt: a node rejection is
surfaced as SubmissionError naming the stage, never retried.
"""

from __future__ import annotations

from typing import Any, Optional

import structlog

from ..errors import DecodingError, ExecutionError, RpcError, SubmissionError
from ..models import PendingTransaction
from ..sigil.eth import SigningIdentity
from ..utils import to_checksum_address
from .rpc import ChainConnection

logger = structlog.get_logger(__name__)

# Headroom over eth_estimateGas, in percent
DEFAULT_GAS_HEADROOM = 120


class SignedClient:
    """
    Read/write handle bound to one signing identity.

    Args:
        connection: Chain connection used for every request
        identity: Signing identity (sender of all transactions)
        chain_id: Chain ID for EIP-155 signing (default: queried per send)
        gas_limit: Fixed gas limit (default: estimate per send)
        gas_headroom: Percentage applied to gas estimates
    """

    def __init__(
        self,
        connection: ChainConnection,
        identity: SigningIdentity,
        chain_id: Optional[int] = None,
        gas_limit: Optional[int] = None,
        gas_headroom: int = DEFAULT_GAS_HEADROOM,
    ) -> None:
        self.connection = connection
        self.identity = identity
        self.chain_id = chain_id
        self.gas_limit = gas_limit
        self.gas_headroom = gas_headroom

    @property
    def address(self) -> str:
        return self.identity.address

    def call(self, to: str, data: bytes, function: Optional[str] = None) -> bytes:
        """
        Read-only contract call (eth_call).

        Returns:
            Raw return data

        Raises:
            ExecutionError: If the node rejects or the call reverts
            TransportError: On connectivity failure
        """
        try:
            result = self.connection.eth_call(to, "0x" + data.hex(), sender=self.address)
        except RpcError as exc:
            raise ExecutionError(exc.rpc_message, function=function, stage="call") from exc
        return _hex_to_bytes(result, function)

    def send(
        self,
        to: str,
        data: bytes,
        value: int = 0,
        function: Optional[str] = None,
    ) -> PendingTransaction:
        """
        Build, sign and broadcast a transaction.

        Args:
            to: Contract address
            data: Encoded calldata
            value: ETH value in wei
            function: Function name, for error context and logs

        Returns:
            PendingTransaction holding the broadcast hash

        Raises:
            SubmissionError: If the node rejects the transaction
            TransportError: On connectivity failure
        """
        tx = self.build_transaction(to, data, value=value, function=function)
        try:
            raw_tx = self.identity.sign_transaction(tx)
        except SubmissionError as exc:
            raise SubmissionError(exc.message, function=function, stage="sign") from exc

        try:
            tx_hash = self.connection.send_raw_transaction(raw_tx)
        except RpcError as exc:
            raise SubmissionError(exc.rpc_message, function=function, stage="broadcast") from exc

        logger.info(
            "transaction_submitted",
            function=function,
            tx_hash=tx_hash,
            nonce=tx["nonce"],
            to=tx["to"],
        )
        return PendingTransaction(
            tx_hash=tx_hash,
            sender=self.address,
            to=tx["to"],
            function=function or "",
            nonce=tx["nonce"],
        )

    def build_transaction(
        self,
        to: str,
        data: bytes,
        value: int = 0,
        function: Optional[str] = None,
    ) -> dict[str, Any]:
        """
        Build an unsigned legacy transaction.

        Nonce, gas price, gas limit and chain ID are filled from the node
        unless configured.
        """
        target = to_checksum_address(to)
        calldata = "0x" + data.hex()

        nonce = self._query("nonce", function, self.connection.get_nonce, self.address)
        gas_price = self._query("gas_price", function, self.connection.gas_price)

        gas = self.gas_limit
        if gas is None:
            estimate = self._query(
                "estimate_gas",
                function,
                self.connection.estimate_gas,
                {"from": self.address, "to": target, "data": calldata, "value": hex(value)},
            )
            gas = estimate * self.gas_headroom // 100

        chain_id = self.chain_id
        if chain_id is None:
            chain_id = self._query("chain_id", function, self.connection.chain_id)

        return {
            "to": target,
            "data": calldata,
            "value": value,
            "nonce": nonce,
            "gas": gas,
            "gasPrice": gas_price,
            "chainId": chain_id,
        }

    def balance(self) -> int:
        """Balance of the signing address in wei."""
        return self.connection.get_balance(self.address)

    def _query(self, stage: str, function: Optional[str], fetch, *args):
        try:
            return fetch(*args)
        except RpcError as exc:
            raise SubmissionError(exc.rpc_message, function=function, stage=stage) from exc


def _hex_to_bytes(data: str, function: Optional[str]) -> bytes:
    try:
        return bytes.fromhex(data[2:] if data.startswith("0x") else data)
    except ValueError as exc:
        raise DecodingError(f"Return data is not hex: {data!r}", function=function, stage="decode") from exc
