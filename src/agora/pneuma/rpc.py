"""
JSON-RPC connection to an Ethereum node.

Lightweight alternative to web3.py: uses httpx for HTTP.  A connection is
only a validated endpoint; nothing touches the network until the first
request.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
import structlog

from ..errors import ChainConnectionError, RpcError, TransportError
from ..utils import redact_url

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = 30.0


class ChainConnection:
    """
    Request-capable handle for one RPC endpoint.

    Args:
        rpc_url: http(s) endpoint URL
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport (tests use httpx.MockTransport)

    Raises:
        ChainConnectionError: If the URL is malformed
    """

    def __init__(
        self,
        rpc_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.rpc_url = _validate_url(rpc_url)
        self.timeout = timeout
        self._transport = transport

    def __repr__(self) -> str:
        return f"ChainConnection({redact_url(self.rpc_url)!r})"

    @property
    def endpoint(self) -> str:
        """Endpoint URL safe for logs."""
        return redact_url(self.rpc_url)

    def request(self, method: str, params: list) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_call")
            params: RPC parameters

        Returns:
            Result field from the RPC response

        Raises:
            TransportError: Network failure, HTTP error status or a body
                that is not a JSON-RPC response
            RpcError: The node answered with an error object
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": 1,
        }
        logger.debug("rpc_request", method=method, endpoint=self.endpoint)

        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(self.rpc_url, json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as exc:
            raise TransportError(
                f"HTTP {exc.response.status_code} from {self.endpoint}",
                function=method,
                stage="transport",
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(
                f"Cannot reach {self.endpoint}: {exc}",
                function=method,
                stage="transport",
            ) from exc
        except ValueError as exc:
            raise TransportError(
                f"Response from {self.endpoint} is not JSON",
                function=method,
                stage="transport",
            ) from exc

        if not isinstance(data, dict):
            raise TransportError(
                f"Malformed JSON-RPC response: {data!r}",
                function=method,
                stage="transport",
            )

        if "error" in data:
            error = data["error"] or {}
            if not isinstance(error, dict):
                error = {"message": str(error)}
            raise RpcError(
                method,
                error.get("code"),
                error.get("message", "unknown error"),
                error.get("data"),
            )

        if "result" not in data:
            raise TransportError(
                "JSON-RPC response has neither result nor error",
                function=method,
                stage="transport",
            )
        return data["result"]

    def chain_id(self) -> int:
        return _to_int(self.request("eth_chainId", []), "eth_chainId")

    def get_nonce(self, address: str, block: str = "pending") -> int:
        """Transaction count for an address (pending by default)."""
        return _to_int(
            self.request("eth_getTransactionCount", [address, block]),
            "eth_getTransactionCount",
        )

    def gas_price(self) -> int:
        return _to_int(self.request("eth_gasPrice", []), "eth_gasPrice")

    def get_balance(self, address: str) -> int:
        """Balance in wei."""
        return _to_int(self.request("eth_getBalance", [address, "latest"]), "eth_getBalance")

    def estimate_gas(self, tx: dict[str, Any]) -> int:
        return _to_int(self.request("eth_estimateGas", [tx]), "eth_estimateGas")

    def eth_call(self, to: str, data: str, sender: Optional[str] = None) -> str:
        """
        Execute a read-only call against the latest block.

        Returns:
            0x-prefixed hex return data
        """
        call: dict[str, Any] = {"to": to, "data": data}
        if sender:
            call["from"] = sender
        result = self.request("eth_call", [call, "latest"])
        if not isinstance(result, str):
            raise TransportError(
                f"eth_call returned {result!r}, expected hex data",
                function="eth_call",
                stage="transport",
            )
        return result

    def send_raw_transaction(self, raw_tx: str) -> str:
        """
        Broadcast a signed raw transaction.

        Returns:
            Transaction hash (0x-prefixed hex)
        """
        result = self.request("eth_sendRawTransaction", [raw_tx])
        if not isinstance(result, str):
            raise TransportError(
                f"eth_sendRawTransaction returned {result!r}, expected a hash",
                function="eth_sendRawTransaction",
                stage="transport",
            )
        return result


def _validate_url(rpc_url: str) -> str:
    if not isinstance(rpc_url, str) or not rpc_url.strip():
        raise ChainConnectionError("RPC URL is empty", stage="connect")
    try:
        parsed = httpx.URL(rpc_url.strip())
    except (httpx.InvalidURL, TypeError) as exc:
        raise ChainConnectionError(f"Malformed RPC URL: {exc}", stage="connect") from exc
    if parsed.scheme not in ("http", "https"):
        raise ChainConnectionError(
            f"RPC URL must use http or https, got {parsed.scheme or 'no scheme'!r}",
            stage="connect",
        )
    if not parsed.host:
        raise ChainConnectionError("RPC URL has no host", stage="connect")
    return str(parsed)


def _to_int(value: Any, method: str) -> int:
    try:
        return int(value, 16) if isinstance(value, str) else int(value)
    except (TypeError, ValueError) as exc:
        raise TransportError(
            f"Expected a hex quantity, got {value!r}",
            function=method,
            stage="transport",
        ) from exc
