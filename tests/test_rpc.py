"""Tests for the JSON-RPC chain connection."""

from __future__ import annotations

import httpx
import pytest

from agora.errors import ChainConnectionError, ConfigurationError, RpcError, TransportError
from agora.pneuma.rpc import ChainConnection

from conftest import CHAIN_ID, RPC_URL, FakeNode


class TestConstruction:
    """URL validation happens locally, before any request."""

    @pytest.mark.parametrize(
        "url",
        ["", "   ", "not a url", "ftp://node.example", "mainnet.infura.io/v3/key", "https://"],
    )
    def test_malformed_urls(self, url: str) -> None:
        with pytest.raises(ChainConnectionError):
            ChainConnection(url)

    def test_connection_error_is_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError):
            ChainConnection("ws://node.example")

    def test_construction_makes_no_request(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": "0x1"})

        ChainConnection(RPC_URL, transport=httpx.MockTransport(handler))
        assert seen == []

    def test_repr_hides_project_key(self) -> None:
        connection = ChainConnection(RPC_URL)
        assert "0123456789abcdef0123456789abcdef" not in repr(connection)
        assert "0123456789abcdef0123456789abcdef" not in connection.endpoint


class TestRequests:
    """JSON-RPC request/response handling."""

    def test_payload_shape(self, connection: ChainConnection, node: FakeNode) -> None:
        assert connection.chain_id() == CHAIN_ID
        request = node.requests[0]
        assert request["jsonrpc"] == "2.0"
        assert request["method"] == "eth_chainId"
        assert request["params"] == []

    def test_quantities(self, connection: ChainConnection, node: FakeNode) -> None:
        assert connection.get_nonce("0x" + "ab" * 20) == 7
        assert node.params("eth_getTransactionCount")[0][1] == "pending"
        assert connection.gas_price() == 10**9
        assert connection.get_balance("0x" + "ab" * 20) == 2 * 10**18

    def test_eth_call_params(self, connection: ChainConnection, node: FakeNode) -> None:
        connection.eth_call("0x" + "cd" * 20, "0x1234", sender="0x" + "ab" * 20)
        call, block = node.params("eth_call")[0]
        assert call == {"to": "0x" + "cd" * 20, "data": "0x1234", "from": "0x" + "ab" * 20}
        assert block == "latest"

    def test_rpc_error(self, connection: ChainConnection, node: FakeNode) -> None:
        node.errors["eth_sendRawTransaction"] = {"code": -32000, "message": "nonce too low"}
        with pytest.raises(RpcError) as exc_info:
            connection.send_raw_transaction("0xdead")
        assert exc_info.value.code == -32000
        assert exc_info.value.rpc_message == "nonce too low"
        assert exc_info.value.method == "eth_sendRawTransaction"

    def test_bad_quantity(self, connection: ChainConnection, node: FakeNode) -> None:
        node.results["eth_gasPrice"] = "not-hex"
        with pytest.raises(TransportError, match="hex quantity"):
            connection.gas_price()


class TestTransportFailures:
    """Connectivity problems are TransportError, distinct from rejections."""

    def test_http_error_status(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(502, text="Bad Gateway"))
        connection = ChainConnection(RPC_URL, transport=transport)
        with pytest.raises(TransportError, match="HTTP 502"):
            connection.chain_id()

    def test_connect_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        connection = ChainConnection(RPC_URL, transport=httpx.MockTransport(handler))
        with pytest.raises(TransportError) as exc_info:
            connection.chain_id()
        assert exc_info.value.function == "eth_chainId"
        assert exc_info.value.stage == "transport"

    def test_non_json_body(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))
        connection = ChainConnection(RPC_URL, transport=transport)
        with pytest.raises(TransportError, match="not JSON"):
            connection.chain_id()

    def test_missing_result(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"jsonrpc": "2.0", "id": 1}))
        connection = ChainConnection(RPC_URL, transport=transport)
        with pytest.raises(TransportError, match="neither result nor error"):
            connection.chain_id()

    def test_transport_error_is_not_rpc_error(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(500))
        connection = ChainConnection(RPC_URL, transport=transport)
        with pytest.raises(TransportError) as exc_info:
            connection.chain_id()
        assert not isinstance(exc_info.value, RpcError)
