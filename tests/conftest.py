"""Shared fixtures: a fake JSON-RPC node served through httpx.MockTransport."""

from __future__ import annotations

import json
from typing import Any, Callable, Union

import httpx
import pytest
from eth_abi import encode

from agora.pneuma.marketplace import Marketplace
from agora.pneuma.rpc import ChainConnection
from agora.pneuma.tx import SignedClient
from agora.sigil.eth import SigningIdentity
from agora.utils import ZERO_ADDRESS, to_checksum_address

RPC_URL = "https://sepolia.infura.io/v3/0123456789abcdef0123456789abcdef"
TEST_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
CONTRACT = "0x5fbdb2315678afecb367f032d93f642f64180aa3"
SELLER = "0x" + "ab" * 20
BUYER = "0x" + "cd" * 20
TX_HASH = "0x" + "11" * 32
CHAIN_ID = 11155111
LISTED_AT = 1_700_000_000

PRODUCT_TYPES = [
    "uint256", "string", "string", "string", "uint256", "address", "address", "uint256", "bool",
]


def encode_product(
    product_id: int = 1,
    name: str = "Old Phone",
    description: str = "",
    category: str = "",
    price: int = 10**18,
    seller: str = SELLER,
    buyer: str = ZERO_ADDRESS,
    timestamp: int = LISTED_AT,
    sold: bool = False,
) -> str:
    """Hex return data of getProduct for the given record."""
    data = encode(
        PRODUCT_TYPES,
        [
            product_id,
            name,
            description,
            category,
            price,
            to_checksum_address(seller),
            to_checksum_address(buyer),
            timestamp,
            sold,
        ],
    )
    return "0x" + data.hex()


Result = Union[Any, Callable[[list], Any]]


class FakeNode:
    """Answers JSON-RPC requests from canned results and records every call."""

    def __init__(self) -> None:
        self.requests: list[dict[str, Any]] = []
        self.results: dict[str, Result] = {
            "eth_chainId": hex(CHAIN_ID),
            "eth_getTransactionCount": "0x7",
            "eth_gasPrice": hex(10**9),
            "eth_estimateGas": hex(100_000),
            "eth_sendRawTransaction": TX_HASH,
            "eth_getBalance": hex(2 * 10**18),
            "eth_call": encode_product(),
        }
        self.errors: dict[str, dict[str, Any]] = {}

    def handler(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.requests.append(payload)
        method = payload["method"]
        body: dict[str, Any] = {"jsonrpc": "2.0", "id": payload["id"]}
        if method in self.errors:
            body["error"] = self.errors[method]
        else:
            result = self.results.get(method)
            body["result"] = result(payload["params"]) if callable(result) else result
        return httpx.Response(200, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def params(self, method: str) -> list[list]:
        return [r["params"] for r in self.requests if r["method"] == method]

    @property
    def methods(self) -> list[str]:
        return [r["method"] for r in self.requests]


@pytest.fixture()
def node() -> FakeNode:
    return FakeNode()


@pytest.fixture()
def connection(node: FakeNode) -> ChainConnection:
    return ChainConnection(RPC_URL, transport=node.transport)


@pytest.fixture()
def identity() -> SigningIdentity:
    return SigningIdentity.from_key(TEST_KEY)


@pytest.fixture()
def client(connection: ChainConnection, identity: SigningIdentity) -> SignedClient:
    return SignedClient(connection, identity)


@pytest.fixture()
def marketplace(client: SignedClient) -> Marketplace:
    return Marketplace(CONTRACT, client)
