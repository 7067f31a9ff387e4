"""
Marketplace contract binding.

MARKETPLACE_ABI is the bit-exact boundary with the deployed contract: a
mismatch surfaces as encode/decode failures at runtime.
"""

from __future__ import annotations

from typing import Optional

import httpx
import structlog

from ..config import Settings
from ..errors import ConfigurationError
from ..models import PRODUCT_FIELDS, PendingTransaction, Product
from ..sigil.eth import SigningIdentity
from .abi import InterfaceDescription, load_interface
from .contract import ContractBinding
from .rpc import ChainConnection
from .tx import SignedClient

logger = structlog.get_logger(__name__)

CREATE_PRODUCT = "createProduct"
GET_PRODUCT = "getProduct"

MARKETPLACE_ABI = """[{
    "constant": false,
    "inputs": [{"name": "_name", "type": "string"}, {"name": "_price", "type": "uint256"}],
    "name": "createProduct",
    "outputs": [],
    "stateMutability": "nonpayable",
    "type": "function"
}, {
    "constant": true,
    "inputs": [{"name": "_id", "type": "uint256"}],
    "name": "getProduct",
    "outputs": [
        {"name": "id", "type": "uint256"},
        {"name": "name", "type": "string"},
        {"name": "description", "type": "string"},
        {"name": "category", "type": "string"},
        {"name": "price", "type": "uint256"},
        {"name": "seller", "type": "address"},
        {"name": "buyer", "type": "address"},
        {"name": "timestamp", "type": "uint256"},
        {"name": "sold", "type": "bool"}
    ],
    "stateMutability": "view",
    "type": "function"
}]"""

# Call-site shapes checked once, when a binding is built
_EXPECTED_SHAPES = {
    CREATE_PRODUCT: (("string", "uint256"), None),
    GET_PRODUCT: (
        ("uint256",),
        ("uint256", "string", "string", "string", "uint256", "address", "address", "uint256", "bool"),
    ),
}


def marketplace_interface() -> InterfaceDescription:
    return InterfaceDescription.from_abi(MARKETPLACE_ABI)


class Marketplace(ContractBinding):
    """Binding for the marketplace contract's listing functions."""

    def __init__(
        self,
        address: str,
        client: SignedClient,
        interface: Optional[InterfaceDescription] = None,
    ) -> None:
        if interface is None:
            interface = marketplace_interface()
        _check_shapes(interface)
        super().__init__(address, interface, client)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "Marketplace":
        """
        Wire connection, identity and client from settings.

        Everything is validated locally; no network call is made.
        """
        connection = ChainConnection(settings.rpc_url, timeout=settings.timeout, transport=transport)
        identity = SigningIdentity.from_key(settings.private_key)
        logger.debug("identity_loaded", address=identity.address, key=identity.redacted())
        client = SignedClient(
            connection,
            identity,
            chain_id=settings.chain_id,
            gas_limit=settings.gas_limit,
        )
        interface = load_interface(settings.abi_path) if settings.abi_path else None
        return cls(settings.contract_address, client, interface=interface)

    def create_product(self, name: str, price: int) -> PendingTransaction:
        """
        List a product.

        Args:
            name: Product name (emptiness is left to the contract)
            price: Price in wei

        Returns:
            PendingTransaction for the createProduct call
        """
        return self.transact(CREATE_PRODUCT, name, price)

    def get_product(self, product_id: int) -> Product:
        """
        Read a product record.

        Raises:
            DecodingError: If the returned data does not match the nine-field
                record, or violates the sold/buyer invariant
        """
        return Product.from_values(self.read_named(GET_PRODUCT, product_id))


def _check_shapes(interface: InterfaceDescription) -> None:
    for name, (inputs, outputs) in _EXPECTED_SHAPES.items():
        func = interface.function(name)
        if tuple(func.input_types) != inputs:
            raise ConfigurationError(
                f"expected inputs ({','.join(inputs)}), interface declares {func.signature}",
                function=name,
                stage="interface",
            )
        if outputs is not None and tuple(func.output_types) != outputs:
            raise ConfigurationError(
                f"expected {len(outputs)} outputs ({','.join(outputs)}), "
                f"interface declares ({','.join(func.output_types)})",
                function=name,
                stage="interface",
            )
    names = [p.name for p in interface.function(GET_PRODUCT).outputs]
    missing = [field for field in PRODUCT_FIELDS if field not in names]
    if missing:
        raise ConfigurationError(
            f"outputs missing product fields: {', '.join(missing)}",
            function=GET_PRODUCT,
            stage="interface",
        )
