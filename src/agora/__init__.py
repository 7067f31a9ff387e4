__all__ = [
    # Models
    "PendingTransaction",
    "Product",
    # Errors
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
    # Configuration
    "Settings",
    # Chain access
    "ChainConnection",
    "SignedClient",
    "SigningIdentity",
    # Interface and bindings
    "ContractBinding",
    "FunctionDescription",
    "InterfaceDescription",
    "MARKETPLACE_ABI",
    "Marketplace",
    "load_interface",
    # Flows
    "fetch_product",
    "submit_product",
    # Units
    "format_ether",
    "parse_ether",
]

from .config import Settings
from .errors import (
    ChainConnectionError,
    ConfigurationError,
    DecodingError,
    EncodingError,
    ExecutionError,
    InvalidAddressError,
    InvalidKeyError,
    MarketplaceError,
    RpcError,
    SubmissionError,
    TransportError,
)
from .models import PendingTransaction, Product
from .pneuma.abi import FunctionDescription, InterfaceDescription, load_interface
from .pneuma.contract import ContractBinding
from .pneuma.marketplace import MARKETPLACE_ABI, Marketplace
from .pneuma.rpc import ChainConnection
from .pneuma.tx import SignedClient
from .sigil.eth import SigningIdentity
from .theurgy.fetch import fetch_product
from .theurgy.submit import submit_product
from .utils import format_ether, parse_ether
