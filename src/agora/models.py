from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from .errors import DecodingError
from .utils import format_ether, is_zero_address

PRODUCT_FIELDS = (
    "id",
    "name",
    "description",
    "category",
    "price",
    "seller",
    "buyer",
    "timestamp",
    "sold",
)


@dataclass(frozen=True)
class Product:
    """
    A marketplace listing as stored by the contract.

    Only ever built from decoded ``getProduct`` output.

    Attributes:
        price: Listing price in wei
        seller: Checksummed seller address
        buyer: Checksummed buyer address (zero address while unsold)
        timestamp: Listing time as a unix timestamp (block time)
    """
    id: int
    name: str
    description: str
    category: str
    price: int
    seller: str
    buyer: str
    timestamp: int
    sold: bool

    @classmethod
    def from_values(cls, values: Mapping[str, Any]) -> "Product":
        missing = [name for name in PRODUCT_FIELDS if name not in values]
        if missing:
            raise DecodingError(
                f"Product record missing fields: {', '.join(missing)}",
                function="getProduct",
                stage="decode",
            )
        product = cls(**{name: values[name] for name in PRODUCT_FIELDS})
        if product.sold and is_zero_address(product.buyer):
            raise DecodingError(
                f"Product {product.id} is marked sold but has no buyer",
                function="getProduct",
                stage="decode",
            )
        return product

    @property
    def price_ether(self) -> str:
        return format_ether(self.price)

    @property
    def listed_at(self) -> Optional[datetime]:
        """Listing time in UTC, or None when outside the platform time range."""
        try:
            return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PendingTransaction:
    """A broadcast transaction with no finality guarantee."""
    tx_hash: str
    sender: str
    to: str
    function: str
    nonce: int

    def __str__(self) -> str:
        return self.tx_hash


__all__ = [
    "PRODUCT_FIELDS",
    "PendingTransaction",
    "Product",
]
