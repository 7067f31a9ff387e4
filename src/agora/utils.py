from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation, localcontext
from typing import Union

import httpx
from eth_hash.auto import keccak

ETHER_DECIMALS = 18
UINT256_MAX = 2**256 - 1
ZERO_ADDRESS = "0x" + "00" * 20

# Enough digits for any uint256 amount plus 18 decimals
_DECIMAL_PRECISION = 100

_HEX_ADDRESS = re.compile(r"^0x[0-9a-fA-F]{40}$")


def keccak256(data: bytes) -> bytes:
    # Keccak-256, not NIST SHA3-256. Never use hashlib.sha3_256 here.
    return keccak(data)


def to_checksum_address(address: str) -> str:
    """Convert an address to EIP-55 checksummed format."""
    addr = address.lower().replace("0x", "")
    addr_hash = keccak256(addr.encode("utf-8")).hex()
    result = "0x"
    for i, c in enumerate(addr):
        if c in "abcdef":
            result += c.upper() if int(addr_hash[i], 16) >= 8 else c
        else:
            result += c
    return result


def is_hex_address(value: object) -> bool:
    return isinstance(value, str) and bool(_HEX_ADDRESS.match(value))


def is_checksum_valid(address: str) -> bool:
    """All-lower and all-upper addresses carry no checksum and pass."""
    body = address[2:]
    if body == body.lower() or body == body.upper():
        return True
    return to_checksum_address(address) == address


def is_zero_address(address: str) -> bool:
    return address.lower() == ZERO_ADDRESS


def parse_ether(amount: Union[str, int, Decimal]) -> int:
    """
    Convert an amount of native currency to wei.

    Args:
        amount: Ether amount, e.g. 1, "1", "0.25"

    Returns:
        Integer amount in wei

    Raises:
        ValueError: If the amount is negative, not a number, has more than
            18 decimal places or does not fit in uint256
    """
    if isinstance(amount, bool) or isinstance(amount, float):
        raise ValueError(f"Ether amount must be a decimal string or int, got {amount!r}")
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation:
        raise ValueError(f"Not a decimal amount: {amount!r}") from None

    if not value.is_finite():
        raise ValueError(f"Not a finite amount: {amount!r}")
    if value < 0:
        raise ValueError(f"Amount must not be negative: {amount!r}")

    # uint256 has 78 decimal digits
    if value and value.adjusted() + ETHER_DECIMALS > 77:
        raise ValueError(f"Amount does not fit in uint256: {amount!r}")

    try:
        with localcontext() as ctx:
            ctx.prec = _DECIMAL_PRECISION
            wei = value.scaleb(ETHER_DECIMALS)
            is_whole = wei == wei.to_integral_value()
    except ArithmeticError as exc:
        raise ValueError(f"Amount out of range: {amount!r}") from exc
    if not is_whole:
        raise ValueError(f"Amount has more than {ETHER_DECIMALS} decimal places: {amount!r}")
    wei_int = int(wei)
    if wei_int > UINT256_MAX:
        raise ValueError(f"Amount does not fit in uint256: {amount!r}")
    return wei_int


def format_ether(wei: int) -> str:
    with localcontext() as ctx:
        ctx.prec = _DECIMAL_PRECISION
        value = Decimal(wei).scaleb(-ETHER_DECIMALS).normalize()
    # normalize() yields exponent notation for round numbers ("1E+1")
    return format(value, "f")


def redact_secret(secret: str, keep: int = 4) -> str:
    if len(secret) <= keep * 2:
        return "*" * len(secret)
    return f"{secret[:keep]}...{secret[-keep:]}"


def redact_url(url: str) -> str:
    """Hide userinfo and path tokens (Infura-style project keys) in a URL."""
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError):
        return "<invalid url>"
    path = parsed.path
    if path and path != "/":
        head, _, tail = path.rpartition("/")
        path = f"{head}/{redact_secret(tail)}" if tail else path
    port = f":{parsed.port}" if parsed.port else ""
    return f"{parsed.scheme}://{parsed.host}{port}{path}"
