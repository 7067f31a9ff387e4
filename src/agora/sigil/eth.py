"""
ECDSA / secp256k1 signing identity for the marketplace client.

A SigningIdentity is parsed once from a raw hex private key and used to
sign every outgoing transaction.  The key itself never appears in logs or
reprs; only a redacted form does.

Keys are read from the PRIVATE_KEY environment variable (or a .env file).
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_keys.exceptions import ValidationError

from ..config import load_env_file
from ..errors import ConfigurationError, InvalidKeyError, SubmissionError
from ..utils import redact_secret

_HEX_KEY = re.compile(r"^[0-9a-fA-F]{64}$")


@dataclass(frozen=True)
class SigningIdentity:
    """
    Signing key plus its derived address.

    Use SigningIdentity.from_key() to construct.
    """
    address: str
    _account: LocalAccount = field(repr=False, compare=False)

    @classmethod
    def from_key(cls, private_key: str) -> "SigningIdentity":
        """
        Parse a hex private key (with or without 0x prefix).

        Raises:
            InvalidKeyError: On malformed hex or a key that is not 32 bytes
        """
        if not isinstance(private_key, str):
            raise InvalidKeyError("Private key must be a hex string", stage="identity")
        body = private_key.strip()
        if body[:2].lower() == "0x":
            body = body[2:]
        if not _HEX_KEY.match(body):
            raise InvalidKeyError(
                f"Private key must be 32 bytes of hex, got {len(body)} characters",
                stage="identity",
            )
        try:
            account = Account.from_key("0x" + body)
        except (ValueError, ValidationError) as exc:
            raise InvalidKeyError(f"Invalid secp256k1 key: {exc}", stage="identity") from exc
        return cls(address=account.address, _account=account)

    def redacted(self) -> str:
        return redact_secret("0x" + bytes(self._account.key).hex(), keep=6)

    def sign_transaction(self, tx: dict[str, Any]) -> str:
        """
        Sign a transaction dict.

        Returns:
            0x-prefixed hex raw transaction

        Raises:
            SubmissionError: If eth-account rejects the transaction fields
        """
        try:
            signed = self._account.sign_transaction(tx)
        except (TypeError, ValueError) as exc:
            raise SubmissionError(f"Cannot sign transaction: {exc}", stage="sign") from exc
        raw = signed.raw_transaction.hex()
        return raw if raw.startswith("0x") else "0x" + raw


def load_private_key(env_path: Optional[Path] = None) -> str:
    """
    Load the private key from the environment or a .env file.

    Args:
        env_path: Path to a .env file (default: nearest .env from cwd)

    Returns:
        0x-prefixed hex private key

    Raises:
        ConfigurationError: If PRIVATE_KEY is not set
    """
    load_env_file(env_path)

    private_key = os.environ.get("PRIVATE_KEY", "").strip()
    if not private_key:
        raise ConfigurationError("PRIVATE_KEY not found in environment or .env", stage="config")

    # Ensure 0x prefix
    if not private_key.startswith("0x"):
        private_key = "0x" + private_key

    return private_key
