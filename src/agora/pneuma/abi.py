"""
Interface Description - typed view of a contract ABI.

An InterfaceDescription is built once from a JSON ABI and drives every
encode/decode through the contract.  Each wire type is a variant
(AbiType subclass) that validates and normalizes Python values; eth-abi
does the byte-level layout.  Supporting a new Solidity type means
registering a new variant, not touching call sites.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Iterator, Optional, Sequence, Union

from eth_abi import decode as abi_decode
from eth_abi import encode as abi_encode
from eth_abi import exceptions as abi_exceptions

from ..errors import ConfigurationError, DecodingError, EncodingError
from ..utils import is_checksum_valid, is_hex_address, keccak256, to_checksum_address

WORD_SIZE = 32

CALL = "call"
SEND = "send"


# ---------------------------------------------------------------------------
# Wire type variants
# ---------------------------------------------------------------------------

class AbiType:
    """A Solidity wire type: validates values going out, normalizes values coming in."""

    name: str = ""

    def prepare(self, value: Any) -> Any:
        raise NotImplementedError

    def restore(self, value: Any) -> Any:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, AbiType) and other.name == self.name

    def __hash__(self) -> int:
        return hash(self.name)


class UintType(AbiType):
    def __init__(self, bits: int = 256) -> None:
        if bits % 8 or not 8 <= bits <= 256:
            raise ValueError(f"Invalid uint size: {bits}")
        self.bits = bits
        self.name = f"uint{bits}"

    @property
    def max_value(self) -> int:
        return 2**self.bits - 1

    def prepare(self, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"{self.name} expects an int, got {type(value).__name__}")
        if not 0 <= value <= self.max_value:
            raise ValueError(f"{value} does not fit in {self.name}")
        return value

    def restore(self, value: Any) -> int:
        return int(value)


class StringType(AbiType):
    name = "string"

    def prepare(self, value: Any) -> str:
        if not isinstance(value, str):
            raise TypeError(f"string expects str, got {type(value).__name__}")
        return value

    def restore(self, value: Any) -> str:
        return str(value)


class AddressType(AbiType):
    name = "address"

    def prepare(self, value: Any) -> str:
        if not is_hex_address(value):
            raise ValueError(f"Not a 20-byte hex address: {value!r}")
        if not is_checksum_valid(value):
            raise ValueError(f"Address fails EIP-55 checksum: {value}")
        return to_checksum_address(value)

    def restore(self, value: Any) -> str:
        if isinstance(value, (bytes, bytearray)):
            value = "0x" + bytes(value).hex()
        return to_checksum_address(value)


class BoolType(AbiType):
    name = "bool"

    def prepare(self, value: Any) -> bool:
        if not isinstance(value, bool):
            raise TypeError(f"bool expects True/False, got {type(value).__name__}")
        return value

    def restore(self, value: Any) -> bool:
        return bool(value)


_SIMPLE_TYPES: dict[str, Callable[[], AbiType]] = {
    "string": StringType,
    "address": AddressType,
    "bool": BoolType,
}

_SIZED_TYPES: dict[str, Callable[[int], AbiType]] = {
    "uint": UintType,
}

_SIZED = re.compile(r"^([a-z]+)(\d*)$")


def register_type(name: str, factory: Callable[..., AbiType], sized: bool = False) -> None:
    """Register a wire type variant (sized variants take a bit count)."""
    if sized:
        _SIZED_TYPES[name] = factory
    else:
        _SIMPLE_TYPES[name] = factory


def parse_type(type_name: str) -> AbiType:
    """
    Resolve a Solidity type name to its variant.

    Raises:
        ConfigurationError: If the type is not supported
    """
    if type_name in _SIMPLE_TYPES:
        return _SIMPLE_TYPES[type_name]()

    match = _SIZED.match(type_name)
    if match and match.group(1) in _SIZED_TYPES:
        bits = int(match.group(2)) if match.group(2) else 256
        try:
            return _SIZED_TYPES[match.group(1)](bits)
        except ValueError as exc:
            raise ConfigurationError(str(exc), stage="interface") from exc

    raise ConfigurationError(f"Unsupported ABI type: {type_name!r}", stage="interface")


# ---------------------------------------------------------------------------
# Functions and interfaces
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AbiParam:
    name: str
    type: AbiType
    position: int

    @property
    def label(self) -> str:
        return self.name or f"#{self.position}"


@dataclass(frozen=True)
class FunctionDescription:
    """
    One callable contract function.

    Attributes:
        name: Function name as declared in the contract
        inputs: Ordered typed parameters
        outputs: Ordered typed return fields
        mutability: CALL for view/pure functions, SEND otherwise
    """
    name: str
    inputs: tuple[AbiParam, ...]
    outputs: tuple[AbiParam, ...]
    mutability: str

    @classmethod
    def from_abi_entry(cls, entry: dict[str, Any]) -> "FunctionDescription":
        name = entry.get("name")
        if not name:
            raise ConfigurationError("ABI function entry has no name", stage="interface")

        state = entry.get("stateMutability")
        if state in ("view", "pure") or entry.get("constant") is True:
            mutability = CALL
        else:
            mutability = SEND

        return cls(
            name=name,
            inputs=_params(entry.get("inputs", []), name),
            outputs=_params(entry.get("outputs", []), name),
            mutability=mutability,
        )

    @property
    def input_types(self) -> list[str]:
        return [p.type.name for p in self.inputs]

    @property
    def output_types(self) -> list[str]:
        return [p.type.name for p in self.outputs]

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(self.input_types)})"

    @property
    def selector(self) -> bytes:
        return keccak256(self.signature.encode("utf-8"))[:4]

    @property
    def is_read_only(self) -> bool:
        return self.mutability == CALL

    def encode_input(self, args: Sequence[Any]) -> bytes:
        """
        ABI-encode a call: selector followed by the encoded arguments.

        Raises:
            EncodingError: On wrong arity or a value its type cannot hold
        """
        if len(args) != len(self.inputs):
            raise EncodingError(
                f"expected {len(self.inputs)} argument(s), got {len(args)}",
                function=self.name,
                stage="encode",
            )

        prepared = []
        for param, value in zip(self.inputs, args):
            try:
                prepared.append(param.type.prepare(value))
            except (TypeError, ValueError) as exc:
                raise EncodingError(
                    f"argument {param.label}: {exc}",
                    function=self.name,
                    stage="encode",
                ) from exc

        try:
            encoded = abi_encode(self.input_types, prepared) if prepared else b""
        except (abi_exceptions.EncodingError, TypeError, ValueError) as exc:
            raise EncodingError(str(exc), function=self.name, stage="encode") from exc

        return self.selector + encoded

    def decode_input(self, calldata: bytes) -> tuple:
        """Decode calldata produced by encode_input back into argument values."""
        if calldata[:4] != self.selector:
            raise DecodingError(
                f"selector 0x{calldata[:4].hex()} does not match {self.signature}",
                function=self.name,
                stage="decode",
            )
        return self._decode(self.inputs, calldata[4:])

    def decode_output(self, data: bytes) -> tuple:
        """
        Decode return data into values, in declared order.

        Raises:
            DecodingError: If length or layout does not match the output schema
        """
        if not self.outputs:
            return ()
        return self._decode(self.outputs, data)

    def decode_output_named(self, data: bytes) -> dict[str, Any]:
        values = self.decode_output(data)
        return {param.name or f"output_{param.position}": value
                for param, value in zip(self.outputs, values)}

    def _decode(self, params: tuple[AbiParam, ...], data: bytes) -> tuple:
        head_size = WORD_SIZE * len(params)
        if len(data) < head_size or len(data) % WORD_SIZE:
            raise DecodingError(
                f"{len(data)} byte(s) do not match a {len(params)}-field "
                f"({','.join(p.type.name for p in params)}) layout",
                function=self.name,
                stage="decode",
            )
        try:
            raw = abi_decode([p.type.name for p in params], data, strict=True)
            return tuple(p.type.restore(v) for p, v in zip(params, raw))
        except (abi_exceptions.DecodingError, UnicodeDecodeError, ValueError) as exc:
            raise DecodingError(str(exc), function=self.name, stage="decode") from exc


@dataclass(frozen=True)
class InterfaceDescription:
    """Immutable set of a contract's callable functions, keyed by name."""
    functions: tuple[FunctionDescription, ...]

    @classmethod
    def from_abi(cls, abi: Union[str, list[dict[str, Any]]]) -> "InterfaceDescription":
        """
        Build from a JSON ABI (string or parsed list).

        Non-function entries (events, constructor, errors) are skipped.
        Overloaded names are rejected; the binding dispatches by name.
        """
        if isinstance(abi, str):
            try:
                abi = json.loads(abi)
            except json.JSONDecodeError as exc:
                raise ConfigurationError(f"ABI is not valid JSON: {exc}", stage="interface") from exc
        if not isinstance(abi, list):
            raise ConfigurationError("ABI must be a JSON list", stage="interface")

        functions: list[FunctionDescription] = []
        seen: set[str] = set()
        for entry in abi:
            if not isinstance(entry, dict) or entry.get("type", "function") != "function":
                continue
            func = FunctionDescription.from_abi_entry(entry)
            if func.name in seen:
                raise ConfigurationError(
                    f"Overloaded function {func.name!r} is not supported",
                    stage="interface",
                )
            seen.add(func.name)
            functions.append(func)
        return cls(tuple(functions))

    def function(self, name: str) -> FunctionDescription:
        for func in self.functions:
            if func.name == name:
                return func
        raise ConfigurationError(f"Function {name} not found in ABI", function=name, stage="interface")

    def __contains__(self, name: object) -> bool:
        return any(func.name == name for func in self.functions)

    def __iter__(self) -> Iterator[FunctionDescription]:
        return iter(self.functions)

    def __len__(self) -> int:
        return len(self.functions)


def _params(raw: list[dict[str, Any]], function: str) -> tuple[AbiParam, ...]:
    params = []
    for position, item in enumerate(raw):
        type_name = item.get("type")
        if not type_name:
            raise ConfigurationError(
                f"parameter #{position} has no type", function=function, stage="interface"
            )
        params.append(AbiParam(item.get("name", ""), parse_type(type_name), position))
    return tuple(params)


@lru_cache(maxsize=16)
def load_interface(path: Union[str, Path]) -> InterfaceDescription:
    """
    Load an interface from a JSON file.

    Accepts a bare ABI list or a compiler artifact (Foundry/Hardhat) with
    an "abi" key.

    Raises:
        ConfigurationError: If the file is missing or not a usable ABI
    """
    abi_path = Path(path)
    if not abi_path.exists():
        raise ConfigurationError(f"ABI not found: {abi_path}", stage="interface")

    try:
        with abi_path.open("r", encoding="utf-8") as f:
            artifact = json.load(f)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"ABI file {abi_path} is not valid JSON: {exc}", stage="interface") from exc

    if isinstance(artifact, dict):
        artifact = artifact.get("abi")
    return InterfaceDescription.from_abi(artifact)


def describe(interface: InterfaceDescription) -> list[dict[str, Optional[str]]]:
    """Summary rows (signature, selector, mutability, returns) for display."""
    return [
        {
            "signature": func.signature,
            "selector": "0x" + func.selector.hex(),
            "mutability": func.mutability,
            "returns": f"({','.join(func.output_types)})" if func.outputs else None,
        }
        for func in interface
    ]
