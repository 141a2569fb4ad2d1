"""
oscript_price.runtime.address_api — address canonicalization service.

The contract never compares human-readable addresses. It asks the host to map
them to a canonical byte form first, so that two textual spellings of the
same account ("0xABCD..." and "0xabcd...") compare equal.

Implementations
---------------
- HexAddressApi: "0x"-prefixed (or bare) hex of a fixed byte length,
  case-insensitive. Canonical form is the raw bytes.
- MockApi: test double for readable names such as "creator". Canonical form
  is the lowercase UTF-8 name right-padded with zero bytes to a fixed length.

`default_api()` picks one according to OSCRIPT_PRICE_ADDRESS_FORMAT.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..config import load_config
from ..errors import InvalidAddress
from .context import ContextError, to_bytes, to_hex


@runtime_checkable
class AddressApi(Protocol):
    def canonical_address(self, human: str) -> bytes: ...
    def human_address(self, canonical: bytes) -> str: ...


class HexAddressApi:
    """Hex addresses of exactly `length` bytes."""

    def __init__(self, length: int = 20) -> None:
        if length <= 0:
            raise ValueError("address length must be positive")
        self.length = length

    def canonical_address(self, human: str) -> bytes:
        if not isinstance(human, str) or not human.strip():
            raise InvalidAddress("address must be a non-empty string")
        try:
            raw = to_bytes(human)
        except ContextError as e:
            raise InvalidAddress(str(e), context={"address": human}) from e
        if len(raw) != self.length:
            raise InvalidAddress(
                f"address must be {self.length} bytes, got {len(raw)}",
                context={"address": human},
            )
        return raw

    def human_address(self, canonical: bytes) -> str:
        if len(canonical) != self.length:
            raise InvalidAddress(f"canonical address must be {self.length} bytes, got {len(canonical)}")
        return to_hex(canonical)


class MockApi:
    """
    Readable test addresses.

    Names must be 3..canonical_length characters; case and surrounding
    whitespace are ignored.
    """

    MIN_LENGTH = 3

    def __init__(self, canonical_length: int = 24) -> None:
        self.canonical_length = canonical_length

    def canonical_address(self, human: str) -> bytes:
        if not isinstance(human, str):
            raise InvalidAddress("address must be a string")
        name = human.strip().lower()
        if len(name) < self.MIN_LENGTH:
            raise InvalidAddress("address too short", context={"address": human})
        raw = name.encode("utf-8")
        if len(raw) > self.canonical_length:
            raise InvalidAddress("address too long", context={"address": human})
        return raw.ljust(self.canonical_length, b"\x00")

    def human_address(self, canonical: bytes) -> str:
        if len(canonical) != self.canonical_length:
            raise InvalidAddress("wrong canonical length")
        trimmed = bytes(canonical).rstrip(b"\x00")
        try:
            return trimmed.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidAddress("canonical address is not UTF-8") from e


def default_api() -> AddressApi:
    cfg = load_config()
    if cfg.address_format == "mock":
        return MockApi()
    return HexAddressApi(cfg.address_bytes)


__all__ = ["AddressApi", "HexAddressApi", "MockApi", "default_api"]
