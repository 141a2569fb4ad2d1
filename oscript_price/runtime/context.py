"""
oscript_price.runtime.context — Env/MessageInfo passed to contract entry points

These lightweight environments are injected by the host so the contract can
read block and caller metadata in a *deterministic* way. They contain only
pure data (ints/strings/bytes) and perform strict validation.

Design notes
------------
- `MessageInfo.sender` is the human-readable address as submitted by the host;
  the contract canonicalizes it through an AddressApi before comparing.
- Hex strings (with or without "0x") are accepted by helpers and normalized to
  bytes.
- All numeric fields are validated to be non-negative.

This module intentionally does not expose wall-clock time; `BlockInfo.time`
is the consensus timestamp provided by the host.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Tuple, Union


# ----------------------------- helpers ----------------------------- #

class ContextError(Exception):
    """Validation or coercion failure for Env/MessageInfo."""


def _strip_0x(s: str) -> str:
    return s[2:] if s.startswith(("0x", "0X")) else s


def to_bytes(value: Union[bytes, bytearray, memoryview, str]) -> bytes:
    """
    Coerce `value` to bytes.
    - If str, interpret as hex (with or without '0x'); odd-length hex is rejected.
    - If a bytes-like object, copy to immutable bytes.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        h = _strip_0x(value.strip())
        if len(h) % 2 != 0:
            raise ContextError(f"hex string must have even length, got {len(h)}")
        try:
            return bytes.fromhex(h)
        except ValueError as e:
            raise ContextError(f"invalid hex string: {value!r}") from e
    raise ContextError(f"cannot convert type {type(value).__name__} to bytes")


def to_hex(b: Union[bytes, bytearray, memoryview]) -> str:
    """Encode bytes as 0x-prefixed lowercase hex."""
    return "0x" + bytes(b).hex()


def _require_non_negative_int(name: str, v: Any) -> int:
    if isinstance(v, bool) or not isinstance(v, int):
        raise ContextError(f"{name} must be int, got {type(v).__name__}")
    if v < 0:
        raise ContextError(f"{name} must be non-negative, got {v}")
    return v


def _require_str(name: str, v: Any) -> str:
    if not isinstance(v, str):
        raise ContextError(f"{name} must be str, got {type(v).__name__}")
    return v


# ----------------------------- models ------------------------------ #

@dataclass(frozen=True)
class BlockInfo:
    """
    Fields
    ------
    height:    Block height (0-based).
    time:      Consensus timestamp (seconds since epoch).
    chain_id:  Chain identifier string.
    """
    height: int
    time: int
    chain_id: str

    def __post_init__(self) -> None:
        _require_non_negative_int("height", self.height)
        _require_non_negative_int("time", self.time)
        _require_str("chain_id", self.chain_id)


@dataclass(frozen=True)
class ContractInfo:
    address: str

    def __post_init__(self) -> None:
        _require_str("address", self.address)


@dataclass(frozen=True)
class Env:
    block: BlockInfo
    contract: ContractInfo


@dataclass(frozen=True)
class Coin:
    denom: str
    amount: int

    def __post_init__(self) -> None:
        _require_str("denom", self.denom)
        _require_non_negative_int("amount", self.amount)


def coins(amount: int, denom: str) -> Tuple[Coin, ...]:
    """Single-denomination fund list, e.g. coins(1000, "earth")."""
    return (Coin(denom=denom, amount=amount),)


@dataclass(frozen=True)
class MessageInfo:
    """
    Fields
    ------
    sender:     Human-readable address of the caller.
    sent_funds: Funds attached to the call (carried, never inspected).
    """
    sender: str
    sent_funds: Tuple[Coin, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        _require_str("sender", self.sender)
        object.__setattr__(self, "sent_funds", tuple(self.sent_funds))


__all__ = [
    "ContextError",
    "to_bytes",
    "to_hex",
    "BlockInfo",
    "ContractInfo",
    "Env",
    "Coin",
    "coins",
    "MessageInfo",
]
