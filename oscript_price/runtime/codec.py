"""
codec.py — binary encoding for query responses and persisted state.

Everything that leaves the contract as bytes goes through `to_binary`, and
everything read back goes through `from_binary`. Both use canonical CBOR
(`cbor2` with canonical=True) so equal values always produce equal bytes:
map keys are sorted and integers use their shortest form.

Supported values are the plain CBOR data model: None, bool, int, str, bytes,
lists/tuples and str-keyed dicts. Dataclasses with a `to_dict()` method are
encoded through that method.
"""
from __future__ import annotations

from typing import Any

import cbor2

from ..errors import SerializationError


def _plain(obj: Any) -> Any:
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return obj


def to_binary(obj: Any) -> bytes:
    """Serialize `obj` to canonical CBOR bytes."""
    try:
        return cbor2.dumps(_plain(obj), canonical=True)
    except (cbor2.CBOREncodeError, TypeError, ValueError) as e:
        raise SerializationError(
            f"cannot encode {type(obj).__name__}: {e}",
            context={"type": type(obj).__name__},
        ) from e


def from_binary(data: bytes) -> Any:
    """Deserialize canonical CBOR bytes produced by `to_binary`."""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise SerializationError(f"expected bytes, got {type(data).__name__}")
    if len(data) == 0:
        raise SerializationError("cannot decode empty payload")
    try:
        return cbor2.loads(bytes(data))
    except (cbor2.CBORDecodeError, ValueError) as e:
        raise SerializationError(f"cannot decode payload: {e}") from e


__all__ = ["to_binary", "from_binary"]
