"""
oscript_price.runtime.storage_api — host key/value storage for the contract.

Design goals
------------
- Deterministic: pure functions over (key, value) with no wall-clock or I/O
  beyond the chosen backend.
- Simple default: in-process memory backend for local runs & tests.
- Pluggable: a tiny backend interface so the host can swap in a real state DB.
- Safe: strict byte-length caps read from oscript_price.config.

Backends
--------
- StorageBackend (Protocol): get / set / delete / exists over bytes.
- MemoryBackend: dict guarded by an RLock.
- FileBackend: a canonical-CBOR map on disk, rewritten atomically on every
  mutation (used by the CLI so state survives between invocations).

Typed access
------------
- namespace_key(name) -> bytes: length-prefixed key for one storage slot.
- Singleton: load / may_load / save / update for a single value stored at a
  namespaced key.
- ReadonlySingleton: load / may_load only.
"""

from __future__ import annotations

import os
import tempfile
import threading
from pathlib import Path
from typing import Callable, Dict, Generic, Optional, Protocol, TypeVar, Union, runtime_checkable

from ..config import load_config
from ..errors import NotFound, SerializationError, StorageError
from .codec import from_binary, to_binary

T = TypeVar("T")


# ---------------------------- Backend API ---------------------------- #


@runtime_checkable
class StorageBackend(Protocol):
    """Minimal backend interface for contract storage."""

    def get(self, key: bytes) -> Optional[bytes]: ...
    def set(self, key: bytes, value: bytes) -> None: ...
    def delete(self, key: bytes) -> None: ...
    def exists(self, key: bytes) -> bool: ...


def _check_key(key: bytes) -> bytes:
    if not isinstance(key, (bytes, bytearray)):
        raise StorageError("storage key must be bytes")
    if len(key) == 0:
        raise StorageError("storage key must be non-empty")
    max_len = load_config().max_storage_key_bytes
    if len(key) > max_len:
        raise StorageError(f"storage key too long (>{max_len} bytes)", context={"len": len(key)})
    return bytes(key)


def _check_value(value: bytes) -> bytes:
    if not isinstance(value, (bytes, bytearray)):
        raise StorageError("storage value must be bytes")
    max_len = load_config().max_storage_value_bytes
    if len(value) > max_len:
        raise StorageError(f"storage value too large (>{max_len} bytes)", context={"len": len(value)})
    return bytes(value)


class MemoryBackend:
    """Thread-safe in-memory backend for local runs and tests."""

    def __init__(self) -> None:
        self._store: Dict[bytes, bytes] = {}
        self._lock = threading.RLock()

    def get(self, key: bytes) -> Optional[bytes]:
        key = _check_key(key)
        with self._lock:
            return self._store.get(key)

    def set(self, key: bytes, value: bytes) -> None:
        key = _check_key(key)
        value = _check_value(value)
        with self._lock:
            self._store[key] = value

    def delete(self, key: bytes) -> None:
        key = _check_key(key)
        with self._lock:
            self._store.pop(key, None)

    def exists(self, key: bytes) -> bool:
        key = _check_key(key)
        with self._lock:
            return key in self._store

    def snapshot(self) -> Dict[bytes, bytes]:
        """Copy of the raw key/value map (tests compare before/after bytes)."""
        with self._lock:
            return dict(self._store)


class FileBackend(MemoryBackend):
    """
    MemoryBackend persisted to a single file.

    The file holds a canonical-CBOR map {key: value}. Every mutation rewrites
    it through a temp file + os.replace, so a crash never leaves a torn file.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        super().__init__()
        self.path = Path(path).expanduser()
        if self.path.exists():
            self._store.update(self._read())

    def _read(self) -> Dict[bytes, bytes]:
        try:
            raw = self.path.read_bytes()
        except OSError as e:
            raise StorageError(f"cannot read state file: {e}", context={"path": str(self.path)}) from e
        if not raw:
            return {}
        try:
            data = from_binary(raw)
        except SerializationError as e:
            raise StorageError(f"corrupt state file: {e.message}", context={"path": str(self.path)}) from e
        if not isinstance(data, dict):
            raise StorageError("corrupt state file: expected a map", context={"path": str(self.path)})
        return {bytes(k): bytes(v) for k, v in data.items()}

    def _flush(self) -> None:
        payload = to_binary(self._store)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".state-", dir=str(self.path.parent))
        except OSError as e:
            raise StorageError(f"cannot write state file: {e}", context={"path": str(self.path)}) from e
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, self.path)
        except OSError as e:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StorageError(f"cannot write state file: {e}", context={"path": str(self.path)}) from e

    def _flush_or_restore(self, key: bytes, prior: Optional[bytes]) -> None:
        try:
            self._flush()
        except StorageError:
            # Memory must keep matching the file that is still on disk.
            if prior is None:
                self._store.pop(key, None)
            else:
                self._store[key] = prior
            raise

    def set(self, key: bytes, value: bytes) -> None:
        key = _check_key(key)
        with self._lock:
            prior = self._store.get(key)
            super().set(key, value)
            self._flush_or_restore(key, prior)

    def delete(self, key: bytes) -> None:
        key = _check_key(key)
        with self._lock:
            prior = self._store.get(key)
            super().delete(key)
            self._flush_or_restore(key, prior)


# --------------------------- Typed access --------------------------- #


def namespace_key(name: Union[str, bytes]) -> bytes:
    """
    Length-prefixed storage key: 2-byte big-endian length || name.

        namespace_key(b"config") == b"\\x00\\x06config"
    """
    raw = name.encode("utf-8") if isinstance(name, str) else bytes(name)
    if len(raw) > 0xFFFF:
        raise StorageError("namespace too long")
    return len(raw).to_bytes(2, "big") + raw


class ReadonlySingleton(Generic[T]):
    """Read access to one value stored at a namespaced key."""

    def __init__(
        self,
        storage: StorageBackend,
        namespace: Union[str, bytes],
        *,
        decode: Callable[[bytes], T],
        kind: str = "value",
    ) -> None:
        self.storage = storage
        self.key = namespace_key(namespace)
        self._decode = decode
        self.kind = kind

    def may_load(self) -> Optional[T]:
        raw = self.storage.get(self.key)
        if raw is None:
            return None
        return self._decode(raw)

    def load(self) -> T:
        value = self.may_load()
        if value is None:
            raise NotFound(f"{self.kind} not found", context={"key": self.key.hex()})
        return value


class Singleton(ReadonlySingleton[T]):
    """Read/write access to one value stored at a namespaced key."""

    def __init__(
        self,
        storage: StorageBackend,
        namespace: Union[str, bytes],
        *,
        encode: Callable[[T], bytes],
        decode: Callable[[bytes], T],
        kind: str = "value",
    ) -> None:
        super().__init__(storage, namespace, decode=decode, kind=kind)
        self._encode = encode

    def save(self, value: T) -> None:
        self.storage.set(self.key, self._encode(value))

    def update(self, action: Callable[[T], T]) -> T:
        """
        Load, apply `action`, save and return the new value.

        If `action` raises, nothing is written and the error propagates.
        """
        current = self.load()
        new = action(current)
        self.save(new)
        return new


__all__ = [
    "StorageBackend",
    "MemoryBackend",
    "FileBackend",
    "namespace_key",
    "ReadonlySingleton",
    "Singleton",
]
