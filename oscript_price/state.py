"""
oscript_price.state — the single persisted ConfigRecord.

Storage layout
--------------
One key, the length-prefixed namespace ``config`` (b"\\x00\\x06config"),
holding the canonical-CBOR map::

    {"ai_data_source": str, "testcase": str, "owner": bytes}

Operations
----------
- initialize(deps, data_source, test_case, caller) -> ConfigRecord
- get_record(storage) -> ConfigRecord                 (NotFound if unset)
- update_field(deps, caller, mutation) -> ConfigRecord

update_field runs in two phases: the caller is canonicalized and compared to
the stored owner first, and only then is the pure `mutation` applied and its
result saved. A rejected caller or a failing mutation writes nothing.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Dict

from .config import load_config
from .errors import AlreadyInitialized, OwnerImmutable, SerializationError, Unauthorized
from .logging import get_logger
from .runtime.codec import from_binary, to_binary
from .runtime.context import to_hex
from .runtime.deps import Deps
from .runtime.storage_api import ReadonlySingleton, Singleton, StorageBackend

log = get_logger(__name__)

CONFIG_NAMESPACE = b"config"


@dataclass(frozen=True)
class ConfigRecord:
    data_source: str
    test_case: str
    owner: bytes

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ai_data_source": self.data_source,
            "testcase": self.test_case,
            "owner": self.owner,
        }

    @classmethod
    def from_dict(cls, d: Any) -> "ConfigRecord":
        if not isinstance(d, dict):
            raise SerializationError("config record must be a map")
        try:
            data_source = d["ai_data_source"]
            test_case = d["testcase"]
            owner = d["owner"]
        except KeyError as e:
            raise SerializationError(f"config record missing field {e.args[0]!r}") from e
        if not isinstance(data_source, str) or not isinstance(test_case, str):
            raise SerializationError("config record fields must be strings")
        if not isinstance(owner, (bytes, bytearray)):
            raise SerializationError("config record owner must be bytes")
        return cls(data_source=data_source, test_case=test_case, owner=bytes(owner))


def _encode(record: ConfigRecord) -> bytes:
    return to_binary(record)


def _decode(raw: bytes) -> ConfigRecord:
    return ConfigRecord.from_dict(from_binary(raw))


def config(storage: StorageBackend) -> Singleton[ConfigRecord]:
    return Singleton(storage, CONFIG_NAMESPACE, encode=_encode, decode=_decode, kind="config record")


def config_read(storage: StorageBackend) -> ReadonlySingleton[ConfigRecord]:
    return ReadonlySingleton(storage, CONFIG_NAMESPACE, decode=_decode, kind="config record")


# ------------------------------ operations ------------------------------ #


def initialize(deps: Deps, data_source: str, test_case: str, caller: str) -> ConfigRecord:
    """
    Persist a fresh record owned by `caller`.

    A second call overwrites the existing record unless strict_init is
    enabled, in which case it raises AlreadyInitialized.
    """
    owner = deps.api.canonical_address(caller)
    store = config(deps.storage)
    if load_config().strict_init and store.may_load() is not None:
        raise AlreadyInitialized()
    record = ConfigRecord(data_source=data_source, test_case=test_case, owner=owner)
    store.save(record)
    log.info("config_initialized", owner=to_hex(owner), ai_data_source=data_source, testcase=test_case)
    return record


def get_record(storage: StorageBackend) -> ConfigRecord:
    return config_read(storage).load()


def update_field(
    deps: Deps,
    caller: str,
    mutation: Callable[[ConfigRecord], ConfigRecord],
) -> ConfigRecord:
    current = config_read(deps.storage).load()

    sender = deps.api.canonical_address(caller)
    if sender != current.owner:
        log.warning("unauthorized_update", sender=to_hex(sender), owner=to_hex(current.owner))
        raise Unauthorized(context={"sender": caller})

    def _transition(record: ConfigRecord) -> ConfigRecord:
        updated = mutation(record)
        if updated.owner != record.owner:
            raise OwnerImmutable()
        return updated

    return config(deps.storage).update(_transition)


def set_data_source(name: str) -> Callable[[ConfigRecord], ConfigRecord]:
    return lambda record: replace(record, data_source=name)


def set_test_case(name: str) -> Callable[[ConfigRecord], ConfigRecord]:
    return lambda record: replace(record, test_case=name)


__all__ = [
    "CONFIG_NAMESPACE",
    "ConfigRecord",
    "config",
    "config_read",
    "initialize",
    "get_record",
    "update_field",
    "set_data_source",
    "set_test_case",
]
