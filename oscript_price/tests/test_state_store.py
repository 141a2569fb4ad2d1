from __future__ import annotations

import os
from dataclasses import replace

import pytest

from oscript_price.errors import NotFound, OwnerImmutable, SerializationError, StorageError, Unauthorized
from oscript_price.runtime.codec import from_binary, to_binary
from oscript_price.runtime.storage_api import FileBackend, MemoryBackend, Singleton, namespace_key
from oscript_price.runtime.testing import mock_dependencies
from oscript_price.state import (
    ConfigRecord,
    config,
    config_read,
    get_record,
    initialize,
    set_data_source,
    update_field,
)


def _int_singleton(storage) -> Singleton[int]:
    return Singleton(
        storage,
        b"counter",
        encode=lambda v: v.to_bytes(8, "big"),
        decode=lambda b: int.from_bytes(b, "big"),
        kind="counter",
    )


def test_namespace_key_is_length_prefixed() -> None:
    assert namespace_key(b"config") == b"\x00\x06config"
    assert namespace_key("ab") == b"\x00\x02ab"


def test_singleton_load_save_update() -> None:
    s = _int_singleton(MemoryBackend())
    assert s.may_load() is None
    with pytest.raises(NotFound):
        s.load()

    s.save(41)
    assert s.load() == 41
    assert s.update(lambda v: v + 1) == 42
    assert s.load() == 42


def test_singleton_update_failure_writes_nothing() -> None:
    storage = MemoryBackend()
    s = _int_singleton(storage)
    s.save(7)
    before = storage.snapshot()

    def _boom(v: int) -> int:
        raise Unauthorized()

    with pytest.raises(Unauthorized):
        s.update(_boom)
    assert storage.snapshot() == before


def test_memory_backend_enforces_caps(monkeypatch) -> None:
    from oscript_price.config import load_config

    monkeypatch.setenv("OSCRIPT_PRICE_MAX_STORAGE_VAL_BYTES", "64")
    load_config.cache_clear()
    storage = MemoryBackend()

    with pytest.raises(StorageError):
        storage.set(b"k", b"x" * 65)
    with pytest.raises(StorageError):
        storage.set(b"", b"v")
    with pytest.raises(StorageError):
        storage.set(b"k" * 65, b"v")
    with pytest.raises(StorageError):
        storage.set("k", b"v")  # type: ignore[arg-type]

    storage.set(b"k", b"x" * 64)
    assert storage.exists(b"k")
    storage.delete(b"k")
    assert not storage.exists(b"k")


def test_record_layout_uses_wire_names() -> None:
    deps = mock_dependencies()
    initialize(deps, "datasource_eth", "testcase_price", "creator")

    raw = deps.storage.get(b"\x00\x06config")
    assert raw is not None
    assert from_binary(raw) == {
        "ai_data_source": "datasource_eth",
        "testcase": "testcase_price",
        "owner": deps.api.canonical_address("creator"),
    }


def test_config_read_matches_config() -> None:
    deps = mock_dependencies()
    record = initialize(deps, "ds", "tc", "creator")
    assert config_read(deps.storage).load() == record
    assert config(deps.storage).load() == record
    assert get_record(deps.storage) == record


def test_corrupt_record_is_a_serialization_error() -> None:
    deps = mock_dependencies()
    deps.storage.set(namespace_key(b"config"), to_binary({"testcase": "tc"}))
    with pytest.raises(SerializationError):
        get_record(deps.storage)


def test_mutation_changing_owner_is_rejected() -> None:
    deps = mock_dependencies()
    initialize(deps, "ds", "tc", "creator")
    before = deps.storage.snapshot()

    def _steal(record: ConfigRecord) -> ConfigRecord:
        return replace(record, owner=b"\x00" * 24)

    with pytest.raises(OwnerImmutable):
        update_field(deps, "creator", _steal)
    assert deps.storage.snapshot() == before


def test_mutation_not_run_for_non_owner() -> None:
    deps = mock_dependencies()
    initialize(deps, "ds", "tc", "creator")
    calls = []

    def _spy(record: ConfigRecord) -> ConfigRecord:
        calls.append(record)
        return record

    with pytest.raises(Unauthorized):
        update_field(deps, "intruder", _spy)
    assert calls == []


def test_update_field_returns_new_record() -> None:
    deps = mock_dependencies()
    initialize(deps, "ds", "tc", "creator")
    updated = update_field(deps, "creator", set_data_source("ds2"))
    assert updated.data_source == "ds2"
    assert get_record(deps.storage) == updated


def test_file_backend_persists_between_instances(tmp_path) -> None:
    path = tmp_path / "state" / "contract.cbor"
    first = FileBackend(path)
    first.set(b"a", b"1")
    first.set(b"b", b"2")
    first.delete(b"a")

    second = FileBackend(path)
    assert second.get(b"a") is None
    assert second.get(b"b") == b"2"
    assert not list(path.parent.glob(".state-*"))


def test_file_backend_rejects_corrupt_file(tmp_path) -> None:
    path = tmp_path / "contract.cbor"
    path.write_bytes(to_binary(["not", "a", "map"]))
    with pytest.raises(StorageError):
        FileBackend(path)


def test_file_backend_failed_flush_keeps_memory_in_sync(tmp_path, monkeypatch) -> None:
    path = tmp_path / "contract.cbor"
    backend = FileBackend(path)
    backend.set(b"a", b"1")
    on_disk = path.read_bytes()

    def _fail_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", _fail_replace)

    with pytest.raises(StorageError):
        backend.set(b"a", b"2")
    with pytest.raises(StorageError):
        backend.set(b"b", b"3")
    with pytest.raises(StorageError):
        backend.delete(b"a")

    assert backend.snapshot() == {b"a": b"1"}
    assert path.read_bytes() == on_disk
    assert not list(tmp_path.glob(".state-*"))
