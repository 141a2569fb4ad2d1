from __future__ import annotations

from dataclasses import dataclass, field

from .address_api import AddressApi, default_api
from .storage_api import MemoryBackend, StorageBackend


@dataclass
class Deps:
    """Host collaborators handed to every entry point."""

    storage: StorageBackend = field(default_factory=MemoryBackend)
    api: AddressApi = field(default_factory=default_api)


__all__ = ["Deps"]
